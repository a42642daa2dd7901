"""
导出流水线阶段定义

职责：
1. 定义单页导出的各阶段名称
2. 提供阶段到进度消息的映射
3. 进度百分比计算（四舍五入，.5 进位）

测试要点：
- test_progress_percent: 进度计算
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum


class StageEnum(str, Enum):
    """单页导出阶段"""
    SHOW_PAGE = "SHOW_PAGE"
    WAIT_SETTLE = "WAIT_SETTLE"
    CAPTURE = "CAPTURE"
    WRITE_PAGE = "WRITE_PAGE"
    STAMP_LINKS = "STAMP_LINKS"
    FINALIZE = "FINALIZE"


class ExportState(str, Enum):
    """导出器状态"""
    IDLE = "idle"
    RUNNING = "running"


@dataclass
class PipelineStage:
    """流水线阶段"""
    name: str
    message: str


# 单页导出各阶段（按执行顺序）
PAGE_STAGES: list[PipelineStage] = [
    PipelineStage(StageEnum.SHOW_PAGE.value, "切换渲染页"),
    PipelineStage(StageEnum.WAIT_SETTLE.value, "等待画面稳定"),
    PipelineStage(StageEnum.CAPTURE.value, "栅格化"),
    PipelineStage(StageEnum.WRITE_PAGE.value, "写入页面"),
    PipelineStage(StageEnum.STAMP_LINKS.value, "写入链接"),
]

FINALIZE_STAGE = PipelineStage(StageEnum.FINALIZE.value, "保存文档")


def progress_percent(done: int, total: int) -> int:
    """已完成页数 → 百分比（与 Math.round 一致，.5 向上取整）"""
    if total <= 0:
        return 100
    return int(math.floor(100 * done / total + 0.5))
