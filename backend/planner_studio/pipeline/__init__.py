"""
导出流水线 - 链接规划与导出编排

子模块：
- stages: 单页导出阶段定义与进度计算
- links: 月份标签/日历格链接规划
- executor: 导出执行器
- job_manager: 导出任务管理
"""

from .executor import ExportExecutor
from .job_manager import ExportJobManager
from .links import DAY_LINKS_PER_MONTH, LinkPlanner, LinkRect
from .stages import PAGE_STAGES, ExportState, PipelineStage, StageEnum, progress_percent

__all__ = [
    "ExportExecutor",
    "ExportJobManager",
    "DAY_LINKS_PER_MONTH",
    "LinkPlanner",
    "LinkRect",
    "PAGE_STAGES",
    "ExportState",
    "PipelineStage",
    "StageEnum",
    "progress_percent",
]
