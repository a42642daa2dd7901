"""
导出任务模型 - 定义导出任务状态与生命周期

状态机：QUEUED → RUNNING → SUCCEEDED / FAILED / CANCELLED
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field


class ExportStatus(str, Enum):
    """任务状态枚举"""
    QUEUED = "queued"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"


class ExportProgress(BaseModel):
    """任务进度（percent 为 None 表示无进度可显示）"""
    percent: int | None = None
    page_index: int | None = None
    page_total: int = 0
    message: str = ""


class ExportJob(BaseModel):
    """导出任务实体"""
    job_id: str = Field(..., description="UUID")

    # 状态
    status: ExportStatus = ExportStatus.QUEUED
    progress: ExportProgress = Field(default_factory=ExportProgress)

    # 产物
    output_path: Path | None = None

    # 结果
    flags: list[str] = Field(default_factory=list, description="告警标记")
    errors: list[str] = Field(default_factory=list, description="错误信息")

    # 时间戳
    created_at: datetime = Field(default_factory=datetime.now)
    started_at: datetime | None = None
    finished_at: datetime | None = None

    model_config = {"arbitrary_types_allowed": True}

    @property
    def is_finished(self) -> bool:
        return self.status in (
            ExportStatus.SUCCEEDED, ExportStatus.FAILED, ExportStatus.CANCELLED
        )

    def mark_running(self, page_total: int) -> None:
        """标记为运行中"""
        self.status = ExportStatus.RUNNING
        self.started_at = datetime.now()
        self.progress.page_total = page_total
        self.progress.percent = 0

    def mark_succeeded(self, output_path: Path) -> None:
        """标记为成功（进度清空）"""
        self.status = ExportStatus.SUCCEEDED
        self.finished_at = datetime.now()
        self.output_path = output_path
        self.progress.percent = None
        self.progress.message = "导出完成"

    def mark_failed(self, error: str) -> None:
        """标记为失败"""
        self.status = ExportStatus.FAILED
        self.finished_at = datetime.now()
        self.progress.percent = None
        self.errors.append(error)

    def mark_cancelled(self) -> None:
        """标记为已取消"""
        self.status = ExportStatus.CANCELLED
        self.finished_at = datetime.now()
        self.progress.percent = None

    def add_flag(self, flag: str) -> None:
        """添加告警标记（不中断）"""
        if flag not in self.flags:
            self.flags.append(flag)
