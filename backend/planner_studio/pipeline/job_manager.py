"""
导出任务管理器 - 任务创建/查询/取消

职责：
1. 创建任务并分配ID
2. 任务查询（仅内存，不跨会话保存）
3. 通过取消信号协作式取消运行中的任务
4. 从编辑会话取快照并交给执行器

测试要点：
- test_create_job: 创建任务
- test_get_job: 获取任务
- test_cancel_job: 取消任务
- test_run_export: 会话快照导出
"""

from __future__ import annotations

import threading
import uuid
from pathlib import Path
from typing import TYPE_CHECKING

from ..models import ExportJob, ExportStatus

if TYPE_CHECKING:
    from ..editor import EditorSession
    from .executor import ExportExecutor


class ExportJobManager:
    """导出任务管理器"""

    def __init__(self):
        self._jobs: dict[str, ExportJob] = {}
        self._cancel_events: dict[str, threading.Event] = {}

    def create_job(self) -> ExportJob:
        """创建任务"""
        job_id = str(uuid.uuid4())
        job = ExportJob(job_id=job_id)
        self._jobs[job_id] = job
        self._cancel_events[job_id] = threading.Event()
        return job

    def get_job(self, job_id: str) -> ExportJob | None:
        """获取任务"""
        return self._jobs.get(job_id)

    def cancel_event(self, job_id: str) -> threading.Event:
        """任务的取消信号"""
        return self._cancel_events[job_id]

    def cancel_job(self, job_id: str) -> bool:
        """取消任务（运行中任务在下一页开始前停止）"""
        job = self.get_job(job_id)
        if not job:
            return False

        if job.status == ExportStatus.QUEUED:
            self._cancel_events[job_id].set()
            job.mark_cancelled()
            return True

        if job.status == ExportStatus.RUNNING:
            self._cancel_events[job_id].set()
            return True

        return False

    def list_jobs(
        self,
        status: ExportStatus | None = None,
        limit: int = 100,
    ) -> list[ExportJob]:
        """列出任务"""
        jobs = list(self._jobs.values())

        if status:
            jobs = [j for j in jobs if j.status == status]

        # 按创建时间降序
        jobs.sort(key=lambda j: j.created_at, reverse=True)

        return jobs[:limit]

    def run_export(
        self,
        session: EditorSession,
        executor: ExportExecutor,
        output_path: Path | None = None,
        job: ExportJob | None = None,
    ) -> ExportJob:
        """对会话当前文档执行导出（同步）"""
        job = job or self.create_job()
        if job.status == ExportStatus.CANCELLED:
            return job
        executor.execute(
            session.snapshot(),
            job,
            cancel_event=self.cancel_event(job.job_id),
            output_path=output_path,
        )
        return job
