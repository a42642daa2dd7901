"""
导出执行器 - 逐页渲染、栅格化、写入PDF并盖链接

职责：
1. 按文档顺序逐页执行：切页 → 等待稳定 → 栅格化 → 写页 → 盖链接
2. 更新任务进度（每页完成后），结束时清空进度
3. 页级失败重试一次，仍失败则整体失败
4. 先写暂存文件，全部成功后原子替换为最终文件名
5. 每页开始前检查取消信号

测试要点：
- test_export_single_blank_page: 单页12个标签链接
- test_export_retry_once: 单次超时后重试成功
- test_export_fails_after_retry: 连续失败整体失败且不留残件
- test_export_cancel: 取消后无产物
- test_progress_tracking: 进度回调序列
"""

from __future__ import annotations

import logging
import os
import threading
from pathlib import Path
from typing import Callable

from ..config import LayoutSpec, StudioConfig, load_layout
from ..interfaces import (
    CaptureError,
    ExportCancelledError,
    ExportError,
    IDocumentWriter,
    IRenderSurface,
    RenderTimeoutError,
)
from ..models import Document, ExportJob, Page
from ..render import PdfDocumentWriter
from .links import LinkPlanner
from .stages import FINALIZE_STAGE, PAGE_STAGES, ExportState, StageEnum, progress_percent

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int | None], None]

_STAGE_MESSAGES = {stage.name: stage.message for stage in PAGE_STAGES}


class ExportExecutor:
    """导出执行器"""

    def __init__(
        self,
        config: StudioConfig,
        surface: IRenderSurface,
        writer_factory: Callable[[], IDocumentWriter] = PdfDocumentWriter,
        layout: LayoutSpec | None = None,
        progress_cb: ProgressCallback | None = None,
    ):
        self.config = config
        self.layout = layout or load_layout(config.layout_path)
        self.surface = surface
        self.writer_factory = writer_factory
        self.progress_cb = progress_cb
        self.state = ExportState.IDLE
        self._state_lock = threading.Lock()

    def execute(
        self,
        document: Document,
        job: ExportJob,
        cancel_event: threading.Event | None = None,
        output_path: Path | None = None,
    ) -> Path:
        """
        导出整个文档

        Args:
            document: 文档快照（导出过程中不会被修改）
            job: 导出任务（进度与结果写回）
            cancel_event: 取消信号
            output_path: 最终产物路径（默认取配置）

        Returns:
            最终PDF路径

        Raises:
            ExportCancelledError: 被取消
            ExportError: 页面重试后仍失败或保存失败
        """
        with self._state_lock:
            if self.state == ExportState.RUNNING:
                raise ExportError("已有导出任务在运行")
            self.state = ExportState.RUNNING

        try:
            return self._run(document, job, cancel_event, output_path)
        finally:
            self.state = ExportState.IDLE
            self._emit(None)

    def _run(
        self,
        document: Document,
        job: ExportJob,
        cancel_event: threading.Event | None,
        output_path: Path | None,
    ) -> Path:
        # 导出时不显示选中状态
        doc = document.evolve(selected_block_id=None)
        total = len(doc.pages)
        final_path = Path(output_path or self.config.get_output_path())
        staging_path = final_path.with_name(
            f".{final_path.stem}.{job.job_id[:8]}.partial{final_path.suffix}"
        )
        planner = LinkPlanner(self.layout, doc, self.config.export.fuzzy_month_match)

        job.mark_running(total)
        logger.info(f"[{job.job_id}] 开始导出: {total}页 → {final_path}")

        writer = self.writer_factory()
        try:
            for i, page in enumerate(doc.pages):
                self._check_cancel(cancel_event)
                self._export_page(writer, planner, page, i, job, cancel_event)
                job.progress.page_index = i
                job.progress.percent = progress_percent(i + 1, total)
                self._emit(job.progress.percent)

            self._check_cancel(cancel_event)
            job.progress.message = FINALIZE_STAGE.message
            writer.save(staging_path)
            os.replace(staging_path, final_path)

        except ExportCancelledError:
            logger.info(f"[{job.job_id}] 导出已取消")
            job.mark_cancelled()
            self._discard(staging_path)
            raise

        except Exception as e:
            logger.exception(f"导出失败: {job.job_id}")
            job.mark_failed(str(e))
            self._discard(staging_path)
            raise

        finally:
            writer.close()

        job.mark_succeeded(final_path)
        logger.info(f"[{job.job_id}] 导出完成: {final_path}")
        return final_path

    def _export_page(
        self,
        writer: IDocumentWriter,
        planner: LinkPlanner,
        page: Page,
        index: int,
        job: ExportJob,
        cancel_event: threading.Event | None,
    ) -> None:
        """导出单页（失败重试 max_page_retries 次）"""
        attempts = 1 + max(0, self.config.retries.max_page_retries)
        last_error: Exception | None = None

        for attempt in range(1, attempts + 1):
            if attempt > 1:
                self._check_cancel(cancel_event)
                logger.warning(f"[{job.job_id}] 第{index + 1}页重试 ({attempt - 1}/{attempts - 1})")
                job.add_flag(f"页面重试:{index + 1}")

            try:
                data = self._render_and_capture(page, job)
            except (RenderTimeoutError, CaptureError) as e:
                last_error = e
                logger.warning(f"[{job.job_id}] 第{index + 1}页栅格化失败: {e}")
                continue

            try:
                self._write_page(writer, planner, page, data, job)
            except (ExportError, RuntimeError, ValueError, OSError) as e:
                last_error = e
                logger.warning(f"[{job.job_id}] 第{index + 1}页写入失败: {e}")
                if writer.page_count > index:
                    writer.remove_last_page()
                continue

            return

        raise ExportError(
            f"第{index + 1}页导出失败（已重试{attempts - 1}次）: {last_error}"
        ) from last_error

    def _render_and_capture(self, page: Page, job: ExportJob) -> bytes:
        export = self.config.export

        self._enter(job, StageEnum.SHOW_PAGE)
        self.surface.show(page)

        self._enter(job, StageEnum.WAIT_SETTLE)
        if not self.surface.wait_until_stable(export.render_settle_timeout_sec):
            raise RenderTimeoutError(
                f"页面渲染未在 {export.render_settle_timeout_sec}s 内稳定: {page.name}"
            )

        self._enter(job, StageEnum.CAPTURE)
        return self.surface.capture(export.pixel_ratio, export.image_format, export.jpeg_quality)

    def _write_page(
        self,
        writer: IDocumentWriter,
        planner: LinkPlanner,
        page: Page,
        data: bytes,
        job: ExportJob,
    ) -> None:
        width, height = self.config.canvas.width, self.config.canvas.height

        self._enter(job, StageEnum.WRITE_PAGE)
        writer.add_page(width, height)
        writer.add_page_image(data, 0, 0, width, height)

        self._enter(job, StageEnum.STAMP_LINKS)
        for link in planner.links_for(page):
            writer.add_link(link.x, link.y, link.width, link.height, link.dest_page)

    @staticmethod
    def _enter(job: ExportJob, stage: StageEnum) -> None:
        job.progress.message = _STAGE_MESSAGES[stage.value]

    @staticmethod
    def _check_cancel(cancel_event: threading.Event | None) -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise ExportCancelledError("导出已被取消")

    @staticmethod
    def _discard(path: Path) -> None:
        """删除暂存文件（最终产物不受影响）"""
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"暂存文件删除失败: {path}: {e}")

    def _emit(self, percent: int | None) -> None:
        if self.progress_cb is not None:
            self.progress_cb(percent)
