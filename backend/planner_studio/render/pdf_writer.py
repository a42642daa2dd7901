"""
PDF写入器 - 基于 PyMuPDF 的分页文档写入

职责：
1. 追加固定尺寸页面并铺满页面图像
2. 记录页面内跳转链接（延迟到保存时统一写入，允许指向尚未生成的后续页）
3. 页级回滚（重试前撤销半写入的页）

测试要点：
- test_writer_links_roundtrip: 保存后链接目标正确
- test_remove_last_page: 回滚后页数与链接同步
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import fitz

from ..interfaces import ExportError, IDocumentWriter

logger = logging.getLogger(__name__)


@dataclass
class DeferredLink:
    page_num: int  # 0起始
    rect: tuple[float, float, float, float]  # x0, y0, x1, y1
    dest_page: int  # 1起始


class PdfDocumentWriter(IDocumentWriter):
    """PyMuPDF 写入器"""

    def __init__(self):
        self.doc = fitz.open()
        self.deferred_links: list[DeferredLink] = []

    @property
    def page_count(self) -> int:
        return len(self.doc)

    def add_page(self, width: float, height: float) -> int:
        self.doc.new_page(width=width, height=height)
        return len(self.doc)

    def add_page_image(
        self, data: bytes, x: float, y: float, width: float, height: float
    ) -> None:
        if not len(self.doc):
            raise ExportError("尚未创建页面，无法放置图像")
        page = self.doc[-1]
        page.insert_image(fitz.Rect(x, y, x + width, y + height), stream=data)

    def add_link(
        self, x: float, y: float, width: float, height: float, dest_page: int
    ) -> None:
        if not len(self.doc):
            raise ExportError("尚未创建页面，无法添加链接")
        self.deferred_links.append(
            DeferredLink(len(self.doc) - 1, (x, y, x + width, y + height), dest_page)
        )

    def remove_last_page(self) -> None:
        if not len(self.doc):
            return
        last = len(self.doc) - 1
        self.deferred_links = [link for link in self.deferred_links if link.page_num != last]
        self.doc.delete_page(last)

    def apply_deferred_links(self) -> int:
        """写入全部延迟链接，返回写入数"""
        applied = 0
        for link in self.deferred_links:
            if not 1 <= link.dest_page <= len(self.doc):
                logger.debug(f"跳过越界链接: 第{link.page_num + 1}页 → {link.dest_page}")
                continue
            page = self.doc[link.page_num]
            page.insert_link({
                "kind": fitz.LINK_GOTO,
                "page": link.dest_page - 1,
                "from": fitz.Rect(link.rect),
            })
            applied += 1
        self.deferred_links = []
        return applied

    def save(self, path: Path) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        applied = self.apply_deferred_links()
        try:
            self.doc.save(str(path), garbage=3, deflate=True)
        except (RuntimeError, ValueError, OSError) as e:
            raise ExportError(f"PDF保存失败: {path}: {e}") from e
        logger.info(f"PDF已写入: {path} ({len(self.doc)}页, {applied}个链接)")
        return path

    def close(self) -> None:
        self.doc.close()
