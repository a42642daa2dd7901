"""
文档模型 - 编辑会话的全部状态

不变量：
- 至少一页，current_page_index 始终有效
- selected_block_id 只能指向当前页中存在的块（否则为 None）
- start_day 由配置注入，导出时决定日历偏移表
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field, model_validator

from .block import Block
from .page import Page, PageType, Section

if TYPE_CHECKING:
    from ..config import StudioConfig


class StartDay(str, Enum):
    """周起始日"""
    SUNDAY = "sunday"
    MONDAY = "monday"


class Document(BaseModel):
    """文档实体（不可变快照，变更由 reducer 产生新对象）"""
    pages: list[Page] = Field(..., min_length=1)
    current_page_index: int = 0
    selected_block_id: str | None = None
    start_day: StartDay = StartDay.SUNDAY

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_cursor(self) -> Document:
        if not 0 <= self.current_page_index < len(self.pages):
            raise ValueError(
                f"current_page_index 越界: {self.current_page_index}/{len(self.pages)}"
            )
        return self

    @classmethod
    def new(cls, config: StudioConfig, first_page_id: str = "p1") -> Document:
        """会话初始文档：单个空白起始页"""
        page = Page(
            id=first_page_id,
            name=config.editor.first_page_name,
            section=Section.NONE,
            type=PageType.NONE,
            background=config.assets.default_background,
        )
        return cls(pages=[page], start_day=StartDay(config.editor.start_day.lower()))

    @property
    def current_page(self) -> Page:
        return self.pages[self.current_page_index]

    @property
    def selected_block(self) -> Block | None:
        return self.current_page.find_block(self.selected_block_id)

    @property
    def page_ids(self) -> set[str]:
        return {p.id for p in self.pages}

    def all_ids(self) -> set[str]:
        """全部页ID与块ID"""
        ids = set(self.page_ids)
        for page in self.pages:
            ids.update(b.id for b in page.blocks)
        return ids

    def find_page_index(self, section: Section, page_type: PageType) -> int | None:
        """按 section/type 精确匹配首个页面"""
        for idx, page in enumerate(self.pages):
            if page.section == section and page.type == page_type:
                return idx
        return None

    def evolve(self, **changes) -> Document:
        """
        生成新状态

        同步修正光标与选中块：选中块在新的当前页上不存在时清空
        """
        updated = self.model_copy(update=changes)
        if updated.selected_block_id is not None and updated.selected_block is None:
            updated = updated.model_copy(update={"selected_block_id": None})
        return Document.model_validate(updated.model_dump())

    def replace_page(self, index: int, page: Page) -> Document:
        pages = list(self.pages)
        pages[index] = page
        return self.evolve(pages=pages)

    def replace_current_page(self, page: Page) -> Document:
        return self.replace_page(self.current_page_index, page)
