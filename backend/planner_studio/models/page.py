"""
页面模型 - 有序块列表 + 背景 + 语义分类（月份/结构角色）
"""

from __future__ import annotations

from enum import Enum
from typing import Callable

from pydantic import BaseModel, Field, field_validator

from .block import Block


class Section(str, Enum):
    """页面所属月份"""
    NONE = "NONE"
    JAN = "JAN"
    FEB = "FEB"
    MAR = "MAR"
    APR = "APR"
    MAY = "MAY"
    JUN = "JUN"
    JUL = "JUL"
    AUG = "AUG"
    SEP = "SEP"
    OCT = "OCT"
    NOV = "NOV"
    DEC = "DEC"

    @classmethod
    def months(cls) -> list[Section]:
        """12个月（固定顺序）"""
        return [s for s in cls if s is not cls.NONE]


class PageType(str, Enum):
    """页面在月份套页中的结构角色"""
    NONE = "NONE"
    MONTH = "MONTH"
    WEEK = "WEEK"
    DAY = "DAY"


class Page(BaseModel):
    """页面实体"""
    id: str = Field(..., description="页面唯一ID")
    name: str = "New Page"
    section: Section = Section.NONE
    type: PageType = PageType.NONE
    background: str = ""
    blocks: list[Block] = Field(default_factory=list, description="绘制顺序，后者在上")

    model_config = {"frozen": True}

    @field_validator("blocks")
    @classmethod
    def _unique_block_ids(cls, v: list[Block]) -> list[Block]:
        ids = [b.id for b in v]
        if len(ids) != len(set(ids)):
            raise ValueError("页内块ID重复")
        return v

    @property
    def is_month_overview(self) -> bool:
        """月视图页（类型为MONTH，或名称含 OVERVIEW）"""
        return self.type == PageType.MONTH or "OVERVIEW" in self.name.upper()

    def find_block(self, block_id: str | None) -> Block | None:
        if block_id is None:
            return None
        for block in self.blocks:
            if block.id == block_id:
                return block
        return None

    def with_blocks(self, blocks: list[Block]) -> Page:
        return self.model_copy(update={"blocks": list(blocks)})

    def clone(self, id_factory: Callable[[str], str], name: str | None = None) -> Page:
        """
        结构化深拷贝：页面与全部块获得新ID

        Args:
            id_factory: 按前缀生成新ID
            name: 新页面名称（默认沿用原名）
        """
        return Page(
            id=id_factory("page"),
            name=self.name if name is None else name,
            section=self.section,
            type=self.type,
            background=self.background,
            blocks=[b.clone(id_factory("block")) for b in self.blocks],
        )
