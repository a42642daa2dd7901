"""
月份套页生成器 - 1 张月视图 + 5 张周页 + 31 张日页

说明：
- 日页固定31张，与实际天数无关；短月份多出的日页代表不存在的日期，
  属于已知简化（日历网格按最坏情况设计）
- 月视图页带锁定的日历底图块，素材名 <月份><起始日>start.svg
- 全部页面继承调用时当前页的背景

测试要点：
- test_bundle_shape: 1 MONTH + 5 WEEK + 31 DAY 顺序
- test_bundle_ids_unique: 批量ID不冲突
- test_calendar_asset_by_start_day: 日历素材随起始日变化
"""

from __future__ import annotations

from typing import Callable

from ..config import LayoutSpec
from ..models import Block, Page, PageType, Section, StartDay

WEEK_PAGES = 5
DAY_PAGES = 31
BUNDLE_SIZE = 1 + WEEK_PAGES + DAY_PAGES


def calendar_asset(month: Section, start_day: StartDay) -> str:
    """日历底图素材名，如 marsundaystart.svg"""
    return f"{month.value.lower()}{StartDay(start_day).value}start.svg"


def month_header_asset(month: Section) -> str:
    """月份徽标素材名，如 marheader.svg"""
    return f"{month.value.lower()}header.svg"


def is_calendar_block(block: Block) -> bool:
    """锁定的日历底图块（任意月份/起始日）"""
    if not block.locked:
        return False
    ref = block.asset_ref.lower()
    return any(
        ref == calendar_asset(month, day) for month in Section.months() for day in StartDay
    )


def calendar_blocks(page: Page) -> list[Block]:
    """月视图页需保留的日历块；非 MONTH 页返回空"""
    if page.type != PageType.MONTH:
        return []
    return [b for b in page.blocks if is_calendar_block(b)]


class MonthBundleGenerator:
    """月份套页生成器"""

    def __init__(self, layout: LayoutSpec, id_factory: Callable[[str], str]):
        self.layout = layout
        self.new_id = id_factory

    def generate(self, month: Section, start_day: StartDay, background: str) -> list[Page]:
        """生成某月的37张页面（不修改文档，由调用方一次性追加）"""
        month = Section(month)
        if month == Section.NONE:
            raise ValueError("月份套页需要具体月份")

        code = month.value
        bundle = [self._overview_page(month, start_day, background)]

        for w in range(1, WEEK_PAGES + 1):
            bundle.append(
                Page(
                    id=self.new_id(f"w-{code}-{w}"),
                    name=f"{code} Wk {w}",
                    section=month,
                    type=PageType.WEEK,
                    background=background,
                )
            )

        for d in range(1, DAY_PAGES + 1):
            bundle.append(
                Page(
                    id=self.new_id(f"d-{code}-{d}"),
                    name=f"{code} Day {d}",
                    section=month,
                    type=PageType.DAY,
                    background=background,
                )
            )

        return bundle

    def _overview_page(self, month: Section, start_day: StartDay, background: str) -> Page:
        grid = self.layout.grid
        header = self.layout.get_size_rule("month_header")
        calendar = Block(
            id=self.new_id("cal"),
            asset_ref=calendar_asset(month, start_day),
            x=grid.start_x,
            y=grid.start_y,
            width=grid.calendar_width,
            height=grid.calendar_height,
            locked=True,
        )
        heading = Block(
            id=self.new_id("head"),
            asset_ref=month_header_asset(month),
            x=header.x,
            y=header.y,
            width=header.width,
            height=header.height,
            locked=False,
        )
        return Page(
            id=self.new_id(f"m-{month.value}"),
            name=f"{month.value} Overview",
            section=month,
            type=PageType.MONTH,
            background=background,
            blocks=[calendar, heading],
        )
