"""
链接规划 - 月份标签链接与日历格链接的几何计算

职责：
1. 月份标签：每页都盖12个标签矩形，指向各月月视图页
2. 日历格：月视图页上31个日期格，指向该月对应日页
3. 纯计算，不依赖写入器（便于单测）

月份匹配：
- 精确：section == 月份 且 type == MONTH
- 模糊兜底（可关闭）：页名（大写）包含月份代码 且 type != DAY
  注意：模糊匹配对 "January Retrospective" 这类页名会误命中 JAN
- 未匹配的月份标签指向第1页

测试要点：
- test_tabs_on_blank_document: 单页文档12个标签全部指向第1页
- test_jan_sunday_offset: 1月周日起始，1号落在 (4, 0)
- test_day_links_target_day_pages: 日期格指向日页
"""

from __future__ import annotations

from dataclasses import dataclass

from ..config import MONTH_CODES, LayoutSpec
from ..models import Document, Page, PageType, Section

DAY_LINKS_PER_MONTH = 31


@dataclass(frozen=True)
class LinkRect:
    """页面上的可点击矩形"""
    x: float
    y: float
    width: float
    height: float
    dest_page: int  # 1起始
    kind: str = "tab"


class LinkPlanner:
    """链接规划器（对一个文档快照计算）"""

    def __init__(self, layout: LayoutSpec, document: Document, fuzzy_month_match: bool = True):
        self.layout = layout
        self.document = document
        self.fuzzy = fuzzy_month_match
        # 月份标签目标与页面无关，预先计算一次
        self._tab_targets = [self.find_month_page(code) for code in MONTH_CODES]

    # ------------------------------------------------------------------
    # 页面查找
    # ------------------------------------------------------------------

    def find_month_page(self, month: str) -> int | None:
        """某月月视图页的0起始索引"""
        pages = self.document.pages
        section = Section(month)
        for idx, page in enumerate(pages):
            if page.section == section and page.type == PageType.MONTH:
                return idx
        if self.fuzzy:
            for idx, page in enumerate(pages):
                if month in page.name.upper() and page.type != PageType.DAY:
                    return idx
        return None

    def find_first_day_page(self, month: str) -> int | None:
        """某月第一张日页的0起始索引"""
        return self.document.find_page_index(Section(month), PageType.DAY)

    @staticmethod
    def resolve_month(page: Page) -> str | None:
        """月视图页所属月份：优先 section，否则扫描页名"""
        if page.section != Section.NONE:
            return page.section.value
        name = page.name.upper()
        for code in MONTH_CODES:
            if code in name:
                return code
        return None

    # ------------------------------------------------------------------
    # 链接计算
    # ------------------------------------------------------------------

    def tab_links(self) -> list[LinkRect]:
        """12个月份标签（每页相同）"""
        links = []
        for idx, target in enumerate(self._tab_targets):
            x, y, w, h = self.layout.tab_rect(idx)
            dest = 1 if target is None else target + 1
            links.append(LinkRect(x, y, w, h, dest, kind="tab"))
        return links

    def day_links(self, page: Page) -> list[LinkRect]:
        """月视图页的日期格链接；非月视图页返回空"""
        if not page.is_month_overview:
            return []
        month = self.resolve_month(page)
        if month is None:
            return []
        first_day = self.find_first_day_page(month)
        if first_day is None:
            return []

        offset = self.layout.get_month_offset(month, self.document.start_day.value)
        total = len(self.document.pages)
        links = []
        for d in range(DAY_LINKS_PER_MONTH):
            dest = first_day + d + 1
            if dest > total:
                break
            x, y, w, h = self.layout.grid_cell_rect(d + offset)
            links.append(LinkRect(x, y, w, h, dest, kind="day"))
        return links

    def links_for(self, page: Page) -> list[LinkRect]:
        """某页应盖的全部链接"""
        return self.tab_links() + self.day_links(page)
