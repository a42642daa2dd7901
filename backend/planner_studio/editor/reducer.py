"""
命令归约器 - (Document, Command) → 新 Document

职责：
1. 每个命令对应一个纯函数式状态转换（不修改输入文档）
2. 维护文档不变量（光标有效、选中块可解析、块尺寸下限）
3. 前置条件不满足时抛 PreconditionError，文档保持不变

测试要点：
- test_add_block_selects: 新块被选中
- test_geometry_clamped: 尺寸钳制到5
- test_clear_idempotent: 清页幂等
- test_apply_layout_last_page: 末页无下一页
- test_change_background_all: 全部页面背景
"""

from __future__ import annotations

import logging
from typing import Callable

from ..config import LayoutSpec
from ..interfaces import CommandError, PreconditionError
from ..models import Block, Document, Page, PageType, Section, StartDay
from .bundle import MonthBundleGenerator, calendar_blocks, is_calendar_block
from .commands import (
    AddBlankPage,
    AddBlock,
    AddMonthBundle,
    ApplyLayoutToNextPage,
    ApplyTemplate,
    ChangeBackground,
    ClearCurrentPage,
    Command,
    DeleteBlock,
    DuplicateCurrentPage,
    RenamePage,
    SelectBlock,
    SelectPage,
    SetStartDay,
    ToggleLock,
    UpdateBlockGeometry,
)
from .sizing import SizingPolicy

logger = logging.getLogger(__name__)


class DocumentReducer:
    """命令归约器"""

    def __init__(
        self,
        layout: LayoutSpec,
        id_factory: Callable[[str], str],
        default_background: str = "",
        page_size: tuple[float, float] | None = None,
    ):
        self.layout = layout
        self.new_id = id_factory
        self.default_background = default_background
        self.sizing = SizingPolicy(layout, page_size)
        self.bundles = MonthBundleGenerator(layout, id_factory)
        self._handlers: dict[type[Command], Callable[[Document, Command], Document]] = {
            AddBlock: self._add_block,
            UpdateBlockGeometry: self._update_block_geometry,
            ToggleLock: self._toggle_lock,
            DeleteBlock: self._delete_block,
            SelectBlock: self._select_block,
            ApplyTemplate: self._apply_template,
            SelectPage: self._select_page,
            AddBlankPage: self._add_blank_page,
            DuplicateCurrentPage: self._duplicate_current_page,
            ApplyLayoutToNextPage: self._apply_layout_to_next_page,
            ClearCurrentPage: self._clear_current_page,
            ChangeBackground: self._change_background,
            RenamePage: self._rename_page,
            AddMonthBundle: self._add_month_bundle,
            SetStartDay: self._set_start_day,
        }

    def apply(self, doc: Document, command: Command) -> Document:
        """执行单个命令"""
        handler = self._handlers.get(type(command))
        if handler is None:
            raise CommandError(f"未知命令: {type(command).__name__}")
        return handler(doc, command)

    # ------------------------------------------------------------------
    # 块操作
    # ------------------------------------------------------------------

    def _add_block(self, doc: Document, cmd: AddBlock) -> Document:
        rule = self.sizing.resolve(cmd.asset_ref, cmd.profile)
        block = Block(
            id=self.new_id("block"),
            asset_ref=cmd.asset_ref,
            x=rule.x,
            y=rule.y,
            width=rule.width,
            height=rule.height,
            locked=rule.locked,
        )
        page = doc.current_page
        page = page.with_blocks([*page.blocks, block])
        return doc.replace_current_page(page).evolve(selected_block_id=block.id)

    def _update_block_geometry(self, doc: Document, cmd: UpdateBlockGeometry) -> Document:
        page = doc.current_page
        if page.find_block(cmd.block_id) is None:
            logger.debug(f"几何更新忽略，块不存在: {cmd.block_id}")
            return doc
        blocks = [
            b.with_geometry(cmd.x, cmd.y, cmd.width, cmd.height) if b.id == cmd.block_id else b
            for b in page.blocks
        ]
        return doc.replace_current_page(page.with_blocks(blocks))

    def _toggle_lock(self, doc: Document, cmd: ToggleLock) -> Document:
        target = cmd.block_id or doc.selected_block_id
        page = doc.current_page
        if page.find_block(target) is None:
            return doc
        blocks = [b.with_locked(not b.locked) if b.id == target else b for b in page.blocks]
        return doc.replace_current_page(page.with_blocks(blocks))

    def _delete_block(self, doc: Document, cmd: DeleteBlock) -> Document:
        target = cmd.block_id or doc.selected_block_id
        page = doc.current_page
        if page.find_block(target) is None:
            return doc
        blocks = [b for b in page.blocks if b.id != target]
        selected = None if doc.selected_block_id == target else doc.selected_block_id
        return doc.replace_current_page(page.with_blocks(blocks)).evolve(
            selected_block_id=selected
        )

    def _select_block(self, doc: Document, cmd: SelectBlock) -> Document:
        if cmd.block_id is not None and doc.current_page.find_block(cmd.block_id) is None:
            return doc
        return doc.evolve(selected_block_id=cmd.block_id)

    def _apply_template(self, doc: Document, cmd: ApplyTemplate) -> Document:
        rule = self.sizing.template_rule()
        block = Block(
            id=self.new_id("block"),
            asset_ref=cmd.asset_ref,
            x=rule.x,
            y=rule.y,
            width=rule.width,
            height=rule.height,
            locked=True,
        )
        # 月视图页保留底层日历块
        page = doc.current_page
        page = page.with_blocks([*calendar_blocks(page), block])
        return doc.replace_current_page(page).evolve(selected_block_id=block.id)

    # ------------------------------------------------------------------
    # 页面操作
    # ------------------------------------------------------------------

    def _select_page(self, doc: Document, cmd: SelectPage) -> Document:
        if not 0 <= cmd.index < len(doc.pages):
            return doc
        return doc.evolve(current_page_index=cmd.index, selected_block_id=None)

    def _append_pages(self, doc: Document, pages: list[Page], move_cursor: bool) -> Document:
        new_pages = [*doc.pages, *pages]
        if move_cursor:
            return doc.evolve(
                pages=new_pages,
                current_page_index=len(new_pages) - 1,
                selected_block_id=None,
            )
        return doc.evolve(pages=new_pages)

    def _add_blank_page(self, doc: Document, cmd: AddBlankPage) -> Document:
        page = Page(
            id=self.new_id("page"),
            name="New Page",
            section=Section.NONE,
            type=PageType.NONE,
            background=self.default_background,
        )
        return self._append_pages(doc, [page], move_cursor=True)

    def _duplicate_current_page(self, doc: Document, cmd: DuplicateCurrentPage) -> Document:
        source = doc.current_page
        copy = source.clone(self.new_id, name=f"{source.name} (Copy)")
        return self._append_pages(doc, [copy], move_cursor=True)

    def _apply_layout_to_next_page(self, doc: Document, cmd: ApplyLayoutToNextPage) -> Document:
        next_index = doc.current_page_index + 1
        if next_index >= len(doc.pages):
            raise PreconditionError("当前页已是最后一页，没有可应用布局的下一页")
        source = doc.current_page
        target = doc.pages[next_index]
        kept = calendar_blocks(target)
        copied = [
            b.clone(self.new_id("block"))
            for b in source.blocks
            if not (kept and is_calendar_block(b))
        ]
        target = target.model_copy(
            update={"background": source.background, "blocks": [*kept, *copied]}
        )
        return doc.replace_page(next_index, target)

    def _clear_current_page(self, doc: Document, cmd: ClearCurrentPage) -> Document:
        page = doc.current_page
        kept = [b for b in page.blocks if b.locked]
        if len(kept) == len(page.blocks):
            return doc
        return doc.replace_current_page(page.with_blocks(kept))

    def _change_background(self, doc: Document, cmd: ChangeBackground) -> Document:
        pages = [
            p.model_copy(update={"background": cmd.ref})
            if cmd.apply_to_all or idx == doc.current_page_index
            else p
            for idx, p in enumerate(doc.pages)
        ]
        return doc.evolve(pages=pages)

    def _rename_page(self, doc: Document, cmd: RenamePage) -> Document:
        name = (cmd.new_name or "").strip()
        if not name or not 0 <= cmd.index < len(doc.pages):
            return doc
        return doc.replace_page(cmd.index, doc.pages[cmd.index].model_copy(update={"name": name}))

    # ------------------------------------------------------------------
    # 月份套页与全局设置
    # ------------------------------------------------------------------

    def _add_month_bundle(self, doc: Document, cmd: AddMonthBundle) -> Document:
        bundle = self.bundles.generate(
            Section(cmd.month), doc.start_day, doc.current_page.background
        )
        return self._append_pages(doc, bundle, move_cursor=False)

    def _set_start_day(self, doc: Document, cmd: SetStartDay) -> Document:
        return doc.evolve(start_day=StartDay(cmd.start_day))
