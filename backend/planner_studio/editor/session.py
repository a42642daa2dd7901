"""
编辑会话 - 文档的唯一写入者

职责：
1. 持有当前 Document，所有变更经 dispatch(命令) 串行执行
2. 破坏性命令（应用模板/清页）需确认回调通过才执行
3. 记录命令历史，变更后通知订阅者
4. 为导出提供不可变快照

并发约束：
- dispatch 持锁执行，禁止在归约或通知过程中重入 dispatch
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable

from ..config import StudioConfig, load_layout
from ..interfaces import CommandError
from ..models import Block, Document, Page, Section, StartDay
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
from .ids import IdGenerator
from .reducer import DocumentReducer
from .sizing import SizeProfile

logger = logging.getLogger(__name__)

ConfirmFn = Callable[[str], bool]
Listener = Callable[[Document, Command], None]


@dataclass(frozen=True)
class HistoryEntry:
    """已执行命令记录"""
    seq: int
    command: Command


class EditorSession:
    """编辑会话（单写者）"""

    def __init__(
        self,
        config: StudioConfig,
        ids: IdGenerator | None = None,
        document: Document | None = None,
    ):
        self.config = config
        self.layout = load_layout(config.layout_path)
        self.ids = ids or IdGenerator()
        self.reducer = DocumentReducer(
            self.layout,
            self.ids,
            default_background=config.assets.default_background,
            page_size=(config.canvas.width, config.canvas.height),
        )
        self._document = document or Document.new(config, first_page_id=self.ids("page"))
        self._lock = threading.Lock()
        self._owner: int | None = None
        self._listeners: list[Listener] = []
        self.history: list[HistoryEntry] = []

    # ------------------------------------------------------------------
    # 核心入口
    # ------------------------------------------------------------------

    @property
    def document(self) -> Document:
        return self._document

    def snapshot(self) -> Document:
        """深拷贝快照（导出专用，与会话后续变更隔离）"""
        return self._document.model_copy(deep=True)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """订阅变更，返回取消订阅函数"""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def dispatch(self, command: Command, confirm: ConfirmFn | None = None) -> bool:
        """
        执行命令

        Args:
            command: 编辑命令
            confirm: 破坏性命令的确认回调（返回 False 则不执行）

        Returns:
            True 表示命令已执行；False 表示被用户拒绝

        Raises:
            CommandError: 重入或未知命令
            PreconditionError: 前置条件不满足（文档不变）
        """
        if command.destructive:
            if confirm is None or not confirm(command.confirm_message):
                logger.info(f"用户取消破坏性操作: {command.name}")
                return False

        if self._owner == threading.get_ident():
            raise CommandError(f"禁止重入 dispatch: {command.name}")

        with self._lock:
            self._owner = threading.get_ident()
            try:
                new_doc = self.reducer.apply(self._document, command)
                changed = new_doc is not self._document
                self._document = new_doc
                self.history.append(HistoryEntry(len(self.history) + 1, command))
                if changed:
                    for listener in list(self._listeners):
                        listener(new_doc, command)
            finally:
                self._owner = None

        logger.debug(f"命令完成: {command.name}")
        return True

    # ------------------------------------------------------------------
    # 块操作
    # ------------------------------------------------------------------

    def add_block(self, asset_ref: str, profile: SizeProfile | str | None = None) -> Block:
        """添加块到当前页，返回新块（已选中）"""
        self.dispatch(AddBlock(asset_ref, SizeProfile(profile) if profile else None))
        return self._document.current_page.blocks[-1]

    def update_block_geometry(
        self, block_id: str, x: float, y: float, width: float, height: float
    ) -> None:
        self.dispatch(UpdateBlockGeometry(block_id, x, y, width, height))

    def report_gesture(
        self, block_id: str, x: float, y: float, width: float, height: float
    ) -> None:
        """渲染层拖拽/缩放回报"""
        self.update_block_geometry(block_id, x, y, width, height)

    def toggle_lock(self, block_id: str | None = None) -> None:
        self.dispatch(ToggleLock(block_id))

    def delete_block(self, block_id: str | None = None) -> None:
        self.dispatch(DeleteBlock(block_id))

    def select_block(self, block_id: str | None) -> None:
        self.dispatch(SelectBlock(block_id))

    def apply_template(self, asset_ref: str, confirm: ConfirmFn | None = None) -> bool:
        return self.dispatch(ApplyTemplate(asset_ref), confirm=confirm)

    # ------------------------------------------------------------------
    # 页面操作
    # ------------------------------------------------------------------

    def select_page(self, index: int) -> None:
        self.dispatch(SelectPage(index))

    def add_blank_page(self) -> Page:
        self.dispatch(AddBlankPage())
        return self._document.current_page

    def duplicate_current_page(self) -> Page:
        self.dispatch(DuplicateCurrentPage())
        return self._document.current_page

    def apply_layout_to_next_page(self) -> None:
        self.dispatch(ApplyLayoutToNextPage())

    def clear_current_page(self, confirm: ConfirmFn | None = None) -> bool:
        return self.dispatch(ClearCurrentPage(), confirm=confirm)

    def change_background(self, ref: str, apply_to_all: bool = False) -> None:
        self.dispatch(ChangeBackground(ref, apply_to_all))

    def rename_page(self, index: int, new_name: str) -> None:
        self.dispatch(RenamePage(index, new_name))

    # ------------------------------------------------------------------
    # 月份套页与全局设置
    # ------------------------------------------------------------------

    def add_month_bundle(self, month: Section | str) -> list[Page]:
        """追加某月37页，返回新增页面"""
        before = len(self._document.pages)
        self.dispatch(AddMonthBundle(Section(month)))
        return self._document.pages[before:]

    def set_start_day(self, start_day: StartDay | str) -> None:
        self.dispatch(SetStartDay(StartDay(start_day)))
