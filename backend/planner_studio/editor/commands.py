"""
编辑命令定义

每个命令是一次离散的 (操作, 参数)；由 reducer 转换为新的 Document。
destructive=True 的命令在执行前必须经过用户确认（确认本身由外部UI完成）。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from ..models import Section, StartDay
from .sizing import SizeProfile


@dataclass(frozen=True)
class Command:
    """命令基类"""
    name: ClassVar[str] = "command"
    destructive: ClassVar[bool] = False
    confirm_message: ClassVar[str] = ""


# === 块操作 ===

@dataclass(frozen=True)
class AddBlock(Command):
    name: ClassVar[str] = "add_block"
    asset_ref: str
    profile: SizeProfile | None = None


@dataclass(frozen=True)
class UpdateBlockGeometry(Command):
    name: ClassVar[str] = "update_block_geometry"
    block_id: str
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class ToggleLock(Command):
    name: ClassVar[str] = "toggle_lock"
    block_id: str | None = None


@dataclass(frozen=True)
class DeleteBlock(Command):
    name: ClassVar[str] = "delete_block"
    block_id: str | None = None


@dataclass(frozen=True)
class SelectBlock(Command):
    name: ClassVar[str] = "select_block"
    block_id: str | None = None


@dataclass(frozen=True)
class ApplyTemplate(Command):
    """整页替换为单个锁定模板块（不可逆）"""
    name: ClassVar[str] = "apply_template"
    destructive: ClassVar[bool] = True
    confirm_message: ClassVar[str] = (
        "This will clear the current page and apply the template. Continue?"
    )
    asset_ref: str


# === 页面操作 ===

@dataclass(frozen=True)
class SelectPage(Command):
    name: ClassVar[str] = "select_page"
    index: int


@dataclass(frozen=True)
class AddBlankPage(Command):
    name: ClassVar[str] = "add_blank_page"


@dataclass(frozen=True)
class DuplicateCurrentPage(Command):
    name: ClassVar[str] = "duplicate_current_page"


@dataclass(frozen=True)
class ApplyLayoutToNextPage(Command):
    name: ClassVar[str] = "apply_layout_to_next_page"


@dataclass(frozen=True)
class ClearCurrentPage(Command):
    """移除当前页全部未锁定块（不可逆）"""
    name: ClassVar[str] = "clear_current_page"
    destructive: ClassVar[bool] = True
    confirm_message: ClassVar[str] = "Clear all unlocked items?"


@dataclass(frozen=True)
class ChangeBackground(Command):
    name: ClassVar[str] = "change_background"
    ref: str
    apply_to_all: bool = False


@dataclass(frozen=True)
class RenamePage(Command):
    name: ClassVar[str] = "rename_page"
    index: int
    new_name: str


# === 月份套页与全局设置 ===

@dataclass(frozen=True)
class AddMonthBundle(Command):
    name: ClassVar[str] = "add_month_bundle"
    month: Section


@dataclass(frozen=True)
class SetStartDay(Command):
    name: ClassVar[str] = "set_start_day"
    start_day: StartDay
