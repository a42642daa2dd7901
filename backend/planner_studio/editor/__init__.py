"""
编辑核心 - 命令/归约/月份套页/会话

子模块：
- ids: 会话级唯一ID
- sizing: 新块尺寸策略
- commands: 编辑命令定义
- reducer: (Document, Command) → Document
- bundle: 月份套页生成
- session: 单写者编辑会话
"""

from .bundle import (
    BUNDLE_SIZE,
    MonthBundleGenerator,
    calendar_asset,
    calendar_blocks,
    is_calendar_block,
    month_header_asset,
)
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
from .session import EditorSession, HistoryEntry
from .sizing import SizeProfile, SizingPolicy

__all__ = [
    "BUNDLE_SIZE",
    "MonthBundleGenerator",
    "calendar_asset",
    "calendar_blocks",
    "is_calendar_block",
    "month_header_asset",
    "Command",
    "AddBlock",
    "UpdateBlockGeometry",
    "ToggleLock",
    "DeleteBlock",
    "SelectBlock",
    "ApplyTemplate",
    "SelectPage",
    "AddBlankPage",
    "DuplicateCurrentPage",
    "ApplyLayoutToNextPage",
    "ClearCurrentPage",
    "ChangeBackground",
    "RenamePage",
    "AddMonthBundle",
    "SetStartDay",
    "IdGenerator",
    "DocumentReducer",
    "EditorSession",
    "HistoryEntry",
    "SizeProfile",
    "SizingPolicy",
]
