"""
数据模型层 - 定义系统核心数据结构

所有模块通过这些模型交互，实现解耦：
- Block: 页面上的素材块
- Page: 页面（块列表+背景+月份分类）
- Document: 编辑会话状态
- ExportJob: 导出任务状态与生命周期
"""

from .block import MIN_BLOCK_SIZE, Block
from .document import Document, StartDay
from .export_job import ExportJob, ExportProgress, ExportStatus
from .page import Page, PageType, Section

__all__ = [
    "MIN_BLOCK_SIZE",
    "Block",
    "Page",
    "PageType",
    "Section",
    "Document",
    "StartDay",
    "ExportJob",
    "ExportProgress",
    "ExportStatus",
]
