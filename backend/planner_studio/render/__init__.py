"""
渲染与输出 - 素材库/渲染面/PDF写入

子模块：
- assets: 文件素材库（Pillow + PyMuPDF 栅格化 SVG）
- surface: Pillow 离屏渲染面与栅格截取
- pdf_writer: PyMuPDF 分页写入器
"""

from .assets import FileAssetStore
from .pdf_writer import DeferredLink, PdfDocumentWriter
from .surface import PillowRenderSurface

__all__ = [
    "FileAssetStore",
    "DeferredLink",
    "PdfDocumentWriter",
    "PillowRenderSurface",
]
