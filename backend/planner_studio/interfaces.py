"""
模块接口契约 - 定义外部协作者的抽象接口

设计原则：
1. 编辑核心与渲染/栅格化/PDF写入通过接口通信，不直接依赖具体实现
2. 每个接口定义清晰的输入输出类型
3. 便于单元测试和mock替换

使用方式：
    from planner_studio.interfaces import IDocumentWriter

    class MyWriter(IDocumentWriter):
        def add_page(self, width: float, height: float) -> int:
            ...
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterator, NamedTuple

if TYPE_CHECKING:
    from .models import Page


# ============================================================================
# 素材库接口
# ============================================================================

class AssetStatus(str, Enum):
    """素材加载状态"""
    READY = "ready"
    FAILED = "failed"


@dataclass
class AssetLoad:
    """素材加载结果（image 为具体实现的位图对象）"""
    ref: str
    status: AssetStatus
    image: Any = None

    @property
    def ready(self) -> bool:
        return self.status == AssetStatus.READY


class IAssetStore(ABC):
    """素材库接口 - 扁平命名空间的素材引用"""

    @abstractmethod
    def exists(self, ref: str) -> bool:
        """素材是否存在"""
        ...

    @abstractmethod
    def load(self, ref: str) -> AssetLoad:
        """
        加载素材

        加载失败不抛异常，返回 status=FAILED 的结果；
        调用方据此跳过该块的绘制（块本身保留在模型中）。
        """
        ...


# ============================================================================
# 渲染与栅格化接口
# ============================================================================

class DrawItem(NamedTuple):
    """渲染清单中的一项"""
    asset_ref: str
    x: float
    y: float
    width: float
    height: float
    locked: bool


class IRenderSurface(ABC):
    """渲染面接口 - 单一渲染目标，按页顺序复用"""

    @abstractmethod
    def show(self, page: Page) -> None:
        """切换渲染目标到指定页（异步绘制）"""
        ...

    @abstractmethod
    def wait_until_stable(self, timeout: float) -> bool:
        """
        等待当前页绘制完成

        Args:
            timeout: 最长等待秒数

        Returns:
            True 表示画面已稳定；False 表示超时
        """
        ...

    @abstractmethod
    def capture(self, pixel_ratio: float, fmt: str, quality: int) -> bytes:
        """
        栅格化当前画面

        Args:
            pixel_ratio: 像素密度倍数（如1.5）
            fmt: 编码格式（JPEG/PNG）
            quality: 有损编码质量（1-100）

        Returns:
            编码后的图像字节

        Raises:
            CaptureError: 截取或编码失败
        """
        ...

    @staticmethod
    def draw_list(page: Page) -> Iterator[DrawItem]:
        """页面渲染清单：背景在前，块按序叠加（后者在上）"""
        yield DrawItem(page.background, 0, 0, 0, 0, True)
        for block in page.blocks:
            yield DrawItem(
                block.asset_ref, block.x, block.y, block.width, block.height, block.locked
            )


# ============================================================================
# 文档写入接口
# ============================================================================

class IDocumentWriter(ABC):
    """分页文档写入器接口"""

    @property
    @abstractmethod
    def page_count(self) -> int:
        """已写入页数"""
        ...

    @abstractmethod
    def add_page(self, width: float, height: float) -> int:
        """追加新页，返回1起始页码"""
        ...

    @abstractmethod
    def add_page_image(
        self, data: bytes, x: float, y: float, width: float, height: float
    ) -> None:
        """在最后一页放置图像"""
        ...

    @abstractmethod
    def add_link(
        self, x: float, y: float, width: float, height: float, dest_page: int
    ) -> None:
        """在最后一页添加跳转链接（dest_page 为1起始页码）"""
        ...

    @abstractmethod
    def remove_last_page(self) -> None:
        """撤销最后一页（页级重试时回滚半写入的页）"""
        ...

    @abstractmethod
    def save(self, path: Path) -> Path:
        """保存文档"""
        ...

    @abstractmethod
    def close(self) -> None:
        """释放资源"""
        ...


# ============================================================================
# 异常定义
# ============================================================================

class PlannerStudioError(Exception):
    """基础异常"""
    pass


class AssetError(PlannerStudioError):
    """素材错误"""
    pass


class CommandError(PlannerStudioError):
    """编辑命令错误"""
    pass


class PreconditionError(CommandError):
    """命令前置条件不满足（模型保持不变）"""
    pass


class RenderTimeoutError(PlannerStudioError):
    """渲染稳定等待超时"""
    pass


class CaptureError(PlannerStudioError):
    """栅格化错误"""
    pass


class ExportError(PlannerStudioError):
    """导出错误"""
    pass


class ExportCancelledError(ExportError):
    """导出被取消"""
    pass
