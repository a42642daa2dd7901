"""
Pillow 渲染面 - 将页面绘制为位图并按需栅格化导出

职责：
1. show(page) 在单一渲染线程上异步绘制（背景 + 按序叠加的块）
2. wait_until_stable(timeout) 等待绘制完成，超时返回 False
3. capture() 按像素密度缩放并编码（JPEG/PNG）

约束：
- 渲染面全局唯一，页面顺序复用；capture 完成前不切换下一页
- 素材加载失败的块直接跳过（不影响其他块）
"""

from __future__ import annotations

import io
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from typing import TYPE_CHECKING

from PIL import Image

from ..interfaces import CaptureError, IAssetStore, IRenderSurface

if TYPE_CHECKING:
    from ..models import Page

logger = logging.getLogger(__name__)


class PillowRenderSurface(IRenderSurface):
    """基于 Pillow 的离屏渲染面"""

    def __init__(
        self,
        assets: IAssetStore,
        width: int,
        height: int,
        locked_opacity: float = 1.0,
        fill: str = "white",
    ):
        self.assets = assets
        self.width = width
        self.height = height
        self.locked_opacity = locked_opacity
        self.fill = fill
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="render")
        self._pending: Future | None = None
        self._frame: Image.Image | None = None

    def __enter__(self) -> PillowRenderSurface:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        self._executor.shutdown(wait=True)

    # ------------------------------------------------------------------
    # IRenderSurface
    # ------------------------------------------------------------------

    def show(self, page: Page) -> None:
        self._frame = None
        self._pending = self._executor.submit(self.render_page, page)

    def wait_until_stable(self, timeout: float) -> bool:
        if self._pending is None:
            return self._frame is not None
        try:
            self._frame = self._pending.result(timeout=timeout)
        except FutureTimeout:
            logger.warning(f"渲染等待超时 ({timeout}s)")
            return False
        except Exception as e:
            raise CaptureError(f"页面绘制失败: {e}") from e
        self._pending = None
        return True

    def capture(self, pixel_ratio: float, fmt: str, quality: int) -> bytes:
        if self._frame is None:
            raise CaptureError("没有可截取的画面（未调用 show 或未等待稳定）")

        size = (round(self.width * pixel_ratio), round(self.height * pixel_ratio))
        try:
            scaled = self._frame.resize(size, Image.Resampling.LANCZOS)
            buf = io.BytesIO()
            scaled.convert("RGB").save(buf, format=fmt, quality=quality)
        except (OSError, ValueError, KeyError) as e:
            raise CaptureError(f"画面编码失败: {e}") from e
        return buf.getvalue()

    # ------------------------------------------------------------------
    # 绘制
    # ------------------------------------------------------------------

    def render_page(self, page: Page) -> Image.Image:
        """绘制整页（在渲染线程执行）"""
        canvas = Image.new("RGB", (self.width, self.height), self.fill)

        items = iter(self.draw_list(page))
        background = next(items)
        if background.asset_ref:
            self._paste(canvas, background.asset_ref, 0, 0, self.width, self.height, 1.0)

        for item in items:
            opacity = self.locked_opacity if item.locked else 1.0
            self._paste(canvas, item.asset_ref, item.x, item.y, item.width, item.height, opacity)

        return canvas

    def _paste(
        self,
        canvas: Image.Image,
        ref: str,
        x: float,
        y: float,
        width: float,
        height: float,
        opacity: float,
    ) -> None:
        loaded = self.assets.load(ref)
        if not loaded.ready:
            return

        img = loaded.image.resize((max(1, round(width)), max(1, round(height))), Image.Resampling.LANCZOS)
        if opacity < 1.0:
            alpha = img.getchannel("A").point(lambda a: round(a * opacity))
            img.putalpha(alpha)
        canvas.paste(img, (round(x), round(y)), img)
