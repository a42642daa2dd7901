"""
文件素材库 - 按引用名从素材目录加载位图/矢量素材

职责：
1. 引用名 → 文件路径（扁平命名空间，忽略前导"/"）
2. 位图用 Pillow 打开；SVG 用 PyMuPDF 栅格化
3. 加载失败返回 FAILED（记录告警，不抛出）
4. 缓存加载结果

测试要点：
- test_load_png_ready: 位图加载
- test_load_missing_failed: 缺失素材
- test_load_corrupt_failed: 损坏素材
"""

from __future__ import annotations

import logging
from pathlib import Path

import fitz
from PIL import Image

from ..interfaces import AssetError, AssetLoad, AssetStatus, IAssetStore

logger = logging.getLogger(__name__)


class FileAssetStore(IAssetStore):
    """文件系统素材库"""

    def __init__(self, asset_dir: str | Path, svg_zoom: float = 2.0):
        self.asset_dir = Path(asset_dir)
        self.svg_zoom = svg_zoom
        self._cache: dict[str, AssetLoad] = {}

    def resolve(self, ref: str) -> Path:
        """引用名 → 文件路径"""
        return self.asset_dir / ref.lstrip("/")

    def exists(self, ref: str) -> bool:
        return bool(ref) and self.resolve(ref).is_file()

    def load(self, ref: str) -> AssetLoad:
        """加载素材（结果缓存）"""
        if ref in self._cache:
            return self._cache[ref]

        if not self.exists(ref):
            logger.warning(f"素材不存在: {ref}")
            result = AssetLoad(ref=ref, status=AssetStatus.FAILED)
        else:
            try:
                image = self._open(self.resolve(ref))
                result = AssetLoad(ref=ref, status=AssetStatus.READY, image=image)
            except AssetError as e:
                logger.warning(f"素材加载失败: {ref}: {e}")
                result = AssetLoad(ref=ref, status=AssetStatus.FAILED)

        self._cache[ref] = result
        return result

    def clear_cache(self) -> None:
        self._cache.clear()

    def _open(self, path: Path) -> Image.Image:
        """解码素材，失败统一抛 AssetError"""
        try:
            if path.suffix.lower() == ".svg":
                return self._rasterize_svg(path)
            with Image.open(path) as im:
                im.load()
                return im.convert("RGBA")
        except (OSError, ValueError, RuntimeError) as e:
            raise AssetError(f"无法解码素材 {path.name}: {e}") from e

    def _rasterize_svg(self, path: Path) -> Image.Image:
        """SVG → RGBA 位图"""
        with fitz.open(str(path)) as svg:
            pix = svg[0].get_pixmap(matrix=fitz.Matrix(self.svg_zoom, self.svg_zoom), alpha=True)
        return Image.frombytes("RGBA", (pix.width, pix.height), pix.samples)
