"""
渲染与PDF写入单元测试（真实 Pillow / PyMuPDF）

每个模块完成后必须运行：pytest backend/tests/unit/test_render.py -v
"""

import io
from pathlib import Path

import fitz
import pytest
from PIL import Image

from planner_studio.interfaces import AssetError, AssetStatus, CaptureError, IRenderSurface
from planner_studio.models import ExportJob, Page
from planner_studio.pipeline import ExportExecutor
from planner_studio.render import FileAssetStore, PdfDocumentWriter, PillowRenderSurface

SVG_SQUARE = (
    '<svg xmlns="http://www.w3.org/2000/svg" width="40" height="20">'
    '<rect width="40" height="20" fill="red"/></svg>'
)


@pytest.fixture
def asset_dir(config) -> Path:
    """素材目录：背景、封面、SVG、损坏文件"""
    directory = config.assets.asset_dir
    directory.mkdir(parents=True, exist_ok=True)
    Image.new("RGBA", (30, 40), (200, 200, 255, 255)).save(directory / "backgroundwithtabs.png")
    Image.new("RGBA", (30, 40), (0, 128, 0, 255)).save(directory / "standardcover.png")
    (directory / "Grid.svg").write_text(SVG_SQUARE, encoding="utf-8")
    (directory / "broken.png").write_bytes(b"not an image")
    return directory


@pytest.fixture
def assets(asset_dir) -> FileAssetStore:
    return FileAssetStore(asset_dir)


class TestFileAssetStore:
    """素材库测试"""

    def test_load_png_ready(self, assets):
        """测试位图加载"""
        loaded = assets.load("/standardcover.png")
        assert loaded.ready
        assert loaded.image.mode == "RGBA"
        assert loaded.image.size == (30, 40)

    def test_load_svg_ready(self, assets):
        """测试SVG栅格化（2倍）"""
        loaded = assets.load("Grid.svg")
        assert loaded.status == AssetStatus.READY
        width, height = loaded.image.size
        assert width == 2 * height

    def test_load_missing_failed(self, assets):
        """测试缺失素材"""
        assert assets.load("nope.png").status == AssetStatus.FAILED
        assert not assets.exists("")

    def test_load_corrupt_failed(self, assets):
        """测试损坏素材"""
        loaded = assets.load("broken.png")
        assert loaded.status == AssetStatus.FAILED
        assert loaded.image is None

    def test_open_corrupt_raises(self, assets, asset_dir):
        """测试解码失败统一为 AssetError"""
        with pytest.raises(AssetError):
            assets._open(asset_dir / "broken.png")

    def test_cache(self, assets):
        """测试结果缓存"""
        assert assets.load("Grid.svg") is assets.load("Grid.svg")
        assets.clear_cache()
        assert assets.load("Grid.svg").ready


class TestPillowRenderSurface:
    """渲染面测试"""

    def test_draw_list_order(self):
        """测试绘制顺序：背景在最底层"""
        page = Page(id="p", background="bg.png")
        items = list(IRenderSurface.draw_list(page))
        assert items[0].asset_ref == "bg.png"

    def test_capture_before_show(self, assets):
        """测试未绘制时截取报错"""
        with PillowRenderSurface(assets, 60, 80) as surface:
            with pytest.raises(CaptureError):
                surface.capture(1.0, "JPEG", 85)

    def test_render_and_capture(self, assets):
        """测试绘制并按像素密度截取"""
        page = Page(id="p", background="backgroundwithtabs.png")
        with PillowRenderSurface(assets, 60, 80) as surface:
            surface.show(page)
            assert surface.wait_until_stable(5.0)
            data = surface.capture(1.5, "JPEG", 85)

        with Image.open(io.BytesIO(data)) as im:
            assert im.format == "JPEG"
            assert im.size == (90, 120)

    def test_failed_asset_skipped(self, assets, session):
        """测试素材失败的块不绘制（其余照常）"""
        session.add_block("broken.png")
        session.add_block("standardcover.png")
        with PillowRenderSurface(assets, 60, 80) as surface:
            frame = surface.render_page(session.document.current_page)
        assert frame.size == (60, 80)

    def test_locked_opacity(self, assets):
        """测试锁定块半透明叠加"""
        from planner_studio.models import Block

        page = Page(
            id="p",
            blocks=[Block(id="b", asset_ref="standardcover.png", width=60, height=80, locked=True)],
        )
        with PillowRenderSurface(assets, 60, 80, locked_opacity=0.5) as surface:
            frame = surface.render_page(page)
        r, g, b = frame.getpixel((30, 40))
        assert r > 100 and g > 128


class TestPdfDocumentWriter:
    """PDF写入器测试"""

    def _jpeg(self) -> bytes:
        buf = io.BytesIO()
        Image.new("RGB", (10, 10), "white").save(buf, format="JPEG")
        return buf.getvalue()

    def test_writer_links_roundtrip(self, temp_dir):
        """测试保存后链接目标正确（允许指向后续页）"""
        writer = PdfDocumentWriter()
        for _ in range(2):
            writer.add_page(100, 200)
            writer.add_page_image(self._jpeg(), 0, 0, 100, 200)
        writer.add_link(10, 10, 20, 20, 1)
        path = writer.save(temp_dir / "sub" / "w.pdf")
        writer.close()

        with fitz.open(str(path)) as doc:
            assert len(doc) == 2
            links = doc[1].get_links()
            assert [link["page"] for link in links] == [0]

    def test_remove_last_page(self, temp_dir):
        """测试回滚后页数与链接同步"""
        writer = PdfDocumentWriter()
        writer.add_page(100, 200)
        writer.add_page(100, 200)
        writer.add_link(0, 0, 10, 10, 1)
        writer.remove_last_page()
        assert writer.page_count == 1
        assert writer.deferred_links == []
        writer.close()

    def test_out_of_range_link_skipped(self, temp_dir):
        """测试越界目标不写入"""
        writer = PdfDocumentWriter()
        writer.add_page(100, 200)
        writer.add_link(0, 0, 10, 10, 5)
        assert writer.apply_deferred_links() == 0
        writer.close()


class TestEndToEnd:
    """端到端导出（真实渲染 + 真实PDF）"""

    def test_cover_page_export(self, config, session, assets, temp_dir):
        """测试封面块锁定铺满，导出1页12个链接均指向第1页"""
        config.export.pixel_ratio = 0.25
        block = session.add_block("standardcover.png")
        assert block.locked
        assert block.bounds == (0, 0, 1536, 2048)

        surface = PillowRenderSurface(
            assets, config.canvas.width, config.canvas.height, config.assets.locked_opacity
        )
        with surface:
            executor = ExportExecutor(config, surface)
            out = executor.execute(
                session.snapshot(), ExportJob(job_id="e2e-job-0001"), output_path=temp_dir / "e2e.pdf"
            )

        with fitz.open(str(out)) as doc:
            assert len(doc) == 1
            assert doc[0].rect.width == 1536
            links = doc[0].get_links()
            assert len(links) == 12
            assert {link["page"] for link in links} == {0}
