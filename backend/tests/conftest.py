"""
pytest 配置与公共 fixtures

使用方式：
    def test_something(session, fake_surface):
        session.add_month_bundle("MAR")
"""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Generator

import pytest

from planner_studio.config import LayoutSpec, StudioConfig, load_layout
from planner_studio.editor import EditorSession, IdGenerator
from planner_studio.interfaces import CaptureError, IDocumentWriter, IRenderSurface
from planner_studio.models import ExportJob


# ============================================================================
# 配置 Fixtures
# ============================================================================

@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """临时目录"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def config(temp_dir: Path) -> StudioConfig:
    """运行期配置（输出/素材目录指向临时目录）"""
    cfg = StudioConfig()
    cfg.export.output_dir = temp_dir / "output"
    cfg.export.render_settle_timeout_sec = 0.5
    cfg.assets.asset_dir = temp_dir / "assets"
    return cfg


@pytest.fixture
def layout() -> LayoutSpec:
    """内置默认布局"""
    return load_layout()


# ============================================================================
# 编辑会话 Fixtures
# ============================================================================

@pytest.fixture
def ids() -> IdGenerator:
    return IdGenerator(session_tag="test")


@pytest.fixture
def session(config: StudioConfig, ids: IdGenerator) -> EditorSession:
    """单页起始会话"""
    return EditorSession(config, ids=ids)


# ============================================================================
# 导出协作者 Fakes
# ============================================================================

class FakeRenderSurface(IRenderSurface):
    """可注入失败的渲染面"""

    def __init__(self):
        self.shown: list = []
        self.settle_failures = 0
        self.capture_failures = 0
        self._current = None

    def show(self, page) -> None:
        self._current = page
        self.shown.append(page)

    def wait_until_stable(self, timeout: float) -> bool:
        if self.settle_failures > 0:
            self.settle_failures -= 1
            return False
        return True

    def capture(self, pixel_ratio: float, fmt: str, quality: int) -> bytes:
        if self.capture_failures > 0:
            self.capture_failures -= 1
            raise CaptureError("capture failed")
        return f"{self._current.id}:{pixel_ratio}:{fmt}:{quality}".encode()


class FakeWriter(IDocumentWriter):
    """内存写入器：记录页面、图像与链接"""

    def __init__(self):
        self.pages: list[dict] = []
        self.image_failures = 0
        self.saved_to: Path | None = None
        self.closed = False
        self.removed = 0

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def add_page(self, width: float, height: float) -> int:
        self.pages.append({"size": (width, height), "images": [], "links": []})
        return len(self.pages)

    def add_page_image(self, data: bytes, x: float, y: float, width: float, height: float) -> None:
        if self.image_failures > 0:
            self.image_failures -= 1
            raise RuntimeError("image insert failed")
        self.pages[-1]["images"].append((data, x, y, width, height))

    def add_link(self, x: float, y: float, width: float, height: float, dest_page: int) -> None:
        self.pages[-1]["links"].append((x, y, width, height, dest_page))

    def remove_last_page(self) -> None:
        self.pages.pop()
        self.removed += 1

    def save(self, path: Path) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"%PDF-fake")
        self.saved_to = path
        return path

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_surface() -> FakeRenderSurface:
    return FakeRenderSurface()


@pytest.fixture
def fake_writer() -> FakeWriter:
    return FakeWriter()


@pytest.fixture
def export_job() -> ExportJob:
    return ExportJob(job_id="00000000-test-job")
