"""
配置加载单元测试

每个模块完成后必须运行：pytest backend/tests/unit/test_config.py -v
"""

from pathlib import Path

import pytest

from planner_studio.config import MONTH_CODES, LayoutLoader, StudioConfig, load_layout, setup_logging


class TestStudioConfig:
    """运行期配置测试"""

    def test_default_config(self):
        """测试默认配置"""
        config = StudioConfig()
        assert (config.canvas.width, config.canvas.height) == (1536, 2048)
        assert config.export.pixel_ratio == 1.5
        assert config.export.jpeg_quality == 85
        assert config.export.file_name == "Therapist_Planner_2026.pdf"
        assert config.retries.max_page_retries == 1
        assert config.editor.start_day == "sunday"

    def test_from_yaml_missing_file(self, temp_dir: Path):
        """测试配置文件不存在时使用默认值"""
        config = StudioConfig.from_yaml(temp_dir / "missing.yaml")
        assert config.export.pixel_ratio == 1.5

    def test_from_yaml(self, temp_dir: Path):
        """测试YAML加载（支持 default 包装）"""
        path = temp_dir / "planner_runtime.yaml"
        path.write_text(
            "runtime_options:\n"
            "  export:\n"
            "    jpeg_quality: {default: 70}\n"
            "    output_dir: out\n"
            "  editor:\n"
            "    start_day: monday\n"
            "  assets:\n"
            "    asset_dir: public\n",
            encoding="utf-8",
        )
        config = StudioConfig.from_yaml(path)
        assert config.export.jpeg_quality == 70
        assert config.editor.start_day == "monday"
        assert config.export.output_dir == (temp_dir / "out").resolve()
        assert config.assets.asset_dir == (temp_dir / "public").resolve()

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch):
        """测试环境变量覆盖"""
        monkeypatch.setenv("PLANNER_EXPORT__JPEG_QUALITY", "60")
        config = StudioConfig()
        assert config.export.jpeg_quality == 60

    def test_get_output_path(self, config: StudioConfig):
        """测试产物路径"""
        assert config.get_output_path().name == "Therapist_Planner_2026.pdf"


class TestLayoutSpec:
    """布局表测试"""

    def test_default_offsets(self):
        """测试内置月份偏移表"""
        layout = load_layout()
        assert layout.get_month_offset("JAN", "sunday") == 4
        assert layout.get_month_offset("JAN", "monday") == 3
        assert layout.get_month_offset("mar", "SUNDAY") == 0
        assert all(0 <= layout.get_month_offset(m, "monday") < 7 for m in MONTH_CODES)

    def test_unknown_start_day(self):
        """测试未知周起始日"""
        with pytest.raises(KeyError):
            load_layout().get_month_offset("JAN", "friday")

    def test_tab_rect(self):
        """测试月份标签矩形"""
        layout = load_layout()
        assert layout.tab_rect(0) == (1477, 166, 59, 125)
        assert layout.tab_rect(11) == (1477, 166 + 11 * 125, 59, 125)

    def test_grid_cell_rect(self):
        """测试日历格矩形（7列）"""
        layout = load_layout()
        assert layout.grid_cell_rect(0) == (253, 330, 168, 200)
        assert layout.grid_cell_rect(4) == (253 + 4 * 168, 330, 168, 200)
        assert layout.grid_cell_rect(9) == (253 + 2 * 168, 330 + 200, 168, 200)

    def test_load_yaml_partial_sizing(self, temp_dir: Path):
        """测试YAML部分覆盖尺寸档位"""
        path = temp_dir / "layout.yaml"
        path.write_text(
            "grid:\n"
            "  start_x: 100\n"
            "sizing:\n"
            "  square: {x: 1, y: 2, width: 300, height: 300}\n",
            encoding="utf-8",
        )
        layout = LayoutLoader.reload(path)
        assert layout.grid.start_x == 100
        assert layout.grid.start_y == 330
        assert layout.get_size_rule("square").width == 300
        assert layout.get_size_rule("cover").locked

    def test_load_yaml_partial_offsets(self, temp_dir: Path):
        """测试YAML只覆盖部分偏移表：其余起始日/月份沿用默认"""
        path = temp_dir / "layout_offsets.yaml"
        path.write_text(
            "month_offsets:\n"
            "  sunday: {jan: 5}\n",
            encoding="utf-8",
        )
        layout = LayoutLoader.reload(path)
        assert layout.get_month_offset("JAN", "sunday") == 5
        assert layout.get_month_offset("FEB", "sunday") == 0
        assert layout.get_month_offset("JAN", "monday") == 3
        assert sorted(layout.month_offsets) == ["monday", "sunday"]

    def test_load_missing_layout(self, temp_dir: Path):
        """测试布局文件不存在"""
        with pytest.raises(FileNotFoundError):
            LayoutLoader.load(temp_dir / "nope.yaml")


class TestLogging:
    """日志配置测试"""

    def test_setup_logging_idempotent(self, config: StudioConfig):
        """测试重复初始化不重复添加 handler"""
        logger = setup_logging(config, name="planner_studio.test_logging")
        count = len(logger.handlers)
        setup_logging(config, name="planner_studio.test_logging")
        assert len(logger.handlers) == count
