"""
运行期配置 - 读取 config/planner_runtime.yaml

职责：
- 加载画布/导出/重试/素材/日志等运行参数
- 提供环境变量覆盖机制（PLANNER_ 前缀）
- 类型安全的配置访问
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

DEFAULT_RUNTIME_PATH = Path("config/planner_runtime.yaml")


class CanvasConfig(BaseModel):
    """画布配置（页面坐标单位 = 导出PDF的pt）"""

    width: int = 1536
    height: int = 2048


class ExportConfig(BaseModel):
    """导出配置"""

    pixel_ratio: float = 1.5
    image_format: str = "JPEG"
    jpeg_quality: int = Field(85, ge=1, le=100)
    file_name: str = "Therapist_Planner_2026.pdf"
    output_dir: Path = Path("output")
    render_settle_timeout_sec: float = 5.0
    fuzzy_month_match: bool = True


class RetryConfig(BaseModel):
    """重试配置"""

    max_page_retries: int = 1


class AssetsConfig(BaseModel):
    """素材配置"""

    asset_dir: Path = Path("public")
    default_background: str = "backgroundwithtabs.png"
    locked_opacity: float = 0.9


class EditorConfig(BaseModel):
    """编辑器配置"""

    start_day: str = "sunday"
    first_page_name: str = "Planner Start"


class LoggingConfig(BaseModel):
    """日志配置"""

    log_level: str = "INFO"
    log_to_file: bool = False
    log_file: Path = Path("logs/planner_studio.log")


class StudioConfig(BaseSettings):
    """运行期配置（支持环境变量覆盖）"""

    # 布局表路径（为空则使用内置默认布局）
    layout_path: Path | None = None

    # 各子配置
    canvas: CanvasConfig = Field(default_factory=CanvasConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    retries: RetryConfig = Field(default_factory=RetryConfig)
    assets: AssetsConfig = Field(default_factory=AssetsConfig)
    editor: EditorConfig = Field(default_factory=EditorConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {
        "env_prefix": "PLANNER_",
        "env_nested_delimiter": "__",
        "arbitrary_types_allowed": True,
    }

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> StudioConfig:
        """从YAML文件加载配置"""
        path = Path(yaml_path)
        if not path.exists():
            return cls()

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        runtime_opts = data.get("runtime_options", {})

        config = cls(
            layout_path=runtime_opts.get("layout_path"),
            canvas=CanvasConfig(**cls._extract(runtime_opts, "canvas")),
            export=ExportConfig(**cls._extract(runtime_opts, "export")),
            retries=RetryConfig(**cls._extract(runtime_opts, "retries")),
            assets=AssetsConfig(**cls._extract(runtime_opts, "assets")),
            editor=EditorConfig(**cls._extract(runtime_opts, "editor")),
            logging=LoggingConfig(**cls._extract(runtime_opts, "logging")),
        )

        config._resolve_paths(base_dir=path.parent)
        return config

    @staticmethod
    def _extract(data: dict[str, Any], key: str) -> dict[str, Any]:
        """提取并展平配置"""
        section = data.get(key) or {}
        result = {}
        for k, v in section.items():
            if isinstance(v, dict) and "default" in v:
                result[k] = v["default"]
            elif not isinstance(v, dict):
                result[k] = v
        return result

    def _resolve_paths(self, base_dir: Path) -> None:
        """解析相对路径配置为绝对路径（基于配置文件所在目录）"""
        if not self.assets.asset_dir.is_absolute():
            self.assets.asset_dir = (base_dir / self.assets.asset_dir).resolve()
        if not self.export.output_dir.is_absolute():
            self.export.output_dir = (base_dir / self.export.output_dir).resolve()
        if not self.logging.log_file.is_absolute():
            self.logging.log_file = (base_dir / self.logging.log_file).resolve()
        if self.layout_path and not self.layout_path.is_absolute():
            self.layout_path = (base_dir / self.layout_path).resolve()

    def get_output_path(self) -> Path:
        """获取导出产物路径"""
        return self.export.output_dir / self.export.file_name


# 全局配置实例
_config: StudioConfig | None = None


def get_config() -> StudioConfig:
    """获取全局配置（惰性加载）"""
    global _config
    if _config is None:
        _config = StudioConfig.from_yaml(DEFAULT_RUNTIME_PATH)
    return _config


def reload_config(yaml_path: str | Path | None = None) -> StudioConfig:
    """重新加载配置"""
    global _config
    path = yaml_path or DEFAULT_RUNTIME_PATH
    _config = StudioConfig.from_yaml(path)
    return _config
