"""
配置层 - 加载运行期配置与画布布局表

职责：
- 加载 config/planner_runtime.yaml（运行期参数）
- 加载画布布局表（网格/标签栏/月份偏移/尺寸策略）
- 提供类型安全的配置访问接口与日志初始化
"""

from .layout_spec import MONTH_CODES, LayoutLoader, LayoutSpec, SizeRule, load_layout
from .logging_config import setup_logging
from .runtime_config import StudioConfig, get_config, reload_config

__all__ = [
    "MONTH_CODES",
    "LayoutLoader",
    "LayoutSpec",
    "SizeRule",
    "load_layout",
    "setup_logging",
    "StudioConfig",
    "get_config",
    "reload_config",
]
