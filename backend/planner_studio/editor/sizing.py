"""
尺寸策略 - 按素材引用与尺寸档位决定新块的初始几何

档位：cover / full / half / quarter / eighth / week_header / month_header / square
未显式指定档位时按素材名推断：
- 含 cover                → cover（整页、锁定；尺寸取画布配置）
- 含 header 且含 start    → week_header（周起始条）
- 含 header               → month_header（月份徽标）
- 其他                    → square（默认方块）
"""

from __future__ import annotations

from enum import Enum

from ..config import LayoutSpec, SizeRule


class SizeProfile(str, Enum):
    """尺寸档位"""
    COVER = "cover"
    FULL = "full"
    HALF = "half"
    QUARTER = "quarter"
    EIGHTH = "eighth"
    WEEK_HEADER = "week_header"
    MONTH_HEADER = "month_header"
    SQUARE = "square"


class SizingPolicy:
    """尺寸策略（数值来自布局表）"""

    def __init__(self, layout: LayoutSpec, page_size: tuple[float, float] | None = None):
        self.layout = layout
        self.page_size = page_size

    @staticmethod
    def infer_profile(asset_ref: str) -> SizeProfile:
        """按素材名推断档位"""
        name = asset_ref.lower()
        if "cover" in name:
            return SizeProfile.COVER
        if "header" in name:
            if "start" in name:
                return SizeProfile.WEEK_HEADER
            return SizeProfile.MONTH_HEADER
        return SizeProfile.SQUARE

    def resolve(self, asset_ref: str, profile: SizeProfile | str | None = None) -> SizeRule:
        """返回新块的几何与锁定状态"""
        profile = SizeProfile(profile) if profile is not None else self.infer_profile(asset_ref)
        rule = self.layout.get_size_rule(profile.value)
        # 封面始终铺满当前画布
        if profile == SizeProfile.COVER and self.page_size is not None:
            width, height = self.page_size
            rule = rule.model_copy(update={"x": 0, "y": 0, "width": width, "height": height})
        return rule

    def template_rule(self) -> SizeRule:
        """整页模板（锁定）"""
        return self.layout.get_size_rule("template")
