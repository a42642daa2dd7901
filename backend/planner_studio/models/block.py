"""
块模型 - 页面上定位、可缩放、可锁定的素材引用

几何约束：
- width/height 始终 >= MIN_BLOCK_SIZE（过小的值被钳制，不报错）
- 坐标有限，原点不为负
"""

from __future__ import annotations

import math

from pydantic import BaseModel, Field, field_validator

MIN_BLOCK_SIZE = 5.0


class Block(BaseModel):
    """块实体（值语义：修改总是返回新对象）"""
    id: str = Field(..., description="块唯一ID（页内唯一）")
    asset_ref: str = Field(..., description="素材引用（文件名，不含字节）")
    x: float = 0.0
    y: float = 0.0
    width: float = MIN_BLOCK_SIZE
    height: float = MIN_BLOCK_SIZE
    locked: bool = False

    model_config = {"frozen": True}

    @field_validator("asset_ref")
    @classmethod
    def _strip_leading_slash(cls, v: str) -> str:
        return v.lstrip("/")

    @field_validator("x", "y")
    @classmethod
    def _clamp_origin(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError(f"坐标必须为有限值: {v}")
        return max(0.0, v)

    @field_validator("width", "height")
    @classmethod
    def _clamp_size(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError(f"尺寸必须为有限值: {v}")
        return max(MIN_BLOCK_SIZE, v)

    @property
    def bounds(self) -> tuple[float, float, float, float]:
        return (self.x, self.y, self.width, self.height)

    def with_geometry(self, x: float, y: float, width: float, height: float) -> Block:
        """整体替换几何（经校验钳制）"""
        return Block(
            id=self.id,
            asset_ref=self.asset_ref,
            x=x,
            y=y,
            width=width,
            height=height,
            locked=self.locked,
        )

    def with_locked(self, locked: bool) -> Block:
        return self.model_copy(update={"locked": locked})

    def clone(self, new_id: str) -> Block:
        """结构化克隆：值相同、身份独立"""
        return self.model_copy(update={"id": new_id})

    def same_content(self, other: Block) -> bool:
        """除ID外值相等"""
        return self.model_dump(exclude={"id"}) == other.model_dump(exclude={"id"})
