# 🧩 iconsprite/domain/sprite/__init__.py
"""🧩 Сутності та контракти збірки спрайтів."""

from .entities import (
    IconData,
    OverlapSeverity,
    PackedIcon,
    PackingBox,
    PackingResult,
    RasterSpritePair,
    SpriteBuildResult,
    SpriteDimensions,
    SpriteSheet,
    SvgIconData,
    SvgSpriteSheet,
)
from .interfaces import ISpriteOutputWriter, ISvgOptimizer

__all__ = [
    "IconData",
    "OverlapSeverity",
    "PackedIcon",
    "PackingBox",
    "PackingResult",
    "RasterSpritePair",
    "SpriteBuildResult",
    "SpriteDimensions",
    "SpriteSheet",
    "SvgIconData",
    "SvgSpriteSheet",
    "ISpriteOutputWriter",
    "ISvgOptimizer",
]
