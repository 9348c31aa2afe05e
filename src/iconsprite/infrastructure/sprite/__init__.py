# 🧩 iconsprite/infrastructure/sprite/__init__.py
"""🧩 Пакування, растрове компонування та збірка SVG-спрайтів."""

from .packer import calculate_dimensions, check_overlaps, find_overlaps, pack, pack_with_positions
from .png_compositor import (
    CompositeOptions,
    CompositeResult,
    composite,
    composite_retina_pair,
    composite_sprite_sheet,
)
from .svg_assembler import SvgAssembleOptions, SvgSpriteAssembler, generate_preview
from .svg_optimizer import ScourSvgOptimizer

__all__ = [
    "pack",
    "pack_with_positions",
    "calculate_dimensions",
    "find_overlaps",
    "check_overlaps",
    "CompositeOptions",
    "CompositeResult",
    "composite",
    "composite_sprite_sheet",
    "composite_retina_pair",
    "SvgAssembleOptions",
    "SvgSpriteAssembler",
    "generate_preview",
    "ScourSvgOptimizer",
]
