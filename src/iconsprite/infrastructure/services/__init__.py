# 🏛️ iconsprite/infrastructure/services/__init__.py
"""🏛️ Сервіси верхнього рівня."""

from .sprite_pipeline_service import SpritePipelineService

__all__ = ["SpritePipelineService"]
