# 🎨 iconsprite/infrastructure/figma/__init__.py
"""🎨 Клієнт Figma REST API."""

from .figma_client import TOKEN_HEADER, FigmaApiClient

__all__ = ["FigmaApiClient", "TOKEN_HEADER"]
