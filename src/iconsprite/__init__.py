# 🧩 iconsprite/__init__.py
"""
🧩 iconsprite — експорт іконок з Figma та збірка PNG/SVG спрайтів.

🔹 `SpritePipelineService` — повний прогін «експорт → пакування → PNG → SVG».
🔹 `FigmaApiClient` — клієнт дизайн-API з ретраями та обробкою 429.
🔹 `PipelineSettings.from_config(ConfigService(...))` — налаштування з YAML/JSON/.env.
"""

from __future__ import annotations

__version__ = "0.1.0"

from iconsprite.config import ConfigService, PipelineSettings
from iconsprite.infrastructure.figma import FigmaApiClient
from iconsprite.infrastructure.services import SpritePipelineService

__all__ = [
    "__version__",
    "ConfigService",
    "PipelineSettings",
    "FigmaApiClient",
    "SpritePipelineService",
]
