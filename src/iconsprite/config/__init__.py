# ⚙️ iconsprite/config/__init__.py
"""⚙️ Конфігурація: `ConfigService` (YAML/JSON/.env) та типізовані `PipelineSettings`."""

from .config_service import ConfigService
from .settings import (
    ApiSettings,
    ExportSettings,
    PipelineSettings,
    RasterSettings,
    VectorSettings,
)

__all__ = [
    "ConfigService",
    "ApiSettings",
    "ExportSettings",
    "PipelineSettings",
    "RasterSettings",
    "VectorSettings",
]
