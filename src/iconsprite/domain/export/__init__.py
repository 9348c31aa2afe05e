# 📦 iconsprite/domain/export/__init__.py
"""📦 Сутності та контракти експорту."""

from .entities import (
    Bounds,
    CombinedExportResult,
    ExportFailure,
    ExportFormat,
    ExportResult,
    ExportStats,
    ParsedIconNode,
)
from .interfaces import ExportUrlsResponse, IDesignApiClient, SvgExportOptions

__all__ = [
    "Bounds",
    "CombinedExportResult",
    "ExportFailure",
    "ExportFormat",
    "ExportResult",
    "ExportStats",
    "ParsedIconNode",
    "ExportUrlsResponse",
    "IDesignApiClient",
    "SvgExportOptions",
]
