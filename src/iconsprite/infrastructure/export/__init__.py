# 📤 iconsprite/infrastructure/export/__init__.py
"""📤 Оркестратор експорту іконок."""

from .exporter import IconExporter, group_by_export_id, make_batches

__all__ = ["IconExporter", "group_by_export_id", "make_batches"]
