# 📦 iconsprite/domain/export/entities.py
"""
📦 Доменні сутності експорту іконок з дизайн-API.

🔹 `ParsedIconNode` — вузол дизайну, який треба експортувати (вхід від парсера).
🔹 `ExportFailure` — запис про невдачу (дані, а не виняток).
🔹 `ExportResult` / `CombinedExportResult` — результат одного або обох форматів.
"""

from __future__ import annotations

# 🔠 Системні імпорти
from dataclasses import dataclass, field								# 🧱 Незмінні DTO
from enum import Enum													# 🏷️ Формати
from typing import TYPE_CHECKING, Dict, Generic, Optional, Tuple, TypeVar	# 🧰 Типізація

if TYPE_CHECKING:														# pragma: no cover
    from iconsprite.shared.errors import SpriteError

ItemT = TypeVar("ItemT")


class ExportFormat(str, Enum):
    """🏷️ Формат експорту в дизайн-API."""

    PNG = "png"
    SVG = "svg"


@dataclass(frozen=True, slots=True)
class Bounds:
    """📐 Абсолютні межі вузла."""

    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True, slots=True)
class ParsedIconNode:
    """🎨 Іконка для експорту. Кілька іконок можуть мати спільний `export_id`."""

    node_id: str														# 🆔 Вузол, знайдений парсером
    export_id: str														# 📤 Вузол, який реально експортується
    name: str															# 🏷️ Людська назва
    type: str															# 🧩 COMPONENT / INSTANCE / FRAME ...
    bounds: Bounds														# 📐 Розміри
    visible: bool = True


@dataclass(frozen=True, slots=True)
class ExportFailure:
    """🚫 Невдалий експорт однієї іконки (batch-, URL- або download-рівень)."""

    format: ExportFormat
    export_id: str
    icon_ids: Tuple[str, ...]
    node_ids: Tuple[str, ...]
    reason: str


@dataclass(frozen=True, slots=True)
class ExportStats:
    """📊 Підсумок експорту. `total` — кількість іконок у метаданих."""

    total: int
    successful: int
    failed: int
    duration_ms: float


@dataclass(frozen=True)
class ExportResult(Generic[ItemT]):
    """📦 Результат експорту одного формату."""

    items: Tuple[ItemT, ...]
    failures: Tuple[ExportFailure, ...]
    stats: ExportStats


@dataclass(frozen=True)
class CombinedExportResult:
    """🔀 Обидва формати; помилка одного не блокує інший."""

    raster: Optional[ExportResult] = None
    vector: Optional[ExportResult] = None
    errors: Dict[ExportFormat, "SpriteError"] = field(default_factory=dict)

    @property
    def failures(self) -> Tuple[ExportFailure, ...]:
        """Невдачі обох форматів, включно з форматом, що провалився цілком."""
        collected: Tuple[ExportFailure, ...] = ()
        for fmt, part in ((ExportFormat.PNG, self.raster), (ExportFormat.SVG, self.vector)):
            if part is not None:
                collected += part.failures
            else:
                collected += tuple(getattr(self.errors.get(fmt), "failures", ()))
        return collected


__all__ = [
    "ExportFormat",
    "Bounds",
    "ParsedIconNode",
    "ExportFailure",
    "ExportStats",
    "ExportResult",
    "CombinedExportResult",
]
