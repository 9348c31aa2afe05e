# 🧩 iconsprite/domain/sprite/entities.py
"""
🧩 Доменні сутності спрайтів: іконки, пакування, готові аркуші.

🔹 `IconData` / `SvgIconData` — записи після експорту (один на icon id).
🔹 `PackingBox` / `PackingResult` / `PackedIcon` — результат детермінованого пакування.
🔹 `SpriteSheet`, `RasterSpritePair`, `SvgSpriteSheet`, `SpriteBuildResult` — артефакти.
"""

from __future__ import annotations

# 🔠 Системні імпорти
from dataclasses import dataclass, field								# 🧱 Незмінні DTO
from enum import Enum													# 🎚️ Рівні реакції на перекриття
from typing import TYPE_CHECKING, Dict, Optional, Tuple				# 🧰 Типізація

# 🧩 Внутрішні модулі проєкту
from iconsprite.domain.export.entities import ExportFailure, ExportFormat

if TYPE_CHECKING:														# pragma: no cover
    from iconsprite.shared.errors import SpriteError


# ================================
# 🖼️ ІКОНКИ
# ================================
@dataclass(frozen=True, slots=True)
class IconData:
    """🖼️ Растрова іконка. `buffer` спільний для всіх аліасів одного export id."""

    id: str
    name: str
    node_id: str
    width: float
    height: float
    buffer: bytes = field(repr=False)


@dataclass(frozen=True, slots=True)
class SvgIconData:
    """🧩 Векторна іконка; `view_box` — рівно 4 скінченні числа."""

    id: str
    content: str = field(repr=False)
    view_box: str
    width: float
    height: float


@dataclass(frozen=True, slots=True)
class PackedIcon:
    """📍 Іконка з позицією контенту (без padding) у аркуші."""

    id: str
    name: str
    node_id: str
    width: float
    height: float
    buffer: bytes = field(repr=False)
    x: float = 0
    y: float = 0

    @classmethod
    def place(cls, icon: IconData, x: float, y: float) -> "PackedIcon":
        return cls(
            id=icon.id,
            name=icon.name,
            node_id=icon.node_id,
            width=icon.width,
            height=icon.height,
            buffer=icon.buffer,
            x=x,
            y=y,
        )


# ================================
# 📦 ПАКУВАННЯ
# ================================
@dataclass(frozen=True, slots=True)
class PackingBox:
    """📦 Розміщений бокс (розміри з padding)."""

    icon_id: str
    x: float
    y: float
    w: float
    h: float


@dataclass(frozen=True, slots=True)
class PackingResult:
    width: float
    height: float
    fill: float
    boxes: Tuple[PackingBox, ...]


@dataclass(frozen=True, slots=True)
class SpriteDimensions:
    width: float
    height: float
    fill: float


class OverlapSeverity(str, Enum):
    """🎚️ Реакція на виявлене перекриття іконок."""

    IGNORE = "ignore"
    WARN = "warn"
    ERROR = "error"


# ================================
# 🗂️ АРКУШІ
# ================================
@dataclass(frozen=True, slots=True)
class SpriteSheet:
    """🗂️ Растровий аркуш: розміри, метадані іконок (у масштабі аркуша), хеш."""

    width: int
    height: int
    icons: Tuple[PackedIcon, ...]
    hash: str
    buffer: bytes = field(repr=False)
    scale: float = 1


@dataclass(frozen=True, slots=True)
class RasterSpritePair:
    standard: SpriteSheet
    retina: SpriteSheet


@dataclass(frozen=True, slots=True)
class SvgSpriteSheet:
    """🧩 `<symbol>`-аркуш; `warnings` — нефатальні проблеми збірки."""

    icons: Tuple[SvgIconData, ...]
    content: str = field(repr=False)
    hash: str
    width: float = 0
    height: float = 0
    warnings: Tuple[str, ...] = ()


@dataclass(frozen=True)
class SpriteBuildResult:
    """🏁 Підсумок пайплайна; відсутній артефакт = формат вимкнено або провалено."""

    standard: Optional[SpriteSheet] = None
    retina: Optional[SpriteSheet] = None
    vector: Optional[SvgSpriteSheet] = None
    preview: Optional[str] = None
    failures: Tuple[ExportFailure, ...] = ()
    errors: Dict[ExportFormat, "SpriteError"] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


__all__ = [
    "IconData",
    "SvgIconData",
    "PackedIcon",
    "PackingBox",
    "PackingResult",
    "SpriteDimensions",
    "OverlapSeverity",
    "SpriteSheet",
    "RasterSpritePair",
    "SvgSpriteSheet",
    "SpriteBuildResult",
]
