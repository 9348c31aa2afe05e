# 🧮 iconsprite/infrastructure/sprite/packer.py
"""
🧮 Детерміноване пакування іконок у спрайт-аркуш.

🔹 Вхід сортується за id, тому результат не залежить від порядку вхідного списку.
🔹 Кожен бокс роздувається на `padding` з усіх боків перед пакуванням.
🔹 `pack_with_positions()` повертає позицію КОНТЕНТУ (бокс + padding).
🔹 `check_overlaps()` — пост-перевірка з налаштовуваною реакцією (ignore / warn / error).
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging															# 🧾 Попередження про перекриття
from typing import List, Sequence, Tuple								# 🧰 Типізація

# 🧩 Внутрішні модулі проєкту
from iconsprite.domain.sprite.entities import (
    IconData,
    OverlapSeverity,
    PackedIcon,
    PackingBox,
    PackingResult,
    SpriteDimensions,
)
from iconsprite.infrastructure.sprite.potpack import potpack
from iconsprite.shared.errors import PackingContext, PackingError
from iconsprite.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.packer")						# 🧾 Локальний логер модуля

DEFAULT_PADDING = 2														# 📏 Відступ навколо кожної іконки


def _sorted(icons: Sequence[IconData]) -> List[IconData]:
    return sorted(icons, key=lambda icon: (icon.id, icon.width, icon.height))


def _validate(icons: Sequence[IconData], padding: int) -> None:
    if not icons:
        raise PackingError("Cannot pack an empty icon list", context=PackingContext(icon_count=0))
    if padding < 0:
        raise PackingError(
            f"Padding must be >= 0, got {padding}",
            context=PackingContext(icon_count=len(icons)),
        )
    degenerate = tuple(icon.id for icon in icons if icon.width <= 0 or icon.height <= 0)
    if degenerate:
        raise PackingError(
            f"Icons with non-positive size: {', '.join(degenerate[:10])}",
            context=PackingContext(icon_count=len(icons), icon_ids=degenerate),
        )


def pack(icons: Sequence[IconData], padding: int = DEFAULT_PADDING) -> PackingResult:
    """
    Пакує іконки з відступом `padding`.

    Args:
        icons: Іконки з розмірами; порядок не має значення.
        padding: Відступ з кожного боку.

    Returns:
        PackingResult: Розміри аркуша, заповненість і бокси (з padding) у порядку id.

    Raises:
        PackingError: Порожній вхід, відʼємний padding, нульові розміри або нульовий аркуш.
    """
    _validate(icons, padding)
    ordered = _sorted(icons)
    sizes = [(icon.width + 2 * padding, icon.height + 2 * padding) for icon in ordered]
    packed = potpack(sizes)
    if packed.width <= 0 or packed.height <= 0:
        raise PackingError(
            f"Packing produced an empty sheet ({packed.width}x{packed.height})",
            context=PackingContext(icon_count=len(icons)),
        )
    boxes = tuple(
        PackingBox(icon_id=icon.id, x=x, y=y, w=w, h=h)
        for icon, (x, y), (w, h) in zip(ordered, packed.placements, sizes)
    )
    logger.debug(
        "📦 Packed %d icons into %gx%g (fill=%.1f%%)",
        len(boxes), packed.width, packed.height, packed.fill * 100,
    )
    return PackingResult(width=packed.width, height=packed.height, fill=packed.fill, boxes=boxes)


def pack_with_positions(icons: Sequence[IconData], padding: int = DEFAULT_PADDING) -> List[PackedIcon]:
    """Іконки з позицією контенту `(box.x + padding, box.y + padding)`, упорядковані за id."""
    result = pack(icons, padding)
    ordered = _sorted(icons)
    return [
        PackedIcon.place(icon, box.x + padding, box.y + padding)
        for icon, box in zip(ordered, result.boxes)
    ]


def calculate_dimensions(icons: Sequence[IconData], padding: int = DEFAULT_PADDING) -> SpriteDimensions:
    """Лише розміри аркуша; порожній вхід → (0, 0, 0.0)."""
    if not icons:
        return SpriteDimensions(width=0, height=0, fill=0.0)
    result = pack(icons, padding)
    return SpriteDimensions(width=result.width, height=result.height, fill=result.fill)


# ================================
# 🔍 ПЕРЕВІРКА ПЕРЕКРИТТІВ
# ================================
def find_overlaps(packed: Sequence[PackedIcon], padding: int = DEFAULT_PADDING) -> List[Tuple[str, str]]:
    """Пари id, чиї бокси з padding перетинаються (дотик краями не рахується)."""
    rects = [
        (icon.id, icon.x - padding, icon.y - padding, icon.width + 2 * padding, icon.height + 2 * padding)
        for icon in packed
    ]
    overlaps: List[Tuple[str, str]] = []
    for i, (a_id, ax, ay, aw, ah) in enumerate(rects):
        for b_id, bx, by, bw, bh in rects[i + 1:]:
            if ax < bx + bw and bx < ax + aw and ay < by + bh and by < ay + ah:
                overlaps.append((a_id, b_id))
    return overlaps


def check_overlaps(
    packed: Sequence[PackedIcon],
    padding: int = DEFAULT_PADDING,
    severity: OverlapSeverity = OverlapSeverity.WARN,
) -> List[Tuple[str, str]]:
    """
    Перевіряє перекриття й реагує згідно `severity`.

    Returns:
        List[Tuple[str, str]]: Знайдені пари (порожній список для IGNORE без перевірки).

    Raises:
        PackingError: `severity == ERROR` і є перекриття.
    """
    if severity is OverlapSeverity.IGNORE:
        return []
    overlaps = find_overlaps(packed, padding)
    if not overlaps:
        return overlaps
    pairs = ", ".join(f"{a}↔{b}" for a, b in overlaps[:10])
    if severity is OverlapSeverity.ERROR:
        raise PackingError(
            f"Detected {len(overlaps)} overlapping icon pair(s): {pairs}",
            context=PackingContext(
                icon_count=len(packed),
                icon_ids=tuple(sorted({icon_id for pair in overlaps for icon_id in pair})),
            ),
        )
    logger.warning("⚠️ Detected %d overlapping icon pair(s): %s", len(overlaps), pairs)
    return overlaps


__all__ = [
    "DEFAULT_PADDING",
    "pack",
    "pack_with_positions",
    "calculate_dimensions",
    "find_overlaps",
    "check_overlaps",
]
