# 📐 iconsprite/infrastructure/sprite/viewbox.py
"""
📐 Робота з атрибутом `viewBox` та внутрішнім вмістом SVG.

🔹 `extract_view_box()` — перший `viewBox` у розмітці або "0 0 w h" з розмірів вузла.
🔹 `parse_view_box()` / `validate_view_box()` — рівно 4 скінченні числа.
🔹 `extract_svg_inner_content()` — вміст кореневого `<svg>` без XML-прологу.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import math																# 🔢 Перевірка скінченності
import re																# 🔎 Регулярні вирази
from typing import Optional, Tuple										# 🧰 Типізація

# 🧩 Внутрішні модулі проєкту
from iconsprite.shared.utils.rounding import round_half_up

ViewBox = Tuple[float, float, float, float]

_VIEWBOX_RE = re.compile(r"""\bviewBox=["']([^"']+)["']""", re.IGNORECASE)
_SEPARATOR_RE = re.compile(r"[\s,]+")
_XML_PROLOG_RE = re.compile(r"<\?xml[^>]*\?>\s*")
_SVG_BODY_RE = re.compile(r"<svg\b[^>]*>([\s\S]*)</svg>", re.IGNORECASE)
_SVG_OPEN_RE = re.compile(r"<svg\b[^>]*>", re.IGNORECASE)
_DIMENSION_RE = r"""(?<![\w-]){name}=["']\s*([0-9.+\-eE]+)(?:px)?\s*["']"""


def create_view_box(width: float, height: float, min_x: float = 0, min_y: float = 0) -> str:
    """Будує рядок viewBox з округленими розмірами."""
    return f"{_fmt(min_x)} {_fmt(min_y)} {round_half_up(width)} {round_half_up(height)}"


def extract_view_box(svg: str, width: float, height: float) -> str:
    """Повертає перший знайдений `viewBox` або "0 0 w h" з округленням половин угору."""
    match = _VIEWBOX_RE.search(svg)
    if match:
        return match.group(1).strip()
    return create_view_box(width, height)


def parse_view_box(view_box: str) -> ViewBox:
    """
    Розбирає viewBox у 4 числа.

    Raises:
        ValueError: Не рівно 4 токени або будь-яке значення не є скінченним числом.
    """
    tokens = [token for token in _SEPARATOR_RE.split(view_box.strip()) if token]
    if len(tokens) != 4:
        raise ValueError(f"viewBox must have exactly 4 numbers, got {len(tokens)}: {view_box!r}")
    values = tuple(float(token) for token in tokens)
    if not all(math.isfinite(value) for value in values):
        raise ValueError(f"viewBox contains non-finite values: {view_box!r}")
    return values  # type: ignore[return-value]


def validate_view_box(view_box: Optional[str]) -> bool:
    if not view_box:
        return False
    try:
        parse_view_box(view_box)
    except ValueError:
        return False
    return True


def extract_svg_inner_content(svg: str) -> str:
    """Вміст між `<svg ...>` та `</svg>`; якщо кореня немає — весь текст без прологу."""
    cleaned = _XML_PROLOG_RE.sub("", svg)
    match = _SVG_BODY_RE.search(cleaned)
    if match:
        return match.group(1).strip()
    return cleaned.strip()


def extract_svg_dimensions(svg: str) -> Tuple[Optional[float], Optional[float]]:
    """`width`/`height` кореневого `<svg>` (px або без одиниць); відсутні → None."""
    opening = _SVG_OPEN_RE.search(svg)
    if not opening:
        return None, None
    tag = opening.group(0)
    return _dimension(tag, "width"), _dimension(tag, "height")


def _dimension(tag: str, name: str) -> Optional[float]:
    match = re.search(_DIMENSION_RE.format(name=name), tag)
    if not match:
        return None
    try:
        value = float(match.group(1))
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def _fmt(value: float) -> str:
    return f"{value:g}"


__all__ = [
    "ViewBox",
    "create_view_box",
    "extract_view_box",
    "parse_view_box",
    "validate_view_box",
    "extract_svg_inner_content",
    "extract_svg_dimensions",
]
