# 🧩 iconsprite/infrastructure/sprite/svg_assembler.py
"""
🧩 Збирач векторного спрайта з `<symbol>`-елементів.

🔹 Іконки сортуються за id — порядок символів у розмітці детермінований.
🔹 Кожен viewBox валідується (рівно 4 скінченні числа); помилка → `SpriteGenerationError`.
🔹 Квадратна сітка (`columns = ceil(sqrt(n))`) задає лише розміри зовнішнього `<svg>`.
🔹 Оптимізація — дві гілки: оптимізована розмітка або сира + попередження (ніколи не падає).
🔹 `generate_preview()` — документ з `<use>` для переглядачів, що не рендерять `<symbol>`.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging															# 🧾 Логування
import math																# 🔢 sqrt / ceil
import re																# 🔎 Форматування розмітки
from dataclasses import dataclass										# 🧱 DTO опцій і сітки
from typing import List, Optional, Sequence, Tuple				# 🧰 Типізація
from xml.sax.saxutils import escape									# 🛡️ Екранування атрибутів

# 🧩 Внутрішні модулі проєкту
from iconsprite.domain.sprite.entities import SvgIconData, SvgSpriteSheet
from iconsprite.domain.sprite.interfaces import ISvgOptimizer
from iconsprite.infrastructure.sprite.svg_optimizer import ScourSvgOptimizer
from iconsprite.infrastructure.sprite.viewbox import (
    extract_svg_inner_content,
    extract_view_box,
    parse_view_box,
    validate_view_box,
)
from iconsprite.shared.errors import SpriteGenerationError, SvgContext, SvgOptimizationError
from iconsprite.shared.metrics import SVG_OPTIMIZATION_FALLBACK_TOTAL
from iconsprite.shared.utils.content_hash import content_hash
from iconsprite.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.svg")							# 🧾 Локальний логер модуля


# ================================
# 📦 КОНСТАНТИ
# ================================
SVG_NS = "http://www.w3.org/2000/svg"
XLINK_NS = "http://www.w3.org/1999/xlink"
GRID_PADDING = 4														# 📏 Відступ між клітинками сітки
_ATTR_ENTITIES = {'"': "&quot;", "'": "&apos;"}
_SYMBOL_RE = re.compile(r"<symbol\b")
_BLANK_LINES_RE = re.compile(r"\n\s*\n")


@dataclass(frozen=True)
class SvgAssembleOptions:
    optimize: bool = True
    pretty: bool = False


@dataclass(frozen=True)
class GridCell:
    icon_id: str
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class GridLayout:
    """📐 Квадратна сітка однакових клітинок."""

    columns: int
    rows: int
    cell_width: float
    cell_height: float
    width: float
    height: float
    cells: Tuple[GridCell, ...]


# ================================
# 🔧 ДОПОМІЖНІ ФУНКЦІЇ
# ================================
def escape_xml(text: str) -> str:
    """Екранує `& < > " '` для значень атрибутів."""
    return escape(text, _ATTR_ENTITIES)


def _fmt(value: float) -> str:
    return f"{value:g}"


def _visual_size(icon: SvgIconData) -> Tuple[float, float]:
    """Розмір з viewBox; якщо він некоректний — задекларовані width/height."""
    try:
        _, _, width, height = parse_view_box(icon.view_box)
    except ValueError:
        return float(icon.width), float(icon.height)
    return width, height


def compute_grid_layout(icons: Sequence[SvgIconData], padding: float = GRID_PADDING) -> GridLayout:
    """
    Розкладає іконки по квадратній сітці у порядку id.

    Args:
        icons: Іконки (порядок не важливий — сортуються за id).
        padding: Додатковий простір на кожну клітинку.

    Returns:
        GridLayout: Кількість колонок/рядків, розміри клітинки й полотна, позиції.
    """
    ordered = sorted(icons, key=lambda icon: icon.id)
    if not ordered:
        return GridLayout(columns=0, rows=0, cell_width=0, cell_height=0, width=0, height=0, cells=())
    sizes = [_visual_size(icon) for icon in ordered]
    columns = math.ceil(math.sqrt(len(ordered)))
    rows = math.ceil(len(ordered) / columns)
    cell_width = max(width for width, _ in sizes) + padding
    cell_height = max(height for _, height in sizes) + padding
    cells = tuple(
        GridCell(
            icon_id=icon.id,
            x=(index % columns) * cell_width + padding / 2,
            y=(index // columns) * cell_height + padding / 2,
            width=width,
            height=height,
        )
        for index, (icon, (width, height)) in enumerate(zip(ordered, sizes))
    )
    return GridLayout(
        columns=columns,
        rows=rows,
        cell_width=cell_width,
        cell_height=cell_height,
        width=columns * cell_width,
        height=rows * cell_height,
        cells=cells,
    )


def format_svg(markup: str) -> str:
    """Кожен тег з нового рядка."""
    return _BLANK_LINES_RE.sub("\n", markup.replace("><", ">\n<")).strip()


def create_svg_icon_data(icon_id: str, buffer: bytes, width: float, height: float) -> SvgIconData:
    """Будує `SvgIconData` з сирих байтів експорту."""
    content = buffer.decode("utf-8")
    return SvgIconData(
        id=icon_id,
        content=content,
        view_box=extract_view_box(content, width, height),
        width=width,
        height=height,
    )


def validate_svg_icons(svg_icons: Sequence[SvgIconData]) -> List[Tuple[str, str]]:
    """Усі проблеми вхідних іконок як `(id, повідомлення)`; порожній список — все гаразд."""
    problems: List[Tuple[str, str]] = []
    for icon in svg_icons:
        if not icon.id or not icon.id.strip():
            problems.append((icon.id, "Icon ID is empty"))
        if not validate_view_box(icon.view_box):
            problems.append((icon.id, f'Invalid viewBox: "{icon.view_box}"'))
        if not icon.content or not icon.content.strip():
            problems.append((icon.id, "SVG content is empty"))
        if icon.width <= 0 or icon.height <= 0:
            problems.append((icon.id, f"Invalid dimensions: {icon.width}x{icon.height}"))
    return problems


# ================================
# 🧩 ЗБИРАЧ
# ================================
class SvgSpriteAssembler:
    """🧩 Будує `SvgSpriteSheet` з векторних іконок."""

    def __init__(self, optimizer: Optional[ISvgOptimizer] = None) -> None:
        self._optimizer = optimizer or ScourSvgOptimizer()

    def assemble(
        self,
        svg_icons: Sequence[SvgIconData],
        options: Optional[SvgAssembleOptions] = None,
    ) -> SvgSpriteSheet:
        """
        Збирає `<symbol>`-спрайт.

        Args:
            svg_icons: Векторні іконки.
            options: Оптимізація та форматування.

        Returns:
            SvgSpriteSheet: Іконки у порядку id, розмітка, відбиток, попередження.

        Raises:
            SpriteGenerationError: Порожній вхід або некоректний viewBox.
        """
        opts = options or SvgAssembleOptions()
        if not svg_icons:
            raise SpriteGenerationError(
                "Cannot generate SVG sprite from an empty icon list",
                context=SvgContext(detail="empty input"),
            )

        ordered = sorted(svg_icons, key=lambda icon: icon.id)
        for icon in ordered:
            if not validate_view_box(icon.view_box):
                raise SpriteGenerationError(
                    f'Invalid viewBox for icon "{icon.id}": {icon.view_box}',
                    context=SvgContext(icon_id=icon.id, view_box=icon.view_box),
                )

        layout = compute_grid_layout(ordered)
        raw = self._build_markup(ordered, layout)

        warnings: List[str] = []
        content = raw
        if opts.optimize:
            content, warning = self._optimize(raw)
            if warning is not None:
                warnings.append(warning)
        if opts.pretty:
            content = format_svg(content)

        digest = content_hash(content)
        logger.info(
            "🧩 SVG sprite: %d symbols, %d chars, hash=%s%s",
            len(ordered), len(content), digest, " (unoptimized)" if warnings else "",
        )
        return SvgSpriteSheet(
            icons=tuple(ordered),
            content=content,
            hash=digest,
            width=layout.width,
            height=layout.height,
            warnings=tuple(warnings),
        )

    @staticmethod
    def _build_markup(ordered: Sequence[SvgIconData], layout: GridLayout) -> str:
        lines = [
            f'<svg xmlns="{SVG_NS}" width="{_fmt(layout.width)}" height="{_fmt(layout.height)}" '
            f'viewBox="0 0 {_fmt(layout.width)} {_fmt(layout.height)}">'
        ]
        for icon in ordered:
            inner = extract_svg_inner_content(icon.content)
            lines.append(
                f'  <symbol id="{escape_xml(icon.id)}" viewBox="{escape_xml(icon.view_box)}">\n'
                f"    {inner}\n"
                f"  </symbol>"
            )
        lines.append("</svg>")
        return "\n".join(lines)

    def _optimize(self, raw: str) -> Tuple[str, Optional[str]]:
        """Оптимізована розмітка або `(raw, попередження)`."""
        try:
            optimized = self._optimizer.optimize(raw)
        except Exception as exc:										# noqa: BLE001	# 🧯 Будь-який збій оптимізатора
            problem = SvgOptimizationError(f"SVG optimization failed: {exc}", context=SvgContext(detail=str(exc)))
        else:
            if _SYMBOL_RE.search(optimized or ""):
                return optimized, None
            problem = SvgOptimizationError(
                "SVG optimization removed every <symbol>",
                context=SvgContext(detail="no symbols in optimizer output"),
            )
        SVG_OPTIMIZATION_FALLBACK_TOTAL.inc()
        logger.warning("⚠️ %s; using unoptimized SVG sprite", problem.message, extra=problem.to_log_extra())
        return raw, problem.message


# ================================
# 👀 ПРЕВʼЮ
# ================================
def generate_preview(sheet: SvgSpriteSheet, padding: float = GRID_PADDING) -> str:
    """
    Рендерований документ: символи спрайта в `<defs>` + `<use>` у клітинках сітки.

    Чиста функція від `sheet`: повторний виклик повертає ту саму розмітку.
    """
    layout = compute_grid_layout(sheet.icons, padding)
    symbols = extract_svg_inner_content(sheet.content)
    width, height = _fmt(layout.width), _fmt(layout.height)
    lines = [
        f'<svg xmlns="{SVG_NS}" xmlns:xlink="{XLINK_NS}" width="{width}" height="{height}" viewBox="0 0 {width} {height}">',
        f"<defs>{symbols}</defs>",
    ]
    for cell in layout.cells:
        ref = f"#{escape_xml(cell.icon_id)}"
        lines.append(
            f'<use href="{ref}" xlink:href="{ref}" x="{_fmt(cell.x)}" y="{_fmt(cell.y)}" '
            f'width="{_fmt(cell.width)}" height="{_fmt(cell.height)}"/>'
        )
    lines.append("</svg>")
    return "\n".join(lines)


__all__ = [
    "GRID_PADDING",
    "SvgAssembleOptions",
    "GridCell",
    "GridLayout",
    "SvgSpriteAssembler",
    "compute_grid_layout",
    "create_svg_icon_data",
    "validate_svg_icons",
    "escape_xml",
    "format_svg",
    "generate_preview",
]
