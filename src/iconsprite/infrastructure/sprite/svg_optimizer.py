# 🧹 iconsprite/infrastructure/sprite/svg_optimizer.py
"""
🧹 Оптимізатор SVG на базі `scour`.

🔹 Прибирає XML-пролог, коментарі та описові елементи (`<title>`, `<desc>`, `<metadata>`).
🔹 Зберігає id (символи адресуються через `#id`) і `viewBox`.
🔹 Будь-який виняток летить нагору: збирач сам вирішує, як відкотитись.
"""

from __future__ import annotations

# 🔠 Системні імпорти
from typing import Sequence											# 🧰 Типізація

# 🌐 Зовнішні бібліотеки
from scour import scour												# 🧹 Оптимізатор SVG

DEFAULT_SCOUR_ARGS: Sequence[str] = (
    "--strip-xml-prolog",
    "--remove-descriptive-elements",
    "--enable-comment-stripping",
    "--keep-unreferenced-defs",
    "--no-line-breaks",
    "--indent=none",
    "--quiet",
)


class ScourSvgOptimizer:
    """🧹 Реалізація `ISvgOptimizer` через `scour.scourString`."""

    def __init__(self, args: Sequence[str] = DEFAULT_SCOUR_ARGS) -> None:
        self._options = scour.parse_args(list(args))

    def optimize(self, svg: str) -> str:
        return scour.scourString(svg, self._options)


__all__ = ["ScourSvgOptimizer", "DEFAULT_SCOUR_ARGS"]
