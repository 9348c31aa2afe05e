# 📦 iconsprite/infrastructure/sprite/potpack.py
"""
📦 Евристичне пакування прямокутників у майже квадратний аркуш (алгоритм potpack).

🔹 Бокси впорядковуються за висотою (стабільно), розміщуються у вільні простори справа наліво.
🔹 Стартова ширина — `max(ceil(sqrt(area / 0.95)), max_w)`.
🔹 Розміщення повертаються у ВХІДНОМУ порядку; вхід не мутується.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import math																# 🔢 sqrt / ceil / inf
from dataclasses import dataclass										# 🧱 DTO результату
from typing import List, Sequence, Tuple								# 🧰 Типізація


@dataclass(frozen=True, slots=True)
class PotpackResult:
    """📦 `placements[i]` — (x, y) для `sizes[i]`."""

    width: float
    height: float
    fill: float
    placements: Tuple[Tuple[float, float], ...]


@dataclass(slots=True)
class _Space:
    x: float
    y: float
    w: float
    h: float


def potpack(sizes: Sequence[Tuple[float, float]]) -> PotpackResult:
    """
    Пакує бокси `(w, h)` без перекриттів.

    Args:
        sizes: Розміри боксів (уже з padding).

    Returns:
        PotpackResult: Розміри аркуша, заповненість та позиції у вхідному порядку.
    """
    area = 0.0
    max_width = 0.0
    for w, h in sizes:
        area += w * h
        max_width = max(max_width, w)

    order = sorted(range(len(sizes)), key=lambda i: -sizes[i][1])	# 📏 Висота ↓, стабільно
    start_width = max(math.ceil(math.sqrt(area / 0.95)), max_width)
    spaces: List[_Space] = [_Space(0.0, 0.0, start_width, math.inf)]

    placements: List[Tuple[float, float]] = [(0.0, 0.0)] * len(sizes)
    width = 0.0
    height = 0.0
    for index in order:
        box_w, box_h = sizes[index]
        for i in range(len(spaces) - 1, -1, -1):
            space = spaces[i]
            if box_w > space.w or box_h > space.h:
                continue

            x, y = space.x, space.y
            placements[index] = (x, y)
            height = max(height, y + box_h)
            width = max(width, x + box_w)

            if box_w == space.w and box_h == space.h:				# 🧩 Простір заповнено повністю
                last = spaces.pop()
                if i < len(spaces):
                    spaces[i] = last
            elif box_h == space.h:									# ➡️ Зсуваємо простір праворуч
                space.x += box_w
                space.w -= box_w
            elif box_w == space.w:									# ⬇️ Зсуваємо простір вниз
                space.y += box_h
                space.h -= box_h
            else:													# ✂️ Ділимо простір на два
                spaces.append(_Space(space.x + box_w, space.y, space.w - box_w, box_h))
                space.y += box_h
                space.h -= box_h
            break

    fill = area / (width * height) if width and height else 0.0
    return PotpackResult(width=width, height=height, fill=fill, placements=tuple(placements))


__all__ = ["PotpackResult", "potpack"]
