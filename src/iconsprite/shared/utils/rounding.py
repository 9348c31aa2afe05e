# 🔢 iconsprite/shared/utils/rounding.py
"""
🔢 Округлення піксельних розмірів.

🔹 Половини округлюються вгору (`24.5 → 25`, `-2.5 → -2`), а не до парного, як `round()`.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import math																# 🔢 floor


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


__all__ = ["round_half_up"]
