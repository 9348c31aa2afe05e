# 🔌 iconsprite/domain/sprite/interfaces.py
"""
🔌 Контракти збірки спрайтів.

🔹 `ISvgOptimizer` — чорна скринька оптимізації SVG-розмітки.
🔹 `ISpriteOutputWriter` — зовнішній записувач артефактів (PNG/SVG/SCSS/JSON).
"""

from __future__ import annotations

# 🔠 Системні імпорти
from typing import Awaitable, Optional, Protocol, runtime_checkable	# 🧰 Протоколи

# 🧩 Внутрішні модулі проєкту
from iconsprite.domain.sprite.entities import SpriteBuildResult


@runtime_checkable
class ISvgOptimizer(Protocol):
    """Оптимізатор SVG. Може кинути будь-який виняток: збирач відкотиться до сирої розмітки."""

    def optimize(self, svg: str) -> str:
        ...


@runtime_checkable
class ISpriteOutputWriter(Protocol):
    """Записувач результатів; синхронний або асинхронний."""

    def write(self, result: SpriteBuildResult) -> Optional[Awaitable[None]]:
        ...


__all__ = ["ISvgOptimizer", "ISpriteOutputWriter"]
