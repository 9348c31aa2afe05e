# 🧰 iconsprite/shared/utils/__init__.py
"""
🧰 Спільні утиліти: логування та відбитки вмісту.
"""

from __future__ import annotations

# 🔠 Логування
from .logger import (
    LOG_NAME,
    get_logger,
    init_logging,
    init_logging_from_config,
)

# 🔐 Хешування
from .content_hash import combined_hash, content_hash

# 🔢 Округлення
from .rounding import round_half_up

__all__ = [
    "LOG_NAME",
    "get_logger",
    "init_logging",
    "init_logging_from_config",
    "content_hash",
    "combined_hash",
    "round_half_up",
]
