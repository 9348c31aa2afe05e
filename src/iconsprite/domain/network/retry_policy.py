# 🔁 iconsprite/domain/network/retry_policy.py
"""
🔁 Доменні DTO політики повторів.

🔹 `RetryPolicy` — параметри експоненційного backoff із jitter (мілісекунди).
🔹 `RetryResult` — значення операції + кількість спроб + витрачений час.
🔹 `RateLimitInfo` — останні відомі заголовки `X-RateLimit-*`.
"""

from __future__ import annotations

# 🔠 Системні імпорти
from dataclasses import dataclass										# 🧱 Незмінні DTO
from typing import Generic, Optional, TypeVar							# 🧰 Типізація

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """🔁 Параметри повторів. `max_retries` — кількість ДОДАТКОВИХ спроб."""

    max_retries: int = 3												# 🔢 Повторів після першої спроби
    initial_delay_ms: float = 2000.0									# ⏳ Базова затримка
    max_delay_ms: float = 60000.0										# 🧱 Стеля затримки
    backoff_multiplier: float = 2.0										# 📈 Множник
    jitter: float = 0.2													# 🎲 Частка випадкового відхилення

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.initial_delay_ms < 0 or self.max_delay_ms < 0:
            raise ValueError("delays must be >= 0")
        if self.backoff_multiplier < 1:
            raise ValueError("backoff_multiplier must be >= 1")
        if not 0 <= self.jitter <= 1:
            raise ValueError("jitter must be within [0, 1]")

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1


DEFAULT_RETRY_POLICY = RetryPolicy()									# 🧰 Загальні дефолти
FIGMA_RETRY_POLICY = RetryPolicy(
    max_retries=3,
    initial_delay_ms=2000.0,
    max_delay_ms=60000.0,
    backoff_multiplier=2.0,
    jitter=0.2,
)																		# 🎨 Дефолти для Figma API


@dataclass(frozen=True)
class RetryResult(Generic[T]):
    """✅ Результат успішної операції після ретраїв."""

    value: T
    attempts: int
    total_time_ms: float


@dataclass(frozen=True, slots=True)
class RateLimitInfo:
    """🚦 Знімок заголовків `X-RateLimit-*` останньої відповіді."""

    remaining: Optional[int] = None
    limit: Optional[int] = None
    reset: Optional[int] = None


__all__ = [
    "RetryPolicy",
    "RetryResult",
    "RateLimitInfo",
    "DEFAULT_RETRY_POLICY",
    "FIGMA_RETRY_POLICY",
]
