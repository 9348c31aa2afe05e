# 🔁 iconsprite/infrastructure/network/__init__.py
"""🔁 Мережеві утиліти: ретраї з backoff та `Retry-After`."""

from .retry import (
    compute_delay_ms,
    is_retryable_error,
    parse_retry_after,
    with_rate_limit_retry,
    with_retry,
)

__all__ = [
    "compute_delay_ms",
    "is_retryable_error",
    "parse_retry_after",
    "with_rate_limit_retry",
    "with_retry",
]
