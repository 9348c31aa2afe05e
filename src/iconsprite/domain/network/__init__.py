# 🔁 iconsprite/domain/network/__init__.py
"""🔁 Доменні DTO повторів і лімітів запитів."""

from .retry_policy import (
    DEFAULT_RETRY_POLICY,
    FIGMA_RETRY_POLICY,
    RateLimitInfo,
    RetryPolicy,
    RetryResult,
)

__all__ = [
    "RetryPolicy",
    "RetryResult",
    "RateLimitInfo",
    "DEFAULT_RETRY_POLICY",
    "FIGMA_RETRY_POLICY",
]
