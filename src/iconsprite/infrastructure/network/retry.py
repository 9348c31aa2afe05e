# 🔁 iconsprite/infrastructure/network/retry.py
"""
🔁 Ретрай-рушій з експоненційним backoff, jitter та підтримкою `Retry-After`.

🔹 `is_retryable_error()` — класифікація: `SpriteError.recoverable`, HTTP 4xx/429/5xx, інше — оптимістично так.
🔹 `with_retry()` — загальний повтор async-операції, повертає `RetryResult`.
🔹 `with_rate_limit_retry()` — повтор HTTP-операції, що чекає рівно `Retry-After` на 429.
🔹 Вичерпані ретраї перетворюються на термінальні `NetworkError` / `RateLimitedError`.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import asyncio															# ⏳ Паузи між спробами
import inspect															# 🔍 Sync/async колбеки
import logging															# 🧾 Логування ретраїв
import random															# 🎲 Jitter
import time																# ⏱️ Замір часу
from typing import Any, Awaitable, Callable, Optional, TypeVar, Union	# 🧰 Типізація

# 🌐 Зовнішні бібліотеки
import httpx															# 🌐 HTTP-відповіді

# 🧩 Внутрішні модулі проєкту
from iconsprite.domain.network.retry_policy import (
    DEFAULT_RETRY_POLICY,
    FIGMA_RETRY_POLICY,
    RetryPolicy,
    RetryResult,
)
from iconsprite.shared.errors import (
    NetworkError,
    NetworkErrorContext,
    RateLimitContext,
    RateLimitedError,
    SpriteError,
)
from iconsprite.shared.metrics import RETRY_ATTEMPTS_TOTAL
from iconsprite.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.retry")						# 🧾 Локальний логер модуля

T = TypeVar("T")
SleepFn = Callable[[float], Awaitable[Any]]							# 😴 Приймає секунди
RandomFn = Callable[[], float]											# 🎲 [0, 1)
MaybeAwaitable = Union[T, Awaitable[T]]


# ================================
# 🧮 КЛАСИФІКАЦІЯ ТА ЗАТРИМКИ
# ================================
def _status_of(error: BaseException) -> Optional[int]:
    """🔢 HTTP-статус з атрибута `status_code` або з `httpx.HTTPStatusError.response`."""
    status = getattr(error, "status_code", None)
    if status is None and isinstance(error, httpx.HTTPStatusError):
        status = error.response.status_code
    return status if isinstance(status, int) else None


def is_retryable_error(error: BaseException) -> bool:
    """
    Вирішує, чи варто повторювати операцію після `error`.

    Args:
        error: Виняток останньої спроби.

    Returns:
        bool: `SpriteError` → його `recoverable`; 429 та 5xx → True; решта 4xx → False;
        помилки без статусу (транспорт, таймаут, невідомі) → True.
    """
    if isinstance(error, SpriteError):
        return error.recoverable
    status = _status_of(error)
    if status is not None:
        if status == 429 or 500 <= status < 600:
            return True
        if 400 <= status < 500:
            return False
    return True


def compute_delay_ms(attempt: int, policy: RetryPolicy, rng: RandomFn = random.random) -> float:
    """
    Затримка перед наступною спробою: `min(max, initial * mult^(attempt-1))` ± jitter, не менше 0.

    Args:
        attempt: Номер невдалої спроби (1-based).
        policy: Параметри backoff.
        rng: Джерело випадковості у [0, 1).
    """
    base = min(policy.max_delay_ms, policy.initial_delay_ms * policy.backoff_multiplier ** (attempt - 1))
    spread = base * policy.jitter
    return max(0.0, base + (rng() * 2.0 - 1.0) * spread)


def parse_retry_after(value: Optional[str]) -> Optional[float]:
    """⏳ `Retry-After` у секундах; порожнє, нечислове чи відʼємне значення → None."""
    if value is None or not str(value).strip():
        return None
    try:
        seconds = float(str(value).strip())
    except ValueError:
        return None
    return seconds if seconds >= 0 else None


async def _maybe_await(value: MaybeAwaitable[T]) -> T:
    if inspect.isawaitable(value):
        return await value
    return value


def _elapsed_ms(started: float) -> float:
    return (time.monotonic() - started) * 1000.0


def _response_url(response: httpx.Response) -> Optional[str]:
    try:
        return str(response.request.url)
    except RuntimeError:												# 🧪 Відповідь без запиту (тести)
        return None


# ================================
# 🚨 ТЕРМІНАЛЬНІ ПОМИЛКИ
# ================================
def _terminal_rate_limit(attempts: int, retry_after_s: Optional[float], url: Optional[str]) -> RateLimitedError:
    return RateLimitedError(
        f"Rate limit exceeded after {attempts} attempts",
        context=RateLimitContext(url=url, retry_after_s=retry_after_s, attempts=attempts),
        recoverable=False,
    )


def _terminal_network(error: BaseException, attempts: int, total_time_ms: float, label: str) -> NetworkError:
    return NetworkError(
        f"{label} failed after {attempts} attempt(s): {error}",
        context=NetworkErrorContext(
            url=getattr(getattr(error, "context", None), "url", None),
            status_code=_status_of(error),
            attempts=attempts,
            total_time_ms=round(total_time_ms, 1),
            last_error=str(error) or type(error).__name__,
        ),
        recoverable=False,
    )


# ================================
# 🔁 ЗАГАЛЬНИЙ РЕТРАЙ
# ================================
async def with_retry(
    operation: Callable[[], MaybeAwaitable[T]],
    policy: RetryPolicy = DEFAULT_RETRY_POLICY,
    *,
    should_retry: Optional[Callable[[BaseException], bool]] = None,
    sleep: SleepFn = asyncio.sleep,
    rng: RandomFn = random.random,
    label: str = "operation",
) -> RetryResult[T]:
    """
    Виконує `operation` до `policy.max_retries + 1` разів.

    Args:
        operation: Фабрика спроби (sync або async).
        policy: Параметри backoff.
        should_retry: Власний класифікатор замість `is_retryable_error`.
        sleep: Функція паузи (секунди), підміняється в тестах.
        rng: Джерело jitter.
        label: Назва операції для логів і повідомлень.

    Returns:
        RetryResult: значення, кількість спроб і витрачений час.

    Raises:
        SpriteError: Неповторювана помилка — без змін.
        NetworkError: Неповторювана стороння помилка (attempts=1) або вичерпані ретраї.
        RateLimitedError: Термінальна, якщо остання помилка — ліміт частоти.
    """
    decide = should_retry or is_retryable_error
    started = time.monotonic()
    attempt = 0
    while True:
        attempt += 1
        try:
            value = await _maybe_await(operation())
            if attempt > 1:
                logger.info("✅ %s succeeded on attempt %d", label, attempt)
            return RetryResult(value=value, attempts=attempt, total_time_ms=_elapsed_ms(started))
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            if not decide(exc):
                if isinstance(exc, SpriteError):
                    raise
                raise _terminal_network(exc, attempt, _elapsed_ms(started), label) from exc
            if attempt > policy.max_retries:
                RETRY_ATTEMPTS_TOTAL.labels(outcome="exhausted").inc()
                logger.error(
                    "❌ %s: ретраї вичерпано після %d спроб: %s",
                    label, attempt, exc,
                    extra={"attempts": attempt},
                )
                if isinstance(exc, RateLimitedError):
                    raise _terminal_rate_limit(attempt, exc.retry_after_s, None) from exc
                raise _terminal_network(exc, attempt, _elapsed_ms(started), label) from exc
            delay_ms = compute_delay_ms(attempt, policy, rng)
            RETRY_ATTEMPTS_TOTAL.labels(outcome="retry").inc()
            logger.warning(
                "⚠️ %s attempt %d/%d failed: %s; retry in %.0f ms",
                label, attempt, policy.max_attempts, exc, delay_ms,
            )
            await sleep(delay_ms / 1000.0)


# ================================
# 🚦 РЕТРАЙ З УРАХУВАННЯМ 429
# ================================
async def with_rate_limit_retry(
    operation: Callable[[], MaybeAwaitable[httpx.Response]],
    processor: Callable[[httpx.Response], MaybeAwaitable[T]],
    policy: RetryPolicy = FIGMA_RETRY_POLICY,
    *,
    sleep: SleepFn = asyncio.sleep,
    rng: RandomFn = random.random,
    label: str = "request",
) -> RetryResult[T]:
    """
    Повторює HTTP-операцію; на 429 чекає рівно `Retry-After` секунд (або backoff).

    Args:
        operation: Фабрика HTTP-запиту, повертає `httpx.Response`.
        processor: Обробник не-429 відповіді (sync або async); може кидати `SpriteError`.
        policy: Параметри backoff.
        sleep: Функція паузи (секунди).
        rng: Джерело jitter.
        label: Назва операції для логів.

    Returns:
        RetryResult: результат `processor`, кількість спроб і витрачений час.

    Raises:
        RateLimitedError: Після `max_retries` повторів на 429 (термінальна, з attempts).
        NetworkError: Вичерпані ретраї для інших повторюваних помилок.
        Exception: Неповторювана помилка операції/процесора — без обгортки.
    """
    started = time.monotonic()
    attempt = 0
    last_retry_after: Optional[float] = None
    rate_limited = False
    while True:
        attempt += 1
        try:
            response = await _maybe_await(operation())
            if response.status_code != 429:
                value = await _maybe_await(processor(response))
                return RetryResult(value=value, attempts=attempt, total_time_ms=_elapsed_ms(started))
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            if not is_retryable_error(exc):
                raise
            retry_after = exc.retry_after_s if isinstance(exc, RateLimitedError) else None
            if isinstance(exc, RateLimitedError):
                rate_limited = True
                last_retry_after = retry_after
            if attempt > policy.max_retries:
                RETRY_ATTEMPTS_TOTAL.labels(outcome="exhausted").inc()
                if rate_limited:
                    raise _terminal_rate_limit(attempt, last_retry_after, None) from exc
                raise _terminal_network(exc, attempt, _elapsed_ms(started), label) from exc
            delay_ms = retry_after * 1000.0 if retry_after is not None else compute_delay_ms(attempt, policy, rng)
            RETRY_ATTEMPTS_TOTAL.labels(outcome="retry").inc()
            logger.warning(
                "⚠️ %s attempt %d/%d failed: %s; retry in %.0f ms",
                label, attempt, policy.max_attempts, exc, delay_ms,
            )
            await sleep(delay_ms / 1000.0)
            continue

        # 🚦 429: чекаємо рівно Retry-After, якщо сервер його вказав
        rate_limited = True
        last_retry_after = parse_retry_after(response.headers.get("Retry-After"))
        url = _response_url(response)
        if attempt > policy.max_retries:
            RETRY_ATTEMPTS_TOTAL.labels(outcome="rate_limited").inc()
            logger.error(
                "🚦 %s: rate limit не знято після %d спроб",
                label, attempt,
                extra={"attempts": attempt, "retry_after_s": last_retry_after},
            )
            raise _terminal_rate_limit(attempt, last_retry_after, url)
        if last_retry_after is not None:
            delay_ms = last_retry_after * 1000.0
        else:
            delay_ms = compute_delay_ms(attempt, policy, rng)
        RETRY_ATTEMPTS_TOTAL.labels(outcome="retry").inc()
        logger.warning(
            "🚦 %s rate limited (429), attempt %d/%d; waiting %.0f ms",
            label, attempt, policy.max_attempts, delay_ms,
            extra={"retry_after_s": last_retry_after},
        )
        await sleep(delay_ms / 1000.0)


__all__ = [
    "is_retryable_error",
    "compute_delay_ms",
    "parse_retry_after",
    "with_retry",
    "with_rate_limit_retry",
]
