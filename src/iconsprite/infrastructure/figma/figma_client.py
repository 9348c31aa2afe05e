# 🎨 iconsprite/infrastructure/figma/figma_client.py
"""
🎨 Асинхронний клієнт Figma REST API для експорту іконок.

🔹 Один спільний `httpx.AsyncClient` на весь запуск (пул зʼєднань, таймаути).
🔹 `get_export_urls()` — `GET /v1/images/{file_key}` з ретраями та `Retry-After`.
🔹 `download()` — скачування відрендерених файлів за тимчасовими URL.
🔹 HTTP-статуси та транспортні збої мапляться у типізовані `SpriteError`.
🔹 `rate_limit_info` оновлюється із заголовків `X-RateLimit-*`.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import asyncio															# ⏳ Паузи між ретраями
import logging															# 🧾 Логування запитів
from typing import Any, Awaitable, Callable, Dict, Optional, Sequence	# 🧰 Типізація

# 🌐 Зовнішні бібліотеки
import httpx															# 🌐 HTTP-клієнт

# 🧩 Внутрішні модулі проєкту
from iconsprite.config.settings import DEFAULT_BASE_URL, PipelineSettings
from iconsprite.domain.export.entities import ExportFormat
from iconsprite.domain.export.interfaces import ExportUrlsResponse, SvgExportOptions
from iconsprite.domain.network.retry_policy import FIGMA_RETRY_POLICY, RateLimitInfo, RetryPolicy
from iconsprite.infrastructure.network.retry import parse_retry_after, with_rate_limit_retry
from iconsprite.shared.errors import (
    AuthFailedError,
    HttpErrorContext,
    NetworkError,
    NetworkErrorContext,
    NotFoundError,
    RateLimitContext,
    RateLimitedError,
    RequestTimeoutError,
)
from iconsprite.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.figma")						# 🧾 Локальний логер модуля


# ================================
# 📦 КОНСТАНТИ
# ================================
TOKEN_HEADER = "X-Figma-Token"											# 🔐 Заголовок автентифікації
DEFAULT_TIMEOUT_S = 30.0												# ⏳ Таймаут запиту
USER_AGENT = "iconsprite/0.1 (+https://github.com/iconsprite/iconsprite)"


def _int_header(headers: httpx.Headers, name: str) -> Optional[int]:
    value = headers.get(name)
    if value is None:
        return None
    try:
        return int(float(value))
    except ValueError:
        return None


# ================================
# 🎨 КЛІЄНТ
# ================================
class FigmaApiClient:
    """🎨 Реалізація `IDesignApiClient` поверх Figma REST API."""

    def __init__(
        self,
        token: Optional[str],
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        retry_policy: RetryPolicy = FIGMA_RETRY_POLICY,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        if not token:
            raise AuthFailedError(
                "Figma token is not configured",
                context=HttpErrorContext(),
            )
        self.base_url = base_url.rstrip("/")							# 🌐 Базовий URL API
        self.timeout_s = float(timeout_s)								# ⏳ Таймаут у секундах
        self.retry_policy = retry_policy								# 🔁 Політика повторів
        self._sleep = sleep											# 😴 Підміняється в тестах
        self._token = token
        self._client = httpx.AsyncClient(								# 🌐 Спільний пул зʼєднань
            timeout=httpx.Timeout(self.timeout_s),
            headers={"User-Agent": USER_AGENT},
            follow_redirects=True,
            transport=transport,
        )
        self.rate_limit_info = RateLimitInfo()							# 🚦 Останні відомі ліміти
        logger.debug(
            "⚙️ FigmaApiClient init base_url=%s timeout=%.1fs retries=%d",
            self.base_url,
            self.timeout_s,
            self.retry_policy.max_retries,
        )

    @classmethod
    def from_settings(
        cls,
        settings: PipelineSettings,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "FigmaApiClient":
        """🏗️ Будує клієнт з типізованих налаштувань (`FIGMA_TOKEN` → `api.token`)."""
        return cls(
            settings.api.token,
            base_url=settings.api.base_url,
            timeout_s=settings.api.timeout_s,
            retry_policy=settings.retry,
            transport=transport,
        )

    # ================================
    # 🔄 ЖИТТЄВИЙ ЦИКЛ
    # ================================
    async def __aenter__(self) -> "FigmaApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # ================================
    # 🔄 ПУБЛІЧНИЙ API
    # ================================
    async def get_export_urls(
        self,
        file_key: str,
        *,
        ids: Sequence[str],
        format: ExportFormat,
        scale: Optional[float] = None,
        svg_options: Optional[SvgExportOptions] = None,
    ) -> ExportUrlsResponse:
        """
        Запитує рендер вузлів `ids` і повертає тимчасові URL.

        Args:
            file_key: Ключ файлу Figma.
            ids: Ідентифікатори вузлів для експорту.
            format: `png` або `svg`.
            scale: Масштаб растрового рендера.
            svg_options: Прапорці SVG-експорту.

        Returns:
            ExportUrlsResponse: `images` (URL або None на вузол) та `err` від API.
        """
        url = f"{self.base_url}/v1/images/{file_key}"
        params = self._export_params(ids, format, scale, svg_options)
        logger.info("📤 Export request: file=%s format=%s ids=%d", file_key, format.value, len(ids))

        async def _request() -> httpx.Response:
            return await self._send("GET", url, params=params, headers={TOKEN_HEADER: self._token})

        def _process(response: httpx.Response) -> ExportUrlsResponse:
            self._raise_for_status(response, file_key=file_key)
            payload = response.json()
            images = payload.get("images") or {}
            return ExportUrlsResponse(
                images={str(node_id): (str(link) if link else None) for node_id, link in images.items()},
                err=payload.get("err") or None,
            )

        result = await with_rate_limit_retry(
            _request,
            _process,
            self.retry_policy,
            sleep=self._sleep,
            label=f"export {format.value}",
        )
        return result.value

    async def download(self, url: str) -> bytes:
        """📥 Скачує відрендерений файл (без токена: URL вже підписаний)."""

        async def _request() -> httpx.Response:
            return await self._send("GET", url)

        def _process(response: httpx.Response) -> bytes:
            self._raise_for_status(response)
            return response.content

        result = await with_rate_limit_retry(
            _request,
            _process,
            self.retry_policy,
            sleep=self._sleep,
            label="download",
        )
        logger.debug("📥 Downloaded %d bytes in %d attempt(s)", len(result.value), result.attempts)
        return result.value

    # ================================
    # 🔧 ВНУТРІШНЯ МЕХАНІКА
    # ================================
    @staticmethod
    def _export_params(
        ids: Sequence[str],
        format: ExportFormat,
        scale: Optional[float],
        svg_options: Optional[SvgExportOptions],
    ) -> Dict[str, str]:
        params: Dict[str, str] = {"ids": ",".join(ids), "format": format.value}
        if scale is not None:
            params["scale"] = f"{scale:g}"
        if format is ExportFormat.SVG:
            options = svg_options or SvgExportOptions()
            if options.include_id:
                params["svg_include_id"] = "true"
            if options.simplify_stroke:
                params["svg_simplify_stroke"] = "true"
        else:
            params["use_absolute_bounds"] = "true"
        return params

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """🌐 Один HTTP-запит; транспортні збої → типізовані (recoverable) помилки."""
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.TimeoutException as exc:
            raise RequestTimeoutError(
                f"Request timed out after {self.timeout_s:.0f}s",
                context=NetworkErrorContext(url=url, last_error=str(exc) or type(exc).__name__),
            ) from exc
        except httpx.TransportError as exc:
            raise NetworkError(
                f"Network error: {exc}",
                context=NetworkErrorContext(url=url, last_error=str(exc) or type(exc).__name__),
            ) from exc
        self._update_rate_limit(response.headers)
        return response

    def _update_rate_limit(self, headers: httpx.Headers) -> None:
        remaining = _int_header(headers, "X-RateLimit-Remaining")
        if remaining is None:
            return
        self.rate_limit_info = RateLimitInfo(
            remaining=remaining,
            limit=_int_header(headers, "X-RateLimit-Limit"),
            reset=_int_header(headers, "X-RateLimit-Reset"),
        )
        if remaining <= 5:
            logger.warning("🚦 Figma rate limit almost exhausted: remaining=%d", remaining)

    @staticmethod
    def _raise_for_status(response: httpx.Response, *, file_key: Optional[str] = None) -> None:
        """🚨 Мапить HTTP-статус у доменну помилку."""
        status = response.status_code
        if status < 400:
            return
        try:
            url: Optional[str] = str(response.url)
        except RuntimeError:											# 🧪 Відповідь без запиту
            url = None
        detail = response.text[:200] if response.content else response.reason_phrase
        context = HttpErrorContext(url=url, status_code=status, file_key=file_key)
        if status in (401, 403):
            raise AuthFailedError(f"Figma authentication failed ({status}): {detail}", context=context)
        if status == 404:
            raise NotFoundError(f"Figma resource not found: {detail}", context=context)
        if status == 429:
            raise RateLimitedError(
                "Figma rate limit exceeded",
                context=RateLimitContext(url=url, retry_after_s=parse_retry_after(response.headers.get("Retry-After"))),
            )
        raise NetworkError(
            f"Figma API error {status}: {detail}",
            context=NetworkErrorContext(url=url, status_code=status),
            recoverable=status >= 500,
        )


__all__ = ["FigmaApiClient", "TOKEN_HEADER"]
