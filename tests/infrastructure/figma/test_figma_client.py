# tests/infrastructure/figma/test_figma_client.py
from typing import List

import httpx
import pytest

from iconsprite.config.settings import PipelineSettings
from iconsprite.domain.export.entities import ExportFormat
from iconsprite.domain.export.interfaces import IDesignApiClient, SvgExportOptions
from iconsprite.domain.network.retry_policy import RetryPolicy
from iconsprite.infrastructure.figma.figma_client import TOKEN_HEADER, FigmaApiClient
from iconsprite.shared.errors import (
    AuthFailedError,
    NetworkError,
    NotFoundError,
    RateLimitedError,
    RequestTimeoutError,
)

POLICY = RetryPolicy(max_retries=2, initial_delay_ms=10, max_delay_ms=100, jitter=0)


class _Recorder:
    """Запамʼятовує запити та віддає відповіді з черги (остання повторюється)."""

    def __init__(self, *responses) -> None:
        self.responses = list(responses)
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        item = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(item, Exception):
            raise item
        return item


async def _no_sleep(seconds: float) -> None:
    return None


def _client(handler) -> FigmaApiClient:
    return FigmaApiClient(
        "figd_token",
        base_url="https://figma.test/",
        retry_policy=POLICY,
        transport=httpx.MockTransport(handler),
        sleep=_no_sleep,
    )


# ───────────────────────── конструктор ─────────────────────────
def test_missing_token_is_auth_error():
    with pytest.raises(AuthFailedError):
        FigmaApiClient(None)
    with pytest.raises(AuthFailedError):
        FigmaApiClient("")


@pytest.mark.asyncio
async def test_from_settings_uses_api_section():
    settings = PipelineSettings()
    with pytest.raises(AuthFailedError):
        FigmaApiClient.from_settings(settings)

    recorder = _Recorder(httpx.Response(200, json={"images": {}}))
    client = FigmaApiClient(
        "t",
        base_url=settings.api.base_url,
        transport=httpx.MockTransport(recorder),
    )
    async with client:
        assert isinstance(client, IDesignApiClient)
        assert client.base_url == "https://api.figma.com"


# ───────────────────────── get_export_urls ─────────────────────────
@pytest.mark.asyncio
async def test_png_request_params_and_token_header():
    recorder = _Recorder(httpx.Response(200, json={"images": {"1:1": "https://cdn/1.png", "1:2": None}}))

    async with _client(recorder) as client:
        result = await client.get_export_urls("FILE", ids=["1:1", "1:2"], format=ExportFormat.PNG, scale=2)

    (request,) = recorder.requests
    assert request.url.path == "/v1/images/FILE"
    assert request.url.params["ids"] == "1:1,1:2"
    assert request.url.params["format"] == "png"
    assert request.url.params["scale"] == "2"
    assert request.url.params["use_absolute_bounds"] == "true"
    assert request.headers[TOKEN_HEADER] == "figd_token"
    assert result.images == {"1:1": "https://cdn/1.png", "1:2": None}
    assert result.err is None


@pytest.mark.asyncio
async def test_svg_request_flags():
    recorder = _Recorder(httpx.Response(200, json={"images": {"1:1": "https://cdn/1.svg"}}))

    async with _client(recorder) as client:
        await client.get_export_urls(
            "FILE", ids=["1:1"], format=ExportFormat.SVG, svg_options=SvgExportOptions(simplify_stroke=False)
        )

    params = recorder.requests[0].url.params
    assert params["format"] == "svg"
    assert params["svg_include_id"] == "true"
    assert "svg_simplify_stroke" not in params
    assert "scale" not in params


@pytest.mark.asyncio
async def test_err_field_is_passed_through():
    recorder = _Recorder(httpx.Response(200, json={"images": {}, "err": "Render failed"}))

    async with _client(recorder) as client:
        result = await client.get_export_urls("FILE", ids=["1:1"], format=ExportFormat.PNG)

    assert result.err == "Render failed"


@pytest.mark.asyncio
async def test_rate_limit_headers_tracked():
    recorder = _Recorder(
        httpx.Response(
            200,
            json={"images": {}},
            headers={"X-RateLimit-Remaining": "3", "X-RateLimit-Limit": "100", "X-RateLimit-Reset": "60"},
        )
    )

    async with _client(recorder) as client:
        await client.get_export_urls("FILE", ids=["1:1"], format=ExportFormat.PNG)
        info = client.rate_limit_info

    assert (info.remaining, info.limit, info.reset) == (3, 100, 60)


# ───────────────────────── мапінг статусів ─────────────────────────
@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status, error_type",
    [(401, AuthFailedError), (403, AuthFailedError), (404, NotFoundError), (400, NetworkError)],
)
async def test_client_errors_are_not_retried(status, error_type):
    recorder = _Recorder(httpx.Response(status, text="nope"))

    async with _client(recorder) as client:
        with pytest.raises(error_type) as info:
            await client.get_export_urls("FILE", ids=["1:1"], format=ExportFormat.PNG)

    assert len(recorder.requests) == 1
    assert info.value.status_code == status
    assert info.value.recoverable is False


@pytest.mark.asyncio
async def test_server_error_retried_then_succeeds():
    recorder = _Recorder(httpx.Response(502), httpx.Response(200, json={"images": {"1:1": "u"}}))

    async with _client(recorder) as client:
        result = await client.get_export_urls("FILE", ids=["1:1"], format=ExportFormat.PNG)

    assert len(recorder.requests) == 2
    assert result.images == {"1:1": "u"}


@pytest.mark.asyncio
async def test_persistent_429_becomes_terminal_rate_limit():
    sleeps: List[float] = []

    async def _sleep(seconds: float) -> None:
        sleeps.append(seconds)

    recorder = _Recorder(httpx.Response(429, headers={"Retry-After": "2"}))
    client = FigmaApiClient("t", retry_policy=POLICY, transport=httpx.MockTransport(recorder), sleep=_sleep)

    async with client:
        with pytest.raises(RateLimitedError) as info:
            await client.get_export_urls("FILE", ids=["1:1"], format=ExportFormat.PNG)

    assert len(recorder.requests) == POLICY.max_retries + 1
    assert sleeps == [2.0, 2.0]
    assert info.value.attempts == POLICY.max_retries + 1
    assert info.value.retry_after_s == 2.0


@pytest.mark.asyncio
async def test_timeout_mapped_and_retried():
    recorder = _Recorder(httpx.ReadTimeout("slow"))

    async with _client(recorder) as client:
        with pytest.raises(NetworkError) as info:
            await client.download("https://cdn/1.png")

    assert len(recorder.requests) == POLICY.max_retries + 1
    assert isinstance(info.value.__cause__, RequestTimeoutError)
    assert info.value.recoverable is False


# ───────────────────────── download ─────────────────────────
@pytest.mark.asyncio
async def test_download_returns_bytes_without_token():
    recorder = _Recorder(httpx.Response(200, content=b"\x89PNG"))

    async with _client(recorder) as client:
        data = await client.download("https://cdn/1.png")

    assert data == b"\x89PNG"
    assert TOKEN_HEADER not in recorder.requests[0].headers


@pytest.mark.asyncio
async def test_download_connect_error_recovers():
    recorder = _Recorder(httpx.ConnectError("reset"), httpx.Response(200, content=b"ok"))

    async with _client(recorder) as client:
        assert await client.download("https://cdn/1.svg") == b"ok"

    assert len(recorder.requests) == 2
