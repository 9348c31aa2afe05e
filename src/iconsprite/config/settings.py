# 🧾 iconsprite/config/settings.py
"""
🧾 Типізовані налаштування пайплайна, побудовані з `ConfigService`.

🔹 Один frozen-dataclass на розділ (`api`, `export`, `retry`, `sprite`, `raster`, `vector`).
🔹 Значення з оточення приходять рядками: усі поля приводяться явно.
🔹 Некоректне значення → `ValueError` з назвою ключа.
"""

from __future__ import annotations

# 🔠 Системні імпорти
from dataclasses import dataclass, field								# 🧱 DTO налаштувань
from typing import Any, Callable, Optional, Tuple, TypeVar				# 🧰 Типізація

# 🧩 Внутрішні модулі проєкту
from iconsprite.config.config_service import ConfigService
from iconsprite.domain.network.retry_policy import RetryPolicy
from iconsprite.domain.sprite.entities import OverlapSeverity

T = TypeVar("T")

DEFAULT_BASE_URL = "https://api.figma.com"


@dataclass(frozen=True)
class ApiSettings:
    base_url: str = DEFAULT_BASE_URL
    timeout_s: float = 30.0
    token: Optional[str] = field(default=None, repr=False)			# 🔐 Не світимо у repr/логах


@dataclass(frozen=True)
class ExportSettings:
    batch_size: int = 50
    max_concurrency: int = 5
    raster: bool = True
    vector: bool = True


@dataclass(frozen=True)
class RasterSettings:
    scale: int = 2
    compression_level: int = 9
    background_color: Tuple[int, int, int, int] = (0, 0, 0, 0)


@dataclass(frozen=True)
class VectorSettings:
    optimize: bool = True
    pretty: bool = False
    preview: bool = True


@dataclass(frozen=True)
class PipelineSettings:
    """🧾 Повний набір налаштувань пайплайна."""

    api: ApiSettings = field(default_factory=ApiSettings)
    export: ExportSettings = field(default_factory=ExportSettings)
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    raster: RasterSettings = field(default_factory=RasterSettings)
    vector: VectorSettings = field(default_factory=VectorSettings)
    padding: int = 2
    overlap_severity: OverlapSeverity = OverlapSeverity.WARN

    @classmethod
    def from_config(cls, config: ConfigService) -> "PipelineSettings":
        """Будує налаштування з `ConfigService`, валідуючи кожне значення."""

        def read(key: str, cast: Callable[[Any], T], default: T) -> T:
            raw = config.get(key, default)
            try:
                return cast(raw)
            except (TypeError, ValueError) as exc:
                raise ValueError(f"Invalid config value for '{key}': {raw!r}") from exc

        export = ExportSettings(
            batch_size=read("export.batch_size", _positive_int, 50),
            max_concurrency=read("export.max_concurrency", _positive_int, 5),
            raster=read("export.raster", _as_bool, True),
            vector=read("export.vector", _as_bool, True),
        )
        api = ApiSettings(
            base_url=read("api.base_url", str, DEFAULT_BASE_URL).rstrip("/"),
            timeout_s=read("api.timeout_s", float, 30.0),
            token=config.get("api.token"),
        )
        try:
            retry = RetryPolicy(
                max_retries=read("retry.max_retries", int, 3),
                initial_delay_ms=read("retry.initial_delay_ms", float, 2000.0),
                max_delay_ms=read("retry.max_delay_ms", float, 60000.0),
                backoff_multiplier=read("retry.backoff_multiplier", float, 2.0),
                jitter=read("retry.jitter", float, 0.2),
            )
        except ValueError as exc:
            raise ValueError(f"Invalid config section 'retry': {exc}") from exc
        raster = RasterSettings(
            scale=read("raster.scale", _raster_scale, 2),
            compression_level=read("raster.compression_level", _compression_level, 9),
            background_color=read("raster.background_color", _rgba, (0, 0, 0, 0)),
        )
        vector = VectorSettings(
            optimize=read("vector.optimize", _as_bool, True),
            pretty=read("vector.pretty", _as_bool, False),
            preview=read("vector.preview", _as_bool, True),
        )
        return cls(
            api=api,
            export=export,
            retry=retry,
            raster=raster,
            vector=vector,
            padding=read("sprite.padding", _non_negative_int, 2),
            overlap_severity=read("sprite.overlap_severity", OverlapSeverity, OverlapSeverity.WARN),
        )


# ================================
# 🔧 ПРИВЕДЕННЯ ТИПІВ
# ================================
def _positive_int(value: Any) -> int:
    number = int(value)
    if number < 1:
        raise ValueError("must be >= 1")
    return number


def _non_negative_int(value: Any) -> int:
    number = int(value)
    if number < 0:
        raise ValueError("must be >= 0")
    return number


def _raster_scale(value: Any) -> int:
    number = int(value)
    if number not in (1, 2):
        raise ValueError("must be 1 or 2")
    return number


def _compression_level(value: Any) -> int:
    number = int(value)
    if not 0 <= number <= 9:
        raise ValueError("must be within 0..9")
    return number


def _rgba(value: Any) -> Tuple[int, int, int, int]:
    channels = tuple(int(c) for c in value)
    if len(channels) != 4 or any(not 0 <= c <= 255 for c in channels):
        raise ValueError("must be 4 channels within 0..255")
    return channels  # type: ignore[return-value]


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ("1", "true", "yes", "on"):
        return True
    if text in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"not a boolean: {value!r}")


__all__ = [
    "ApiSettings",
    "ExportSettings",
    "RasterSettings",
    "VectorSettings",
    "PipelineSettings",
]
