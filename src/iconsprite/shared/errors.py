# 🚨 iconsprite/shared/errors.py
"""
🚨 Єдина типізована ієрархія помилок пайплайна спрайтів.

🔹 `ErrorKind` — стабільні категорії з кодами `E2xx`/`E4xx`.
🔹 Кожна категорія має власний frozen-контекст (tagged union замість dict).
🔹 `SpriteError.recoverable` керує рішенням ретрай-рушія.
🔹 `to_log_extra()` / `to_user_message()` — для логів і для людини.
"""

from __future__ import annotations

# 🔠 Системні імпорти
from dataclasses import asdict, dataclass						# 🧱 Контексти помилок
from enum import Enum													# 🏷️ Категорії
from typing import TYPE_CHECKING, Dict, Optional, Sequence, Tuple, Union	# 🧰 Типізація

if TYPE_CHECKING:
    from iconsprite.domain.export.entities import ExportFailure


# ================================
# 🏷️ КАТЕГОРІЇ ПОМИЛОК
# ================================
class ErrorKind(Enum):
    """🏷️ Категорія помилки з кодом для користувача."""

    AUTH_FAILED = "auth_failed"											# 🔐 Токен відхилено
    NOT_FOUND = "not_found"												# 🔎 Файл/вузол не знайдено
    RATE_LIMITED = "rate_limited"										# 🚦 HTTP 429
    EXPORT_FAILED = "export_failed"										# 📤 Жодна іконка не експортована
    NETWORK_ERROR = "network_error"										# 🌐 Транспорт / 5xx
    TIMEOUT = "timeout"													# ⏳ Таймаут запиту
    IMAGE_PROCESSING_FAILED = "image_processing_failed"					# 🖼️ Pillow не впорався
    SVG_OPTIMIZATION_FAILED = "svg_optimization_failed"					# 🧹 Оптимізатор зламався
    PACKING_FAILED = "packing_failed"									# 📦 Пакування неможливе
    SPRITE_GENERATION_FAILED = "sprite_generation_failed"				# 🧩 Некоректний вхід для SVG

    @property
    def code(self) -> str:
        return _KIND_CODES[self]


_KIND_CODES: Dict[ErrorKind, str] = {
    ErrorKind.AUTH_FAILED: "E201",
    ErrorKind.NOT_FOUND: "E202",
    ErrorKind.RATE_LIMITED: "E203",
    ErrorKind.EXPORT_FAILED: "E205",
    ErrorKind.NETWORK_ERROR: "E206",
    ErrorKind.TIMEOUT: "E207",
    ErrorKind.IMAGE_PROCESSING_FAILED: "E401",
    ErrorKind.SVG_OPTIMIZATION_FAILED: "E402",
    ErrorKind.PACKING_FAILED: "E403",
    ErrorKind.SPRITE_GENERATION_FAILED: "E404",
}

_SUGGESTIONS: Dict[ErrorKind, Tuple[str, ...]] = {
    ErrorKind.AUTH_FAILED: (
        "Перевірте змінну оточення FIGMA_TOKEN",
        "Згенеруйте новий персональний токен у налаштуваннях Figma",
    ),
    ErrorKind.NOT_FOUND: (
        "Перевірте file key у посиланні на файл",
        "Переконайтесь, що токен має доступ до файлу",
    ),
    ErrorKind.RATE_LIMITED: (
        "Зачекайте кілька хвилин і повторіть запуск",
        "Зменшіть кількість іконок або max_concurrency",
    ),
    ErrorKind.EXPORT_FAILED: (
        "Компоненти із зовнішніх бібліотек можуть не експортуватись",
        "Відʼєднайте інстанси (detach) або експортуйте з файлу бібліотеки",
    ),
    ErrorKind.NETWORK_ERROR: ("Перевірте мережеве зʼєднання та повторіть спробу",),
    ErrorKind.TIMEOUT: ("Збільшіть api.timeout_s або зменшіть розмір батча",),
    ErrorKind.PACKING_FAILED: ("Перевірте, що всі іконки мають ненульові розміри",),
    ErrorKind.SPRITE_GENERATION_FAILED: ("Перевірте viewBox експортованих SVG",),
}


# ================================
# 🧾 КОНТЕКСТИ (TAGGED UNION)
# ================================
@dataclass(frozen=True)
class HttpErrorContext:
    """🌐 Контекст HTTP-відповіді."""

    url: Optional[str] = None
    status_code: Optional[int] = None
    file_key: Optional[str] = None


@dataclass(frozen=True)
class RateLimitContext:
    """🚦 Контекст обмеження частоти."""

    url: Optional[str] = None
    retry_after_s: Optional[float] = None
    attempts: Optional[int] = None


@dataclass(frozen=True)
class NetworkErrorContext:
    """🌐 Контекст транспортної помилки або вичерпаних ретраїв."""

    url: Optional[str] = None
    status_code: Optional[int] = None
    attempts: Optional[int] = None
    total_time_ms: Optional[float] = None
    last_error: Optional[str] = None


@dataclass(frozen=True)
class ExportFailureContext:
    """📤 Підсумок повністю проваленого експорту."""

    format: str = ""
    total: int = 0
    sample_reasons: Tuple[str, ...] = ()


@dataclass(frozen=True)
class PackingContext:
    """📦 Контекст пакування."""

    icon_count: int = 0
    icon_ids: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ImageProcessingContext:
    """🖼️ Контекст растрової обробки."""

    icon_id: Optional[str] = None
    width: Optional[float] = None
    height: Optional[float] = None
    detail: Optional[str] = None


@dataclass(frozen=True)
class SvgContext:
    """🧩 Контекст SVG-збірки."""

    icon_id: Optional[str] = None
    view_box: Optional[str] = None
    detail: Optional[str] = None


ErrorContext = Union[
    HttpErrorContext,
    RateLimitContext,
    NetworkErrorContext,
    ExportFailureContext,
    PackingContext,
    ImageProcessingContext,
    SvgContext,
]


# ================================
# 🧠 БАЗОВИЙ КЛАС
# ================================
class SpriteError(Exception):
    """🧠 Базова помилка пайплайна з категорією та контекстом."""

    kind: ErrorKind = ErrorKind.NETWORK_ERROR
    default_recoverable: bool = False

    def __init__(
        self,
        message: str,
        *,
        context: Optional[ErrorContext] = None,
        recoverable: Optional[bool] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.context = context
        self.recoverable = self.default_recoverable if recoverable is None else bool(recoverable)

    @property
    def code(self) -> str:
        return self.kind.code

    @property
    def status_code(self) -> Optional[int]:
        return getattr(self.context, "status_code", None)

    def to_log_extra(self) -> Dict[str, object]:
        """📦 Плоский словник для `logger.extra`."""
        extra: Dict[str, object] = {
            "error_kind": self.kind.value,
            "error_code": self.code,
            "recoverable": self.recoverable,
        }
        if self.context is not None:
            for key, value in asdict(self.context).items():
                if value is not None and value != ():
                    extra[f"ctx_{key}"] = list(value) if isinstance(value, tuple) else value
        return extra

    def to_user_message(self) -> str:
        """👀 Людське повідомлення з кодом і порадами."""
        lines = [f"[{self.code}] {self.message}"]
        for hint in _SUGGESTIONS.get(self.kind, ()):
            lines.append(f"  • {hint}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.code}, {self.message!r}, recoverable={self.recoverable})"


# ================================
# 🌐 МЕРЕЖЕВІ ТА API-ПОМИЛКИ
# ================================
class AuthFailedError(SpriteError):
    kind = ErrorKind.AUTH_FAILED


class NotFoundError(SpriteError):
    kind = ErrorKind.NOT_FOUND


class RateLimitedError(SpriteError):
    """🚦 429. Транзитна — recoverable, термінальна (після ретраїв) — ні."""

    kind = ErrorKind.RATE_LIMITED
    default_recoverable = True

    @property
    def retry_after_s(self) -> Optional[float]:
        return getattr(self.context, "retry_after_s", None)

    @property
    def attempts(self) -> Optional[int]:
        return getattr(self.context, "attempts", None)

    @property
    def status_code(self) -> Optional[int]:
        return 429


class NetworkError(SpriteError):
    """🌐 Транспортні збої, 5xx та вичерпані ретраї."""

    kind = ErrorKind.NETWORK_ERROR
    default_recoverable = True

    @property
    def attempts(self) -> Optional[int]:
        return getattr(self.context, "attempts", None)


class RequestTimeoutError(NetworkError):
    kind = ErrorKind.TIMEOUT


class ExportFailedError(SpriteError):
    """📤 Жоден експорт формату не вдався; `failures` несе повний перелік записів."""

    kind = ErrorKind.EXPORT_FAILED

    def __init__(
        self,
        message: str,
        *,
        context: Optional[ErrorContext] = None,
        recoverable: Optional[bool] = None,
        failures: Sequence["ExportFailure"] = (),
    ) -> None:
        super().__init__(message, context=context, recoverable=recoverable)
        self.failures: Tuple["ExportFailure", ...] = tuple(failures)

    @property
    def total(self) -> int:
        return getattr(self.context, "total", 0)

    @property
    def sample_reasons(self) -> Tuple[str, ...]:
        return getattr(self.context, "sample_reasons", ())


# ================================
# 🖼️ ПОМИЛКИ ГЕНЕРАЦІЇ
# ================================
class ImageProcessingError(SpriteError):
    kind = ErrorKind.IMAGE_PROCESSING_FAILED


class SvgOptimizationError(SpriteError):
    """🧹 Лише попередження: оптимізатор не впорався, лишаємо сирий SVG."""

    kind = ErrorKind.SVG_OPTIMIZATION_FAILED
    default_recoverable = True


class PackingError(SpriteError):
    kind = ErrorKind.PACKING_FAILED


class SpriteGenerationError(SpriteError):
    kind = ErrorKind.SPRITE_GENERATION_FAILED


# ================================
# 📤 ПУБЛІЧНИЙ API
# ================================
__all__ = [
    "ErrorKind",
    "ErrorContext",
    "HttpErrorContext",
    "RateLimitContext",
    "NetworkErrorContext",
    "ExportFailureContext",
    "PackingContext",
    "ImageProcessingContext",
    "SvgContext",
    "SpriteError",
    "AuthFailedError",
    "NotFoundError",
    "RateLimitedError",
    "NetworkError",
    "RequestTimeoutError",
    "ExportFailedError",
    "ImageProcessingError",
    "SvgOptimizationError",
    "PackingError",
    "SpriteGenerationError",
]
