# tests/shared/test_errors.py
import pytest

from iconsprite.shared.errors import (
    AuthFailedError,
    ErrorKind,
    ExportFailedError,
    ExportFailureContext,
    HttpErrorContext,
    NetworkError,
    PackingContext,
    PackingError,
    RateLimitContext,
    RateLimitedError,
    RequestTimeoutError,
    SpriteError,
    SvgOptimizationError,
)


@pytest.mark.parametrize(
    "kind, code",
    [
        (ErrorKind.AUTH_FAILED, "E201"),
        (ErrorKind.NOT_FOUND, "E202"),
        (ErrorKind.RATE_LIMITED, "E203"),
        (ErrorKind.EXPORT_FAILED, "E205"),
        (ErrorKind.NETWORK_ERROR, "E206"),
        (ErrorKind.TIMEOUT, "E207"),
        (ErrorKind.IMAGE_PROCESSING_FAILED, "E401"),
        (ErrorKind.SVG_OPTIMIZATION_FAILED, "E402"),
        (ErrorKind.PACKING_FAILED, "E403"),
        (ErrorKind.SPRITE_GENERATION_FAILED, "E404"),
    ],
)
def test_every_kind_has_stable_code(kind, code):
    assert kind.code == code


def test_default_recoverability_per_class():
    assert AuthFailedError("x").recoverable is False
    assert RateLimitedError("x").recoverable is True
    assert NetworkError("x").recoverable is True
    assert SvgOptimizationError("x").recoverable is True
    assert PackingError("x").recoverable is False
    assert RateLimitedError("x", recoverable=False).recoverable is False


def test_timeout_is_network_error_with_own_code():
    error = RequestTimeoutError("slow")
    assert isinstance(error, NetworkError)
    assert error.code == "E207"
    assert error.recoverable is True


def test_status_code_comes_from_context():
    error = AuthFailedError("denied", context=HttpErrorContext(url="u", status_code=403))
    assert error.status_code == 403
    assert RateLimitedError("x").status_code == 429
    assert PackingError("x").status_code is None


def test_rate_limit_accessors():
    error = RateLimitedError("x", context=RateLimitContext(retry_after_s=2.5, attempts=4))
    assert error.retry_after_s == 2.5
    assert error.attempts == 4


def test_export_failed_accessors():
    error = ExportFailedError("all", context=ExportFailureContext(format="png", total=3, sample_reasons=("a: b",)))
    assert error.total == 3
    assert error.sample_reasons == ("a: b",)
    assert error.failures == ()
    assert "ctx_failures" not in error.to_log_extra()


def test_log_extra_is_flat_and_skips_empty_fields():
    error = PackingError("bad", context=PackingContext(icon_count=2, icon_ids=("a", "b")))

    extra = error.to_log_extra()

    assert extra == {
        "error_kind": "packing_failed",
        "error_code": "E403",
        "recoverable": False,
        "ctx_icon_count": 2,
        "ctx_icon_ids": ["a", "b"],
    }
    assert "ctx_url" not in AuthFailedError("x", context=HttpErrorContext()).to_log_extra()


def test_user_message_has_code_and_hints():
    message = AuthFailedError("Token rejected").to_user_message()

    first, *hints = message.splitlines()
    assert first == "[E201] Token rejected"
    assert hints and all(line.startswith("  • ") for line in hints)


def test_all_errors_share_base_class():
    for cls in (AuthFailedError, RateLimitedError, NetworkError, ExportFailedError, PackingError):
        assert issubclass(cls, SpriteError)
        assert str(cls("msg")) == "msg"
