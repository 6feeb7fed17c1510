"""Unit tests for the central error classifier."""

import asyncio

import httpx
import pytest

from infrastructure.operations import (
    CircuitOpenError,
    NotFoundError,
    OperationResult,
    OperationStatus,
    PermanentError,
    RateLimitedError,
    TransientError,
    ValidationError,
    classify_error,
    is_retryable,
)
from infrastructure.operations.classifiers import classify_http_status


def _http_status_error(status_code: int) -> httpx.HTTPStatusError:
    request = httpx.Request("POST", "https://push.example.com/send")
    response = httpx.Response(status_code, request=request)
    return httpx.HTTPStatusError("boom", request=request, response=response)


@pytest.mark.unit
class TestClassifyError:
    """Raw exceptions map onto the error taxonomy by type."""

    def test_operation_errors_pass_through_unchanged(self):
        original = ValidationError("bad input")
        assert classify_error(original) is original

    @pytest.mark.parametrize(
        "exc",
        [
            TimeoutError("slow"),
            asyncio.TimeoutError(),
            ConnectionError("refused"),
            OSError("network unreachable"),
            httpx.ConnectTimeout("connect timeout"),
            httpx.ConnectError("connect failed"),
        ],
    )
    def test_network_failures_are_transient(self, exc):
        error = classify_error(exc)
        assert isinstance(error, TransientError)
        assert error.retryable is True
        assert error.cause is exc

    @pytest.mark.parametrize(
        "exc",
        [
            PermissionError("denied"),
            ValueError("duplicate key"),
            KeyError("missing"),
            TypeError("wrong type"),
            RuntimeError("unexpected"),
        ],
    )
    def test_other_failures_are_permanent(self, exc):
        error = classify_error(exc)
        assert isinstance(error, PermanentError)
        assert error.retryable is False

    def test_permission_error_is_not_treated_as_os_error(self):
        error = classify_error(PermissionError("denied"))
        assert error.error_code == "FORBIDDEN"

    def test_timeout_error_code(self):
        assert classify_error(TimeoutError()).error_code == "TIMEOUT"

    @pytest.mark.parametrize("status_code", [429, 500, 502, 503, 408])
    def test_http_retryable_statuses_are_transient(self, status_code):
        error = classify_error(_http_status_error(status_code))
        assert isinstance(error, TransientError)

    @pytest.mark.parametrize("status_code", [400, 401, 403, 404, 422])
    def test_http_client_errors_are_permanent(self, status_code):
        error = classify_error(_http_status_error(status_code))
        assert isinstance(error, PermanentError)

    def test_classification_ignores_message_text(self):
        error = classify_error(RuntimeError("connection timeout, please retry"))
        assert isinstance(error, PermanentError)

    def test_is_retryable(self):
        assert is_retryable(ConnectionError()) is True
        assert is_retryable(ValueError()) is False
        assert is_retryable(CircuitOpenError("db")) is False


@pytest.mark.unit
class TestClassifyHttpStatus:
    def test_unauthorized(self):
        assert classify_http_status(401, "x").error_code == "UNAUTHORIZED"

    def test_not_found(self):
        assert classify_http_status(404, "x").error_code == "NOT_FOUND"

    def test_rate_limited_downstream_is_transient(self):
        error = classify_http_status(429, "push gateway")
        assert isinstance(error, TransientError)
        assert "push gateway" in error.message


@pytest.mark.unit
class TestOperationErrors:
    def test_http_statuses(self):
        assert ValidationError("x").http_status == 400
        assert RateLimitedError().http_status == 429
        assert TransientError("x").http_status == 500
        assert PermanentError("x").http_status == 500
        assert CircuitOpenError("db").http_status == 500
        assert NotFoundError("x").http_status == 404

    def test_rate_limited_payload_carries_retry_after(self):
        error = RateLimitedError(retry_after=42)
        assert error.to_dict() == {"error": "Rate limit exceeded", "retryAfter": 42}

    def test_circuit_open_message_includes_retry_hint(self):
        error = CircuitOpenError("message_persistence", retry_in_seconds=12.7)
        assert "message_persistence" in error.message
        assert "12 seconds" in error.message
        assert error.status == OperationStatus.CIRCUIT_OPEN

    def test_default_error_codes(self):
        assert ValidationError("x").error_code == "VALIDATION_ERROR"
        assert NotFoundError("x").error_code == "NOT_FOUND"
        assert NotFoundError("x").retryable is False
        assert TransientError("x", error_code="DB_DOWN").error_code == "DB_DOWN"


@pytest.mark.unit
class TestOperationResultFromException:
    def test_from_transient_exception(self):
        result = OperationResult.from_exception(ConnectionError("refused"))
        assert result.status == OperationStatus.TRANSIENT_ERROR
        assert result.error_code == "CONNECTION_ERROR"
        assert not result.is_success

    def test_from_rate_limited_error_keeps_retry_after(self):
        result = OperationResult.from_exception(RateLimitedError(retry_after=7))
        assert result.status == OperationStatus.RATE_LIMITED
        assert result.retry_after == 7
