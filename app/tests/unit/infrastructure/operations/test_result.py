"""Unit tests for OperationResult and OperationStatus."""

import pytest

from infrastructure.operations.errors import (
    PermanentError,
    RateLimitedError,
    TransientError,
    ValidationError,
)
from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus


@pytest.mark.unit
class TestOperationStatus:
    @pytest.mark.parametrize(
        "status,value",
        [
            (OperationStatus.SUCCESS, "success"),
            (OperationStatus.VALIDATION_ERROR, "validation_error"),
            (OperationStatus.RATE_LIMITED, "rate_limited"),
            (OperationStatus.TRANSIENT_ERROR, "transient_error"),
            (OperationStatus.PERMANENT_ERROR, "permanent_error"),
            (OperationStatus.CIRCUIT_OPEN, "circuit_open"),
        ],
    )
    def test_values(self, status, value):
        assert status.value == value


@pytest.mark.unit
class TestOperationResultFactories:
    def test_success_factory_minimal(self):
        result = OperationResult.success()
        assert result.status == OperationStatus.SUCCESS
        assert result.is_success is True

    def test_success_factory_with_data(self):
        data = {"recipient_id": "user-bob"}
        result = OperationResult.success(data=data, message="Resolved")
        assert result.data == data
        assert result.message == "Resolved"

    def test_error_factory_with_error_code(self):
        result = OperationResult.error(
            OperationStatus.RATE_LIMITED,
            "Slow down",
            error_code="RATE_LIMITED",
            retry_after=30,
        )
        assert result.is_success is False
        assert result.retry_after == 30

    def test_transient_error_factory(self):
        result = OperationResult.transient_error("Timeout", error_code="TIMEOUT")
        assert result.status == OperationStatus.TRANSIENT_ERROR
        assert result.message == "Timeout"

    def test_permanent_error_factory(self):
        result = OperationResult.permanent_error(
            "No email address", error_code="NO_ADDRESS"
        )
        assert result.status == OperationStatus.PERMANENT_ERROR
        assert result.error_code == "NO_ADDRESS"


@pytest.mark.unit
class TestOperationResultRetryable:
    @pytest.mark.parametrize(
        "status,expected",
        [
            (OperationStatus.SUCCESS, False),
            (OperationStatus.TRANSIENT_ERROR, True),
            (OperationStatus.RATE_LIMITED, True),
            (OperationStatus.PERMANENT_ERROR, False),
            (OperationStatus.CIRCUIT_OPEN, False),
        ],
    )
    def test_is_retryable(self, status, expected):
        assert OperationResult.error(status, "x").is_retryable is expected


@pytest.mark.unit
class TestFromException:
    def test_connection_error_is_transient(self):
        result = OperationResult.from_exception(ConnectionError("reset"))

        assert result.status == OperationStatus.TRANSIENT_ERROR
        assert result.is_retryable is True

    def test_classified_error_keeps_code(self):
        result = OperationResult.from_exception(
            PermanentError("gone", error_code="NOT_FOUND")
        )

        assert result.status == OperationStatus.PERMANENT_ERROR
        assert result.error_code == "NOT_FOUND"

    def test_rate_limited_error_keeps_retry_after(self):
        result = OperationResult.from_exception(RateLimitedError(retry_after=12))

        assert result.status == OperationStatus.RATE_LIMITED
        assert result.retry_after == 12


@pytest.mark.unit
class TestRaiseForStatus:
    def test_success_returns_self(self):
        result = OperationResult.success(data={"email": "bob@example.com"})

        assert result.raise_for_status() is result

    @pytest.mark.parametrize(
        "status,error_type",
        [
            (OperationStatus.VALIDATION_ERROR, ValidationError),
            (OperationStatus.TRANSIENT_ERROR, TransientError),
            (OperationStatus.PERMANENT_ERROR, PermanentError),
            (OperationStatus.CIRCUIT_OPEN, PermanentError),
        ],
    )
    def test_raises_matching_error(self, status, error_type):
        result = OperationResult.error(status, "failed", error_code="SOME_CODE")

        with pytest.raises(error_type) as exc_info:
            result.raise_for_status()

        assert exc_info.value.message == "failed"
        assert exc_info.value.error_code == "SOME_CODE"

    def test_rate_limited_carries_retry_after(self):
        result = OperationResult.error(
            OperationStatus.RATE_LIMITED, "slow down", retry_after=7
        )

        with pytest.raises(RateLimitedError) as exc_info:
            result.raise_for_status()

        assert exc_info.value.retry_after == 7
