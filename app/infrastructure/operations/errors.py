"""Classified error taxonomy.

Every failure that crosses a component boundary is an ``OperationError``
subclass. The class carries the status tag, whether a retry may help, and
the HTTP status the API layer answers with, so callers never have to
inspect exception messages.

Hierarchy:
    OperationError
    ├── ValidationError      (400, never retried)
    ├── RateLimitedError     (429, carries retry_after)
    ├── NotFoundError        (404, never retried)
    ├── TransientError       (retryable)
    ├── PermanentError       (not retryable)
    └── CircuitOpenError     (not retryable, downstream not called)
"""

from typing import Optional

from infrastructure.operations.status import OperationStatus


class OperationError(Exception):
    """Base class for classified operation failures.

    Attributes:
        message: Human-friendly description
        error_code: Machine readable code
        cause: Original exception, when this error wraps one
    """

    status: OperationStatus = OperationStatus.PERMANENT_ERROR
    retryable: bool = False
    http_status: int = 500
    default_code: str = "OPERATION_ERROR"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_code
        self.cause = cause

    def to_dict(self) -> dict:
        return {"error": self.message, "code": self.error_code}


class ValidationError(OperationError):
    """Caller supplied input that can never succeed."""

    status = OperationStatus.VALIDATION_ERROR
    http_status = 400
    default_code = "VALIDATION_ERROR"


class RateLimitedError(OperationError):
    """Caller exceeded its allowance for the current window.

    Attributes:
        retry_after: Whole seconds until the window resets
    """

    status = OperationStatus.RATE_LIMITED
    http_status = 429
    default_code = "RATE_LIMITED"

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        retry_after: int = 1,
        error_code: Optional[str] = None,
    ):
        super().__init__(message, error_code=error_code)
        self.retry_after = retry_after

    def to_dict(self) -> dict:
        return {"error": self.message, "retryAfter": self.retry_after}


class NotFoundError(OperationError):
    """Requested resource does not exist."""

    status = OperationStatus.PERMANENT_ERROR
    http_status = 404
    default_code = "NOT_FOUND"


class TransientError(OperationError):
    """Failure that may succeed when the operation is attempted again."""

    status = OperationStatus.TRANSIENT_ERROR
    retryable = True
    default_code = "TRANSIENT_ERROR"


class PermanentError(OperationError):
    """Failure that will not succeed on retry."""

    status = OperationStatus.PERMANENT_ERROR
    default_code = "PERMANENT_ERROR"


class CircuitOpenError(OperationError):
    """Raised by a circuit breaker that rejected the call without running it."""

    status = OperationStatus.CIRCUIT_OPEN
    default_code = "CIRCUIT_OPEN"

    def __init__(self, name: str, retry_in_seconds: Optional[float] = None):
        message = f"Circuit breaker '{name}' is open"
        if retry_in_seconds is not None:
            message = f"{message}. Retry in {max(0, int(retry_in_seconds))} seconds."
        super().__init__(message)
        self.name = name
        self.retry_in_seconds = retry_in_seconds
