"""Central error classifier.

Maps raw exceptions raised by downstream dependencies (persistence,
HTTP transports, channel providers) into the ``OperationError`` taxonomy.
This is the only place where a raw exception is inspected; everything
downstream of it (retry decisions, HTTP responses, dispatch reports)
works from the classified error.

Mapping:
- OperationError subclasses: returned unchanged
- httpx.HTTPStatusError: 429 and 5xx transient, other 4xx permanent
- httpx.TransportError, TimeoutError, ConnectionError, other OSError: transient
- PermissionError: permanent (checked before OSError)
- ValueError, LookupError, TypeError: permanent
- anything else: permanent

Usage:
    from infrastructure.operations.classifiers import classify_error

    try:
        repository.save(message)
    except Exception as exc:
        raise classify_error(exc) from exc
"""

import asyncio
from typing import Optional

import httpx

from infrastructure.operations.errors import (
    OperationError,
    PermanentError,
    TransientError,
)


def classify_http_status(status_code: Optional[int], detail: str) -> OperationError:
    """Classify an HTTP status code returned by a downstream service.

    Args:
        status_code: HTTP status of the downstream response
        detail: Human readable context for the error message

    Returns:
        TransientError for 408, 429 and 5xx, PermanentError otherwise
    """
    if status_code == 429:
        return TransientError(f"{detail}: rate limited", error_code="RATE_LIMITED")
    if status_code == 408:
        return TransientError(f"{detail}: request timeout", error_code="TIMEOUT")
    if status_code in (401, 403):
        return PermanentError(f"{detail}: not authorized", error_code="UNAUTHORIZED")
    if status_code == 404:
        return PermanentError(f"{detail}: not found", error_code="NOT_FOUND")
    if status_code and 500 <= status_code < 600:
        return TransientError(
            f"{detail}: server error ({status_code})", error_code="SERVER_ERROR"
        )
    return PermanentError(
        f"{detail}: client error ({status_code})", error_code="HTTP_ERROR"
    )


def classify_error(exc: BaseException) -> OperationError:
    """Classify any exception into the operation error taxonomy.

    Args:
        exc: Exception raised by an operation

    Returns:
        OperationError subclass instance. Already classified errors are
        returned as-is; wrapped errors keep the original on ``cause``.
    """
    if isinstance(exc, OperationError):
        return exc

    if isinstance(exc, httpx.HTTPStatusError):
        error = classify_http_status(
            exc.response.status_code, f"HTTP {exc.request.method} {exc.request.url}"
        )
        error.cause = exc
        return error

    if isinstance(exc, (httpx.TimeoutException, asyncio.TimeoutError, TimeoutError)):
        return TransientError(
            f"Timeout: {type(exc).__name__}: {exc}", error_code="TIMEOUT", cause=exc
        )

    if isinstance(exc, httpx.TransportError):
        return TransientError(
            f"Connection error: {type(exc).__name__}: {exc}",
            error_code="CONNECTION_ERROR",
            cause=exc,
        )

    if isinstance(exc, PermissionError):
        return PermanentError(
            f"Permission denied: {exc}", error_code="FORBIDDEN", cause=exc
        )

    if isinstance(exc, (ConnectionError, OSError)):
        return TransientError(
            f"Connection error: {type(exc).__name__}: {exc}",
            error_code="CONNECTION_ERROR",
            cause=exc,
        )

    if isinstance(exc, (ValueError, LookupError, TypeError)):
        return PermanentError(
            f"Invalid operation: {type(exc).__name__}: {exc}",
            error_code="INVALID_REQUEST",
            cause=exc,
        )

    return PermanentError(
        f"Unexpected error: {type(exc).__name__}: {exc}",
        error_code="UNKNOWN_ERROR",
        cause=exc,
    )


def is_retryable(exc: BaseException) -> bool:
    """True if the classified form of ``exc`` may succeed on retry."""
    return classify_error(exc).retryable
