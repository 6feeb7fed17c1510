"""Outcome of an operation that reports failure as a value.

Channel health checks and recipient resolution return an
``OperationResult`` instead of raising. ``raise_for_status`` converts a
failed result back into the matching ``OperationError`` at the point where
the caller decides the failure must propagate.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Type

from infrastructure.operations.classifiers import classify_error
from infrastructure.operations.errors import (
    OperationError,
    PermanentError,
    RateLimitedError,
    TransientError,
    ValidationError,
)
from infrastructure.operations.status import OperationStatus

_ERROR_TYPES: Dict[OperationStatus, Type[OperationError]] = {
    OperationStatus.VALIDATION_ERROR: ValidationError,
    OperationStatus.TRANSIENT_ERROR: TransientError,
    OperationStatus.PERMANENT_ERROR: PermanentError,
    OperationStatus.CIRCUIT_OPEN: PermanentError,
}


@dataclass
class OperationResult:
    """Status-tagged outcome.

    Attributes:
        status: High-level outcome
        message: Human readable summary for logs
        data: Payload on success (recipient address, health details, ...)
        error_code: Machine readable code on failure
        retry_after: Seconds to wait, for RATE_LIMITED results
    """

    status: OperationStatus
    message: str
    data: Optional[Any] = None
    error_code: Optional[str] = None
    retry_after: Optional[int] = None

    @property
    def is_success(self) -> bool:
        return self.status == OperationStatus.SUCCESS

    @property
    def is_retryable(self) -> bool:
        return self.status in (
            OperationStatus.TRANSIENT_ERROR,
            OperationStatus.RATE_LIMITED,
        )

    @classmethod
    def success(
        cls, data: Optional[Any] = None, message: str = "ok"
    ) -> "OperationResult":
        return cls(status=OperationStatus.SUCCESS, message=message, data=data)

    @classmethod
    def error(
        cls,
        status: OperationStatus,
        message: str,
        error_code: Optional[str] = None,
        retry_after: Optional[int] = None,
        data: Optional[Any] = None,
    ) -> "OperationResult":
        return cls(
            status=status,
            message=message,
            error_code=error_code,
            retry_after=retry_after,
            data=data,
        )

    @classmethod
    def transient_error(
        cls,
        message: str,
        error_code: Optional[str] = None,
        retry_after: Optional[int] = None,
    ) -> "OperationResult":
        return cls.error(
            OperationStatus.TRANSIENT_ERROR, message, error_code, retry_after
        )

    @classmethod
    def permanent_error(
        cls, message: str, error_code: Optional[str] = None
    ) -> "OperationResult":
        return cls.error(OperationStatus.PERMANENT_ERROR, message, error_code)

    @classmethod
    def from_exception(cls, exc: BaseException) -> "OperationResult":
        """Failed result carrying the classification of ``exc``."""
        classified = classify_error(exc)
        return cls.error(
            classified.status,
            classified.message,
            error_code=classified.error_code,
            retry_after=getattr(classified, "retry_after", None),
        )

    def raise_for_status(self) -> "OperationResult":
        """Raise the ``OperationError`` matching a failed result.

        Returns:
            The result itself when it is a success, for chaining

        Raises:
            OperationError: Subclass chosen from ``status``
        """
        if self.is_success:
            return self
        if self.status == OperationStatus.RATE_LIMITED:
            raise RateLimitedError(
                self.message,
                retry_after=self.retry_after or 1,
                error_code=self.error_code,
            )
        error_type = _ERROR_TYPES.get(self.status, PermanentError)
        raise error_type(self.message, error_code=self.error_code)
