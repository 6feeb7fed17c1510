"""Operation result types, status enums and the classified error taxonomy.

Standardized result and error types shared by the resilience layer,
notification channels and the messaging module, plus the single
classifier that maps raw exceptions into that taxonomy.
"""

from infrastructure.operations.classifiers import (
    classify_error,
    classify_http_status,
    is_retryable,
)
from infrastructure.operations.errors import (
    CircuitOpenError,
    NotFoundError,
    OperationError,
    PermanentError,
    RateLimitedError,
    TransientError,
    ValidationError,
)
from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

__all__ = [
    "OperationResult",
    "OperationStatus",
    "OperationError",
    "ValidationError",
    "RateLimitedError",
    "TransientError",
    "PermanentError",
    "CircuitOpenError",
    "NotFoundError",
    "classify_error",
    "classify_http_status",
    "is_retryable",
]
