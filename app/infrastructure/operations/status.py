"""Outcome tags shared by results, errors and HTTP responses."""

from enum import Enum


class OperationStatus(Enum):
    """Outcome of a send, a save or a request.

    Only TRANSIENT_ERROR and RATE_LIMITED outcomes may succeed when
    repeated; VALIDATION_ERROR and PERMANENT_ERROR never will, and
    CIRCUIT_OPEN means the downstream call was not attempted.
    """

    SUCCESS = "success"
    VALIDATION_ERROR = "validation_error"
    RATE_LIMITED = "rate_limited"
    TRANSIENT_ERROR = "transient_error"
    PERMANENT_ERROR = "permanent_error"
    CIRCUIT_OPEN = "circuit_open"
