"""Structured logging for the relay.

Every module takes its logger from ``get_module_logger()``; the HTTP
middleware wraps each request in ``bind_request_context`` so that log
lines emitted while the request is handled share one correlation ID.
"""

from infrastructure.logging.context import (
    CORRELATION_HEADER,
    bind_request_context,
    clear_request_context,
    get_correlation_id,
)
from infrastructure.logging.setup import (
    configure_logging,
    get_logger,
    get_module_logger,
)

__all__ = [
    "CORRELATION_HEADER",
    "bind_request_context",
    "clear_request_context",
    "configure_logging",
    "get_correlation_id",
    "get_logger",
    "get_module_logger",
]
