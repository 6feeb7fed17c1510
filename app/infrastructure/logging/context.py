"""Per-request logging context.

Values bound here live in structlog's context variables, so they follow
the request across ``await`` points and never leak between concurrent
requests.
"""

import uuid
from contextlib import contextmanager
from typing import Any, Iterator, Optional

import structlog

CORRELATION_HEADER = "X-Correlation-ID"


@contextmanager
def bind_request_context(
    correlation_id: Optional[str] = None,
    client_id: Optional[str] = None,
    user_id: Optional[str] = None,
    request_path: Optional[str] = None,
    request_method: Optional[str] = None,
    **extra_context: Any,
) -> Iterator[str]:
    """Attach request fields to every log entry emitted inside the block.

    Fields passed as ``None`` are omitted rather than logged as null. A
    fresh UUID is used when the caller sent no correlation ID; the block
    receives whichever ID is in effect so the middleware can echo it in
    the ``X-Correlation-ID`` response header.

    Args:
        correlation_id: ID taken from the incoming request header.
        client_id: Rate-limit identity of the caller.
        user_id: Sender identity, when the request carries one.
        request_path: URL path.
        request_method: HTTP verb.
        **extra_context: Any further fields, bound as given.
    """
    fields: dict[str, Any] = {
        "correlation_id": correlation_id or str(uuid.uuid4()),
        "client_id": client_id,
        "user_id": user_id,
        "request_path": request_path,
        "request_method": request_method,
    }
    bound = {key: value for key, value in fields.items() if value is not None}
    bound.update(extra_context)

    structlog.contextvars.bind_contextvars(**bound)
    try:
        yield bound["correlation_id"]
    finally:
        structlog.contextvars.unbind_contextvars(*bound)


def get_correlation_id() -> Optional[str]:
    return structlog.contextvars.get_contextvars().get("correlation_id")


def clear_request_context() -> None:
    """Drop every bound field, e.g. between tests."""
    structlog.contextvars.clear_contextvars()
