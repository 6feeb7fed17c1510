"""slowapi limiter for the HTTP surface.

Route-level limits (probes, list endpoints) are enforced here. The
per-client send allowance is a separate concern handled by the
``RateLimiter`` inside message ingress; both key on the same client ID.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

UNKNOWN_CLIENT = "unknown"
FORWARDED_FOR = "x-forwarded-for"


def client_id_from_request(request: Request) -> str:
    """Caller identity: first ``X-Forwarded-For`` hop, else the peer address."""
    first_hop = request.headers.get(FORWARDED_FOR, "").split(",")[0].strip()
    if first_hop:
        return first_hop
    if request.client is None:
        return UNKNOWN_CLIENT
    return get_remote_address(request) or UNKNOWN_CLIENT


limiter = Limiter(key_func=client_id_from_request)


async def rate_limit_handler(_request: Request, exc: Exception) -> JSONResponse:
    # Same body shape as the ingress limiter minus retryAfter, which slowapi
    # does not expose per window.
    if not isinstance(exc, RateLimitExceeded):
        raise exc
    return JSONResponse(status_code=429, content={"error": "Rate limit exceeded"})


def setup_rate_limiter(app: FastAPI) -> Limiter:
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
    return limiter


def get_limiter() -> Limiter:
    return limiter
