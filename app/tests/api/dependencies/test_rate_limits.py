from unittest.mock import Mock

import httpx
import pytest
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from api.dependencies import rate_limits
from api.dependencies.requests import get_sender_id
from api.routes.system import router as system_router


def _request(headers=None, host="192.168.1.1"):
    mock_request = Mock(spec=Request)
    mock_request.headers = headers or {}
    if host is None:
        mock_request.client = None
    else:
        mock_request.client.host = host
    return mock_request


@pytest.mark.unit
class TestClientIdFromRequest:
    def test_uses_first_forwarded_hop(self):
        request = _request({"x-forwarded-for": "10.0.0.7, 172.16.0.1"})

        assert rate_limits.client_id_from_request(request) == "10.0.0.7"

    def test_falls_back_to_remote_address(self):
        assert rate_limits.client_id_from_request(_request()) == "192.168.1.1"

    def test_blank_forwarded_header_is_ignored(self):
        request = _request({"x-forwarded-for": " , 172.16.0.1"})

        assert rate_limits.client_id_from_request(request) == "192.168.1.1"

    def test_unknown_without_peer(self):
        request = _request(host=None)

        assert rate_limits.client_id_from_request(request) == "unknown"


@pytest.mark.unit
def test_sender_defaults_to_anonymous():
    assert get_sender_id(_request()) == "anonymous"
    assert get_sender_id(_request({"x-user-id": "user-bob"})) == "user-bob"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_rate_limit_handler():
    mock_request = Mock(spec=Request)
    mock_exception = Mock(spec=RateLimitExceeded)

    response = await rate_limits.rate_limit_handler(mock_request, mock_exception)

    assert isinstance(response, JSONResponse)
    assert response.status_code == 429
    assert response.body.decode("utf-8") == '{"error":"Rate limit exceeded"}'


@pytest.mark.integration
@pytest.mark.asyncio
async def test_system_endpoint_rate_limiting():
    """The /version route is limited to 50 requests a minute per client."""
    app = FastAPI()
    rate_limits.setup_rate_limiter(app)
    app.include_router(system_router)

    transport = httpx.ASGITransport(app=app)

    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        for _ in range(50):
            response = await client.get("/version")
            assert response.status_code == 200

        response = await client.get("/version")
        assert response.status_code == 429
        assert response.json() == {"error": "Rate limit exceeded"}
