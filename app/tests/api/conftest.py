"""Fixtures for API route tests."""

import pytest
from fastapi.testclient import TestClient

from api.dependencies.rate_limits import get_limiter
from server.server import handler
from tests.fixtures.services import build_services, override_providers


@pytest.fixture(autouse=True)
def reset_slowapi_limits():
    """The slowapi limiter keeps its counters in process memory."""
    get_limiter().reset()
    yield
    get_limiter().reset()


@pytest.fixture
def api_settings(test_settings):
    """Settings behind the API client; override per test module."""
    return test_settings


@pytest.fixture
def services(api_settings, fake_clock):
    return build_services(api_settings, clock=fake_clock)


@pytest.fixture
def client(services):
    override_providers(handler, services)
    yield TestClient(handler)
    handler.dependency_overrides.clear()
