"""Fixtures for end-to-end tests through the FastAPI handler."""

import pytest
from fastapi.testclient import TestClient

from api.dependencies.rate_limits import get_limiter
from server.server import handler
from tests.fixtures.repositories import FlakyRepository
from tests.fixtures.services import build_services, override_providers


@pytest.fixture
def repository():
    return FlakyRepository()


@pytest.fixture
def services(test_settings, fake_clock, repository):
    return build_services(test_settings, clock=fake_clock, repository=repository)


@pytest.fixture
def client(services):
    get_limiter().reset()
    override_providers(handler, services)
    yield TestClient(handler)
    handler.dependency_overrides.clear()
