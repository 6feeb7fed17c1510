"""Shared fixtures for the whole test suite."""

import pytest

from infrastructure.configuration import Settings
from infrastructure.logging import clear_request_context
from infrastructure.services import providers
from tests.fixtures.clock import FakeClock, FakeRandom

PROVIDERS = (
    providers.get_settings,
    providers.get_resilience_service,
    providers.get_user_directory,
    providers.get_notification_service,
    providers.get_message_repository,
    providers.get_message_ingress,
)


@pytest.fixture(autouse=True)
def reset_providers():
    """Give every test fresh application singletons and a clean log context."""
    for provider in PROVIDERS:
        provider.cache_clear()
    yield
    for provider in PROVIDERS:
        provider.cache_clear()
    clear_request_context()


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def fake_random():
    """Random source pinned at 0.5 (jitter multiplier 0.75)."""
    return FakeRandom(fallback=0.5)


@pytest.fixture
def settings_factory():
    """Factory for Settings built from explicit environment-style overrides.

    Nested settings read their own aliases, so overrides are applied by
    section:

        settings = settings_factory(
            rate_limit={"RATE_LIMIT_MAX_REQUESTS": 2},
            retry={"RETRY_JITTER": False},
        )
    """

    def _factory(**sections) -> Settings:
        overrides = {
            section: Settings.model_fields[section].annotation(**values)
            for section, values in sections.items()
        }
        return Settings(**overrides)

    return _factory


@pytest.fixture
def test_settings(settings_factory):
    """Settings with jitter off and no webhook transports."""
    return settings_factory(
        retry={"RETRY_JITTER": False},
        notifications={
            "NOTIFICATION_BROWSER_WEBHOOK_URL": None,
            "NOTIFICATION_PUSH_WEBHOOK_URL": None,
            "NOTIFICATION_EMAIL_WEBHOOK_URL": None,
            "NOTIFICATION_TOAST_WEBHOOK_URL": None,
        },
    )
