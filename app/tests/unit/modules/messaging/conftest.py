"""Fixtures for messaging module tests."""

import pytest

from infrastructure.notifications import NotificationService
from infrastructure.resilience import ResilienceService
from modules.messaging import MessageIngress
from tests.factories import make_directory
from tests.fixtures.repositories import FlakyRepository


@pytest.fixture
def messaging_settings(settings_factory):
    """Settings used by the ingress fixtures; override per test module."""
    return settings_factory(
        retry={"RETRY_JITTER": False},
        circuit_breaker={"CIRCUIT_BREAKER_FAILURE_THRESHOLD": 3},
    )


@pytest.fixture
def directory():
    return make_directory()


@pytest.fixture
def repository():
    return FlakyRepository()


@pytest.fixture
def resilience(messaging_settings, fake_clock, fake_random):
    return ResilienceService(
        messaging_settings, clock=fake_clock, random_source=fake_random
    )


@pytest.fixture
def notifications(messaging_settings, fake_clock, directory):
    return NotificationService(
        messaging_settings, clock=fake_clock, address_resolver=directory.email_for
    )


@pytest.fixture
def ingress(messaging_settings, resilience, repository, notifications, directory):
    return MessageIngress(
        settings=messaging_settings.messaging,
        resilience=resilience,
        repository=repository,
        notifications=notifications,
        directory=directory,
    )
