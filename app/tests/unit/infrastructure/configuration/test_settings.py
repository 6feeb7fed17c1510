"""Unit tests for infrastructure.configuration settings.

Tests cover:
- Resilience settings defaults and environment overrides
- Messaging and notification settings
- Settings aggregator initialization
"""

import pytest
from pydantic import ValidationError

from infrastructure.configuration import (
    CircuitBreakerSettings,
    MessagingSettings,
    NotificationSettings,
    RateLimitSettings,
    RetrySettings,
    ServerSettings,
    Settings,
)
from infrastructure.services.providers import get_settings


@pytest.mark.unit
class TestRateLimitSettings:
    def test_defaults(self):
        settings = RateLimitSettings()

        assert settings.max_requests == 100
        assert settings.window_seconds == 60
        assert settings.cleanup_interval == 1000

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("RATE_LIMIT_MAX_REQUESTS", "10")
        monkeypatch.setenv("RATE_LIMIT_WINDOW_SECONDS", "5")

        settings = RateLimitSettings()

        assert settings.max_requests == 10
        assert settings.window_seconds == 5

    def test_rejects_zero_limit(self, monkeypatch):
        monkeypatch.setenv("RATE_LIMIT_MAX_REQUESTS", "0")

        with pytest.raises(ValidationError):
            RateLimitSettings()


@pytest.mark.unit
class TestRetrySettings:
    """Test suite for RetrySettings configuration."""

    def test_defaults(self):
        retry = RetrySettings()

        assert retry.max_attempts == 3
        assert retry.base_delay_seconds == 1.0
        assert retry.max_delay_seconds == 10.0
        assert retry.backoff_multiplier == 2.0
        assert retry.jitter is True

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("RETRY_MAX_ATTEMPTS", "5")
        monkeypatch.setenv("RETRY_JITTER", "false")

        retry = RetrySettings()

        assert retry.max_attempts == 5
        assert retry.jitter is False
        # Defaults preserved
        assert retry.base_delay_seconds == 1.0

    def test_to_policy(self):
        policy = RetrySettings(RETRY_MAX_ATTEMPTS=4, RETRY_JITTER=False).to_policy()

        assert policy.max_attempts == 4
        assert policy.jitter is False
        assert policy.max_delay_seconds == 10.0


@pytest.mark.unit
class TestCircuitBreakerSettings:
    def test_defaults(self):
        settings = CircuitBreakerSettings()

        assert settings.failure_threshold == 5
        assert settings.reset_timeout_seconds == 30

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("CIRCUIT_BREAKER_FAILURE_THRESHOLD", "2")
        monkeypatch.setenv("CIRCUIT_BREAKER_RESET_TIMEOUT_SECONDS", "0.5")

        settings = CircuitBreakerSettings()

        assert settings.failure_threshold == 2
        assert settings.reset_timeout_seconds == 0.5


@pytest.mark.unit
class TestFeatureSettings:
    def test_messaging_defaults(self):
        settings = MessagingSettings()

        assert settings.max_length == 2000
        assert settings.default_page_size == 50
        assert settings.max_page_size == 200
        assert settings.persistence_breaker == "message_persistence"

    def test_notification_default_channels(self):
        settings = NotificationSettings()

        assert settings.default_channel_list == [
            "in_app",
            "toast",
            "browser",
            "push",
            "email",
        ]

    def test_notification_channels_from_env(self, monkeypatch):
        monkeypatch.setenv("NOTIFICATION_DEFAULT_CHANNELS", " in_app , push ,")

        assert NotificationSettings().default_channel_list == ["in_app", "push"]

    def test_server_allowed_origins(self, monkeypatch):
        monkeypatch.setenv(
            "CORS_ALLOWED_ORIGINS", "https://chat.example.com, http://localhost:3000"
        )

        assert ServerSettings().allowed_origins == [
            "https://chat.example.com",
            "http://localhost:3000",
        ]


@pytest.mark.unit
class TestSettings:
    """Test suite for main Settings class."""

    def test_instantiates_every_section(self):
        settings = Settings()

        assert isinstance(settings.retry, RetrySettings)
        assert isinstance(settings.rate_limit, RateLimitSettings)
        assert isinstance(settings.circuit_breaker, CircuitBreakerSettings)
        assert isinstance(settings.messaging, MessagingSettings)
        assert isinstance(settings.notifications, NotificationSettings)
        assert isinstance(settings.server, ServerSettings)

    def test_explicit_section_is_kept(self):
        retry = RetrySettings(RETRY_MAX_ATTEMPTS=1)

        assert Settings(retry=retry).retry is retry

    def test_is_production(self, monkeypatch):
        monkeypatch.setenv("PREFIX", "")
        assert Settings().is_production is True

        monkeypatch.setenv("PREFIX", "dev-")
        assert Settings().is_production is False

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()
