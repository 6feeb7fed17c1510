"""Top-level ``Settings`` object composed of one model per section."""

from typing import Dict, Type

from pydantic_settings import BaseSettings

from infrastructure.configuration.base import ENV_CONFIG
from infrastructure.configuration.features import (
    MessagingSettings,
    NotificationSettings,
)
from infrastructure.configuration.infrastructure import (
    CircuitBreakerSettings,
    RateLimitSettings,
    RetrySettings,
    ServerSettings,
)

SECTIONS: Dict[str, Type[BaseSettings]] = {
    "messaging": MessagingSettings,
    "notifications": NotificationSettings,
    "server": ServerSettings,
    "rate_limit": RateLimitSettings,
    "retry": RetrySettings,
    "circuit_breaker": CircuitBreakerSettings,
}


class Settings(BaseSettings):
    """Relay configuration.

    Sections not passed to the constructor are loaded from the
    environment, so tests can replace one section and keep the rest:

        Settings(rate_limit=RateLimitSettings(RATE_LIMIT_MAX_REQUESTS=3))

    Environment Variables:
        PREFIX: Deployment prefix; empty in production
        LOG_LEVEL: Root log level name
        GIT_SHA: Deployed commit, reported by ``/version``
    """

    model_config = ENV_CONFIG

    PREFIX: str = ""
    LOG_LEVEL: str = "INFO"
    GIT_SHA: str = "Unknown"

    messaging: MessagingSettings
    notifications: NotificationSettings

    server: ServerSettings
    rate_limit: RateLimitSettings
    retry: RetrySettings
    circuit_breaker: CircuitBreakerSettings

    def __init__(self, **sections):
        for name, section_type in SECTIONS.items():
            sections.setdefault(name, section_type())
        super().__init__(**sections)

    @property
    def is_production(self) -> bool:
        return not self.PREFIX
