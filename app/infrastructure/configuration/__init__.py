"""Environment-driven configuration, one pydantic-settings model per section.

Application code receives ``Settings`` from
``infrastructure.services.get_settings`` rather than instantiating it, so
tests can swap the whole object through the provider cache.
"""

from infrastructure.configuration.settings import SECTIONS, Settings
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

__all__ = [
    "SECTIONS",
    "Settings",
    "MessagingSettings",
    "NotificationSettings",
    "CircuitBreakerSettings",
    "RateLimitSettings",
    "RetrySettings",
    "ServerSettings",
]
