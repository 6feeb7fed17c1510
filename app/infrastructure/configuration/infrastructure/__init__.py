"""Infrastructure settings __init__ - exports all infrastructure settings."""

from infrastructure.configuration.infrastructure.circuit_breaker import (
    CircuitBreakerSettings,
)
from infrastructure.configuration.infrastructure.rate_limit import RateLimitSettings
from infrastructure.configuration.infrastructure.retry import RetrySettings
from infrastructure.configuration.infrastructure.server import ServerSettings

__all__ = [
    "CircuitBreakerSettings",
    "RateLimitSettings",
    "RetrySettings",
    "ServerSettings",
]
