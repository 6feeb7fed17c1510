"""Per-client rate limiting settings."""

from pydantic import Field

from infrastructure.configuration.base import InfrastructureSettings


class RateLimitSettings(InfrastructureSettings):
    """Fixed-window rate limiter configuration.

    Environment Variables:
        RATE_LIMIT_MAX_REQUESTS: Requests allowed per key per window (default: 100)
        RATE_LIMIT_WINDOW_SECONDS: Window length in seconds (default: 60)
        RATE_LIMIT_CLEANUP_INTERVAL: Checks between purges of expired windows
    """

    max_requests: int = Field(
        default=100,
        alias="RATE_LIMIT_MAX_REQUESTS",
        ge=1,
        description="Requests allowed per key per window",
    )
    window_seconds: float = Field(
        default=60.0,
        alias="RATE_LIMIT_WINDOW_SECONDS",
        gt=0,
        description="Fixed window length (seconds)",
    )
    cleanup_interval: int = Field(
        default=1000,
        alias="RATE_LIMIT_CLEANUP_INTERVAL",
        ge=1,
        description="Number of checks between purges of expired windows",
    )
