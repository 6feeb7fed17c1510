"""Retry backoff infrastructure settings."""

from pydantic import Field

from infrastructure.configuration.base import InfrastructureSettings


class RetrySettings(InfrastructureSettings):
    """Default retry policy for backend calls.

    Environment Variables:
        RETRY_MAX_ATTEMPTS: Total attempts including the first (default: 3)
        RETRY_BASE_DELAY_SECONDS: Delay before the first retry (default: 1.0)
        RETRY_MAX_DELAY_SECONDS: Cap applied to every delay (default: 10.0)
        RETRY_BACKOFF_MULTIPLIER: Exponential growth factor (default: 2.0)
        RETRY_JITTER: Scale each delay by a random factor in [0.5, 1.0)

    Exponential Backoff:
        Delay calculation: min(base_delay * multiplier ** attempt, max_delay)

        Example with defaults (base=1s, max=10s, no jitter):
            After attempt 0: 1s
            After attempt 1: 2s
            After attempt 2: 4s

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()
        policy = settings.retry.to_policy()
        ```
    """

    max_attempts: int = Field(
        default=3,
        alias="RETRY_MAX_ATTEMPTS",
        ge=1,
        description="Maximum attempts per operation, including the first",
    )
    base_delay_seconds: float = Field(
        default=1.0,
        alias="RETRY_BASE_DELAY_SECONDS",
        ge=0,
        description="Base delay for exponential backoff (seconds)",
    )
    max_delay_seconds: float = Field(
        default=10.0,
        alias="RETRY_MAX_DELAY_SECONDS",
        ge=0,
        description="Maximum delay between attempts (seconds)",
    )
    backoff_multiplier: float = Field(
        default=2.0,
        alias="RETRY_BACKOFF_MULTIPLIER",
        ge=1,
        description="Multiplier applied per attempt",
    )
    jitter: bool = Field(
        default=True,
        alias="RETRY_JITTER",
        description="Randomize delays to avoid synchronized retries",
    )

    def to_policy(self):
        """Build the RetryPolicy described by these settings."""
        from infrastructure.resilience.retry.policy import RetryPolicy

        return RetryPolicy(
            max_attempts=self.max_attempts,
            base_delay_seconds=self.base_delay_seconds,
            max_delay_seconds=self.max_delay_seconds,
            backoff_multiplier=self.backoff_multiplier,
            jitter=self.jitter,
        )
