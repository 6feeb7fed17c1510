"""Retry policy model.

Describes how many times an operation may be attempted and how long to
wait between attempts.
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator

from infrastructure.resilience.clock import RandomSource, default_random


class RetryPolicy(BaseModel):
    """Exponential backoff policy.

    Delay before retrying after attempt ``n`` (zero-based)::

        min(base_delay_seconds * backoff_multiplier ** n, max_delay_seconds)

    scaled by ``0.5 + random() * 0.5`` when ``jitter`` is enabled, so a
    jittered delay never exceeds the unjittered one.

    Example:
        policy = RetryPolicy(max_attempts=5, base_delay_seconds=0.5)
        policy.compute_delay(2, random_source=lambda: 0.0)  # 1.0
    """

    model_config = ConfigDict(frozen=True)

    max_attempts: int = Field(default=3, ge=1)
    base_delay_seconds: float = Field(default=1.0, ge=0)
    max_delay_seconds: float = Field(default=10.0, ge=0)
    backoff_multiplier: float = Field(default=2.0, ge=1)
    jitter: bool = True

    @model_validator(mode="after")
    def _check_bounds(self) -> "RetryPolicy":
        if self.max_delay_seconds < self.base_delay_seconds:
            raise ValueError("max_delay_seconds must be >= base_delay_seconds")
        return self

    def compute_delay(
        self, attempt: int, random_source: RandomSource = default_random
    ) -> float:
        """Delay in seconds to wait after the given zero-based attempt failed."""
        delay = min(
            self.base_delay_seconds * (self.backoff_multiplier**attempt),
            self.max_delay_seconds,
        )
        if self.jitter:
            delay *= 0.5 + random_source() * 0.5
        return delay
