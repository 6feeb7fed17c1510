"""Resilience patterns and implementations.

Rate limiting, retry with backoff, circuit breaking and the injectable
clock they share.
"""

from infrastructure.resilience.circuit_breaker import CircuitBreaker, CircuitState
from infrastructure.resilience.clock import (
    Clock,
    RandomSource,
    SystemClock,
    default_random,
)
from infrastructure.resilience.rate_limiter import (
    RateLimitDecision,
    RateLimiter,
    RateWindow,
    rate_limit_key,
)
from infrastructure.resilience.retry import RetryExecutor, RetryPolicy
from infrastructure.resilience.service import ResilienceService

__all__ = [
    # Clock
    "Clock",
    "RandomSource",
    "SystemClock",
    "default_random",
    # Rate limiting
    "RateLimitDecision",
    "RateLimiter",
    "RateWindow",
    "rate_limit_key",
    # Circuit breaker
    "CircuitBreaker",
    "CircuitState",
    # Retry
    "RetryExecutor",
    "RetryPolicy",
    # Service
    "ResilienceService",
]
