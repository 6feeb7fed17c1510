"""Resilience service for dependency injection.

Owns the process-wide rate limiter, the circuit breaker registry and the
retry executor so handlers receive shared instances instead of reaching for
module-level state.
"""

import threading
from typing import Any, Awaitable, Callable, Dict, Optional, TYPE_CHECKING

from infrastructure.logging import get_module_logger
from infrastructure.operations import RateLimitedError
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
    rate_limit_key,
)
from infrastructure.resilience.retry import RetryExecutor, RetryPolicy

if TYPE_CHECKING:
    from infrastructure.configuration import Settings

logger = get_module_logger()


class ResilienceService:
    """Class-based resilience service.

    This service:
    - Enforces per-client rate limits through one shared RateLimiter
    - Manages a registry of named circuit breakers
    - Runs backend calls through retry and circuit breaking in one step

    Usage:
        # Via dependency injection
        from infrastructure.services import ResilienceServiceDep

        @router.get("/items")
        async def list_items(resilience: ResilienceServiceDep):
            resilience.enforce_rate_limit("list_items", client_id)
            return await resilience.run_protected("items_backend", backend.list)

        # Direct instantiation
        service = ResilienceService(settings, clock=FakeClock())
        breaker = service.get_or_create_circuit_breaker("items_backend")
    """

    def __init__(
        self,
        settings: "Settings",
        clock: Optional[Clock] = None,
        random_source: RandomSource = default_random,
        rate_limiter: Optional[RateLimiter] = None,
        retry_executor: Optional[RetryExecutor] = None,
    ):
        """Initialize resilience service.

        Args:
            settings: Settings instance (passed from provider).
            clock: Time source shared by every component.
            random_source: Jitter source for retry backoff.
            rate_limiter: Optional pre-configured limiter.
            retry_executor: Optional pre-configured executor.
        """
        self._settings = settings
        self.clock = clock or SystemClock()
        self._circuit_breakers: Dict[str, CircuitBreaker] = {}
        self._registry_lock = threading.Lock()

        self.rate_limiter = rate_limiter or RateLimiter(
            max_requests=settings.rate_limit.max_requests,
            window_seconds=settings.rate_limit.window_seconds,
            clock=self.clock,
            cleanup_interval=settings.rate_limit.cleanup_interval,
        )
        self.default_policy: RetryPolicy = settings.retry.to_policy()
        self.retry_executor = retry_executor or RetryExecutor(
            default_policy=self.default_policy,
            clock=self.clock,
            random_source=random_source,
        )

    def check_rate_limit(self, operation: str, client_id: str) -> RateLimitDecision:
        """Record one call by ``client_id`` and return the limiter's decision."""
        return self.rate_limiter.is_allowed(rate_limit_key(operation, client_id))

    def enforce_rate_limit(self, operation: str, client_id: str) -> RateLimitDecision:
        """Like ``check_rate_limit`` but raises when the call is denied.

        Raises:
            RateLimitedError: With ``retry_after`` in whole seconds
        """
        decision = self.check_rate_limit(operation, client_id)
        if not decision.allowed:
            raise RateLimitedError(
                retry_after=decision.retry_after(self.clock.now())
            )
        return decision

    def create_circuit_breaker(
        self,
        name: str,
        failure_threshold: Optional[int] = None,
        reset_timeout_seconds: Optional[float] = None,
    ) -> CircuitBreaker:
        """Create and register a new circuit breaker.

        Thresholds default to the circuit_breaker settings.

        Raises:
            ValueError: If a circuit breaker with this name already exists
        """
        with self._registry_lock:
            if name in self._circuit_breakers:
                raise ValueError(f"Circuit breaker '{name}' already exists")
            return self._create_locked(name, failure_threshold, reset_timeout_seconds)

    def _create_locked(
        self,
        name: str,
        failure_threshold: Optional[int],
        reset_timeout_seconds: Optional[float],
    ) -> CircuitBreaker:
        defaults = self._settings.circuit_breaker
        cb = CircuitBreaker(
            name=name,
            failure_threshold=failure_threshold or defaults.failure_threshold,
            reset_timeout_seconds=(
                reset_timeout_seconds
                if reset_timeout_seconds is not None
                else defaults.reset_timeout_seconds
            ),
            clock=self.clock,
        )
        self._circuit_breakers[name] = cb
        logger.info(
            "circuit_breaker_created",
            name=name,
            failure_threshold=cb.failure_threshold,
            reset_timeout_seconds=cb.reset_timeout_seconds,
        )
        return cb

    def get_circuit_breaker(self, name: str) -> Optional[CircuitBreaker]:
        """Get a circuit breaker by name, or None if not registered."""
        with self._registry_lock:
            return self._circuit_breakers.get(name)

    def get_or_create_circuit_breaker(
        self,
        name: str,
        failure_threshold: Optional[int] = None,
        reset_timeout_seconds: Optional[float] = None,
    ) -> CircuitBreaker:
        """Get an existing circuit breaker or lazily create it on first use."""
        with self._registry_lock:
            existing = self._circuit_breakers.get(name)
            if existing is not None:
                return existing
            return self._create_locked(name, failure_threshold, reset_timeout_seconds)

    async def run_protected(
        self,
        breaker_name: str,
        func: Callable[..., Awaitable[Any]],
        *args,
        policy: Optional[RetryPolicy] = None,
        **kwargs,
    ) -> Any:
        """Await ``func`` through retry with the named breaker inside it.

        Each attempt re-evaluates the circuit, so a circuit that opens
        mid-retry stops the remaining attempts.

        Raises:
            OperationError: Classified failure from the last attempt
        """
        breaker = self.get_or_create_circuit_breaker(breaker_name)
        return await self.retry_executor.execute(
            lambda: breaker.call_async(func, *args, **kwargs),
            policy=policy,
            operation_name=breaker_name,
        )

    def get_all_circuit_breaker_stats(self) -> Dict[str, Dict[str, Any]]:
        """Statistics for all registered circuit breakers."""
        with self._registry_lock:
            breakers = dict(self._circuit_breakers)
        return {name: cb.get_stats() for name, cb in breakers.items()}

    def get_open_circuit_breakers(self) -> list[str]:
        """Names of circuit breakers currently OPEN."""
        with self._registry_lock:
            breakers = dict(self._circuit_breakers)
        return [
            name for name, cb in breakers.items() if cb.state == CircuitState.OPEN
        ]

    def reset_circuit_breaker(self, name: str) -> None:
        """Manually reset a circuit breaker.

        Raises:
            KeyError: If circuit breaker not found
        """
        cb = self.get_circuit_breaker(name)
        if not cb:
            raise KeyError(f"Circuit breaker '{name}' not found")
        cb.reset()

    def list_circuit_breakers(self) -> list[str]:
        """All registered circuit breaker names."""
        with self._registry_lock:
            return list(self._circuit_breakers.keys())
