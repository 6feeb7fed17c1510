"""Circuit breaker for downstream dependencies.

The circuit breaker prevents cascading failures by:
1. CLOSED state: Normal operation, calls pass through
2. OPEN state: Fast-fail calls without invoking the dependency
3. HALF_OPEN state: Admit exactly one trial call to test recovery

State transitions:
- CLOSED -> OPEN: After failure_threshold consecutive failures
- OPEN -> HALF_OPEN: Once more than reset_timeout_seconds have passed since
  the last failure (checked lazily on the next call)
- HALF_OPEN -> CLOSED: Trial call succeeds (failure count reset to 0)
- HALF_OPEN -> OPEN: Trial call fails (last failure time refreshed)

State is guarded by a ``threading.Lock`` that is released before the wrapped
call runs, so ``call_async`` never holds it across an ``await``.
"""

import threading
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, Tuple, Type

from infrastructure.logging import get_module_logger
from infrastructure.operations import CircuitOpenError, ValidationError
from infrastructure.resilience.clock import Clock, SystemClock

logger = get_module_logger()


class CircuitState(Enum):
    """Circuit breaker states."""

    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitBreaker:
    """Three-state failure guard around a downstream call.

    Args:
        name: Name of the circuit (typically the backend it protects)
        failure_threshold: Consecutive failures before opening
        reset_timeout_seconds: Cooldown before a trial call is admitted
        clock: Time source (defaults to SystemClock)
        ignored_exceptions: Exceptions that pass through without counting
            as failures (caller mistakes say nothing about backend health)
    """

    def __init__(
        self,
        name: str,
        failure_threshold: int = 5,
        reset_timeout_seconds: float = 30.0,
        clock: Optional[Clock] = None,
        ignored_exceptions: Tuple[Type[BaseException], ...] = (ValidationError,),
    ):
        if failure_threshold < 1:
            raise ValueError("failure_threshold must be at least 1")

        self.name = name
        self.failure_threshold = failure_threshold
        self.reset_timeout_seconds = reset_timeout_seconds
        self.clock = clock or SystemClock()
        self.ignored_exceptions = ignored_exceptions

        self._state = CircuitState.CLOSED
        self._failure_count = 0
        self._success_count = 0
        self._rejected_count = 0
        self._last_failure_at: Optional[float] = None
        self._trial_in_flight = False

        self._lock = threading.Lock()

    @property
    def state(self) -> CircuitState:
        """Current circuit state."""
        with self._lock:
            return self._state

    @property
    def failure_count(self) -> int:
        with self._lock:
            return self._failure_count

    @property
    def last_failure_at(self) -> Optional[float]:
        with self._lock:
            return self._last_failure_at

    def call(self, func: Callable[..., Any], *args, **kwargs) -> Any:
        """Execute a synchronous function through the breaker.

        Raises:
            CircuitOpenError: If the circuit rejects the call
            Exception: Anything raised by ``func``
        """
        self._before_call()
        try:
            result = func(*args, **kwargs)
        except self.ignored_exceptions:
            self._release_trial()
            raise
        except Exception as e:
            self._on_failure(e)
            raise
        self._on_success()
        return result

    async def call_async(
        self, func: Callable[..., Awaitable[Any]], *args, **kwargs
    ) -> Any:
        """Await an async function through the breaker.

        Raises:
            CircuitOpenError: If the circuit rejects the call
            Exception: Anything raised by ``func``
        """
        self._before_call()
        try:
            result = await func(*args, **kwargs)
        except self.ignored_exceptions:
            self._release_trial()
            raise
        except Exception as e:
            self._on_failure(e)
            raise
        except BaseException:
            # Cancelled trial: free the slot without judging the backend.
            self._release_trial()
            raise
        self._on_success()
        return result

    def _before_call(self) -> None:
        with self._lock:
            if self._state == CircuitState.OPEN:
                if self._should_attempt_reset():
                    self._transition_to_half_open()
                else:
                    self._rejected_count += 1
                    remaining = self._remaining_cooldown()
                    logger.warning(
                        "circuit_breaker_open",
                        name=self.name,
                        failure_count=self._failure_count,
                        retry_in_seconds=int(remaining),
                    )
                    raise CircuitOpenError(self.name, retry_in_seconds=remaining)

            if self._state == CircuitState.HALF_OPEN:
                if self._trial_in_flight:
                    self._rejected_count += 1
                    logger.debug("circuit_breaker_trial_in_flight", name=self.name)
                    raise CircuitOpenError(self.name)
                self._trial_in_flight = True

    def _release_trial(self) -> None:
        with self._lock:
            self._trial_in_flight = False

    def _on_success(self) -> None:
        with self._lock:
            self._success_count += 1
            if self._state == CircuitState.HALF_OPEN:
                logger.info("circuit_breaker_trial_succeeded", name=self.name)
                self._transition_to_closed()
            elif self._failure_count > 0:
                logger.debug(
                    "circuit_breaker_failure_count_reset",
                    name=self.name,
                    previous_failures=self._failure_count,
                )
                self._failure_count = 0

    def _on_failure(self, exception: BaseException) -> None:
        with self._lock:
            self._failure_count += 1
            self._last_failure_at = self.clock.now()

            if self._state == CircuitState.HALF_OPEN:
                logger.warning(
                    "circuit_breaker_recovery_failed",
                    name=self.name,
                    error=str(exception),
                )
                self._transition_to_open()
            elif self._state == CircuitState.CLOSED:
                if self._failure_count >= self.failure_threshold:
                    logger.error(
                        "circuit_breaker_threshold_exceeded",
                        name=self.name,
                        failure_count=self._failure_count,
                        threshold=self.failure_threshold,
                        error=str(exception),
                    )
                    self._transition_to_open()
                else:
                    logger.warning(
                        "circuit_breaker_failure",
                        name=self.name,
                        failure_count=self._failure_count,
                        threshold=self.failure_threshold,
                        error=str(exception),
                    )

    def _should_attempt_reset(self) -> bool:
        if self._last_failure_at is None:
            return True
        return self.clock.now() - self._last_failure_at > self.reset_timeout_seconds

    def _remaining_cooldown(self) -> float:
        if self._last_failure_at is None:
            return 0.0
        elapsed = self.clock.now() - self._last_failure_at
        return max(0.0, self.reset_timeout_seconds - elapsed)

    def _transition_to_closed(self) -> None:
        logger.info("circuit_breaker_closed", name=self.name)
        self._state = CircuitState.CLOSED
        self._failure_count = 0
        self._trial_in_flight = False

    def _transition_to_open(self) -> None:
        logger.error(
            "circuit_breaker_opened",
            name=self.name,
            reset_timeout_seconds=self.reset_timeout_seconds,
        )
        self._state = CircuitState.OPEN
        self._trial_in_flight = False

    def _transition_to_half_open(self) -> None:
        logger.info("circuit_breaker_half_open", name=self.name)
        self._state = CircuitState.HALF_OPEN
        self._trial_in_flight = False

    def get_stats(self) -> dict:
        """Circuit breaker statistics for health endpoints."""
        with self._lock:
            return {
                "name": self.name,
                "state": self._state.value,
                "failure_count": self._failure_count,
                "failure_threshold": self.failure_threshold,
                "success_count": self._success_count,
                "rejected_count": self._rejected_count,
                "last_failure_at": self._last_failure_at,
                "reset_timeout_seconds": self.reset_timeout_seconds,
            }

    def reset(self) -> None:
        """Manually close the circuit (admin operations and tests)."""
        with self._lock:
            logger.info("circuit_breaker_manual_reset", name=self.name)
            self._transition_to_closed()
            self._last_failure_at = None
