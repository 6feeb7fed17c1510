"""Async retry executor with exponential backoff.

Runs an async operation, classifying every failure through the central
classifier. Non-retryable failures (validation, permanent, open circuit)
surface immediately; retryable ones are retried with backoff until the
policy's attempts are exhausted, then the last classified error surfaces.

Backoff waits go through the injected clock, so they suspend only the
calling coroutine and hold no locks.

Usage:
    executor = RetryExecutor(clock=clock)
    message = await executor.execute(
        lambda: breaker.call_async(repository.save, message),
        policy=RetryPolicy(max_attempts=3),
    )
"""

from typing import Any, Awaitable, Callable, Optional, TypeVar

from infrastructure.logging import get_module_logger
from infrastructure.operations import OperationError, classify_error
from infrastructure.resilience.clock import (
    Clock,
    RandomSource,
    SystemClock,
    default_random,
)
from infrastructure.resilience.retry.policy import RetryPolicy

logger = get_module_logger()

T = TypeVar("T")

RetryCallback = Callable[[int, OperationError, float], Any]


class RetryExecutor:
    """Execute async operations under a RetryPolicy.

    Args:
        default_policy: Policy used when ``execute`` is not given one
        clock: Clock used for backoff sleeps
        random_source: Jitter source returning floats in [0, 1)
        on_retry: Optional callback ``(attempt, error, delay)`` invoked
            before each backoff sleep
    """

    def __init__(
        self,
        default_policy: Optional[RetryPolicy] = None,
        clock: Optional[Clock] = None,
        random_source: RandomSource = default_random,
        on_retry: Optional[RetryCallback] = None,
    ):
        self.default_policy = default_policy or RetryPolicy()
        self.clock = clock or SystemClock()
        self.random_source = random_source
        self.on_retry = on_retry

    async def execute(
        self,
        operation: Callable[[], Awaitable[T]],
        policy: Optional[RetryPolicy] = None,
        operation_name: str = "operation",
    ) -> T:
        """Run ``operation`` until it succeeds or the policy gives up.

        Args:
            operation: Zero-argument callable returning an awaitable
            policy: Overrides the executor's default policy
            operation_name: Label used in logs

        Returns:
            The operation's result

        Raises:
            OperationError: The classified failure. The original exception
                is chained as ``__cause__``.
        """
        policy = policy or self.default_policy

        for attempt in range(policy.max_attempts):
            try:
                return await operation()
            except Exception as exc:
                error = classify_error(exc)

                if not error.retryable:
                    logger.info(
                        "retry_aborted_non_retryable",
                        operation=operation_name,
                        attempt=attempt + 1,
                        error_code=error.error_code,
                        status=error.status.value,
                    )
                    if error is exc:
                        raise
                    raise error from exc

                if attempt == policy.max_attempts - 1:
                    logger.warning(
                        "retry_exhausted",
                        operation=operation_name,
                        attempts=policy.max_attempts,
                        error_code=error.error_code,
                        error=error.message,
                    )
                    if error is exc:
                        raise
                    raise error from exc

                delay = policy.compute_delay(attempt, self.random_source)
                logger.info(
                    "retry_scheduled",
                    operation=operation_name,
                    attempt=attempt + 1,
                    max_attempts=policy.max_attempts,
                    delay_seconds=round(delay, 3),
                    error_code=error.error_code,
                )
                if self.on_retry is not None:
                    self.on_retry(attempt, error, delay)
                await self.clock.sleep(delay)

        # max_attempts >= 1 guarantees the loop returns or raises.
        raise RuntimeError("retry loop exited without a result")
