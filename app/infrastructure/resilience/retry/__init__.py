"""In-process retry with exponential backoff.

Architecture:
- RetryPolicy: attempts and backoff parameters (validated, immutable)
- RetryExecutor: runs an async operation under a policy, classifying each
  failure centrally and sleeping through the injected clock

Usage:
    from infrastructure.resilience.retry import RetryExecutor, RetryPolicy

    executor = RetryExecutor(default_policy=RetryPolicy(max_attempts=3))
    result = await executor.execute(lambda: client.fetch())
"""

from infrastructure.resilience.retry.executor import RetryCallback, RetryExecutor
from infrastructure.resilience.retry.policy import RetryPolicy

__all__ = [
    "RetryCallback",
    "RetryExecutor",
    "RetryPolicy",
]
