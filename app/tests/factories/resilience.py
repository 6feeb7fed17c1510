"""Factory functions for resilience test doubles."""

from typing import Any, Iterable, List


def make_flaky_operation(outcomes: Iterable[Any]):
    """Async operation that replays ``outcomes`` one per call.

    Exceptions (classes or instances) are raised, anything else is
    returned. The returned callable exposes ``calls`` for assertions.

    Example:
        >>> op = make_flaky_operation([TimeoutError("slow"), "ok"])
        >>> await op()  # raises TimeoutError
        >>> await op()  # "ok"
    """
    remaining: List[Any] = list(outcomes)

    async def operation():
        operation.calls += 1
        outcome = remaining.pop(0)
        if isinstance(outcome, type) and issubclass(outcome, BaseException):
            raise outcome()
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    operation.calls = 0
    return operation


def make_failing_callable(exc: BaseException):
    """Synchronous callable that always raises ``exc``."""

    def func(*args, **kwargs):
        raise exc

    return func
