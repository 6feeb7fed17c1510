"""Test data factories for deterministic test data generation."""

from tests.factories.messaging import (
    make_directory,
    make_message,
    make_message_series,
    make_send_request,
)
from tests.factories.notifications import (
    make_notification,
    make_notification_result,
    make_preferences,
)
from tests.factories.resilience import make_failing_callable, make_flaky_operation

__all__ = [
    "make_directory",
    "make_message",
    "make_message_series",
    "make_send_request",
    "make_notification",
    "make_notification_result",
    "make_preferences",
    "make_failing_callable",
    "make_flaky_operation",
]
