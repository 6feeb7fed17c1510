"""Fixtures for notification infrastructure tests."""

import pytest

from infrastructure.notifications.channels import (
    BrowserSender,
    EmailSender,
    LoggingTransport,
    PushSender,
    ToastSender,
)
from infrastructure.notifications.dispatcher import NotificationDispatcher
from infrastructure.notifications.models import ChannelKind
from infrastructure.notifications.preferences import (
    InMemoryPreferenceStore,
    NotificationPreferenceGate,
)
from infrastructure.notifications.store import NotificationStore

ADDRESS_BOOK = {
    "user-alice": "alice@example.com",
    "user-bob": "bob@example.com",
}


@pytest.fixture
def transport():
    """Logging transport shared by every sender; inspect ``history``."""
    return LoggingTransport()


@pytest.fixture
def preference_store():
    return InMemoryPreferenceStore()


@pytest.fixture
def gate(preference_store, fake_clock):
    return NotificationPreferenceGate(preference_store, clock=fake_clock)


@pytest.fixture
def store():
    return NotificationStore()


@pytest.fixture
def senders(transport):
    return {
        ChannelKind.TOAST: ToastSender(transport),
        ChannelKind.BROWSER: BrowserSender(transport),
        ChannelKind.PUSH: PushSender(transport),
        ChannelKind.EMAIL: EmailSender(transport, ADDRESS_BOOK.get),
    }


@pytest.fixture
def dispatcher(store, gate, senders):
    return NotificationDispatcher(
        store=store, gate=gate, senders=senders, send_timeout_seconds=0.05
    )
