"""Multi-channel notification delivery.

Provides notification dispatch (in-app, toast, browser, push, email) with:
- An in-app store with per-recipient subscriptions
- Per-category channel preferences and quiet hours
- Concurrent fan-out with a timeout per channel
- Builders for workspace events (mentions, messages, meetings, tasks)

Usage:
    from infrastructure.notifications import (
        ChannelKind,
        NotificationService,
        builders,
    )

    notification = builders.meeting_started(
        recipient_id="user-bob",
        user_name="alice",
        meeting_type="video",
        meeting_id="meet-1",
    )
    report = await service.dispatch(
        notification, channels=[ChannelKind.IN_APP, ChannelKind.PUSH]
    )
"""

from infrastructure.notifications import builders
from infrastructure.notifications.channels import (
    BrowserSender,
    ChannelSender,
    EmailSender,
    LoggingTransport,
    NotificationTransport,
    PushSender,
    ToastSender,
    WebhookTransport,
)
from infrastructure.notifications.dispatcher import NotificationDispatcher
from infrastructure.notifications.models import (
    ChannelKind,
    ChannelPreference,
    DispatchReport,
    Notification,
    NotificationCategory,
    NotificationPreferences,
    NotificationPriority,
    NotificationResult,
    NotificationStatus,
    QuietHours,
)
from infrastructure.notifications.preferences import (
    InMemoryPreferenceStore,
    NotificationPreferenceGate,
    PreferenceStore,
)
from infrastructure.notifications.service import NotificationService, build_senders
from infrastructure.notifications.store import NotificationStore

__all__ = [
    "builders",
    # Models
    "ChannelKind",
    "ChannelPreference",
    "DispatchReport",
    "Notification",
    "NotificationCategory",
    "NotificationPreferences",
    "NotificationPriority",
    "NotificationResult",
    "NotificationStatus",
    "QuietHours",
    # Preferences
    "PreferenceStore",
    "InMemoryPreferenceStore",
    "NotificationPreferenceGate",
    # Store and dispatch
    "NotificationStore",
    "NotificationDispatcher",
    "NotificationService",
    "build_senders",
    # Channels
    "ChannelSender",
    "BrowserSender",
    "EmailSender",
    "PushSender",
    "ToastSender",
    "NotificationTransport",
    "LoggingTransport",
    "WebhookTransport",
]
