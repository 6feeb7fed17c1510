"""Toast channel (transient in-page banner)."""

from typing import Any, Dict

from infrastructure.notifications.channels.base import ChannelSender
from infrastructure.notifications.channels.transports import NotificationTransport
from infrastructure.notifications.models import ChannelKind, Notification

DEFAULT_DURATION_MS = 5000


class ToastSender(ChannelSender):
    """Builds toast payloads for connected clients."""

    def __init__(
        self, transport: NotificationTransport, duration_ms: int = DEFAULT_DURATION_MS
    ):
        super().__init__(transport)
        self.duration_ms = duration_ms

    @property
    def kind(self) -> ChannelKind:
        return ChannelKind.TOAST

    def build_payload(
        self, notification: Notification, recipient: Dict[str, Any]
    ) -> Dict[str, Any]:
        return {
            "recipient_id": recipient["recipient_id"],
            "title": notification.title,
            "description": notification.body,
            "duration": self.duration_ms,
            "variant": "destructive" if notification.is_urgent else "default",
            "playSound": notification.play_sound,
        }
