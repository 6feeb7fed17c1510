"""Browser notification channel (desktop notifications shown by the page)."""

from typing import Any, Dict

from infrastructure.notifications.channels.base import (
    ChannelSender,
    notification_data,
    notification_tag,
)
from infrastructure.notifications.channels.transports import NotificationTransport
from infrastructure.notifications.models import (
    ChannelKind,
    Notification,
    NotificationCategory,
)

# Categories whose alerts stay on screen until the user acts on them.
STICKY_CATEGORIES = frozenset(
    {NotificationCategory.MEETING, NotificationCategory.MENTION}
)


class BrowserSender(ChannelSender):
    """Builds Notification API options for an open browser session."""

    def __init__(
        self, transport: NotificationTransport, icon_url: str = "/favicon.ico"
    ):
        super().__init__(transport)
        self.icon_url = icon_url

    @property
    def kind(self) -> ChannelKind:
        return ChannelKind.BROWSER

    def build_payload(
        self, notification: Notification, recipient: Dict[str, Any]
    ) -> Dict[str, Any]:
        return {
            "recipient_id": recipient["recipient_id"],
            "title": notification.title,
            "body": notification.body,
            "icon": self.icon_url,
            "tag": notification_tag(notification),
            "data": notification_data(notification),
            "requireInteraction": notification.is_urgent
            or notification.category in STICKY_CATEGORIES,
            "silent": not notification.play_sound,
        }
