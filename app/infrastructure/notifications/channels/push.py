"""Push notification channel (service worker / push gateway)."""

from typing import Any, Dict, List

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

VIEW_ACTION_TITLES = {
    NotificationCategory.MEETING: "Join Meeting",
    NotificationCategory.TASK: "View Task",
    NotificationCategory.IDEA: "View Idea",
    NotificationCategory.CHAT: "View Message",
    NotificationCategory.MENTION: "View Message",
    NotificationCategory.SYSTEM: "View",
}


class PushSender(ChannelSender):
    """Builds service-worker ``showNotification`` payloads with actions."""

    def __init__(
        self, transport: NotificationTransport, icon_url: str = "/favicon.ico"
    ):
        super().__init__(transport)
        self.icon_url = icon_url

    @property
    def kind(self) -> ChannelKind:
        return ChannelKind.PUSH

    def actions_for(self, notification: Notification) -> List[Dict[str, str]]:
        return [
            {"action": "view", "title": VIEW_ACTION_TITLES[notification.category]},
            {"action": "mark_read", "title": "Mark as Read"},
        ]

    def build_payload(
        self, notification: Notification, recipient: Dict[str, Any]
    ) -> Dict[str, Any]:
        return {
            "recipient_id": recipient["recipient_id"],
            "title": notification.title,
            "body": notification.body,
            "icon": self.icon_url,
            "badge": self.icon_url,
            "tag": notification_tag(notification),
            "data": notification_data(notification),
            "actions": self.actions_for(notification),
            "requireInteraction": True,
            "silent": not notification.play_sound,
        }
