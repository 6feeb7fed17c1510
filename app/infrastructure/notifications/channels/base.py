"""Channel sender abstract base class.

Every non in-app channel (browser, push, email, toast) implements this
interface. The dispatcher treats them interchangeably: it only calls
``send`` under a timeout and ``health_check`` for status reporting.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict

from infrastructure.notifications.channels.transports import NotificationTransport
from infrastructure.notifications.models import (
    ChannelKind,
    Notification,
    NotificationResult,
    NotificationStatus,
)
from infrastructure.operations import OperationResult


class ChannelSender(ABC):
    """Abstract base class for notification channel senders.

    Subclasses provide the channel kind and the payload format; the base
    class resolves the recipient and hands the payload to the transport.

    Example Implementation:
        class ToastSender(ChannelSender):

            @property
            def kind(self) -> ChannelKind:
                return ChannelKind.TOAST

            def build_payload(self, notification, recipient):
                return {"title": notification.title, "description": notification.body}
    """

    def __init__(self, transport: NotificationTransport):
        self.transport = transport

    @property
    @abstractmethod
    def kind(self) -> ChannelKind:
        """Channel this sender delivers on."""

    @abstractmethod
    def build_payload(
        self, notification: Notification, recipient: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Channel-specific payload for ``notification``.

        Args:
            notification: Notification being delivered
            recipient: Data returned by ``resolve_recipient``
        """

    def resolve_recipient(self, notification: Notification) -> OperationResult:
        """Resolve the recipient to a channel address.

        The default addresses the recipient by ID.

        Returns:
            OperationResult with address data on success
        """
        return OperationResult.success(data={"recipient_id": notification.recipient_id})

    async def send(self, notification: Notification) -> NotificationResult:
        """Deliver ``notification`` on this channel.

        Raises:
            PermanentError: If the recipient cannot be addressed
            Exception: Anything raised by the transport
        """
        resolved = self.resolve_recipient(notification).raise_for_status()
        payload = self.build_payload(notification, resolved.data or {})
        await self.transport.deliver(self.kind, payload)
        return NotificationResult(
            notification_id=notification.id,
            channel=self.kind,
            status=NotificationStatus.SENT,
            message=f"Delivered via {self.kind.value}",
        )

    def health_check(self) -> OperationResult:
        """Channel health, as reported by the transport."""
        return self.transport.health_check()


def notification_tag(notification: Notification) -> str:
    """Grouping tag so clients replace rather than stack related alerts."""
    channel_id = notification.data.get("channel_id")
    return channel_id or f"{notification.category.value}-notification"


def notification_data(notification: Notification) -> Dict[str, Any]:
    """Routing data attached to client-facing payloads."""
    return {
        **notification.data,
        "notificationId": notification.id,
        "category": notification.category.value,
    }
