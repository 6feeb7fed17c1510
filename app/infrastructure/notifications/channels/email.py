"""Email notification channel."""

import html
from typing import Any, Callable, Dict, Optional

from infrastructure.logging import get_module_logger
from infrastructure.notifications.channels.base import ChannelSender
from infrastructure.notifications.channels.transports import NotificationTransport
from infrastructure.notifications.models import ChannelKind, Notification
from infrastructure.operations import OperationResult

logger = get_module_logger()

AddressResolver = Callable[[str], Optional[str]]


class EmailSender(ChannelSender):
    """Builds ``{to, subject, text, html}`` messages for a mail relay.

    Args:
        transport: Transport carrying the message to the relay
        address_resolver: Maps a recipient ID to an email address
    """

    def __init__(
        self, transport: NotificationTransport, address_resolver: AddressResolver
    ):
        super().__init__(transport)
        self.address_resolver = address_resolver

    @property
    def kind(self) -> ChannelKind:
        return ChannelKind.EMAIL

    def resolve_recipient(self, notification: Notification) -> OperationResult:
        """Look up the recipient's email address.

        Returns:
            OperationResult with ``{"recipient_id", "email"}`` in data, or a
            permanent error when the recipient has no address on file.
        """
        address = self.address_resolver(notification.recipient_id)
        if not address:
            logger.warning(
                "email_address_missing", recipient_id=notification.recipient_id
            )
            return OperationResult.permanent_error(
                message=f"No email address for recipient {notification.recipient_id}",
                error_code="MISSING_EMAIL",
            )
        return OperationResult.success(
            data={"recipient_id": notification.recipient_id, "email": address}
        )

    def build_payload(
        self, notification: Notification, recipient: Dict[str, Any]
    ) -> Dict[str, Any]:
        url = notification.data.get("url")
        text = notification.body
        if url:
            text = f"{text}\n\nView at: {url}"
        link = (
            f'<p><a href="{html.escape(url, quote=True)}">Open</a></p>' if url else ""
        )
        return {
            "recipient_id": recipient["recipient_id"],
            "to": recipient["email"],
            "subject": notification.title,
            "text": text,
            "html": (
                f"<h2>{html.escape(notification.title)}</h2>"
                f"<p>{html.escape(notification.body)}</p>{link}"
            ),
            "category": notification.category.value,
        }
