"""Message ingress: the send and list entry points for chat messages.

A send runs through these steps:

1. Required fields are checked (``ValidationError``)
2. The sender's client is rate limited under ``send_message:{client_id}``
3. Content is sanitized; nothing left means ``ValidationError``
4. The message is persisted through retry with the persistence circuit
   breaker inside it
5. Mentioned users and the other channel members are notified

Notification fan-out never fails a send that was persisted.
"""

import asyncio
from datetime import datetime, timezone
from typing import List, Optional, Union

from infrastructure.configuration.features import MessagingSettings
from infrastructure.logging import get_module_logger
from infrastructure.notifications import NotificationService, builders
from infrastructure.operations import ValidationError
from infrastructure.resilience import ResilienceService
from modules.messaging.directory import UserDirectory
from modules.messaging.mentions import MentionExtractor
from modules.messaging.models import (
    Message,
    MessagePage,
    PageDirection,
    SendMessageRequest,
)
from modules.messaging.repository import MessageRepository
from modules.messaging.sanitizer import sanitize_content

logger = get_module_logger()

SEND_OPERATION = "send_message"
LIST_OPERATION = "messages"


class MessageIngress:
    """Validates, persists and announces chat messages.

    Args:
        settings: Messaging settings (length cap, page sizes, breaker name)
        resilience: Shared rate limiter, retry executor and breakers
        repository: Message persistence backend
        notifications: Notification service used for fan-out
        directory: Resolves handles and channel members
        extractor: Mention extractor (default instance when omitted)
    """

    def __init__(
        self,
        settings: MessagingSettings,
        resilience: ResilienceService,
        repository: MessageRepository,
        notifications: NotificationService,
        directory: UserDirectory,
        extractor: Optional[MentionExtractor] = None,
    ):
        self.settings = settings
        self.resilience = resilience
        self.repository = repository
        self.notifications = notifications
        self.directory = directory
        self.extractor = extractor or MentionExtractor()

    async def send_message(
        self, request: SendMessageRequest, client_id: str, sender_id: str
    ) -> Message:
        """Persist a message and notify the people it concerns.

        Raises:
            ValidationError: Missing channel or content, or nothing left
                after sanitizing
            RateLimitedError: Client exceeded its send allowance
            TransientError: Persistence kept failing transiently
            PermanentError: Persistence failed permanently
            CircuitOpenError: Persistence breaker is open
        """
        if not request.channel_id or not request.content:
            raise ValidationError(
                "channelId and content are required", error_code="MISSING_FIELDS"
            )

        self.resilience.enforce_rate_limit(SEND_OPERATION, client_id)

        content = sanitize_content(request.content, self.settings.max_length)
        if not content:
            raise ValidationError(
                "Message content is empty after sanitizing",
                error_code="EMPTY_CONTENT",
            )

        tokens = self.extractor.extract(content)
        message = Message(
            channel_id=request.channel_id,
            sender_id=sender_id,
            content=content,
            message_type=request.message_type,
            metadata=request.metadata,
            mentions=tokens.mentions,
            hashtags=tokens.hashtags,
            created_at=self.resilience.clock.now_datetime(),
        )

        saved = await self.resilience.run_protected(
            self.settings.persistence_breaker, self.repository.save, message
        )
        logger.info(
            "message_sent",
            message_id=saved.id,
            channel_id=saved.channel_id,
            sender_id=sender_id,
            mention_count=len(saved.mentions),
            hashtag_count=len(saved.hashtags),
        )

        try:
            await self._announce(saved)
        except Exception as e:
            logger.error(
                "message_fan_out_failed",
                message_id=saved.id,
                channel_id=saved.channel_id,
                error=str(e),
                exc_info=True,
            )
        return saved

    async def list_messages(
        self,
        channel_id: Optional[str],
        client_id: str,
        limit: Optional[int] = None,
        cursor: Optional[str] = None,
        direction: Union[str, PageDirection] = PageDirection.BEFORE,
    ) -> MessagePage:
        """Read one page of a channel's messages.

        Raises:
            ValidationError: Missing channel, bad limit, cursor or direction
            RateLimitedError: Client exceeded its read allowance
        """
        if not channel_id:
            raise ValidationError("channelId is required", error_code="MISSING_FIELDS")

        self.resilience.enforce_rate_limit(LIST_OPERATION, client_id)

        page_size = self._page_size(limit)
        try:
            page_direction = PageDirection(direction)
        except ValueError as e:
            raise ValidationError(
                "direction must be 'before' or 'after'", error_code="INVALID_DIRECTION"
            ) from e
        cursor_at = _parse_cursor(cursor)

        messages = await self.resilience.run_protected(
            self.settings.persistence_breaker,
            self.repository.list_messages,
            channel_id,
            page_size,
            cursor_at,
            page_direction,
        )
        return MessagePage.from_messages(messages, page_size)

    def mentioned_recipients(self, message: Message) -> List[str]:
        """Resolved, de-duplicated mention targets, excluding the sender."""
        recipients: List[str] = []
        for handle in message.mentions:
            user_id = self.directory.resolve(handle)
            if user_id is None or user_id == message.sender_id:
                continue
            if user_id not in recipients:
                recipients.append(user_id)
        return recipients

    async def _announce(self, message: Message) -> None:
        channel_name = self.directory.channel_name(message.channel_id)
        sender_name = self.directory.display_name(message.sender_id)
        mentioned = self.mentioned_recipients(message)

        notifications = [
            builders.mention(
                recipient_id=user_id,
                sender_id=message.sender_id,
                sender_name=sender_name,
                channel_id=message.channel_id,
                channel_name=channel_name,
                message_id=message.id,
                content=message.content,
                preview_length=self.settings.preview_length,
            )
            for user_id in mentioned
        ]

        is_direct = self.directory.is_direct(message.channel_id)
        for member in self.directory.channel_members(message.channel_id):
            if member == message.sender_id or member in mentioned:
                continue
            notifications.append(
                builders.new_message(
                    recipient_id=member,
                    sender_id=message.sender_id,
                    sender_name=sender_name,
                    channel_id=message.channel_id,
                    channel_name=channel_name,
                    message_id=message.id,
                    content=message.content,
                    is_direct=is_direct,
                    preview_length=self.settings.preview_length,
                )
            )

        if not notifications:
            return

        results = await asyncio.gather(
            *(self.notifications.dispatch(n) for n in notifications),
            return_exceptions=True,
        )
        for notification, result in zip(notifications, results):
            if isinstance(result, Exception):
                logger.error(
                    "message_notification_failed",
                    message_id=message.id,
                    recipient_id=notification.recipient_id,
                    category=notification.category.value,
                    error=str(result),
                )

    def _page_size(self, limit: Optional[int]) -> int:
        if limit is None:
            return self.settings.default_page_size
        if limit < 1:
            raise ValidationError(
                "limit must be at least 1", error_code="INVALID_LIMIT"
            )
        return min(limit, self.settings.max_page_size)


def _parse_cursor(cursor: Optional[str]) -> Optional[datetime]:
    if not cursor:
        return None
    # "+" in an unencoded query string arrives as a space
    value = cursor.strip().replace(" ", "+")
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as e:
        raise ValidationError(
            "cursor must be an ISO-8601 timestamp", error_code="INVALID_CURSOR"
        ) from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
