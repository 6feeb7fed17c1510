"""Notification builders for workspace events.

Each builder turns one event into a ready-to-dispatch Notification with
the headline, body and routing data clients expect. Builders are pure:
they do not store or send anything.

Usage:
    from infrastructure.notifications import builders

    notification = builders.mention(
        recipient_id="user-bob",
        sender_id="user-alice",
        sender_name="alice",
        channel_id="c-1",
        channel_name="general",
        message_id="m-1",
        content="hi @bob",
    )
"""

import html
from typing import Optional

import bleach

from infrastructure.notifications.models import (
    Notification,
    NotificationCategory,
    NotificationPriority,
)

PREVIEW_LENGTH = 100


def plain_text(content: str) -> str:
    """Sanitized message HTML as the text a reader sees.

    Message content is stored as an escaped HTML fragment; notification
    bodies are plain text and escaped once more only where a channel
    renders HTML.
    """
    return html.unescape(bleach.clean(content, tags=set(), strip=True))


def preview(content: str, length: int = PREVIEW_LENGTH) -> str:
    """First ``length`` characters of ``content``, with an ellipsis if cut."""
    if len(content) <= length:
        return content
    return f"{content[:length]}..."


def _chat_data(channel_id: str, channel_name: str, sender_name: str, **extra) -> dict:
    data = {
        "channel_id": channel_id,
        "channel_name": channel_name,
        "sender_name": sender_name,
    }
    data.update({k: v for k, v in extra.items() if v is not None})
    return data


def mention(
    recipient_id: str,
    sender_id: str,
    sender_name: str,
    channel_id: str,
    channel_name: str,
    message_id: str,
    content: str,
    preview_length: int = PREVIEW_LENGTH,
) -> Notification:
    return Notification(
        category=NotificationCategory.MENTION,
        title=f"You were mentioned in #{channel_name}",
        body=f"{sender_name}: {preview(plain_text(content), preview_length)}",
        recipient_id=recipient_id,
        sender_id=sender_id,
        priority=NotificationPriority.HIGH,
        data=_chat_data(channel_id, channel_name, sender_name, message_id=message_id),
    )


def new_message(
    recipient_id: str,
    sender_id: str,
    sender_name: str,
    channel_id: str,
    channel_name: str,
    message_id: str,
    content: str,
    is_direct: bool = False,
    preview_length: int = PREVIEW_LENGTH,
) -> Notification:
    """Chat message notification. Direct messages are titled by sender."""
    title = (
        f"New message from {sender_name}"
        if is_direct
        else f"New message in #{channel_name}"
    )
    return Notification(
        category=NotificationCategory.CHAT,
        title=title,
        body=f"{sender_name}: {preview(plain_text(content), preview_length)}",
        recipient_id=recipient_id,
        sender_id=sender_id,
        data=_chat_data(channel_id, channel_name, sender_name, message_id=message_id),
    )


def meeting_started(
    recipient_id: str,
    user_name: str,
    meeting_type: str,
    meeting_id: str,
    meeting_url: Optional[str] = None,
    sender_id: Optional[str] = None,
) -> Notification:
    return Notification(
        category=NotificationCategory.MEETING,
        title="Meeting Started",
        body=f"{user_name} started a {meeting_type} meeting",
        recipient_id=recipient_id,
        sender_id=sender_id,
        priority=NotificationPriority.HIGH,
        data={
            "meeting_id": meeting_id,
            "meeting_type": meeting_type,
            "tag": f"meeting-{meeting_id}",
            **({"url": meeting_url} if meeting_url else {}),
        },
    )


def task_updated(
    recipient_id: str,
    user_name: str,
    task_title: str,
    progress: int,
    task_id: str,
    task_url: Optional[str] = None,
    sender_id: Optional[str] = None,
) -> Notification:
    return Notification(
        category=NotificationCategory.TASK,
        title="Task Updated",
        body=f'{user_name} updated "{task_title}" to {progress}% complete',
        recipient_id=recipient_id,
        sender_id=sender_id,
        data={
            "task_id": task_id,
            "progress": progress,
            **({"url": task_url} if task_url else {}),
        },
    )


def idea_shared(
    recipient_id: str,
    user_name: str,
    idea_title: str,
    idea_id: str,
    idea_url: Optional[str] = None,
    sender_id: Optional[str] = None,
) -> Notification:
    return Notification(
        category=NotificationCategory.IDEA,
        title="New Idea Shared",
        body=f'{user_name} shared "{idea_title}"',
        recipient_id=recipient_id,
        sender_id=sender_id,
        data={"idea_id": idea_id, **({"url": idea_url} if idea_url else {})},
    )


def system_notice(
    recipient_id: str,
    title: str,
    body: str,
    urgent: bool = False,
) -> Notification:
    return Notification(
        category=NotificationCategory.SYSTEM,
        title=title,
        body=body,
        recipient_id=recipient_id,
        priority=NotificationPriority.URGENT if urgent else NotificationPriority.NORMAL,
    )
