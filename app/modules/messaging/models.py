"""Messaging models and request schemas.

API payloads use camelCase (``channelId``, ``messageType``); Python code
uses the snake_case field names. Both are accepted on input.
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class PageDirection(str, Enum):
    """Which side of the cursor a page is read from."""

    BEFORE = "before"
    AFTER = "after"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SendMessageRequest(CamelModel):
    """Body of ``POST /messages``.

    ``channel_id`` and ``content`` are optional here so the ingress can
    reject missing values with a 400 instead of a schema error.
    """

    channel_id: Optional[str] = None
    content: Optional[str] = None
    message_type: str = "text"
    metadata: Dict[str, Any] = Field(default_factory=dict)


class Message(CamelModel):
    """A persisted chat message.

    Attributes:
        id: Unique identifier
        channel_id: Channel the message was posted to
        sender_id: Author
        content: Sanitized content
        message_type: Free-form type tag (text, file, system, ...)
        metadata: Client supplied metadata (file name, reply target, ...)
        mentions: ``@handles`` in order of appearance
        hashtags: ``#tags`` in order of appearance
        created_at: Creation time (UTC), also the pagination cursor
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    channel_id: str
    sender_id: str
    content: str
    message_type: str = "text"
    metadata: Dict[str, Any] = Field(default_factory=dict)
    mentions: List[str] = Field(default_factory=list)
    hashtags: List[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class MessagePage(BaseModel):
    """One page of messages plus the cursor for the next one."""

    messages: List[Message] = Field(default_factory=list)
    has_more: bool = False
    next_cursor: Optional[str] = None

    @classmethod
    def from_messages(cls, messages: List[Message], limit: int) -> "MessagePage":
        return cls(
            messages=messages,
            has_more=len(messages) == limit,
            next_cursor=messages[-1].created_at.isoformat() if messages else None,
        )

    def to_response(self) -> Dict[str, Any]:
        return {
            "messages": [
                m.model_dump(mode="json", by_alias=True) for m in self.messages
            ],
            "pagination": {
                "hasMore": self.has_more,
                "nextCursor": self.next_cursor,
            },
        }
