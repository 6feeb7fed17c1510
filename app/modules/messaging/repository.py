"""Message persistence boundary.

Repositories raise whatever their backend raises; the ingress classifies
failures centrally, so implementations never wrap errors themselves.
"""

import bisect
import threading
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, List, Optional

from modules.messaging.models import Message, PageDirection


class MessageRepository(ABC):
    """Storage for chat messages."""

    @abstractmethod
    async def save(self, message: Message) -> Message:
        """Persist ``message`` and return the stored version."""

    @abstractmethod
    async def list_messages(
        self,
        channel_id: str,
        limit: int,
        cursor: Optional[datetime] = None,
        direction: PageDirection = PageDirection.BEFORE,
    ) -> List[Message]:
        """Messages of a channel relative to ``cursor``.

        ``before`` returns messages created strictly earlier than the
        cursor, newest first. ``after`` returns messages created strictly
        later, oldest first. Without a cursor the page starts at the newest
        (``before``) or oldest (``after``) message.
        """


class InMemoryMessageRepository(MessageRepository):
    """Process-local repository keeping each channel sorted by creation time."""

    def __init__(self):
        self._channels: Dict[str, List[Message]] = {}
        self._lock = threading.Lock()

    async def save(self, message: Message) -> Message:
        with self._lock:
            messages = self._channels.setdefault(message.channel_id, [])
            keys = [m.created_at for m in messages]
            messages.insert(bisect.bisect_right(keys, message.created_at), message)
        return message

    async def list_messages(
        self,
        channel_id: str,
        limit: int,
        cursor: Optional[datetime] = None,
        direction: PageDirection = PageDirection.BEFORE,
    ) -> List[Message]:
        with self._lock:
            messages = list(self._channels.get(channel_id, []))

        if direction == PageDirection.AFTER:
            if cursor is not None:
                messages = [m for m in messages if m.created_at > cursor]
            return messages[:limit]

        if cursor is not None:
            messages = [m for m in messages if m.created_at < cursor]
        return list(reversed(messages))[:limit]

    async def count(self, channel_id: str) -> int:
        with self._lock:
            return len(self._channels.get(channel_id, []))
