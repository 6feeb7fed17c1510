"""In-app notification store with listener subscriptions.

Holds every notification created by the dispatcher, newest first, and
notifies subscribers synchronously whenever the store changes. Mutations
and listener notification happen under one re-entrant lock, so listeners
of a recipient observe notifications in the order they were added.

Listeners receive a snapshot list (newest first) for the recipient they
subscribed to, or for everyone when they subscribed without a recipient.
A listener that raises is logged and skipped; it never breaks the add.
"""

import threading
from datetime import datetime, timezone
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from infrastructure.logging import get_module_logger
from infrastructure.notifications.models import (
    ChannelKind,
    Notification,
    NotificationCategory,
)

logger = get_module_logger()

Listener = Callable[[List[Notification]], None]
Unsubscribe = Callable[[], None]


class NotificationStore:
    """Thread-safe in-memory notification store."""

    def __init__(self):
        self._notifications: List[Notification] = []
        self._listeners: List[Tuple[Listener, Optional[str]]] = []
        self._lock = threading.RLock()

    def add(self, notification: Notification) -> Notification:
        """Store a notification and notify subscribers."""
        with self._lock:
            self._notifications.insert(0, notification)
            logger.debug(
                "notification_stored",
                notification_id=notification.id,
                recipient_id=notification.recipient_id,
                category=notification.category.value,
            )
            self._notify({notification.recipient_id})
        return notification

    def get(self, notification_id: str) -> Optional[Notification]:
        with self._lock:
            return self._find(notification_id)

    def list(
        self,
        recipient_id: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0,
        category: Optional[NotificationCategory] = None,
        unread_only: bool = False,
        channel_id: Optional[str] = None,
    ) -> List[Notification]:
        """Notifications newest first, optionally filtered and paged.

        Args:
            recipient_id: Only this recipient's notifications
            limit: Page size (all when None)
            offset: Number of matching notifications to skip
            category: Only this category
            unread_only: Skip notifications already read
            channel_id: Only notifications about this chat channel
        """
        with self._lock:
            selected = [
                n
                for n in self._notifications
                if _matches(n, recipient_id, channel_id)
                and (category is None or n.category == category)
                and (not unread_only or not n.is_read)
            ]
        end = None if limit is None else offset + limit
        return selected[offset:end]

    def by_category(
        self, category: NotificationCategory, recipient_id: Optional[str] = None
    ) -> List[Notification]:
        return self.list(recipient_id=recipient_id, category=category)

    def unread_count(
        self, recipient_id: Optional[str] = None, channel_id: Optional[str] = None
    ) -> int:
        return len(
            self.list(
                recipient_id=recipient_id, channel_id=channel_id, unread_only=True
            )
        )

    def mark_as_read(self, notification_id: str) -> bool:
        """Mark one notification read. Returns False if it does not exist."""
        with self._lock:
            notification = self._find(notification_id)
            if notification is None:
                return False
            if notification.read_at is None:
                notification.read_at = datetime.now(timezone.utc)
                self._notify({notification.recipient_id})
            return True

    def mark_all_as_read(
        self, recipient_id: Optional[str] = None, channel_id: Optional[str] = None
    ) -> int:
        """Mark every unread notification read, optionally scoped.

        Returns:
            Number of notifications changed
        """
        with self._lock:
            now = datetime.now(timezone.utc)
            changed = [
                n
                for n in self._notifications
                if n.read_at is None and _matches(n, recipient_id, channel_id)
            ]
            for notification in changed:
                notification.read_at = now
            if changed:
                self._notify({n.recipient_id for n in changed})
            return len(changed)

    def record_delivery(
        self, notification_id: str, channels: Iterable[ChannelKind]
    ) -> None:
        """Add channels to a stored notification's delivered set."""
        with self._lock:
            notification = self._find(notification_id)
            if notification is not None:
                notification.delivered_channels.update(channels)

    def remove(self, notification_id: str) -> bool:
        """Delete one notification. Returns False if it does not exist."""
        with self._lock:
            notification = self._find(notification_id)
            if notification is None:
                return False
            self._notifications.remove(notification)
            self._notify({notification.recipient_id})
            return True

    def clear_all(self, recipient_id: Optional[str] = None) -> int:
        """Delete every notification (of one recipient). Returns the count."""
        with self._lock:
            removed = [
                n
                for n in self._notifications
                if recipient_id is None or n.recipient_id == recipient_id
            ]
            if not removed:
                return 0
            removed_ids = {n.id for n in removed}
            self._notifications = [
                n for n in self._notifications if n.id not in removed_ids
            ]
            self._notify({n.recipient_id for n in removed})
            return len(removed)

    def subscribe(
        self, listener: Listener, recipient_id: Optional[str] = None
    ) -> Unsubscribe:
        """Register a listener, optionally scoped to one recipient.

        Returns:
            Callable that removes the listener
        """
        entry = (listener, recipient_id)
        with self._lock:
            self._listeners.append(entry)

        def unsubscribe() -> None:
            with self._lock:
                if entry in self._listeners:
                    self._listeners.remove(entry)

        return unsubscribe

    def _find(self, notification_id: str) -> Optional[Notification]:
        for notification in self._notifications:
            if notification.id == notification_id:
                return notification
        return None

    def _notify(self, recipients: set) -> None:
        snapshots: Dict[Optional[str], List[Notification]] = {}
        for listener, scope in list(self._listeners):
            if scope is not None and scope not in recipients:
                continue
            if scope not in snapshots:
                snapshots[scope] = [
                    n
                    for n in self._notifications
                    if scope is None or n.recipient_id == scope
                ]
            try:
                listener(list(snapshots[scope]))
            except Exception as e:
                logger.error(
                    "notification_listener_failed",
                    recipient_id=scope,
                    error=str(e),
                    exc_info=True,
                )


def _matches(
    notification: Notification,
    recipient_id: Optional[str],
    channel_id: Optional[str],
) -> bool:
    if recipient_id is not None and notification.recipient_id != recipient_id:
        return False
    if channel_id is not None and notification.data.get("channel_id") != channel_id:
        return False
    return True
