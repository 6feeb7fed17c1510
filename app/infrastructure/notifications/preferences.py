"""Recipient notification preferences and the delivery gate.

The gate answers one question: may this category reach this recipient on
this channel right now? Rules, in order:

1. ``system`` notifications are always delivered.
2. During the recipient's quiet hours every non-urgent delivery is held back.
3. Otherwise the per-category channel toggle decides.

Unknown recipients get the defaults (in-app on, push/email/sound off).
"""

import threading
from abc import ABC, abstractmethod
from typing import Dict, Optional

from infrastructure.logging import get_module_logger
from infrastructure.notifications.models import (
    ChannelKind,
    NotificationCategory,
    NotificationPreferences,
)
from infrastructure.resilience.clock import Clock, SystemClock

logger = get_module_logger()


class PreferenceStore(ABC):
    """Lookup and persistence of recipient preferences."""

    @abstractmethod
    def get(self, recipient_id: str) -> Optional[NotificationPreferences]:
        """Stored preferences, or None when the recipient never saved any."""

    @abstractmethod
    def save(
        self, recipient_id: str, preferences: NotificationPreferences
    ) -> NotificationPreferences:
        """Replace the recipient's preferences."""


class InMemoryPreferenceStore(PreferenceStore):
    """Process-local preference store."""

    def __init__(self, initial: Optional[Dict[str, NotificationPreferences]] = None):
        self._preferences: Dict[str, NotificationPreferences] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, recipient_id: str) -> Optional[NotificationPreferences]:
        with self._lock:
            return self._preferences.get(recipient_id)

    def save(
        self, recipient_id: str, preferences: NotificationPreferences
    ) -> NotificationPreferences:
        with self._lock:
            self._preferences[recipient_id] = preferences
        return preferences


class NotificationPreferenceGate:
    """Decides per recipient, category and channel whether to deliver.

    Args:
        store: Where preferences are read from
        clock: Time source used for quiet hours
    """

    def __init__(self, store: PreferenceStore, clock: Optional[Clock] = None):
        self.store = store
        self.clock = clock or SystemClock()

    def preferences_for(self, recipient_id: str) -> NotificationPreferences:
        """Stored preferences or the defaults."""
        return self.store.get(recipient_id) or NotificationPreferences()

    def in_quiet_hours(self, recipient_id: str) -> bool:
        """True if quiet hours are enabled and currently in effect."""
        preferences = self.preferences_for(recipient_id)
        return self._quiet(preferences)

    def should_deliver(
        self,
        recipient_id: str,
        category: NotificationCategory,
        channel: ChannelKind,
        urgent: bool = False,
    ) -> bool:
        """Whether ``category`` may reach ``recipient_id`` on ``channel`` now.

        Args:
            recipient_id: Recipient being notified
            category: Category of the notification
            channel: Channel being considered
            urgent: Caller marked the delivery urgent (bypasses quiet hours)
        """
        if category == NotificationCategory.SYSTEM:
            return True

        preferences = self.preferences_for(recipient_id)
        if not urgent and self._quiet(preferences):
            logger.debug(
                "notification_held_quiet_hours",
                recipient_id=recipient_id,
                category=category.value,
                channel=channel.value,
            )
            return False

        return preferences.for_category(category).allows(channel)

    def sound_enabled(self, recipient_id: str, category: NotificationCategory) -> bool:
        """Whether clients should play a sound for this category."""
        preferences = self.preferences_for(recipient_id)
        if self._quiet(preferences):
            return False
        return preferences.for_category(category).sound

    def _quiet(self, preferences: NotificationPreferences) -> bool:
        if not preferences.quiet_hours.enabled:
            return False
        local = preferences.local_time(self.clock.now_datetime())
        return preferences.quiet_hours.contains(local)
