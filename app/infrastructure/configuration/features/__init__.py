"""Feature settings __init__ - exports all feature settings."""

from infrastructure.configuration.features.messaging import MessagingSettings
from infrastructure.configuration.features.notifications import NotificationSettings

__all__ = [
    "MessagingSettings",
    "NotificationSettings",
]
