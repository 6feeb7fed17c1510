"""Notification channel sender implementations."""

from infrastructure.notifications.channels.base import ChannelSender
from infrastructure.notifications.channels.browser import BrowserSender
from infrastructure.notifications.channels.email import EmailSender
from infrastructure.notifications.channels.push import PushSender
from infrastructure.notifications.channels.toast import ToastSender
from infrastructure.notifications.channels.transports import (
    LoggingTransport,
    NotificationTransport,
    WebhookTransport,
)

__all__ = [
    "ChannelSender",
    "BrowserSender",
    "EmailSender",
    "PushSender",
    "ToastSender",
    "NotificationTransport",
    "LoggingTransport",
    "WebhookTransport",
]
