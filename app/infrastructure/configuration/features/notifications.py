"""Notification dispatch feature settings."""

from typing import List, Optional

from pydantic import Field

from infrastructure.configuration.base import FeatureSettings


class NotificationSettings(FeatureSettings):
    """Configuration for notification dispatch and channel transports.

    Channels without a webhook URL fall back to the logging transport,
    which records the payload instead of delivering it.

    Environment Variables:
        NOTIFICATION_SEND_TIMEOUT_SECONDS: Per-channel send timeout (default: 10)
        NOTIFICATION_DEFAULT_CHANNELS: Comma separated channel kinds used when
            a dispatch does not name any (default: in_app,toast,browser,push,email)
        NOTIFICATION_BROWSER_WEBHOOK_URL: Endpoint receiving browser payloads
        NOTIFICATION_PUSH_WEBHOOK_URL: Endpoint receiving push payloads
        NOTIFICATION_EMAIL_WEBHOOK_URL: Endpoint receiving email payloads
        NOTIFICATION_TOAST_WEBHOOK_URL: Endpoint receiving toast payloads
        NOTIFICATION_WEBHOOK_TIMEOUT_SECONDS: HTTP timeout for webhook calls
        NOTIFICATION_ICON_URL: Icon referenced by browser and push payloads
    """

    send_timeout_seconds: float = Field(
        default=10.0,
        alias="NOTIFICATION_SEND_TIMEOUT_SECONDS",
        gt=0,
        description="Timeout applied to each channel send",
    )
    default_channels: str = Field(
        default="in_app,toast,browser,push,email",
        alias="NOTIFICATION_DEFAULT_CHANNELS",
        description="Channel kinds used when a dispatch names none",
    )
    browser_webhook_url: Optional[str] = Field(
        default=None, alias="NOTIFICATION_BROWSER_WEBHOOK_URL"
    )
    push_webhook_url: Optional[str] = Field(
        default=None, alias="NOTIFICATION_PUSH_WEBHOOK_URL"
    )
    email_webhook_url: Optional[str] = Field(
        default=None, alias="NOTIFICATION_EMAIL_WEBHOOK_URL"
    )
    toast_webhook_url: Optional[str] = Field(
        default=None, alias="NOTIFICATION_TOAST_WEBHOOK_URL"
    )
    webhook_timeout_seconds: float = Field(
        default=5.0,
        alias="NOTIFICATION_WEBHOOK_TIMEOUT_SECONDS",
        gt=0,
    )
    icon_url: str = Field(default="/favicon.ico", alias="NOTIFICATION_ICON_URL")

    @property
    def default_channel_list(self) -> List[str]:
        return [c.strip() for c in self.default_channels.split(",") if c.strip()]
