"""Messaging feature settings."""

from pydantic import Field

from infrastructure.configuration.base import FeatureSettings


class MessagingSettings(FeatureSettings):
    """Configuration for message ingress.

    Environment Variables:
        MESSAGE_MAX_LENGTH: Cap applied to sanitized content (default: 2000)
        MESSAGE_DEFAULT_PAGE_SIZE: Messages per page when no limit is given
        MESSAGE_MAX_PAGE_SIZE: Largest page a client may request
        MESSAGE_PREVIEW_LENGTH: Characters of content quoted in notifications
        MESSAGE_PERSISTENCE_BREAKER: Circuit breaker name guarding persistence
    """

    max_length: int = Field(default=2000, alias="MESSAGE_MAX_LENGTH", ge=1)
    default_page_size: int = Field(
        default=50, alias="MESSAGE_DEFAULT_PAGE_SIZE", ge=1
    )
    max_page_size: int = Field(default=200, alias="MESSAGE_MAX_PAGE_SIZE", ge=1)
    preview_length: int = Field(default=100, alias="MESSAGE_PREVIEW_LENGTH", ge=1)
    persistence_breaker: str = Field(
        default="message_persistence", alias="MESSAGE_PERSISTENCE_BREAKER"
    )
