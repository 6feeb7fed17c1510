"""Chat messaging: ingress, mention extraction and persistence boundary."""

from modules.messaging.directory import (
    DirectoryChannel,
    DirectoryUser,
    InMemoryUserDirectory,
    UserDirectory,
)
from modules.messaging.ingress import MessageIngress
from modules.messaging.mentions import ExtractedTokens, MentionExtractor
from modules.messaging.models import (
    Message,
    MessagePage,
    PageDirection,
    SendMessageRequest,
)
from modules.messaging.repository import InMemoryMessageRepository, MessageRepository
from modules.messaging.sanitizer import sanitize_content

__all__ = [
    "DirectoryChannel",
    "DirectoryUser",
    "InMemoryUserDirectory",
    "UserDirectory",
    "MessageIngress",
    "ExtractedTokens",
    "MentionExtractor",
    "Message",
    "MessagePage",
    "PageDirection",
    "SendMessageRequest",
    "InMemoryMessageRepository",
    "MessageRepository",
    "sanitize_content",
]
