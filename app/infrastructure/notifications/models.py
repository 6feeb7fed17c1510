"""Notification system core models.

Channel-agnostic notification models. Builders decide the content,
the dispatcher decides which channels receive it.

Uses Pydantic BaseModel for runtime validation of preferences (HH:MM
quiet hours, timezone names) and for JSON serialization in the API layer.
"""

import uuid
from datetime import datetime, time, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Set

import pytz
from pydantic import BaseModel, Field, field_validator


class NotificationCategory(Enum):
    """What kind of event a notification describes."""

    MEETING = "meeting"
    TASK = "task"
    IDEA = "idea"
    CHAT = "chat"
    MENTION = "mention"
    SYSTEM = "system"


class ChannelKind(Enum):
    """Delivery channels.

    IN_APP is the notification store itself; the others are ChannelSenders.
    """

    IN_APP = "in_app"
    TOAST = "toast"
    BROWSER = "browser"
    PUSH = "push"
    EMAIL = "email"


class NotificationPriority(Enum):
    """Notification priority levels.

    URGENT bypasses quiet hours.
    """

    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"


class NotificationStatus(Enum):
    """Per-channel delivery outcome."""

    SENT = "sent"
    FAILED = "failed"
    SUPPRESSED = "suppressed"


def _parse_hhmm(value: str) -> time:
    hours, _, minutes = value.partition(":")
    return time(hour=int(hours), minute=int(minutes))


class ChannelPreference(BaseModel):
    """Per-category channel toggles.

    In-app is on by default; push, email and sound are opt-in.
    """

    in_app: bool = True
    push: bool = False
    email: bool = False
    sound: bool = False

    def allows(self, channel: ChannelKind) -> bool:
        """Whether this preference enables delivery on ``channel``."""
        if channel in (ChannelKind.IN_APP, ChannelKind.TOAST):
            return self.in_app
        if channel in (ChannelKind.PUSH, ChannelKind.BROWSER):
            return self.push
        if channel == ChannelKind.EMAIL:
            return self.email
        return False


class QuietHours(BaseModel):
    """Daily window during which non-urgent notifications are held back.

    The window is ``[start, end)`` in the recipient's local time and wraps
    past midnight when ``end < start``. ``start == end`` is an empty window.
    """

    enabled: bool = False
    start: str = "22:00"
    end: str = "08:00"

    @field_validator("start", "end")
    @classmethod
    def validate_hhmm(cls, v: str) -> str:
        """Require zero-padded 24h HH:MM."""
        if len(v) != 5 or v[2] != ":" or not (v[:2] + v[3:]).isdigit():
            raise ValueError(f"Time must be in HH:MM format: {v}")
        if int(v[:2]) > 23 or int(v[3:]) > 59:
            raise ValueError(f"Time out of range: {v}")
        return v

    def contains(self, local_time: time) -> bool:
        """True if ``local_time`` falls inside the window."""
        start = _parse_hhmm(self.start)
        end = _parse_hhmm(self.end)
        current = local_time.replace(second=0, microsecond=0, tzinfo=None)
        if start == end:
            return False
        if start < end:
            return start <= current < end
        return current >= start or current < end


class NotificationPreferences(BaseModel):
    """A recipient's notification preferences.

    Attributes:
        per_category: Channel toggles per category; missing categories use
            the ChannelPreference defaults
        quiet_hours: Quiet hours window
        timezone: IANA timezone used to evaluate quiet hours
    """

    per_category: Dict[NotificationCategory, ChannelPreference] = Field(
        default_factory=dict
    )
    quiet_hours: QuietHours = Field(default_factory=QuietHours)
    timezone: str = "UTC"

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Reject names pytz does not know."""
        if v not in pytz.all_timezones_set:
            raise ValueError(f"Unknown timezone: {v}")
        return v

    def for_category(self, category: NotificationCategory) -> ChannelPreference:
        return self.per_category.get(category, ChannelPreference())

    def local_time(self, moment: datetime) -> time:
        """Wall-clock time of ``moment`` in the recipient's timezone."""
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        return moment.astimezone(pytz.timezone(self.timezone)).time()


class Notification(BaseModel):
    """A notification addressed to one recipient.

    Attributes:
        id: Unique identifier
        category: NotificationCategory of the underlying event
        title: Short headline
        body: Plain text body
        recipient_id: User receiving the notification
        sender_id: User whose action triggered it, if any
        created_at: Creation time (UTC)
        read_at: When the recipient marked it read
        delivered_channels: Channels that accepted the notification
        priority: NotificationPriority (URGENT bypasses quiet hours)
        data: Routing context (channel_id, message_id, url, ...)
        play_sound: Whether clients should play a sound
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    category: NotificationCategory
    title: str
    body: str
    recipient_id: str
    sender_id: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    read_at: Optional[datetime] = None
    delivered_channels: Set[ChannelKind] = Field(default_factory=set)
    priority: NotificationPriority = NotificationPriority.NORMAL
    data: Dict[str, Any] = Field(default_factory=dict)
    play_sound: bool = False

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """Ensure title is not empty."""
        if not v or not v.strip():
            raise ValueError("Notification title cannot be empty")
        return v

    @property
    def is_read(self) -> bool:
        return self.read_at is not None

    @property
    def is_urgent(self) -> bool:
        return self.priority == NotificationPriority.URGENT


class NotificationResult(BaseModel):
    """Outcome of delivering one notification on one channel.

    Attributes:
        notification_id: Notification the result belongs to
        channel: Channel attempted
        status: SENT, FAILED or SUPPRESSED
        message: Human-readable result message
        error_code: Machine error code for failures
    """

    notification_id: str
    channel: ChannelKind
    status: NotificationStatus
    message: str = ""
    error_code: Optional[str] = None

    @property
    def is_success(self) -> bool:
        return self.status == NotificationStatus.SENT


class DispatchReport(BaseModel):
    """Summary of one dispatch call.

    ``delivered``, ``failed`` and ``suppressed`` partition the requested
    channels; ``results`` holds the per-channel detail.
    """

    notification_id: str
    delivered: List[ChannelKind] = Field(default_factory=list)
    failed: List[ChannelKind] = Field(default_factory=list)
    suppressed: List[ChannelKind] = Field(default_factory=list)
    results: List[NotificationResult] = Field(default_factory=list)
