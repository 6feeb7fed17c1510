"""Notification service for dependency injection.

Provides a class-based interface to the notification system: the in-app
store, the preference gate and the dispatcher with its channel senders,
assembled from settings.
"""

from typing import Callable, Dict, Iterable, List, Optional, TYPE_CHECKING

from infrastructure.logging import get_module_logger
from infrastructure.notifications import builders
from infrastructure.notifications.channels import (
    BrowserSender,
    ChannelSender,
    EmailSender,
    LoggingTransport,
    NotificationTransport,
    PushSender,
    ToastSender,
    WebhookTransport,
)
from infrastructure.notifications.channels.email import AddressResolver
from infrastructure.notifications.dispatcher import NotificationDispatcher
from infrastructure.notifications.models import (
    ChannelKind,
    DispatchReport,
    Notification,
    NotificationCategory,
    NotificationPreferences,
)
from infrastructure.notifications.preferences import (
    InMemoryPreferenceStore,
    NotificationPreferenceGate,
    PreferenceStore,
)
from infrastructure.notifications.store import Listener, NotificationStore, Unsubscribe
from infrastructure.resilience.clock import Clock, SystemClock

if TYPE_CHECKING:
    from infrastructure.configuration import Settings
    from infrastructure.configuration.features import NotificationSettings

logger = get_module_logger()


class NotificationService:
    """Class-based notification service.

    Thin facade over NotificationStore, NotificationPreferenceGate and
    NotificationDispatcher so routes and the message ingress depend on a
    single object that is easy to replace in tests.

    Usage:
        # Via dependency injection
        from infrastructure.services import NotificationServiceDep

        @router.post("/notifications")
        async def create(service: NotificationServiceDep, request: ...):
            report = await service.dispatch(notification)
            return report.model_dump(mode="json")

        # Direct instantiation
        service = NotificationService(get_settings())
    """

    def __init__(
        self,
        settings: "Settings",
        clock: Optional[Clock] = None,
        store: Optional[NotificationStore] = None,
        preference_store: Optional[PreferenceStore] = None,
        senders: Optional[Dict[ChannelKind, ChannelSender]] = None,
        address_resolver: Optional[AddressResolver] = None,
    ):
        """Initialize notification service.

        Args:
            settings: Settings instance (required, passed from provider).
            clock: Time source for quiet hours (defaults to SystemClock).
            store: Optional pre-built in-app store.
            preference_store: Optional preference store (defaults to in-memory).
            senders: Optional channel senders. If not provided, senders are
                built from notification settings.
            address_resolver: Maps recipient IDs to email addresses. The email
                channel is only configured when one is given.
        """
        self._settings = settings
        self.clock = clock or SystemClock()
        self.store = store or NotificationStore()
        self.preference_store = preference_store or InMemoryPreferenceStore()
        self.gate = NotificationPreferenceGate(self.preference_store, clock=self.clock)

        if senders is None:
            senders = build_senders(settings.notifications, address_resolver)

        self.dispatcher = NotificationDispatcher(
            store=self.store,
            gate=self.gate,
            senders=senders,
            send_timeout_seconds=settings.notifications.send_timeout_seconds,
        )

    @property
    def default_channels(self) -> List[ChannelKind]:
        """Configured default channels, ignoring unknown names."""
        channels = []
        for name in self._settings.notifications.default_channel_list:
            try:
                channels.append(ChannelKind(name))
            except ValueError:
                logger.warning("unknown_default_channel", channel=name)
        return channels

    async def dispatch(
        self,
        notification: Notification,
        channels: Optional[Iterable[ChannelKind]] = None,
        urgent: bool = False,
        urgent_channels: Optional[Iterable[ChannelKind]] = None,
    ) -> DispatchReport:
        """Dispatch on ``channels`` or the configured defaults."""
        if channels is None:
            channels = self.default_channels
        return await self.dispatcher.dispatch(
            notification, channels, urgent=urgent, urgent_channels=urgent_channels
        )

    async def _fan_out(
        self,
        event: str,
        recipient_ids: Iterable[str],
        build: Callable[[str], Notification],
        sender_id: Optional[str] = None,
        channels: Optional[Iterable[ChannelKind]] = None,
    ) -> List[DispatchReport]:
        """Build and dispatch one notification per recipient, in order.

        The sender and duplicate recipients are skipped. Dispatches run one
        after another so every recipient sees events in the order sent.
        """
        channels = None if channels is None else list(channels)
        reports: List[DispatchReport] = []
        notified = set()
        for recipient_id in recipient_ids:
            if recipient_id == sender_id or recipient_id in notified:
                continue
            notified.add(recipient_id)
            reports.append(await self.dispatch(build(recipient_id), channels))
        logger.info(
            "workspace_event_notified",
            event=event,
            sender_id=sender_id,
            recipients=len(reports),
        )
        return reports

    async def notify_meeting_started(
        self,
        recipient_ids: Iterable[str],
        user_name: str,
        meeting_type: str,
        meeting_id: str,
        meeting_url: Optional[str] = None,
        sender_id: Optional[str] = None,
        channels: Optional[Iterable[ChannelKind]] = None,
    ) -> List[DispatchReport]:
        return await self._fan_out(
            "meeting_started",
            recipient_ids,
            lambda recipient_id: builders.meeting_started(
                recipient_id,
                user_name,
                meeting_type,
                meeting_id,
                meeting_url=meeting_url,
                sender_id=sender_id,
            ),
            sender_id=sender_id,
            channels=channels,
        )

    async def notify_task_updated(
        self,
        recipient_ids: Iterable[str],
        user_name: str,
        task_title: str,
        progress: int,
        task_id: str,
        task_url: Optional[str] = None,
        sender_id: Optional[str] = None,
        channels: Optional[Iterable[ChannelKind]] = None,
    ) -> List[DispatchReport]:
        return await self._fan_out(
            "task_updated",
            recipient_ids,
            lambda recipient_id: builders.task_updated(
                recipient_id,
                user_name,
                task_title,
                progress,
                task_id,
                task_url=task_url,
                sender_id=sender_id,
            ),
            sender_id=sender_id,
            channels=channels,
        )

    async def notify_idea_shared(
        self,
        recipient_ids: Iterable[str],
        user_name: str,
        idea_title: str,
        idea_id: str,
        idea_url: Optional[str] = None,
        sender_id: Optional[str] = None,
        channels: Optional[Iterable[ChannelKind]] = None,
    ) -> List[DispatchReport]:
        return await self._fan_out(
            "idea_shared",
            recipient_ids,
            lambda recipient_id: builders.idea_shared(
                recipient_id,
                user_name,
                idea_title,
                idea_id,
                idea_url=idea_url,
                sender_id=sender_id,
            ),
            sender_id=sender_id,
            channels=channels,
        )

    async def notify_system(
        self,
        recipient_ids: Iterable[str],
        title: str,
        body: str,
        urgent: bool = False,
        channels: Optional[Iterable[ChannelKind]] = None,
    ) -> List[DispatchReport]:
        """System notices skip recipient preferences and quiet hours."""
        return await self._fan_out(
            "system_notice",
            recipient_ids,
            lambda recipient_id: builders.system_notice(
                recipient_id, title, body, urgent=urgent
            ),
            channels=channels,
        )

    def list_notifications(
        self,
        recipient_id: str,
        limit: Optional[int] = None,
        offset: int = 0,
        category: Optional[NotificationCategory] = None,
        unread_only: bool = False,
    ) -> List[Notification]:
        return self.store.list(
            recipient_id=recipient_id,
            limit=limit,
            offset=offset,
            category=category,
            unread_only=unread_only,
        )

    def get_notification(self, notification_id: str) -> Optional[Notification]:
        return self.store.get(notification_id)

    def unread_count(self, recipient_id: str, channel_id: Optional[str] = None) -> int:
        return self.store.unread_count(recipient_id=recipient_id, channel_id=channel_id)

    def mark_as_read(self, notification_id: str) -> bool:
        return self.store.mark_as_read(notification_id)

    def mark_all_as_read(
        self, recipient_id: str, channel_id: Optional[str] = None
    ) -> int:
        return self.store.mark_all_as_read(
            recipient_id=recipient_id, channel_id=channel_id
        )

    def remove(self, notification_id: str) -> bool:
        return self.store.remove(notification_id)

    def clear_all(self, recipient_id: str) -> int:
        return self.store.clear_all(recipient_id=recipient_id)

    def subscribe(
        self, listener: Listener, recipient_id: Optional[str] = None
    ) -> Unsubscribe:
        return self.store.subscribe(listener, recipient_id=recipient_id)

    def get_preferences(self, recipient_id: str) -> NotificationPreferences:
        return self.gate.preferences_for(recipient_id)

    def update_preferences(
        self, recipient_id: str, preferences: NotificationPreferences
    ) -> NotificationPreferences:
        saved = self.preference_store.save(recipient_id, preferences)
        logger.info(
            "notification_preferences_updated",
            recipient_id=recipient_id,
            quiet_hours_enabled=saved.quiet_hours.enabled,
            timezone=saved.timezone,
        )
        return saved

    def list_channels(self) -> List[str]:
        return [kind.value for kind in self.dispatcher.get_available_channels()]

    def health_check(self) -> Dict[str, bool]:
        return self.dispatcher.health_check()

    async def aclose(self) -> None:
        """Close transports owned by the configured senders."""
        closed = set()
        for sender in self.dispatcher.senders.values():
            if id(sender.transport) in closed:
                continue
            closed.add(id(sender.transport))
            await sender.transport.aclose()


def build_senders(
    settings: "NotificationSettings",
    address_resolver: Optional[AddressResolver] = None,
) -> Dict[ChannelKind, ChannelSender]:
    """Create channel senders from notification settings.

    Channels with a webhook URL deliver over HTTP; the rest share one
    logging transport.
    """
    fallback = LoggingTransport()

    def transport_for(url: Optional[str]) -> NotificationTransport:
        if not url:
            return fallback
        return WebhookTransport(url, timeout_seconds=settings.webhook_timeout_seconds)

    senders: Dict[ChannelKind, ChannelSender] = {
        ChannelKind.TOAST: ToastSender(transport_for(settings.toast_webhook_url)),
        ChannelKind.BROWSER: BrowserSender(
            transport_for(settings.browser_webhook_url), icon_url=settings.icon_url
        ),
        ChannelKind.PUSH: PushSender(
            transport_for(settings.push_webhook_url), icon_url=settings.icon_url
        ),
    }
    if address_resolver is not None:
        senders[ChannelKind.EMAIL] = EmailSender(
            transport_for(settings.email_webhook_url), address_resolver
        )

    logger.info(
        "notification_senders_built",
        channels=[kind.value for kind in senders],
        webhook_channels=[
            kind.value
            for kind, sender in senders.items()
            if isinstance(sender.transport, WebhookTransport)
        ],
    )
    return senders
