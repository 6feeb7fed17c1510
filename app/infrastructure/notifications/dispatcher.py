"""Notification dispatcher with preference gating and concurrent fan-out.

Delivery system that:
- Always records the notification in the in-app store first, so
  subscribers see it immediately
- Consults the preference gate for every other requested channel
- Sends to the permitted channels concurrently, each under its own
  timeout, so a slow channel never delays the others
- Recovers every channel failure locally and reports it in the
  DispatchReport instead of raising

Usage Example:
    from infrastructure.notifications import (
        NotificationDispatcher,
        Notification,
        NotificationCategory,
        ChannelKind,
    )

    dispatcher = NotificationDispatcher(
        store=store,
        gate=gate,
        senders={ChannelKind.PUSH: push_sender, ChannelKind.EMAIL: email_sender},
    )

    report = await dispatcher.dispatch(
        Notification(
            category=NotificationCategory.MENTION,
            title="You were mentioned in #general",
            body="alice: hi @bob",
            recipient_id="user-bob",
        ),
        channels=[ChannelKind.IN_APP, ChannelKind.PUSH, ChannelKind.EMAIL],
    )
    logger.info("dispatched", delivered=report.delivered, failed=report.failed)
"""

import asyncio
from typing import Dict, Iterable, List, Optional

from infrastructure.logging import get_module_logger
from infrastructure.notifications.channels.base import ChannelSender
from infrastructure.notifications.models import (
    ChannelKind,
    DispatchReport,
    Notification,
    NotificationResult,
    NotificationStatus,
)
from infrastructure.notifications.preferences import NotificationPreferenceGate
from infrastructure.notifications.store import NotificationStore
from infrastructure.operations import classify_error

logger = get_module_logger()

DEFAULT_SEND_TIMEOUT_SECONDS = 10.0


class NotificationDispatcher:
    """Multi-channel notification dispatcher.

    Attributes:
        store: In-app notification store
        gate: Preference gate consulted for every non in-app channel
        senders: Dict mapping channel kind to ChannelSender
        send_timeout_seconds: Timeout applied to each channel send
    """

    def __init__(
        self,
        store: NotificationStore,
        gate: NotificationPreferenceGate,
        senders: Optional[Dict[ChannelKind, ChannelSender]] = None,
        send_timeout_seconds: float = DEFAULT_SEND_TIMEOUT_SECONDS,
    ):
        self.store = store
        self.gate = gate
        self.senders: Dict[ChannelKind, ChannelSender] = dict(senders or {})
        self.send_timeout_seconds = send_timeout_seconds

        logger.info(
            "initialized_notification_dispatcher",
            channels=[kind.value for kind in self.senders],
            send_timeout_seconds=send_timeout_seconds,
        )

    async def dispatch(
        self,
        notification: Notification,
        channels: Iterable[ChannelKind],
        urgent: bool = False,
        urgent_channels: Optional[Iterable[ChannelKind]] = None,
    ) -> DispatchReport:
        """Deliver ``notification`` in-app and on the permitted channels.

        Args:
            notification: Notification to deliver
            channels: Requested channels; IN_APP is implied
            urgent: Bypass quiet hours on every channel (also implied by
                URGENT priority)
            urgent_channels: Bypass quiet hours on these channels only

        Returns:
            DispatchReport listing delivered, failed and suppressed channels
        """
        urgent = urgent or notification.is_urgent
        urgent_only = set(urgent_channels or ())
        requested = _unique(channels)
        report = DispatchReport(notification_id=notification.id)

        if not notification.play_sound:
            notification.play_sound = self.gate.sound_enabled(
                notification.recipient_id, notification.category
            )

        notification.delivered_channels.add(ChannelKind.IN_APP)
        self.store.add(notification)
        report.delivered.append(ChannelKind.IN_APP)
        report.results.append(
            NotificationResult(
                notification_id=notification.id,
                channel=ChannelKind.IN_APP,
                status=NotificationStatus.SENT,
                message="Stored in-app",
            )
        )

        permitted: List[ChannelKind] = []
        for channel in requested:
            if channel == ChannelKind.IN_APP:
                continue
            if self.gate.should_deliver(
                notification.recipient_id,
                notification.category,
                channel,
                urgent=urgent or channel in urgent_only,
            ):
                permitted.append(channel)
            else:
                report.suppressed.append(channel)
                report.results.append(
                    NotificationResult(
                        notification_id=notification.id,
                        channel=channel,
                        status=NotificationStatus.SUPPRESSED,
                        message="Suppressed by recipient preferences",
                    )
                )

        results = await asyncio.gather(
            *(self._send_one(channel, notification) for channel in permitted)
        )
        for result in results:
            report.results.append(result)
            if result.is_success:
                report.delivered.append(result.channel)
            else:
                report.failed.append(result.channel)

        self.store.record_delivery(notification.id, report.delivered)

        logger.info(
            "notification_dispatched",
            notification_id=notification.id,
            recipient_id=notification.recipient_id,
            category=notification.category.value,
            delivered=[c.value for c in report.delivered],
            failed=[c.value for c in report.failed],
            suppressed=[c.value for c in report.suppressed],
        )
        return report

    async def _send_one(
        self, channel: ChannelKind, notification: Notification
    ) -> NotificationResult:
        sender = self.senders.get(channel)
        if sender is None:
            logger.warning(
                "channel_not_available",
                channel=channel.value,
                available_channels=[kind.value for kind in self.senders],
            )
            return NotificationResult(
                notification_id=notification.id,
                channel=channel,
                status=NotificationStatus.FAILED,
                message=f"No sender configured for {channel.value}",
                error_code="CHANNEL_NOT_CONFIGURED",
            )

        try:
            result = await asyncio.wait_for(
                sender.send(notification), timeout=self.send_timeout_seconds
            )
        except asyncio.TimeoutError:
            logger.warning(
                "channel_send_timeout",
                channel=channel.value,
                notification_id=notification.id,
                timeout_seconds=self.send_timeout_seconds,
            )
            return NotificationResult(
                notification_id=notification.id,
                channel=channel,
                status=NotificationStatus.FAILED,
                message=f"Timed out after {self.send_timeout_seconds}s",
                error_code="TIMEOUT",
            )
        except Exception as e:
            error = classify_error(e)
            logger.error(
                "channel_send_failed",
                channel=channel.value,
                notification_id=notification.id,
                error_code=error.error_code,
                error=str(e),
            )
            return NotificationResult(
                notification_id=notification.id,
                channel=channel,
                status=NotificationStatus.FAILED,
                message=error.message,
                error_code=error.error_code,
            )

        return result

    def get_available_channels(self) -> List[ChannelKind]:
        """In-app plus every channel with a configured sender."""
        return [ChannelKind.IN_APP, *self.senders.keys()]

    def health_check(self) -> Dict[str, bool]:
        """Health of every configured channel.

        Returns:
            Dict mapping channel name to health status (True=healthy)
        """
        health_status = {ChannelKind.IN_APP.value: True}

        for kind, sender in self.senders.items():
            try:
                health_status[kind.value] = sender.health_check().is_success
            except Exception as e:
                logger.error(
                    "channel_health_check_failed",
                    channel=kind.value,
                    error=str(e),
                    exc_info=True,
                )
                health_status[kind.value] = False

        return health_status


def _unique(channels: Iterable[ChannelKind]) -> List[ChannelKind]:
    seen: List[ChannelKind] = []
    for channel in channels:
        if channel not in seen:
            seen.append(channel)
    return seen
