"""Transports that carry channel payloads to their destination.

A ChannelSender builds the payload for its channel; a transport moves it.
``WebhookTransport`` POSTs the payload as JSON to a configured endpoint
(push gateway, mail relay, browser relay). ``LoggingTransport`` records the
payload instead and is used for channels with no endpoint configured.
"""

from abc import ABC, abstractmethod
from collections import deque
from typing import Any, Deque, Dict, List, Optional, Tuple

import httpx

from infrastructure.logging import get_module_logger
from infrastructure.notifications.models import ChannelKind
from infrastructure.operations import OperationResult

logger = get_module_logger()

Payload = Dict[str, Any]


class NotificationTransport(ABC):
    """Delivery mechanism for channel payloads."""

    @abstractmethod
    async def deliver(self, channel: ChannelKind, payload: Payload) -> None:
        """Deliver ``payload``. Raises on failure."""

    @abstractmethod
    def health_check(self) -> OperationResult:
        """Report whether the transport is usable."""

    async def aclose(self) -> None:
        """Release network resources, if any."""


class LoggingTransport(NotificationTransport):
    """Records payloads in memory and in the log instead of sending them.

    Args:
        history_size: Number of recent payloads kept for inspection
    """

    def __init__(self, history_size: int = 100):
        self._history: Deque[Tuple[ChannelKind, Payload]] = deque(maxlen=history_size)

    async def deliver(self, channel: ChannelKind, payload: Payload) -> None:
        self._history.append((channel, payload))
        logger.info(
            "notification_payload_recorded",
            channel=channel.value,
            recipient_id=payload.get("recipient_id"),
            title=payload.get("title") or payload.get("subject"),
        )

    @property
    def history(self) -> List[Tuple[ChannelKind, Payload]]:
        return list(self._history)

    def health_check(self) -> OperationResult:
        return OperationResult.success(message="Logging transport ready")


class WebhookTransport(NotificationTransport):
    """POSTs payloads as JSON to an HTTP endpoint.

    Args:
        url: Endpoint receiving the payload
        timeout_seconds: HTTP timeout per request
        client: Optional shared httpx.AsyncClient (created lazily otherwise)
        headers: Extra headers sent with every request
    """

    def __init__(
        self,
        url: str,
        timeout_seconds: float = 5.0,
        client: Optional[httpx.AsyncClient] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        if not url:
            raise ValueError("Webhook URL is required")
        self.url = url
        self.timeout_seconds = timeout_seconds
        self.headers = {"Content-Type": "application/json", **(headers or {})}
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout_seconds)
        return self._client

    async def deliver(self, channel: ChannelKind, payload: Payload) -> None:
        response = await self._get_client().post(
            self.url,
            json={"channel": channel.value, "payload": payload},
            headers=self.headers,
        )
        response.raise_for_status()
        logger.debug(
            "webhook_delivered",
            channel=channel.value,
            status_code=response.status_code,
        )

    def health_check(self) -> OperationResult:
        if not self.url.startswith(("http://", "https://")):
            return OperationResult.permanent_error(
                f"Invalid webhook URL scheme: {self.url}",
                error_code="INVALID_WEBHOOK_URL",
            )
        return OperationResult.success(message="Webhook configured")

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
