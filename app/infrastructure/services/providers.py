"""
Factory functions for dependency injection.

Provides application-scoped singleton providers for core infrastructure services.
"""

from functools import lru_cache

from infrastructure.configuration import Settings
from infrastructure.notifications import NotificationService
from infrastructure.resilience import ResilienceService
from modules.messaging import (
    InMemoryMessageRepository,
    InMemoryUserDirectory,
    MessageIngress,
    MessageRepository,
    UserDirectory,
)


@lru_cache
def get_settings() -> Settings:
    """
    Get application-scoped settings singleton.

    This is the single source of truth for settings across the entire application.
    The @lru_cache decorator ensures only ONE instance is created per process,
    even if called from multiple packages.

    Infrastructure packages should use this directly to ensure singleton consistency:
        from infrastructure.services.providers import get_settings
        settings = get_settings()

    Application code should use the DI type alias for testability:
        from infrastructure.services import SettingsDep
        @router.get("/config")
        def get_config(settings: SettingsDep):
            return settings.model_dump()

    Returns:
        Settings: Cached settings instance loaded from environment.
    """
    return Settings()


@lru_cache
def get_resilience_service() -> ResilienceService:
    """
    Get application-scoped resilience service singleton.

    Owns the one RateLimiter and the circuit breaker registry of the process,
    so every request shares the same windows and breaker state.

    Returns:
        ResilienceService: Cached service configured from settings.
    """
    return ResilienceService(settings=get_settings())


@lru_cache
def get_user_directory() -> UserDirectory:
    """
    Get application-scoped user directory singleton.

    Returns:
        UserDirectory: In-memory directory; replace through dependency
        overrides when a real directory backend is wired in.
    """
    return InMemoryUserDirectory()


@lru_cache
def get_notification_service() -> NotificationService:
    """
    Get application-scoped notification service singleton.

    The email channel resolves addresses through the user directory.

    Returns:
        NotificationService: Cached service with senders built from settings.
    """
    directory = get_user_directory()
    return NotificationService(
        settings=get_settings(),
        clock=get_resilience_service().clock,
        address_resolver=directory.email_for,
    )


@lru_cache
def get_message_repository() -> MessageRepository:
    """Provider for the message persistence backend."""
    return InMemoryMessageRepository()


@lru_cache
def get_message_ingress() -> MessageIngress:
    """
    Get application-scoped message ingress singleton.

    Usage:
        @router.post("/messages")
        async def send(ingress: MessageIngressDep, body: SendMessageRequest):
            return await ingress.send_message(body, client_id, sender_id)
    """
    return MessageIngress(
        settings=get_settings().messaging,
        resilience=get_resilience_service(),
        repository=get_message_repository(),
        notifications=get_notification_service(),
        directory=get_user_directory(),
    )
