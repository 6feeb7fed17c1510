"""
Dependency injection services.

Provides type aliases and provider functions for FastAPI dependency injection.
"""

from infrastructure.services.dependencies import (
    SettingsDep,
    ResilienceServiceDep,
    NotificationServiceDep,
    UserDirectoryDep,
    MessageIngressDep,
)
from infrastructure.services.providers import (
    get_settings,
    get_resilience_service,
    get_notification_service,
    get_user_directory,
    get_message_repository,
    get_message_ingress,
)

__all__ = [
    "SettingsDep",
    "ResilienceServiceDep",
    "NotificationServiceDep",
    "UserDirectoryDep",
    "MessageIngressDep",
    "get_settings",
    "get_resilience_service",
    "get_notification_service",
    "get_user_directory",
    "get_message_repository",
    "get_message_ingress",
]
