"""
Type aliases for FastAPI dependency injection.

Provides annotated type hints for common infrastructure dependencies.
"""

from typing import Annotated
from fastapi import Depends
from infrastructure.configuration import Settings
from infrastructure.notifications import NotificationService
from infrastructure.resilience import ResilienceService
from infrastructure.services.providers import (
    get_settings,
    get_resilience_service,
    get_notification_service,
    get_user_directory,
    get_message_ingress,
)
from modules.messaging import MessageIngress, UserDirectory

# Settings dependency
SettingsDep = Annotated[Settings, Depends(get_settings)]

# Rate limiter, retry executor and circuit breaker registry
ResilienceServiceDep = Annotated[ResilienceService, Depends(get_resilience_service)]

# In-app store, preference gate and channel dispatch
NotificationServiceDep = Annotated[
    NotificationService, Depends(get_notification_service)
]

UserDirectoryDep = Annotated[UserDirectory, Depends(get_user_directory)]

MessageIngressDep = Annotated[MessageIngress, Depends(get_message_ingress)]

__all__ = [
    "SettingsDep",
    "ResilienceServiceDep",
    "NotificationServiceDep",
    "UserDirectoryDep",
    "MessageIngressDep",
]
