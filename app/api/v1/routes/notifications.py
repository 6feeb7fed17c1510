from typing import Annotated, Any, Dict, List, Optional

from fastapi import APIRouter, Query
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as SchemaValidationError
from pydantic.alias_generators import to_camel

from infrastructure.logging import get_module_logger
from infrastructure.notifications import (
    ChannelKind,
    Notification,
    NotificationCategory,
    NotificationPreferences,
    NotificationPriority,
)
from infrastructure.operations import NotFoundError, ValidationError
from infrastructure.services import NotificationServiceDep

logger = get_module_logger()
router = APIRouter(prefix="/notifications", tags=["Notifications"])


class CreateNotificationRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    recipient_id: str
    category: NotificationCategory
    title: str
    body: str = ""
    channels: Optional[List[ChannelKind]] = None
    priority: NotificationPriority = NotificationPriority.NORMAL
    data: Dict[str, Any] = Field(default_factory=dict)
    urgent: bool = False
    urgent_channels: List[ChannelKind] = Field(default_factory=list)


class MarkReadRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    notification_id: Optional[str] = None
    recipient_id: Optional[str] = None
    channel_id: Optional[str] = None


@router.get("")
def list_notifications(
    service: NotificationServiceDep,
    recipient_id: Annotated[str, Query(alias="recipientId")],
    limit: Annotated[int, Query(ge=1, le=200)] = 50,
    offset: Annotated[int, Query(ge=0)] = 0,
    category: Optional[NotificationCategory] = None,
    unread_only: Annotated[bool, Query(alias="unreadOnly")] = False,
):
    notifications = service.list_notifications(
        recipient_id,
        limit=limit,
        offset=offset,
        category=category,
        unread_only=unread_only,
    )
    return {
        "notifications": [n.model_dump(mode="json") for n in notifications],
        "unreadCount": service.unread_count(recipient_id),
    }


@router.post("", status_code=201)
async def create_notification(
    body: CreateNotificationRequest, service: NotificationServiceDep
):
    """Store a notification in-app and deliver it on the requested channels."""
    try:
        notification = Notification(
            category=body.category,
            title=body.title,
            body=body.body,
            recipient_id=body.recipient_id,
            priority=body.priority,
            data=body.data,
        )
    except SchemaValidationError as e:
        raise ValidationError(
            "Notification title cannot be empty",
            error_code="INVALID_NOTIFICATION",
            cause=e,
        ) from e

    report = await service.dispatch(
        notification,
        channels=body.channels,
        urgent=body.urgent,
        urgent_channels=body.urgent_channels,
    )
    return {
        "notification": notification.model_dump(mode="json"),
        "report": report.model_dump(mode="json"),
    }


@router.post("/mark-read")
def mark_read(body: MarkReadRequest, service: NotificationServiceDep):
    """Mark one notification, or all of a recipient's, as read."""
    if body.notification_id:
        if not service.mark_as_read(body.notification_id):
            raise NotFoundError(
                f"Notification {body.notification_id} not found",
                error_code="NOTIFICATION_NOT_FOUND",
            )
        return {"success": True, "updated": 1}

    if body.recipient_id:
        updated = service.mark_all_as_read(
            body.recipient_id, channel_id=body.channel_id
        )
        return {"success": True, "updated": updated}

    raise ValidationError(
        "notificationId or recipientId is required", error_code="MISSING_FIELDS"
    )


class WorkspaceEventRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    recipient_ids: List[str] = Field(min_length=1)
    channels: Optional[List[ChannelKind]] = None


class MeetingStartedRequest(WorkspaceEventRequest):
    user_name: str
    meeting_type: str
    meeting_id: str
    meeting_url: Optional[str] = None
    sender_id: Optional[str] = None


class TaskUpdatedRequest(WorkspaceEventRequest):
    user_name: str
    task_title: str
    progress: int = Field(ge=0, le=100)
    task_id: str
    task_url: Optional[str] = None
    sender_id: Optional[str] = None


class IdeaSharedRequest(WorkspaceEventRequest):
    user_name: str
    idea_title: str
    idea_id: str
    idea_url: Optional[str] = None
    sender_id: Optional[str] = None


class SystemNoticeRequest(WorkspaceEventRequest):
    title: str = Field(min_length=1)
    body: str
    urgent: bool = False


def _reports(reports) -> dict:
    return {"reports": [report.model_dump(mode="json") for report in reports]}


@router.post("/events/meeting-started", status_code=201)
async def meeting_started(body: MeetingStartedRequest, service: NotificationServiceDep):
    reports = await service.notify_meeting_started(
        body.recipient_ids,
        body.user_name,
        body.meeting_type,
        body.meeting_id,
        meeting_url=body.meeting_url,
        sender_id=body.sender_id,
        channels=body.channels,
    )
    return _reports(reports)


@router.post("/events/task-updated", status_code=201)
async def task_updated(body: TaskUpdatedRequest, service: NotificationServiceDep):
    reports = await service.notify_task_updated(
        body.recipient_ids,
        body.user_name,
        body.task_title,
        body.progress,
        body.task_id,
        task_url=body.task_url,
        sender_id=body.sender_id,
        channels=body.channels,
    )
    return _reports(reports)


@router.post("/events/idea-shared", status_code=201)
async def idea_shared(body: IdeaSharedRequest, service: NotificationServiceDep):
    reports = await service.notify_idea_shared(
        body.recipient_ids,
        body.user_name,
        body.idea_title,
        body.idea_id,
        idea_url=body.idea_url,
        sender_id=body.sender_id,
        channels=body.channels,
    )
    return _reports(reports)


@router.post("/events/system", status_code=201)
async def system_notice(body: SystemNoticeRequest, service: NotificationServiceDep):
    """Operator notice; delivered regardless of recipient preferences."""
    reports = await service.notify_system(
        body.recipient_ids,
        body.title,
        body.body,
        urgent=body.urgent,
        channels=body.channels,
    )
    return _reports(reports)


@router.get("/preferences/{recipient_id}")
def get_preferences(recipient_id: str, service: NotificationServiceDep):
    return service.get_preferences(recipient_id).model_dump(mode="json")


@router.put("/preferences/{recipient_id}")
def update_preferences(
    recipient_id: str,
    preferences: NotificationPreferences,
    service: NotificationServiceDep,
):
    return service.update_preferences(recipient_id, preferences).model_dump(mode="json")


@router.delete("/{notification_id}")
def delete_notification(notification_id: str, service: NotificationServiceDep):
    if not service.remove(notification_id):
        raise NotFoundError(
            f"Notification {notification_id} not found",
            error_code="NOTIFICATION_NOT_FOUND",
        )
    return {"success": True}


@router.delete("")
def clear_notifications(
    service: NotificationServiceDep,
    recipient_id: Annotated[str, Query(alias="recipientId")],
):
    removed = service.clear_all(recipient_id)
    logger.info("notifications_cleared", recipient_id=recipient_id, removed=removed)
    return {"success": True, "removed": removed}
