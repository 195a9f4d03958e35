"""CampusCare Backend — The signed-in user's in-app notifications."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from campuscare.dependencies import CurrentUser, get_current_user, get_notification_repository
from campuscare.repositories.notification_repository import SqlAlchemyNotificationRepository
from campuscare.schemas.common import CountResponse, ErrorResponse
from campuscare.schemas.notification import NotificationResponse
from campuscare.use_cases.notifications import (
    ListNotifications,
    MarkAllNotificationsRead,
    MarkNotificationRead,
)

router = APIRouter(
    prefix="/api/notifications",
    tags=["Notifications"],
    responses={401: {"description": "Not signed in", "model": ErrorResponse}},
)


@router.get("", response_model=List[NotificationResponse], summary="My notifications, newest first")
async def list_notifications(
    unread_only: bool = Query(default=False, alias="unreadOnly"),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    current_user: CurrentUser = Depends(get_current_user),
    notifications: SqlAlchemyNotificationRepository = Depends(get_notification_repository),
) -> List[NotificationResponse]:
    found = await ListNotifications(notifications).execute(
        current_user.id, unread_only=unread_only, limit=limit, offset=offset
    )
    return [NotificationResponse.model_validate(n) for n in found]


@router.patch(
    "/{notification_id}/read",
    response_model=NotificationResponse,
    responses={404: {"description": "Notification not found", "model": ErrorResponse}},
    summary="Mark one notification as read",
)
async def mark_read(
    notification_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
    notifications: SqlAlchemyNotificationRepository = Depends(get_notification_repository),
) -> NotificationResponse:
    notification = await MarkNotificationRead(notifications).execute(notification_id, current_user.id)
    return NotificationResponse.model_validate(notification)


@router.post("/read-all", response_model=CountResponse, summary="Mark all my notifications as read")
async def mark_all_read(
    current_user: CurrentUser = Depends(get_current_user),
    notifications: SqlAlchemyNotificationRepository = Depends(get_notification_repository),
) -> CountResponse:
    updated = await MarkAllNotificationsRead(notifications).execute(current_user.id)
    return CountResponse(updated=updated)
