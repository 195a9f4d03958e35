"""CampusCare Backend — A user's own in-app notifications."""

from typing import List
from uuid import UUID

from campuscare.domain.entities import Notification
from campuscare.repositories.ports import NotificationRepository


class ListNotifications:
    def __init__(self, notifications: NotificationRepository):
        self.notifications = notifications

    async def execute(
        self, user_id: UUID, unread_only: bool = False, limit: int = 50, offset: int = 0
    ) -> List[Notification]:
        return await self.notifications.list_for_user(
            user_id, unread_only=unread_only, limit=limit, offset=offset
        )


class MarkNotificationRead:
    def __init__(self, notifications: NotificationRepository):
        self.notifications = notifications

    async def execute(self, notification_id: UUID, user_id: UUID) -> Notification:
        return await self.notifications.mark_read(notification_id, user_id)


class MarkAllNotificationsRead:
    def __init__(self, notifications: NotificationRepository):
        self.notifications = notifications

    async def execute(self, user_id: UUID) -> int:
        return await self.notifications.mark_all_read(user_id)
