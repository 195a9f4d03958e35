"""CampusCare Backend — In-app notification repository (SQLAlchemy adapter)."""

from typing import List
from uuid import UUID

from sqlalchemy import select, update

from campuscare.domain.entities import Notification
from campuscare.exceptions import NotFoundError
from campuscare.models.notification import NotificationModel
from campuscare.repositories.base import SqlAlchemyRepository
from campuscare.repositories.ports import NotificationRepository


def to_entity(row: NotificationModel) -> Notification:
    return Notification(
        id=row.id,
        user_id=row.user_id,
        title=row.title,
        body=row.body,
        is_read=row.is_read,
        created_at=row.created_at,
    )


class SqlAlchemyNotificationRepository(SqlAlchemyRepository, NotificationRepository):

    async def create(self, notification: Notification) -> Notification:
        row = NotificationModel(
            user_id=notification.user_id,
            title=notification.title,
            body=notification.body,
        )
        self.session.add(row)
        await self._flush("notification")
        return to_entity(row)

    async def list_for_user(
        self, user_id: UUID, unread_only: bool = False, limit: int = 50, offset: int = 0
    ) -> List[Notification]:
        query = select(NotificationModel).where(NotificationModel.user_id == user_id)
        if unread_only:
            query = query.where(NotificationModel.is_read.is_(False))
        query = query.order_by(NotificationModel.created_at.desc()).limit(limit).offset(offset)

        result = await self._execute(query, "notification")
        return [to_entity(row) for row in result.scalars().all()]

    async def mark_read(self, notification_id: UUID, user_id: UUID) -> Notification:
        result = await self._execute(
            select(NotificationModel).where(
                NotificationModel.id == notification_id,
                NotificationModel.user_id == user_id,
            ),
            "notification",
        )
        row = result.scalar_one_or_none()
        # Another user's notification is reported as missing, not forbidden
        if row is None:
            raise NotFoundError(resource="notification", resource_id=str(notification_id))
        row.is_read = True
        await self._flush("notification")
        return to_entity(row)

    async def mark_all_read(self, user_id: UUID) -> int:
        result = await self._execute(
            update(NotificationModel)
            .where(NotificationModel.user_id == user_id, NotificationModel.is_read.is_(False))
            .values(is_read=True),
            "notification",
        )
        return result.rowcount or 0
