"""
CampusCare Backend — In-App Notification Service
==================================================

What:  Stores notifications for a user or for every holder of a role.
How:   Resolves recipients and writes through NotificationRepository inside
       one SAVEPOINT on the caller's session. A failure is logged at WARNING
       and swallowed; the triggering operation keeps its changes.
Who:   Called by report use cases (new report → maintenance staff,
       status change → report owner).
"""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from campuscare.domain.entities import Notification
from campuscare.domain.roles import RoleName
from campuscare.exceptions import CampusCareError
from campuscare.repositories.notification_repository import SqlAlchemyNotificationRepository
from campuscare.repositories.user_repository import SqlAlchemyUserRepository

logger = logging.getLogger(__name__)


class NotificationService:

    async def notify(self, session: AsyncSession, user_id: UUID, title: str, body: str) -> bool:
        """Store one notification. Returns False (after logging) on failure."""
        return await self._store(session, title, body, user_ids=[user_id]) == 1

    async def notify_role(self, session: AsyncSession, role: RoleName, title: str, body: str) -> int:
        """Notify every active holder of `role`. Returns how many were stored."""
        return await self._store(session, title, body, role=role)

    async def _store(
        self,
        session: AsyncSession,
        title: str,
        body: str,
        user_ids: Optional[List[UUID]] = None,
        role: Optional[RoleName] = None,
    ) -> int:
        recipients = user_ids or []
        repository = SqlAlchemyNotificationRepository(session)
        try:
            # Recipient lookup runs inside the savepoint too
            async with session.begin_nested():
                if role is not None:
                    recipients = await SqlAlchemyUserRepository(session).list_ids_with_role(role)
                for user_id in recipients:
                    await repository.create(Notification(user_id=user_id, title=title, body=body))
        except (CampusCareError, SQLAlchemyError) as e:
            # Log but don't raise
            logger.warning(
                "Failed to store notification '%s' for %s: %s",
                title,
                f"role {role.value}" if role is not None else f"{len(recipients)} recipient(s)",
                str(e),
            )
            return 0
        return len(recipients)


# Singleton instance
notification_service = NotificationService()
