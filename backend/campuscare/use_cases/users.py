"""CampusCare Backend — Admin user-management use cases."""

import logging
from typing import Iterable, List, Optional
from uuid import UUID

from campuscare.domain.entities import User
from campuscare.domain.roles import RoleName
from campuscare.exceptions import ValidationError
from campuscare.repositories.ports import UserRepository

logger = logging.getLogger(__name__)


class ListUsers:
    def __init__(self, users: UserRepository):
        self.users = users

    async def execute(
        self,
        role: Optional[str] = None,
        include_deleted: bool = False,
        limit: int = 50,
        offset: int = 0,
    ) -> List[User]:
        role_name = RoleName.parse(role) if role else None
        return await self.users.list_users(
            role=role_name,
            include_deleted=include_deleted,
            limit=limit,
            offset=offset,
        )


class GetUser:
    def __init__(self, users: UserRepository):
        self.users = users

    async def execute(self, user_id: UUID) -> User:
        return await self.users.get_by_id(user_id)


class AssignRoles:
    """
    Replace a user's role set. An admin cannot drop their own admin role.
    """

    def __init__(self, users: UserRepository):
        self.users = users

    async def execute(self, user_id: UUID, roles: Iterable[str], actor_id: Optional[UUID] = None) -> User:
        parsed = sorted({RoleName.parse(r) for r in roles}, key=lambda r: r.precedence)
        if not parsed:
            raise ValidationError(message="At least one role is required", field="roles")
        if actor_id == user_id and RoleName.ADMIN not in parsed:
            raise ValidationError(message="You cannot remove your own admin role", field="roles")

        user = await self.users.set_roles(user_id, parsed)
        logger.info("User %s roles changed by %s", user_id, actor_id)
        return user


class DeactivateUser:
    """Soft-delete: the row stays, the account can no longer sign in."""

    def __init__(self, users: UserRepository):
        self.users = users

    async def execute(self, user_id: UUID, actor_id: Optional[UUID] = None) -> User:
        if actor_id == user_id:
            raise ValidationError(message="You cannot delete your own account", field="id")
        return await self.users.soft_delete(user_id)
