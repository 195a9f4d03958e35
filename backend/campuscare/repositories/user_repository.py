"""
CampusCare Backend — User Repository (SQLAlchemy adapter)
===========================================================

What:  Persists User aggregates to `users` + `user_roles`.
How:   Each method issues one statement (plus a flush for writes) on the
       request-scoped session and maps rows back to domain `User` records.
"""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select

from campuscare.domain.entities import User
from campuscare.domain.roles import RoleName
from campuscare.domain.value_objects import Email
from campuscare.exceptions import NotFoundError
from campuscare.models._columns import utcnow
from campuscare.models.user import Role, UserModel, user_roles
from campuscare.repositories.base import SqlAlchemyRepository
from campuscare.repositories.ports import UserRepository

logger = logging.getLogger(__name__)


def to_entity(row: UserModel) -> User:
    return User(
        id=row.id,
        name=row.name,
        email=Email(row.email),
        password_hash=row.password_hash,
        roles=frozenset(RoleName(role.name) for role in row.roles),
        is_active=row.is_active,
        created_at=row.created_at,
        updated_at=row.updated_at,
        deleted_at=row.deleted_at,
    )


class SqlAlchemyUserRepository(SqlAlchemyRepository, UserRepository):

    async def _roles(self, names: List[RoleName]) -> List[Role]:
        wanted = {RoleName(n).value for n in names}
        if not wanted:
            return []
        result = await self._execute(select(Role).where(Role.name.in_(wanted)), "role")
        rows = list(result.scalars().all())
        missing = wanted - {row.name for row in rows}
        if missing:
            # Reference data not seeded: run the migrations or campuscare.seed
            raise NotFoundError(resource="role", resource_id=", ".join(sorted(missing)))
        return rows

    async def _get_row(self, user_id: UUID) -> UserModel:
        result = await self._execute(select(UserModel).where(UserModel.id == user_id), "user")
        row = result.scalar_one_or_none()
        if row is None:
            raise NotFoundError(resource="user", resource_id=str(user_id))
        return row

    async def create(self, user: User) -> User:
        row = UserModel(
            name=user.name,
            email=str(user.email),
            password_hash=user.password_hash,
            is_active=user.is_active,
        )
        row.roles = await self._roles(list(user.roles))
        self.session.add(row)
        await self._flush(
            "user",
            unique_field="email",
            duplicate_message="An account with this email already exists",
        )
        logger.info("User created: %s", row.id)
        return to_entity(row)

    async def get_by_id(self, user_id: UUID) -> User:
        return to_entity(await self._get_row(user_id))

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self._execute(
            select(UserModel).where(UserModel.email == email.strip().lower()),
            "user",
        )
        row = result.scalar_one_or_none()
        return to_entity(row) if row else None

    async def list_users(
        self,
        role: Optional[RoleName] = None,
        include_deleted: bool = False,
        limit: int = 50,
        offset: int = 0,
    ) -> List[User]:
        query = select(UserModel)
        if role is not None:
            query = (
                query.join(user_roles, user_roles.c.user_id == UserModel.id)
                .join(Role, Role.id == user_roles.c.role_id)
                .where(Role.name == RoleName(role).value)
            )
        if not include_deleted:
            query = query.where(UserModel.deleted_at.is_(None))
        query = query.order_by(UserModel.created_at.desc()).limit(limit).offset(offset)

        result = await self._execute(query, "user")
        return [to_entity(row) for row in result.scalars().all()]

    async def list_ids_with_role(self, role: RoleName) -> List[UUID]:
        query = (
            select(UserModel.id)
            .join(user_roles, user_roles.c.user_id == UserModel.id)
            .join(Role, Role.id == user_roles.c.role_id)
            .where(
                Role.name == RoleName(role).value,
                UserModel.is_active.is_(True),
                UserModel.deleted_at.is_(None),
            )
        )
        result = await self._execute(query, "user")
        return list(result.scalars().all())

    async def set_roles(self, user_id: UUID, roles: List[RoleName]) -> User:
        row = await self._get_row(user_id)
        row.roles = await self._roles(roles)
        row.updated_at = utcnow()
        await self._flush("user")
        logger.info("Roles for user %s set to %s", user_id, sorted(r.name for r in row.roles))
        return to_entity(row)

    async def soft_delete(self, user_id: UUID) -> User:
        row = await self._get_row(user_id)
        if row.deleted_at is None:
            now = utcnow()
            row.deleted_at = now
            row.updated_at = now
            row.is_active = False
            await self._flush("user")
            logger.info("User soft-deleted: %s", user_id)
        return to_entity(row)
