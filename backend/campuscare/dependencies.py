"""
CampusCare Backend — FastAPI Dependencies
===========================================

What:  Bearer-token authentication, role gating and repository providers
       shared by every router.
How:   `get_current_user` reads `Authorization: Bearer <token>`, verifies it
       as an access token and loads the account, which must still exist and
       be active. `require_roles(...)` builds a dependency that additionally
       demands one of the given roles.

Failure mapping (through the global exception handlers):
    no / malformed / expired token   → AuthError          → 401
    account gone or disabled         → InvalidTokenError  → 401
    role not allowed                 → AuthorizationError → 403

Example:
    @router.get("/api/users")
    async def list_users(admin: CurrentUser = Depends(require_roles(RoleName.ADMIN))):
        ...
"""

from dataclasses import dataclass
from typing import Callable, FrozenSet, Optional
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from campuscare.database import get_db_session
from campuscare.domain.entities import User
from campuscare.domain.roles import RoleName
from campuscare.exceptions import AuthError, AuthorizationError
from campuscare.repositories.facility_repository import SqlAlchemyFacilityRepository
from campuscare.repositories.menu_repository import SqlAlchemyMenuRepository
from campuscare.repositories.notification_repository import SqlAlchemyNotificationRepository
from campuscare.repositories.report_repository import SqlAlchemyReportRepository
from campuscare.repositories.user_repository import SqlAlchemyUserRepository
from campuscare.repositories.wellness_repository import SqlAlchemyWellnessRepository
from campuscare.services.auth_service import auth_service
from campuscare.use_cases.auth import GetCurrentUser

# auto_error=False: a missing header is reported as our own 401 body
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class CurrentUser:
    id: UUID
    email: str
    name: str
    roles: FrozenSet[RoleName]

    @classmethod
    def from_user(cls, user: User) -> "CurrentUser":
        return cls(id=user.id, email=str(user.email), name=user.name, roles=frozenset(user.roles))

    @property
    def primary_role(self) -> Optional[RoleName]:
        return RoleName.primary(self.roles)

    def has_any_role(self, *roles: RoleName) -> bool:
        return bool(self.roles.intersection(roles))


# ── Repository providers ──────────────────────────────────────────────────
# All share the request's session (FastAPI caches get_db_session per request)

def get_user_repository(db: AsyncSession = Depends(get_db_session)) -> SqlAlchemyUserRepository:
    return SqlAlchemyUserRepository(db)


def get_facility_repository(db: AsyncSession = Depends(get_db_session)) -> SqlAlchemyFacilityRepository:
    return SqlAlchemyFacilityRepository(db)


def get_report_repository(db: AsyncSession = Depends(get_db_session)) -> SqlAlchemyReportRepository:
    return SqlAlchemyReportRepository(db)


def get_wellness_repository(db: AsyncSession = Depends(get_db_session)) -> SqlAlchemyWellnessRepository:
    return SqlAlchemyWellnessRepository(db)


def get_menu_repository(db: AsyncSession = Depends(get_db_session)) -> SqlAlchemyMenuRepository:
    return SqlAlchemyMenuRepository(db)


def get_notification_repository(
    db: AsyncSession = Depends(get_db_session),
) -> SqlAlchemyNotificationRepository:
    return SqlAlchemyNotificationRepository(db)


# ── Authentication ────────────────────────────────────────────────────────

async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    users: SqlAlchemyUserRepository = Depends(get_user_repository),
) -> CurrentUser:
    if credentials is None or not credentials.credentials:
        raise AuthError(message="Authentication required: send 'Authorization: Bearer <token>'")

    claims = auth_service.decode_access_token(credentials.credentials)
    user = await GetCurrentUser(users).execute(claims["sub"])
    return CurrentUser.from_user(user)


def require_roles(*roles: RoleName) -> Callable:
    """Dependency factory: the caller must hold at least one of `roles`."""
    allowed = frozenset(roles)

    async def dependency(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if not current_user.has_any_role(*allowed):
            raise AuthorizationError(required_roles=[r.value for r in allowed])
        return current_user

    return dependency
