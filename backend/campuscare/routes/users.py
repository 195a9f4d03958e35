"""CampusCare Backend — Admin user-management routes (admin only)."""

import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status

from campuscare.dependencies import CurrentUser, get_user_repository, require_roles
from campuscare.domain.roles import RoleName
from campuscare.repositories.user_repository import SqlAlchemyUserRepository
from campuscare.schemas.auth import RoleAssignmentRequest, UserResponse
from campuscare.schemas.common import ErrorResponse
from campuscare.use_cases.users import AssignRoles, DeactivateUser, GetUser, ListUsers

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/users",
    tags=["Users"],
    responses={
        401: {"description": "Not signed in", "model": ErrorResponse},
        403: {"description": "Admin role required", "model": ErrorResponse},
    },
)

admin_only = require_roles(RoleName.ADMIN)


@router.get("", response_model=List[UserResponse], summary="List users")
async def list_users(
    role: Optional[str] = Query(default=None, description="Only users holding this role"),
    include_deleted: bool = Query(default=False, alias="includeDeleted"),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    admin: CurrentUser = Depends(admin_only),
    users: SqlAlchemyUserRepository = Depends(get_user_repository),
) -> List[UserResponse]:
    found = await ListUsers(users).execute(
        role=role, include_deleted=include_deleted, limit=limit, offset=offset
    )
    return [UserResponse.from_entity(u) for u in found]


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    responses={404: {"description": "User not found", "model": ErrorResponse}},
    summary="Get one user",
)
async def get_user(
    user_id: UUID,
    admin: CurrentUser = Depends(admin_only),
    users: SqlAlchemyUserRepository = Depends(get_user_repository),
) -> UserResponse:
    return UserResponse.from_entity(await GetUser(users).execute(user_id))


@router.put(
    "/{user_id}/roles",
    response_model=UserResponse,
    responses={
        400: {"description": "Unknown role or empty role set", "model": ErrorResponse},
        404: {"description": "User not found", "model": ErrorResponse},
    },
    summary="Replace a user's roles",
)
async def assign_roles(
    user_id: UUID,
    body: RoleAssignmentRequest,
    admin: CurrentUser = Depends(admin_only),
    users: SqlAlchemyUserRepository = Depends(get_user_repository),
) -> UserResponse:
    user = await AssignRoles(users).execute(user_id, body.roles, actor_id=admin.id)
    return UserResponse.from_entity(user)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={404: {"description": "User not found", "model": ErrorResponse}},
    summary="Soft-delete a user",
)
async def delete_user(
    user_id: UUID,
    admin: CurrentUser = Depends(admin_only),
    users: SqlAlchemyUserRepository = Depends(get_user_repository),
) -> Response:
    await DeactivateUser(users).execute(user_id, actor_id=admin.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
