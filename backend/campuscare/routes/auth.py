"""
CampusCare Backend — Auth Route Handlers
==========================================

What:  POST /api/auth/register, /login, /refresh (public) and
       GET /api/auth/me (any signed-in user).
How:   Parse the body, delegate to the auth use cases, convert the result
       to camelCase response schemas.
"""

import logging

from fastapi import APIRouter, Depends, status

from campuscare.dependencies import CurrentUser, get_current_user, get_user_repository
from campuscare.repositories.user_repository import SqlAlchemyUserRepository
from campuscare.schemas.auth import (
    AuthResponse,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    UserResponse,
)
from campuscare.schemas.common import ErrorResponse
from campuscare.use_cases.auth import (
    AuthResult,
    GetCurrentUser,
    LoginUser,
    RefreshAccessToken,
    RegisterUser,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


def _auth_response(result: AuthResult) -> AuthResponse:
    return AuthResponse(
        user=UserResponse.from_entity(result.user),
        access_token=result.access_token,
        refresh_token=result.refresh_token,
    )


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Invalid email, password or name", "model": ErrorResponse},
        409: {"description": "Email already registered", "model": ErrorResponse},
    },
    summary="Create a student account",
)
async def register(
    body: RegisterRequest,
    users: SqlAlchemyUserRepository = Depends(get_user_repository),
) -> AuthResponse:
    result = await RegisterUser(users).execute(
        email=body.email, password=body.password, name=body.name
    )
    return _auth_response(result)


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={401: {"description": "Invalid credentials", "model": ErrorResponse}},
    summary="Exchange email and password for tokens",
)
async def login(
    body: LoginRequest,
    users: SqlAlchemyUserRepository = Depends(get_user_repository),
) -> AuthResponse:
    result = await LoginUser(users).execute(email=body.email, password=body.password)
    return _auth_response(result)


@router.post(
    "/refresh",
    response_model=AuthResponse,
    responses={401: {"description": "Refresh token invalid or expired", "model": ErrorResponse}},
    summary="Exchange a refresh token for a new token pair",
)
async def refresh(
    body: RefreshRequest,
    users: SqlAlchemyUserRepository = Depends(get_user_repository),
) -> AuthResponse:
    result = await RefreshAccessToken(users).execute(body.refresh_token)
    return _auth_response(result)


@router.get(
    "/me",
    response_model=UserResponse,
    responses={401: {"description": "Not signed in", "model": ErrorResponse}},
    summary="The signed-in user, with primary role and dashboard",
)
async def me(
    current_user: CurrentUser = Depends(get_current_user),
    users: SqlAlchemyUserRepository = Depends(get_user_repository),
) -> UserResponse:
    user = await GetCurrentUser(users).execute(current_user.id)
    return UserResponse.from_entity(user)
