"""
CampusCare Backend — Authentication Use Cases
===============================================

RegisterUser        email + password + name → new student account + tokens
LoginUser           email + password → tokens
RefreshAccessToken  refresh token → new token pair
GetCurrentUser      user id from an access token → active User
"""

import logging
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from campuscare.config import settings
from campuscare.domain.entities import User
from campuscare.domain.roles import RoleName
from campuscare.domain.value_objects import Email, Password
from campuscare.exceptions import (
    DuplicateError,
    InvalidCredentialsError,
    InvalidTokenError,
    NotFoundError,
)
from campuscare.repositories.ports import UserRepository
from campuscare.services.auth_service import AuthService, auth_service

logger = logging.getLogger(__name__)

DEFAULT_ROLE = RoleName.STUDENT


@dataclass
class AuthResult:
    user: User
    access_token: str
    refresh_token: str


def _issue_tokens(auth: AuthService, user: User) -> AuthResult:
    return AuthResult(
        user=user,
        access_token=auth.create_access_token(user),
        refresh_token=auth.create_refresh_token(user),
    )


class RegisterUser:
    """
    Create a student account and sign it in.

    The email is checked up front for a clear 409; the unique index on
    users.email still guards against two concurrent registrations.
    """

    def __init__(
        self,
        users: UserRepository,
        auth: AuthService = auth_service,
        password_min_length: Optional[int] = None,
    ):
        self.users = users
        self.auth = auth
        self.password_min_length = password_min_length or settings.password_min_length

    async def execute(self, email: str, password: str, name: str) -> AuthResult:
        address = Email(email)
        secret = Password(password, min_length=self.password_min_length)

        if await self.users.get_by_email(address.value) is not None:
            raise DuplicateError(
                message="An account with this email already exists",
                field="email",
            )

        user = await self.users.create(
            User(
                name=name,
                email=address,
                password_hash=self.auth.hash_password(secret.value),
                roles=frozenset({DEFAULT_ROLE}),
            )
        )
        logger.info("Registered user %s", user.id)
        return _issue_tokens(self.auth, user)


class LoginUser:
    def __init__(self, users: UserRepository, auth: AuthService = auth_service):
        self.users = users
        self.auth = auth

    async def execute(self, email: str, password: str) -> AuthResult:
        user = await self.users.get_by_email(email or "")
        # Unknown email, wrong password and disabled account look the same
        if user is None or not self.auth.verify_password(password or "", user.password_hash):
            raise InvalidCredentialsError()
        if not user.can_login:
            logger.info("Login refused for inactive user %s", user.id)
            raise InvalidCredentialsError()
        return _issue_tokens(self.auth, user)


class RefreshAccessToken:
    """Exchange a valid refresh token for a fresh access/refresh pair."""

    def __init__(self, users: UserRepository, auth: AuthService = auth_service):
        self.users = users
        self.auth = auth

    async def execute(self, refresh_token: str) -> AuthResult:
        claims = self.auth.decode_refresh_token(refresh_token)
        user = await GetCurrentUser(self.users).execute(claims["sub"])
        return _issue_tokens(self.auth, user)


class GetCurrentUser:
    def __init__(self, users: UserRepository):
        self.users = users

    async def execute(self, user_id: UUID) -> User:
        try:
            user = await self.users.get_by_id(user_id)
        except NotFoundError as e:
            raise InvalidTokenError(message="The account for this token no longer exists") from e
        if not user.can_login:
            raise InvalidTokenError(message="The account for this token is disabled")
        return user
