"""
CampusCare Backend — Auth & User Schemas
==========================================

Email format and password length are checked by the domain value objects,
not here, so their errors name the field the same way as every other
business-rule failure.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import Field

from campuscare.domain.entities import User
from campuscare.schemas.common import CamelModel


# ══════════════════════════════════════════════════════════════════════════
# Requests
# ══════════════════════════════════════════════════════════════════════════


class RegisterRequest(CamelModel):
    email: str = Field(max_length=255, description="Login email (case-insensitive)")
    password: str = Field(description="At least 6 characters")
    name: str = Field(min_length=1, max_length=120)


class LoginRequest(CamelModel):
    email: str
    password: str


class RefreshRequest(CamelModel):
    refresh_token: str = Field(min_length=1)


class RoleAssignmentRequest(CamelModel):
    roles: List[str] = Field(min_length=1, description="Complete new role set")


# ══════════════════════════════════════════════════════════════════════════
# Responses
# ══════════════════════════════════════════════════════════════════════════


class UserResponse(CamelModel):
    id: uuid.UUID
    name: str
    email: str
    roles: List[str] = Field(description="Role names, highest precedence first")
    primary_role: Optional[str] = Field(default=None, description="Highest-precedence role")
    dashboard: Optional[str] = Field(default=None, description="Client dashboard for the primary role")
    is_active: bool
    created_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, user: User) -> "UserResponse":
        primary = user.primary_role
        return cls(
            id=user.id,
            name=user.name,
            email=str(user.email),
            roles=[r.value for r in sorted(user.roles, key=lambda r: r.precedence)],
            primary_role=primary.value if primary else None,
            dashboard=primary.dashboard if primary else None,
            is_active=user.is_active,
            created_at=user.created_at,
            deleted_at=user.deleted_at,
        )


class AuthResponse(CamelModel):
    user: UserResponse
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
