"""
CampusCare Backend — User & Role SQLAlchemy Models
====================================================

What:  ORM models for the `users`, `roles` and `user_roles` tables.
Who:   Used by SqlAlchemyUserRepository and by Alembic for schema management.

Table Design:
    - users.email is UNIQUE; the repository turns the IntegrityError into
      DuplicateError.
    - Users are never hard-deleted. Soft delete sets deleted_at and clears
      is_active.
    - roles is a lookup table seeded with the fixed role enumeration;
      user_roles is the many-to-many association.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from campuscare.database import Base
from campuscare.models._columns import utcnow

user_roles = Table(
    "user_roles",
    Base.metadata,
    Column(
        "user_id",
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "role_id",
        Integer,
        ForeignKey("roles.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Role(Base):
    __tablename__ = "roles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        comment="One of: student, teacher, maintenance, wellness, cafeteria, admin",
    )

    __table_args__ = (
        UniqueConstraint("name", name="uq_roles_name"),
    )

    def __repr__(self) -> str:
        return f"<Role(id={self.id}, name='{self.name}')>"


class UserModel(Base):
    """
    A registered account.

    Query Patterns:
        - Login: SELECT ... WHERE email = :email (uq_users_email)
        - Auth on every request: SELECT ... WHERE id = :uuid (primary key)
        - Admin listing: SELECT ... ORDER BY created_at DESC
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    name: Mapped[str] = mapped_column(String(120), nullable=False)

    # Stored lower-cased by the Email value object
    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Login identifier; unique across all users including soft-deleted ones",
    )

    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="bcrypt hash (includes salt and cost factor)",
    )

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # ── Timestamps ────────────────────────────────────────────────────────
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )
    deleted_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=None,
        comment="Soft-delete marker; NULL for live accounts",
    )

    # selectin: roles are needed on every authenticated request and async
    # sessions cannot lazy-load
    roles: Mapped[List[Role]] = relationship(
        secondary=user_roles,
        lazy="selectin",
    )

    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
        Index("idx_users_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<UserModel(id={self.id}, email='{self.email}', active={self.is_active})>"
