"""
CampusCare Backend — Menu & Menu Rating SQLAlchemy Models
===========================================================

What:  ORM models for `menus` (one per calendar date) and `menu_ratings`.

Constraints:
    - menus.menu_date UNIQUE → second menu for a date raises DuplicateError
    - menu_ratings.rating BETWEEN 1 AND 5
    - (menu_id, user_id) UNIQUE → one rating per user per menu
"""

import uuid
from datetime import date, datetime
from typing import Optional

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from campuscare.database import Base
from campuscare.models._columns import utcnow


class MenuModel(Base):
    __tablename__ = "menus"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    menu_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        comment="Calendar date this menu is served on",
    )
    breakfast: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    lunch: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    dinner: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    snack: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    __table_args__ = (
        UniqueConstraint("menu_date", name="uq_menus_menu_date"),
    )

    def __repr__(self) -> str:
        return f"<MenuModel(id={self.id}, date={self.menu_date})>"


class MenuRatingModel(Base):
    __tablename__ = "menu_ratings"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    menu_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("menus.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    comments: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    __table_args__ = (
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_menu_ratings_rating"),
        UniqueConstraint("menu_id", "user_id", name="uq_menu_ratings_menu_user"),
    )

    def __repr__(self) -> str:
        return f"<MenuRatingModel(menu_id={self.menu_id}, rating={self.rating})>"
