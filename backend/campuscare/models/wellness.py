"""
CampusCare Backend — Wellness Record SQLAlchemy Model
=======================================================

One personal check-in. The CHECK constraints repeat the bounds the domain
entity already enforces, so rows written outside the API obey them too.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from campuscare.database import Base
from campuscare.models._columns import utcnow


class WellnessRecordModel(Base):
    __tablename__ = "wellness_records"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    stress_level: Mapped[int] = mapped_column(Integer, nullable=False, comment="0 (none) to 5 (severe)")
    sleep_hours: Mapped[float] = mapped_column(Float, nullable=False, comment="0 to 24")
    diet_quality: Mapped[str] = mapped_column(String(50), nullable=False)
    comments: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    __table_args__ = (
        CheckConstraint("stress_level BETWEEN 0 AND 5", name="ck_wellness_stress_level"),
        CheckConstraint("sleep_hours BETWEEN 0 AND 24", name="ck_wellness_sleep_hours"),
        Index("idx_wellness_user_created", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<WellnessRecordModel(id={self.id}, user_id={self.user_id})>"
