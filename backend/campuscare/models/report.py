"""
CampusCare Backend — Damage Report SQLAlchemy Model
=====================================================

What:  ORM model for the `reports` table.
Who:   Used by SqlAlchemyReportRepository and Alembic.

Lifecycle:
    1. Created by a student or teacher (status = 'pending', due_at from SLA)
    2. Moved forward by maintenance/admin staff:
       pending → in_progress | escalated → resolved → verified
    3. Never deleted

Indexes:
    - (user_id, created_at): "my reports" screen
    - (status, created_at): staff queue filtered by status
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import (
    CheckConstraint,
    DateTime,
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

REPORT_STATUSES = ("pending", "in_progress", "resolved", "verified", "escalated")


class ReportModel(Base):
    __tablename__ = "reports"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    facility_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("facilities.id", ondelete="RESTRICT"),
        nullable=False,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
    )
    priority_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("sla_policies.id", ondelete="RESTRICT"),
        nullable=False,
    )

    description: Mapped[str] = mapped_column(Text, nullable=False)

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="pending",
        comment="pending, in_progress, resolved, verified, escalated",
    )

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
    due_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        comment="Response deadline derived from the SLA policy",
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'in_progress', 'resolved', 'verified', 'escalated')",
            name="ck_reports_status",
        ),
        Index("idx_reports_user_created", "user_id", "created_at"),
        Index("idx_reports_status_created", "status", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<ReportModel(id={self.id}, status='{self.status}')>"
