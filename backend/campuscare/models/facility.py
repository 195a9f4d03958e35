"""
CampusCare Backend — Facility & SLA Policy Models
===================================================

Reference tables for damage reports: the facilities that can be reported
and the priority levels with their response deadlines.
"""

from typing import Optional

from sqlalchemy import CheckConstraint, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from campuscare.database import Base


class FacilityModel(Base):
    __tablename__ = "facilities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    __table_args__ = (
        UniqueConstraint("name", name="uq_facilities_name"),
    )

    def __repr__(self) -> str:
        return f"<FacilityModel(id={self.id}, name='{self.name}')>"


class SlaPolicyModel(Base):
    """
    Priority → response deadline mapping.

    A report's due_at is its created_at plus response_hours of the
    priority it was filed under.
    """

    __tablename__ = "sla_policies"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    priority: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        comment="low, medium, high, critical",
    )
    response_hours: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (
        UniqueConstraint("priority", name="uq_sla_policies_priority"),
        CheckConstraint("response_hours > 0", name="ck_sla_policies_response_hours"),
    )

    def __repr__(self) -> str:
        return f"<SlaPolicyModel(priority='{self.priority}', hours={self.response_hours})>"
