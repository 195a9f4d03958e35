"""CampusCare Backend — Damage report schemas."""

import uuid
from datetime import datetime
from typing import Dict, Optional

from pydantic import Field

from campuscare.domain.entities import MAX_DESCRIPTION_LENGTH, ReportStatus
from campuscare.schemas.common import CamelModel


class ReportCreate(CamelModel):
    facility_id: int = Field(gt=0)
    priority_id: int = Field(gt=0, description="SLA policy id")
    description: str = Field(min_length=1, max_length=MAX_DESCRIPTION_LENGTH)


class ReportStatusUpdate(CamelModel):
    status: str = Field(description="Target status; must be a legal move from the current one")


class ReportResponse(CamelModel):
    id: uuid.UUID
    facility_id: int
    user_id: uuid.UUID
    priority_id: int
    description: str
    status: ReportStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    due_at: Optional[datetime] = Field(default=None, description="SLA response deadline")


class ReportStatsResponse(CamelModel):
    total: int
    by_status: Dict[str, int]
    overdue: int = Field(description="Open reports past their due time")
