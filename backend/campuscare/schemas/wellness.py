"""
CampusCare Backend — Wellness schemas

The bounds are declared here as well as on the entity so the OpenAPI docs
show them and out-of-range values are rejected before the handler runs.
"""

import uuid
from datetime import datetime
from typing import Dict, Optional

from pydantic import Field

from campuscare.domain.entities import MAX_COMMENTS_LENGTH, SLEEP_HOURS_RANGE, STRESS_LEVEL_RANGE
from campuscare.schemas.common import CamelModel


class WellnessRecordCreate(CamelModel):
    stress_level: int = Field(ge=STRESS_LEVEL_RANGE[0], le=STRESS_LEVEL_RANGE[1])
    sleep_hours: float = Field(ge=SLEEP_HOURS_RANGE[0], le=SLEEP_HOURS_RANGE[1])
    diet_quality: str = Field(min_length=1, max_length=50, description="e.g. poor, fair, good")
    comments: Optional[str] = Field(default=None, max_length=MAX_COMMENTS_LENGTH)


class WellnessRecordResponse(CamelModel):
    id: uuid.UUID
    user_id: uuid.UUID
    stress_level: int
    sleep_hours: float
    diet_quality: str
    comments: Optional[str] = None
    created_at: Optional[datetime] = None


class WellnessSummaryResponse(CamelModel):
    record_count: int
    average_stress_level: Optional[float] = None
    average_sleep_hours: Optional[float] = None
    diet_quality_counts: Dict[str, int]
