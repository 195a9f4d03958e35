"""CampusCare Backend — Facility & SLA policy schemas."""

from typing import Optional

from pydantic import Field

from campuscare.schemas.common import CamelModel


class FacilityCreate(CamelModel):
    name: str = Field(min_length=1, max_length=120)
    location: Optional[str] = Field(default=None, max_length=255)


class FacilityResponse(CamelModel):
    id: int
    name: str
    location: Optional[str] = None


class SlaPolicyResponse(CamelModel):
    id: int
    priority: str = Field(description="low, medium, high or critical")
    response_hours: int = Field(description="Hours staff have to respond")
