"""
CampusCare Backend — Shared Schema Pieces
===========================================

What:  The camelCase base model every request/response schema extends, plus
       the error and health response bodies.
How:   `alias_generator=to_camel` makes `created_at` travel as `createdAt`;
       `populate_by_name=True` still accepts snake_case input and lets the
       routes build responses with Python field names.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ErrorResponse(BaseModel):
    """
    What:  Standardized error body returned by every exception handler.

    Example:
        {
            "error": "validation_error",
            "message": "stressLevel: Input should be less than or equal to 5",
            "details": {"fields": ["stressLevel"]},
            "request_id": "550e8400-e29b-41d4-a716-446655440000"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")


class CountResponse(CamelModel):
    updated: int = Field(description="Number of rows changed")
