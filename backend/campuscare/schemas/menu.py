"""CampusCare Backend — Menu & rating schemas."""

import uuid
from datetime import date, datetime
from typing import Dict, Optional

from pydantic import Field

from campuscare.domain.entities import MAX_COMMENTS_LENGTH, RATING_RANGE, Menu, MenuRatingSummary
from campuscare.schemas.common import CamelModel


class MenuCreate(CamelModel):
    menu_date: date = Field(alias="date", description="Calendar day (YYYY-MM-DD), one menu per day")
    breakfast: Optional[str] = Field(default=None, max_length=1000)
    lunch: Optional[str] = Field(default=None, max_length=1000)
    dinner: Optional[str] = Field(default=None, max_length=1000)
    snack: Optional[str] = Field(default=None, max_length=1000)


class MenuUpdate(CamelModel):
    """Only the fields present in the body are changed."""

    breakfast: Optional[str] = Field(default=None, max_length=1000)
    lunch: Optional[str] = Field(default=None, max_length=1000)
    dinner: Optional[str] = Field(default=None, max_length=1000)
    snack: Optional[str] = Field(default=None, max_length=1000)


class MenuResponse(CamelModel):
    id: uuid.UUID
    menu_date: date = Field(alias="date")
    breakfast: Optional[str] = None
    lunch: Optional[str] = None
    dinner: Optional[str] = None
    snack: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, menu: Menu) -> "MenuResponse":
        return cls(
            id=menu.id,
            menu_date=menu.menu_date,
            breakfast=menu.breakfast,
            lunch=menu.lunch,
            dinner=menu.dinner,
            snack=menu.snack,
            created_at=menu.created_at,
        )


class MenuRatingCreate(CamelModel):
    rating: int = Field(ge=RATING_RANGE[0], le=RATING_RANGE[1])
    comments: Optional[str] = Field(default=None, max_length=MAX_COMMENTS_LENGTH)


class MenuRatingResponse(CamelModel):
    id: uuid.UUID
    menu_id: uuid.UUID
    user_id: uuid.UUID
    rating: int
    comments: Optional[str] = None
    created_at: Optional[datetime] = None


class MenuRatingSummaryResponse(CamelModel):
    menu_id: uuid.UUID
    rating_count: int
    average_rating: Optional[float] = None
    distribution: Dict[str, int] = Field(description="Count of ratings per score, '1' to '5'")

    @classmethod
    def from_entity(cls, summary: MenuRatingSummary) -> "MenuRatingSummaryResponse":
        return cls(
            menu_id=summary.menu_id,
            rating_count=summary.rating_count,
            average_rating=summary.average_rating,
            distribution={str(score): n for score, n in sorted(summary.distribution.items())},
        )
