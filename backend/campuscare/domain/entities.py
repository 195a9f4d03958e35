"""
CampusCare Backend — Domain Entities
======================================

What:  Plain records for every aggregate the API manages, with the field
       rules that must hold before anything reaches the database.
How:   Dataclasses validate in __post_init__ and raise ValidationError naming
       the offending wire field (camelCase). Repositories translate between
       these records and ORM rows; use cases only ever see these records.

Bounds enforced here (and again by database CHECK constraints):
    WellnessRecord.stress_level   0..5
    WellnessRecord.sleep_hours    0..24
    MenuRating.rating             1..5
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Dict, FrozenSet, Optional
from uuid import UUID

from campuscare.domain.roles import RoleName
from campuscare.domain.value_objects import Email
from campuscare.exceptions import ValidationError

STRESS_LEVEL_RANGE = (0, 5)
SLEEP_HOURS_RANGE = (0.0, 24.0)
RATING_RANGE = (1, 5)

MAX_DESCRIPTION_LENGTH = 2000
MAX_COMMENTS_LENGTH = 1000


def _require_text(value: Optional[str], field_name: str, max_length: int) -> str:
    text = (value or "").strip()
    if not text:
        raise ValidationError(message=f"{field_name} must not be empty", field=field_name)
    if len(text) > max_length:
        raise ValidationError(
            message=f"{field_name} must be at most {max_length} characters",
            field=field_name,
        )
    return text


def _optional_text(value: Optional[str], field_name: str, max_length: int) -> Optional[str]:
    if value is None:
        return None
    text = value.strip()
    if len(text) > max_length:
        raise ValidationError(
            message=f"{field_name} must be at most {max_length} characters",
            field=field_name,
        )
    return text or None


def _require_between(value, low, high, field_name: str):
    if value is None or isinstance(value, bool) or not (low <= value <= high):
        raise ValidationError(
            message=f"{field_name} must be between {low} and {high}",
            field=field_name,
            context={"min": low, "max": high, "value": value},
        )
    return value


# ══════════════════════════════════════════════════════════════════════════
# Users
# ══════════════════════════════════════════════════════════════════════════


@dataclass
class User:
    name: str
    email: Email
    password_hash: str
    roles: FrozenSet[RoleName] = frozenset()
    is_active: bool = True
    id: Optional[UUID] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None

    def __post_init__(self):
        self.name = _require_text(self.name, "name", 120)
        self.roles = frozenset(self.roles)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    @property
    def can_login(self) -> bool:
        return self.is_active and not self.is_deleted

    @property
    def primary_role(self) -> Optional[RoleName]:
        return RoleName.primary(self.roles)

    def has_any_role(self, *roles: RoleName) -> bool:
        return bool(self.roles.intersection(roles))


# ══════════════════════════════════════════════════════════════════════════
# Facilities & damage reports
# ══════════════════════════════════════════════════════════════════════════


@dataclass
class Facility:
    name: str
    location: Optional[str] = None
    id: Optional[int] = None

    def __post_init__(self):
        self.name = _require_text(self.name, "name", 120)
        self.location = _optional_text(self.location, "location", 255)


@dataclass
class SlaPolicy:
    """Priority level and the number of hours staff have to respond."""

    priority: str
    response_hours: int
    id: Optional[int] = None


class ReportStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    VERIFIED = "verified"
    ESCALATED = "escalated"

    def can_move_to(self, target: "ReportStatus") -> bool:
        return target in REPORT_TRANSITIONS[self]


# Forward order of the workflow; escalated is a side state of an open report
_WORKFLOW = (
    ReportStatus.PENDING,
    ReportStatus.IN_PROGRESS,
    ReportStatus.RESOLVED,
    ReportStatus.VERIFIED,
)
OPEN_STATUSES: FrozenSet[ReportStatus] = frozenset(
    {ReportStatus.PENDING, ReportStatus.IN_PROGRESS, ReportStatus.ESCALATED}
)


def _forward_moves(status: ReportStatus) -> FrozenSet[ReportStatus]:
    if status is ReportStatus.ESCALATED:
        later = _WORKFLOW[1:]
    else:
        later = _WORKFLOW[_WORKFLOW.index(status) + 1:]
    if status in OPEN_STATUSES and status is not ReportStatus.ESCALATED:
        return frozenset(later) | {ReportStatus.ESCALATED}
    return frozenset(later)


REPORT_TRANSITIONS: Dict[ReportStatus, FrozenSet[ReportStatus]] = {
    status: _forward_moves(status) for status in ReportStatus
}


@dataclass
class Report:
    facility_id: int
    user_id: UUID
    priority_id: int
    description: str
    status: ReportStatus = ReportStatus.PENDING
    id: Optional[UUID] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    due_at: Optional[datetime] = None

    def __post_init__(self):
        self.description = _require_text(self.description, "description", MAX_DESCRIPTION_LENGTH)
        self.status = ReportStatus(self.status)

    def transition_to(self, target: ReportStatus) -> None:
        """Move the report forward; any other move raises ValidationError."""
        target = ReportStatus(target)
        if not self.status.can_move_to(target):
            allowed = sorted(s.value for s in REPORT_TRANSITIONS[self.status])
            raise ValidationError(
                message=(
                    f"Cannot move report from '{self.status.value}' to '{target.value}'"
                ),
                field="status",
                context={"current": self.status.value, "allowed": allowed},
            )
        self.status = target


# ══════════════════════════════════════════════════════════════════════════
# Wellness
# ══════════════════════════════════════════════════════════════════════════


@dataclass
class WellnessRecord:
    user_id: UUID
    stress_level: int
    sleep_hours: float
    diet_quality: str
    comments: Optional[str] = None
    id: Optional[UUID] = None
    created_at: Optional[datetime] = None

    def __post_init__(self):
        _require_between(self.stress_level, *STRESS_LEVEL_RANGE, "stressLevel")
        _require_between(self.sleep_hours, *SLEEP_HOURS_RANGE, "sleepHours")
        self.diet_quality = _require_text(self.diet_quality, "dietQuality", 50)
        self.comments = _optional_text(self.comments, "comments", MAX_COMMENTS_LENGTH)


@dataclass
class WellnessSummary:
    record_count: int
    average_stress_level: Optional[float]
    average_sleep_hours: Optional[float]
    diet_quality_counts: Dict[str, int] = field(default_factory=dict)


# ══════════════════════════════════════════════════════════════════════════
# Menus & ratings
# ══════════════════════════════════════════════════════════════════════════


MEAL_FIELDS = ("breakfast", "lunch", "dinner", "snack")


@dataclass
class Menu:
    menu_date: date
    breakfast: Optional[str] = None
    lunch: Optional[str] = None
    dinner: Optional[str] = None
    snack: Optional[str] = None
    id: Optional[UUID] = None
    created_at: Optional[datetime] = None

    def __post_init__(self):
        if self.menu_date is None:
            raise ValidationError(message="date is required", field="date")
        for meal in MEAL_FIELDS:
            setattr(self, meal, _optional_text(getattr(self, meal), meal, 1000))
        if not any(getattr(self, meal) for meal in MEAL_FIELDS):
            raise ValidationError(
                message="A menu needs at least one of breakfast, lunch, dinner or snack",
                field="breakfast",
            )


@dataclass
class MenuRating:
    menu_id: UUID
    user_id: UUID
    rating: int
    comments: Optional[str] = None
    id: Optional[UUID] = None
    created_at: Optional[datetime] = None

    def __post_init__(self):
        _require_between(self.rating, *RATING_RANGE, "rating")
        self.comments = _optional_text(self.comments, "comments", MAX_COMMENTS_LENGTH)


@dataclass
class MenuRatingSummary:
    menu_id: UUID
    rating_count: int
    average_rating: Optional[float]
    distribution: Dict[int, int] = field(default_factory=dict)


# ══════════════════════════════════════════════════════════════════════════
# Notifications
# ══════════════════════════════════════════════════════════════════════════


@dataclass
class Notification:
    user_id: UUID
    title: str
    body: str
    is_read: bool = False
    id: Optional[UUID] = None
    created_at: Optional[datetime] = None


@dataclass
class ReportStats:
    total: int
    by_status: Dict[str, int] = field(default_factory=dict)
    overdue: int = 0


__all__ = [
    "User",
    "Facility",
    "SlaPolicy",
    "ReportStatus",
    "REPORT_TRANSITIONS",
    "OPEN_STATUSES",
    "Report",
    "ReportStats",
    "WellnessRecord",
    "WellnessSummary",
    "Menu",
    "MenuRating",
    "MenuRatingSummary",
    "Notification",
    "MEAL_FIELDS",
]
