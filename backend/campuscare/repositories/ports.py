"""
CampusCare Backend — Repository Interfaces (Ports)
====================================================

What:  Abstract base classes defining the persistence contract for every
       aggregate. Use cases depend on these; the SQLAlchemy adapters in the
       sibling modules implement them.
How:   Concrete repositories inherit from a port and implement each method.
       Unit tests substitute AsyncMock(spec=Port) for the adapters.

Shared contract:
    create(...)      → entity        raises DuplicateError on unique violation
    get_by_id(id)    → entity        raises NotFoundError when missing
    list_*(filters)  → list[entity]  newest first
    update_*(id,...) → entity        raises NotFoundError when missing
    Any other persistence failure is raised as DatabaseError.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from campuscare.domain.entities import (
    Facility,
    Menu,
    MenuRating,
    MenuRatingSummary,
    Notification,
    Report,
    ReportStats,
    ReportStatus,
    SlaPolicy,
    User,
    WellnessRecord,
    WellnessSummary,
)
from campuscare.domain.roles import RoleName


class UserRepository(ABC):

    @abstractmethod
    async def create(self, user: User) -> User:
        """Insert a user with its roles. DuplicateError if the email is taken."""

    @abstractmethod
    async def get_by_id(self, user_id: UUID) -> User:
        """Fetch a user, including soft-deleted ones."""

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Fetch a user by (normalized) email, or None."""

    @abstractmethod
    async def list_users(
        self,
        role: Optional[RoleName] = None,
        include_deleted: bool = False,
        limit: int = 50,
        offset: int = 0,
    ) -> List[User]:
        ...

    @abstractmethod
    async def list_ids_with_role(self, role: RoleName) -> List[UUID]:
        """IDs of active users holding `role` (notification fan-out)."""

    @abstractmethod
    async def set_roles(self, user_id: UUID, roles: List[RoleName]) -> User:
        ...

    @abstractmethod
    async def soft_delete(self, user_id: UUID) -> User:
        """Set deleted_at and clear is_active. Idempotent."""


class FacilityRepository(ABC):

    @abstractmethod
    async def create(self, facility: Facility) -> Facility:
        ...

    @abstractmethod
    async def list_facilities(self) -> List[Facility]:
        ...

    @abstractmethod
    async def list_sla_policies(self) -> List[SlaPolicy]:
        ...


class ReportRepository(ABC):

    @abstractmethod
    async def create(self, report: Report) -> Report:
        """
        Insert a report. The facility and SLA policy must exist (NotFoundError
        otherwise); due_at is derived from the policy's response_hours.
        """

    @abstractmethod
    async def get_by_id(self, report_id: UUID) -> Report:
        ...

    @abstractmethod
    async def list_by_user(self, user_id: UUID, limit: int = 50, offset: int = 0) -> List[Report]:
        ...

    @abstractmethod
    async def list_reports(
        self,
        status: Optional[ReportStatus] = None,
        facility_id: Optional[int] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[Report]:
        ...

    @abstractmethod
    async def update_status(self, report_id: UUID, status: ReportStatus) -> Report:
        ...

    @abstractmethod
    async def stats(self, now: datetime) -> ReportStats:
        """Counts per status plus open reports whose due_at is before `now`."""


class WellnessRepository(ABC):

    @abstractmethod
    async def create(self, record: WellnessRecord) -> WellnessRecord:
        ...

    @abstractmethod
    async def list_by_user(
        self, user_id: UUID, limit: int = 50, offset: int = 0
    ) -> List[WellnessRecord]:
        ...

    @abstractmethod
    async def list_records(
        self,
        user_id: Optional[UUID] = None,
        since: Optional[datetime] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[WellnessRecord]:
        ...

    @abstractmethod
    async def summary(self, since: Optional[datetime] = None) -> WellnessSummary:
        ...


class MenuRepository(ABC):

    @abstractmethod
    async def create(self, menu: Menu) -> Menu:
        """DuplicateError if a menu already exists for menu.menu_date."""

    @abstractmethod
    async def get_by_id(self, menu_id: UUID) -> Menu:
        ...

    @abstractmethod
    async def get_by_date(self, menu_date: date) -> Menu:
        ...

    @abstractmethod
    async def list_menus(
        self,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
        limit: int = 31,
        offset: int = 0,
    ) -> List[Menu]:
        ...

    @abstractmethod
    async def update(self, menu_id: UUID, patch: Dict[str, Any]) -> Menu:
        ...

    @abstractmethod
    async def add_rating(self, rating: MenuRating) -> MenuRating:
        """NotFoundError for an unknown menu; DuplicateError for a second rating."""

    @abstractmethod
    async def list_ratings(self, menu_id: UUID, limit: int = 100, offset: int = 0) -> List[MenuRating]:
        ...

    @abstractmethod
    async def rating_summary(self, menu_id: UUID) -> MenuRatingSummary:
        ...


class NotificationRepository(ABC):

    @abstractmethod
    async def create(self, notification: Notification) -> Notification:
        ...

    @abstractmethod
    async def list_for_user(
        self, user_id: UUID, unread_only: bool = False, limit: int = 50, offset: int = 0
    ) -> List[Notification]:
        ...

    @abstractmethod
    async def mark_read(self, notification_id: UUID, user_id: UUID) -> Notification:
        """NotFoundError if the notification does not exist or belongs to someone else."""

    @abstractmethod
    async def mark_all_read(self, user_id: UUID) -> int:
        """Returns the number of notifications updated."""
