"""
CampusCare Backend — Damage Report Use Cases
==============================================

What:  Filing, viewing and moving damage reports through their lifecycle.
How:   Status moves are validated by Report.transition_to() before anything
       is written. Filing a report notifies maintenance staff; a status
       change notifies the reporter. Notifications never fail the operation.

Status lifecycle:
    pending     → in_progress | escalated
    escalated   → in_progress | resolved
    in_progress → resolved | escalated
    resolved    → verified
    verified    (terminal)
"""

import logging
from datetime import datetime, timezone
from typing import FrozenSet, List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from campuscare.domain.entities import Report, ReportStats, ReportStatus
from campuscare.domain.roles import RoleName
from campuscare.exceptions import AuthorizationError, ValidationError
from campuscare.repositories.ports import ReportRepository
from campuscare.services.notification_service import NotificationService, notification_service

logger = logging.getLogger(__name__)

REPORT_REVIEWER_ROLES = frozenset({RoleName.MAINTENANCE, RoleName.ADMIN})


def parse_status(value: str) -> ReportStatus:
    try:
        return ReportStatus(str(value).strip().lower())
    except ValueError:
        raise ValidationError(
            message=(
                f"Unknown status '{value}'. Valid statuses: "
                f"{', '.join(s.value for s in ReportStatus)}"
            ),
            field="status",
        )


class CreateReport:
    def __init__(
        self,
        reports: ReportRepository,
        session: AsyncSession,
        notifier: NotificationService = notification_service,
    ):
        self.reports = reports
        self.session = session
        self.notifier = notifier

    async def execute(
        self, user_id: UUID, facility_id: int, priority_id: int, description: str
    ) -> Report:
        report = await self.reports.create(
            Report(
                facility_id=facility_id,
                user_id=user_id,
                priority_id=priority_id,
                description=description,
            )
        )
        await self.notifier.notify_role(
            self.session,
            RoleName.MAINTENANCE,
            "New damage report",
            f"A new damage report was filed: {report.description[:120]}",
        )
        return report


class GetReport:
    """Visible to the reporter and to maintenance/admin staff only."""

    def __init__(self, reports: ReportRepository):
        self.reports = reports

    async def execute(
        self, report_id: UUID, requester_id: UUID, requester_roles: FrozenSet[RoleName]
    ) -> Report:
        report = await self.reports.get_by_id(report_id)
        if report.user_id != requester_id and not REPORT_REVIEWER_ROLES.intersection(requester_roles):
            raise AuthorizationError(
                required_roles=[r.value for r in REPORT_REVIEWER_ROLES],
                message="You can only view your own reports",
            )
        return report


class ListMyReports:
    def __init__(self, reports: ReportRepository):
        self.reports = reports

    async def execute(self, user_id: UUID, limit: int = 50, offset: int = 0) -> List[Report]:
        return await self.reports.list_by_user(user_id, limit=limit, offset=offset)


class ListReports:
    def __init__(self, reports: ReportRepository):
        self.reports = reports

    async def execute(
        self,
        status: Optional[str] = None,
        facility_id: Optional[int] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[Report]:
        return await self.reports.list_reports(
            status=parse_status(status) if status else None,
            facility_id=facility_id,
            limit=limit,
            offset=offset,
        )


class UpdateReportStatus:
    def __init__(
        self,
        reports: ReportRepository,
        session: AsyncSession,
        notifier: NotificationService = notification_service,
    ):
        self.reports = reports
        self.session = session
        self.notifier = notifier

    async def execute(self, report_id: UUID, status: str) -> Report:
        target = parse_status(status)
        report = await self.reports.get_by_id(report_id)
        previous = report.status
        report.transition_to(target)

        updated = await self.reports.update_status(report_id, report.status)
        logger.info("Report %s moved %s → %s", report_id, previous.value, updated.status.value)

        await self.notifier.notify(
            self.session,
            updated.user_id,
            "Report status updated",
            f"Your damage report is now '{updated.status.value.replace('_', ' ')}'.",
        )
        return updated


class GetReportStats:
    def __init__(self, reports: ReportRepository):
        self.reports = reports

    async def execute(self, now: Optional[datetime] = None) -> ReportStats:
        return await self.reports.stats(now or datetime.now(timezone.utc))
