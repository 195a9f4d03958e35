"""
CampusCare Backend — Damage Report Repository (SQLAlchemy adapter)
====================================================================

What:  Persists Report aggregates to `reports`.
How:   create() resolves the facility and SLA policy first so a missing
       reference is reported as NotFoundError (404) rather than relying on
       foreign-key enforcement, which SQLite leaves off by default. The
       report's due_at is created_at + the policy's response_hours.
"""

import logging
from datetime import datetime, timedelta
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func, select

from campuscare.domain.entities import OPEN_STATUSES, Report, ReportStats, ReportStatus
from campuscare.exceptions import NotFoundError
from campuscare.models._columns import utcnow
from campuscare.models.facility import FacilityModel, SlaPolicyModel
from campuscare.models.report import ReportModel
from campuscare.repositories.base import SqlAlchemyRepository
from campuscare.repositories.ports import ReportRepository

logger = logging.getLogger(__name__)


def to_entity(row: ReportModel) -> Report:
    return Report(
        id=row.id,
        facility_id=row.facility_id,
        user_id=row.user_id,
        priority_id=row.priority_id,
        description=row.description,
        status=ReportStatus(row.status),
        created_at=row.created_at,
        updated_at=row.updated_at,
        due_at=row.due_at,
    )


class SqlAlchemyReportRepository(SqlAlchemyRepository, ReportRepository):

    async def _get_row(self, report_id: UUID) -> ReportModel:
        result = await self._execute(select(ReportModel).where(ReportModel.id == report_id), "report")
        row = result.scalar_one_or_none()
        if row is None:
            raise NotFoundError(resource="report", resource_id=str(report_id))
        return row

    async def create(self, report: Report) -> Report:
        facility = await self.session.get(FacilityModel, report.facility_id)
        if facility is None:
            raise NotFoundError(resource="facility", resource_id=str(report.facility_id))
        policy = await self.session.get(SlaPolicyModel, report.priority_id)
        if policy is None:
            raise NotFoundError(resource="priority", resource_id=str(report.priority_id))

        created_at = utcnow()
        row = ReportModel(
            facility_id=report.facility_id,
            user_id=report.user_id,
            priority_id=report.priority_id,
            description=report.description,
            status=report.status.value,
            created_at=created_at,
            updated_at=created_at,
            due_at=created_at + timedelta(hours=policy.response_hours),
        )
        self.session.add(row)
        await self._flush("report")
        logger.info(
            "Report %s created for facility %s (priority=%s, due=%s)",
            row.id,
            facility.name,
            policy.priority,
            row.due_at.isoformat(),
        )
        return to_entity(row)

    async def get_by_id(self, report_id: UUID) -> Report:
        return to_entity(await self._get_row(report_id))

    async def list_by_user(self, user_id: UUID, limit: int = 50, offset: int = 0) -> List[Report]:
        query = (
            select(ReportModel)
            .where(ReportModel.user_id == user_id)
            .order_by(ReportModel.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self._execute(query, "report")
        return [to_entity(row) for row in result.scalars().all()]

    async def list_reports(
        self,
        status: Optional[ReportStatus] = None,
        facility_id: Optional[int] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[Report]:
        query = select(ReportModel)
        if status is not None:
            query = query.where(ReportModel.status == ReportStatus(status).value)
        if facility_id is not None:
            query = query.where(ReportModel.facility_id == facility_id)
        query = query.order_by(ReportModel.created_at.desc()).limit(limit).offset(offset)

        result = await self._execute(query, "report")
        return [to_entity(row) for row in result.scalars().all()]

    async def update_status(self, report_id: UUID, status: ReportStatus) -> Report:
        row = await self._get_row(report_id)
        row.status = ReportStatus(status).value
        row.updated_at = utcnow()
        await self._flush("report")
        return to_entity(row)

    async def stats(self, now: datetime) -> ReportStats:
        by_status_result = await self._execute(
            select(ReportModel.status, func.count(ReportModel.id)).group_by(ReportModel.status),
            "report",
        )
        by_status = {status.value: 0 for status in ReportStatus}
        for status, count in by_status_result.all():
            by_status[status] = count

        overdue_result = await self._execute(
            select(func.count(ReportModel.id)).where(
                ReportModel.status.in_([s.value for s in OPEN_STATUSES]),
                ReportModel.due_at.is_not(None),
                ReportModel.due_at < now,
            ),
            "report",
        )
        return ReportStats(
            total=sum(by_status.values()),
            by_status=by_status,
            overdue=overdue_result.scalar() or 0,
        )
