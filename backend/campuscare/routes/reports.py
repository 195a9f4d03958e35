"""
CampusCare Backend — Damage Report Route Handlers
===================================================

    POST  /api/reports               student, teacher
    GET   /api/reports/mine          any signed-in user
    GET   /api/reports               maintenance, admin
    GET   /api/reports/stats         maintenance, admin
    GET   /api/reports/{id}          reporter, maintenance, admin
    PATCH /api/reports/{id}/status   maintenance, admin

Static paths are registered before /{report_id} so they are not captured
by the path parameter.
"""

import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from campuscare.database import get_db_session
from campuscare.dependencies import (
    CurrentUser,
    get_current_user,
    get_report_repository,
    require_roles,
)
from campuscare.domain.roles import RoleName
from campuscare.repositories.report_repository import SqlAlchemyReportRepository
from campuscare.schemas.common import ErrorResponse
from campuscare.schemas.report import (
    ReportCreate,
    ReportResponse,
    ReportStatsResponse,
    ReportStatusUpdate,
)
from campuscare.use_cases.reports import (
    CreateReport,
    GetReport,
    GetReportStats,
    ListMyReports,
    ListReports,
    UpdateReportStatus,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/reports",
    tags=["Reports"],
    responses={401: {"description": "Not signed in", "model": ErrorResponse}},
)

reporters = require_roles(RoleName.STUDENT, RoleName.TEACHER)
reviewers = require_roles(RoleName.MAINTENANCE, RoleName.ADMIN)


@router.post(
    "",
    response_model=ReportResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Invalid report", "model": ErrorResponse},
        403: {"description": "Student or teacher role required", "model": ErrorResponse},
        404: {"description": "Unknown facility or priority", "model": ErrorResponse},
    },
    summary="File a damage report",
)
async def create_report(
    body: ReportCreate,
    current_user: CurrentUser = Depends(reporters),
    reports: SqlAlchemyReportRepository = Depends(get_report_repository),
    db: AsyncSession = Depends(get_db_session),
) -> ReportResponse:
    report = await CreateReport(reports, session=db).execute(
        user_id=current_user.id,
        facility_id=body.facility_id,
        priority_id=body.priority_id,
        description=body.description,
    )
    return ReportResponse.model_validate(report)


@router.get("/mine", response_model=List[ReportResponse], summary="Reports I filed")
async def list_my_reports(
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    current_user: CurrentUser = Depends(get_current_user),
    reports: SqlAlchemyReportRepository = Depends(get_report_repository),
) -> List[ReportResponse]:
    found = await ListMyReports(reports).execute(current_user.id, limit=limit, offset=offset)
    return [ReportResponse.model_validate(r) for r in found]


@router.get("", response_model=List[ReportResponse], summary="Staff report queue")
async def list_reports(
    status_filter: Optional[str] = Query(default=None, alias="status"),
    facility_id: Optional[int] = Query(default=None, alias="facilityId"),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    staff: CurrentUser = Depends(reviewers),
    reports: SqlAlchemyReportRepository = Depends(get_report_repository),
) -> List[ReportResponse]:
    found = await ListReports(reports).execute(
        status=status_filter, facility_id=facility_id, limit=limit, offset=offset
    )
    return [ReportResponse.model_validate(r) for r in found]


@router.get("/stats", response_model=ReportStatsResponse, summary="Counts per status and overdue")
async def report_stats(
    staff: CurrentUser = Depends(reviewers),
    reports: SqlAlchemyReportRepository = Depends(get_report_repository),
) -> ReportStatsResponse:
    return ReportStatsResponse.model_validate(await GetReportStats(reports).execute())


@router.get(
    "/{report_id}",
    response_model=ReportResponse,
    responses={
        403: {"description": "Not your report", "model": ErrorResponse},
        404: {"description": "Report not found", "model": ErrorResponse},
    },
    summary="Get one report",
)
async def get_report(
    report_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
    reports: SqlAlchemyReportRepository = Depends(get_report_repository),
) -> ReportResponse:
    report = await GetReport(reports).execute(
        report_id, requester_id=current_user.id, requester_roles=current_user.roles
    )
    return ReportResponse.model_validate(report)


@router.patch(
    "/{report_id}/status",
    response_model=ReportResponse,
    responses={
        400: {"description": "Illegal status transition", "model": ErrorResponse},
        404: {"description": "Report not found", "model": ErrorResponse},
    },
    summary="Move a report to its next status",
)
async def update_report_status(
    report_id: UUID,
    body: ReportStatusUpdate,
    staff: CurrentUser = Depends(reviewers),
    reports: SqlAlchemyReportRepository = Depends(get_report_repository),
    db: AsyncSession = Depends(get_db_session),
) -> ReportResponse:
    report = await UpdateReportStatus(reports, session=db).execute(report_id, body.status)
    return ReportResponse.model_validate(report)
