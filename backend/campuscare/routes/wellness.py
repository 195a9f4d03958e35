"""CampusCare Backend — Wellness routes (students write, wellness staff read)."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from campuscare.dependencies import CurrentUser, get_wellness_repository, require_roles
from campuscare.domain.roles import RoleName
from campuscare.repositories.wellness_repository import SqlAlchemyWellnessRepository
from campuscare.schemas.common import ErrorResponse
from campuscare.schemas.wellness import (
    WellnessRecordCreate,
    WellnessRecordResponse,
    WellnessSummaryResponse,
)
from campuscare.use_cases.wellness import (
    CreateWellnessRecord,
    GetWellnessSummary,
    ListMyWellnessRecords,
    ListWellnessRecords,
)

router = APIRouter(
    prefix="/api/wellness",
    tags=["Wellness"],
    responses={
        401: {"description": "Not signed in", "model": ErrorResponse},
        403: {"description": "Role not allowed", "model": ErrorResponse},
    },
)

students = require_roles(RoleName.STUDENT)
wellness_staff = require_roles(RoleName.WELLNESS, RoleName.ADMIN)


@router.post(
    "/records",
    response_model=WellnessRecordResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"description": "Value out of range", "model": ErrorResponse}},
    summary="Log a wellness check-in",
)
async def create_record(
    body: WellnessRecordCreate,
    current_user: CurrentUser = Depends(students),
    wellness: SqlAlchemyWellnessRepository = Depends(get_wellness_repository),
) -> WellnessRecordResponse:
    record = await CreateWellnessRecord(wellness).execute(
        user_id=current_user.id,
        stress_level=body.stress_level,
        sleep_hours=body.sleep_hours,
        diet_quality=body.diet_quality,
        comments=body.comments,
    )
    return WellnessRecordResponse.model_validate(record)


@router.get("/records/mine", response_model=List[WellnessRecordResponse], summary="My check-ins")
async def list_my_records(
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    current_user: CurrentUser = Depends(students),
    wellness: SqlAlchemyWellnessRepository = Depends(get_wellness_repository),
) -> List[WellnessRecordResponse]:
    found = await ListMyWellnessRecords(wellness).execute(current_user.id, limit=limit, offset=offset)
    return [WellnessRecordResponse.model_validate(r) for r in found]


@router.get("/records", response_model=List[WellnessRecordResponse], summary="All check-ins")
async def list_records(
    user_id: Optional[UUID] = Query(default=None, alias="userId"),
    since: Optional[datetime] = Query(default=None, description="Only records created at or after"),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    staff: CurrentUser = Depends(wellness_staff),
    wellness: SqlAlchemyWellnessRepository = Depends(get_wellness_repository),
) -> List[WellnessRecordResponse]:
    found = await ListWellnessRecords(wellness).execute(
        user_id=user_id, since=since, limit=limit, offset=offset
    )
    return [WellnessRecordResponse.model_validate(r) for r in found]


@router.get("/summary", response_model=WellnessSummaryResponse, summary="Aggregate wellness figures")
async def summary(
    since: Optional[datetime] = Query(default=None),
    staff: CurrentUser = Depends(wellness_staff),
    wellness: SqlAlchemyWellnessRepository = Depends(get_wellness_repository),
) -> WellnessSummaryResponse:
    return WellnessSummaryResponse.model_validate(await GetWellnessSummary(wellness).execute(since=since))
