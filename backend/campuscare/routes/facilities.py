"""CampusCare Backend — Facility and SLA policy routes."""

from typing import List

from fastapi import APIRouter, Depends, status

from campuscare.dependencies import (
    CurrentUser,
    get_current_user,
    get_facility_repository,
    require_roles,
)
from campuscare.domain.roles import RoleName
from campuscare.repositories.facility_repository import SqlAlchemyFacilityRepository
from campuscare.schemas.common import ErrorResponse
from campuscare.schemas.facility import FacilityCreate, FacilityResponse, SlaPolicyResponse
from campuscare.use_cases.facilities import CreateFacility, ListFacilities, ListSlaPolicies

router = APIRouter(prefix="/api/facilities", tags=["Facilities"])


@router.get("", response_model=List[FacilityResponse], summary="List facilities")
async def list_facilities(
    current_user: CurrentUser = Depends(get_current_user),
    facilities: SqlAlchemyFacilityRepository = Depends(get_facility_repository),
) -> List[FacilityResponse]:
    found = await ListFacilities(facilities).execute()
    return [FacilityResponse.model_validate(f) for f in found]


@router.get(
    "/sla-policies",
    response_model=List[SlaPolicyResponse],
    summary="List report priorities and their response times",
)
async def list_sla_policies(
    current_user: CurrentUser = Depends(get_current_user),
    facilities: SqlAlchemyFacilityRepository = Depends(get_facility_repository),
) -> List[SlaPolicyResponse]:
    found = await ListSlaPolicies(facilities).execute()
    return [SlaPolicyResponse.model_validate(p) for p in found]


@router.post(
    "",
    response_model=FacilityResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        403: {"description": "Admin role required", "model": ErrorResponse},
        409: {"description": "Facility name taken", "model": ErrorResponse},
    },
    summary="Add a facility",
)
async def create_facility(
    body: FacilityCreate,
    admin: CurrentUser = Depends(require_roles(RoleName.ADMIN)),
    facilities: SqlAlchemyFacilityRepository = Depends(get_facility_repository),
) -> FacilityResponse:
    facility = await CreateFacility(facilities).execute(name=body.name, location=body.location)
    return FacilityResponse.model_validate(facility)
