"""
CampusCare Backend — Cafeteria Menu Route Handlers
====================================================

    POST /api/menus                        cafeteria, admin
    PUT  /api/menus/{id}                   cafeteria, admin
    GET  /api/menus                        any signed-in user
    GET  /api/menus/{id}                   any signed-in user
    GET  /api/menus/date/{date}            any signed-in user
    POST /api/menus/{id}/ratings           student, teacher
    GET  /api/menus/{id}/ratings           cafeteria, admin
    GET  /api/menus/{id}/ratings/summary   cafeteria, admin
"""

from datetime import date
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from campuscare.dependencies import (
    CurrentUser,
    get_current_user,
    get_menu_repository,
    require_roles,
)
from campuscare.domain.roles import RoleName
from campuscare.repositories.menu_repository import SqlAlchemyMenuRepository
from campuscare.schemas.common import ErrorResponse
from campuscare.schemas.menu import (
    MenuCreate,
    MenuRatingCreate,
    MenuRatingResponse,
    MenuRatingSummaryResponse,
    MenuResponse,
    MenuUpdate,
)
from campuscare.use_cases.menus import (
    CreateMenu,
    GetMenu,
    GetMenuByDate,
    GetMenuRatingSummary,
    ListMenuRatings,
    ListMenus,
    RateMenu,
    UpdateMenu,
)

router = APIRouter(
    prefix="/api/menus",
    tags=["Menus"],
    responses={401: {"description": "Not signed in", "model": ErrorResponse}},
)

cafeteria_staff = require_roles(RoleName.CAFETERIA, RoleName.ADMIN)
raters = require_roles(RoleName.STUDENT, RoleName.TEACHER)


@router.post(
    "",
    response_model=MenuResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"description": "A menu already exists for this date", "model": ErrorResponse}},
    summary="Publish the menu for a day",
)
async def create_menu(
    body: MenuCreate,
    staff: CurrentUser = Depends(cafeteria_staff),
    menus: SqlAlchemyMenuRepository = Depends(get_menu_repository),
) -> MenuResponse:
    menu = await CreateMenu(menus).execute(
        menu_date=body.menu_date,
        breakfast=body.breakfast,
        lunch=body.lunch,
        dinner=body.dinner,
        snack=body.snack,
    )
    return MenuResponse.from_entity(menu)


@router.get("", response_model=List[MenuResponse], summary="List menus, newest date first")
async def list_menus(
    from_date: Optional[date] = Query(default=None, alias="fromDate"),
    to_date: Optional[date] = Query(default=None, alias="toDate"),
    limit: int = Query(default=31, ge=1, le=366),
    offset: int = Query(default=0, ge=0),
    current_user: CurrentUser = Depends(get_current_user),
    menus: SqlAlchemyMenuRepository = Depends(get_menu_repository),
) -> List[MenuResponse]:
    found = await ListMenus(menus).execute(
        from_date=from_date, to_date=to_date, limit=limit, offset=offset
    )
    return [MenuResponse.from_entity(m) for m in found]


@router.get(
    "/date/{menu_date}",
    response_model=MenuResponse,
    responses={404: {"description": "No menu for this date", "model": ErrorResponse}},
    summary="Menu for a calendar day",
)
async def get_menu_by_date(
    menu_date: date,
    current_user: CurrentUser = Depends(get_current_user),
    menus: SqlAlchemyMenuRepository = Depends(get_menu_repository),
) -> MenuResponse:
    return MenuResponse.from_entity(await GetMenuByDate(menus).execute(menu_date))


@router.get(
    "/{menu_id}",
    response_model=MenuResponse,
    responses={404: {"description": "Menu not found", "model": ErrorResponse}},
    summary="Get one menu",
)
async def get_menu(
    menu_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
    menus: SqlAlchemyMenuRepository = Depends(get_menu_repository),
) -> MenuResponse:
    return MenuResponse.from_entity(await GetMenu(menus).execute(menu_id))


@router.put(
    "/{menu_id}",
    response_model=MenuResponse,
    responses={404: {"description": "Menu not found", "model": ErrorResponse}},
    summary="Change meals on a menu",
)
async def update_menu(
    menu_id: UUID,
    body: MenuUpdate,
    staff: CurrentUser = Depends(cafeteria_staff),
    menus: SqlAlchemyMenuRepository = Depends(get_menu_repository),
) -> MenuResponse:
    patch = body.model_dump(exclude_unset=True)
    return MenuResponse.from_entity(await UpdateMenu(menus).execute(menu_id, patch))


@router.post(
    "/{menu_id}/ratings",
    response_model=MenuRatingResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Rating out of range", "model": ErrorResponse},
        404: {"description": "Menu not found", "model": ErrorResponse},
        409: {"description": "Already rated", "model": ErrorResponse},
    },
    summary="Rate a menu from 1 to 5",
)
async def rate_menu(
    menu_id: UUID,
    body: MenuRatingCreate,
    current_user: CurrentUser = Depends(raters),
    menus: SqlAlchemyMenuRepository = Depends(get_menu_repository),
) -> MenuRatingResponse:
    rating = await RateMenu(menus).execute(
        menu_id=menu_id, user_id=current_user.id, rating=body.rating, comments=body.comments
    )
    return MenuRatingResponse.model_validate(rating)


@router.get("/{menu_id}/ratings", response_model=List[MenuRatingResponse], summary="Ratings for a menu")
async def list_ratings(
    menu_id: UUID,
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    staff: CurrentUser = Depends(cafeteria_staff),
    menus: SqlAlchemyMenuRepository = Depends(get_menu_repository),
) -> List[MenuRatingResponse]:
    found = await ListMenuRatings(menus).execute(menu_id, limit=limit, offset=offset)
    return [MenuRatingResponse.model_validate(r) for r in found]


@router.get(
    "/{menu_id}/ratings/summary",
    response_model=MenuRatingSummaryResponse,
    summary="Average and distribution of ratings",
)
async def rating_summary(
    menu_id: UUID,
    staff: CurrentUser = Depends(cafeteria_staff),
    menus: SqlAlchemyMenuRepository = Depends(get_menu_repository),
) -> MenuRatingSummaryResponse:
    return MenuRatingSummaryResponse.from_entity(await GetMenuRatingSummary(menus).execute(menu_id))
