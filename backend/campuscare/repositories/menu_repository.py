"""
CampusCare Backend — Menu Repository (SQLAlchemy adapter)
===========================================================

What:  Persists menus and their ratings.
How:   The unique index on menus.menu_date and the (menu_id, user_id) unique
       constraint on menu_ratings are surfaced as DuplicateError by the base
       class flush helper.
"""

from datetime import date
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import func, select

from campuscare.domain.entities import MEAL_FIELDS, Menu, MenuRating, MenuRatingSummary
from campuscare.exceptions import NotFoundError, ValidationError
from campuscare.models.menu import MenuModel, MenuRatingModel
from campuscare.repositories.base import SqlAlchemyRepository
from campuscare.repositories.ports import MenuRepository


def to_menu(row: MenuModel) -> Menu:
    return Menu(
        id=row.id,
        menu_date=row.menu_date,
        breakfast=row.breakfast,
        lunch=row.lunch,
        dinner=row.dinner,
        snack=row.snack,
        created_at=row.created_at,
    )


def to_rating(row: MenuRatingModel) -> MenuRating:
    return MenuRating(
        id=row.id,
        menu_id=row.menu_id,
        user_id=row.user_id,
        rating=row.rating,
        comments=row.comments,
        created_at=row.created_at,
    )


class SqlAlchemyMenuRepository(SqlAlchemyRepository, MenuRepository):

    async def _get_row(self, menu_id: UUID) -> MenuModel:
        result = await self._execute(select(MenuModel).where(MenuModel.id == menu_id), "menu")
        row = result.scalar_one_or_none()
        if row is None:
            raise NotFoundError(resource="menu", resource_id=str(menu_id))
        return row

    async def create(self, menu: Menu) -> Menu:
        row = MenuModel(
            menu_date=menu.menu_date,
            breakfast=menu.breakfast,
            lunch=menu.lunch,
            dinner=menu.dinner,
            snack=menu.snack,
        )
        self.session.add(row)
        await self._flush(
            "menu",
            unique_field="date",
            duplicate_message=f"A menu for {menu.menu_date.isoformat()} already exists",
        )
        return to_menu(row)

    async def get_by_id(self, menu_id: UUID) -> Menu:
        return to_menu(await self._get_row(menu_id))

    async def get_by_date(self, menu_date: date) -> Menu:
        result = await self._execute(select(MenuModel).where(MenuModel.menu_date == menu_date), "menu")
        row = result.scalar_one_or_none()
        if row is None:
            raise NotFoundError(resource="menu", resource_id=menu_date.isoformat())
        return to_menu(row)

    async def list_menus(
        self,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
        limit: int = 31,
        offset: int = 0,
    ) -> List[Menu]:
        query = select(MenuModel)
        if from_date is not None:
            query = query.where(MenuModel.menu_date >= from_date)
        if to_date is not None:
            query = query.where(MenuModel.menu_date <= to_date)
        query = query.order_by(MenuModel.menu_date.desc()).limit(limit).offset(offset)

        result = await self._execute(query, "menu")
        return [to_menu(row) for row in result.scalars().all()]

    async def update(self, menu_id: UUID, patch: Dict[str, Any]) -> Menu:
        row = await self._get_row(menu_id)
        for key, value in patch.items():
            if key not in MEAL_FIELDS:
                raise ValidationError(message=f"Field '{key}' cannot be updated", field=key)
            setattr(row, key, value)
        await self._flush("menu")
        return to_menu(row)

    async def add_rating(self, rating: MenuRating) -> MenuRating:
        await self._get_row(rating.menu_id)
        row = MenuRatingModel(
            menu_id=rating.menu_id,
            user_id=rating.user_id,
            rating=rating.rating,
            comments=rating.comments,
        )
        self.session.add(row)
        await self._flush(
            "menu rating",
            unique_field="menuId",
            duplicate_message="You have already rated this menu",
        )
        return to_rating(row)

    async def list_ratings(self, menu_id: UUID, limit: int = 100, offset: int = 0) -> List[MenuRating]:
        await self._get_row(menu_id)
        query = (
            select(MenuRatingModel)
            .where(MenuRatingModel.menu_id == menu_id)
            .order_by(MenuRatingModel.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self._execute(query, "menu rating")
        return [to_rating(row) for row in result.scalars().all()]

    async def rating_summary(self, menu_id: UUID) -> MenuRatingSummary:
        await self._get_row(menu_id)
        result = await self._execute(
            select(MenuRatingModel.rating, func.count(MenuRatingModel.id))
            .where(MenuRatingModel.menu_id == menu_id)
            .group_by(MenuRatingModel.rating),
            "menu rating",
        )
        distribution = {score: 0 for score in range(1, 6)}
        for score, count in result.all():
            distribution[score] = count

        total = sum(distribution.values())
        average = None
        if total:
            average = round(sum(score * n for score, n in distribution.items()) / total, 2)
        return MenuRatingSummary(
            menu_id=menu_id,
            rating_count=total,
            average_rating=average,
            distribution=distribution,
        )
