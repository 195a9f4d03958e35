"""
CampusCare Backend — Cafeteria Menu Use Cases
===============================================

What:  Daily menus (one per date) and the 1–5 ratings students and
       teachers leave on them.
How:   Menu and MenuRating entities validate before the repository is
       called; the database's unique constraints reject a second menu for a
       date and a second rating by the same user.
"""

from datetime import date
from typing import Any, Dict, List, Optional
from uuid import UUID

from campuscare.domain.entities import MEAL_FIELDS, Menu, MenuRating, MenuRatingSummary
from campuscare.exceptions import ValidationError
from campuscare.repositories.ports import MenuRepository


class CreateMenu:
    def __init__(self, menus: MenuRepository):
        self.menus = menus

    async def execute(
        self,
        menu_date: date,
        breakfast: Optional[str] = None,
        lunch: Optional[str] = None,
        dinner: Optional[str] = None,
        snack: Optional[str] = None,
    ) -> Menu:
        menu = Menu(
            menu_date=menu_date,
            breakfast=breakfast,
            lunch=lunch,
            dinner=dinner,
            snack=snack,
        )
        return await self.menus.create(menu)


class UpdateMenu:
    """Partial update of the meal fields; the date of a menu never changes."""

    def __init__(self, menus: MenuRepository):
        self.menus = menus

    async def execute(self, menu_id: UUID, patch: Dict[str, Any]) -> Menu:
        unknown = set(patch) - set(MEAL_FIELDS)
        if unknown:
            field = sorted(unknown)[0]
            raise ValidationError(message=f"Field '{field}' cannot be updated", field=field)

        current = await self.menus.get_by_id(menu_id)
        merged = {meal: getattr(current, meal) for meal in MEAL_FIELDS}
        merged.update(patch)
        # Re-validate the merged menu so an update cannot empty every meal
        candidate = Menu(menu_date=current.menu_date, **merged)

        cleaned = {meal: getattr(candidate, meal) for meal in patch}
        return await self.menus.update(menu_id, cleaned)


class GetMenu:
    def __init__(self, menus: MenuRepository):
        self.menus = menus

    async def execute(self, menu_id: UUID) -> Menu:
        return await self.menus.get_by_id(menu_id)


class GetMenuByDate:
    def __init__(self, menus: MenuRepository):
        self.menus = menus

    async def execute(self, menu_date: date) -> Menu:
        return await self.menus.get_by_date(menu_date)


class ListMenus:
    def __init__(self, menus: MenuRepository):
        self.menus = menus

    async def execute(
        self,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
        limit: int = 31,
        offset: int = 0,
    ) -> List[Menu]:
        if from_date and to_date and from_date > to_date:
            raise ValidationError(message="fromDate must not be after toDate", field="fromDate")
        return await self.menus.list_menus(
            from_date=from_date, to_date=to_date, limit=limit, offset=offset
        )


class RateMenu:
    def __init__(self, menus: MenuRepository):
        self.menus = menus

    async def execute(
        self, menu_id: UUID, user_id: UUID, rating: int, comments: Optional[str] = None
    ) -> MenuRating:
        entry = MenuRating(menu_id=menu_id, user_id=user_id, rating=rating, comments=comments)
        return await self.menus.add_rating(entry)


class ListMenuRatings:
    def __init__(self, menus: MenuRepository):
        self.menus = menus

    async def execute(self, menu_id: UUID, limit: int = 100, offset: int = 0) -> List[MenuRating]:
        return await self.menus.list_ratings(menu_id, limit=limit, offset=offset)


class GetMenuRatingSummary:
    def __init__(self, menus: MenuRepository):
        self.menus = menus

    async def execute(self, menu_id: UUID) -> MenuRatingSummary:
        return await self.menus.rating_summary(menu_id)
