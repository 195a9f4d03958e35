"""
CampusCare Backend — Cafeteria Menu API Tests
===============================================

What:  Menu publishing (cafeteria staff), lookups by date and range, and
       the 1–5 ratings students and teachers leave.
"""

import pytest
from sqlalchemy import func, select

from campuscare.domain.roles import RoleName
from campuscare.models.menu import MenuRatingModel


@pytest.fixture
def menu_body():
    return {"date": "2024-05-01", "breakfast": "Oatmeal", "lunch": "Pasta"}


class TestPublishMenus:
    @pytest.mark.asyncio
    async def test_cafeteria_publishes_menu(self, test_client, create_account, menu_body):
        cook = await create_account("cook@campus.edu", RoleName.CAFETERIA)

        response = await test_client.post("/api/menus", json=menu_body, headers=cook["headers"])

        assert response.status_code == 201
        data = response.json()
        assert data["date"] == "2024-05-01"
        assert data["lunch"] == "Pasta"
        assert data["dinner"] is None

    @pytest.mark.asyncio
    async def test_second_menu_same_date_conflicts(self, test_client, create_account, menu_body):
        cook = await create_account("cook@campus.edu", RoleName.CAFETERIA)
        await test_client.post("/api/menus", json=menu_body, headers=cook["headers"])

        response = await test_client.post(
            "/api/menus",
            json={"date": "2024-05-01", "dinner": "Curry"},
            headers=cook["headers"],
        )

        assert response.status_code == 409
        assert response.json()["details"]["fields"] == ["date"]

    @pytest.mark.asyncio
    async def test_menu_without_meals(self, test_client, create_account):
        cook = await create_account("cook@campus.edu", RoleName.CAFETERIA)
        response = await test_client.post("/api/menus", json={"date": "2024-05-02"}, headers=cook["headers"])
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_students_cannot_publish(self, test_client, create_account, menu_body):
        student = await create_account("student@campus.edu")
        response = await test_client.post("/api/menus", json=menu_body, headers=student["headers"])
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_partial_update(self, test_client, create_account, menu_body):
        cook = await create_account("cook@campus.edu", RoleName.CAFETERIA)
        menu_id = (await test_client.post("/api/menus", json=menu_body, headers=cook["headers"])).json()["id"]

        response = await test_client.put(f"/api/menus/{menu_id}", json={"dinner": "Soup"}, headers=cook["headers"])

        assert response.status_code == 200
        data = response.json()
        assert data["dinner"] == "Soup"
        assert data["lunch"] == "Pasta"


class TestReadMenus:
    @pytest.mark.asyncio
    async def test_lookup_by_date_and_range(self, test_client, create_account):
        cook = await create_account("cook@campus.edu", RoleName.CAFETERIA)
        student = await create_account("student@campus.edu")
        for day in ("2024-05-01", "2024-05-02", "2024-05-03"):
            await test_client.post("/api/menus", json={"date": day, "lunch": f"Lunch {day}"}, headers=cook["headers"])

        by_date = await test_client.get("/api/menus/date/2024-05-02", headers=student["headers"])
        assert by_date.status_code == 200
        assert by_date.json()["lunch"] == "Lunch 2024-05-02"

        ranged = await test_client.get(
            "/api/menus",
            params={"fromDate": "2024-05-02", "toDate": "2024-05-03"},
            headers=student["headers"],
        )
        assert [m["date"] for m in ranged.json()] == ["2024-05-03", "2024-05-02"]

    @pytest.mark.asyncio
    async def test_missing_date(self, test_client, create_account):
        student = await create_account("student@campus.edu")
        response = await test_client.get("/api/menus/date/2030-01-01", headers=student["headers"])
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_inverted_range(self, test_client, create_account):
        student = await create_account("student@campus.edu")
        response = await test_client.get(
            "/api/menus",
            params={"fromDate": "2024-06-01", "toDate": "2024-05-01"},
            headers=student["headers"],
        )
        assert response.status_code == 400
        assert response.json()["details"]["fields"] == ["fromDate"]


class TestRatings:
    @pytest.mark.asyncio
    async def test_rate_and_summarize(self, test_client, create_account, menu_body):
        cook = await create_account("cook@campus.edu", RoleName.CAFETERIA)
        alice = await create_account("alice@campus.edu")
        bob = await create_account("bob@campus.edu", RoleName.TEACHER)
        menu_id = (await test_client.post("/api/menus", json=menu_body, headers=cook["headers"])).json()["id"]

        first = await test_client.post(
            f"/api/menus/{menu_id}/ratings",
            json={"rating": 4, "comments": "Tasty"},
            headers=alice["headers"],
        )
        assert first.status_code == 201
        assert first.json()["menuId"] == menu_id
        await test_client.post(f"/api/menus/{menu_id}/ratings", json={"rating": 5}, headers=bob["headers"])

        ratings = await test_client.get(f"/api/menus/{menu_id}/ratings", headers=cook["headers"])
        assert sorted(r["rating"] for r in ratings.json()) == [4, 5]

        summary = (await test_client.get(f"/api/menus/{menu_id}/ratings/summary", headers=cook["headers"])).json()
        assert summary["ratingCount"] == 2
        assert summary["averageRating"] == 4.5
        assert summary["distribution"] == {"1": 0, "2": 0, "3": 0, "4": 1, "5": 1}

    @pytest.mark.asyncio
    async def test_rating_out_of_range_not_stored(self, test_client, test_app, create_account, menu_body):
        cook = await create_account("cook@campus.edu", RoleName.CAFETERIA)
        student = await create_account("student@campus.edu")
        menu_id = (await test_client.post("/api/menus", json=menu_body, headers=cook["headers"])).json()["id"]

        response = await test_client.post(f"/api/menus/{menu_id}/ratings", json={"rating": 6}, headers=student["headers"])

        assert response.status_code == 400
        assert response.json()["details"]["fields"] == ["rating"]
        async with test_app.state.database.session() as session:
            assert await session.scalar(select(func.count()).select_from(MenuRatingModel)) == 0

    @pytest.mark.asyncio
    async def test_one_rating_per_user(self, test_client, create_account, menu_body):
        cook = await create_account("cook@campus.edu", RoleName.CAFETERIA)
        student = await create_account("student@campus.edu")
        menu_id = (await test_client.post("/api/menus", json=menu_body, headers=cook["headers"])).json()["id"]

        await test_client.post(f"/api/menus/{menu_id}/ratings", json={"rating": 3}, headers=student["headers"])
        again = await test_client.post(f"/api/menus/{menu_id}/ratings", json={"rating": 5}, headers=student["headers"])

        assert again.status_code == 409
        assert again.json()["details"]["fields"] == ["menuId"]

    @pytest.mark.asyncio
    async def test_rating_unknown_menu(self, test_client, create_account):
        student = await create_account("student@campus.edu")
        response = await test_client.post(
            "/api/menus/00000000-0000-0000-0000-000000000000/ratings",
            json={"rating": 3},
            headers=student["headers"],
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_cafeteria_staff_cannot_rate(self, test_client, create_account, menu_body):
        cook = await create_account("cook@campus.edu", RoleName.CAFETERIA)
        menu_id = (await test_client.post("/api/menus", json=menu_body, headers=cook["headers"])).json()["id"]
        response = await test_client.post(f"/api/menus/{menu_id}/ratings", json={"rating": 3}, headers=cook["headers"])
        assert response.status_code == 403
