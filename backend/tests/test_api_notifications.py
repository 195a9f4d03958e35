"""
CampusCare Backend — Notifications, Health & Rate Limit API Tests
===================================================================
"""

from unittest.mock import MagicMock
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from campuscare.config import Settings
from campuscare.domain.roles import RoleName
from campuscare.exceptions import DatabaseError
from campuscare.main import create_app
from campuscare.models.notification import NotificationModel
from campuscare.repositories.user_repository import SqlAlchemyUserRepository
from campuscare.services.notification_service import NotificationService


async def _notify(test_app, user_id, title="Hello", body="Welcome to CampusCare"):
    async with test_app.state.database.session() as session:
        return await NotificationService().notify(session, user_id, title, body)


class TestNotifications:
    @pytest.mark.asyncio
    async def test_list_and_mark_read(self, test_client, test_app, create_account):
        student = await create_account("student@campus.edu")
        assert await _notify(test_app, student["user"].id, title="First")
        assert await _notify(test_app, student["user"].id, title="Second")

        inbox = (await test_client.get("/api/notifications", headers=student["headers"])).json()
        assert len(inbox) == 2
        assert not any(n["isRead"] for n in inbox)

        marked = await test_client.patch(f"/api/notifications/{inbox[0]['id']}/read", headers=student["headers"])
        assert marked.status_code == 200
        assert marked.json()["isRead"] is True

        unread = await test_client.get("/api/notifications?unreadOnly=true", headers=student["headers"])
        assert [n["id"] for n in unread.json()] == [inbox[1]["id"]]

    @pytest.mark.asyncio
    async def test_mark_all_read(self, test_client, test_app, create_account):
        student = await create_account("student@campus.edu")
        for i in range(3):
            await _notify(test_app, student["user"].id, title=f"Note {i}")

        response = await test_client.post("/api/notifications/read-all", headers=student["headers"])
        assert response.json() == {"updated": 3}

        again = await test_client.post("/api/notifications/read-all", headers=student["headers"])
        assert again.json() == {"updated": 0}

    @pytest.mark.asyncio
    async def test_cannot_touch_someone_elses_notification(self, test_client, test_app, create_account):
        alice = await create_account("alice@campus.edu")
        bob = await create_account("bob@campus.edu")
        await _notify(test_app, alice["user"].id)
        notification_id = (await test_client.get("/api/notifications", headers=alice["headers"])).json()[0]["id"]

        response = await test_client.patch(f"/api/notifications/{notification_id}/read", headers=bob["headers"])
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_notify_role_reaches_every_holder(self, test_app, create_account):
        await create_account("fixer1@campus.edu", RoleName.MAINTENANCE)
        await create_account("fixer2@campus.edu", RoleName.MAINTENANCE)
        await create_account("student@campus.edu")

        async with test_app.state.database.session() as session:
            stored = await NotificationService().notify_role(session, RoleName.MAINTENANCE, "Heads up", "Test")
        assert stored == 2

    @pytest.mark.asyncio
    async def test_failed_recipient_lookup_stays_inside_savepoint(self, test_app, create_account, monkeypatch):
        student = await create_account("student@campus.edu")
        in_savepoint = []

        async def failing_lookup(repo, role):
            in_savepoint.append(repo.session.in_nested_transaction())
            raise DatabaseError(context={"resource": "user"})

        monkeypatch.setattr(SqlAlchemyUserRepository, "list_ids_with_role", failing_lookup)

        async with test_app.state.database.session() as session:
            stored = await NotificationService().notify_role(session, RoleName.MAINTENANCE, "Heads up", "Test")
            assert await NotificationService().notify(session, student["user"].id, "Still works", "Test")

        assert stored == 0
        assert in_savepoint == [True]
        async with test_app.state.database.session() as session:
            titles = (await session.execute(select(NotificationModel.title))).scalars().all()
        assert titles == ["Still works"]

    @pytest.mark.asyncio
    async def test_failed_notification_is_swallowed(self, mock_db_session):
        mock_db_session.begin_nested = MagicMock(side_effect=SQLAlchemyError("savepoint failed"))

        stored = await NotificationService().notify(mock_db_session, uuid4(), "Lost", "Nobody home")

        assert stored is False


class TestHealth:
    @pytest.mark.asyncio
    async def test_healthy(self, test_client):
        response = await test_client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "connected"
        assert data["uptime_seconds"] >= 0


@pytest_asyncio.fixture
async def limited_client(tmp_path):
    config = Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'limited.db'}",
        rate_limit_requests=10,
        rate_limit_window=60,
    )
    app = create_app(config)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    await app.state.database.dispose()


class TestRateLimit:
    @pytest.mark.asyncio
    async def test_eleventh_request_is_throttled(self, limited_client):
        statuses = [(await limited_client.get("/api/auth/me")).status_code for _ in range(10)]
        assert statuses == [401] * 10

        response = await limited_client.get("/api/auth/me")
        assert response.status_code == 429
        assert response.json()["error"] == "rate_limit_exceeded"
        assert int(response.headers["Retry-After"]) >= 1
        assert response.json()["request_id"]
        assert response.headers["X-Request-ID"] == response.json()["request_id"]

    @pytest.mark.asyncio
    async def test_throttled_response_echoes_client_request_id(self, limited_client):
        for _ in range(10):
            await limited_client.get("/api/auth/me")

        response = await limited_client.get("/api/auth/me", headers={"X-Request-ID": "trace-429"})

        assert response.status_code == 429
        assert response.json()["request_id"] == "trace-429"
        assert response.headers["X-Request-ID"] == "trace-429"

    @pytest.mark.asyncio
    async def test_health_is_never_throttled(self, limited_client):
        for _ in range(12):
            response = await limited_client.get("/health")
        assert response.status_code != 429
