"""
CampusCare Backend — Auth API Tests
=====================================

What:  End-to-end tests for /api/auth and the bearer-token guard.
How:   HTTPX AsyncClient against the app on a temporary SQLite database.
"""

from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt
from sqlalchemy import func, select

from campuscare.config import settings
from campuscare.domain.roles import RoleName
from campuscare.models.user import UserModel

DEFAULT_PASSWORD = "secret123"


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


async def _register(client, email="jane@campus.edu", password=DEFAULT_PASSWORD, name="Jane Doe"):
    return await client.post(
        "/api/auth/register",
        json={"email": email, "password": password, "name": name},
    )


class TestRegister:
    @pytest.mark.asyncio
    async def test_register_creates_student(self, test_client):
        response = await _register(test_client, email="Jane@Campus.EDU")

        assert response.status_code == 201
        data = response.json()
        assert data["user"]["email"] == "jane@campus.edu"
        assert data["user"]["roles"] == ["student"]
        assert data["user"]["primaryRole"] == "student"
        assert data["user"]["dashboard"] == "student-home"
        assert data["tokenType"] == "bearer"
        assert data["accessToken"] and data["refreshToken"]
        assert "passwordHash" not in data["user"]

    @pytest.mark.asyncio
    async def test_duplicate_email_conflicts_without_new_row(self, test_client, test_app):
        await _register(test_client)
        response = await _register(test_client, email="JANE@campus.edu", name="Impostor")

        assert response.status_code == 409
        body = response.json()
        assert body["error"] == "conflict"
        assert body["details"]["fields"] == ["email"]

        async with test_app.state.database.session() as session:
            count = await session.scalar(
                select(func.count()).select_from(UserModel).where(UserModel.email == "jane@campus.edu")
            )
        assert count == 1

    @pytest.mark.asyncio
    async def test_short_password(self, test_client):
        response = await _register(test_client, password="123")
        assert response.status_code == 400
        assert response.json()["details"]["fields"] == ["password"]

    @pytest.mark.asyncio
    async def test_invalid_email(self, test_client):
        response = await _register(test_client, email="not-an-email")
        assert response.status_code == 400
        assert response.json()["details"]["fields"] == ["email"]

    @pytest.mark.asyncio
    async def test_missing_field(self, test_client):
        response = await test_client.post("/api/auth/register", json={"email": "a@campus.edu"})
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert set(body["details"]["fields"]) == {"password", "name"}


class TestLogin:
    @pytest.mark.asyncio
    async def test_login_then_protected_call(self, test_client):
        await _register(test_client)
        login = await test_client.post(
            "/api/auth/login",
            json={"email": "jane@campus.edu", "password": DEFAULT_PASSWORD},
        )
        assert login.status_code == 200

        me = await test_client.get("/api/auth/me", headers=bearer(login.json()["accessToken"]))
        assert me.status_code == 200
        assert me.json()["email"] == "jane@campus.edu"

    @pytest.mark.asyncio
    async def test_wrong_password(self, test_client):
        await _register(test_client)
        response = await test_client.post(
            "/api/auth/login",
            json={"email": "jane@campus.edu", "password": "not-the-password"},
        )
        assert response.status_code == 401
        assert response.json()["error"] == "auth_error"

    @pytest.mark.asyncio
    async def test_unknown_email_looks_the_same(self, test_client):
        response = await test_client.post(
            "/api/auth/login",
            json={"email": "ghost@campus.edu", "password": DEFAULT_PASSWORD},
        )
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid email or password"

    @pytest.mark.asyncio
    async def test_refresh_rotates_tokens(self, test_client):
        registered = (await _register(test_client)).json()
        response = await test_client.post(
            "/api/auth/refresh",
            json={"refreshToken": registered["refreshToken"]},
        )
        assert response.status_code == 200
        me = await test_client.get("/api/auth/me", headers=bearer(response.json()["accessToken"]))
        assert me.status_code == 200

    @pytest.mark.asyncio
    async def test_access_token_is_not_a_refresh_token(self, test_client):
        registered = (await _register(test_client)).json()
        response = await test_client.post(
            "/api/auth/refresh",
            json={"refreshToken": registered["accessToken"]},
        )
        assert response.status_code == 401


class TestBearerGuard:
    @pytest.mark.asyncio
    async def test_missing_token(self, test_client):
        response = await test_client.get("/api/auth/me")
        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"
        assert response.json()["request_id"]

    @pytest.mark.asyncio
    async def test_malformed_token(self, test_client):
        response = await test_client.get("/api/auth/me", headers=bearer("garbage.token.value"))
        assert response.status_code == 401
        assert response.json()["error"] == "auth_error"

    @pytest.mark.asyncio
    async def test_expired_token(self, test_client, create_account):
        account = await create_account("late@campus.edu")
        expired = jwt.encode(
            {
                "sub": str(account["user"].id),
                "type": "access",
                "roles": ["student"],
                "exp": datetime.now(timezone.utc) - timedelta(minutes=5),
            },
            settings.jwt_access_secret,
            algorithm=settings.jwt_algorithm,
        )
        response = await test_client.get("/api/auth/me", headers=bearer(expired))
        assert response.status_code == 401
        assert "expired" in response.json()["message"]

    @pytest.mark.asyncio
    async def test_deleted_account_token_rejected(self, test_client, create_account):
        admin = await create_account("admin@campus.edu", RoleName.ADMIN)
        student = await create_account("gone@campus.edu")

        deleted = await test_client.delete(f"/api/users/{student['user'].id}", headers=admin["headers"])
        assert deleted.status_code == 204

        response = await test_client.get("/api/auth/me", headers=student["headers"])
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, test_client):
        response = await test_client.get("/api/auth/me", headers={"X-Request-ID": "trace-123"})
        assert response.headers["X-Request-ID"] == "trace-123"
        assert response.json()["request_id"] == "trace-123"
