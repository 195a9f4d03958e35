"""
CampusCare Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Environment variables are set before any campuscare import so the
       module-level `settings` singleton picks them up (cheap bcrypt cost,
       SQLite URL, distinct JWT secrets, relaxed rate limit).

Fixture Hierarchy:
    Unit tests (no database):
    ├── mock_db_session: AsyncMock standing in for AsyncSession
    ├── user_repo / report_repo / wellness_repo / menu_repo /
    │   notification_repo / facility_repo: AsyncMock(spec=<port>)
    ├── notifier: AsyncMock NotificationService
    └── make_user: builds domain User records

    API tests (temporary SQLite file per test):
    ├── test_app: create_app() on aiosqlite, tables created, reference data seeded
    ├── test_client: HTTPX AsyncClient over ASGITransport
    └── create_account: inserts a user with given roles, returns auth headers
"""

import os
import tempfile

# Override settings for testing BEFORE any campuscare imports
_TEST_DIR = tempfile.mkdtemp(prefix="campuscare_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DIR}/default.db"
os.environ["JWT_ACCESS_SECRET"] = "test-access-secret"
os.environ["JWT_REFRESH_SECRET"] = "test-refresh-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["RATE_LIMIT_REQUESTS"] = "100000"
os.environ["LOG_LEVEL"] = "WARNING"

from datetime import datetime, timezone  # noqa: E402
from typing import AsyncGenerator  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402
from uuid import uuid4  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from campuscare.config import Settings  # noqa: E402
from campuscare.domain.entities import User  # noqa: E402
from campuscare.domain.roles import RoleName  # noqa: E402
from campuscare.domain.value_objects import Email  # noqa: E402
from campuscare.main import create_app  # noqa: E402
from campuscare.repositories.ports import (  # noqa: E402
    FacilityRepository,
    MenuRepository,
    NotificationRepository,
    ReportRepository,
    UserRepository,
    WellnessRepository,
)
from campuscare.repositories.user_repository import SqlAlchemyUserRepository  # noqa: E402
from campuscare.seed import seed_reference_data  # noqa: E402
from campuscare.services.auth_service import auth_service  # noqa: E402
from campuscare.services.notification_service import NotificationService  # noqa: E402

DEFAULT_PASSWORD = "secret123"


# ══════════════════════════════════════════════════════════════════════════
# Unit-test fixtures (no database)
# ══════════════════════════════════════════════════════════════════════════


@pytest.fixture
def mock_db_session():
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def user_repo():
    return AsyncMock(spec=UserRepository)


@pytest.fixture
def facility_repo():
    return AsyncMock(spec=FacilityRepository)


@pytest.fixture
def report_repo():
    return AsyncMock(spec=ReportRepository)


@pytest.fixture
def wellness_repo():
    return AsyncMock(spec=WellnessRepository)


@pytest.fixture
def menu_repo():
    return AsyncMock(spec=MenuRepository)


@pytest.fixture
def notification_repo():
    return AsyncMock(spec=NotificationRepository)


@pytest.fixture
def notifier():
    return AsyncMock(spec=NotificationService)


@pytest.fixture
def make_user():
    """Factory for persisted-looking domain users (id and timestamps set)."""

    def _make(
        email: str = "student@campus.edu",
        roles=(RoleName.STUDENT,),
        password_hash: str = "",
        is_active: bool = True,
        deleted_at=None,
    ) -> User:
        now = datetime.now(timezone.utc)
        return User(
            id=uuid4(),
            name="Test User",
            email=Email(email),
            password_hash=password_hash or auth_service.hash_password(DEFAULT_PASSWORD),
            roles=frozenset(roles),
            is_active=is_active,
            created_at=now,
            updated_at=now,
            deleted_at=deleted_at,
        )

    return _make


# ══════════════════════════════════════════════════════════════════════════
# API fixtures (temporary SQLite database per test)
# ══════════════════════════════════════════════════════════════════════════


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(database_url=f"sqlite+aiosqlite:///{tmp_path / 'campuscare.db'}")


@pytest_asyncio.fixture
async def test_app(test_settings):
    """
    A fresh app on its own SQLite file with tables and reference data.

    ASGITransport does not run the lifespan, so the schema is created here.
    """
    app = create_app(test_settings)
    database = app.state.database
    await database.create_all()
    async with database.session() as session:
        await seed_reference_data(session)
    yield app
    await database.dispose()


@pytest_asyncio.fixture
async def test_client(test_app) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def create_account(test_app):
    """
    Insert a user directly (any role set) and return it with auth headers.

    Usage:
        admin = await create_account("admin@campus.edu", RoleName.ADMIN)
        await test_client.get("/api/users", headers=admin["headers"])
    """

    async def _create(email: str, *roles: RoleName, password: str = DEFAULT_PASSWORD, name: str = "Test User"):
        async with test_app.state.database.session() as session:
            user = await SqlAlchemyUserRepository(session).create(
                User(
                    name=name,
                    email=Email(email),
                    password_hash=auth_service.hash_password(password),
                    roles=frozenset(roles or (RoleName.STUDENT,)),
                )
            )
        return {
            "user": user,
            "headers": bearer(auth_service.create_access_token(user)),
        }

    return _create
