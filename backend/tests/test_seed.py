"""
CampusCare Backend — Seeding Tests
====================================

What:  Reference data and the bootstrap admin account.
How:   Runs against the per-test SQLite app; every step must be safe to
       repeat.
"""

import pytest
from sqlalchemy import func, select

from campuscare.database import Database
from campuscare.domain.roles import RoleName
from campuscare.models.facility import FacilityModel, SlaPolicyModel
from campuscare.models.user import Role, UserModel
from campuscare.repositories.user_repository import SqlAlchemyUserRepository
from campuscare.seed import SLA_POLICIES, ensure_admin, run, seed_reference_data
from campuscare.services.auth_service import AuthService


@pytest.fixture
def admin_settings(test_settings):
    return test_settings.model_copy(
        update={"admin_email": "Root@Campus.edu", "admin_password": "changeme1", "admin_name": "Root"}
    )


async def _count(session, model) -> int:
    return await session.scalar(select(func.count()).select_from(model))


class TestReferenceData:
    @pytest.mark.asyncio
    async def test_second_run_inserts_nothing(self, test_app):
        async with test_app.state.database.session() as session:
            counts = await seed_reference_data(session)
            assert counts == {"roles": 0, "sla_policies": 0, "facilities": 0}
            assert await _count(session, Role) == len(RoleName)
            assert await _count(session, SlaPolicyModel) == len(SLA_POLICIES)

    @pytest.mark.asyncio
    async def test_facilities_can_be_skipped(self, test_settings):
        database = Database(test_settings.database_url, test_settings)
        await database.create_all()
        try:
            async with database.session() as session:
                counts = await seed_reference_data(session, with_facilities=False)
                assert counts["roles"] == len(RoleName)
                assert counts["facilities"] == 0
                assert await _count(session, FacilityModel) == 0
        finally:
            await database.dispose()


class TestEnsureAdmin:
    @pytest.mark.asyncio
    async def test_creates_admin(self, test_app, admin_settings):
        async with test_app.state.database.session() as session:
            admin = await ensure_admin(session, admin_settings)

        assert admin.email.value == "root@campus.edu"
        assert admin.roles == frozenset({RoleName.ADMIN})
        assert AuthService(admin_settings).verify_password("changeme1", admin.password_hash)

    @pytest.mark.asyncio
    async def test_second_call_returns_existing_account(self, test_app, admin_settings):
        async with test_app.state.database.session() as session:
            first = await ensure_admin(session, admin_settings)
        async with test_app.state.database.session() as session:
            second = await ensure_admin(session, admin_settings)
            assert await _count(session, UserModel) == 1

        assert second.id == first.id

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "overrides",
        [{"admin_email": ""}, {"admin_password": ""}],
    )
    async def test_skipped_without_credentials(self, test_app, admin_settings, overrides):
        config = admin_settings.model_copy(update=overrides)

        async with test_app.state.database.session() as session:
            assert await ensure_admin(session, config) is None
            assert await _count(session, UserModel) == 0


class TestRun:
    @pytest.mark.asyncio
    async def test_fresh_database(self, admin_settings):
        await run(admin_settings, create_tables=True)
        await run(admin_settings)

        database = Database(admin_settings.database_url, admin_settings)
        try:
            async with database.session() as session:
                admin = await SqlAlchemyUserRepository(session).get_by_email("root@campus.edu")
                assert admin is not None
                assert RoleName.ADMIN in admin.roles
                assert await _count(session, UserModel) == 1
                assert await _count(session, Role) == len(RoleName)
        finally:
            await database.dispose()
