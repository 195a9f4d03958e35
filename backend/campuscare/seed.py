"""
CampusCare Backend — Reference Data Seeding
=============================================

What:  Inserts the fixed roles, the SLA policies, a starter set of
       facilities and (optionally) a bootstrap admin account.
How:   Every step checks for existing rows first, so running it twice is
       harmless. The Alembic initial migration inserts the same roles and
       SLA policies; this module covers databases created with create_all()
       (local SQLite, tests) and adds the admin.

Usage:
    python -m campuscare.seed                 # reference data + admin from env
    python -m campuscare.seed --no-facilities
"""

import argparse
import asyncio
import logging
from typing import Dict, Optional, Sequence, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from campuscare.config import Settings, settings as default_settings
from campuscare.database import Database
from campuscare.domain.entities import User
from campuscare.domain.roles import RoleName
from campuscare.domain.value_objects import Email, Password
from campuscare.models.facility import FacilityModel, SlaPolicyModel
from campuscare.models.user import Role
from campuscare.repositories.user_repository import SqlAlchemyUserRepository
from campuscare.services.auth_service import AuthService

logger = logging.getLogger(__name__)

# priority → hours staff have to respond
SLA_POLICIES: Dict[str, int] = {
    "low": 168,
    "medium": 72,
    "high": 24,
    "critical": 4,
}

DEFAULT_FACILITIES: Sequence[Tuple[str, Optional[str]]] = (
    ("Main Building", "Central campus"),
    ("Library", "North wing"),
    ("Science Labs", "Block B"),
    ("Cafeteria", "Ground floor, Block A"),
    ("Sports Hall", "East campus"),
    ("Restrooms", "All buildings"),
)


async def seed_roles(session: AsyncSession) -> int:
    existing = set((await session.execute(select(Role.name))).scalars().all())
    missing = [role.value for role in RoleName if role.value not in existing]
    session.add_all(Role(name=name) for name in missing)
    await session.flush()
    return len(missing)


async def seed_sla_policies(session: AsyncSession) -> int:
    existing = set((await session.execute(select(SlaPolicyModel.priority))).scalars().all())
    missing = {p: h for p, h in SLA_POLICIES.items() if p not in existing}
    session.add_all(SlaPolicyModel(priority=p, response_hours=h) for p, h in missing.items())
    await session.flush()
    return len(missing)


async def seed_facilities(session: AsyncSession) -> int:
    existing = set((await session.execute(select(FacilityModel.name))).scalars().all())
    missing = [(n, loc) for n, loc in DEFAULT_FACILITIES if n not in existing]
    session.add_all(FacilityModel(name=n, location=loc) for n, loc in missing)
    await session.flush()
    return len(missing)


async def ensure_admin(session: AsyncSession, config: Settings) -> Optional[User]:
    """Create the ADMIN_EMAIL account with the admin role, unless it exists."""
    if not config.admin_email or not config.admin_password:
        logger.info("ADMIN_EMAIL / ADMIN_PASSWORD not set; skipping admin account")
        return None

    users = SqlAlchemyUserRepository(session)
    existing = await users.get_by_email(config.admin_email)
    if existing is not None:
        logger.info("Admin account %s already exists", existing.email)
        return existing

    password = Password(config.admin_password, min_length=config.password_min_length)
    admin = await users.create(
        User(
            name=config.admin_name,
            email=Email(config.admin_email),
            password_hash=AuthService(config).hash_password(password.value),
            roles=frozenset({RoleName.ADMIN}),
        )
    )
    logger.info("Created admin account %s", admin.email)
    return admin


async def seed_reference_data(session: AsyncSession, with_facilities: bool = True) -> Dict[str, int]:
    counts = {
        "roles": await seed_roles(session),
        "sla_policies": await seed_sla_policies(session),
        "facilities": await seed_facilities(session) if with_facilities else 0,
    }
    return counts


async def run(config: Settings, with_facilities: bool = True, create_tables: bool = False) -> None:
    database = Database(config.database_url, config)
    try:
        await database.wait_until_ready(config.db_connect_attempts)
        if create_tables:
            await database.create_all()
        async with database.session() as session:
            counts = await seed_reference_data(session, with_facilities=with_facilities)
            await ensure_admin(session, config)
        logger.info("Seeded: %s", ", ".join(f"{k}={v}" for k, v in counts.items()))
    finally:
        await database.dispose()


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Seed CampusCare reference data")
    parser.add_argument("--no-facilities", action="store_true", help="skip the starter facilities")
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="create missing tables first (SQLite / local development)",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, default_settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    asyncio.run(
        run(default_settings, with_facilities=not args.no_facilities, create_tables=args.create_tables)
    )


if __name__ == "__main__":
    main()
