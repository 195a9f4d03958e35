"""
CampusCare Backend — Database Engine & Session Management
===========================================================

What:  The `Database` handle owning the async engine and its connection pool,
       the declarative `Base`, and the per-request session dependency.
How:   create_app() builds one Database and stores it on `app.state.database`.
       Request handlers receive sessions through `get_db_session`, which
       commits on success and rolls back on any error.
When:  Engine is created with the app; the pool is disposed on shutdown.

Connection Pooling:
    pool_size + max_overflow bound the number of open connections.
    pool_timeout bounds how long a request waits for a free connection.
    pool_recycle replaces connections that have been open too long, and
    pool_pre_ping drops connections the server already closed.
    SQLite (used by the test suite) ignores the sizing arguments.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator, Optional

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    stop_after_attempt,
    wait_exponential_jitter,
)

from campuscare.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models (shared metadata for Alembic)."""
    pass


class Database:
    """
    Explicitly owned handle over one async engine and its session factory.

    Repositories never see the engine; they receive an AsyncSession opened
    from this handle for the duration of a single request.
    """

    def __init__(self, url: str, config: Optional[Settings] = None):
        self.url = url
        config = config or default_settings

        engine_kwargs = {"echo": config.log_level == "DEBUG"}
        if not url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=config.db_pool_size,
                max_overflow=config.db_max_overflow,
                pool_timeout=config.db_pool_timeout,
                pool_recycle=config.db_pool_recycle,
                pool_pre_ping=config.db_pool_pre_ping,
            )

        self.engine: AsyncEngine = create_async_engine(url, **engine_kwargs)

        # expire_on_commit=False: ORM rows stay readable after the request commits
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Yield a session, committing on success and rolling back on error.

        How it works:
            1. Creates a new session from the factory
            2. Yields it to the caller (route handler / use case)
            3. On success: commits the transaction
            4. On error: rolls back and re-raises
            5. Always: closes the session (returns connection to pool)
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    async def ping(self) -> None:
        """Run `SELECT 1`; raises whatever the driver raises when unreachable."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def wait_until_ready(self, attempts: int) -> None:
        """
        Block startup until the database answers, with exponential backoff.

        Only startup is retried. Request-time failures surface immediately.
        """
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(attempts),
            wait=wait_exponential_jitter(initial=1, max=10, jitter=1),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        ):
            with attempt:
                await self.ping()
        logger.info("Database reachable")

    async def create_all(self) -> None:
        """Create every table registered on Base.metadata (tests and local dev)."""
        # Model modules must be imported so their tables are registered
        import campuscare.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        """Close all pooled connections (application shutdown)."""
        await self.engine.dispose()


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    Example usage in a route:
        @router.get("/menus")
        async def list_menus(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session
