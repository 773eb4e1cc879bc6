"""
Product API — Database Handle & Session Management
===================================================

What:  The `Database` handle (async engine + session factory), the declarative
       `Base`, and the per-request session dependency.
How:   One `Database` is constructed at application creation and stored on
       `app.state.database`. The lifespan opens it (`connect`) before the
       server accepts traffic and disposes it on shutdown. Route handlers get
       a session from it through `get_db_session`.
Who:   main.py (construction, lifecycle), routes (sessions), tests (a
       temporary SQLite handle).

Connection Pooling:
    pool_size / max_overflow / pre_ping come from settings and apply to server
    databases (PostgreSQL). SQLite URLs use SQLAlchemy's default pool.
"""

import logging
from typing import Any, AsyncGenerator, Dict

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from product_api.config import Settings

logger = logging.getLogger(__name__)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object used by `Database.connect` (table
    creation) and by Alembic (autogenerate).
    """
    pass


class Database:
    """
    Explicit handle over the async engine and its session factory.

    Lifecycle:
        1. Constructed with a URL (no I/O happens here)
        2. connect(): SELECT 1 round trip, then optional table creation
        3. session_factory(): one AsyncSession per request
        4. dispose(): closes every pooled connection
    """

    def __init__(
        self,
        url: str,
        *,
        pool_size: int = 10,
        max_overflow: int = 10,
        pool_pre_ping: bool = True,
        create_tables: bool = True,
        echo: bool = False,
    ):
        self.url = url
        self.create_tables = create_tables

        engine_options: Dict[str, Any] = {"echo": echo}
        if not url.startswith("sqlite"):
            engine_options.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_pre_ping=pool_pre_ping,
                pool_recycle=3600,  # Recycle after 1 hour
            )

        self.engine: AsyncEngine = create_async_engine(url, **engine_options)

        # expire_on_commit=False: response models are built from ORM objects
        # after the flush, and must not trigger lazy loads after commit.
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(
            settings.database_url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            create_tables=settings.db_create_tables,
            echo=settings.log_level == "DEBUG",
        )

    @property
    def safe_url(self) -> str:
        """URL with the password masked, for log lines."""
        return self.engine.url.render_as_string(hide_password=True)

    async def connect(self) -> None:
        """
        Open the database: verify connectivity, then create missing tables.

        Raises whatever the driver raises when the server is unreachable or
        the credentials are wrong. The lifespan treats that as fatal.
        """
        async with self.engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
            if self.create_tables:
                await conn.run_sync(Base.metadata.create_all)
        logger.info("Database connected: %s", self.safe_url)

    async def ping(self) -> bool:
        """Lightweight connectivity check used by the readiness probe."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning("Database ping failed: %s", str(e))
            return False

    async def dispose(self) -> None:
        """Close all connections in the pool (application shutdown)."""
        await self.engine.dispose()
        logger.info("Database connections closed")


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Takes the Database handle attached to the application
        2. Yields a fresh session to the route handler
        3. On success: commits the transaction
        4. On error: rolls back, then re-raises for the error translator
        5. Always: closes the session (returns connection to pool)
    """
    database: Database = request.app.state.database
    async with database.session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
