"""
Foodbabes Backend: Database Lifecycle and Sessions
====================================================

What:  The `Database` object owning the async SQLAlchemy engine and session
       factory, the declarative `Base`, and the per-request session
       dependency.
How:   The application lifespan builds one `Database` from settings, calls
       connect() (and create_all() when DB_AUTO_CREATE is on), stores it on
       `app.state.database`, and disposes it on shutdown. Route handlers get
       a session through `Depends(get_db_session)`.
Who:   main.py (lifespan), route handlers, Alembic (Base.metadata), tests.

Connection Pooling:
    PostgreSQL: pool_size / max_overflow from settings, pre-ping, hourly
    recycle. SQLite: SQLAlchemy's default pool for the driver; sizing
    arguments are not passed.
"""

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

from foodbabes.config import Settings


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares one metadata object between the models, create_all() and Alembic.
    """
    pass


class Database:
    """
    Explicitly constructed handle on the document store.

    Lifecycle:
        db = Database.from_settings(settings)
        db.connect()                 # builds engine + session factory
        await db.create_all()        # optional, creates missing tables
        async with db.session() as s:
            ...
        await db.dispose()           # closes pooled connections

    Not connected until connect() is called; session() raises RuntimeError
    before that.
    """

    def __init__(
        self,
        url: str,
        pool_size: int = 20,
        max_overflow: int = 10,
        pool_pre_ping: bool = True,
        echo: bool = False,
    ):
        self.url = url
        self.pool_size = pool_size
        self.max_overflow = max_overflow
        self.pool_pre_ping = pool_pre_ping
        self.echo = echo
        self.engine: Optional[AsyncEngine] = None
        self.session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(
            url=settings.database_url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            echo=settings.log_level == "DEBUG",
        )

    @property
    def is_connected(self) -> bool:
        return self.engine is not None

    def connect(self) -> None:
        """Create the engine and session factory. Idempotent."""
        if self.engine is not None:
            return

        engine_kwargs = {"echo": self.echo, "pool_pre_ping": self.pool_pre_ping}
        if not self.url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=self.pool_size,
                max_overflow=self.max_overflow,
                pool_recycle=3600,
            )

        self.engine = create_async_engine(self.url, **engine_kwargs)
        # expire_on_commit=False: records stay readable after commit for
        # serialization outside the session
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def create_all(self) -> None:
        """Create every table registered on Base.metadata that is missing."""
        # Models must be imported so their tables are registered
        from foodbabes.models import comment, food, user  # noqa: F401

        engine = self._require_engine()
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_all(self) -> None:
        engine = self._require_engine()
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def ping(self) -> bool:
        """Run SELECT 1; True when the store answers."""
        engine = self._require_engine()
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Provide a session that commits on success and rolls back on error.

        Errors are re-raised so the global handlers can answer the request.
        """
        if self.session_factory is None:
            raise RuntimeError("Database.connect() must be called before opening sessions")

        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    async def dispose(self) -> None:
        """Close all pooled connections. Safe to call when not connected."""
        if self.engine is not None:
            await self.engine.dispose()
            self.engine = None
            self.session_factory = None

    def _require_engine(self) -> AsyncEngine:
        if self.engine is None:
            raise RuntimeError("Database.connect() must be called first")
        return self.engine


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    Reads the `Database` placed on app.state by the lifespan (or by a test
    fixture) so handlers never touch module-level connection state.

    Example usage in a route:
        @router.get("/foods")
        async def list_foods(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session
