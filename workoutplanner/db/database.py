"""Database engine, session management and declarative base."""
import logging
from collections.abc import AsyncIterator

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from workoutplanner.config.settings import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()


def create_engine_for_url(url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine, applying pool sizing only where the backend pools."""
    if url.startswith("sqlite"):
        engine = create_async_engine(url, echo=echo, future=True)

        @event.listens_for(engine.sync_engine, "connect")
        def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    return create_async_engine(
        url,
        echo=echo,
        future=True,
        pool_size=20,
        max_overflow=20,
        pool_timeout=30,
        pool_recycle=300,
        pool_pre_ping=True,
    )


def create_session_maker(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


# Create primary engine
engine = create_engine_for_url(settings.database_url, echo=settings.sql_echo)

# Primary session maker
async_session_maker = create_session_maker(engine)


class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


async def get_db() -> AsyncIterator[AsyncSession]:
    """
    Dependency that provides one transaction per request.

    Commits when the handler returns normally and rolls back on any
    exception, so a failed operation never leaves a partial write behind.
    """
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def init_db(bind: AsyncEngine | None = None):
    """Create missing tables. Production schemas are managed by Alembic."""
    bind = bind or engine

    if str(bind.url).startswith("sqlite"):
        async with bind.connect() as conn:
            await conn.execute(text("PRAGMA journal_mode=WAL"))
            await conn.execute(text("PRAGMA busy_timeout=30000"))
            await conn.commit()

    # Import models so every table is registered on the metadata.
    import workoutplanner.models  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created/verified")


async def close_all_engines():
    """Dispose of the primary engine's connection pool."""
    await engine.dispose()
