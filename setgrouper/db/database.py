"""
Cache database engine and sessions.

The card cache lives in one table. SQLite through aiosqlite is the default
store; any async SQLAlchemy URL works.
"""

from collections.abc import AsyncGenerator
from pathlib import Path

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from setgrouper.config import settings
from setgrouper.models.db import Base


def create_cache_engine(url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine for the cache database at url."""
    return create_async_engine(url, echo=echo, pool_pre_ping=True)


engine = create_cache_engine(settings.database_url, echo=settings.debug)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Dependency that provides a session for read-only checks."""
    async with async_session_factory() as session:
        yield session


def _ensure_sqlite_directory(target: AsyncEngine) -> None:
    # SQLite creates the file but not missing parent directories
    url = target.url
    if url.get_backend_name() != "sqlite" or not url.database or url.database == ":memory:":
        return
    Path(url.database).parent.mkdir(parents=True, exist_ok=True)


async def init_db(target: AsyncEngine | None = None) -> None:
    """
    Create the cache table if it does not exist.

    Called once at startup by the API and the command line job.

    Args:
        target: Engine to initialize; defaults to the configured engine
    """
    target = target or engine
    _ensure_sqlite_directory(target)
    async with target.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_db() -> None:
    """Close pooled connections of the configured engine."""
    await engine.dispose()
