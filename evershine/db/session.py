"""
Async engine and session helpers.

Sessions never expire loaded objects on commit, so price snapshots can
be serialised after the route commits.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from evershine.config import settings


def engine_options(database_url: str, echo: bool = False) -> Dict[str, Any]:
    """create_async_engine keyword arguments for a database URL.

    asyncpg runs without a prepared statement cache so it works behind
    transaction-mode poolers.
    """
    options: Dict[str, Any] = {"poolclass": NullPool, "echo": echo}
    if "+asyncpg" in database_url:
        options["connect_args"] = {"statement_cache_size": 0}
    return options


engine = create_async_engine(
    settings.database_url,
    **engine_options(settings.database_url, echo=not settings.is_production),
)

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session. Commits on success, rolls back on error."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


@asynccontextmanager
async def get_db_context() -> AsyncGenerator[AsyncSession, None]:
    """Same as get_db, for the lifespan hook and scheduler jobs."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
