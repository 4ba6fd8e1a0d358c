"""
Pytest configuration and fixtures.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("IS_PRODUCTION", "true")

from decimal import Decimal
from types import SimpleNamespace

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from evershine.models import Agent, Base, Client, ConsultantLevel, Product


# Test database URL (use SQLite for tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def db_engine():
    """Create test database engine."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine):
    """Session factory bound to the test engine."""
    return async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest_asyncio.fixture
async def db_session(session_factory):
    """Create test database session."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def catalog(session_factory):
    """
    Seed agents, clients and products.

    - agent: 8% globally, 3% on Granite
    - plain_agent: 5%, no category rates
    - client_yellow: yellow tier (10%), served by agent
    - client_none: no tier
    """
    async with session_factory() as session:
        agent = Agent(
            name="Ravi",
            commission_rate=Decimal("8"),
            category_commissions={"Granite": "3"},
        )
        plain_agent = Agent(name="Meera", commission_rate=Decimal("5"))
        session.add_all([agent, plain_agent])
        await session.flush()

        client_yellow = Client(
            name="Anil",
            agent_id=agent.id,
            consultant_level=ConsultantLevel.YELLOW,
        )
        client_none = Client(name="Sunita", consultant_level=ConsultantLevel.NONE)
        session.add_all([client_yellow, client_none])

        marble = Product(name="Statuario Marble", base_price=Decimal("1000.00"), category="Marble")
        granite = Product(name="Black Galaxy Granite", base_price=Decimal("500.00"), category="Granite")
        onyx = Product(name="Honey Onyx", base_price=Decimal("999.99"), category="Onyx")
        retired = Product(
            name="Retired Slab",
            base_price=Decimal("10.00"),
            category="Marble",
            is_active=False,
        )
        session.add_all([marble, granite, onyx, retired])
        await session.commit()

        return SimpleNamespace(
            agent_id=agent.id,
            plain_agent_id=plain_agent.id,
            client_yellow_id=client_yellow.id,
            client_none_id=client_none.id,
            marble_id=marble.id,
            granite_id=granite.id,
            onyx_id=onyx.id,
            retired_id=retired.id,
        )


@pytest_asyncio.fixture
async def api_client(session_factory):
    """HTTP client against the app, with sessions from the test engine."""
    from evershine.db import get_db
    from evershine.main import app
    from evershine.services.rate_cache import RateCache

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.state.rate_cache = RateCache()

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
