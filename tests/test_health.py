"""
Health check endpoint tests.
"""

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.pool import NullPool

from evershine.db import engine_options, get_db


@pytest.mark.asyncio
async def test_health_endpoint(api_client):
    resp = await api_client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "healthy", "service": "evershine"}


@pytest.mark.asyncio
async def test_readiness_reports_rate_cache(api_client, catalog):
    await api_client.get(
        f"/api/products/{catalog.marble_id}/price",
        params={"agent_id": catalog.agent_id},
    )

    resp = await api_client.get("/api/health/ready")
    data = resp.json()

    assert resp.status_code == 200
    assert data["status"] == "ready"
    assert data["database"] == "connected"
    # agent record plus the default consultant level, both first lookups
    assert data["rate_cache"]["entries"] == 2
    assert data["rate_cache"]["misses"] == 2
    assert data["rate_cache"]["hits"] == 0
    assert data["rate_cache"]["ttl_seconds"] == 300


class BrokenSession:
    async def execute(self, *args, **kwargs):
        raise OperationalError("SELECT 1", {}, ConnectionRefusedError("connection refused"))


@pytest.mark.asyncio
async def test_readiness_unavailable_database(api_client):
    from evershine.main import app

    async def broken_db():
        yield BrokenSession()

    app.dependency_overrides[get_db] = broken_db

    resp = await api_client.get("/api/health/ready")

    assert resp.status_code == 503
    assert resp.json() == {"status": "not_ready", "database": "unavailable"}


@pytest.mark.asyncio
async def test_liveness(api_client):
    resp = await api_client.get("/api/health/live")
    assert resp.json() == {"status": "alive"}


def test_engine_options_per_driver():
    asyncpg = engine_options("postgresql+asyncpg://db/evershine")
    sqlite = engine_options("sqlite+aiosqlite:///:memory:", echo=True)

    assert asyncpg["connect_args"] == {"statement_cache_size": 0}
    assert asyncpg["poolclass"] is NullPool
    assert "connect_args" not in sqlite
    assert sqlite["echo"] is True
