"""
Health check endpoints.

/health/ready also reports the state of the shared rate cache, which is
the only in-process state the pricing engine keeps.
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from evershine.api.deps import get_rate_cache
from evershine.db import get_db
from evershine.services.rate_cache import RateCache

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("")
async def health_check():
    return {"status": "healthy", "service": "evershine"}


@router.get("/ready")
async def readiness_check(
    db: AsyncSession = Depends(get_db),
    cache: RateCache = Depends(get_rate_cache),
):
    """
    Ready when the database answers.

    Responds 503 otherwise so the instance is taken out of rotation;
    pricing cannot run without agent and client records.
    """
    try:
        await db.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        logger.warning(f"Readiness check failed: {e}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "database": "unavailable"},
        )

    return {
        "status": "ready",
        "database": "connected",
        "rate_cache": {
            "entries": len(cache),
            "hits": cache.hits,
            "misses": cache.misses,
            "ttl_seconds": cache.ttl,
        },
    }


@router.get("/live")
async def liveness_check():
    return {"status": "alive"}
