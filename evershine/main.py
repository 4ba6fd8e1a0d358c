"""
Evershine - Commission-aware pricing service

Main FastAPI application with:
- Priced product catalog (agent + consultant level commissions)
- Cart and wishlist price snapshots
- Orders with frozen prices
- Admin commission settings
"""

import logging
from contextlib import asynccontextmanager

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from evershine.api import api_router
from evershine.config import settings
from evershine.db import get_db_context
from evershine.errors import InvalidArgument, NotFound, PricingError, UpstreamUnavailable
from evershine.models import SystemSetting
from evershine.repositories import DEFAULT_COMMISSION_RATE_KEY, STANDARD_COMMISSION_RATE_KEY
from evershine.scheduler import setup_scheduler
from evershine.services.rate_cache import RateCache

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup:
    - Initializes default commission settings
    - Starts the rate cache sweep job

    Shutdown:
    - Stops the scheduler
    """
    logger.info("Starting Evershine...")

    async with get_db_context() as db:
        default_settings = {
            DEFAULT_COMMISSION_RATE_KEY: str(settings.default_commission_rate),
            STANDARD_COMMISSION_RATE_KEY: None,
        }

        for key, value in default_settings.items():
            existing = await db.get(SystemSetting, key)
            if not existing:
                db.add(SystemSetting(key=key, value={"v": value}))
                logger.info(f"Created default setting: {key}")

        await db.commit()

    scheduler = setup_scheduler(
        AsyncIOScheduler(),
        app.state.rate_cache,
        settings.rate_cache_sweep_seconds,
    )
    scheduler.start()

    logger.info("Evershine started successfully!")

    yield

    # Shutdown
    logger.info("Shutting down Evershine...")
    scheduler.shutdown(wait=False)
    app.state.rate_cache.clear()


# Create FastAPI application
app = FastAPI(
    title="Evershine",
    description="Commission-aware pricing service",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if not settings.is_production else None,
    redoc_url="/redoc" if not settings.is_production else None,
)

# Shared by all requests; see evershine.api.deps.get_rate_cache
app.state.rate_cache = RateCache(ttl=settings.rate_cache_ttl_seconds)


@app.exception_handler(PricingError)
async def pricing_error_handler(request: Request, exc: PricingError):
    """Map pricing errors to HTTP responses."""
    if isinstance(exc, InvalidArgument):
        status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    elif isinstance(exc, NotFound):
        status_code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, UpstreamUnavailable):
        status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "retryable": exc.retryable},
    )


# Include routers
app.include_router(api_router)  # /api/* endpoints


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "evershine.main:app",
        host="0.0.0.0",
        port=8000,
        reload=not settings.is_production,
    )
