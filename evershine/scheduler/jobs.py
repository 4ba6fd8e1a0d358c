"""
Background job definitions using APScheduler.

Jobs include:
- Rate cache sweep (drops expired agent/client/consultant level entries)
"""

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from evershine.services.rate_cache import RateCache

logger = logging.getLogger(__name__)


def rate_cache_sweep_job(cache: RateCache) -> int:
    """Remove expired rate cache entries."""
    removed = cache.sweep()
    if removed:
        logger.info(f"Rate cache sweep: removed {removed} expired entries")
    return removed


def setup_scheduler(scheduler: AsyncIOScheduler, cache: RateCache, interval_seconds: int) -> AsyncIOScheduler:
    """
    Configure and add all scheduled jobs.

    Called during application startup.
    """
    scheduler.add_job(
        rate_cache_sweep_job,
        trigger=IntervalTrigger(seconds=interval_seconds),
        args=[cache],
        id="rate_cache_sweep",
        name="Sweep expired rate cache entries",
        replace_existing=True,
    )

    logger.info("Scheduler configured with jobs")
    return scheduler
