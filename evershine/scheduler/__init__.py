"""Background jobs."""

from evershine.scheduler.jobs import rate_cache_sweep_job, setup_scheduler

__all__ = ["rate_cache_sweep_job", "setup_scheduler"]
