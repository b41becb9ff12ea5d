"""
Cleanup Scheduler Service

Manages scheduled deletion of stored images older than ASSET_TTL_DAYS.
Uses APScheduler to sweep whichever asset store is active.
"""

import logging
from typing import Optional, Set

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from portfolio.config import settings
from portfolio.models import SweepResult

from .store_factory import get_asset_store, get_project_repository

logger = logging.getLogger(__name__)

scheduler = AsyncIOScheduler()

JOB_ID = "sweep_expired_assets"


async def sweep_expired_assets(keep: Optional[Set[str]] = None) -> SweepResult:
    """
    Delete stored images older than the configured TTL.

    Images still referenced by a project are never swept; ``keep`` defaults
    to every identifier the project documents reference.

    Returns:
        SweepResult: Number of deleted images and per-image errors
    """
    store = get_asset_store()
    if keep is None:
        keep = get_project_repository().referenced_identifiers()
    logger.info(
        f"Sweeping {store.store_name} store for images older than "
        f"{settings.ASSET_TTL_DAYS} days, keeping {len(keep)} referenced"
    )
    result = await store.sweep_older_than(settings.ASSET_TTL_DAYS, keep=keep)

    logger.info(
        f"Cleanup completed: {result.deletedCount} images deleted, "
        f"{len(result.errors)} errors"
    )
    return result


def start_cleanup_scheduler():
    """
    Start the cleanup scheduler.

    Adds the sweep job to APScheduler and starts the scheduler.
    Safe to call multiple times - will not add duplicate jobs.
    """
    if scheduler.running:
        logger.debug("Scheduler already running")
        return

    if not scheduler.get_job(JOB_ID):
        scheduler.add_job(
            sweep_expired_assets,
            "interval",
            hours=settings.CLEANUP_INTERVAL_HOURS,
            id=JOB_ID,
            name="Sweep expired images",
            replace_existing=True,
        )
        logger.info(
            f"Scheduled sweep job: every {settings.CLEANUP_INTERVAL_HOURS} hour(s), "
            f"TTL: {settings.ASSET_TTL_DAYS} days"
        )

    scheduler.start()
    logger.info("Cleanup scheduler started")


def stop_cleanup_scheduler():
    """Stop the cleanup scheduler gracefully."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Cleanup scheduler stopped")


def get_scheduler_status() -> dict:
    """
    Get current scheduler status for health checks.

    Returns:
        dict: Scheduler status including running state and job info
    """
    job = scheduler.get_job(JOB_ID)
    return {
        "running": scheduler.running,
        "job_scheduled": job is not None,
        "next_run": str(job.next_run_time) if job else None,
        "interval_hours": settings.CLEANUP_INTERVAL_HOURS,
        "ttl_days": settings.ASSET_TTL_DAYS,
    }
