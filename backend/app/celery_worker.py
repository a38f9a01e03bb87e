"""Celery worker and beat schedule for GitHub sync jobs.

Worker:  celery -A app.celery_worker worker --loglevel=info --concurrency=2
Beat:    celery -A app.celery_worker beat --loglevel=info
"""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from typing import Any

from celery import Celery
from celery.schedules import crontab

from app.config import get_settings
from app.logging_config import setup_logging

settings = get_settings()

celery_app = Celery(
    "spb",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_time_limit=3600,
    task_soft_time_limit=3300,
    worker_prefetch_multiplier=1,
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    task_default_queue="sync",
    result_expires=86400,
)

celery_app.conf.beat_schedule = {
    "github-full-sync": {
        "task": "app.celery_worker.run_full_sync",
        "schedule": crontab(hour=2, minute=0),
    },
    "github-incremental-sync": {
        "task": "app.celery_worker.run_incremental_sync",
        "schedule": crontab(minute=30),
    },
}


def run_async(coro: Coroutine[Any, Any, Any]) -> Any:
    """Run a coroutine to completion from a synchronous Celery task."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


async def _run_job(mode: str) -> dict[str, Any]:
    from db.session import close_db, init_db
    from services.sync_job import GitHubSyncJob

    setup_logging()
    await init_db()
    try:
        job = GitHubSyncJob()
        report = await (job.run_sync() if mode == "full" else job.run_incremental_sync())
        return report.to_dict()
    finally:
        await close_db()


@celery_app.task(name="app.celery_worker.run_full_sync")
def run_full_sync() -> dict:
    """Full GitHub sync and skill analysis of every stale account."""
    return run_async(_run_job("full"))


@celery_app.task(name="app.celery_worker.run_incremental_sync")
def run_incremental_sync() -> dict:
    """Repository-only refresh of recently active accounts."""
    return run_async(_run_job("incremental"))
