"""APScheduler setup — fires the scheduled keyword monitor run on a fixed interval."""

import logging
import traceback

from apscheduler.events import EVENT_JOB_ERROR, EVENT_JOB_EXECUTED, EVENT_JOB_MISSED
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from brand_monitor.config import AppConfig

logger = logging.getLogger("brand_monitor.scheduler")

MONITOR_JOB_ID = "keyword_monitor"

_scheduler: BackgroundScheduler | None = None


def _job_listener(event):
    """Log scheduler job events for debugging."""
    if event.exception:
        logger.error("Scheduled job %s FAILED: %s", event.job_id, event.exception)
        logger.error("Traceback: %s", event.traceback)
    elif hasattr(event, "job_id"):
        if event.code == EVENT_JOB_MISSED:
            logger.warning("Scheduled job %s MISSED its fire time", event.job_id)
        else:
            logger.info("Scheduled job %s executed successfully", event.job_id)


def _run_monitor_wrapper(config: AppConfig) -> None:
    """Wrapper for scheduled execution — adds entry/exit logging."""
    logger.info("=== SCHEDULER FIRING keyword monitor ===")
    try:
        from brand_monitor.pipeline import run_keyword_monitor
        summary = run_keyword_monitor(config)
        logger.info(
            "=== SCHEDULER COMPLETED keyword monitor: %d searches, %d mentions ===",
            summary.processed, summary.total_mentions_found,
        )
    except Exception:
        logger.error("=== SCHEDULER FAILED keyword monitor ===\n%s", traceback.format_exc())
        raise


def init_scheduler(config: AppConfig) -> None:
    """Start the background scheduler and register the periodic monitor run."""
    global _scheduler
    if _scheduler is not None:
        return
    _scheduler = BackgroundScheduler(timezone="UTC")
    _scheduler.add_listener(_job_listener, EVENT_JOB_EXECUTED | EVENT_JOB_ERROR | EVENT_JOB_MISSED)
    _scheduler.add_job(
        _run_monitor_wrapper,
        trigger=IntervalTrigger(minutes=config.scheduler.interval_minutes),
        args=[config],
        id=MONITOR_JOB_ID,
        name="Keyword monitor",
        misfire_grace_time=300,
        coalesce=True,
        max_instances=1,
        replace_existing=True,
    )
    _scheduler.start()
    logger.info("APScheduler started, keyword monitor every %d min", config.scheduler.interval_minutes)


def shutdown_scheduler() -> None:
    global _scheduler
    if _scheduler is not None:
        _scheduler.shutdown(wait=False)
        _scheduler = None
        logger.info("APScheduler stopped")


def get_scheduler_info() -> dict:
    """Return diagnostic info about the scheduler state."""
    if _scheduler is None:
        return {"running": False, "jobs": []}
    jobs = []
    for job in _scheduler.get_jobs():
        jobs.append({
            "id": job.id,
            "name": job.name,
            "next_run_time": str(job.next_run_time) if job.next_run_time else None,
            "trigger": str(job.trigger),
        })
    return {
        "running": _scheduler.running,
        "jobs": jobs,
    }
