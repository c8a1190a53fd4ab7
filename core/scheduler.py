# core/scheduler.py
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from core.config import settings
from core.logging_config import logger
from core.notifications import run_deadline_check


_scheduler = None


def run_scheduled_deadline_check():
    """Interval job: scan every project for overdue and upcoming tasks."""
    try:
        added = run_deadline_check()
        logger.info(f"[SCHEDULER] Deadline check complete ({len(added)} new)")
    except Exception:
        logger.exception("[SCHEDULER] Deadline check failed")


def start_scheduler() -> BackgroundScheduler:
    """
    Initialize the APScheduler background process.
    Runs the deadline check every DEADLINE_CHECK_MINUTES.
    """
    global _scheduler
    if _scheduler is not None and _scheduler.running:
        return _scheduler

    scheduler = BackgroundScheduler(timezone="UTC")

    scheduler.add_job(
        run_scheduled_deadline_check,
        trigger=IntervalTrigger(minutes=settings.DEADLINE_CHECK_MINUTES),
        id="deadline_check_job",
        replace_existing=True,
    )

    scheduler.start()
    _scheduler = scheduler
    logger.info(f"⏰ Scheduler started. Deadline check every {settings.DEADLINE_CHECK_MINUTES} min.")
    return scheduler


def stop_scheduler():
    global _scheduler
    if _scheduler is not None and _scheduler.running:
        _scheduler.shutdown(wait=False)
    _scheduler = None
