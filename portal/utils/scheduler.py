"""
Background scheduler for automated tasks.

Handles:
- Birthday notifications (daily at BIRTHDAY_JOB_HOUR UTC)
"""
import os
import atexit
import logging

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

logger = logging.getLogger(__name__)

# Global scheduler instance
_scheduler = None
_flask_app = None  # Flask app reference for job context


def init_scheduler(app):
    """
    Initialize the background scheduler.

    Only runs when ENABLE_SCHEDULER is set, never under TESTING, and only
    in one process (gunicorn preloads the app before forking workers).
    """
    global _scheduler, _flask_app

    _flask_app = app

    if app.config.get('TESTING'):
        logger.info('[Scheduler] Disabled in testing mode')
        return

    if not app.config.get('ENABLE_SCHEDULER'):
        logger.info('[Scheduler] Disabled (set ENABLE_SCHEDULER=true)')
        return

    # Prevent multiple scheduler instances
    if os.getenv('SCHEDULER_RUNNING') == 'true':
        logger.info('[Scheduler] Already running in another process')
        return

    hour = app.config.get('BIRTHDAY_JOB_HOUR', 7)

    _scheduler = BackgroundScheduler(
        timezone='UTC',
        job_defaults={
            'coalesce': True,  # Combine missed runs
            'max_instances': 1,  # Prevent concurrent runs
            'misfire_grace_time': 3600  # 1 hour grace period
        }
    )

    _scheduler.add_job(
        run_birthday_notifications,
        trigger=CronTrigger(hour=hour, minute=0),
        id='birthday_notifications',
        name='Send birthday emails',
        replace_existing=True
    )

    _scheduler.start()
    os.environ['SCHEDULER_RUNNING'] = 'true'
    logger.info(f'[Scheduler] Started: birthday notifications daily at {hour}:00 UTC')

    atexit.register(shutdown_scheduler)


def shutdown_scheduler():
    """Gracefully shutdown the scheduler."""
    global _scheduler
    if _scheduler and _scheduler.running:
        _scheduler.shutdown(wait=False)
        logger.info('[Scheduler] Shutdown complete')


def run_birthday_notifications():
    """Daily job: email every member whose birthday is today."""
    global _flask_app

    if not _flask_app:
        logger.error('[Scheduler] Flask app not initialized')
        return

    with _flask_app.app_context():
        from ..services.birthday_service import birthday_service

        try:
            result = birthday_service.process_birthday_notifications()
        except Exception:
            logger.exception('[Scheduler] Birthday notifications failed')
            return

        failed = [r for r in result['emailResults'] if not r.get('success')]
        logger.info(
            f"[Scheduler] Birthday notifications for {result['date']}: "
            f"{result['totalBirthdays']} birthdays, {len(failed)} failed"
        )
