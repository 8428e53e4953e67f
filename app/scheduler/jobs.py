"""Daily Numbers — Scheduler Jobs.

APScheduler daily job that emails the weekly report to every user whose
chosen report day is today.
"""

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from sqlmodel import Session

from app.config import settings
from app.database import engine
from app.connectors.mailer.client import ResendClient
from app.models.report_models import Timeframe
from app.reports.email_delivery import send_reports
from app.core.logging import get_logger

logger = get_logger("scheduler")

scheduler = AsyncIOScheduler()


async def weekly_report_job():
    """Send scheduled weekly reports for today's weekday."""
    logger.info("Scheduled weekly report send starting...")
    mailer = ResendClient()
    try:
        with Session(engine) as session:
            result = await send_reports(
                session, mailer, timeframe=Timeframe.WEEK, scheduled=True
            )
        logger.info(
            f"Scheduled send complete. Sent: {result.successful}, failed: {result.failed}"
        )
    except Exception as e:
        logger.error(f"Scheduled report send failed: {e}")
    finally:
        await mailer.close()


def start_scheduler():
    """Configure and start the scheduler."""
    if not settings.scheduler_enabled:
        logger.info("Scheduler disabled via config")
        return

    scheduler.add_job(
        weekly_report_job,
        "cron",
        hour=settings.report_hour,
        minute=0,
        id="weekly_report",
        replace_existing=True,
        misfire_grace_time=3600,
    )
    scheduler.start()
    logger.info(f"Scheduler started. Report check daily at {settings.report_hour}:00 UTC")


def stop_scheduler():
    """Shutdown the scheduler gracefully."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")
