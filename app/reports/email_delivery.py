"""Daily Numbers — Report Emailer.

Picks recipients, builds each user's report, and delivers it through the
mail client with exponential-backoff retry. Recipients are processed one at
a time; a failure for one recipient is logged and never stops the batch.
Every outcome is written to the email_logs audit table.
"""

import asyncio
from datetime import date, datetime, timezone
from typing import Awaitable, Callable, List, Optional, Protocol

from sqlmodel import Session, select

from app.config import settings
from app.analyzer.report_pipeline import build_report_data
from app.models.email_models import EmailLog, EmailPreference, UserProfile
from app.models.report_models import (
    BatchSendResult,
    DeliveryResult,
    RecipientResult,
    Timeframe,
)
from app.reports.html_renderer import email_subject, render_email_html
from app.core.logging import get_logger

logger = get_logger("reports.email")

REPORT_TYPE_MANUAL = "manual"
REPORT_TYPE_SCHEDULED = "weekly_scheduled"

Sleep = Callable[[float], Awaitable[None]]


class Mailer(Protocol):
    async def send_email(self, to: str, subject: str, html: str) -> dict: ...


class RecipientNotFound(ValueError):
    """No report address on file for the requested user."""


def report_weekday(on: date) -> int:
    """Weekday with Sunday = 0, matching email_preferences.weekly_report_day."""
    return (on.weekday() + 1) % 7


async def send_with_retry(
    mailer: Mailer,
    email: str,
    subject: str,
    html: str,
    max_attempts: Optional[int] = None,
    base_delay: Optional[float] = None,
    sleep: Sleep = asyncio.sleep,
) -> DeliveryResult:
    """Send one email, retrying with delays of base, 2*base, ... between attempts."""
    max_attempts = max_attempts or settings.mail_max_attempts
    if base_delay is None:
        base_delay = settings.mail_retry_base_delay

    error = "Max retries exceeded"
    for attempt in range(1, max_attempts + 1):
        try:
            logger.info(
                f"Sending email (attempt {attempt}/{max_attempts})",
                extra={"email": email, "attempt": attempt},
            )
            response = await mailer.send_email(email, subject, html)
            logger.info("Email sent", extra={"email": email, "attempt": attempt})
            return DeliveryResult(
                success=True, attempts=attempt, message_id=(response or {}).get("id")
            )
        except Exception as e:
            error = str(e)
            logger.warning(
                f"Attempt {attempt} failed: {e}",
                extra={"email": email, "attempt": attempt},
            )
            if attempt < max_attempts:
                await sleep(base_delay * (2 ** (attempt - 1)))

    return DeliveryResult(success=False, attempts=max_attempts, error=error)


def log_email_attempt(
    session: Session,
    user_id: str,
    email: str,
    report_type: str,
    status: str,
    error_message: Optional[str] = None,
) -> None:
    """Write an audit row. A failed write is logged, not raised."""
    try:
        session.add(
            EmailLog(
                user_id=user_id,
                email=email,
                report_type=report_type,
                status=status,
                error_message=error_message,
            )
        )
        session.commit()
    except Exception as e:
        session.rollback()
        logger.error(f"Error logging email attempt: {e}", extra={"user_id": user_id})


def select_recipients(
    session: Session,
    user_id: Optional[str] = None,
    scheduled: bool = False,
    today: Optional[date] = None,
) -> List[tuple[str, str]]:
    """Resolve (user_id, email) pairs for a send.

    - user_id given: that user's preference email, else profile email
    - scheduled: enabled preferences whose report day is today
    - otherwise: every enabled preference
    """
    if user_id:
        pref = session.exec(
            select(EmailPreference).where(EmailPreference.user_id == user_id)
        ).first()
        email = pref.email if pref else None
        if not email:
            profile = session.exec(
                select(UserProfile).where(UserProfile.user_id == user_id)
            ).first()
            email = profile.email if profile else None
        if not email:
            raise RecipientNotFound("User email not found in preferences or profile")
        return [(user_id, email)]

    query = select(EmailPreference).where(EmailPreference.weekly_report_enabled == True)  # noqa: E712
    if scheduled:
        today = today or datetime.now(timezone.utc).date()
        query = query.where(EmailPreference.weekly_report_day == report_weekday(today))
    return [(p.user_id, p.email) for p in session.exec(query).all()]


async def send_reports(
    session: Session,
    mailer: Mailer,
    user_id: Optional[str] = None,
    timeframe: Timeframe = Timeframe.WEEK,
    scheduled: bool = False,
    today: Optional[date] = None,
    sleep: Sleep = asyncio.sleep,
) -> BatchSendResult:
    """Email the period report to every selected recipient, sequentially."""
    today = today or datetime.now(timezone.utc).date()
    day = report_weekday(today)
    logger.info(
        f"Report send started - scheduled: {scheduled}, user: {user_id or 'all'}, "
        f"day: {day}, timeframe: {timeframe.value}"
    )

    recipients = select_recipients(session, user_id, scheduled, today)
    if not recipients:
        message = (
            f"No users scheduled for reports on day {day}"
            if scheduled
            else "No users with weekly reports enabled"
        )
        logger.info(message)
        return BatchSendResult(message=message)

    report_type = REPORT_TYPE_SCHEDULED if scheduled else REPORT_TYPE_MANUAL
    results: List[RecipientResult] = []

    for recipient_id, email in recipients:
        try:
            data = build_report_data(session, recipient_id, timeframe, today)
            if not data.has_data or data.report is None:
                log_email_attempt(
                    session,
                    recipient_id,
                    email,
                    report_type,
                    "failed",
                    "No metrics data available",
                )
                results.append(
                    RecipientResult(email=email, success=False, error="No metrics data")
                )
                continue

            delivery = await send_with_retry(
                mailer,
                email,
                email_subject(data.report),
                render_email_html(data.report),
                sleep=sleep,
            )
            log_email_attempt(
                session,
                recipient_id,
                email,
                report_type,
                "sent" if delivery.success else "failed",
                delivery.error,
            )
            results.append(
                RecipientResult(
                    email=email,
                    success=delivery.success,
                    error=delivery.error,
                    message_id=delivery.message_id,
                )
            )
        except Exception as e:
            logger.error(
                f"Failed to send report: {e}",
                extra={"user_id": recipient_id, "email": email},
            )
            log_email_attempt(
                session, recipient_id, email, report_type, "failed", str(e)
            )
            results.append(RecipientResult(email=email, success=False, error=str(e)))

    successful = sum(1 for r in results if r.success)
    logger.info(
        f"Report send completed - success: {successful}, failed: {len(results) - successful}",
        extra={"report_type": report_type},
    )
    return BatchSendResult(
        message="Email reports processed",
        results=results,
        total=len(results),
        successful=successful,
        failed=len(results) - successful,
    )
