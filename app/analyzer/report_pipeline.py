"""Daily Numbers — Report Pipeline.

Runs the data flow behind every report:
  resolve range → fetch daily rows → no-data check → aggregate → ReportData

Both the emailer and the download path go through `build_report_data`, so an
empty range is always reported as has_data=False and never rendered.
"""

from datetime import date, datetime, timedelta, timezone
from typing import Optional

from sqlmodel import Session

from app.analyzer.aggregator import aggregate, fetch_records, rate
from app.models.report_models import ReportData, ReportDataResponse, Timeframe
from app.core.logging import get_logger

logger = get_logger("analyzer.report_pipeline")

NO_DATA_MESSAGE = "No metrics data available for the selected timeframe"


def resolve_range(
    timeframe: Timeframe, today: Optional[date] = None
) -> tuple[str, str]:
    """Week = last 7 days, month = last 30 days, both ending today."""
    today = today or datetime.now(timezone.utc).date()
    start = today - timedelta(days=timeframe.days_back)
    return start.strftime("%Y-%m-%d"), today.strftime("%Y-%m-%d")


def build_report_data(
    session: Session,
    user_id: str,
    timeframe: Timeframe = Timeframe.WEEK,
    today: Optional[date] = None,
) -> ReportDataResponse:
    """Aggregate a user's range into report data, or flag that it is empty."""
    date_start, date_stop = resolve_range(timeframe, today)
    logger.info(
        f"Generating report data: {timeframe.value} {date_start} → {date_stop}",
        extra={"user_id": user_id},
    )

    records = fetch_records(session, user_id, date_start, date_stop)
    if not records:
        logger.info("No metrics in range", extra={"user_id": user_id})
        return ReportDataResponse(has_data=False, error=NO_DATA_MESSAGE)

    totals = aggregate(records)
    report = ReportData(
        start_date=date_start,
        end_date=date_stop,
        timeframe=timeframe,
        totals=totals,
        contact_rate=rate(totals.contacts_reached, totals.calls_made),
        appt_rate=rate(totals.appointments_set, totals.contacts_reached),
    )
    return ReportDataResponse(has_data=True, report=report)
