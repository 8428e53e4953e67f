"""Daily Numbers — Daily Metrics API Routes."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session, select

from app.database import get_session
from app.analyzer.aggregator import fetch_records, summarize
from app.models.tracker_models import DailyMetric, DailyMetricBase, canonical_date
from app.models.report_models import MetricsSummary
from app.core.logging import get_logger

logger = get_logger("api.metrics")

router = APIRouter(prefix="/metrics", tags=["Metrics"])


def _check_date(value: str, name: str = "date") -> str:
    """Canonical YYYY-MM-DD form of `value`, or 400."""
    try:
        return canonical_date(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid {name}: {value}")


def _check_range(start_date: str, end_date: str) -> tuple[str, str]:
    start = _check_date(start_date, "start_date")
    end = _check_date(end_date, "end_date")
    if start > end:
        raise HTTPException(status_code=400, detail="start_date is after end_date")
    return start, end


@router.put("/{date}", response_model=DailyMetric)
async def save_daily_metrics(
    date: str,
    metrics: DailyMetricBase,
    user_id: str = Query(...),
    session: Session = Depends(get_session),
):
    """Create or update the record for one day."""
    date = _check_date(date)
    row = session.exec(
        select(DailyMetric).where(DailyMetric.user_id == user_id, DailyMetric.date == date)
    ).first()
    if row is None:
        row = DailyMetric(user_id=user_id, date=date)

    for field, value in metrics.model_dump().items():
        setattr(row, field, value)
    row.updated_at = datetime.now(timezone.utc)

    session.add(row)
    session.commit()
    session.refresh(row)
    logger.info(f"Saved metrics for {date}", extra={"user_id": user_id})
    return row


@router.get("")
async def list_daily_metrics(
    user_id: str = Query(...),
    start_date: str = Query(..., description="YYYY-MM-DD, inclusive"),
    end_date: str = Query(..., description="YYYY-MM-DD, inclusive"),
    session: Session = Depends(get_session),
):
    """Daily rows in a range, oldest first (feeds the trend charts)."""
    start_date, end_date = _check_range(start_date, end_date)
    rows = fetch_records(session, user_id, start_date, end_date)
    return {"status": "success", "count": len(rows), "records": rows}


@router.get("/summary", response_model=MetricsSummary)
async def get_metrics_summary(
    user_id: str = Query(...),
    start_date: str = Query(...),
    end_date: str = Query(...),
    session: Session = Depends(get_session),
):
    """Totals, conversion funnel and benchmark insights for a range."""
    start_date, end_date = _check_range(start_date, end_date)
    return summarize(session, user_id, start_date, end_date)
