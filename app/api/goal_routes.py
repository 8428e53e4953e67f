"""Daily Numbers — Goals & Targets API Routes."""

from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field
from sqlmodel import Session, select

from app.database import get_session
from app.analyzer.aggregator import aggregate, fetch_records
from app.analyzer.goal_planner import (
    daily_goal_progress,
    deals_needed,
    deals_progress,
    income_progress,
    resolve_target_source,
)
from app.models.tracker_models import (
    AnnualGoal,
    DailyTargets,
    DailyTargetsBase,
    canonical_date,
)
from app.models.report_models import (
    AnnualGoalProgress,
    GoalProgressResponse,
    IncomeProgress,
)
from app.core.logging import get_logger

logger = get_logger("api.goals")

router = APIRouter(prefix="/goals", tags=["Goals"])


# ── Request Models ──


class AnnualGoalRequest(BaseModel):
    """Request body for PUT /goals/annual."""

    year: Optional[int] = None
    """Defaults to the current year."""
    annual_income_goal: float = Field(default=0.0, ge=0)
    average_commission_per_deal: float = Field(default=0.0, ge=0)


def _today() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%d")


# ── Endpoints ──


@router.get("/annual")
async def get_annual_goal(
    user_id: str = Query(...),
    year: Optional[int] = Query(None),
    session: Session = Depends(get_session),
):
    year = year or datetime.now(timezone.utc).year
    goal = session.exec(
        select(AnnualGoal).where(AnnualGoal.user_id == user_id, AnnualGoal.year == year)
    ).first()
    if not goal:
        return {"status": "no_data", "message": f"No goals set for {year}."}
    return {"status": "success", "goal": goal}


@router.put("/annual", response_model=AnnualGoal)
async def save_annual_goal(
    request: AnnualGoalRequest,
    user_id: str = Query(...),
    session: Session = Depends(get_session),
):
    """Upsert the (user, year) goal; deals_needed is recomputed on every save."""
    year = request.year or datetime.now(timezone.utc).year
    goal = session.exec(
        select(AnnualGoal).where(AnnualGoal.user_id == user_id, AnnualGoal.year == year)
    ).first()
    if goal is None:
        goal = AnnualGoal(user_id=user_id, year=year)

    goal.annual_income_goal = request.annual_income_goal
    goal.average_commission_per_deal = request.average_commission_per_deal
    goal.deals_needed = deals_needed(
        request.annual_income_goal, request.average_commission_per_deal
    )
    goal.updated_at = datetime.now(timezone.utc)

    session.add(goal)
    session.commit()
    session.refresh(goal)
    logger.info(f"Saved {year} goal: {goal.deals_needed} deals", extra={"user_id": user_id})
    return goal


@router.get("/deals-needed")
async def get_deals_needed(
    annual_income_goal: float = Query(..., ge=0),
    average_commission_per_deal: float = Query(..., ge=0),
):
    return {
        "deals_needed": deals_needed(annual_income_goal, average_commission_per_deal)
    }


@router.get("/daily-targets")
async def get_daily_targets(
    user_id: str = Query(...),
    session: Session = Depends(get_session),
):
    """Saved targets, or the defaults when the user has none yet."""
    row = session.exec(select(DailyTargets).where(DailyTargets.user_id == user_id)).first()
    if not row:
        return {"status": "default", "targets": DailyTargetsBase()}
    return {"status": "success", "targets": row}


@router.put("/daily-targets", response_model=DailyTargets)
async def save_daily_targets(
    targets: DailyTargetsBase,
    user_id: str = Query(...),
    session: Session = Depends(get_session),
):
    row = session.exec(select(DailyTargets).where(DailyTargets.user_id == user_id)).first()
    if row is None:
        row = DailyTargets(user_id=user_id)
    for field, value in targets.model_dump().items():
        setattr(row, field, value)
    row.updated_at = datetime.now(timezone.utc)

    session.add(row)
    session.commit()
    session.refresh(row)
    return row


@router.get("/progress", response_model=GoalProgressResponse)
async def get_daily_progress(
    user_id: str = Query(...),
    date: Optional[str] = Query(None, description="YYYY-MM-DD, defaults to today"),
    session: Session = Depends(get_session),
):
    """One day's numbers against the user's daily targets."""
    try:
        day = canonical_date(date) if date else _today()
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid date: {date}")
    year = int(day[:4])

    source = resolve_target_source(session, user_id, year)
    totals = aggregate(fetch_records(session, user_id, day, day))
    return GoalProgressResponse(
        date=day,
        target_source=source.kind if source else "none",
        goals=daily_goal_progress(totals, source),
    )


@router.get("/income-progress", response_model=IncomeProgress)
async def get_income_progress(
    user_id: str = Query(...),
    year: Optional[int] = Query(None),
    session: Session = Depends(get_session),
):
    """Closed volume year-to-date against the annual income goal."""
    year = year or datetime.now(timezone.utc).year
    goal = session.exec(
        select(AnnualGoal).where(AnnualGoal.user_id == user_id, AnnualGoal.year == year)
    ).first()
    if not goal:
        raise HTTPException(status_code=404, detail=f"No goals set for {year}")

    totals = aggregate(fetch_records(session, user_id, f"{year}-01-01", f"{year}-12-31"))
    return income_progress(totals.volume_closed, goal.annual_income_goal)


@router.get("/annual-progress", response_model=AnnualGoalProgress)
async def get_annual_progress(
    user_id: str = Query(...),
    year: Optional[int] = Query(None),
    session: Session = Depends(get_session),
):
    """Closed deals vs deals_needed and closed volume vs the income goal."""
    year = year or datetime.now(timezone.utc).year
    goal = session.exec(
        select(AnnualGoal).where(AnnualGoal.user_id == user_id, AnnualGoal.year == year)
    ).first()
    if not goal:
        raise HTTPException(status_code=404, detail=f"No goals set for {year}")

    totals = aggregate(fetch_records(session, user_id, f"{year}-01-01", f"{year}-12-31"))
    return AnnualGoalProgress(
        year=year,
        deals=deals_progress(totals.closed_deals, goal.deals_needed),
        income=income_progress(totals.volume_closed, goal.annual_income_goal),
    )
