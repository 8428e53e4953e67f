"""Daily Numbers — Goal Planner.

Deals needed from an income goal, percent-to-target, daily pacing, and
year-to-date progress on deals and income.

Daily targets come from exactly one source per user:
  - ExplicitTargets: the user's saved DailyTargets row
  - DerivedTargets: annual targets spread evenly over working days
Explicit targets win whenever they exist.
"""

import math
from typing import Dict, List, Literal, Optional, Union

from pydantic import BaseModel
from sqlmodel import Session, select

from app.config import settings
from app.core.metric_registry import DAILY_METRICS, targetable_metrics
from app.models.tracker_models import AnnualGoal, DailyTargets
from app.models.report_models import (
    DealsProgress,
    GoalProgress,
    IncomeProgress,
    MetricTotals,
)
from app.core.logging import get_logger

logger = get_logger("analyzer.goals")


def deals_needed(annual_income_goal: float, average_commission_per_deal: float) -> int:
    """Deals required to meet the income goal; partial deals round up."""
    if average_commission_per_deal > 0:
        return math.ceil(annual_income_goal / average_commission_per_deal)
    return 0


def progress(current: float, target: float) -> float:
    """Percent of target reached, capped at 100."""
    if target > 0:
        return min(current / target * 100, 100)
    return 0


def daily_pace(annual_target: float, working_days: Optional[int] = None) -> int:
    """Spread an annual target evenly across working days, rounding up."""
    days = working_days or settings.working_days_per_year
    return math.ceil((annual_target or 0) / days)


# ─────────────────────────────────────────────
# TARGET SOURCE — tagged variant
# ─────────────────────────────────────────────


class ExplicitTargets(BaseModel):
    kind: Literal["explicit"] = "explicit"
    targets: Dict[str, int]

    def daily_targets(self) -> Dict[str, int]:
        return dict(self.targets)


class DerivedTargets(BaseModel):
    kind: Literal["derived"] = "derived"
    annual_targets: Dict[str, float]
    working_days: int = 250

    def daily_targets(self) -> Dict[str, int]:
        return {
            metric: daily_pace(annual, self.working_days)
            for metric, annual in self.annual_targets.items()
        }


TargetSource = Union[ExplicitTargets, DerivedTargets]


def explicit_from_row(row: DailyTargets) -> ExplicitTargets:
    return ExplicitTargets(
        targets={
            m.name: getattr(row, f"{m.name}_target") or 0
            for m in targetable_metrics()
        }
    )


def derived_from_goal(goal: AnnualGoal) -> DerivedTargets:
    """Only the deal count is known annually; pace it per working day."""
    return DerivedTargets(
        annual_targets={
            "closed_deals": deals_needed(
                goal.annual_income_goal, goal.average_commission_per_deal
            )
        },
        working_days=settings.working_days_per_year,
    )


def resolve_target_source(
    session: Session, user_id: str, year: int
) -> Optional[TargetSource]:
    """Pick the user's target source once; None when nothing is set."""
    explicit = session.exec(
        select(DailyTargets).where(DailyTargets.user_id == user_id)
    ).first()
    if explicit:
        return explicit_from_row(explicit)

    goal = session.exec(
        select(AnnualGoal).where(AnnualGoal.user_id == user_id, AnnualGoal.year == year)
    ).first()
    if goal:
        return derived_from_goal(goal)

    logger.info(f"No goals or daily targets for {year}", extra={"user_id": user_id})
    return None


def daily_goal_progress(
    today: MetricTotals, source: Optional[TargetSource]
) -> List[GoalProgress]:
    """Today's totals against each daily target, in registry order."""
    if source is None:
        return []

    targets = source.daily_targets()
    goals: List[GoalProgress] = []
    for name, definition in DAILY_METRICS.items():
        if name not in targets:
            continue
        current = getattr(today, name)
        target = targets[name]
        pct = progress(current, target)
        goals.append(
            GoalProgress(
                metric=name,
                label=definition.label,
                current=current,
                target=target,
                progress=pct,
                complete=pct >= 100,
            )
        )
    return goals


def income_progress(volume_closed: float, annual_income_goal: float) -> IncomeProgress:
    """Year-to-date income against the annual goal."""
    return IncomeProgress(
        current=volume_closed,
        goal=annual_income_goal,
        remaining=max(annual_income_goal - volume_closed, 0.0),
        progress=progress(volume_closed, annual_income_goal),
    )


def deals_progress(closed_deals: int, needed: int) -> DealsProgress:
    """Year-to-date closed deals against deals_needed."""
    return DealsProgress(
        current=closed_deals,
        goal=needed,
        remaining=max(needed - closed_deals, 0),
        progress=progress(closed_deals, needed),
    )
