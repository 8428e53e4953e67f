"""Daily Numbers — Activity Tracking Models.

Daily metric rows, annual goals and explicit daily targets. All rows are
owned by a single user id; dates are stored as YYYY-MM-DD strings.
"""

from datetime import datetime, timezone
from typing import Optional
from sqlmodel import SQLModel, Field, UniqueConstraint


def canonical_date(value: str) -> str:
    """Parse a calendar date and return it zero-padded as YYYY-MM-DD.

    Rows are keyed and range-queried by this string, so "2026-3-5" must
    land on the same row as "2026-03-05". Raises ValueError if unparseable.
    """
    return datetime.strptime(value.strip(), "%Y-%m-%d").date().isoformat()


class DailyMetricBase(SQLModel):
    """Counts logged for one calendar day."""

    calls_made: int = Field(default=0, ge=0)
    contacts_reached: int = Field(default=0, ge=0)
    appointments_set: int = Field(default=0, ge=0)
    appointments_attended: int = Field(default=0, ge=0)
    listing_presentations: int = Field(default=0, ge=0)
    listings_taken: int = Field(default=0, ge=0)
    buyers_signed: int = Field(default=0, ge=0)
    active_listings: int = Field(default=0, ge=0)
    pending_contracts: int = Field(default=0, ge=0)
    closed_deals: int = Field(default=0, ge=0)
    volume_closed: float = Field(default=0.0, ge=0)


class DailyMetric(DailyMetricBase, table=True):
    """One row per (user, date).

    The unique constraint backs the upsert: saving a day that already
    exists updates it in place.
    """

    __tablename__ = "daily_metrics"
    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_daily_metric_user_date"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(index=True)
    date: str = Field(index=True, description="YYYY-MM-DD")
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class AnnualGoal(SQLModel, table=True):
    """Income goal for one (user, year); deals_needed is derived on save."""

    __tablename__ = "goals"
    __table_args__ = (UniqueConstraint("user_id", "year", name="uq_goal_user_year"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(index=True)
    year: int
    annual_income_goal: float = 0.0
    average_commission_per_deal: float = 0.0
    deals_needed: int = 0
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class DailyTargetsBase(SQLModel):
    calls_made_target: int = Field(default=25, ge=0)
    contacts_reached_target: int = Field(default=8, ge=0)
    appointments_set_target: int = Field(default=4, ge=0)
    appointments_attended_target: int = Field(default=3, ge=0)
    listing_presentations_target: int = Field(default=2, ge=0)
    listings_taken_target: int = Field(default=1, ge=0)
    buyers_signed_target: int = Field(default=1, ge=0)


class DailyTargets(DailyTargetsBase, table=True):
    """User-edited per-metric daily targets. One row per user, not per year."""

    __tablename__ = "daily_targets"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(index=True, unique=True)
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
