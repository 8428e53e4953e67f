"""Daily Numbers — Aggregation, Goal & Report Schemas."""

from enum import Enum
from typing import List, Optional
from pydantic import BaseModel


class Timeframe(str, Enum):
    WEEK = "week"
    MONTH = "month"

    @property
    def days_back(self) -> int:
        return 7 if self is Timeframe.WEEK else 30

    @property
    def label(self) -> str:
        return "Weekly" if self is Timeframe.WEEK else "Monthly"


# ─────────────────────────────────────────────
# AGGREGATION
# ─────────────────────────────────────────────


class MetricTotals(BaseModel):
    """Period totals — same field set as a daily record."""

    calls_made: int = 0
    contacts_reached: int = 0
    appointments_set: int = 0
    appointments_attended: int = 0
    listing_presentations: int = 0
    listings_taken: int = 0
    buyers_signed: int = 0
    active_listings: int = 0
    pending_contracts: int = 0
    closed_deals: int = 0
    volume_closed: float = 0.0


class ConversionRate(BaseModel):
    """One funnel stage as a percentage."""

    key: str
    label: str
    numerator: int
    denominator: int
    rate: float


class ConversionInsight(BaseModel):
    """A funnel stage compared against its industry benchmark."""

    key: str
    label: str
    description: str
    rate: float
    benchmark: float
    bar_value: float
    signal: str  # "above" | "near" | "below"


class MetricsSummary(BaseModel):
    """Totals plus derived funnel for a date range."""

    user_id: str
    start_date: str
    end_date: str
    record_count: int
    totals: MetricTotals
    funnel: List[ConversionRate] = []
    insights: List[ConversionInsight] = []


# ─────────────────────────────────────────────
# GOALS
# ─────────────────────────────────────────────


class GoalProgress(BaseModel):
    metric: str
    label: str
    current: float
    target: int
    progress: float
    complete: bool


class GoalProgressResponse(BaseModel):
    date: str
    target_source: str  # "explicit" | "derived" | "none"
    goals: List[GoalProgress] = []


class IncomeProgress(BaseModel):
    current: float
    goal: float
    remaining: float
    progress: float


class DealsProgress(BaseModel):
    current: int
    goal: int
    remaining: int
    progress: float


class AnnualGoalProgress(BaseModel):
    """Year-to-date closings against the annual goal, as two capped bars."""

    year: int
    deals: DealsProgress
    income: IncomeProgress


# ─────────────────────────────────────────────
# REPORTS
# ─────────────────────────────────────────────


class ReportData(BaseModel):
    """Everything the renderers need: totals, the two headline rates, the range."""

    start_date: str
    end_date: str
    timeframe: Timeframe
    totals: MetricTotals
    contact_rate: float
    appt_rate: float


class ReportDataResponse(BaseModel):
    """Report payload, or has_data=False when the range is empty."""

    has_data: bool
    report: Optional[ReportData] = None
    error: Optional[str] = None


class DeliveryResult(BaseModel):
    """Outcome of sending one email, after retries."""

    success: bool
    attempts: int = 0
    error: Optional[str] = None
    message_id: Optional[str] = None


class RecipientResult(BaseModel):
    email: str
    success: bool
    error: Optional[str] = None
    message_id: Optional[str] = None


class BatchSendResult(BaseModel):
    message: str
    results: List[RecipientResult] = []
    total: int = 0
    successful: int = 0
    failed: int = 0
