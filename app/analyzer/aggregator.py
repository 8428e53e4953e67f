"""Daily Numbers — Aggregator.

Rolls daily metric records up into period totals and derives the
conversion funnel. Flow and currency fields are summed; snapshot fields
(active listings, pending contracts) take the maximum single-day value.
"""

from typing import Any, Iterable, List, Mapping

from sqlmodel import Session, select

from app.core.metric_registry import (
    DAILY_METRICS,
    FUNNEL_BENCHMARKS,
    FUNNEL_STAGES,
)
from app.models.tracker_models import DailyMetric
from app.models.report_models import (
    ConversionInsight,
    ConversionRate,
    MetricsSummary,
    MetricTotals,
)
from app.core.logging import get_logger

logger = get_logger("analyzer.aggregator")

# Below this fraction of the benchmark a stage is flagged
NEAR_BENCHMARK_RATIO = 0.8


def _field(record: Any, name: str) -> float:
    """Read a metric off a row or a plain dict; None/missing → 0."""
    if isinstance(record, Mapping):
        value = record.get(name)
    else:
        value = getattr(record, name, None)
    return value or 0


def rate(numerator: float, denominator: float) -> float:
    """Percentage to one decimal; 0.0 when the denominator is 0."""
    if denominator > 0:
        return round(numerator / denominator * 100, 1)
    return 0.0


def aggregate(records: Iterable[Any]) -> MetricTotals:
    """Reduce daily records (any order) into one totals record."""
    acc: dict[str, float] = {name: 0 for name in DAILY_METRICS}
    for record in records:
        for name, definition in DAILY_METRICS.items():
            value = _field(record, name)
            if definition.additive:
                acc[name] += value
            else:
                acc[name] = max(acc[name], value)

    return MetricTotals(
        **{
            name: (acc[name] if name == "volume_closed" else int(acc[name]))
            for name in DAILY_METRICS
        }
    )


def conversion_funnel(totals: MetricTotals) -> List[ConversionRate]:
    """Funnel stages in fixed order, calls → contacts first."""
    funnel: List[ConversionRate] = []
    for key, num_field, den_field, label in FUNNEL_STAGES:
        numerator = getattr(totals, num_field)
        denominator = getattr(totals, den_field)
        funnel.append(
            ConversionRate(
                key=key,
                label=label,
                numerator=numerator,
                denominator=denominator,
                rate=rate(numerator, denominator),
            )
        )
    return funnel


def _signal(value: float, benchmark: float) -> str:
    if value > benchmark:
        return "above"
    if value < benchmark * NEAR_BENCHMARK_RATIO:
        return "below"
    return "near"


def conversion_insights(funnel: List[ConversionRate]) -> List[ConversionInsight]:
    """Compare benchmarked funnel stages against industry targets."""
    insights: List[ConversionInsight] = []
    for stage in funnel:
        if stage.key not in FUNNEL_BENCHMARKS:
            continue
        benchmark, description = FUNNEL_BENCHMARKS[stage.key]
        insights.append(
            ConversionInsight(
                key=stage.key,
                label=stage.label,
                description=description,
                rate=stage.rate,
                benchmark=benchmark,
                bar_value=min(stage.rate, 100.0),
                signal=_signal(stage.rate, benchmark),
            )
        )
    return insights


def fetch_records(
    session: Session,
    user_id: str,
    date_start: str,
    date_stop: str,
) -> List[DailyMetric]:
    """Daily rows for one user within [date_start, date_stop] inclusive."""
    return list(
        session.exec(
            select(DailyMetric)
            .where(
                DailyMetric.user_id == user_id,
                DailyMetric.date >= date_start,
                DailyMetric.date <= date_stop,
            )
            .order_by(DailyMetric.date)
        ).all()
    )


def summarize(
    session: Session,
    user_id: str,
    date_start: str,
    date_stop: str,
) -> MetricsSummary:
    """Fetch, aggregate and derive the funnel for one user and range."""
    records = fetch_records(session, user_id, date_start, date_stop)
    totals = aggregate(records)
    funnel = conversion_funnel(totals)

    logger.info(
        f"Aggregated {len(records)} daily records {date_start} → {date_stop}",
        extra={"user_id": user_id},
    )
    return MetricsSummary(
        user_id=user_id,
        start_date=date_start,
        end_date=date_stop,
        record_count=len(records),
        totals=totals,
        funnel=funnel,
        insights=conversion_insights(funnel),
    )
