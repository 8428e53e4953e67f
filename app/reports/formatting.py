"""Daily Numbers — Shared report formatting.

Both renderers take their numbers from here so the email and the PDF
always show identical values.
"""

from datetime import datetime
from typing import List

from app.core.metric_registry import DAILY_METRICS, REPORT_METRICS
from app.models.report_models import ReportData


def format_currency(value: float) -> str:
    """$1,234 for whole dollars, $1,234.50 otherwise."""
    if float(value).is_integer():
        return f"${value:,.0f}"
    return f"${value:,.2f}"


def format_rate(value: float) -> str:
    return f"{value:.1f}%"


def format_date(iso_date: str) -> str:
    """YYYY-MM-DD → M/D/YYYY."""
    d = datetime.strptime(iso_date, "%Y-%m-%d").date()
    return f"{d.month}/{d.day}/{d.year}"


def date_range_label(report: ReportData) -> str:
    return f"{format_date(report.start_date)} - {format_date(report.end_date)}"


def report_title(report: ReportData) -> str:
    return f"{report.timeframe.label} Performance Report"


def metric_cards(report: ReportData) -> List[tuple[str, str]]:
    """(label, display value) for the eight headline metrics."""
    cards = []
    for name in REPORT_METRICS:
        value = getattr(report.totals, name)
        display = format_currency(value) if name == "volume_closed" else str(value)
        cards.append((DAILY_METRICS[name].label, display))
    return cards


def conversion_rows(report: ReportData) -> List[tuple[str, str]]:
    return [
        ("Calls → Contacts", format_rate(report.contact_rate)),
        ("Contacts → Appointments", format_rate(report.appt_rate)),
    ]


SIGN_OFF = "Keep up the great work!"
