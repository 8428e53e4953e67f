"""Daily Numbers — Unified Metric Registry.

Defines the canonical set of daily metrics and how each one rolls up
across a date range. The aggregator, the goal planner and both report
renderers read field names, labels and aggregation rules from here.
"""

from enum import Enum
from typing import Dict, List


class MetricType(str, Enum):
    """How a metric is categorised."""

    FLOW = "flow"  # Events within a day: calls, contacts — summed
    SNAPSHOT = "snapshot"  # Point-in-time pipeline state — maxed
    CURRENCY = "currency"  # Dollar amounts — summed


class MetricDefinition:
    """Describes a single daily metric."""

    def __init__(
        self,
        name: str,
        metric_type: MetricType,
        label: str,
        description: str = "",
        targetable: bool = False,
    ):
        self.name = name
        self.metric_type = metric_type
        self.label = label
        self.description = description
        self.targetable = targetable

    @property
    def additive(self) -> bool:
        return self.metric_type != MetricType.SNAPSHOT

    def __repr__(self) -> str:
        return f"<Metric {self.name} ({self.metric_type.value})>"


# ─────────────────────────────────────────────
# DAILY METRICS — Canonical Registry (display order)
# ─────────────────────────────────────────────

DAILY_METRICS: Dict[str, MetricDefinition] = {
    "calls_made": MetricDefinition(
        "calls_made", MetricType.FLOW, "Calls Made", "Outbound calls", True
    ),
    "contacts_reached": MetricDefinition(
        "contacts_reached",
        MetricType.FLOW,
        "Contacts Reached",
        "Live conversations",
        True,
    ),
    "appointments_set": MetricDefinition(
        "appointments_set", MetricType.FLOW, "Appointments Set", "", True
    ),
    "appointments_attended": MetricDefinition(
        "appointments_attended", MetricType.FLOW, "Appointments Attended", "", True
    ),
    "listing_presentations": MetricDefinition(
        "listing_presentations", MetricType.FLOW, "Listing Presentations", "", True
    ),
    "listings_taken": MetricDefinition(
        "listings_taken", MetricType.FLOW, "Listings Taken", "", True
    ),
    "buyers_signed": MetricDefinition(
        "buyers_signed", MetricType.FLOW, "Buyers Signed", "", True
    ),
    "active_listings": MetricDefinition(
        "active_listings",
        MetricType.SNAPSHOT,
        "Active Listings",
        "Listings on market at end of day",
    ),
    "pending_contracts": MetricDefinition(
        "pending_contracts",
        MetricType.SNAPSHOT,
        "Pending Contracts",
        "Contracts under way at end of day",
    ),
    "closed_deals": MetricDefinition(
        "closed_deals", MetricType.FLOW, "Closed Deals", "Transactions closed"
    ),
    "volume_closed": MetricDefinition(
        "volume_closed", MetricType.CURRENCY, "Volume Closed", "Closed dollar volume"
    ),
}


# ─────────────────────────────────────────────
# CONVERSION FUNNEL — fixed stage order
# ─────────────────────────────────────────────

# (key, numerator, denominator, label)
FUNNEL_STAGES: List[tuple[str, str, str, str]] = [
    ("calls_to_contacts", "contacts_reached", "calls_made", "Calls → Contacts"),
    (
        "contacts_to_appointments",
        "appointments_set",
        "contacts_reached",
        "Contacts → Appointments",
    ),
    (
        "appointments_to_attended",
        "appointments_attended",
        "appointments_set",
        "Appointments → Attended",
    ),
    (
        "attended_to_presentations",
        "listing_presentations",
        "appointments_attended",
        "Attended → Presentations",
    ),
    (
        "presentations_to_listings",
        "listings_taken",
        "listing_presentations",
        "Presentations → Listings",
    ),
]

# Industry benchmarks (%) for the stages agents are coached on
FUNNEL_BENCHMARKS: Dict[str, tuple[float, str]] = {
    "calls_to_contacts": (30.0, "Contact rate from calls"),
    "contacts_to_appointments": (50.0, "Appointment booking rate"),
    "appointments_to_attended": (80.0, "Show-up rate"),
    "presentations_to_listings": (60.0, "Listing conversion rate"),
}

# The eight headline metrics shown on reports, in card order
REPORT_METRICS: List[str] = [
    "calls_made",
    "contacts_reached",
    "appointments_set",
    "appointments_attended",
    "listings_taken",
    "buyers_signed",
    "closed_deals",
    "volume_closed",
]


# ─────────────────────────────────────────────
# HELPERS
# ─────────────────────────────────────────────


def targetable_metrics() -> list[MetricDefinition]:
    """Metrics that carry a user-editable daily target."""
    return [m for m in DAILY_METRICS.values() if m.targetable]
