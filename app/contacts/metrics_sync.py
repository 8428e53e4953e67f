"""Daily Numbers — Contact → Daily Metric Sync.

A contact with transaction dates counts toward the daily numbers:
  - closed_date:   closed_deals +1, volume_closed + paid_income
  - contract_date: buyers_signed +1 (buyer) or listings_taken +1 (seller)
All of it lands on one day: closed_date if set, else contract_date.

Creating a contact applies its contribution, deleting reverses it, and an
edit reverses the old one and applies the new one. Each adjustment is one
read-modify-write transaction; counters never go below zero. A failed
adjustment is rolled back and logged, and the contact change still stands.
"""

from typing import Dict, Optional

from pydantic import BaseModel
from sqlmodel import Session, select

from app.models.contact_models import Contact, ContactType
from app.models.tracker_models import DailyMetric
from app.core.logging import get_logger

logger = get_logger("contacts.metrics_sync")


class MetricContribution(BaseModel):
    date: str
    deltas: Dict[str, float]


def contribution_for(contact: Contact) -> Optional[MetricContribution]:
    """What this contact adds to the daily numbers, if anything."""
    metrics_date = contact.closed_date or contact.contract_date
    if not metrics_date:
        return None

    deltas: Dict[str, float] = {}
    if contact.closed_date:
        deltas["closed_deals"] = 1
        deltas["volume_closed"] = contact.paid_income or 0
    if contact.contract_date:
        if contact.contact_type == ContactType.BUYER:
            deltas["buyers_signed"] = 1
        elif contact.contact_type == ContactType.SELLER:
            deltas["listings_taken"] = 1
    return MetricContribution(date=metrics_date, deltas=deltas)


def _apply(
    session: Session, user_id: str, contribution: MetricContribution, sign: int
) -> None:
    row = session.exec(
        select(DailyMetric).where(
            DailyMetric.user_id == user_id, DailyMetric.date == contribution.date
        )
    ).first()

    if row is None:
        if sign < 0:
            return  # nothing to reverse
        row = DailyMetric(user_id=user_id, date=contribution.date)

    for field, delta in contribution.deltas.items():
        current = getattr(row, field) or 0
        updated = max(current + sign * delta, 0)
        setattr(row, field, updated if field == "volume_closed" else int(updated))
    session.add(row)


def sync_contact_metrics(
    session: Session,
    user_id: str,
    before: Optional[MetricContribution],
    after: Optional[MetricContribution],
) -> bool:
    """Swap one contribution for another in a single transaction.

    Returns False when the adjustment failed (already rolled back and logged).
    """
    if before == after:
        return True
    try:
        if before is not None:
            _apply(session, user_id, before, -1)
        if after is not None:
            _apply(session, user_id, after, +1)
        session.commit()
        return True
    except Exception as e:
        session.rollback()
        logger.error(f"Error updating daily metrics: {e}", extra={"user_id": user_id})
        return False
