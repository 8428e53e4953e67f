"""Daily Numbers — Contact CSV Import.

Accepts either snake_case headers (`first_name`) or the spreadsheet-style
headers exported by most CRMs (`First Name`).
"""

import csv
import io
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ValidationError
from sqlmodel import Session

from app.contacts.metrics_sync import contribution_for, sync_contact_metrics
from app.models.contact_models import Contact, ContactCreate
from app.core.logging import get_logger

logger = get_logger("contacts.csv_import")

# field → accepted header spellings
HEADER_ALIASES: Dict[str, tuple[str, ...]] = {
    "first_name": ("first_name", "First Name"),
    "last_name": ("last_name", "Last Name"),
    "email": ("email", "Email"),
    "phone": ("phone", "Phone"),
    "address": ("address", "Address"),
    "city": ("city", "City"),
    "state": ("state", "State"),
    "zip_code": ("zip_code", "ZIP Code"),
    "contact_type": ("contact_type", "Type"),
    "status": ("status", "Status"),
    "lead_source": ("lead_source", "Lead Source"),
    "notes": ("notes", "Notes"),
    "budget_min": ("budget_min", "Budget Min"),
    "budget_max": ("budget_max", "Budget Max"),
    "preferred_areas": ("preferred_areas", "Preferred Areas"),
    "contract_date": ("contract_date", "Contract Date"),
    "closed_date": ("closed_date", "Closed Date"),
    "pending_date": ("pending_date", "Pending Date"),
    "fee": ("fee", "Fee"),
    "price": ("price", "Price"),
    "paid_income": ("paid_income", "Paid Income"),
    "estimated_commission": ("estimated_commission", "Estimated Commission"),
    "days_on_market": ("days_on_market", "Days on Market"),
}

FLOAT_FIELDS = {"budget_min", "budget_max", "fee", "price", "paid_income", "estimated_commission"}
INT_FIELDS = {"days_on_market"}


class ImportResult(BaseModel):
    success: int = 0
    failed: int = 0
    errors: List[str] = []


def _lookup(row: Dict[str, Any], field: str) -> Optional[str]:
    for header in HEADER_ALIASES[field]:
        value = row.get(header)
        if value is not None and str(value).strip() != "":
            return str(value).strip()
    return None


def row_to_contact(row: Dict[str, Any]) -> ContactCreate:
    """Map one CSV row onto a validated contact payload."""
    data: Dict[str, Any] = {
        "first_name": _lookup(row, "first_name") or "",
        "last_name": _lookup(row, "last_name") or "",
    }
    for field in HEADER_ALIASES:
        if field in data:
            continue
        value = _lookup(row, field)
        if value is None:
            continue
        if field in FLOAT_FIELDS:
            data[field] = float(value.replace(",", "").replace("$", ""))
        elif field in INT_FIELDS:
            data[field] = int(value)
        elif field == "preferred_areas":
            data[field] = [a.strip() for a in value.split(",") if a.strip()]
        else:
            data[field] = value
    return ContactCreate(**data)


def import_contacts_csv(session: Session, user_id: str, content: str) -> ImportResult:
    """Insert every valid row; count and report the rest."""
    result = ImportResult()
    reader = csv.DictReader(io.StringIO(content))

    for line_no, row in enumerate(reader, start=2):
        try:
            payload = row_to_contact(row)
        except (ValidationError, ValueError) as e:
            result.failed += 1
            result.errors.append(f"Row {line_no}: {e}")
            logger.warning(f"Skipping row {line_no}: {e}", extra={"user_id": user_id})
            continue

        contact = Contact(user_id=user_id, **payload.model_dump())
        session.add(contact)
        session.commit()
        session.refresh(contact)
        result.success += 1

        sync_contact_metrics(session, user_id, None, contribution_for(contact))

    logger.info(
        f"CSV import finished: {result.success} imported, {result.failed} failed",
        extra={"user_id": user_id},
    )
    return result
