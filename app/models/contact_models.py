"""Daily Numbers — Contact & Interaction Models."""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import field_validator
from sqlalchemy import Column, JSON
from sqlmodel import SQLModel, Field

from app.models.tracker_models import canonical_date


class ContactType(str, Enum):
    BUYER = "buyer"
    SELLER = "seller"
    INVESTOR = "investor"
    REFERRAL_PARTNER = "referral_partner"


class ContactStatus(str, Enum):
    NEW = "new"
    CONTACTED = "contacted"
    QUALIFIED = "qualified"
    INTERESTED = "interested"
    NOT_INTERESTED = "not_interested"
    DO_NOT_CALL = "do_not_call"


class LeadSource(str, Enum):
    REFERRAL = "referral"
    WEBSITE = "website"
    SOCIAL_MEDIA = "social_media"
    COLD_CALL = "cold_call"
    OPEN_HOUSE = "open_house"
    ADVERTISEMENT = "advertisement"
    OTHER = "other"
    PAST_CLIENT = "past_client"
    EXPIRED_LISTING = "expired_listing"
    FOR_SALE_BY_OWNER = "for_sale_by_owner"
    CENTER_OF_INFLUENCE = "center_of_influence"
    JUST_LISTED = "just_listed"
    JUST_SOLD = "just_sold"
    SIGN_CALL = "sign_call"
    ADVERTISEMENT_CALL = "advertisement_call"
    PAID_LEAD_SOURCE = "paid_lead_source"
    DOOR_KNOCKING = "door_knocking"
    FRBO = "frbo"
    PROBATE = "probate"
    ABSENTEE_OWNER = "absentee_owner"
    ATTORNEY_REFERRAL = "attorney_referral"
    AGENT_2_AGENT_CALLS = "agent_2_agent_calls"


def _validate_date(value: Optional[str]) -> Optional[str]:
    """Empty → None; otherwise normalized to zero-padded YYYY-MM-DD."""
    if value is None or value.strip() == "":
        return None
    return canonical_date(value)


class ContactBase(SQLModel):
    """Fields shared by the table row and the create/update payloads."""

    first_name: str
    last_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    contact_type: ContactType = ContactType.BUYER
    status: ContactStatus = ContactStatus.NEW
    lead_source: Optional[LeadSource] = None
    notes: Optional[str] = None

    # Budget
    budget_min: Optional[float] = None
    budget_max: Optional[float] = None

    # Transaction
    contract_date: Optional[str] = None
    pending_date: Optional[str] = None
    closed_date: Optional[str] = None
    price: Optional[float] = None
    fee: Optional[float] = None
    paid_income: Optional[float] = None
    estimated_commission: Optional[float] = None
    days_on_market: Optional[int] = None


class Contact(ContactBase, table=True):
    __tablename__ = "contacts"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(index=True)
    preferred_areas: Optional[List[str]] = Field(default=None, sa_column=Column(JSON))
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ContactCreate(ContactBase):
    """Validated payload for creating or replacing a contact."""

    preferred_areas: Optional[List[str]] = None

    @field_validator("first_name", "last_name")
    @classmethod
    def _required_name(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("contract_date", "pending_date", "closed_date")
    @classmethod
    def _calendar_date(cls, v: Optional[str]) -> Optional[str]:
        return _validate_date(v)


class ContactInteraction(SQLModel, table=True):
    """Append-only log entry tied to one contact."""

    __tablename__ = "contact_interactions"

    id: Optional[int] = Field(default=None, primary_key=True)
    contact_id: int = Field(index=True, foreign_key="contacts.id")
    user_id: str = Field(index=True)
    interaction_type: str = Field(description="call | email | meeting | text | note")
    subject: Optional[str] = None
    notes: Optional[str] = None
    scheduled_at: Optional[datetime] = None
    follow_up_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
