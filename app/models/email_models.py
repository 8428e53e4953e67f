"""Daily Numbers — Email Scheduling & Audit Models."""

from datetime import datetime, timezone
from typing import Optional
from sqlmodel import SQLModel, Field


class UserProfile(SQLModel, table=True):
    """Minimal profile; supplies a fallback report address."""

    __tablename__ = "profiles"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(index=True, unique=True)
    email: Optional[str] = None
    full_name: Optional[str] = None


class EmailPreference(SQLModel, table=True):
    """When (and where) a user wants the periodic report."""

    __tablename__ = "email_preferences"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(index=True, unique=True)
    email: str
    weekly_report_enabled: bool = True
    weekly_report_day: int = Field(default=0, ge=0, le=6, description="0 = Sunday")
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class EmailLog(SQLModel, table=True):
    """Audit row for every report delivery outcome.

    Never modify these rows — they are the delivery audit trail.
    """

    __tablename__ = "email_logs"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(index=True)
    email: str
    report_type: str = Field(description="manual | weekly_scheduled")
    status: str = Field(description="sent | failed")
    error_message: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
