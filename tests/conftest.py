"""Shared test infrastructure for the Daily Numbers test suite.

Provides:
- session: SQLite in-memory session with all tables created
- make_metric: factory for DailyMetric rows
- FakeMailer: stand-in mail client that records sends and can fail on demand
"""

from typing import List, Optional

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

# Import model modules so their tables are registered with SQLModel.metadata
import app.models.tracker_models  # noqa: F401
import app.models.contact_models  # noqa: F401
import app.models.email_models  # noqa: F401

from app.models.tracker_models import DailyMetric


# ---------------------------------------------------------------------------
# Database session fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    """In-memory SQLite session; a fresh database per test."""
    with Session(engine) as session:
        yield session


@pytest.fixture
def make_metric(session):
    """Factory: make_metric("u1", "2026-03-02", calls_made=10)."""

    def _make(user_id: str, date: str, **fields) -> DailyMetric:
        row = DailyMetric(user_id=user_id, date=date, **fields)
        session.add(row)
        session.commit()
        session.refresh(row)
        return row

    return _make


# ---------------------------------------------------------------------------
# Mail
# ---------------------------------------------------------------------------


class FakeMailer:
    """Records every send; raises for the first `fail_times` calls per address.

    `fail_times=None` fails forever.
    """

    def __init__(self, fail_times: Optional[int] = 0, fail_for: Optional[set] = None):
        self.fail_times = fail_times
        self.fail_for = fail_for
        self.calls: List[dict] = []

    def _should_fail(self, to: str) -> bool:
        if self.fail_for is not None and to not in self.fail_for:
            return False
        if self.fail_times is None:
            return True
        prior = sum(1 for c in self.calls[:-1] if c["to"] == to)
        return prior < self.fail_times

    async def send_email(self, to: str, subject: str, html: str) -> dict:
        self.calls.append({"to": to, "subject": subject, "html": html})
        if self._should_fail(to):
            raise RuntimeError("mail service unavailable")
        return {"id": f"msg-{len(self.calls)}"}

    def attempts_for(self, to: str) -> int:
        return sum(1 for c in self.calls if c["to"] == to)


class SleepRecorder:
    """Async sleep replacement that records requested delays."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def sleep_recorder():
    return SleepRecorder()


@pytest.fixture
def mailer_factory():
    """Build a FakeMailer: mailer_factory(fail_times=None) always fails."""
    return FakeMailer
