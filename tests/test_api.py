"""API tests — routes wired to an in-memory database and a fake mailer."""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlmodel import select

from app.main import app
from app.database import get_session
from app.api.report_routes import get_mailer
from app.models.email_models import EmailLog, EmailPreference
from app.models.tracker_models import DailyMetric


@pytest.fixture
def mailer(mailer_factory):
    return mailer_factory()


@pytest.fixture
def client(session, mailer):
    def _session_override():
        return session

    async def _mailer_override():
        yield mailer

    app.dependency_overrides[get_session] = _session_override
    app.dependency_overrides[get_mailer] = _mailer_override
    yield TestClient(app)
    app.dependency_overrides.clear()


def _today() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%d")


class TestMetricsRoutes:
    def test_upsert_keeps_one_row_per_day(self, client, session):
        r1 = client.put("/metrics/2026-03-05?user_id=u1", json={"calls_made": 10})
        r2 = client.put("/metrics/2026-03-05?user_id=u1", json={"calls_made": 14, "contacts_reached": 4})

        assert r1.status_code == 200 and r2.status_code == 200
        assert r1.json()["id"] == r2.json()["id"]
        rows = session.exec(select(DailyMetric)).all()
        assert len(rows) == 1
        assert rows[0].calls_made == 14

    def test_negative_counts_rejected(self, client):
        r = client.put("/metrics/2026-03-05?user_id=u1", json={"calls_made": -1})
        assert r.status_code == 422

    def test_bad_date_rejected(self, client):
        r = client.put("/metrics/2026-13-05?user_id=u1", json={"calls_made": 1})
        assert r.status_code == 400

    def test_unpadded_date_updates_the_same_day(self, client, session):
        client.put("/metrics/2026-03-05?user_id=u1", json={"calls_made": 10})
        r = client.put("/metrics/2026-3-5?user_id=u1", json={"calls_made": 7})

        assert r.status_code == 200
        assert r.json()["date"] == "2026-03-05"
        rows = session.exec(select(DailyMetric)).all()
        assert [(row.date, row.calls_made) for row in rows] == [("2026-03-05", 7)]

        body = client.get(
            "/metrics/summary",
            params={"user_id": "u1", "start_date": "2026-3-1", "end_date": "2026-03-31"},
        ).json()
        assert body["record_count"] == 1
        assert body["totals"]["calls_made"] == 7

    def test_summary(self, client):
        client.put("/metrics/2026-03-02?user_id=u1", json={"calls_made": 10, "contacts_reached": 3, "active_listings": 4})
        client.put("/metrics/2026-03-03?user_id=u1", json={"calls_made": 8, "contacts_reached": 2, "active_listings": 6})

        body = client.get(
            "/metrics/summary",
            params={"user_id": "u1", "start_date": "2026-03-01", "end_date": "2026-03-31"},
        ).json()
        assert body["totals"]["calls_made"] == 18
        assert body["totals"]["active_listings"] == 6
        assert body["funnel"][0]["rate"] == 27.8


class TestGoalRoutes:
    def test_annual_goal_derives_deals_needed(self, client):
        r = client.put(
            "/goals/annual?user_id=u1",
            json={"year": 2026, "annual_income_goal": 150001, "average_commission_per_deal": 5000},
        )
        assert r.status_code == 200
        assert r.json()["deals_needed"] == 31

    def test_progress_prefers_explicit_targets(self, client):
        today = _today()
        client.put(f"/metrics/{today}?user_id=u1", json={"calls_made": 30})
        client.put("/goals/daily-targets?user_id=u1", json={"calls_made_target": 20})

        body = client.get("/goals/progress", params={"user_id": "u1"}).json()
        assert body["target_source"] == "explicit"
        calls = next(g for g in body["goals"] if g["metric"] == "calls_made")
        assert calls["progress"] == 100
        assert calls["complete"] is True

    def test_annual_progress_tracks_deals_and_income(self, client):
        client.put(
            "/goals/annual?user_id=u1",
            json={"year": 2026, "annual_income_goal": 80000, "average_commission_per_deal": 10000},
        )
        client.put("/metrics/2026-02-10?user_id=u1", json={"closed_deals": 1, "volume_closed": 15000})
        client.put("/metrics/2026-03-05?user_id=u1", json={"closed_deals": 1, "volume_closed": 5000})

        body = client.get("/goals/annual-progress", params={"user_id": "u1", "year": 2026}).json()
        assert body["deals"] == {"current": 2, "goal": 8, "remaining": 6, "progress": 25.0}
        assert body["income"]["current"] == 20000
        assert body["income"]["progress"] == 25.0

    def test_annual_progress_without_goal(self, client):
        r = client.get("/goals/annual-progress", params={"user_id": "u1", "year": 2026})
        assert r.status_code == 404

    def test_progress_without_any_targets(self, client):
        body = client.get("/goals/progress", params={"user_id": "nobody"}).json()
        assert body["target_source"] == "none"
        assert body["goals"] == []


class TestReportRoutes:
    def test_report_data_without_records(self, client):
        body = client.post("/reports/data", json={"user_id": "u1"}).json()
        assert body["has_data"] is False

    def test_pdf_download(self, client):
        client.put(f"/metrics/{_today()}?user_id=u1", json={"calls_made": 10, "contacts_reached": 3})

        r = client.post("/reports/pdf", json={"user_id": "u1", "timeframe": "month"})
        assert r.status_code == 200
        assert r.headers["content-type"] == "application/pdf"
        assert f"performance-report-month-{_today()}.pdf" in r.headers["content-disposition"]
        assert r.content.startswith(b"%PDF")

    def test_pdf_without_records(self, client):
        r = client.post("/reports/pdf", json={"user_id": "u1"})
        assert r.status_code == 404
        assert r.json()["has_data"] is False

    def test_email_single_user(self, client, session, mailer):
        session.add(EmailPreference(user_id="u1", email="a@example.com"))
        session.commit()
        client.put(f"/metrics/{_today()}?user_id=u1", json={"calls_made": 10})

        body = client.post("/reports/email", json={"user_id": "u1"}).json()
        assert body["successful"] == 1
        assert mailer.calls[0]["to"] == "a@example.com"
        assert session.exec(select(EmailLog)).one().status == "sent"

    def test_email_unknown_user(self, client):
        r = client.post("/reports/email", json={"user_id": "ghost"})
        assert r.status_code == 404


class TestContactRoutes:
    def test_create_then_delete_round_trips_metrics(self, client, session):
        payload = {
            "first_name": "Grace",
            "last_name": "Hopper",
            "contact_type": "seller",
            "contract_date": "2026-03-05",
        }
        created = client.post("/contacts?user_id=u1", json=payload)
        assert created.status_code == 201
        contact_id = created.json()["id"]

        day = session.exec(select(DailyMetric)).one()
        assert day.listings_taken == 1

        r = client.delete(f"/contacts/{contact_id}?user_id=u1")
        assert r.status_code == 200
        assert r.json()["metrics_adjusted"] is True
        session.expire_all()
        assert session.exec(select(DailyMetric)).one().listings_taken == 0

    def test_unpadded_closed_date_counts_in_range(self, client, session):
        created = client.post(
            "/contacts?user_id=u1",
            json={"first_name": "Ada", "last_name": "Lovelace", "closed_date": "2026-3-5"},
        )
        assert created.json()["closed_date"] == "2026-03-05"
        assert session.exec(select(DailyMetric)).one().date == "2026-03-05"

        body = client.get(
            "/metrics/summary",
            params={"user_id": "u1", "start_date": "2026-03-01", "end_date": "2026-03-31"},
        ).json()
        assert body["totals"]["closed_deals"] == 1

    def test_missing_name_rejected(self, client):
        r = client.post("/contacts?user_id=u1", json={"first_name": "", "last_name": "X"})
        assert r.status_code == 422

    def test_other_users_contact_is_not_found(self, client):
        created = client.post("/contacts?user_id=u1", json={"first_name": "A", "last_name": "B"})
        r = client.delete(f"/contacts/{created.json()['id']}?user_id=u2")
        assert r.status_code == 404

    def test_interactions(self, client):
        contact_id = client.post(
            "/contacts?user_id=u1", json={"first_name": "A", "last_name": "B"}
        ).json()["id"]
        r = client.post(
            f"/contacts/{contact_id}/interactions?user_id=u1",
            json={"interaction_type": "call", "subject": "Intro"},
        )
        assert r.status_code == 201

        body = client.get(f"/contacts/{contact_id}/interactions?user_id=u1").json()
        assert body["count"] == 1
        assert body["interactions"][0]["subject"] == "Intro"

    def test_csv_upload(self, client):
        csv_body = "First Name,Last Name\nAda,Lovelace\n"
        r = client.post(
            "/contacts/import?user_id=u1",
            files={"file": ("contacts.csv", csv_body.encode(), "text/csv")},
        )
        assert r.status_code == 200
        assert r.json()["success"] == 1


def test_health(client):
    assert client.get("/health").json()["status"] == "healthy"
