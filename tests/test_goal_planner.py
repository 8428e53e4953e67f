"""Tests for the goal planner — deals needed, progress capping and pacing."""

from app.analyzer.goal_planner import (
    DerivedTargets,
    ExplicitTargets,
    daily_goal_progress,
    daily_pace,
    deals_needed,
    deals_progress,
    income_progress,
    progress,
    resolve_target_source,
)
from app.models.report_models import MetricTotals
from app.models.tracker_models import AnnualGoal, DailyTargets


class TestDealsNeeded:
    def test_exact_division(self):
        assert deals_needed(150000, 5000) == 30

    def test_partial_deal_rounds_up(self):
        assert deals_needed(150001, 5000) == 31

    def test_zero_commission(self):
        assert deals_needed(150000, 0) == 0
        assert deals_needed(0, 0) == 0


class TestProgress:
    def test_capped_at_100(self):
        assert progress(120, 100) == 100

    def test_nothing_done(self):
        assert progress(0, 100) == 0

    def test_zero_target(self):
        assert progress(50, 0) == 0

    def test_partial(self):
        assert progress(25, 100) == 25.0


class TestDailyPace:
    def test_ceiling_division(self):
        assert daily_pace(250, 250) == 1
        assert daily_pace(100, 250) == 1
        assert daily_pace(0, 250) == 0
        assert daily_pace(251, 250) == 2

    def test_uses_configured_working_days(self):
        assert daily_pace(500) == 2


class TestTargetSource:
    def test_explicit_wins_over_annual_goal(self, session):
        session.add(DailyTargets(user_id="u1", calls_made_target=40))
        session.add(
            AnnualGoal(
                user_id="u1",
                year=2026,
                annual_income_goal=150000,
                average_commission_per_deal=5000,
            )
        )
        session.commit()

        source = resolve_target_source(session, "u1", 2026)
        assert isinstance(source, ExplicitTargets)
        assert source.daily_targets()["calls_made"] == 40
        assert "closed_deals" not in source.daily_targets()

    def test_derived_from_annual_goal(self, session):
        session.add(
            AnnualGoal(
                user_id="u1",
                year=2026,
                annual_income_goal=150001,
                average_commission_per_deal=5000,
            )
        )
        session.commit()

        source = resolve_target_source(session, "u1", 2026)
        assert isinstance(source, DerivedTargets)
        assert source.annual_targets == {"closed_deals": 31}
        assert source.daily_targets() == {"closed_deals": 1}

    def test_goal_for_other_year_is_ignored(self, session):
        session.add(AnnualGoal(user_id="u1", year=2025, annual_income_goal=1, average_commission_per_deal=1))
        session.commit()
        assert resolve_target_source(session, "u1", 2026) is None


class TestDailyGoalProgress:
    def test_explicit_targets(self):
        source = ExplicitTargets(targets={"calls_made": 20, "contacts_reached": 5, "buyers_signed": 0})
        goals = daily_goal_progress(MetricTotals(calls_made=10, contacts_reached=9), source)

        by_metric = {g.metric: g for g in goals}
        assert [g.metric for g in goals] == ["calls_made", "contacts_reached", "buyers_signed"]
        assert by_metric["calls_made"].progress == 50.0
        assert not by_metric["calls_made"].complete
        assert by_metric["contacts_reached"].progress == 100
        assert by_metric["contacts_reached"].complete
        assert by_metric["buyers_signed"].progress == 0

    def test_no_source(self):
        assert daily_goal_progress(MetricTotals(calls_made=3), None) == []


class TestIncomeProgress:
    def test_remaining_and_percent(self):
        result = income_progress(50000, 200000)
        assert result.remaining == 150000
        assert result.progress == 25.0

    def test_over_goal(self):
        result = income_progress(250000, 200000)
        assert result.remaining == 0
        assert result.progress == 100


class TestDealsProgress:
    def test_remaining_and_percent(self):
        result = deals_progress(2, 8)
        assert result.remaining == 6
        assert result.progress == 25.0

    def test_over_goal_is_capped(self):
        result = deals_progress(12, 8)
        assert result.remaining == 0
        assert result.progress == 100

    def test_no_deals_needed(self):
        assert deals_progress(3, 0).progress == 0
