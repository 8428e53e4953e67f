"""Tests for report data, HTML email rendering and the PDF download."""

from datetime import date, datetime, timezone

from app.analyzer.report_pipeline import (
    NO_DATA_MESSAGE,
    build_report_data,
    resolve_range,
)
from app.models.report_models import MetricTotals, ReportData, Timeframe
from app.reports.formatting import (
    conversion_rows,
    date_range_label,
    format_currency,
    metric_cards,
)
from app.reports.html_renderer import email_subject, render_email_html
from app.reports.pdf_renderer import render_pdf, report_filename

TODAY = date(2026, 3, 10)


def _report(**totals) -> ReportData:
    return ReportData(
        start_date="2026-03-03",
        end_date="2026-03-10",
        timeframe=Timeframe.WEEK,
        totals=MetricTotals(**totals),
        contact_rate=27.8,
        appt_rate=40.0,
    )


class TestResolveRange:
    def test_week(self):
        assert resolve_range(Timeframe.WEEK, TODAY) == ("2026-03-03", "2026-03-10")

    def test_month(self):
        assert resolve_range(Timeframe.MONTH, TODAY) == ("2026-02-08", "2026-03-10")


class TestBuildReportData:
    def test_no_records_is_no_data(self, session):
        result = build_report_data(session, "u1", Timeframe.WEEK, TODAY)
        assert result.has_data is False
        assert result.report is None
        assert result.error == NO_DATA_MESSAGE

    def test_records_outside_range_do_not_count(self, session, make_metric):
        make_metric("u1", "2026-03-02", calls_made=10)
        result = build_report_data(session, "u1", Timeframe.WEEK, TODAY)
        assert result.has_data is False

    def test_totals_and_rates(self, session, make_metric):
        make_metric("u1", "2026-03-04", calls_made=10, contacts_reached=3, appointments_set=1)
        make_metric("u1", "2026-03-10", calls_made=8, contacts_reached=2, appointments_set=1)

        result = build_report_data(session, "u1", Timeframe.WEEK, TODAY)
        assert result.has_data
        assert result.report.totals.calls_made == 18
        assert result.report.contact_rate == 27.8
        assert result.report.appt_rate == 40.0
        assert result.report.start_date == "2026-03-03"


class TestFormatting:
    def test_currency(self):
        assert format_currency(1250000) == "$1,250,000"
        assert format_currency(1234.5) == "$1,234.50"

    def test_eight_cards_in_order(self):
        cards = metric_cards(_report(calls_made=18, volume_closed=450000))
        assert len(cards) == 8
        assert cards[0] == ("Calls Made", "18")
        assert cards[-1] == ("Volume Closed", "$450,000")


class TestHtmlRenderer:
    def test_contains_numbers_range_and_rates(self):
        html = render_email_html(_report(calls_made=18, contacts_reached=5, volume_closed=450000))

        assert "Weekly Performance Report" in html
        assert "3/3/2026 - 3/10/2026" in html
        assert '<div class="metric-value">18</div>' in html
        assert "$450,000" in html
        assert "27.8%" in html
        assert "40.0%" in html
        assert "Keep up the great work!" in html

    def test_monthly_subject(self):
        report = _report().model_copy(update={"timeframe": Timeframe.MONTH})
        assert email_subject(report) == "Your Monthly Real Estate Performance Report"


class TestPdfRenderer:
    def test_returns_pdf_bytes(self):
        pdf = render_pdf(
            _report(calls_made=18, volume_closed=450000),
            generated_at=datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc),
        )
        assert pdf.startswith(b"%PDF")
        assert len(pdf) > 1000

    def test_filename(self):
        assert report_filename(Timeframe.WEEK, TODAY) == "performance-report-week-2026-03-10.pdf"
        assert report_filename(Timeframe.MONTH, TODAY) == "performance-report-month-2026-03-10.pdf"

    def test_shows_the_same_numbers_as_the_email(self):
        report = _report(
            calls_made=18,
            contacts_reached=5,
            appointments_set=2,
            closed_deals=1,
            volume_closed=450000,
        )
        html = render_email_html(report)
        pdf = render_pdf(
            report,
            generated_at=datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc),
            compress=False,
        )

        values = [v for _, v in metric_cards(report) + conversion_rows(report)]
        values.append(date_range_label(report))
        for value in values:
            assert value in html
            assert f"({value})".encode("latin-1") in pdf, value
