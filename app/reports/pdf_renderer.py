"""Daily Numbers — One-page PDF report (reportlab canvas)."""

import io
from datetime import date, datetime, timezone
from typing import Optional

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from app.models.report_models import ReportData, Timeframe
from app.reports.formatting import (
    SIGN_OFF,
    conversion_rows,
    date_range_label,
    metric_cards,
    report_title,
)

# Brand colors
BRAND_PRIMARY = colors.HexColor("#667eea")
BRAND_DARK = colors.HexColor("#333333")
BRAND_MUTED = colors.HexColor("#666666")
BRAND_LIGHT = colors.HexColor("#f8f9fa")

PAGE_WIDTH, PAGE_HEIGHT = A4


def report_filename(timeframe: Timeframe, on: Optional[date] = None) -> str:
    """performance-report-<timeframe>-<isoDate>.pdf"""
    on = on or datetime.now(timezone.utc).date()
    return f"performance-report-{timeframe.value}-{on.isoformat()}.pdf"


def _y(top_mm: float) -> float:
    """Convert a distance from the top edge (mm) to a canvas y coordinate."""
    return PAGE_HEIGHT - top_mm * mm


def render_pdf(
    report: ReportData,
    generated_at: Optional[datetime] = None,
    compress: bool = True,
) -> bytes:
    """Lay out the report on a single A4 page and return the PDF bytes.

    compress=False leaves the page content stream as plain text.
    """
    generated_at = generated_at or datetime.now(timezone.utc)
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=A4, pageCompression=1 if compress else 0)
    c.setTitle(report_title(report))
    center = PAGE_WIDTH / 2

    # Header band
    c.setFillColor(BRAND_PRIMARY)
    c.rect(0, _y(45), PAGE_WIDTH, 45 * mm, stroke=0, fill=1)
    c.setFillColor(colors.white)
    c.setFont("Helvetica-Bold", 24)
    c.drawCentredString(center, _y(20), report_title(report))
    c.setFont("Helvetica", 12)
    c.drawCentredString(center, _y(32), date_range_label(report))

    # Metric cards, two columns
    c.setFillColor(BRAND_DARK)
    c.setFont("Helvetica-Bold", 16)
    c.drawString(20 * mm, _y(60), "Activity Metrics")

    top = 70
    for index, (label, value) in enumerate(metric_cards(report)):
        col, row = index % 2, index // 2
        x = (20 + col * 95) * mm
        card_top = top + row * 25

        c.setFillColor(BRAND_LIGHT)
        c.roundRect(x, _y(card_top + 20), 85 * mm, 20 * mm, 3 * mm, stroke=0, fill=1)
        c.setFillColor(BRAND_MUTED)
        c.setFont("Helvetica", 9)
        c.drawCentredString(x + 42.5 * mm, _y(card_top + 7), label.upper())
        c.setFillColor(BRAND_DARK)
        c.setFont("Helvetica-Bold", 14)
        c.drawCentredString(x + 42.5 * mm, _y(card_top + 16), value)

    # Conversion rates
    top = 180
    c.setFillColor(BRAND_DARK)
    c.setFont("Helvetica-Bold", 16)
    c.drawString(20 * mm, _y(top), "Conversion Rates")

    for index, (label, value) in enumerate(conversion_rows(report)):
        row_top = top + 10 + index * 18
        c.setFillColor(BRAND_LIGHT)
        c.roundRect(20 * mm, _y(row_top + 15), 170 * mm, 15 * mm, 3 * mm, stroke=0, fill=1)
        c.setFillColor(BRAND_MUTED)
        c.setFont("Helvetica", 10)
        # Helvetica has no arrow glyph
        c.drawString(25 * mm, _y(row_top + 10), label.replace("→", "->"))
        c.setFillColor(BRAND_PRIMARY)
        c.setFont("Helvetica-Bold", 12)
        c.drawRightString(185 * mm, _y(row_top + 10), value)

    # Footer
    c.setFillColor(BRAND_MUTED)
    c.setFont("Helvetica", 10)
    c.drawCentredString(center, _y(280), SIGN_OFF)
    c.setFont("Helvetica", 8)
    c.drawCentredString(
        center, _y(287), f"Generated on {generated_at.strftime('%Y-%m-%d %H:%M UTC')}"
    )

    c.showPage()
    c.save()
    return buf.getvalue()
