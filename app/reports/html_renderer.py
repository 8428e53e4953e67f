"""Daily Numbers — HTML email report."""

from app.models.report_models import ReportData
from app.reports.formatting import (
    SIGN_OFF,
    conversion_rows,
    date_range_label,
    metric_cards,
    report_title,
)

_STYLE = """
    body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, 'Helvetica Neue', Arial, sans-serif; background-color: #f5f5f5; margin: 0; padding: 20px; }
    .container { max-width: 600px; margin: 0 auto; background-color: white; border-radius: 8px; overflow: hidden; box-shadow: 0 2px 8px rgba(0,0,0,0.1); }
    .header { background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); color: white; padding: 30px 20px; text-align: center; }
    .header h1 { margin: 0; font-size: 24px; }
    .header p { margin: 10px 0 0 0; opacity: 0.9; }
    .content { padding: 30px 20px; }
    .metric-grid { display: grid; grid-template-columns: repeat(2, 1fr); gap: 15px; margin-bottom: 25px; }
    .metric-card { background: #f8f9fa; border-radius: 8px; padding: 15px; text-align: center; }
    .metric-value { font-size: 28px; font-weight: bold; color: #333; margin: 5px 0; }
    .metric-label { font-size: 12px; color: #666; text-transform: uppercase; letter-spacing: 0.5px; }
    .section-title { font-size: 18px; font-weight: 600; color: #333; margin: 25px 0 15px 0; }
    .conversion-row { display: flex; justify-content: space-between; align-items: center; padding: 12px; background: #f8f9fa; border-radius: 6px; margin-bottom: 10px; }
    .conversion-label { color: #666; font-size: 14px; }
    .conversion-value { font-weight: 600; color: #667eea; font-size: 16px; }
    .footer { background: #f8f9fa; padding: 20px; text-align: center; color: #666; font-size: 12px; }
"""


def email_subject(report: ReportData) -> str:
    return f"Your {report.timeframe.label} Real Estate Performance Report"


def render_email_html(report: ReportData) -> str:
    """Build the report email body."""
    cards = "".join(
        f"""
        <div class="metric-card">
          <div class="metric-label">{label}</div>
          <div class="metric-value">{value}</div>
        </div>"""
        for label, value in metric_cards(report)
    )
    conversions = "".join(
        f"""
      <div class="conversion-row">
        <span class="conversion-label">{label}</span>
        <span class="conversion-value">{value}</span>
      </div>"""
        for label, value in conversion_rows(report)
    )

    return f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Your {report.timeframe.label} Real Estate Report</title>
  <style>{_STYLE}</style>
</head>
<body>
  <div class="container">
    <div class="header">
      <h1>Your {report_title(report)}</h1>
      <p>{date_range_label(report)}</p>
    </div>
    <div class="content">
      <div class="metric-grid">{cards}
      </div>
      <h2 class="section-title">Conversion Rates</h2>{conversions}
    </div>
    <div class="footer">
      <p>{SIGN_OFF}</p>
    </div>
  </div>
</body>
</html>"""
