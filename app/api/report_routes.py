"""Daily Numbers — Report API Routes."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel
from sqlmodel import Session

from app.database import get_session
from app.analyzer.report_pipeline import build_report_data
from app.connectors.mailer.client import ResendClient
from app.models.report_models import BatchSendResult, ReportDataResponse, Timeframe
from app.reports.email_delivery import RecipientNotFound, send_reports
from app.reports.pdf_renderer import render_pdf, report_filename
from app.core.logging import get_logger

logger = get_logger("api.reports")

router = APIRouter(prefix="/reports", tags=["Reports"])


# ── Request Models ──


class ReportRequest(BaseModel):
    """Request body for POST /reports/data and /reports/pdf."""

    user_id: str
    timeframe: Timeframe = Timeframe.WEEK


class EmailReportRequest(BaseModel):
    """Request body for POST /reports/email."""

    user_id: Optional[str] = None
    """Send to one user. Omit to send to every enabled preference."""
    timeframe: Timeframe = Timeframe.WEEK
    scheduled: bool = False
    """Only users whose weekly_report_day is today."""

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"user_id": "user-123", "timeframe": "week"},
                {"timeframe": "week", "scheduled": True},
            ]
        }
    }


async def get_mailer():
    """Dependency — yields a mail client and closes it afterwards."""
    client = ResendClient()
    try:
        yield client
    finally:
        await client.close()


# ── Endpoints ──


@router.post("/data", response_model=ReportDataResponse)
async def generate_report_data(
    request: ReportRequest,
    session: Session = Depends(get_session),
):
    """Aggregated totals and headline rates, or has_data=false for an empty range."""
    return build_report_data(session, request.user_id, request.timeframe)


@router.post("/pdf")
async def download_report_pdf(
    request: ReportRequest,
    session: Session = Depends(get_session),
):
    """Render the period report as a one-page PDF download."""
    data = build_report_data(session, request.user_id, request.timeframe)
    if not data.has_data or data.report is None:
        return JSONResponse(status_code=404, content=data.model_dump(mode="json"))

    filename = report_filename(request.timeframe)
    return Response(
        content=render_pdf(data.report),
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/email", response_model=BatchSendResult)
async def email_reports(
    request: EmailReportRequest,
    session: Session = Depends(get_session),
    mailer: ResendClient = Depends(get_mailer),
):
    """Email the period report to one user or to every enabled recipient."""
    try:
        return await send_reports(
            session,
            mailer,
            user_id=request.user_id,
            timeframe=request.timeframe,
            scheduled=request.scheduled,
        )
    except RecipientNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Email report send failed: {e}")
        raise HTTPException(status_code=500, detail=f"Email report send failed: {str(e)}")
