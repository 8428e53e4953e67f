"""Daily Numbers — Resend Mail Client.

Thin async wrapper around the Resend `POST /emails` endpoint. One call is
one delivery attempt; retries live with the report emailer.
"""

from typing import Any, Dict, Optional

import httpx

from app.config import settings
from app.core.logging import get_logger

logger = get_logger("mailer.client")


class MailerError(Exception):
    """Raised when the mail API rejects or fails a send."""

    def __init__(self, message: str, status_code: int = 0):
        self.status_code = status_code
        super().__init__(message)


class ResendClient:
    """Async HTTP client for the Resend email API."""

    def __init__(
        self,
        api_key: str | None = None,
        from_address: str | None = None,
        base_url: str | None = None,
    ):
        self.api_key = api_key or settings.resend_api_key or ""
        self.from_address = from_address or settings.report_from_address
        self.base_url = (base_url or settings.resend_base_url).rstrip("/")
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=30.0)
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def send_email(self, to: str, subject: str, html: str) -> Dict[str, Any]:
        """Send one message; returns the API body (contains `id`)."""
        if not self.api_key:
            raise MailerError("Resend API key not configured")

        client = await self._get_client()
        try:
            resp = await client.post(
                f"{self.base_url}/emails",
                headers={"Authorization": f"Bearer {self.api_key}"},
                json={
                    "from": self.from_address,
                    "to": [to],
                    "subject": subject,
                    "html": html,
                },
            )
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPStatusError as e:
            body = (
                e.response.json()
                if e.response.headers.get("content-type", "").startswith(
                    "application/json"
                )
                else {}
            )
            error_msg = body.get("message", str(e))
            raise MailerError(error_msg, e.response.status_code) from e
        except httpx.RequestError as e:
            raise MailerError(f"Connection failed: {e}") from e
