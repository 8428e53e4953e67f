"""Daily Numbers — Central Configuration via Pydantic Settings."""

import os
from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables / .env file."""

    # ── Database ──
    database_url: str = ""

    # ── Mail (Resend) ──
    resend_api_key: Optional[str] = None
    resend_base_url: str = "https://api.resend.com"
    report_from_address: str = "Real Estate Analyzer <onboarding@resend.dev>"
    mail_max_attempts: int = 3
    mail_retry_base_delay: float = 2.0  # seconds, doubled per attempt

    # ── Goals ──
    working_days_per_year: int = 250  # 5 days/week, 50 weeks/year

    # ── App ──
    log_level: str = "INFO"
    scheduler_enabled: bool = True
    report_hour: int = 7  # Weekly report check runs daily at 7 AM

    @property
    def effective_database_url(self) -> str:
        """Return PostgreSQL URL if set, otherwise fall back to SQLite."""
        if self.database_url:
            return self.database_url
        if os.environ.get("VERCEL"):
            return "sqlite:////tmp/daily_numbers.db"
        return "sqlite:///./daily_numbers.db"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
