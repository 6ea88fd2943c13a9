"""
Configuration module for the riskdesk compliance service.

Centralizes the bootstrap risk ruleset (weights, thresholds,
high-risk lists, review intervals), review scheduling constants,
document upload limits, and environment-driven process settings.
"""

from __future__ import annotations

from datetime import timedelta
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from riskdesk.schemas import (
    RiskBand,
    RiskConfig,
    RiskThresholds,
    RiskWeights,
)

# ---------------------------------------------------------------------------
# Risk weights – points added when a rule fires
# ---------------------------------------------------------------------------
DEFAULT_WEIGHTS: dict[str, int] = {
    "pep": 30,
    "high_risk_country": 20,
    "high_risk_industry": 20,
    "cash_intensive_job": 10,
}

# ---------------------------------------------------------------------------
# Band thresholds (lower bound inclusive)
# ---------------------------------------------------------------------------
DEFAULT_THRESHOLDS: dict[str, int] = {
    "medium": 25,
    "high": 45,
}

# ---------------------------------------------------------------------------
# Seed lists
# ---------------------------------------------------------------------------
HIGH_RISK_COUNTRIES: list[str] = [
    "Iran",
    "North Korea",
    "Syria",
    "Cuba",
    "Russia",
    "Afghanistan",
]

HIGH_RISK_INDUSTRIES: list[str] = [
    "Cryptocurrency",
    "Gambling",
    "Arms Dealer",
    "Precious Metals",
    "Casino",
]

# Matched as case-insensitive substrings of the client's job title
CASH_INTENSIVE_JOBS: list[str] = [
    "Taxi Driver",
    "Waiter",
    "Construction Worker",
    "Street Vendor",
]

# ---------------------------------------------------------------------------
# Review scheduling
# ---------------------------------------------------------------------------
REVIEW_MONTHS: dict[RiskBand, int] = {
    RiskBand.RED: 6,
    RiskBand.YELLOW: 12,
    RiskBand.GREEN: 24,
}

# A review falling within this window (inclusive) is DUE_SOON
DUE_SOON_WINDOW: timedelta = timedelta(days=30)

# Dashboard shows at most this many pending reviews
PRIORITY_REVIEW_LIMIT: int = 5

DEFAULT_RISK_CONFIG: RiskConfig = RiskConfig(
    weights=RiskWeights(**DEFAULT_WEIGHTS),
    thresholds=RiskThresholds(**DEFAULT_THRESHOLDS),
    high_risk_countries=HIGH_RISK_COUNTRIES,
    high_risk_industries=HIGH_RISK_INDUSTRIES,
    cash_intensive_jobs=CASH_INTENSIVE_JOBS,
    review_months=REVIEW_MONTHS,
)

# ---------------------------------------------------------------------------
# Supporting documents
# ---------------------------------------------------------------------------
ALLOWED_DOCUMENT_TYPES: set[str] = {
    "application/pdf",
    "image/jpeg",
    "image/jpg",
    "image/png",
}

ALLOWED_DOCUMENT_EXTENSIONS: set[str] = {".pdf", ".jpg", ".jpeg", ".png"}


# ---------------------------------------------------------------------------
# Process settings (environment, prefix RISKDESK_)
# ---------------------------------------------------------------------------
class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="RISKDESK_", env_file=".env", extra="ignore")

    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)
    upload_dir: str = Field(default="uploads")
    max_upload_mb: int = Field(default=15, gt=0)
    log_level: str = Field(default="INFO")
    cors_origins: str = Field(default="*")

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        valid_levels = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}
        level = (value or "INFO").upper()
        if level not in valid_levels:
            raise ValueError(f"log_level must be one of {sorted(valid_levels)}")
        return level

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache()
def get_settings() -> Settings:
    return Settings()
