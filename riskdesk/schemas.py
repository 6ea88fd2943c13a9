"""
Pydantic models for the risk ruleset, client profiles, assessments,
client and document records, and dashboard responses.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator, model_validator


class RiskBand(str, Enum):
    GREEN = "GREEN"
    YELLOW = "YELLOW"
    RED = "RED"


class ReviewStatus(str, Enum):
    OK = "OK"
    DUE_SOON = "DUE_SOON"
    OVERDUE = "OVERDUE"


# ---------------------------------------------------------------------------
# Risk ruleset
# ---------------------------------------------------------------------------

class RiskWeights(BaseModel):
    pep: int = Field(..., ge=0)
    high_risk_country: int = Field(..., ge=0)
    high_risk_industry: int = Field(..., ge=0)
    cash_intensive_job: int = Field(..., ge=0)


class RiskThresholds(BaseModel):
    medium: int = Field(..., ge=0)
    high: int

    @model_validator(mode="after")
    def _check_ordering(self) -> "RiskThresholds":
        if self.medium >= self.high:
            raise ValueError(
                f"medium threshold ({self.medium}) must be lower than high threshold ({self.high})"
            )
        return self


def _default_review_months() -> dict[RiskBand, int]:
    from riskdesk.config import REVIEW_MONTHS

    return dict(REVIEW_MONTHS)


def _ordered_unique(values: list[str]) -> list[str]:
    """Strip entries and drop duplicates keeping first occurrence; reject blank entries."""
    seen: set[str] = set()
    result: list[str] = []
    for value in values:
        value = value.strip()
        if not value:
            raise ValueError("list entries must be non-empty strings")
        if value not in seen:
            seen.add(value)
            result.append(value)
    return result


class RiskConfig(BaseModel):
    """The operator-editable ruleset consumed by the risk engine."""

    weights: RiskWeights
    thresholds: RiskThresholds
    high_risk_countries: list[str] = Field(default_factory=list)
    high_risk_industries: list[str] = Field(default_factory=list)
    cash_intensive_jobs: list[str] = Field(default_factory=list)
    review_months: dict[RiskBand, int] = Field(default_factory=_default_review_months)
    updated_at: datetime | None = None

    @field_validator("high_risk_countries", "high_risk_industries", "cash_intensive_jobs")
    @classmethod
    def _dedupe_lists(cls, value: list[str]) -> list[str]:
        return _ordered_unique(value)

    @field_validator("review_months")
    @classmethod
    def _check_review_months(cls, value: dict[RiskBand, int]) -> dict[RiskBand, int]:
        missing = [band.value for band in RiskBand if band not in value]
        if missing:
            raise ValueError(f"review_months is missing bands: {', '.join(missing)}")
        for band, months in value.items():
            if months <= 0:
                raise ValueError(f"review_months[{band.value}] must be a positive number of months")
        return value


class RiskConfigUpdate(BaseModel):
    """
    Partial ruleset update.

    Each present key replaces the stored value as a whole: a ``weights``,
    ``thresholds`` or ``review_months`` object must be complete.
    """

    model_config = {"extra": "forbid"}

    weights: RiskWeights | None = None
    thresholds: RiskThresholds | None = None
    high_risk_countries: list[str] | None = None
    high_risk_industries: list[str] | None = None
    cash_intensive_jobs: list[str] | None = None
    review_months: dict[RiskBand, int] | None = None


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------

class ClientProfile(BaseModel):
    pep: bool = False
    country: str = ""
    industry: str = ""
    job: str = ""

    @field_validator("country", "industry", "job", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return "" if value is None else value


class RiskAssessment(BaseModel):
    score: int
    band: RiskBand
    factors: list[str]
    next_review_months: int


# ---------------------------------------------------------------------------
# Clients
# ---------------------------------------------------------------------------

class ClientCreate(BaseModel):
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    dob: str
    address: str = ""
    country: str
    postal_code: str = ""
    job: str
    industry: str
    pep: bool = False

    def profile(self) -> ClientProfile:
        return ClientProfile(pep=self.pep, country=self.country, industry=self.industry, job=self.job)


class ClientUpdate(BaseModel):
    model_config = {"extra": "forbid"}

    first_name: str | None = Field(default=None, min_length=1)
    last_name: str | None = Field(default=None, min_length=1)
    dob: str | None = None
    address: str | None = None
    country: str | None = None
    postal_code: str | None = None
    job: str | None = None
    industry: str | None = None
    pep: bool | None = None


class Client(ClientCreate):
    id: str
    score: int
    band: RiskBand
    factors: list[str] = Field(default_factory=list)
    next_review: datetime
    last_updated: datetime
    created_at: datetime


class ClientView(Client):
    """A client as returned to callers, with the review status derived at read time."""

    status: ReviewStatus


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------

class Document(BaseModel):
    id: str
    client_id: str
    name: str
    size: str
    type: str
    path: str
    upload_date: datetime


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------

class BandDistribution(BaseModel):
    GREEN: int = 0
    YELLOW: int = 0
    RED: int = 0


class StatusDistribution(BaseModel):
    OK: int = 0
    DUE_SOON: int = 0
    OVERDUE: int = 0


class DashboardSummary(BaseModel):
    total_clients: int
    high_risk_clients: int
    attention_required: int
    overdue: int
    band_distribution: BandDistribution
    status_distribution: StatusDistribution
    priority_reviews: list[ClientView]
