"""
Risk scoring engine.

Applies the configured rules to a client profile, accumulating a
weighted score and one explanation per triggered rule, then maps
the score to a risk band and a review interval.
"""

from __future__ import annotations

from riskdesk.config import REVIEW_MONTHS
from riskdesk.schemas import (
    ClientProfile,
    RiskAssessment,
    RiskBand,
    RiskConfig,
    RiskThresholds,
)


def classify(score: int, thresholds: RiskThresholds) -> RiskBand:
    """Return the band for *score*; both thresholds are inclusive lower bounds."""
    if score >= thresholds.high:
        return RiskBand.RED
    if score >= thresholds.medium:
        return RiskBand.YELLOW
    return RiskBand.GREEN


def _matching_job_keyword(job: str, keywords: list[str]) -> str | None:
    job_lower = job.lower()
    for keyword in keywords:
        if keyword.lower() in job_lower:
            return keyword
    return None


def evaluate(profile: ClientProfile, config: RiskConfig) -> RiskAssessment:
    """
    Score *profile* against *config*.

    Rules run in a fixed order (PEP, country, industry, job) and each one
    fires at most once. The config is trusted as given: an inverted
    threshold pair still yields a deterministic band.
    """
    weights = config.weights
    score = 0
    factors: list[str] = []

    if profile.pep:
        score += weights.pep
        factors.append(f"Politically Exposed Person (+{weights.pep})")

    if profile.country in config.high_risk_countries:
        score += weights.high_risk_country
        factors.append(f"High Risk Country: {profile.country} (+{weights.high_risk_country})")

    if profile.industry in config.high_risk_industries:
        score += weights.high_risk_industry
        factors.append(f"High Risk Industry: {profile.industry} (+{weights.high_risk_industry})")

    if _matching_job_keyword(profile.job, config.cash_intensive_jobs) is not None:
        score += weights.cash_intensive_job
        factors.append(f"Cash Intensive Job: {profile.job} (+{weights.cash_intensive_job})")

    band = classify(score, config.thresholds)
    next_review_months = config.review_months.get(band, REVIEW_MONTHS[band])

    return RiskAssessment(
        score=score,
        band=band,
        factors=factors,
        next_review_months=next_review_months,
    )
