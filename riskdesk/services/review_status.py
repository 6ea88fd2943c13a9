"""
Review status derivation.

Translates a stored next-review date into an operational status
relative to a caller-supplied "now". Status is never persisted.
"""

from __future__ import annotations

from datetime import datetime

from riskdesk.config import DUE_SOON_WINDOW
from riskdesk.schemas import ReviewStatus
from riskdesk.utils.dates import add_months


def derive(next_review: datetime, now: datetime) -> ReviewStatus:
    """Return the review status of *next_review* as seen at *now*."""
    if now > next_review:
        return ReviewStatus.OVERDUE
    if next_review - now <= DUE_SOON_WINDOW:
        return ReviewStatus.DUE_SOON
    return ReviewStatus.OK


def next_review_date(start: datetime, months: int) -> datetime:
    """Schedule the next review *months* calendar months after *start*."""
    return add_months(start, months)
