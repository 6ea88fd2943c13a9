"""
Calendar helpers for review scheduling.
"""

from __future__ import annotations

import calendar
from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def add_months(moment: datetime, months: int) -> datetime:
    """
    Shift *moment* by *months* calendar months.

    The day is clamped to the last day of the target month, so
    Jan 31 + 1 month lands on Feb 28 (or 29). Time and tzinfo are kept.
    """
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)
