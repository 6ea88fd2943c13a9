"""
Portfolio summary.

Aggregates clients into band and review-status distributions and
picks out the reviews that need attention, for the dashboard.
"""

from __future__ import annotations

from collections import Counter
from datetime import datetime

from riskdesk.config import PRIORITY_REVIEW_LIMIT
from riskdesk.schemas import (
    BandDistribution,
    Client,
    DashboardSummary,
    ReviewStatus,
    RiskBand,
    StatusDistribution,
)
from riskdesk.services.client_registry import to_view


def summarize(clients: list[Client], now: datetime) -> DashboardSummary:
    """
    Build the dashboard summary as seen at *now*.

    Priority reviews are the first ``PRIORITY_REVIEW_LIMIT`` clients not in
    ``OK`` status, soonest (or most overdue) first. The attention and
    overdue counts still cover every client.
    """
    views = [to_view(client, now) for client in clients]

    band_counts: Counter[str] = Counter(v.band.value for v in views)
    status_counts: Counter[str] = Counter(v.status.value for v in views)

    priority = sorted(
        (v for v in views if v.status != ReviewStatus.OK),
        key=lambda v: v.next_review,
    )[:PRIORITY_REVIEW_LIMIT]

    return DashboardSummary(
        total_clients=len(views),
        high_risk_clients=band_counts[RiskBand.RED.value],
        attention_required=status_counts[ReviewStatus.DUE_SOON.value] + status_counts[ReviewStatus.OVERDUE.value],
        overdue=status_counts[ReviewStatus.OVERDUE.value],
        band_distribution=BandDistribution(**band_counts),
        status_distribution=StatusDistribution(**status_counts),
        priority_reviews=priority,
    )
