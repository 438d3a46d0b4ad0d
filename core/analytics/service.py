"""
Service layer to assemble the review analytics dashboard.
"""

from __future__ import annotations

from core import fsrs
from core.analytics.constants import SCOPE_LABELS, SCOPE_SOURCES
from core.analytics.metrics import (
    build_day_index,
    compute_daily_retention,
    compute_daily_reviews,
    compute_overall_retention,
    compute_rating_distribution,
    compute_session_span_daily_hours,
    compute_studied_cumulative,
    compute_studied_unique,
)
from core.analytics.queries import load_review_events_df
from core.analytics.types import AnalyticsScope, ReviewDashboardData


def build_review_dashboard(user_id: str, scope: AnalyticsScope = "all") -> ReviewDashboardData:
    """
    Build all KPI values and series needed by the analytics page.

    Args:
        user_id: User identifier for scoping review data
        scope: Which review sources to include ("all", "self_assess", "test")
    """
    events_df = load_review_events_df(user_id, sources=SCOPE_SOURCES[scope])
    day_index = build_day_index(events_df)

    return ReviewDashboardData(
        scope=scope,
        label=SCOPE_LABELS[scope],
        stats=fsrs.get_stats(user_id),
        studied_unique=compute_studied_unique(events_df),
        total_reviews=int(len(events_df)),
        overall_retention=compute_overall_retention(events_df),
        daily_reviews=compute_daily_reviews(events_df, day_index),
        daily_retention=compute_daily_retention(events_df, day_index),
        rating_distribution=compute_rating_distribution(events_df),
        studied_cumulative_daily=compute_studied_cumulative(events_df, day_index),
        study_span_daily_hours=compute_session_span_daily_hours(events_df, day_index),
    )
