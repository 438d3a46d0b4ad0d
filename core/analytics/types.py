"""
Types for analytics dashboards.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

import pandas as pd

from core.fsrs.memory_state import ReviewStats


AnalyticsScope = Literal["all", "self_assess", "test"]


@dataclass(frozen=True)
class ReviewDashboardData:
    """
    Precomputed metrics and series for the review analytics page.
    """
    scope: AnalyticsScope
    label: str
    stats: ReviewStats
    studied_unique: int
    total_reviews: int
    overall_retention: float
    daily_reviews: pd.Series
    daily_retention: pd.Series
    rating_distribution: pd.Series
    studied_cumulative_daily: pd.Series
    study_span_daily_hours: pd.Series
