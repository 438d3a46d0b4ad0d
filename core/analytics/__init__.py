"""
Analytics package exports.
"""

from core.analytics.constants import SCOPE_LABELS
from core.analytics.service import build_review_dashboard
from core.analytics.types import AnalyticsScope, ReviewDashboardData

__all__ = [
    "SCOPE_LABELS",
    "build_review_dashboard",
    "AnalyticsScope",
    "ReviewDashboardData",
]
