"""
Analytics page rendering.
"""

from __future__ import annotations

import streamlit as st

from core.analytics import SCOPE_LABELS, build_review_dashboard
from core.analytics.types import AnalyticsScope


SCOPE_ORDER: list[AnalyticsScope] = ["all", "self_assess", "test"]
SCOPE_LABEL_TO_KEY: dict[str, AnalyticsScope] = {
    SCOPE_LABELS[scope]: scope
    for scope in SCOPE_ORDER
}


@st.cache_data(show_spinner=False)
def _cached_dashboard(user_id: str, scope: str):
    return build_review_dashboard(user_id=user_id, scope=scope)


def render_analytics_page(user_options: dict[str, str]) -> None:
    del user_options  # reserved for future sign-in integration

    st.subheader("Review Analytics")
    st.caption(f"User: {st.session_state.user_label} ({st.session_state.user_id})")

    labels = [SCOPE_LABELS[scope] for scope in SCOPE_ORDER]
    selected_label = st.radio("Reviews", labels, horizontal=True)
    selected_scope = SCOPE_LABEL_TO_KEY[selected_label]

    if st.button("Refresh Analytics", use_container_width=False):
        _cached_dashboard.clear()
        st.rerun()

    dashboard = _cached_dashboard(st.session_state.user_id, selected_scope)
    stats = dashboard.stats

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Words", f"{stats.total:,}")
    col2.metric("Due now", f"{stats.due_today:,}")
    col3.metric("Reviews", f"{dashboard.total_reviews:,}")
    col4.metric("Retention", f"{dashboard.overall_retention:.0%}", help="Share of ratings other than Again")

    st.caption(
        f"New {stats.new} · Learning {stats.learning} · Review {stats.review} · Relearning {stats.relearning}"
    )

    st.markdown("### Reviews per Day")
    if dashboard.daily_reviews.empty:
        st.info("No reviews yet.")
        return

    st.bar_chart(dashboard.daily_reviews.rename("reviews").to_frame())

    col_left, col_right = st.columns(2)
    with col_left:
        st.caption("Daily retention")
        st.line_chart(dashboard.daily_retention.rename("retention").to_frame())
    with col_right:
        st.caption("Rating distribution")
        st.bar_chart(dashboard.rating_distribution.rename("count").to_frame())

    st.markdown("### Studied Words Over Time")
    st.line_chart(dashboard.studied_cumulative_daily.rename("studied_cumulative").to_frame())

    st.markdown("### Study Time")
    st.caption("Daily session span (hours)")
    st.bar_chart(dashboard.study_span_daily_hours.rename("daily_hours").to_frame())
