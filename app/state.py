"""
Streamlit session state and shared resource helpers.
"""

from __future__ import annotations

import streamlit as st

from core import fsrs
from core.session_flow import RatingSubmitter


def init_database() -> None:
    """
    Initialize database schema (cached per Streamlit process).
    """
    @st.cache_resource
    def _init_database() -> None:
        fsrs.init_db()

    _init_database()


@st.cache_resource
def get_submitter() -> RatingSubmitter:
    """Process-wide rating submitter (worker pool + outbox)."""
    return RatingSubmitter()


def ensure_session_state(user_options: dict[str, str]) -> None:
    """
    Populate Streamlit session_state with defaults.
    """
    if "user_id" not in st.session_state:
        default_user_id = fsrs.get_default_user_id()
        st.session_state.user_id = default_user_id
        st.session_state.user_label = next(
            (label for label, uid in user_options.items() if uid == default_user_id),
            default_user_id
        )
    if "composer" not in st.session_state:
        st.session_state.composer = None
    if "last_summary" not in st.session_state:
        st.session_state.last_summary = None
    if "word_cache" not in st.session_state:
        st.session_state.word_cache = {}
