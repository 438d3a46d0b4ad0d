"""
Vocabulary Trainer - Main App

Streamlit study client for the FSRS-lite review scheduler.
"""

import logging

import streamlit as st

from app.router import PAGES
from app.session_controller import end_session
from app.state import ensure_session_state, init_database
from app.ui import render_session_stats


logging.basicConfig(level=logging.INFO)


# ---- User Configuration ----

USER_OPTIONS = {
    "Demo": "demo",
    "Test": "test",
}


# ---- Page Setup ----

st.set_page_config(
    page_title="Vocabulary Trainer",
    page_icon="📚",
    layout="centered"
)

init_database()
ensure_session_state(USER_OPTIONS)


# ---- Main App ----

def main():
    """Main app entry point."""
    # Session stats and quit button
    if render_session_stats():
        end_session()
        st.rerun()

    tabs = st.tabs([page.title for page in PAGES])
    for tab, page in zip(tabs, PAGES):
        with tab:
            page.render(USER_OPTIONS)


if __name__ == "__main__":
    main()
