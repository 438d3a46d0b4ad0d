"""
Rating Button UI

Renders the four-point self-assessment scale.
"""

from typing import Optional

import streamlit as st

from core.fsrs.constants import Rating


RATING_LABELS = {
    Rating.AGAIN: "❌ Again",
    Rating.HARD: "😰 Hard",
    Rating.GOOD: "👍 Good",
    Rating.EASY: "✨ Easy",
}


def render_rating_buttons(key_suffix: str = "") -> Optional[Rating]:
    """
    Render rating buttons.

    Returns:
        Rating selected by user, or None if no button clicked
    """
    st.markdown("**How well did you remember this word?**")

    columns = st.columns(len(RATING_LABELS))
    for column, (rating, label) in zip(columns, RATING_LABELS.items()):
        with column:
            if st.button(label, key=f"rate_{rating.value}_{key_suffix}", use_container_width=True):
                return rating
    return None
