"""UI Components for the vocabulary trainer"""

from app.ui.choice_test import render_choice_test
from app.ui.details import render_word_details
from app.ui.rating_buttons import render_rating_buttons
from app.ui.session_stats import render_session_stats, render_session_complete

__all__ = [
    "render_choice_test",
    "render_word_details",
    "render_rating_buttons",
    "render_session_stats",
    "render_session_complete",
]
