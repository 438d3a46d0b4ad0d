"""
Study page rendering.
"""

from __future__ import annotations

import streamlit as st

from app import session_controller as controller
from app.ui import (
    render_choice_test,
    render_rating_buttons,
    render_session_complete,
    render_word_details,
)
from core import fsrs
from core.fsrs.constants import SESSION_LIMIT_DEFAULT, SESSION_LIMIT_MAX
from core.session_flow import ConsolidationTip, LearningStage, StageMode

STAGE_LABELS = {
    LearningStage.ENCODING: "New word",
    LearningStage.TESTING: "Quick check",
    LearningStage.CONSOLIDATION_ENCODING: "Review the tricky ones",
    LearningStage.CONSOLIDATION_TESTING: "Final check",
}


def render_study_page(user_options: dict[str, str]) -> None:
    """
    Render the study flow (intro or active session).
    """
    if st.session_state.composer is None:
        _render_intro_screen(user_options)
    else:
        _render_active_session()


def _render_intro_screen(user_options: dict[str, str]) -> None:
    st.markdown("<style>.stApp h1 { font-size: 1.6rem; }</style>", unsafe_allow_html=True)
    st.title("📚 Vocabulary Trainer")
    if fsrs.is_test_mode():
        st.warning("⚠️ **TEST MODE** - Using test_vocab_db (set TEST_MODE=false in .env for production)")

    user_labels = list(user_options.keys())
    if user_labels:
        selected_label = st.selectbox(
            "User",
            user_labels,
            index=user_labels.index(st.session_state.user_label)
            if st.session_state.user_label in user_labels
            else 0
        )
        st.session_state.user_label = selected_label
        st.session_state.user_id = user_options[selected_label]
    st.markdown(f"**Welcome {st.session_state.user_label}**")

    render_session_complete()

    stats = fsrs.get_stats(st.session_state.user_id)
    col1, col2, col3 = st.columns(3)
    col1.metric("Due now", stats.due_today)
    col2.metric("New", stats.new)
    col3.metric("Total", stats.total)

    limit = st.slider("Words per session", 1, SESSION_LIMIT_MAX, SESSION_LIMIT_DEFAULT)

    st.markdown("### 🔁 Review")
    st.markdown("Words that are due, most overdue first.")
    if st.button("Start Review", type="primary", use_container_width=True):
        controller.start_review_session(limit=limit)
        st.rerun()

    st.markdown("### ✏️ Learn")
    st.markdown("New words from one list, in the order you collected them.")
    list_id = st.number_input("Word list id", min_value=1, step=1, value=1)
    if st.button("Start Learning", type="secondary", use_container_width=True):
        controller.start_learn_session(int(list_id), limit=limit)
        st.rerun()


def _render_break(composer) -> None:
    st.markdown("## ☕ Short break")
    if composer.consolidation_tip == ConsolidationTip.REENCODE:
        st.markdown(f"{composer.retest_count} words need another look. Take a breath, then go over them once more.")
    else:
        st.markdown("One last check on the tricky words.")
    if st.button("Continue", type="primary", use_container_width=True, key=f"break_{composer.session_id}_{composer.consolidation_tip.value}"):
        controller.continue_from_break()


def _render_active_session() -> None:
    composer = st.session_state.composer
    if composer.on_break:
        _render_break(composer)
        return

    word = composer.current
    stage = composer.stage
    learning_stage = composer.learning_stage
    position = composer.progress[0]
    step = learning_stage.value if learning_stage else "review"
    key_suffix = f"{composer.session_id}_{position}_{step}_{word.id}_{stage.mode.value}"

    st.markdown("<br>", unsafe_allow_html=True)
    if learning_stage in STAGE_LABELS:
        st.caption(STAGE_LABELS[learning_stage])

    if stage.mode == StageMode.IDLE:
        st.markdown(f"## {word.word}")
        col1, col2 = st.columns(2)
        with col1:
            if st.button("I know this - let me rate", use_container_width=True, key=f"self_{key_suffix}"):
                controller.choose_path(StageMode.SELF_ASSESS)
        with col2:
            if st.button("Test me", type="primary", use_container_width=True, key=f"test_{key_suffix}"):
                controller.choose_path(StageMode.TEST)
        if st.button("Later", help="Move this word to the end of the session", key=f"defer_{key_suffix}"):
            controller.defer_current()

    elif stage.mode == StageMode.SELF_ASSESS:
        render_word_details(controller.get_word_entry(word.id))
        st.markdown("<br>", unsafe_allow_html=True)
        rating = render_rating_buttons(key_suffix=key_suffix)
        if rating is not None:
            controller.rate(rating)

    elif stage.mode == StageMode.TEST:
        choice = render_choice_test(
            word.word,
            stage.options,
            stage.hint,
            stage.hint_visible,
            key_suffix=f"{key_suffix}_{stage.test.attempts}",
        )
        if choice is not None:
            controller.answer(choice)

    else:
        render_word_details(controller.get_word_entry(word.id), hint=stage.hint)
        st.markdown("<br>", unsafe_allow_html=True)
        if st.button("Next →", type="primary", use_container_width=True, key=f"next_{key_suffix}"):
            controller.continue_from_review_stage()

    if fsrs.is_test_mode():
        st.caption("TEST MODE - Using test_vocab_db")
