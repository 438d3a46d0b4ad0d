"""
Session Statistics UI

Progress metrics for the running session and the completion summary.
"""

import streamlit as st


def render_session_stats() -> bool:
    """
    Render session progress metrics and the quit control.

    Returns:
        True if quit button was clicked, False otherwise
    """
    composer = st.session_state.composer
    if composer is None:
        return False

    progress_col, reviewed_col, accuracy_col, relearn_col, quit_col = st.columns([2, 2, 2, 2, 1])

    with progress_col:
        position, total = composer.progress
        st.metric("Word", f"{position}/{total}")

    with reviewed_col:
        st.metric("Rated", composer.reviewed_count)

    with accuracy_col:
        if composer.reviewed_count:
            st.metric("Recalled", f"{composer.correct_count / composer.reviewed_count:.0%}")

    with relearn_col:
        st.metric("Retest", composer.retest_count)

    with quit_col:
        st.markdown("<br>", unsafe_allow_html=True)
        if st.button("❌", help="End session", use_container_width=True):
            return True

    st.divider()
    return False


def render_session_complete():
    """Summary of the last finished session."""
    summary = st.session_state.last_summary
    if not summary:
        return

    reviewed, correct = summary
    if reviewed == 0:
        return
    st.success(f"🎉 Session complete: {reviewed} ratings, {correct} recalled.")
    st.caption(f"Recall rate {correct / reviewed:.0%}")
