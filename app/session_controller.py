"""
Session lifecycle helpers for Streamlit app.

The active SessionComposer lives in st.session_state.composer; every UI
action is forwarded to it and the page reruns.
"""

from __future__ import annotations

import logging
from typing import Optional

import streamlit as st

from app.state import get_submitter
from core import fsrs, lexicon_repo
from core.errors import SchedulerError
from core.fsrs.constants import Rating, SESSION_LIMIT_DEFAULT
from core.schemas import WordEntry
from core.session_builders import QuizOptionsCache, create_review_session
from core.session_flow import SessionComposer, SessionFlow, SessionWord, StageMode

logger = logging.getLogger(__name__)


def _activate(composer: SessionComposer) -> None:
    if composer.is_empty_at_start:
        if composer.options_cache is not None:
            composer.options_cache.close()
        st.info("Nothing to study right now.")
        return
    st.session_state.composer = composer
    st.session_state.last_summary = None


def start_review_session(limit: int = SESSION_LIMIT_DEFAULT) -> None:
    """
    Start a review session over the user's due words.
    """
    try:
        payload = create_review_session(st.session_state.user_id, limit=limit)
    except SchedulerError as exc:
        st.error(f"Error creating session: {exc.message}")
        return

    composer = SessionComposer.from_payload(
        st.session_state.user_id,
        SessionFlow.REVIEW,
        payload,
        get_submitter(),
        hint_lookup=lexicon_repo.get_mnemonic_hint,
    )
    _activate(composer)


def start_learn_session(word_list_id: int, limit: int = SESSION_LIMIT_DEFAULT) -> None:
    """
    Start a learn session over the new words of one list.

    Quiz options are fetched per word through a prefetching cache. The
    session encodes each word, tests it one word later and finishes with a
    consolidation pass over the words rated hard or again.
    """
    try:
        records = fsrs.get_learn_queue(st.session_state.user_id, word_list_id, limit=limit)
    except SchedulerError as exc:
        st.error(f"Error creating session: {exc.message}")
        return

    entries = lexicon_repo.get_words_by_ids([r.word_id for r in records])
    words = [
        SessionWord(id=r.word_id, word=entries[r.word_id].word)
        for r in records
        if r.word_id in entries
    ]
    composer = SessionComposer(
        st.session_state.user_id,
        SessionFlow.LEARN,
        words,
        get_submitter(),
        options_cache=QuizOptionsCache(),
        hint_lookup=lexicon_repo.get_mnemonic_hint,
        batch_size=limit,
    )
    _activate(composer)


def get_word_entry(word_id: int) -> Optional[WordEntry]:
    """Lexicon entry for a word, cached for the Streamlit session."""
    cache = st.session_state.word_cache
    if word_id not in cache:
        cache[word_id] = lexicon_repo.get_word_by_id(word_id)
    return cache[word_id]


def choose_path(path: StageMode) -> None:
    st.session_state.composer.choose_path(path)
    _after_action()


def rate(rating: Rating) -> None:
    st.session_state.composer.rate(rating)
    _after_action()


def answer(choice: str) -> None:
    st.session_state.composer.answer(choice)
    _after_action()


def continue_from_review_stage() -> None:
    st.session_state.composer.continue_from_review_stage()
    _after_action()


def defer_current() -> None:
    st.session_state.composer.defer()
    _after_action()


def continue_from_break() -> None:
    st.session_state.composer.continue_from_break()
    _after_action()


def _after_action() -> None:
    if st.session_state.composer.is_complete:
        end_session()
    st.rerun()


def end_session() -> None:
    """
    End the current session and retry any parked ratings.
    """
    composer: Optional[SessionComposer] = st.session_state.composer
    if composer is not None:
        st.session_state.last_summary = (composer.reviewed_count, composer.correct_count)
        if composer.options_cache is not None:
            composer.options_cache.close()

    submitter = get_submitter()
    if submitter.outbox:
        written = submitter.flush_outbox()
        logger.info("Wrote %d parked ratings at session end", written)

    st.session_state.composer = None
