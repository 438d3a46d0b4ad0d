"""
Quiz option generation and the per-session options cache.

A quiz for a word is its prompt plus QUIZ_OPTION_COUNT options: the word's
own compressed definition and distractors drawn from adjacent words.
"""

from __future__ import annotations
import logging
import random
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from functools import partial
from typing import Callable, Iterable, Optional

from core import errors, lexicon_repo
from core.fsrs.constants import QUIZ_OPTION_COUNT
from core.schemas import WordEntry
from core.session_builders.quiz_types import QuizOption, QuizOptions, ReviewQuiz

logger = logging.getLogger(__name__)


def _as_option(entry: WordEntry) -> QuizOption:
    return QuizOption(word_id=entry.word_id, word=entry.word, definition=entry.quiz_text())


def _distinct_distractors(entry: WordEntry, candidates: list[WordEntry], count: int) -> list[WordEntry]:
    # Option texts identify the answer, so a distractor may not repeat one
    seen = {entry.quiz_text()}
    picked = []
    for candidate in candidates:
        text = candidate.quiz_text()
        if candidate.word_id == entry.word_id or text in seen:
            continue
        seen.add(text)
        picked.append(candidate)
        if len(picked) == count:
            break
    return picked


def build_quiz(entry: WordEntry, rng: Optional[random.Random] = None) -> ReviewQuiz:
    """
    Build the multiple-choice quiz for one word.

    Args:
        entry: Lexicon entry of the quiz word
        rng: Random source for option order (module random if omitted)

    Distractors whose option text matches the correct text (or another
    distractor) are skipped; extra candidates are requested to cover them.

    Returns:
        ReviewQuiz with shuffled options
    """
    rng = rng or random
    wanted = QUIZ_OPTION_COUNT - 1
    candidates = lexicon_repo.get_distractor_candidates(entry, wanted * 2)
    distractors = _distinct_distractors(entry, candidates, wanted)

    options = [_as_option(entry)] + [_as_option(d) for d in distractors]
    rng.shuffle(options)

    return ReviewQuiz(
        quiz_word_id=entry.word_id,
        prompt=entry.word,
        correct_answer=entry.quiz_text(),
        hint=entry.hint,
        options=options,
    )


def build_quizzes(word_ids: list[int], rng: Optional[random.Random] = None) -> list[ReviewQuiz]:
    """
    Build quizzes for an ordered list of words, preserving order.

    Words with a review record but no lexicon entry are skipped.
    """
    entries = lexicon_repo.get_words_by_ids(word_ids)

    quizzes = []
    for word_id in word_ids:
        entry = entries.get(word_id)
        if entry is None:
            logger.warning("Skipping word %s: no lexicon entry", word_id)
            continue
        quizzes.append(build_quiz(entry, rng))
    return quizzes


def build_quiz_options(word_id: int) -> QuizOptions:
    """
    Build the option texts for a single word.

    Args:
        word_id: Word to quiz

    Returns:
        QuizOptions with 1 correct + distractor texts

    Raises:
        ValidationError: word_id is not a positive integer
        WordNotFound: the word is not in the lexicon
    """
    word_id = errors.require_positive_id(word_id, "word_id")
    entry = lexicon_repo.get_word_by_id(word_id)
    if entry is None:
        raise errors.WordNotFound(word_id)
    return build_quiz(entry).to_quiz_options()


class QuizOptionsCache:
    """
    Session-lifetime cache of quiz options keyed by word id.

    `prefetch` schedules fetches on a worker pool and returns immediately.
    Entries never change once stored. A failed prefetch is logged and
    the word is fetched again on the next `get`.
    """

    def __init__(
        self,
        fetch: Callable[[int], QuizOptions] = build_quiz_options,
        executor: Optional[Executor] = None,
        max_workers: int = 4
    ):
        self._fetch = fetch
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="quiz-options"
        )
        self._entries: dict[int, QuizOptions] = {}
        self._pending: dict[int, Future] = {}
        # Re-entrant: done callbacks may run inline in prefetch()
        self._lock = threading.RLock()

    def __contains__(self, word_id: int) -> bool:
        with self._lock:
            return word_id in self._entries

    def peek(self, word_id: int) -> Optional[QuizOptions]:
        """Return cached options without fetching."""
        with self._lock:
            return self._entries.get(word_id)

    def prefetch(self, word_ids: Iterable[int]) -> list[Future]:
        """
        Start background fetches for words not cached or in flight.

        Returns:
            Futures for the fetches started by this call
        """
        started = []
        with self._lock:
            for word_id in dict.fromkeys(word_ids):
                if not word_id or word_id in self._entries or word_id in self._pending:
                    continue
                future = self._executor.submit(self._fetch, word_id)
                self._pending[word_id] = future
                started.append(future)
                future.add_done_callback(partial(self._on_prefetched, word_id))
        return started

    def _on_prefetched(self, word_id: int, future: Future) -> None:
        with self._lock:
            self._pending.pop(word_id, None)
            if future.cancelled():
                return
            exc = future.exception()
            if exc is not None:
                logger.warning("Prefetch of quiz options for word %s failed: %s", word_id, exc)
                return
            self._entries.setdefault(word_id, future.result())

    def get(self, word_id: int) -> QuizOptions:
        """
        Return options for a word, waiting on an in-flight prefetch or
        fetching synchronously when nothing usable is cached.

        Raises:
            Whatever the fetch function raises on a synchronous fetch
        """
        with self._lock:
            cached = self._entries.get(word_id)
            pending = self._pending.get(word_id)
        if cached is not None:
            return cached

        if pending is not None and not pending.cancelled() and pending.exception() is None:
            options = pending.result()
        else:
            options = self._fetch(word_id)

        with self._lock:
            return self._entries.setdefault(word_id, options)

    def close(self) -> None:
        """Shut down the worker pool if this cache created it."""
        if self._owns_executor:
            self._executor.shutdown(wait=False)
