"""
Learn queue: encode-then-delayed-test flow for new words.

Three queues drive a learn session:
- L: words still to encode (shown with full content, no rating)
- T: encoded words waiting for their test
- P: problem words (tested hard/again) kept for consolidation

A word is not tested right after it is encoded; the previous word's test is
slotted in after the next word's encoding. Once L is empty the remaining T
words are tested (wrap-up), then the problem words get a break, a
re-encoding pass and a final re-test before the summary.
"""

from __future__ import annotations
from enum import Enum
from typing import Optional

from core.fsrs.constants import Rating
from core.fsrs.memory_state import parse_rating
from core.session_flow.queue import SessionWord


class LearningStage(str, Enum):
    ENCODING = "encoding"
    TESTING = "testing"
    CONSOLIDATION_ENCODING = "consolidation_encoding"
    CONSOLIDATION_TESTING = "consolidation_testing"
    BREAK = "break"
    SUMMARY = "summary"


class ConsolidationTip(str, Enum):
    """What the break screen leads into."""
    REENCODE = "reencode"
    RETEST = "retest"


TEST_STAGES = (LearningStage.TESTING, LearningStage.CONSOLIDATION_TESTING)
PROBLEM_RATINGS = (Rating.HARD, Rating.AGAIN)


class LearnQueue:
    """
    L/T/P queue state for one learn session.

    Args:
        words: New words in collection order
        delayed_test: Test each word after the next one is encoded; when
            False every word is tested right after its encoding
    """

    def __init__(self, words: list[SessionWord], delayed_test: bool = True):
        self.delayed_test = delayed_test
        self.reset(words)

    def reset(self, words: list[SessionWord]) -> None:
        self.words: list[SessionWord] = list(words)
        self.learn_queue: list[SessionWord] = list(words)
        self.test_queue: list[SessionWord] = []
        self.problem_queue: list[SessionWord] = []
        self.reencode_queue: list[SessionWord] = []
        self.last_encoded: Optional[SessionWord] = None
        self.tip: Optional[ConsolidationTip] = None
        self.tested_count = 0
        self.ever_had_items = bool(self.words)

        self.stage = LearningStage.ENCODING if self.words else LearningStage.SUMMARY
        self._current: Optional[SessionWord] = self.words[0] if self.words else None

    # ---- State ----

    @property
    def current(self) -> Optional[SessionWord]:
        return self._current

    @property
    def is_complete(self) -> bool:
        return self.ever_had_items and self.stage == LearningStage.SUMMARY

    @property
    def is_empty_at_start(self) -> bool:
        return not self.ever_had_items

    @property
    def progress(self) -> tuple[int, int]:
        """(words through their first test, words in the session)"""
        return self.tested_count, len(self.words)

    @property
    def retest_count(self) -> int:
        return len(self.problem_queue)

    def __len__(self) -> int:
        return len(self.words)

    def needs_test(self, word_id: int) -> bool:
        """True when the current step is a test of this word."""
        return (
            self.stage in TEST_STAGES
            and self._current is not None
            and self._current.id == word_id
        )

    # The whole list is one prefetch window
    batch_start = 0

    def batch_word_ids(self) -> list[int]:
        return [w.id for w in self.words]

    # ---- Transitions ----

    def advance(self, rating: Optional[Rating] = None) -> Optional[SessionWord]:
        """
        Finish the current step and pick the next one.

        Args:
            rating: Rating of a finished test (ignored for encoding steps)

        Returns:
            The next word, or None on a break or the summary
        """
        stage = self.stage
        if stage == LearningStage.ENCODING:
            word = self.learn_queue.pop(0)
            self.test_queue.append(word)
            self.last_encoded = word
        elif stage == LearningStage.TESTING:
            word = self.test_queue.pop(0)
            self.tested_count += 1
            if rating is not None and parse_rating(rating) in PROBLEM_RATINGS:
                self.problem_queue.append(word)
        elif stage == LearningStage.CONSOLIDATION_ENCODING:
            self.reencode_queue.pop(0)
        elif stage == LearningStage.CONSOLIDATION_TESTING:
            # Final rating: problem words are not re-queued again
            self.problem_queue.pop(0)
        else:
            raise RuntimeError(f"cannot advance from {stage.value}")

        self._next_step()
        return self._current

    def continue_from_break(self) -> Optional[SessionWord]:
        """Leave the break screen into re-encoding or re-testing."""
        if self.stage != LearningStage.BREAK:
            raise RuntimeError(f"no break in progress (stage {self.stage.value})")

        tip, self.tip = self.tip, None
        if tip == ConsolidationTip.REENCODE:
            self.reencode_queue = list(self.problem_queue)
            self._show(LearningStage.CONSOLIDATION_ENCODING, self.reencode_queue[0])
        else:
            self._show(LearningStage.CONSOLIDATION_TESTING, self.problem_queue[0])
        return self._current

    def _show(self, stage: LearningStage, word: Optional[SessionWord]) -> None:
        self.stage = stage
        self._current = word

    def _break(self, tip: ConsolidationTip) -> None:
        self.tip = tip
        self._show(LearningStage.BREAK, None)

    def _next_step(self) -> None:
        if self.stage == LearningStage.CONSOLIDATION_ENCODING:
            if self.reencode_queue:
                self._show(LearningStage.CONSOLIDATION_ENCODING, self.reencode_queue[0])
            else:
                self._break(ConsolidationTip.RETEST)
            return

        if self.stage == LearningStage.CONSOLIDATION_TESTING:
            if self.problem_queue:
                self._show(LearningStage.CONSOLIDATION_TESTING, self.problem_queue[0])
            else:
                self._show(LearningStage.SUMMARY, None)
            return

        # Main loop: encode L, slotting in the test of an earlier word
        if self.learn_queue:
            head = self.test_queue[0] if self.test_queue else None
            if head is not None and (not self.delayed_test or head is not self.last_encoded):
                self._show(LearningStage.TESTING, head)
            else:
                self._show(LearningStage.ENCODING, self.learn_queue[0])
            return

        # Wrap-up tests
        if self.test_queue:
            self._show(LearningStage.TESTING, self.test_queue[0])
            return

        if self.problem_queue:
            self._break(ConsolidationTip.REENCODE)
            return

        self._show(LearningStage.SUMMARY, None)
