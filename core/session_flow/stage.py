"""
Review Flow Stage - per-item state machine

Pure state machine for one queue item. Every user action returns a
StageDecision describing the side effects (rating to submit, relearn,
forced-retest clear, advance); the composer applies them.

Flows:
- review: idle -> (self_assess | test) -> [review_stage] -> advance
- learn:  review_stage -> test -> advance
- learn queue steps (consolidating): review_stage -> advance for encoding,
  test -> advance for testing; no relearn in either
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from core.fsrs.constants import Rating
from core.fsrs.memory_state import parse_rating
from core.session_flow.outcomes import ChoiceTest, TestOutcome, rating_for_outcome


class StageMode(str, Enum):
    IDLE = "idle"
    SELF_ASSESS = "self_assess"
    TEST = "test"
    REVIEW_STAGE = "review_stage"


class SessionFlow(str, Enum):
    REVIEW = "review"
    LEARN = "learn"


class InvalidTransition(RuntimeError):
    """An action was sent to a stage that cannot accept it."""


@dataclass(frozen=True)
class StageDecision:
    """Side effects requested by one stage action."""
    rating: Optional[Rating] = None
    source: Optional[str] = None
    relearn: bool = False
    clear_force_test: bool = False
    advance: bool = False


class ReviewFlowStage:
    """
    State machine for the item currently on screen.

    Args:
        flow: review or learn
        options: Option texts for the choice test
        correct: Correct option text
        hint: Mnemonic blueprint revealed after a wrong first answer
        force_test: Item is flagged for a forced retest
        always_advance_on_test: Learn flow advances even after a failed test
        consolidating: Item is one step of a learn queue; encoding steps
            advance from the content view and test steps advance on any
            final outcome
    """

    def __init__(
        self,
        flow: SessionFlow,
        options: Optional[list[str]] = None,
        correct: str = "",
        hint: Optional[str] = None,
        force_test: bool = False,
        always_advance_on_test: bool = False,
        consolidating: bool = False
    ):
        self.flow = SessionFlow(flow)
        self.options = list(options or [])
        self.correct = correct
        self.hint = hint
        self.always_advance_on_test = always_advance_on_test
        self.consolidating = consolidating
        self.tested = False
        self.test: Optional[ChoiceTest] = None

        if consolidating and force_test:
            self._start_test()
        elif self.flow == SessionFlow.LEARN:
            self.mode = StageMode.REVIEW_STAGE
        elif force_test:
            self._start_test()
        else:
            self.mode = StageMode.IDLE

    def _require(self, *modes: StageMode) -> None:
        if self.mode not in modes:
            allowed = ", ".join(m.value for m in modes)
            raise InvalidTransition(f"action needs stage {allowed}, current stage is {self.mode.value}")

    def _start_test(self) -> None:
        self.mode = StageMode.TEST
        self.test = ChoiceTest(options=self.options, correct=self.correct, hint=self.hint)

    @property
    def hint_visible(self) -> bool:
        return bool(self.test and self.test.hint_visible)

    # ---- Actions ----

    def choose_path(self, path: StageMode) -> StageDecision:
        """Pick self-assessment or the choice test from idle."""
        self._require(StageMode.IDLE)
        path = StageMode(path)
        if path == StageMode.SELF_ASSESS:
            self.mode = StageMode.SELF_ASSESS
        elif path == StageMode.TEST:
            self._start_test()
        else:
            raise InvalidTransition(f"cannot choose path {path.value}")
        return StageDecision()

    def rate(self, rating: Rating) -> StageDecision:
        """Self-assessed rating: easy/good advance, hard/again re-show content."""
        self._require(StageMode.SELF_ASSESS)
        rating = parse_rating(rating)
        if rating in (Rating.EASY, Rating.GOOD):
            return StageDecision(rating=rating, source="self_assess", advance=True)

        self.mode = StageMode.REVIEW_STAGE
        return StageDecision(rating=rating, source="self_assess", relearn=True)

    def answer(self, choice: str) -> StageDecision:
        """Submit a choice in the test stage."""
        self._require(StageMode.TEST)
        outcome = self.test.answer(choice)
        if outcome is None:
            # First wrong answer: hint is now visible, second attempt pending
            return StageDecision()

        self.tested = True
        rating = rating_for_outcome(outcome)

        if self.consolidating:
            return StageDecision(rating=rating, source="test", advance=True)

        if outcome == TestOutcome.FIRST_TRY:
            return StageDecision(rating=rating, source="test", clear_force_test=True, advance=True)

        if outcome == TestOutcome.SECOND_TRY:
            if self.flow == SessionFlow.REVIEW:
                return StageDecision(rating=rating, source="test", advance=True)
            self.mode = StageMode.REVIEW_STAGE
            return StageDecision(rating=rating, source="test", relearn=True)

        # FAILED
        if self.flow == SessionFlow.LEARN and self.always_advance_on_test:
            return StageDecision(rating=rating, source="test", relearn=True, advance=True)
        self.mode = StageMode.REVIEW_STAGE
        return StageDecision(rating=rating, source="test", relearn=True)

    def leave_review_stage(self, force_test: bool) -> StageDecision:
        """
        Continue from the full-content view.

        Learn flow always tests an item once after showing it. A forced
        retest flag on the item also sends it back to the test instead of
        advancing.
        """
        self._require(StageMode.REVIEW_STAGE)
        if self.consolidating:
            return StageDecision(advance=True)
        if (self.flow == SessionFlow.LEARN and not self.tested) or force_test:
            self._start_test()
            return StageDecision()
        return StageDecision(advance=True)
