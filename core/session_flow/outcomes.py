"""
Multiple-choice test outcomes and their mapping to ratings.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from core.fsrs.constants import Rating


class TestOutcome(str, Enum):
    """How a two-attempt choice test ended."""
    FIRST_TRY = "first_try"
    SECOND_TRY = "second_try"
    FAILED = "failed"


_RATING_BY_OUTCOME = {
    TestOutcome.FIRST_TRY: Rating.GOOD,
    TestOutcome.SECOND_TRY: Rating.HARD,
    TestOutcome.FAILED: Rating.AGAIN,
}


def rating_for_outcome(outcome: TestOutcome) -> Rating:
    """Map a test outcome to the rating submitted for it."""
    return _RATING_BY_OUTCOME[TestOutcome(outcome)]


@dataclass
class ChoiceTest:
    """
    Two-attempt multiple-choice test for one item.

    A wrong first answer reveals the hint and allows one more try.
    """
    options: list[str]
    correct: str
    hint: Optional[str] = None
    attempts: int = 0
    outcome: Optional[TestOutcome] = None
    hint_visible: bool = False

    @property
    def resolved(self) -> bool:
        return self.outcome is not None

    def answer(self, choice: str) -> Optional[TestOutcome]:
        """
        Record an answer.

        Returns:
            The final outcome, or None when a second attempt is allowed

        Raises:
            RuntimeError: if the test is already resolved
        """
        if self.resolved:
            raise RuntimeError("choice test already resolved")

        self.attempts += 1
        if choice == self.correct:
            self.outcome = TestOutcome.FIRST_TRY if self.attempts == 1 else TestOutcome.SECOND_TRY
        elif self.attempts == 1:
            self.hint_visible = True
        else:
            self.outcome = TestOutcome.FAILED
        return self.outcome
