"""
Memory State - Review Record and Derived Quantities

Defines the in-memory review record passed between the store, the scheduler
and the session layer.

Key concepts:
- Stability (S): modeled days until recall decays to the reference threshold
- Difficulty (D): intrinsic hardness of the word (1-10 scale)
- Due: timestamp after which the word is eligible for review
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from core import errors
from core.fsrs.constants import (
    CardState,
    INITIAL_DIFFICULTY,
    INITIAL_STABILITY,
    Rating,
)


@dataclass(frozen=True)
class ReviewRecord:
    """
    Scheduling state for one (user, word) pair.

    Immutable: the scheduler returns a new record for every rating.
    """
    id: Optional[int]
    user_id: str
    word_id: int
    word_list_id: Optional[int]

    # Memory parameters
    stability: float
    difficulty: float

    # Scheduling
    due: datetime
    lapses: int
    state: CardState
    last_review: Optional[datetime]
    created_at: datetime

    # Bookkeeping
    reps: int = 0
    version: int = 1

    def is_due(self, now: Optional[datetime] = None) -> bool:
        """True when the record is eligible for review at `now`."""
        if now is None:
            now = datetime.now(timezone.utc)
        return self.due <= now

    def to_dict(self) -> dict:
        """Serialize to the wire shape used by the API and session payloads."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "word_id": self.word_id,
            "word_list_id": self.word_list_id,
            "stability": self.stability,
            "difficulty": self.difficulty,
            "due": self.due.isoformat(),
            "lapses": self.lapses,
            "state": int(self.state),
            "last_review": self.last_review.isoformat() if self.last_review else None,
            "created_at": self.created_at.isoformat(),
            "reps": self.reps,
        }


@dataclass(frozen=True)
class ReviewStats:
    """Aggregate counts for one user, partitioned by state."""
    total: int
    new: int
    learning: int
    review: int
    relearning: int
    due_today: int

    def to_dict(self) -> dict:
        return {
            "total_words": self.total,
            "new_words": self.new,
            "learning_words": self.learning,
            "review_words": self.review,
            "relearning_words": self.relearning,
            "due_today": self.due_today,
        }


def parse_rating(value: object) -> Rating:
    """
    Normalize a user-supplied rating to the Rating enum.

    Accepts Rating members or case-insensitive strings.

    Raises:
        InvalidRating: for anything outside {again, hard, good, easy}
    """
    if isinstance(value, Rating):
        return value
    if isinstance(value, str):
        try:
            return Rating(value.strip().lower())
        except ValueError:
            pass
    raise errors.InvalidRating(
        "Invalid rating",
        f"rating must be one of again, hard, good, easy (got {value!r})"
    )


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive timestamps (SQLite drops tzinfo on read)."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def initialize_new_record(
    user_id: str,
    word_id: int,
    word_list_id: Optional[int] = None,
    now: Optional[datetime] = None
) -> ReviewRecord:
    """
    Initialize state for a word the user has just collected.

    Args:
        user_id: Owner of the record
        word_id: Vocabulary item
        word_list_id: Optional list the word was collected into
        now: Creation timestamp (defaults to now)

    Returns:
        New, immediately due ReviewRecord (no id until persisted)
    """
    if now is None:
        now = datetime.now(timezone.utc)

    return ReviewRecord(
        id=None,
        user_id=user_id,
        word_id=word_id,
        word_list_id=word_list_id,
        stability=INITIAL_STABILITY,
        difficulty=INITIAL_DIFFICULTY,
        due=now,
        lapses=0,
        state=CardState.NEW,
        last_review=None,
        created_at=now,
        reps=0,
    )
