"""
Scheduler - FSRS-lite Algorithm Logic

Pure scheduling and state updates (no database calls).

Main workflow:
1. Load review record (caller's responsibility)
2. Apply the rating's update rule to stability, difficulty and lapses
3. Derive interval, due timestamp and learning state
4. Return updated record + event data dict

This module handles ONLY the algorithm logic.
Database I/O is handled by the database module.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
import math
from typing import Optional, Tuple

from core.fsrs.constants import (
    CardState,
    D_MAX,
    D_MIN,
    DIFFICULTY_DELTA,
    LAPSE_INTERVAL_DAYS,
    MATURE_STABILITY,
    MIN_INTERVAL_DAYS,
    ROUND_DIGITS,
    Rating,
    S_MIN,
    STABILITY_MULTIPLIER,
)
from core.fsrs.memory_state import ReviewRecord, parse_rating


@dataclass(frozen=True)
class ScheduleResult:
    """Numeric outcome of one rating, before it is applied to a record."""
    stability: float
    difficulty: float
    interval_days: int
    state: CardState
    lapses: int


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def calculate_next_review(
    stability: float,
    difficulty: float,
    rating: Rating,
    lapses: int
) -> ScheduleResult:
    """
    Apply the FSRS-lite update rule.

    Rules by rating:
    - AGAIN: S' = max(0.1, 0.8 S), D' = D + 0.8, interval 1 day, RELEARNING
    - HARD:  S' = 1.2 S, D' = D + 0.15, LEARNING while S < 7 else REVIEW
    - GOOD:  S' = 2.5 S, D' = D - 0.15, REVIEW
    - EASY:  S' = 4.0 S, D' = D - 0.3,  REVIEW

    Success intervals are round(S'), at least one day. Difficulty is clamped
    to [1, 10]; stability and difficulty are rounded to 2 decimals.

    Args:
        stability: Current stability in days
        difficulty: Current difficulty
        rating: User rating (Rating member or its string value)
        lapses: Current lapse count

    Returns:
        ScheduleResult with the new parameters

    Raises:
        InvalidRating: if rating is not one of the four values
    """
    rating = parse_rating(rating)
    multiplier = STABILITY_MULTIPLIER[rating]
    new_difficulty = _clamp(difficulty + DIFFICULTY_DELTA[rating], D_MIN, D_MAX)

    if rating == Rating.AGAIN:
        new_stability = max(S_MIN, stability * multiplier)
        interval_days = LAPSE_INTERVAL_DAYS
        new_state = CardState.RELEARNING
        lapses += 1
    else:
        new_stability = stability * multiplier
        interval_days = max(MIN_INTERVAL_DAYS, _round_half_up(stability * multiplier))
        if rating == Rating.HARD and stability < MATURE_STABILITY:
            new_state = CardState.LEARNING
        else:
            new_state = CardState.REVIEW

    return ScheduleResult(
        stability=max(S_MIN, round(new_stability, ROUND_DIGITS)),
        difficulty=round(new_difficulty, ROUND_DIGITS),
        interval_days=interval_days,
        state=new_state,
        lapses=lapses,
    )


def process_review(
    record: ReviewRecord,
    rating: Rating,
    review_time: Optional[datetime] = None
) -> Tuple[ReviewRecord, dict]:
    """
    Process a rating and return the updated record + event data.

    This is the core scheduler. No database calls.
    Caller is responsible for:
    1. Loading the record
    2. Saving the record after review
    3. Persisting the event

    Args:
        record: ReviewRecord to update
        rating: User rating (AGAIN, HARD, GOOD, EASY)
        review_time: Review timestamp (defaults to now)

    Returns:
        Tuple of (updated_record, event_data_dict)
        event_data_dict is ready to pass to database.log_review_event()
    """
    rating = parse_rating(rating)
    if review_time is None:
        review_time = datetime.now(timezone.utc)

    result = calculate_next_review(
        record.stability,
        record.difficulty,
        rating,
        record.lapses
    )

    updated = replace(
        record,
        stability=result.stability,
        difficulty=result.difficulty,
        due=review_time + timedelta(days=result.interval_days),
        lapses=result.lapses,
        state=result.state,
        last_review=review_time,
        reps=record.reps + 1,
    )

    event_data = {
        'user_id': record.user_id,
        'word_id': record.word_id,
        'timestamp': review_time,
        'rating': rating.value,
        'stability_before': record.stability,
        'difficulty_before': record.difficulty,
        'state_before': int(record.state),
        'stability_after': updated.stability,
        'difficulty_after': updated.difficulty,
        'state_after': int(updated.state),
        'lapses_after': updated.lapses,
        'interval_days': result.interval_days,
        'session_id': None,  # Will be set by caller if needed
        'source': None  # Will be set by caller if needed
    }

    return updated, event_data
