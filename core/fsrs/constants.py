"""
FSRS Constants and Parameters

All configurable parameters for the FSRS-lite scheduler in one place.

The multipliers and difficulty deltas are a simplified heuristic, not values
fitted with the published FSRS weight optimizer. Swap in a real model behind
scheduler.process_review if academic-grade scheduling is needed.
"""

from enum import Enum, IntEnum


# ---- Ratings ----

class Rating(str, Enum):
    """User feedback on a recall attempt (wire values are lowercase)."""
    AGAIN = "again"  # Forgot
    HARD = "hard"    # Recalled with high effort
    GOOD = "good"    # Recalled normally
    EASY = "easy"    # Recalled fluently


class CardState(IntEnum):
    """Discrete learning state persisted on each review record."""
    NEW = 0
    LEARNING = 1
    REVIEW = 2
    RELEARNING = 3


# ---- Initial State ----

INITIAL_STABILITY = 2.7   # Days
INITIAL_DIFFICULTY = 5.0  # Middle of the 1-10 scale


# ---- Bounds ----

S_MIN = 0.1   # Stability floor after repeated lapses
D_MIN = 1.0
D_MAX = 10.0
ROUND_DIGITS = 2  # Applied to stability and difficulty before persisting


# ---- Update Rule ----

STABILITY_MULTIPLIER = {
    Rating.AGAIN: 0.8,
    Rating.HARD: 1.2,
    Rating.GOOD: 2.5,
    Rating.EASY: 4.0,
}

DIFFICULTY_DELTA = {
    Rating.AGAIN: +0.8,
    Rating.HARD: +0.15,
    Rating.GOOD: -0.15,
    Rating.EASY: -0.3,
}

LAPSE_INTERVAL_DAYS = 1  # Interval after AGAIN
MIN_INTERVAL_DAYS = 1
MATURE_STABILITY = 7.0   # HARD keeps a card in LEARNING below this


# ---- Queue / Session Limits ----

SESSION_LIMIT_DEFAULT = 20
SESSION_LIMIT_MAX = 100      # learn/review session endpoints
DUE_LIST_LIMIT_DEFAULT = 100
DUE_LIST_LIMIT_MAX = 500     # due-list endpoint and store bound

QUIZ_OPTION_COUNT = 4  # 1 correct + 3 distractors
RELEARN_GAP = 2        # Positions between a failed item and its re-exposure


# ---- Rating Submission ----

SUBMIT_MAX_ATTEMPTS = 3
SUBMIT_BASE_DELAY = 0.5   # Seconds, doubled per retry
SUBMIT_MAX_DELAY = 8.0
