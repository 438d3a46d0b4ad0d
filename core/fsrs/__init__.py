"""
FSRS - Free Spaced Repetition Scheduler (lite)

Main API for the vocabulary review system.

This module implements a simplified, deterministic spaced repetition rule:
- Stability grows by a fixed multiplier on every successful recall
- Stability decays and a lapse is counted on every "again"
- Difficulty drifts with the rating and stays inside [1, 10]
- Interval in days follows the new stability

Quick start:
    from core import fsrs

    # Initialize database
    fsrs.init_db()

    # Make sure the user has a record for the word
    fsrs.ensure_record("demo", 42)

    # Rate it (loads, schedules and persists in one transaction)
    record = fsrs.apply_rating("demo", 42, fsrs.Rating.GOOD)

    # Get due records
    due = fsrs.get_due_queue("demo", limit=20)
"""

# Core scheduler API (algorithm logic)
from core.fsrs.scheduler import calculate_next_review, process_review, ScheduleResult

# Database API
from core.fsrs.database import (
    init_db,
    reset_db,
    is_test_mode,
    get_default_user_id,
    ensure_record,
    load_record,
    get_record,
    apply_rating,
    get_due_queue,
    get_learn_queue,
    get_stats,
    detach_word_list,
    delete_record,
    get_recent_events,
    get_review_events,
)

# Constants and parameters
from core.fsrs.constants import (
    Rating,
    CardState,
    INITIAL_STABILITY,
    INITIAL_DIFFICULTY,
    S_MIN,
    D_MIN,
    D_MAX,
)

# Memory state
from core.fsrs.memory_state import (
    ReviewRecord,
    ReviewStats,
    initialize_new_record,
    parse_rating,
)


__all__ = [
    # Core algorithm
    "calculate_next_review",
    "process_review",
    "ScheduleResult",

    # Database operations
    "init_db",
    "reset_db",
    "is_test_mode",
    "get_default_user_id",
    "ensure_record",
    "load_record",
    "get_record",
    "apply_rating",
    "get_due_queue",
    "get_learn_queue",
    "get_stats",
    "detach_word_list",
    "delete_record",
    "get_recent_events",
    "get_review_events",

    # Enums
    "Rating",
    "CardState",

    # Memory state
    "ReviewRecord",
    "ReviewStats",
    "initialize_new_record",
    "parse_rating",

    # Parameters
    "INITIAL_STABILITY",
    "INITIAL_DIFFICULTY",
    "S_MIN",
    "D_MIN",
    "D_MAX",
]
