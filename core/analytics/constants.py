"""
Constants for analytics scopes and rating ordering.
"""

from __future__ import annotations

from typing import Final, Optional


# Review event sources included by each dashboard scope (None = every source)
SCOPE_SOURCES: Final[dict[str, Optional[list[str]]]] = {
    "all": None,
    "self_assess": ["self_assess"],
    "test": ["test"],
}

SCOPE_LABELS: Final[dict[str, str]] = {
    "all": "All reviews",
    "self_assess": "Self-assessed",
    "test": "Choice tests",
}

RATING_ORDER: Final[list[str]] = ["again", "hard", "good", "easy"]
RECALLED_RATINGS: Final[list[str]] = ["hard", "good", "easy"]

EVENT_COLUMNS: Final[list[str]] = [
    "word_id", "timestamp", "rating", "session_id", "source", "day_utc",
]
