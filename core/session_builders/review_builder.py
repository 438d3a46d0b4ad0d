"""
Review Session Builder

Creates review sessions from the global due queue:
- Only records already due (due <= now)
- Never-reviewed (NEW) records are left to learn sessions
- Most overdue first, capped at the session limit

Each record becomes one multiple-choice quiz.
"""

from __future__ import annotations
import random
from datetime import datetime
from typing import Optional

from core import errors, fsrs
from core.fsrs.constants import SESSION_LIMIT_DEFAULT, SESSION_LIMIT_MAX
from core.session_builders.quiz_options import build_quizzes
from core.session_builders.quiz_types import SessionPayload


def create_review_session(
    user_id: str,
    limit: int = SESSION_LIMIT_DEFAULT,
    due_before: Optional[datetime] = None,
    rng: Optional[random.Random] = None
) -> SessionPayload:
    """
    Create a review session for a user.

    Args:
        user_id: User identifier for scoping review data
        limit: Number of quizzes (1-100)
        due_before: Reference time for "due" (default: now)
        rng: Random source for option order

    Returns:
        SessionPayload (empty quizzes when nothing is due)
    """
    limit = errors.require_limit(limit, SESSION_LIMIT_MAX)
    records = fsrs.get_due_queue(
        user_id,
        limit=limit,
        due_before=due_before,
        include_new=False
    )
    return SessionPayload(quizzes=build_quizzes([r.word_id for r in records], rng))
