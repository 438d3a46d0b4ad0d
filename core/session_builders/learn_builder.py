"""
Learn Session Builder

Creates learn sessions from one word list: NEW records only, in the order
the words were collected.
"""

from __future__ import annotations
import random
from typing import Optional

from core import fsrs
from core.fsrs.constants import SESSION_LIMIT_DEFAULT
from core.session_builders.quiz_options import build_quizzes
from core.session_builders.quiz_types import SessionPayload


def create_learn_session(
    user_id: str,
    word_list_id: int,
    limit: int = SESSION_LIMIT_DEFAULT,
    rng: Optional[random.Random] = None
) -> SessionPayload:
    """
    Create a learn session for one list.

    Args:
        user_id: User identifier for scoping review data
        word_list_id: List to learn from (positive)
        limit: Number of quizzes (1-100)
        rng: Random source for option order

    Returns:
        SessionPayload (empty quizzes when the list has no new words)
    """
    records = fsrs.get_learn_queue(user_id, word_list_id, limit=limit)
    return SessionPayload(quizzes=build_quizzes([r.word_id for r in records], rng))
