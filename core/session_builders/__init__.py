"""Session builder modules for review and learn sessions."""

from core.session_builders.learn_builder import create_learn_session
from core.session_builders.quiz_options import (
    QuizOptionsCache,
    build_quiz,
    build_quiz_options,
    build_quizzes,
)
from core.session_builders.quiz_types import (
    QuizOption,
    QuizOptions,
    ReviewQuiz,
    SessionPayload,
    parse_session_payload,
)
from core.session_builders.review_builder import create_review_session

__all__ = [
    "create_review_session",
    "create_learn_session",
    "build_quiz",
    "build_quizzes",
    "build_quiz_options",
    "QuizOptionsCache",
    "QuizOption",
    "QuizOptions",
    "ReviewQuiz",
    "SessionPayload",
    "parse_session_payload",
]
