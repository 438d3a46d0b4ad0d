"""
Typed quiz and session payload models shared across session builders.

Session payloads cross a process boundary (API responses, cached JSON), so
they are validated here on ingestion instead of being trusted at every
call site.
"""

from __future__ import annotations
from typing import Optional, Union

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, model_validator

from core import errors


class QuizOption(BaseModel):
    """One multiple-choice option (the correct word or a distractor)."""
    word_id: int = Field(..., gt=0)
    word: str
    definition: str


class ReviewQuiz(BaseModel):
    """
    Quiz material for a single session item.

    Exactly one option carries the quiz word's own id; that option is the
    correct answer.
    """
    quiz_word_id: int = Field(..., gt=0)
    prompt: str
    correct_answer: str
    hint: Optional[str] = None
    options: list[QuizOption]

    @model_validator(mode="after")
    def _check_correct_option(self) -> "ReviewQuiz":
        matches = [o for o in self.options if o.word_id == self.quiz_word_id]
        if len(matches) != 1:
            raise ValueError(
                f"quiz {self.quiz_word_id} must contain exactly one correct option"
            )
        texts = [o.definition for o in self.options]
        if len(set(texts)) != len(texts):
            raise ValueError(f"quiz {self.quiz_word_id} has duplicate option texts")
        return self

    def is_correct(self, option_word_id: int) -> bool:
        return option_word_id == self.quiz_word_id

    def to_quiz_options(self) -> "QuizOptions":
        return QuizOptions(
            options=[o.definition for o in self.options],
            correct=self.correct_answer,
        )


class SessionPayload(BaseModel):
    """Ordered quizzes for one sitting (review or learn)."""
    quizzes: list[ReviewQuiz] = Field(default_factory=list)

    @property
    def word_ids(self) -> list[int]:
        return [q.quiz_word_id for q in self.quizzes]

    def quiz_for(self, word_id: int) -> Optional[ReviewQuiz]:
        for quiz in self.quizzes:
            if quiz.quiz_word_id == word_id:
                return quiz
        return None


class QuizOptions(BaseModel):
    """Option texts for one word plus the correct text."""
    options: list[str]
    correct: str

    def is_correct(self, text: str) -> bool:
        return text == self.correct


def parse_session_payload(raw: Union[None, str, bytes, dict]) -> SessionPayload:
    """
    Validate a session payload coming from outside the process.

    Args:
        raw: JSON text or decoded dict; None means "no quizzes"

    Returns:
        SessionPayload

    Raises:
        StorageError: if the payload does not match the expected shape
    """
    if raw is None:
        return SessionPayload()
    try:
        if isinstance(raw, (str, bytes)):
            return SessionPayload.model_validate_json(raw)
        return SessionPayload.model_validate(raw)
    except PydanticValidationError as exc:
        raise errors.StorageError("Malformed session payload", str(exc)) from exc
