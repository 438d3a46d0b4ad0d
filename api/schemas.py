"""
Request and response models for the HTTP API.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, model_validator


class RatingRequest(BaseModel):
    """Body of PATCH /api/me/review/progress/{word_id}."""
    rating: str
    review_time: Optional[datetime] = None


class QuizSubmitRequest(BaseModel):
    """
    Body of POST /api/me/quiz/submit.

    Either `quiz_word_id` or `word_id` identifies the word.
    """
    quiz_word_id: Optional[int] = None
    word_id: Optional[int] = None
    rating: str
    is_correct: Optional[bool] = None

    @model_validator(mode="after")
    def _require_word(self) -> "QuizSubmitRequest":
        if self.quiz_word_id is None and self.word_id is None:
            raise ValueError("quiz_word_id or word_id is required")
        return self

    @property
    def target_word_id(self) -> int:
        return self.quiz_word_id if self.quiz_word_id is not None else self.word_id


class ErrorBody(BaseModel):
    statusCode: int
    message: str
    details: Optional[Any] = None


class ErrorResponse(BaseModel):
    error: ErrorBody


class QueueResponse(BaseModel):
    queue: list[dict]
    stats: dict


class ProgressResponse(BaseModel):
    progress: dict


class QuizSubmitResponse(BaseModel):
    is_correct: bool
    updated_progress: dict


class DueListResponse(BaseModel):
    reviews: list[dict]


class EnsureResponse(BaseModel):
    ok: bool = True
    id: int


class QuizOptionsResponse(BaseModel):
    options: list[str] = Field(default_factory=list)
    correct: str = ""


class HealthResponse(BaseModel):
    status: str
    version: str
    uptime_seconds: float
