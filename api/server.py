"""
FastAPI server exposing the review scheduler.

User identity comes from the X-User-Id header (DEFAULT_USER_ID when
absent); authentication is handled upstream.
"""

import logging
import os
import time
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

from fastapi import Depends, FastAPI, Header, Query

from api import VERSION
from api.errors import register_error_handlers
from api.schemas import (
    DueListResponse,
    EnsureResponse,
    HealthResponse,
    ProgressResponse,
    QueueResponse,
    QuizOptionsResponse,
    QuizSubmitRequest,
    QuizSubmitResponse,
    RatingRequest,
)
from core import errors, fsrs
from core.fsrs.constants import (
    DUE_LIST_LIMIT_DEFAULT,
    DUE_LIST_LIMIT_MAX,
    Rating,
    SESSION_LIMIT_DEFAULT,
    SESSION_LIMIT_MAX,
)
from core.session_builders import (
    build_quiz_options,
    create_learn_session,
    create_review_session,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"Review API v{VERSION} starting up...")
    fsrs.init_db()
    yield
    # Shutdown
    logger.info("Review API shutting down...")


app = FastAPI(
    title="Vocabulary Review API",
    description="FSRS-lite review scheduling for vocabulary lists.",
    version=VERSION,
    lifespan=lifespan,
)
register_error_handlers(app)

start_time = time.time()


def get_user_id(x_user_id: Optional[str] = Header(None)) -> str:
    """Resolve the calling user (header, else the configured default)."""
    return x_user_id or fsrs.get_default_user_id()


@app.get("/health", response_model=HealthResponse)
def health_check():
    """
    Simple health check to verify server is reachable.
    """
    return HealthResponse(status="ok", version=VERSION, uptime_seconds=time.time() - start_time)


# ---- Review queue and progress ----

@app.get("/api/me/review/queue", response_model=QueueResponse)
def review_queue(
    limit: int = Query(SESSION_LIMIT_DEFAULT),
    due_before: Optional[datetime] = Query(None),
    user_id: str = Depends(get_user_id),
):
    """Due records (most overdue first) plus aggregate stats."""
    limit = errors.require_limit(limit, SESSION_LIMIT_MAX)
    queue = fsrs.get_due_queue(user_id, limit=limit, due_before=due_before)
    stats = fsrs.get_stats(user_id)
    return QueueResponse(queue=[r.to_dict() for r in queue], stats=stats.to_dict())


@app.get("/api/me/review/stats")
def review_stats(user_id: str = Depends(get_user_id)):
    return fsrs.get_stats(user_id).to_dict()


@app.patch("/api/me/review/progress/{word_id}", response_model=ProgressResponse)
def update_progress(
    word_id: int,
    req: RatingRequest,
    user_id: str = Depends(get_user_id),
):
    """Apply a rating to one word."""
    record = fsrs.apply_rating(
        user_id,
        word_id,
        req.rating,
        review_time=req.review_time,
        source="api",
    )
    return ProgressResponse(progress=record.to_dict())


@app.post("/api/me/quiz/submit", response_model=QuizSubmitResponse)
def submit_quiz(req: QuizSubmitRequest, user_id: str = Depends(get_user_id)):
    """
    Apply the rating produced by a quiz answer.

    `is_correct` echoes the client's value when sent, otherwise anything
    but "again" counts as correct.
    """
    rating = fsrs.parse_rating(req.rating)
    record = fsrs.apply_rating(user_id, req.target_word_id, rating, source="test")
    is_correct = req.is_correct if req.is_correct is not None else rating != Rating.AGAIN
    return QuizSubmitResponse(is_correct=is_correct, updated_progress=record.to_dict())


@app.get("/api/me/reviews/due-list", response_model=DueListResponse)
def due_list(
    limit: int = Query(DUE_LIST_LIMIT_DEFAULT),
    user_id: str = Depends(get_user_id),
):
    limit = errors.require_limit(limit, DUE_LIST_LIMIT_MAX)
    records = fsrs.get_due_queue(user_id, limit=limit)
    return DueListResponse(reviews=[r.to_dict() for r in records])


@app.post("/api/me/progress/ensure/{word_id}", response_model=EnsureResponse)
def ensure_progress(
    word_id: int,
    list_id: Optional[int] = Query(None, alias="listId"),
    user_id: str = Depends(get_user_id),
):
    """Create the review record for a word if it does not exist yet."""
    record = fsrs.ensure_record(user_id, word_id, word_list_id=list_id)
    return EnsureResponse(ok=True, id=record.id)


# ---- Sessions and quizzes ----

@app.get("/api/me/review/session")
def review_session(
    limit: int = Query(SESSION_LIMIT_DEFAULT),
    user_id: str = Depends(get_user_id),
):
    """Quizzes for the due, already-learned words."""
    payload = create_review_session(user_id, limit=limit)
    return payload.model_dump()


@app.get("/api/me/learn/session")
def learn_session(
    list_id: Optional[int] = Query(None, alias="listId"),
    limit: int = Query(SESSION_LIMIT_DEFAULT),
    user_id: str = Depends(get_user_id),
):
    """Quizzes for the new words of one list, in collection order."""
    if list_id is None:
        raise errors.ValidationError("Missing parameter", "listId is required")
    limit = errors.require_limit(limit, SESSION_LIMIT_MAX)
    payload = create_learn_session(user_id, list_id, limit=limit)
    return payload.model_dump()


@app.get("/api/me/quiz/options/{word_id}", response_model=QuizOptionsResponse)
def quiz_options(word_id: int):
    options = build_quiz_options(word_id)
    return QuizOptionsResponse(options=options.options, correct=options.correct)


def main():
    """Run the API with uvicorn."""
    import uvicorn

    logging.basicConfig(level=logging.INFO)
    host = os.getenv("API_HOST", "127.0.0.1")
    port = int(os.getenv("API_PORT", "8000"))
    uvicorn.run("api.server:app", host=host, port=port, log_level="info")


if __name__ == "__main__":
    main()
