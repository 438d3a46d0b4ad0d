"""
SQLAlchemy ORM Models for the Review Database

Defines ReviewProgress (one row per user x word) and ReviewEvent (append-only
rating log) for Postgres persistence.
"""

from sqlalchemy import (
    Column,
    DateTime,
    Float,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class ReviewProgress(Base):
    """
    Persistent scheduling state for a single (user_id, word_id) pair.

    `version` is the optimistic-concurrency counter: every UPDATE is issued
    with `WHERE version = <loaded version>` and fails if another writer got
    there first.
    """
    __tablename__ = 'user_word_progress'
    __table_args__ = (
        UniqueConstraint('user_id', 'word_id', name='uq_user_word_progress_user_word'),
        Index('ix_user_word_progress_user_due', 'user_id', 'due'),
        Index('ix_user_word_progress_user_list', 'user_id', 'word_list_id'),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)

    # Ownership
    user_id = Column(String(255), nullable=False)
    word_id = Column(Integer, nullable=False)
    word_list_id = Column(Integer, nullable=True)  # Nulled when the list is deleted

    # Memory parameters
    stability = Column(Float, nullable=True)
    difficulty = Column(Float, nullable=True)

    # Scheduling
    due = Column(DateTime(timezone=True), nullable=False)
    lapses = Column(Integer, nullable=False, default=0)
    state = Column(Integer, nullable=False, default=0)  # 0=new, 1=learning, 2=review, 3=relearning
    reps = Column(Integer, nullable=False, default=0)
    last_review = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)

    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self):
        return f"<ReviewProgress(id={self.id}, {self.user_id}/{self.word_id}, state={self.state})>"


class ReviewEvent(Base):
    """
    Log entry for a single applied rating.

    Captures state before/after the update; written in the same transaction
    as the ReviewProgress change.
    """
    __tablename__ = 'review_events'
    __table_args__ = (
        Index('ix_review_events_user_timestamp', 'user_id', 'timestamp'),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)

    user_id = Column(String(255), nullable=False)
    word_id = Column(Integer, nullable=False)

    timestamp = Column(DateTime(timezone=True), nullable=False)
    rating = Column(String(10), nullable=False)  # again | hard | good | easy

    # State before review
    stability_before = Column(Float, nullable=True)
    difficulty_before = Column(Float, nullable=True)
    state_before = Column(Integer, nullable=False)

    # State after review
    stability_after = Column(Float, nullable=False)
    difficulty_after = Column(Float, nullable=False)
    state_after = Column(Integer, nullable=False)
    lapses_after = Column(Integer, nullable=False)
    interval_days = Column(Integer, nullable=False)

    # Session context (optional, for analytics)
    session_id = Column(String(255), nullable=True)
    source = Column(String(20), nullable=True)  # "self_assess", "test", "api"

    def __repr__(self):
        return f"<ReviewEvent(id={self.id}, {self.user_id}/{self.word_id}, rating={self.rating})>"
