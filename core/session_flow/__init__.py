"""Session composition: queue, per-item stage machine and rating submission."""

from core.session_flow.composer import SessionComposer
from core.session_flow.learning import ConsolidationTip, LearnQueue, LearningStage
from core.session_flow.outcomes import ChoiceTest, TestOutcome, rating_for_outcome
from core.session_flow.queue import SessionQueue, SessionWord
from core.session_flow.stage import (
    InvalidTransition,
    ReviewFlowStage,
    SessionFlow,
    StageDecision,
    StageMode,
)
from core.session_flow.submitter import PendingRating, RatingSubmitter

__all__ = [
    "SessionComposer",
    "ChoiceTest",
    "TestOutcome",
    "rating_for_outcome",
    "ConsolidationTip",
    "LearnQueue",
    "LearningStage",
    "SessionQueue",
    "SessionWord",
    "InvalidTransition",
    "ReviewFlowStage",
    "SessionFlow",
    "StageDecision",
    "StageMode",
    "PendingRating",
    "RatingSubmitter",
]
