"""
Session Composer

Walks one session item by item: builds a ReviewFlowStage for the current
word, applies the stage's decisions to the session queue, and hands ratings
to the submitter without waiting for them.

Learn sessions run on a LearnQueue by default (encode, delayed test, then a
consolidation pass over the problem words); review sessions and
non-consolidating learn sessions run on a SessionQueue.
"""

from __future__ import annotations
import logging
import uuid
from typing import Callable, Optional

from core.fsrs.constants import RELEARN_GAP, Rating, SESSION_LIMIT_DEFAULT
from core.session_builders.quiz_options import QuizOptionsCache
from core.session_builders.quiz_types import QuizOptions, ReviewQuiz, SessionPayload
from core.session_flow.learning import ConsolidationTip, LearnQueue, LearningStage
from core.session_flow.queue import SessionQueue, SessionWord
from core.session_flow.stage import ReviewFlowStage, SessionFlow, StageDecision, StageMode

logger = logging.getLogger(__name__)


class SessionComposer:
    """
    Explicit session object for one sitting.

    Quiz options come from the session payload when it carries them,
    otherwise from an options cache prefetched one batch window at a time.

    Args:
        user_id: Owner of the session
        flow: review or learn
        words: Ordered session words
        submitter: Object with submit(user_id, word_id, rating, session_id=, source=)
        quizzes: Quiz material keyed by word id
        options_cache: Fallback source of quiz options
        hint_lookup: Callable(word_id) -> mnemonic blueprint
        relearn_gap: Positions between a failed word and its re-exposure
        batch_size: Prefetch window size
        always_advance_on_test: Learn flow advances after a failed test
            (non-consolidating learn sessions only)
        consolidate: Learn flow runs on the L/T/P learn queue
    """

    def __init__(
        self,
        user_id: str,
        flow: SessionFlow,
        words: list[SessionWord],
        submitter,
        quizzes: Optional[dict[int, ReviewQuiz]] = None,
        options_cache: Optional[QuizOptionsCache] = None,
        hint_lookup: Optional[Callable[[int], Optional[str]]] = None,
        relearn_gap: int = RELEARN_GAP,
        batch_size: int = SESSION_LIMIT_DEFAULT,
        always_advance_on_test: bool = False,
        session_id: Optional[str] = None,
        consolidate: bool = True
    ):
        self.user_id = user_id
        self.flow = SessionFlow(flow)
        self.session_id = session_id or str(uuid.uuid4())
        self.consolidating = self.flow == SessionFlow.LEARN and consolidate
        if self.consolidating:
            self.queue = LearnQueue(words)
        else:
            self.queue = SessionQueue(words, relearn_gap=relearn_gap, batch_size=batch_size)
        self.submitter = submitter
        self.quizzes = dict(quizzes or {})
        self.options_cache = options_cache
        self.hint_lookup = hint_lookup
        self.always_advance_on_test = always_advance_on_test

        self.reviewed_count = 0
        self.correct_count = 0
        self.stage: Optional[ReviewFlowStage] = None
        self._prefetched_batch: Optional[int] = None

        self._load_current()

    @classmethod
    def from_payload(
        cls,
        user_id: str,
        flow: SessionFlow,
        payload: SessionPayload,
        submitter,
        **kwargs
    ) -> "SessionComposer":
        """Build a composer from a validated session payload."""
        words = [SessionWord(id=q.quiz_word_id, word=q.prompt) for q in payload.quizzes]
        quizzes = {q.quiz_word_id: q for q in payload.quizzes}
        return cls(user_id, flow, words, submitter, quizzes=quizzes, **kwargs)

    # ---- State ----

    @property
    def current(self) -> Optional[SessionWord]:
        return self.queue.current

    @property
    def mode(self) -> Optional[StageMode]:
        return self.stage.mode if self.stage else None

    @property
    def is_complete(self) -> bool:
        return self.queue.is_complete

    @property
    def is_empty_at_start(self) -> bool:
        return self.queue.is_empty_at_start

    @property
    def hint_visible(self) -> bool:
        return bool(self.stage and self.stage.hint_visible)

    @property
    def learning_stage(self) -> Optional[LearningStage]:
        """Learn queue step, or None outside consolidating learn sessions."""
        return self.queue.stage if self.consolidating else None

    @property
    def on_break(self) -> bool:
        return self.learning_stage == LearningStage.BREAK

    @property
    def consolidation_tip(self) -> Optional[ConsolidationTip]:
        return self.queue.tip if self.consolidating else None

    @property
    def progress(self) -> tuple[int, int]:
        return self.queue.progress

    @property
    def retest_count(self) -> int:
        return self.queue.retest_count

    def options_for(self, word_id: int) -> QuizOptions:
        """
        Quiz options for a word.

        Raises:
            LookupError: neither the payload nor a cache can supply options
        """
        quiz = self.quizzes.get(word_id)
        if quiz is not None:
            return quiz.to_quiz_options()
        if self.options_cache is None:
            raise LookupError(f"no quiz options source for word {word_id}")
        return self.options_cache.get(word_id)

    def hint_for(self, word_id: int) -> Optional[str]:
        quiz = self.quizzes.get(word_id)
        if quiz is not None and quiz.hint:
            return quiz.hint
        if self.hint_lookup is not None:
            return self.hint_lookup(word_id)
        return None

    # ---- Item loading ----

    def _prefetch_window(self) -> None:
        if self.options_cache is None:
            return
        batch = self.queue.batch_start
        if batch == self._prefetched_batch:
            return
        self._prefetched_batch = batch
        missing = [wid for wid in self.queue.batch_word_ids() if wid not in self.quizzes]
        if missing:
            self.options_cache.prefetch(missing)

    def _load_current(self) -> None:
        word = self.queue.current
        if word is None:
            self.stage = None
            return

        self._prefetch_window()
        needs_test = self.queue.needs_test(word.id)

        # Options are only needed once the item reaches the test stage
        if (self.flow == SessionFlow.REVIEW or self.consolidating) and not needs_test:
            options = None
        else:
            options = self.options_for(word.id)

        self.stage = ReviewFlowStage(
            self.flow,
            options=options.options if options else None,
            correct=options.correct if options else "",
            hint=self.hint_for(word.id),
            force_test=needs_test,
            always_advance_on_test=self.always_advance_on_test,
            consolidating=self.consolidating,
        )

    def _ensure_options(self) -> None:
        if self.stage.options:
            return
        options = self.options_for(self.current.id)
        self.stage.options = list(options.options)
        self.stage.correct = options.correct

    # ---- Actions ----

    def _require_item(self) -> ReviewFlowStage:
        if self.stage is None:
            raise RuntimeError("session has no current item")
        return self.stage

    def choose_path(self, path: StageMode) -> StageDecision:
        stage = self._require_item()
        if StageMode(path) == StageMode.TEST:
            self._ensure_options()
        return self._apply(stage.choose_path(path))

    def rate(self, rating: Rating) -> StageDecision:
        return self._apply(self._require_item().rate(rating))

    def answer(self, choice: str) -> StageDecision:
        return self._apply(self._require_item().answer(choice))

    def continue_from_review_stage(self) -> StageDecision:
        stage = self._require_item()
        force_test = self.queue.needs_test(self.current.id)
        if force_test or (self.flow == SessionFlow.LEARN and not stage.tested and not self.consolidating):
            self._ensure_options()
        decision = stage.leave_review_stage(force_test)
        return self._apply(decision)

    def defer(self) -> None:
        """Move the current word to the delayed queue without rating it."""
        self._require_item()
        if self.consolidating:
            raise RuntimeError("learn queue steps cannot be deferred")
        self.queue.defer_current()
        self._load_current()

    def continue_from_break(self) -> None:
        """Leave the learn-queue break into the next consolidation pass."""
        if not self.on_break:
            raise RuntimeError("session is not on a break")
        self.queue.continue_from_break()
        self._load_current()

    def _apply(self, decision: StageDecision) -> StageDecision:
        word = self.current

        if decision.rating is not None:
            self.reviewed_count += 1
            if decision.rating != Rating.AGAIN:
                self.correct_count += 1
            self.submitter.submit(
                self.user_id,
                word.id,
                decision.rating,
                session_id=self.session_id,
                source=decision.source,
            )

        if decision.relearn:
            self.queue.enqueue_relearn(word.id)
        if decision.clear_force_test:
            self.queue.clear_force_test(word.id)

        if decision.advance:
            if self.consolidating:
                self.queue.advance(decision.rating)
            else:
                self.queue.advance()
            self._load_current()
            if self.is_complete:
                logger.info(
                    "Session %s complete: %d reviewed, %d correct",
                    self.session_id, self.reviewed_count, self.correct_count
                )

        return decision
