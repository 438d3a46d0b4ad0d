"""
Asynchronous rating submission.

The session advances as soon as a rating is decided; the rating itself is
written to the store on a worker thread. Storage failures are retried with
backoff, a missing record is provisioned once, and submissions that still
fail are parked in an outbox for a later flush.

Ratings for the same (user, word) pair are written in submission order: each
one waits for the previous one to settle, and once one is parked the later
ones queue behind it in the outbox.
"""

from __future__ import annotations
import logging
import os
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from datetime import datetime, timezone
from functools import partial
from typing import Callable, Optional

from core import errors, fsrs
from core.fsrs.constants import Rating
from core.fsrs.memory_state import ReviewRecord
from core.retry import RetryConfig, call_with_retry

logger = logging.getLogger(__name__)


def _default_workers() -> int:
    return int(os.getenv("RATING_SUBMIT_WORKERS", "2"))


@dataclass
class PendingRating:
    """One rating waiting to be written."""
    user_id: str
    word_id: int
    rating: Rating
    review_time: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    session_id: Optional[str] = None
    source: Optional[str] = None
    last_error: Optional[str] = None

    @property
    def key(self) -> tuple[str, int]:
        return self.user_id, self.word_id


class RatingSubmitter:
    """
    Fire-and-forget rating writer with retry and an outbox.

    Args:
        apply: Store function applying a rating (fsrs.apply_rating)
        ensure: Store function provisioning a record (fsrs.ensure_record)
        retry_config: Backoff settings for StorageError
        executor: Worker pool (one is created if omitted)
        sleep: Sleep function used between retries
    """

    def __init__(
        self,
        apply: Callable[..., ReviewRecord] = fsrs.apply_rating,
        ensure: Callable[..., ReviewRecord] = fsrs.ensure_record,
        retry_config: Optional[RetryConfig] = None,
        executor: Optional[Executor] = None,
        sleep: Optional[Callable[[float], None]] = None
    ):
        self._apply = apply
        self._ensure = ensure
        self._retry_config = retry_config or RetryConfig()
        self._sleep = sleep
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=_default_workers(),
            thread_name_prefix="rating-submit"
        )
        self._outbox: list[PendingRating] = []
        self._inflight: set[Future] = set()
        # Last submission per (user, word); the next one runs after it
        self._tails: dict[tuple[str, int], Future] = {}
        # Re-entrant: an inline executor runs _deliver inside submit()
        self._lock = threading.RLock()

    # ---- Submission ----

    def submit(
        self,
        user_id: str,
        word_id: int,
        rating: Rating,
        session_id: Optional[str] = None,
        source: Optional[str] = None,
        review_time: Optional[datetime] = None
    ) -> Future:
        """
        Schedule a rating write and return immediately.

        The review time is captured now so retries keep the original
        timestamp.

        Returns:
            Future resolving to the updated record, or None when the rating
            was parked in the outbox or dropped as stale
        """
        pending = PendingRating(
            user_id=user_id,
            word_id=word_id,
            rating=fsrs.parse_rating(rating),
            review_time=review_time or datetime.now(timezone.utc),
            session_id=session_id,
            source=source,
        )
        with self._lock:
            previous = self._tails.get(pending.key)
            future = self._executor.submit(self._deliver_after, previous, pending)
            self._tails[pending.key] = future
            self._inflight.add(future)
        future.add_done_callback(partial(self._forget, pending.key))
        return future

    def _forget(self, key: tuple[str, int], future: Future) -> None:
        with self._lock:
            self._inflight.discard(future)
            if self._tails.get(key) is future:
                del self._tails[key]

    def _deliver_after(self, previous: Optional[Future], pending: PendingRating) -> Optional[ReviewRecord]:
        # Worker pools take jobs in submission order, so `previous` is
        # already running or finished by the time this job starts
        if previous is not None:
            wait([previous])
        return self._deliver(pending)

    def _apply_once(self, pending: PendingRating) -> ReviewRecord:
        kwargs = dict(
            review_time=pending.review_time,
            session_id=pending.session_id,
            source=pending.source,
        )
        try:
            return self._apply(pending.user_id, pending.word_id, pending.rating, **kwargs)
        except errors.RecordNotFound:
            logger.info(
                "No review record for user=%s word=%s; provisioning and retrying once",
                pending.user_id, pending.word_id
            )
            self._ensure(pending.user_id, pending.word_id)
            return self._apply(pending.user_id, pending.word_id, pending.rating, **kwargs)

    def _deliver(self, pending: PendingRating) -> Optional[ReviewRecord]:
        with self._lock:
            blocked = any(p.key == pending.key for p in self._outbox)
            if blocked:
                pending.last_error = "earlier rating for this word is parked"
                self._outbox.append(pending)
        if blocked:
            logger.warning(
                "Rating %s for user=%s word=%s parked behind an earlier rating",
                pending.rating.value, pending.user_id, pending.word_id
            )
            return None

        retry_kwargs = {"sleep": self._sleep} if self._sleep is not None else {}
        try:
            return call_with_retry(
                lambda: self._apply_once(pending),
                self._retry_config,
                label=f"rating word={pending.word_id}",
                **retry_kwargs
            )
        except errors.StaleWriteError as exc:
            logger.error(
                "Dropped stale rating %s for user=%s word=%s: %s",
                pending.rating.value, pending.user_id, pending.word_id, exc.details
            )
            return None
        except errors.StorageError as exc:
            pending.last_error = exc.message
            with self._lock:
                self._outbox.append(pending)
            logger.error(
                "Rating %s for user=%s word=%s moved to outbox: %s",
                pending.rating.value, pending.user_id, pending.word_id, exc
            )
            return None
        except errors.SchedulerError:
            logger.exception(
                "Rating %s for user=%s word=%s rejected",
                pending.rating.value, pending.user_id, pending.word_id
            )
            raise

    # ---- Outbox ----

    @property
    def outbox(self) -> list[PendingRating]:
        with self._lock:
            return list(self._outbox)

    @property
    def pending_count(self) -> int:
        with self._lock:
            return len(self._inflight)

    def flush_outbox(self) -> int:
        """
        Retry every parked rating synchronously, oldest first.

        Ratings that fail again go back into the outbox.

        Returns:
            Number of ratings written
        """
        with self._lock:
            parked, self._outbox = self._outbox, []

        delivered = 0
        for pending in parked:
            if self._deliver(pending) is not None:
                delivered += 1

        if parked:
            logger.info("Flushed outbox: %d of %d ratings written", delivered, len(parked))
        return delivered

    # ---- Lifecycle ----

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Block until in-flight submissions finish.

        Returns:
            True if nothing is still running
        """
        with self._lock:
            futures = list(self._inflight)
        _, not_done = wait(futures, timeout=timeout)
        return not not_done

    def close(self) -> None:
        """Wait for in-flight work and shut down an owned worker pool."""
        if self._owns_executor:
            self._executor.shutdown(wait=True)
