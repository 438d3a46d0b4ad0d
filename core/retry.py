"""
Retry helpers for storage calls.

Exponential backoff with optional jitter. Exceptions listed in `give_up_on`
are re-raised immediately even when they subclass a retried type.
"""

from __future__ import annotations
import logging
import random
import time
from typing import Callable, Optional, Sequence, Type, TypeVar

from core.errors import StaleWriteError, StorageError
from core.fsrs.constants import SUBMIT_BASE_DELAY, SUBMIT_MAX_ATTEMPTS, SUBMIT_MAX_DELAY

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryConfig:
    """Configuration for retry behavior."""

    def __init__(
        self,
        max_attempts: int = SUBMIT_MAX_ATTEMPTS,
        base_delay: float = SUBMIT_BASE_DELAY,
        max_delay: float = SUBMIT_MAX_DELAY,
        exponential_base: float = 2.0,
        jitter: bool = True,
        jitter_max: float = 0.25,
        exceptions: Sequence[Type[Exception]] = (StorageError,),
        give_up_on: Sequence[Type[Exception]] = (StaleWriteError,),
    ):
        """
        Args:
            max_attempts: Maximum number of attempts (including first try)
            base_delay: Initial delay between retries in seconds
            max_delay: Maximum delay between retries in seconds
            exponential_base: Base for exponential backoff (delay * base^attempt)
            jitter: Whether to add random jitter to delays
            jitter_max: Maximum jitter as fraction of delay (0.0 to 1.0)
            exceptions: Exception types to retry on
            give_up_on: Exception types never retried
        """
        self.max_attempts = max(1, max_attempts)
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.exponential_base = exponential_base
        self.jitter = jitter
        self.jitter_max = jitter_max
        self.exceptions = tuple(exceptions)
        self.give_up_on = tuple(give_up_on)

    def calculate_delay(self, attempt: int) -> float:
        """
        Calculate delay for a given attempt number.

        Args:
            attempt: The attempt number (0-indexed)

        Returns:
            Delay in seconds with optional jitter
        """
        delay = min(self.base_delay * (self.exponential_base ** attempt), self.max_delay)
        if self.jitter:
            delay += delay * random.uniform(0, self.jitter_max)
        return delay


def call_with_retry(
    func: Callable[[], T],
    config: Optional[RetryConfig] = None,
    sleep: Callable[[float], None] = time.sleep,
    label: str = "call"
) -> T:
    """
    Call `func` until it succeeds or attempts run out.

    Args:
        func: Zero-argument callable
        config: Retry configuration (defaults to storage retry settings)
        sleep: Sleep function (injectable for tests)
        label: Name used in log messages

    Returns:
        Whatever `func` returns

    Raises:
        The last retried exception once attempts are exhausted, or any
        exception that is not retried
    """
    config = config or RetryConfig()

    for attempt in range(config.max_attempts):
        try:
            return func()
        except config.give_up_on:
            raise
        except config.exceptions as exc:
            if attempt >= config.max_attempts - 1:
                logger.error("All %d attempts failed for %s: %s", config.max_attempts, label, exc)
                raise
            delay = config.calculate_delay(attempt)
            logger.warning(
                "Retry %d/%d for %s: %s: %s. Waiting %.2fs",
                attempt + 1, config.max_attempts, label, type(exc).__name__, exc, delay
            )
            sleep(delay)

    raise RuntimeError("unreachable")
