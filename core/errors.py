"""
Error taxonomy for the review scheduler.

Every error carries an HTTP-equivalent status code so the API layer can
render it without a lookup table. The pure scheduler only ever raises
InvalidRating; everything else comes from the persistence boundary.
"""

from __future__ import annotations

from typing import Optional


class SchedulerError(Exception):
    """Base class for all review-scheduler failures."""
    status_code = 500

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(SchedulerError, ValueError):
    """Malformed input: bad rating, out-of-range limit, non-positive id."""
    status_code = 400


class InvalidRating(ValidationError):
    """Rating value outside {again, hard, good, easy}."""


class RecordNotFound(SchedulerError, LookupError):
    """No review record exists for the (user, word) pair."""
    status_code = 404

    def __init__(self, user_id: str, word_id: int):
        super().__init__(
            "Review record not found",
            f"user_id={user_id} word_id={word_id}"
        )
        self.user_id = user_id
        self.word_id = word_id


class WordNotFound(SchedulerError, LookupError):
    """No lexicon entry exists for the word id."""
    status_code = 404

    def __init__(self, word_id: int):
        super().__init__("Word not found", f"word_id={word_id}")
        self.word_id = word_id


class StorageError(SchedulerError):
    """Underlying persistence failure during read or write."""
    status_code = 500


class StaleWriteError(StorageError):
    """A concurrent rating update won the race for this record."""
    status_code = 409


def require_positive_id(value: object, name: str) -> int:
    """
    Coerce an identifier to a positive int.

    Raises:
        ValidationError: if the value is not a positive integer
    """
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {name}", f"{name} must be a positive integer") from None
    if number <= 0 or (isinstance(value, float) and not value.is_integer()):
        raise ValidationError(f"Invalid {name}", f"{name} must be a positive integer")
    return number


def require_limit(value: object, maximum: int, name: str = "limit") -> int:
    """
    Bounds-check a queue/session limit to [1, maximum].

    Raises:
        ValidationError: if the value is not an integer in range
    """
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {name}", f"{name} must be an integer in 1-{maximum}") from None
    if number < 1 or number > maximum:
        raise ValidationError(f"Invalid {name}", f"{name} must be an integer in 1-{maximum}")
    return number
