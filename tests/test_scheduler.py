"""Tests for the pure FSRS-lite update rule."""

from datetime import datetime, timedelta, timezone

import pytest

from core.errors import InvalidRating, ValidationError
from core.fsrs import (
    CardState,
    Rating,
    calculate_next_review,
    initialize_new_record,
    parse_rating,
    process_review,
)


REVIEW_TIME = datetime(2025, 3, 1, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def new_record():
    return initialize_new_record("demo", 42, word_list_id=3, now=REVIEW_TIME - timedelta(days=1))


class TestCalculateNextReview:

    def test_new_item_rated_good(self):
        result = calculate_next_review(2.7, 5.0, Rating.GOOD, 0)

        assert result.stability == pytest.approx(6.75)
        assert result.difficulty == pytest.approx(4.85)
        assert result.interval_days == 7
        assert result.state == CardState.REVIEW
        assert result.lapses == 0

    def test_new_item_rated_again(self):
        result = calculate_next_review(2.7, 5.0, Rating.AGAIN, 0)

        assert result.stability == pytest.approx(2.16)
        assert result.difficulty == pytest.approx(5.8)
        assert result.interval_days == 1
        assert result.state == CardState.RELEARNING
        assert result.lapses == 1

    def test_mature_item_rated_easy(self):
        result = calculate_next_review(20.0, 3.0, Rating.EASY, 2)

        assert result.stability == pytest.approx(80.0)
        assert result.difficulty == pytest.approx(2.7)
        assert result.interval_days == 80
        assert result.state == CardState.REVIEW
        assert result.lapses == 2

    def test_hard_keeps_young_item_learning(self):
        result = calculate_next_review(2.7, 5.0, Rating.HARD, 0)

        assert result.stability == pytest.approx(3.24)
        assert result.difficulty == pytest.approx(5.15)
        assert result.interval_days == 3
        assert result.state == CardState.LEARNING

    def test_hard_on_mature_item_is_review(self):
        result = calculate_next_review(10.0, 5.0, Rating.HARD, 0)

        assert result.stability == pytest.approx(12.0)
        assert result.interval_days == 12
        assert result.state == CardState.REVIEW

    def test_stability_floor(self):
        result = calculate_next_review(0.1, 5.0, Rating.AGAIN, 4)

        assert result.stability == pytest.approx(0.1)
        assert result.lapses == 5

    @pytest.mark.parametrize("difficulty,rating,expected", [
        (9.5, Rating.AGAIN, 10.0),
        (10.0, Rating.HARD, 10.0),
        (1.1, Rating.EASY, 1.0),
        (1.0, Rating.GOOD, 1.0),
    ])
    def test_difficulty_is_clamped(self, difficulty, rating, expected):
        result = calculate_next_review(5.0, difficulty, rating, 0)
        assert result.difficulty == pytest.approx(expected)

    def test_interval_never_below_one_day(self):
        result = calculate_next_review(0.1, 5.0, Rating.HARD, 0)
        assert result.interval_days == 1

    def test_interval_rounds_half_up(self):
        # 1.0 * 2.5 = 2.5 days -> 3
        result = calculate_next_review(1.0, 5.0, Rating.GOOD, 0)
        assert result.interval_days == 3

    @pytest.mark.parametrize("rating", list(Rating))
    @pytest.mark.parametrize("stability,difficulty", [(0.1, 1.0), (2.7, 5.0), (40.0, 9.9)])
    def test_bounds_hold_for_every_rating(self, rating, stability, difficulty):
        result = calculate_next_review(stability, difficulty, rating, 0)

        assert result.stability >= 0.1
        assert 1.0 <= result.difficulty <= 10.0
        assert result.interval_days >= 1
        assert result.lapses == (1 if rating == Rating.AGAIN else 0)

    def test_accepts_string_ratings(self):
        result = calculate_next_review(2.7, 5.0, "Good", 0)
        assert result.state == CardState.REVIEW

    @pytest.mark.parametrize("bad", ["perfect", "", None, 3])
    def test_invalid_rating(self, bad):
        with pytest.raises(InvalidRating):
            calculate_next_review(2.7, 5.0, bad, 0)


class TestProcessReview:

    def test_returns_new_record_and_event(self, new_record):
        updated, event = process_review(new_record, Rating.GOOD, REVIEW_TIME)

        assert updated is not new_record
        assert new_record.state == CardState.NEW
        assert updated.state == CardState.REVIEW
        assert updated.due == REVIEW_TIME + timedelta(days=7)
        assert updated.last_review == REVIEW_TIME
        assert updated.reps == 1
        assert updated.word_list_id == 3

        assert event["rating"] == "good"
        assert event["timestamp"] == REVIEW_TIME
        assert event["stability_before"] == pytest.approx(2.7)
        assert event["stability_after"] == pytest.approx(6.75)
        assert event["state_before"] == int(CardState.NEW)
        assert event["state_after"] == int(CardState.REVIEW)
        assert event["interval_days"] == 7
        assert event["session_id"] is None

    def test_is_deterministic(self, new_record):
        first, _ = process_review(new_record, Rating.HARD, REVIEW_TIME)
        second, _ = process_review(new_record, Rating.HARD, REVIEW_TIME)
        assert first == second

    def test_again_schedules_one_day_out(self, new_record):
        updated, event = process_review(new_record, "again", REVIEW_TIME)

        assert updated.due == REVIEW_TIME + timedelta(days=1)
        assert updated.lapses == 1
        assert event["lapses_after"] == 1

    def test_defaults_review_time_to_now(self, new_record):
        before = datetime.now(timezone.utc)
        updated, _ = process_review(new_record, Rating.EASY)
        assert updated.last_review >= before

    def test_invalid_rating_leaves_record_alone(self, new_record):
        with pytest.raises(ValidationError):
            process_review(new_record, "meh", REVIEW_TIME)


def test_parse_rating_normalizes_case():
    assert parse_rating(" EASY ") == Rating.EASY
    assert parse_rating(Rating.AGAIN) is Rating.AGAIN


def test_new_record_is_due_immediately():
    record = initialize_new_record("demo", 1, now=REVIEW_TIME)

    assert record.is_due(REVIEW_TIME)
    assert record.state == CardState.NEW
    assert record.stability == pytest.approx(2.7)
    assert record.difficulty == pytest.approx(5.0)
