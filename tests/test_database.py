"""Tests for the review record store (SQLite-backed)."""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import text

from core import errors
from core.fsrs import CardState, Rating, scheduler


NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


def _seed_due_and_future(db, user="demo"):
    """3 due (never reviewed) records and 10 scheduled into the future."""
    for offset, word_id in ((3, 101), (1, 102), (2, 103)):
        db.ensure_record(user, word_id, now=NOW - timedelta(days=offset))
    for word_id in range(200, 210):
        db.ensure_record(user, word_id, now=NOW - timedelta(days=1))
        db.apply_rating(user, word_id, Rating.GOOD, review_time=NOW)


class TestEnsureRecord:

    def test_creates_new_record(self, db):
        record = db.ensure_record("demo", 7, word_list_id=2, now=NOW)

        assert record.id is not None
        assert record.state == CardState.NEW
        assert record.stability == pytest.approx(2.7)
        assert record.difficulty == pytest.approx(5.0)
        assert record.due == NOW
        assert record.word_list_id == 2
        assert record.version == 1

    def test_is_idempotent(self, db):
        first = db.ensure_record("demo", 7, now=NOW)
        second = db.ensure_record("demo", 7, now=NOW + timedelta(days=3))

        assert second.id == first.id
        assert second.created_at == first.created_at

    def test_records_are_scoped_by_user(self, db):
        mine = db.ensure_record("demo", 7, now=NOW)
        theirs = db.ensure_record("test", 7, now=NOW)

        assert mine.id != theirs.id
        assert db.get_stats("demo").total == 1

    @pytest.mark.parametrize("word_id", [0, -3, "abc", None])
    def test_rejects_bad_word_id(self, db, word_id):
        with pytest.raises(errors.ValidationError):
            db.ensure_record("demo", word_id)


class TestApplyRating:

    def test_updates_record_and_logs_event(self, db):
        db.ensure_record("demo", 7, now=NOW - timedelta(days=1))

        updated = db.apply_rating("demo", 7, "good", review_time=NOW, session_id="s1", source="test")

        assert updated.stability == pytest.approx(6.75)
        assert updated.state == CardState.REVIEW
        assert updated.due == NOW + timedelta(days=7)
        assert updated.version == 2

        stored = db.get_record("demo", 7)
        assert stored.stability == pytest.approx(6.75)
        assert stored.last_review == NOW
        assert stored.reps == 1

        events = db.get_review_events("demo")
        assert len(events) == 1
        assert events[0]["rating"] == "good"
        assert events[0]["session_id"] == "s1"
        assert events[0]["source"] == "test"
        assert events[0]["timestamp"] == NOW

    def test_missing_record(self, db):
        with pytest.raises(errors.RecordNotFound) as exc_info:
            db.apply_rating("demo", 999, Rating.GOOD)

        assert exc_info.value.status_code == 404
        assert db.get_review_events("demo") == []

    def test_invalid_rating_is_rejected_before_io(self, db):
        db.ensure_record("demo", 7, now=NOW)

        with pytest.raises(errors.InvalidRating):
            db.apply_rating("demo", 7, "perfect")

        assert db.get_record("demo", 7).reps == 0

    def test_sequential_ratings_build_on_each_other(self, db):
        db.ensure_record("demo", 7, now=NOW)
        db.apply_rating("demo", 7, Rating.GOOD, review_time=NOW)
        updated = db.apply_rating("demo", 7, Rating.AGAIN, review_time=NOW + timedelta(days=7))

        assert updated.stability == pytest.approx(5.4)
        assert updated.lapses == 1
        assert updated.state == CardState.RELEARNING
        assert updated.version == 3

    def test_concurrent_update_is_reported_as_stale(self, db, monkeypatch):
        db.ensure_record("demo", 7, now=NOW)
        original = scheduler.process_review

        def process_then_race(record, rating, review_time=None):
            result = original(record, rating, review_time)
            # Another writer commits between our read and our write
            with db.get_engine().begin() as conn:
                conn.execute(
                    text("UPDATE user_word_progress SET version = version + 1 WHERE word_id = :w"),
                    {"w": 7}
                )
            return result

        monkeypatch.setattr(scheduler, "process_review", process_then_race)

        with pytest.raises(errors.StaleWriteError) as exc_info:
            db.apply_rating("demo", 7, Rating.GOOD, review_time=NOW)

        assert exc_info.value.status_code == 409
        assert db.get_record("demo", 7).state == CardState.NEW
        assert db.get_review_events("demo") == []


class TestQueues:

    def test_due_queue_returns_only_due_records_in_order(self, db):
        _seed_due_and_future(db)

        queue = db.get_due_queue("demo", limit=5, due_before=NOW)

        assert [r.word_id for r in queue] == [101, 103, 102]
        assert all(r.due <= NOW for r in queue)

    def test_due_queue_respects_limit(self, db):
        _seed_due_and_future(db)

        queue = db.get_due_queue("demo", limit=2, due_before=NOW + timedelta(days=30))

        assert len(queue) == 2
        assert [r.word_id for r in queue] == [101, 103]

    def test_due_queue_can_skip_new_records(self, db):
        _seed_due_and_future(db)

        queue = db.get_due_queue("demo", limit=50, due_before=NOW + timedelta(days=30), include_new=False)

        assert len(queue) == 10
        assert all(r.state == CardState.REVIEW for r in queue)

    def test_due_queue_empty(self, db):
        assert db.get_due_queue("demo", limit=10, due_before=NOW) == []

    @pytest.mark.parametrize("limit", [0, 501, -1, "many"])
    def test_due_queue_limit_bounds(self, db, limit):
        with pytest.raises(errors.ValidationError):
            db.get_due_queue("demo", limit=limit)

    def test_learn_queue_is_new_records_of_one_list_in_insertion_order(self, db):
        db.ensure_record("demo", 3, word_list_id=1, now=NOW - timedelta(hours=1))
        db.ensure_record("demo", 1, word_list_id=1, now=NOW - timedelta(hours=3))
        db.ensure_record("demo", 2, word_list_id=1, now=NOW - timedelta(hours=2))
        db.ensure_record("demo", 4, word_list_id=2, now=NOW - timedelta(hours=4))
        db.apply_rating("demo", 2, Rating.GOOD, review_time=NOW)

        queue = db.get_learn_queue("demo", 1, limit=10)

        assert [r.word_id for r in queue] == [1, 3]

    def test_learn_queue_limit_bounds(self, db):
        with pytest.raises(errors.ValidationError):
            db.get_learn_queue("demo", 1, limit=101)


class TestStats:

    def test_counts_by_state(self, db):
        _seed_due_and_future(db)
        db.ensure_record("demo", 300, now=NOW - timedelta(days=1))
        db.apply_rating("demo", 300, Rating.AGAIN, review_time=NOW)
        db.ensure_record("demo", 301, now=NOW - timedelta(days=1))
        db.apply_rating("demo", 301, Rating.HARD, review_time=NOW)

        stats = db.get_stats("demo", now=NOW)

        assert stats.total == 15
        assert stats.new == 3
        assert stats.learning == 1
        assert stats.review == 10
        assert stats.relearning == 1
        assert stats.due_today == 3
        assert stats.to_dict()["total_words"] == 15

    def test_empty_user(self, db):
        stats = db.get_stats("nobody")
        assert stats.total == 0
        assert stats.due_today == 0


class TestLifecycle:

    def test_detach_word_list_keeps_records(self, db):
        db.ensure_record("demo", 1, word_list_id=5, now=NOW)
        db.ensure_record("demo", 2, word_list_id=5, now=NOW)
        db.ensure_record("demo", 3, word_list_id=6, now=NOW)

        assert db.detach_word_list("demo", 5) == 2

        assert db.get_record("demo", 1).word_list_id is None
        assert db.get_record("demo", 1).version == 2
        assert db.get_record("demo", 3).word_list_id == 6

    def test_delete_record(self, db):
        db.ensure_record("demo", 1, now=NOW)

        assert db.delete_record("demo", 1) is True
        assert db.delete_record("demo", 1) is False
        assert db.load_record("demo", 1) is None
        with pytest.raises(errors.RecordNotFound):
            db.get_record("demo", 1)


class TestEvents:

    def test_recent_events_newest_first(self, db):
        db.ensure_record("demo", 1, now=NOW)
        for day, rating in enumerate(["again", "hard", "good"]):
            db.apply_rating("demo", 1, rating, review_time=NOW + timedelta(days=day))

        recent = db.get_recent_events("demo", limit=2)

        assert [e["rating"] for e in recent] == ["good", "hard"]

    def test_review_events_since(self, db):
        db.ensure_record("demo", 1, now=NOW)
        db.apply_rating("demo", 1, "good", review_time=NOW)
        db.apply_rating("demo", 1, "good", review_time=NOW + timedelta(days=7))

        events = db.get_review_events("demo", since=NOW + timedelta(days=1))

        assert len(events) == 1
        assert events[0]["stability_before"] == pytest.approx(6.75)


def test_test_mode_switches_database_name(monkeypatch):
    from core.fsrs import database

    monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@localhost:5432/vocab_db")
    monkeypatch.setenv("TEST_MODE", "true")

    assert database.get_database_url().endswith("/test_vocab_db")


def test_missing_database_url(monkeypatch):
    from core.fsrs import database

    monkeypatch.delenv("DATABASE_URL", raising=False)

    with pytest.raises(ValueError):
        database.get_database_url()
