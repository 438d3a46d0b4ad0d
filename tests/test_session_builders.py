"""Tests for quiz generation, session builders and the options cache."""

import json
import random
from datetime import datetime, timedelta, timezone

import pytest

from core import errors
from core.fsrs import Rating
from core.schemas import PartOfSpeech, WordEntry, compress_definition
from core.session_builders import (
    QuizOptions,
    QuizOptionsCache,
    build_quiz,
    build_quiz_options,
    build_quizzes,
    create_learn_session,
    create_review_session,
    parse_session_payload,
)


NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


def _reviewed(db, word_id, days_ago, word_list_id=None):
    """Record reviewed `days_ago` with GOOD (due 7 days after that)."""
    when = NOW - timedelta(days=days_ago)
    db.ensure_record("demo", word_id, word_list_id=word_list_id, now=when)
    db.apply_rating("demo", word_id, Rating.GOOD, review_time=when)


class TestCompressDefinition:

    def test_keeps_short_definition(self):
        assert compress_definition("a small dog") == "a small dog"

    def test_first_sense_only(self):
        assert compress_definition("to run; to flee\nsecond line") == "to run"

    def test_truncates_on_word_boundary(self):
        result = compress_definition("one two three four five", max_length=12)
        assert result == "one two..."

    @pytest.mark.parametrize("blank", ["", "   ", None])
    def test_blank(self, blank):
        assert compress_definition(blank) == ""

    def test_quiz_text_prefers_stored_compressed_definition(self):
        entry = WordEntry(word_id=1, word="x", definition="long; text", compressed_definition="short")
        assert entry.quiz_text() == "short"


class TestBuildQuiz:

    def test_one_correct_option_among_four(self, lexicon):
        quiz = build_quiz(lexicon.words[1], random.Random(3))

        assert quiz.quiz_word_id == 1
        assert quiz.prompt == "apple"
        assert quiz.hint == "An apple a day"
        assert len(quiz.options) == 4
        assert [o.word_id for o in quiz.options].count(1) == 1
        assert quiz.correct_answer == "a round fruit with red or green skin"
        assert quiz.correct_answer in quiz.to_quiz_options().options

    def test_distractors_come_from_adjacent_words(self, lexicon):
        quiz = build_quiz(lexicon.words[5], random.Random(0))

        distractor_ids = {o.word_id for o in quiz.options} - {5}
        assert 6 in distractor_ids  # the other verb

    def test_distractor_with_the_correct_text_is_skipped(self, lexicon):
        apple = lexicon.words[1]
        twin = WordEntry(word_id=8, word="pomme", definition=apple.definition, pos=PartOfSpeech.NOUN, tags=["food"])
        lexicon.words = {8: twin, **lexicon.words}

        quiz = build_quiz(apple, random.Random(3))

        texts = [o.definition for o in quiz.options]
        assert 8 not in {o.word_id for o in quiz.options}
        assert len(texts) == 4
        assert len(set(texts)) == 4
        assert texts.count(quiz.correct_answer) == 1

    def test_distractors_with_the_same_text_count_once(self, lexicon):
        bread = lexicon.words[2]
        loaf = WordEntry(word_id=8, word="loaf", definition=bread.definition, pos=PartOfSpeech.NOUN, tags=["food"])
        lexicon.words = {2: bread, 8: loaf, **lexicon.words}

        quiz = build_quiz(lexicon.words[1], random.Random(3))

        ids = {o.word_id for o in quiz.options}
        assert 2 in ids and 8 not in ids
        assert len({o.definition for o in quiz.options}) == 4

    def test_build_quizzes_keeps_order_and_skips_unknown_words(self, lexicon):
        quizzes = build_quizzes([3, 99, 1])
        assert [q.quiz_word_id for q in quizzes] == [3, 1]

    def test_build_quiz_options(self, lexicon):
        options = build_quiz_options(4)

        assert isinstance(options, QuizOptions)
        assert options.correct == "a domesticated carnivorous mammal"
        assert len(options.options) == 4
        assert options.is_correct(options.correct)

    def test_build_quiz_options_unknown_word(self, lexicon):
        with pytest.raises(errors.WordNotFound):
            build_quiz_options(99)

    def test_build_quiz_options_bad_id(self, lexicon):
        with pytest.raises(errors.ValidationError):
            build_quiz_options(0)


class TestReviewSession:

    def test_most_overdue_first_and_no_new_words(self, db, lexicon):
        _reviewed(db, 2, days_ago=10)
        _reviewed(db, 1, days_ago=20)
        _reviewed(db, 99, days_ago=15)
        db.ensure_record("demo", 3, now=NOW - timedelta(days=1))

        payload = create_review_session("demo", limit=10, due_before=NOW)

        assert payload.word_ids == [1, 2]

    def test_limit(self, db, lexicon):
        for word_id in (1, 2, 3, 4):
            _reviewed(db, word_id, days_ago=10 + word_id)

        payload = create_review_session("demo", limit=2, due_before=NOW)

        assert payload.word_ids == [4, 3]

    def test_nothing_due(self, db, lexicon):
        _reviewed(db, 1, days_ago=1)

        payload = create_review_session("demo", due_before=NOW)

        assert payload.quizzes == []

    @pytest.mark.parametrize("limit", [0, 101])
    def test_limit_bounds(self, db, lexicon, limit):
        with pytest.raises(errors.ValidationError):
            create_review_session("demo", limit=limit)


class TestLearnSession:

    def test_new_words_of_list(self, db, lexicon):
        db.ensure_record("demo", 2, word_list_id=1, now=NOW - timedelta(hours=2))
        db.ensure_record("demo", 5, word_list_id=1, now=NOW - timedelta(hours=1))
        db.ensure_record("demo", 4, word_list_id=2, now=NOW - timedelta(hours=3))

        payload = create_learn_session("demo", 1)

        assert payload.word_ids == [2, 5]
        assert payload.quiz_for(5).prompt == "run"
        assert payload.quiz_for(4) is None

    def test_bad_list_id(self, db, lexicon):
        with pytest.raises(errors.ValidationError):
            create_learn_session("demo", -1)


class TestParseSessionPayload:

    def _raw(self):
        return {
            "quizzes": [{
                "quiz_word_id": 1,
                "prompt": "apple",
                "correct_answer": "fruit",
                "options": [
                    {"word_id": 1, "word": "apple", "definition": "fruit"},
                    {"word_id": 2, "word": "bread", "definition": "baked food"},
                ],
            }]
        }

    def test_none_is_empty(self):
        assert parse_session_payload(None).quizzes == []

    def test_dict_and_json(self):
        from_dict = parse_session_payload(self._raw())
        from_json = parse_session_payload(json.dumps(self._raw()))

        assert from_dict == from_json
        assert from_dict.quizzes[0].is_correct(1)
        assert not from_dict.quizzes[0].is_correct(2)

    def test_missing_correct_option(self):
        raw = self._raw()
        raw["quizzes"][0]["options"].pop(0)

        with pytest.raises(errors.StorageError):
            parse_session_payload(raw)

    def test_duplicate_option_texts(self):
        raw = self._raw()
        raw["quizzes"][0]["options"][1]["definition"] = "fruit"

        with pytest.raises(errors.StorageError):
            parse_session_payload(raw)

    def test_wrong_shape(self):
        with pytest.raises(errors.StorageError):
            parse_session_payload('{"quizzes": "nope"}')


class TestQuizOptionsCache:

    def _fetcher(self, fail_first=()):
        calls = []
        failing = set(fail_first)

        def fetch(word_id):
            calls.append(word_id)
            if word_id in failing:
                failing.discard(word_id)
                raise errors.StorageError("lexicon unavailable")
            return QuizOptions(options=[f"def {word_id}", "other"], correct=f"def {word_id}")

        return fetch, calls

    def test_prefetch_fills_cache(self, immediate_executor):
        fetch, calls = self._fetcher()
        cache = QuizOptionsCache(fetch=fetch, executor=immediate_executor)

        started = cache.prefetch([1, 2, 2])

        assert len(started) == 2
        assert 1 in cache and 2 in cache
        assert cache.get(2).correct == "def 2"
        assert calls == [1, 2]

    def test_prefetch_skips_cached_words(self, immediate_executor):
        fetch, calls = self._fetcher()
        cache = QuizOptionsCache(fetch=fetch, executor=immediate_executor)
        cache.prefetch([1])

        assert cache.prefetch([1]) == []
        assert calls == [1]

    def test_failed_prefetch_is_fetched_again_on_get(self, immediate_executor, caplog):
        fetch, calls = self._fetcher(fail_first=[3])
        cache = QuizOptionsCache(fetch=fetch, executor=immediate_executor)

        cache.prefetch([3])

        assert 3 not in cache
        assert "Prefetch of quiz options for word 3 failed" in caplog.text
        assert cache.get(3).correct == "def 3"
        assert calls == [3, 3]

    def test_get_without_prefetch_fetches_synchronously(self, immediate_executor):
        fetch, calls = self._fetcher()
        cache = QuizOptionsCache(fetch=fetch, executor=immediate_executor)

        assert cache.peek(5) is None
        first = cache.get(5)
        second = cache.get(5)

        assert first is second
        assert calls == [5]
        assert immediate_executor.submitted == 0

    def test_get_propagates_fetch_errors(self, immediate_executor):
        fetch, _ = self._fetcher(fail_first=[4])
        cache = QuizOptionsCache(fetch=fetch, executor=immediate_executor)

        with pytest.raises(errors.StorageError):
            cache.get(4)
