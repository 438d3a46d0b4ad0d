"""Tests for the HTTP API."""

import pytest
from fastapi.testclient import TestClient

from api.server import app


@pytest.fixture
def client(db):
    return TestClient(app)


def _assert_error(response, status_code):
    assert response.status_code == status_code
    body = response.json()["error"]
    assert body["statusCode"] == status_code
    return body


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


class TestProgress:

    def test_ensure_is_idempotent(self, client):
        first = client.post("/api/me/progress/ensure/7?listId=2")
        second = client.post("/api/me/progress/ensure/7")

        assert first.status_code == 200
        assert first.json()["ok"] is True
        assert second.json()["id"] == first.json()["id"]

    def test_ensure_rejects_bad_id(self, client):
        _assert_error(client.post("/api/me/progress/ensure/0"), 400)

    def test_apply_rating(self, client):
        client.post("/api/me/progress/ensure/7")

        response = client.patch("/api/me/review/progress/7", json={"rating": "good"})

        assert response.status_code == 200
        progress = response.json()["progress"]
        assert progress["state"] == 2
        assert progress["stability"] == pytest.approx(6.75)
        assert progress["reps"] == 1

    def test_unknown_rating(self, client):
        client.post("/api/me/progress/ensure/7")

        body = _assert_error(client.patch("/api/me/review/progress/7", json={"rating": "great"}), 400)
        assert body["message"] == "Invalid rating"

    def test_rating_without_record(self, client):
        body = _assert_error(client.patch("/api/me/review/progress/7", json={"rating": "good"}), 404)
        assert body["message"] == "Review record not found"

    def test_users_are_isolated(self, client):
        client.post("/api/me/progress/ensure/7", headers={"X-User-Id": "test"})

        assert client.get("/api/me/review/stats").json()["total_words"] == 0
        stats = client.get("/api/me/review/stats", headers={"X-User-Id": "test"}).json()
        assert stats["total_words"] == 1
        assert stats["new_words"] == 1


class TestQueue:

    def test_queue_with_stats(self, client):
        for word_id in (1, 2, 3):
            client.post(f"/api/me/progress/ensure/{word_id}")
        client.patch("/api/me/review/progress/3", json={"rating": "easy"})

        body = client.get("/api/me/review/queue?limit=10").json()

        assert [r["word_id"] for r in body["queue"]] == [1, 2]
        assert body["stats"]["total_words"] == 3
        assert body["stats"]["due_today"] == 2

    @pytest.mark.parametrize("limit", ["0", "101", "lots"])
    def test_queue_limit_validation(self, client, limit):
        _assert_error(client.get(f"/api/me/review/queue?limit={limit}"), 400)

    def test_due_list_accepts_larger_limits(self, client):
        client.post("/api/me/progress/ensure/1")

        response = client.get("/api/me/reviews/due-list?limit=500")

        assert response.status_code == 200
        assert len(response.json()["reviews"]) == 1
        _assert_error(client.get("/api/me/reviews/due-list?limit=501"), 400)


class TestQuizzes:

    def test_submit_quiz(self, client):
        client.post("/api/me/progress/ensure/4")

        response = client.post("/api/me/quiz/submit", json={"quiz_word_id": 4, "rating": "again"})

        assert response.status_code == 200
        body = response.json()
        assert body["is_correct"] is False
        assert body["updated_progress"]["lapses"] == 1

    def test_submit_quiz_echoes_is_correct(self, client):
        client.post("/api/me/progress/ensure/4")

        body = client.post(
            "/api/me/quiz/submit", json={"word_id": 4, "rating": "hard", "is_correct": True}
        ).json()

        assert body["is_correct"] is True

    def test_submit_quiz_needs_a_word(self, client):
        _assert_error(client.post("/api/me/quiz/submit", json={"rating": "good"}), 400)

    def test_quiz_options(self, client, lexicon):
        body = client.get("/api/me/quiz/options/1").json()

        assert len(body["options"]) == 4
        assert body["correct"] in body["options"]

    def test_quiz_options_unknown_word(self, client, lexicon):
        _assert_error(client.get("/api/me/quiz/options/99"), 404)

    def test_review_session_skips_new_words(self, client, lexicon):
        client.post("/api/me/progress/ensure/1")

        response = client.get("/api/me/review/session")

        assert response.status_code == 200
        assert response.json()["quizzes"] == []

    def test_learn_session(self, client, lexicon):
        client.post("/api/me/progress/ensure/2?listId=5")
        client.post("/api/me/progress/ensure/3?listId=5")

        quizzes = client.get("/api/me/learn/session?listId=5").json()["quizzes"]

        assert [q["quiz_word_id"] for q in quizzes] == [2, 3]
        assert all(len(q["options"]) == 4 for q in quizzes)

    def test_learn_session_requires_list(self, client):
        body = _assert_error(client.get("/api/me/learn/session"), 400)
        assert body["details"] == "listId is required"
