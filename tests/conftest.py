from concurrent.futures import Executor, Future

import pytest

from core import lexicon_repo
from core.fsrs import database
from core.schemas import Mnemonic, PartOfSpeech, WordEntry


@pytest.fixture
def db(tmp_path, monkeypatch):
    """Fresh file-backed SQLite review store per test."""
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'reviews.db'}")
    monkeypatch.setenv("TEST_MODE", "false")
    database.dispose_engine()
    database.init_db()
    yield database
    database.dispose_engine()


def make_word(word_id, word, definition, pos=PartOfSpeech.NOUN, tags=None, blueprint=None):
    return WordEntry(
        word_id=word_id,
        word=word,
        definition=definition,
        pos=pos,
        tags=tags or [],
        mnemonic=Mnemonic(blueprint=blueprint) if blueprint else None,
    )


WORDS = [
    make_word(1, "apple", "a round fruit with red or green skin", tags=["food"], blueprint="An apple a day"),
    make_word(2, "bread", "food made of flour and water, baked", tags=["food"]),
    make_word(3, "cheese", "food made from pressed milk curds", tags=["food"]),
    make_word(4, "dog", "a domesticated carnivorous mammal", tags=["animals"]),
    make_word(5, "run", "move fast on foot", pos=PartOfSpeech.VERB),
    make_word(6, "eat", "put food into the mouth and swallow", pos=PartOfSpeech.VERB, tags=["food"]),
    make_word(7, "swift", "moving with great speed", pos=PartOfSpeech.ADJECTIVE),
]


class FakeLexicon:
    """In-memory replacement for the Mongo-backed lexicon functions."""

    def __init__(self, words):
        self.words = {w.word_id: w for w in words}
        self.lookups = []

    def get_word_by_id(self, word_id):
        self.lookups.append(word_id)
        return self.words.get(word_id)

    def get_words_by_ids(self, word_ids):
        return {wid: self.words[wid] for wid in word_ids if wid in self.words}

    def get_distractor_candidates(self, word, count):
        adjacent = [
            w for w in self.words.values()
            if w.word_id != word.word_id and (w.pos == word.pos or set(w.tags) & set(word.tags))
        ]
        others = [
            w for w in self.words.values()
            if w.word_id != word.word_id and w not in adjacent
        ]
        return (adjacent + others)[:count]

    def get_mnemonic_hint(self, word_id):
        entry = self.words.get(word_id)
        return entry.hint if entry else None


@pytest.fixture
def lexicon(monkeypatch):
    """Replace Mongo lookups with an in-memory word set."""
    fake = FakeLexicon(WORDS)
    monkeypatch.setattr(lexicon_repo, "get_word_by_id", fake.get_word_by_id)
    monkeypatch.setattr(lexicon_repo, "get_words_by_ids", fake.get_words_by_ids)
    monkeypatch.setattr(lexicon_repo, "get_distractor_candidates", fake.get_distractor_candidates)
    monkeypatch.setattr(lexicon_repo, "get_mnemonic_hint", fake.get_mnemonic_hint)
    return fake


class ImmediateExecutor(Executor):
    """Runs submitted work inline so callbacks fire before submit returns."""

    def __init__(self):
        self.submitted = 0

    def submit(self, fn, *args, **kwargs):
        self.submitted += 1
        future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as exc:
            future.set_exception(exc)
        return future


@pytest.fixture
def immediate_executor():
    return ImmediateExecutor()
