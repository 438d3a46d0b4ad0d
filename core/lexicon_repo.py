"""
MongoDB repository for lexicon access.

Provides functions to query and retrieve words (prompt text, definitions,
tags, mnemonic blueprint) keyed by the integer word_id used in review records.
"""

from __future__ import annotations

import logging
import os
from typing import Iterable, Optional

from dotenv import load_dotenv
from pymongo import ASCENDING, MongoClient
from pymongo.collection import Collection

from core.schemas import WordEntry

# Load environment
load_dotenv()

logger = logging.getLogger(__name__)

# Configuration
DEFAULT_DB_NAME = "vocab_trainer"
COLLECTION_NAME = "words"
_PROJECTION = {"_id": 0}

# Global connection pool (reused across requests)
_client: Optional[MongoClient] = None
_collection: Optional[Collection] = None


# ---- Connection Management ----

def get_collection() -> Collection:
    """
    Get a connection to the MongoDB words collection.

    Uses a persistent connection pool that's reused across requests
    to avoid the cold start on every query.

    Returns:
        MongoDB collection object
    """
    global _client, _collection

    # Return cached collection if it exists
    if _collection is not None:
        return _collection

    # Create new connection
    mongo_uri = os.getenv("MONGO_URI")
    if not mongo_uri:
        raise ValueError("MONGO_URI not found in environment variables")

    _client = MongoClient(
        mongo_uri,
        maxPoolSize=10,  # Connection pool size
        minPoolSize=1,   # Keep at least 1 connection alive
        maxIdleTimeMS=60000  # Keep connections alive for 60 seconds
    )
    db = _client[os.getenv("MONGO_DB_NAME", DEFAULT_DB_NAME)]
    _collection = db[COLLECTION_NAME]

    return _collection


def ensure_indexes() -> None:
    """Create the unique word_id index (idempotent)."""
    get_collection().create_index([("word_id", ASCENDING)], unique=True)


# ---- Query Functions ----

def _to_entry(doc: Optional[dict]) -> Optional[WordEntry]:
    if doc is None:
        return None
    return WordEntry.model_validate(doc)


def get_word_by_id(word_id: int) -> Optional[WordEntry]:
    """
    Get a word by its word_id.

    Args:
        word_id: The integer word identifier

    Returns:
        WordEntry, or None if not found
    """
    collection = get_collection()
    return _to_entry(collection.find_one({"word_id": word_id}, _PROJECTION))


def get_words_by_ids(word_ids: Iterable[int]) -> dict[int, WordEntry]:
    """
    Fetch many words in one round trip.

    Args:
        word_ids: Word identifiers to fetch

    Returns:
        Mapping of word_id -> WordEntry (missing ids are absent)
    """
    ids = list(dict.fromkeys(word_ids))
    if not ids:
        return {}

    collection = get_collection()
    docs = collection.find({"word_id": {"$in": ids}}, _PROJECTION)
    entries = [WordEntry.model_validate(doc) for doc in docs]
    return {entry.word_id: entry for entry in entries}


def get_distractor_candidates(word: WordEntry, count: int) -> list[WordEntry]:
    """
    Sample words to use as wrong answers for a quiz on `word`.

    Prefers words sharing a tag or part of speech; tops up from the whole
    lexicon when the adjacent set is too small.

    Args:
        word: The quiz word
        count: Number of distractors wanted

    Returns:
        Up to `count` WordEntry objects, never including `word` itself
    """
    if count <= 0:
        return []

    collection = get_collection()

    adjacent: list[dict] = [{"pos": word.pos.value}]
    if word.tags:
        adjacent.append({"tags": {"$in": word.tags}})

    pipeline = [
        {"$match": {"word_id": {"$ne": word.word_id}, "$or": adjacent}},
        {"$sample": {"size": count}},
        {"$project": _PROJECTION},
    ]
    picked = [WordEntry.model_validate(doc) for doc in collection.aggregate(pipeline)]

    if len(picked) < count:
        exclude = [word.word_id] + [p.word_id for p in picked]
        pipeline = [
            {"$match": {"word_id": {"$nin": exclude}}},
            {"$sample": {"size": count - len(picked)}},
            {"$project": _PROJECTION},
        ]
        picked.extend(WordEntry.model_validate(doc) for doc in collection.aggregate(pipeline))

    if len(picked) < count:
        logger.warning("Only %d distractors available for word %s", len(picked), word.word_id)

    return picked


def get_mnemonic_hint(word_id: int) -> Optional[str]:
    """
    Get the mnemonic blueprint text for a word.

    Returns:
        Blueprint string, or None if the word or its mnemonic is missing
    """
    entry = get_word_by_id(word_id)
    return entry.hint if entry else None


def upsert_word(entry: WordEntry) -> None:
    """Insert or replace a word document keyed by word_id."""
    collection = get_collection()
    collection.replace_one(
        {"word_id": entry.word_id},
        entry.model_dump(mode="json"),
        upsert=True
    )


def count_words() -> int:
    """
    Count total words in the lexicon.

    Returns:
        Total number of words
    """
    return get_collection().count_documents({})
