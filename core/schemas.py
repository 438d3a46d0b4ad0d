"""
Pydantic models for the vocabulary lexicon.

These models define the structure of MongoDB word documents consumed by the
queue builder and the study client.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


# Configuration
COMPRESSED_DEFINITION_MAX = 80  # Characters kept for quiz option text


class PartOfSpeech(str, Enum):
    """Part of speech categories."""
    NOUN = "noun"
    VERB = "verb"
    ADJECTIVE = "adjective"
    ADVERB = "adverb"
    PREPOSITION = "preposition"
    CONJUNCTION = "conjunction"
    PRONOUN = "pronoun"
    INTERJECTION = "interjection"
    OTHER = "other"


class Mnemonic(BaseModel):
    """Memory aid shown as a hint after a wrong first test attempt."""
    blueprint: Optional[str] = Field(None, description="Short mnemonic hint text")
    story: Optional[str] = Field(None, description="Longer mnemonic story")


class WordEntry(BaseModel):
    """
    A vocabulary word as stored in the lexicon collection.

    `word_id` is the integer key shared with review records.
    """
    word_id: int = Field(..., gt=0)
    word: str
    definition: str = ""
    compressed_definition: Optional[str] = None
    phonetic: Optional[str] = None
    pos: PartOfSpeech = PartOfSpeech.OTHER
    tags: list[str] = Field(default_factory=list)
    examples: list[str] = Field(default_factory=list)
    mnemonic: Optional[Mnemonic] = None

    def quiz_text(self) -> str:
        """Text used for this word as a multiple-choice option."""
        return self.compressed_definition or compress_definition(self.definition) or self.word

    @property
    def hint(self) -> Optional[str]:
        return self.mnemonic.blueprint if self.mnemonic else None


def compress_definition(definition: str, max_length: int = COMPRESSED_DEFINITION_MAX) -> str:
    """
    Shorten a dictionary definition to a single option-sized line.

    Keeps the first sense (text before the first ';' or newline) and
    truncates on a word boundary.

    Args:
        definition: Full definition text
        max_length: Maximum characters in the result

    Returns:
        Compressed definition (empty string for empty input)
    """
    lines = (definition or "").strip().splitlines()
    if not lines:
        return ""

    first_sense = lines[0].split(";")[0].strip()
    if len(first_sense) <= max_length:
        return first_sense

    cut = first_sense[:max_length].rsplit(" ", 1)[0].rstrip(",.:")
    return f"{cut}..."
