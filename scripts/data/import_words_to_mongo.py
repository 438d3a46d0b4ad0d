"""
Import words from CSV into the MongoDB words collection.

Expected columns: word_id, word, definition; optional phonetic, pos,
tags (comma-separated), examples (pipe-separated), mnemonic.
Rows are upserted by word_id, so re-running the import is safe.

Usage:
    python -m scripts.data.import_words_to_mongo data/words.csv [--dry-run]
"""

from __future__ import annotations

import argparse
from pathlib import Path

import pandas as pd
from pydantic import ValidationError

from core import lexicon_repo
from core.schemas import Mnemonic, PartOfSpeech, WordEntry


def parse_list(value, sep: str = ",") -> list[str]:
    """Split a delimited CSV cell into clean items."""
    if pd.isna(value) or not str(value).strip():
        return []
    items = [item.strip() for item in str(value).split(sep)]
    return [item for item in items if item]


def _text(row: pd.Series, column: str):
    value = row.get(column)
    if value is None or pd.isna(value):
        return None
    return str(value).strip() or None


def row_to_entry(row: pd.Series) -> WordEntry:
    """
    Convert one CSV row to a WordEntry.

    Raises:
        pydantic.ValidationError: if required fields are missing or invalid
    """
    pos = (_text(row, "pos") or PartOfSpeech.OTHER.value).lower()
    if pos not in {p.value for p in PartOfSpeech}:
        pos = PartOfSpeech.OTHER.value

    word_id = row.get("word_id")
    blueprint = _text(row, "mnemonic")
    return WordEntry(
        word_id=int(word_id) if pd.notna(word_id) else 0,
        word=_text(row, "word") or "",
        definition=_text(row, "definition") or "",
        phonetic=_text(row, "phonetic"),
        pos=pos,
        tags=parse_list(row.get("tags")),
        examples=parse_list(row.get("examples"), sep="|"),
        mnemonic=Mnemonic(blueprint=blueprint) if blueprint else None,
    )


def import_words(csv_path: Path, dry_run: bool = False) -> None:
    """
    Upsert every CSV row into the words collection.

    Args:
        csv_path: Path to the CSV file
        dry_run: If True, validate rows without writing to MongoDB
    """
    if not csv_path.exists():
        raise FileNotFoundError(f"CSV not found: {csv_path}")

    df = pd.read_csv(csv_path)
    print(f"Loaded {len(df)} rows from {csv_path}")

    if not dry_run:
        lexicon_repo.ensure_indexes()

    success_count = 0
    error_count = 0

    for idx, row in df.iterrows():
        try:
            entry = row_to_entry(row)
        except (ValidationError, ValueError) as e:
            error_count += 1
            print(f"  ✗ Row {idx + 2}: {e}")
            continue

        if not dry_run:
            lexicon_repo.upsert_word(entry)
        success_count += 1

    print(f"\n{'='*60}")
    print("Import complete!")
    print(f"{'='*60}")
    print(f"{'Validated' if dry_run else 'Upserted'}: {success_count}")
    print(f"Errors:    {error_count}")

    if dry_run:
        print("\n⚠ DRY RUN MODE - No changes were made to MongoDB")


def main():
    parser = argparse.ArgumentParser(description="Import words from CSV to MongoDB")
    parser.add_argument("csv_path", type=Path, help="CSV file with word rows")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate rows without writing to MongoDB"
    )
    args = parser.parse_args()

    import_words(args.csv_path, dry_run=args.dry_run)


if __name__ == "__main__":
    main()
