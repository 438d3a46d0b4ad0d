"""
Reset the review database.

DANGEROUS: This deletes all review records and review history!
Only use when you want to start fresh for testing.

Usage:
    python -m scripts.maintenance.reset_learning_db [--yes]
"""

import argparse

from core import fsrs


def main():
    parser = argparse.ArgumentParser(description="Drop and recreate the review tables")
    parser.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")
    args = parser.parse_args()

    target = "test_vocab_db" if fsrs.is_test_mode() else "vocab_db"
    print("=" * 60)
    print(f"WARNING: Reset Review Database ({target})")
    print("=" * 60)
    print()
    print("This will DELETE:")
    print("  - All review records (stability, difficulty, due dates, lapses)")
    print("  - All review events (log of past ratings)")
    print()

    if not args.yes:
        response = input("Are you sure you want to reset? (type 'yes' to confirm): ")
        if response.lower() != "yes":
            print("\nCancelled. No changes made.")
            return

    print("\nResetting database...")
    fsrs.reset_db()
    print("✓ Database reset complete!")
    print("\nThe database now has empty tables ready for new reviews.")


if __name__ == "__main__":
    main()
