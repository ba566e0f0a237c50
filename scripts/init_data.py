"""
Seed the store with the default vocabulary.

This script:
1. Reads a vocabulary JSON file (module name -> list of items)
2. Creates one deck per module and one box-1 card per item
3. Skips seeding if the store already holds cards (unless --reset)

Usage:
    python -m scripts.init_data data/vocabulary.json [--backend sql] [--reset]
"""

from __future__ import annotations

import argparse
from pathlib import Path

from core.analytics import refresh_progress
from core.config import configure_logging
from core.seed import initialize_default_data, load_vocabulary
from core.storage import get_repository


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed default vocabulary")
    parser.add_argument("vocabulary", type=Path, help="Path to vocabulary JSON")
    parser.add_argument("--backend", choices=["memory", "sql", "mongo"], default=None,
                        help="Storage backend (default: STORAGE_BACKEND)")
    parser.add_argument("--reset", action="store_true",
                        help="Clear all stored data before seeding")
    args = parser.parse_args()

    configure_logging()

    vocabulary = load_vocabulary(args.vocabulary)
    repo = get_repository(args.backend)

    if args.reset:
        repo.clear()
        print("Cleared existing data")

    if initialize_default_data(repo, vocabulary):
        progress = refresh_progress(repo)
        print(f"✓ Seeded {progress.total_cards} cards in {len(repo.get_decks())} decks")
    else:
        print("Store already has cards; nothing to do (use --reset to start over)")


if __name__ == "__main__":
    main()
