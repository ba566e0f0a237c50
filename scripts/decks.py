"""
List decks with their statistics, or delete a deck.

Deleting a deck keeps its cards; they stay in the study pool.

Usage:
    python -m scripts.decks list
    python -m scripts.decks delete DECK_ID [--yes]
"""

from __future__ import annotations

import argparse
import sys

from core.config import configure_logging
from core.decks import delete_deck, get_deck_stats
from core.storage import get_repository


def main() -> int:
    parser = argparse.ArgumentParser(description="Deck overview")
    parser.add_argument("--backend", choices=["memory", "sql", "mongo"], default=None,
                        help="Storage backend (default: STORAGE_BACKEND)")
    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("list", help="Show decks with total / due / mastered counts")
    delete = commands.add_parser("delete", help="Delete a deck (cards are kept)")
    delete.add_argument("deck_id")
    delete.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")
    args = parser.parse_args()

    configure_logging("WARNING")
    repo = get_repository(args.backend)

    if args.command == "list":
        stats = get_deck_stats(repo)
        if not stats:
            print("No decks")
            return 0
        print(f"{'Deck':<30} {'Total':>6} {'Due':>6} {'Mastered':>9}  Id")
        print("-" * 80)
        for s in stats:
            print(f"{s.name[:30]:<30} {s.total:>6} {s.due:>6} {s.mastered:>9}  {s.deck_id}")
        return 0

    if not args.yes:
        answer = input(f"Delete deck {args.deck_id}? [y/N] ").strip().lower()
        if answer != "y":
            print("Cancelled")
            return 0
    if not delete_deck(repo, args.deck_id):
        print(f"✗ No deck with id {args.deck_id}")
        return 1
    print(f"✓ Deleted deck {args.deck_id}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
