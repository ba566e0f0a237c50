"""
Print progress, due cards and recent sessions.

Usage:
    python -m scripts.show_progress [--backend sql] [--sessions 5]
"""

from __future__ import annotations

import argparse

from core import leitner
from core.analytics import get_recent_sessions, refresh_progress
from core.analytics.metrics import box_distribution, cards_frame
from core.config import configure_logging
from core.session_builder import get_due_cards
from core.storage import get_repository


def main() -> None:
    parser = argparse.ArgumentParser(description="Show study progress")
    parser.add_argument("--backend", choices=["memory", "sql", "mongo"], default=None,
                        help="Storage backend (default: STORAGE_BACKEND)")
    parser.add_argument("--sessions", type=int, default=5, help="Recent sessions to list")
    args = parser.parse_args()

    configure_logging("WARNING")
    repo = get_repository(args.backend)

    progress = refresh_progress(repo)
    cards = repo.get_all_cards()
    due = get_due_cards(cards, leitner.SystemClock().now())

    print("=" * 60)
    print("Progress")
    print("=" * 60)
    print(f"Total cards:    {progress.total_cards}")
    print(f"Mastered:       {progress.mastered_cards}")
    print(f"Learning:       {progress.learning_cards}")
    print(f"New:            {progress.new_cards}")
    print(f"Due now:        {len(due)}")
    print(f"Total reviews:  {progress.total_reviews}")
    print(f"Accuracy:       {progress.accuracy_rate}%")
    print(f"Streak:         {progress.current_streak} (longest {progress.longest_streak})")
    last = progress.last_study_date.isoformat() if progress.last_study_date else "never"
    print(f"Last studied:   {last}")

    print("\nCards per box:")
    for box, count in box_distribution(cards_frame(cards)).items():
        days = leitner.BOX_INTERVALS[box]
        print(f"  Box {box} ({days:>2}d): {count}")

    summaries = get_recent_sessions(repo, limit=args.sessions)
    print(f"\nRecent sessions ({len(summaries)}):")
    for s in summaries:
        status = "in progress" if s.completed_at is None else f"{s.duration_seconds:.0f}s"
        print(f"  {s.started_at:%Y-%m-%d %H:%M}  {s.correct}/{s.answered} correct "
              f"({s.accuracy_rate}%)  {status}")


if __name__ == "__main__":
    main()
