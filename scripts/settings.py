"""
Show or change the stored study settings.

Only the options given are changed; everything else keeps its stored value.

Usage:
    python -m scripts.settings
    python -m scripts.settings --mode flashcard --cards 15
    python -m scripts.settings --no-transliteration
"""

from __future__ import annotations

import argparse
import sys

from core.config import configure_logging
from core.schemas import QuizMode
from core.settings import update_settings
from core.storage import get_repository


def main() -> int:
    parser = argparse.ArgumentParser(description="Study settings")
    parser.add_argument("--backend", choices=["memory", "sql", "mongo"], default=None,
                        help="Storage backend (default: STORAGE_BACKEND)")
    parser.add_argument("--mode", choices=[m.value for m in QuizMode], help="Quiz mode")
    parser.add_argument("--cards", type=int, help="Cards per session")
    parser.add_argument("--daily-goal", type=int, help="Daily review goal")
    parser.add_argument("--transliteration", action=argparse.BooleanOptionalAction,
                        default=None, help="Show transliterations")
    args = parser.parse_args()

    configure_logging("WARNING")
    repo = get_repository(args.backend)

    changes = {
        "quiz_mode": args.mode,
        "cards_per_session": args.cards,
        "daily_goal": args.daily_goal,
        "show_transliteration": args.transliteration,
    }
    changes = {k: v for k, v in changes.items() if v is not None}

    if changes:
        try:
            settings = update_settings(repo, **changes)
        except ValueError as e:
            print(f"✗ Invalid settings: {e}")
            return 1
        print("✓ Settings saved")
    else:
        settings = repo.get_settings()

    print(f"Quiz mode:          {settings.quiz_mode}")
    print(f"Cards per session:  {settings.cards_per_session}")
    print(f"Daily goal:         {settings.daily_goal}")
    print(f"Transliteration:    {'on' if settings.show_transliteration else 'off'}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
