"""
Run one study session in the terminal.

Multiple-choice and type-answer modes grade automatically; flashcard mode
shows the answer and asks for a grade (again / hard / good / easy).

Usage:
    python -m scripts.study [--deck DECK_ID] [--cards 10] [--mode flashcard]
"""

from __future__ import annotations

import argparse

from core.config import configure_logging
from core.leitner import Grade
from core.quiz import auto_grades, check_answer, generate_multiple_choice_options, grade_from_outcome
from core.schemas import Card, QuizMode
from core.storage import get_repository
from core.study import StudySession

GRADE_KEYS = {"1": Grade.AGAIN, "2": Grade.HARD, "3": Grade.GOOD, "4": Grade.EASY}


def ask_multiple_choice(card: Card, pool: list[Card]) -> bool:
    options = generate_multiple_choice_options(card, pool)
    for number, option in enumerate(options, start=1):
        print(f"  {number}. {option.text}")
    while True:
        choice = input("Answer [1-%d]: " % len(options)).strip()
        if choice.isdigit() and 1 <= int(choice) <= len(options):
            return options[int(choice) - 1].is_correct
        print("  Pick one of the numbers above")


def ask_flashcard(card: Card) -> Grade:
    input("Press Enter to reveal...")
    print(f"  → {card.back}")
    while True:
        key = input("Grade [1=again 2=hard 3=good 4=easy]: ").strip().lower()
        if key in GRADE_KEYS:
            return GRADE_KEYS[key]
        if key in {g.value for g in Grade}:
            return Grade(key)
        print("  Enter 1-4")


def main() -> None:
    parser = argparse.ArgumentParser(description="Study due vocabulary")
    parser.add_argument("--backend", choices=["memory", "sql", "mongo"], default=None,
                        help="Storage backend (default: STORAGE_BACKEND)")
    parser.add_argument("--deck", default=None, help="Only study this deck id")
    parser.add_argument("--cards", type=int, default=None,
                        help="Session size (default: stored setting)")
    parser.add_argument("--mode", choices=[m.value for m in QuizMode], default=None,
                        help="Quiz mode (default: stored setting)")
    args = parser.parse_args()

    configure_logging("WARNING")
    repo = get_repository(args.backend)
    settings = repo.get_settings()
    mode = QuizMode(args.mode or settings.quiz_mode)
    pool = repo.get_all_cards()

    session = StudySession.start(repo, deck_id=args.deck, cards_per_session=args.cards)
    if session is None:
        print("Nothing to study right now")
        return

    print(f"Session: {len(session.cards)} cards ({mode.value})")
    print("=" * 60)

    while not session.is_complete:
        card = session.current_card
        print(f"\n[{session.position + 1}/{len(session.cards)}] {card.front}  (box {card.box})")
        if settings.show_transliteration and card.transliteration:
            print(f"  ({card.transliteration})")

        if not auto_grades(mode):
            session.answer(ask_flashcard(card))
            continue

        if mode == QuizMode.MULTIPLE_CHOICE:
            correct = ask_multiple_choice(card, pool)
        else:
            correct = check_answer(input("Answer: "), card.back)

        print("  ✓ Correct" if correct else f"  ✗ Wrong, it was: {card.back}")
        session.answer(grade_from_outcome(correct), correct=correct)

    record = session.finish()
    progress = repo.get_progress()
    print("\n" + "=" * 60)
    print(f"Done: {record.correct_answers}/{len(record.answers)} correct")
    print(f"Streak: {progress.current_streak} day(s), {progress.mastered_cards} cards mastered")


if __name__ == "__main__":
    main()
