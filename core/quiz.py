"""
Quiz helpers: answer options, answer checking and outcome grading.

The quiz mode only changes how a grade is obtained. Multiple-choice and
typed answers are graded automatically from correctness; flashcard mode
lets the learner pick the grade.
"""

from __future__ import annotations

import random
import re
from dataclasses import dataclass
from typing import Optional, TypeVar

from core.leitner.constants import Grade
from core.schemas import Card, QuizMode

T = TypeVar("T")

# Arabic harakat and related marks
DIACRITICS_RE = re.compile("[\u064B-\u065F]")


@dataclass(frozen=True)
class AnswerOption:
    text: str
    is_correct: bool


def shuffle(items: list[T], rng: Optional[random.Random] = None) -> list[T]:
    """Shuffled copy of a list."""
    shuffled = list(items)
    (rng or random).shuffle(shuffled)
    return shuffled


def generate_multiple_choice_options(
    correct_card: Card,
    all_cards: list[Card],
    count: int = 4,
    rng: Optional[random.Random] = None
) -> list[AnswerOption]:
    """
    Build shuffled answer options for a card.

    Distractors come from the same module when it has enough other cards,
    otherwise from any other card.
    """
    same_module = [
        c for c in all_cards
        if c.module == correct_card.module and c.id != correct_card.id
    ]
    others = [c for c in all_cards if c.id != correct_card.id]
    pool = same_module if len(same_module) >= count - 1 else others

    wrong = [
        AnswerOption(text=c.back, is_correct=False)
        for c in shuffle(pool, rng)[:max(count - 1, 0)]
    ]
    return shuffle(wrong + [AnswerOption(text=correct_card.back, is_correct=True)], rng)


def normalize_answer(text: str) -> str:
    """Strip diacritics and surrounding whitespace, lowercase."""
    return DIACRITICS_RE.sub("", text).strip().lower()


def check_answer(user_answer: str, correct_answer: str) -> bool:
    return normalize_answer(user_answer) == normalize_answer(correct_answer)


def grade_from_outcome(correct: bool) -> Grade:
    """Automatic grade for modes that only know right or wrong."""
    return Grade.GOOD if correct else Grade.AGAIN


def auto_grades(mode: QuizMode) -> bool:
    """True if answers in this mode are graded without asking the learner."""
    return QuizMode(mode) != QuizMode.FLASHCARD
