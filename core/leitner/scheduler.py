"""
Scheduler - Leitner Box Logic

Pure box transitions and review dates (no repository calls), plus a thin
wrapper that persists the result.

Main workflow:
1. Capture "now" once
2. Move the card between boxes according to the grade
3. Bump the matching counter
4. Schedule the next review from the box reached

The next interval depends only on the box reached by this grading, never on
earlier history.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from core.leitner.clock import Clock, SystemClock
from core.leitner.constants import BOX_STEP, Grade, interval_for_box
from core.schemas import MAX_BOX, MIN_BOX, Card, CardUpdate, ensure_utc

if TYPE_CHECKING:
    from core.repository import CardRepository

logger = logging.getLogger(__name__)


def calculate_next_review(box: int, now: datetime) -> datetime:
    """Next review time for a card that just landed in `box`."""
    return ensure_utc(now) + interval_for_box(box)


def next_box(box: int, grade: Grade) -> int:
    """
    Box reached after grading.

    - AGAIN: back to box 1
    - HARD: stay
    - GOOD: up one box
    - EASY: up two boxes
    Capped at the last box.
    """
    step = BOX_STEP[Grade(grade)]
    if step is None:
        return MIN_BOX
    return min(box + step, MAX_BOX)


def grade_card(
    card: Card,
    grade: Grade,
    now: Optional[datetime] = None
) -> CardUpdate:
    """
    Compute the new card state for one graded answer.

    Args:
        card: Card being graded
        grade: AGAIN, HARD, GOOD or EASY
        now: Review timestamp (defaults to the system clock)

    Returns:
        CardUpdate with the new box, timestamps and counters
    """
    grade = Grade(grade)
    if now is None:
        now = SystemClock().now()
    now = ensure_utc(now)

    new_box = next_box(card.box, grade)
    correct_count = card.correct_count
    incorrect_count = card.incorrect_count
    if grade == Grade.AGAIN:
        incorrect_count += 1
    else:
        correct_count += 1

    return CardUpdate(
        card_id=card.id,
        box=new_box,
        last_reviewed=now,
        next_review=calculate_next_review(new_box, now),
        correct_count=correct_count,
        incorrect_count=incorrect_count,
    )


def apply_grade(
    repo: CardRepository,
    card: Card,
    grade: Grade,
    clock: Optional[Clock] = None,
    now: Optional[datetime] = None
) -> CardUpdate:
    """
    Grade a card and write the update back through the repository.

    `now` overrides the clock when the caller already captured the time.
    Returns the update even if the repository no longer holds the card.
    """
    if now is None:
        now = (clock or SystemClock()).now()
    update = grade_card(card, grade, now)
    stored = repo.update_card(card.id, update.as_fields())
    logger.debug(
        "[SCHEDULER] %s graded %s: box %d -> %d, next review %s (stored=%s)",
        card.id, Grade(grade).value, card.box, update.box,
        update.next_review.isoformat(), stored,
    )
    return update


def get_cards_by_box(cards: list[Card], box: int) -> list[Card]:
    """Cards currently sitting in `box`, in pool order."""
    return [card for card in cards if card.box == box]
