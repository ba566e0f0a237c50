"""
Leitner - Box-based spaced repetition

Main API for scheduling reviews.

Quick start:
    from core import leitner

    # Process a grade (algorithm only, no repository calls)
    update = leitner.grade_card(card, leitner.Grade.GOOD, now)

    # Grade and persist
    leitner.apply_grade(repo, card, leitner.Grade.AGAIN, clock)
"""

# Core scheduler API (algorithm logic)
from core.leitner.scheduler import (
    apply_grade,
    calculate_next_review,
    get_cards_by_box,
    grade_card,
    next_box,
)

# Clocks
from core.leitner.clock import Clock, FixedClock, SystemClock, local_date

# Constants and parameters
from core.leitner.constants import (
    BACKLOG_LIMIT,
    BACKLOG_MAX_BOX,
    BOX_INTERVALS,
    BOXES,
    DEFAULT_SESSION_SIZE,
    SESSION_HISTORY_LIMIT,
    Grade,
    interval_for_box,
)


__all__ = [
    # Core algorithm
    "grade_card",
    "apply_grade",
    "next_box",
    "calculate_next_review",
    "get_cards_by_box",

    # Clocks
    "Clock",
    "SystemClock",
    "FixedClock",
    "local_date",

    # Enums
    "Grade",

    # Parameters
    "BOX_INTERVALS",
    "BOXES",
    "BACKLOG_LIMIT",
    "BACKLOG_MAX_BOX",
    "DEFAULT_SESSION_SIZE",
    "SESSION_HISTORY_LIMIT",
    "interval_for_box",
]
