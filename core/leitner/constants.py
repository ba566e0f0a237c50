"""
Leitner Constants and Parameters

All configurable parameters for the box scheduler and session composer in
one place.
"""

from datetime import timedelta
from enum import Enum

from core.schemas import MAX_BOX, MIN_BOX


# ---- Grades ----

class Grade(str, Enum):
    """User-supplied recall quality for one answer."""
    AGAIN = "again"  # Retrieval failed
    HARD = "hard"    # Retrieved with high effort
    GOOD = "good"    # Retrieved normally
    EASY = "easy"    # Retrieved fluently


# ---- Boxes ----

BOXES = tuple(range(MIN_BOX, MAX_BOX + 1))

# Review interval (days) by the box a card lands in
BOX_INTERVALS = {
    1: 1,   # Review tomorrow
    2: 3,   # Review in 3 days
    3: 7,   # Review in 1 week
    4: 14,  # Review in 2 weeks
    5: 30,  # Review in 1 month
}
DEFAULT_INTERVAL_DAYS = 1

# Box movement by grade (None = reset to the first box)
BOX_STEP = {
    Grade.AGAIN: None,
    Grade.HARD: 0,
    Grade.GOOD: 1,
    Grade.EASY: 2,
}


def interval_for_box(box: int) -> timedelta:
    """Review interval for a box; unknown boxes fall back to one day."""
    return timedelta(days=BOX_INTERVALS.get(box, DEFAULT_INTERVAL_DAYS))


# ---- Session Composition ----

BACKLOG_LIMIT = 5         # Max previously-missed cards at the head of a session
BACKLOG_MAX_BOX = 2       # Missed cards above this box no longer count as backlog
DEFAULT_SESSION_SIZE = 10


# ---- History ----

SESSION_HISTORY_LIMIT = 50  # Quiz sessions kept; oldest evicted first
