"""
Daily study streak tracking.

Streaks compare calendar days in a fixed reference timezone, not elapsed
hours, so studying late one evening and early the next morning still counts
as consecutive days.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, tzinfo
from typing import TYPE_CHECKING, Optional

from core.leitner.clock import Clock, SystemClock, local_date
from core.schemas import Progress

if TYPE_CHECKING:
    from core.repository import CardRepository

logger = logging.getLogger(__name__)


def advance_streak(progress: Progress, today: date) -> Progress:
    """
    Apply one study activity on `today` to the streak fields.

    - First activity ever: streak starts at 1
    - Already studied today: unchanged
    - Studied yesterday: streak + 1
    - Gap of two or more days: streak restarts at 1

    Returns a new Progress; other fields pass through untouched.
    """
    last = progress.last_study_date

    if last == today:
        return progress

    if last is not None and last == today - timedelta(days=1):
        current = progress.current_streak + 1
    else:
        current = 1

    return progress.model_copy(update={
        "current_streak": current,
        "longest_streak": max(progress.longest_streak, current),
        "last_study_date": today,
    })


def record_study_activity(
    repo: CardRepository,
    clock: Optional[Clock] = None,
    tz: Optional[tzinfo] = None,
    now: Optional[datetime] = None
) -> Progress:
    """
    Record that the user studied now and persist the updated streak.

    Call once per graded answer; repeated calls on one day are no-ops.
    `now` overrides the clock when the caller already captured the time.
    """
    if now is None:
        now = (clock or SystemClock()).now()
    today = local_date(now, tz)

    progress = repo.get_progress()
    updated = advance_streak(progress, today)
    if updated is not progress:
        repo.put_progress(updated)
        logger.info(
            "[STREAK] %s: current %d, longest %d",
            today.isoformat(), updated.current_streak, updated.longest_streak,
        )
    return updated
