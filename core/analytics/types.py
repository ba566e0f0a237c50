"""
Types for progress analytics.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class CardMetrics:
    """
    Counters derived from the full card set.
    """
    total_cards: int
    mastered_cards: int
    learning_cards: int
    new_cards: int
    total_reviews: int
    accuracy_rate: int


@dataclass(frozen=True)
class SessionSummary:
    """
    One row of the recent-sessions listing.
    """
    session_id: str
    started_at: datetime
    completed_at: Optional[datetime]
    answered: int
    correct: int
    accuracy_rate: int
    duration_seconds: Optional[float]
