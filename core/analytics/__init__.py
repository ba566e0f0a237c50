"""
Analytics package exports.
"""

from core.analytics.service import (
    calculate_progress,
    card_metrics,
    get_recent_sessions,
    refresh_progress,
    summarize_sessions,
)
from core.analytics.streak import advance_streak, record_study_activity
from core.analytics.types import CardMetrics, SessionSummary

__all__ = [
    "calculate_progress",
    "card_metrics",
    "refresh_progress",
    "summarize_sessions",
    "get_recent_sessions",
    "advance_streak",
    "record_study_activity",
    "CardMetrics",
    "SessionSummary",
]
