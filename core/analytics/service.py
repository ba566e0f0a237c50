"""
Service layer to assemble progress snapshots and session history.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pandas as pd

from core.analytics.metrics import (
    cards_frame,
    compute_card_metrics,
    percent,
    sessions_frame,
)
from core.analytics.types import CardMetrics, SessionSummary
from core.schemas import Card, Progress, QuizSession

if TYPE_CHECKING:
    from core.repository import CardRepository


def card_metrics(cards: list[Card]) -> CardMetrics:
    return compute_card_metrics(cards_frame(cards))


def calculate_progress(cards: list[Card], stored: Progress) -> Progress:
    """
    Recompute card counters and merge them into the stored progress.

    Streak fields are carried over unchanged.
    """
    metrics = card_metrics(cards)
    return stored.model_copy(update={
        "total_cards": metrics.total_cards,
        "mastered_cards": metrics.mastered_cards,
        "learning_cards": metrics.learning_cards,
        "new_cards": metrics.new_cards,
        "total_reviews": metrics.total_reviews,
        "accuracy_rate": metrics.accuracy_rate,
    })


def refresh_progress(repo: CardRepository) -> Progress:
    """
    Recompute progress from the repository's cards and store it.
    """
    progress = calculate_progress(repo.get_all_cards(), repo.get_progress())
    repo.put_progress(progress)
    return progress


def summarize_sessions(sessions: list[QuizSession], limit: int = 5) -> list[SessionSummary]:
    """
    Most recent sessions first, with answer totals and duration.
    """
    df = sessions_frame(sessions)
    if df.empty or limit <= 0:
        return []

    recent = df.sort_values("started_at", ascending=False, kind="stable").head(limit)
    summaries = []
    for row in recent.itertuples(index=False):
        completed = None if pd.isna(row.completed_at) else row.completed_at.to_pydatetime()
        started = row.started_at.to_pydatetime()
        duration = (completed - started).total_seconds() if completed is not None else None
        summaries.append(
            SessionSummary(
                session_id=row.session_id,
                started_at=started,
                completed_at=completed,
                answered=int(row.answered),
                correct=int(row.correct),
                accuracy_rate=percent(int(row.correct), int(row.answered)),
                duration_seconds=duration,
            )
        )
    return summaries


def get_recent_sessions(repo: CardRepository, limit: int = 5) -> list[SessionSummary]:
    return summarize_sessions(repo.get_sessions(), limit=limit)
