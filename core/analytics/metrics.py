"""
Metric computations for progress dashboards.
"""

from __future__ import annotations

import pandas as pd

from core.analytics.types import CardMetrics
from core.schemas import MAX_BOX, MIN_BOX, Card, QuizSession


CARD_COLUMNS = ["id", "box", "correct_count", "incorrect_count"]
SESSION_COLUMNS = ["session_id", "started_at", "completed_at", "answered", "correct", "day_utc"]


def percent(part: int, whole: int) -> int:
    """
    Integer percentage rounded half up, 0 when whole is 0.
    """
    if whole <= 0:
        return 0
    return (200 * part + whole) // (2 * whole)


def cards_frame(cards: list[Card]) -> pd.DataFrame:
    """
    Load the scheduling columns of a card set into a dataframe.
    """
    if not cards:
        return pd.DataFrame(columns=CARD_COLUMNS)
    return pd.DataFrame(
        [[c.id, c.box, c.correct_count, c.incorrect_count] for c in cards],
        columns=CARD_COLUMNS,
    )


def compute_card_metrics(cards_df: pd.DataFrame) -> CardMetrics:
    """
    Mastery counts, review total and accuracy for a card dataframe.

    New cards are box-1 cards with no answers at all; cards demoted back
    to box 1 are not new.
    """
    if cards_df.empty:
        return CardMetrics(
            total_cards=0,
            mastered_cards=0,
            learning_cards=0,
            new_cards=0,
            total_reviews=0,
            accuracy_rate=0,
        )

    box = cards_df["box"]
    correct = int(cards_df["correct_count"].sum())
    incorrect = int(cards_df["incorrect_count"].sum())
    untouched = (cards_df["correct_count"] == 0) & (cards_df["incorrect_count"] == 0)

    return CardMetrics(
        total_cards=int(len(cards_df)),
        mastered_cards=int((box == MAX_BOX).sum()),
        learning_cards=int(((box > MIN_BOX) & (box < MAX_BOX)).sum()),
        new_cards=int(((box == MIN_BOX) & untouched).sum()),
        total_reviews=correct + incorrect,
        accuracy_rate=percent(correct, correct + incorrect),
    )


def box_distribution(cards_df: pd.DataFrame) -> pd.Series:
    """
    Card count per box, every box present.
    """
    boxes = pd.Index(range(MIN_BOX, MAX_BOX + 1), name="box")
    if cards_df.empty:
        return pd.Series(0, index=boxes, dtype="int64")
    return cards_df["box"].value_counts().reindex(boxes, fill_value=0).astype("int64")


def sessions_frame(sessions: list[QuizSession]) -> pd.DataFrame:
    """
    One row per quiz session with answer totals.
    """
    if not sessions:
        return pd.DataFrame(columns=SESSION_COLUMNS)

    df = pd.DataFrame(
        [
            {
                "session_id": s.id,
                "started_at": s.started_at,
                "completed_at": s.completed_at,
                "answered": len(s.answers),
                "correct": s.correct_answers,
            }
            for s in sessions
        ]
    )
    df["started_at"] = pd.to_datetime(df["started_at"], utc=True, errors="coerce")
    df["completed_at"] = pd.to_datetime(df["completed_at"], utc=True, errors="coerce")
    df = df.dropna(subset=["started_at"])
    df["day_utc"] = df["started_at"].dt.floor("D")
    return df.sort_values("started_at").reset_index(drop=True)


def build_day_index(sessions_df: pd.DataFrame) -> pd.DatetimeIndex:
    """
    Build a dense UTC day index spanning the session range.
    """
    if sessions_df.empty:
        return pd.DatetimeIndex([], tz="UTC")
    start = sessions_df["day_utc"].min()
    end = sessions_df["day_utc"].max()
    return pd.date_range(start=start, end=end, freq="D")


def compute_daily_answers(sessions_df: pd.DataFrame) -> pd.Series:
    """
    Answers given per day, zero-filled across the whole range.
    """
    day_index = build_day_index(sessions_df)
    if len(day_index) == 0:
        return pd.Series(dtype="int64")
    daily = sessions_df.groupby("day_utc")["answered"].sum()
    return daily.reindex(day_index, fill_value=0).astype("int64")
