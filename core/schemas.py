"""
Pydantic models for the vocabulary trainer.

These models define the stored records (cards, decks, progress, quiz
sessions, settings) and the JSON export shape. Field names are snake_case in
Python and camelCase on the wire.

Persisted records are parsed leniently: a box outside 1-5 is clamped, negative
counters become 0 and unparseable review timestamps are treated as missing.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator


# Configuration
MIN_BOX = 1
MAX_BOX = 5


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes, convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse a stored timestamp, returning None for anything unusable.

    Accepts datetimes and ISO-8601 strings (including a trailing 'Z').
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return ensure_utc(datetime.fromisoformat(text))
        except ValueError:
            return None
    return None


def _clamp_int(value: Any, low: int, high: Optional[int], fallback: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return fallback
    number = max(low, number)
    if high is not None:
        number = min(high, number)
    return number


class QuizMode(str, Enum):
    """How answers are captured before they reach the scheduler."""
    MULTIPLE_CHOICE = "multiple-choice"
    TYPE_ANSWER = "type-answer"
    FLASHCARD = "flashcard"


class _Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True, use_enum_values=True, validate_default=True)

    def to_json_dict(self) -> dict:
        """Dump using the camelCase export keys."""
        return self.model_dump(mode="json", by_alias=True)


# ---- Cards and Decks ----

class Card(_Record):
    """
    A single vocabulary card.

    `box` is the Leitner mastery level (1 = new, 5 = mastered). A card with
    no `last_reviewed` has never been graded; a card with no `next_review`
    is due now.
    """
    id: str
    front: str = Field(default="", validation_alias=AliasChoices("front", "arabic"))
    back: str = Field(default="", validation_alias=AliasChoices("back", "bangla"))
    transliteration: Optional[str] = None
    module: str = ""

    box: int = MIN_BOX
    last_reviewed: Optional[datetime] = Field(default=None, alias="lastReviewed")
    next_review: Optional[datetime] = Field(default=None, alias="nextReview")
    correct_count: int = Field(default=0, alias="correctCount")
    incorrect_count: int = Field(default=0, alias="incorrectCount")
    created_at: datetime = Field(default_factory=utc_now, alias="createdAt")

    @field_validator("box", mode="before")
    @classmethod
    def _clamp_box(cls, value: Any) -> int:
        return _clamp_int(value, MIN_BOX, MAX_BOX, MIN_BOX)

    @field_validator("correct_count", "incorrect_count", mode="before")
    @classmethod
    def _clamp_counter(cls, value: Any) -> int:
        return _clamp_int(value, 0, None, 0)

    @field_validator("last_reviewed", "next_review", mode="before")
    @classmethod
    def _parse_review_time(cls, value: Any) -> Optional[datetime]:
        return parse_timestamp(value)

    @field_validator("created_at", mode="before")
    @classmethod
    def _parse_created_at(cls, value: Any) -> datetime:
        return parse_timestamp(value) or utc_now()

    @property
    def is_new(self) -> bool:
        """True if the card has never been graded."""
        return self.last_reviewed is None

    @property
    def total_reviews(self) -> int:
        return self.correct_count + self.incorrect_count


class Deck(_Record):
    """A named, ordered collection of card ids."""
    id: str
    name: str
    description: str = ""
    card_ids: list[str] = Field(default_factory=list, alias="cardIds")
    created_at: datetime = Field(default_factory=utc_now, alias="createdAt")
    updated_at: datetime = Field(default_factory=utc_now, alias="updatedAt")

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def _parse_time(cls, value: Any) -> datetime:
        return parse_timestamp(value) or utc_now()


# ---- Scheduling output ----

class CardUpdate(BaseModel):
    """
    Partial card fields produced by grading one answer.
    """
    card_id: str
    box: int
    last_reviewed: datetime
    next_review: datetime
    correct_count: int
    incorrect_count: int

    def as_fields(self) -> dict:
        """Fields for a repository partial update."""
        return self.model_dump(exclude={"card_id"})


# ---- Progress ----

class Progress(_Record):
    """
    Cached progress snapshot.

    Card counts and accuracy are recomputed from the card set; streak
    fields are maintained separately by the streak tracker.
    """
    total_cards: int = Field(default=0, alias="totalCards")
    mastered_cards: int = Field(default=0, alias="masteredCards")
    learning_cards: int = Field(default=0, alias="learningCards")
    new_cards: int = Field(default=0, alias="newCards")
    current_streak: int = Field(default=0, alias="currentStreak")
    longest_streak: int = Field(default=0, alias="longestStreak")
    last_study_date: Optional[date] = Field(default=None, alias="lastStudyDate")
    total_reviews: int = Field(default=0, alias="totalReviews")
    accuracy_rate: int = Field(default=0, alias="accuracyRate")

    @field_validator(
        "total_cards", "mastered_cards", "learning_cards", "new_cards",
        "current_streak", "longest_streak", "total_reviews",
        mode="before",
    )
    @classmethod
    def _clamp_counter(cls, value: Any) -> int:
        return _clamp_int(value, 0, None, 0)

    @field_validator("accuracy_rate", mode="before")
    @classmethod
    def _clamp_accuracy(cls, value: Any) -> int:
        return _clamp_int(value, 0, 100, 0)

    @field_validator("last_study_date", mode="before")
    @classmethod
    def _parse_study_date(cls, value: Any) -> Optional[date]:
        # Older exports store a full ISO timestamp here
        if isinstance(value, datetime):
            return ensure_utc(value).date()
        if isinstance(value, date):
            return value
        if isinstance(value, str) and value.strip():
            text = value.strip()
            try:
                return date.fromisoformat(text[:10])
            except ValueError:
                return None
        return None


# ---- Quiz sessions ----

class SessionAnswer(_Record):
    """One answered card within a quiz session."""
    card_id: str = Field(alias="cardId")
    correct: bool
    time_spent_ms: int = Field(
        default=0,
        validation_alias=AliasChoices("timeSpentMs", "timeSpent", "time_spent_ms"),
        serialization_alias="timeSpentMs",
    )


class QuizSession(_Record):
    """
    History record for one study session.

    `completed_at` stays None while the session is in progress.
    """
    id: str
    card_ids: list[str] = Field(default_factory=list, alias="cardIds")
    answers: list[SessionAnswer] = Field(default_factory=list)
    started_at: datetime = Field(default_factory=utc_now, alias="startedAt")
    completed_at: Optional[datetime] = Field(default=None, alias="completedAt")

    @model_validator(mode="before")
    @classmethod
    def _cards_to_ids(cls, data: Any) -> Any:
        # Older exports embed the full card objects
        if isinstance(data, dict) and "cardIds" not in data and "card_ids" not in data:
            cards = data.get("cards")
            if isinstance(cards, list):
                data = dict(data)
                data["cardIds"] = [
                    c.get("id") if isinstance(c, dict) else str(c)
                    for c in cards
                ]
        return data

    @field_validator("started_at", mode="before")
    @classmethod
    def _parse_started(cls, value: Any) -> datetime:
        return parse_timestamp(value) or utc_now()

    @field_validator("completed_at", mode="before")
    @classmethod
    def _parse_completed(cls, value: Any) -> Optional[datetime]:
        return parse_timestamp(value)

    @property
    def correct_answers(self) -> int:
        return sum(1 for a in self.answers if a.correct)


# ---- Settings ----

class Settings(_Record):
    """User study settings."""
    quiz_mode: QuizMode = Field(default=QuizMode.MULTIPLE_CHOICE, alias="quizMode")
    cards_per_session: int = Field(default=20, alias="cardsPerSession")
    daily_goal: int = Field(default=50, alias="dailyGoal")
    show_transliteration: bool = Field(default=True, alias="showTransliteration")

    @field_validator("cards_per_session", "daily_goal", mode="before")
    @classmethod
    def _clamp_count(cls, value: Any) -> int:
        return _clamp_int(value, 0, None, 0)
