"""
Study session lifecycle.

Ties the pieces together for one quiz run:
1. start: compose the session from the repository (optionally one deck)
2. answer: grade the current card, persist it, record streak activity
3. finish: store the quiz session in history and refresh progress
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, tzinfo
from typing import Optional

from core.analytics.service import refresh_progress
from core.analytics.streak import record_study_activity
from core.config import get_study_timezone
from core.leitner.clock import Clock, SystemClock
from core.leitner.constants import Grade
from core.leitner.scheduler import apply_grade
from core.repository import CardRepository
from core.schemas import Card, CardUpdate, QuizSession, SessionAnswer
from core.session_builder import cards_for_deck, get_session_cards

logger = logging.getLogger(__name__)


class StudySession:
    """
    One quiz run over a fixed, pre-composed batch of cards.
    """

    def __init__(
        self,
        repo: CardRepository,
        cards: list[Card],
        clock: Optional[Clock] = None,
        tz: Optional[tzinfo] = None,
        session_id: Optional[str] = None,
        started_at: Optional[datetime] = None
    ):
        self.repo = repo
        self.clock = clock or SystemClock()
        self.tz = tz
        self.cards = list(cards)
        self.position = 0
        self.record = QuizSession(
            id=session_id or str(uuid.uuid4()),
            card_ids=[c.id for c in self.cards],
            started_at=started_at or self.clock.now(),
        )
        self._item_started_at: datetime = self.record.started_at

    @classmethod
    def start(
        cls,
        repo: CardRepository,
        clock: Optional[Clock] = None,
        deck_id: Optional[str] = None,
        cards_per_session: Optional[int] = None,
        tz: Optional[tzinfo] = None
    ) -> Optional[StudySession]:
        """
        Compose and start a session.

        Args:
            repo: Card repository
            clock: Time source (system clock by default)
            deck_id: Restrict the pool to one deck
            cards_per_session: Session size (defaults to the stored setting)
            tz: Reference timezone for streak days (defaults to STUDY_TIMEZONE)

        Returns:
            StudySession, or None if the deck is unknown or nothing is due
        """
        clock = clock or SystemClock()
        tz = tz or get_study_timezone()
        cards = repo.get_all_cards()

        if deck_id is not None:
            deck = repo.get_deck(deck_id)
            if deck is None:
                logger.info("[STUDY] deck %s not found", deck_id)
                return None
            cards = cards_for_deck(deck, cards)

        if cards_per_session is None:
            cards_per_session = repo.get_settings().cards_per_session

        now = clock.now()
        batch = get_session_cards(cards, cards_per_session, now)
        if not batch:
            logger.info("[STUDY] no cards to study")
            return None

        logger.info("[STUDY] session started with %d cards", len(batch))
        return cls(repo, batch, clock=clock, tz=tz, started_at=now)

    # ---- Progress through the batch ----

    @property
    def current_card(self) -> Optional[Card]:
        if self.position >= len(self.cards):
            return None
        return self.cards[self.position]

    @property
    def is_complete(self) -> bool:
        return self.position >= len(self.cards)

    @property
    def is_finished(self) -> bool:
        return self.record.completed_at is not None

    @property
    def correct_count(self) -> int:
        return self.record.correct_answers

    def answer(
        self,
        grade: Grade,
        correct: Optional[bool] = None,
        time_spent_ms: Optional[int] = None
    ) -> Optional[CardUpdate]:
        """
        Grade the current card and move to the next one.

        Args:
            grade: Grade for the current card
            correct: Answer outcome (defaults to grade != AGAIN)
            time_spent_ms: Answer time (defaults to time since the card was shown)

        Returns:
            The stored CardUpdate, or None if the batch is exhausted
        """
        card = self.current_card
        if card is None or self.is_finished:
            return None

        grade = Grade(grade)
        now = self.clock.now()
        if correct is None:
            correct = grade != Grade.AGAIN
        if time_spent_ms is None:
            elapsed = now - self._item_started_at
            time_spent_ms = max(0, int(elapsed.total_seconds() * 1000))

        # Re-read so the grade applies to the stored state
        stored = self.repo.get_card(card.id) or card
        update = apply_grade(self.repo, stored, grade, now=now)
        record_study_activity(self.repo, tz=self.tz, now=now)

        self.record.answers.append(
            SessionAnswer(card_id=card.id, correct=correct, time_spent_ms=time_spent_ms)
        )
        self.position += 1
        self._item_started_at = now
        return update

    def finish(self) -> QuizSession:
        """
        Close the session, store it in history and refresh progress.

        Calling finish again returns the same record without storing twice.
        """
        if self.is_finished:
            return self.record

        self.record.completed_at = self.clock.now()
        self.repo.append_session(self.record)
        refresh_progress(self.repo)
        logger.info(
            "[STUDY] session %s finished: %d/%d correct",
            self.record.id, self.correct_count, len(self.record.answers),
        )
        return self.record
