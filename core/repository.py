"""
Repository port for cards, decks, settings, progress and quiz history.

The scheduling core never touches storage directly; it reads and writes
through this narrow interface. Backends live in `core.storage`.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from core.leitner.constants import SESSION_HISTORY_LIMIT
from core.schemas import Card, Deck, Progress, QuizSession, Settings

logger = logging.getLogger(__name__)

# Card fields a partial update may touch
UPDATABLE_CARD_FIELDS = frozenset(Card.model_fields) - {"id"}


class CardRepository(Protocol):
    """Synchronous, single-process store for the trainer's records."""

    # ---- Cards ----
    def get_all_cards(self) -> list[Card]: ...
    def get_card(self, card_id: str) -> Optional[Card]: ...
    def update_card(self, card_id: str, fields: dict) -> bool: ...
    def put_cards(self, cards: list[Card]) -> None: ...

    # ---- Decks ----
    def get_decks(self) -> list[Deck]: ...
    def get_deck(self, deck_id: str) -> Optional[Deck]: ...
    def put_decks(self, decks: list[Deck]) -> None: ...

    # ---- Settings / Progress ----
    def get_settings(self) -> Settings: ...
    def put_settings(self, settings: Settings) -> None: ...
    def get_progress(self) -> Progress: ...
    def put_progress(self, progress: Progress) -> None: ...

    # ---- Quiz history ----
    def get_sessions(self) -> list[QuizSession]: ...
    def append_session(self, session: QuizSession) -> None: ...
    def put_sessions(self, sessions: list[QuizSession]) -> None: ...

    def clear(self) -> None: ...


def check_card_fields(fields: dict) -> None:
    """Reject partial updates naming fields a card does not have."""
    unknown = set(fields) - UPDATABLE_CARD_FIELDS
    if unknown:
        raise ValueError(f"Unknown card fields: {sorted(unknown)}")


def merge_card(card: Card, fields: dict) -> Card:
    """
    Apply a partial update, re-validating so stored values stay in range.
    """
    check_card_fields(fields)
    data = card.model_dump()
    data.update(fields)
    return Card.model_validate(data)


def trim_history(sessions: list[QuizSession]) -> list[QuizSession]:
    """Keep only the most recent sessions (oldest evicted first)."""
    if len(sessions) > SESSION_HISTORY_LIMIT:
        return sessions[-SESSION_HISTORY_LIMIT:]
    return sessions


def log_missing_card(card_id: str) -> None:
    logger.warning("[REPOSITORY] update for unknown card %s ignored", card_id)


class InMemoryRepository:
    """
    Dict-backed repository.

    Records are copied on the way in and out so callers cannot mutate
    stored state by accident.
    """

    def __init__(
        self,
        cards: Optional[list[Card]] = None,
        decks: Optional[list[Deck]] = None,
        settings: Optional[Settings] = None,
        progress: Optional[Progress] = None,
        sessions: Optional[list[QuizSession]] = None
    ):
        self._cards: dict[str, Card] = {}
        self._decks: dict[str, Deck] = {}
        self._settings = Settings()
        self._progress = Progress()
        self._sessions: list[QuizSession] = []

        if cards:
            self.put_cards(cards)
        if decks:
            self.put_decks(decks)
        if settings is not None:
            self.put_settings(settings)
        if progress is not None:
            self.put_progress(progress)
        if sessions:
            self.put_sessions(sessions)

    # ---- Cards ----

    def get_all_cards(self) -> list[Card]:
        return [c.model_copy(deep=True) for c in self._cards.values()]

    def get_card(self, card_id: str) -> Optional[Card]:
        card = self._cards.get(card_id)
        return card.model_copy(deep=True) if card else None

    def update_card(self, card_id: str, fields: dict) -> bool:
        card = self._cards.get(card_id)
        if card is None:
            check_card_fields(fields)
            log_missing_card(card_id)
            return False
        self._cards[card_id] = merge_card(card, fields)
        return True

    def put_cards(self, cards: list[Card]) -> None:
        self._cards = {c.id: c.model_copy(deep=True) for c in cards}

    # ---- Decks ----

    def get_decks(self) -> list[Deck]:
        return [d.model_copy(deep=True) for d in self._decks.values()]

    def get_deck(self, deck_id: str) -> Optional[Deck]:
        deck = self._decks.get(deck_id)
        return deck.model_copy(deep=True) if deck else None

    def put_decks(self, decks: list[Deck]) -> None:
        self._decks = {d.id: d.model_copy(deep=True) for d in decks}

    # ---- Settings / Progress ----

    def get_settings(self) -> Settings:
        return self._settings.model_copy()

    def put_settings(self, settings: Settings) -> None:
        self._settings = settings.model_copy()

    def get_progress(self) -> Progress:
        return self._progress.model_copy()

    def put_progress(self, progress: Progress) -> None:
        self._progress = progress.model_copy()

    # ---- Quiz history ----

    def get_sessions(self) -> list[QuizSession]:
        return [s.model_copy(deep=True) for s in self._sessions]

    def append_session(self, session: QuizSession) -> None:
        kept = [s for s in self._sessions if s.id != session.id]
        self._sessions = trim_history(kept + [session.model_copy(deep=True)])

    def put_sessions(self, sessions: list[QuizSession]) -> None:
        by_id = {}
        for session in sessions:
            by_id[session.id] = session.model_copy(deep=True)
        self._sessions = trim_history(list(by_id.values()))

    def clear(self) -> None:
        self._cards = {}
        self._decks = {}
        self._settings = Settings()
        self._progress = Progress()
        self._sessions = []
