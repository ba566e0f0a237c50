"""
Deck overview and maintenance.

Deck statistics reuse the session composer's due test so "due" means the
same thing here as when a study session is built.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from core.leitner.clock import Clock, SystemClock
from core.repository import CardRepository
from core.schemas import MAX_BOX, Card, Deck, ensure_utc
from core.session_builder import cards_for_deck, get_due_cards

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeckStats:
    deck_id: str
    name: str
    total: int
    due: int
    mastered: int


def deck_stats(deck: Deck, cards: list[Card], now: datetime) -> DeckStats:
    """Card, due and mastered counts for one deck (no repository calls)."""
    members = cards_for_deck(deck, cards)
    return DeckStats(
        deck_id=deck.id,
        name=deck.name,
        total=len(members),
        due=len(get_due_cards(members, ensure_utc(now))),
        mastered=sum(1 for c in members if c.box == MAX_BOX),
    )


def get_deck_stats(repo: CardRepository, clock: Optional[Clock] = None) -> list[DeckStats]:
    """Statistics for every stored deck, in deck order."""
    now = (clock or SystemClock()).now()
    cards = repo.get_all_cards()
    return [deck_stats(deck, cards, now) for deck in repo.get_decks()]


def delete_deck(repo: CardRepository, deck_id: str) -> bool:
    """
    Remove a deck. Its cards stay in the pool.

    Returns:
        False if no deck has that id
    """
    decks = repo.get_decks()
    remaining = [d for d in decks if d.id != deck_id]
    if len(remaining) == len(decks):
        logger.info("[DECKS] deck %s not found", deck_id)
        return False
    repo.put_decks(remaining)
    logger.info("[DECKS] deck %s deleted", deck_id)
    return True
