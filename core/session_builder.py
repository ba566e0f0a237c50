"""
Session Builder - Tiered Session Composition

Creates study sessions from three pools, walked in strict priority order:
1. Backlog pool: previously missed cards still in the early boxes
   (oldest mistake first, at most BACKLOG_LIMIT)
2. Due pool: cards whose next review has passed or was never scheduled
   (earliest due first, unscheduled cards first)
3. Unseen pool: cards never graded, in pool order

Later pools skip ids already taken by earlier ones. The result is
duplicate-free and never longer than the requested size.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Optional

from core.leitner.clock import SystemClock
from core.leitner.constants import BACKLOG_LIMIT, BACKLOG_MAX_BOX, DEFAULT_SESSION_SIZE
from core.schemas import Card, Deck, ensure_utc

logger = logging.getLogger(__name__)

POOL_ORDER = ["backlog", "due", "unseen"]


@dataclass
class SessionPools:
    """
    Ordered candidate pools for one composition call.
    """
    backlog: list[Card] = field(default_factory=list)
    due: list[Card] = field(default_factory=list)
    unseen: list[Card] = field(default_factory=list)

    def as_dict(self) -> dict[str, list[Card]]:
        return {name: getattr(self, name) for name in POOL_ORDER}


def _now_or_system(now: Optional[datetime]) -> datetime:
    if now is None:
        return SystemClock().now()
    return ensure_utc(now)


def is_due(card: Card, now: datetime) -> bool:
    """A card is due if it was never scheduled or its review time has passed."""
    return card.next_review is None or card.next_review <= now


def is_backlog(card: Card, now: datetime) -> bool:
    """Previously missed and still in an early box."""
    return (
        card.last_reviewed is not None
        and card.incorrect_count > 0
        and card.box <= BACKLOG_MAX_BOX
        and card.last_reviewed <= now
    )


def _due_sort_key(card: Card) -> tuple:
    # Unscheduled cards sort ahead of every dated one
    if card.next_review is None:
        return (0, 0.0)
    return (1, card.next_review.timestamp())


def build_session_pools(cards: list[Card], now: datetime) -> SessionPools:
    """
    Sort a card pool into the three priority tiers (no repository calls).

    Each tier excludes ids already placed in an earlier tier.
    """
    now = ensure_utc(now)

    backlog = sorted(
        (c for c in cards if is_backlog(c, now)),
        key=lambda c: c.last_reviewed,
    )[:BACKLOG_LIMIT]
    taken = {c.id for c in backlog}

    due = sorted(
        (c for c in cards if c.id not in taken and is_due(c, now)),
        key=_due_sort_key,
    )
    taken.update(c.id for c in due)

    unseen = [c for c in cards if c.id not in taken and c.is_new]

    return SessionPools(backlog=backlog, due=due, unseen=unseen)


def fill_in_order(
    pools: dict[str, list[Card]],
    order: list[str],
    target_size: int
) -> list[Card]:
    """
    Fill a session by walking pools in order until target_size is reached,
    keeping only the first occurrence of each card id.
    """
    session: list[Card] = []
    seen: set[str] = set()
    if target_size <= 0:
        return session
    for name in order:
        for card in pools.get(name, []):
            if len(session) >= target_size:
                return session
            if card.id in seen:
                continue
            seen.add(card.id)
            session.append(card)
    return session


def get_session_cards(
    cards: list[Card],
    max_cards: int = DEFAULT_SESSION_SIZE,
    now: Optional[datetime] = None
) -> list[Card]:
    """
    Compose the ordered list of cards to study next.

    Args:
        cards: Candidate pool (e.g. all cards, or one deck's cards)
        max_cards: Session size; zero or less yields an empty session
        now: Reference time, captured once for the whole call

    Returns:
        At most max_cards distinct cards: backlog, then due, then unseen
    """
    if not cards or max_cards <= 0:
        return []

    now = _now_or_system(now)
    pools = build_session_pools(cards, now)
    session = fill_in_order(pools.as_dict(), POOL_ORDER, max_cards)

    logger.debug(
        "[SESSION] Pool sizes - backlog: %d, due: %d, unseen: %d -> %d cards",
        len(pools.backlog), len(pools.due), len(pools.unseen), len(session),
    )
    return session


def get_due_cards(
    cards: list[Card],
    now: Optional[datetime] = None
) -> list[Card]:
    """
    All due cards in pool order (no cap, no backlog prioritisation).
    """
    now = _now_or_system(now)
    return [c for c in cards if is_due(c, now)]


def cards_for_deck(deck: Deck, cards: Iterable[Card]) -> list[Card]:
    """Restrict a pool to the cards a deck contains."""
    members = set(deck.card_ids)
    return [c for c in cards if c.id in members]
