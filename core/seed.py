"""
Default vocabulary seeding.

The vocabulary file maps a module name to its list of items:

    {
        "Greetings": [
            {"term": "...", "meaning": "...", "transliteration": "..."},
            ...
        ]
    }

Each module becomes one deck; each item one new card in box 1.
"""

from __future__ import annotations

import json
import logging
import uuid
from pathlib import Path
from typing import Optional

from core.leitner.clock import Clock, SystemClock
from core.repository import CardRepository
from core.schemas import Card, Deck

logger = logging.getLogger(__name__)

# Accepted item keys, first match wins
TERM_KEYS = ("term", "front", "Arabic_Term")
MEANING_KEYS = ("meaning", "back", "Bengali_Meaning")
TRANSLITERATION_KEYS = ("transliteration", "Transliteration")


def generate_id() -> str:
    """
    Generate a unique record ID (UUID).
    """
    return str(uuid.uuid4())


def _first(item: dict, keys: tuple[str, ...]) -> str:
    for key in keys:
        value = item.get(key)
        if value:
            return str(value).strip()
    return ""


def load_vocabulary(path: Path) -> dict[str, list[dict]]:
    """Read a module -> items vocabulary file."""
    with open(path, encoding="utf-8") as handle:
        data = json.load(handle)
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected an object mapping module names to item lists")
    return data


def build_default_data(
    vocabulary: dict[str, list[dict]],
    clock: Optional[Clock] = None
) -> tuple[list[Card], list[Deck]]:
    """
    Build cards and decks from a vocabulary mapping (no repository calls).
    """
    now = (clock or SystemClock()).now()
    cards: list[Card] = []
    decks: list[Deck] = []

    for module_name, items in vocabulary.items():
        card_ids = []
        for item in items or []:
            if not isinstance(item, dict):
                continue
            card = Card(
                id=generate_id(),
                front=_first(item, TERM_KEYS),
                back=_first(item, MEANING_KEYS),
                transliteration=_first(item, TRANSLITERATION_KEYS) or None,
                module=module_name,
                created_at=now,
            )
            cards.append(card)
            card_ids.append(card.id)

        decks.append(
            Deck(
                id=generate_id(),
                name=module_name,
                description=f"{len(card_ids)} vocabulary items",
                card_ids=card_ids,
                created_at=now,
                updated_at=now,
            )
        )

    return cards, decks


def initialize_default_data(
    repo: CardRepository,
    vocabulary: dict[str, list[dict]],
    clock: Optional[Clock] = None
) -> bool:
    """
    Seed the repository, but only if it holds no cards yet.

    Returns:
        True if data was written
    """
    if repo.get_all_cards():
        logger.info("[SEED] cards already present, skipping")
        return False

    cards, decks = build_default_data(vocabulary, clock)
    repo.put_cards(cards)
    repo.put_decks(decks)
    logger.info("[SEED] created %d cards in %d decks", len(cards), len(decks))
    return True
