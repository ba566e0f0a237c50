"""
JSON export / import of the whole repository.

The export document holds cards, decks, settings, progress and quiz history
plus an `exportedAt` timestamp, all with camelCase keys. Import is a
best-effort overwrite: each collection present in the document replaces the
stored one, records that cannot be read are skipped.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Optional, TypeVar

from pydantic import BaseModel, ValidationError

from core.leitner.clock import Clock, SystemClock
from core.repository import CardRepository
from core.schemas import Card, Deck, Progress, QuizSession, Settings

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def build_export(repo: CardRepository, clock: Optional[Clock] = None) -> dict:
    """Export document as a plain dict."""
    clock = clock or SystemClock()
    return {
        "cards": [c.to_json_dict() for c in repo.get_all_cards()],
        "decks": [d.to_json_dict() for d in repo.get_decks()],
        "settings": repo.get_settings().to_json_dict(),
        "progress": repo.get_progress().to_json_dict(),
        "sessions": [s.to_json_dict() for s in repo.get_sessions()],
        "exportedAt": clock.now().isoformat(),
    }


def export_data(repo: CardRepository, clock: Optional[Clock] = None) -> str:
    """Serialize the repository to an indented JSON string."""
    return json.dumps(build_export(repo, clock), indent=2, ensure_ascii=False)


def _parse_records(name: str, items: Any, model: type[M]) -> Optional[list[M]]:
    if not isinstance(items, list):
        logger.warning("[IMPORT] '%s' is not a list, skipped", name)
        return None
    records = []
    for index, item in enumerate(items):
        try:
            records.append(model.model_validate(item))
        except ValidationError as exc:
            logger.warning("[IMPORT] %s[%d] skipped: %s", name, index, exc.errors()[0]["msg"])
    return records


def _parse_single(name: str, item: Any, model: type[M]) -> Optional[M]:
    try:
        return model.model_validate(item)
    except ValidationError as exc:
        logger.warning("[IMPORT] '%s' skipped: %s", name, exc.errors()[0]["msg"])
        return None


def import_data(repo: CardRepository, text: str) -> bool:
    """
    Load an export document into the repository.

    Args:
        repo: Target repository
        text: JSON export document

    Returns:
        False if the text is not a JSON object, True otherwise
    """
    try:
        data = json.loads(text)
    except (TypeError, ValueError) as exc:
        logger.error("[IMPORT] invalid JSON: %s", exc)
        return False
    if not isinstance(data, dict):
        logger.error("[IMPORT] expected a JSON object, got %s", type(data).__name__)
        return False

    list_sections: list[tuple[str, type[BaseModel], Callable]] = [
        ("cards", Card, repo.put_cards),
        ("decks", Deck, repo.put_decks),
        ("sessions", QuizSession, repo.put_sessions),
    ]
    for name, model, put in list_sections:
        if data.get(name) is None:
            continue
        records = _parse_records(name, data[name], model)
        if records is not None:
            put(records)
            logger.info("[IMPORT] %d %s loaded", len(records), name)

    single_sections: list[tuple[str, type[BaseModel], Callable]] = [
        ("settings", Settings, repo.put_settings),
        ("progress", Progress, repo.put_progress),
    ]
    for name, model, put in single_sections:
        if data.get(name) is None:
            continue
        record = _parse_single(name, data[name], model)
        if record is not None:
            put(record)

    return True
