"""
Study settings updates.
"""

from __future__ import annotations

import logging

from core.repository import CardRepository
from core.schemas import Settings

logger = logging.getLogger(__name__)

SETTINGS_FIELDS = frozenset(Settings.model_fields)


def update_settings(repo: CardRepository, **fields) -> Settings:
    """
    Merge the given fields into the stored settings and save them.

    Unset fields keep their stored values. Unknown names or invalid values
    raise ValueError and nothing is written.
    """
    unknown = set(fields) - SETTINGS_FIELDS
    if unknown:
        raise ValueError(f"Unknown settings: {sorted(unknown)}")

    data = repo.get_settings().model_dump()
    data.update(fields)
    settings = Settings.model_validate(data)

    repo.put_settings(settings)
    logger.info("[SETTINGS] updated %s", ", ".join(sorted(fields)) or "nothing")
    return settings
