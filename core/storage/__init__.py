"""
Storage backends for the repository port.

Usage:
    from core.storage import get_repository

    repo = get_repository()          # backend from STORAGE_BACKEND
    repo = get_repository("memory")  # explicit backend
"""

from __future__ import annotations

from typing import Optional

from core.config import get_storage_backend
from core.repository import CardRepository, InMemoryRepository


def get_repository(backend: Optional[str] = None) -> CardRepository:
    """
    Build a repository for the configured backend.

    Backend modules are imported lazily so a memory-only run needs no
    database driver configuration.
    """
    backend = (backend or get_storage_backend()).lower()

    if backend == "memory":
        return InMemoryRepository()
    if backend == "sql":
        from core.storage.database import SqlRepository
        return SqlRepository()
    if backend == "mongo":
        from core.storage.mongo import MongoRepository
        return MongoRepository()
    raise ValueError(f"Unknown storage backend: {backend}")


__all__ = ["get_repository"]
