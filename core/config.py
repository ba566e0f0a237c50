"""
Environment configuration.

Values come from the process environment, optionally seeded from a `.env`
file in the working directory.
"""

from __future__ import annotations

import logging
import os
from datetime import timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

# Load environment
load_dotenv()

# Defaults
DEFAULT_BACKEND = "sql"
DEFAULT_DATABASE_URL = "sqlite:///data/vocab.db"
DEFAULT_MONGO_DB_NAME = "vocab_trainer"
STORAGE_BACKENDS = ("memory", "sql", "mongo")


def is_test_mode() -> bool:
    """Check if running in test mode."""
    return os.getenv("TEST_MODE", "false").lower() == "true"


def get_storage_backend() -> str:
    """Which repository backend to use (memory, sql or mongo)."""
    backend = os.getenv("STORAGE_BACKEND", DEFAULT_BACKEND).strip().lower()
    if backend not in STORAGE_BACKENDS:
        raise ValueError(
            f"Unknown STORAGE_BACKEND '{backend}'. "
            f"Expected one of: {', '.join(STORAGE_BACKENDS)}"
        )
    return backend


def get_database_url() -> str:
    """
    Get the SQL database URL.

    In test mode 'vocab.db' is swapped for 'test_vocab.db' so tests never
    touch the real data file.
    """
    url = os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)
    if is_test_mode():
        return url.replace("vocab.db", "test_vocab.db")
    return url


def get_mongo_uri() -> str:
    mongo_uri = os.getenv("MONGO_URI")
    if not mongo_uri:
        raise ValueError("MONGO_URI not found in environment variables")
    return mongo_uri


def get_mongo_db_name() -> str:
    name = os.getenv("MONGO_DB_NAME", DEFAULT_MONGO_DB_NAME)
    if is_test_mode():
        return f"test_{name}"
    return name


def get_study_timezone() -> tzinfo:
    """
    Reference timezone for calendar-day comparisons (streaks).

    Defaults to UTC.
    """
    name = os.getenv("STUDY_TIMEZONE", "UTC").strip()
    if not name or name.upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"Unknown STUDY_TIMEZONE '{name}'") from exc


def configure_logging(level: Optional[str] = None) -> None:
    """Basic console logging for scripts, level from LOG_LEVEL by default."""
    level_name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
