"""
Tests for environment configuration and backend selection.
"""

from datetime import timezone

import pytest

from core import config
from core.repository import InMemoryRepository
from core.storage import get_repository


def test_storage_backend_default(monkeypatch):
    monkeypatch.delenv("STORAGE_BACKEND", raising=False)

    assert config.get_storage_backend() == "sql"


def test_storage_backend_normalized(monkeypatch):
    monkeypatch.setenv("STORAGE_BACKEND", " Memory ")

    assert config.get_storage_backend() == "memory"
    assert isinstance(get_repository(), InMemoryRepository)


def test_unknown_storage_backend(monkeypatch):
    monkeypatch.setenv("STORAGE_BACKEND", "redis")

    with pytest.raises(ValueError):
        config.get_storage_backend()
    with pytest.raises(ValueError):
        get_repository("redis")


def test_test_mode_uses_separate_database(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite:///data/vocab.db")

    assert config.is_test_mode()
    assert config.get_database_url() == "sqlite:///data/test_vocab.db"


def test_test_mode_prefixes_mongo_db(monkeypatch):
    monkeypatch.setenv("MONGO_DB_NAME", "trainer")

    assert config.get_mongo_db_name() == "test_trainer"


def test_mongo_uri_required(monkeypatch):
    monkeypatch.delenv("MONGO_URI", raising=False)

    with pytest.raises(ValueError):
        config.get_mongo_uri()


def test_study_timezone(monkeypatch):
    monkeypatch.delenv("STUDY_TIMEZONE", raising=False)
    assert config.get_study_timezone() is timezone.utc

    monkeypatch.setenv("STUDY_TIMEZONE", "Not/AZone")
    with pytest.raises(ValueError):
        config.get_study_timezone()
