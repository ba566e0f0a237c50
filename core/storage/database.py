"""
Database - SQL Repository

Handles all SQL operations for cards, decks, settings, progress and quiz
history. Uses SQLAlchemy ORM; SQLite by default, any SQLAlchemy URL works.

This module handles ONLY database I/O.
Scheduling logic lives in core.leitner and core.session_builder.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from core.config import get_database_url
from core.leitner.constants import SESSION_HISTORY_LIMIT
from core.repository import check_card_fields, log_missing_card, merge_card
from core.schemas import Card, Deck, Progress, QuizSession, Settings
from core.storage.models import AppStateRow, Base, CardRow, DeckRow, QuizSessionRow

logger = logging.getLogger(__name__)

SETTINGS_KEY = "settings"
PROGRESS_KEY = "progress"


def get_engine(url: Optional[str] = None) -> Engine:
    """
    Get SQLAlchemy engine for database connection.

    In-memory SQLite shares one connection so every session sees the same
    data; file-based SQLite gets its parent directory created.

    Args:
        url: Database URL (defaults to DATABASE_URL)

    Returns:
        SQLAlchemy Engine instance
    """
    url = url or get_database_url()
    parsed = make_url(url)

    if parsed.get_backend_name() == "sqlite":
        database = parsed.database
        if not database or database == ":memory:":
            return create_engine(
                url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
                echo=False
            )
        Path(database).parent.mkdir(parents=True, exist_ok=True)
        return create_engine(url, echo=False)

    return create_engine(
        url,
        pool_size=5,           # Keep 5 connections open
        max_overflow=10,       # Allow up to 10 extra connections
        pool_pre_ping=True,    # Verify connections before use
        echo=False
    )


def init_db(engine: Engine) -> None:
    """
    Initialize database schema if tables don't exist.

    Safe to call multiple times.
    """
    Base.metadata.create_all(engine)


def reset_db(engine: Engine) -> None:
    """
    DANGEROUS: Delete all data and recreate tables.

    Only use this for testing or when you want to start fresh.
    """
    Base.metadata.drop_all(engine)
    logger.warning("[DATABASE] All tables dropped")
    init_db(engine)


# ---- Row conversion ----

def _card_from_row(row: CardRow) -> Card:
    return Card.model_validate({
        "id": row.id,
        "front": row.front,
        "back": row.back,
        "transliteration": row.transliteration,
        "module": row.module,
        "box": row.box,
        "last_reviewed": row.last_reviewed,
        "next_review": row.next_review,
        "correct_count": row.correct_count,
        "incorrect_count": row.incorrect_count,
        "created_at": row.created_at,
    })


def _card_to_row(card: Card, position: int) -> CardRow:
    return CardRow(position=position, **card.model_dump())


def _copy_card_to_row(card: Card, row: CardRow) -> None:
    for name, value in card.model_dump(exclude={"id"}).items():
        setattr(row, name, value)


def _deck_from_row(row: DeckRow) -> Deck:
    return Deck.model_validate({
        "id": row.id,
        "name": row.name,
        "description": row.description,
        "card_ids": list(row.card_ids or []),
        "created_at": row.created_at,
        "updated_at": row.updated_at,
    })


def _session_from_row(row: QuizSessionRow) -> QuizSession:
    return QuizSession.model_validate({
        "id": row.id,
        "card_ids": list(row.card_ids or []),
        "answers": list(row.answers or []),
        "started_at": row.started_at,
        "completed_at": row.completed_at,
    })


def _session_to_row(session: QuizSession) -> QuizSessionRow:
    return QuizSessionRow(
        id=session.id,
        card_ids=list(session.card_ids),
        answers=[a.to_json_dict() for a in session.answers],
        started_at=session.started_at,
        completed_at=session.completed_at,
    )


def _unique_by_id(records: list) -> list:
    """Last record wins for repeated ids, first-seen order kept."""
    by_id = {}
    for record in records:
        by_id[record.id] = record
    return list(by_id.values())


class SqlRepository:
    """
    Repository backed by a SQL database.
    """

    def __init__(self, engine: Optional[Engine] = None):
        self.engine = engine or get_engine()
        init_db(self.engine)
        self._session_factory = sessionmaker(bind=self.engine, expire_on_commit=False)

    def get_session(self) -> Session:
        """Get a SQLAlchemy session for database operations."""
        return self._session_factory()

    # ---- Cards ----

    def get_all_cards(self) -> list[Card]:
        session = self.get_session()
        try:
            rows = session.query(CardRow).order_by(CardRow.position, CardRow.id).all()
            return [_card_from_row(row) for row in rows]
        finally:
            session.close()

    def get_card(self, card_id: str) -> Optional[Card]:
        session = self.get_session()
        try:
            row = session.get(CardRow, card_id)
            return _card_from_row(row) if row else None
        finally:
            session.close()

    def update_card(self, card_id: str, fields: dict) -> bool:
        check_card_fields(fields)
        session = self.get_session()
        try:
            row = session.get(CardRow, card_id)
            if row is None:
                log_missing_card(card_id)
                return False
            _copy_card_to_row(merge_card(_card_from_row(row), fields), row)
            session.commit()
            return True
        finally:
            session.close()

    def put_cards(self, cards: list[Card]) -> None:
        session = self.get_session()
        try:
            session.query(CardRow).delete()
            session.add_all(
                _card_to_row(card, position)
                for position, card in enumerate(_unique_by_id(cards))
            )
            session.commit()
        finally:
            session.close()

    # ---- Decks ----

    def get_decks(self) -> list[Deck]:
        session = self.get_session()
        try:
            rows = session.query(DeckRow).order_by(DeckRow.position, DeckRow.id).all()
            return [_deck_from_row(row) for row in rows]
        finally:
            session.close()

    def get_deck(self, deck_id: str) -> Optional[Deck]:
        session = self.get_session()
        try:
            row = session.get(DeckRow, deck_id)
            return _deck_from_row(row) if row else None
        finally:
            session.close()

    def put_decks(self, decks: list[Deck]) -> None:
        session = self.get_session()
        try:
            session.query(DeckRow).delete()
            session.add_all(
                DeckRow(position=position, **deck.model_dump())
                for position, deck in enumerate(_unique_by_id(decks))
            )
            session.commit()
        finally:
            session.close()

    # ---- Settings / Progress ----

    def _get_state(self, key: str) -> Optional[dict]:
        session = self.get_session()
        try:
            row = session.get(AppStateRow, key)
            return dict(row.value) if row else None
        finally:
            session.close()

    def _put_state(self, key: str, value: dict) -> None:
        session = self.get_session()
        try:
            session.merge(AppStateRow(key=key, value=value))
            session.commit()
        finally:
            session.close()

    def get_settings(self) -> Settings:
        data = self._get_state(SETTINGS_KEY)
        return Settings.model_validate(data) if data else Settings()

    def put_settings(self, settings: Settings) -> None:
        self._put_state(SETTINGS_KEY, settings.to_json_dict())

    def get_progress(self) -> Progress:
        data = self._get_state(PROGRESS_KEY)
        return Progress.model_validate(data) if data else Progress()

    def put_progress(self, progress: Progress) -> None:
        self._put_state(PROGRESS_KEY, progress.to_json_dict())

    # ---- Quiz history ----

    def get_sessions(self) -> list[QuizSession]:
        session = self.get_session()
        try:
            rows = session.query(QuizSessionRow).order_by(QuizSessionRow.seq).all()
            return [_session_from_row(row) for row in rows]
        finally:
            session.close()

    def _evict_old_sessions(self, session: Session) -> None:
        stale = (
            session.query(QuizSessionRow.seq)
            .order_by(QuizSessionRow.seq.desc())
            .offset(SESSION_HISTORY_LIMIT)
            .all()
        )
        if stale:
            session.query(QuizSessionRow).filter(
                QuizSessionRow.seq.in_([seq for (seq,) in stale])
            ).delete(synchronize_session=False)

    def append_session(self, quiz_session: QuizSession) -> None:
        session = self.get_session()
        try:
            session.query(QuizSessionRow).filter(QuizSessionRow.id == quiz_session.id).delete()
            session.add(_session_to_row(quiz_session))
            session.flush()
            self._evict_old_sessions(session)
            session.commit()
        finally:
            session.close()

    def put_sessions(self, sessions: list[QuizSession]) -> None:
        session = self.get_session()
        try:
            session.query(QuizSessionRow).delete()
            session.add_all(_session_to_row(s) for s in _unique_by_id(sessions))
            session.flush()
            self._evict_old_sessions(session)
            session.commit()
        finally:
            session.close()

    def clear(self) -> None:
        session = self.get_session()
        try:
            for model in (CardRow, DeckRow, QuizSessionRow, AppStateRow):
                session.query(model).delete()
            session.commit()
        finally:
            session.close()
