"""
SQLAlchemy ORM Models for the vocabulary store

Defines card, deck, quiz-session and key/value app-state tables.
"""

from sqlalchemy import JSON, Column, DateTime, Integer, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class CardRow(Base):
    """
    One vocabulary card and its Leitner scheduling state.
    """
    __tablename__ = 'cards'

    id = Column(String(64), primary_key=True)
    position = Column(Integer, nullable=False, default=0)  # pool order

    # Content
    front = Column(Text, nullable=False, default="")
    back = Column(Text, nullable=False, default="")
    transliteration = Column(Text, nullable=True)
    module = Column(String(255), nullable=False, default="", index=True)

    # Scheduling state
    box = Column(Integer, nullable=False, default=1)
    last_reviewed = Column(DateTime(timezone=True), nullable=True)
    next_review = Column(DateTime(timezone=True), nullable=True, index=True)
    correct_count = Column(Integer, nullable=False, default=0)
    incorrect_count = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<CardRow({self.id}, box={self.box})>"


class DeckRow(Base):
    """
    A deck and its ordered card ids.
    """
    __tablename__ = 'decks'

    id = Column(String(64), primary_key=True)
    position = Column(Integer, nullable=False, default=0)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    card_ids = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<DeckRow({self.id}, {self.name})>"


class QuizSessionRow(Base):
    """
    History entry for one quiz session.

    `seq` preserves insertion order for oldest-first eviction.
    """
    __tablename__ = 'quiz_sessions'

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(64), nullable=False, unique=True)
    card_ids = Column(JSON, nullable=False, default=list)
    answers = Column(JSON, nullable=False, default=list)  # [{cardId, correct, timeSpentMs}]
    started_at = Column(DateTime(timezone=True), nullable=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<QuizSessionRow(seq={self.seq}, {self.id})>"


class AppStateRow(Base):
    """
    Singleton JSON documents (settings, progress) keyed by name.
    """
    __tablename__ = 'app_state'

    key = Column(String(64), primary_key=True)
    value = Column(JSON, nullable=False)

    def __repr__(self):
        return f"<AppStateRow({self.key})>"
