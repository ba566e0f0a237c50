"""
MongoDB repository for cards, decks, settings, progress and quiz history.

Collections:
- cards: one document per card (plus its pool position)
- decks: one document per deck
- sessions: quiz history, `seq` orders oldest to newest
- app_state: singleton documents keyed by `_id` (settings, progress)
"""

from __future__ import annotations

from typing import Optional

from pymongo import ASCENDING, MongoClient
from pymongo.database import Database

from core.config import get_mongo_db_name, get_mongo_uri
from core.leitner.constants import SESSION_HISTORY_LIMIT
from core.repository import check_card_fields, log_missing_card, merge_card
from core.schemas import Card, Deck, Progress, QuizSession, Settings

# Configuration
CARDS = "cards"
DECKS = "decks"
SESSIONS = "sessions"
APP_STATE = "app_state"

# Global connection pool (reused across requests)
_client: Optional[MongoClient] = None


# ---- Connection Management ----

def get_database() -> Database:
    """
    Get the trainer database, creating the shared client on first use.

    Returns:
        MongoDB database object
    """
    global _client

    if _client is None:
        _client = MongoClient(
            get_mongo_uri(),
            maxPoolSize=10,  # Connection pool size
            minPoolSize=1,   # Keep at least 1 connection alive
            maxIdleTimeMS=60000  # Keep connections alive for 60 seconds
        )
    return _client[get_mongo_db_name()]


def _without_id(doc: dict) -> dict:
    return {k: v for k, v in doc.items() if k != "_id"}


class MongoRepository:
    """
    Repository backed by MongoDB collections.
    """

    def __init__(self, db: Optional[Database] = None):
        self.db = db if db is not None else get_database()

    # ---- Cards ----

    def get_all_cards(self) -> list[Card]:
        docs = self.db[CARDS].find({}).sort("position", ASCENDING)
        return [Card.model_validate(_without_id(doc)) for doc in docs]

    def get_card(self, card_id: str) -> Optional[Card]:
        doc = self.db[CARDS].find_one({"id": card_id})
        return Card.model_validate(_without_id(doc)) if doc else None

    def update_card(self, card_id: str, fields: dict) -> bool:
        check_card_fields(fields)
        current = self.get_card(card_id)
        if current is None:
            log_missing_card(card_id)
            return False
        merged = merge_card(current, fields)
        self.db[CARDS].update_one(
            {"id": card_id},
            {"$set": merged.model_dump(exclude={"id"})}
        )
        return True

    def put_cards(self, cards: list[Card]) -> None:
        docs = {}
        for card in cards:
            docs[card.id] = card.model_dump()
        self.db[CARDS].delete_many({})
        if docs:
            self.db[CARDS].insert_many(
                [dict(doc, position=position) for position, doc in enumerate(docs.values())]
            )

    # ---- Decks ----

    def get_decks(self) -> list[Deck]:
        docs = self.db[DECKS].find({}).sort("position", ASCENDING)
        return [Deck.model_validate(_without_id(doc)) for doc in docs]

    def get_deck(self, deck_id: str) -> Optional[Deck]:
        doc = self.db[DECKS].find_one({"id": deck_id})
        return Deck.model_validate(_without_id(doc)) if doc else None

    def put_decks(self, decks: list[Deck]) -> None:
        docs = {}
        for deck in decks:
            docs[deck.id] = deck.model_dump()
        self.db[DECKS].delete_many({})
        if docs:
            self.db[DECKS].insert_many(
                [dict(doc, position=position) for position, doc in enumerate(docs.values())]
            )

    # ---- Settings / Progress ----

    def _get_state(self, key: str) -> Optional[dict]:
        doc = self.db[APP_STATE].find_one({"_id": key})
        return doc.get("value") if doc else None

    def _put_state(self, key: str, value: dict) -> None:
        self.db[APP_STATE].replace_one({"_id": key}, {"_id": key, "value": value}, upsert=True)

    def get_settings(self) -> Settings:
        data = self._get_state("settings")
        return Settings.model_validate(data) if data else Settings()

    def put_settings(self, settings: Settings) -> None:
        self._put_state("settings", settings.to_json_dict())

    def get_progress(self) -> Progress:
        data = self._get_state("progress")
        return Progress.model_validate(data) if data else Progress()

    def put_progress(self, progress: Progress) -> None:
        self._put_state("progress", progress.to_json_dict())

    # ---- Quiz history ----

    def _session_docs(self) -> list[dict]:
        return list(self.db[SESSIONS].find({}).sort("seq", ASCENDING))

    def get_sessions(self) -> list[QuizSession]:
        return [
            QuizSession.model_validate(_without_id(doc)["session"])
            for doc in self._session_docs()
        ]

    def _evict_old_sessions(self) -> None:
        docs = self._session_docs()
        stale = docs[:-SESSION_HISTORY_LIMIT] if len(docs) > SESSION_HISTORY_LIMIT else []
        if stale:
            self.db[SESSIONS].delete_many({"seq": {"$in": [doc["seq"] for doc in stale]}})

    def append_session(self, session: QuizSession) -> None:
        docs = self._session_docs()
        next_seq = docs[-1]["seq"] + 1 if docs else 1
        self.db[SESSIONS].delete_many({"id": session.id})
        self.db[SESSIONS].insert_one(
            {"id": session.id, "seq": next_seq, "session": session.to_json_dict()}
        )
        self._evict_old_sessions()

    def put_sessions(self, sessions: list[QuizSession]) -> None:
        by_id = {}
        for session in sessions:
            by_id[session.id] = session
        self.db[SESSIONS].delete_many({})
        if by_id:
            self.db[SESSIONS].insert_many([
                {"id": s.id, "seq": seq, "session": s.to_json_dict()}
                for seq, s in enumerate(by_id.values(), start=1)
            ])
        self._evict_old_sessions()

    def clear(self) -> None:
        for name in (CARDS, DECKS, SESSIONS, APP_STATE):
            self.db[name].delete_many({})
