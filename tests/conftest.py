import copy
import itertools
import os
from datetime import datetime, timedelta, timezone

import pytest

# Set test environment variables
os.environ["TEST_MODE"] = "true"
os.environ["LOG_LEVEL"] = "WARNING"

from core.leitner.clock import FixedClock  # noqa: E402
from core.repository import InMemoryRepository  # noqa: E402
from core.schemas import Card  # noqa: E402
from core.storage.database import SqlRepository, get_engine  # noqa: E402
from core.storage.mongo import MongoRepository  # noqa: E402


NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def make_card():
    """Card factory with sensible defaults; timestamps given as day offsets from NOW."""
    counter = itertools.count(1)

    def _make(card_id=None, reviewed_days_ago=None, due_in_days=None, **fields):
        number = next(counter)
        data = {
            "id": card_id or f"card-{number}",
            "front": f"front {number}",
            "back": f"back {number}",
            "module": "Basics",
            "created_at": NOW - timedelta(days=30),
        }
        if reviewed_days_ago is not None:
            data["last_reviewed"] = NOW - timedelta(days=reviewed_days_ago)
        if due_in_days is not None:
            data["next_review"] = NOW + timedelta(days=due_in_days)
        data.update(fields)
        return Card(**data)

    return _make


# ---- Fake MongoDB ----

class FakeCursor:
    """Iterable result of FakeCollection.find with pymongo-style sort."""

    def __init__(self, docs):
        self.docs = docs

    def sort(self, key, direction=1):
        self.docs.sort(key=lambda d: d.get(key, 0), reverse=direction < 0)
        return self

    def __iter__(self):
        return iter(self.docs)


class FakeCollection:
    """Just enough of pymongo's Collection for MongoRepository."""

    _ids = itertools.count(1)

    def __init__(self):
        self.docs = []

    @staticmethod
    def _matches(doc, query):
        for key, condition in query.items():
            if isinstance(condition, dict) and "$in" in condition:
                if doc.get(key) not in condition["$in"]:
                    return False
            elif doc.get(key) != condition:
                return False
        return True

    def find(self, query=None):
        return FakeCursor([copy.deepcopy(d) for d in self.docs if self._matches(d, query or {})])

    def find_one(self, query=None):
        found = list(self.find(query))
        return found[0] if found else None

    def insert_one(self, doc):
        doc = copy.deepcopy(doc)
        doc.setdefault("_id", next(self._ids))
        self.docs.append(doc)

    def insert_many(self, docs):
        for doc in docs:
            self.insert_one(doc)

    def update_one(self, query, update):
        for doc in self.docs:
            if self._matches(doc, query):
                doc.update(copy.deepcopy(update["$set"]))
                return

    def replace_one(self, query, replacement, upsert=False):
        for index, doc in enumerate(self.docs):
            if self._matches(doc, query):
                self.docs[index] = copy.deepcopy(replacement)
                return
        if upsert:
            self.insert_one(replacement)

    def delete_many(self, query):
        self.docs = [d for d in self.docs if not self._matches(d, query)]


class FakeDatabase:
    def __init__(self):
        self.collections = {}

    def __getitem__(self, name):
        return self.collections.setdefault(name, FakeCollection())


# ---- Repositories ----

@pytest.fixture
def memory_repo():
    return InMemoryRepository()


@pytest.fixture
def sql_repo():
    return SqlRepository(get_engine("sqlite://"))


@pytest.fixture
def mongo_repo():
    return MongoRepository(FakeDatabase())


@pytest.fixture(params=["memory", "sql", "mongo"])
def any_repo(request):
    """Every repository backend, for contract tests."""
    return request.getfixturevalue(f"{request.param}_repo")
