"""
End-to-end tests for a study session over the in-memory and SQLite stores.
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from core.leitner import Grade
from core.schemas import Deck, Settings
from core.study import StudySession


@pytest.fixture(params=["memory", "sql"])
def repo(request):
    return request.getfixturevalue(f"{request.param}_repo")


@pytest.fixture
def seeded(repo, make_card):
    cards = [make_card(card_id=f"c{i}") for i in range(6)]
    repo.put_cards(cards)
    repo.put_decks([Deck(id="d1", name="Half", card_ids=["c1", "c3", "c5"])])
    repo.put_settings(Settings(cards_per_session=4))
    return repo


def test_start_uses_session_size_setting(seeded, clock):
    session = StudySession.start(seeded, clock)

    assert [c.id for c in session.cards] == ["c0", "c1", "c2", "c3"]
    assert session.record.card_ids == ["c0", "c1", "c2", "c3"]
    assert session.record.started_at == clock.now()
    assert session.current_card.id == "c0"


def test_start_for_deck(seeded, clock):
    session = StudySession.start(seeded, clock, deck_id="d1", cards_per_session=10)

    assert [c.id for c in session.cards] == ["c1", "c3", "c5"]


def test_start_returns_none_when_nothing_to_study(repo, make_card, clock):
    assert StudySession.start(repo, clock) is None

    repo.put_cards([make_card(reviewed_days_ago=1, due_in_days=3)])
    assert StudySession.start(repo, clock) is None


def test_start_returns_none_for_unknown_deck(seeded, clock):
    assert StudySession.start(seeded, clock, deck_id="missing") is None


def test_full_session(seeded, clock):
    session = StudySession.start(seeded, clock, cards_per_session=3)

    clock.advance(seconds=4)
    first = session.answer(Grade.GOOD)
    clock.advance(seconds=6)
    session.answer(Grade.AGAIN)
    session.answer(Grade.EASY, time_spent_ms=1500)

    assert first.box == 2
    assert session.is_complete
    assert session.current_card is None
    assert session.answer(Grade.GOOD) is None

    record = session.finish()

    assert record.completed_at == clock.now()
    assert [a.card_id for a in record.answers] == ["c0", "c1", "c2"]
    assert [a.correct for a in record.answers] == [True, False, True]
    assert [a.time_spent_ms for a in record.answers] == [4000, 6000, 1500]
    assert session.correct_count == 2

    assert seeded.get_card("c0").box == 2
    assert seeded.get_card("c1").box == 1
    assert seeded.get_card("c1").incorrect_count == 1
    assert seeded.get_card("c2").box == 3
    assert seeded.get_card("c2").next_review == clock.now() + timedelta(days=7)

    assert [s.id for s in seeded.get_sessions()] == [record.id]

    progress = seeded.get_progress()
    assert progress.total_cards == 6
    assert progress.new_cards == 3
    assert progress.learning_cards == 2
    assert progress.total_reviews == 3
    assert progress.accuracy_rate == 67
    assert progress.current_streak == 1
    assert progress.last_study_date == date(2026, 10, 19)


def test_finish_is_idempotent(seeded, clock):
    session = StudySession.start(seeded, clock)
    session.answer(Grade.HARD)

    first = session.finish()
    clock.advance(minutes=5)
    second = session.finish()

    assert second.completed_at == first.completed_at
    assert len(seeded.get_sessions()) == 1
    assert session.answer(Grade.GOOD) is None


def test_answer_outcome_can_differ_from_grade(seeded, clock):
    session = StudySession.start(seeded, clock)

    session.answer(Grade.HARD, correct=False)

    assert session.record.answers[0].correct is False
    assert seeded.get_card("c0").correct_count == 1


def test_grade_applies_to_stored_state(seeded, clock):
    session = StudySession.start(seeded, clock)
    seeded.update_card("c0", {"box": 4})

    update = session.answer(Grade.GOOD)

    assert update.box == 5


def test_streak_continues_next_day(seeded, clock):
    session = StudySession.start(seeded, clock, cards_per_session=1)
    session.answer(Grade.GOOD)
    session.finish()

    clock.advance(days=1)
    session = StudySession.start(seeded, clock, cards_per_session=1)
    session.answer(Grade.GOOD)
    session.finish()

    progress = seeded.get_progress()
    assert progress.current_streak == 2
    assert progress.longest_streak == 2
    assert len(seeded.get_sessions()) == 2


class TickingClock:
    """Advances one second on every read."""

    def __init__(self, start):
        self.current = start
        self.reads = 0

    def now(self):
        value = self.current
        self.current += timedelta(seconds=1)
        self.reads += 1
        return value


def test_answer_reads_the_clock_once(memory_repo, make_card):
    memory_repo.put_cards([make_card(card_id="c0")])
    clock = TickingClock(datetime(2026, 10, 19, 23, 59, 57, tzinfo=timezone.utc))
    session = StudySession.start(memory_repo, clock, tz=timezone.utc)
    reads_before = clock.reads

    session.answer(Grade.GOOD)

    card = memory_repo.get_card("c0")
    progress = memory_repo.get_progress()
    assert clock.reads == reads_before + 1
    assert card.last_reviewed == datetime(2026, 10, 19, 23, 59, 58, tzinfo=timezone.utc)
    assert progress.last_study_date == card.last_reviewed.date()
    assert session.record.answers[0].time_spent_ms == 1000
