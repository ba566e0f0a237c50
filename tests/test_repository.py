"""
Contract tests run against every repository backend (memory, SQLite, fake Mongo).
"""

from datetime import date, timedelta

import pytest

from core.leitner.constants import SESSION_HISTORY_LIMIT
from core.schemas import Deck, Progress, QuizMode, QuizSession, Settings


def test_empty_store_defaults(any_repo):
    assert any_repo.get_all_cards() == []
    assert any_repo.get_decks() == []
    assert any_repo.get_sessions() == []
    assert any_repo.get_settings() == Settings()
    assert any_repo.get_progress() == Progress()
    assert any_repo.get_card("nope") is None
    assert any_repo.get_deck("nope") is None


def test_put_cards_keeps_pool_order(any_repo, make_card, now):
    cards = [make_card(card_id=cid, reviewed_days_ago=1, due_in_days=2)
             for cid in ("z", "a", "m")]

    any_repo.put_cards(cards)

    stored = any_repo.get_all_cards()
    assert [c.id for c in stored] == ["z", "a", "m"]
    assert stored == cards


def test_put_cards_replaces_previous_set(any_repo, make_card):
    any_repo.put_cards([make_card(card_id="old")])
    any_repo.put_cards([make_card(card_id="new")])

    assert [c.id for c in any_repo.get_all_cards()] == ["new"]


def test_update_card_merges_fields(any_repo, make_card, now):
    any_repo.put_cards([make_card(card_id="c1", front="hallo")])

    stored = any_repo.update_card("c1", {
        "box": 3,
        "last_reviewed": now,
        "next_review": now + timedelta(days=7),
        "correct_count": 2,
    })

    card = any_repo.get_card("c1")
    assert stored is True
    assert card.box == 3
    assert card.front == "hallo"
    assert card.last_reviewed == now
    assert card.next_review == now + timedelta(days=7)
    assert card.correct_count == 2


def test_update_missing_card_is_ignored(any_repo, make_card):
    any_repo.put_cards([make_card(card_id="c1")])

    assert any_repo.update_card("ghost", {"box": 2}) is False
    assert any_repo.get_card("ghost") is None
    assert len(any_repo.get_all_cards()) == 1


def test_update_rejects_unknown_fields(any_repo, make_card):
    any_repo.put_cards([make_card(card_id="c1")])

    with pytest.raises(ValueError):
        any_repo.update_card("c1", {"stability": 4.2})


def test_update_clamps_out_of_range_values(any_repo, make_card):
    any_repo.put_cards([make_card(card_id="c1")])

    any_repo.update_card("c1", {"box": 9, "incorrect_count": -4})

    card = any_repo.get_card("c1")
    assert card.box == 5
    assert card.incorrect_count == 0


def test_returned_cards_are_copies(any_repo, make_card):
    any_repo.put_cards([make_card(card_id="c1")])

    card = any_repo.get_card("c1")
    card.box = 4

    assert any_repo.get_card("c1").box == 1


def test_decks_round_trip(any_repo, now):
    decks = [
        Deck(id="d2", name="Numbers", card_ids=["c3", "c4"], created_at=now, updated_at=now),
        Deck(id="d1", name="Greetings", card_ids=["c1"], created_at=now, updated_at=now),
    ]

    any_repo.put_decks(decks)

    assert any_repo.get_decks() == decks
    assert any_repo.get_deck("d1").card_ids == ["c1"]


def test_settings_and_progress_round_trip(any_repo):
    settings = Settings(quiz_mode=QuizMode.FLASHCARD, cards_per_session=15)
    progress = Progress(total_cards=3, current_streak=2, longest_streak=5,
                        last_study_date=date(2026, 10, 19), accuracy_rate=75)

    any_repo.put_settings(settings)
    any_repo.put_progress(progress)

    assert any_repo.get_settings() == settings
    assert any_repo.get_settings().quiz_mode == "flashcard"
    assert any_repo.get_progress() == progress


def test_sessions_capped_oldest_evicted(any_repo, now):
    total = SESSION_HISTORY_LIMIT + 3
    for i in range(total):
        any_repo.append_session(
            QuizSession(id=f"s{i}", card_ids=["c1"], started_at=now + timedelta(minutes=i))
        )

    sessions = any_repo.get_sessions()

    assert len(sessions) == SESSION_HISTORY_LIMIT
    assert sessions[0].id == "s3"
    assert sessions[-1].id == f"s{total - 1}"


def test_session_answers_round_trip(any_repo, now):
    session = QuizSession.model_validate({
        "id": "s1",
        "cardIds": ["c1", "c2"],
        "answers": [
            {"cardId": "c1", "correct": True, "timeSpentMs": 1200},
            {"cardId": "c2", "correct": False, "timeSpentMs": 800},
        ],
        "startedAt": now.isoformat(),
        "completedAt": (now + timedelta(minutes=2)).isoformat(),
    })

    any_repo.append_session(session)

    stored = any_repo.get_sessions()
    assert stored == [session]
    assert stored[0].correct_answers == 1


def test_put_sessions_replaces_history(any_repo, now):
    any_repo.append_session(QuizSession(id="old", started_at=now))

    any_repo.put_sessions([QuizSession(id="a", started_at=now), QuizSession(id="b", started_at=now)])

    assert [s.id for s in any_repo.get_sessions()] == ["a", "b"]


def test_clear_removes_everything(any_repo, make_card, now):
    any_repo.put_cards([make_card()])
    any_repo.put_decks([Deck(id="d", name="Deck")])
    any_repo.put_progress(Progress(current_streak=3))
    any_repo.append_session(QuizSession(id="s", started_at=now))

    any_repo.clear()

    assert any_repo.get_all_cards() == []
    assert any_repo.get_decks() == []
    assert any_repo.get_sessions() == []
    assert any_repo.get_progress() == Progress()


def test_reappending_session_replaces_earlier_entry(any_repo, now):
    any_repo.append_session(QuizSession(id="a", started_at=now))
    any_repo.append_session(QuizSession(id="s", started_at=now))
    any_repo.append_session(QuizSession(id="s", card_ids=["c9"], started_at=now))

    sessions = any_repo.get_sessions()

    assert [s.id for s in sessions] == ["a", "s"]
    assert sessions[-1].card_ids == ["c9"]


def test_put_sessions_keeps_last_record_per_id(any_repo, now):
    any_repo.put_sessions([
        QuizSession(id="x", card_ids=["old"], started_at=now),
        QuizSession(id="y", started_at=now),
        QuizSession(id="x", card_ids=["new"], started_at=now),
    ])

    sessions = any_repo.get_sessions()

    assert [s.id for s in sessions] == ["x", "y"]
    assert sessions[0].card_ids == ["new"]


def test_mongo_reads_follow_stored_order(mongo_repo, make_card, now):
    first, second = make_card(card_id="first"), make_card(card_id="second")
    # Documents written out of order, as another writer might leave them
    mongo_repo.db["cards"].insert_many([
        dict(second.model_dump(), position=1),
        dict(first.model_dump(), position=0),
    ])
    mongo_repo.db["sessions"].insert_many([
        {"id": "late", "seq": 2, "session": QuizSession(id="late", started_at=now).to_json_dict()},
        {"id": "early", "seq": 1, "session": QuizSession(id="early", started_at=now).to_json_dict()},
    ])

    assert [c.id for c in mongo_repo.get_all_cards()] == ["first", "second"]
    assert [s.id for s in mongo_repo.get_sessions()] == ["early", "late"]
