"""
Tests for deck statistics, deck deletion and settings updates.
"""

import pytest

from core.decks import deck_stats, delete_deck, get_deck_stats
from core.schemas import Deck, QuizMode, Settings
from core.settings import update_settings


# ---- Deck statistics ----

def test_deck_stats_counts_members_only(make_card, now):
    cards = [
        make_card(card_id="new"),                                             # due (never scheduled)
        make_card(card_id="later", box=3, reviewed_days_ago=1, due_in_days=4),
        make_card(card_id="done", box=5, reviewed_days_ago=2, due_in_days=-1),  # due and mastered
        make_card(card_id="outside", box=5),
    ]
    deck = Deck(id="d1", name="Greetings", card_ids=["new", "later", "done", "gone"])

    stats = deck_stats(deck, cards, now)

    assert stats.deck_id == "d1"
    assert stats.name == "Greetings"
    assert stats.total == 3
    assert stats.due == 2
    assert stats.mastered == 1


def test_empty_deck_stats(make_card, now):
    stats = deck_stats(Deck(id="d", name="Empty"), [make_card()], now)

    assert (stats.total, stats.due, stats.mastered) == (0, 0, 0)


def test_get_deck_stats_for_every_deck(any_repo, make_card, clock):
    any_repo.put_cards([make_card(card_id="a"), make_card(card_id="b", box=5, due_in_days=3,
                                                          reviewed_days_ago=1)])
    any_repo.put_decks([
        Deck(id="d1", name="One", card_ids=["a"]),
        Deck(id="d2", name="Two", card_ids=["a", "b"]),
    ])

    stats = get_deck_stats(any_repo, clock)

    assert [(s.deck_id, s.total, s.due, s.mastered) for s in stats] == [
        ("d1", 1, 1, 0),
        ("d2", 2, 1, 1),
    ]


# ---- Deck deletion ----

def test_delete_deck_keeps_cards(any_repo, make_card):
    any_repo.put_cards([make_card(card_id="a")])
    any_repo.put_decks([
        Deck(id="d1", name="One", card_ids=["a"]),
        Deck(id="d2", name="Two", card_ids=["a"]),
    ])

    assert delete_deck(any_repo, "d1") is True

    assert [d.id for d in any_repo.get_decks()] == ["d2"]
    assert any_repo.get_deck("d1") is None
    assert [c.id for c in any_repo.get_all_cards()] == ["a"]


def test_delete_unknown_deck(any_repo):
    any_repo.put_decks([Deck(id="d1", name="One")])

    assert delete_deck(any_repo, "missing") is False
    assert [d.id for d in any_repo.get_decks()] == ["d1"]


# ---- Settings ----

def test_update_settings_merges_fields(any_repo):
    any_repo.put_settings(Settings(daily_goal=30))

    settings = update_settings(any_repo, quiz_mode=QuizMode.FLASHCARD, cards_per_session=12)

    assert settings.quiz_mode == "flashcard"
    assert settings.cards_per_session == 12
    assert settings.daily_goal == 30
    assert settings.show_transliteration is True
    assert any_repo.get_settings() == settings


def test_update_settings_accepts_mode_strings(memory_repo):
    assert update_settings(memory_repo, quiz_mode="type-answer").quiz_mode == "type-answer"


def test_update_settings_rejects_unknown_fields(memory_repo):
    with pytest.raises(ValueError):
        update_settings(memory_repo, theme="dark")

    assert memory_repo.get_settings() == Settings()


def test_update_settings_rejects_invalid_mode(memory_repo):
    with pytest.raises(ValueError):
        update_settings(memory_repo, quiz_mode="speed-round")

    assert memory_repo.get_settings() == Settings()


def test_update_settings_clamps_negative_counts(memory_repo):
    assert update_settings(memory_repo, cards_per_session=-5).cards_per_session == 0
