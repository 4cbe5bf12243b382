from __future__ import annotations

import itertools
from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from flashdeck.deck import (
    AddDeck,
    BulkAddCards,
    DeckState,
    DeleteCard,
    DeleteDeck,
    DuplicateIdError,
    SetActiveDeck,
    UnknownCardError,
    UnknownDeckError,
    UpdateDeck,
    UpdateSettings,
    UpsertCard,
    grade_card,
    new_deck,
    prepare_card,
    reduce,
    replay,
    review_queue,
)
from flashdeck.deck.store import MAX_REVIEW_LOG_ENTRIES
from flashdeck.srs import Rating, ReviewSettings


NOW = datetime(2026, 10, 18, 9, 30, tzinfo=timezone.utc)


def counter_ids(prefix: str):
    counter = itertools.count(1)
    return lambda: f"{prefix}-{next(counter)}"


@pytest.fixture
def state_with_deck() -> DeckState:
    deck = new_deck("Biology", "Cell structure", id_factory=lambda: "deck-1")
    return reduce(DeckState(), AddDeck(deck))


def add_cards(state: DeckState, count: int) -> DeckState:
    make_id = counter_ids("card")
    cards = tuple(
        prepare_card(
            "deck-1",
            now=NOW,
            settings=state.settings,
            id_factory=make_id,
            front=f"front {index}",
            back=f"back {index}",
            created_at=NOW - timedelta(minutes=count - index),
        )
        for index in range(count)
    )
    return reduce(state, BulkAddCards(cards))


def test_every_command_bumps_version(state_with_deck: DeckState) -> None:
    state = add_cards(state_with_deck, 2)
    state = reduce(state, UpdateDeck("deck-1", name="Cell biology"))

    assert state.version == 3
    assert state.decks[0].name == "Cell biology"
    assert state.decks[0].description == "Cell structure"


def test_add_deck_activates_it(state_with_deck: DeckState) -> None:
    assert state_with_deck.active_deck_id == "deck-1"


def test_add_deck_rejects_existing_id(state_with_deck: DeckState) -> None:
    duplicate = new_deck("Chemistry", id_factory=lambda: "deck-1")

    with pytest.raises(DuplicateIdError):
        reduce(state_with_deck, AddDeck(duplicate))


def test_bulk_add_rejects_existing_card_id(state_with_deck: DeckState) -> None:
    state = add_cards(state_with_deck, 1)
    clash = prepare_card("deck-1", now=NOW, settings=state.settings, card_id="card-1")

    with pytest.raises(DuplicateIdError):
        reduce(state, BulkAddCards((clash,)))


def test_bulk_add_rejects_repeated_id_in_batch(state_with_deck: DeckState) -> None:
    card = prepare_card("deck-1", now=NOW, settings=state_with_deck.settings, card_id="card-9")

    with pytest.raises(DuplicateIdError):
        reduce(state_with_deck, BulkAddCards((card, card)))


def test_reduce_does_not_mutate_previous_state(state_with_deck: DeckState) -> None:
    after = add_cards(state_with_deck, 1)

    assert state_with_deck.cards == ()
    assert len(after.cards) == 1


def test_prepare_card_seeds_scheduling_fields() -> None:
    settings = ReviewSettings(default_ease_factor=2.2)

    card = prepare_card("deck-1", now=NOW, settings=settings, id_factory=lambda: "c1")

    assert card.id == "c1"
    assert card.is_new is True
    assert card.repetition == 0
    assert card.interval == 1
    assert card.ease_factor == pytest.approx(2.2)
    assert card.due == card.created_at == NOW
    assert card.review_history == ()


def test_upsert_card_replaces_existing_card(state_with_deck: DeckState) -> None:
    state = add_cards(state_with_deck, 1)
    card = state.cards[0]

    state = reduce(state, UpsertCard(replace(card, front="edited")))

    assert len(state.cards) == 1
    assert state.cards[0].front == "edited"


def test_cards_require_an_existing_deck(state_with_deck: DeckState) -> None:
    orphan = prepare_card("missing", now=NOW, settings=ReviewSettings())

    with pytest.raises(UnknownDeckError):
        reduce(state_with_deck, UpsertCard(orphan))


def test_delete_deck_removes_its_cards_and_moves_active_deck(state_with_deck: DeckState) -> None:
    state = add_cards(state_with_deck, 3)
    state = reduce(state, AddDeck(new_deck("Spare", id_factory=lambda: "deck-2")))
    state = reduce(state, SetActiveDeck("deck-1"))

    state = reduce(state, DeleteDeck("deck-1"))

    assert [deck.id for deck in state.decks] == ["deck-2"]
    assert state.cards == ()
    assert state.active_deck_id == "deck-2"


def test_delete_unknown_card_raises(state_with_deck: DeckState) -> None:
    with pytest.raises(UnknownCardError):
        reduce(state_with_deck, DeleteCard("nope"))


def test_delete_card(state_with_deck: DeckState) -> None:
    state = add_cards(state_with_deck, 2)

    state = reduce(state, DeleteCard("card-1"))

    assert [card.id for card in state.cards] == ["card-2"]


def test_update_settings_normalizes_changes(state_with_deck: DeckState) -> None:
    state = reduce(
        state_with_deck,
        UpdateSettings({"new_cards_per_day": 1000, "learning_steps": []}),
    )

    assert state.settings.new_cards_per_day == 100
    assert state.settings.learning_steps == (10, 1440)
    assert state.settings.max_interval == 90


def test_grade_card_merges_schedule_and_logs_review(state_with_deck: DeckState) -> None:
    state = reduce(state_with_deck, UpdateSettings({"learning_steps": [10]}))
    state = add_cards(state, 1)

    state = grade_card(state, "card-1", Rating.GOOD, NOW, id_factory=lambda: "log-1")
    card = state.find_card("card-1")

    assert card.is_new is False
    assert card.interval == 1
    assert card.due == NOW + timedelta(days=1)
    assert card.updated_at == NOW
    assert [entry.id for entry in card.review_history] == ["log-1"]
    assert card.review_history[0].quality == 4
    assert state.reviews == card.review_history
    assert card.front == "front 0"


def test_history_grows_by_one_per_grading(state_with_deck: DeckState) -> None:
    state = add_cards(state_with_deck, 1)
    make_id = counter_ids("log")
    now = NOW

    for quality in (Rating.AGAIN, Rating.GOOD, Rating.GOOD, Rating.EASY):
        state = grade_card(state, "card-1", quality, now, id_factory=make_id)
        now = state.find_card("card-1").due

    card = state.find_card("card-1")
    assert len(card.review_history) == 4
    assert [entry.timestamp for entry in card.review_history] == sorted(
        entry.timestamp for entry in card.review_history
    )


def test_global_review_log_is_capped(state_with_deck: DeckState) -> None:
    state = add_cards(state_with_deck, 1)
    make_id = counter_ids("log")

    for _ in range(MAX_REVIEW_LOG_ENTRIES + 5):
        state = grade_card(state, "card-1", Rating.AGAIN, NOW, id_factory=make_id)

    assert len(state.reviews) == MAX_REVIEW_LOG_ENTRIES
    assert state.reviews[-1].id == f"log-{MAX_REVIEW_LOG_ENTRIES + 5}"


def test_graded_card_leaves_the_session_queue(state_with_deck: DeckState) -> None:
    state = reduce(state_with_deck, UpdateSettings({"new_cards_per_day": 2}))
    state = add_cards(state, 3)

    first_queue = review_queue(state, "deck-1", NOW)
    assert [card.id for card in first_queue] == ["card-1", "card-2"]

    state = grade_card(state, "card-1", Rating.GOOD, NOW, id_factory=lambda: "log-1")
    second_queue = review_queue(state, "deck-1", NOW)

    assert [card.id for card in second_queue] == ["card-2", "card-3"]


def test_replay_folds_commands() -> None:
    deck = new_deck("Nouns", id_factory=lambda: "deck-9")

    state = replay([AddDeck(deck), SetActiveDeck(None), UpdateDeck("deck-9", description="d")])

    assert state.version == 3
    assert state.active_deck_id is None
    assert state.decks[0].description == "d"


def test_unknown_command_type_is_rejected() -> None:
    with pytest.raises(TypeError):
        reduce(DeckState(), object())
