"""In-memory deck state and the commands that change it."""

from .store import (
    AddDeck,
    BulkAddCards,
    Command,
    DeleteCard,
    DeleteDeck,
    Deck,
    DeckState,
    DuplicateIdError,
    IdFactory,
    LogReview,
    SetActiveDeck,
    UnknownCardError,
    UnknownDeckError,
    UpdateDeck,
    UpdateSettings,
    UpsertCard,
    deck_cards,
    default_id_factory,
    grade_card,
    new_deck,
    prepare_card,
    reduce,
    replay,
    review_queue,
)

__all__ = [
    "AddDeck",
    "BulkAddCards",
    "Command",
    "DeleteCard",
    "DeleteDeck",
    "Deck",
    "DeckState",
    "DuplicateIdError",
    "IdFactory",
    "LogReview",
    "SetActiveDeck",
    "UnknownCardError",
    "UnknownDeckError",
    "UpdateDeck",
    "UpdateSettings",
    "UpsertCard",
    "deck_cards",
    "default_id_factory",
    "grade_card",
    "new_deck",
    "prepare_card",
    "reduce",
    "replay",
    "review_queue",
]
