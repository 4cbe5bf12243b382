"""Versioned deck state mutated only through explicit commands."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from flashdeck.srs import (
    Card,
    ReviewLogEntry,
    ReviewSettings,
    ScheduleUpdate,
    apply_update,
    build_queue,
    normalize_settings,
    schedule,
)


LOGGER = logging.getLogger(__name__)

MAX_REVIEW_LOG_ENTRIES = 1000

IdFactory = Callable[[], str]


def default_id_factory() -> str:
    return uuid.uuid4().hex


class UnknownDeckError(KeyError):
    """Raised when a command references a deck that does not exist."""


class UnknownCardError(KeyError):
    """Raised when a command references a card that does not exist."""


class DuplicateIdError(ValueError):
    """Raised when a command would add a deck or card whose id is already taken."""


@dataclass(frozen=True, slots=True)
class Deck:
    id: str
    name: str
    description: Optional[str] = None


@dataclass(frozen=True, slots=True)
class DeckState:
    """Snapshot of every deck, card, setting and review the learner owns."""

    version: int = 0
    decks: Tuple[Deck, ...] = ()
    cards: Tuple[Card, ...] = ()
    settings: ReviewSettings = field(default_factory=ReviewSettings)
    reviews: Tuple[ReviewLogEntry, ...] = ()
    active_deck_id: Optional[str] = None

    def find_deck(self, deck_id: str) -> Deck:
        for deck in self.decks:
            if deck.id == deck_id:
                return deck
        raise UnknownDeckError(deck_id)

    def find_card(self, card_id: str) -> Card:
        for card in self.cards:
            if card.id == card_id:
                return card
        raise UnknownCardError(card_id)


@dataclass(frozen=True, slots=True)
class AddDeck:
    deck: Deck


@dataclass(frozen=True, slots=True)
class UpdateDeck:
    deck_id: str
    name: Optional[str] = None
    description: Optional[str] = None


@dataclass(frozen=True, slots=True)
class DeleteDeck:
    deck_id: str


@dataclass(frozen=True, slots=True)
class SetActiveDeck:
    deck_id: Optional[str] = None


@dataclass(frozen=True, slots=True)
class UpsertCard:
    card: Card


@dataclass(frozen=True, slots=True)
class DeleteCard:
    card_id: str


@dataclass(frozen=True, slots=True)
class BulkAddCards:
    cards: Tuple[Card, ...]


@dataclass(frozen=True, slots=True)
class UpdateSettings:
    changes: Mapping[str, Any]


@dataclass(frozen=True, slots=True)
class LogReview:
    """Merge a scheduling update into a card and record the grading event."""

    card_id: str
    update: ScheduleUpdate
    log: ReviewLogEntry


Command = Union[
    AddDeck,
    UpdateDeck,
    DeleteDeck,
    SetActiveDeck,
    UpsertCard,
    DeleteCard,
    BulkAddCards,
    UpdateSettings,
    LogReview,
]


def _add_deck(state: DeckState, command: AddDeck) -> DeckState:
    if any(deck.id == command.deck.id for deck in state.decks):
        raise DuplicateIdError(f"Deck {command.deck.id!r} already exists.")
    return replace(state, decks=(*state.decks, command.deck), active_deck_id=command.deck.id)


def _update_deck(state: DeckState, command: UpdateDeck) -> DeckState:
    current = state.find_deck(command.deck_id)
    updated = replace(
        current,
        name=command.name if command.name is not None else current.name,
        description=command.description if command.description is not None else current.description,
    )
    decks = tuple(updated if deck.id == current.id else deck for deck in state.decks)
    return replace(state, decks=decks)


def _delete_deck(state: DeckState, command: DeleteDeck) -> DeckState:
    state.find_deck(command.deck_id)
    decks = tuple(deck for deck in state.decks if deck.id != command.deck_id)
    cards = tuple(card for card in state.cards if card.deck_id != command.deck_id)
    active_deck_id = state.active_deck_id
    if active_deck_id == command.deck_id:
        active_deck_id = decks[0].id if decks else None
    return replace(state, decks=decks, cards=cards, active_deck_id=active_deck_id)


def _set_active_deck(state: DeckState, command: SetActiveDeck) -> DeckState:
    if command.deck_id is not None:
        state.find_deck(command.deck_id)
    return replace(state, active_deck_id=command.deck_id)


def _upsert_card(state: DeckState, command: UpsertCard) -> DeckState:
    card = command.card
    state.find_deck(card.deck_id)
    if any(existing.id == card.id for existing in state.cards):
        cards = tuple(card if existing.id == card.id else existing for existing in state.cards)
    else:
        cards = (*state.cards, card)
    return replace(state, cards=cards)


def _delete_card(state: DeckState, command: DeleteCard) -> DeckState:
    state.find_card(command.card_id)
    return replace(state, cards=tuple(card for card in state.cards if card.id != command.card_id))


def _bulk_add_cards(state: DeckState, command: BulkAddCards) -> DeckState:
    seen = {card.id for card in state.cards}
    for card in command.cards:
        state.find_deck(card.deck_id)
        if card.id in seen:
            raise DuplicateIdError(f"Card {card.id!r} already exists.")
        seen.add(card.id)
    return replace(state, cards=(*state.cards, *command.cards))


def _update_settings(state: DeckState, command: UpdateSettings) -> DeckState:
    return replace(state, settings=normalize_settings(command.changes, previous=state.settings))


def _log_review(state: DeckState, command: LogReview) -> DeckState:
    current = state.find_card(command.card_id)
    merged = replace(
        apply_update(current, command.update),
        updated_at=command.log.timestamp,
        review_history=(*current.review_history, command.log),
    )
    cards = tuple(merged if card.id == current.id else card for card in state.cards)
    reviews = (*state.reviews, command.log)[-MAX_REVIEW_LOG_ENTRIES:]
    return replace(state, cards=cards, reviews=reviews)


_HANDLERS: Dict[type, Callable[[DeckState, Any], DeckState]] = {
    AddDeck: _add_deck,
    UpdateDeck: _update_deck,
    DeleteDeck: _delete_deck,
    SetActiveDeck: _set_active_deck,
    UpsertCard: _upsert_card,
    DeleteCard: _delete_card,
    BulkAddCards: _bulk_add_cards,
    UpdateSettings: _update_settings,
    LogReview: _log_review,
}


def reduce(state: DeckState, command: Command) -> DeckState:
    """Apply ``command`` to ``state`` and return the next, versioned state."""
    handler = _HANDLERS.get(type(command))
    if handler is None:
        raise TypeError(f"Unsupported deck command: {command!r}")
    next_state = handler(state, command)
    LOGGER.debug("Applied %s (version %d).", type(command).__name__, state.version + 1)
    return replace(next_state, version=state.version + 1)


def new_deck(
    name: str,
    description: Optional[str] = None,
    id_factory: IdFactory = default_id_factory,
) -> Deck:
    return Deck(id=id_factory(), name=name.strip(), description=description)


def prepare_card(
    deck_id: str,
    *,
    now: datetime,
    settings: ReviewSettings,
    id_factory: IdFactory = default_id_factory,
    card_id: Optional[str] = None,
    front: str = "",
    back: str = "",
    image: Optional[str] = None,
    audio: Optional[str] = None,
    created_at: Optional[datetime] = None,
) -> Card:
    """Build a brand-new card seeded for immediate review."""
    created = created_at or now
    return Card(
        id=card_id or id_factory(),
        deck_id=deck_id,
        front=front,
        back=back,
        image=image,
        audio=audio,
        created_at=created,
        updated_at=now,
        due=created,
        interval=1,
        repetition=0,
        ease_factor=settings.default_ease_factor,
        is_new=True,
    )


def deck_cards(state: DeckState, deck_id: str) -> List[Card]:
    return [card for card in state.cards if card.deck_id == deck_id]


def review_queue(state: DeckState, deck_id: str, now: datetime) -> List[Card]:
    """Build the session queue for one deck using the current settings."""
    return build_queue(deck_cards(state, deck_id), now, state.settings.new_cards_per_day)


def grade_card(
    state: DeckState,
    card_id: str,
    quality: int,
    now: datetime,
    id_factory: IdFactory = default_id_factory,
) -> DeckState:
    """Schedule a graded card and log the review in one transition."""
    card = state.find_card(card_id)
    update = schedule(card, quality, state.settings, now)
    log = ReviewLogEntry(
        id=id_factory(),
        card_id=card_id,
        timestamp=now,
        quality=quality,
        interval=update.interval,
        ease_factor=update.ease_factor,
    )
    return reduce(state, LogReview(card_id=card_id, update=update, log=log))


def replay(commands: Sequence[Command], state: Optional[DeckState] = None) -> DeckState:
    """Fold a sequence of commands over ``state`` (or an empty state)."""
    current = state or DeckState()
    for command in commands:
        current = reduce(current, command)
    return current
