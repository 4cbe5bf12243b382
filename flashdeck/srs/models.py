"""Plain data records exchanged between the scheduling engine and its callers."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Tuple


MIN_EASE_FACTOR = 1.3
MAX_DEFAULT_EASE_FACTOR = 3.0
DEFAULT_EASE_FACTOR = 2.5
DEFAULT_NEW_CARDS_PER_DAY = 20
DEFAULT_MAX_INTERVAL_DAYS = 90
DEFAULT_LEARNING_STEPS: Tuple[int, ...] = (10, 1440)
PASSING_QUALITY = 3


class InvalidReviewInput(ValueError):
    """Raised when a caller hands the engine input it must not coerce."""


class Rating(enum.IntEnum):
    """Grade buckets offered by the review UI."""

    AGAIN = 1
    HARD = 3
    GOOD = 4
    EASY = 5


class Phase(str, enum.Enum):
    """Lifecycle stage of a card."""

    NEW = "new"
    LEARNING = "learning"
    REVIEW = "review"


@dataclass(frozen=True, slots=True)
class CardState:
    """Explicit scheduling state reconstructed from a card's fields."""

    phase: Phase
    step: Optional[int] = None


@dataclass(frozen=True, slots=True)
class ReviewLogEntry:
    """A single grading event recorded against a card."""

    id: str
    card_id: str
    timestamp: datetime
    quality: int
    interval: int
    ease_factor: float


@dataclass(frozen=True, slots=True)
class ReviewSettings:
    """User-tunable scheduling parameters, already normalized."""

    new_cards_per_day: int = DEFAULT_NEW_CARDS_PER_DAY
    max_interval: int = DEFAULT_MAX_INTERVAL_DAYS
    default_ease_factor: float = DEFAULT_EASE_FACTOR
    learning_steps: Tuple[int, ...] = DEFAULT_LEARNING_STEPS


@dataclass(frozen=True, slots=True)
class Card:
    """A flashcard as seen by the engine.

    Content fields (``front``, ``back``, ``image``, ``audio``) are owned by the
    editing layer and are carried through untouched.
    """

    id: str
    deck_id: str
    created_at: datetime
    due: datetime
    front: str = ""
    back: str = ""
    image: Optional[str] = None
    audio: Optional[str] = None
    updated_at: Optional[datetime] = None
    interval: int = 1
    repetition: int = 0
    ease_factor: float = DEFAULT_EASE_FACTOR
    is_new: bool = True
    learning_step: Optional[int] = None
    review_history: Tuple[ReviewLogEntry, ...] = field(default_factory=tuple)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so they compare with aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def card_state(card: Card) -> CardState:
    """Classify a card as new, learning (with its step) or in review."""
    if card.learning_step is not None:
        return CardState(Phase.LEARNING, card.learning_step)
    if card.is_new and not card.review_history:
        return CardState(Phase.NEW)
    if card.is_new:
        # Graded before but never passed: still on the first step.
        return CardState(Phase.LEARNING, 0)
    return CardState(Phase.REVIEW)
