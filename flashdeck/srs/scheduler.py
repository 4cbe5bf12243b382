"""Spaced-repetition scheduling for flashcard reviews (SM-2 with learning steps)."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Optional

from .models import (
    MIN_EASE_FACTOR,
    PASSING_QUALITY,
    Card,
    InvalidReviewInput,
    Phase,
    ReviewSettings,
    card_state,
)


LOGGER = logging.getLogger(__name__)

LAPSE_EASE_PENALTY = 0.2
GRADUATING_INTERVAL_DAYS = 1


@dataclass(frozen=True, slots=True)
class ScheduleUpdate:
    """Scheduling fields produced by grading a card."""

    interval: int
    repetition: int
    ease_factor: float
    due: datetime
    is_new: bool
    learning_step: Optional[int]


def apply_update(card: Card, update: ScheduleUpdate) -> Card:
    """Return ``card`` with its scheduling fields replaced by ``update``."""
    return replace(
        card,
        interval=update.interval,
        repetition=update.repetition,
        ease_factor=update.ease_factor,
        due=update.due,
        is_new=update.is_new,
        learning_step=update.learning_step,
    )


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def adjust_ease(ease_factor: float, quality: int) -> float:
    """Apply the SM-2 ease update for a passing grade."""
    miss = 5 - quality
    return max(MIN_EASE_FACTOR, ease_factor + (0.1 - miss * (0.08 + miss * 0.02)))


def _validate(quality: int, settings: ReviewSettings, now: datetime) -> None:
    if isinstance(quality, bool) or not isinstance(quality, int):
        raise InvalidReviewInput(f"Quality must be an integer between 0 and 5, got {quality!r}.")
    if quality < 0 or quality > 5:
        raise InvalidReviewInput(f"Quality must be between 0 and 5, got {quality}.")
    if not isinstance(now, datetime):
        raise InvalidReviewInput(f"Review time must be a datetime, got {now!r}.")
    if not settings.learning_steps:
        raise InvalidReviewInput("Learning steps must not be empty when scheduling a review.")


def schedule(
    card: Card,
    quality: int,
    settings: ReviewSettings,
    now: datetime,
) -> ScheduleUpdate:
    """Return the card's next scheduling fields after a review graded ``quality``.

    Lapses (quality below 3) send the card back to the first learning step and
    cut its ease by 0.2. Passing grades walk the card through the remaining
    learning steps, graduate it to a one day interval, and from then on grow
    the interval by the ease factor, capped at ``settings.max_interval``.
    """
    _validate(quality, settings, now)

    state = card_state(card)
    steps = settings.learning_steps
    ease_factor = max(MIN_EASE_FACTOR, card.ease_factor)

    if quality < PASSING_QUALITY:
        update = ScheduleUpdate(
            interval=card.interval,
            repetition=0,
            ease_factor=max(MIN_EASE_FACTOR, ease_factor - LAPSE_EASE_PENALTY),
            due=now + timedelta(minutes=steps[0]),
            is_new=card.is_new,
            learning_step=0,
        )
        LOGGER.debug("Card %s lapsed from %s to learning step 0.", card.id, state.phase.value)
        return update

    repetition = card.repetition + 1
    next_ease = adjust_ease(ease_factor, quality)

    if state.phase is Phase.REVIEW:
        interval = round_half_up(card.interval * ease_factor)
        interval = min(settings.max_interval, max(1, interval))
        LOGGER.debug("Card %s scheduled %d days out.", card.id, interval)
        return ScheduleUpdate(
            interval=interval,
            repetition=repetition,
            ease_factor=next_ease,
            due=now + timedelta(days=interval),
            is_new=False,
            learning_step=None,
        )

    next_step = (state.step or 0) + 1
    if next_step < len(steps):
        LOGGER.debug("Card %s advanced to learning step %d.", card.id, next_step)
        return ScheduleUpdate(
            interval=card.interval,
            repetition=repetition,
            ease_factor=next_ease,
            due=now + timedelta(minutes=steps[next_step]),
            is_new=False,
            learning_step=next_step,
        )

    LOGGER.debug("Card %s graduated to review.", card.id)
    return ScheduleUpdate(
        interval=GRADUATING_INTERVAL_DAYS,
        repetition=repetition,
        ease_factor=next_ease,
        due=now + timedelta(days=GRADUATING_INTERVAL_DAYS),
        is_new=False,
        learning_step=None,
    )
