"""Spaced-repetition scheduling engine."""

from .due import is_due
from .models import (
    Card,
    CardState,
    InvalidReviewInput,
    Phase,
    Rating,
    ReviewLogEntry,
    ReviewSettings,
    card_state,
)
from .queue import build_queue
from .scheduler import ScheduleUpdate, apply_update, schedule
from .settings import normalize_settings

__all__ = [
    "Card",
    "CardState",
    "InvalidReviewInput",
    "Phase",
    "Rating",
    "ReviewLogEntry",
    "ReviewSettings",
    "ScheduleUpdate",
    "apply_update",
    "build_queue",
    "card_state",
    "is_due",
    "normalize_settings",
    "schedule",
]
