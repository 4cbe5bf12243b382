"""Due-date predicate for flashcard reviews."""

from __future__ import annotations

from datetime import datetime

from .models import Card, as_utc


def is_due(card: Card, now: datetime) -> bool:
    """Return True when the card may be reviewed at ``now``."""
    return as_utc(card.due) <= as_utc(now)
