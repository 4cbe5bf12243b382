"""Review queue construction for a study session."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, List

from .due import is_due
from .models import Card, as_utc


LOGGER = logging.getLogger(__name__)


def _is_fresh(card: Card) -> bool:
    return card.is_new and not card.review_history


def build_queue(
    deck_cards: Iterable[Card],
    now: datetime,
    new_cards_per_day: int,
) -> List[Card]:
    """Order a deck's cards into a review session.

    Due cards that have been seen before (graduated or mid-learning) come first,
    earliest due date first. Unseen cards follow, oldest first, limited to
    ``new_cards_per_day``. A card appears at most once.
    """
    cards = list(deck_cards)

    seen_due = sorted(
        (card for card in cards if not _is_fresh(card) and is_due(card, now)),
        key=lambda card: as_utc(card.due),
    )
    fresh = sorted(
        (card for card in cards if _is_fresh(card)),
        key=lambda card: as_utc(card.created_at),
    )[: max(0, new_cards_per_day)]

    queue: List[Card] = []
    queued_ids = set()
    for card in [*seen_due, *fresh]:
        if card.id in queued_ids:
            continue
        queued_ids.add(card.id)
        queue.append(card)

    LOGGER.debug(
        "Built review queue with %d due and %d new cards out of %d.",
        len(seen_due),
        len(fresh),
        len(cards),
    )
    return queue
