"""Helpers for persisting decks, cards and review history."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from flashdeck.deck import IdFactory, UnknownCardError, UnknownDeckError, default_id_factory
from flashdeck.srs import (
    Card,
    ReviewLogEntry,
    ReviewSettings,
    ScheduleUpdate,
    build_queue,
    normalize_settings,
    schedule,
)
from flashdeck.srs.models import as_utc

from . import CardRecord, DeckRecord, ReviewLogRecord, ReviewSettingsRecord


LOGGER = logging.getLogger(__name__)

SETTINGS_ROW_ID = 1


@dataclass(slots=True)
class CardPayload:
    """Content for a card that is about to be stored."""

    front: str
    back: str
    image: Optional[str] = None
    audio: Optional[str] = None

    def normalized(self) -> "CardPayload":
        """Return a payload with leading/trailing whitespace stripped."""
        return CardPayload(
            front=self.front.strip(),
            back=self.back.strip(),
            image=self.image.strip() if isinstance(self.image, str) else self.image,
            audio=self.audio.strip() if isinstance(self.audio, str) else self.audio,
        )


def to_engine_card(record: CardRecord) -> Card:
    """Convert a stored card (with its reviews loaded) into an engine record."""
    return Card(
        id=record.id,
        deck_id=record.deck_id,
        front=record.front,
        back=record.back,
        image=record.image,
        audio=record.audio,
        created_at=as_utc(record.created_at),
        updated_at=as_utc(record.updated_at) if record.updated_at else None,
        due=as_utc(record.due),
        interval=record.interval,
        repetition=record.repetition,
        ease_factor=record.ease_factor,
        is_new=record.is_new,
        learning_step=record.learning_step,
        review_history=tuple(
            ReviewLogEntry(
                id=review.id,
                card_id=review.card_id,
                timestamp=as_utc(review.reviewed_at),
                quality=review.quality,
                interval=review.interval,
                ease_factor=review.ease_factor,
            )
            for review in record.reviews
        ),
    )


async def create_deck(
    session: AsyncSession,
    name: str,
    description: Optional[str] = None,
    id_factory: IdFactory = default_id_factory,
) -> DeckRecord:
    deck = DeckRecord(id=id_factory(), name=name.strip(), description=description)
    session.add(deck)
    await session.flush()
    return deck


async def add_card(
    session: AsyncSession,
    deck_id: str,
    payload: CardPayload,
    settings: ReviewSettings,
    now: Optional[datetime] = None,
    id_factory: IdFactory = default_id_factory,
) -> CardRecord:
    """Store a new card, immediately due and seeded with the default ease."""
    if now is None:
        now = datetime.now(timezone.utc)

    if await session.get(DeckRecord, deck_id) is None:
        raise UnknownDeckError(deck_id)

    normalized = payload.normalized()
    card = CardRecord(
        id=id_factory(),
        deck_id=deck_id,
        front=normalized.front,
        back=normalized.back,
        image=normalized.image,
        audio=normalized.audio,
        interval=1,
        repetition=0,
        ease_factor=settings.default_ease_factor,
        is_new=True,
        learning_step=None,
        due=now,
        created_at=now,
        updated_at=now,
    )
    session.add(card)
    await session.flush()
    return card


async def get_deck_cards(session: AsyncSession, deck_id: str) -> List[Card]:
    """Return every card in a deck as engine records, oldest first."""
    stmt = (
        select(CardRecord)
        .options(selectinload(CardRecord.reviews))
        .where(CardRecord.deck_id == deck_id)
        .order_by(CardRecord.created_at, CardRecord.id)
    )
    result = await session.execute(stmt)
    return [to_engine_card(record) for record in result.scalars().all()]


async def get_review_queue(
    session: AsyncSession,
    deck_id: str,
    settings: ReviewSettings,
    now: Optional[datetime] = None,
) -> List[Card]:
    """Return the ordered review session for a deck."""
    if now is None:
        now = datetime.now(timezone.utc)
    cards = await get_deck_cards(session, deck_id)
    return build_queue(cards, now, settings.new_cards_per_day)


async def load_review_settings(session: AsyncSession) -> ReviewSettings:
    """Load stored review settings, falling back to the defaults."""
    row = await session.get(ReviewSettingsRecord, SETTINGS_ROW_ID)
    if row is None:
        return ReviewSettings()
    return normalize_settings(
        {
            "new_cards_per_day": row.new_cards_per_day,
            "max_interval": row.max_interval,
            "default_ease_factor": row.default_ease_factor,
            "learning_steps": row.learning_steps,
        }
    )


async def save_review_settings(session: AsyncSession, settings: ReviewSettings) -> None:
    steps = ",".join(str(step) for step in settings.learning_steps)
    row = await session.get(ReviewSettingsRecord, SETTINGS_ROW_ID)
    if row is None:
        row = ReviewSettingsRecord(id=SETTINGS_ROW_ID)
        session.add(row)
    row.new_cards_per_day = settings.new_cards_per_day
    row.max_interval = settings.max_interval
    row.default_ease_factor = settings.default_ease_factor
    row.learning_steps = steps
    await session.flush()


async def record_review(
    session: AsyncSession,
    card_id: str,
    quality: int,
    settings: ReviewSettings,
    now: Optional[datetime] = None,
    id_factory: IdFactory = default_id_factory,
) -> ScheduleUpdate:
    """Grade a stored card, persist its new schedule and append a review row."""
    if now is None:
        now = datetime.now(timezone.utc)

    stmt = (
        select(CardRecord)
        .options(selectinload(CardRecord.reviews))
        .where(CardRecord.id == card_id)
    )
    result = await session.execute(stmt)
    record = result.scalars().first()
    if record is None:
        raise UnknownCardError(card_id)

    update = schedule(to_engine_card(record), quality, settings, now)

    record.interval = update.interval
    record.repetition = update.repetition
    record.ease_factor = update.ease_factor
    record.due = update.due
    record.is_new = update.is_new
    record.learning_step = update.learning_step
    record.updated_at = now

    record.reviews.append(
        ReviewLogRecord(
            id=id_factory(),
            card_id=record.id,
            quality=quality,
            interval=update.interval,
            ease_factor=update.ease_factor,
            reviewed_at=now,
        )
    )
    await session.flush()
    LOGGER.info(
        "Recorded review of card %s with quality %d; next due %s.",
        card_id,
        quality,
        update.due.isoformat(),
    )
    return update
