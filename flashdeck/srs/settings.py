"""Normalization of user-supplied review settings."""

from __future__ import annotations

import logging
import math
from typing import Any, Iterable, Mapping, Optional, Tuple

from .models import (
    DEFAULT_LEARNING_STEPS,
    MAX_DEFAULT_EASE_FACTOR,
    MIN_EASE_FACTOR,
    ReviewSettings,
)


LOGGER = logging.getLogger(__name__)

NEW_CARDS_PER_DAY_RANGE = (1, 100)
MAX_INTERVAL_RANGE = (1, 365)


def _to_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(number):
        return None
    return number


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _clamp_int(name: str, raw: Any, fallback: int, bounds: Tuple[int, int]) -> int:
    number = _to_number(raw)
    if number is None:
        if raw is not None:
            LOGGER.warning("Ignoring invalid %s %r; keeping %d.", name, raw, fallback)
        return fallback
    clamped = int(_clamp(int(number), *bounds))
    if clamped != number:
        LOGGER.warning("Clamped %s from %r to %d.", name, raw, clamped)
    return clamped


def _parse_steps(raw: Any) -> Iterable[Any]:
    if raw is None:
        return ()
    if isinstance(raw, str):
        return raw.split(",")
    try:
        return list(raw)
    except TypeError:
        return (raw,)


def _normalize_steps(raw: Any, fallback: Tuple[int, ...]) -> Tuple[int, ...]:
    steps = []
    for item in _parse_steps(raw):
        if isinstance(item, str):
            item = item.strip()
        number = _to_number(item)
        if number is None or number <= 0 or int(number) <= 0:
            continue
        steps.append(int(number))
    if not steps:
        if raw is not None:
            LOGGER.warning("No usable learning steps in %r; keeping %s.", raw, list(fallback))
        return fallback
    return tuple(steps)


def normalize_settings(
    raw: Mapping[str, Any],
    previous: Optional[ReviewSettings] = None,
) -> ReviewSettings:
    """Clamp raw review settings into a usable configuration.

    Values that are missing or cannot be interpreted keep the ``previous``
    setting (or the default when there is none). This never raises.
    """
    base = previous or ReviewSettings()

    new_cards_per_day = _clamp_int(
        "new_cards_per_day",
        raw.get("new_cards_per_day"),
        base.new_cards_per_day,
        NEW_CARDS_PER_DAY_RANGE,
    )
    max_interval = _clamp_int(
        "max_interval",
        raw.get("max_interval"),
        base.max_interval,
        MAX_INTERVAL_RANGE,
    )

    ease = _to_number(raw.get("default_ease_factor"))
    if ease is None:
        default_ease_factor = base.default_ease_factor
    else:
        default_ease_factor = _clamp(round(ease, 2), MIN_EASE_FACTOR, MAX_DEFAULT_EASE_FACTOR)
        if default_ease_factor != ease:
            LOGGER.warning(
                "Adjusted default_ease_factor from %r to %.2f.",
                raw.get("default_ease_factor"),
                default_ease_factor,
            )

    learning_steps = _normalize_steps(
        raw.get("learning_steps"), base.learning_steps or DEFAULT_LEARNING_STEPS
    )

    return ReviewSettings(
        new_cards_per_day=new_cards_per_day,
        max_interval=max_interval,
        default_ease_factor=default_ease_factor,
        learning_steps=learning_steps,
    )
