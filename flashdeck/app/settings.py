"""Configuration helpers for the Flashdeck runtime."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from flashdeck.srs import ReviewSettings, normalize_settings


_REVIEW_ENV_VARS = {
    "new_cards_per_day": "REVIEW_NEW_CARDS_PER_DAY",
    "max_interval": "REVIEW_MAX_INTERVAL",
    "default_ease_factor": "REVIEW_DEFAULT_EASE_FACTOR",
    "learning_steps": "REVIEW_LEARNING_STEPS",
}


@dataclass(frozen=True)
class AppSettings:
    """Strongly typed application settings loaded from environment variables."""

    app_name: str
    app_env: str
    log_level: str
    database_url: Optional[str]
    review: ReviewSettings

    @classmethod
    def from_env(cls) -> AppSettings:
        """Construct settings directly from environment variables."""
        app_name = os.getenv("APP_NAME", "Flashdeck")
        app_env = os.getenv("APP_ENV", "development")
        log_level = os.getenv("LOG_LEVEL", "INFO").upper()
        database_url = os.getenv("DATABASE_URL") or None

        if log_level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise RuntimeError(f"LOG_LEVEL must be a standard logging level, got {log_level!r}.")

        # Out-of-range review values are clamped rather than rejected.
        raw_review = {
            key: os.environ[env_name]
            for key, env_name in _REVIEW_ENV_VARS.items()
            if os.getenv(env_name)
        }
        review = normalize_settings(raw_review)

        return cls(
            app_name=app_name,
            app_env=app_env,
            log_level=log_level,
            database_url=database_url,
            review=review,
        )
