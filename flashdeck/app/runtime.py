"""Bootstrap logic shared by applications embedding the review engine."""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from flashdeck.app.settings import AppSettings
from flashdeck.db import get_session_factory, run_migrations_if_needed


LOGGER = logging.getLogger(__name__)


def configure_logging(log_level: str) -> None:
    """Set up project-wide logging configuration."""
    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        level=log_level,
    )


def bootstrap(settings: AppSettings) -> Optional[async_sessionmaker[AsyncSession]]:
    """Configure logging and, when a database is configured, prepare the card store."""
    configure_logging(settings.log_level)
    LOGGER.info(
        "%s starting in %s mode with %d new cards per day.",
        settings.app_name,
        settings.app_env,
        settings.review.new_cards_per_day,
    )

    if settings.database_url is None:
        LOGGER.info("DATABASE_URL is not set; running without a persistent card store.")
        return None

    try:
        run_migrations_if_needed()
    except Exception:
        LOGGER.exception("Database migrations failed. Aborting startup.")
        raise

    return get_session_factory()
