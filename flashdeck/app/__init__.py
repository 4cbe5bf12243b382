"""Application bootstrap helpers for the Flashdeck project."""

from .runtime import bootstrap, configure_logging
from .settings import AppSettings

__all__ = ["bootstrap", "configure_logging", "AppSettings"]
