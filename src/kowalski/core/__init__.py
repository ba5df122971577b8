"""Core infrastructure: models, configuration, logging and errors."""

from kowalski.core.config import Settings, get_settings
from kowalski.core.exceptions import DataSetError, KowalskiError
from kowalski.core.logging import (
    configure_logging,
    get_logger,
    log_context,
    setup_logging,
)

__all__ = [
    "DataSetError",
    "KowalskiError",
    "Settings",
    "configure_logging",
    "get_logger",
    "get_settings",
    "log_context",
    "setup_logging",
]
