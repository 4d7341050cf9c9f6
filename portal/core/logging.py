"""
Logging setup for the portal backend.

Call ``configure_logging()`` once at startup; modules then use
``get_logger(__name__)``-style names under the ``portal`` hierarchy.
"""

from __future__ import annotations

import logging
from typing import Optional

DEFAULT_LOGGER_NAME = "portal"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configured = False


def _parse_level(value: str | None) -> Optional[int]:
    """Map 'DEBUG'/'info' to a logging constant, None when unrecognized."""
    if not value:
        return None
    level = getattr(logging, value.strip().upper(), None)
    return level if isinstance(level, int) else None


def configure_logging(level: str | None = None, *, force: bool = False) -> logging.Logger:
    """Attach a stderr handler to the service logger and return it."""
    global _configured
    logger = logging.getLogger(DEFAULT_LOGGER_NAME)
    if _configured and not force:
        return logger
    if force:
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(_parse_level(level) or logging.INFO)
    _configured = True
    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``portal`` or a child such as ``portal.news``."""
    if not name:
        return logging.getLogger(DEFAULT_LOGGER_NAME)
    if name == DEFAULT_LOGGER_NAME or name.startswith(DEFAULT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{DEFAULT_LOGGER_NAME}.{name}")
