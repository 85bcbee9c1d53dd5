"""Logging setup for the service and CLI."""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str | int | None = "INFO") -> logging.Logger:
    """Attach one stdout handler to the ``price_getter`` logger.

    Unknown level names fall back to INFO. Calling it again only updates
    the level.
    """
    logger = logging.getLogger("price_getter")
    if isinstance(level, str):
        level = logging.getLevelName(level.strip().upper())
    logger.setLevel(level if isinstance(level, int) else logging.INFO)
    if getattr(logger, "_price_getter_configured", False):
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
    logger._price_getter_configured = True  # type: ignore[attr-defined]
    return logger
