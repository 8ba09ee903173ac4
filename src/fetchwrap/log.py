"""Logging setup for fetchwrap.

Library modules log through ``logging.getLogger(__name__)`` and never
configure handlers themselves. The CLI calls :func:`setup_logging` once so
that records from the ``fetchwrap`` logger tree render on stderr through
Rich.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "fetchwrap"
DEFAULT_LOG_LEVEL = os.getenv("FETCHWRAP_LOG_LEVEL", "WARNING").upper()


def setup_logging(verbose: bool = False, console: Optional[Console] = None) -> logging.Logger:
    """Attach a :class:`~rich.logging.RichHandler` to the package logger.

    Args:
        verbose: Force ``DEBUG`` level; otherwise ``FETCHWRAP_LOG_LEVEL``
            (default ``WARNING``) applies.
        console: Console to render into. Defaults to a new stderr console.

    Returns:
        The configured ``fetchwrap`` logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    level = logging.DEBUG if verbose else getattr(logging, DEFAULT_LOG_LEVEL, logging.WARNING)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=False,
        show_path=False,
        rich_tracebacks=False,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger


__all__ = ["setup_logging"]
