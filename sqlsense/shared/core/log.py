"""Logging setup for the sqlsense command line.

Library modules only create loggers with `logging.getLogger(__name__)`;
handlers are attached here, once, by the entry point.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "sqlsense"
LOG_FORMAT = "[%(name)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_configured = False


def configure_logging(verbose: bool = False) -> logging.Logger:
    """Attach a stderr handler to the sqlsense logger.

    Safe to call more than once; the handler is only added the first time,
    later calls just adjust the level.

    Args:
        verbose: Log at DEBUG instead of WARNING.

    Returns:
        The package root logger.
    """
    global _configured
    root = logging.getLogger(LOGGER_NAME)
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)

    if not _configured:
        handler = RichHandler(
            console=Console(stderr=True),
            show_path=False,
            rich_tracebacks=False,
            log_time_format=f"[{LOG_DATE_FORMAT}]",
        )
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
        _configured = True
    return root
