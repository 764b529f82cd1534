"""Logging configuration for habitlog."""

import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(level: str = "WARNING") -> logging.Logger:
    """Configure the habitlog logger to write through rich to stderr.

    Existing handlers are removed first so repeated calls (tests, nested CLI
    invocations) don't duplicate output.
    """
    logger = logging.getLogger("habitlog")
    logger.setLevel(level.upper())
    logger.handlers.clear()

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    return logger
