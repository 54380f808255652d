"""Logging setup for SkipCheck."""

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "skipcheck"


class SkipCheckHandler(RichHandler):
    """Rich handler installed by configure_logging."""


def configure_logging(level: str = "WARNING", console: Console | None = None) -> logging.Logger:
    """
    Attach a rich handler to the package logger.

    Calling again replaces the handler installed by a previous call, so the
    level and console can be changed between runs.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        if isinstance(handler, SkipCheckHandler):
            logger.removeHandler(handler)

    logger.addHandler(
        SkipCheckHandler(
            console=console or Console(stderr=True),
            show_time=False,
            show_path=False,
            markup=False,
        )
    )
    return logger
