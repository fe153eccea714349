"""Logging setup for the command line."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(*, verbose: bool = False, debug: bool = False) -> logging.Logger:
    """Route the ``doot`` logger through rich on stderr.

    WARNING by default, INFO with ``verbose`` and DEBUG with ``debug``.
    Calling it again replaces the previous handler.
    """
    level = logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING

    logger = logging.getLogger("doot")
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = RichHandler(
        console=Console(stderr=True),
        show_time=debug,
        show_path=debug,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    return logger
