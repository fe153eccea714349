"""Tests for logging setup."""

import logging

import pytest
from rich.logging import RichHandler

from doot.log import setup_logging


@pytest.fixture(autouse=True)
def _restore_logger():
    logger = logging.getLogger("doot")
    handlers, level = list(logger.handlers), logger.level
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)


class TestSetupLogging:
    @pytest.mark.parametrize(
        "verbose,debug,level",
        [
            (False, False, logging.WARNING),
            (True, False, logging.INFO),
            (False, True, logging.DEBUG),
            (True, True, logging.DEBUG),
        ],
    )
    def test_levels(self, verbose, debug, level):
        assert setup_logging(verbose=verbose, debug=debug).level == level

    def test_single_rich_handler(self):
        setup_logging()
        logger = setup_logging(verbose=True)
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], RichHandler)
