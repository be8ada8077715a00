"""Tests for SimpleLogger."""

import logging

import pytest

from recurring_payments.infrastructure.simple_logger import SimpleLogger, format_context
from recurring_payments.ports.logger import LoggerPort


class TestFormatContext:
    """Test cases for rendering log context."""

    def test_appends_pairs(self):
        """Test that context is rendered as key=value pairs."""
        assert format_context("Paid", {"subscription": "m/01", "amount": 5}) == (
            "Paid [subscription=m/01 amount=5]"
        )

    def test_skips_none_and_empty(self):
        """Test that missing values are not rendered."""
        assert format_context("Paid", {"contract_id": None}) == "Paid"
        assert format_context("Paid", {}) == "Paid"


class TestSimpleLogger:
    """Test cases for SimpleLogger implementation."""

    @pytest.fixture
    def logger(self):
        """Create a logger at debug level."""
        return SimpleLogger("tests.simple_logger", level=logging.DEBUG)

    def test_implements_logger_port(self, logger):
        """Test that SimpleLogger implements LoggerPort."""
        assert isinstance(logger, LoggerPort)

    @pytest.mark.parametrize(
        "method, level",
        [
            ("debug", logging.DEBUG),
            ("info", logging.INFO),
            ("warning", logging.WARNING),
            ("error", logging.ERROR),
        ],
    )
    def test_levels(self, logger, caplog, method, level):
        """Test that each method logs at its level."""
        with caplog.at_level(logging.DEBUG, logger="tests.simple_logger"):
            getattr(logger, method)("message", cycle_id="c-1")

        record = caplog.records[-1]
        assert record.levelno == level
        assert record.getMessage() == "message [cycle_id=c-1]"
        assert record.cycle_id == "c-1"

    def test_exception_attaches_traceback(self, logger, caplog):
        """Test that exceptions are logged with their traceback."""
        error = RuntimeError("boom")

        with caplog.at_level(logging.ERROR, logger="tests.simple_logger"):
            logger.exception("failed", exc_info=error, subscription="m/01")

        record = caplog.records[-1]
        assert record.levelno == logging.ERROR
        assert record.exc_info[1] is error
        assert record.subscription == "m/01"

    def test_exception_uses_handled_error(self, logger, caplog):
        """Test that the exception being handled is logged when none is given."""
        with caplog.at_level(logging.ERROR, logger="tests.simple_logger"):
            try:
                raise RuntimeError("boom")
            except RuntimeError as error:
                raised = error
                logger.exception("failed", operation="persist")

        record = caplog.records[-1]
        assert record.exc_info[1] is raised
        assert record.operation == "persist"

    def test_level_filtering(self, caplog):
        """Test that messages below the level are dropped."""
        logger = SimpleLogger("tests.simple_logger.info", level=logging.INFO)

        with caplog.at_level(logging.INFO, logger="tests.simple_logger.info"):
            logger.debug("hidden")

        assert caplog.records == []
