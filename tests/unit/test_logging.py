"""
Tests for the logging utilities.
"""

import logging

from hits_search.utils.logging import configure_logging, get_logger, null_logger


def test_get_logger():
    logger = get_logger("hits_search.test")
    assert isinstance(logger, logging.Logger)
    assert logger.name == "hits_search.test"


def test_null_logger_discards_records():
    """Test that the null logger neither propagates nor duplicates handlers."""
    logger = null_logger("hits_search.test.null")
    null_logger("hits_search.test.null")

    assert logger.propagate is False
    assert len([h for h in logger.handlers if isinstance(h, logging.NullHandler)]) == 1


def test_configure_logging_level():
    """Test that the level override reaches the root logger."""
    configure_logging(log_level="WARNING")
    assert logging.getLogger().level == logging.WARNING

    configure_logging(log_level="DEBUG")
    assert logging.getLogger().level == logging.DEBUG


def test_configure_logging_file(tmp_path):
    """Test that a log file is only written when requested."""
    log_file = tmp_path / "logs" / "hits-search.log"
    configure_logging(log_level="INFO", log_file=str(log_file))

    get_logger("hits_search.test").info("written to file")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert "written to file" in log_file.read_text()

    configure_logging(log_level="INFO")
    assert not any(
        isinstance(handler, logging.FileHandler) for handler in logging.getLogger().handlers
    )
