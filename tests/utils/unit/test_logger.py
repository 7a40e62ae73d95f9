# tests/utils/unit/test_logger.py
"""
Unit tests for the logging utilities.
"""
import logging
import pytest

from conversation_engine.utils.logger import (
    Logger, LoggerFactory, LoggerInterface, LoggingLevel, QuietLogger,
)


@pytest.fixture(autouse=True)
def real_loggers_off():
    LoggerFactory.disable_real_loggers()
    yield
    LoggerFactory.disable_real_loggers()


def test_default_logger_is_quiet():
    logger = LoggerFactory.create(name="function_call_loop")

    assert isinstance(logger, QuietLogger)
    assert isinstance(logger, LoggerInterface)


def test_quiet_logger_forwards_warnings_to_standard_logging(caplog):
    logger = LoggerFactory.create(name="function_call_loop")

    with caplog.at_level(logging.DEBUG, logger="conversation_engine"):
        logger.debug("not shown")
        logger.info("not shown either")
        logger.warning("Function call iteration limit (10) reached for turn 1")

    assert [r.getMessage() for r in caplog.records] == ["Function call iteration limit (10) reached for turn 1"]
    assert caplog.records[0].name == "conversation_engine.function_call_loop"
    assert caplog.records[0].levelno == logging.WARNING


def test_forced_real_logger():
    logger = LoggerFactory.create(name="runner", level=LoggingLevel.DEBUG, use_real_logger=True)

    assert isinstance(logger, Logger)


def test_logging_level_from_name():
    assert LoggingLevel.from_name(" debug ") is LoggingLevel.DEBUG
    assert LoggingLevel.from_name("verbose") is LoggingLevel.INFO
