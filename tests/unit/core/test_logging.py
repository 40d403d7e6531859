"""Unit tests for structured logging setup."""

import logging

import pytest
import structlog

from suricate.core.config import Settings
from suricate.core.logging import (
    LIBRARY_LOGGER,
    LoggingContext,
    configure_logging,
    get_logger,
    rename_message_field,
)


@pytest.fixture(autouse=True)
def reset_structlog():
    """Restore structlog defaults so later tests do not write to captured streams."""
    yield
    structlog.reset_defaults()
    library_logger = logging.getLogger(LIBRARY_LOGGER)
    library_logger.handlers = []
    library_logger.setLevel(logging.NOTSET)
    library_logger.propagate = True


def test_configure_logging_console(capsys):
    configure_logging(Settings(_env_file=None, environment="development", log_level="DEBUG"))

    get_logger("suricate.test").info("console message", collection="users")

    captured = capsys.readouterr()
    assert "console message" in captured.err


def test_configure_logging_json(capsys):
    configure_logging(Settings(_env_file=None, environment="production", log_format="json"))

    get_logger("suricate.test").warning("json message", collection="users")

    captured = capsys.readouterr()
    assert '"message": "json message"' in captured.err
    assert '"collection": "users"' in captured.err


def test_rename_message_field():
    event_dict = rename_message_field(None, "info", {"event": "hello"})
    assert event_dict == {"message": "hello"}


def test_logging_context_binds_and_unbinds():
    structlog.contextvars.clear_contextvars()

    with LoggingContext(collection="users"):
        assert structlog.contextvars.get_contextvars() == {"collection": "users"}

    assert structlog.contextvars.get_contextvars() == {}


def test_unconfigured_logger_keeps_stdout_clean(capsys):
    logger = get_logger("suricate.test")

    logger.debug("debug message")
    logger.info("info message")
    logger.warning("warning message")

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "debug message" not in captured.err
    assert "info message" not in captured.err


def test_configured_level_filters_library_records(capsys):
    configure_logging(Settings(_env_file=None, environment="production", log_format="json", log_level="WARNING"))

    get_logger("suricate.test").info("hidden message")
    get_logger("suricate.test").error("shown message")

    captured = capsys.readouterr()
    assert "hidden message" not in captured.err
    assert "shown message" in captured.err
    assert captured.out == ""
