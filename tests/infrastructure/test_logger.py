#!/usr/bin/env python3
"""Tests for the structured logging system."""

import logging
import logging.handlers
import threading

import pytest

from stignore.infrastructure.logger import (
    ROOT_LOGGER_NAME,
    Logger,
    LogLevel,
    configure_logging,
    get_logger,
)


class ListHandler(logging.Handler):
    """Handler collecting records in memory."""

    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record):
        self.records.append(record)


@pytest.fixture
def captured():
    """Logger writing to an in-memory handler."""
    handler = ListHandler()
    logger = Logger("stignore.tests.captured", level="DEBUG", handlers=[handler])
    yield logger, handler
    logger.logger.handlers.clear()
    logger.logger.propagate = True
    logger.logger.setLevel(logging.NOTSET)


class TestLogLevel:
    """Tests for LogLevel."""

    def test_values_match_logging(self):
        """Test levels mirror the logging module."""
        assert LogLevel.DEBUG == logging.DEBUG
        assert LogLevel.WARNING == logging.WARNING
        assert LogLevel.CRITICAL == logging.CRITICAL


class TestLogger:
    """Tests for Logger."""

    def test_message_with_context(self, captured):
        """Test keyword context is appended to the message."""
        logger, handler = captured
        logger.info("Loaded rule file", path=".stignore", predicates=4)

        record = handler.records[0]
        assert record.getMessage() == "Loaded rule file | path=.stignore predicates=4"
        assert record.context == {"path": ".stignore", "predicates": 4}
        assert record.levelno == logging.INFO

    def test_message_without_context(self, captured):
        """Test plain messages are unchanged."""
        logger, handler = captured
        logger.warning("plain")

        assert handler.records[0].getMessage() == "plain"

    def test_add_context(self, captured):
        """Test scoped context is merged and removed afterwards."""
        logger, handler = captured

        with logger.add_context(source="rules"):
            logger.debug("inside", step=1)
        logger.debug("outside")

        assert handler.records[0].context == {"source": "rules", "step": 1}
        assert handler.records[1].context == {}

    def test_context_is_thread_local(self, captured):
        """Test context pushed in one thread is invisible in another."""
        logger, handler = captured

        def other():
            logger.error("from thread")

        with logger.add_context(request="main"):
            thread = threading.Thread(target=other)
            thread.start()
            thread.join()

        assert handler.records[0].context == {}

    def test_level_filtering(self, captured):
        """Test records below the level are dropped."""
        logger, handler = captured
        logger.set_level(LogLevel.ERROR)

        logger.info("dropped")
        logger.error("kept")

        assert [r.getMessage() for r in handler.records] == ["kept"]
        assert logger.get_level() == LogLevel.ERROR
        assert logger.is_enabled_for("error")
        assert not logger.is_enabled_for(LogLevel.WARNING)

    def test_exception(self, captured):
        """Test exceptions are logged with type and traceback."""
        logger, handler = captured

        try:
            raise ValueError("boom")
        except ValueError as e:
            logger.exception("failed", e)

        record = handler.records[0]
        assert record.context["exception_type"] == "ValueError"
        assert record.context["exception_message"] == "boom"
        assert record.exc_info is not None

    def test_handlers_replace_and_stop_propagation(self, captured):
        """Test explicit handlers take over the logger."""
        logger, handler = captured

        assert logger.logger.handlers == [handler]
        assert logger.logger.propagate is False

    def test_add_and_remove_handler(self, captured):
        """Test handlers can be added and removed."""
        logger, _ = captured
        extra = ListHandler()

        logger.add_handler(extra)
        logger.info("one")
        logger.remove_handler(extra)
        logger.info("two")

        assert [r.getMessage() for r in extra.records] == ["one"]

    def test_file_handler(self, temp_dir):
        """Test rotating file handler creation."""
        handler = Logger.create_file_handler(temp_dir / "stignore.log", max_bytes=1024, backup_count=2)
        try:
            assert isinstance(handler, logging.handlers.RotatingFileHandler)
            assert handler.maxBytes == 1024
            assert handler.backupCount == 2
        finally:
            handler.close()


class TestGetLogger:
    """Tests for get_logger()."""

    def test_cached(self):
        """Test the same Logger is returned per name."""
        assert get_logger("stignore.rules.loader") is get_logger("stignore.rules.loader")

    def test_nested_under_root(self):
        """Test foreign names are placed in the stignore hierarchy."""
        assert get_logger("plugin").name == "stignore.plugin"
        assert get_logger(ROOT_LOGGER_NAME).name == ROOT_LOGGER_NAME

    def test_inherits_level(self):
        """Test child loggers follow the root level."""
        configure_logging(level="ERROR", console=False)

        assert get_logger("stignore.rules.loader").get_level() == LogLevel.ERROR


class TestConfigureLogging:
    """Tests for configure_logging()."""

    def test_console_handler(self):
        """Test a stderr handler is attached by default."""
        root = configure_logging(level="INFO")

        assert root.get_level() == LogLevel.INFO
        assert len(root.logger.handlers) == 1
        assert isinstance(root.logger.handlers[0], logging.StreamHandler)

    def test_log_file(self, temp_dir):
        """Test records reach the log file."""
        log_file = temp_dir / "stignore.log"
        configure_logging(level="DEBUG", log_file=log_file, console=False)

        get_logger("stignore.rules.loader").debug("Loaded rule file", path="x")
        for handler in logging.getLogger(ROOT_LOGGER_NAME).handlers:
            handler.flush()

        assert "Loaded rule file | path=x" in log_file.read_text()

    def test_reconfigure_replaces_handlers(self):
        """Test repeated configuration does not stack handlers."""
        configure_logging(console=True)
        root = configure_logging(console=True)

        assert len(root.logger.handlers) == 1

    def test_root_registered(self):
        """Test the configured root is what get_logger returns."""
        root = configure_logging(console=False)

        assert get_logger(ROOT_LOGGER_NAME) is root
