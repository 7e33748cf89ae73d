#!/usr/bin/env python3
"""Structured logging system for stignore.

This module provides a structured logging system with:
- Multiple log levels (DEBUG, INFO, WARNING, ERROR)
- Structured context (key-value pairs)
- Console and rotating file handlers
- Thread-local context management
- One logger hierarchy rooted at ``stignore``

Library modules obtain a logger with ``get_logger(__name__)`` and never
attach handlers themselves; applications (the CLI) call
``configure_logging()`` once to decide where records go.

Example:
    >>> configure_logging(level="DEBUG")
    >>> logger = get_logger("stignore.rules.loader")
    >>> logger.debug("Loaded rule file", path=".stignore", predicates=12)
    >>> with logger.add_context(source=".stignore"):
    ...     logger.info("Reusing cache")
"""

import logging
import logging.handlers
import threading
from contextlib import contextmanager
from enum import IntEnum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

ROOT_LOGGER_NAME = "stignore"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"


class LogLevel(IntEnum):
    """Log levels matching Python's logging module."""

    DEBUG = logging.DEBUG  # 10
    INFO = logging.INFO  # 20
    WARNING = logging.WARNING  # 30
    ERROR = logging.ERROR  # 40
    CRITICAL = logging.CRITICAL  # 50


def _coerce_level(level: Union[LogLevel, str, int]) -> LogLevel:
    if isinstance(level, str):
        return LogLevel[level.upper()]
    return LogLevel(level)


class Logger:
    """Structured logger with context support.

    Wraps a stdlib logger and renders keyword context as ``key=value``
    pairs after the message. Context pushed with ``add_context()`` is
    thread-local and shared by every Logger instance.
    """

    # Thread-local storage for context
    _context_stack = threading.local()

    def __init__(
        self,
        name: str = ROOT_LOGGER_NAME,
        level: Optional[Union[LogLevel, str]] = None,
        handlers: Optional[List[logging.Handler]] = None,
    ):
        """Initialize logger.

        Args:
            name: Logger name for identification
            level: Minimum log level (inherits from the parent when None)
            handlers: Optional list of handlers replacing any existing ones
        """
        self.name = name
        self.logger = logging.getLogger(name)

        if level is not None:
            self.set_level(level)

        if handlers is not None:
            self.logger.handlers.clear()
            for handler in handlers:
                self.logger.addHandler(handler)
            # Records are fully handled here
            self.logger.propagate = False

    @staticmethod
    def create_console_handler(fmt: str = DEFAULT_FORMAT) -> logging.StreamHandler:
        """Create console (stderr) handler with formatting.

        Args:
            fmt: Log record format

        Returns:
            Configured console handler
        """
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt, datefmt=DEFAULT_DATEFMT))
        return handler

    @staticmethod
    def create_file_handler(
        filename: Union[str, Path],
        max_bytes: int = 10 * 1024 * 1024,  # 10MB
        backup_count: int = 5,
        fmt: str = DEFAULT_FORMAT,
    ) -> logging.handlers.RotatingFileHandler:
        """Create rotating file handler.

        Args:
            filename: Path to log file
            max_bytes: Maximum size before rotation
            backup_count: Number of backup files to keep
            fmt: Log record format

        Returns:
            Configured rotating file handler
        """
        handler = logging.handlers.RotatingFileHandler(
            filename, maxBytes=max_bytes, backupCount=backup_count
        )
        handler.setFormatter(logging.Formatter(fmt, datefmt=DEFAULT_DATEFMT))
        return handler

    def add_handler(self, handler: logging.Handler) -> None:
        """Add a new output handler."""
        self.logger.addHandler(handler)

    def remove_handler(self, handler: logging.Handler) -> None:
        """Remove an output handler."""
        self.logger.removeHandler(handler)

    def set_level(self, level: Union[LogLevel, str]) -> None:
        """Set the minimum log level.

        Args:
            level: New log level (LogLevel or string)
        """
        self.logger.setLevel(_coerce_level(level))

    def get_level(self) -> LogLevel:
        """Get the effective log level.

        Returns:
            Effective log level, taking parents into account
        """
        return LogLevel(self.logger.getEffectiveLevel())

    def _get_context(self) -> Dict[str, Any]:
        """Get current thread-local context.

        Returns:
            Combined context from all levels
        """
        if not hasattr(self._context_stack, "stack"):
            self._context_stack.stack = [{}]

        # Merge all context levels
        context = {}
        for ctx in self._context_stack.stack:
            context.update(ctx)
        return context

    def _format_message(self, msg: str, context: Dict[str, Any]) -> str:
        """Format message with context.

        Args:
            msg: Log message
            context: Context dictionary

        Returns:
            Formatted message with context
        """
        if context:
            ctx_str = " ".join(f"{k}={v}" for k, v in context.items())
            return f"{msg} | {ctx_str}"
        return msg

    @contextmanager
    def add_context(self, **kwargs):
        """Context manager to add temporary context.

        Args:
            **kwargs: Key-value pairs to add to context

        Example:
            >>> with logger.add_context(source=".stignore"):
            ...     logger.info("Loading rules")
        """
        if not hasattr(self._context_stack, "stack"):
            self._context_stack.stack = [{}]

        # Push new context
        self._context_stack.stack.append(kwargs)
        try:
            yield
        finally:
            # Pop context
            self._context_stack.stack.pop()

    def _log(self, level: int, msg: str, context: Dict[str, Any], **kwargs) -> None:
        combined_context = self._get_context()
        combined_context.update(context)
        formatted_msg = self._format_message(msg, combined_context)
        self.logger.log(level, formatted_msg, extra={"context": combined_context}, **kwargs)

    def debug(self, msg: str, **context) -> None:
        """Log debug message.

        Args:
            msg: Log message
            **context: Additional context key-value pairs
        """
        if self.logger.isEnabledFor(logging.DEBUG):
            self._log(logging.DEBUG, msg, context)

    def info(self, msg: str, **context) -> None:
        """Log info message."""
        if self.logger.isEnabledFor(logging.INFO):
            self._log(logging.INFO, msg, context)

    def warning(self, msg: str, **context) -> None:
        """Log warning message."""
        if self.logger.isEnabledFor(logging.WARNING):
            self._log(logging.WARNING, msg, context)

    def error(self, msg: str, **context) -> None:
        """Log error message."""
        if self.logger.isEnabledFor(logging.ERROR):
            self._log(logging.ERROR, msg, context)

    def exception(self, msg: str, exc: Exception, **context) -> None:
        """Log exception with traceback.

        Args:
            msg: Log message
            exc: Exception to log
            **context: Additional context key-value pairs
        """
        context["exception_type"] = type(exc).__name__
        context["exception_message"] = str(exc)
        self._log(logging.ERROR, msg, context, exc_info=exc)

    def is_enabled_for(self, level: Union[LogLevel, str]) -> bool:
        """Check if logger is enabled for given level.

        Args:
            level: Log level to check

        Returns:
            True if logger would output at this level
        """
        return self.logger.isEnabledFor(_coerce_level(level))


_loggers: Dict[str, Logger] = {}
_loggers_lock = threading.Lock()


def get_logger(name: str = ROOT_LOGGER_NAME) -> Logger:
    """Get or create the Logger for a name.

    Names outside the ``stignore`` hierarchy are nested under it so that
    ``configure_logging()`` governs them.

    Args:
        name: Logger name

    Returns:
        Logger instance
    """
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"

    with _loggers_lock:
        logger = _loggers.get(name)
        if logger is None:
            logger = Logger(name=name)
            _loggers[name] = logger
        return logger


def configure_logging(
    level: Union[LogLevel, str] = LogLevel.WARNING,
    log_file: Optional[Union[str, Path]] = None,
    console: bool = True,
) -> Logger:
    """Attach handlers to the root ``stignore`` logger.

    Args:
        level: Minimum level for the whole hierarchy
        log_file: Optional path of a rotating log file
        console: Whether to log to stderr

    Returns:
        The configured root Logger
    """
    handlers: List[logging.Handler] = []
    if console:
        handlers.append(Logger.create_console_handler())
    if log_file:
        handlers.append(Logger.create_file_handler(log_file))

    root = Logger(ROOT_LOGGER_NAME, level=level, handlers=handlers)
    with _loggers_lock:
        _loggers[ROOT_LOGGER_NAME] = root
    return root
