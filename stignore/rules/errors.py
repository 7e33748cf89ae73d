"""Errors raised while building a rule set.

Every error aborts the whole load; no partial rule set is ever returned.
"""

from typing import Optional

from stignore.core.constants import ErrorCode


class IgnoreError(Exception):
    """Base class for rule-loading errors."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INVALID_INPUT):
        self.message = message
        self.error_code = error_code
        super().__init__(message)


class PatternCompileError(IgnoreError):
    """A rule line could not be translated into a predicate."""

    def __init__(self, pattern: str, reason: str, source: Optional[str] = None):
        self.pattern = pattern
        self.reason = reason
        self.source = source
        where = f" in {source}" if source else ""
        super().__init__(f"Invalid pattern {pattern!r}{where}: {reason}", ErrorCode.INVALID_INPUT)


class IncludeCycleError(IgnoreError):
    """A rule file was reached twice within one load (cycle or duplicate)."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Multiple include of ignore file {path!r}", ErrorCode.CONFLICT)


IncludeCycleOrDuplicateError = IncludeCycleError


class SourceUnavailableError(IgnoreError):
    """A rule file could not be opened or read."""

    def __init__(self, path: str, reason: str, error_code: ErrorCode = ErrorCode.NOT_FOUND):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read ignore file {path!r}: {reason}", error_code)
