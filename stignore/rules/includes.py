#!/usr/bin/env python3
"""Recursive ``#include`` resolution for rule files.

Included files are resolved relative to the directory of the including
file and compiled in place. Every file entered during one load is recorded
in an InclusionChain that is never pruned, so both include cycles and a
file included twice side by side are rejected.
"""

import os
from typing import Callable, Iterable, List, Set

from stignore.core.constants import ErrorCode, Limits
from stignore.infrastructure.logger import get_logger
from stignore.rules.errors import IncludeCycleError, SourceUnavailableError
from stignore.rules.patterns import Predicate

logger = get_logger(__name__)

LineParser = Callable[[Iterable[str], str, "InclusionChain"], List[Predicate]]


def canonical_path(path: str) -> str:
    """Identifier used to recognise a rule file within one load."""
    return os.path.normpath(os.path.abspath(os.fspath(path)))


def source_error(path: str, error: Exception) -> SourceUnavailableError:
    """Map a read failure on a rule source to SourceUnavailableError.

    Args:
        path: Name of the source being read
        error: OSError or UnicodeDecodeError raised while reading

    Returns:
        Error carrying the matching ErrorCode
    """
    if isinstance(error, UnicodeDecodeError):
        return SourceUnavailableError(path, str(error), ErrorCode.INVALID_INPUT)

    reason = getattr(error, "strerror", None) or str(error)
    if isinstance(error, FileNotFoundError):
        return SourceUnavailableError(path, reason, ErrorCode.NOT_FOUND)
    if isinstance(error, PermissionError):
        return SourceUnavailableError(path, reason, ErrorCode.PERMISSION_DENIED)
    return SourceUnavailableError(path, reason, ErrorCode.INTERNAL_ERROR)


class InclusionChain:
    """Rule files seen so far during one load."""

    def __init__(self, seen: Iterable[str] = ()):
        self._seen: Set[str] = {canonical_path(p) for p in seen}

    def enter(self, path: str) -> str:
        """Record a file about to be loaded.

        Args:
            path: Rule file path

        Returns:
            Canonical identifier of the file

        Raises:
            IncludeCycleError: If the file was already seen in this load
        """
        identifier = canonical_path(path)
        if identifier in self._seen:
            raise IncludeCycleError(path)
        self._seen.add(identifier)
        return identifier

    def __contains__(self, path: str) -> bool:
        return canonical_path(path) in self._seen

    def __len__(self) -> int:
        return len(self._seen)


class IncludeResolver:
    """Opens rule files and hands their lines back to the parser."""

    def __init__(self, parse_lines: LineParser, encoding: str = Limits.RULE_FILE_ENCODING):
        """Initialize include resolver.

        Args:
            parse_lines: Callable compiling (lines, file name, chain) to predicates
            encoding: Text encoding of rule files
        """
        self._parse_lines = parse_lines
        self._encoding = encoding

    def resolve(self, target: str, current_file: str, chain: InclusionChain) -> List[Predicate]:
        """Load a file named by an ``#include`` directive.

        Args:
            target: Path as written after ``#include``
            current_file: File containing the directive
            chain: Files seen so far in this load

        Returns:
            Predicates of the included file, in order
        """
        path = os.path.join(os.path.dirname(current_file), target)
        logger.debug("Including rule file", path=path, parent=current_file)
        return self.load(path, chain)

    def load(self, path: str, chain: InclusionChain) -> List[Predicate]:
        """Load and compile a rule file.

        Args:
            path: Rule file path
            chain: Files seen so far in this load

        Returns:
            Predicates in declaration order

        Raises:
            IncludeCycleError: If the file was already seen in this load
            SourceUnavailableError: If the file cannot be read
        """
        chain.enter(path)

        try:
            # Universal newlines: only \n separates lines once read
            with open(path, "r", encoding=self._encoding) as fd:
                content = fd.read(Limits.MAX_RULE_FILE_SIZE + 1)
        except (OSError, UnicodeDecodeError) as e:
            raise source_error(path, e) from e

        if len(content) > Limits.MAX_RULE_FILE_SIZE:
            raise SourceUnavailableError(
                path, f"file exceeds {Limits.MAX_RULE_FILE_SIZE} characters", ErrorCode.INVALID_INPUT
            )

        return self._parse_lines(content.split("\n"), path, chain)
