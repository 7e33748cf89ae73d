#!/usr/bin/env python3
"""Rule-file loading for stignore.

This module builds Matchers from rule files:
- Line preprocessing (comments, blank lines, directory expansion)
- Pattern compilation and ``#include`` splicing
- Cache binding through a caller-owned CacheRegistry

Loading is all-or-nothing: the first compile, include or I/O error aborts
it and no Matcher is returned.

Example:
    >>> registry = CacheRegistry()
    >>> matcher = load(".stignore", registry=registry)
    >>> matcher.match("build/output.o")
    True
"""

from typing import IO, Iterable, List, Optional, Union

from stignore.core.constants import Syntax
from stignore.infrastructure.cache_manager import CacheRegistry
from stignore.infrastructure.logger import get_logger
from stignore.rules.engine import Matcher
from stignore.rules.includes import InclusionChain, IncludeResolver, source_error
from stignore.rules.patterns import PatternCompiler, Predicate

logger = get_logger(__name__)


def expand_line(line: str) -> List[str]:
    """Expand one trimmed, non-comment line into the variants to compile.

    Args:
        line: Rule line

    Returns:
        Variants in compilation order
    """
    if line.startswith(Syntax.HASH):
        # Directives and literal '#' patterns are compiled exactly once
        return [line]
    if line.endswith(Syntax.RECURSIVE_SUFFIX):
        return [line]
    if line.endswith(Syntax.DIRECTORY_SUFFIX):
        return [line, line + "**"]
    return [line, line + Syntax.RECURSIVE_SUFFIX]


class RuleParser:
    """Compiles rule-file lines, following includes."""

    def __init__(self, case_sensitive: bool = True):
        """Initialize rule parser.

        Args:
            case_sensitive: Whether patterns are case-sensitive
        """
        self.compiler = PatternCompiler(case_sensitive=case_sensitive)
        self.resolver = IncludeResolver(self.parse_lines)

    def parse_lines(self, lines: Iterable[str], current_file: str, chain: InclusionChain) -> List[Predicate]:
        """Compile the lines of one rule file.

        Args:
            lines: Raw lines
            current_file: Name of the file, base for relative includes
            chain: Files seen so far in this load

        Returns:
            Predicates in declaration order
        """
        predicates: List[Predicate] = []

        def include(target: str) -> List[Predicate]:
            return self.resolver.resolve(target, current_file, chain)

        for raw in lines:
            line = raw.strip()
            if not line or line.startswith(Syntax.COMMENT):
                continue

            for variant in expand_line(line):
                predicates.extend(self.compiler.compile(variant, include=include, source=current_file))

        return predicates

    def load_file(self, path: str) -> List[Predicate]:
        """Compile a named rule file and everything it includes."""
        return self.resolver.load(path, InclusionChain())

    def parse_source(self, source: Union[IO[str], Iterable[str]], name: str) -> List[Predicate]:
        """Compile an already open source named ``name``.

        The name is recorded as seen, so the source cannot include itself.
        Read failures are raised as SourceUnavailableError, as for files.
        """
        chain = InclusionChain()
        chain.enter(name)

        try:
            lines = list(source)
        except (OSError, UnicodeDecodeError) as e:
            raise source_error(name, e) from e

        return self.parse_lines(lines, name, chain)


def load(path: str, registry: Optional[CacheRegistry] = None, case_sensitive: bool = True) -> Matcher:
    """Load a rule file into a Matcher.

    Args:
        path: Rule file path
        registry: When given, bind the Matcher to the registry's result
            cache for this file (reused while the rules are unchanged)
        case_sensitive: Whether patterns are case-sensitive

    Returns:
        Matcher for the file

    Raises:
        PatternCompileError: If a pattern is malformed
        IncludeCycleError: If a file is included twice or recursively
        SourceUnavailableError: If a file cannot be read
    """
    predicates = RuleParser(case_sensitive).load_file(path)
    matcher = Matcher(predicates)
    logger.debug("Loaded rule file", path=path, predicates=len(matcher))

    if registry is None:
        return matcher
    return Matcher(predicates, cache=registry.bind(path, matcher.fingerprint()))


def parse(source: Union[IO[str], Iterable[str]], name: str, case_sensitive: bool = True) -> Matcher:
    """Build an uncached Matcher from an open text source.

    Args:
        source: Text stream or iterable of lines
        name: Logical file name, base for relative includes
        case_sensitive: Whether patterns are case-sensitive

    Returns:
        Matcher for the source

    Raises:
        PatternCompileError: If a pattern is malformed
        IncludeCycleError: If a file is included twice or recursively
        SourceUnavailableError: If the source or an included file cannot be read
    """
    predicates = RuleParser(case_sensitive).parse_source(source, name)
    logger.debug("Parsed rule source", name=name, predicates=len(predicates))
    return Matcher(predicates)
