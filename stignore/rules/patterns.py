#!/usr/bin/env python3
r"""Pattern compilation for ignore rules.

This module turns one rule line into compiled path predicates:
- Glob translation with path-boundary semantics (``*`` and ``?`` stay
  within one path segment, ``**`` crosses segments)
- Character classes (``[abc]``, ``[!abc]``) and backslash escapes
- Rooted (``/build``), any-depth (``**/build``) and default forms
- Negation (``!keep.log``) via predicate polarity
- ``#include`` directives handed off to the include resolver
- Case-sensitive and case-insensitive modes

Example:
    >>> compiler = PatternCompiler()
    >>> [p.source for p in compiler.compile("*.log")]
    ['^[^/]*\\.log$', '^.*/[^/]*\\.log$']
    >>> compiler.compile("/build")[0].matches("a/build")
    False
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, List, Optional, Pattern

from stignore.core.constants import Syntax
from stignore.core.validators import ValidationError, validate_pattern
from stignore.rules.errors import PatternCompileError

SEPARATOR = "/"
_ANY_SEGMENT_CHAR = "[^/]"


class Polarity(Enum):
    """What a matching predicate decides."""

    SELECT = "select"  # Path is ignored
    DESELECT = "deselect"  # Path is explicitly not ignored


@dataclass(frozen=True)
class Predicate:
    """A compiled path test plus its polarity."""

    regex: Pattern[str]
    polarity: Polarity = Polarity.SELECT

    @property
    def source(self) -> str:
        """Canonical text of the compiled expression."""
        return self.regex.pattern

    @property
    def selects(self) -> bool:
        return self.polarity is Polarity.SELECT

    def matches(self, path: str) -> bool:
        """Check whether the whole path matches."""
        return self.regex.fullmatch(path) is not None

    def describe(self) -> str:
        """Source text, marked when the predicate deselects."""
        if self.selects:
            return self.source
        return Syntax.EXCLUDE_MARKER + self.source


IncludeHandler = Callable[[str], Iterable[Predicate]]


def translate_glob(pattern: str) -> str:
    """Translate a glob pattern into an anchored regular expression.

    Args:
        pattern: Glob pattern

    Returns:
        Regular expression source, ``^...$``

    Raises:
        ValueError: On an unterminated character class or dangling escape
    """
    i, n = 0, len(pattern)
    parts = []

    while i < n:
        c = pattern[i]
        i += 1

        if c == "*":
            if i < n and pattern[i] == "*":
                # Any run of two or more stars crosses separators
                while i < n and pattern[i] == "*":
                    i += 1
                parts.append(".*")
            else:
                parts.append(_ANY_SEGMENT_CHAR + "*")
        elif c == "?":
            parts.append(_ANY_SEGMENT_CHAR)
        elif c == "\\":
            if i >= n:
                raise ValueError("dangling escape at end of pattern")
            parts.append(re.escape(pattern[i]))
            i += 1
        elif c == "[":
            j = i
            if j < n and pattern[j] == "!":
                j += 1
            if j < n and pattern[j] == "]":
                j += 1
            while j < n and pattern[j] != "]":
                j += 1
            if j >= n:
                raise ValueError("unterminated character class")

            stuff = pattern[i:j].replace("\\", "\\\\")
            # Keep set operators literal
            stuff = re.sub(r"([&~|])", r"\\\1", stuff)
            i = j + 1

            if stuff[0] == "!":
                stuff = "^" + stuff[1:]
            elif stuff[0] in ("^", "["):
                stuff = "\\" + stuff
            parts.append(f"[{stuff}]")
        else:
            parts.append(re.escape(c))

    return "^" + "".join(parts) + "$"


class PatternCompiler:
    """Compiles rule lines into ordered predicates.

    Rule forms, checked in this order after an optional leading ``!``:
    ``/rooted``, ``**/any-depth``, ``#include file`` and the default form,
    which matches both at the root and at any depth.
    """

    def __init__(self, case_sensitive: bool = True):
        """Initialize pattern compiler.

        Args:
            case_sensitive: Whether patterns are case-sensitive
        """
        self._case_sensitive = case_sensitive

    @property
    def case_sensitive(self) -> bool:
        return self._case_sensitive

    def compile_glob(self, text: str, line: Optional[str] = None, source: Optional[str] = None) -> Pattern[str]:
        """Compile one glob into a regular expression.

        Args:
            text: Glob text
            line: Rule line the glob came from (for error messages)
            source: Rule file the line came from (for error messages)

        Returns:
            Compiled expression

        Raises:
            PatternCompileError: If the glob is malformed
        """
        line = text if line is None else line
        try:
            validate_pattern(text)
            expression = translate_glob(text)
            if not self._case_sensitive:
                expression = Syntax.CASEFOLD_FLAG + expression
            return re.compile(expression, re.DOTALL)
        except (ValidationError, ValueError, re.error) as e:
            raise PatternCompileError(line, str(e), source) from e

    def compile(
        self,
        line: str,
        include: Optional[IncludeHandler] = None,
        source: Optional[str] = None,
    ) -> List[Predicate]:
        """Compile one trimmed rule line.

        Args:
            line: Rule line (non-empty, not a comment)
            include: Callback resolving an ``#include`` target to predicates
            source: Rule file the line came from (for error messages)

        Returns:
            Predicates in declaration order

        Raises:
            PatternCompileError: If the line cannot be compiled
        """
        polarity = Polarity.SELECT
        text = line
        if text.startswith(Syntax.NEGATE):
            text = text[len(Syntax.NEGATE):]
            polarity = Polarity.DESELECT

        def predicate(glob: str) -> Predicate:
            return Predicate(self.compile_glob(glob, line, source), polarity)

        if text.startswith(Syntax.ROOT):
            return [predicate(text[len(Syntax.ROOT):])]

        if text.startswith(Syntax.ANY_DEPTH):
            return [predicate(text), predicate(text[len(Syntax.ANY_DEPTH):])]

        if text.startswith(Syntax.INCLUDE):
            if include is None:
                raise PatternCompileError(line, "include directive outside a rule file", source)
            return list(include(text[len(Syntax.INCLUDE):].strip()))

        return [predicate(text), predicate(Syntax.ANY_DEPTH + text)]
