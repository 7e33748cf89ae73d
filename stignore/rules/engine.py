#!/usr/bin/env python3
"""Matcher for evaluating paths against a compiled rule set.

This module provides ordered evaluation for stignore:
- First-match-wins over declaration order
- Polarity decides the result (select = ignored, deselect = kept)
- Optional result cache shared across reloads
- Diagnostics (predicate listing, fingerprint, explain)

Evaluation is deliberately first-match-wins: a ``!keep.log`` rule only
takes effect when it appears before the broader ``*.log`` rule.

Example:
    >>> matcher = parse(io.StringIO("!keep.log\\n*.log\\n"), "rules")
    >>> matcher.match("debug.log")
    True
    >>> matcher.match("keep.log")
    False
"""

import os
from typing import Iterable, List, Optional, Tuple, Union

from stignore.core.constants import Fingerprint
from stignore.infrastructure.cache_manager import ResultCache
from stignore.rules.patterns import Predicate

PathLike = Union[str, "os.PathLike[str]"]


def normalize_path(path: PathLike) -> str:
    """Bring a path into the form predicates are compiled against.

    Args:
        path: Relative path, string or path-like

    Returns:
        Path using ``/`` as the separator
    """
    path = os.fspath(path)
    if os.sep != "/":
        path = path.replace(os.sep, "/")
    return path


class Matcher:
    """Immutable ordered rule set with an optional result cache.

    ``match()`` may be called from many threads at once; only the bound
    cache takes a lock.
    """

    def __init__(self, predicates: Iterable[Predicate] = (), cache: Optional[ResultCache] = None):
        """Initialize matcher.

        Args:
            predicates: Compiled predicates in declaration order
            cache: Result cache to consult and fill
        """
        self._predicates: Tuple[Predicate, ...] = tuple(predicates)
        self._cache = cache

    @property
    def predicates(self) -> Tuple[Predicate, ...]:
        return self._predicates

    @property
    def cache(self) -> Optional[ResultCache]:
        return self._cache

    def match(self, path: PathLike) -> bool:
        """Decide whether a path is selected (ignored).

        Args:
            path: Path relative to the rule root

        Returns:
            Polarity of the first matching predicate, False if none matches
        """
        if not self._predicates:
            return False

        path = normalize_path(path)

        if self._cache is not None:
            cached = self._cache.get(path)
            if cached is not None:
                return cached

        predicate = self._first_match(path)
        result = predicate.selects if predicate is not None else False

        if self._cache is not None:
            self._cache.set(path, result)
        return result

    def explain(self, path: PathLike) -> Optional[Predicate]:
        """Find the predicate that decides a path, bypassing the cache.

        Args:
            path: Path relative to the rule root

        Returns:
            First matching predicate or None
        """
        return self._first_match(normalize_path(path))

    def _first_match(self, path: str) -> Optional[Predicate]:
        for predicate in self._predicates:
            if predicate.matches(path):
                return predicate
        return None

    def patterns(self) -> List[str]:
        """List compiled predicates in declaration order.

        Returns:
            Source text of each predicate, deselecting ones marked
            with ``(?exclude)``
        """
        return [predicate.describe() for predicate in self._predicates]

    describe = patterns

    def fingerprint(self) -> Fingerprint:
        """Value identifying this rule set for cache reuse.

        Returns:
            Ordered (source, selects) pairs
        """
        return tuple((p.source, p.selects) for p in self._predicates)

    def __len__(self) -> int:
        """Return number of predicates."""
        return len(self._predicates)

    def __repr__(self) -> str:
        cached = "cached" if self._cache is not None else "uncached"
        return f"<Matcher predicates={len(self._predicates)} {cached}>"
