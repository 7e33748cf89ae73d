#!/usr/bin/env python3
"""Match-result caching for stignore.

This module provides the memoization layer behind ``Matcher.match()``:
- ResultCache: thread-safe path -> bool mapping tagged with the
  fingerprint of the rule set it was filled for
- CacheRegistry: caller-owned map from rule source to its current cache,
  reusing a cache across reloads while the fingerprint is unchanged
- Cache statistics

A cache is never merged or partially invalidated. When a source is reloaded
with different rules its cache is replaced by an empty one, so memory stays
bounded by the paths queried since the last actual rule change.

Example:
    >>> registry = CacheRegistry()
    >>> cache = registry.bind(".stignore", matcher.fingerprint())
    >>> cache.set("build/out.o", True)
    >>> registry.bind(".stignore", matcher.fingerprint()) is cache
    True
"""

import os
import threading
from typing import Any, Dict, Optional

from stignore.core.constants import Fingerprint
from stignore.infrastructure.logger import get_logger

logger = get_logger(__name__)


class ResultCache:
    """Thread-safe match-result cache bound to one rule-set fingerprint."""

    def __init__(self, fingerprint: Fingerprint):
        """Initialize result cache.

        Args:
            fingerprint: Fingerprint of the rule set the entries belong to
        """
        self._fingerprint = tuple(fingerprint)
        self._results: Dict[str, bool] = {}
        self._lock = threading.Lock()

        # Statistics
        self._hits = 0
        self._misses = 0

    @property
    def fingerprint(self) -> Fingerprint:
        """Fingerprint of the rule set this cache was built for."""
        return self._fingerprint

    def matches_fingerprint(self, fingerprint: Fingerprint) -> bool:
        """Check whether this cache is valid for a rule set.

        Args:
            fingerprint: Fingerprint to compare by value

        Returns:
            True if the fingerprints are equal
        """
        return self._fingerprint == tuple(fingerprint)

    def get(self, path: str) -> Optional[bool]:
        """Get cached result for a path.

        Args:
            path: Normalized path

        Returns:
            Cached result or None if not cached
        """
        with self._lock:
            result = self._results.get(path)
            if result is None:
                self._misses += 1
            else:
                self._hits += 1
            return result

    def set(self, path: str, result: bool) -> None:
        """Store result for a path.

        Args:
            path: Normalized path
            result: Match result
        """
        with self._lock:
            self._results[path] = result

    def clear(self) -> None:
        """Clear all cached results and statistics."""
        with self._lock:
            self._results.clear()
            self._hits = 0
            self._misses = 0

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics.

        Returns:
            Cache statistics
        """
        with self._lock:
            total_requests = self._hits + self._misses
            hit_rate = self._hits / total_requests if total_requests > 0 else 0

            return {
                "entries": len(self._results),
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": hit_rate,
            }

    def __contains__(self, path: str) -> bool:
        with self._lock:
            return path in self._results

    def __len__(self) -> int:
        with self._lock:
            return len(self._results)


class CacheRegistry:
    """Registry of result caches keyed by canonical rule-source path.

    Owned by the caller and passed to ``load()``; there is no process-wide
    instance.
    """

    def __init__(self):
        """Initialize an empty registry."""
        self._caches: Dict[str, ResultCache] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _key(source: str) -> str:
        return os.path.normpath(os.path.abspath(os.fspath(source)))

    def bind(self, source: str, fingerprint: Fingerprint) -> ResultCache:
        """Get the cache to use for a freshly loaded rule set.

        Args:
            source: Path the rules were loaded from
            fingerprint: Fingerprint of the new rule set

        Returns:
            The existing cache if its fingerprint is equal, otherwise a new
            empty cache that replaces it
        """
        key = self._key(source)

        with self._lock:
            cached = self._caches.get(key)
            if cached is not None and cached.matches_fingerprint(fingerprint):
                logger.debug("Reusing result cache", source=key, entries=len(cached))
                return cached

            cached = ResultCache(fingerprint)
            self._caches[key] = cached
            logger.debug("Created result cache", source=key, predicates=len(cached.fingerprint))
            return cached

    def get(self, source: str) -> Optional[ResultCache]:
        """Get the current cache for a source, if any.

        Args:
            source: Rule source path

        Returns:
            Registered cache or None
        """
        with self._lock:
            return self._caches.get(self._key(source))

    def discard(self, source: str) -> bool:
        """Forget the cache for a source.

        Args:
            source: Rule source path

        Returns:
            True if a cache was registered
        """
        with self._lock:
            return self._caches.pop(self._key(source), None) is not None

    def clear(self) -> None:
        """Forget all caches."""
        with self._lock:
            self._caches.clear()

    def __contains__(self, source: str) -> bool:
        with self._lock:
            return self._key(source) in self._caches

    def __len__(self) -> int:
        with self._lock:
            return len(self._caches)
