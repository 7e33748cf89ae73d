"""stignore - ignore-file compiler and path matcher.

Example:
    >>> import stignore
    >>> registry = stignore.CacheRegistry()
    >>> matcher = stignore.load(".stignore", registry=registry)
    >>> matcher.match("build/output.o")
    True
"""

from stignore.core.constants import STIGNORE_VERSION
from stignore.infrastructure.cache_manager import CacheRegistry, ResultCache
from stignore.rules import (
    IgnoreError,
    IncludeCycleError,
    IncludeCycleOrDuplicateError,
    Matcher,
    PatternCompileError,
    Polarity,
    Predicate,
    SourceUnavailableError,
    load,
    parse,
)

__version__ = STIGNORE_VERSION

__all__ = [
    "__version__",
    "load",
    "parse",
    "Matcher",
    "Predicate",
    "Polarity",
    "ResultCache",
    "CacheRegistry",
    "IgnoreError",
    "PatternCompileError",
    "IncludeCycleError",
    "IncludeCycleOrDuplicateError",
    "SourceUnavailableError",
]
