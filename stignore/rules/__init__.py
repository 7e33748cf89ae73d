"""stignore Rules System.

This module provides ignore-rule compilation and matching:
- PatternCompiler: Rule lines to ordered path predicates
- IncludeResolver: Recursive ``#include`` handling
- Matcher: First-match-wins evaluation with optional caching
- load / parse: Construction entry points

A rule file is compiled once per load; the resulting Matcher is immutable
and safe to query from many threads.
"""

from .engine import Matcher, normalize_path
from .errors import (
    IgnoreError,
    IncludeCycleError,
    IncludeCycleOrDuplicateError,
    PatternCompileError,
    SourceUnavailableError,
)
from .includes import IncludeResolver, InclusionChain, canonical_path
from .loader import RuleParser, expand_line, load, parse
from .patterns import PatternCompiler, Polarity, Predicate, translate_glob

__all__ = [
    # Pattern compilation
    "Polarity",
    "Predicate",
    "PatternCompiler",
    "translate_glob",
    # Includes
    "InclusionChain",
    "IncludeResolver",
    "canonical_path",
    # Loading
    "RuleParser",
    "expand_line",
    "load",
    "parse",
    # Matching
    "Matcher",
    "normalize_path",
    # Errors
    "IgnoreError",
    "PatternCompileError",
    "IncludeCycleError",
    "IncludeCycleOrDuplicateError",
    "SourceUnavailableError",
]
