"""
stignore Core: Constants and Type Definitions

This module provides system-wide constants, error codes, and type definitions
shared by the rule compiler, the matcher and the command-line interface.
"""
from enum import IntEnum
from typing import Tuple, TypeAlias

# Version information
STIGNORE_VERSION = "1.0.0"


# Error codes (0-9 range)
class ErrorCode(IntEnum):
    """Standardized error codes for stignore operations."""

    SUCCESS = 0  # Operation completed successfully
    INVALID_INPUT = 1  # Malformed pattern, invalid configuration
    NOT_FOUND = 2  # Rule file or resource doesn't exist
    PERMISSION_DENIED = 3  # Insufficient permissions
    CONFLICT = 4  # Cyclic or duplicate include
    DEPENDENCY_ERROR = 5  # Missing dependency
    INTERNAL_ERROR = 6  # Bug in stignore


# Ordered (predicate source, selects) pairs identifying a rule set
Fingerprint: TypeAlias = Tuple[Tuple[str, bool], ...]


# Rule-file grammar
class Syntax:
    """Literal tokens of the rule-file grammar."""

    COMMENT = "//"
    INCLUDE = "#include "
    HASH = "#"
    NEGATE = "!"
    ROOT = "/"
    ANY_DEPTH = "**/"
    RECURSIVE_SUFFIX = "/**"
    DIRECTORY_SUFFIX = "/"

    # Prefix used when describing deselecting predicates
    EXCLUDE_MARKER = "(?exclude)"
    # Prefix of case-insensitive compiled expressions
    CASEFOLD_FLAG = "(?i)"


# Resource limits and defaults
class Limits:
    """System resource limits and default values."""

    # Path and pattern limits
    MAX_PATH_LENGTH = 4096
    MAX_PATTERN_LENGTH = 4096

    # Rule files larger than this are refused
    MAX_RULE_FILE_SIZE = 16 * 1024 * 1024  # 16MB

    DEFAULT_RULE_FILE = ".stignore"
    RULE_FILE_ENCODING = "utf-8"


# Configuration keys
class ConfigKey:
    """Configuration key constants."""

    # Top-level keys
    ROOT = "stignore"
    RULES = "rules"
    LOGGING = "logging"

    # Rules configuration
    RULES_FILE = "file"
    RULES_CACHE = "cache"
    RULES_CASEFOLD = "casefold"

    # Logging configuration
    LOG_LEVEL = "level"
    LOG_FILE = "file"


# Default configuration values
DEFAULT_CONFIG = {
    ConfigKey.RULES: {
        ConfigKey.RULES_FILE: Limits.DEFAULT_RULE_FILE,
        ConfigKey.RULES_CACHE: True,
        ConfigKey.RULES_CASEFOLD: False,
    },
    ConfigKey.LOGGING: {
        ConfigKey.LOG_LEVEL: "WARNING",
        ConfigKey.LOG_FILE: None,
    },
}
