"""
stignore Core: Input Validators.

This module provides input validation functions for configuration,
rule-file patterns, and other user inputs.
"""
from typing import Any, Dict

from stignore.core.constants import ConfigKey, ErrorCode, Limits

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class ValidationError(Exception):
    """Base exception for validation errors."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INVALID_INPUT):
        """Initialize ValidationError.

        Args:
            message: Error message
            error_code: Associated error code
        """
        super().__init__(message)
        self.error_code = error_code


def validate_config(config: Dict[str, Any]) -> bool:
    """Validate stignore configuration structure.

    Accepts either the bare section mapping or one wrapped in a top-level
    ``stignore`` key.

    Args:
        config: Configuration dictionary

    Returns:
        True if valid

    Raises:
        ValidationError: If configuration is invalid
    """
    if not isinstance(config, dict):
        raise ValidationError("Configuration must be a dictionary")

    if ConfigKey.ROOT in config:
        config = config[ConfigKey.ROOT]
        if not isinstance(config, dict):
            raise ValidationError(f"'{ConfigKey.ROOT}' section must be a dictionary")

    if ConfigKey.RULES in config:
        validate_rules_config(config[ConfigKey.RULES])

    if ConfigKey.LOGGING in config:
        validate_logging_config(config[ConfigKey.LOGGING])

    return True


def validate_rules_config(rules: Dict[str, Any]) -> bool:
    """Validate rules configuration.

    Args:
        rules: Rules configuration dictionary

    Returns:
        True if valid

    Raises:
        ValidationError: If rules config is invalid
    """
    if not isinstance(rules, dict):
        raise ValidationError("Rules configuration must be a dictionary")

    valid_fields = {ConfigKey.RULES_FILE, ConfigKey.RULES_CACHE, ConfigKey.RULES_CASEFOLD}
    unknown_fields = set(rules.keys()) - valid_fields
    if unknown_fields:
        raise ValidationError(
            f"Unknown rules configuration fields: {', '.join(sorted(unknown_fields))}"
        )

    if ConfigKey.RULES_FILE in rules:
        rule_file = rules[ConfigKey.RULES_FILE]
        if not isinstance(rule_file, str) or not rule_file:
            raise ValidationError(f"Rule file must be a non-empty string: {rule_file!r}")

    for flag in (ConfigKey.RULES_CACHE, ConfigKey.RULES_CASEFOLD):
        if flag in rules and not isinstance(rules[flag], bool):
            raise ValidationError(f"Rules {flag} must be boolean: {rules[flag]}")

    return True


def validate_logging_config(logging_config: Dict[str, Any]) -> bool:
    """Validate logging configuration.

    Args:
        logging_config: Logging configuration dictionary

    Returns:
        True if valid

    Raises:
        ValidationError: If logging config is invalid
    """
    if not isinstance(logging_config, dict):
        raise ValidationError("Logging configuration must be a dictionary")

    if ConfigKey.LOG_LEVEL in logging_config:
        validate_log_level(logging_config[ConfigKey.LOG_LEVEL])

    log_file = logging_config.get(ConfigKey.LOG_FILE)
    if log_file is not None and not isinstance(log_file, str):
        raise ValidationError(f"Log file must be a string: {log_file!r}")

    return True


def validate_log_level(level: str) -> bool:
    """Validate log level name.

    Args:
        level: Level name (case-insensitive)

    Returns:
        True if valid

    Raises:
        ValidationError: If level is unknown
    """
    if not isinstance(level, str) or level.upper() not in VALID_LOG_LEVELS:
        raise ValidationError(
            f"Invalid log level: {level}. Must be one of {sorted(VALID_LOG_LEVELS)}"
        )
    return True


def validate_pattern(pattern: str) -> bool:
    """Validate the raw text of a glob pattern before translation.

    Args:
        pattern: Pattern to validate

    Returns:
        True if valid

    Raises:
        ValidationError: If pattern is invalid
    """
    if not isinstance(pattern, str):
        raise ValidationError(f"Pattern must be string, got {type(pattern)}")

    # Check length
    if len(pattern) > Limits.MAX_PATTERN_LENGTH:
        raise ValidationError(f"Pattern exceeds maximum length ({Limits.MAX_PATTERN_LENGTH})")

    # Check for null bytes
    if "\0" in pattern:
        raise ValidationError("Invalid pattern: contains null bytes")

    # Check for control characters
    if any(ord(c) < 32 or ord(c) == 127 for c in pattern):
        raise ValidationError("Invalid pattern: contains control characters")

    return True
