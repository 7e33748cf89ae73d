"""stignore Infrastructure Layer.

This layer provides services used by the rule engine and the CLI:
- ConfigManager: Hierarchical configuration (YAML files, environment)
- ResultCache / CacheRegistry: Match-result caching across reloads
- Logger: Structured logging system
"""

from .cache_manager import CacheRegistry, ResultCache
from .config_manager import ConfigError, ConfigManager, ConfigSource
from .logger import Logger, LogLevel, configure_logging, get_logger

__all__ = [
    # Logger exports
    "Logger",
    "LogLevel",
    "configure_logging",
    "get_logger",
    # Cache exports
    "ResultCache",
    "CacheRegistry",
    # ConfigManager exports
    "ConfigSource",
    "ConfigError",
    "ConfigManager",
]
