#!/usr/bin/env python3
"""Command-line interface for stignore.

This module provides the ``stignore`` command:
- ``check``: evaluate paths against a rule file
- ``patterns``: list the compiled predicates of a rule file
- ``init``: write a starter rule file
- Configuration file and environment loading
- Logging setup

Example:
    >>> from stignore.cli import parse_arguments
    >>> args = parse_arguments(["check", "-f", ".stignore", "build/out.o"])
"""

import argparse
import sys
from typing import Dict, Iterable, List, Optional, TextIO

from stignore.core.constants import STIGNORE_VERSION, ConfigKey
from stignore.infrastructure.cache_manager import CacheRegistry
from stignore.infrastructure.config_manager import ConfigError, ConfigManager, ConfigSource
from stignore.infrastructure.logger import Logger, configure_logging
from stignore.rules.engine import Matcher
from stignore.rules.errors import IgnoreError
from stignore.rules.loader import load
from stignore.rules.template import render_rule_file, write_rule_file

DESCRIPTION = "stignore - compile ignore rules and test paths against them"

SELECTED_MARKER = "I"
KEPT_MARKER = "-"


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    pass


def parse_arguments(args: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        args: Argument list to parse (defaults to sys.argv[1:])

    Returns:
        Parsed arguments namespace

    Raises:
        SystemExit: On invalid arguments or --help/--version
    """
    parser = argparse.ArgumentParser(
        prog="stignore",
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Which of these paths are ignored?
  stignore check build/out.o src/main.c

  # Check paths read from stdin, showing the deciding pattern
  find . -type f | sed 's|^\\./||' | stignore check -v -a

  # Show compiled predicates of a rule file
  stignore patterns -f project.stignore

  # Write a starter rule file
  stignore init --minimal
        """,
    )

    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {STIGNORE_VERSION}",
    )

    parser.add_argument(
        "-c",
        "--config",
        metavar="FILE",
        type=str,
        help="Configuration file path (YAML format)",
    )

    # Logging options
    log_group = parser.add_argument_group("logging options")

    log_group.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    log_group.add_argument(
        "--log-file",
        metavar="FILE",
        type=str,
        help="Also write log records to this file",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    rule_file_parent = argparse.ArgumentParser(add_help=False)
    rule_file_parent.add_argument(
        "-f",
        "--file",
        metavar="FILE",
        type=str,
        help="Rule file (default: from configuration, .stignore)",
    )
    rule_file_parent.add_argument(
        "-i",
        "--ignore-case",
        action="store_true",
        default=None,
        help="Compile patterns case-insensitively",
    )

    check = subparsers.add_parser(
        "check",
        parents=[rule_file_parent],
        help="Evaluate paths against the rules",
    )
    check.add_argument(
        "paths",
        metavar="PATH",
        nargs="*",
        help="Relative paths to check (read from stdin when omitted)",
    )
    check.add_argument(
        "-a",
        "--all",
        action="store_true",
        help="Print every path with a marker, not only ignored ones",
    )
    check.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show the predicate deciding each path",
    )
    check.add_argument(
        "--no-cache",
        action="store_true",
        help="Do not cache match results",
    )

    subparsers.add_parser(
        "patterns",
        parents=[rule_file_parent],
        help="List compiled predicates in evaluation order",
    )

    init = subparsers.add_parser("init", help="Write a starter rule file")
    init.add_argument(
        "-f",
        "--file",
        metavar="FILE",
        type=str,
        help="Destination (default: from configuration, .stignore)",
    )
    init.add_argument(
        "--minimal",
        action="store_true",
        help="Only the essential exclusions",
    )
    init.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing file",
    )
    init.add_argument(
        "-p",
        "--pattern",
        metavar="PATTERN",
        action="append",
        dest="extra_patterns",
        help="Additional pattern (can be specified multiple times)",
    )

    return parser.parse_args(args)


def build_config_from_args(args: argparse.Namespace) -> Dict:
    """
    Build configuration overrides from command-line arguments.

    Args:
        args: Parsed arguments namespace

    Returns:
        Configuration dictionary for ConfigManager (CLI_ARGS level)
    """
    rules: Dict = {}
    if getattr(args, "file", None):
        rules[ConfigKey.RULES_FILE] = args.file
    if getattr(args, "ignore_case", None):
        rules[ConfigKey.RULES_CASEFOLD] = True
    if getattr(args, "no_cache", False):
        rules[ConfigKey.RULES_CACHE] = False

    logging_config: Dict = {}
    if args.debug:
        logging_config[ConfigKey.LOG_LEVEL] = "DEBUG"
    if args.log_file:
        logging_config[ConfigKey.LOG_FILE] = args.log_file

    config: Dict = {}
    if rules:
        config[ConfigKey.RULES] = rules
    if logging_config:
        config[ConfigKey.LOGGING] = logging_config
    return config


def load_configuration(args: argparse.Namespace) -> ConfigManager:
    """
    Assemble configuration from defaults, file, environment and arguments.

    Args:
        args: Parsed arguments namespace

    Returns:
        Validated configuration manager

    Raises:
        CLIError: If the configuration cannot be loaded or is invalid
    """
    try:
        config = ConfigManager(args.config, load_standard_files=True)
        config.load_dict(build_config_from_args(args), ConfigSource.CLI_ARGS)
        config.validate()
    except ConfigError as e:
        raise CLIError(str(e))
    return config


def setup_logging(config: ConfigManager) -> Logger:
    """
    Setup logging based on configuration.

    Args:
        config: Configuration manager

    Returns:
        Configured root logger

    Raises:
        CLIError: If the log file cannot be opened
    """
    level = config.get(f"{ConfigKey.ROOT}.{ConfigKey.LOGGING}.{ConfigKey.LOG_LEVEL}", "WARNING")
    log_file = config.get(f"{ConfigKey.ROOT}.{ConfigKey.LOGGING}.{ConfigKey.LOG_FILE}")
    try:
        return configure_logging(level=level, log_file=log_file)
    except OSError as e:
        raise CLIError(f"Cannot open log file {log_file}: {e}")


def _rules_setting(config: ConfigManager, key: str, default=None):
    return config.get(f"{ConfigKey.ROOT}.{ConfigKey.RULES}.{key}", default)


def load_matcher(config: ConfigManager, registry: Optional[CacheRegistry] = None) -> Matcher:
    """
    Load the configured rule file.

    Args:
        config: Configuration manager
        registry: Cache registry to bind to, when caching is enabled

    Returns:
        Matcher for the rule file

    Raises:
        CLIError: If the rules cannot be loaded
    """
    rule_file = _rules_setting(config, ConfigKey.RULES_FILE)
    casefold = _rules_setting(config, ConfigKey.RULES_CASEFOLD, False)
    use_cache = _rules_setting(config, ConfigKey.RULES_CACHE, True)

    try:
        return load(
            rule_file,
            registry=registry if use_cache else None,
            case_sensitive=not casefold,
        )
    except IgnoreError as e:
        raise CLIError(str(e))


def _iter_paths(paths: List[str], stdin: TextIO) -> Iterable[str]:
    if paths:
        yield from paths
        return
    for line in stdin:
        line = line.rstrip("\r\n")
        if line:
            yield line


def run_check(args: argparse.Namespace, matcher: Matcher, out: TextIO, stdin: TextIO) -> int:
    """
    Evaluate paths and print results.

    Returns:
        0 if at least one path is ignored, 1 otherwise
    """
    any_selected = False

    for path in _iter_paths(args.paths, stdin):
        selected = matcher.match(path)
        any_selected = any_selected or selected

        if not selected and not args.all:
            continue

        fields = []
        if args.all:
            fields.append(SELECTED_MARKER if selected else KEPT_MARKER)
        fields.append(path)
        if args.verbose:
            predicate = matcher.explain(path)
            fields.append(predicate.describe() if predicate is not None else "")
        print("\t".join(fields), file=out)

    return 0 if any_selected else 1


def run_patterns(matcher: Matcher, out: TextIO) -> int:
    """Print compiled predicates in evaluation order."""
    for pattern in matcher.patterns():
        print(pattern, file=out)
    return 0


def run_init(args: argparse.Namespace, config: ConfigManager, logger: Logger) -> int:
    """Write a starter rule file."""
    path = _rules_setting(config, ConfigKey.RULES_FILE)
    content = render_rule_file(
        minimal=args.minimal,
        extra_patterns=args.extra_patterns,
        filename=path,
    )
    try:
        write_rule_file(path, content, force=args.force)
    except IgnoreError as e:
        raise CLIError(str(e))
    logger.info("Wrote rule file", path=path)
    return 0


def main(argv: Optional[List[str]] = None, out: TextIO = None, stdin: TextIO = None) -> int:
    """
    Main CLI entry point.

    Args:
        argv: Arguments (defaults to sys.argv[1:])
        out: Output stream (defaults to sys.stdout)
        stdin: Input stream for ``check`` (defaults to sys.stdin)

    Returns:
        Process exit status
    """
    out = out or sys.stdout
    stdin = stdin or sys.stdin

    try:
        args = parse_arguments(argv)
        config = load_configuration(args)
        logger = setup_logging(config)

        if args.command == "init":
            return run_init(args, config, logger)

        matcher = load_matcher(config, CacheRegistry())
        logger.debug("Rules loaded", predicates=len(matcher))

        if args.command == "patterns":
            return run_patterns(matcher, out)
        return run_check(args, matcher, out, stdin)

    except CLIError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
