"""Command-line entry point for fluentmock-gen."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .codegen import __version__
from .codegen.cli_integration import create_generate_subparser, create_inspect_subparser
from .logging_config import configure_logging, get_logger

logger = get_logger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level argument parser with its subcommands."""
    parser = argparse.ArgumentParser(
        prog="fluentmock-gen",
        description="Generate Moq-backed fluent builders for C# interfaces",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        type=str.upper,
        default="WARNING",
        help="Logging verbosity (default: WARNING)",
    )
    parser.add_argument(
        "-v",
        dest="debug",
        action="store_true",
        help="Shorthand for --log-level DEBUG",
    )
    parser.add_argument("--log-file", type=Path, help="Also write log records to this file")

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    create_generate_subparser(subparsers)
    create_inspect_subparser(subparsers)
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the CLI and return its exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    level = logging.DEBUG if args.debug else args.log_level
    configure_logging(level=level, log_file=args.log_file)
    logger.debug("Parsed arguments: %s", args)

    if not getattr(args, "func", None):
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
