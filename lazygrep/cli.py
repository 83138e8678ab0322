"""Command-line front door for lazygrep.

Parses CLI options into initial grep options, configures file logging, and
checks that the working directory is inside a git work tree. Then dispatches
into the interactive application runtime.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from .runtime import run_app
from .runtime import config
from .runtime.terminal import TerminalController
from .search import GrepOptions, is_git_available

LOG_FILE_ENV = "LAZYGREP_LOG_FILE"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

logger = logging.getLogger(__name__)


def _non_negative_int(value: str) -> int:
    """argparse type for non-negative integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError("value must be >= 0")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lazygrep",
        description="Browse `git grep` results interactively in the terminal.",
    )
    parser.add_argument("pattern", nargs="?", default="", help="Initial search pattern.")
    parser.add_argument("-a", "--and-pattern", default="", help="Lines must also match this pattern.")
    parser.add_argument("-n", "--not-pattern", default="", help="Lines must not match this pattern.")
    parser.add_argument("-r", "--revision", default="", help="Search this revision instead of the work tree.")
    parser.add_argument("-p", "--path", default="", help="Limit the search to this pathspec.")
    parser.add_argument(
        "-C",
        "--context",
        type=_non_negative_int,
        default=None,
        help="Context lines around the selected hit (default: saved setting).",
    )
    parser.add_argument("-i", "--ignore-case", action="store_true", help="Ignore case when matching.")
    parser.add_argument(
        "--log-file",
        default=None,
        help=f"Write debug logs to this file (default: ${LOG_FILE_ENV}).",
    )
    return parser


def options_from_args(args: argparse.Namespace) -> GrepOptions:
    """Build initial grep options from parsed CLI arguments."""
    context_lines = args.context if args.context is not None else config.load_context_lines()
    options = GrepOptions(ignore_case=args.ignore_case, context_lines=context_lines)
    options.pattern.set_text(args.pattern)
    options.and_pattern.set_text(args.and_pattern)
    options.not_pattern.set_text(args.not_pattern)
    options.revision.set_text(args.revision)
    options.path.set_text(args.path)
    return options


def configure_logging(log_file: str | None) -> logging.Handler:
    """Attach a handler to the package logger.

    The terminal belongs to the UI, so logs only ever go to a file; without one
    a ``NullHandler`` keeps records from reaching the last-resort stderr handler.
    """
    package_logger = logging.getLogger("lazygrep")
    handler: logging.Handler
    if log_file:
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        package_logger.setLevel(logging.DEBUG)
    else:
        handler = logging.NullHandler()
    package_logger.addHandler(handler)
    return handler


def main(argv: list[str] | None = None, cwd: Path | None = None) -> None:
    """Parse CLI arguments and launch the interactive grep browser.

    ``cwd`` is primarily for tests; when omitted the current working directory
    is searched.
    """
    args = build_parser().parse_args(argv)
    configure_logging(args.log_file or os.environ.get(LOG_FILE_ENV))

    if cwd is None:
        cwd = Path.cwd()
    if not is_git_available(cwd):
        raise SystemExit(f"Not inside a git work tree (or git is unavailable): {cwd}")

    options = options_from_args(args)
    logger.info("starting in %s with pattern %r", cwd, options.pattern.text)
    terminal = TerminalController(sys.stdin.fileno(), sys.stdout.fileno())
    run_app(options, terminal, cwd=cwd)


if __name__ == "__main__":
    main()
