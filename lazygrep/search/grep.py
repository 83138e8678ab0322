"""Run ``git grep`` and assemble a ``ResultTree``.

Each search is two independent ``git grep`` invocations (text pass and
highlight pass) that run on a two-worker thread pool and are joined before
the tree is built. Failures surface as ``SearchFailure``.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from .options import MODE_HIGHLIGHT, MODE_TEXT, GrepOptions, build_grep_args
from .result import EMPTY_TREE, ResultTree, build_result_tree

logger = logging.getLogger(__name__)


class SearchFailure(Exception):
    """A search that could not produce results; ``message`` is shown to the user."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


def _format_command(args: list[str]) -> str:
    return "$ git " + " ".join(shlex.quote(arg) for arg in args)


def run_git(args: list[str], cwd: Path | None = None) -> str:
    """Run ``git`` with ``args`` and return stdout.

    Exit status 1 with nothing on stderr is how ``git grep`` reports "no
    matches" and yields an empty string.
    """
    logger.debug("running %s", _format_command(args))
    try:
        proc = subprocess.run(
            ["git", *args],
            cwd=cwd,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
        )
    except OSError as exc:
        raise SearchFailure(f"Failed to execute `{_format_command(args)}`: {exc}") from exc

    if proc.returncode == 0:
        return proc.stdout
    stderr_text = (proc.stderr or "").strip()
    if proc.returncode == 1 and not stderr_text:
        return ""
    raise SearchFailure(f"Failed to execute `{_format_command(args)}`:\n{stderr_text}")


def search(options: GrepOptions, cwd: Path | None = None) -> ResultTree:
    """Run the text and highlight passes concurrently and join their output."""
    if not options.pattern.text:
        return EMPTY_TREE

    text_args = build_grep_args(options, MODE_TEXT)
    highlight_args = build_grep_args(options, MODE_HIGHLIGHT)
    with ThreadPoolExecutor(max_workers=2, thread_name_prefix="lazygrep-search") as executor:
        text_future = executor.submit(run_git, text_args, cwd)
        highlight_future = executor.submit(run_git, highlight_args, cwd)
        # Both workers finish before the executor exits; the first failure wins.
        text_output = text_future.result()
        highlight_output = highlight_future.result()

    tree = build_result_tree(
        text_output, highlight_output, options.revision.text, options.context_lines > 0
    )
    logger.debug("search found %d lines in %d files", tree.hit_lines(), tree.hit_files())
    return tree


def is_git_available(cwd: Path | None = None) -> bool:
    """Return whether ``git`` runs and ``cwd`` is inside a work tree."""
    try:
        output = run_git(["rev-parse", "--is-inside-work-tree"], cwd)
    except SearchFailure as exc:
        logger.debug("git unavailable: %s", exc.message)
        return False
    return output.strip() == "true"
