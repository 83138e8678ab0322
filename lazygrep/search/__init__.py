"""Search package exports: query options, result tree, and the git runner."""

from __future__ import annotations

from .grep import SearchFailure, is_git_available, run_git, search
from .options import (
    ARG_FIELDS,
    MAX_CONTEXT_LINES,
    MIN_CONTEXT_LINES,
    MODE_EXTERNAL,
    MODE_HIGHLIGHT,
    MODE_TEXT,
    GrepArg,
    GrepOptions,
    build_grep_args,
    clamp_context_lines,
    flag_args,
)
from .result import EMPTY_TREE, ResultLine, ResultTree, build_result_tree

__all__ = [
    "SearchFailure",
    "is_git_available",
    "run_git",
    "search",
    "ARG_FIELDS",
    "MAX_CONTEXT_LINES",
    "MIN_CONTEXT_LINES",
    "GrepArg",
    "MODE_EXTERNAL",
    "MODE_HIGHLIGHT",
    "MODE_TEXT",
    "GrepOptions",
    "build_grep_args",
    "clamp_context_lines",
    "flag_args",
    "EMPTY_TREE",
    "ResultLine",
    "ResultTree",
    "build_result_tree",
]
