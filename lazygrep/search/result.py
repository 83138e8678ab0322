"""Search result tree built from ``git grep -z`` output.

Every record starts with the file name, printed verbatim and ended by a NUL.
The text pass yields hit lines (``N:text``) and context lines (``N-text``);
the highlight pass (``-o``) yields one ``N:match`` record per matched
substring. Both are folded into an immutable ``ResultTree`` ordered by path,
then by line number.
"""

from __future__ import annotations

import re
from collections.abc import Container, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

_ENTRY_RE = re.compile(r"^(\d+)([:\0-])(.*)$", re.DOTALL)
GROUP_SEPARATOR = "--"


@dataclass(frozen=True)
class ResultLine:
    number: int  # 1-based
    text: str
    is_hit: bool


@dataclass(frozen=True)
class ResultTree:
    files: Mapping[str, tuple[ResultLine, ...]] = field(default_factory=dict)
    highlights: Mapping[tuple[str, int], tuple[str, ...]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        ordered = {
            path: tuple(sorted(lines, key=lambda line: line.number))
            for path, lines in sorted(self.files.items())
        }
        object.__setattr__(self, "files", MappingProxyType(ordered))
        object.__setattr__(self, "highlights", MappingProxyType(dict(self.highlights)))
        object.__setattr__(self, "_paths", tuple(ordered))

    def is_empty(self) -> bool:
        return not self.files

    def paths(self) -> tuple[str, ...]:
        return self._paths

    def lines(self, path: str) -> tuple[ResultLine, ...]:
        return self.files.get(path, ())

    def hit_line_numbers(self, path: str) -> list[int]:
        return [line.number for line in self.lines(path) if line.is_hit]

    def line(self, path: str, number: int) -> ResultLine | None:
        for line in self.lines(path):
            if line.number == number:
                return line
        return None

    def highlights_for(self, path: str, number: int) -> tuple[str, ...]:
        return self.highlights.get((path, number), ())

    def hit_lines(self) -> int:
        return sum(self.hit_lines_in_file(path) for path in self._paths)

    def hit_files(self) -> int:
        return len(self._paths)

    def hit_lines_in_file(self, path: str) -> int:
        return len(self.hit_line_numbers(path))

    def hit_strings_in_file(self, path: str) -> int:
        return sum(len(self.highlights_for(path, number)) for number in self.hit_line_numbers(path))


def _strip_revision(path: str, revision: str) -> str:
    """Strip the ``REV:`` prefix git adds to file names when grepping a revision."""
    prefix = f"{revision}:"
    if revision and path.startswith(prefix):
        return path[len(prefix) :]
    return path


def _iter_entries(output: str, revision: str) -> Iterator[tuple[str, int, bool | None, str]]:
    """Yield ``(path, number, is_hit, text)`` for every ``-z`` record.

    The file name is everything before the first NUL, so it may contain
    digits, colons or even newlines. Depending on the git version the line
    number is followed by ``:``/``-`` or by another NUL; in the latter case
    ``is_hit`` is ``None``.
    """
    pending = ""
    for raw in output.split("\n"):
        if not pending and raw in ("", GROUP_SEPARATOR):
            continue
        record = pending + raw
        path, sep, entry = record.partition("\0")
        if not sep:
            # file name with a newline in it
            pending = record + "\n"
            continue
        pending = ""
        match = _ENTRY_RE.match(entry)
        if match is None:
            continue
        sign = match.group(2)
        yield (
            _strip_revision(path, revision),
            int(match.group(1)),
            None if sign == "\0" else sign == ":",
            match.group(3).rstrip("\r"),
        )


def parse_text_output(
    output: str,
    revision: str = "",
    hits: Container[tuple[str, int]] | None = None,
) -> dict[str, list[ResultLine]]:
    """Parse the text pass into ``path -> lines``.

    Entries without a hit/context sign are hits when ``(path, number)`` is in
    ``hits``, or unconditionally when ``hits`` is ``None``. A line reported
    both as context and as a hit (overlapping context groups) keeps its hit
    flag.
    """
    by_number: dict[str, dict[int, ResultLine]] = {}
    for path, number, is_hit, text in _iter_entries(output, revision):
        if number <= 0:
            continue
        if is_hit is None:
            is_hit = hits is None or (path, number) in hits
        lines = by_number.setdefault(path, {})
        existing = lines.get(number)
        if existing is not None and existing.is_hit:
            continue
        lines[number] = ResultLine(number=number, text=text, is_hit=is_hit)
    return {path: list(lines.values()) for path, lines in by_number.items()}


def parse_highlight_output(output: str, revision: str = "") -> dict[tuple[str, int], list[str]]:
    """Parse the ``-o`` pass into ``(path, line) -> matched substrings`` in output order."""
    highlights: dict[tuple[str, int], list[str]] = {}
    for path, number, is_hit, text in _iter_entries(output, revision):
        if is_hit is False or not text:
            continue
        highlights.setdefault((path, number), []).append(text)
    return highlights


def build_result_tree(
    text_output: str,
    highlight_output: str,
    revision: str = "",
    with_context: bool = True,
) -> ResultTree:
    """Join both passes; with context lines, unsigned entries are hits only if highlighted."""
    highlights = parse_highlight_output(highlight_output, revision)
    files = parse_text_output(text_output, revision, set(highlights) if with_context else None)
    return ResultTree(
        files=files,
        highlights={key: tuple(matches) for key, matches in highlights.items() if key[0] in files},
    )


EMPTY_TREE = ResultTree()
