"""Cursor model and navigation over a two-level result tree.

The cursor is empty, on a file, or on a hit line inside a file. Every move is
total: moving past either end of the tree, or acting on an empty tree, leaves
the cursor unchanged. This module has no rendering concerns.
"""

from __future__ import annotations

import bisect
from dataclasses import dataclass, field, replace

from .search.result import EMPTY_TREE, ResultTree


@dataclass(frozen=True)
class Cursor:
    """Selected file and optional hit line (``line_number`` implies ``file``)."""

    file: str | None = None
    line_number: int | None = None

    def is_empty(self) -> bool:
        return self.file is None

    def is_file_level(self) -> bool:
        return self.file is not None and self.line_number is None

    def is_line_level(self) -> bool:
        return self.file is not None and self.line_number is not None

    def is_file_focused(self, path: str) -> bool:
        return self.is_file_level() and self.file == path

    def is_line_focused(self, path: str, line_number: int) -> bool:
        return self.file == path and self.line_number == line_number


@dataclass
class NavigationEngine:
    tree: ResultTree = EMPTY_TREE
    cursor: Cursor = field(default_factory=Cursor)
    collapsed: set[str] = field(default_factory=set)

    def _file_index(self) -> int | None:
        if self.cursor.file is None:
            return None
        paths = self.tree.paths()
        idx = bisect.bisect_left(paths, self.cursor.file)
        if idx < len(paths) and paths[idx] == self.cursor.file:
            return idx
        return None

    def _adjacent_hit_line(self, step: int) -> int | None:
        """Return the next (``step=1``) or previous (``step=-1``) hit line in the current file."""
        current = self.cursor.line_number
        if current is None:
            return None
        hits = self.tree.hit_line_numbers(self.cursor.file)
        if step > 0:
            idx = bisect.bisect_right(hits, current)
            return hits[idx] if idx < len(hits) else None
        idx = bisect.bisect_left(hits, current) - 1
        return hits[idx] if idx >= 0 else None

    def _move_file(self, step: int) -> None:
        idx = self._file_index()
        if idx is None:
            return
        target = idx + step
        paths = self.tree.paths()
        if 0 <= target < len(paths):
            self.cursor = Cursor(file=paths[target])

    def _move_line(self, step: int) -> None:
        line_number = self._adjacent_hit_line(step)
        if line_number is not None:
            self.cursor = replace(self.cursor, line_number=line_number)
            return

        idx = self._file_index()
        if idx is None:
            return
        paths = self.tree.paths()
        # Walk adjacent files until one has a hit line; at most one pass over the tree.
        for _ in range(len(paths)):
            idx += step
            if not 0 <= idx < len(paths):
                return
            hits = self.tree.hit_line_numbers(paths[idx])
            if hits:
                self.collapsed.discard(paths[idx])
                self.cursor = Cursor(file=paths[idx], line_number=hits[0] if step > 0 else hits[-1])
                return

    def cursor_up(self) -> None:
        if self.cursor.is_line_level():
            self._move_line(-1)
        elif self.cursor.is_file_level():
            self._move_file(-1)

    def cursor_down(self) -> None:
        if self.cursor.is_line_level():
            self._move_line(1)
        elif self.cursor.is_file_level():
            self._move_file(1)

    def cursor_right(self) -> None:
        if not self.cursor.is_file_level():
            return
        hits = self.tree.hit_line_numbers(self.cursor.file)
        if not hits:
            return
        self.collapsed.discard(self.cursor.file)
        self.cursor = Cursor(file=self.cursor.file, line_number=hits[0])

    def cursor_left(self) -> None:
        if self.cursor.is_line_level():
            self.cursor = Cursor(file=self.cursor.file)

    def can_cursor_up(self) -> bool:
        return self._can_move(-1)

    def can_cursor_down(self) -> bool:
        return self._can_move(1)

    def _can_move(self, step: int) -> bool:
        idx = self._file_index()
        if idx is None:
            return False
        paths = self.tree.paths()
        if self.cursor.is_file_level():
            return 0 <= idx + step < len(paths)
        if self._adjacent_hit_line(step) is not None:
            return True
        neighbours = paths[idx + 1 :] if step > 0 else paths[:idx]
        return any(self.tree.hit_line_numbers(path) for path in neighbours)

    def toggle_expansion(self) -> None:
        if not self.cursor.is_file_level():
            return
        path = self.cursor.file
        if path in self.collapsed:
            self.collapsed.discard(path)
        else:
            self.collapsed.add(path)

    def toggle_all_expansion(self) -> None:
        """Collapse every eligible file, or expand all if they are already collapsed.

        At line level the selected file stays expanded and is not eligible.
        """
        eligible = set(self.tree.paths())
        if self.cursor.is_line_level():
            eligible.discard(self.cursor.file)
        if eligible <= self.collapsed:
            self.collapsed.clear()
        else:
            self.collapsed |= eligible

    def is_collapsed(self, path: str) -> bool:
        return path in self.collapsed

    def reset_cursor(self, tree: ResultTree) -> None:
        """Install a new tree and move the cursor to the closest valid entity."""
        self.tree = tree
        paths = tree.paths()
        if not paths:
            self.cursor = Cursor()
            return
        if self.cursor.file is None:
            self.cursor = Cursor(file=paths[0])
            return

        old = self.cursor
        idx = bisect.bisect_left(paths, old.file)
        if idx >= len(paths) or paths[idx] != old.file:
            # Nearest predecessor, else nearest successor.
            self.cursor = Cursor(file=paths[idx - 1] if idx > 0 else paths[idx])
            return

        if old.line_number is None:
            self.cursor = Cursor(file=old.file)
            return
        hits = tree.hit_line_numbers(old.file)
        if not hits:
            self.cursor = Cursor(file=old.file)
            return
        pos = bisect.bisect_right(hits, old.line_number) - 1
        self.cursor = Cursor(file=old.file, line_number=hits[pos] if pos >= 0 else hits[0])
