"""Fixed-size grid of rows with minimal-redraw diffing."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from .row import Row


@dataclass(frozen=True)
class TerminalSize:
    rows: int
    cols: int

    def is_empty(self) -> bool:
        return self.rows <= 0 or self.cols <= 0


EMPTY_SIZE = TerminalSize(0, 0)


@dataclass
class Frame:
    size: TerminalSize
    lines: list[Row] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.lines:
            self.lines = [Row() for _ in range(max(0, self.size.rows))]

    def text_lines(self) -> list[str]:
        return [line.text() for line in self.lines]

    def diff(self, prev: Frame) -> Iterator[tuple[int, Row]]:
        """Yield ``(row_index, row)`` for each row that must be redrawn.

        A row is dirty when it differs from ``prev`` at the same index, or
        when ``prev`` has no row at that index.
        """
        prev_count = len(prev.lines)
        for idx, line in enumerate(self.lines):
            if idx >= prev_count or line != prev.lines[idx]:
                yield idx, line
