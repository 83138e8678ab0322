"""Mutable drawing surface over one ``Frame``.

The canvas addresses rows in absolute document coordinates. ``row_offset``
is the first absolute row inside the frame: rows above it were scrolled past
and writes to them are dropped, while writes below the frame either scroll
the window (auto-scroll) or are clipped.
"""

from __future__ import annotations

from dataclasses import dataclass

from .frame import Frame, TerminalSize
from .row import Row
from .span import StyledSpan


@dataclass(frozen=True)
class Position:
    row: int = 0
    col: int = 0


class Canvas:
    def __init__(self, size: TerminalSize, row_offset: int = 0) -> None:
        self.frame = Frame(size)
        self.cursor = Position()
        self.col_offset = 0
        self.row_offset = max(0, row_offset)
        self.auto_scroll = False

    @property
    def frame_size(self) -> TerminalSize:
        return self.frame.size

    def is_frame_exceeded(self) -> bool:
        """Return whether the draw cursor is past the frame with no way to scroll."""
        if self.auto_scroll:
            return False
        return max(0, self.cursor.row - self.row_offset) >= self.frame.size.rows

    def set_cursor(self, position: Position) -> None:
        self.cursor = position

    def set_cursor_col(self, col: int) -> None:
        self.cursor = Position(self.cursor.row, col)

    def set_col_offset(self, offset: int) -> None:
        self.col_offset = max(0, offset)

    def set_auto_scroll(self, enabled: bool) -> None:
        self.auto_scroll = enabled

    def draw(self, span: StyledSpan) -> None:
        """Write ``span`` at the draw cursor and advance past it."""
        self.draw_at(self.cursor, span)
        self.cursor = Position(self.cursor.row, self.cursor.col + span.width)

    def drawln(self, span: StyledSpan) -> None:
        self.draw(span)
        self.newline()

    def newline(self) -> None:
        self.cursor = Position(self.cursor.row + 1, 0)

    def draw_at(self, position: Position, span: StyledSpan) -> None:
        """Write ``span`` at an absolute position, clipping or scrolling as needed."""
        rows = self.frame.size.rows
        if rows <= 0 or position.row < self.row_offset:
            return

        overflow = position.row - self.row_offset - rows
        if overflow >= 0:
            if not self.auto_scroll:
                return
            self.scroll(overflow + 1)

        line = self.frame.lines[position.row - self.row_offset]
        line.draw(position.col + self.col_offset, span)
        line.truncate(self.frame.size.cols)

    def scroll(self, n: int) -> None:
        """Evict the top ``n`` rows and append blank rows at the bottom."""
        if n <= 0:
            return
        lines = self.frame.lines
        del lines[:n]
        lines.extend(Row() for _ in range(self.frame.size.rows - len(lines)))
        self.row_offset += n

    def into_frame(self) -> Frame:
        return self.frame
