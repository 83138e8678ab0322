"""Render the file -> line result tree onto a canvas.

The renderer is the only place that knows the absolute row of the selection,
so it also owns viewport tracking: a selection drawn below the frame scrolls
the canvas and is recentered, while a selection above the frame produces a
recentering request the caller applies by rendering again.
"""

from __future__ import annotations

from collections.abc import Callable

from ..navigation import NavigationEngine
from ..render import (
    STYLE_BOLD,
    STYLE_DIM,
    STYLE_PLAIN,
    STYLE_REVERSE,
    STYLE_UNDERLINE,
    Canvas,
    Position,
    StyledSpan,
)
from ..search.result import ResultLine, ResultTree

FILE_MARKER = "-> "
LINE_MARKER = "---> "
TAB_SPACES = "    "
COLLAPSED_SUFFIX = "…"


def _expand_tabs(text: str) -> str:
    return text.replace("\t", TAB_SPACES)


def _context_lines(tree: ResultTree, path: str, line_number: int, count: int, step: int) -> list[ResultLine]:
    """Collect up to ``count`` consecutive non-hit lines next to ``line_number``."""
    out: list[ResultLine] = []
    number = line_number + step
    while len(out) < count and number > 0:
        line = tree.line(path, number)
        if line is None or line.is_hit:
            break
        out.append(line)
        number += step
    if step < 0:
        out.reverse()
    return out


class TreeRenderer:
    """Draw a ``ResultTree`` with its cursor, collapse state, and highlights."""

    def __init__(self, context_lines: int = 0, focused: bool = True) -> None:
        self.context_lines = max(0, context_lines)
        self.focused = focused
        self.selection_row: int | None = None
        self._tracking = False
        self._initial_offset = 0

    def render(self, canvas: Canvas, navigation: NavigationEngine, error: str | None = None) -> int | None:
        """Draw the result area and return a new viewport top if recentering is needed."""
        self.selection_row = None
        self._tracking = False
        tree = navigation.tree
        if error is not None:
            self._render_error(canvas, error)
            # The error is drawn from the top; a scrolled viewport would hide it.
            return 0 if canvas.row_offset > 0 else None

        self._render_header(canvas, tree)
        self._tracking = self.focused and not navigation.cursor.is_empty()
        self._initial_offset = canvas.row_offset
        # Rows before the selection follow the canvas down until it is drawn.
        canvas.set_auto_scroll(self._tracking)
        for path in tree.paths():
            if self._is_done(canvas):
                break
            self._render_file(canvas, navigation, path)
        canvas.set_auto_scroll(False)

        if self._tracking and self.selection_row is not None and self.selection_row < canvas.row_offset:
            return max(0, self.selection_row - canvas.frame_size.rows // 2)
        return None

    def _is_done(self, canvas: Canvas) -> bool:
        """Stop once the frame is full, unless the selection is still ahead."""
        if not canvas.is_frame_exceeded():
            return False
        return not self._tracking or self.selection_row is not None

    def _render_error(self, canvas: Canvas, error: str) -> None:
        canvas.drawln(StyledSpan("[ERROR]", STYLE_BOLD))
        for line in error.splitlines():
            if canvas.is_frame_exceeded():
                return
            canvas.drawln(StyledSpan(line))

    def _render_header(self, canvas: Canvas, tree: ResultTree) -> None:
        style = STYLE_BOLD if self.focused else STYLE_PLAIN
        canvas.drawln(StyledSpan(f"[RESULT]: {tree.hit_lines()} lines, {tree.hit_files()} files", style))

    def _render_selected(self, canvas: Canvas, draw: Callable[[], None]) -> None:
        """Draw the selection block, scrolling it into view and recentering once."""
        start_row = canvas.cursor.row
        self.selection_row = start_row
        if not self.focused or start_row < canvas.row_offset:
            canvas.set_auto_scroll(False)
            draw()
            return

        canvas.set_auto_scroll(True)
        draw()
        canvas.set_auto_scroll(False)
        if canvas.row_offset != self._initial_offset:
            frame_row = self.selection_row - canvas.row_offset
            canvas.scroll(frame_row - canvas.frame_size.rows // 2)

    def _render_file(self, canvas: Canvas, navigation: NavigationEngine, path: str) -> None:
        cursor = navigation.cursor
        if cursor.is_file_focused(path):
            self._render_selected(canvas, lambda: self._render_file_row(canvas, navigation, path))
        else:
            self._render_file_row(canvas, navigation, path)

        if navigation.is_collapsed(path):
            return

        tree = navigation.tree
        lines = tree.lines(path)
        number_width = len(str(lines[-1].number)) if lines else 1
        for line in lines:
            if not line.is_hit:
                continue
            if cursor.is_line_focused(path, line.number):
                self._render_selected(
                    canvas,
                    lambda line=line: self._render_focused_line(canvas, tree, path, line, number_width),
                )
                continue
            if self._is_done(canvas):
                return
            self._render_line(canvas, tree, path, line, number_width, focused=False)

    def _render_file_row(self, canvas: Canvas, navigation: NavigationEngine, path: str) -> None:
        tree = navigation.tree
        marker = FILE_MARKER if self.focused and navigation.cursor.is_file_focused(path) else " " * len(FILE_MARKER)
        canvas.draw(StyledSpan(marker))
        canvas.draw(StyledSpan(path, STYLE_UNDERLINE))
        canvas.draw(
            StyledSpan(f" ({tree.hit_strings_in_file(path)} hits, {tree.hit_lines_in_file(path)} lines)")
        )
        if navigation.is_collapsed(path):
            canvas.draw(StyledSpan(COLLAPSED_SUFFIX))
        canvas.newline()

    def _render_focused_line(
        self,
        canvas: Canvas,
        tree: ResultTree,
        path: str,
        line: ResultLine,
        number_width: int,
    ) -> None:
        if self.context_lines > 0:
            canvas.newline()
        for context in _context_lines(tree, path, line.number, self.context_lines, -1):
            self._render_context_line(canvas, context, number_width)
        self.selection_row = canvas.cursor.row
        self._render_line(canvas, tree, path, line, number_width, focused=True)
        for context in _context_lines(tree, path, line.number, self.context_lines, 1):
            self._render_context_line(canvas, context, number_width)
        if self.context_lines > 0:
            canvas.newline()

    def _render_context_line(self, canvas: Canvas, line: ResultLine, number_width: int) -> None:
        canvas.draw(StyledSpan(" " * len(LINE_MARKER)))
        canvas.draw(StyledSpan(f"{line.number:>{number_width}}|", STYLE_DIM))
        canvas.drawln(StyledSpan(_expand_tabs(line.text), STYLE_DIM))

    def _render_line(
        self,
        canvas: Canvas,
        tree: ResultTree,
        path: str,
        line: ResultLine,
        number_width: int,
        focused: bool,
    ) -> None:
        canvas.draw(StyledSpan(LINE_MARKER if focused and self.focused else " " * len(LINE_MARKER)))
        canvas.draw(StyledSpan(f"{line.number:>{number_width}}|"))

        row = canvas.cursor.row
        text_col = canvas.cursor.col
        text = _expand_tabs(line.text)
        canvas.draw(StyledSpan(text))

        offset = 0
        for matched in tree.highlights_for(path, line.number):
            matched = _expand_tabs(matched)
            idx = text.find(matched, offset) if matched else -1
            if idx < 0:
                continue
            col = text_col + StyledSpan(text[:idx]).width
            canvas.draw_at(Position(row, col), StyledSpan(matched, STYLE_REVERSE))
            offset = idx + len(matched)
        canvas.newline()
