"""Command header: the ``git grep`` invocation the result tree came from.

Arguments are laid out left to right and wrap to a fixed margin when they do
not fit. While an argument is being edited it is drawn raw and underlined,
and its edit position becomes the hardware cursor.
"""

from __future__ import annotations

import shlex

from ..render import STYLE_BOLD, STYLE_PLAIN, STYLE_UNDERLINE, Canvas, Position, StyledSpan
from ..runtime.state import (
    FOCUS_AND_PATTERN,
    FOCUS_NOT_PATTERN,
    FOCUS_PATH,
    FOCUS_PATTERN,
    FOCUS_REVISION,
    AppState,
)
from ..search.options import MODE_EXTERNAL, flag_args

EDITING_MARKER = "-> "
PROMPT = "$ "


def _command_tokens(state: AppState) -> list[tuple[str, str | None]]:
    """Return ``(text, focus)`` pairs; ``focus`` names the editable argument a token shows."""
    options = state.options
    tokens: list[tuple[str, str | None]] = [("git", None), ("grep", None)]
    tokens.extend((arg, None) for arg in flag_args(options, MODE_EXTERNAL))

    tokens.extend([("-e", None), (options.pattern.text, FOCUS_PATTERN)])
    if options.and_pattern.text or state.focus == FOCUS_AND_PATTERN:
        tokens.extend([("--and", None), ("-e", None), (options.and_pattern.text, FOCUS_AND_PATTERN)])
    if options.not_pattern.text or state.focus == FOCUS_NOT_PATTERN:
        tokens.extend(
            [("--and", None), ("--not", None), ("-e", None), (options.not_pattern.text, FOCUS_NOT_PATTERN)]
        )
    if options.revision.text or state.focus == FOCUS_REVISION:
        tokens.append((options.revision.text, FOCUS_REVISION))
    if options.path.text or state.focus == FOCUS_PATH:
        tokens.extend([("--", None), (options.path.text, FOCUS_PATH)])
    return tokens


class CommandEditor:
    def render(self, canvas: Canvas, state: AppState, max_cols: int) -> Position | None:
        """Draw the command header and return the hardware cursor position while editing."""
        editing = state.is_editing()
        canvas.draw(StyledSpan(EDITING_MARKER if editing else " " * len(EDITING_MARKER), STYLE_BOLD))
        canvas.draw(StyledSpan(PROMPT))
        margin = canvas.cursor.col

        hardware_cursor: Position | None = None
        first = True
        for text, focus in _command_tokens(state):
            is_edited = editing and focus == state.focus
            shown = text if is_edited else shlex.quote(text)
            span = StyledSpan(shown, STYLE_UNDERLINE if is_edited else STYLE_PLAIN)

            separator = 0 if first else 1
            if not first and canvas.cursor.col + separator + span.width > max_cols:
                canvas.newline()
                canvas.set_cursor_col(margin)
                separator = 0
            if separator:
                canvas.draw(StyledSpan(" "))
            first = False

            if is_edited:
                arg = state.editing_arg()
                col = canvas.cursor.col + (arg.cursor_cols() if arg is not None else 0)
                hardware_cursor = Position(canvas.cursor.row, min(col, max(0, max_cols - 1)))
            canvas.draw(span)

        canvas.newline()
        return hardware_cursor
