"""Key legend panel drawn over the right edge of the frame.

The panel is positioned with the canvas column offset so its rows overwrite
whatever the result tree drew underneath. Contents follow the focus: editing
keys while an argument is edited, navigation keys and ``git grep`` flags
otherwise.
"""

from __future__ import annotations

from ..render import STYLE_BOLD, Canvas, Position, StyledSpan, TerminalSize
from ..runtime.state import AppState

LEGEND_COLS = len("+-------(H)ide--------")
MIN_TERMINAL_COLS = LEGEND_COLS + 10
HIDDEN_TAB_COLS = len("+- s(H)ow -")

EDITING_LEGEND_LINES: tuple[str, ...] = (
    "| quit       [ESC,C-c]",
    "|                     ",
    "| search       [ENTER]",
    "| preview        [TAB]",
    "| cancel         [C-g]",
    "|                     ",
    "| (BACKSPACE)    [C-h]",
    "| (DELETE)       [C-d]",
    "| (←)            [C-b]",
    "| (→)            [C-f]",
    "| go to head     [C-a]",
    "| go to tail     [C-e]",
    "| delete to end  [C-k]",
    "| clear          [C-u]",
)

FLAG_LEGEND_LINES: tuple[tuple[str, str], ...] = (
    ("ignore_case", " --(i)gnore-case    "),
    ("untracked", " --(u)ntracked      "),
    ("no_index", " --no-(I)ndex       "),
    ("no_recursive", " --no-(R)ecursive   "),
    ("word_regexp", " --(w)ord-regexp    "),
    ("fixed_strings", " --(F)ixed-strings  "),
    ("extended_regexp", " --(E)xtended-regexp"),
    ("perl_regexp", " --(P)erl-regexp    "),
)


def remaining_cols(size: TerminalSize, hidden: bool) -> int:
    """Return the columns left of the legend panel."""
    if hidden or size.cols < MIN_TERMINAL_COLS:
        return size.cols
    return size.cols - LEGEND_COLS


class Legend:
    def render(self, canvas: Canvas, state: AppState) -> None:
        size = canvas.frame_size
        if size.cols < MIN_TERMINAL_COLS:
            return

        canvas.set_cursor(Position(canvas.row_offset, 0))
        if state.legend_hidden:
            canvas.set_col_offset(size.cols - HIDDEN_TAB_COLS)
            label = "+----------" if state.is_editing() else "+- s(H)ow -"
            canvas.drawln(StyledSpan(label))
            return

        canvas.set_col_offset(size.cols - LEGEND_COLS)
        if state.is_editing():
            self._render_editing(canvas)
        else:
            self._render_search_result(canvas, state)

    def _render_section(self, canvas: Canvas, title: str) -> None:
        canvas.draw(StyledSpan("|"))
        canvas.drawln(StyledSpan(f"{title:<{LEGEND_COLS - 1}}", STYLE_BOLD))

    def _render_editing(self, canvas: Canvas) -> None:
        self._render_section(canvas, "[ACTIONS]")
        for line in EDITING_LEGEND_LINES:
            canvas.drawln(StyledSpan(line))
        canvas.drawln(StyledSpan("+" + "-" * (LEGEND_COLS - 1)))

    def _render_search_result(self, canvas: Canvas, state: AppState) -> None:
        navigation = state.navigation
        cursor = navigation.cursor
        options = state.options

        lines: list[str] = [
            "| (q)uit     [ESC,C-c]",
            "|                     ",
            "| (e)dit pattern   [/]",
            "| edit (a)nd pattern  ",
            "| edit (n)ot pattern  ",
            "| edit (r)evision     ",
            "| edit (p)ath         ",
            "|                     ",
        ]
        if cursor.is_file_level():
            lines.append("| (t)oggle file  [TAB]")
            lines.append("| (T)oggle all files  ")
        elif cursor.is_line_level():
            lines.append("| (T)oggle other files")
        if navigation.can_cursor_up():
            lines.append("| (↑)          [k,C-p]")
        if navigation.can_cursor_down():
            lines.append("| (↓)          [j,C-n]")
        if cursor.is_line_level():
            lines.append("| (←)          [h,C-b]")
        if cursor.is_file_level():
            lines.append("| (→)          [l,C-f]")
        if cursor.is_line_level():
            lines.append("| (+|-) context lines ")
            lines.append(f"|{f'({options.context_lines})':>{LEGEND_COLS - 1}}")
        elif not navigation.tree.is_empty():
            lines.append("|                     ")

        self._render_section(canvas, "[ACTIONS]")
        for line in lines:
            canvas.drawln(StyledSpan(line))

        self._render_section(canvas, "[GIT GREP FLAGS]")
        for flag, label in FLAG_LEGEND_LINES:
            if not options.can_flip(flag):
                continue
            mark = "o" if getattr(options, flag) else " "
            canvas.drawln(StyledSpan(f"|{mark}{label}"))
        canvas.drawln(StyledSpan("+-------(H)ide--------"))
