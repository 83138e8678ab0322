"""Terminal control and frame output for the TUI session.

Owns the raw-mode lifecycle and alternate-screen switching, and writes frames
by sending only the rows that changed since the previous frame.
"""

from __future__ import annotations

import contextlib
import os
import shutil
import termios
import tty

from ..input.reader import read_key
from ..render import (
    EMPTY_SIZE,
    STYLE_BOLD,
    STYLE_DIM,
    STYLE_REVERSE,
    STYLE_UNDERLINE,
    Frame,
    Position,
    Row,
    TerminalSize,
)

RESIZE_EVENT = "RESIZE"
INPUT_POLL_MS = 1000

_STYLE_SGR: tuple[tuple[int, str], ...] = (
    (STYLE_BOLD, "1"),
    (STYLE_DIM, "2"),
    (STYLE_UNDERLINE, "4"),
    (STYLE_REVERSE, "7"),
)


def style_sgr(style: int) -> str:
    """Return the SGR sequence selecting ``style`` from a reset state."""
    params = [code for flag, code in _STYLE_SGR if style & flag]
    return f"\033[0;{';'.join(params)}m" if params else "\033[0m"


def encode_row(index: int, row: Row) -> str:
    """Encode one row as move-to-line, clear-line, styled text, reset."""
    out = [f"\033[{index + 1};1H\033[2K"]
    for span in row.spans:
        out.append(style_sgr(span.style))
        out.append(span.text)
    out.append("\033[0m")
    return "".join(out)


def current_terminal_size() -> TerminalSize:
    term = shutil.get_terminal_size((80, 24))
    return TerminalSize(rows=term.lines, cols=term.columns)


class TerminalController:
    """Manage terminal mode transitions and diffed frame output."""

    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        """Capture tty state and bind stdin/stdout file descriptors."""
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self._saved_tty_state = termios.tcgetattr(stdin_fd)
        self._prev = Frame(EMPTY_SIZE)
        self._last_size = current_terminal_size()

    def size(self) -> TerminalSize:
        return self._last_size

    def enable_tui_mode(self) -> None:
        """Enter raw alternate-screen mode with the cursor hidden."""
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        os.write(self.stdout_fd, b"\x1b[?1049h\x1b[?25l")

    def disable_tui_mode(self) -> None:
        """Show the cursor, restore the main screen buffer and tty state."""
        os.write(self.stdout_fd, b"\x1b[0m\x1b[?25h\x1b[?1049l")
        termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)

    @contextlib.contextmanager
    def raw_mode(self):
        """Context manager that brackets code with TUI enter/exit calls."""
        try:
            self.enable_tui_mode()
            yield
        finally:
            self.disable_tui_mode()

    def next_event(self) -> str:
        """Block until a key is pressed or the terminal is resized."""
        while True:
            size = current_terminal_size()
            if size != self._last_size:
                self._last_size = size
                return RESIZE_EVENT
            key = read_key(self.stdin_fd, INPUT_POLL_MS)
            if key:
                return key

    def draw_frame(self, frame: Frame, cursor: Position | None = None) -> None:
        """Write the rows of ``frame`` that changed, then place or hide the cursor.

        A frame of a different size than the previous one is redrawn from a
        cleared screen.
        """
        out: list[str] = []
        if frame.size != self._prev.size:
            out.append("\033[0m\033[2J")
            self._prev = Frame(EMPTY_SIZE)
        for index, row in frame.diff(self._prev):
            out.append(encode_row(index, row))
        if cursor is None:
            out.append("\033[?25l")
        else:
            out.append(f"\033[{cursor.row + 1};{cursor.col + 1}H\033[?25h")
        os.write(self.stdout_fd, "".join(out).encode("utf-8", errors="replace"))
        self._prev = frame
