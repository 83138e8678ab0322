"""Interactive application: event loop, action handling, and frame composition.

The loop is single-threaded: wait for one terminal event, handle it to
completion (possibly re-running the search), render, repeat.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from pathlib import Path

from ..input.keys import (
    MODE_EDITING,
    MODE_SEARCH_RESULT,
    KeyComboRegistry,
    build_registry,
    is_printable_key,
    merge_bindings,
)
from ..render import Canvas, Frame, Position, TerminalSize
from ..search.grep import SearchFailure, search
from ..search.options import MAX_CONTEXT_LINES, MIN_CONTEXT_LINES, GrepOptions
from ..search.result import ResultTree
from ..widgets import CommandEditor, Legend, TreeRenderer, remaining_cols
from . import config
from .state import (
    FOCUS_AND_PATTERN,
    FOCUS_NOT_PATTERN,
    FOCUS_PATH,
    FOCUS_PATTERN,
    FOCUS_REVISION,
    FOCUS_SEARCH_RESULT,
    AppState,
)
from .terminal import RESIZE_EVENT, TerminalController

logger = logging.getLogger(__name__)

SearchFunction = Callable[[GrepOptions, "Path | None"], ResultTree]

_EDIT_FOCUS_ACTIONS: dict[str, str] = {
    "edit-pattern": FOCUS_PATTERN,
    "edit-and-pattern": FOCUS_AND_PATTERN,
    "edit-not-pattern": FOCUS_NOT_PATTERN,
    "edit-revision": FOCUS_REVISION,
    "edit-path": FOCUS_PATH,
}

_FLIP_ACTIONS: dict[str, str] = {
    "flip-ignore-case": "ignore_case",
    "flip-untracked": "untracked",
    "flip-no-index": "no_index",
    "flip-no-recursive": "no_recursive",
    "flip-word-regexp": "word_regexp",
    "flip-fixed-strings": "fixed_strings",
    "flip-extended-regexp": "extended_regexp",
    "flip-perl-regexp": "perl_regexp",
}

_ARG_EDIT_ACTIONS: dict[str, str] = {
    "clear-arg": "clear",
    "delete-backward": "delete_backward",
    "delete-char": "delete_char",
    "move-backward": "move_backward",
    "move-forward": "move_forward",
    "move-to-start": "move_to_start",
    "move-to-end": "move_to_end",
    "delete-to-end": "delete_to_end",
}

MAX_RENDER_PASSES = 2


def render_frame(state: AppState, size: TerminalSize) -> tuple[Frame, Position | None]:
    """Compose one frame and return it with the on-screen hardware cursor, if any.

    Updates ``state.row_offset`` to the viewport top the frame was drawn at.
    """
    content_cols = remaining_cols(size, state.legend_hidden)
    for _ in range(MAX_RENDER_PASSES):
        canvas = Canvas(size, row_offset=state.row_offset)
        edit_cursor = CommandEditor().render(canvas, state, content_cols)
        canvas.newline()
        renderer = TreeRenderer(
            context_lines=state.options.context_lines,
            focused=not state.is_editing(),
        )
        recenter_to = renderer.render(canvas, state.navigation, state.search_error)
        if recenter_to is None or recenter_to == state.row_offset:
            break
        state.row_offset = recenter_to
    state.row_offset = canvas.row_offset

    Legend().render(canvas, state)

    screen_cursor: Position | None = None
    if edit_cursor is not None:
        screen_row = edit_cursor.row - canvas.row_offset
        if 0 <= screen_row < size.rows:
            screen_cursor = Position(screen_row, edit_cursor.col)
    return canvas.into_frame(), screen_cursor


class App:
    def __init__(
        self,
        state: AppState,
        terminal: TerminalController,
        key_bindings: Mapping[str, Mapping[str, str]] | None = None,
        search_fn: SearchFunction | None = None,
        cwd: Path | None = None,
    ) -> None:
        self.state = state
        self.terminal = terminal
        self.search_fn = search_fn if search_fn is not None else search
        self.cwd = cwd
        tables = merge_bindings(key_bindings or {})
        self._registries: dict[str, KeyComboRegistry] = {
            mode: build_registry(table, self.perform) for mode, table in tables.items()
        }

    def run(self) -> None:
        """Run until a quit action; terminal I/O errors propagate to the caller."""
        with self.terminal.raw_mode():
            self.render()
            while not self.state.exit:
                event = self.terminal.next_event()
                self.handle_event(event)
                if self.state.dirty:
                    self.render()

    def render(self) -> None:
        size = self.terminal.size()
        if size.is_empty():
            return
        frame, cursor = render_frame(self.state, size)
        self.terminal.draw_frame(frame, cursor)
        self.state.dirty = False

    def handle_event(self, event: str) -> None:
        if event == RESIZE_EVENT:
            self.state.dirty = True
            return
        self.handle_key(event)

    def handle_key(self, key: str) -> None:
        state = self.state
        mode = MODE_EDITING if state.is_editing() else MODE_SEARCH_RESULT
        handled = self._registries[mode].dispatch(key)
        if handled is not None or mode != MODE_EDITING or not is_printable_key(key):
            return
        arg = state.editing_arg()
        if arg is not None:
            arg.insert_char(key)
            state.dirty = True

    def perform(self, action: str) -> bool:
        """Apply one named action to the state. Returns ``True`` once handled."""
        logger.debug("action %s (focus=%s)", action, self.state.focus)
        state = self.state
        navigation = state.navigation
        if action == "quit":
            state.exit = True
        elif action == "toggle-legend":
            state.legend_hidden = not state.legend_hidden
            config.save_legend_hidden(state.legend_hidden)
        elif action in _EDIT_FOCUS_ACTIONS:
            self.start_editing(_EDIT_FOCUS_ACTIONS[action])
        elif action == "cursor-up":
            navigation.cursor_up()
        elif action == "cursor-down":
            navigation.cursor_down()
        elif action == "cursor-left":
            navigation.cursor_left()
        elif action == "cursor-right":
            navigation.cursor_right()
        elif action == "toggle-expansion":
            navigation.toggle_expansion()
        elif action == "toggle-all-expansion":
            navigation.toggle_all_expansion()
        elif action in _FLIP_ACTIONS:
            if state.options.flip(_FLIP_ACTIONS[action]):
                self.run_search()
        elif action == "increase-context":
            self.change_context_lines(1)
        elif action == "decrease-context":
            self.change_context_lines(-1)
        elif action == "accept-input":
            self.finish_editing()
            self.run_search()
        elif action == "preview":
            self.run_search()
        elif action == "cancel-input":
            self.cancel_editing()
        elif action in _ARG_EDIT_ACTIONS:
            arg = state.editing_arg()
            if arg is not None:
                getattr(arg, _ARG_EDIT_ACTIONS[action])()
        else:
            logger.warning("unhandled action %s", action)
            return False
        state.dirty = True
        return True

    def start_editing(self, focus: str) -> None:
        state = self.state
        state.focus = focus
        arg = state.editing_arg()
        state.editing_backup = arg.text if arg is not None else None
        state.row_offset = 0

    def finish_editing(self) -> None:
        self.state.focus = FOCUS_SEARCH_RESULT
        self.state.editing_backup = None

    def cancel_editing(self) -> None:
        state = self.state
        arg = state.editing_arg()
        backup = state.editing_backup
        self.finish_editing()
        if arg is None or backup is None or arg.text == backup:
            return
        arg.set_text(backup)
        self.run_search()

    def change_context_lines(self, delta: int) -> None:
        options = self.state.options
        updated = options.context_lines + delta
        if not MIN_CONTEXT_LINES <= updated <= MAX_CONTEXT_LINES:
            return
        options.context_lines = updated
        config.save_context_lines(updated)
        self.run_search()

    def run_search(self) -> None:
        """Re-run the search; failures are kept for display and leave the tree as is."""
        state = self.state
        try:
            tree = self.search_fn(state.options, self.cwd)
        except SearchFailure as exc:
            logger.warning("search failed: %s", exc.message)
            state.search_error = exc.message
            state.row_offset = 0
            state.dirty = True
            return
        state.search_error = None
        state.navigation.reset_cursor(tree)
        if state.navigation.cursor.is_empty():
            state.row_offset = 0
        state.dirty = True


def run_app(
    options: GrepOptions,
    terminal: TerminalController,
    cwd: Path | None = None,
) -> None:
    """Build the application around ``options``, search once if a pattern is set, and run."""
    state = AppState(options=options, legend_hidden=config.load_legend_hidden())
    app = App(state, terminal, key_bindings=config.load_key_bindings(), cwd=cwd)
    if options.pattern.text:
        app.run_search()
    app.run()
