"""Tests for the application loop: key dispatch, editing, searching, rendering.

The terminal and the search provider are replaced with fakes so every test
drives the real ``App`` through a scripted list of events.
"""

from __future__ import annotations

import copy
import tempfile
import unittest
from contextlib import contextmanager
from pathlib import Path
from unittest import mock

from lazygrep.navigation import Cursor
from lazygrep.render import Position, TerminalSize
from lazygrep.runtime import config
from lazygrep.runtime.app import App, render_frame, run_app
from lazygrep.runtime.state import FOCUS_PATTERN, FOCUS_SEARCH_RESULT, AppState
from lazygrep.runtime.terminal import RESIZE_EVENT
from lazygrep.search import GrepOptions, ResultLine, ResultTree, SearchFailure


def _x_rs_tree() -> ResultTree:
    return ResultTree(
        files={
            "x.rs": [
                ResultLine(1, "foo", True),
                ResultLine(2, "bar", False),
                ResultLine(3, "foo", True),
            ]
        },
        highlights={("x.rs", 1): ("foo",), ("x.rs", 3): ("foo",)},
    )


class _FakeTerminal:
    def __init__(self, events: list[str], size: TerminalSize = TerminalSize(10, 80)) -> None:
        self.events = list(events)
        self._size = size
        self.frames = []
        self.cursors: list[Position | None] = []

    @contextmanager
    def raw_mode(self):
        yield

    def size(self) -> TerminalSize:
        return self._size

    def next_event(self) -> str:
        return self.events.pop(0)

    def draw_frame(self, frame, cursor=None) -> None:
        self.frames.append(frame)
        self.cursors.append(cursor)


class _FakeSearch:
    """Return (or raise) scripted results and remember the options of each call."""

    def __init__(self, *results) -> None:
        self.results = list(results) or [_x_rs_tree()]
        self.calls: list[GrepOptions] = []

    def __call__(self, options: GrepOptions, cwd: Path | None) -> ResultTree:
        self.calls.append(copy.deepcopy(options))
        result = self.results.pop(0) if len(self.results) > 1 else self.results[0]
        if isinstance(result, Exception):
            raise result
        return result


class AppLoopTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        patcher = mock.patch("lazygrep.runtime.config.CONFIG_PATH", Path(self._tmp.name) / "config.json")
        patcher.start()
        self.addCleanup(patcher.stop)

    def _app(self, events: list[str], pattern: str = "", search: _FakeSearch | None = None, **kwargs) -> App:
        state = AppState()
        state.options.pattern.set_text(pattern)
        return App(state, _FakeTerminal(events), search_fn=search or _FakeSearch(), **kwargs)

    def test_run_navigates_and_quits(self) -> None:
        app = self._app(["l", "j", "q"], pattern="foo")
        app.run_search()
        app.run()

        self.assertTrue(app.state.exit)
        self.assertEqual(app.state.navigation.cursor, Cursor("x.rs", 3))
        self.assertEqual(len(app.terminal.frames), 4)

    def test_resize_event_redraws(self) -> None:
        app = self._app([RESIZE_EVENT, "q"])
        app.run()
        self.assertEqual(len(app.terminal.frames), 3)

    def test_empty_terminal_is_not_drawn(self) -> None:
        app = App(AppState(), _FakeTerminal(["q"], size=TerminalSize(0, 0)), search_fn=_FakeSearch())
        app.run()
        self.assertEqual(app.terminal.frames, [])

    def test_typing_a_pattern_and_accepting_runs_search(self) -> None:
        search = _FakeSearch()
        app = self._app(["/", "a", "b", "c", "ENTER", "q"], search=search)
        app.run()

        self.assertEqual([options.pattern.text for options in search.calls], ["abc"])
        self.assertEqual(app.state.focus, FOCUS_SEARCH_RESULT)
        self.assertEqual(app.state.navigation.cursor, Cursor("x.rs"))
        self.assertEqual(
            app.terminal.cursors,
            [None, Position(0, 20), Position(0, 21), Position(0, 22), Position(0, 23), None, None],
        )

    def test_preview_searches_and_keeps_editing(self) -> None:
        search = _FakeSearch()
        app = self._app(["e", "x", "TAB", "ESC"], search=search)
        app.run()
        self.assertEqual([options.pattern.text for options in search.calls], ["x"])
        self.assertEqual(app.state.focus, FOCUS_PATTERN)

    def test_cancel_restores_text_and_research_when_changed(self) -> None:
        search = _FakeSearch()
        app = self._app(["e", "BACKSPACE", "CTRL_G", "q"], pattern="foo", search=search)
        app.run()
        self.assertEqual(app.state.options.pattern.text, "foo")
        self.assertEqual(app.state.focus, FOCUS_SEARCH_RESULT)
        self.assertIsNone(app.state.editing_backup)
        self.assertEqual([options.pattern.text for options in search.calls], ["foo"])

    def test_cancel_without_changes_does_not_search(self) -> None:
        search = _FakeSearch()
        app = self._app(["e", "CTRL_G", "q"], pattern="foo", search=search)
        app.run()
        self.assertEqual(search.calls, [])

    def test_editing_keys_edit_the_focused_argument(self) -> None:
        app = self._app(["n", "a", "b", "HOME", "DELETE", "END", "x", "ENTER", "q"])
        app.run()
        self.assertEqual(app.state.options.not_pattern.text, "bx")
        self.assertEqual(app.state.options.pattern.text, "")

    def test_search_failure_keeps_previous_tree(self) -> None:
        tree = _x_rs_tree()
        search = _FakeSearch(tree, SearchFailure("fatal: boom"), tree)
        app = self._app([], pattern="foo", search=search)
        app.run_search()
        app.state.navigation.cursor_right()

        app.run_search()
        self.assertEqual(app.state.search_error, "fatal: boom")
        self.assertIs(app.state.navigation.tree, tree)
        self.assertEqual(app.state.navigation.cursor, Cursor("x.rs", 1))
        frame, _ = render_frame(app.state, TerminalSize(10, 80))
        self.assertTrue(frame.text_lines()[2].startswith("[ERROR]"))

        app.run_search()
        self.assertIsNone(app.state.search_error)

    def test_search_failure_after_scrolling_shows_error_from_top(self) -> None:
        tree = ResultTree(files={f"f{i:02d}": [ResultLine(1, "hit", True)] for i in range(40)})
        search = _FakeSearch(tree, SearchFailure("fatal: bad regex"))
        app = self._app([], pattern="foo", search=search)
        app.run_search()
        app.state.navigation.cursor = Cursor("f39")
        render_frame(app.state, TerminalSize(10, 80))
        self.assertGreater(app.state.row_offset, 0)

        app.run_search()
        self.assertEqual(app.state.row_offset, 0)
        frame, _ = render_frame(app.state, TerminalSize(10, 80))
        self.assertTrue(frame.text_lines()[2].startswith("[ERROR]"))
        self.assertTrue(frame.text_lines()[3].startswith("fatal: bad regex"))

    def test_flag_flips_research_only_when_allowed(self) -> None:
        search = _FakeSearch()
        app = self._app(["i", "E", "F", "q"], pattern="foo", search=search)
        app.run()
        self.assertEqual(len(search.calls), 2)
        self.assertTrue(search.calls[0].ignore_case)
        self.assertTrue(search.calls[1].extended_regexp)
        self.assertFalse(app.state.options.fixed_strings)

    def test_context_changes_are_bounded_and_persisted(self) -> None:
        search = _FakeSearch()
        app = self._app(["-", "+", "+", "-", "q"], pattern="foo", search=search)
        app.run()
        self.assertEqual(app.state.options.context_lines, 1)
        self.assertEqual([options.context_lines for options in search.calls], [1, 2, 1])
        self.assertEqual(config.load_context_lines(), 1)

    def test_toggle_legend_is_persisted(self) -> None:
        app = self._app(["H", "q"])
        app.run()
        self.assertTrue(app.state.legend_hidden)
        self.assertTrue(config.load_legend_hidden())

    def test_entering_edit_mode_scrolls_to_top(self) -> None:
        app = self._app(["/"])
        app.state.row_offset = 7
        app.handle_event(app.terminal.next_event())
        self.assertEqual(app.state.row_offset, 0)
        self.assertEqual(app.state.editing_backup, "")

    def test_user_key_bindings_override_defaults(self) -> None:
        app = self._app(["x"], key_bindings={"search-result": {"x": "quit"}})
        app.run()
        self.assertTrue(app.state.exit)

    def test_unbound_keys_in_result_view_are_ignored(self) -> None:
        app = self._app(["z", "q"])
        app.run()
        self.assertEqual(app.state.options.pattern.text, "")


class RenderFrameTests(unittest.TestCase):
    def test_layout_header_tree_and_legend(self) -> None:
        state = AppState()
        state.options.pattern.set_text("foo")
        state.navigation.reset_cursor(_x_rs_tree())

        frame, cursor = render_frame(state, TerminalSize(10, 80))
        lines = frame.text_lines()
        self.assertIsNone(cursor)
        self.assertTrue(lines[0].startswith("   $ git grep -n -e foo "))
        self.assertEqual(lines[0][58:], "|[ACTIONS]            ")
        self.assertTrue(lines[2].startswith("[RESULT]: 2 lines, 1 files"))
        self.assertTrue(lines[3].startswith("-> x.rs (2 hits, 2 lines)"))
        self.assertTrue(lines[4].startswith("     1|foo"))

    def test_selection_above_viewport_is_recentered(self) -> None:
        state = AppState(legend_hidden=True)
        state.options.pattern.set_text("foo")
        tree = ResultTree(files={f"f{i:02d}": [ResultLine(1, "hit", True)] for i in range(10)})
        state.navigation.reset_cursor(tree)
        state.row_offset = 20

        frame, _ = render_frame(state, TerminalSize(8, 80))
        self.assertEqual(state.row_offset, 0)
        self.assertEqual(frame.text_lines()[3], "-> f00 (0 hits, 1 lines)")

    def test_error_in_scrolled_view_is_drawn_from_top(self) -> None:
        state = AppState(legend_hidden=True, row_offset=30)
        state.options.pattern.set_text("foo")
        state.search_error = "fatal: bad regex"

        frame, _ = render_frame(state, TerminalSize(8, 80))
        self.assertEqual(state.row_offset, 0)
        self.assertTrue(frame.text_lines()[2].startswith("[ERROR]"))

    def test_hardware_cursor_is_hidden_when_header_scrolled_away(self) -> None:
        state = AppState(focus=FOCUS_PATTERN, row_offset=1)
        _, cursor = render_frame(state, TerminalSize(10, 80))
        self.assertIsNone(cursor)


class RunAppTests(unittest.TestCase):
    def test_run_app_searches_initial_pattern_and_loads_settings(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with mock.patch("lazygrep.runtime.config.CONFIG_PATH", Path(tmp) / "config.json"):
                config.save_legend_hidden(True)
                options = GrepOptions()
                options.pattern.set_text("foo")
                with mock.patch("lazygrep.runtime.app.search", return_value=_x_rs_tree()) as search_mock, mock.patch.object(
                    App, "run"
                ) as run_mock:
                    run_app(options, _FakeTerminal([]), cwd=Path(tmp))

        search_mock.assert_called_once_with(options, Path(tmp))
        run_mock.assert_called_once()


if __name__ == "__main__":
    unittest.main()
