"""CLI argument parsing, logging setup, and startup checks.

Verifies how ``lazygrep.cli.main`` turns arguments into initial grep options
and refuses to start outside a git work tree.
"""

from __future__ import annotations

import logging
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from lazygrep import cli
from lazygrep.search import GrepOptions


class CliTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.root = Path(self._tmp.name).resolve()
        patcher = mock.patch("lazygrep.runtime.config.CONFIG_PATH", self.root / "config.json")
        patcher.start()
        self.addCleanup(patcher.stop)

    def _run_main(self, argv: list[str]) -> mock.MagicMock:
        with mock.patch("lazygrep.cli.is_git_available", return_value=True), mock.patch(
            "lazygrep.cli.configure_logging"
        ), mock.patch("lazygrep.cli.TerminalController"), mock.patch("lazygrep.cli.sys"), mock.patch(
            "lazygrep.cli.run_app"
        ) as run_app:
            cli.main(argv, cwd=self.root)
        run_app.assert_called_once()
        return run_app

    def test_arguments_become_initial_options(self) -> None:
        run_app = self._run_main(
            ["foo", "-a", "bar", "-n", "baz", "-r", "HEAD~1", "-p", "src", "-C", "3", "-i"]
        )
        options, _terminal = run_app.call_args.args
        self.assertIsInstance(options, GrepOptions)
        self.assertEqual(options.pattern.text, "foo")
        self.assertEqual(options.and_pattern.text, "bar")
        self.assertEqual(options.not_pattern.text, "baz")
        self.assertEqual(options.revision.text, "HEAD~1")
        self.assertEqual(options.path.text, "src")
        self.assertEqual(options.context_lines, 3)
        self.assertTrue(options.ignore_case)
        self.assertEqual(run_app.call_args.kwargs["cwd"], self.root)

    def test_context_defaults_to_saved_setting(self) -> None:
        cli.config.save_context_lines(5)
        run_app = self._run_main([])
        options, _terminal = run_app.call_args.args
        self.assertEqual(options.context_lines, 5)
        self.assertEqual(options.pattern.text, "")

    def test_negative_context_is_rejected(self) -> None:
        with mock.patch("sys.stderr"), self.assertRaises(SystemExit):
            cli.build_parser().parse_args(["-C", "-1"])

    def test_refuses_to_start_outside_work_tree(self) -> None:
        with mock.patch("lazygrep.cli.is_git_available", return_value=False), mock.patch(
            "lazygrep.cli.configure_logging"
        ), mock.patch("lazygrep.cli.run_app") as run_app:
            with self.assertRaises(SystemExit) as ctx:
                cli.main(["foo"], cwd=self.root)
        run_app.assert_not_called()
        self.assertIn("Not inside a git work tree", str(ctx.exception))

    def test_log_file_from_environment(self) -> None:
        log_path = self.root / "lazygrep.log"
        with mock.patch.dict("lazygrep.cli.os.environ", {cli.LOG_FILE_ENV: str(log_path)}), mock.patch(
            "lazygrep.cli.configure_logging"
        ) as configure, mock.patch("lazygrep.cli.is_git_available", return_value=False):
            with self.assertRaises(SystemExit):
                cli.main([], cwd=self.root)
        configure.assert_called_once_with(str(log_path))


class ConfigureLoggingTests(unittest.TestCase):
    def tearDown(self) -> None:
        package_logger = logging.getLogger("lazygrep")
        for handler in list(package_logger.handlers):
            package_logger.removeHandler(handler)
            handler.close()
        package_logger.setLevel(logging.NOTSET)

    def test_file_handler_writes_package_logs(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            log_path = Path(tmp) / "debug.log"
            handler = cli.configure_logging(str(log_path))
            logging.getLogger("lazygrep.search.grep").debug("running git grep")
            handler.flush()
            logging.getLogger("lazygrep").removeHandler(handler)
            handler.close()
            self.assertIn("running git grep", log_path.read_text(encoding="utf-8"))

    def test_without_log_file_a_null_handler_is_used(self) -> None:
        handler = cli.configure_logging(None)
        self.assertIsInstance(handler, logging.NullHandler)
        self.assertIn(handler, logging.getLogger("lazygrep").handlers)


if __name__ == "__main__":
    unittest.main()
