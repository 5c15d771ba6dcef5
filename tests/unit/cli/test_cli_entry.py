"""CLI argument and default-path behavior tests.

Verifies how ``duopane.cli.main`` picks the two start directories and how
``--list`` renders a single panel without starting the runtime.
"""

from __future__ import annotations

import io
import sys
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from duopane import cli
from duopane.config import load_theme_name


class CliTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name).resolve()
        (self.root / "left").mkdir()
        (self.root / "right").mkdir()
        config_patch = mock.patch("duopane.config.CONFIG_PATH", self.root / "config.json")
        config_patch.start()
        self.addCleanup(config_patch.stop)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def run_main(self, *argv: str, default_path: Path | None = None) -> mock.MagicMock:
        with mock.patch.object(sys, "argv", ["duopane", *argv]), mock.patch("duopane.cli.run_app") as run_app:
            cli.main(default_path=default_path)
        return run_app


class CliPathTests(CliTestCase):
    def test_two_positional_directories(self) -> None:
        run_app = self.run_main(str(self.root / "left"), str(self.root / "right"), "--no-color")

        run_app.assert_called_once()
        _config, left, right = run_app.call_args.args
        self.assertEqual(left, self.root / "left")
        self.assertEqual(right, self.root / "right")
        self.assertEqual(run_app.call_args.kwargs, {"theme_name": None, "no_color": True, "mouse": True})

    def test_missing_panels_default_to_the_given_path(self) -> None:
        run_app = self.run_main(str(self.root / "left"), default_path=self.root)

        _config, left, right = run_app.call_args.args
        self.assertEqual(left, self.root / "left")
        self.assertEqual(right, self.root)

    def test_missing_directory_exits(self) -> None:
        with self.assertRaises(SystemExit) as raised:
            self.run_main(str(self.root / "nope"))

        self.assertEqual(str(raised.exception), f"Path not found: {self.root / 'nope'}")

    def test_theme_is_passed_through(self) -> None:
        run_app = self.run_main("--theme", "contrast", default_path=self.root)

        self.assertEqual(run_app.call_args.kwargs["theme_name"], "contrast")
        self.assertIsNone(load_theme_name())

    def test_known_theme_is_remembered(self) -> None:
        self.run_main("--theme", "Ocean", default_path=self.root)

        self.assertEqual(load_theme_name(), "ocean")


class CliListTests(CliTestCase):
    def test_list_prints_the_panel_and_skips_the_runtime(self) -> None:
        (self.root / "left" / "alpha").mkdir()
        (self.root / "left" / "notes.txt").write_text("hello", encoding="utf-8")
        stdout = io.StringIO()

        with mock.patch("sys.stdout", stdout):
            run_app = self.run_main("--list", str(self.root / "left"), "--width", "40")

        run_app.assert_not_called()
        lines = stdout.getvalue().splitlines()
        self.assertEqual(len(lines), 3 + 2 + 3)
        self.assertTrue(all(len(line) <= 40 for line in lines))
        body = "\n".join(lines)
        self.assertIn("alpha", body)
        self.assertIn("notes.txt", body)
        self.assertIn("UP--DIR", body)

    def test_list_with_user_format(self) -> None:
        (self.root / "left" / "notes.txt").write_text("hello", encoding="utf-8")

        output = cli.render_listing(self.root / "left", 30, user_format="half name | size")

        self.assertIn("notes.txt", output)
        self.assertNotIn("Modify time", output)

    def test_list_rejects_positional_paths(self) -> None:
        with self.assertRaises(SystemExit):
            self.run_main("--list", str(self.root), str(self.root / "left"))

    def test_width_must_be_positive(self) -> None:
        with mock.patch("sys.stderr", io.StringIO()), self.assertRaises(SystemExit) as raised:
            self.run_main("--list", str(self.root), "--width", "0")

        self.assertEqual(raised.exception.code, 2)


if __name__ == "__main__":
    unittest.main()
