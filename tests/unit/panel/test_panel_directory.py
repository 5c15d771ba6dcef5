"""Panel tests against a real temporary directory tree.

Covers loading, directory changes and their failure path, sorting, listing
formats with fallback, filters, hidden files, reload, history and
panelized listings.
"""

from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path

from duopane.config import PanelOptions, PanelSetup
from duopane.errors import ChdirError
from duopane.listing.fields import PanelField
from duopane.listing.format import DEFAULT_USER_FORMAT, ListingMode
from duopane.panel.panel import INVALID_FORMAT_MESSAGE, Panel
from duopane.sorting import SortField


def _names(panel: Panel) -> list[str]:
    return [entry.name for entry in panel.state.entries]


class PanelTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name).resolve()
        (self.root / "alpha").mkdir()
        (self.root / "beta").mkdir()
        (self.root / "alpha" / "inner.txt").write_text("x", encoding="utf-8")
        (self.root / "a.txt").write_text("a" * 300, encoding="utf-8")
        (self.root / "b.py").write_text("b" * 10, encoding="utf-8")
        (self.root / ".hidden").write_text("", encoding="utf-8")
        self.messages: list[str] = []

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def make_panel(self, **kwargs) -> Panel:
        panel = Panel(self.root, report=self.messages.append, **kwargs)
        panel.resize(40, 20)
        return panel


class LoadAndChdirTests(PanelTestCase):
    def test_listing_starts_with_parent_then_directories_then_files(self) -> None:
        panel = self.make_panel()

        self.assertEqual(_names(panel), ["..", "alpha", "beta", ".hidden", "a.txt", "b.py"])
        self.assertEqual(panel.state.selected, 0)

    def test_cd_parent_reselects_the_directory_just_left(self) -> None:
        panel = self.make_panel()
        panel.chdir("alpha")
        self.assertEqual(panel.cwd, self.root / "alpha")
        self.assertEqual(panel.lwd, self.root)

        panel.cd_parent()

        self.assertEqual(panel.cwd, self.root)
        self.assertEqual(panel.selection.name, "alpha")

    def test_failed_chdir_leaves_the_panel_unchanged(self) -> None:
        panel = self.make_panel()
        panel.navigation.select_name("b.py")
        before = _names(panel)

        with self.assertRaises(ChdirError):
            panel.chdir(self.root / "missing")

        self.assertEqual(panel.cwd, self.root)
        self.assertEqual(_names(panel), before)
        self.assertEqual(panel.selection.name, "b.py")

    def test_enter_changes_into_directories_only(self) -> None:
        panel = self.make_panel()
        panel.navigation.select_name("a.txt")
        self.assertFalse(panel.enter())

        panel.navigation.select_name("beta")
        self.assertTrue(panel.enter())
        self.assertEqual(panel.cwd, self.root / "beta")

    def test_cd_child_ignores_files(self) -> None:
        panel = self.make_panel()
        panel.navigation.select_name("b.py")

        self.assertFalse(panel.cd_child())
        self.assertEqual(panel.cwd, self.root)

    def test_selected_path_of_parent_entry(self) -> None:
        panel = self.make_panel()

        self.assertEqual(panel.selected_path, self.root.parent)

    def test_unreadable_start_directory_reports_and_shows_empty_listing(self) -> None:
        panel = Panel(self.root / "missing", report=self.messages.append)

        self.assertEqual(_names(panel), [".."])
        self.assertEqual(len(self.messages), 1)


class SortAndFormatTests(PanelTestCase):
    def test_reselecting_the_active_field_reverses(self) -> None:
        panel = self.make_panel()
        panel.set_sort_field(SortField.SIZE)
        self.assertEqual(_names(panel)[-2:], ["b.py", "a.txt"])

        panel.set_sort_field(SortField.SIZE)

        self.assertTrue(panel.state.reverse)
        self.assertTrue(panel.setup.reverse)
        self.assertEqual(_names(panel)[-3:], ["a.txt", "b.py", ".hidden"])

    def test_sort_next_steps_through_the_format_columns(self) -> None:
        panel = self.make_panel()

        self.assertEqual(panel.sortable_fields(), [SortField.NAME, SortField.SIZE, SortField.MTIME])
        self.assertIs(panel.sort_next(), SortField.SIZE)
        self.assertIs(panel.sort_prev(), SortField.NAME)

    def test_re_sort_keeps_the_selected_entry(self) -> None:
        panel = self.make_panel()
        panel.navigation.select_name("a.txt")

        panel.toggle_reverse()

        self.assertEqual(panel.selection.name, "a.txt")

    def test_unsorted_rereads_the_directory(self) -> None:
        panel = self.make_panel()
        panel.navigation.select_name("b.py")

        panel.set_sort_field(SortField.UNSORTED)

        self.assertEqual(sorted(_names(panel)), sorted(["..", "alpha", "beta", ".hidden", "a.txt", "b.py"]))
        self.assertEqual(panel.selection.name, "b.py")

    def test_invalid_user_format_falls_back_to_default(self) -> None:
        setup = PanelSetup(list_format=ListingMode.USER, user_format="half type bogus")

        panel = self.make_panel(setup=setup)

        self.assertIn(INVALID_FORMAT_MESSAGE, self.messages)
        self.assertEqual(setup.user_format, DEFAULT_USER_FORMAT)
        self.assertIsNotNone(panel.state.format.column_for(PanelField.PERM))

    def test_cycle_listing_format_switches_to_brief_columns(self) -> None:
        panel = self.make_panel()

        self.assertIs(panel.cycle_listing_format(), ListingMode.BRIEF)
        self.assertEqual(panel.state.list_cols, 2)

    def test_resize_solves_the_name_column(self) -> None:
        panel = self.make_panel()

        panel.resize(78, 20)

        self.assertEqual(panel.state.format.column_for(PanelField.NAME).width, 54)


class FilterAndReloadTests(PanelTestCase):
    def test_toggle_hidden_removes_dot_files(self) -> None:
        panel = self.make_panel(options=PanelOptions())

        self.assertFalse(panel.toggle_hidden())

        self.assertNotIn(".hidden", _names(panel))

    def test_filter_keeps_directories_and_matching_files(self) -> None:
        panel = self.make_panel()

        panel.set_filter("*.py")

        self.assertEqual(_names(panel), ["..", "alpha", "beta", "b.py"])
        panel.set_filter(None)
        self.assertIn("a.txt", _names(panel))

    def test_reload_keeps_marks_and_selection(self) -> None:
        panel = self.make_panel()
        panel.navigation.select_name("a.txt")
        panel.marks.toggle_mark()
        (self.root / "c.txt").write_text("c", encoding="utf-8")

        self.assertTrue(panel.reload())

        self.assertIn("c.txt", _names(panel))
        self.assertEqual(panel.selection.name, "a.txt")
        self.assertTrue(panel.selection.marked)
        self.assertEqual(panel.state.marked, 1)
        self.assertEqual(panel.state.total, 300)

    def test_reload_of_a_removed_directory_falls_back_to_parent(self) -> None:
        panel = self.make_panel()
        panel.chdir("beta")
        os.rmdir(self.root / "beta")

        panel.reload()

        self.assertEqual(panel.cwd, self.root)


class HistoryAndPanelizeTests(PanelTestCase):
    def test_history_moves_back_and_forward(self) -> None:
        panel = self.make_panel()
        panel.chdir("alpha")

        self.assertTrue(panel.history_prev())
        self.assertEqual(panel.cwd, self.root)
        self.assertFalse(panel.history_prev())
        self.assertTrue(panel.history_next())
        self.assertEqual(panel.cwd, self.root / "alpha")

    def test_failed_history_move_restores_the_cursor(self) -> None:
        panel = self.make_panel()
        panel.chdir("beta")
        panel.chdir(self.root)
        os.rmdir(self.root / "beta")

        with self.assertRaises(ChdirError):
            panel.history_prev()

        self.assertEqual(panel.history.current, self.root)

    def test_panelize_lists_given_paths_and_survives_reload(self) -> None:
        panel = self.make_panel()

        panel.panelize(["a.txt", "alpha/inner.txt", "nope"])
        panel.reload()

        self.assertTrue(panel.is_panelized)
        self.assertEqual(_names(panel), ["..", "a.txt", "alpha/inner.txt"])

    def test_cd_parent_from_panelized_entry_opens_its_directory(self) -> None:
        panel = self.make_panel()
        panel.panelize(["alpha/inner.txt"])
        panel.navigation.select_name("alpha/inner.txt")

        panel.cd_parent()

        self.assertFalse(panel.is_panelized)
        self.assertEqual(panel.cwd, self.root / "alpha")
        self.assertEqual(panel.selection.name, "inner.txt")


if __name__ == "__main__":
    unittest.main()
