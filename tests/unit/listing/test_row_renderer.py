"""Tests for rendering listing rows and column headers into fixed-width text."""

from __future__ import annotations

import stat
import unittest

from duopane.ansi import display_width
from duopane.entries import FileEntry
from duopane.listing.fields import FormatContext, size_trunc_len, size_trunc_sep, type_char
from duopane.listing.format import compile_format
from duopane.listing.layout import solve_layout
from duopane.listing.row import format_header, format_row
from duopane.sorting import SortField


def _columns(text: str = "type name | size", usable: int = 20):
    columns = compile_format(text).columns
    solve_layout(columns, usable)
    return columns


class FormatRowTests(unittest.TestCase):
    def setUp(self) -> None:
        self.ctx = FormatContext(now=0.0)

    def test_row_fills_exactly_the_requested_width(self) -> None:
        row = format_row(FileEntry("readme.txt", size=1234), _columns(), 20, self.ctx)

        self.assertEqual(row.text, " readme.txt │   1234")
        self.assertEqual(display_width(row.text), 20)
        self.assertEqual(row.name_overflow, 0)

    def test_long_name_is_cut_in_the_middle(self) -> None:
        row = format_row(FileEntry("a_very_long_filename.txt"), _columns(), 20, self.ctx)

        name_cell = next(cell for cell in row.cells if cell.is_name)
        self.assertEqual(name_cell.text, "a_ver~e.txt")
        self.assertEqual(row.name_overflow, 13)

    def test_content_shift_scrolls_long_names(self) -> None:
        row = format_row(
            FileEntry("a_very_long_filename.txt"), _columns(), 20, self.ctx, content_shift=3
        )

        name_cell = next(cell for cell in row.cells if cell.is_name)
        self.assertEqual(name_cell.text, "ery_long_fi")
        self.assertTrue(row.scroll_left)
        self.assertTrue(row.scroll_right)

    def test_parent_entry_shows_up_dir_label(self) -> None:
        row = format_row(FileEntry("..", mode=stat.S_IFDIR | 0o755), _columns(), 20, self.ctx)

        self.assertTrue(row.text.endswith("UP--DIR"))
        self.assertTrue(row.text.startswith("/.."))

    def test_empty_row_keeps_separators(self) -> None:
        row = format_row(None, _columns(), 20, self.ctx)

        self.assertEqual(row.text, " " * 12 + "│" + " " * 7)

    def test_columns_past_the_width_are_dropped(self) -> None:
        row = format_row(FileEntry("readme.txt"), _columns(), 10, self.ctx)

        self.assertEqual(len(row.cells), 2)
        self.assertEqual(display_width(row.text), 10)


class FormatHeaderTests(unittest.TestCase):
    def test_header_centers_titles_and_marks_sort_column(self) -> None:
        row = format_header(_columns(), 20, sort_field=SortField.NAME, show_sort_sign=True)

        self.assertEqual(row.text, "    .Name   │ Size  ")

    def test_reverse_sort_uses_the_up_sign(self) -> None:
        row = format_header(
            _columns(), 20, sort_field=SortField.SIZE, reverse=True, show_sort_sign=True
        )

        self.assertIn("'Size", row.text)

    def test_filter_is_shown_next_to_the_name_title(self) -> None:
        row = format_header(_columns("name", 20), 20, filter_text="*.py")

        self.assertEqual(row.text.strip(), "Name [*.py]")


class FieldFormatterTests(unittest.TestCase):
    def test_size_trunc_len_switches_units(self) -> None:
        self.assertEqual(size_trunc_len(0, 7), "0")
        self.assertEqual(size_trunc_len(1234, 7), "1234")
        self.assertEqual(size_trunc_len(12_345_678, 7), "12056K")
        self.assertEqual(size_trunc_len(12_345_678, 7, si=True), "12346k")

    def test_size_trunc_sep_groups_thousands(self) -> None:
        self.assertEqual(size_trunc_sep(1234), "1,234 B")
        self.assertEqual(size_trunc_sep(5_000_000_000), "4,882,812 KiB")
        self.assertEqual(size_trunc_sep(5_000_000_000, si=True), "5,000,000 kB")

    def test_type_char_marks_directories_and_executables(self) -> None:
        self.assertEqual(type_char(FileEntry("d", mode=stat.S_IFDIR | 0o755)), "/")
        self.assertEqual(type_char(FileEntry("x", mode=stat.S_IFREG | 0o755)), "*")
        self.assertEqual(type_char(FileEntry("l", mode=stat.S_IFLNK | 0o777, stale_link=True)), "!")
        self.assertEqual(type_char(FileEntry("f")), " ")


if __name__ == "__main__":
    unittest.main()
