"""Sort order and pattern matcher tests."""

from __future__ import annotations

import stat
import unittest

from duopane.entries import FileEntry
from duopane.errors import PatternError
from duopane.matching import MatchKind, PatternMatcher, escape_glob, quick_search_matcher
from duopane.sorting import SortField, extension_of, sort_entries, version_key

DIR_MODE = stat.S_IFDIR | 0o755


def _names(entries: list[FileEntry]) -> list[str]:
    return [entry.name for entry in entries]


def _listing() -> list[FileEntry]:
    return [
        FileEntry("..", mode=DIR_MODE),
        FileEntry("b.txt", size=30, mtime=3),
        FileEntry("Zeta", mode=DIR_MODE),
        FileEntry("a.py", size=10, mtime=2),
        FileEntry("alpha", mode=DIR_MODE),
        FileEntry("C.md", size=20, mtime=1),
    ]


class SortEntriesTests(unittest.TestCase):
    def test_name_sort_keeps_parent_first_and_directories_before_files(self) -> None:
        entries = _listing()

        sort_entries(entries, SortField.NAME)

        self.assertEqual(_names(entries), ["..", "Zeta", "alpha", "C.md", "a.py", "b.txt"])

    def test_case_insensitive_name_sort(self) -> None:
        entries = _listing()

        sort_entries(entries, SortField.NAME, case_sensitive=False)

        self.assertEqual(_names(entries), ["..", "alpha", "Zeta", "a.py", "b.txt", "C.md"])

    def test_reverse_flips_each_group(self) -> None:
        entries = _listing()

        sort_entries(entries, SortField.SIZE, reverse=True)

        self.assertEqual(_names(entries)[0], "..")
        self.assertEqual(_names(entries)[3:], ["b.txt", "C.md", "a.py"])

    def test_mix_all_files_interleaves_directories(self) -> None:
        entries = _listing()

        sort_entries(entries, SortField.NAME, case_sensitive=False, mix_all_files=True)

        self.assertEqual(_names(entries), ["..", "a.py", "alpha", "b.txt", "C.md", "Zeta"])

    def test_unsorted_keeps_read_order(self) -> None:
        entries = _listing()

        sort_entries(entries, SortField.UNSORTED)

        self.assertEqual(_names(entries), _names(_listing()))

    def test_mtime_and_extension_orders(self) -> None:
        entries = _listing()
        sort_entries(entries, SortField.MTIME)
        self.assertEqual(_names(entries)[3:], ["C.md", "a.py", "b.txt"])

        sort_entries(entries, SortField.EXTENSION)
        self.assertEqual(_names(entries)[3:], ["C.md", "a.py", "b.txt"])

    def test_version_key_is_natural_order(self) -> None:
        names = ["file10", "file2", "file1"]

        self.assertEqual(sorted(names, key=version_key), ["file1", "file2", "file10"])
        self.assertEqual(extension_of("archive.tar.gz"), "gz")
        self.assertEqual(extension_of("Makefile"), "")

    def test_sort_field_from_id(self) -> None:
        self.assertIs(SortField.from_id("size"), SortField.SIZE)
        self.assertIsNone(SortField.from_id("colour"))
        self.assertEqual(SortField.CTIME.hotkey, "h")


class PatternMatcherTests(unittest.TestCase):
    def test_glob_whole_line_matching(self) -> None:
        matcher = PatternMatcher("*.py")

        self.assertTrue(matcher.matches("setup.py"))
        self.assertFalse(matcher.matches("setup.pyc"))

    def test_glob_character_classes_and_negation(self) -> None:
        self.assertTrue(PatternMatcher("[ab]?.txt").matches("a1.txt"))
        self.assertTrue(PatternMatcher("[!ab]*").matches("zeta"))
        self.assertFalse(PatternMatcher("[!ab]*").matches("alpha"))

    def test_case_insensitive_and_substring_regex(self) -> None:
        matcher = PatternMatcher("read", MatchKind.REGEX, case_sensitive=False, whole_line=False)

        self.assertTrue(matcher.matches("README.md"))

    def test_invalid_regex_raises(self) -> None:
        with self.assertRaises(PatternError):
            PatternMatcher("[unclosed", MatchKind.REGEX)

    def test_quick_search_matcher_keeps_wildcards_and_escapes_brackets(self) -> None:
        self.assertEqual(escape_glob("a*b?[x]"), "a*b?\\[x\\]")
        self.assertTrue(quick_search_matcher("a?", True).matches("abb"))
        self.assertTrue(quick_search_matcher("*.c", True).matches("main.c"))
        self.assertFalse(quick_search_matcher("[x]", True).matches("x"))
        self.assertTrue(quick_search_matcher("[x]", True).matches("[x]1"))


if __name__ == "__main__":
    unittest.main()
