"""Marking tests: incremental totals, page marks, patterns and recalculation."""

from __future__ import annotations

import random
import stat
import unittest

from duopane.entries import FileEntry
from duopane.errors import PatternError
from duopane.matching import MatchKind
from duopane.panel.marking import MarkController
from duopane.panel.navigation import NavigationController
from duopane.panel.state import FRAME_ROWS, PanelViewState

DIR_MODE = stat.S_IFDIR | 0o755


def _controller(entries: list[FileEntry], lines: int = 10) -> MarkController:
    state = PanelViewState(entries=entries, rows=lines + FRAME_ROWS, mini_info_rows=0)
    return MarkController(state, NavigationController(state))


def _listing() -> list[FileEntry]:
    return [
        FileEntry("..", mode=DIR_MODE),
        FileEntry("docs", mode=DIR_MODE, size=4096),
        FileEntry("build", mode=DIR_MODE, size=9000, dir_size_computed=True),
        FileEntry("a.py", size=100),
        FileEntry("b.py", size=200),
        FileEntry("notes.txt", size=30),
    ]


class MarkEntryTests(unittest.TestCase):
    def test_parent_entry_is_never_marked(self) -> None:
        marks = _controller(_listing())

        self.assertFalse(marks.mark_entry(0, True))
        self.assertEqual(marks.state.marked, 0)

    def test_directory_size_counts_only_when_computed(self) -> None:
        marks = _controller(_listing())

        marks.mark_entry(1, True)
        marks.mark_entry(2, True)

        self.assertEqual(marks.state.marked, 2)
        self.assertEqual(marks.state.dirs_marked, 2)
        self.assertEqual(marks.state.total, 9000)

    def test_toggle_mark_moves_down_when_asked(self) -> None:
        marks = _controller(_listing())
        marks.state.selected = 3

        marks.toggle_mark(move_down=True)

        self.assertTrue(marks.state.entries[3].marked)
        self.assertEqual(marks.state.selected, 4)
        self.assertEqual(marks.state.total, 100)

    def test_mark_up_marks_then_moves_up(self) -> None:
        marks = _controller(_listing())
        marks.state.selected = 4

        marks.mark_up()

        self.assertTrue(marks.state.entries[4].marked)
        self.assertEqual(marks.state.selected, 3)

    def test_mark_right_applies_one_state_to_a_page(self) -> None:
        entries = [FileEntry(f"f{index}", size=1) for index in range(8)]
        marks = _controller(entries, lines=3)

        marks.mark_right()

        self.assertEqual([entry.marked for entry in entries], [True] * 4 + [False] * 4)
        self.assertEqual(marks.state.selected, 3)

    def test_unmark_all_resets_totals(self) -> None:
        marks = _controller(_listing())
        marks.invert()

        marks.unmark_all()

        self.assertEqual((marks.state.marked, marks.state.dirs_marked, marks.state.total), (0, 0, 0))
        self.assertFalse(any(entry.marked for entry in marks.state.entries))


class PatternMarkTests(unittest.TestCase):
    def test_select_by_glob_skips_directories_when_files_only(self) -> None:
        entries = _listing() + [FileEntry("lib.py", mode=DIR_MODE)]
        marks = _controller(entries)

        changed = marks.select_by_pattern("*.py", files_only=True)

        self.assertEqual(changed, 2)
        self.assertEqual([entry.name for entry in marks.state.marked_entries()], ["a.py", "b.py"])

    def test_unselect_by_regex(self) -> None:
        marks = _controller(_listing())
        marks.invert(files_only=True)

        marks.select_by_pattern(r"[ab]\.py", kind=MatchKind.REGEX, select=False)

        self.assertEqual([entry.name for entry in marks.state.marked_entries()], ["notes.txt"])
        self.assertEqual(marks.state.total, 30)

    def test_bad_regex_raises_pattern_error(self) -> None:
        marks = _controller(_listing())

        with self.assertRaises(PatternError):
            marks.select_by_pattern("(", kind=MatchKind.REGEX)

    def test_select_by_extension_toggles_matching_files(self) -> None:
        marks = _controller(_listing())
        marks.state.selected = 3

        changed = marks.select_by_extension()

        self.assertEqual(changed, 2)
        self.assertEqual(marks.state.marked, 2)


class RecalculateTests(unittest.TestCase):
    def test_totals_equal_direct_sum_after_random_marking(self) -> None:
        rng = random.Random(7)
        entries = [FileEntry("..", mode=DIR_MODE)] + [
            FileEntry(
                f"e{index}",
                mode=DIR_MODE if index % 5 == 0 else stat.S_IFREG | 0o644,
                size=rng.randint(0, 10_000),
                dir_size_computed=index % 10 == 0,
            )
            for index in range(1, 60)
        ]
        marks = _controller(entries)
        for _ in range(500):
            marks.mark_entry(rng.randrange(len(entries)), rng.random() < 0.5)

        for entry in entries[1:20]:
            entry.size += 1
        marks.recalculate()

        marked = [entry for entry in entries if entry.marked]
        expected_total = sum(
            entry.size for entry in marked if not entry.is_dir or entry.dir_size_computed
        )
        self.assertEqual(marks.state.total, expected_total)
        self.assertEqual(marks.state.marked, len(marked))
        self.assertEqual(marks.state.dirs_marked, sum(1 for entry in marked if entry.is_dir))
        self.assertFalse(entries[0].marked)


if __name__ == "__main__":
    unittest.main()
