from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from duopane.panel.history import DirectoryHistory, FreeSpace, FreeSpaceCache


class DirectoryHistoryTests(unittest.TestCase):
    def test_adding_after_going_back_drops_forward_entries(self) -> None:
        history = DirectoryHistory()
        for name in ("a", "b", "c"):
            history.add(Path(name))

        self.assertEqual(history.back(), Path("b"))
        history.add(Path("d"))

        self.assertEqual(history.entries, [Path("a"), Path("b"), Path("d")])
        self.assertIsNone(history.forward())

    def test_revisiting_the_current_directory_is_ignored(self) -> None:
        history = DirectoryHistory()
        history.add(Path("a"))
        history.add(Path("a"))

        self.assertEqual(history.entries, [Path("a")])

    def test_oldest_entries_are_dropped_past_the_limit(self) -> None:
        history = DirectoryHistory(max_entries=3)
        for name in "abcde":
            history.add(Path(name))

        self.assertEqual(history.entries, [Path("c"), Path("d"), Path("e")])
        self.assertEqual(history.current, Path("e"))


class FreeSpaceCacheTests(unittest.TestCase):
    def test_statvfs_is_called_once_per_directory(self) -> None:
        cache = FreeSpaceCache()
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            with mock.patch("duopane.panel.history.os.statvfs", wraps=os.statvfs) as statvfs:
                first = cache.get(root)
                second = cache.get(root)
                cache.invalidate()
                cache.get(root)

        self.assertEqual(first, second)
        self.assertEqual(statvfs.call_count, 2)

    def test_unreadable_directory_yields_none(self) -> None:
        cache = FreeSpaceCache()

        self.assertIsNone(cache.get(Path("/definitely/not/here")))

    def test_percent(self) -> None:
        self.assertEqual(FreeSpace(avail=25, total=100).percent, 25)
        self.assertEqual(FreeSpace(avail=0, total=0).percent, 0)


if __name__ == "__main__":
    unittest.main()
