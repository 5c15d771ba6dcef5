"""Tab manager scenarios over two real panels.

Each test builds directories ``a``, ``b`` and ``c`` in a temporary root and
checks which directory each panel shows after a tab operation.
"""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from duopane.dual import DualPane
from duopane.panel.panel import Panel
from duopane.tabs.manager import ONLY_TAB_CLOSE_MESSAGE, ONLY_TAB_MOVE_MESSAGE, TabManager
from duopane.tabs.ring import Tab, TabRing


class TabManagerTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name).resolve()
        for name in ("a", "b", "c"):
            (self.root / name).mkdir()
        self.messages: list[str] = []

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def build(self, left_ring: TabRing | None = None, left_cwd: str = "b") -> TabManager:
        left = Panel(self.root / left_cwd, tabs=left_ring)
        right = Panel(self.root / "c")
        dual = DualPane(left, right)
        dual.layout(80, 24)
        return TabManager(dual, report=self.messages.append)

    def abc_ring(self, current: int = 1) -> TabRing:
        return TabRing(
            [
                Tab("A", self.root / "a"),
                Tab("B", self.root / "b"),
                Tab("C", self.root / "c"),
            ],
            current,
        )

    @staticmethod
    def names(panel: Panel) -> list[str | None]:
        return [tab.name for tab in panel.tabs]


class CloseTests(TabManagerTestCase):
    def test_close_switches_to_the_previous_tab(self) -> None:
        manager = self.build(self.abc_ring())
        left = manager.dual.current

        self.assertTrue(manager.close())

        self.assertEqual(self.names(left), ["A", "C"])
        self.assertEqual(left.tabs.current_tab.name, "A")
        self.assertEqual(left.cwd, self.root / "a")

    def test_closing_the_head_wraps_to_the_last_tab(self) -> None:
        manager = self.build(self.abc_ring())
        left = manager.dual.current
        manager.close()

        self.assertTrue(manager.close())

        self.assertEqual(self.names(left), ["C"])
        self.assertEqual(left.cwd, self.root / "c")

    def test_only_tab_is_never_closed(self) -> None:
        manager = self.build()
        left = manager.dual.current

        self.assertFalse(manager.close())

        self.assertEqual(len(left.tabs), 1)
        self.assertEqual(self.messages, [ONLY_TAB_CLOSE_MESSAGE])


class SwitchTests(TabManagerTestCase):
    def test_next_and_goto_change_directory(self) -> None:
        manager = self.build(self.abc_ring())
        left = manager.dual.current

        self.assertTrue(manager.next())
        self.assertEqual(left.cwd, self.root / "c")
        self.assertEqual(left.tabs[1].path, self.root / "b")

        self.assertTrue(manager.goto_index(0))
        self.assertEqual(left.cwd, self.root / "a")
        self.assertFalse(manager.goto_index(0))
        self.assertFalse(manager.goto_index(7))

    def test_left_tab_remembers_the_directory_it_was_in(self) -> None:
        manager = self.build(self.abc_ring())
        left = manager.dual.current
        left.chdir(self.root)

        manager.prev()
        manager.next()

        self.assertEqual(left.cwd, self.root)

    def test_failed_directory_change_is_reported_and_the_switch_stands(self) -> None:
        ring = TabRing([Tab("A", self.root / "a"), Tab("gone", self.root / "gone")])
        manager = self.build(ring, left_cwd="a")
        left = manager.dual.current

        self.assertFalse(manager.next())

        self.assertEqual(left.tabs.current_tab.name, "gone")
        self.assertEqual(left.cwd, self.root / "a")
        self.assertEqual(len(self.messages), 1)

    def test_new_tab_opens_next_to_the_current_one(self) -> None:
        manager = self.build(left_cwd="a")
        left = manager.dual.current

        tab = manager.new_tab()

        self.assertEqual(len(left.tabs), 2)
        self.assertIs(left.tabs.current_tab, tab)
        self.assertEqual(left.tabs[0].path, self.root / "a")
        self.assertEqual(left.cwd, self.root / "a")

    def test_rename_ignores_empty_names(self) -> None:
        manager = self.build()
        left = manager.dual.current

        self.assertFalse(manager.rename(""))
        self.assertTrue(manager.rename("work"))
        self.assertEqual(left.tabs.current_tab.name, "work")

    def test_move_tab_reorders(self) -> None:
        manager = self.build(self.abc_ring())
        left = manager.dual.current

        self.assertTrue(manager.move_tab(1))

        self.assertEqual(self.names(left), ["A", "C", "B"])


class CrossPanelTests(TabManagerTestCase):
    def test_copy_opens_the_directory_in_the_other_panel(self) -> None:
        manager = self.build(self.abc_ring())
        dual = manager.dual
        right = dual.other

        self.assertTrue(manager.copy_to_other_panel())

        self.assertEqual(len(right.tabs), 2)
        self.assertEqual(right.tabs.current_tab.name, "B")
        self.assertEqual(right.cwd, self.root / "b")
        self.assertEqual(right.tabs[0].path, self.root / "c")
        self.assertEqual(dual.focused, 0)

    def test_move_hands_the_tab_over_and_follows_it(self) -> None:
        manager = self.build(self.abc_ring())
        dual = manager.dual
        left, right = dual.current, dual.other

        self.assertTrue(manager.move_to_other_panel())

        self.assertEqual(self.names(left), ["A", "C"])
        self.assertEqual(left.cwd, self.root / "a")
        self.assertEqual(self.names(right), [None, "B"])
        self.assertEqual(right.cwd, self.root / "b")
        self.assertIs(dual.current, right)

    def test_only_tab_is_never_moved(self) -> None:
        manager = self.build()

        self.assertFalse(manager.move_to_other_panel())
        self.assertEqual(self.messages, [ONLY_TAB_MOVE_MESSAGE])

    def test_swap_of_single_tab_panels_swaps_the_panels(self) -> None:
        manager = self.build()
        dual = manager.dual
        left, right = dual.current, dual.other

        self.assertTrue(manager.swap())

        self.assertIs(dual.panel(0), right)
        self.assertIs(dual.panel(1), left)
        self.assertEqual(dual.focused, 0)

    def test_swap_exchanges_current_tabs_and_follows_focus(self) -> None:
        ring = TabRing([Tab("A", self.root / "a"), Tab("B", self.root / "b")])
        manager = self.build(ring, left_cwd="a")
        dual = manager.dual
        left, right = dual.current, dual.other

        self.assertTrue(manager.swap())

        self.assertEqual(left.cwd, self.root / "c")
        self.assertEqual(right.cwd, self.root / "a")
        self.assertEqual(right.tabs.current_tab.name, "A")
        self.assertIs(dual.current, right)


class TitleTests(TabManagerTestCase):
    def test_titles_mark_the_unfocused_current_tab(self) -> None:
        manager = self.build(TabRing([Tab("A"), Tab("B")]))

        self.assertEqual(manager.titles(0), ["A ", "B "])
        self.assertEqual(manager.titles(1), ["c*"])


if __name__ == "__main__":
    unittest.main()
