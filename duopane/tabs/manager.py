"""Tab operations on the two panels of a ``DualPane``.

Before the current tab is left its path is refreshed from the panel's
working directory; after a switch the panel changes into the new tab's
path. A failed directory change is reported and the switch stands.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from ..config import TabOptions
from ..dual import DualPane
from ..errors import ChdirError
from ..panel.panel import Panel
from .ring import Tab, TabDirection, TabRing
from .strip import TabStripWindow, layout_tab_strip, tab_at_column, tab_title

logger = logging.getLogger(__name__)

ONLY_TAB_CLOSE_MESSAGE = "The current tab is the only one. You cannot close it."
ONLY_TAB_MOVE_MESSAGE = "The current tab is the only one. You cannot move it."


def _noop_report(message: str) -> None:
    return None


class TabManager:
    def __init__(
        self,
        dual: DualPane,
        options: TabOptions | None = None,
        report: Callable[[str], None] | None = None,
    ) -> None:
        self.dual = dual
        self.options = options or dual.tab_options
        self.report = report or _noop_report

    @property
    def new_tab_direction(self) -> TabDirection:
        return TabDirection.from_id(self.options.new_tab_direction)

    def _enter_current(self, panel: Panel) -> bool:
        path = panel.tabs.current_tab.path
        if path is None:
            return True
        try:
            panel.chdir(path)
        except ChdirError as exc:
            logger.warning("%s", exc)
            self.report(str(exc))
            return False
        return True

    def change(self, panel: Panel, direction: TabDirection, index: int | None = None) -> bool:
        """Switch ``panel`` to another tab of its ring and change into its path."""
        ring = panel.tabs
        target = ring.target_index(direction, index)
        panel.snapshot_tab()
        ring.move_current(TabDirection.ABSOLUTE, target)
        panel.state.dirty = True
        return self._enter_current(panel)

    def create(self, panel: Panel, direction: TabDirection | None = None) -> Tab:
        """Insert a blank tab next to the current one without switching to it."""
        return panel.tabs.insert(direction or self.new_tab_direction)

    def new_tab(self, panel: Panel | None = None) -> Tab | None:
        """Open a blank tab and switch to it; the panel stays in its directory."""
        panel = panel or self.dual.current
        if panel is None:
            return None
        direction = self.new_tab_direction
        tab = self.create(panel, direction)
        self.change(panel, direction)
        return tab

    def close(self, panel: Panel | None = None) -> bool:
        """Close the current tab; the previous tab becomes current."""
        panel = panel or self.dual.current
        if panel is None:
            return False
        ring = panel.tabs
        if ring.is_single:
            self.report(ONLY_TAB_CLOSE_MESSAGE)
            return False
        closing = ring.current_tab
        self.change(panel, TabDirection.PREV)
        ring.remove(ring.index_of(closing))
        panel.state.dirty = True
        return True

    def next(self, panel: Panel | None = None) -> bool:
        panel = panel or self.dual.current
        return panel is not None and self.change(panel, TabDirection.NEXT)

    def prev(self, panel: Panel | None = None) -> bool:
        panel = panel or self.dual.current
        return panel is not None and self.change(panel, TabDirection.PREV)

    def goto_index(self, index: int, panel: Panel | None = None) -> bool:
        """Switch to the tab at zero-based ``index``; out-of-range indices are ignored."""
        panel = panel or self.dual.current
        if panel is None or not 0 <= index < len(panel.tabs):
            return False
        if index == panel.tabs.current:
            return False
        return self.change(panel, TabDirection.ABSOLUTE, index)

    def rename(self, name: str | None, panel: Panel | None = None) -> bool:
        """Name the current tab; an empty name leaves the tab unchanged."""
        panel = panel or self.dual.current
        if panel is None or not name:
            return False
        panel.tabs.current_tab.name = name
        panel.state.dirty = True
        return True

    def move_tab(self, step: int, panel: Panel | None = None) -> bool:
        panel = panel or self.dual.current
        if panel is None or not panel.tabs.reorder_current(step):
            return False
        panel.state.dirty = True
        return True

    def copy_to_other_panel(self) -> bool:
        """Open a copy of the current tab in the other panel; focus stays put."""
        current, other = self.dual.current, self.dual.other
        if current is None or other is None:
            return False
        direction = self.new_tab_direction
        tab = self.create(other, direction)
        self.change(other, direction)
        tab.name = current.tabs.current_tab.name
        tab.path = current.cwd
        other.state.dirty = True
        return self._enter_current(other)

    def move_to_other_panel(self) -> bool:
        """Move the current tab into the other panel and follow it there."""
        dual = self.dual
        current, other = dual.current, dual.other
        if current is None or other is None:
            return False
        ring = current.tabs
        if ring.is_single:
            self.report(ONLY_TAB_MOVE_MESSAGE)
            return False
        current.snapshot_tab()
        tab = ring.current_tab
        was_head = ring.current == 0
        other.tabs.insert(self.new_tab_direction, tab)

        self.change(current, TabDirection.PREV)
        ring.remove(ring.index_of(tab))
        if was_head:
            self.change(current, TabDirection.ABSOLUTE, 0)

        self.change(other, TabDirection.ABSOLUTE, other.tabs.index_of(tab))
        dual.switch_focus()
        return True

    def swap(self) -> bool:
        """Exchange the current tabs of the two panels.

        When both panels hold a single tab the panels themselves are
        swapped and focus stays on its side; otherwise focus follows the
        tab that was current.
        """
        dual = self.dual
        current, other = dual.current, dual.other
        if current is None or other is None:
            return False
        if current.tabs.is_single and other.tabs.is_single:
            dual.swap_panels()
            return True
        current.snapshot_tab()
        other.snapshot_tab()
        mine = current.tabs.replace_current(other.tabs.current_tab)
        other.tabs.replace_current(mine)
        self._enter_current(current)
        self._enter_current(other)
        dual.switch_focus()
        return True

    def titles(self, index: int) -> list[str]:
        """Display titles of the tabs of slot ``index`` (empty for a non-listing slot)."""
        dual = self.dual
        panel = dual.panel(index)
        if panel is None:
            return []
        ring: TabRing = panel.tabs
        focused = index == dual.focused
        titles: list[str] = []
        for position, tab in enumerate(ring):
            is_current = position == ring.current
            titles.append(
                tab_title(
                    tab,
                    is_current=is_current,
                    live_path=panel.cwd,
                    panel_cols=panel.state.cols,
                    highlight=is_current and not focused and self.options.highlight_current_tab,
                )
            )
        return titles

    def strip_window(self, index: int) -> TabStripWindow:
        panel = self.dual.panel(index)
        if panel is None:
            return TabStripWindow(0, 0)
        return layout_tab_strip(self.titles(index), panel.tabs.current, strip_usable(panel))

    def click(self, index: int, column: int) -> bool:
        """Handle a click on the tab strip of slot ``index``.

        ``column`` is relative to the panel's left edge. The scroll arrows at
        the strip ends step to the neighbouring tab.
        """
        panel = self.dual.panel(index)
        if panel is None:
            return False
        inner = column - 1
        usable = strip_usable(panel)
        if not 0 <= inner < usable:
            return False
        window = self.strip_window(index)
        if window.scroll_left and inner == 0:
            return self.change(panel, TabDirection.PREV)
        if window.scroll_right and inner == usable - 1:
            return self.change(panel, TabDirection.NEXT)
        target = tab_at_column(self.titles(index), window, inner)
        if target is None or target == panel.tabs.current:
            return False
        return self.change(panel, TabDirection.ABSOLUTE, target)


def strip_usable(panel: Panel) -> int:
    """Strip width inside the panel frame."""
    return max(0, panel.state.cols - 2)


__all__ = [
    "ONLY_TAB_CLOSE_MESSAGE",
    "ONLY_TAB_MOVE_MESSAGE",
    "TabManager",
    "strip_usable",
]
