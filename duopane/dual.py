"""Dual-pane context: two panel slots, the focused one and the other one.

Only the event loop touches this object; focus changes swap ``focused`` in
one assignment.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .config import PanelOptions, PanelSetup, TabOptions
from .errors import ChdirError
from .listing.format import ListingMode
from .panel.panel import Panel
from .quickview import QuickView
from .tabs.ring import TabRing
from .tabs.strip import tab_rows, tabs_visible

logger = logging.getLogger(__name__)

LEFT = 0
RIGHT = 1


class PanelMode(str, Enum):
    LISTING = "listing"
    QUICKVIEW = "quickview"


@dataclass(frozen=True)
class SlotGeometry:
    x: int
    width: int

    @property
    def visible(self) -> bool:
        return self.width > 0


PanelFactory = Callable[[int, TabRing | None], Panel]


class DualPane:
    def __init__(
        self,
        left: Panel,
        right: Panel,
        *,
        focused: int = LEFT,
        tab_options: TabOptions | None = None,
        panel_factory: PanelFactory | None = None,
    ) -> None:
        self.slots: list[Panel | QuickView] = [left, right]
        self.focused = focused
        self.tab_options = tab_options or TabOptions()
        self.saved_tabs: TabRing | None = None
        self.panel_factory = panel_factory or self._default_factory
        self._retired: dict[int, tuple[PanelOptions, PanelSetup]] = {}
        self.geometry = [SlotGeometry(0, 0), SlotGeometry(0, 0)]

    @property
    def other_index(self) -> int:
        return 1 - self.focused

    @property
    def current(self) -> Panel | None:
        return self.panel(self.focused)

    @property
    def other(self) -> Panel | None:
        return self.panel(self.other_index)

    def panel(self, index: int) -> Panel | None:
        slot = self.slots[index]
        return slot if isinstance(slot, Panel) else None

    def mode(self, index: int) -> PanelMode:
        return PanelMode.LISTING if isinstance(self.slots[index], Panel) else PanelMode.QUICKVIEW

    def listing_panels(self) -> list[Panel]:
        return [slot for slot in self.slots if isinstance(slot, Panel)]

    def switch_focus(self) -> bool:
        if self.other is None:
            return False
        self.focused = self.other_index
        for panel in self.listing_panels():
            panel.state.dirty = True
        current = self.current
        if current is not None:
            current.marks.reset_sticky()
        return True

    def swap_panels(self) -> None:
        """Exchange the contents of the two slots.

        Focus stays on its side unless that side now holds the quick view.
        """
        self.slots.reverse()
        if self.current is None:
            self.focused = self.other_index
        for panel in self.listing_panels():
            panel.state.dirty = True

    def _default_factory(self, index: int, ring: TabRing | None) -> Panel:
        options, setup = self._retired.get(index, (PanelOptions(), PanelSetup()))
        cwd = Path.cwd()
        if ring is not None and ring.current_tab.path is not None:
            cwd = ring.current_tab.path
        return Panel(cwd, options=options, setup=setup, tabs=ring)

    def set_mode(self, index: int, mode: PanelMode, *, color: bool = True) -> None:
        """Switch a slot between a listing panel and the quick view.

        A listing torn down here leaves its tab ring in ``saved_tabs``; the
        next listing created in a slot adopts it.
        """
        if self.mode(index) is mode:
            return
        if mode is PanelMode.QUICKVIEW:
            panel = self.slots[index]
            assert isinstance(panel, Panel)
            self.saved_tabs = panel.detach_tabs()
            self._retired[index] = (panel.options, panel.setup)
            view = QuickView(color=color)
            self.slots[index] = view
            self.refresh_quick_view()
            return
        ring, self.saved_tabs = self.saved_tabs, None
        self.slots[index] = self.panel_factory(index, ring)

    def toggle_quick_view(self, *, color: bool = True) -> PanelMode:
        index = self.other_index
        target = PanelMode.LISTING if self.mode(index) is PanelMode.QUICKVIEW else PanelMode.QUICKVIEW
        self.set_mode(index, target, color=color)
        return target

    def refresh_quick_view(self) -> None:
        current = self.current
        for slot in self.slots:
            if isinstance(slot, QuickView):
                slot.show(current.selected_path if current is not None else None)

    def any_long_format(self) -> bool:
        return any(panel.listing_mode is ListingMode.LONG for panel in self.listing_panels())

    def tabs_visible_for(self, index: int) -> bool:
        panel = self.panel(index)
        if panel is None:
            return False
        return tabs_visible(
            len(panel.tabs),
            hide_tabs=self.tab_options.hide_tabs,
            any_long_format=self.any_long_format(),
            is_focused=index == self.focused,
        )

    def layout(self, cols: int, rows: int) -> list[SlotGeometry]:
        """Split the screen between the slots and resize the listing panels.

        A focused panel with a full-frame format takes the whole width.
        """
        current = self.current
        if current is not None and current.state.format.is_full_frame:
            geometry = [SlotGeometry(0, 0), SlotGeometry(0, 0)]
            geometry[self.focused] = SlotGeometry(0, cols)
        else:
            left_width = cols // 2
            geometry = [SlotGeometry(0, left_width), SlotGeometry(left_width, cols - left_width)]
        for index, slot in enumerate(self.slots):
            if isinstance(slot, Panel) and geometry[index].visible:
                rows_for_tabs = tab_rows(self.tabs_visible_for(index), self.tab_options.bar_position)
                slot.resize(geometry[index].width, rows, rows_for_tabs)
        self.geometry = geometry
        return geometry

    def chdir_other_panel(self) -> None:
        """Point the other panel at the selected directory (or at the parent for a file)."""
        current, other = self.current, self.other
        if current is None or other is None:
            return
        entry = current.selection
        if entry is None:
            return
        select: str | None = None
        if entry.is_dir_like and not entry.is_dotdot:
            target = current.cwd / entry.name
        else:
            target = current.cwd.parent
            select = current.cwd.name
        other.chdir(target)
        if select:
            other.navigation.select_name(select)
        current.navigation.move_down()

    def sync_other_panel(self) -> None:
        """Show the focused panel's directory and selection in the other panel."""
        current, other = self.current, self.other
        if current is None or other is None:
            return
        other.chdir(current.cwd)
        if current.selection is not None:
            other.navigation.select_name(current.selection.name)

    def chdir_to_readlink(self) -> None:
        """Point the other panel at the target of the selected directory symlink.

        Raises ``ChdirError`` when the selection is not such a link or the
        link cannot be read; neither panel changes then.
        """
        current, other = self.current, self.other
        if current is None or other is None:
            return
        entry = current.selection
        if entry is None or not entry.is_link or not entry.link_to_dir:
            name = entry.name if entry is not None else ""
            raise ChdirError(current.cwd / name, "Not a symbolic link to a directory")
        link = current.cwd / entry.name
        try:
            target = os.readlink(link)
        except OSError as exc:
            raise ChdirError(link, exc.strerror or str(exc)) from exc
        other.chdir(current.cwd / target)


__all__ = ["LEFT", "RIGHT", "PanelMode", "SlotGeometry", "DualPane"]
