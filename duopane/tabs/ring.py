"""Tabs and the per-panel tab ring.

The ring is a list ordered from its head plus the index of the current tab.
It is never empty: a new ring starts with one blank tab.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class TabDirection(str, Enum):
    NEXT = "next"
    PREV = "prev"
    FIRST = "first"
    LAST = "last"
    ABSOLUTE = "absolute"

    @classmethod
    def from_id(cls, value: object, default: TabDirection | None = None) -> TabDirection:
        try:
            direction = cls(str(value))
        except ValueError:
            return default or TabDirection.NEXT
        if direction is TabDirection.ABSOLUTE:
            return default or TabDirection.NEXT
        return direction


@dataclass
class Tab:
    """A remembered directory with an optional user-given name.

    ``path`` is stale while the tab is current: the panel's own working
    directory is authoritative until the tab is left again.
    """

    name: str | None = None
    path: Path | None = None

    def copy(self) -> Tab:
        return Tab(name=self.name, path=self.path)


class TabRing:
    def __init__(self, tabs: list[Tab] | None = None, current: int = 0) -> None:
        self._tabs: list[Tab] = list(tabs) if tabs else [Tab()]
        if not 0 <= current < len(self._tabs):
            raise IndexError(f"current tab index {current} out of range")
        self._current = current

    def __len__(self) -> int:
        return len(self._tabs)

    def __iter__(self):
        return iter(self._tabs)

    def __getitem__(self, index: int) -> Tab:
        return self._tabs[index]

    @property
    def tabs(self) -> list[Tab]:
        return list(self._tabs)

    @property
    def current(self) -> int:
        return self._current

    @property
    def current_tab(self) -> Tab:
        return self._tabs[self._current]

    @property
    def head(self) -> Tab:
        return self._tabs[0]

    @property
    def is_single(self) -> bool:
        return len(self._tabs) == 1

    def index_of(self, tab: Tab) -> int:
        for index, candidate in enumerate(self._tabs):
            if candidate is tab:
                return index
        return -1

    def insert(self, direction: TabDirection, tab: Tab | None = None) -> Tab:
        """Insert ``tab`` (a new blank tab by default) relative to the current one.

        ``NEXT`` goes right after the current tab and ``PREV`` right before
        it, except that a current head has its previous slot at the ring's
        end. ``FIRST`` makes the tab the new head; ``LAST`` appends it. The
        current tab stays the same.
        """
        tab = tab if tab is not None else Tab()
        current = self._current
        if direction is TabDirection.NEXT:
            position = current + 1
        elif direction is TabDirection.PREV:
            position = current if current > 0 else len(self._tabs)
        elif direction is TabDirection.FIRST:
            position = 0
        else:
            position = len(self._tabs)
        self._tabs.insert(position, tab)
        if position <= current:
            self._current += 1
        return tab

    def target_index(self, direction: TabDirection, index: int | None = None) -> int:
        count = len(self._tabs)
        if direction is TabDirection.NEXT:
            return (self._current + 1) % count
        if direction is TabDirection.PREV:
            return (self._current - 1) % count
        if direction is TabDirection.FIRST:
            return 0
        if direction is TabDirection.LAST:
            return count - 1
        if index is None or not 0 <= index < count:
            raise IndexError(f"tab index {index} out of range")
        return index

    def move_current(self, direction: TabDirection, index: int | None = None) -> Tab:
        self._current = self.target_index(direction, index)
        return self.current_tab

    def remove(self, index: int) -> Tab:
        """Unlink the tab at ``index``; the last remaining tab cannot be removed."""
        if len(self._tabs) == 1:
            raise ValueError("cannot remove the only tab of a ring")
        tab = self._tabs.pop(index)
        if index < self._current or (index == self._current and self._current == len(self._tabs)):
            self._current = max(0, self._current - 1)
        return tab

    def replace_current(self, tab: Tab) -> Tab:
        old = self._tabs[self._current]
        self._tabs[self._current] = tab
        return old

    def reorder_current(self, step: int) -> bool:
        """Move the current tab ``step`` places along the ring, wrapping at the ends."""
        count = len(self._tabs)
        if count < 2 or step == 0:
            return False
        tab = self._tabs.pop(self._current)
        position = (self._current + step) % count
        self._tabs.insert(position, tab)
        self._current = position
        return True


__all__ = ["TabDirection", "Tab", "TabRing"]
