"""Incremental (quick) search over the entries of one panel."""

from __future__ import annotations

import unicodedata

from ..config import QSEARCH_INSENSITIVE, QSEARCH_MODES, QSEARCH_SENSITIVE, QSEARCH_SORT
from ..matching import quick_search_matcher
from .navigation import NavigationController
from .state import PanelViewState


def drop_last_char(text: str) -> str:
    """Remove the last character together with any combining marks after it."""
    end = len(text)
    while end > 0 and unicodedata.combining(text[end - 1]):
        end -= 1
    return text[: max(0, end - 1)]


class QuickSearch:
    """Prefix search that jumps the selection to the next matching name.

    A keystroke that produces no match is rolled back so the buffer always
    holds the last successful prefix.
    """

    def __init__(
        self,
        state: PanelViewState,
        navigation: NavigationController,
        mode: str = QSEARCH_SORT,
    ) -> None:
        self.state = state
        self.navigation = navigation
        self.mode = mode if mode in QSEARCH_MODES else QSEARCH_SORT

    @property
    def case_sensitive(self) -> bool:
        if self.mode == QSEARCH_SENSITIVE:
            return True
        if self.mode == QSEARCH_INSENSITIVE:
            return False
        return self.state.case_sensitive

    def start(self) -> None:
        """Enter search mode, or jump to the next match when already searching."""
        state = self.state
        if not state.searching:
            state.searching = True
            state.search_buffer = ""
            state.dirty = True
            return
        if state.selected == state.count - 1:
            state.selected = 0
            self.navigation.adjust_top()
        else:
            self.navigation.move_down()
        if not state.search_buffer:
            state.search_buffer = state.prev_search_buffer
        self._search(rollback=False)

    def stop(self) -> None:
        state = self.state
        state.searching = False
        if state.search_buffer:
            state.prev_search_buffer = state.search_buffer
        state.dirty = True

    def key(self, text: str) -> bool:
        """Append ``text`` to the buffer and search; return whether a match was found."""
        self.state.search_buffer += text
        return self._search(rollback=True)

    def backspace(self) -> bool:
        self.state.search_buffer = drop_last_char(self.state.search_buffer)
        return self._search(rollback=False)

    def find(self, buffer: str) -> int:
        """Index of the first entry matching ``buffer`` from the selection, wrapping once."""
        state = self.state
        count = state.count
        if count == 0:
            return -1
        matcher = quick_search_matcher(buffer, self.case_sensitive)
        start = max(0, min(state.selected, count - 1))
        for offset in range(count):
            index = (start + offset) % count
            if matcher.matches(state.entries[index].name):
                return index
        return -1

    def _search(self, *, rollback: bool) -> bool:
        state = self.state
        index = self.find(state.search_buffer)
        if index >= 0:
            state.selected = index
            self.navigation.adjust_top()
            state.dirty = True
            return True
        if rollback:
            state.search_buffer = drop_last_char(state.search_buffer)
        state.dirty = True
        return False


__all__ = [
    "QuickSearch",
    "drop_last_char",
]
