"""Navigation controller: selection, viewport top and horizontal name scroll.

Every operation returns ``True`` when it moved something and ``False`` for a
no-op at a boundary. The viewport invariant
``top <= selected < top + items_per_page`` holds after every operation on a
non-empty listing.
"""

from __future__ import annotations

from dataclasses import dataclass

from .state import PanelViewState


@dataclass(frozen=True)
class ScrollPolicy:
    """Viewport policy for single-step moves.

    ``scroll_pages`` jumps half a page when the cursor leaves the viewport;
    ``scroll_center`` scrolls once the cursor passes the viewport middle.
    With neither set the viewport moves by the minimum needed.
    """

    scroll_pages: bool = False
    scroll_center: bool = False
    smart_home_end: bool = False


class NavigationController:
    def __init__(self, state: PanelViewState, policy: ScrollPolicy | None = None) -> None:
        self.state = state
        self.policy = policy or ScrollPolicy()

    def _selection_changed(self) -> None:
        self.adjust_top()
        self.state.dirty = True

    def adjust_top(self) -> None:
        """Clamp the selection and move ``top`` as little as possible to show it."""
        state = self.state
        count = state.count
        if count == 0:
            state.selected = 0
            state.top = 0
            return
        state.selected = max(0, min(state.selected, count - 1))
        items = state.items_per_page
        if count <= items:
            state.top = 0
            return
        top = max(0, state.top)
        top = max(top, state.selected - items + 1)
        top = min(top, count - items)
        top = min(top, state.selected)
        state.top = top

    def selected_at_half(self) -> int:
        """Distance of the cursor from the middle row of its list column."""
        state = self.state
        lines = state.lines
        top = state.top
        if state.list_cols > 1:
            top += lines * ((state.selected - top) // lines)
        return state.selected - top - lines // 2

    def move_down(self) -> bool:
        state = self.state
        if state.selected + 1 >= state.count:
            return False
        state.selected += 1
        items = state.items_per_page
        if self.policy.scroll_pages and state.selected - state.top == items:
            state.top = min(state.top + items // 2, state.count - items)
        elif self.policy.scroll_center and self.selected_at_half() > 0:
            state.top = min(state.top + 1, state.count - items)
        self._selection_changed()
        return True

    def move_up(self) -> bool:
        state = self.state
        if state.selected <= 0:
            return False
        state.selected -= 1
        if self.policy.scroll_pages and state.selected < state.top:
            state.top = max(0, state.top - state.items_per_page // 2)
        elif self.policy.scroll_center and self.selected_at_half() < 0:
            state.top = max(0, state.top - 1)
        self._selection_changed()
        return True

    def move_selection(self, lines: int) -> bool:
        """Move the cursor by ``lines`` entries, clamped to the listing."""
        state = self.state
        if state.count == 0:
            return False
        new_pos = max(0, min(state.selected + lines, state.count - 1))
        if new_pos == state.selected:
            return False
        state.selected = new_pos
        offset = state.selected - state.top
        if offset >= state.items_per_page or offset < 0:
            state.top = max(0, min(state.top + lines, state.selected))
        self._selection_changed()
        return True

    def move_left(self) -> bool:
        """Move one visual column left; ``False`` in single-column listings."""
        if self.state.list_cols <= 1:
            return False
        self.move_selection(-self.state.lines)
        return True

    def move_right(self) -> bool:
        if self.state.list_cols <= 1:
            return False
        self.move_selection(self.state.lines)
        return True

    def prev_page(self) -> bool:
        state = self.state
        if state.selected == 0 and state.top == 0:
            return False
        items = min(state.items_per_page, state.top)
        if items == 0:
            state.selected = 0
        else:
            state.selected -= items
        state.top -= items
        self._selection_changed()
        return True

    def next_page(self) -> bool:
        state = self.state
        if state.count == 0 or state.selected == state.count - 1:
            return False
        items = state.items_per_page
        if state.top > state.count - 2 * items:
            items = state.count - items - state.top
        if state.top + items < 0:
            items = -state.top
        if items == 0:
            state.selected = state.count - 1
        else:
            state.selected += items
        state.top += items
        self._selection_changed()
        return True

    def goto_top_file(self) -> bool:
        self.state.selected = self.state.top
        self._selection_changed()
        return True

    def goto_middle_file(self) -> bool:
        self.state.selected = self.state.top + self.state.items_per_page // 2
        self._selection_changed()
        return True

    def goto_bottom_file(self) -> bool:
        self.state.selected = self.state.top + self.state.items_per_page - 1
        self._selection_changed()
        return True

    def move_home(self) -> bool:
        """Go to the first entry; smart mode stops at the middle and top of the viewport first."""
        state = self.state
        if state.selected == 0:
            return False
        if self.policy.smart_home_end:
            middle = state.top + state.items_per_page // 2
            if state.selected > middle:
                return self.goto_middle_file()
            if state.selected != state.top:
                return self.goto_top_file()
        state.top = 0
        state.selected = 0
        self._selection_changed()
        return True

    def move_end(self) -> bool:
        state = self.state
        if state.count == 0 or state.selected == state.count - 1:
            return False
        if self.policy.smart_home_end:
            items = state.items_per_page
            middle = state.top + items // 2
            if state.selected < middle:
                return self.goto_middle_file()
            if state.selected != state.top + items - 1:
                return self.goto_bottom_file()
        state.selected = state.count - 1
        self._selection_changed()
        return True

    def content_scroll_left(self) -> bool:
        state = self.state
        if state.content_shift <= -1:
            return False
        if state.content_shift > state.max_shift:
            state.content_shift = state.max_shift
        state.content_shift -= 1
        state.dirty = True
        return True

    def content_scroll_right(self) -> bool:
        state = self.state
        if state.content_shift >= 0 and state.content_shift >= state.max_shift:
            return False
        state.content_shift += 1
        state.dirty = True
        return True

    def select_index(self, index: int) -> None:
        """Select ``index`` and center the viewport on it."""
        state = self.state
        if index != state.selected:
            state.selected = index
            state.top = max(0, index - state.lines // 2)
        self._selection_changed()

    def select_visible(self, index: int) -> None:
        """Select an on-screen entry without scrolling the viewport."""
        self.state.selected = index
        self._selection_changed()

    def select_name(self, name: str) -> bool:
        """Select the entry whose name matches ``name`` (or its basename).

        When nothing matches the current selection is only clamped.
        """
        state = self.state
        base = name.rstrip("/").rsplit("/", 1)[-1] or name
        for candidate in (name, base):
            index = state.index_of(candidate)
            if index >= 0:
                self.select_index(index)
                return True
        self._selection_changed()
        return False


__all__ = ["ScrollPolicy", "NavigationController"]
