"""Entry marking with incrementally maintained totals.

``marked``, ``dirs_marked`` and ``total`` on the view state are only ever
changed through ``mark_entry``; ``recalculate`` replays every mark through
the same path.
"""

from __future__ import annotations

from ..matching import MatchKind, PatternMatcher
from .navigation import NavigationController
from .state import PanelViewState


class MarkController:
    def __init__(self, state: PanelViewState, navigation: NavigationController) -> None:
        self.state = state
        self.navigation = navigation
        # Mark value reused by consecutive page marks; -1 when unset.
        self.state_mark = -1

    def mark_entry(self, index: int, mark: bool) -> bool:
        """Set the mark of entry ``index``; ``..`` is never marked."""
        state = self.state
        entry = state.entries[index]
        if entry.marked == mark or entry.is_dotdot:
            return False
        entry.marked = mark
        counted = not entry.is_dir or entry.dir_size_computed
        if mark:
            state.marked += 1
            if entry.is_dir:
                state.dirs_marked += 1
            if counted:
                state.total += entry.size
        else:
            state.marked -= 1
            if entry.is_dir:
                state.dirs_marked -= 1
            if counted:
                state.total -= entry.size
        state.dirty = True
        return True

    def reset_sticky(self) -> None:
        self.state_mark = -1

    def toggle_mark(self, *, move_down: bool = False) -> None:
        """Flip the mark of the selected entry, then optionally step down."""
        state = self.state
        entry = state.selection
        if entry is None:
            return
        self.mark_entry(state.selected, not entry.marked)
        if move_down:
            self.navigation.move_down()

    def mark_up(self) -> None:
        entry = self.state.selection
        if entry is None:
            return
        self.mark_entry(self.state.selected, not entry.marked)
        self.navigation.move_up()

    def mark_down(self) -> None:
        self.toggle_mark(move_down=True)

    def _sticky_mark(self) -> bool:
        if self.state_mark < 0:
            entry = self.state.selection
            self.state_mark = 0 if entry is not None and entry.marked else 1
        return bool(self.state_mark)

    def mark_right(self) -> None:
        """Apply one mark state to a page of entries going down."""
        state = self.state
        if state.selection is None:
            return
        mark = self._sticky_mark()
        steps = min(state.lines, state.count - state.selected - 1)
        for _ in range(steps):
            self.mark_entry(state.selected, mark)
            self.navigation.move_down()
        self.mark_entry(state.selected, mark)

    def mark_left(self) -> None:
        state = self.state
        if state.selection is None:
            return
        mark = self._sticky_mark()
        steps = min(state.lines, state.selected + 1)
        for _ in range(steps):
            self.mark_entry(state.selected, mark)
            self.navigation.move_up()
        self.mark_entry(state.selected, mark)

    def unmark_all(self) -> None:
        state = self.state
        for entry in state.entries:
            if entry.marked:
                entry.marked = False
                state.dirty = True
        state.marked = 0
        state.dirs_marked = 0
        state.total = 0

    def recalculate(self) -> None:
        """Rebuild the totals by unmarking and re-marking every marked entry."""
        state = self.state
        state.marked = 0
        state.dirs_marked = 0
        state.total = 0
        for index, entry in enumerate(state.entries):
            if entry.marked:
                entry.marked = False
                self.mark_entry(index, True)

    def select_by_pattern(
        self,
        pattern: str,
        *,
        kind: MatchKind = MatchKind.GLOB,
        case_sensitive: bool = False,
        files_only: bool = False,
        select: bool = True,
    ) -> int:
        """Mark (or unmark) every entry whose whole name matches ``pattern``.

        Returns the number of entries whose mark changed. Raises
        ``PatternError`` when the pattern does not compile.
        """
        if not pattern:
            return 0
        matcher = PatternMatcher(pattern, kind, case_sensitive, True)
        changed = 0
        for index, entry in enumerate(self.state.entries):
            if entry.is_dotdot or (files_only and entry.is_dir):
                continue
            if matcher.matches(entry.name) and self.mark_entry(index, select):
                changed += 1
        return changed

    def invert(self, *, files_only: bool = False) -> None:
        for index, entry in enumerate(self.state.entries):
            if not files_only or not entry.is_dir:
                self.mark_entry(index, not entry.marked)

    def select_by_extension(self) -> int:
        """Toggle every file sharing the selected entry's extension."""
        state = self.state
        entry = state.selection
        if entry is None:
            return 0
        select = not entry.marked
        name = entry.name
        dot = name.rfind(".")
        ext = name[dot + 1 :] if dot > 0 else ""
        pattern = f"*.{ext}" if ext else "[!.]*"
        matcher = PatternMatcher(pattern, MatchKind.GLOB, False, True)
        changed = 0
        for index, candidate in enumerate(state.entries):
            if candidate.is_dotdot or candidate.is_dir:
                continue
            if not ext and "." in candidate.name:
                continue
            if matcher.matches(candidate.name) and self.mark_entry(index, select):
                changed += 1
        return changed


__all__ = ["MarkController"]
