"""One file-listing panel: working directory, listing, formats, sort and history.

Directory changes load the new listing before touching any state, so a
failed change leaves the panel exactly as it was.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterable
from pathlib import Path

from ..config import PanelOptions, PanelSetup
from ..entries import FileEntry, directory_signature, load_directory, load_paths
from ..errors import ChdirError, DirectoryReadError, FormatError
from ..listing.format import (
    DEFAULT_USER_FORMAT,
    CompiledFormat,
    ListingMode,
    compile_format,
    list_format_text,
    status_format_text,
)
from ..listing.layout import layout_format
from ..matching import MatchKind, PatternMatcher
from ..sorting import SortField, sort_entries
from ..tabs.ring import TabRing
from .history import DirectoryHistory, FreeSpace, FreeSpaceCache
from .marking import MarkController
from .navigation import NavigationController, ScrollPolicy
from .search import QuickSearch
from .state import MINI_INFO_ROWS, PanelViewState

logger = logging.getLogger(__name__)

INVALID_FORMAT_MESSAGE = "User supplied format looks invalid, reverting to default."


def _noop_report(message: str) -> None:
    return None


class Panel:
    is_listing = True

    def __init__(
        self,
        cwd: Path | str,
        *,
        options: PanelOptions | None = None,
        setup: PanelSetup | None = None,
        tabs: TabRing | None = None,
        report: Callable[[str], None] | None = None,
        load: bool = True,
    ) -> None:
        self.options = options or PanelOptions()
        self.setup = setup or PanelSetup()
        self.report = report or _noop_report
        self.state = PanelViewState(
            sort_field=self.setup.sort_field,
            reverse=self.setup.reverse,
            case_sensitive=self.setup.case_sensitive,
            mini_info_rows=MINI_INFO_ROWS if self.options.show_mini_info else 0,
        )
        self.navigation = NavigationController(
            self.state,
            ScrollPolicy(
                scroll_pages=self.options.scroll_pages,
                scroll_center=self.options.scroll_center,
                smart_home_end=self.options.smart_home_end,
            ),
        )
        self.marks = MarkController(self.state, self.navigation)
        self.search = QuickSearch(self.state, self.navigation, self.options.qsearch_mode)
        self.history = DirectoryHistory()
        self.free_space = FreeSpaceCache()
        self.tabs = tabs if tabs is not None else TabRing()
        self.cwd = Path(os.path.abspath(cwd))
        self.lwd: Path | None = None
        self.is_panelized = False
        self.panelized_paths: list[str] = []
        self._signature: tuple[float, float] | None = None
        self.set_formats()
        if load:
            try:
                self._install(self._read(self.cwd))
            except DirectoryReadError as exc:
                logger.warning("%s", exc)
                self.report(str(exc))
                self._install(load_paths([], self.cwd))
            self.history.add(self.cwd)

    @property
    def listing_mode(self) -> ListingMode:
        return self.setup.list_format

    @property
    def selection(self) -> FileEntry | None:
        return self.state.selection

    @property
    def selected_path(self) -> Path | None:
        entry = self.state.selection
        if entry is None:
            return None
        if entry.is_dotdot:
            return self.cwd.parent
        return self.cwd / entry.name

    def resize(self, cols: int, rows: int, tab_rows: int = 0) -> None:
        state = self.state
        if (state.cols, state.rows, state.tab_rows) != (cols, rows, tab_rows):
            state.max_shift = -1
        state.cols = cols
        state.rows = rows
        state.tab_rows = tab_rows
        state.mini_info_rows = MINI_INFO_ROWS if self.options.show_mini_info else 0
        self.solve_columns()
        self.navigation.adjust_top()
        state.dirty = True

    def solve_columns(self) -> None:
        """Fit the list and status columns to the current panel width."""
        layout_format(self.state.format, self.state.cols)
        layout_format(self.state.status_format, self.state.cols, is_status=True)

    def _compile(self, text: str, *, is_status: bool) -> CompiledFormat | None:
        try:
            return compile_format(text, is_status=is_status)
        except FormatError as exc:
            logger.warning("invalid display format %r: %s", text, exc)
            self.report(INVALID_FORMAT_MESSAGE)
            return None

    def set_formats(self) -> None:
        """Compile the list and mini-status formats for the current listing mode.

        An invalid user format is replaced by the default one, so the panel
        always ends up with a usable column set.
        """
        setup = self.setup
        mode = setup.list_format
        compiled = self._compile(
            list_format_text(mode, user_format=setup.user_format, brief_cols=setup.brief_cols),
            is_status=False,
        )
        if compiled is None:
            setup.user_format = DEFAULT_USER_FORMAT
            compiled = compile_format(
                list_format_text(mode, user_format=setup.user_format, brief_cols=setup.brief_cols)
            )

        status_text = status_format_text(
            mode,
            user_format=setup.user_format,
            user_mini_status=setup.user_mini_status,
            user_status_formats=setup.user_status_formats,
        )
        status = self._compile(status_text, is_status=True)
        if status is None:
            setup.user_status_formats.pop(mode, None)
            status = compile_format(
                status_format_text(mode, user_format=setup.user_format), is_status=True
            )

        state = self.state
        state.format = compiled
        state.status_format = status
        state.list_cols = compiled.list_cols
        state.reset_scroll()
        self.solve_columns()
        self.navigation.adjust_top()
        state.dirty = True

    def set_listing_mode(self, mode: ListingMode) -> None:
        self.setup.list_format = mode
        self.set_formats()

    def cycle_listing_format(self) -> ListingMode:
        self.set_listing_mode(self.setup.list_format.next())
        return self.setup.list_format

    def _include(self) -> Callable[[str], bool] | None:
        if not self.state.filter:
            return None
        matcher = PatternMatcher(self.state.filter, MatchKind.GLOB, True, True)
        return matcher.matches

    def _read(self, directory: Path) -> list[FileEntry]:
        entries = load_directory(
            directory,
            show_hidden=self.options.show_hidden,
            include=self._include(),
        )
        self._sort(entries)
        return entries

    def _sort(self, entries: list[FileEntry]) -> None:
        state = self.state
        sort_entries(
            entries,
            state.sort_field,
            reverse=state.reverse,
            case_sensitive=state.case_sensitive,
            mix_all_files=self.options.mix_all_files,
        )

    def _install(self, entries: list[FileEntry]) -> None:
        state = self.state
        state.entries = entries
        state.selected = 0
        state.top = 0
        state.marked = 0
        state.dirs_marked = 0
        state.total = 0
        state.reset_scroll()
        self.marks.recalculate()
        self._signature = directory_signature(self.cwd)
        state.dirty = True

    def chdir(self, path: Path | str, *, record_history: bool = True) -> None:
        """Change into ``path`` (relative paths resolve against the cwd).

        Raises ``ChdirError`` and leaves the panel untouched when the
        directory cannot be listed.
        """
        target = Path(os.path.normpath(self.cwd / Path(path).expanduser()))
        try:
            entries = self._read(target)
        except DirectoryReadError as exc:
            raise ChdirError(target, exc.reason) from exc

        previous = self.cwd
        if self.state.searching:
            self.search.stop()
        self.lwd = previous
        self.cwd = target
        self.is_panelized = False
        self.panelized_paths = []
        self.free_space.invalidate()
        self._install(entries)
        if previous.parent == target and previous != target:
            self.navigation.select_name(previous.name)
        else:
            self.navigation.adjust_top()
        if record_history:
            self.history.add(target)
        logger.debug("panel changed directory to %s", target)

    def reload(self) -> bool:
        """Re-read the listing, keeping marks and the selection by name.

        A vanished working directory is replaced by its nearest existing
        parent. Returns ``False`` when fast reload found nothing to do.
        """
        state = self.state
        if self.is_panelized:
            fresh = load_paths(self.panelized_paths, self.cwd)
        else:
            if self.options.fast_reload and directory_signature(self.cwd) == self._signature:
                return False
            directory = self.cwd
            while not directory.is_dir() and directory.parent != directory:
                directory = directory.parent
            try:
                fresh = self._read(directory)
            except DirectoryReadError as exc:
                logger.warning("%s", exc)
                self.report(str(exc))
                return False
            if directory != self.cwd:
                self.lwd = self.cwd
                self.cwd = directory
                self.history.add(directory)

        marked_names = {entry.name for entry in state.entries if entry.marked}
        selected = state.selection.name if state.selection is not None else None
        top = state.top
        for entry in fresh:
            entry.marked = entry.name in marked_names and not entry.is_dotdot
        self.free_space.invalidate()
        self._install(fresh)
        state.top = top
        if selected is not None and state.index_of(selected) >= 0:
            state.selected = state.index_of(selected)
        self.navigation.adjust_top()
        return True

    def enter(self) -> bool:
        """Change into the selected directory; ``False`` for anything else."""
        entry = self.state.selection
        if entry is None:
            return False
        if entry.is_dotdot:
            self.cd_parent()
            return True
        if entry.is_dir_like:
            self.chdir(self.cwd / entry.name)
            return True
        return False

    def cd_parent(self) -> None:
        if not self.is_panelized:
            self.chdir(self.cwd.parent)
            return
        entry = self.state.selection
        if entry is None or entry.is_dotdot:
            self.chdir(self.cwd)
            return
        full = Path(entry.name) if os.path.isabs(entry.name) else self.cwd / entry.name
        self.chdir(full.parent)
        self.navigation.select_name(full.name)

    def cd_child(self) -> bool:
        entry = self.state.selection
        if entry is None or entry.is_dotdot or not entry.is_dir_like:
            return False
        self.chdir(self.cwd / entry.name)
        return True

    def sortable_fields(self) -> list[SortField]:
        """Sort fields offered by the columns of the current format (all when none)."""
        found: list[SortField] = []
        for column in self.state.format.columns:
            field = column.field.sort_field
            if field is not None and field not in found:
                found.append(field)
        return found or list(SortField)

    def set_sort_field(self, field: SortField) -> None:
        """Sort by ``field``; choosing the active field again flips the order.

        ``UNSORTED`` re-reads the directory since load order cannot be
        recovered from a sorted listing.
        """
        state = self.state
        if field is state.sort_field:
            state.reverse = not state.reverse
        else:
            state.sort_field = field
        self.setup.sort_field = state.sort_field
        self.setup.reverse = state.reverse
        if field is SortField.UNSORTED and not self.is_panelized:
            self.reload_unsorted()
            return
        self.re_sort()

    def reload_unsorted(self) -> None:
        selected = self.state.selection.name if self.state.selection is not None else None
        marked = {entry.name for entry in self.state.entries if entry.marked}
        try:
            entries = self._read(self.cwd)
        except DirectoryReadError as exc:
            logger.warning("%s", exc)
            self.report(str(exc))
            return
        for entry in entries:
            entry.marked = entry.name in marked and not entry.is_dotdot
        self._install(entries)
        if selected is not None:
            self.navigation.select_name(selected)

    def re_sort(self) -> None:
        """Sort the listing in place, keeping the selected entry selected and centered."""
        state = self.state
        selected = state.selection.name if state.selection is not None else None
        self._sort(state.entries)
        state.selected = state.index_of(selected) if selected is not None else 0
        state.selected = max(0, state.selected)
        state.top = state.selected - state.items_per_page // 2
        self.navigation.adjust_top()
        state.dirty = True

    def _step_sort(self, step: int) -> SortField:
        fields = self.sortable_fields()
        current = self.state.sort_field
        index = fields.index(current) if current in fields else -step
        field = fields[(index + step) % len(fields)]
        if field is not current:
            self.set_sort_field(field)
        return field

    def sort_next(self) -> SortField:
        return self._step_sort(1)

    def sort_prev(self) -> SortField:
        return self._step_sort(-1)

    def toggle_reverse(self) -> None:
        self.set_sort_field(self.state.sort_field)

    def toggle_case_sensitive(self) -> None:
        self.state.case_sensitive = not self.state.case_sensitive
        self.setup.case_sensitive = self.state.case_sensitive
        self.re_sort()

    def set_filter(self, pattern: str | None) -> None:
        """Show only files matching the glob ``pattern`` (``None`` clears it)."""
        pattern = pattern.strip() if pattern else None
        if pattern:
            # Raises PatternError before the filter is installed.
            PatternMatcher(pattern, MatchKind.GLOB, True, True)
        self.state.filter = pattern or None
        self._signature = None
        self.reload()

    def toggle_hidden(self) -> bool:
        self.options.show_hidden = not self.options.show_hidden
        self._signature = None
        self.reload()
        return self.options.show_hidden

    def panelize(self, paths: Iterable[Path | str]) -> None:
        """Replace the listing with an arbitrary list of paths under the cwd."""
        self.panelized_paths = [str(path) for path in paths]
        self.is_panelized = True
        self._install(load_paths(self.panelized_paths, self.cwd))

    def history_prev(self) -> bool:
        return self._history_move(-1)

    def history_next(self) -> bool:
        return self._history_move(1)

    def _history_move(self, step: int) -> bool:
        target = self.history.back() if step < 0 else self.history.forward()
        if target is None:
            return False
        try:
            self.chdir(target, record_history=False)
        except ChdirError:
            self.history.undo_move(step)
            raise
        return True

    def free_space_info(self) -> FreeSpace | None:
        if not self.options.free_space:
            return None
        return self.free_space.get(self.cwd)

    def snapshot_tab(self) -> None:
        """Store the live directory into the current tab."""
        self.tabs.current_tab.path = self.cwd

    def detach_tabs(self) -> TabRing:
        self.snapshot_tab()
        return self.tabs


__all__ = ["INVALID_FORMAT_MESSAGE", "Panel"]
