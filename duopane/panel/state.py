"""Per-panel view state shared by navigation, marking, search and painting."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..entries import FileEntry
from ..listing.format import CompiledFormat
from ..sorting import SortField

# Top frame, column header and bottom frame.
FRAME_ROWS = 3
MINI_INFO_ROWS = 2


@dataclass
class PanelViewState:
    """Cursor, viewport, marks and sort/search state of one panel.

    ``selected`` and ``top`` index into ``entries``. ``content_shift`` is -1
    while no horizontal name scroll is active; ``max_shift`` is the widest
    name overflow seen since the last directory load.
    """

    entries: list[FileEntry] = field(default_factory=list)
    selected: int = 0
    top: int = 0
    content_shift: int = -1
    max_shift: int = -1
    marked: int = 0
    dirs_marked: int = 0
    total: int = 0
    format: CompiledFormat = field(default_factory=CompiledFormat)
    status_format: CompiledFormat = field(default_factory=CompiledFormat)
    list_cols: int = 1
    sort_field: SortField = SortField.NAME
    reverse: bool = False
    case_sensitive: bool = True
    filter: str | None = None
    search_buffer: str = ""
    prev_search_buffer: str = ""
    searching: bool = False
    dirty: bool = True
    rows: int = 24
    cols: int = 80
    mini_info_rows: int = MINI_INFO_ROWS
    tab_rows: int = 0

    @property
    def count(self) -> int:
        return len(self.entries)

    @property
    def lines(self) -> int:
        """Number of list rows visible in each list column."""
        return max(1, self.rows - FRAME_ROWS - self.mini_info_rows - self.tab_rows)

    @property
    def items_per_page(self) -> int:
        return self.lines * max(1, self.list_cols)

    @property
    def selection(self) -> FileEntry | None:
        if 0 <= self.selected < len(self.entries):
            return self.entries[self.selected]
        return None

    def index_of(self, name: str) -> int:
        """Return the index of the entry called ``name`` or -1."""
        for index, entry in enumerate(self.entries):
            if entry.name == name:
                return index
        return -1

    def marked_entries(self) -> list[FileEntry]:
        return [entry for entry in self.entries if entry.marked]

    def reset_scroll(self) -> None:
        self.content_shift = -1
        self.max_shift = -1


__all__ = ["FRAME_ROWS", "MINI_INFO_ROWS", "PanelViewState"]
