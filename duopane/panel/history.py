"""Directory history and the free-space cache owned by each panel."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

MAX_DIRECTORY_HISTORY = 60


class DirectoryHistory:
    """Visited directories with a cursor for back/forward moves.

    Re-visiting the directory under the cursor is ignored; adding a new
    directory drops everything after the cursor.
    """

    def __init__(self, max_entries: int = MAX_DIRECTORY_HISTORY) -> None:
        self.max_entries = max(1, max_entries)
        self.entries: list[Path] = []
        self.position = -1

    @property
    def current(self) -> Path | None:
        if 0 <= self.position < len(self.entries):
            return self.entries[self.position]
        return None

    def add(self, path: Path) -> None:
        if self.current == path:
            return
        del self.entries[self.position + 1 :]
        self.entries.append(path)
        overflow = len(self.entries) - self.max_entries
        if overflow > 0:
            del self.entries[:overflow]
        self.position = len(self.entries) - 1

    def back(self) -> Path | None:
        if self.position <= 0:
            return None
        self.position -= 1
        return self.entries[self.position]

    def forward(self) -> Path | None:
        if self.position + 1 >= len(self.entries):
            return None
        self.position += 1
        return self.entries[self.position]

    def undo_move(self, step: int) -> None:
        """Revert a back/forward move whose directory change failed."""
        self.position = max(0, min(len(self.entries) - 1, self.position - step))


@dataclass(frozen=True)
class FreeSpace:
    """Filesystem capacity in kilobytes."""

    avail: int
    total: int

    @property
    def percent(self) -> int:
        return 0 if self.total <= 0 else self.avail * 100 // self.total


class FreeSpaceCache:
    """``statvfs`` result for the last directory asked about."""

    def __init__(self) -> None:
        self.directory: Path | None = None
        self.value: FreeSpace | None = None

    def invalidate(self) -> None:
        self.directory = None
        self.value = None

    def get(self, directory: Path) -> FreeSpace | None:
        if self.directory == directory:
            return self.value
        self.directory = directory
        try:
            st = os.statvfs(directory)
        except (OSError, AttributeError):
            self.value = None
        else:
            block = st.f_frsize or st.f_bsize
            self.value = FreeSpace(
                avail=st.f_bavail * block // 1024,
                total=st.f_blocks * block // 1024,
            )
        return self.value


__all__ = ["MAX_DIRECTORY_HISTORY", "DirectoryHistory", "FreeSpace", "FreeSpaceCache"]
