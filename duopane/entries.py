"""Directory entries and the local-filesystem entry provider.

Entries carry ``lstat`` data plus the flags the panel reads (stale link,
link-to-directory, computed directory size) and the one flag it writes
(``marked``). Listings always start with the synthetic ``..`` entry.
"""

from __future__ import annotations

import os
import stat
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path

from .errors import DirectoryReadError

DOTDOT = ".."


@dataclass
class FileEntry:
    """One directory entry with cached stat data."""

    name: str
    mode: int = stat.S_IFREG | 0o644
    size: int = 0
    mtime: float = 0.0
    atime: float = 0.0
    ctime: float = 0.0
    uid: int = 0
    gid: int = 0
    nlink: int = 1
    inode: int = 0
    dev: int = 0
    rdev: int = 0
    marked: bool = False
    stale_link: bool = False
    link_to_dir: bool = False
    dir_size_computed: bool = False

    @property
    def name_length(self) -> int:
        """Byte length of the encoded file name."""
        return len(os.fsencode(self.name))

    @property
    def is_dotdot(self) -> bool:
        return self.name == DOTDOT

    @property
    def is_dir(self) -> bool:
        return stat.S_ISDIR(self.mode)

    @property
    def is_link(self) -> bool:
        return stat.S_ISLNK(self.mode)

    @property
    def is_dir_like(self) -> bool:
        """True for directories and symlinks that resolve to directories."""
        return self.is_dir or self.link_to_dir

    @property
    def is_regular(self) -> bool:
        return stat.S_ISREG(self.mode)

    @property
    def is_device(self) -> bool:
        return stat.S_ISBLK(self.mode) or stat.S_ISCHR(self.mode)

    @property
    def is_executable(self) -> bool:
        return self.is_regular and bool(self.mode & (stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH))


def entry_from_stat(name: str, st: os.stat_result) -> FileEntry:
    return FileEntry(
        name=name,
        mode=st.st_mode,
        size=st.st_size,
        mtime=st.st_mtime,
        atime=st.st_atime,
        ctime=st.st_ctime,
        uid=st.st_uid,
        gid=st.st_gid,
        nlink=st.st_nlink,
        inode=st.st_ino,
        dev=st.st_dev,
        rdev=getattr(st, "st_rdev", 0),
    )


def stat_entry(path: Path, name: str | None = None) -> FileEntry:
    """Build an entry from ``lstat`` and resolve symlink flags.

    Raises ``OSError`` when ``path`` itself cannot be stat'ed.
    """
    entry = entry_from_stat(path.name if name is None else name, os.lstat(path))
    if entry.is_link:
        try:
            entry.link_to_dir = stat.S_ISDIR(os.stat(path).st_mode)
        except OSError:
            entry.stale_link = True
    return entry


def parent_entry(directory: Path) -> FileEntry:
    """Return the synthetic ``..`` entry for ``directory``."""
    try:
        entry = entry_from_stat(DOTDOT, os.stat(directory.parent))
    except OSError:
        entry = FileEntry(name=DOTDOT, mode=stat.S_IFDIR | 0o755)
    entry.mode = stat.S_IFDIR | stat.S_IMODE(entry.mode)
    return entry


def load_directory(
    directory: Path,
    *,
    show_hidden: bool = True,
    include: Callable[[str], bool] | None = None,
) -> list[FileEntry]:
    """List ``directory`` in read order, preceded by ``..``.

    ``include`` filters non-directory names (directories are always kept).
    Entries that vanish between the scan and the stat are skipped. Raises
    ``DirectoryReadError`` when the directory cannot be opened.
    """
    entries = [parent_entry(directory)]
    try:
        with os.scandir(directory) as scanned:
            for child in scanned:
                name = child.name
                if not show_hidden and name.startswith("."):
                    continue
                try:
                    entry = stat_entry(Path(child.path), name)
                except OSError:
                    continue
                if include is not None and not entry.is_dir_like and not include(name):
                    continue
                entries.append(entry)
    except OSError as exc:
        raise DirectoryReadError(directory, exc.strerror or str(exc)) from exc
    return entries


def load_paths(paths: Iterable[Path | str], root: Path) -> list[FileEntry]:
    """Build a panelized listing: one entry per existing path, named as given."""
    entries = [parent_entry(root)]
    for raw in paths:
        text = str(raw)
        if not text or text == DOTDOT:
            continue
        path = Path(text) if os.path.isabs(text) else root / text
        try:
            entries.append(stat_entry(path, text))
        except OSError:
            continue
    return entries


def directory_signature(directory: Path) -> tuple[float, float] | None:
    """Return ``(mtime, ctime)`` of ``directory`` or ``None`` when it cannot be stat'ed."""
    try:
        st = os.stat(directory)
    except OSError:
        return None
    return (st.st_mtime, st.st_ctime)


__all__ = [
    "DOTDOT",
    "FileEntry",
    "entry_from_stat",
    "stat_entry",
    "parent_entry",
    "load_directory",
    "load_paths",
    "directory_signature",
]
