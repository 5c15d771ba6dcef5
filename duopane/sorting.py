"""Sort fields and the entry ordering they define.

``..`` always stays first and directories precede files unless
``mix_all_files`` is set; ``reverse`` flips the order inside each group.
``UNSORTED`` keeps the order of the last directory read.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from enum import Enum

from .entries import FileEntry

_DIGITS_RE = re.compile(r"(\d+)")


class SortField(str, Enum):
    UNSORTED = "unsorted"
    NAME = "name"
    VERSION = "version"
    EXTENSION = "extension"
    SIZE = "size"
    MTIME = "mtime"
    ATIME = "atime"
    CTIME = "ctime"
    INODE = "inode"

    @property
    def hotkey(self) -> str:
        return _HOTKEYS[self]

    @classmethod
    def from_id(cls, value: object) -> SortField | None:
        """Return the field named ``value`` or ``None`` for unknown ids."""
        if isinstance(value, SortField):
            return value
        try:
            return cls(str(value))
        except ValueError:
            return None


_HOTKEYS = {
    SortField.UNSORTED: "u",
    SortField.NAME: "n",
    SortField.VERSION: "v",
    SortField.EXTENSION: "e",
    SortField.SIZE: "s",
    SortField.MTIME: "m",
    SortField.ATIME: "a",
    SortField.CTIME: "h",
    SortField.INODE: "i",
}


def _name_key(name: str, case_sensitive: bool) -> str:
    return name if case_sensitive else name.casefold()


def version_key(name: str) -> tuple[tuple[int, int, str], ...]:
    """Natural-order key: digit runs compare numerically, text runs as strings."""
    parts: list[tuple[int, int, str]] = []
    for chunk in _DIGITS_RE.split(name):
        if not chunk:
            continue
        if chunk.isdigit():
            parts.append((0, int(chunk), chunk))
        else:
            parts.append((1, 0, chunk))
    return tuple(parts)


def extension_of(name: str) -> str:
    _, dot, ext = name.rpartition(".")
    return ext if dot else ""


def sort_key(field: SortField, case_sensitive: bool) -> Callable[[FileEntry], object]:
    """Return the key function ordering entries by ``field``.

    Ties on the primary attribute fall back to the name so the order is total.
    """

    def name_of(entry: FileEntry) -> str:
        return _name_key(entry.name, case_sensitive)

    if field is SortField.VERSION:
        return lambda entry: (version_key(name_of(entry)), entry.name)
    if field is SortField.EXTENSION:
        return lambda entry: (_name_key(extension_of(entry.name), case_sensitive), name_of(entry))
    if field is SortField.SIZE:
        return lambda entry: (entry.size, name_of(entry))
    if field is SortField.MTIME:
        return lambda entry: (entry.mtime, name_of(entry))
    if field is SortField.ATIME:
        return lambda entry: (entry.atime, name_of(entry))
    if field is SortField.CTIME:
        return lambda entry: (entry.ctime, name_of(entry))
    if field is SortField.INODE:
        return lambda entry: entry.inode
    return lambda entry: (name_of(entry), entry.name)


def sort_entries(
    entries: list[FileEntry],
    field: SortField,
    *,
    reverse: bool = False,
    case_sensitive: bool = True,
    mix_all_files: bool = False,
) -> None:
    """Sort ``entries`` in place."""
    if field is SortField.UNSORTED or len(entries) < 2:
        return
    head: list[FileEntry] = []
    rest = entries
    if entries[0].is_dotdot:
        head = [entries[0]]
        rest = entries[1:]
    key = sort_key(field, case_sensitive)
    if mix_all_files:
        ordered = sorted(rest, key=key, reverse=reverse)
    else:
        dirs = sorted((e for e in rest if e.is_dir_like), key=key, reverse=reverse)
        files = sorted((e for e in rest if not e.is_dir_like), key=key, reverse=reverse)
        ordered = dirs + files
    entries[:] = head + ordered


__all__ = ["SortField", "version_key", "extension_of", "sort_key", "sort_entries"]
