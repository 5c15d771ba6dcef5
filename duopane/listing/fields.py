"""Field table of the display-format language and per-field value formatters.

Each ``PanelField`` carries its minimum width, default justification, whether
it auto-expands, its title, and (for sortable fields) the sort field it maps
to. Field ids are matched by prefix in declaration order.
"""

from __future__ import annotations

import grp
import os
import pwd
import stat
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache

from ..ansi import Justify, printable
from ..entries import FileEntry
from ..sorting import SortField

SIX_MONTHS_SECONDS = 60 * 60 * 24 * 30 * 6
RECENT_TIME_FORMAT = "%b %e %H:%M"
OLD_TIME_FORMAT = "%b %e  %Y"
UP_DIR_LABEL = "UP--DIR"

_SUFFIXES = ("", "K", "M", "G", "T", "P", "E", "Z", "Y")
_SUFFIXES_SI = ("", "k", "m", "g", "t", "p", "e", "z", "y")

LEFT_FIT = Justify.LEFT | Justify.FIT


@dataclass(frozen=True)
class FormatContext:
    """Settings shared by all value formatters during one paint."""

    kilobyte_si: bool = False
    now: float = field(default_factory=time.time)


class PanelField(Enum):
    UNSORTED = ("unsorted", 12, True, LEFT_FIT, "Unsorted", SortField.UNSORTED)
    NAME = ("name", 12, True, LEFT_FIT, "Name", SortField.NAME)
    VERSION = ("version", 12, True, LEFT_FIT, "Version", SortField.VERSION)
    EXTENSION = ("extension", 12, True, LEFT_FIT, "Extension", SortField.EXTENSION)
    SIZE = ("size", 7, False, Justify.RIGHT, "Size", SortField.SIZE)
    BSIZE = ("bsize", 7, False, Justify.RIGHT, "Block Size", None)
    TYPE = ("type", 1, False, Justify.LEFT, "", None)
    MTIME = ("mtime", 12, False, Justify.RIGHT, "Modify time", SortField.MTIME)
    ATIME = ("atime", 12, False, Justify.RIGHT, "Access time", SortField.ATIME)
    CTIME = ("ctime", 12, False, Justify.RIGHT, "Change time", SortField.CTIME)
    PERM = ("perm", 10, False, Justify.LEFT, "Permission", None)
    MODE = ("mode", 6, False, Justify.RIGHT, "Perm", None)
    NLINK = ("nlink", 2, False, Justify.RIGHT, "Nl", None)
    INODE = ("inode", 5, False, Justify.RIGHT, "Inode", SortField.INODE)
    NUID = ("nuid", 5, False, Justify.RIGHT, "UID", None)
    NGID = ("ngid", 5, False, Justify.RIGHT, "GID", None)
    OWNER = ("owner", 8, False, LEFT_FIT, "Owner", None)
    GROUP = ("group", 8, False, LEFT_FIT, "Group", None)
    MARK = ("mark", 1, False, Justify.RIGHT, " ", None)
    SEPARATOR = ("|", 1, False, Justify.RIGHT, " ", None)
    SPACE = ("space", 1, False, Justify.RIGHT, " ", None)
    DOT = ("dot", 1, False, Justify.RIGHT, " ", None)

    def __init__(
        self,
        field_id: str,
        min_size: int,
        expands: bool,
        justify: Justify,
        title: str,
        sort_field: SortField | None,
    ) -> None:
        self.field_id = field_id
        self.min_size = min_size
        self.expands = expands
        self.justify = justify
        self.title = title
        self.sort_field = sort_field

    @property
    def is_separator(self) -> bool:
        return self is PanelField.SEPARATOR

    @property
    def sortable(self) -> bool:
        return self.sort_field is not None

    def format_value(self, entry: FileEntry, width: int, ctx: FormatContext) -> str:
        formatter = _FORMATTERS.get(self)
        if formatter is None:
            return ""
        return formatter(entry, width, ctx)


def match_field(text: str) -> PanelField | None:
    """Return the first field whose id is a prefix of ``text``."""
    for candidate in PanelField:
        if text.startswith(candidate.field_id):
            return candidate
    return None


def size_trunc_len(size: int, width: int, *, units: int = 0, si: bool = False) -> str:
    """Render ``size`` in at most ``width`` characters using unit suffixes.

    ``units`` is the power of the input unit (1 when ``size`` is already in
    kilobytes). Widths above nine are treated as nine.
    """
    suffixes = _SUFFIXES_SI if si else _SUFFIXES
    if width <= 0:
        width = 9
    width = min(width, 9)
    for power in range(units, len(suffixes)):
        if size == 0:
            if power == units:
                return "0"
            unit = suffixes[power - 1] if power > 1 else "B"
            return f"~{unit}" if width > 1 else unit
        if size < 10 ** (width - (1 if power > 0 else 0)):
            return f"{size}{suffixes[power]}"
        size = (size + 500) // 1000 if si else (size + 512) >> 10
    return f"{size}{suffixes[-1]}"


def size_trunc_sep(size: int, si: bool = False) -> str:
    """Human size with thousands separators, switching unit above nine digits."""
    base = 1000 if si else 1024
    units = ("kB", "MB", "GB") if si else ("KiB", "MiB", "GiB")
    divisor = 1
    unit = "B"
    for candidate in units:
        if size // divisor <= 999_999_999:
            break
        divisor *= base
        unit = candidate
    return f"{round(size / divisor):,} {unit}"


def format_device(rdev: int, width: int) -> str:
    text = f"{os.major(rdev)},{os.minor(rdev)}"
    return text if len(text) <= width else "[dev]"


def file_date(timestamp: float, now: float) -> str:
    """Format a timestamp the way ``ls -l`` does (recent vs. old files)."""
    if now > timestamp + SIX_MONTHS_SECONDS or timestamp > now + 60 * 60:
        fmt = OLD_TIME_FORMAT
    else:
        fmt = RECENT_TIME_FORMAT
    try:
        return time.strftime(fmt, time.localtime(timestamp))
    except (OverflowError, OSError, ValueError):
        return "?"


@lru_cache(maxsize=256)
def owner_name(uid: int) -> str:
    try:
        return pwd.getpwuid(uid).pw_name
    except (KeyError, OverflowError):
        return str(uid)


@lru_cache(maxsize=256)
def group_name(gid: int) -> str:
    try:
        return grp.getgrgid(gid).gr_name
    except (KeyError, OverflowError):
        return str(gid)


def type_char(entry: FileEntry) -> str:
    mode = entry.mode
    if stat.S_ISDIR(mode):
        return "/"
    if stat.S_ISLNK(mode):
        if entry.link_to_dir:
            return "~"
        if entry.stale_link:
            return "!"
        return "@"
    if stat.S_ISCHR(mode):
        return "-"
    if stat.S_ISSOCK(mode):
        return "="
    if stat.S_ISBLK(mode):
        return "+"
    if stat.S_ISFIFO(mode):
        return "|"
    if not stat.S_ISREG(mode):
        return "?"
    if entry.is_executable:
        return "*"
    return " "


def _name(entry: FileEntry, width: int, ctx: FormatContext) -> str:
    return printable(entry.name)


def _size(entry: FileEntry, width: int, ctx: FormatContext) -> str:
    if entry.is_dotdot:
        return UP_DIR_LABEL
    if entry.is_device:
        return format_device(entry.rdev, width)
    return size_trunc_len(entry.size, width, si=ctx.kilobyte_si)


def _bsize(entry: FileEntry, width: int, ctx: FormatContext) -> str:
    if entry.is_link and not entry.link_to_dir:
        return "SYMLINK"
    if entry.is_dir_like and not entry.is_dotdot:
        return "SUB-DIR"
    return _size(entry, width, ctx)


_FORMATTERS: dict[PanelField, Callable[[FileEntry, int, FormatContext], str]] = {
    PanelField.UNSORTED: _name,
    PanelField.NAME: _name,
    PanelField.VERSION: _name,
    PanelField.EXTENSION: _name,
    PanelField.SIZE: _size,
    PanelField.BSIZE: _bsize,
    PanelField.TYPE: lambda entry, width, ctx: type_char(entry),
    PanelField.MTIME: lambda entry, width, ctx: file_date(entry.mtime, ctx.now),
    PanelField.ATIME: lambda entry, width, ctx: file_date(entry.atime, ctx.now),
    PanelField.CTIME: lambda entry, width, ctx: file_date(entry.ctime, ctx.now),
    PanelField.PERM: lambda entry, width, ctx: stat.filemode(entry.mode),
    PanelField.MODE: lambda entry, width, ctx: f"0{entry.mode:06o}",
    PanelField.NLINK: lambda entry, width, ctx: str(entry.nlink),
    PanelField.INODE: lambda entry, width, ctx: str(entry.inode),
    PanelField.NUID: lambda entry, width, ctx: str(entry.uid),
    PanelField.NGID: lambda entry, width, ctx: str(entry.gid),
    PanelField.OWNER: lambda entry, width, ctx: owner_name(entry.uid),
    PanelField.GROUP: lambda entry, width, ctx: group_name(entry.gid),
    PanelField.MARK: lambda entry, width, ctx: "*" if entry.marked else " ",
    PanelField.SPACE: lambda entry, width, ctx: " ",
    PanelField.DOT: lambda entry, width, ctx: ".",
}


__all__ = [
    "FormatContext",
    "PanelField",
    "match_field",
    "size_trunc_len",
    "size_trunc_sep",
    "format_device",
    "file_date",
    "owner_name",
    "group_name",
    "type_char",
    "UP_DIR_LABEL",
]
