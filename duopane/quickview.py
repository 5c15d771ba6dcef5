"""Quick-view panel mode: a highlighted preview of the other panel's selection.

A quick-view slot is not a listing: it has no tabs and is written to tab
sessions as ``-1``.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from pygments import highlight as pygments_highlight
from pygments.formatters import TerminalFormatter
from pygments.lexers import TextLexer, get_lexer_for_filename
from pygments.util import ClassNotFound

from .ansi import trim_left
from .screen import Canvas

logger = logging.getLogger(__name__)

MAX_PREVIEW_BYTES = 256 * 1024
BINARY_SNIFF_BYTES = 4096
_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")


def read_text(path: Path, limit: int = MAX_PREVIEW_BYTES) -> str:
    with path.open("rb") as handle:
        data = handle.read(limit)
    for encoding in ("utf-8", "utf-8-sig"):
        try:
            return data.decode(encoding)
        except UnicodeDecodeError:
            continue
    return data.decode("latin-1")


def is_binary(path: Path) -> bool:
    try:
        with path.open("rb") as handle:
            return b"\x00" in handle.read(BINARY_SNIFF_BYTES)
    except OSError:
        return False


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes so previews cannot move the cursor."""
    if _CONTROL_RE.search(source) is None:
        return source
    out: list[str] = []
    for ch in source:
        code = ord(ch)
        if ch in {"\n", "\r", "\t"}:
            out.append(ch)
        elif code < 32 or code == 127 or 0x80 <= code <= 0x9F:
            out.append(f"\\x{code:02x}")
        else:
            out.append(ch)
    return "".join(out)


def highlight_source(source: str, path: Path, *, color: bool = True) -> str:
    if not color:
        return source
    try:
        lexer = get_lexer_for_filename(path.name, source, stripnl=False)
    except ClassNotFound:
        lexer = TextLexer(stripnl=False)
    return pygments_highlight(source, lexer, TerminalFormatter())


def preview_lines(path: Path | None, *, color: bool = True) -> list[str]:
    """Lines shown for ``path``: highlighted text, a directory listing, or a notice."""
    if path is None:
        return []
    try:
        if path.is_dir():
            names = sorted(child.name + ("/" if child.is_dir() else "") for child in path.iterdir())
            return names or ["<empty directory>"]
        if is_binary(path):
            return ["<binary file>"]
        source = sanitize_terminal_text(read_text(path))
    except OSError as exc:
        logger.debug("preview of %s failed: %s", path, exc)
        return [f"<{exc.strerror or exc}>"]
    return highlight_source(source, path, color=color).splitlines()


class QuickView:
    """Non-listing view occupying one panel slot."""

    is_listing = False

    def __init__(self, *, color: bool = True) -> None:
        self.color = color
        self.path: Path | None = None
        self.lines: list[str] = []
        self.start = 0

    def show(self, path: Path | None) -> None:
        if path == self.path:
            return
        self.path = path
        self.start = 0
        self.lines = preview_lines(path, color=self.color)

    def scroll(self, delta: int) -> None:
        self.start = max(0, min(self.start + delta, max(0, len(self.lines) - 1)))

    def paint(self, canvas: Canvas, x: int, width: int, rows: int, *, focused: bool = False) -> None:
        if width < 2 or rows < 2:
            return
        canvas.set_color("frame")
        canvas.box(0, x, rows, width)
        title = f" {self.path.name if self.path else 'Quick view'} "
        canvas.print_at(0, x + 1, trim_left(title, width - 2), "reverse" if focused else "frame")
        canvas.set_color("normal")
        inner = width - 2
        for offset in range(rows - 2):
            index = self.start + offset
            if index >= len(self.lines):
                break
            canvas.put_ansi(1 + offset, x + 1, self.lines[index], inner)


__all__ = [
    "QuickView",
    "preview_lines",
    "highlight_source",
    "sanitize_terminal_text",
    "read_text",
    "is_binary",
]
