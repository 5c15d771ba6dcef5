"""In-memory terminal painter.

Panels paint into a ``Canvas`` with cursor/color/print/line/box primitives.
The runtime serializes the finished canvas as one ANSI frame, so several
mutations between two frames cost a single repaint.
"""

from __future__ import annotations

from .ansi import ANSI_ESCAPE_RE, char_display_width, printable
from .ui_theme import PLAIN_THEME, UITheme

HLINE = "─"
VLINE = "│"
TOP_LEFT = "┌"
TOP_RIGHT = "┐"
BOTTOM_LEFT = "└"
BOTTOM_RIGHT = "┘"
LEFT_TEE = "├"
RIGHT_TEE = "┤"

# Second cell of a double-width character.
_CONTINUATION = ""


class Canvas:
    """Grid of character cells, each carrying the SGR style it was painted with."""

    def __init__(self, width: int, height: int, theme: UITheme = PLAIN_THEME) -> None:
        self.width = max(0, width)
        self.height = max(0, height)
        self.theme = theme
        self._chars = [[" "] * self.width for _ in range(self.height)]
        self._styles = [[theme.normal] * self.width for _ in range(self.height)]
        self.row = 0
        self.col = 0
        self.color = "normal"
        self._sgr = theme.normal

    def goto(self, row: int, col: int) -> None:
        self.row = row
        self.col = col

    def set_color(self, color_id: str) -> None:
        self.color = color_id
        self._sgr = self.theme.sgr(color_id)

    def _put(self, row: int, col: int, ch: str, sgr: str) -> int:
        """Store one character; return the number of cells consumed."""
        width = char_display_width(ch)
        if width == 0:
            if 0 <= row < self.height and 0 < col <= self.width:
                self._chars[row][col - 1] += ch
            return 0
        if not (0 <= row < self.height) or col < 0 or col >= self.width:
            return width
        if width == 2 and col + 1 >= self.width:
            self._chars[row][col] = " "
            self._styles[row][col] = sgr
            return 1
        self._chars[row][col] = ch
        self._styles[row][col] = sgr
        if width == 2:
            self._chars[row][col + 1] = _CONTINUATION
            self._styles[row][col + 1] = sgr
        return width

    def print(self, text: str) -> None:
        """Print ``text`` at the cursor with the current color, advancing the cursor."""
        for ch in printable(text):
            self.col += self._put(self.row, self.col, ch, self._sgr)

    def print_at(self, row: int, col: int, text: str, color_id: str | None = None) -> None:
        self.goto(row, col)
        if color_id is not None:
            self.set_color(color_id)
        self.print(text)

    def hline(self, row: int, col: int, length: int, ch: str = HLINE) -> None:
        for offset in range(max(0, length)):
            self._put(row, col + offset, ch, self._sgr)

    def vline(self, row: int, col: int, length: int, ch: str = VLINE) -> None:
        for offset in range(max(0, length)):
            self._put(row + offset, col, ch, self._sgr)

    def box(self, row: int, col: int, height: int, width: int) -> None:
        if height < 2 or width < 2:
            return
        bottom = row + height - 1
        right = col + width - 1
        self.hline(row, col + 1, width - 2)
        self.hline(bottom, col + 1, width - 2)
        self.vline(row + 1, col, height - 2)
        self.vline(row + 1, right, height - 2)
        self._put(row, col, TOP_LEFT, self._sgr)
        self._put(row, right, TOP_RIGHT, self._sgr)
        self._put(bottom, col, BOTTOM_LEFT, self._sgr)
        self._put(bottom, right, BOTTOM_RIGHT, self._sgr)

    def put_ansi(self, row: int, col: int, text: str, width: int) -> None:
        """Paint pre-styled text (e.g. highlighter output) clipped to ``width`` cells."""
        style = self._sgr
        used = 0
        i = 0
        n = len(text)
        while i < n and used < width:
            if text[i] == "\x1b":
                match = ANSI_ESCAPE_RE.match(text, i)
                if match:
                    seq = match.group(0)
                    if seq.endswith("m"):
                        style = self._sgr if seq in ("\x1b[0m", "\x1b[m", "\x1b[39;49;00m") else style + seq
                    i = match.end()
                    continue
            ch = text[i]
            i += 1
            if ch == "\t":
                spaces = min(8 - (used % 8), width - used)
                for _ in range(spaces):
                    self._put(row, col + used, " ", style)
                    used += 1
                continue
            if ch in "\r\n":
                continue
            if char_display_width(ch) == 2 and used + 2 > width:
                break
            used += self._put(row, col + used, printable(ch), style)

    def row_text(self, row: int) -> str:
        """Return the plain characters of one row."""
        return "".join(self._chars[row])

    def lines(self) -> list[str]:
        return [self.row_text(row) for row in range(self.height)]

    def style_at(self, row: int, col: int) -> str:
        return self._styles[row][col]

    def render(self) -> str:
        """Serialize the canvas as an absolute-positioned ANSI frame."""
        reset = self.theme.reset
        out: list[str] = []
        for row in range(self.height):
            out.append(f"\x1b[{row + 1};1H")
            active: str | None = None
            for col in range(self.width):
                ch = self._chars[row][col]
                if ch == _CONTINUATION:
                    continue
                style = self._styles[row][col]
                if style != active:
                    if reset:
                        out.append(reset)
                    out.append(style)
                    active = style
                out.append(ch)
            if reset:
                out.append(reset)
        return "".join(out)


__all__ = [
    "Canvas",
    "HLINE",
    "VLINE",
    "TOP_LEFT",
    "TOP_RIGHT",
    "BOTTOM_LEFT",
    "BOTTOM_RIGHT",
    "LEFT_TEE",
    "RIGHT_TEE",
]
