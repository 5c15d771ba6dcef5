"""Low-level terminal input decoding.

Reads raw bytes from stdin and translates them into normalized key tokens
(``UP``, ``PAGE_DOWN``, ``F5``, ``CTRL_X``, ``ALT_G``, ``SHIFT_UP``,
``MOUSE_LEFT_DOWN:col:row`` ...). Printable input comes back as the decoded
character itself.
"""

from __future__ import annotations

import os
import select

ESC_SEQUENCE_TIMEOUT_MS = 25
_PENDING_BYTES: list[bytes] = []

_CSI_FINAL = {
    "A": "UP",
    "B": "DOWN",
    "C": "RIGHT",
    "D": "LEFT",
    "H": "HOME",
    "F": "END",
    "P": "F1",
    "Q": "F2",
    "R": "F3",
    "S": "F4",
}

_CSI_TILDE = {
    1: "HOME",
    2: "INSERT",
    3: "DELETE",
    4: "END",
    5: "PAGE_UP",
    6: "PAGE_DOWN",
    7: "HOME",
    8: "END",
    11: "F1",
    12: "F2",
    13: "F3",
    14: "F4",
    15: "F5",
    17: "F6",
    18: "F7",
    19: "F8",
    20: "F9",
    21: "F10",
    23: "F11",
    24: "F12",
}

_MODIFIERS = {
    2: "SHIFT_",
    3: "ALT_",
    4: "ALT_",
    5: "CTRL_",
    9: "ALT_",
}

_CONTROL_NAMES = {
    b"\t": "TAB",
    b"\r": "ENTER_CR",
    b"\n": "ENTER_LF",
    b"\x08": "BACKSPACE",
    b"\x7f": "BACKSPACE",
    b"\x00": "CTRL_SPACE",
}


def _read_byte(fd: int, timeout_ms: int | None) -> bytes | None:
    if _PENDING_BYTES:
        return _PENDING_BYTES.pop(0)
    if timeout_ms is not None:
        ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
        if not ready:
            return None
    ch = os.read(fd, 1)
    if not ch:
        return None
    return ch


def _utf8_length(lead: int) -> int:
    if lead >= 0xF0:
        return 4
    if lead >= 0xE0:
        return 3
    if lead >= 0xC0:
        return 2
    return 1


def _decode_text(fd: int, first: bytes) -> str:
    data = first
    for _ in range(_utf8_length(first[0]) - 1):
        more = _read_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if more is None:
            break
        data += more
    return data.decode("utf-8", errors="replace")


def _control_key(ch: bytes) -> str | None:
    if ch in _CONTROL_NAMES:
        return _CONTROL_NAMES[ch]
    code = ch[0]
    if 1 <= code <= 26:
        return "CTRL_" + chr(ord("A") + code - 1)
    return None


def _read_csi(fd: int) -> str:
    """Decode the remainder of ``ESC [`` (or ``ESC O``) up to its final byte."""
    params = b""
    while True:
        part = _read_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if part is None:
            return "ESC"
        if part == b"<" and not params:
            return _read_sgr_mouse(fd)
        if 0x40 <= part[0] <= 0x7E:
            return _csi_token(params.decode("ascii", errors="replace"), part.decode("ascii"))
        params += part
        if len(params) > 16:
            return "ESC"


def _csi_token(params: str, final: str) -> str:
    fields = params.split(";") if params else []
    try:
        numbers = [int(value) if value else 1 for value in fields]
    except ValueError:
        return "ESC"
    modifier = _MODIFIERS.get(numbers[1], "") if len(numbers) > 1 else ""
    if final == "~":
        if not numbers:
            return "ESC"
        name = _CSI_TILDE.get(numbers[0])
    elif final == "Z":
        return "SHIFT_TAB"
    else:
        name = _CSI_FINAL.get(final)
    if name is None:
        return "ESC"
    return modifier + name


def _read_sgr_mouse(fd: int) -> str:
    # SGR mouse: ESC [ < btn ; col ; row (M/m)
    payload = []
    while True:
        part = _read_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if part is None:
            return "ESC"
        if part in {b"M", b"m"}:
            break
        payload.append(part)
        if len(payload) > 64:
            return "ESC"
    try:
        btn_s, col_s, row_s = b"".join(payload).decode("ascii").split(";")
        btn = int(btn_s)
        col = int(col_s)
        row = int(row_s)
    except ValueError:
        return "ESC"
    button = btn & 0b11
    if btn & 0b0010_0000:
        return "MOUSE"
    if btn & 0b0100_0000:
        if button == 0:
            return f"MOUSE_WHEEL_UP:{col}:{row}"
        if button == 1:
            return f"MOUSE_WHEEL_DOWN:{col}:{row}"
        return "MOUSE"
    suffix = "DOWN" if part == b"M" else "UP"
    if button == 0:
        return f"MOUSE_LEFT_{suffix}:{col}:{row}"
    if button == 2:
        return f"MOUSE_RIGHT_{suffix}:{col}:{row}"
    return "MOUSE"


def _read_escape(fd: int) -> str:
    seq = _read_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if seq is None:
        return "ESC"
    if seq in {b"[", b"O"}:
        return _read_csi(fd)
    if seq == b"\x1b":
        _PENDING_BYTES.append(seq)
        return "ESC"
    control = _control_key(seq)
    if control is not None:
        return "ALT_" + control
    text = _decode_text(fd, seq)
    if len(text) == 1 and text.isprintable():
        return "ALT_" + (text.upper() if text.isalpha() else text)
    return "ESC"


def read_key(fd: int, timeout_ms: int | None = None) -> str:
    """Read one key token from ``fd``; ``""`` on timeout or end of input."""
    ch = _read_byte(fd, timeout_ms)
    if ch is None:
        return ""
    if ch == b"\x1b":
        return _read_escape(fd)
    control = _control_key(ch)
    if control is not None:
        return control
    return _decode_text(fd, ch)


def parse_mouse_col_row(mouse_key: str) -> tuple[int | None, int | None]:
    """Parse ``MOUSE_*:col:row`` key tokens into integer coordinates."""
    parts = mouse_key.split(":")
    if len(parts) < 3:
        return None, None
    try:
        return int(parts[1]), int(parts[2])
    except ValueError:
        return None, None


__all__ = ["ESC_SEQUENCE_TIMEOUT_MS", "read_key", "parse_mouse_col_row"]
