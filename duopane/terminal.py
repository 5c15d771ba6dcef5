"""Terminal control for the full-screen session.

Owns raw mode, the alternate screen and SGR mouse tracking.
"""

from __future__ import annotations

import contextlib
import os
import termios
import tty

ALT_SCREEN_ON = b"\x1b[?1049h\x1b[?25l"
ALT_SCREEN_OFF = b"\x1b[0m\x1b[?25h\x1b[?1049l"
MOUSE_ON = b"\x1b[?1000h\x1b[?1002h\x1b[?1006h"
MOUSE_OFF = b"\x1b[?1000l\x1b[?1002l\x1b[?1006l"


class TerminalController:
    def __init__(self, stdin_fd: int, stdout_fd: int, *, mouse: bool = True) -> None:
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self.mouse = mouse
        self._saved_tty_state = termios.tcgetattr(stdin_fd)

    def enter(self) -> None:
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        os.write(self.stdout_fd, ALT_SCREEN_ON + (MOUSE_ON if self.mouse else b""))

    def leave(self) -> None:
        # Mouse off first so late clicks are not echoed to the shell.
        os.write(self.stdout_fd, (MOUSE_OFF if self.mouse else b"") + ALT_SCREEN_OFF)
        termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)

    def write_frame(self, frame: str) -> None:
        """Write one serialized canvas frame, retrying short writes."""
        data = frame.encode("utf-8", errors="replace")
        while data:
            written = os.write(self.stdout_fd, data)
            data = data[written:]

    @contextlib.contextmanager
    def raw_mode(self):
        try:
            self.enter()
            yield
        finally:
            self.leave()


__all__ = ["TerminalController", "MOUSE_ON", "MOUSE_OFF"]
