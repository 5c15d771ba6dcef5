"""Main interactive event loop for the terminal UI.

The loop owns terminal size polling, repaint coalescing through the dirty
flag, and key decoding; everything else lives in injected callbacks.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Callable
from dataclasses import dataclass

from ..input import read_key
from ..terminal import TerminalController

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RuntimeLoopTiming:
    """Timing constants controlling interactive loop behavior."""

    key_timeout_ms: int = 120
    double_click_seconds: float = 0.35


@dataclass(frozen=True)
class RuntimeLoopCallbacks:
    """Injected operations used by ``run_main_loop``."""

    is_dirty: Callable[[], bool]
    render: Callable[[int, int], str]
    handle_key: Callable[[str], bool]
    on_idle: Callable[[], None]


def normalize_enter(key: str, skip_next_lf: bool) -> tuple[str | None, bool]:
    """Fold CR/LF pairs into one ``ENTER``; returns ``(key or None, skip_next_lf)``."""
    if key == "ENTER_LF" and skip_next_lf:
        return None, False
    if key == "ENTER_CR":
        return "ENTER", True
    if key == "ENTER_LF":
        return "ENTER", False
    return key, False


def run_main_loop(
    terminal: TerminalController,
    stdin_fd: int,
    timing: RuntimeLoopTiming,
    callbacks: RuntimeLoopCallbacks,
) -> None:
    """Run until ``handle_key`` returns ``True``.

    Several mutations between two reads produce a single repaint.
    """
    ops = callbacks
    skip_next_lf = False
    last_size: tuple[int, int] | None = None
    with terminal.raw_mode():
        while True:
            term = shutil.get_terminal_size((80, 24))
            size = (term.columns, term.lines)
            if size != last_size:
                logger.debug("terminal size %dx%d", *size)
            if size != last_size or ops.is_dirty():
                terminal.write_frame(ops.render(term.columns, term.lines))
                last_size = size

            try:
                key = read_key(stdin_fd, timeout_ms=timing.key_timeout_ms)
            except KeyboardInterrupt:
                continue
            if key == "":
                ops.on_idle()
                continue

            normalized, skip_next_lf = normalize_enter(key, skip_next_lf)
            if normalized is None:
                continue
            if ops.handle_key(normalized):
                break


__all__ = ["RuntimeLoopTiming", "RuntimeLoopCallbacks", "normalize_enter", "run_main_loop"]
