"""One-line input prompt and transient status message on the bottom screen row."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field

from ..panel.search import drop_last_char

STATUS_MESSAGE_SECONDS = 3.0


@dataclass
class Prompt:
    """An open prompt; ``on_submit`` receives the text when Enter is pressed."""

    label: str
    on_submit: Callable[[str], None]
    text: str = ""

    def handle_key(self, key: str) -> bool | None:
        """Edit the prompt text.

        Returns ``True`` once the prompt is finished (submitted or cancelled),
        ``False`` while it stays open and ``None`` for keys it ignores.
        """
        if key == "ESC":
            return True
        if key == "ENTER":
            self.on_submit(self.text)
            return True
        if key == "BACKSPACE":
            self.text = drop_last_char(self.text)
            return False
        if key == "CTRL_U":
            self.text = ""
            return False
        if len(key) == 1 and key.isprintable():
            self.text += key
            return False
        return None


@dataclass
class StatusLine:
    message: str = ""
    until: float = 0.0
    is_error: bool = False
    clock: Callable[[], float] = field(default=time.monotonic)

    def show(
        self, message: str, *, error: bool = False, seconds: float = STATUS_MESSAGE_SECONDS
    ) -> None:
        self.message = message.replace("\n", " ")
        self.is_error = error
        self.until = self.clock() + seconds

    def expire(self) -> bool:
        """Drop an expired message; return whether anything changed."""
        if self.message and self.clock() >= self.until:
            self.message = ""
            self.until = 0.0
            self.is_error = False
            return True
        return False


__all__ = ["STATUS_MESSAGE_SECONDS", "Prompt", "StatusLine"]
