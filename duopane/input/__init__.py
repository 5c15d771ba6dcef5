"""Input layer: terminal key decoding and key-to-action dispatch."""

from .key_registry import ActionBinding, ActionRegistry
from .keymap import DEFAULT_KEYMAP, GOTO_TAB_PREFIX, build_registry, is_text_key, resolve_keymap
from .reader import ESC_SEQUENCE_TIMEOUT_MS, parse_mouse_col_row, read_key

__all__ = [
    "read_key",
    "parse_mouse_col_row",
    "ESC_SEQUENCE_TIMEOUT_MS",
    "ActionBinding",
    "ActionRegistry",
    "DEFAULT_KEYMAP",
    "GOTO_TAB_PREFIX",
    "build_registry",
    "resolve_keymap",
    "is_text_key",
]
