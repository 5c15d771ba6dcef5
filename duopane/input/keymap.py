"""Default key bindings per action and user overrides from the config file."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping

from .key_registry import ActionBinding, ActionRegistry

logger = logging.getLogger(__name__)

DEFAULT_KEYMAP: dict[str, tuple[str, ...]] = {
    "move_up": ("UP",),
    "move_down": ("DOWN",),
    "move_left": ("LEFT",),
    "move_right": ("RIGHT",),
    "prev_page": ("PAGE_UP",),
    "next_page": ("PAGE_DOWN",),
    "move_home": ("HOME",),
    "move_end": ("END",),
    "goto_top_file": ("ALT_G",),
    "goto_middle_file": ("ALT_R",),
    "goto_bottom_file": ("ALT_J",),
    "enter": ("ENTER",),
    "cd_parent": ("CTRL_PAGE_UP", "ALT_UP"),
    "cd_child": ("CTRL_PAGE_DOWN", "ALT_DOWN"),
    "toggle_mark": ("INSERT", "CTRL_T"),
    "mark_up": ("SHIFT_UP",),
    "mark_down": ("SHIFT_DOWN",),
    "mark_left": ("SHIFT_LEFT",),
    "mark_right": ("SHIFT_RIGHT",),
    "select_pattern": ("ALT_+",),
    "unselect_pattern": ("ALT_-",),
    "invert_selection": ("ALT_*",),
    "select_extension": ("ALT_E",),
    "unmark_all": ("ALT_M",),
    "start_search": ("CTRL_S", "ALT_S"),
    "content_scroll_left": ("ALT_{",),
    "content_scroll_right": ("ALT_}",),
    "cycle_listing_format": ("ALT_T",),
    "sort_next": ("ALT_N",),
    "sort_prev": ("ALT_P",),
    "toggle_reverse": ("ALT_X",),
    "toggle_case_sensitive": ("ALT_Z",),
    "toggle_hidden": ("ALT_.",),
    "set_filter": ("ALT_F",),
    "reload": ("CTRL_R",),
    "history_prev": ("ALT_Y",),
    "history_next": ("ALT_U",),
    "chdir_other_panel": ("ALT_O",),
    "sync_other_panel": ("ALT_I",),
    "chdir_to_readlink": ("ALT_L",),
    "switch_focus": ("TAB",),
    "swap_panels": ("CTRL_U",),
    "toggle_quick_view": ("CTRL_Q",),
    "new_tab": ("CTRL_N",),
    "close_tab": ("CTRL_W",),
    "next_tab": ("CTRL_RIGHT",),
    "prev_tab": ("CTRL_LEFT",),
    "rename_tab": ("F2",),
    "copy_tab_to_other_panel": ("F5",),
    "move_tab_to_other_panel": ("F6",),
    "swap_tabs": ("F7",),
    "move_tab_left": ("ALT_LEFT",),
    "move_tab_right": ("ALT_RIGHT",),
    "save_session": ("F8",),
    "restore_session": ("F9",),
    "quit": ("F10", "ALT_Q"),
}

GOTO_TAB_PREFIX = "goto_tab_"
for _number in range(1, 10):
    DEFAULT_KEYMAP[f"{GOTO_TAB_PREFIX}{_number}"] = (f"ALT_{_number}",)


def resolve_keymap(overrides: Mapping[str, list[str]] | None = None) -> dict[str, tuple[str, ...]]:
    """Merge user overrides into the defaults; unknown actions are ignored."""
    keymap = dict(DEFAULT_KEYMAP)
    for action, keys in (overrides or {}).items():
        if action not in keymap:
            logger.warning("ignoring key binding for unknown action %r", action)
            continue
        keymap[action] = tuple(keys)
    return keymap


def build_registry(
    actions: Mapping[str, Callable[[], bool | None]],
    keymap: Mapping[str, tuple[str, ...]] | None = None,
) -> ActionRegistry:
    """Bind every action in ``actions`` to its keys from ``keymap``."""
    keymap = keymap if keymap is not None else DEFAULT_KEYMAP
    registry = ActionRegistry()
    for action, handler in actions.items():
        keys = keymap.get(action, ())
        if keys:
            registry.bind(ActionBinding(action, tuple(keys), handler))
    return registry


def is_text_key(key: str) -> bool:
    """True for a single printable character (quick-search input)."""
    return len(key) == 1 and key.isprintable()


__all__ = [
    "DEFAULT_KEYMAP",
    "GOTO_TAB_PREFIX",
    "resolve_keymap",
    "build_registry",
    "is_text_key",
]
