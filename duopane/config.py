"""Persistent JSON config helpers.

Stores panel behaviour options, tab-bar options, per-panel listing setup,
the theme name and key-binding overrides. Malformed or missing config
falls back to defaults.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from platformdirs import user_config_dir, user_data_dir

from .listing.format import DEFAULT_BRIEF_COLS, DEFAULT_USER_FORMAT, ListingMode, clamp_brief_cols
from .sorting import SortField

logger = logging.getLogger(__name__)

APP_NAME = "duopane"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
DEFAULT_SESSIONS_DIR = Path(user_data_dir(APP_NAME, appauthor=False)) / "sessions"

PANEL_SIDES = ("left", "right")
QSEARCH_SENSITIVE = "sensitive"
QSEARCH_INSENSITIVE = "insensitive"
QSEARCH_SORT = "sort"
QSEARCH_MODES = (QSEARCH_SENSITIVE, QSEARCH_INSENSITIVE, QSEARCH_SORT)
TAB_DIRECTIONS = ("next", "prev", "first", "last")
BAR_POSITIONS = ("top", "bottom")


@dataclass
class PanelOptions:
    """Behaviour switches shared by both panels."""

    show_mini_info: bool = True
    kilobyte_si: bool = False
    scroll_pages: bool = False
    scroll_center: bool = False
    smart_home_end: bool = False
    mark_moves_down: bool = True
    mix_all_files: bool = False
    reverse_files_only: bool = True
    qsearch_mode: str = QSEARCH_SORT
    show_hidden: bool = True
    fast_reload: bool = False
    free_space: bool = True


@dataclass
class TabOptions:
    new_tab_direction: str = "next"
    highlight_current_tab: bool = True
    hide_tabs: bool = True
    bar_position: str = "top"
    sessions_dir: Path = DEFAULT_SESSIONS_DIR


@dataclass
class PanelSetup:
    """Listing setup remembered per panel side."""

    list_format: ListingMode = ListingMode.FULL
    user_format: str = DEFAULT_USER_FORMAT
    user_status_formats: dict[ListingMode, str] = field(default_factory=dict)
    user_mini_status: bool = False
    brief_cols: int = DEFAULT_BRIEF_COLS
    sort_field: SortField = SortField.NAME
    reverse: bool = False
    case_sensitive: bool = True


@dataclass
class AppConfig:
    panel: PanelOptions = field(default_factory=PanelOptions)
    tabs: TabOptions = field(default_factory=TabOptions)
    setups: dict[str, PanelSetup] = field(
        default_factory=lambda: {side: PanelSetup() for side in PANEL_SIDES}
    )
    theme: str | None = None
    keymap: dict[str, list[str]] = field(default_factory=dict)


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Any filesystem/serialization error is logged and ignored.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except Exception:
        logger.warning("could not write config to %s", CONFIG_PATH, exc_info=True)


def _coerce_bool(value: object, default: bool) -> bool:
    return value if isinstance(value, bool) else default


def _coerce_choice(value: object, choices: tuple[str, ...], default: str) -> str:
    if isinstance(value, str) and value.strip().lower() in choices:
        return value.strip().lower()
    return default


def _coerce_str(value: object, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default


def _section(data: dict[str, object], key: str) -> dict[str, object]:
    value = data.get(key)
    return value if isinstance(value, dict) else {}


def parse_panel_options(raw: dict[str, object]) -> PanelOptions:
    defaults = PanelOptions()
    return PanelOptions(
        show_mini_info=_coerce_bool(raw.get("show_mini_info"), defaults.show_mini_info),
        kilobyte_si=_coerce_bool(raw.get("kilobyte_si"), defaults.kilobyte_si),
        scroll_pages=_coerce_bool(raw.get("scroll_pages"), defaults.scroll_pages),
        scroll_center=_coerce_bool(raw.get("scroll_center"), defaults.scroll_center),
        smart_home_end=_coerce_bool(raw.get("smart_home_end"), defaults.smart_home_end),
        mark_moves_down=_coerce_bool(raw.get("mark_moves_down"), defaults.mark_moves_down),
        mix_all_files=_coerce_bool(raw.get("mix_all_files"), defaults.mix_all_files),
        reverse_files_only=_coerce_bool(raw.get("reverse_files_only"), defaults.reverse_files_only),
        qsearch_mode=_coerce_choice(raw.get("qsearch_mode"), QSEARCH_MODES, defaults.qsearch_mode),
        show_hidden=_coerce_bool(raw.get("show_hidden"), defaults.show_hidden),
        fast_reload=_coerce_bool(raw.get("fast_reload"), defaults.fast_reload),
        free_space=_coerce_bool(raw.get("free_space"), defaults.free_space),
    )


def parse_tab_options(raw: dict[str, object]) -> TabOptions:
    defaults = TabOptions()
    sessions_dir = raw.get("sessions_dir")
    return TabOptions(
        new_tab_direction=_coerce_choice(
            raw.get("new_tab_direction"), TAB_DIRECTIONS, defaults.new_tab_direction
        ),
        highlight_current_tab=_coerce_bool(
            raw.get("highlight_current_tab"), defaults.highlight_current_tab
        ),
        hide_tabs=_coerce_bool(raw.get("hide_tabs"), defaults.hide_tabs),
        bar_position=_coerce_choice(raw.get("bar_position"), BAR_POSITIONS, defaults.bar_position),
        sessions_dir=(
            Path(sessions_dir).expanduser()
            if isinstance(sessions_dir, str) and sessions_dir.strip()
            else defaults.sessions_dir
        ),
    )


def parse_panel_setup(raw: dict[str, object]) -> PanelSetup:
    """Build a ``PanelSetup`` from one ``panels.<side>`` object.

    Unknown listing modes and sort fields fall back to their defaults; the
    brief column count is clamped to 1..9.
    """
    defaults = PanelSetup()
    status_formats: dict[ListingMode, str] = {}
    raw_status = raw.get("user_status_formats")
    if isinstance(raw_status, dict):
        for key, value in raw_status.items():
            mode = ListingMode.from_id(key)
            if mode is not None and isinstance(value, str) and value.strip():
                status_formats[mode] = value.strip()
    raw_brief = raw.get("brief_cols")
    return PanelSetup(
        list_format=ListingMode.from_id(raw.get("list_format")) or defaults.list_format,
        user_format=_coerce_str(raw.get("user_format"), defaults.user_format),
        user_status_formats=status_formats,
        user_mini_status=_coerce_bool(raw.get("user_mini_status"), defaults.user_mini_status),
        brief_cols=clamp_brief_cols(raw_brief) if raw_brief is not None else defaults.brief_cols,
        sort_field=SortField.from_id(raw.get("sort_field")) or defaults.sort_field,
        reverse=_coerce_bool(raw.get("reverse"), defaults.reverse),
        case_sensitive=_coerce_bool(raw.get("case_sensitive"), defaults.case_sensitive),
    )


def serialize_panel_setup(setup: PanelSetup) -> dict[str, object]:
    return {
        "list_format": setup.list_format.value,
        "user_format": setup.user_format,
        "user_status_formats": {
            mode.value: text for mode, text in setup.user_status_formats.items()
        },
        "user_mini_status": setup.user_mini_status,
        "brief_cols": clamp_brief_cols(setup.brief_cols),
        "sort_field": setup.sort_field.value,
        "reverse": setup.reverse,
        "case_sensitive": setup.case_sensitive,
    }


def _parse_keymap(raw: dict[str, object]) -> dict[str, list[str]]:
    keymap: dict[str, list[str]] = {}
    for action, keys in raw.items():
        if not isinstance(action, str):
            continue
        if isinstance(keys, str):
            keys = [keys]
        if not isinstance(keys, list):
            continue
        tokens = [key.strip() for key in keys if isinstance(key, str) and key.strip()]
        if tokens:
            keymap[action] = tokens
    return keymap


def load_theme_name() -> str | None:
    """Load persisted UI theme name, returning ``None`` when unset/invalid."""
    value = load_config().get("theme")
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped if stripped else None


def save_theme_name(theme_name: str) -> None:
    stripped = str(theme_name).strip()
    if not stripped:
        return
    config = load_config()
    config["theme"] = stripped
    save_config(config)


def load_app_config() -> AppConfig:
    data = load_config()
    panels = _section(data, "panels")
    return AppConfig(
        panel=parse_panel_options(_section(data, "panel")),
        tabs=parse_tab_options(_section(data, "tabs")),
        setups={side: parse_panel_setup(_section(panels, side)) for side in PANEL_SIDES},
        theme=load_theme_name(),
        keymap=_parse_keymap(_section(data, "keymap")),
    )


def save_panel_setup(side: str, setup: PanelSetup) -> None:
    """Persist the listing setup of one panel side (``left`` or ``right``)."""
    if side not in PANEL_SIDES:
        return
    config = load_config()
    panels = _section(config, "panels")
    panels[side] = serialize_panel_setup(setup)
    config["panels"] = panels
    save_config(config)


__all__ = [
    "APP_NAME",
    "CONFIG_PATH",
    "DEFAULT_SESSIONS_DIR",
    "PANEL_SIDES",
    "QSEARCH_MODES",
    "PanelOptions",
    "TabOptions",
    "PanelSetup",
    "AppConfig",
    "load_config",
    "save_config",
    "parse_panel_options",
    "parse_tab_options",
    "parse_panel_setup",
    "serialize_panel_setup",
    "load_theme_name",
    "save_theme_name",
    "load_app_config",
    "save_panel_setup",
]
