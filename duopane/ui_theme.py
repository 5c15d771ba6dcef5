"""Panel color themes keyed by logical color id.

Painters ask for colors by id (``normal``, ``selected``, ``marked`` ...);
the theme maps each id to an SGR sequence. The plain theme maps every id to
an empty string so output carries no escapes.
"""

from __future__ import annotations

from dataclasses import dataclass, fields


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by the panel painter."""

    name: str
    reset: str
    normal: str
    selected: str
    marked: str
    marked_selected: str
    header: str
    reverse: str
    frame: str
    directory: str
    executable: str
    link: str
    stale_link: str
    device: str
    special: str
    tab_normal: str
    tab_selected: str
    input: str
    error: str
    hint: str

    def sgr(self, color_id: str) -> str:
        """Return the SGR sequence for ``color_id`` (``normal`` when unknown)."""
        if color_id in _COLOR_IDS:
            return getattr(self, color_id)
        return self.normal


_COLOR_IDS = frozenset(f.name for f in fields(UITheme)) - {"name", "reset"}


DEFAULT_THEME = UITheme(
    name="default",
    reset="\033[0m",
    normal="\033[38;5;252m",
    selected="\033[30;46m",
    marked="\033[1;33m",
    marked_selected="\033[1;33;46m",
    header="\033[1;33m",
    reverse="\033[7m",
    frame="\033[38;5;250m",
    directory="\033[1;38;5;255m",
    executable="\033[1;32m",
    link="\033[38;5;117m",
    stale_link="\033[1;31m",
    device="\033[1;35m",
    special="\033[38;5;250m",
    tab_normal="\033[38;5;250m",
    tab_selected="\033[30;46m",
    input="\033[30;47m",
    error="\033[1;37;41m",
    hint="\033[2;38;5;250m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    reset="\033[0m",
    normal="\033[38;5;153m",
    selected="\033[30;48;5;39m",
    marked="\033[1;38;5;229m",
    marked_selected="\033[1;38;5;229;48;5;39m",
    header="\033[1;38;5;45m",
    reverse="\033[7m",
    frame="\033[38;5;31m",
    directory="\033[1;38;5;45m",
    executable="\033[38;5;84m",
    link="\033[38;5;117m",
    stale_link="\033[38;5;203m",
    device="\033[38;5;176m",
    special="\033[38;5;110m",
    tab_normal="\033[2;38;5;110m",
    tab_selected="\033[30;48;5;39m",
    input="\033[30;48;5;153m",
    error="\033[1;37;48;5;124m",
    hint="\033[2;38;5;110m",
)

PLAIN_THEME = UITheme(
    name="plain",
    reset="",
    normal="",
    selected="",
    marked="",
    marked_selected="",
    header="",
    reverse="",
    frame="",
    directory="",
    executable="",
    link="",
    stale_link="",
    device="",
    special="",
    tab_normal="",
    tab_selected="",
    input="",
    error="",
    hint="",
)

_THEMES: dict[str, UITheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    """Return selectable non-plain theme names."""
    return tuple(sorted(_THEMES.keys()))


def normalize_theme_name(name: str | None) -> str:
    """Return a valid theme name, falling back to default."""
    if not name:
        return DEFAULT_THEME.name
    candidate = str(name).strip().lower()
    if candidate in _THEMES:
        return candidate
    return DEFAULT_THEME.name


def resolve_theme(name: str | None, *, no_color: bool = False) -> UITheme:
    if no_color:
        return PLAIN_THEME
    return _THEMES[normalize_theme_name(name)]


__all__ = [
    "UITheme",
    "DEFAULT_THEME",
    "OCEAN_THEME",
    "PLAIN_THEME",
    "available_theme_names",
    "normalize_theme_name",
    "resolve_theme",
]
