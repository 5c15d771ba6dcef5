"""Saved tab sessions.

A session file holds one section per panel::

    [Current Panel]
    <slot index>
    <current tab index, or -1 for a non-listing view>
    <name or (null)>
    <path>
    ...
    <blank line>
    [Other Panel]
    ...

Each section is validated into a complete ``TabRing`` before any live panel
is touched, and a broken section never blocks the other one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from ..dual import DualPane
from ..errors import ChdirError, SessionRestoreError
from ..panel.panel import Panel
from .ring import Tab, TabRing

logger = logging.getLogger(__name__)

CURRENT_HEADER = "[Current Panel]"
OTHER_HEADER = "[Other Panel]"
NULL_NAME = "(null)"
NOT_LISTING = -1


@dataclass
class SessionSection:
    """One parsed panel section; ``ring`` is ``None`` for a skipped (``-1``) panel."""

    header: str
    panel_index: int
    ring: TabRing | None


def _write_section(header: str, index: int, panel: Panel | None) -> list[str]:
    lines = [header, str(index)]
    if panel is None:
        lines.append(str(NOT_LISTING))
        return lines
    ring = panel.tabs
    lines.append(str(ring.current))
    for position, tab in enumerate(ring):
        # Tabs never entered have no path yet; they reopen on the panel's directory.
        path = tab.path if position != ring.current and tab.path is not None else panel.cwd
        lines.append(tab.name if tab.name else NULL_NAME)
        lines.append(str(path))
    return lines


def format_session(dual: DualPane) -> str:
    """Serialize both panels' tab rings; the current tab is written with the live cwd."""
    lines = _write_section(CURRENT_HEADER, dual.focused, dual.current)
    lines.append("")
    lines.extend(_write_section(OTHER_HEADER, dual.other_index, dual.other))
    return "\n".join(lines) + "\n"


def _parse_int(value: str | None, section: str, what: str) -> int:
    try:
        return int((value or "").strip())
    except ValueError:
        raise SessionRestoreError(section, f"bad {what}: {value!r}") from None


def parse_section(header: str, body: list[str]) -> SessionSection:
    """Parse the lines following ``header`` up to the next section header.

    Raises ``SessionRestoreError`` on malformed counts, a name without a
    path, an empty tab list, or a current index outside the list.
    """
    panel_index = _parse_int(body[0] if body else None, header, "panel index")
    current = _parse_int(body[1] if len(body) > 1 else None, header, "current tab index")
    if current == NOT_LISTING:
        return SessionSection(header, panel_index, None)

    tabs: list[Tab] = []
    position = 2
    while position < len(body) and body[position] != "":
        name = body[position]
        path = body[position + 1] if position + 1 < len(body) else ""
        if not path:
            raise SessionRestoreError(header, f"tab {name!r} has no path")
        tabs.append(Tab(name=None if name == NULL_NAME else name, path=Path(path)))
        position += 2

    if not tabs:
        raise SessionRestoreError(header, "no tabs")
    if not 0 <= current < len(tabs):
        raise SessionRestoreError(header, f"current tab index {current} out of range")
    return SessionSection(header, panel_index, TabRing(tabs, current))


def parse_session(text: str) -> list[SessionSection | SessionRestoreError]:
    """Parse both sections; each entry is a section or the error that voided it."""
    lines = text.splitlines()
    starts = {header: _find(lines, header) for header in (CURRENT_HEADER, OTHER_HEADER)}
    results: list[SessionSection | SessionRestoreError] = []
    for header in (CURRENT_HEADER, OTHER_HEADER):
        start = starts[header]
        if start < 0:
            results.append(SessionRestoreError(header, "missing section header"))
            continue
        end = len(lines)
        for other_start in starts.values():
            if start < other_start < end:
                end = other_start
        try:
            results.append(parse_section(header, lines[start + 1 : end]))
        except SessionRestoreError as exc:
            results.append(exc)
    return results


def _find(lines: list[str], header: str) -> int:
    for index, line in enumerate(lines):
        if line == header:
            return index
    return -1


def session_path(sessions_dir: Path, name: str) -> Path:
    name = name.strip()
    if not name or "/" in name or name in {".", ".."}:
        raise ValueError(f"invalid session name: {name!r}")
    return sessions_dir / name


def save_session(dual: DualPane, name: str, sessions_dir: Path) -> Path:
    path = session_path(sessions_dir, name)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(format_session(dual), encoding="utf-8")
    logger.info("saved tab session %s", path)
    return path


def apply_section(panel: Panel | None, section: SessionSection) -> ChdirError | None:
    """Install a validated ring into a listing panel and enter its current tab."""
    if panel is None or section.ring is None:
        return None
    panel.tabs = section.ring
    panel.state.dirty = True
    path = section.ring.current_tab.path
    if path is None:
        return None
    try:
        panel.chdir(path)
    except ChdirError as exc:
        return exc
    return None


def restore_session(dual: DualPane, name: str, sessions_dir: Path) -> list[Exception]:
    """Restore a saved session into the two panels.

    Returns the errors met along the way. A section that fails to parse
    leaves its panel untouched; a non-listing panel is never restored into.
    """
    path = session_path(sessions_dir, name)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        error = SessionRestoreError(name, exc.strerror or str(exc))
        logger.warning("%s", error)
        return [error]

    targets = {CURRENT_HEADER: dual.current, OTHER_HEADER: dual.other}
    errors: list[Exception] = []
    for result in parse_session(text):
        if isinstance(result, SessionRestoreError):
            logger.warning("%s", result)
            errors.append(result)
            continue
        failure = apply_section(targets[result.header], result)
        if failure is not None:
            logger.warning("%s", failure)
            errors.append(failure)
    return errors


def list_sessions(sessions_dir: Path) -> list[str]:
    try:
        return sorted(child.name for child in sessions_dir.iterdir() if child.is_file())
    except OSError:
        return []


__all__ = [
    "CURRENT_HEADER",
    "OTHER_HEADER",
    "NULL_NAME",
    "SessionSection",
    "format_session",
    "parse_section",
    "parse_session",
    "save_session",
    "restore_session",
    "list_sessions",
    "session_path",
]
