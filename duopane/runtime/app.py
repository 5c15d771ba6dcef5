"""Interactive application: wires the dual pane, tabs, keymap and painter.

``DuopaneApp`` is terminal-agnostic; ``run_app`` attaches it to the real
terminal through ``run_main_loop``.
"""

from __future__ import annotations

import logging
import os
import sys
import time
from collections.abc import Callable
from pathlib import Path

from ..config import PANEL_SIDES, AppConfig, save_panel_setup
from ..dual import DualPane
from ..errors import DuopaneError
from ..input import (
    GOTO_TAB_PREFIX,
    build_registry,
    is_text_key,
    parse_mouse_col_row,
    resolve_keymap,
)
from ..panel.panel import Panel
from ..panel.render import (
    TabStripView,
    entry_index_at,
    header_field_at,
    list_top,
    paint_panel,
)
from ..quickview import QuickView
from ..screen import Canvas
from ..tabs.manager import TabManager
from ..tabs.ring import TabRing
from ..tabs.session import list_sessions, restore_session, save_session
from ..terminal import TerminalController
from ..ui_theme import PLAIN_THEME, UITheme, resolve_theme
from .loop import RuntimeLoopCallbacks, RuntimeLoopTiming, run_main_loop
from .prompt import Prompt, StatusLine

logger = logging.getLogger(__name__)

WHEEL_STEP = 2
SESSION_SAVED_MESSAGE = "Tab session saved to {path}"


class DuopaneApp:
    """Key and mouse dispatch plus frame painting for two panels."""

    def __init__(
        self,
        config: AppConfig,
        left: Path | str,
        right: Path | str,
        *,
        theme: UITheme = PLAIN_THEME,
        color: bool = True,
        timing: RuntimeLoopTiming | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config
        self.theme = theme
        self.color = color
        self.timing = timing or RuntimeLoopTiming()
        self.clock = clock
        self.status = StatusLine(clock=clock)
        self.prompt: Prompt | None = None
        self.quit_requested = False
        self._dirty = True
        self._last_click: tuple[int, int, float] | None = None

        self.dual = DualPane(
            self._make_panel(0, None, left),
            self._make_panel(1, None, right),
            tab_options=config.tabs,
            panel_factory=self._make_panel,
        )
        self.tabs = TabManager(self.dual, config.tabs, report=self.report)
        self.keymap = resolve_keymap(config.keymap)
        self.registry = build_registry(self._actions(), self.keymap)

    def _make_panel(self, index: int, ring: TabRing | None, cwd: Path | str | None = None) -> Panel:
        if cwd is None:
            if ring is not None and ring.current_tab.path is not None:
                cwd = ring.current_tab.path
            else:
                other = self.dual.panel(1 - index)
                cwd = other.cwd if other is not None else Path.cwd()
        return Panel(
            cwd,
            options=self.config.panel,
            setup=self.config.setups[PANEL_SIDES[index]],
            tabs=ring,
            report=self.report,
        )

    def report(self, message: str, *, error: bool = True) -> None:
        self.status.show(message, error=error)
        self._dirty = True

    @property
    def panel(self) -> Panel:
        current = self.dual.current
        assert current is not None
        return current

    def is_dirty(self) -> bool:
        return self._dirty or any(panel.state.dirty for panel in self.dual.listing_panels())

    def on_idle(self) -> None:
        if self.status.expire():
            self._dirty = True

    def open_prompt(self, label: str, on_submit: Callable[[str], object], text: str = "") -> None:
        def submit(value: str) -> None:
            self._guarded(lambda: on_submit(value))

        self.prompt = Prompt(label, submit, text)
        self._dirty = True

    def _guarded(self, action: Callable[[], object]) -> object:
        try:
            return action()
        except DuopaneError as exc:
            logger.warning("%s", exc)
            self.report(str(exc))
            return False

    def _actions(self) -> dict[str, Callable[[], bool | None]]:
        def on_panel(name: str) -> Callable[[], object]:
            return lambda: getattr(self.panel, name)()

        def on_navigation(name: str) -> Callable[[], object]:
            def move() -> object:
                self.panel.marks.reset_sticky()
                return getattr(self.panel.navigation, name)()

            return move

        def on_marks(name: str) -> Callable[[], object]:
            return lambda: getattr(self.panel.marks, name)()

        actions: dict[str, Callable[[], object]] = {}
        for name in (
            "move_up",
            "move_down",
            "move_left",
            "move_right",
            "prev_page",
            "next_page",
            "move_home",
            "move_end",
            "goto_top_file",
            "goto_middle_file",
            "goto_bottom_file",
            "content_scroll_left",
            "content_scroll_right",
        ):
            actions[name] = on_navigation(name)
        for name in ("mark_up", "mark_down", "mark_left", "mark_right", "unmark_all"):
            actions[name] = on_marks(name)
        for name in (
            "enter",
            "cd_parent",
            "cd_child",
            "cycle_listing_format",
            "sort_next",
            "sort_prev",
            "toggle_reverse",
            "toggle_case_sensitive",
            "toggle_hidden",
            "reload",
            "history_prev",
            "history_next",
        ):
            actions[name] = on_panel(name)

        actions.update(
            {
                "toggle_mark": lambda: self.panel.marks.toggle_mark(
                    move_down=self.config.panel.mark_moves_down
                ),
                "select_pattern": lambda: self._select_prompt(select=True),
                "unselect_pattern": lambda: self._select_prompt(select=False),
                "invert_selection": lambda: self.panel.marks.invert(),
                "select_extension": lambda: self.panel.marks.select_by_extension(),
                "start_search": lambda: self.panel.search.start(),
                "set_filter": lambda: self.open_prompt(
                    "Filter", self.panel.set_filter, self.panel.state.filter or ""
                ),
                "chdir_other_panel": self.dual.chdir_other_panel,
                "sync_other_panel": self.dual.sync_other_panel,
                "chdir_to_readlink": self.dual.chdir_to_readlink,
                "switch_focus": self.dual.switch_focus,
                "swap_panels": self.dual.swap_panels,
                "toggle_quick_view": lambda: self.dual.toggle_quick_view(color=self.color),
                "new_tab": self.tabs.new_tab,
                "close_tab": self.tabs.close,
                "next_tab": self.tabs.next,
                "prev_tab": self.tabs.prev,
                "rename_tab": self._rename_prompt,
                "copy_tab_to_other_panel": self.tabs.copy_to_other_panel,
                "move_tab_to_other_panel": self.tabs.move_to_other_panel,
                "swap_tabs": self.tabs.swap,
                "move_tab_left": lambda: self.tabs.move_tab(-1),
                "move_tab_right": lambda: self.tabs.move_tab(1),
                "save_session": lambda: self.open_prompt("Save tab session", self.save_session),
                "restore_session": self._restore_prompt,
                "quit": self.request_quit,
            }
        )
        for number in range(1, 10):
            actions[f"{GOTO_TAB_PREFIX}{number}"] = (
                lambda index=number - 1: self.tabs.goto_index(index)
            )
        return {name: self._guard(handler) for name, handler in actions.items()}

    def _guard(self, handler: Callable[[], object]) -> Callable[[], bool | None]:
        def run() -> bool | None:
            return bool(self._guarded(handler))

        return run

    def _select_prompt(self, *, select: bool) -> None:
        marks = self.panel.marks

        def apply(pattern: str) -> None:
            marks.select_by_pattern(pattern, files_only=True, select=select)

        self.open_prompt("Select" if select else "Unselect", apply, "*")

    def _rename_prompt(self) -> None:
        current = self.panel.tabs.current_tab
        self.open_prompt("Tab name", self.tabs.rename, current.name or "")

    def _restore_prompt(self) -> None:
        names = list_sessions(self.config.tabs.sessions_dir)
        self.open_prompt("Restore tab session", self.restore_session, names[-1] if names else "")

    def save_session(self, name: str) -> None:
        try:
            path = save_session(self.dual, name.strip(), self.config.tabs.sessions_dir)
        except (OSError, ValueError) as exc:
            logger.warning("saving tab session %r failed: %s", name, exc)
            self.report(f"Cannot save tab session: {exc}")
            return
        self.report(SESSION_SAVED_MESSAGE.format(path=path), error=False)

    def restore_session(self, name: str) -> None:
        try:
            errors = restore_session(self.dual, name.strip(), self.config.tabs.sessions_dir)
        except ValueError as exc:
            self.report(str(exc))
            return
        if errors:
            self.report("; ".join(str(error) for error in errors))
        for panel in self.dual.listing_panels():
            panel.state.dirty = True

    def request_quit(self) -> bool:
        self.quit_requested = True
        return True

    def persist_setups(self) -> None:
        for index, side in enumerate(PANEL_SIDES):
            panel = self.dual.panel(index)
            if panel is not None:
                save_panel_setup(side, panel.setup)

    def handle_key(self, key: str) -> bool:
        """Dispatch one key token; ``True`` asks the loop to stop."""
        self._dirty = True
        if self.prompt is not None:
            if self.prompt.handle_key(key):
                self.prompt = None
            self.dual.refresh_quick_view()
            return False
        if key.startswith("MOUSE"):
            self.handle_mouse(key)
            self.dual.refresh_quick_view()
            return False

        search = self.panel.search
        if self.panel.state.searching:
            if key == "ESC":
                search.stop()
                return False
            if key == "BACKSPACE":
                search.backspace()
                self.dual.refresh_quick_view()
                return False
            if is_text_key(key):
                search.key(key)
                self.dual.refresh_quick_view()
                return False
            if key not in self.keymap.get("start_search", ()):
                search.stop()

        if key in self.registry:
            self.registry.dispatch(key)
        elif is_text_key(key):
            search.start()
            search.key(key)
        self.dual.refresh_quick_view()
        return self.quit_requested

    def _slot_at(self, x: int) -> int | None:
        for index, geometry in enumerate(self.dual.geometry):
            if geometry.visible and geometry.x <= x < geometry.x + geometry.width:
                return index
        return None

    def handle_mouse(self, key: str) -> bool:
        col, row = parse_mouse_col_row(key)
        if col is None or row is None:
            return False
        x, y = col - 1, row - 1
        index = self._slot_at(x)
        if index is None:
            return False
        slot = self.dual.slots[index]
        wheel = -WHEEL_STEP if key.startswith("MOUSE_WHEEL_UP") else WHEEL_STEP
        if isinstance(slot, QuickView):
            if key.startswith("MOUSE_WHEEL"):
                slot.scroll(wheel)
                return True
            return False

        panel = slot
        if key.startswith("MOUSE_WHEEL"):
            return panel.navigation.move_selection(wheel)
        if not key.startswith("MOUSE_LEFT_DOWN"):
            return False
        if index != self.dual.focused:
            self.dual.switch_focus()
        column = x - self.dual.geometry[index].x
        strip = self.strip_view(index)
        if strip is not None:
            strip_row = 2 if strip.bar_position == "top" else panel.state.rows - 2
            if y == strip_row:
                return bool(self._guarded(lambda: self.tabs.click(index, column)))
        if y == list_top(panel, strip):
            field = header_field_at(panel, column)
            if field is None or field.sort_field is None:
                return False
            panel.set_sort_field(field.sort_field)
            return True
        target = entry_index_at(panel, strip, y, column)
        if target is None:
            return False
        now = self.clock()
        last = self._last_click
        self._last_click = (index, target, now)
        if (
            last is not None
            and last[:2] == (index, target)
            and now - last[2] <= self.timing.double_click_seconds
        ):
            self._last_click = None
            return bool(self._guarded(panel.enter))
        panel.navigation.select_visible(target)
        return True

    def strip_view(self, index: int) -> TabStripView | None:
        panel = self.dual.panel(index)
        if panel is None or not self.dual.tabs_visible_for(index):
            return None
        return TabStripView(
            titles=self.tabs.titles(index),
            window=self.tabs.strip_window(index),
            current=panel.tabs.current,
            bar_position=self.config.tabs.bar_position,
        )

    def render(self, cols: int, rows: int) -> str:
        return self.paint(cols, rows).render()

    def paint(self, cols: int, rows: int) -> Canvas:
        canvas = Canvas(cols, rows, self.theme)
        panel_rows = max(0, rows - 1)
        geometry = self.dual.layout(cols, panel_rows)
        for index, slot in enumerate(self.dual.slots):
            if not geometry[index].visible:
                continue
            focused = index == self.dual.focused
            if isinstance(slot, Panel):
                paint_panel(canvas, slot, geometry[index].x, focused=focused, strip=self.strip_view(index))
            else:
                slot.paint(canvas, geometry[index].x, geometry[index].width, panel_rows)
        self._paint_bottom_line(canvas, cols, rows - 1)
        self._dirty = False
        return canvas

    def _paint_bottom_line(self, canvas: Canvas, cols: int, row: int) -> None:
        if row < 0:
            return
        if self.prompt is not None:
            text = f"{self.prompt.label}: {self.prompt.text}"
            color = "input"
        elif self.status.message:
            text = self.status.message
            color = "error" if self.status.is_error else "hint"
        else:
            return
        canvas.print_at(row, 0, text[:cols].ljust(cols), color)


def run_app(
    config: AppConfig,
    left: Path,
    right: Path,
    *,
    theme_name: str | None = None,
    no_color: bool = False,
    mouse: bool = True,
) -> None:
    """Run the interactive file manager until the user quits."""
    if not os.isatty(sys.stdin.fileno()):
        raise SystemExit("duopane needs an interactive terminal (use --list for plain output).")
    theme = resolve_theme(theme_name or config.theme, no_color=no_color)
    app = DuopaneApp(config, left, right, theme=theme, color=not no_color)
    terminal = TerminalController(sys.stdin.fileno(), sys.stdout.fileno(), mouse=mouse)
    run_main_loop(
        terminal,
        sys.stdin.fileno(),
        app.timing,
        RuntimeLoopCallbacks(
            is_dirty=app.is_dirty,
            render=app.render,
            handle_key=app.handle_key,
            on_idle=app.on_idle,
        ),
    )
    app.persist_setups()


__all__ = ["DuopaneApp", "run_app", "WHEEL_STEP"]
