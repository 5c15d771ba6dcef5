"""Command-line front door for duopane.

Parses CLI options, resolves the two start directories, and configures
logging. Then dispatches into the interactive runtime, or prints a single
panel listing with ``--list``.
"""

from __future__ import annotations

import argparse
import logging
import shutil
import sys
from pathlib import Path

from .config import PanelOptions, PanelSetup, load_app_config, save_theme_name
from .listing.format import ListingMode
from .panel.panel import Panel
from .panel.render import paint_panel
from .panel.state import FRAME_ROWS, MINI_INFO_ROWS
from .runtime import run_app
from .screen import Canvas
from .ui_theme import available_theme_names, normalize_theme_name

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def _default_render_width() -> int:
    term = shutil.get_terminal_size((80, 24))
    return max(1, term.columns)


def configure_logging(log_file: str | None) -> None:
    """Send package logs to ``log_file``; without one they are discarded.

    The terminal belongs to the UI, so nothing is ever logged to stderr.
    """
    package_logger = logging.getLogger("duopane")
    if log_file is None:
        package_logger.addHandler(logging.NullHandler())
        return
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG)


def render_listing(
    path: Path,
    width: int,
    *,
    user_format: str | None = None,
    options: PanelOptions | None = None,
) -> str:
    """Render one panel for ``path`` tall enough to show every entry."""
    options = options or PanelOptions()
    setup = PanelSetup()
    if user_format:
        setup.list_format = ListingMode.USER
        setup.user_format = user_format
    messages: list[str] = []
    panel = Panel(path, options=options, setup=setup, report=messages.append)
    for message in messages:
        print(message, file=sys.stderr)
    mini_info = MINI_INFO_ROWS if options.show_mini_info else 0
    lines_needed = -(-panel.state.count // max(1, panel.state.list_cols))
    rows = FRAME_ROWS + mini_info + max(1, lines_needed)
    panel.resize(width, rows)
    canvas = Canvas(width, rows)
    paint_panel(canvas, panel, 0, focused=True)
    return "".join(line.rstrip() + "\n" for line in canvas.lines())


def main(default_path: Path | None = None) -> None:
    """Parse CLI arguments and launch duopane on one or two directories.

    ``default_path`` is primarily for tests; when omitted the current working
    directory is used for any panel not named on the command line.
    """
    parser = argparse.ArgumentParser(
        description="Dual-pane terminal file manager with per-panel tabs."
    )
    parser.add_argument("left", nargs="?", default=None, help="Left panel directory.")
    parser.add_argument("right", nargs="?", default=None, help="Right panel directory.")
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}); a known name is remembered.",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable color output even on TTY.")
    parser.add_argument("--no-mouse", action="store_true", help="Leave mouse events to the terminal.")
    parser.add_argument("--list", metavar="PATH", help="Print the panel listing for PATH and exit.")
    parser.add_argument(
        "--format",
        default=None,
        help='User listing format for --list, e.g. "half type name | size | perm".',
    )
    parser.add_argument(
        "--width",
        type=_positive_int,
        default=None,
        help="Panel width for --list output (default: terminal width).",
    )
    parser.add_argument("--log-file", default=None, help="Write diagnostic logs to this file.")
    args = parser.parse_args()

    configure_logging(args.log_file)
    config = load_app_config()

    if args.list is not None:
        if args.left is not None:
            raise SystemExit("Cannot combine positional paths with --list.")
        list_path = Path(args.list)
        if not list_path.is_dir():
            raise SystemExit(f"Path not found: {list_path}")
        width = args.width if args.width is not None else _default_render_width()
        sys.stdout.write(render_listing(list_path, width, user_format=args.format, options=config.panel))
        return

    if default_path is None:
        default_path = Path.cwd()
    paths = [Path(args.left or default_path), Path(args.right or default_path)]
    for path in paths:
        if not path.is_dir():
            raise SystemExit(f"Path not found: {path}")
    if args.theme and args.theme.strip().lower() in available_theme_names():
        save_theme_name(normalize_theme_name(args.theme))
    run_app(
        config,
        paths[0],
        paths[1],
        theme_name=args.theme,
        no_color=args.no_color,
        mouse=not args.no_mouse,
    )


if __name__ == "__main__":
    main()
