"""Tests for config persistence and input sanitization.

Malformed values fall back to defaults; panel setups survive a save/load
cycle per side.
"""

from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from duopane import config
from duopane.listing.format import ListingMode
from duopane.sorting import SortField


class ConfigBehaviorTests(unittest.TestCase):
    def test_missing_or_malformed_file_gives_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            with mock.patch("duopane.config.CONFIG_PATH", config_path):
                self.assertEqual(config.load_config(), {})
                config_path.write_text("[1, 2]", encoding="utf-8")
                self.assertEqual(config.load_config(), {})
                config_path.write_text("{not json", encoding="utf-8")

                loaded = config.load_app_config()

        self.assertEqual(loaded.panel, config.PanelOptions())
        self.assertEqual(loaded.tabs, config.TabOptions())
        self.assertEqual(loaded.setups["left"], config.PanelSetup())
        self.assertIsNone(loaded.theme)
        self.assertEqual(loaded.keymap, {})

    def test_panel_options_ignore_wrong_types(self) -> None:
        options = config.parse_panel_options(
            {"scroll_pages": "yes", "show_hidden": False, "qsearch_mode": " Insensitive "}
        )

        self.assertFalse(options.scroll_pages)
        self.assertFalse(options.show_hidden)
        self.assertEqual(options.qsearch_mode, config.QSEARCH_INSENSITIVE)

    def test_tab_options_parse_choices_and_sessions_dir(self) -> None:
        options = config.parse_tab_options(
            {"new_tab_direction": "FIRST", "bar_position": "middle", "sessions_dir": "/tmp/sessions"}
        )

        self.assertEqual(options.new_tab_direction, "first")
        self.assertEqual(options.bar_position, "top")
        self.assertEqual(options.sessions_dir, Path("/tmp/sessions"))

    def test_panel_setup_sanitizes_modes_fields_and_columns(self) -> None:
        setup = config.parse_panel_setup(
            {
                "list_format": "gallery",
                "sort_field": "size",
                "brief_cols": 42,
                "user_format": "   ",
                "user_status_formats": {"brief": "half name", "bogus": "x", "long": 3},
            }
        )

        self.assertIs(setup.list_format, ListingMode.FULL)
        self.assertIs(setup.sort_field, SortField.SIZE)
        self.assertEqual(setup.brief_cols, 9)
        self.assertEqual(setup.user_format, config.PanelSetup().user_format)
        self.assertEqual(setup.user_status_formats, {ListingMode.BRIEF: "half name"})

    def test_panel_setup_round_trips_per_side(self) -> None:
        setup = config.PanelSetup(
            list_format=ListingMode.USER,
            user_format="half name | size",
            user_status_formats={ListingMode.USER: "full name"},
            brief_cols=3,
            sort_field=SortField.MTIME,
            reverse=True,
            case_sensitive=False,
        )
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "nested" / "config.json"
            with mock.patch("duopane.config.CONFIG_PATH", config_path):
                config.save_theme_name("contrast")
                config.save_panel_setup("right", setup)
                config.save_panel_setup("middle", setup)

                raw = json.loads(config_path.read_text(encoding="utf-8"))
                loaded = config.load_app_config()

        self.assertEqual(sorted(raw["panels"]), ["right"])
        self.assertEqual(raw["theme"], "contrast")
        self.assertEqual(loaded.setups["right"], setup)
        self.assertEqual(loaded.setups["left"], config.PanelSetup())
        self.assertEqual(loaded.theme, "contrast")

    def test_keymap_accepts_strings_and_lists(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            config_path.write_text(
                json.dumps({"keymap": {"quit": "CTRL_Q", "tab_next": ["ALT_RIGHT", " ", 7], "bad": 1}}),
                encoding="utf-8",
            )
            with mock.patch("duopane.config.CONFIG_PATH", config_path):
                loaded = config.load_app_config()

        self.assertEqual(loaded.keymap, {"quit": ["CTRL_Q"], "tab_next": ["ALT_RIGHT"]})


if __name__ == "__main__":
    unittest.main()
