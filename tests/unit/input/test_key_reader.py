"""Key decoding tests over a pipe: escape sequences, modifiers, mouse and UTF-8."""

from __future__ import annotations

import os
import unittest

from duopane.input import reader
from duopane.input.reader import parse_mouse_col_row, read_key


class ReadKeyTests(unittest.TestCase):
    def setUp(self) -> None:
        reader._PENDING_BYTES.clear()
        self.read_fd, self.write_fd = os.pipe()

    def tearDown(self) -> None:
        os.close(self.read_fd)
        os.close(self.write_fd)
        reader._PENDING_BYTES.clear()

    def keys(self, data: bytes, count: int) -> list[str]:
        os.write(self.write_fd, data)
        return [read_key(self.read_fd, timeout_ms=50) for _ in range(count)]

    def test_cursor_and_editing_keys(self) -> None:
        self.assertEqual(
            self.keys(b"\x1b[A\x1b[5~\x1b[2~\x1b[15~\x1bOQ\x1b[H", 6),
            ["UP", "PAGE_UP", "INSERT", "F5", "F2", "HOME"],
        )

    def test_modified_cursor_keys(self) -> None:
        self.assertEqual(
            self.keys(b"\x1b[1;5C\x1b[1;2A\x1b[1;3D\x1b[5;5~\x1b[Z", 5),
            ["CTRL_RIGHT", "SHIFT_UP", "ALT_LEFT", "CTRL_PAGE_UP", "SHIFT_TAB"],
        )

    def test_control_and_alt_keys(self) -> None:
        self.assertEqual(
            self.keys(b"\x17\t\r\x7f\x1bg\x1b+\x1b.\x1b\x14", 8),
            ["CTRL_W", "TAB", "ENTER_CR", "BACKSPACE", "ALT_G", "ALT_+", "ALT_.", "ALT_CTRL_T"],
        )

    def test_sgr_mouse_events(self) -> None:
        self.assertEqual(
            self.keys(b"\x1b[<0;12;5M\x1b[<0;12;5m\x1b[<64;3;4M\x1b[<65;3;4M\x1b[<32;1;1M", 5),
            [
                "MOUSE_LEFT_DOWN:12:5",
                "MOUSE_LEFT_UP:12:5",
                "MOUSE_WHEEL_UP:3:4",
                "MOUSE_WHEEL_DOWN:3:4",
                "MOUSE",
            ],
        )

    def test_utf8_text(self) -> None:
        self.assertEqual(self.keys("aé字".encode(), 3), ["a", "é", "字"])

    def test_lone_escape_and_timeout(self) -> None:
        self.assertEqual(self.keys(b"\x1b", 1), ["ESC"])
        self.assertEqual(read_key(self.read_fd, timeout_ms=10), "")

    def test_parse_mouse_col_row(self) -> None:
        self.assertEqual(parse_mouse_col_row("MOUSE_LEFT_DOWN:12:5"), (12, 5))
        self.assertEqual(parse_mouse_col_row("MOUSE"), (None, None))
        self.assertEqual(parse_mouse_col_row("MOUSE_LEFT_DOWN:x:5"), (None, None))


if __name__ == "__main__":
    unittest.main()
