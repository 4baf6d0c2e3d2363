"""Tests for cell-width measurement and clipping of styled text."""

from __future__ import annotations

import unittest

from treeofwork.ansi import clip_ansi_line, display_width, pad_to_width


class DisplayWidthTests(unittest.TestCase):
    def test_escape_sequences_take_no_cells(self) -> None:
        self.assertEqual(display_width("\033[1;31mfatal\033[0m"), 5)

    def test_wide_characters_take_two_cells(self) -> None:
        self.assertEqual(display_width("木-tree"), 7)

    def test_pad_accounts_for_wide_characters(self) -> None:
        self.assertEqual(pad_to_width("木", 4), "木  ")
        self.assertEqual(pad_to_width("already-long", 4), "already-long")


class ClipAnsiLineTests(unittest.TestCase):
    def test_clip_keeps_leading_style(self) -> None:
        clipped = clip_ansi_line("\033[1;31mfatal: boom\033[0m", 5)

        self.assertTrue(clipped.startswith("\033[1;31m"))
        self.assertEqual(display_width(clipped), 5)

    def test_wide_character_straddling_edge_is_dropped(self) -> None:
        self.assertEqual(clip_ansi_line("ab木", 3), "ab")

    def test_non_positive_width_gives_empty_line(self) -> None:
        self.assertEqual(clip_ansi_line("text", 0), "")

    def test_tabs_expand_to_spaces(self) -> None:
        self.assertEqual(clip_ansi_line("a\tb", 10), "a       b")


if __name__ == "__main__":
    unittest.main()
