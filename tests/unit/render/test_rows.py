"""Tests for explorer row and status formatting."""

from __future__ import annotations

import unittest
from pathlib import Path

from repopick.file_tree_model import FlatRow, TreeNode
from repopick.render import (
    build_explorer_lines,
    format_token_count,
    format_tree_row,
    result_lines,
    status_text,
    token_label,
    visible_window,
)
from repopick.ui_theme import DEFAULT_THEME, MONO_THEME, available_theme_names, resolve_theme


def _node(name: str, is_dir: bool, **kwargs) -> TreeNode:
    return TreeNode(name=name, path=Path("/project") / name, is_dir=is_dir, **kwargs)


class TokenFormattingTests(unittest.TestCase):
    def test_format_token_count_scales(self) -> None:
        self.assertEqual(format_token_count(0), "")
        self.assertEqual(format_token_count(999), "999")
        self.assertEqual(format_token_count(1000), "1.0k")
        self.assertEqual(format_token_count(12345), "12.3k")
        self.assertEqual(format_token_count(2_500_000), "2.5m")

    def test_partial_folder_shows_selected_over_total(self) -> None:
        node = _node("src", True, partially_selected=True, token_count=100, selected_token_count=40)
        self.assertEqual(token_label(node), "40/100")

    def test_selected_folder_shows_selected_total(self) -> None:
        node = _node("lib", True, selected=True, token_count=100, selected_token_count=100)
        self.assertEqual(token_label(node), "100")

    def test_file_and_unselected_folder_show_total(self) -> None:
        self.assertEqual(token_label(_node("a.txt", False, selected=True, token_count=5)), "5")
        self.assertEqual(token_label(_node("docs", True, token_count=0)), "")


class TreeRowTests(unittest.TestCase):
    def test_row_layout_without_color(self) -> None:
        folder = _node("src", True, expanded=True, partially_selected=True, token_count=100, selected_token_count=40)
        child = _node("a.py", False, selected=True, token_count=40)

        self.assertEqual(format_tree_row(FlatRow(folder, 0), True, 80, MONO_THEME), "▍ [◐] ▾ src (40/100)")
        self.assertEqual(format_tree_row(FlatRow(child, 1), False, 80, MONO_THEME), "  [✓]   · a.py (40)")

    def test_row_is_truncated_to_width(self) -> None:
        row = FlatRow(_node("very_long_name.txt", False, token_count=10), 0)
        self.assertEqual(format_tree_row(row, False, 12, MONO_THEME), "  [ ] · very")

    def test_colored_row_wraps_segments_with_reset(self) -> None:
        row = FlatRow(_node("lib", True, selected=True, token_count=3, selected_token_count=3), 0)
        rendered = format_tree_row(row, False, 80, DEFAULT_THEME)
        self.assertIn(f"{DEFAULT_THEME.checkbox_selected}[✓]{DEFAULT_THEME.reset}", rendered)


class ScreenTests(unittest.TestCase):
    def test_visible_window_centres_cursor_and_clamps(self) -> None:
        self.assertEqual(visible_window(0, 100, 10), (0, 10))
        self.assertEqual(visible_window(50, 100, 10), (45, 55))
        self.assertEqual(visible_window(99, 100, 10), (90, 100))
        self.assertEqual(visible_window(0, 3, 10), (0, 3))

    def test_status_text(self) -> None:
        self.assertEqual(
            status_text(2, 1500, 250000, 4, 12, "/repo"),
            "2 selected • 1.5k/250.0k tokens • 5/12 • /repo",
        )

    def test_explorer_lines_fill_height_with_status_last(self) -> None:
        rows = [FlatRow(_node(f"f{i}.txt", False), 0) for i in range(3)]
        lines = build_explorer_lines(rows, 1, "status", 8, 80, MONO_THEME)

        self.assertEqual(len(lines), 8)
        self.assertEqual(lines[-1], "status")
        self.assertEqual(lines[3], "▍ [ ] · f1.txt")

    def test_result_lines_include_outcome_and_prompt(self) -> None:
        lines = result_lines(False, "No files selected", 6, 40, MONO_THEME)
        joined = "\n".join(lines)
        self.assertIn("❌ No files selected", joined)
        self.assertIn("Press any key to continue...", joined)

    def test_theme_resolution(self) -> None:
        self.assertIn("ocean", available_theme_names())
        self.assertIs(resolve_theme("unknown"), DEFAULT_THEME)
        self.assertIs(resolve_theme("ocean", no_color=True), MONO_THEME)
        self.assertEqual(resolve_theme(" Ocean ").name, "ocean")


if __name__ == "__main__":
    unittest.main()
