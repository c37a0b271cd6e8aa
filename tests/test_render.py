#!/usr/bin/env python3
"""
Tests for pane rendering. Frames are compared after stripping ANSI styles.
"""

import os
import re
import sys
import unittest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from parquet_browser.navigation import ActivePane, SelectionState
from parquet_browser.render import (
    HIGHLIGHT_SYMBOL,
    format_size,
    render_frame,
    visible_window,
)
from parquet_fixtures import make_model

ANSI_PATTERN = re.compile(r"\x1b\[[0-9;?]*[A-Za-z]")


def plain(frame):
    return ANSI_PATTERN.sub("", frame)


class TestVisibleWindow(unittest.TestCase):
    def test_short_list_is_fully_visible(self):
        self.assertEqual(visible_window(3, 2, 10), (0, 3))

    def test_window_follows_selection(self):
        self.assertEqual(visible_window(100, 0, 10), (0, 10))
        self.assertEqual(visible_window(100, 50, 10), (45, 55))
        self.assertEqual(visible_window(100, 99, 10), (90, 100))

    def test_selection_always_inside_window(self):
        for selected in range(40):
            start, end = visible_window(40, selected, 7)
            self.assertTrue(start <= selected < end)
            self.assertEqual(end - start, 7)


class TestFormatSize(unittest.TestCase):
    def test_units(self):
        self.assertEqual(format_size(512), "512 B")
        self.assertEqual(format_size(2048), "2.0 KiB")
        self.assertEqual(format_size(3 * 1024 * 1024), "3.0 MiB")


class TestRenderFrame(unittest.TestCase):
    def setUp(self):
        self.metadata = make_model([2, 5, 1])

    def test_frame_has_terminal_height(self):
        frame = render_frame(self.metadata, SelectionState(), 120, 30)
        self.assertEqual(len(frame.split("\n")), 30)

    def test_panes_show_selection(self):
        state = SelectionState(
            active_pane=ActivePane.COLUMN_BROWSER, row_group_index=1, column_index=3
        )
        text = plain(render_frame(self.metadata, state, 150, 30))

        self.assertIn("test.parquet", text)
        self.assertIn("Row Groups", text)
        self.assertIn(f"{HIGHLIGHT_SYMBOL}Row Group 1", text)
        self.assertIn(f"{HIGHLIGHT_SYMBOL}rg1.col3", text)
        self.assertIn("rg1.col4", text)
        self.assertNotIn("rg0.col0", text)

    def test_detail_shows_projected_statistics(self):
        state = SelectionState(row_group_index=1, column_index=3)
        text = plain(render_frame(self.metadata, state, 150, 30))

        self.assertIn("INT32", text)
        self.assertIn("min", text)
        self.assertIn("13", text)
        self.assertIn("distinct_values", text)
        self.assertIn("undefined", text)
        self.assertIn("press s to sample values", text)

    def test_detail_shows_sample_text(self):
        text = plain(
            render_frame(
                self.metadata, SelectionState(), 150, 30, sample_text="count: 1, non-null: 1"
            )
        )
        self.assertIn("count: 1, non-null: 1", text)

    def test_column_names_with_markup_characters_render_literally(self):
        metadata = make_model([1], file_name="[bold]odd[/bold].parquet")
        text = plain(render_frame(metadata, SelectionState(), 120, 20))
        self.assertIn("[bold]odd[/bold].parquet", text)

    def test_render_does_not_change_state(self):
        state = SelectionState(row_group_index=2)
        render_frame(self.metadata, state, 80, 24)
        self.assertEqual(state, SelectionState(row_group_index=2))


if __name__ == "__main__":
    unittest.main()
