#!/usr/bin/env python3
"""
Tests for the interactive session: key handling, sampling and the main loop.
"""

import contextlib
import os
import shutil
import sys
import tempfile
import unittest
from unittest.mock import MagicMock, patch

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from parquet_browser import app
from parquet_browser.app import Session, SessionConfig
from parquet_browser.errors import SamplingError
from parquet_browser.navigation import ActivePane, SelectionState
from parquet_browser.reader import load
from parquet_fixtures import COLUMNS, ParquetFileGenerator, make_model


class FakeTerminal:
    """Records frames instead of writing to a tty"""

    stdin_fd = 0

    def __init__(self, size=(120, 30)):
        self._size = size
        self.frames = []
        self.entered = 0
        self.exited = 0

    def size(self):
        return self._size

    def write_frame(self, frame):
        self.frames.append(frame)

    @contextlib.contextmanager
    def raw_mode(self):
        self.entered += 1
        try:
            yield self
        finally:
            self.exited += 1


class TestHandleKey(unittest.TestCase):
    def setUp(self):
        self.session = Session(make_model([2, 5, 1]), "unused.parquet")

    def test_navigation_keys(self):
        self.session.handle_key("DOWN")
        self.assertEqual(self.session.state.row_group_index, 1)
        self.session.handle_key("TAB")
        self.assertIs(self.session.state.active_pane, ActivePane.COLUMN_BROWSER)
        self.session.handle_key("UP")
        self.assertEqual(self.session.state.column_index, 4)

    def test_unknown_keys_are_ignored(self):
        for key in ("x", "LEFT", "ENTER", "ESC"):
            self.session.handle_key(key)
        self.assertEqual(self.session.state, SelectionState())

    def test_quit(self):
        self.session.handle_key("q")
        self.assertTrue(self.session.state.exiting)

    def test_sample_key_only_acts_in_detail_pane(self):
        with patch.object(app, "sample_column", return_value="count: 0") as sample_mock:
            self.session.handle_key("s")
            sample_mock.assert_not_called()
            self.assertIsNone(self.session.sample_text)

    def test_sample_result_cleared_when_selection_moves(self):
        self.session.state = SelectionState(active_pane=ActivePane.COLUMN_CHUNK_DETAIL)
        with patch.object(app, "sample_column", return_value="count: 2") as sample_mock, patch.object(
            Session, "_open_reader", return_value="reader"
        ):
            self.session.handle_key("s")
        sample_mock.assert_called_once_with("reader", 0, 0, limit=10)
        self.assertEqual(self.session.sample_text, "count: 2")

        # Moving inside the detail pane is a no-op and keeps the sample.
        self.session.handle_key("DOWN")
        self.assertEqual(self.session.sample_text, "count: 2")

        self.session.handle_key("TAB")
        self.session.handle_key("DOWN")
        self.assertIsNone(self.session.sample_text)

    def test_sampling_failure_is_shown_not_raised(self):
        self.session.state = SelectionState(active_pane=ActivePane.COLUMN_CHUNK_DETAIL)
        with patch.object(
            app, "sample_column", side_effect=SamplingError("Cannot sample a: bad page")
        ), patch.object(Session, "_open_reader", return_value="reader"):
            self.session.handle_key("s")
        self.assertEqual(self.session.sample_text, "error: Cannot sample a: bad page")
        self.assertEqual(self.session.state.active_pane, ActivePane.COLUMN_CHUNK_DETAIL)

    def test_sample_kept_when_single_row_group_does_not_move(self):
        session = Session(make_model([3]), "unused.parquet")
        session.state = SelectionState(
            active_pane=ActivePane.COLUMN_CHUNK_DETAIL, column_index=2
        )
        session.sample_text = "count: 1"
        session.handle_key("TAB")
        session.handle_key("DOWN")
        self.assertEqual(session.state.column_index, 2)
        self.assertEqual(session.sample_text, "count: 1")


class TestSampleFromFile(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.path = ParquetFileGenerator.create_multi_row_group_parquet(
            os.path.join(self.temp_dir, "people.parquet")
        )

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def test_sample_selected_chunk(self):
        session = Session(load(self.path), self.path, SessionConfig(sample_limit=1))
        session.state = SelectionState(
            active_pane=ActivePane.COLUMN_CHUNK_DETAIL,
            row_group_index=1,
            column_index=COLUMNS.index("small"),
        )
        session.handle_key("s")
        self.assertEqual(session.sample_text, "count: 1, non-null: 1 sample: [7]")


class TestRun(unittest.TestCase):
    def test_loop_renders_until_quit(self):
        session = Session(make_model([2, 5, 1]), "unused.parquet", SessionConfig(poll_interval_ms=5))
        terminal = FakeTerminal()
        keys = iter(["", "DOWN", "", "TAB", "q"])

        with patch.object(app, "read_key", side_effect=lambda fd, timeout: next(keys)) as read_mock:
            session.run(terminal)

        self.assertEqual(read_mock.call_count, 5)
        read_mock.assert_called_with(0, 5)
        self.assertEqual(session.state.row_group_index, 1)
        self.assertIs(session.state.active_pane, ActivePane.COLUMN_BROWSER)
        self.assertTrue(session.state.exiting)
        # Identical frames after an empty poll are not rewritten.
        self.assertEqual(len(terminal.frames), 3)
        self.assertEqual((terminal.entered, terminal.exited), (1, 1))

    def test_terminal_restored_when_render_fails(self):
        session = Session(make_model([1]), "unused.parquet")
        terminal = FakeTerminal()

        with patch.object(app, "render_frame", side_effect=RuntimeError("boom")):
            with self.assertRaises(RuntimeError):
                session.run(terminal)

        self.assertEqual((terminal.entered, terminal.exited), (1, 1))

    def test_sampling_reader_closed_on_exit(self):
        session = Session(make_model([1]), "unused.parquet")
        parquet_reader = MagicMock()
        session._reader = parquet_reader

        with patch.object(app, "read_key", return_value="q"):
            session.run(FakeTerminal())

        parquet_reader.close.assert_called_once_with()
        self.assertIsNone(session._reader)


if __name__ == "__main__":
    unittest.main()
