"""
Interactive browsing session.

One thread runs the whole session: render the current selection, wait up to
``poll_interval_ms`` for a key, apply it, repeat until an exit is requested.
"""

import logging
from dataclasses import dataclass

import pyarrow.parquet as pq

from parquet_browser import navigation
from parquet_browser.errors import SamplingError
from parquet_browser.keys import read_key
from parquet_browser.navigation import ActivePane, SelectionState
from parquet_browser.render import render_frame
from parquet_browser.sampling import DEFAULT_SAMPLE_LIMIT, sample_column

SAMPLE_KEYS = {"s", "S"}


@dataclass(frozen=True)
class SessionConfig:
    poll_interval_ms: int = 100
    sample_limit: int = DEFAULT_SAMPLE_LIMIT


class Session:
    logger = logging.getLogger(__qualname__)

    def __init__(self, metadata, file_path, config=None):
        self.metadata = metadata
        self.file_path = file_path
        self.config = config or SessionConfig()
        self.state = SelectionState()
        self.sample_text = None
        self._reader = None
        self._last_frame = None

    def _open_reader(self):
        if self._reader is None:
            self._reader = pq.ParquetFile(self.file_path)
        return self._reader

    def sample_selected(self):
        try:
            self.sample_text = sample_column(
                self._open_reader(),
                self.state.row_group_index,
                self.state.column_index,
                limit=self.config.sample_limit,
            )
        except (SamplingError, OSError, ValueError) as e:
            self.logger.warning(f"Sampling failed: {e}")
            self.sample_text = f"error: {e}"

    def handle_key(self, key):
        if key in SAMPLE_KEYS and self.state.active_pane is ActivePane.COLUMN_CHUNK_DETAIL:
            self.sample_selected()
            return

        event = navigation.event_for_key(key)
        if event is None:
            return
        previous = self.state
        self.state = navigation.apply(self.state, self.metadata, event)
        if (previous.row_group_index, previous.column_index) != (
            self.state.row_group_index,
            self.state.column_index,
        ):
            self.sample_text = None
        if previous.active_pane is not self.state.active_pane:
            self.logger.debug(f"Active pane: {self.state.active_pane.value}")

    def render(self, terminal):
        width, height = terminal.size()
        frame = render_frame(self.metadata, self.state, width, height, self.sample_text)
        if frame != self._last_frame:
            terminal.write_frame(frame)
            self._last_frame = frame

    def close(self):
        if self._reader is not None:
            self._reader.close()
            self._reader = None

    def run(self, terminal):
        try:
            with terminal.raw_mode():
                while not self.state.exiting:
                    self.render(terminal)
                    key = read_key(terminal.stdin_fd, self.config.poll_interval_ms)
                    if key:
                        self.handle_key(key)
        finally:
            self.close()
        self.logger.info("Session finished")
