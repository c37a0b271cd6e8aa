"""
Terminal control for the interactive session.

Owns the raw-mode and alternate-screen lifecycle and writes rendered frames.
"""

import contextlib
import logging
import os
import shutil
import termios
import tty


class TerminalController:
    """Manage terminal mode transitions and frame output."""

    logger = logging.getLogger(__qualname__)

    def __init__(self, stdin_fd, stdout_fd):
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self._saved_tty_state = termios.tcgetattr(stdin_fd)

    def enable_tui_mode(self):
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        # Enter alternate screen and hide cursor.
        os.write(self.stdout_fd, b"\x1b[?1049h\x1b[?25l")
        self.logger.debug("Entered raw mode")

    def disable_tui_mode(self):
        # Show cursor and restore the main screen buffer.
        os.write(self.stdout_fd, b"\x1b[?25h\x1b[?1049l")
        termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)
        self.logger.debug("Restored terminal mode")

    def size(self):
        columns, lines = shutil.get_terminal_size()
        return columns, lines

    def write_frame(self, frame):
        # Raw mode disables output post-processing, so LF alone does not
        # return the cursor to column 0.
        payload = "\x1b[H" + frame.replace("\n", "\r\n") + "\x1b[J"
        os.write(self.stdout_fd, payload.encode("utf-8"))

    @contextlib.contextmanager
    def raw_mode(self):
        """Context manager that brackets code with TUI enter/exit calls."""
        try:
            self.enable_tui_mode()
            yield self
        finally:
            self.disable_tui_mode()
