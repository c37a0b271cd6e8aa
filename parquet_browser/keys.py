"""
Terminal key decoding.

Reads raw bytes from stdin and turns them into key tokens: printable
characters are returned as themselves, special keys by name ("UP", "DOWN",
"LEFT", "RIGHT", "TAB", "BACKTAB", "ENTER", "ESC"). An empty string means no
key arrived before the timeout.
"""

import os
import select

ESC_SEQUENCE_TIMEOUT_MS = 25
_PENDING_BYTES = []

CSI_KEYS = {
    b"A": "UP",
    b"B": "DOWN",
    b"C": "RIGHT",
    b"D": "LEFT",
    b"Z": "BACKTAB",
}


def _read_ready_byte(fd, timeout_ms):
    ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
    if not ready:
        return None
    ch = os.read(fd, 1)
    if not ch:
        return None
    return ch


def _read_utf8_tail(fd, first):
    # Lead byte tells how many continuation bytes follow.
    if first[0] >= 0xF0:
        remaining = 3
    elif first[0] >= 0xE0:
        remaining = 2
    elif first[0] >= 0xC0:
        remaining = 1
    else:
        remaining = 0
    data = first
    for _ in range(remaining):
        ch = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if ch is None:
            break
        data += ch
    return data.decode("utf-8", errors="replace")


def read_key(fd, timeout_ms=None):
    if _PENDING_BYTES:
        ch = _PENDING_BYTES.pop(0)
    else:
        if timeout_ms is not None:
            ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
            if not ready:
                return ""

        ch = os.read(fd, 1)
        if not ch:
            return ""

    if ch == b"\t":
        return "TAB"
    if ch in {b"\r", b"\n"}:
        return "ENTER"
    if ch == b"\x03":
        return "CTRL_C"

    if ch != b"\x1b":
        return _read_utf8_tail(fd, ch)

    seq = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if seq is None:
        return "ESC"
    if seq not in {b"[", b"O"}:
        _PENDING_BYTES.append(seq)
        return "ESC"
    seq = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if seq is None:
        return "ESC"
    return CSI_KEYS.get(seq, "ESC")
