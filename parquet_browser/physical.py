"""
Per-physical-type dispatch table.

Every place that needs to treat column values differently depending on their
physical type (statistics projection, value sampling) goes through
``handler_for`` instead of branching on the type itself.
"""

import math
import struct
from dataclasses import dataclass
from typing import Any, Callable

from parquet_browser.model import PhysicalType

UNKNOWN_TEXT = "UNK"


def format_literal(value):
    return repr(value)


def format_float32(value):
    # Shortest decimal that maps back to the same 32-bit float.
    if math.isnan(value) or math.isinf(value):
        return repr(value)
    try:
        packed = struct.pack("<f", value)
    except OverflowError:
        return repr(value)
    for digits in range(1, 10):
        candidate = float(f"{value:.{digits}g}")
        if struct.pack("<f", candidate) == packed:
            return repr(candidate)
    return repr(value)


def format_bytes(value):
    try:
        return bytes(value).decode("utf-8")
    except UnicodeDecodeError:
        return UNKNOWN_TEXT


@dataclass(frozen=True)
class PhysicalTypeHandler:
    physical_type: PhysicalType
    value_types: tuple[type, ...]
    format_value: Callable[[Any], str]
    tracks_distinct_count: bool = False
    supported: bool = True

    def accepts(self, value):
        # bool is an int subclass; only BOOLEAN columns may carry one.
        if isinstance(value, bool) and bool not in self.value_types:
            return False
        return isinstance(value, self.value_types)

    def format_sample(self, value):
        if value is None:
            return "null"
        if self.accepts(value):
            return self.format_value(value)
        return str(value)


HANDLERS = {
    handler.physical_type: handler
    for handler in (
        PhysicalTypeHandler(PhysicalType.BOOLEAN, (bool,), format_literal),
        PhysicalTypeHandler(PhysicalType.INT32, (int,), format_literal),
        PhysicalTypeHandler(PhysicalType.INT64, (int,), format_literal),
        PhysicalTypeHandler(PhysicalType.INT96, (), format_literal, supported=False),
        PhysicalTypeHandler(PhysicalType.FLOAT, (float,), format_float32),
        PhysicalTypeHandler(PhysicalType.DOUBLE, (float,), format_literal),
        PhysicalTypeHandler(
            PhysicalType.BYTE_ARRAY,
            (bytes, bytearray),
            format_bytes,
            tracks_distinct_count=True,
        ),
        PhysicalTypeHandler(
            PhysicalType.FIXED_LEN_BYTE_ARRAY,
            (bytes, bytearray),
            format_bytes,
            tracks_distinct_count=True,
        ),
    )
}


def handler_for(physical_type):
    return HANDLERS[physical_type]
