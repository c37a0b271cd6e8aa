"""
Best-effort read of the first few values of one column chunk.
"""

import logging

import pyarrow as pa

from parquet_browser.errors import SamplingError
from parquet_browser.model import PhysicalType
from parquet_browser.physical import handler_for

log = logging.getLogger(__name__)

DEFAULT_SAMPLE_LIMIT = 10

UNSUPPORTED_MESSAGE = "INT96 sampling is not supported"

# Arrow storage types that hold each physical type's raw values.
STORAGE_TYPES = {
    PhysicalType.BOOLEAN: pa.bool_(),
    PhysicalType.INT32: pa.int32(),
    PhysicalType.INT64: pa.int64(),
    PhysicalType.FLOAT: pa.float32(),
    PhysicalType.DOUBLE: pa.float64(),
    PhysicalType.BYTE_ARRAY: pa.binary(),
    PhysicalType.FIXED_LEN_BYTE_ARRAY: pa.binary(),
}


def _leaf_column(table, path):
    while any(pa.types.is_struct(f.type) for f in table.schema):
        table = table.flatten()
    if path in table.column_names:
        return table.column(path)
    return table.column(0)


def _physical_values(values, physical_type):
    storage_type = STORAGE_TYPES[physical_type]
    try:
        return values.cast(storage_type).to_pylist()
    except (pa.ArrowInvalid, pa.ArrowNotImplementedError, pa.ArrowTypeError):
        # Logical types without a lossless raw form (decimals, lists) are
        # shown as pyarrow converts them.
        return values.to_pylist()


def sample_column(reader, row_group_index, column_index, limit=DEFAULT_SAMPLE_LIMIT):
    """
    Decode up to ``limit`` values of one column chunk.

    ``reader`` is a ``pyarrow.parquet.ParquetFile``. Returns
    ``"count: <n>, non-null: <m> sample: [...]"``; raises SamplingError when the
    chunk cannot be read.
    """
    column = reader.metadata.row_group(row_group_index).column(column_index)
    physical_type = PhysicalType.from_name(column.physical_type)
    handler = handler_for(physical_type)
    if not handler.supported:
        return UNSUPPORTED_MESSAGE

    path = column.path_in_schema
    log.debug(f"Sampling {limit} values of {path} in row group {row_group_index}")
    try:
        table = reader.read_row_group(row_group_index, columns=[path])
        values = _leaf_column(table, path).slice(0, limit)
        decoded = _physical_values(values, physical_type)
    except (pa.ArrowException, OSError, KeyError) as e:
        raise SamplingError(f"Cannot sample {path}: {e}") from e

    non_null = sum(1 for value in decoded if value is not None)
    sample = ", ".join(handler.format_sample(value) for value in decoded)
    return f"count: {len(decoded)}, non-null: {non_null} sample: [{sample}]"
