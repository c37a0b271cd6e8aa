"""
Load a Parquet file's footer into a MetadataModel.

The file envelope (leading and trailing PAR1 magic, little-endian footer
length) is checked by hand first so that obviously broken files get a precise
message. The footer itself is decoded by pyarrow.
"""

import logging
import os
import struct

import pyarrow as pa
import pyarrow.parquet as pq

from parquet_browser.errors import (
    FileUnreadableError,
    MalformedMetadataError,
    ParquetFileNotFoundError,
)
from parquet_browser.model import (
    ColumnChunk,
    MetadataModel,
    PhysicalType,
    RawStatistics,
    RowGroup,
)

log = logging.getLogger(__name__)

MAGIC = b"PAR1"
# Header magic + footer length + trailer magic.
MIN_FILE_SIZE = 12


def read_footer_length(file_path):
    """Validate the file envelope and return the footer length in bytes."""
    try:
        with open(file_path, "rb") as f:
            header = f.read(4)
            f.seek(0, 2)
            file_size = f.tell()
            if file_size < MIN_FILE_SIZE:
                raise MalformedMetadataError(
                    file_path, f"file is only {file_size} bytes long"
                )
            if header != MAGIC:
                raise MalformedMetadataError(file_path, "missing PAR1 header")
            f.seek(-8, 2)
            footer_size_bytes = f.read(4)
            footer_magic = f.read(4)
    except FileNotFoundError:
        raise ParquetFileNotFoundError(file_path) from None
    except IsADirectoryError:
        raise FileUnreadableError(file_path, "is a directory") from None
    except PermissionError as e:
        raise FileUnreadableError(file_path, e.strerror or "permission denied") from e
    except OSError as e:
        raise FileUnreadableError(file_path, e.strerror or str(e)) from e

    if footer_magic != MAGIC:
        raise MalformedMetadataError(file_path, "missing PAR1 footer")
    footer_size = struct.unpack("<I", footer_size_bytes)[0]
    if footer_size > file_size - MIN_FILE_SIZE:
        raise MalformedMetadataError(
            file_path, f"footer length {footer_size} exceeds file size {file_size}"
        )
    return footer_size


def convert_statistics(physical_type, statistics):
    if statistics is None:
        return None
    min_value = max_value = None
    if statistics.has_min_max and physical_type is not PhysicalType.INT96:
        min_value = statistics.min_raw
        max_value = statistics.max_raw
    return RawStatistics(
        physical_type=PhysicalType.from_name(statistics.physical_type),
        min_value=min_value,
        max_value=max_value,
        null_count=statistics.null_count if statistics.has_null_count else None,
        distinct_count=(
            statistics.distinct_count if statistics.has_distinct_count else None
        ),
    )


def split_column_path(dotted_path, leaf_name=None):
    """
    Split a dotted column path into its schema components.

    The leaf name is taken whole, so a leaf field containing dots stays one
    component. Dots in enclosing group names cannot be told apart from
    separators and are split.
    """
    if not leaf_name:
        return tuple(dotted_path.split("."))
    if dotted_path == leaf_name:
        return (leaf_name,)
    if not dotted_path.endswith("." + leaf_name):
        return tuple(dotted_path.split("."))
    parent = dotted_path[: -len(leaf_name) - 1]
    return tuple(parent.split(".")) + (leaf_name,)


def convert_column_chunk(column, leaf_name=None):
    physical_type = PhysicalType.from_name(column.physical_type)
    statistics = column.statistics if column.is_stats_set else None
    return ColumnChunk(
        path_in_schema=split_column_path(column.path_in_schema, leaf_name),
        physical_type=physical_type,
        raw_statistics=convert_statistics(physical_type, statistics),
        compression=column.compression,
        encodings=tuple(column.encodings),
        num_values=column.num_values,
        total_compressed_size=column.total_compressed_size,
        total_uncompressed_size=column.total_uncompressed_size,
    )


def convert_row_group(row_group, leaf_names=()):
    return RowGroup(
        columns=tuple(
            convert_column_chunk(
                row_group.column(j), leaf_names[j] if j < len(leaf_names) else None
            )
            for j in range(row_group.num_columns)
        ),
        total_byte_size=row_group.total_byte_size,
        num_rows=row_group.num_rows,
    )


def convert_metadata(file_name, metadata):
    schema = metadata.schema
    leaf_names = [schema.column(j).name for j in range(metadata.num_columns)]
    return MetadataModel(
        file_name=file_name,
        row_groups=tuple(
            convert_row_group(metadata.row_group(i), leaf_names)
            for i in range(metadata.num_row_groups)
        ),
        num_rows=metadata.num_rows,
        num_columns=metadata.num_columns,
        created_by=metadata.created_by,
        format_version=str(metadata.format_version),
        serialized_size=metadata.serialized_size,
    )


def load(file_path):
    """
    Read and validate the metadata of ``file_path``.

    Raises ParquetFileNotFoundError, FileUnreadableError or
    MalformedMetadataError. The returned model has at least one row group and
    every row group has at least one column chunk.
    """
    footer_size = read_footer_length(file_path)
    log.debug(f"{file_path}: footer is {footer_size} bytes")

    # The envelope was readable, so anything pyarrow rejects is a bad footer.
    try:
        metadata = pq.read_metadata(file_path)
    except (pa.ArrowException, OSError) as e:
        raise MalformedMetadataError(file_path, str(e)) from e

    try:
        model = convert_metadata(os.path.basename(file_path), metadata)
    except ValueError as e:
        raise MalformedMetadataError(file_path, str(e)) from e

    model.validate()
    log.info(
        f"Loaded {model.file_name}: {model.num_rows} rows in "
        f"{model.num_row_groups} row groups"
    )
    return model
