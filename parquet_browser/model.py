"""
In-memory snapshot of a Parquet file's structural metadata.

The model is built once by the reader and never mutated afterwards. Row groups
and column chunks are kept in file order so that indices stay stable for the
whole session.
"""

import enum
from dataclasses import dataclass

from parquet_browser.errors import MalformedMetadataError


class PhysicalType(enum.Enum):
    BOOLEAN = "BOOLEAN"
    INT32 = "INT32"
    INT64 = "INT64"
    INT96 = "INT96"
    FLOAT = "FLOAT"
    DOUBLE = "DOUBLE"
    BYTE_ARRAY = "BYTE_ARRAY"
    FIXED_LEN_BYTE_ARRAY = "FIXED_LEN_BYTE_ARRAY"

    @classmethod
    def from_name(cls, name):
        try:
            return cls(name.upper())
        except ValueError:
            raise ValueError(f"Unknown physical type: {name!r}") from None


@dataclass(frozen=True)
class RawStatistics:
    """
    Statistics exactly as stored for one column chunk.

    ``physical_type`` is the tag; the payload values are raw physical values
    (bool, int, float or bytes) and must match the tag for the statistics to
    be usable.
    """

    physical_type: PhysicalType
    min_value: object = None
    max_value: object = None
    null_count: int | None = None
    distinct_count: int | None = None


@dataclass(frozen=True)
class ColumnChunk:
    path_in_schema: tuple[str, ...]
    physical_type: PhysicalType
    raw_statistics: RawStatistics | None = None
    compression: str = "UNCOMPRESSED"
    encodings: tuple[str, ...] = ()
    num_values: int = 0
    total_compressed_size: int = 0
    total_uncompressed_size: int = 0

    @property
    def name(self):
        return ".".join(self.path_in_schema)


@dataclass(frozen=True)
class RowGroup:
    columns: tuple[ColumnChunk, ...]
    total_byte_size: int = 0
    num_rows: int = 0


@dataclass(frozen=True)
class MetadataModel:
    file_name: str
    row_groups: tuple[RowGroup, ...]
    num_rows: int = 0
    num_columns: int = 0
    created_by: str | None = None
    format_version: str = ""
    serialized_size: int = 0

    @property
    def num_row_groups(self):
        return len(self.row_groups)

    def row_group(self, index):
        return self.row_groups[index]

    def column_count(self, row_group_index):
        return len(self.row_groups[row_group_index].columns)

    def column(self, row_group_index, column_index):
        return self.row_groups[row_group_index].columns[column_index]

    def validate(self):
        """Reject files whose row group or column lists are empty."""
        if not self.row_groups:
            raise MalformedMetadataError(self.file_name, "file has no row groups")
        for index, row_group in enumerate(self.row_groups):
            if not row_group.columns:
                raise MalformedMetadataError(
                    self.file_name, f"row group {index} has no column chunks"
                )
        return self
