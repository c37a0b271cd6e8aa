"""
Projection of typed column-chunk statistics into one printable record.
"""

import logging
from dataclasses import asdict, dataclass

from parquet_browser.physical import handler_for

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatSnapshot:
    min: str | None = None
    max: str | None = None
    null_count: int | None = None
    distinct_count: int | None = None

    def to_dict(self):
        return asdict(self)


EMPTY_SNAPSHOT = StatSnapshot()


def project(column_chunk):
    """
    Map a column chunk's raw statistics to a StatSnapshot.

    Never raises. Missing statistics, unsupported types and statistics whose
    payload does not match the declared physical type all give the empty
    snapshot.
    """
    handler = handler_for(column_chunk.physical_type)
    stats = column_chunk.raw_statistics
    if stats is None or not handler.supported:
        return EMPTY_SNAPSHOT

    if stats.physical_type is not column_chunk.physical_type:
        log.debug(
            f"Statistics tagged {stats.physical_type.value} on "
            f"{column_chunk.physical_type.value} column {column_chunk.name}"
        )
        return EMPTY_SNAPSHOT

    bounds = []
    for value in (stats.min_value, stats.max_value):
        if value is None:
            bounds.append(None)
        elif handler.accepts(value):
            bounds.append(handler.format_value(value))
        else:
            log.debug(
                f"Unexpected {type(value).__name__} statistic on "
                f"{column_chunk.physical_type.value} column {column_chunk.name}"
            )
            return EMPTY_SNAPSHOT

    return StatSnapshot(
        min=bounds[0],
        max=bounds[1],
        null_count=stats.null_count,
        distinct_count=stats.distinct_count if handler.tracks_distinct_count else None,
    )
