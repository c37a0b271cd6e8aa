import argparse
import json
import logging
import sys

from parquet_browser.app import Session, SessionConfig
from parquet_browser.errors import ParquetBrowserError
from parquet_browser.reader import load
from parquet_browser.sampling import DEFAULT_SAMPLE_LIMIT
from parquet_browser.stats import project
from parquet_browser.terminal import TerminalController

log = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(name)s [%(threadName)s] %(levelname)s %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def positive_int(value):
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return number


def build_parser():
    parser = argparse.ArgumentParser(
        prog="parquet-browser",
        description="Browse the row groups, column chunks and statistics of a Parquet file.",
    )
    parser.add_argument("parquet_file", help="Path to the Parquet file to inspect.")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        type=str.upper,
        choices=sorted(logging.getLevelNamesMapping()),
        help="Logging level (default: WARNING).",
    )
    parser.add_argument(
        "--log-file",
        help="Write log records to this file. Without it the interactive "
        "browser stays silent.",
    )
    parser.add_argument(
        "--poll-interval-ms",
        type=positive_int,
        default=100,
        help="How long to wait for a key before redrawing (default: 100).",
    )
    parser.add_argument(
        "--sample-limit",
        type=positive_int,
        default=DEFAULT_SAMPLE_LIMIT,
        help=f"Number of values shown when sampling a column (default: {DEFAULT_SAMPLE_LIMIT}).",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the metadata and statistics as JSON instead of starting the browser.",
    )
    return parser


def configure_logging(log_level, log_file=None, interactive=False):
    level = logging.getLevelNamesMapping()[log_level]
    if log_file is None and interactive:
        # stderr shares the screen with the browser.
        level = logging.CRITICAL
    logging.basicConfig(
        level=level,
        filename=log_file,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        force=True,
    )


def metadata_to_dict(metadata):
    return {
        "file_name": metadata.file_name,
        "num_rows": metadata.num_rows,
        "num_columns": metadata.num_columns,
        "created_by": metadata.created_by,
        "format_version": metadata.format_version,
        "serialized_size": metadata.serialized_size,
        "row_groups": [
            {
                "index": index,
                "num_rows": row_group.num_rows,
                "total_byte_size": row_group.total_byte_size,
                "columns": [
                    {
                        "path_in_schema": column.name,
                        "physical_type": column.physical_type.value,
                        "compression": column.compression,
                        "encodings": list(column.encodings),
                        "num_values": column.num_values,
                        "total_compressed_size": column.total_compressed_size,
                        "total_uncompressed_size": column.total_uncompressed_size,
                        "statistics": project(column).to_dict(),
                    }
                    for column in row_group.columns
                ],
            }
            for index, row_group in enumerate(metadata.row_groups)
        ],
    }


def main(argv=None):
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level, args.log_file, interactive=not args.json)

    try:
        metadata = load(args.parquet_file)
    except ParquetBrowserError as e:
        log.error(f"Load failed: {e}")
        print(f"error: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(metadata_to_dict(metadata), indent=2))
        return 0

    if not sys.stdin.isatty():
        print(
            "error: standard input is not a terminal (use --json for a plain dump)",
            file=sys.stderr,
        )
        return 1

    terminal = TerminalController(sys.stdin.fileno(), sys.stdout.fileno())
    config = SessionConfig(
        poll_interval_ms=args.poll_interval_ms, sample_limit=args.sample_limit
    )
    Session(metadata, args.parquet_file, config).run(terminal)
    return 0


if __name__ == "__main__":
    sys.exit(main())
