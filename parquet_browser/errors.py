"""
Exceptions raised by parquet-browser.

Only load-time errors are fatal. Everything that goes wrong inside a running
session is turned into an "unknown" display value instead, with the exception
of value sampling, which reports its failure back to the detail pane.
"""


class ParquetBrowserError(Exception):
    """Base class for all parquet-browser errors."""


class ParquetFileNotFoundError(ParquetBrowserError, FileNotFoundError):
    def __init__(self, path):
        super().__init__(f"File not found: {path}")
        self.path = path


class FileUnreadableError(ParquetBrowserError, OSError):
    def __init__(self, path, reason):
        super().__init__(f"Cannot read {path}: {reason}")
        self.path = path
        self.reason = reason


class MalformedMetadataError(ParquetBrowserError, ValueError):
    def __init__(self, path, reason):
        super().__init__(f"Not a valid Parquet file - {reason} ({path})")
        self.path = path
        self.reason = reason


class SamplingError(ParquetBrowserError):
    """Raised when column values cannot be decoded for sampling."""
