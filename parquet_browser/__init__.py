"""
parquet-browser: an interactive terminal browser for Parquet file metadata.
"""

__version__ = "0.1.0"
