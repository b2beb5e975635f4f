"""
Data loaders for the repository and for order uploads.

The loading pipeline has two testable layers:
1. process_*() - record transformation (testable with dict literals)
2. load_*() / read_*() - I/O orchestration (requires real files or URLs)
"""

from .orders import read_upload_rows
from .repository import (
    fetch_repository_json,
    load_repository_data,
    process_repository_data,
    process_repository_record,
)
from .utils import create_session_with_retries, dataframe_to_rows, read_table_rows, sniff_delimiter

__all__ = [
    # Loaders
    "load_repository_data",
    "fetch_repository_json",
    "read_upload_rows",
    "read_table_rows",
    # Record processors (testable with dict literals)
    "process_repository_record",
    "process_repository_data",
    # Helpers
    "create_session_with_retries",
    "dataframe_to_rows",
    "sniff_delimiter",
]
