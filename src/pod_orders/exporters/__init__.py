"""
Data exporters for order lists and the repository.

Each exporter handles a specific output format (printer CSV, repository
snapshots, order report JSON, ZIP batches).
"""

from .batch import export_batch, write_archive
from .csv import OrderExport, build_order_export, export_order_csv, order_csv_filename, render_order_csv
from .repository import (
    export_repository_csv,
    export_repository_excel,
    export_repository_json,
    repository_filename,
    repository_snapshot_rows,
)
from .summary import build_order_report, export_summary_json

__all__ = [
    # Order CSV
    "OrderExport",
    "build_order_export",
    "render_order_csv",
    "export_order_csv",
    "order_csv_filename",
    # Repository snapshots
    "repository_snapshot_rows",
    "repository_filename",
    "export_repository_json",
    "export_repository_csv",
    "export_repository_excel",
    # Summary / batch
    "build_order_report",
    "export_summary_json",
    "export_batch",
    "write_archive",
]
