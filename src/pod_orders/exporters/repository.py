"""Repository snapshot exporters (JSON, Excel, CSV)."""

import csv
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

import pandas as pd

from ..models import SNAPSHOT_COLUMNS, BookDict, serialize_book

logger = logging.getLogger(__name__)

# Excel column width cap (characters)
_MAX_COLUMN_WIDTH = 50


def repository_filename(suffix: str, now: Optional[datetime] = None) -> str:
    """File name for a repository snapshot, e.g. repository_data_2024_03_01_09_15.json."""
    return (now or datetime.now()).strftime("repository_data_%Y_%m_%d_%H_%M.") + suffix.lstrip(".")


def _numeric_isbn(row: dict) -> int:
    isbn = str(row.get("ISBN") or "")
    return int(isbn) if isbn.isascii() and isbn.isdigit() else 0


def repository_snapshot_rows(records: list[BookDict], sort_by_isbn: bool = False) -> list[dict]:
    """
    Flatten repository records into snapshot rows.

    Args:
        records: Repository records
        sort_by_isbn: Sort rows by numeric ISBN ascending (empty ISBN counts as 0)

    Returns:
        Rows keyed by SNAPSHOT_COLUMNS
    """
    rows = [serialize_book(record) for record in records]
    if sort_by_isbn:
        rows.sort(key=_numeric_isbn)
    return rows


def repository_dataframe(records: list[BookDict]) -> pd.DataFrame:
    """Snapshot rows as a DataFrame with the columns in export order."""
    return pd.DataFrame(repository_snapshot_rows(records), columns=list(SNAPSHOT_COLUMNS))


def export_repository_json(records: list[BookDict], output_path: Path) -> Path:
    """
    Export the repository as a JSON array sorted by numeric ISBN.

    Args:
        records: Repository records
        output_path: Path to output JSON file

    Returns:
        Path to the created JSON file
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    rows = repository_snapshot_rows(records, sort_by_isbn=True)

    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(rows, f, indent=2, ensure_ascii=False, default=str)

    logger.info(f"Repository JSON saved to: {output_path} ({len(rows):,} titles)")
    return output_path


def export_repository_csv(records: list[BookDict], output_path: Path) -> Path:
    """Export the repository as CSV (same columns as the Excel snapshot)."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    repository_dataframe(records).to_csv(output_path, index=False, quoting=csv.QUOTE_MINIMAL)
    logger.info(f"Repository data downloaded as CSV file: {output_path}")
    return output_path


def export_repository_excel(records: list[BookDict], output_path: Path) -> Path:
    """
    Export the repository as an Excel workbook with auto-sized columns.

    Falls back to a CSV next to the requested path if the workbook cannot be
    written.

    Args:
        records: Repository records
        output_path: Path to output .xlsx file

    Returns:
        Path to the created file (.xlsx, or .csv on fallback)
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    df = repository_dataframe(records)

    try:
        with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
            df.to_excel(writer, index=False, sheet_name="Repository Data")
            worksheet = writer.sheets["Repository Data"]
            for col_idx, column in enumerate(df.columns, start=1):
                longest = max([len(column)] + [len(str(v)) for v in df[column] if v is not None])
                letter = worksheet.cell(row=1, column=col_idx).column_letter
                worksheet.column_dimensions[letter].width = min(longest + 2, _MAX_COLUMN_WIDTH)
    except (OSError, ValueError, ImportError) as e:
        logger.error(f"Excel download error: {e}")
        if output_path.exists():
            output_path.unlink()  # Remove partial workbook
        return export_repository_csv(records, output_path.with_suffix(".csv"))

    logger.info(f"Repository data downloaded as Excel file: {output_path}")
    return output_path
