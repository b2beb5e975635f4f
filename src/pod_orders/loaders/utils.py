"""Utility functions for loaders."""

import csv
import logging
import zipfile
from pathlib import Path
from typing import Any

import pandas as pd
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .. import config
from ..normalizers import is_missing
from ..validators import UploadParseError

logger = logging.getLogger(__name__)


def create_session_with_retries(
    retries: int = 3,
    backoff_factor: float = 0.5,
    status_forcelist: tuple = (500, 502, 503, 504),
) -> requests.Session:
    """Create a requests session with retry logic."""
    session = requests.Session()
    retry_strategy = Retry(
        total=retries,
        backoff_factor=backoff_factor,
        status_forcelist=status_forcelist,
        allowed_methods=["GET"],
    )
    adapter = HTTPAdapter(max_retries=retry_strategy)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session


def sniff_delimiter(sample: str) -> str:
    """Guess a CSV delimiter among comma, tab, pipe and semicolon (comma if unsure)."""
    try:
        return csv.Sniffer().sniff(sample, delimiters=config.CSV_DELIMITERS).delimiter
    except csv.Error:
        return ","


def dataframe_to_rows(df: pd.DataFrame) -> list[dict[str, Any]]:
    """
    Convert a parsed sheet into loosely-typed rows.

    Column names are stripped; rows where every cell is empty are dropped.
    Empty cells come back as "" and are treated as absent by the normalizers.
    """
    df = df.rename(columns=lambda c: str(c).strip())
    rows = df.to_dict(orient="records")
    return [row for row in rows if not all(is_missing(value) for value in row.values())]


def read_table_rows(path: Path) -> list[dict[str, Any]]:
    """
    Parse a CSV or Excel file into rows.

    Cells are carried as written: strings such as "NA" or "None" are not
    turned into missing values. CSV cells are read as text so ISBN leading
    zeros survive; workbook cells keep the types stored in the first worksheet.

    Args:
        path: .csv, .xlsx or .xls file

    Returns:
        List of row dicts (column name -> raw value)

    Raises:
        UploadParseError: If the file cannot be parsed
    """
    try:
        if path.suffix.lower() == ".csv":
            text = path.read_text(encoding="utf-8-sig")
            delimiter = sniff_delimiter(text[:4096])
            df = pd.read_csv(path, sep=delimiter, dtype=str, keep_default_na=False, skip_blank_lines=True, encoding="utf-8-sig")
        else:
            df = pd.read_excel(path, sheet_name=0, keep_default_na=False)
    except (ValueError, OSError, ImportError, zipfile.BadZipFile, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise UploadParseError(f"Error processing file {path.name}: {e}") from e

    rows = dataframe_to_rows(df)
    logger.info(f"  Read {len(rows):,} rows from {path.name}")
    return rows
