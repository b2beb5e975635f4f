"""Order upload loader (CSV / Excel spreadsheets of order lines)."""

import logging
from pathlib import Path
from typing import Any

from ..validators import validate_upload_file
from .utils import read_table_rows

logger = logging.getLogger(__name__)


def read_upload_rows(path: str | Path) -> list[dict[str, Any]]:
    """
    Validate and parse an order upload.

    Args:
        path: Uploaded .csv/.xlsx/.xls file

    Returns:
        Loosely-typed rows in file order (empty rows skipped)

    Raises:
        UploadValidationError: If the file is missing, too large or of the wrong type
        UploadParseError: If the file cannot be parsed
    """
    path = validate_upload_file(path)
    logger.info(f"Processing file: {path}")
    return read_table_rows(path)
