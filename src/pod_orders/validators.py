"""Input validators and repository data-quality checks."""

import csv
import logging
import mimetypes
from collections import defaultdict
from dataclasses import dataclass
from pathlib import Path

from . import config
from .models import BookDict
from .normalizers import sanitize_text

logger = logging.getLogger(__name__)


class UploadValidationError(ValueError):
    """An upload was rejected before parsing (missing, too large, wrong type)."""


class UploadParseError(ValueError):
    """An upload passed validation but could not be parsed."""


def validate_upload_file(path: str | Path) -> Path:
    """
    Check an order upload before reading it.

    Rules: the file must exist, be at most MAX_FILE_SIZE bytes, end in
    .xlsx/.xls/.csv and have an allowed spreadsheet/CSV MIME type.

    Args:
        path: Upload path

    Returns:
        The path as a Path

    Raises:
        UploadValidationError: If any rule fails
    """
    path = Path(path)
    if not path.is_file():
        raise UploadValidationError(f"No file provided: {path}")

    size = path.stat().st_size
    if size > config.MAX_FILE_SIZE:
        raise UploadValidationError(f"File size exceeds limit of {config.MAX_FILE_SIZE // (1024 * 1024)}MB")

    suffix = path.suffix.lower()
    mime_type = config.EXTENSION_MIME_TYPES.get(suffix) or mimetypes.guess_type(path.name)[0]
    if mime_type not in config.ALLOWED_MIME_TYPES:
        raise UploadValidationError("Invalid file type. Only Excel (.xlsx, .xls) and CSV (.csv) files are allowed")

    if not path.name.lower().endswith(config.ALLOWED_EXTENSIONS):
        raise UploadValidationError("Invalid file extension. Only .xlsx, .xls, and .csv files are allowed")

    return path


def validate_order_ref(order_ref: str | None) -> str:
    """
    Sanitize and require an order reference.

    Raises:
        UploadValidationError: If the reference is empty after sanitizing
    """
    cleaned = sanitize_text(order_ref)
    if not cleaned:
        raise UploadValidationError("Please enter an order reference before uploading a file")
    return cleaned


@dataclass
class DuplicateISBN:
    """An ISBN carried by more than one repository record."""

    isbn: str
    count: int
    titles: list[str]
    master_order_ids: list[str]


def find_duplicate_isbns(records: list[BookDict]) -> list[DuplicateISBN]:
    """
    List ISBNs that appear on more than one repository record.

    Args:
        records: Repository records

    Returns:
        DuplicateISBN entries sorted by ISBN
    """
    groups: dict[str, list[BookDict]] = defaultdict(list)
    for record in records:
        isbn = record.get("isbn")
        if isbn:
            groups[isbn].append(record)

    return [
        DuplicateISBN(
            isbn=isbn,
            count=len(group),
            titles=[r.get("title", "") for r in group],
            master_order_ids=[r.get("master_order_id", "") for r in group],
        )
        for isbn, group in sorted(groups.items())
        if len(group) > 1
    ]


def export_duplicate_isbns(duplicates: list[DuplicateISBN], output_path: Path) -> None:
    """
    Export duplicate ISBNs to CSV for review.

    Args:
        duplicates: DuplicateISBN entries
        output_path: Path to write CSV file
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["isbn", "count", "titles", "master_order_ids"])
        for d in duplicates:
            writer.writerow([d.isbn, d.count, "|".join(d.titles), "|".join(m for m in d.master_order_ids if m)])
    logger.info(f"Exported {len(duplicates)} duplicate ISBNs to {output_path}")
