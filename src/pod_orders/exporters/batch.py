"""Batch export: several order uploads into one ZIP of printer CSVs."""

import logging
import re
import zipfile
from datetime import date
from pathlib import Path
from typing import Optional

from tqdm import tqdm

from .. import config
from ..index import RepositoryIndex
from ..loaders import read_upload_rows
from ..models import CustomerProfile
from ..processor import process_order_rows
from ..validators import UploadParseError, UploadValidationError, validate_order_ref
from .csv import build_order_export, render_order_csv

logger = logging.getLogger(__name__)

_UNSAFE_NAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def archive_member_name(order_ref: str, taken: set[str]) -> str:
    """CSV member name for an order reference, unique within the archive."""
    stem = _UNSAFE_NAME_CHARS.sub("_", order_ref).strip("_") or "order"
    name = f"{stem}.csv"
    counter = 2
    while name in taken:
        name = f"{stem}_{counter}.csv"
        counter += 1
    return name


def write_archive(named_buffers: dict[str, bytes], output_path: Path) -> Path:
    """
    Write named byte buffers into a ZIP archive.

    Args:
        named_buffers: Member name -> content
        output_path: Path to output .zip file

    Returns:
        Path to the created archive
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(output_path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for name, content in named_buffers.items():
            zf.writestr(name, content)
    logger.info(f"Archive saved to: {output_path} ({len(named_buffers)} file(s))")
    return output_path


def export_batch(
    uploads: list[tuple[Path, str]],
    index: RepositoryIndex,
    output_path: Path,
    profile: CustomerProfile = config.DEFAULT_CUSTOMER_PROFILE,
    export_date: Optional[date] = None,
) -> list[str]:
    """
    Process several order uploads and archive their printer CSVs.

    Uploads that fail validation or parsing, and orders with nothing
    available to export, are skipped with a warning.

    Args:
        uploads: (upload path, order reference) pairs
        index: Repository lookup index
        output_path: Path to output .zip file
        profile: Printer customer profile
        export_date: Date for the header rows (today by default)

    Returns:
        Names of the archive members written (empty if nothing was exportable)
    """
    buffers: dict[str, bytes] = {}

    for path, order_ref in tqdm(uploads, desc="Order files"):
        try:
            order_ref = validate_order_ref(order_ref)
            rows = read_upload_rows(path)
        except (UploadValidationError, UploadParseError) as e:
            logger.warning(f"Skipping {path}: {e}")
            continue

        lines = process_order_rows(rows, index, order_ref)
        export = build_order_export(lines, order_ref, profile, export_date)
        if export.refused:
            logger.warning(f"Skipping {path}: {export.summary()}")
            continue

        name = archive_member_name(order_ref, set(buffers))
        buffers[name] = render_order_csv(export).encode("utf-8")
        logger.info(f"  {name}: {export.summary()}")

    if not buffers:
        logger.warning("No exportable orders in batch, archive not written")
        return []

    write_archive(buffers, output_path)
    return list(buffers)
