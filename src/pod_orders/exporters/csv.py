"""Printer order CSV exporter (HDR/DTL fixed format)."""

import csv
import io
import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Optional

from .. import config
from ..models import CustomerProfile, OrderLine
from ..normalizers import sanitize_text

logger = logging.getLogger(__name__)

HEADER_MARKER = "HDR"
DETAIL_MARKER = "DTL"


@dataclass
class OrderExport:
    """Rows of one order export plus what was left out."""

    rows: list[list[str]] = field(default_factory=list)
    exported: int = 0
    excluded: int = 0  # Lines skipped because they are not available
    missing_isbn: int = 0  # Available lines whose repository record has no ISBN

    @property
    def refused(self) -> bool:
        """True when no available line is left to send to the printer."""
        return self.exported == 0

    def summary(self) -> str:
        if self.refused:
            return "No available items to export"
        message = f"{self.exported} line(s) exported"
        if self.excluded:
            message += f", {self.excluded} not available line(s) excluded"
        if self.missing_isbn:
            message += f", {self.missing_isbn} line(s) without an ISBN excluded"
        return message


def format_export_date(export_date: Optional[date] = None) -> str:
    """Render a date as YYYYMMDD (today by default)."""
    return (export_date or date.today()).strftime("%Y%m%d")


def order_csv_filename(now: Optional[datetime] = None) -> str:
    """File name for an order export, e.g. pod_order_2024_03_01_09_15_00.csv."""
    return (now or datetime.now()).strftime("pod_order_%Y_%m_%d_%H_%M_%S.csv")


def build_header_row(order_ref: str, profile: CustomerProfile, export_date: Optional[date] = None) -> list[str]:
    """
    Build the single HDR row.

    Layout: HDR, order number, YYYYMMDD, type, company name, street, road,
    city, region, country, postcode, country code, phone, and a trailing
    empty field.
    """
    return [
        HEADER_MARKER,
        order_ref,
        format_export_date(export_date),
        profile.type,
        profile.name,
        profile.street,
        profile.road,
        profile.city,
        profile.region,
        profile.country,
        profile.postcode,
        profile.country_code,
        profile.phone,
        "",
    ]


def build_order_export(
    lines: list[OrderLine],
    order_ref: str,
    profile: CustomerProfile = config.DEFAULT_CUSTOMER_PROFILE,
    export_date: Optional[date] = None,
) -> OrderExport:
    """
    Map an order list to printer CSV rows.

    One header row followed by a DTL row (marker, order ref, line number,
    ISBN, quantity) per available line. Unavailable lines are counted in
    ``excluded`` and never exported. Lines matched (by master order ID) to a
    record without an ISBN are counted in ``missing_isbn`` and left out too.
    When nothing is exportable the result has no rows and ``refused`` is True.

    Args:
        lines: Order lines in storage order
        order_ref: Order reference for header and detail rows
        profile: Printer customer profile
        export_date: Date for the header (today by default)

    Returns:
        OrderExport
    """
    order_ref = sanitize_text(order_ref)
    available = [line for line in lines if line.available]
    exportable = [line for line in available if line.isbn]
    result = OrderExport(
        exported=len(exportable),
        excluded=len(lines) - len(available),
        missing_isbn=len(available) - len(exportable),
    )

    if result.refused:
        return result

    result.rows.append(build_header_row(order_ref, profile, export_date))
    for line in exportable:
        result.rows.append([DETAIL_MARKER, order_ref, line.line_number, line.isbn, str(line.quantity)])
    return result


def render_order_csv(export: OrderExport) -> str:
    """Serialize export rows as CSV text (minimal quoting, CRLF line endings)."""
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerows(export.rows)
    return buffer.getvalue()


def export_order_csv(
    lines: list[OrderLine],
    order_ref: str,
    output_path: Path,
    profile: CustomerProfile = config.DEFAULT_CUSTOMER_PROFILE,
    export_date: Optional[date] = None,
) -> Optional[Path]:
    """
    Write an order list to a printer CSV file.

    Args:
        lines: Order lines in storage order
        order_ref: Order reference
        output_path: Path to output CSV file
        profile: Printer customer profile
        export_date: Date for the header (today by default)

    Returns:
        Path to the created CSV file, or None if the export was refused
    """
    export = build_order_export(lines, order_ref, profile, export_date)
    if export.refused:
        logger.warning(f"Export refused for order {order_ref}: {export.summary()} ({export.excluded} not available)")
        return None

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", newline="", encoding="utf-8") as f:
        f.write(render_order_csv(export))

    if export.excluded:
        logger.warning(f"  {export.excluded} not available line(s) left out of the export")
    if export.missing_isbn:
        logger.warning(f"  {export.missing_isbn} line(s) matched a repository record without an ISBN and were left out")
    logger.info(f"Order CSV saved to: {output_path} ({export.summary()})")
    return output_path
