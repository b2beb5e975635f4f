"""Order line processor - matches uploaded rows against the repository.

Processing Overview
===================

Phases:
    1. Candidate resolution: each raw row (in input order) becomes one
       candidate OrderLine
       - ISBN lookup: the ISBN column (case-insensitive name) is repaired,
         validated (10-13 digits) and normalized to 13 digits
       - Master order ID lookup: fallback on the Master / Master Order ID
         column, compared lowercased
       - Quantity: first quantity column, 1-10000, anything else is 0
    2. Consolidation: candidates sharing a resolved ISBN are folded into one
       line (quantities summed, descriptive fields from the first row).
       Unmatched rows each keep their own line.
    3. Numbering: lines get a fixed ``position`` and dense 3-digit line
       numbers in order of first appearance.

No row is dropped: unreadable ISBNs, unmatched rows and bad quantities all
produce visible lines with safe defaults.
"""

import logging
from dataclasses import replace
from typing import Any, Mapping, Optional, Sequence

from tqdm import tqdm

from . import config
from .index import RepositoryIndex
from .metrics import QualityMetrics, get_metrics
from .models import ORDER_FIELDS, BookDict, LookupMethod, OrderLine, format_line_number, make_unmatched_key
from .normalizers import (
    get_field,
    is_valid_identifier,
    is_valid_quantity,
    normalize_isbn,
    normalize_quantity,
    repair_scientific_notation,
    sanitize_text,
    to_text,
)

logger = logging.getLogger(__name__)

# Show a progress bar only for uploads at least this large
_PROGRESS_THRESHOLD = 5000


def resolve_row_isbn(row: Mapping[str, Any], metrics: Optional[QualityMetrics] = None) -> str:
    """
    Read and canonicalize the ISBN of an uploaded order row.

    Args:
        row: Raw upload row
        metrics: Optional metrics collector

    Returns:
        13-digit ISBN, or "" if the column is missing or has an invalid length
    """
    raw = get_field(row, ORDER_FIELDS["isbn"], case_insensitive=True)
    text = to_text(raw)
    if not text:
        if metrics:
            metrics.record_isbn(valid=False, missing=True)
        return ""

    repaired = repair_scientific_notation(text)
    was_repaired = repaired != text

    if not is_valid_identifier(repaired):
        logger.debug(f"Rejected ISBN {text!r}")
        if metrics:
            metrics.record_isbn(valid=False, repaired=was_repaired, isbn_value=text)
        return ""

    if metrics:
        metrics.record_isbn(valid=True, repaired=was_repaired)
    return normalize_isbn(repaired)


def build_candidate(
    row: Mapping[str, Any],
    source_index: int,
    index: RepositoryIndex,
    order_ref: str = "",
    metrics: Optional[QualityMetrics] = None,
) -> OrderLine:
    """
    Turn one raw upload row into an unconsolidated order line.

    Args:
        row: Raw upload row (column name -> value)
        source_index: Position of the row in the upload
        index: Repository lookup index
        order_ref: Order reference stamped on the line
        metrics: Optional metrics collector

    Returns:
        OrderLine with consolidated_count 1 and no line number yet
    """
    requested_isbn = resolve_row_isbn(row, metrics)

    book: Optional[BookDict] = None
    method = LookupMethod.NONE

    if requested_isbn:
        book = index.by_isbn.get(requested_isbn)
        if book is not None:
            method = LookupMethod.ISBN

    if book is None:
        master = get_field(row, ORDER_FIELDS["master"], case_insensitive=True)
        book = index.lookup_alternate_id(master)
        if book is not None:
            method = LookupMethod.MASTER_ORDER_ID

    raw_quantity = get_field(row, ORDER_FIELDS["quantity"], case_insensitive=True)
    if metrics and not is_valid_quantity(raw_quantity):
        metrics.record_invalid_quantity()
    quantity = normalize_quantity(raw_quantity)

    raw_date = get_field(row, ORDER_FIELDS["date"], case_insensitive=True)
    order_date = to_text(raw_date) or None

    if metrics:
        metrics.record_lookup(method.value)

    if book is None:
        return OrderLine(
            line_number="",
            isbn="",
            description=config.NOT_FOUND_DESCRIPTION,
            status=config.NOT_AVAILABLE_STATUS,
            paper_desc=config.UNSPECIFIED_PAPER,
            quantity=quantity,
            available=False,
            lookup_method=method,
            source_index=source_index,
            requested_isbn=requested_isbn,
            order_ref=order_ref,
            order_date=order_date,
        )

    return OrderLine(
        line_number="",
        isbn=book.get("isbn", ""),
        description=book.get("title") or config.DEFAULT_TITLE,
        status=book.get("status") or config.DEFAULT_STATUS,
        paper_desc=book.get("paper_desc") or config.UNSPECIFIED_PAPER,
        quantity=quantity,
        available=True,
        lookup_method=method,
        source_index=source_index,
        requested_isbn=requested_isbn,
        master_order_id=book.get("master_order_id", ""),
        order_ref=order_ref,
        order_date=order_date,
    )


def consolidation_key(line: OrderLine) -> str:
    """Group key: the resolved ISBN, or a per-row key when nothing resolved."""
    return line.isbn or make_unmatched_key(line.source_index)


def consolidate_lines(candidates: list[OrderLine], metrics: Optional[QualityMetrics] = None) -> list[OrderLine]:
    """
    Fold candidates that resolved to the same ISBN into single lines.

    Quantities are summed and consolidated_count counts the folded rows; all
    other fields come from the first candidate of each group. Output order is
    the order of first appearance. Candidates are not modified.

    Args:
        candidates: Candidate lines in input order
        metrics: Optional metrics collector

    Returns:
        Consolidated lines (positions and line numbers not yet assigned)
    """
    groups: dict[str, OrderLine] = {}

    for candidate in candidates:
        key = consolidation_key(candidate)
        existing = groups.get(key)
        if existing is None:
            groups[key] = replace(candidate, consolidated_count=1)
            continue

        existing.quantity += candidate.quantity
        existing.consolidated_count += 1
        logger.debug(f"Consolidated row {candidate.source_index} into ISBN {key} (qty now {existing.quantity})")
        if metrics:
            metrics.record_consolidated()

    return list(groups.values())


def number_lines(lines: list[OrderLine]) -> list[OrderLine]:
    """Assign fixed positions and dense line numbers in current order."""
    for position, line in enumerate(lines):
        line.position = position
        line.line_number = format_line_number(position)
    return lines


def process_order_rows(
    rows: Sequence[Mapping[str, Any]],
    index: RepositoryIndex,
    order_ref: str = "",
    metrics: Optional[QualityMetrics] = None,
) -> list[OrderLine]:
    """
    Match, consolidate and number a batch of uploaded order rows.

    Args:
        rows: Raw upload rows in file order
        index: Repository lookup index (read-only)
        order_ref: Order reference stamped on every line
        metrics: Metrics collector (defaults to the global instance)

    Returns:
        New list of OrderLine, numbered 001..NNN
    """
    if metrics is None:
        metrics = get_metrics()

    order_ref = sanitize_text(order_ref)
    logger.info(f"Processing {len(rows):,} order rows for order {order_ref or '(no reference)'}")

    candidates = [
        build_candidate(row, source_index, index, order_ref, metrics)
        for source_index, row in enumerate(
            tqdm(rows, desc="Matching order rows", disable=len(rows) < _PROGRESS_THRESHOLD)
        )
    ]
    metrics.rows_total += len(candidates)

    lines = number_lines(consolidate_lines(candidates, metrics))

    matched = sum(1 for line in lines if line.available)
    logger.info(f"  {len(candidates):,} rows -> {len(lines):,} order lines ({matched:,} matched, {len(lines) - matched:,} not available)")

    return lines
