"""In-place edits and read-only views over a processed order list."""

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from .models import BookStatus, OrderLine, StatusFilter, format_line_number

logger = logging.getLogger(__name__)


def renumber_lines(lines: list[OrderLine]) -> list[OrderLine]:
    """Rewrite line numbers densely (001, 002, ...) in storage order."""
    for idx, line in enumerate(lines):
        line.line_number = format_line_number(idx)
    return lines


def delete_line(lines: list[OrderLine], index: int) -> OrderLine:
    """
    Remove one line by storage index and renumber the rest.

    Raises:
        IndexError: If index is out of range
    """
    if not 0 <= index < len(lines):
        raise IndexError(f"No order line at index {index} (list has {len(lines)})")
    removed = lines.pop(index)
    renumber_lines(lines)
    logger.info(f"Row {index + 1} deleted ({removed.isbn or removed.requested_isbn or 'no ISBN'})")
    return removed


def delete_lines(lines: list[OrderLine], indices: Iterable[int]) -> int:
    """
    Remove several lines by storage index, renumbering once.

    Indices are de-duplicated and removed highest first so earlier removals
    don't shift later ones.

    Returns:
        Number of lines removed

    Raises:
        IndexError: If any index is out of range (nothing is removed)
    """
    targets = sorted(set(indices), reverse=True)
    for index in targets:
        if not 0 <= index < len(lines):
            raise IndexError(f"No order line at index {index} (list has {len(lines)})")

    for index in targets:
        del lines[index]
    renumber_lines(lines)
    logger.info(f"{len(targets)} rows deleted")
    return len(targets)


def _paper_sort_key(line: OrderLine) -> tuple[str, str]:
    return (line.paper_desc or "").lower(), (line.description or "").lower()


def sort_by_paper(lines: list[OrderLine]) -> list[OrderLine]:
    """Stable sort by paper description, then title (case-insensitive), then renumber."""
    lines.sort(key=_paper_sort_key)
    return renumber_lines(lines)


def restore_order(lines: list[OrderLine]) -> list[OrderLine]:
    """Put lines back in processing order (by ``position``), then renumber."""
    lines.sort(key=lambda line: line.position)
    return renumber_lines(lines)


def toggle_paper_sort(lines: list[OrderLine], is_sorted: bool) -> bool:
    """
    Flip between paper grouping and original order.

    Args:
        lines: Order list, modified in place
        is_sorted: Whether the list is currently grouped by paper

    Returns:
        New sorted state
    """
    if is_sorted:
        restore_order(lines)
        logger.info("Restored original line order")
        return False
    sort_by_paper(lines)
    logger.info("Grouped lines by paper type")
    return True


# Status filter -> predicate over a line
STATUS_PREDICATES: dict[StatusFilter, Callable[[OrderLine], bool]] = {
    StatusFilter.MPI: lambda line: line.available and line.status == BookStatus.MPI.value,
    StatusFilter.NOT_AVAILABLE: lambda line: not line.available,
    StatusFilter.POD_READY: lambda line: line.available and line.status == BookStatus.POD_READY.value,
}


@dataclass(frozen=True)
class OrderFilter:
    """
    Display filter over an order list.

    One status filter at most (a single field); the paper filter is
    independent and combined with it by AND.
    """

    status: Optional[StatusFilter] = None
    paper: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.status is not None or bool(self.paper)

    def matches(self, line: OrderLine) -> bool:
        if self.status is not None and not STATUS_PREDICATES[self.status](line):
            return False
        if self.paper and (line.paper_desc or "").lower() != self.paper.lower():
            return False
        return True


NO_FILTER = OrderFilter()


def apply_filter(lines: list[OrderLine], order_filter: OrderFilter = NO_FILTER) -> list[OrderLine]:
    """
    Return the lines visible under a filter.

    A new list referencing the same lines; nothing is reordered or renumbered.
    """
    if not order_filter.is_active:
        return list(lines)
    return [line for line in lines if order_filter.matches(line)]


def paper_options(lines: list[OrderLine]) -> list[str]:
    """Distinct paper descriptions present in the list, sorted case-insensitively."""
    return sorted({line.paper_desc for line in lines if line.paper_desc}, key=str.lower)


def filter_summary(lines: list[OrderLine], order_filter: OrderFilter = NO_FILTER) -> str:
    """Human-readable count of what a filter shows."""
    visible = apply_filter(lines, order_filter)
    if order_filter.status is StatusFilter.MPI:
        message = f"Showing {len(visible)} MPI items"
    elif order_filter.status is StatusFilter.NOT_AVAILABLE:
        message = f"Showing {len(visible)} not available items"
    elif order_filter.status is StatusFilter.POD_READY:
        message = f"Showing {len(visible)} POD Ready items"
    else:
        message = f"Showing all {len(visible)} items"
    if order_filter.paper:
        message += f" on {order_filter.paper}"
    return message
