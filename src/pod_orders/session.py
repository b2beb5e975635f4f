"""Interactive order session: one repository, one current order list."""

import logging
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from pathlib import Path
from typing import Iterable, Optional

from . import config, mutator
from .exporters import export_order_csv, order_csv_filename
from .index import RepositoryIndex, build_index
from .loaders import read_upload_rows
from .metrics import QualityMetrics, get_metrics
from .models import BookDict, CustomerProfile, OrderLine, StatusFilter
from .mutator import NO_FILTER, OrderFilter
from .processor import process_order_rows
from .stats import order_stats, upload_message
from .validators import validate_order_ref

logger = logging.getLogger(__name__)


@dataclass
class OrderSession:
    """
    State of one operator session.

    Owns the repository records and their index, the current order list and
    its display state (filter, paper grouping). Engine functions hold no
    state of their own; everything that changes lives here. Single owner,
    synchronous: a second upload only starts after the first returns.
    """

    records: list[BookDict] = field(default_factory=list)
    index: RepositoryIndex = field(default_factory=RepositoryIndex)
    lines: list[OrderLine] = field(default_factory=list)
    order_ref: str = ""
    order_filter: OrderFilter = NO_FILTER
    sorted_by_paper: bool = False
    metrics: QualityMetrics = field(default_factory=get_metrics)

    def load_repository(self, records: list[BookDict]) -> None:
        """Replace the repository and rebuild the lookup index."""
        self.records = list(records)
        self.index = build_index(self.records)

    def upload(self, path: str | Path, order_ref: str) -> str:
        """
        Validate, parse and process an order file into the current list.

        Any failure raises before the session is touched, so the previous
        batch stays in place. On success the filter and paper grouping are
        reset.

        Args:
            path: Upload file (.csv, .xlsx, .xls)
            order_ref: Order reference for the batch

        Returns:
            Result message with match counts

        Raises:
            UploadValidationError: If the reference or file is rejected
            UploadParseError: If the file cannot be parsed
        """
        order_ref = validate_order_ref(order_ref)
        rows = read_upload_rows(path)
        lines = process_order_rows(rows, self.index, order_ref, self.metrics)

        self.lines = lines
        self.order_ref = order_ref
        self.order_filter = NO_FILTER
        self.sorted_by_paper = False

        message = upload_message(order_stats(lines))
        logger.info(message)
        return message

    def clear(self) -> None:
        """Drop the current order list and reset display state."""
        self.lines = []
        self.order_filter = NO_FILTER
        self.sorted_by_paper = False
        logger.info("All data cleared")

    def delete(self, index: int) -> OrderLine:
        """Delete one line by storage index."""
        return mutator.delete_line(self.lines, index)

    def delete_many(self, indices: Iterable[int]) -> int:
        """Delete several lines by storage index."""
        return mutator.delete_lines(self.lines, indices)

    def delete_line_number(self, line_number: str) -> OrderLine:
        """
        Delete the line currently numbered ``line_number`` (e.g. "002").

        Raises:
            KeyError: If no line has that number
        """
        wanted = line_number.strip().zfill(3)
        for index, line in enumerate(self.lines):
            if line.line_number == wanted:
                return self.delete(index)
        raise KeyError(f"No order line numbered {line_number}")

    def toggle_paper_sort(self) -> bool:
        """Flip paper grouping; returns the new state."""
        self.sorted_by_paper = mutator.toggle_paper_sort(self.lines, self.sorted_by_paper)
        return self.sorted_by_paper

    def set_status_filter(self, status: Optional[StatusFilter]) -> OrderFilter:
        """Show only one status (replacing any other status filter), or all with None."""
        self.order_filter = replace(self.order_filter, status=StatusFilter(status) if status else None)
        return self.order_filter

    def set_paper_filter(self, paper: Optional[str]) -> OrderFilter:
        """Show only one paper type, or all with None."""
        self.order_filter = replace(self.order_filter, paper=paper or None)
        return self.order_filter

    def visible_lines(self) -> list[OrderLine]:
        return mutator.apply_filter(self.lines, self.order_filter)

    def export_csv(
        self,
        output_dir: str | Path = config.DEFAULT_OUTPUT_DIR,
        profile: CustomerProfile = config.DEFAULT_CUSTOMER_PROFILE,
        export_date: Optional[date] = None,
        now: Optional[datetime] = None,
    ) -> Optional[Path]:
        """
        Export all available lines (ignoring the display filter) as a printer CSV.

        Returns:
            Path to the CSV, or None if nothing was exportable
        """
        if not self.lines:
            logger.warning("No data to export")
            return None
        output_path = Path(output_dir) / order_csv_filename(now)
        return export_order_csv(self.lines, self.order_ref, output_path, profile, export_date)

    def summary(self) -> dict:
        """Order statistics plus the current view."""
        stats = order_stats(self.lines)
        stats["order_ref"] = self.order_ref
        stats["visible"] = len(self.visible_lines())
        stats["filter"] = mutator.filter_summary(self.lines, self.order_filter)
        stats["sorted_by_paper"] = self.sorted_by_paper
        return stats
