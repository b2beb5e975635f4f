"""Data quality metrics collection during order processing."""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Optional

logger = logging.getLogger(__name__)

# Max samples to keep for each failure type
_MAX_SAMPLES = 10


@dataclass
class QualityMetrics:
    """Collects data quality metrics while order rows are processed."""

    # ISBN validation on uploaded rows
    isbn_total: int = 0
    isbn_valid: int = 0
    isbn_invalid: int = 0
    isbn_missing: int = 0
    isbn_repaired: int = 0  # Scientific notation repaired

    # Sample of rejected ISBNs for debugging
    isbn_invalid_samples: list = field(default_factory=list)

    # Quantities outside 1-10000 or unreadable
    quantity_invalid: int = 0

    # Rows per lookup method ("isbn", "master_order_id", "none")
    lookups: Counter = field(default_factory=Counter)

    # Consolidation
    rows_total: int = 0
    rows_consolidated: int = 0  # Rows folded into an earlier line

    def record_isbn(
        self,
        valid: bool,
        missing: bool = False,
        repaired: bool = False,
        isbn_value: str | None = None,
    ) -> None:
        """Record an ISBN validation attempt."""
        self.isbn_total += 1
        if repaired:
            self.isbn_repaired += 1
        if valid:
            self.isbn_valid += 1
        elif missing:
            self.isbn_missing += 1
        else:
            self.isbn_invalid += 1
            if isbn_value and len(self.isbn_invalid_samples) < _MAX_SAMPLES:
                self.isbn_invalid_samples.append(isbn_value)

    def record_invalid_quantity(self) -> None:
        """Record a quantity that was coerced to 0."""
        self.quantity_invalid += 1

    def record_lookup(self, method: str) -> None:
        """Record which lookup strategy resolved a row."""
        self.lookups[method] += 1

    def record_consolidated(self, count: int = 1) -> None:
        """Record row(s) folded into an existing order line."""
        self.rows_consolidated += count

    def report(self) -> dict:
        """Generate quality metrics report."""
        return {
            "isbn": {
                "total": self.isbn_total,
                "valid": self.isbn_valid,
                "invalid": self.isbn_invalid,
                "missing": self.isbn_missing,
                "repaired": self.isbn_repaired,
                "validation_rate": (f"{self.isbn_valid / self.isbn_total * 100:.1f}%" if self.isbn_total > 0 else "N/A"),
            },
            "quantity_invalid": self.quantity_invalid,
            "lookups": dict(self.lookups),
            "rows_total": self.rows_total,
            "rows_consolidated": self.rows_consolidated,
        }

    def print_report(self) -> None:
        """Print quality metrics to logger."""
        logger.info("=" * 60)
        logger.info("Data Quality Metrics")
        logger.info("=" * 60)

        logger.info("")
        logger.info("ISBN Validation:")
        logger.info(f"  Total processed: {self.isbn_total:,}")
        if self.isbn_total > 0:
            logger.info(f"  Valid: {self.isbn_valid:,} ({self.isbn_valid / self.isbn_total * 100:.1f}%)")
            if self.isbn_repaired > 0:
                logger.info(f"  Repaired scientific notation: {self.isbn_repaired:,}")
            if self.isbn_missing > 0:
                logger.info(f"  Missing: {self.isbn_missing:,}")
            if self.isbn_invalid > 0:
                logger.info(f"  Invalid length: {self.isbn_invalid:,}")
                if self.isbn_invalid_samples:
                    logger.info(f"    Samples: {', '.join(self.isbn_invalid_samples)}")

        if self.quantity_invalid > 0:
            logger.info("")
            logger.info(f"Quantities set to 0: {self.quantity_invalid:,}")

        if self.lookups:
            logger.info("")
            logger.info("Lookup methods:")
            for method, count in self.lookups.most_common():
                logger.info(f"  {method}: {count:,}")

        if self.rows_consolidated:
            logger.info("")
            logger.info(f"Rows consolidated: {self.rows_consolidated:,} of {self.rows_total:,}")

    def reset(self) -> None:
        """Reset all metrics."""
        self.isbn_total = 0
        self.isbn_valid = 0
        self.isbn_invalid = 0
        self.isbn_missing = 0
        self.isbn_repaired = 0
        self.isbn_invalid_samples.clear()
        self.quantity_invalid = 0
        self.lookups.clear()
        self.rows_total = 0
        self.rows_consolidated = 0


# Global metrics instance
_metrics: Optional[QualityMetrics] = None


def get_metrics() -> QualityMetrics:
    """Get the global metrics instance, creating if needed."""
    global _metrics
    if _metrics is None:
        _metrics = QualityMetrics()
    return _metrics


def reset_metrics() -> None:
    """Reset global metrics."""
    global _metrics
    if _metrics is not None:
        _metrics.reset()
