"""Statistics and reporting for order lists and the repository."""

import logging
from pathlib import Path
from typing import Optional

import pandas as pd

from .index import RepositoryIndex
from .models import BookStatus, OrderLine

logger = logging.getLogger(__name__)


def orders_dataframe(lines: list[OrderLine]) -> pd.DataFrame:
    """Order lines as a DataFrame (one row per line, storage order)."""
    return pd.DataFrame(
        [
            {
                "line_number": line.line_number,
                "isbn": line.isbn,
                "requested_isbn": line.requested_isbn,
                "description": line.description,
                "quantity": line.quantity,
                "status": line.status,
                "paper_desc": line.paper_desc,
                "available": line.available,
                "lookup_method": line.lookup_method.value,
                "consolidated_count": line.consolidated_count,
            }
            for line in lines
        ],
        columns=[
            "line_number",
            "isbn",
            "requested_isbn",
            "description",
            "quantity",
            "status",
            "paper_desc",
            "available",
            "lookup_method",
            "consolidated_count",
        ],
    )


def order_stats(lines: list[OrderLine]) -> dict:
    """
    Compute summary counts for an order list.

    Returns:
        Dictionary with total/available/pod_ready/mpi/not_available lines,
        total quantity, consolidated rows and counts per lookup method
    """
    df = orders_dataframe(lines)
    if df.empty:
        return {
            "total": 0,
            "available": 0,
            "pod_ready": 0,
            "mpi": 0,
            "not_available": 0,
            "total_quantity": 0,
            "zero_quantity": 0,
            "consolidated_rows": 0,
            "lookup_methods": {},
            "paper_types": {},
        }

    available = df["available"]
    return {
        "total": len(df),
        "available": int(available.sum()),
        "pod_ready": int((available & (df["status"] == BookStatus.POD_READY.value)).sum()),
        "mpi": int((available & (df["status"] == BookStatus.MPI.value)).sum()),
        "not_available": int((~available).sum()),
        "total_quantity": int(df["quantity"].sum()),
        "zero_quantity": int((df["quantity"] == 0).sum()),
        "consolidated_rows": int((df["consolidated_count"] - 1).sum()),
        "lookup_methods": {k: int(v) for k, v in df["lookup_method"].value_counts().items()},
        "paper_types": {k: int(v) for k, v in df.loc[available, "paper_desc"].value_counts().items()},
    }


def upload_message(stats: dict) -> str:
    """One-line result message shown after an upload."""
    return (
        f"Data loaded successfully! {stats['available']}/{stats['total']} items found in repository "
        f"({stats['pod_ready']} POD Ready, {stats['mpi']} MPI, {stats['not_available']} Not Available)."
    )


def print_order_stats(lines: list[OrderLine], output_path: Optional[Path] = None) -> dict:
    """
    Log and return statistics about an order list.

    Args:
        lines: Order lines
        output_path: Optional path to save the report as a text file

    Returns:
        Dictionary of computed statistics
    """
    stats = order_stats(lines)
    report: list[str] = []  # Collect output for file

    def output(msg: str = "") -> None:
        """Log message and collect for file output."""
        logger.info(msg)
        report.append(msg)

    output("=" * 60)
    output("Order Statistics")
    output("=" * 60)
    output(upload_message(stats))

    total = stats["total"]
    if total == 0:
        logger.warning("No order lines - statistics unavailable")
        return stats

    output(f"  Total quantity: {stats['total_quantity']:,}")
    if stats["zero_quantity"]:
        output(f"  Lines with quantity 0: {stats['zero_quantity']:,}")
    if stats["consolidated_rows"]:
        output(f"  Duplicate rows consolidated: {stats['consolidated_rows']:,}")

    output("")
    output("Lookup methods:")
    for method, count in stats["lookup_methods"].items():
        output(f"  {method}: {count:,} ({count / total * 100:.1f}%)")

    if stats["paper_types"]:
        output("")
        output("Paper types (available lines):")
        for paper, count in stats["paper_types"].items():
            output(f"  {paper}: {count:,}")

    if output_path:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as f:
            f.write("\n".join(report))
        logger.info(f"Statistics saved to: {output_path}")

    return stats


def repository_stats(index: RepositoryIndex) -> dict:
    """Count titles, POD Ready / MPI titles and duplicate ISBNs in the repository."""
    counts = index.status_counts()
    return {
        "titles": len(index.records),
        "pod_ready": counts[BookStatus.POD_READY.value],
        "mpi": counts[BookStatus.MPI.value],
        "duplicates": index.duplicate_count(),
        "without_isbn": sum(1 for r in index.records if not r.get("isbn")),
    }


def print_repository_stats(index: RepositoryIndex) -> dict:
    """Log and return repository statistics."""
    stats = repository_stats(index)
    logger.info("=" * 60)
    logger.info("Repository Statistics")
    logger.info("=" * 60)
    logger.info(f"Current titles: {stats['titles']:,}")
    logger.info(f"  POD Ready: {stats['pod_ready']:,}")
    logger.info(f"  MPI: {stats['mpi']:,}")
    logger.info(f"  Duplicate ISBNs: {stats['duplicates']:,}")
    if stats["without_isbn"]:
        logger.info(f"  Without ISBN: {stats['without_isbn']:,}")
    return stats
