"""Command-line interface for order reconciliation and printer CSV export."""

import argparse
import logging
from pathlib import Path

from .config import DEFAULT_CUSTOMER_PROFILE, DEFAULT_OUTPUT_DIR, DEFAULT_REPOSITORY_PATH, load_customer_profile
from .exporters import export_batch, export_summary_json
from .index import build_index
from .loaders import load_repository_data
from .metrics import get_metrics, reset_metrics
from .models import OrderLine, StatusFilter
from .session import OrderSession
from .stats import print_order_stats
from .validators import UploadParseError, UploadValidationError

logger = logging.getLogger(__name__)

# Preview columns: header, width
_PREVIEW_COLUMNS = [("Line", 4), ("ISBN", 13), ("Description", 40), ("Qty", 5), ("Status", 13), ("Paper", 30)]


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--repository",
        type=str,
        default=str(DEFAULT_REPOSITORY_PATH),
        help=f"Repository JSON/CSV/XLSX path or http(s) URL (default: {DEFAULT_REPOSITORY_PATH})",
    )
    parser.add_argument(
        "--customer-profile",
        type=Path,
        help="JSON file with the printer customer profile (default: built-in Clays profile)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose/debug logging",
    )


def _truncate(text: str, width: int) -> str:
    return text if len(text) <= width else text[: width - 3] + "..."


def log_preview(lines: list[OrderLine]) -> None:
    """Log order lines as a fixed-width table."""
    logger.info("  ".join(name.ljust(width) for name, width in _PREVIEW_COLUMNS))
    logger.info("  ".join("-" * width for _, width in _PREVIEW_COLUMNS))
    for line in lines:
        cells = [
            line.line_number,
            line.isbn or line.requested_isbn or "-",
            line.description,
            str(line.quantity),
            line.status,
            line.paper_desc,
        ]
        logger.info("  ".join(_truncate(cell, width).ljust(width) for cell, (_, width) in zip(cells, _PREVIEW_COLUMNS)))


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Match an order file against the book repository and export a printer CSV",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --order-ref PO-1234 orders.xlsx                   # Default repository (data/data.json)
  %(prog)s --order-ref PO-1234 orders.csv --delete 002 005   # Drop lines before export
  %(prog)s --order-ref PO-1234 orders.csv --filter mpi       # Preview MPI lines only
  %(prog)s --repository https://example.com/data.json --order-ref PO-1 orders.csv
        """,
    )
    parser.add_argument("order_file", type=Path, help="Order upload (.csv, .xlsx or .xls)")
    parser.add_argument("--order-ref", type=str, required=True, help="Order reference written into the export")
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=DEFAULT_OUTPUT_DIR,
        help=f"Output directory for exports (default: {DEFAULT_OUTPUT_DIR})",
    )
    _add_common_arguments(parser)

    edit_group = parser.add_argument_group("Order list edits")
    edit_group.add_argument(
        "--delete",
        nargs="+",
        default=[],
        metavar="LINE",
        help="Line numbers to delete before export (e.g. 002 5)",
    )
    edit_group.add_argument(
        "--sort-by-paper",
        action="store_true",
        help="Group lines by paper type before export",
    )

    view_group = parser.add_argument_group("Preview filters (export always includes every available line)")
    view_group.add_argument(
        "--filter",
        choices=[s.value for s in StatusFilter],
        help="Show only one status in the preview",
    )
    view_group.add_argument("--paper", type=str, help="Show only one paper type in the preview")

    args = parser.parse_args()
    _configure_logging(args.verbose)

    # Reset metrics at start
    reset_metrics()

    logger.info("POD Order Reconciliation")
    logger.info("=" * 60)
    logger.info(f"Order file: {args.order_file}")
    logger.info(f"Repository: {args.repository}")
    logger.info(f"Output directory: {args.output_dir}")

    session = OrderSession()
    try:
        profile = load_customer_profile(args.customer_profile) if args.customer_profile else DEFAULT_CUSTOMER_PROFILE
        session.load_repository(load_repository_data(args.repository))
        session.upload(args.order_file, args.order_ref)
    except (UploadValidationError, UploadParseError) as e:
        logger.error(str(e))
        return 1
    except (OSError, ValueError) as e:
        logger.error(f"Error loading data: {e}")
        return 1

    # Line numbers refer to the list as uploaded, so resolve them all first
    if args.delete:
        wanted = {number.strip().zfill(3) for number in args.delete}
        indices = [i for i, line in enumerate(session.lines) if line.line_number in wanted]
        missing = wanted - {session.lines[i].line_number for i in indices}
        if missing:
            logger.warning(f"No such line number(s): {', '.join(sorted(missing))}")
        session.delete_many(indices)

    if args.sort_by_paper:
        session.toggle_paper_sort()

    session.set_status_filter(StatusFilter(args.filter) if args.filter else None)
    session.set_paper_filter(args.paper)

    logger.info("=" * 60)
    logger.info(session.summary()["filter"])
    logger.info("=" * 60)
    log_preview(session.visible_lines())

    # Print statistics (and save to file)
    stats = print_order_stats(session.lines, output_path=args.output_dir / "summary.txt")

    csv_path = session.export_csv(args.output_dir, profile)
    export_summary_json(stats, args.output_dir / "summary.json", order_ref=session.order_ref)

    # Print data quality metrics
    get_metrics().print_report()

    logger.info("=" * 60)
    if csv_path is None:
        logger.warning("Reconciliation finished without an export")
        return 1
    logger.info("Reconciliation Complete!")
    logger.info("=" * 60)
    return 0


def _parse_upload_arg(value: str) -> tuple[Path, str]:
    """Parse FILE:REF into (path, order reference)."""
    path, sep, order_ref = value.rpartition(":")
    if not sep or not path or not order_ref:
        raise argparse.ArgumentTypeError(f"Expected FILE:ORDER_REF, got {value!r}")
    return Path(path), order_ref


def batch_main() -> int:
    parser = argparse.ArgumentParser(
        description="Export several order files into one ZIP of printer CSVs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --output orders.zip week1.xlsx:PO-1 week2.csv:PO-2
        """,
    )
    parser.add_argument(
        "uploads",
        nargs="+",
        type=_parse_upload_arg,
        metavar="FILE:REF",
        help="Order file and its order reference",
    )
    parser.add_argument("--output", type=Path, required=True, help="Output .zip file")
    _add_common_arguments(parser)

    args = parser.parse_args()
    _configure_logging(args.verbose)

    reset_metrics()

    logger.info("POD Order Batch Export")
    logger.info("=" * 60)

    try:
        profile = load_customer_profile(args.customer_profile) if args.customer_profile else DEFAULT_CUSTOMER_PROFILE
        index = build_index(load_repository_data(args.repository))
    except (OSError, ValueError) as e:
        logger.error(f"Error loading data: {e}")
        return 1

    names = export_batch(args.uploads, index, args.output, profile)

    get_metrics().print_report()

    if not names:
        return 1
    logger.info(f"Batch complete: {len(names)} of {len(args.uploads)} order(s) exported")
    return 0


if __name__ == "__main__":
    exit(main())
