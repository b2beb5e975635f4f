"""Command-line interface for repository maintenance (stats, edits, snapshots)."""

import argparse
import logging
from datetime import datetime
from getpass import getpass
from pathlib import Path

from .config import DEFAULT_OUTPUT_DIR, DEFAULT_REPOSITORY_PATH
from .editor import apply_changes, grant_edit_access, load_change_set, sha256_password_check
from .exporters import (
    export_repository_csv,
    export_repository_excel,
    export_repository_json,
    repository_filename,
)
from .index import build_index
from .loaders import load_repository_data
from .stats import print_repository_stats
from .validators import UploadParseError, export_duplicate_isbns, find_duplicate_isbns

logger = logging.getLogger(__name__)

# Snapshot format -> (file suffix, writer)
SNAPSHOT_WRITERS = {
    "json": (".json", export_repository_json),
    "xlsx": (".xlsx", export_repository_excel),
    "csv": (".csv", export_repository_csv),
}


def main() -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    parser = argparse.ArgumentParser(
        description="Inspect, edit and snapshot the book repository",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                                                # Stats and duplicate report only
  %(prog)s --format xlsx                                  # Excel snapshot
  %(prog)s --add new_titles.xlsx --password-sha256 HEX    # Authorized additions
  %(prog)s --remove 9780140000000 SA1657 --password-sha256 HEX
        """,
    )
    parser.add_argument(
        "--repository",
        type=str,
        default=str(DEFAULT_REPOSITORY_PATH),
        help=f"Repository JSON/CSV/XLSX path or http(s) URL (default: {DEFAULT_REPOSITORY_PATH})",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=DEFAULT_OUTPUT_DIR,
        help=f"Output directory for reports and snapshots (default: {DEFAULT_OUTPUT_DIR})",
    )
    parser.add_argument(
        "--format",
        choices=sorted(SNAPSHOT_WRITERS),
        default="json",
        help="Snapshot format (default: json)",
    )
    parser.add_argument(
        "--no-snapshot",
        action="store_true",
        help="Skip writing a repository snapshot",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose/debug logging",
    )

    edit_group = parser.add_argument_group("Repository edits (password required)")
    edit_group.add_argument("--add", type=Path, metavar="FILE", help="CSV/XLSX of titles to add or replace")
    edit_group.add_argument("--remove", nargs="+", default=[], metavar="ID", help="ISBNs or master order IDs to remove")
    edit_group.add_argument(
        "--password-sha256",
        type=str,
        help="SHA-256 hex digest of the edit password (the password itself is prompted)",
    )

    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    logger.info("POD Repository Manager")
    logger.info("=" * 60)
    logger.info(f"Repository: {args.repository}")

    try:
        records = load_repository_data(args.repository)
    except (OSError, ValueError) as e:
        logger.error(f"Error loading data: {e}")
        return 1

    args.output_dir.mkdir(parents=True, exist_ok=True)

    if args.add or args.remove:
        if not args.password_sha256:
            logger.error("--password-sha256 is required for repository edits")
            return 1
        try:
            authorization = grant_edit_access(sha256_password_check(getpass("Repository password: "), args.password_sha256))
            changes = load_change_set(args.add, args.remove)
            records = apply_changes(records, changes, authorization)
        except (PermissionError, UploadParseError) as e:
            logger.error(str(e))
            return 1

    index = build_index(records)
    print_repository_stats(index)

    duplicates = find_duplicate_isbns(records)
    if duplicates:
        logger.warning(f"Found {len(duplicates)} duplicate ISBN(s)")
        export_duplicate_isbns(duplicates, args.output_dir / "duplicate_isbns.csv")

    if not args.no_snapshot:
        suffix, writer = SNAPSHOT_WRITERS[args.format]
        writer(records, args.output_dir / repository_filename(suffix, datetime.now()))

    logger.info("=" * 60)
    logger.info("Repository Update Complete!")
    logger.info("=" * 60)
    return 0


if __name__ == "__main__":
    exit(main())
