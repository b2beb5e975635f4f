"""Single-title lookup in the repository (ISBN or master order ID)."""

import argparse
import logging
from dataclasses import dataclass
from typing import Optional

from . import config
from .config import DEFAULT_REPOSITORY_PATH
from .index import RepositoryIndex, build_index
from .loaders import load_repository_data
from .models import BookDict, LookupMethod
from .normalizers import is_valid_identifier, sanitize_text

logger = logging.getLogger(__name__)


@dataclass
class SearchResult:
    """A repository hit and the lookup that found it."""

    book: BookDict
    matched_by: LookupMethod

    def describe(self) -> str:
        book = self.book
        label = "ISBN" if self.matched_by is LookupMethod.ISBN else "Master Order ID"
        return "\n".join(
            [
                "Available",
                f"ISBN: {book.get('isbn') or 'Not available'}",
                f"Title: {book.get('title') or config.DEFAULT_TITLE}",
                f"Master Order ID: {book.get('master_order_id') or 'N/A'}",
                f"Paper: {book.get('paper_desc') or config.UNSPECIFIED_PAPER}",
                f"Status: {book.get('status') or config.DEFAULT_STATUS}",
                f"Found by {label}",
            ]
        )


def find_book(query: str, index: RepositoryIndex) -> Optional[SearchResult]:
    """
    Look up one title by ISBN, falling back to master order ID.

    The ISBN lookup only runs when the query has 10-13 digits; the master
    order ID comparison is case-insensitive.

    Args:
        query: ISBN or master order ID typed by the user
        index: Repository lookup index

    Returns:
        SearchResult, or None if nothing matched
    """
    query = sanitize_text(query)
    if not query:
        return None

    if is_valid_identifier(query):
        book = index.lookup_isbn(query)
        if book is not None:
            return SearchResult(book=book, matched_by=LookupMethod.ISBN)

    book = index.lookup_alternate_id(query)
    if book is not None:
        return SearchResult(book=book, matched_by=LookupMethod.MASTER_ORDER_ID)

    logger.debug(f"No repository match for {query!r}")
    return None


def main() -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    parser = argparse.ArgumentParser(description="Look up a title by ISBN or master order ID")
    parser.add_argument("query", type=str, help="ISBN (10-13 digits) or master order ID")
    parser.add_argument(
        "--repository",
        type=str,
        default=str(DEFAULT_REPOSITORY_PATH),
        help=f"Repository JSON/CSV/XLSX path or http(s) URL (default: {DEFAULT_REPOSITORY_PATH})",
    )
    args = parser.parse_args()

    try:
        index = build_index(load_repository_data(args.repository))
    except (OSError, ValueError) as e:
        logger.error(f"Error loading data: {e}")
        return 1

    result = find_book(args.query, index)
    if result is None:
        print("Not available in repository")
        return 1

    print(result.describe())
    return 0


if __name__ == "__main__":
    exit(main())
