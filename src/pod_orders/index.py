"""Repository lookup index (by ISBN and by alternate order ID)."""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Optional

from .models import BookDict, BookStatus
from .normalizers import canonical_isbn, fold_key

logger = logging.getLogger(__name__)


@dataclass
class RepositoryIndex:
    """
    Read-only lookup structures over one repository record set.

    Never mutated after build_index(); any change to the records means
    building a new index.
    """

    by_isbn: dict[str, BookDict] = field(default_factory=dict)
    by_alternate_id: dict[str, BookDict] = field(default_factory=dict)  # Lowercased master order ID
    records: list[BookDict] = field(default_factory=list, repr=False)

    def __len__(self) -> int:
        return len(self.records)

    def lookup_isbn(self, isbn: str) -> Optional[BookDict]:
        """Find a record by ISBN (any form that normalizes to 13 digits)."""
        key = canonical_isbn(isbn)
        if not key:
            return None
        return self.by_isbn.get(key)

    def lookup_alternate_id(self, alternate_id: object) -> Optional[BookDict]:
        """Find a record by master order ID, case-insensitively."""
        key = fold_key(alternate_id)
        if not key:
            return None
        return self.by_alternate_id.get(key)

    def duplicate_count(self) -> int:
        """
        Count surplus records sharing an ISBN.

        Sum over each distinct non-empty ISBN of (occurrences - 1).
        """
        counts = Counter(r["isbn"] for r in self.records if r.get("isbn", "").strip())
        return sum(count - 1 for count in counts.values() if count > 1)

    def status_counts(self) -> dict[str, int]:
        """Count records per known status (POD Ready, MPI)."""
        return {status.value: sum(1 for r in self.records if r.get("status") == status.value) for status in BookStatus}


def build_index(records: list[BookDict]) -> RepositoryIndex:
    """
    Build lookup maps for a repository record set.

    Later records overwrite earlier ones on duplicate keys.

    Args:
        records: Processed repository records

    Returns:
        RepositoryIndex over the records
    """
    index = RepositoryIndex(records=list(records))

    for record in index.records:
        isbn = record.get("isbn")
        if isbn:
            index.by_isbn[isbn] = record
        alternate_id = fold_key(record.get("master_order_id"))
        if alternate_id:
            index.by_alternate_id[alternate_id] = record

    logger.info(f"Indexed {len(index.by_isbn):,} ISBNs and {len(index.by_alternate_id):,} master order IDs from {len(index.records):,} records")
    duplicates = index.duplicate_count()
    if duplicates:
        logger.warning(f"  {duplicates:,} duplicate ISBN record(s) in repository (last one wins)")

    return index
