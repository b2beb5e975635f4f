"""Data models and field tables for POD order reconciliation."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, TypedDict

# Synthetic consolidation key for rows that matched nothing
UNMATCHED_KEY_PREFIX = "ROW-"


def make_unmatched_key(source_index: int) -> str:
    """Create a per-row consolidation key for an unmatched order row."""
    return f"{UNMATCHED_KEY_PREFIX}{source_index}"


def format_line_number(position: int) -> str:
    """Render a 0-based position as a 3-digit, 1-based line number."""
    return str(position + 1).zfill(3)


class LookupMethod(str, Enum):
    """Strategy that resolved an order row to a repository record."""

    ISBN = "isbn"
    MASTER_ORDER_ID = "master_order_id"  # Fallback on the alternate order ID
    NONE = "none"


class BookStatus(str, Enum):
    """Repository statuses the tool knows about (others are kept as free text)."""

    POD_READY = "POD Ready"
    MPI = "MPI"


class StatusFilter(str, Enum):
    """Mutually exclusive status views over an order list."""

    MPI = "mpi"  # Available and printed as miscellaneous
    NOT_AVAILABLE = "not-available"
    POD_READY = "pod-ready"  # Available and ready for print-on-demand


class BookDict(TypedDict, total=False):
    """
    Typed dictionary for one repository title.

    All fields are optional (total=False) since repository rows arrive with
    varying column sets. ``isbn`` is either empty or exactly 13 digits.
    """

    isbn: str
    title: str
    master_order_id: str  # Alternate order identifier ("Master Order ID")
    status: str
    paper_desc: str

    # Physical specification, carried opaquely
    trim_height: object
    trim_width: object
    bind_style: str
    extent: object
    cover_spec_code: str
    cover_spine: object
    packing: str
    setup_date: str


# Repository field table: BookDict field -> raw column candidates, in priority order
REPOSITORY_FIELDS: dict[str, list[str]] = {
    "isbn": ["ISBN", "isbn", "ISBN-13", "isbn-13", "ean", "EAN"],
    "title": ["Title", "TITLE", "title"],
    "master_order_id": ["Master Order ID", "masterOrderId", "MasterOrderId", "Master Order Id"],
    "status": ["Status", "status"],
    "paper_desc": ["Paper Desc", "paperDesc", "Paper Description"],
    "trim_height": ["Trim Height"],
    "trim_width": ["Trim Width"],
    "bind_style": ["Bind Style"],
    "extent": ["Extent"],
    "cover_spec_code": ["Cover Spec Code 1", "Cover Spec Code"],
    "cover_spine": ["Cover Spine"],
    "packing": ["Packing"],
    "setup_date": ["setupdate", "Setup Date"],
}

# Free-text repository fields that are sanitized on load
REPOSITORY_TEXT_FIELDS = ("title", "master_order_id", "status", "paper_desc", "bind_style", "cover_spec_code", "packing", "setup_date")

# Order upload field table: logical field -> raw column candidates, in priority order.
# Lookups fall back to a case-insensitive match on these names.
ORDER_FIELDS: dict[str, list[str]] = {
    "isbn": ["ISBN", "isbn", "ISBN-13", "isbn-13", "EAN", "ean"],
    "quantity": ["Qty", "qty", "Quantity", "quantity", "Rem", "rem"],
    "master": ["Master", "master", "Master Order ID", "masterOrderId"],
    "date": ["Date", "date"],
}

# Snapshot column -> BookDict field (title-cased keys of the repository ingestion format)
SNAPSHOT_COLUMNS: dict[str, str] = {
    "ISBN": "isbn",
    "Master Order ID": "master_order_id",
    "Title": "title",
    "Status": "status",
    "Paper Description": "paper_desc",
    "Trim Height": "trim_height",
    "Trim Width": "trim_width",
    "Bind Style": "bind_style",
    "Extent": "extent",
    "Cover Spec Code": "cover_spec_code",
    "Cover Spine": "cover_spine",
    "Packing": "packing",
}


@dataclass
class OrderLine:
    """
    One consolidated order line.

    ``line_number`` follows storage order and is rewritten after deletes and
    sorts. ``position`` is fixed when the batch is processed and is how the
    original order is restored after a sort.
    """

    line_number: str
    isbn: str  # Matched record's ISBN, empty when nothing matched
    description: str
    status: str
    paper_desc: str
    quantity: int
    available: bool
    lookup_method: LookupMethod
    source_index: int  # Input row index of the first row in the group
    consolidated_count: int = 1
    position: int = 0
    requested_isbn: str = ""  # ISBN as read from the upload, for display
    master_order_id: str = ""
    order_ref: str = ""
    order_date: Optional[str] = None


@dataclass
class CustomerProfile:
    """Printer customer details written into the export header row."""

    name: str
    type: str = ""
    street: str = ""
    road: str = ""
    city: str = ""
    region: str = ""
    country: str = ""
    postcode: str = ""
    country_code: str = ""
    phone: str = ""


def serialize_book(book: BookDict) -> dict:
    """
    Serialize a BookDict into a flat snapshot row.

    Keys follow SNAPSHOT_COLUMNS; missing values become empty strings.

    Args:
        book: Repository record

    Returns:
        Dictionary ready for JSON/DataFrame export
    """
    result = {}
    for column, field in SNAPSHOT_COLUMNS.items():
        value = book.get(field)
        result[column] = "" if value is None else value
    return result
