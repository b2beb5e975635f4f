"""
POD Order Reconciliation

Matches uploaded order spreadsheets against a book repository and exports
printer-ready order files.

Public API:
- Models: BookDict, OrderLine, CustomerProfile, enums
- Normalizers: ISBN, quantity and text normalization
- Loaders: load_repository_data(), read_upload_rows()
- Processing: build_index(), process_order_rows()
- Editing: list mutations, repository change sets
- Exporters: printer CSV, repository snapshots, batch ZIP
- Session: OrderSession
"""

__version__ = "0.1.0"

# Export config constants
from .config import DEFAULT_CUSTOMER_PROFILE, DEFAULT_OUTPUT_DIR, DEFAULT_REPOSITORY_PATH, load_customer_profile

# Export editor
from .editor import (
    EditAuthorization,
    RepositoryChangeSet,
    apply_changes,
    grant_edit_access,
    load_change_set,
    sha256_password_check,
)

# Export exporters
from .exporters import (
    OrderExport,
    build_order_export,
    export_batch,
    export_order_csv,
    export_repository_csv,
    export_repository_excel,
    export_repository_json,
    export_summary_json,
    render_order_csv,
)

# Export index
from .index import RepositoryIndex, build_index

# Export loaders
from .loaders import load_repository_data, process_repository_data, process_repository_record, read_upload_rows

# Export metrics
from .metrics import QualityMetrics, get_metrics, reset_metrics

# Export models and constants
from .models import (
    BookDict,
    BookStatus,
    CustomerProfile,
    LookupMethod,
    OrderLine,
    StatusFilter,
    serialize_book,
)

# Export mutator
from .mutator import (
    NO_FILTER,
    OrderFilter,
    apply_filter,
    delete_line,
    delete_lines,
    paper_options,
    restore_order,
    sort_by_paper,
    toggle_paper_sort,
)

# Export all normalizers
from .normalizers import (
    canonical_isbn,
    is_valid_identifier,
    normalize_country,
    normalize_isbn,
    normalize_quantity,
    normalize_title,
    parse_quantity,
    repair_scientific_notation,
    sanitize_text,
)

# Export processor
from .processor import consolidate_lines, process_order_rows

# Export search
from .search import SearchResult, find_book

# Export session
from .session import OrderSession

# Export stats
from .stats import order_stats, print_order_stats, print_repository_stats, repository_stats

# Export validators
from .validators import (
    DuplicateISBN,
    UploadParseError,
    UploadValidationError,
    export_duplicate_isbns,
    find_duplicate_isbns,
    validate_order_ref,
    validate_upload_file,
)

__all__ = [
    # Version
    "__version__",
    # Models and constants
    "BookDict",
    "BookStatus",
    "CustomerProfile",
    "LookupMethod",
    "OrderLine",
    "StatusFilter",
    "serialize_book",
    "DEFAULT_CUSTOMER_PROFILE",
    "DEFAULT_OUTPUT_DIR",
    "DEFAULT_REPOSITORY_PATH",
    "load_customer_profile",
    # Normalizers
    "canonical_isbn",
    "is_valid_identifier",
    "normalize_isbn",
    "repair_scientific_notation",
    "parse_quantity",
    "normalize_quantity",
    "normalize_title",
    "sanitize_text",
    "normalize_country",
    # Loaders
    "load_repository_data",
    "process_repository_data",
    "process_repository_record",
    "read_upload_rows",
    # Metrics
    "QualityMetrics",
    "get_metrics",
    "reset_metrics",
    # Core
    "RepositoryIndex",
    "build_index",
    "process_order_rows",
    "consolidate_lines",
    "SearchResult",
    "find_book",
    # Order list edits
    "OrderFilter",
    "NO_FILTER",
    "apply_filter",
    "delete_line",
    "delete_lines",
    "paper_options",
    "sort_by_paper",
    "restore_order",
    "toggle_paper_sort",
    "OrderSession",
    # Repository edits
    "EditAuthorization",
    "RepositoryChangeSet",
    "apply_changes",
    "grant_edit_access",
    "load_change_set",
    "sha256_password_check",
    # Stats
    "order_stats",
    "print_order_stats",
    "repository_stats",
    "print_repository_stats",
    # Exporters
    "OrderExport",
    "build_order_export",
    "render_order_csv",
    "export_order_csv",
    "export_batch",
    "export_repository_json",
    "export_repository_csv",
    "export_repository_excel",
    "export_summary_json",
    # Validators
    "DuplicateISBN",
    "UploadParseError",
    "UploadValidationError",
    "export_duplicate_isbns",
    "find_duplicate_isbns",
    "validate_order_ref",
    "validate_upload_file",
]
