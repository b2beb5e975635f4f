"""Normalization functions for repository and order data."""

from .geography import normalize_country
from .identifiers import (
    canonical_isbn,
    extract_isbn,
    is_valid_identifier,
    normalize_isbn,
    repair_scientific_notation,
)
from .quantity import is_valid_quantity, normalize_quantity, parse_quantity
from .text import fold_key, normalize_title, remove_control_chars, sanitize_text
from .utils import get_field, is_missing, to_text

__all__ = [
    # Identifiers
    "canonical_isbn",
    "extract_isbn",
    "is_valid_identifier",
    "normalize_isbn",
    "repair_scientific_notation",
    # Quantities
    "is_valid_quantity",
    "normalize_quantity",
    "parse_quantity",
    # Text
    "fold_key",
    "normalize_title",
    "remove_control_chars",
    "sanitize_text",
    # Geography
    "normalize_country",
    # Field access
    "get_field",
    "is_missing",
    "to_text",
]
