"""ISBN validation and normalization."""

import logging
import re
from typing import Any, Mapping

import pandas as pd

from .. import config
from ..models import REPOSITORY_FIELDS
from .utils import is_missing, to_text

logger = logging.getLogger(__name__)

# ASCII digits only; full-width and other Unicode digits are stripped
_NON_DIGITS = re.compile(r"[^0-9]")


def repair_scientific_notation(text: str) -> str:
    """
    Undo spreadsheet scientific-notation coercion.

    Values like ``9.78014e+12`` are parsed as numbers and rendered as a
    fixed-point integer string. Text without ``e``/``E`` is returned as-is;
    text that does not parse as a number yields an empty string.
    """
    if "e" not in text and "E" not in text:
        return text
    try:
        return f"{float(text):.0f}"
    except (ValueError, OverflowError):
        logger.debug(f"Unparseable scientific notation: {text!r}")
        return ""


def normalize_isbn(raw: Any) -> str:
    """
    Normalize a raw ISBN-like value to a digit string.

    Steps:
    - Missing values (None, NaN, empty string) become ""
    - Scientific notation is repaired (see repair_scientific_notation)
    - All non-digit characters are stripped
    - 10-12 digits are left-padded with zeros to 13; 13 digits pass through

    Other lengths are returned unchanged; use is_valid_identifier() to gate.

    Args:
        raw: String or number from a spreadsheet/JSON cell

    Returns:
        Digit string (possibly empty)
    """
    if is_missing(raw):
        return ""

    text = repair_scientific_notation(to_text(raw))
    digits = _NON_DIGITS.sub("", text)

    if config.ISBN_MIN_DIGITS <= len(digits) < config.ISBN_LENGTH:
        digits = digits.zfill(config.ISBN_LENGTH)
    return digits


def is_valid_identifier(value: Any) -> bool:
    """
    Check if a value carries a usable ISBN.

    Valid when the digit count (non-digits ignored) is between 10 and 13.
    """
    if is_missing(value):
        return False
    digits = _NON_DIGITS.sub("", to_text(value))
    return config.ISBN_MIN_DIGITS <= len(digits) <= config.ISBN_LENGTH


def extract_isbn(record: Mapping[str, Any]) -> str:
    """
    Extract and normalize the ISBN from a repository record.

    Tries REPOSITORY_FIELDS["isbn"] in priority order (ISBN, isbn, ISBN-13,
    isbn-13, ean, EAN) and normalizes the first value that is not None/NaN.
    A blank string counts as present, so a blank ISBN column is not
    overridden by a later EAN column.

    Returns:
        Normalized ISBN, or "" if no candidate field is present
    """
    for key in REPOSITORY_FIELDS["isbn"]:
        raw = record.get(key)
        if raw is None or (isinstance(raw, float) and pd.isna(raw)):
            continue
        return normalize_isbn(raw)
    return ""


def canonical_isbn(raw: Any) -> str:
    """
    Normalize a value and keep it only if it is a valid identifier.

    Returns:
        13-digit ISBN, or "" when the value has fewer than 10 or more than 13 digits
    """
    normalized = normalize_isbn(raw)
    return normalized if is_valid_identifier(normalized) else ""
