"""Shared utilities for normalizers."""

from typing import Any, Mapping, Optional

import pandas as pd


def is_missing(value: Any) -> bool:
    """True for None, NaN/NaT and blank strings."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        # Containers are never missing scalars
        return False


def get_field(row: Mapping[str, Any], candidates: list[str], case_insensitive: bool = False) -> Optional[Any]:
    """
    Return the first present, non-missing value among candidate keys.

    Candidates are tried in priority order. With ``case_insensitive``, keys of
    the row are compared after stripping and lowercasing once the exact
    candidates are exhausted.

    Args:
        row: Loosely-typed record (column name -> raw value)
        candidates: Candidate column names in priority order
        case_insensitive: Also match column names regardless of case/padding

    Returns:
        Raw value, or None if no candidate is present
    """
    for key in candidates:
        if key in row and not is_missing(row[key]):
            return row[key]

    if not case_insensitive:
        return None

    folded = {str(key).strip().lower(): key for key in row}
    for key in candidates:
        original = folded.get(key.strip().lower())
        if original is not None and not is_missing(row[original]):
            return row[original]
    return None


def to_text(value: Any) -> str:
    """
    Render a raw cell value as text.

    Integral floats (how spreadsheets hand back whole numbers) lose their
    trailing ``.0``; missing values become an empty string.
    """
    if is_missing(value):
        return ""
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, float) and value.is_integer():
        return f"{value:.0f}"
    return str(value).strip()
