"""Order quantity validation."""

import logging
import numbers
import re
from typing import Any

from .. import config
from .utils import is_missing

logger = logging.getLogger(__name__)

# Leading integer of a cell value ("5", " 12 copies", "+3")
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_quantity(raw: Any) -> int | None:
    """
    Parse the leading integer of a raw quantity value.

    Floats are truncated toward zero; strings use their leading digits.

    Returns:
        Parsed integer, or None when no integer can be read
    """
    if is_missing(raw) or isinstance(raw, bool):
        return None
    if isinstance(raw, numbers.Integral):
        return int(raw)
    if isinstance(raw, numbers.Real):
        try:
            return int(raw)
        except (OverflowError, ValueError):
            return None
    match = _LEADING_INT.match(str(raw))
    if not match:
        return None
    return int(match.group(1))


def is_valid_quantity(raw: Any) -> bool:
    """Check if a raw quantity parses to an integer in the accepted range."""
    quantity = parse_quantity(raw)
    return quantity is not None and config.MIN_QUANTITY <= quantity <= config.MAX_QUANTITY


def normalize_quantity(raw: Any) -> int:
    """
    Normalize a raw quantity to an integer.

    Invalid, missing or out-of-range values (outside 1-10000) become 0.
    """
    if not is_valid_quantity(raw):
        logger.debug(f"Invalid quantity {raw!r}, using 0")
        return 0
    return parse_quantity(raw)
