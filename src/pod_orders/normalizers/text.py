"""Text normalization functions (titles, free-text repository fields)."""

from typing import Any

from .. import config
from .utils import is_missing, to_text

# Pre-build translation table for performance (module-level constant)
_CONTROL_CHAR_MAP = {}

# C0 controls (0x00-0x1F) - replace with space
for _i in range(0x00, 0x20):
    _CONTROL_CHAR_MAP[_i] = " "

# C1 controls (0x80-0x9F) - replace with space
for _i in range(0x80, 0xA0):
    _CONTROL_CHAR_MAP[_i] = " "

# Zero-width chars - remove entirely
for _i in (0x200B, 0x200C, 0x200D, 0xFEFF, 0xFFFD):
    _CONTROL_CHAR_MAP[_i] = None

_CONTROL_CHAR_TABLE = str.maketrans(_CONTROL_CHAR_MAP)

# Markup-significant characters dropped from anything shown back to users
_UNSAFE_CHAR_TABLE = str.maketrans({c: None for c in "<>'\"&"})


def remove_control_chars(text: str) -> str:
    """
    Remove control characters from text.

    C0/C1 control characters (including tab and newline) become spaces;
    zero-width characters and U+FFFD are removed.
    """
    if not text:
        return text
    return text.translate(_CONTROL_CHAR_TABLE)


def sanitize_text(value: Any, max_length: int | None = None) -> str:
    """
    Sanitize a free-text value coming from repository or order files.

    Drops ``< > ' " &``, strips control characters, collapses whitespace and
    truncates to ``max_length`` (MAX_TEXT_LENGTH by default).

    Args:
        value: Raw cell value (any type)
        max_length: Optional length limit

    Returns:
        Sanitized string ("" for missing values)
    """
    if is_missing(value):
        return ""
    if max_length is None:
        max_length = config.MAX_TEXT_LENGTH

    text = remove_control_chars(to_text(value))
    text = text.translate(_UNSAFE_CHAR_TABLE)
    text = " ".join(text.split())
    return text[:max_length].strip()


def normalize_title(title: Any) -> str:
    """Normalize a book title, falling back to the default placeholder."""
    text = sanitize_text(title)
    return text if text else config.DEFAULT_TITLE


def fold_key(value: Any) -> str:
    """Lowercased, trimmed text used for case-insensitive lookups."""
    return to_text(value).lower()
