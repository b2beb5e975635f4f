"""Repository (book catalog) loader.

The repository arrives as a JSON array of flat objects (``data.json``), from
a local file or an http(s) URL, or as a CSV/XLSX snapshot previously
exported by this package. Column names vary between exports, so every
BookDict field is read through REPOSITORY_FIELDS.
"""

import json
import logging
from pathlib import Path
from typing import Any, Mapping, Optional

import requests

from .. import config
from ..models import REPOSITORY_FIELDS, REPOSITORY_TEXT_FIELDS, BookDict
from ..normalizers import canonical_isbn, extract_isbn, get_field, is_missing, normalize_title, sanitize_text
from .utils import create_session_with_retries, read_table_rows

logger = logging.getLogger(__name__)


def _opaque(value: Any) -> Any:
    """Keep a physical-spec value as-is, but turn NaN/blank into None."""
    return None if is_missing(value) else value


def process_repository_record(item: Mapping[str, Any]) -> BookDict:
    """
    Transform a raw repository row into a BookDict.

    ISBNs outside 10-13 digits are stored as "" (unidentified). A missing
    status defaults to "POD Ready"; text fields are sanitized.

    Args:
        item: Raw repository row with naming-variant keys

    Returns:
        BookDict
    """
    book = BookDict(isbn=canonical_isbn(extract_isbn(item)))

    for field, candidates in REPOSITORY_FIELDS.items():
        if field == "isbn":
            continue
        value = get_field(item, candidates)
        if field == "title":
            book["title"] = normalize_title(value)
        elif field in REPOSITORY_TEXT_FIELDS:
            book[field] = sanitize_text(value)
        else:
            book[field] = _opaque(value)

    if not book["status"]:
        book["status"] = config.DEFAULT_STATUS

    return book


def process_repository_data(raw_data: list[Mapping[str, Any]]) -> list[BookDict]:
    """
    Transform raw repository rows into BookDicts.

    Raises:
        ValueError: If the data is not a list of objects
    """
    if not isinstance(raw_data, list):
        raise ValueError(f"Repository data must be a JSON array, got {type(raw_data).__name__}")

    records = []
    for item in raw_data:
        if not isinstance(item, Mapping):
            raise ValueError(f"Repository entries must be objects, got {type(item).__name__}")
        records.append(process_repository_record(item))

    unidentified = sum(1 for r in records if not r["isbn"])
    if unidentified:
        logger.info(f"  {unidentified:,} repository record(s) without a valid ISBN")
    return records


def fetch_repository_json(url: str, session: Optional[requests.Session] = None) -> list:
    """
    Download repository JSON over HTTP.

    Raises:
        requests.RequestException: On network or HTTP errors
        ValueError: If the body is not valid JSON
    """
    session = session or create_session_with_retries()
    response = session.get(url, timeout=(config.CONNECT_TIMEOUT, config.READ_TIMEOUT))
    response.raise_for_status()
    return response.json()


def load_repository_data(source: str | Path, session: Optional[requests.Session] = None) -> list[BookDict]:
    """
    Load and process the repository from a URL or file.

    Args:
        source: http(s) URL to a JSON array, or a .json/.csv/.xlsx/.xls path
        session: Optional requests session (URLs only)

    Returns:
        List of BookDict records

    Raises:
        FileNotFoundError: If a local source does not exist
        requests.RequestException: If a remote source cannot be fetched
        ValueError: If the data is malformed
    """
    source_text = str(source)
    if source_text.startswith(("http://", "https://")):
        logger.info(f"Fetching repository data from: {source_text}")
        raw_data = fetch_repository_json(source_text, session)
    else:
        path = Path(source)
        if not path.exists():
            raise FileNotFoundError(f"Repository data not found: {path}")
        logger.info(f"Loading repository data from: {path}")
        if path.suffix.lower() == ".json":
            with open(path, "r", encoding="utf-8") as f:
                raw_data = json.load(f)
        else:
            raw_data = read_table_rows(path)

    records = process_repository_data(raw_data)
    logger.info(f"Successfully loaded {len(records):,} books from repository")
    return records
