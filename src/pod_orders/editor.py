"""Authorized additions and removals on the repository record set."""

import hashlib
import hmac
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional

from . import config
from .loaders import process_repository_record, read_table_rows
from .models import BookDict
from .normalizers import canonical_isbn, fold_key

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EditAuthorization:
    """Time-limited permission to edit the repository."""

    granted_at: datetime
    expires_at: datetime

    def is_valid(self, now: Optional[datetime] = None) -> bool:
        return (now or datetime.now()) < self.expires_at

    def require_valid(self, now: Optional[datetime] = None) -> None:
        """
        Raises:
            PermissionError: If the authorization has expired
        """
        if not self.is_valid(now):
            raise PermissionError(f"Edit authorization expired at {self.expires_at:%Y-%m-%d %H:%M:%S}")


def grant_edit_access(
    is_authorized: bool,
    ttl: timedelta = config.EDIT_SESSION_TTL,
    now: Optional[datetime] = None,
) -> EditAuthorization:
    """
    Issue an edit authorization after an external credential check.

    Args:
        is_authorized: Result of the credential check
        ttl: How long the authorization stays valid
        now: Grant time (current time by default)

    Returns:
        EditAuthorization valid for ``ttl``

    Raises:
        PermissionError: If the check failed
    """
    if not is_authorized:
        raise PermissionError("Repository edit access denied")
    granted_at = now or datetime.now()
    logger.info(f"Repository edit access granted for {ttl}")
    return EditAuthorization(granted_at=granted_at, expires_at=granted_at + ttl)


def sha256_password_check(password: str, expected_hex: str) -> bool:
    """Compare the SHA-256 digest of a password with an expected hex digest."""
    digest = hashlib.sha256(password.encode("utf-8")).hexdigest()
    return hmac.compare_digest(digest, expected_hex.strip().lower())


@dataclass
class RepositoryChangeSet:
    """
    Pending repository edits.

    ``additions`` are raw repository rows (any REPOSITORY_FIELDS naming);
    ``removals`` are ISBNs or master order IDs.
    """

    additions: list[Mapping[str, Any]] = field(default_factory=list)
    removals: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.additions and not self.removals


def _matches_removal(record: BookDict, isbn_keys: set[str], id_keys: set[str]) -> bool:
    isbn = record.get("isbn")
    if isbn and isbn in isbn_keys:
        return True
    alternate_id = fold_key(record.get("master_order_id"))
    return bool(alternate_id) and alternate_id in id_keys


def apply_changes(
    records: list[BookDict],
    changes: RepositoryChangeSet,
    authorization: EditAuthorization,
    now: Optional[datetime] = None,
) -> list[BookDict]:
    """
    Apply a change set and return the new record list.

    Removals run first, matching records by normalized ISBN or by master
    order ID (case-insensitive). Additions are then processed like loaded
    rows; an addition whose ISBN is already present replaces that record
    in place, anything else is appended. The input list is not modified.

    Args:
        records: Current repository records
        changes: Additions and removals
        authorization: Edit authorization, checked before anything changes
        now: Current time for the expiry check

    Returns:
        New list of BookDict records

    Raises:
        PermissionError: If the authorization has expired
    """
    authorization.require_valid(now)

    isbn_keys = {canonical_isbn(r) for r in changes.removals} - {""}
    id_keys = {fold_key(r) for r in changes.removals} - {""}

    updated = [r for r in records if not _matches_removal(r, isbn_keys, id_keys)]
    removed = len(records) - len(updated)

    position_by_isbn = {r["isbn"]: i for i, r in enumerate(updated) if r.get("isbn")}
    replaced = added = 0
    for raw in changes.additions:
        book = process_repository_record(raw)
        isbn = book.get("isbn")
        if isbn and isbn in position_by_isbn:
            updated[position_by_isbn[isbn]] = book
            replaced += 1
        else:
            if isbn:
                position_by_isbn[isbn] = len(updated)
            updated.append(book)
            added += 1

    logger.info(f"Repository updated: {removed} removed, {replaced} replaced, {added} added ({len(updated):,} titles)")
    return updated


def load_change_set(additions_path: Optional[str | Path] = None, removals: Optional[Iterable[str]] = None) -> RepositoryChangeSet:
    """
    Build a change set from an additions spreadsheet and removal identifiers.

    Args:
        additions_path: Optional CSV/XLSX file of repository rows to add
        removals: ISBNs or master order IDs to remove

    Returns:
        RepositoryChangeSet
    """
    additions: list[Mapping[str, Any]] = []
    if additions_path:
        additions = read_table_rows(Path(additions_path))
        logger.info(f"Read {len(additions):,} addition(s) from {additions_path}")
    return RepositoryChangeSet(additions=additions, removals=[r.strip() for r in removals or [] if r.strip()])
