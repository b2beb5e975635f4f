"""
Tests for repository edit authorization and change sets.

Run with: pytest tests/test_editor.py -v
"""

import hashlib
from datetime import datetime, timedelta

import pytest

from pod_orders.editor import (
    RepositoryChangeSet,
    apply_changes,
    grant_edit_access,
    load_change_set,
    sha256_password_check,
)

from conftest import write_csv

GRANTED_AT = datetime(2024, 3, 1, 12, 0, 0)


@pytest.fixture
def authorization():
    return grant_edit_access(True, now=GRANTED_AT)


class TestAuthorization:
    def test_denied(self):
        with pytest.raises(PermissionError):
            grant_edit_access(False)

    def test_valid_within_ttl(self, authorization):
        assert authorization.expires_at == GRANTED_AT + timedelta(minutes=30)
        authorization.require_valid(GRANTED_AT + timedelta(minutes=29))

    def test_expired(self, authorization):
        with pytest.raises(PermissionError, match="expired"):
            authorization.require_valid(GRANTED_AT + timedelta(minutes=30))

    def test_custom_ttl(self):
        authorization = grant_edit_access(True, ttl=timedelta(minutes=5), now=GRANTED_AT)
        assert not authorization.is_valid(GRANTED_AT + timedelta(minutes=6))

    def test_password_check(self):
        expected = hashlib.sha256(b"secret").hexdigest()

        assert sha256_password_check("secret", expected)
        assert sha256_password_check("secret", expected.upper())
        assert not sha256_password_check("wrong", expected)


class TestApplyChanges:
    def test_remove_by_isbn_and_master_id(self, repository, authorization):
        changes = RepositoryChangeSet(removals=["978-0-14-000000-1", "sa1700"])

        updated = apply_changes(repository, changes, authorization, now=GRANTED_AT)

        assert [r["isbn"] for r in updated] == ["9780140000003", "1000000000000"]
        assert len(repository) == 4

    def test_addition_appended(self, repository, authorization):
        changes = RepositoryChangeSet(additions=[{"ISBN": "9780140000009", "Title": "New Title", "Status": "MPI"}])

        updated = apply_changes(repository, changes, authorization, now=GRANTED_AT)

        assert len(updated) == 5
        assert updated[-1]["title"] == "New Title"
        assert updated[-1]["status"] == "MPI"

    def test_addition_replaces_in_place(self, repository, authorization):
        changes = RepositoryChangeSet(additions=[{"ISBN": "9780140000002", "Title": "Penguin Two Revised"}])

        updated = apply_changes(repository, changes, authorization, now=GRANTED_AT)

        assert len(updated) == 4
        assert updated[1]["title"] == "Penguin Two Revised"
        assert updated[1]["status"] == "POD Ready"
        assert repository[1]["title"] == "Penguin Two"

    def test_removals_before_additions(self, repository, authorization):
        changes = RepositoryChangeSet(
            additions=[{"ISBN": "9780140000001", "Title": "Penguin One Reissue"}],
            removals=["9780140000001"],
        )

        updated = apply_changes(repository, changes, authorization, now=GRANTED_AT)

        assert [r["isbn"] for r in updated][-1] == "9780140000001"
        assert updated[-1]["title"] == "Penguin One Reissue"
        assert len(updated) == 4

    def test_expired_authorization(self, repository, authorization):
        changes = RepositoryChangeSet(removals=["9780140000001"])

        with pytest.raises(PermissionError):
            apply_changes(repository, changes, authorization, now=GRANTED_AT + timedelta(hours=1))
        assert len(repository) == 4

    def test_empty_change_set(self, repository, authorization):
        assert RepositoryChangeSet().is_empty
        assert apply_changes(repository, RepositoryChangeSet(), authorization, now=GRANTED_AT) == repository


class TestLoadChangeSet:
    def test_additions_from_csv(self, tmp_path):
        path = write_csv(tmp_path / "additions.csv", "ISBN,Title,Status\n9780140000009,New,MPI\n")

        changes = load_change_set(path, [" SA1657 ", ""])

        assert changes.additions == [{"ISBN": "9780140000009", "Title": "New", "Status": "MPI"}]
        assert changes.removals == ["SA1657"]

    def test_removals_only(self):
        changes = load_change_set(None, ["9780140000001"])
        assert changes.additions == []
        assert not changes.is_empty
