from __future__ import annotations

import csv

import bcrypt
import pytest

from portal.core.errors import Conflict, Forbidden, InvalidCredentials, InvalidInput, NotFound
from portal.services.account_service import CredentialStore


@pytest.fixture()
def store(tmp_path):
    s = CredentialStore(tmp_path / "users.csv")
    s.load()
    return s


def _rows(path):
    with path.open(encoding="utf-8", newline="") as f:
        return list(csv.DictReader(f))


def test_create_persists_hash_not_password(tmp_path, store):
    store.create_account("alice", "s3cret", "editor")
    rows = _rows(tmp_path / "users.csv")
    assert [r["id"] for r in rows] == ["alice"]
    assert rows[0]["role"] == "editor"
    assert rows[0]["passwordHash"] and "s3cret" not in rows[0]["passwordHash"]
    assert store.list_accounts() == [{"id": "alice", "role": "editor"}]


def test_create_validation(store):
    with pytest.raises(InvalidInput):
        store.create_account("", "pw", "editor")
    with pytest.raises(InvalidInput):
        store.create_account("bob", "", "editor")
    with pytest.raises(InvalidInput):
        store.create_account("bob", "pw", None)
    with pytest.raises(InvalidInput):
        store.create_account("bob", "pw", "global")
    store.create_account("bob", "pw", "asia")
    with pytest.raises(Conflict):
        store.create_account("bob", "other", "europe")


def test_identifiers_are_case_sensitive(store):
    store.create_account("Bob", "pw", "asia")
    store.create_account("bob", "pw", "asia")
    assert len(store.list_accounts()) == 2


def test_verify_uses_one_message_for_unknown_and_wrong(store):
    store.create_account("alice", "s3cret", "europe")
    assert store.verify("alice", "s3cret").role == "europe"
    with pytest.raises(InvalidCredentials) as wrong:
        store.verify("alice", "nope")
    with pytest.raises(InvalidCredentials) as unknown:
        store.verify("mallory", "nope")
    assert wrong.value.message == unknown.value.message == "Invalid credentials"


def test_update_rename_role_and_password(store):
    store.create_account("alice", "old", "europe")
    acc = store.update_account("alice", new_identifier="alicia", password="new", role="asia")
    assert (acc.identifier, acc.role) == ("alicia", "asia")
    assert store.get("alice") is None
    store.verify("alicia", "new")
    with pytest.raises(InvalidCredentials):
        store.verify("alicia", "old")


@pytest.mark.parametrize("password", [None, ""])
def test_update_without_password_keeps_hash(store, password):
    store.create_account("alice", "keep-me", "europe")
    before = store.get("alice").password_hash
    store.update_account("alice", password=password, role="africa")
    assert store.get("alice").password_hash == before
    store.verify("alice", "keep-me")


def test_update_errors(store):
    store.create_account("alice", "pw", "europe")
    store.create_account("bob", "pw", "asia")
    with pytest.raises(NotFound):
        store.update_account("carol", role="asia")
    with pytest.raises(Conflict):
        store.update_account("alice", new_identifier="bob")
    with pytest.raises(InvalidInput):
        store.update_account("alice", role="moon")
    # renaming to itself is not a collision
    assert store.update_account("alice", new_identifier="alice").identifier == "alice"


def test_delete(store):
    store.create_account("alice", "pw", "editor")
    store.create_account("bob", "pw", "asia")
    with pytest.raises(Forbidden):
        store.delete_account("alice", acting_identifier="alice")
    store.delete_account("bob", acting_identifier="alice")
    with pytest.raises(NotFound):
        store.delete_account("bob", acting_identifier="alice")
    assert store.list_accounts() == [{"id": "alice", "role": "editor"}]


def test_reload_from_disk(tmp_path, store):
    store.create_account("alice", "pw", "editor")
    store.create_account("bob", "pw2", "south-america")
    again = CredentialStore(tmp_path / "users.csv")
    again.load()
    assert again.list_accounts() == store.list_accounts()
    again.verify("bob", "pw2")


def test_ensure_account_only_creates_once(store):
    store.ensure_account("root", "first", "editor")
    store.ensure_account("root", "second", "editor")
    store.verify("root", "first")
    store.ensure_account("root", "second", "editor", reset_existing=True)
    store.verify("root", "second")


def test_empty_file_loads_as_no_accounts(tmp_path):
    path = tmp_path / "users.csv"
    path.write_text("")
    s = CredentialStore(path)
    s.load()
    assert s.list_accounts() == []


def test_bcrypt_hash_verifies_and_is_upgraded(tmp_path):
    legacy = bcrypt.hashpw(b"secret", bcrypt.gensalt(rounds=4)).decode("ascii")
    path = tmp_path / "users.csv"
    path.write_text(f"id,passwordHash,role\nadmin,{legacy},editor\n", encoding="utf-8")
    store = CredentialStore(path)
    store.load()

    with pytest.raises(InvalidCredentials):
        store.verify("admin", "wrong")
    assert _rows(path)[0]["passwordHash"] == legacy

    assert store.verify("admin", "secret").role == "editor"
    upgraded = _rows(path)[0]["passwordHash"]
    assert upgraded.startswith("argon2$")
    assert store.verify("admin", "secret").password_hash == upgraded
