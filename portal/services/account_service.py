"""
Account (credential) store.

Accounts live in memory and are mirrored to a CSV table after every change.
Password hashes never leave this module except through ``Account`` objects
handed to the auth flow.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from portal.core.errors import Conflict, Forbidden, InvalidCredentials, InvalidInput, NotFound
from portal.core.logging import get_logger
from portal.core.security import burn_verification, hash_password, needs_rehash, verify_password
from portal.domain.partitions import is_valid_role
from portal.repositories import csv_storage

log = get_logger("portal.accounts")


@dataclass
class Account:
    identifier: str
    password_hash: str
    role: str

    def public(self) -> dict:
        return {"id": self.identifier, "role": self.role}


def _text(value) -> str:
    return value.strip() if isinstance(value, str) else ""


class CredentialStore:
    """Lookup, insert, update, delete and verify accounts."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._lock = threading.RLock()
        self._accounts: list[Account] = []

    # -------------------------------------- lifecycle --------------------------------------
    def load(self) -> None:
        try:
            rows = csv_storage.load(self.path)
        except (OSError, ValueError) as exc:
            log.error("Error loading accounts from %s: %s", self.path, exc)
            return
        with self._lock:
            self._accounts = [
                Account(identifier=row["id"], password_hash=row["passwordHash"], role=row["role"])
                for row in rows
            ]
        log.info("Loaded %d account(s) from %s", len(rows), self.path)

    def flush(self) -> None:
        with self._lock:
            self._persist()

    def _persist(self) -> None:
        rows = [
            {"id": acc.identifier, "passwordHash": acc.password_hash, "role": acc.role}
            for acc in self._accounts
        ]
        try:
            csv_storage.save(self.path, rows)
        except OSError:
            log.exception("Error saving accounts to %s", self.path)

    # -------------------------------------- helpers --------------------------------------
    def _find(self, identifier: str) -> Optional[Account]:
        for account in self._accounts:
            if account.identifier == identifier:
                return account
        return None

    def get(self, identifier: str) -> Optional[Account]:
        with self._lock:
            return self._find(identifier)

    # -------------------------------------- operations --------------------------------------
    def list_accounts(self) -> list[dict]:
        with self._lock:
            return [account.public() for account in self._accounts]

    def create_account(self, identifier, password, role) -> Account:
        identifier = _text(identifier)
        role = _text(role)
        if not identifier or not isinstance(password, str) or not password or not role:
            raise InvalidInput("Missing required fields")
        if not is_valid_role(role):
            raise InvalidInput(f"Invalid role '{role}'")
        password_hash = hash_password(password)
        with self._lock:
            if self._find(identifier):
                raise Conflict("User already exists")
            account = Account(identifier=identifier, password_hash=password_hash, role=role)
            self._accounts.append(account)
            self._persist()
        log.info("Created account %s with role %s", identifier, role)
        return account

    def update_account(self, original: str, new_identifier=None, password=None, role=None) -> Account:
        new_identifier = _text(new_identifier)
        role = _text(role)
        if role and not is_valid_role(role):
            raise InvalidInput(f"Invalid role '{role}'")
        # omitted and empty passwords both keep the current hash
        password_hash = hash_password(password) if isinstance(password, str) and password else None
        with self._lock:
            account = self._find(original)
            if not account:
                raise NotFound("User not found")
            if new_identifier and new_identifier != original and self._find(new_identifier):
                raise Conflict("New user ID already in use")
            account.identifier = new_identifier or account.identifier
            account.role = role or account.role
            if password_hash:
                account.password_hash = password_hash
            self._persist()
        log.info("Updated account %s (now %s, role %s)", original, account.identifier, account.role)
        return account

    def delete_account(self, identifier: str, acting_identifier: Optional[str]) -> None:
        if acting_identifier is not None and identifier == acting_identifier:
            raise Forbidden("Cannot delete your own account")
        with self._lock:
            account = self._find(identifier)
            if not account:
                raise NotFound("User not found")
            self._accounts.remove(account)
            self._persist()
        log.info("Deleted account %s", identifier)

    def verify(self, identifier, password) -> Account:
        password = password if isinstance(password, str) else ""
        account = self.get(_text(identifier)) if isinstance(identifier, str) else None
        if account is None:
            burn_verification(password)
            raise InvalidCredentials()
        if not verify_password(password, account.password_hash):
            raise InvalidCredentials()
        if needs_rehash(account.password_hash):
            self._upgrade_hash(account, password)
        return account

    def _upgrade_hash(self, account: Account, password: str) -> None:
        new_hash = hash_password(password)
        with self._lock:
            account.password_hash = new_hash
            self._persist()
        log.info("Upgraded password hash for %s", account.identifier)

    def ensure_account(self, identifier: str, password: str, role: str, *, reset_existing: bool = False) -> Account:
        """Create the account when missing; optionally reset password and role when present."""
        with self._lock:
            existing = self._find(identifier)
            if existing and not reset_existing:
                return existing
            if existing:
                return self.update_account(identifier, password=password, role=role)
            return self.create_account(identifier, password, role)
