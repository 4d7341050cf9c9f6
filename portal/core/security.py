"""Security helpers (hashing and verification)."""

from __future__ import annotations

import bcrypt
from argon2 import PasswordHasher, exceptions as argon_exc

_ph = PasswordHasher()
_PREFIX = "argon2$"
# users.csv tables from older deployments hold bcrypt hashes
_LEGACY_PREFIXES = ("$2a$", "$2b$", "$2y$")


def hash_password(password: str) -> str:
    """Create a modern Argon2 hash with a prefix for detection."""
    hashed = _ph.hash(password)
    return f"{_PREFIX}{hashed}"


# Verified against when the account does not exist, so unknown identifiers
# cost the same as a wrong password.
_DUMMY_HASH = hash_password("portal-dummy-password")


def _legacy_verify(password: str, stored: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), stored.encode("utf-8"))
    except ValueError:
        return False


def verify_password(password: str, stored_hash: str | None) -> bool:
    stored = stored_hash or ""
    password = password or ""
    if stored.startswith(_LEGACY_PREFIXES):
        return _legacy_verify(password, stored)
    if not stored.startswith(_PREFIX):
        return False
    hashed = stored[len(_PREFIX) :]
    try:
        return _ph.verify(hashed, password)
    except (argon_exc.VerifyMismatchError, argon_exc.VerificationError, argon_exc.InvalidHashError):
        return False


def needs_rehash(stored_hash: str | None) -> bool:
    """True for legacy bcrypt hashes and Argon2 hashes built with outdated parameters."""
    stored = stored_hash or ""
    if not stored.startswith(_PREFIX):
        return True
    try:
        return _ph.check_needs_rehash(stored[len(_PREFIX) :])
    except argon_exc.InvalidHashError:
        return True


def burn_verification(password: str) -> None:
    """Run a verify that always fails, to equalize timing for unknown accounts."""
    verify_password(password, _DUMMY_HASH)
