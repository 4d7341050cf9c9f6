#!/usr/bin/env python3
"""
Create an account (or reset its password/role) directly in the users table.

Usage:
  python scripts/add_user.py --id admin --role editor [--password secret] [--reset]
"""
from __future__ import annotations

import argparse
import getpass
import sys

from portal.core.config import get_settings
from portal.domain.partitions import ROLES, is_valid_role
from portal.services.account_service import CredentialStore


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Create a portal account")
    ap.add_argument("--id", required=True, help="Username (case-sensitive)")
    ap.add_argument("--role", required=True, help=f"One of: {', '.join(ROLES)}")
    ap.add_argument("--password", help="Password (prompted when omitted)")
    ap.add_argument("--reset", action="store_true", help="Reset password and role if the account exists")
    args = ap.parse_args(argv)

    identifier = (args.id or "").strip()
    if not identifier:
        raise SystemExit("Invalid username")
    if not is_valid_role(args.role):
        raise SystemExit(f"Invalid role '{args.role}'")

    store = CredentialStore(get_settings().users_csv_path)
    store.load()
    existing = store.get(identifier)
    if existing and not args.reset:
        raise SystemExit(f"User '{identifier}' already exists (use --reset)")

    password = args.password or getpass.getpass("Password: ")
    if not password:
        raise SystemExit("Password must not be empty")

    account = store.ensure_account(identifier, password, args.role, reset_existing=args.reset)
    print("OK: account saved")
    print(f"  User: {account.identifier}")
    print(f"  Role: {account.role}")
    print(f"  File: {store.path}")
    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except Exception as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
