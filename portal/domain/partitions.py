"""Partition keys and account roles."""
from __future__ import annotations

GLOBAL = "global"
REGIONS = (
    "africa",
    "asia",
    "australia",
    "europe",
    "north-america",
    "south-america",
)
PARTITIONS = (GLOBAL,) + REGIONS

EDITOR = "editor"
ROLES = (EDITOR,) + REGIONS

# Resource name for account management, alongside the partition keys.
ACCOUNTS = "accounts"


def is_region(value: str | None) -> bool:
    return value in REGIONS


def is_partition(value: str | None) -> bool:
    return value in PARTITIONS


def is_valid_role(value: str | None) -> bool:
    """Return True for ``editor`` or a region key; ``global`` is not a role."""
    return value in ROLES


def admin_page_for(role: str) -> str:
    """Where a freshly logged-in account lands."""
    if role == EDITOR:
        return "/admin.html"
    return f"/{role}/admin.html"


def landing_page_for(role: str | None) -> str:
    """Where a logged-out account lands."""
    if is_region(role):
        return f"/{role}/"
    return "/"
