"""
Access policy.

``can_access`` is the single place that decides whether a role may touch a
resource (a partition key or ``accounts``). Every write route goes through
``authorize`` exactly once before calling into a store.
"""
from __future__ import annotations

from enum import Enum
from typing import Optional, Protocol

from portal.core.errors import Forbidden, Unauthorized
from portal.domain.partitions import ACCOUNTS, EDITOR, is_partition, is_region


class Action(str, Enum):
    READ = "read"
    WRITE = "write"


class HasRole(Protocol):
    role: str


def can_access(role: Optional[str], resource: str, action: Action = Action.WRITE) -> bool:
    if action is Action.READ and is_partition(resource):
        return True
    if not role:
        return False
    if role == EDITOR:
        return resource == ACCOUNTS or is_partition(resource)
    return is_region(role) and role == resource


def authorize(identity: Optional[HasRole], resource: str, action: Action = Action.WRITE) -> None:
    """Raise Unauthorized (no session) or Forbidden (wrong role) on denial."""
    role = identity.role if identity is not None else None
    if can_access(role, resource, action):
        return
    if identity is None:
        raise Unauthorized()
    raise Forbidden()
