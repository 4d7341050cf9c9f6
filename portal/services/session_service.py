"""Session helpers (issue tokens, cookies, validation)."""
from __future__ import annotations

import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Request, Response
from sqlalchemy import delete, update

from portal.core.config import get_settings
from portal.db.models import SessionRecord
from portal.db.session import get_session

SESSION_COOKIE_NAME = "session"


@dataclass(frozen=True)
class Identity:
    identifier: str
    role: str


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def session_ttl_seconds() -> int:
    """Lifetime shared by the stored session and its cookie, never under a minute."""
    return max(60, get_settings().session_ttl_seconds)


def issue_session(identifier: str, role: str) -> str:
    """Create a new session token with a fixed expiry counted from now."""
    token = secrets.token_urlsafe(32)
    ttl = session_ttl_seconds()
    now = datetime.now(timezone.utc)
    with get_session() as session:
        session.add(
            SessionRecord(
                token=token,
                identifier=identifier,
                role=role,
                created_at=now,
                expires_at=now + timedelta(seconds=ttl),
            )
        )
        session.commit()
    return token


def resolve_session(token: str | None) -> Optional[Identity]:
    """Return the identity for a token, deleting it when it has expired."""
    if not token:
        return None
    now = datetime.now(timezone.utc)
    with get_session() as session:
        record = session.get(SessionRecord, token)
        if not record:
            return None
        if record.expires_at and _as_utc(record.expires_at) <= now:
            session.delete(record)
            session.commit()
            return None
        return Identity(identifier=record.identifier, role=record.role)


def current_identity(request: Request) -> Optional[Identity]:
    """Return the identity behind the current session cookie, if any."""
    return resolve_session(request.cookies.get(SESSION_COOKIE_NAME))


def delete_session(token: str | None) -> None:
    if not token:
        return
    with get_session() as session:
        entity = session.get(SessionRecord, token)
        if entity:
            session.delete(entity)
            session.commit()


def delete_sessions_for(identifier: str) -> None:
    with get_session() as session:
        session.execute(delete(SessionRecord).where(SessionRecord.identifier == identifier))
        session.commit()


def rebind_sessions(original: str, identifier: str, role: str) -> None:
    """Point live sessions of a renamed or re-roled account at its new values."""
    with get_session() as session:
        stmt = (
            update(SessionRecord)
            .where(SessionRecord.identifier == original)
            .values(identifier=identifier, role=role)
        )
        session.execute(stmt)
        session.commit()


def set_session_cookie(response: Response, token: str) -> None:
    settings = get_settings()
    response.set_cookie(
        SESSION_COOKIE_NAME,
        token,
        httponly=True,
        secure=settings.secure_cookies,
        samesite="strict",
        max_age=session_ttl_seconds(),
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(SESSION_COOKIE_NAME, path="/")
