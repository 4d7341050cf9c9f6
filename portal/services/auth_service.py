"""
Authentication use cases: admin login and logout.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from portal.core.logging import get_logger
from portal.core.errors import InvalidCredentials
from portal.domain.partitions import admin_page_for, landing_page_for
from portal.services import session_service
from portal.services.account_service import CredentialStore

log = get_logger("portal.auth")


@dataclass
class LoginSuccess:
    identifier: str
    role: str
    session_token: str
    redirect_to: str


class AuthService:
    """Turns verified credentials into sessions and back."""

    def __init__(self, credentials: CredentialStore) -> None:
        self.credentials = credentials

    def login(self, identifier, password) -> LoginSuccess:
        try:
            account = self.credentials.verify(identifier, password)
        except InvalidCredentials:
            log.warning("Failed login for %r", identifier)
            raise
        token = session_service.issue_session(account.identifier, account.role)
        log.info("Login %s (%s)", account.identifier, account.role)
        return LoginSuccess(
            identifier=account.identifier,
            role=account.role,
            session_token=token,
            redirect_to=admin_page_for(account.role),
        )

    def logout(self, token: Optional[str]) -> str:
        identity = session_service.resolve_session(token)
        session_service.delete_session(token)
        if identity:
            log.info("Logout %s", identity.identifier)
        return landing_page_for(identity.role if identity else None)
