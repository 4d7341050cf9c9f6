"""Accessors for objects the app factory stores on ``app.state``."""
from __future__ import annotations

from fastapi import Request
from fastapi.templating import Jinja2Templates

from portal.services.account_service import CredentialStore
from portal.services.auth_service import AuthService
from portal.services.news_service import PartitionedNewsStore


def _state_attr(request: Request, name: str):
    value = getattr(getattr(request.app, "state", None), name, None)
    if value is None:
        raise RuntimeError(f"{name} not configured")
    return value


def get_news_store(request: Request) -> PartitionedNewsStore:
    return _state_attr(request, "news_store")


def get_credentials(request: Request) -> CredentialStore:
    return _state_attr(request, "credentials")


def get_auth_service(request: Request) -> AuthService:
    return _state_attr(request, "auth_service")


def get_templates(request: Request) -> Jinja2Templates:
    return _state_attr(request, "templates")
