from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response

from portal.domain.access import Action, authorize
from portal.domain.partitions import ACCOUNTS
from portal.routers.state import get_credentials
from portal.services import session_service
from portal.services.account_service import CredentialStore
from portal.services.session_service import Identity, current_identity

router = APIRouter(prefix="/api/users", tags=["users"])


def _editor(request: Request, action: Action) -> Identity:
    identity = current_identity(request)
    authorize(identity, ACCOUNTS, action)
    return identity


@router.get("")
def list_users(request: Request, store: CredentialStore = Depends(get_credentials)):
    _editor(request, Action.READ)
    return store.list_accounts()


@router.post("")
def create_user(request: Request, payload: dict, store: CredentialStore = Depends(get_credentials)):
    _editor(request, Action.WRITE)
    account = store.create_account(payload.get("id"), payload.get("password"), payload.get("role"))
    return JSONResponse(account.public(), status_code=201)


@router.put("/{user_id:path}")
def update_user(request: Request, user_id: str, payload: dict, store: CredentialStore = Depends(get_credentials)):
    _editor(request, Action.WRITE)
    account = store.update_account(
        user_id,
        new_identifier=payload.get("id"),
        password=payload.get("password"),
        role=payload.get("role"),
    )
    session_service.rebind_sessions(user_id, account.identifier, account.role)
    return account.public()


@router.delete("/{user_id:path}")
def delete_user(request: Request, user_id: str, store: CredentialStore = Depends(get_credentials)):
    identity = _editor(request, Action.WRITE)
    store.delete_account(user_id, identity.identifier)
    session_service.delete_sessions_for(user_id)
    return Response(status_code=204)
