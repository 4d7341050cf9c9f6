from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from portal.core.config import get_settings
from portal.core.rate_limiter import rate_limit_ip, reset_ip
from portal.routers.state import get_auth_service
from portal.services.auth_service import AuthService
from portal.services.session_service import (
    SESSION_COOKIE_NAME,
    clear_session_cookie,
    set_session_cookie,
)

router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/login/admin")
def login_admin(request: Request, payload: dict, auth: AuthService = Depends(get_auth_service)):
    settings = get_settings()
    rate_limit_ip(
        request.app.state.login_limiter,
        request,
        "auth:login",
        limit=settings.login_rate_limit,
        window_seconds=settings.login_rate_window_seconds,
    )
    result = auth.login(payload.get("username"), payload.get("password"))
    # a successful login clears the failures counted against this client
    reset_ip(request.app.state.login_limiter, request, "auth:login")
    # drop any session this browser already held
    previous = request.cookies.get(SESSION_COOKIE_NAME)
    if previous:
        auth.logout(previous)
    response = JSONResponse({"redirectTo": result.redirect_to})
    set_session_cookie(response, result.session_token)
    return response


@router.post("/logout")
def logout(request: Request, auth: AuthService = Depends(get_auth_service)):
    redirect_to = auth.logout(request.cookies.get(SESSION_COOKIE_NAME))
    response = JSONResponse({"redirectTo": redirect_to})
    clear_session_cookie(response)
    return response
