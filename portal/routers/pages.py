from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from portal.domain.access import Action, can_access
from portal.domain.partitions import ACCOUNTS, GLOBAL, REGIONS, ROLES, is_region
from portal.routers.state import get_templates
from portal.services.session_service import current_identity

router = APIRouter(prefix="", tags=["pages"])

FORBIDDEN_HTML = "<h1>403 Forbidden</h1>"


def _role(request: Request) -> str | None:
    identity = current_identity(request)
    return identity.role if identity else None


def _admin_page(request: Request, partition: str):
    templates = get_templates(request)
    return templates.TemplateResponse(
        request,
        "admin.html",
        {"partition": partition, "regions": REGIONS, "api_base": _api_base(partition)},
    )


def _api_base(partition: str) -> str:
    return "/api" if partition == GLOBAL else f"/api/{partition}"


@router.get("/admin.html", response_class=HTMLResponse)
def global_admin(request: Request):
    if not can_access(_role(request), GLOBAL, Action.WRITE):
        return RedirectResponse("/", status_code=302)
    return _admin_page(request, GLOBAL)


@router.get("/usermanagement.html", response_class=HTMLResponse)
def user_management(request: Request):
    if not can_access(_role(request), ACCOUNTS, Action.WRITE):
        return HTMLResponse(FORBIDDEN_HTML, status_code=403)
    templates = get_templates(request)
    return templates.TemplateResponse(request, "usermanagement.html", {"roles": ROLES})


@router.get("/{partition}/admin.html", response_class=HTMLResponse)
def region_admin(request: Request, partition: str):
    if not is_region(partition):
        return HTMLResponse("<h1>404 Not Found</h1>", status_code=404)
    if not can_access(_role(request), partition, Action.WRITE):
        return HTMLResponse(FORBIDDEN_HTML, status_code=403)
    return _admin_page(request, partition)
