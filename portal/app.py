from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from portal.core.config import get_settings
from portal.core.errors import PortalError
from portal.core.logging import configure_logging, get_logger
from portal.core.rate_limiter import RateLimiter
from portal.db.session import init_db
from portal.domain.partitions import EDITOR
from portal.routers import auth as auth_router
from portal.routers import news as news_router
from portal.routers import pages as pages_router
from portal.routers import users as users_router
from portal.services.account_service import CredentialStore
from portal.services.auth_service import AuthService
from portal.services.news_service import PartitionedNewsStore

BASE = Path(__file__).resolve().parent
WEB = BASE / "web"
TEMPLATES = BASE / "templates"

log = get_logger("portal.app")


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject baseline security headers (CSP, anti clickjacking, referrer policy)."""

    def __init__(self, app, *, enforce_hsts: bool) -> None:
        super().__init__(app)
        self._enforce_hsts = enforce_hsts

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers.setdefault(
            "Content-Security-Policy",
            "default-src 'self'; img-src 'self' data: https:; style-src 'self' 'unsafe-inline'; script-src 'self'",
        )
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer-when-downgrade")
        if self._enforce_hsts:
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


async def portal_error_handler(request: Request, exc: PortalError):
    return JSONResponse({"message": exc.message}, status_code=exc.status_code)


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        {"message": str(exc.detail)},
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse({"message": "Missing or malformed request body"}, status_code=400)


def build_stores(settings) -> tuple[PartitionedNewsStore, CredentialStore]:
    """Construct the stores and load durable state once."""
    news_store = PartitionedNewsStore(settings.news_db_path)
    news_store.load()
    credentials = CredentialStore(settings.users_csv_path)
    credentials.load()
    if settings.editor_bootstrap_id and settings.editor_bootstrap_password:
        credentials.ensure_account(settings.editor_bootstrap_id, settings.editor_bootstrap_password, EDITOR)
    return news_store, credentials


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)
    init_db()
    news_store, credentials = build_stores(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        log.info("Portal API ready (env=%s, port=%s)", settings.app_env, settings.port)
        yield
        news_store.flush()
        credentials.flush()
        log.info("Portal API stopped; data flushed")

    app = FastAPI(title="Continental News Portal API", lifespan=lifespan)
    app.state.settings = settings
    app.state.news_store = news_store
    app.state.credentials = credentials
    app.state.auth_service = AuthService(credentials)
    app.state.login_limiter = RateLimiter()
    app.state.templates = Jinja2Templates(directory=str(TEMPLATES))

    app.add_middleware(SecurityHeadersMiddleware, enforce_hsts=settings.app_env == "prod")
    app.add_exception_handler(PortalError, portal_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.mount("/static", StaticFiles(directory=str(WEB)), name="static")

    @app.get("/healthz")
    def healthz():
        return {"ok": True}

    app.include_router(auth_router.router)
    app.include_router(users_router.router)
    app.include_router(news_router.global_router)
    app.include_router(news_router.partition_router)
    app.include_router(pages_router.router)
    return app
