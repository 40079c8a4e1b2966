"""
FastAPI server for the Laundry Girl web app.

Serves the JSON API under /api/v1 and, when a front-end build is present,
the static single-page app at /.
"""
from __future__ import annotations

import logging
import urllib.parse
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from laundry_app import __version__
from laundry_app.api.rate_limit import limiter
from laundry_app.api.webapp import build_services, router as webapp_router, set_app_services
from laundry_app.api.webapp.common import SESSION_HEADER
from laundry_app.backend import BackendProtocol, create_backend
from laundry_app.core.config import Settings, load_settings
from laundry_app.core.exceptions import BackendException, LaundryException
from laundry_app.core.sentry_integration import capture_exception
from laundry_app.core.session_store import SessionStore

logger = logging.getLogger(__name__)

WEBAPP_DIST_PATH = Path(__file__).parent.parent.parent / "webapp" / "dist"

DEV_ORIGINS = [
    "http://localhost:5173",
    "http://localhost:8080",
    "http://localhost:3000",
    "http://127.0.0.1:5173",
    "http://127.0.0.1:8080",
]


def _origin_from_url(value: str | None) -> str | None:
    if not value:
        return None
    parsed = urllib.parse.urlsplit(value.strip())
    if not parsed.scheme or not parsed.netloc:
        return None
    return f"{parsed.scheme}://{parsed.netloc}"


def allowed_origins(settings: Settings) -> list[str]:
    origins: list[str] = []
    for raw in [settings.webapp_url, *settings.cors_origins]:
        origin = _origin_from_url(raw)
        if origin and origin not in origins:
            origins.append(origin)
    if settings.is_dev:
        origins.extend(origin for origin in DEV_ORIGINS if origin not in origins)
    return origins


def error_payload(message: str) -> dict:
    """Body shared by every error response; the UI shows ``notification`` as a toast."""
    return {"detail": message, "notification": {"type": "error", "message": message}}


async def laundry_exception_handler(request: Request, exc: LaundryException) -> JSONResponse:
    if isinstance(exc, BackendException):
        logger.error(f"Backend failure on {request.method} {request.url.path}: {exc.message}")
        capture_exception(exc, request={"method": request.method, "path": request.url.path})
    else:
        logger.info(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=error_payload(exc.message))


def create_api_app(
    settings: Settings | None = None,
    backend: BackendProtocol | None = None,
    session_store: SessionStore | None = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        settings: Loaded settings; read from the environment when omitted
        backend: Backend adapter; built from ``settings`` when omitted
        session_store: Session storage; Redis or memory per ``settings.redis_url``
    """
    settings = settings or load_settings()
    backend = backend or create_backend(settings)
    session_store = session_store or SessionStore(settings.redis_url)

    # bind immediately so the routes work even when lifespan events are not run
    set_app_services(build_services(settings, backend, session_store))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Laundry API starting (backend={settings.backend})")
        yield
        logger.info("Laundry API shutting down")
        await backend.close()

    app = FastAPI(
        title="Laundry Girl API",
        description="REST API for the Laundry Girl ordering web app",
        version=__version__,
        lifespan=lifespan,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(LaundryException, laundry_exception_handler)
    app.add_middleware(SlowAPIMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins(settings),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", SESSION_HEADER, "Sentry-Trace", "Baggage"],
        expose_headers=["Content-Length", "Content-Type", SESSION_HEADER],
    )

    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers["Content-Security-Policy"] = (
            "default-src 'self'; "
            "script-src 'self' 'unsafe-inline'; "
            "style-src 'self' 'unsafe-inline'; "
            "img-src 'self' data: https:; "
            "font-src 'self' data:; "
            "connect-src 'self'; "
            "frame-ancestors 'self'"
        )
        response.headers["X-Frame-Options"] = "SAMEORIGIN"
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        if request.url.path.startswith("/api/"):
            response.headers["Cache-Control"] = "no-store"
        return response

    # API routes must be registered before the static mount at /
    app.include_router(webapp_router)

    @app.get("/health")
    async def health():
        return {
            "status": "ok",
            "backend": settings.backend,
            "sessions": "redis" if session_store.uses_redis else "memory",
        }

    if WEBAPP_DIST_PATH.exists():
        logger.info(f"Mounting web app static files from {WEBAPP_DIST_PATH}")
        app.mount("/", StaticFiles(directory=str(WEBAPP_DIST_PATH), html=True), name="webapp")
    else:

        @app.get("/")
        async def root():
            return {"service": "Laundry Girl API", "version": __version__, "docs": "/api/docs"}

    return app


async def run_api_server(settings: Settings, host: str = "0.0.0.0") -> None:
    """Run the API under uvicorn inside the current event loop."""
    app = create_api_app(settings)

    config = uvicorn.Config(
        app,
        host=host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        access_log=True,
    )
    server = uvicorn.Server(config)

    logger.info(f"Starting Laundry API on http://{host}:{settings.port}")
    await server.serve()
