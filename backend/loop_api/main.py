"""
Loop API — FastAPI Application Factory
========================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() wires middleware, exception handlers, routers and the two
       shared resources (backend store, realtime connection) and returns the
       app. uvicorn serves the module-level `app` (uvicorn loop_api.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:  Request ID → Logging → GZip → CORS    │
    │                                                     │
    │  app.state:   store (DataStore)                     │
    │               realtime (RealtimeConnection)         │
    │                                                     │
    │  Routes:      admin │ shop │ loops │ messages │     │
    │               users │ health                        │
    │                                                     │
    │  Exception Handlers:                                │
    │   BadRequest→400 │ Unauthenticated/Invalid→401 │    │
    │   Forbidden→403 │ NotFound→404 │ Backend→500        │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Configure logging
    2. Check environment variables (log only, never fatal)
    3. Open the realtime connection (if enabled)

    Shutdown:
    1. Close the realtime connection
    2. Close the backend store's connection pool
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from loop_api import __version__
from loop_api.config import check_environment, log_environment_status, settings
from loop_api.exceptions import (
    BackendError,
    BadRequestError,
    ForbiddenError,
    InvalidCredentialError,
    LoopError,
    NotFoundError,
    UnauthenticatedError,
)
from loop_api.middleware.logging import RequestLoggingMiddleware
from loop_api.middleware.request_id import RequestIDMiddleware, request_id_var
from loop_api.routes import admin, health, loops, messages, shop, users
from loop_api.services.realtime import RealtimeConnection
from loop_api.services.store_base import DataStore
from loop_api.services.supabase_store import SupabaseStore

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Output: stdout (collected by the container runtime)
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # These log every request/frame at INFO or DEBUG
    for noisy in ("uvicorn.access", "httpx", "httpcore", "socketio", "engineio"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: logging, environment check, realtime connect.
    Shutdown: realtime disconnect, backend pool close.

    A failed environment check or an unreachable realtime server is logged;
    the server still starts.
    """
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("Loop API %s starting up...", __version__)

    log_environment_status(settings)
    if not check_environment(settings):
        logger.error("Fix the configuration and restart the server.")

    realtime: RealtimeConnection = app.state.realtime
    if settings.realtime_enabled:
        await realtime.open()
    else:
        logger.info("Realtime connection disabled by configuration")

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Loop API shutting down...")
    await realtime.close()
    await app.state.store.close()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_body(exc: LoopError, rid: str, message: Optional[str] = None, details: Optional[dict] = None) -> dict:
    body = {
        "success": False,
        "error": exc.error_code,
        "message": message or exc.message,
        "request_id": rid,
    }
    if details:
        body["details"] = details
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler hierarchy:
        BadRequestError         → 400 (with field details)
        UnauthenticatedError    → 401
        InvalidCredentialError  → 401
        ForbiddenError          → 403
        NotFoundError           → 404
        BackendError            → 500 (generic message; detail logged)
        LoopError (base)        → its status_code
        Exception (fallback)    → 500

    Security: exc.context is logged server-side; only BadRequestError
    returns it, because it only names the caller's own fields.
    """

    @app.exception_handler(BadRequestError)
    async def handle_bad_request(request: Request, exc: BadRequestError):
        rid = request_id_var.get("")
        logger.warning("[%s] Bad request: %s", rid, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc, rid, details=exc.context),
        )

    @app.exception_handler(UnauthenticatedError)
    async def handle_unauthenticated(request: Request, exc: UnauthenticatedError):
        rid = request_id_var.get("")
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc, rid))

    @app.exception_handler(InvalidCredentialError)
    async def handle_invalid_credential(request: Request, exc: InvalidCredentialError):
        rid = request_id_var.get("")
        if exc.context:
            logger.warning("[%s] Credential rejected | Context: %s", rid, exc.context)
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc, rid))

    @app.exception_handler(ForbiddenError)
    async def handle_forbidden(request: Request, exc: ForbiddenError):
        rid = request_id_var.get("")
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc, rid))

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        rid = request_id_var.get("")
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc, rid))

    @app.exception_handler(BackendError)
    async def handle_backend_error(request: Request, exc: BackendError):
        """Backend failure: generic message to the caller, details to the log."""
        rid = request_id_var.get("")
        logger.error("[%s] Backend error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content=_error_body(exc, rid, message="An internal error occurred. Please try again later."),
        )

    @app.exception_handler(LoopError)
    async def handle_loop_error(request: Request, exc: LoopError):
        rid = request_id_var.get("")
        logger.error("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc, rid))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """
        Catch-all: stack trace to the log, generic 500 to the caller.

        Runs in ServerErrorMiddleware, after RequestIDMiddleware has reset
        request_id_var, so the ID comes from request.state.
        """
        rid = getattr(request.state, "request_id", "") or request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": "internal_server_error",
                "message": "Internal server error",
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    store: Optional[DataStore] = None,
    realtime: Optional[RealtimeConnection] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        store:    backend store; a SupabaseStore from settings when omitted
        realtime: realtime connection; built from settings when omitted

    Both end up on app.state and reach handlers only through the
    get_store / get_realtime dependencies.
    """
    app = FastAPI(
        title="Loop API",
        description=(
            "Server-side API of the Loop social network: profiles, quests, "
            "shop inventory, loop interactions and message reactions."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.store = store if store is not None else SupabaseStore.from_settings(settings)
    app.state.realtime = realtime if realtime is not None else RealtimeConnection(
        settings.realtime_url,
        reconnection_attempts=settings.realtime_reconnection_attempts,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Executes in REVERSE order of addition: RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(admin.router)
    app.include_router(shop.router)
    app.include_router(loops.router)
    app.include_router(messages.router)
    app.include_router(users.router)
    app.include_router(health.router)

    return app


# ── Application Instance ─────────────────────────────────────────────────
app = create_app()
