"""
Notes API — FastAPI Application Factory
========================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance
       with its own NoteStore attached to app.state.
Who:   Called by uvicorn (uvicorn notes_api.main:app), by run(), and by tests.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌──────────┐ ┌──────────┐ ┌────────┐  │
    │  │ Req ID   │→│ Logging  │→│  CORS    │→│  GZip  │  │
    │  └──────────┘ └──────────┘ └──────────┘ └────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────┐ ┌──────────┐ ┌─────────────────┐  │
    │  │ /notes CRUD  │ │ GET /docs│ │ GET /health     │  │
    │  └──────────────┘ └──────────┘ └─────────────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Validation→400 │ NotFound→404 │ Other→500    │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Load notes from the JSON file (missing file = empty store,
       unreadable file = logged, empty store)
    3. Log startup complete

    Shutdown:
    1. Log shutdown (every mutation is already on disk)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from notes_api import __version__
from notes_api.config import Settings, settings as default_settings
from notes_api.exceptions import NotesAPIError, NotFoundError, ValidationError
from notes_api.middleware.cors import PermissiveCORSMiddleware, cors_headers
from notes_api.middleware.logging import RequestLoggingMiddleware
from notes_api.middleware.request_id import (
    REQUEST_ID_HEADER,
    RequestIDMiddleware,
    request_id_var,
)
from notes_api.routes import docs, health, notes
from notes_api.services.note_store import NoteStore
from notes_api.services.persistence import JsonFilePersistence

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s

    Called once during app startup, before the store is loaded, so load
    results and errors reach the log.
    """
    log_format = (
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    )

    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
        force=True,
    )

    # notes_api.access already logs every request
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: configure logging, then load the store from disk.
    A failed load leaves the store empty and the server running.
    """
    config: Settings = app.state.settings
    store: NoteStore = app.state.note_store

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(config.log_level)
    logger.info("=" * 60)
    logger.info("Notes API starting up...")

    if not await store.load():
        logger.warning("Continuing with an empty store; %s was not loaded", config.data_file)

    logger.info("Server ready at http://%s:%d", config.backend_host, config.backend_port)
    logger.info("Endpoint catalog: http://%s:%d/docs", config.backend_host, config.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Notes API shutting down (%d notes in memory)", store.count)


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _describe_request_errors(exc: RequestValidationError) -> str:
    """Flatten FastAPI's error list into one readable sentence."""
    parts = []
    for err in exc.errors():
        location = ".".join(str(p) for p in err.get("loc", ())[1:]) or "body"
        parts.append(f"{location}: {err.get('msg', 'invalid value')}")
    return "Invalid request body: " + "; ".join(parts)


_HTTP_ERROR_CODES = {
    404: "not_found",
    405: "method_not_allowed",
}


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler hierarchy:
        ValidationError         → 400 Bad Request (malformed id)
        RequestValidationError  → 400 Bad Request (malformed body)
        NotFoundError           → 404 Not Found
        HTTPException           → 404/405 (unknown path, wrong method)
        NotesAPIError (base)    → 500 Internal Server Error
        Exception (fallback)    → 500 Internal Server Error

    Every body carries an `error` string; internal details (paths, OS
    errors, stack traces) are logged server-side only.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = request_id_var.get("")
        logger.info("[%s] Validation error: %s", rid, exc.message)
        return JSONResponse(
            status_code=400,
            content={
                "error": exc.message,
                "code": "validation_error",
                "details": exc.context,
                "request_id": rid,
            },
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        """Body was not JSON, not an object, or had wrongly typed fields."""
        rid = request_id_var.get("")
        message = _describe_request_errors(exc)
        logger.info("[%s] %s", rid, message)
        return JSONResponse(
            status_code=400,
            content={
                "error": message,
                "code": "validation_error",
                "details": [
                    {
                        "loc": [str(p) for p in err.get("loc", ())],
                        "msg": err.get("msg", ""),
                        "type": err.get("type", ""),
                    }
                    for err in exc.errors()
                ],
                "request_id": rid,
            },
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        rid = request_id_var.get("")
        return JSONResponse(
            status_code=404,
            content={
                "error": exc.message,
                "code": "not_found",
                "request_id": rid,
            },
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException):
        """Router-level errors: unknown path (404), unsupported method (405)."""
        rid = request_id_var.get("")
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": str(exc.detail),
                "code": _HTTP_ERROR_CODES.get(exc.status_code, "http_error"),
                "request_id": rid,
            },
            headers=exc.headers,
        )

    @app.exception_handler(NotesAPIError)
    async def handle_app_error(request: Request, exc: NotesAPIError):
        rid = request_id_var.get("")
        logger.error("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "An internal error occurred. Please try again later.",
                "code": "server_error",
                "request_id": rid,
            },
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """
        Runs in ServerErrorMiddleware, outside the CORS and request-id
        middleware: the request id comes from request.state and the CORS
        headers are added here.
        """
        rid = request_id_var.get("") or getattr(request.state, "request_id", "")
        logger.error(
            "[%s] Unexpected error: %s",
            rid,
            str(exc),
            exc_info=True,
        )
        headers = cors_headers(request.app.state.settings.cors_origin)
        if rid:
            headers[REQUEST_ID_HEADER] = rid
        return JSONResponse(
            status_code=500,
            content={
                "error": "An unexpected error occurred.",
                "code": "internal_server_error",
                "request_id": rid,
            },
            headers=headers,
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Explicit configuration (tests pass one pointing at a temp
                  data file). Defaults to the module-level singleton.

    Returns:
        FastAPI instance with a fresh, not-yet-loaded NoteStore on
        app.state.note_store. The lifespan loads it on startup.
    """
    config = settings or default_settings

    app = FastAPI(
        title="Notes API",
        description="Simple REST API for managing short text notes, mirrored to a JSON file.",
        version=__version__,
        docs_url="/swagger",       # /docs is the hand-written endpoint catalog
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.settings = config
    app.state.note_store = NoteStore(
        JsonFilePersistence(config.data_file, atomic_write=config.atomic_write)
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition:
    # RequestID → Logging → CORS → GZip → routes
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(PermissiveCORSMiddleware, allow_origin=config.cors_origin)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(notes.router)
    app.include_router(docs.router)
    app.include_router(health.router)

    return app


def run() -> None:
    """Console entry point: serve the module-level app with uvicorn."""
    import uvicorn

    uvicorn.run(
        app,
        host=default_settings.backend_host,
        port=default_settings.backend_port,
        log_level=default_settings.log_level.lower(),
    )


# ── Application Instance ─────────────────────────────────────────────────
# uvicorn expects `notes_api.main:app` to be importable
app = create_app()


if __name__ == "__main__":
    run()
