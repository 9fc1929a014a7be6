"""
Contacts API: FastAPI Application Factory
=========================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance
       bound to a ContactStore (built from settings unless one is injected).
Who:   uvicorn (`uvicorn contacts_api.main:app`), `python -m contacts_api`, tests.
When:  Once at server startup.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌──────────┐ ┌──────┐ ┌──────┐        │
    │  │  Req ID  │→│ Logging  │→│ GZip │→│ CORS │        │
    │  └──────────┘ └──────────┘ └──────┘ └──────┘        │
    │                                                     │
    │  Routes:                                            │
    │  /contacts (CRUD)   /health   /   /api-docs         │
    │                                                     │
    │  Exception Handlers:                                │
    │  ErrorKind → status (STATUS_BY_KIND), body → 400,   │
    │  unknown route → 404, anything else → 500           │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, connect the contact store. A connection
              failure raises StoreConnectionError out of the lifespan and
              uvicorn exits instead of serving.
    Shutdown: dispose the store's connection pool.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from contacts_api import __version__
from contacts_api.config import settings
from contacts_api.database import ContactStore
from contacts_api.exceptions import ContactsAPIError, ErrorKind
from contacts_api.middleware.logging import RequestLoggingMiddleware
from contacts_api.middleware.request_id import (
    REQUEST_ID_HEADER,
    request_id_var,
    RequestIDMiddleware,
)
from contacts_api.routes import contacts, health, index
from contacts_api.routes.index import AVAILABLE_ROUTES

logger = logging.getLogger(__name__)


# The only place error kinds meet HTTP
STATUS_BY_KIND: Dict[ErrorKind, int] = {
    ErrorKind.MISSING_FIELDS: 400,
    ErrorKind.INVALID_LENGTH: 400,
    ErrorKind.INVALID_EMAIL: 400,
    ErrorKind.INVALID_DATE: 400,
    ErrorKind.INVALID_IDENTIFIER: 400,
    ErrorKind.MALFORMED_BODY: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.STORE_UNAVAILABLE: 500,
    ErrorKind.STORE_OPERATION_FAILED: 500,
}


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure root logging for the whole application.

    Format: 2024-01-15T12:00:00 [INFO] contacts_api.access: GET /contacts 200 ...
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party loggers are chatty at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Connect the contact store on startup and release it on shutdown.

    Raises:
        StoreConnectionError: propagated on purpose; the server must not start
        without a store.
    """
    setup_logging()
    logger.info("=" * 60)
    logger.info("Contacts API %s starting up (environment=%s)", __version__, settings.environment)

    store: ContactStore = app.state.store
    logger.info("Connecting to contact store...")
    await store.connect()

    logger.info("Server ready at http://%s:%d", settings.host, settings.port)
    logger.info("API docs: http://%s:%d/api-docs", settings.host, settings.port)
    logger.info("=" * 60)

    yield

    logger.info("Contacts API shutting down...")
    await store.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _request_id(request: Request) -> str:
    """
    The current request ID.

    The catch-all handler runs in ServerErrorMiddleware, outside
    RequestIDMiddleware, after the ContextVar has been reset; the copy on
    `request.state` (shared through the ASGI scope) is still there.
    """
    return request_id_var.get("") or getattr(request.state, "request_id", "")


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Body format for every error:
        {"error": <kind>, "message": ..., "details": {...}?, "request_id": ...}

    Client errors (4xx) include their details. Server errors (5xx) include
    the underlying store message outside production; it is always logged.
    """

    @app.exception_handler(ContactsAPIError)
    async def handle_contacts_api_error(request: Request, exc: ContactsAPIError):
        rid = _request_id(request)
        status_code = STATUS_BY_KIND[exc.kind]
        content = {
            "error": exc.kind.value,
            "message": exc.message,
            "request_id": rid,
        }

        if status_code >= 500:
            logger.error(
                "[%s] %s: %s | Context: %s", rid, exc.kind.value, exc.message, exc.context
            )
            if exc.context and not settings.is_production:
                content["details"] = exc.context
        else:
            logger.warning("[%s] %s: %s", rid, exc.kind.value, exc.message)
            if exc.context:
                content["details"] = exc.context

        return JSONResponse(status_code=status_code, content=content)

    @app.exception_handler(RequestValidationError)
    async def handle_malformed_body(request: Request, exc: RequestValidationError):
        """Structurally invalid body: not JSON, not an object, wrong types, unknown keys."""
        rid = _request_id(request)
        errors = [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
            for err in exc.errors()
        ]
        logger.warning("[%s] Malformed request body: %s", rid, errors)
        return JSONResponse(
            status_code=STATUS_BY_KIND[ErrorKind.MALFORMED_BODY],
            content={
                "error": ErrorKind.MALFORMED_BODY.value,
                "message": "Request body is malformed. Expected a JSON object with "
                           "firstName, lastName, email, favoriteColor and birthday strings.",
                "details": {"errors": errors},
                "request_id": rid,
            },
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        rid = _request_id(request)
        if exc.status_code == 404:
            return JSONResponse(
                status_code=404,
                content={
                    "error": "route_not_found",
                    "message": f"The route {request.url.path} does not exist",
                    "details": {"availableRoutes": AVAILABLE_ROUTES},
                    "request_id": rid,
                },
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": "http_error", "message": str(exc.detail), "request_id": rid},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Catch-all; the stack trace is logged, never returned."""
        rid = _request_id(request)
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        # This response never passes back through RequestIDMiddleware
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred. Please try again later.",
                "request_id": rid,
            },
            headers={REQUEST_ID_HEADER: rid} if rid else None,
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(store: Optional[ContactStore] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        store: ContactStore to serve from. Built from settings when omitted.
               The store is connected by the lifespan, not here.

    Returns:
        Fully configured FastAPI instance.
    """
    app = FastAPI(
        title="Contacts API",
        description="A REST API for managing contacts with full CRUD operations.",
        version=__version__,
        docs_url="/api-docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.store = store if store is not None else ContactStore.from_settings()

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in reverse order of addition:
    # RequestID → Logging → GZip → CORS
    origins = settings.cors_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(contacts.router)
    app.include_router(health.router)
    app.include_router(index.router)

    return app


# uvicorn expects `contacts_api.main:app` to be importable
app = create_app()
