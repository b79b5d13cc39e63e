"""
Twitter Clone Backend - FastAPI Application Factory
====================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   uvicorn (`uvicorn twitter_clone.main:app`) and the test suite.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌─────────────────────────┐ ┌──────┐ ┌────────┐    │
    │  │ Request ID + access log │→│ GZip │→│  CORS  │    │
    │  └─────────────────────────┘ └──────┘ └────────┘    │
    │                                                     │
    │  Routes:                                            │
    │  ┌───────────────┐ ┌──────────────┐ ┌────────────┐  │
    │  │ /register/    │ │ /user/...    │ │ /health    │  │
    │  │ /login/       │ │ /tweets/...  │ │            │  │
    │  │ (public)      │ │ (auth gate)  │ │ (public)   │  │
    │  └───────────────┘ └──────────────┘ └────────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Validation/Conflict/Credentials→400          │   │
    │  │ Authentication/Authorization→401 │ DB→500    │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Warn about unsafe configuration
    3. Open the database (create tables if enabled); failure aborts startup

    Shutdown:
    1. Dispose database engine (close all connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from twitter_clone import __version__
from twitter_clone.config import settings
from twitter_clone.database import check_connection, create_tables, dispose_engine
from twitter_clone.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DatabaseError,
    InvalidCredentialsError,
    TwitterCloneError,
    ValidationError,
)
from twitter_clone.middleware.request_context import (
    REQUEST_ID_HEADER,
    RequestContextMiddleware,
    request_id_var,
)
from twitter_clone.routes import accounts, health, tweets, users

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s on stdout.
    Called once during app startup, before any other initialization.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party libraries log every operation at DEBUG/INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: logging, configuration warnings, database bootstrap.
    Shutdown: engine disposal.

    A database that cannot be opened is fatal: the error is logged and
    re-raised, which makes uvicorn abort startup and exit.
    """
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("Twitter Clone backend starting up (v%s)...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Insecure but functional: keep serving
        logger.warning("Configuration warning: %s", str(e))

    try:
        if settings.create_tables_on_startup:
            await create_tables()
        else:
            await check_connection()
    except Exception as e:
        logger.error("DB Error: %s", str(e))
        await dispose_engine()
        raise

    logger.info("Database connected")
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Twitter Clone backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_body(error: str, message: str, details: Optional[dict] = None) -> dict:
    body = {"error": error, "message": message, "request_id": request_id_var.get("")}
    if details:
        body["details"] = details
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map application exceptions to HTTP status codes and JSON error bodies.

    Handler table:
        ValidationError          → 400 validation_error
        ConflictError            → 400 conflict
        InvalidCredentialsError  → 400 invalid_credentials
        AuthenticationError      → 401 authentication_error
        AuthorizationError       → 401 invalid_request
        DatabaseError            → 500 server_error
        TwitterCloneError (base) → 500 server_error
        Exception (fallback)     → 500 internal_server_error

    `message` always carries the exception's client-safe message; context
    dicts are logged, and only a ValidationError's field is returned.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        details = {"field": exc.field} if exc.field else None
        return JSONResponse(
            status_code=400,
            content=_error_body("validation_error", exc.message, details),
        )

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        return JSONResponse(status_code=400, content=_error_body("conflict", exc.message))

    @app.exception_handler(InvalidCredentialsError)
    async def handle_invalid_credentials(request: Request, exc: InvalidCredentialsError):
        return JSONResponse(
            status_code=400,
            content=_error_body("invalid_credentials", exc.message),
        )

    @app.exception_handler(AuthenticationError)
    async def handle_authentication_error(request: Request, exc: AuthenticationError):
        logger.info(
            "[%s] Authentication rejected: %s",
            request_id_var.get(""),
            exc.context.get("reason", "unknown"),
        )
        return JSONResponse(
            status_code=401,
            content=_error_body("authentication_error", exc.message),
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(AuthorizationError)
    async def handle_authorization_error(request: Request, exc: AuthorizationError):
        return JSONResponse(status_code=401, content=_error_body("invalid_request", exc.message))

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        """Generic message to the client, context logged server-side."""
        rid = request_id_var.get("")
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content=_error_body(
                "server_error", "An internal error occurred. Please try again later."
            ),
        )

    @app.exception_handler(TwitterCloneError)
    async def handle_app_error(request: Request, exc: TwitterCloneError):
        rid = request_id_var.get("")
        logger.error("[%s] Unhandled application error: %s", rid, exc.message)
        return JSONResponse(status_code=500, content=_error_body("server_error", exc.message))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """
        Catch-all: stack trace goes to the log, never to the client.

        Starlette runs this handler outside the user middleware stack, so the
        request-ID header has to be set here.
        """
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content=_error_body(
                "internal_server_error",
                "An unexpected error occurred. Please try again or contact support.",
            ),
            headers={REQUEST_ID_HEADER: rid} if rid else None,
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns: Fully configured FastAPI instance ready to receive requests.
    """
    app = FastAPI(
        title="Twitter Clone API",
        description=(
            "Minimal social network backend: registration, bearer-token login, "
            "tweets, follow-graph feed and like/reply counts."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Executes in REVERSE order of addition: RequestContext → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestContextMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(accounts.router)
    app.include_router(users.router)
    app.include_router(tweets.router)
    app.include_router(health.router)

    return app


# uvicorn expects `twitter_clone.main:app` to be importable
app = create_app()
