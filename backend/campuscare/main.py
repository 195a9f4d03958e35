"""
CampusCare Backend — FastAPI Application Factory
==================================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() builds the Database handle, registers middleware,
       exception handlers and routers, and returns the app.
Who:   uvicorn (`uvicorn campuscare.main:app`) and the test suite.

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                       FastAPI App                         │
    │                                                           │
    │  Middleware:  Request ID → Rate Limit → Logging → GZip   │
    │               → CORS                                      │
    │                                                           │
    │  Routers:     /api/auth  /api/users  /api/facilities      │
    │               /api/reports  /api/wellness  /api/menus     │
    │               /api/notifications  /health                 │
    │                                                           │
    │  Errors:      400 validation │ 401 auth │ 403 forbidden   │
    │               404 │ 409 │ 429 │ 500                       │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:   logging → config check (warn only) → wait for database
    Shutdown:  dispose the connection pool
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from campuscare import __version__
from campuscare.config import Settings, settings as default_settings
from campuscare.database import Database
from campuscare.exceptions import (
    AuthError,
    AuthorizationError,
    CampusCareError,
    DatabaseError,
    DuplicateError,
    NotFoundError,
    RateLimitExceededError,
    ValidationError,
)
from campuscare.middleware.logging import RequestLoggingMiddleware
from campuscare.middleware.rate_limit import RateLimitMiddleware
from campuscare.middleware.request_id import RequestIDMiddleware, request_id_var
from campuscare.routes import auth, facilities, health, menus, notifications, reports, users, wellness

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure the root logger once, writing to stdout.

    Format: 2026-01-15T12:00:00 [INFO] campuscare.access: GET /api/menus 200 ...
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Chatty at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    config: Settings = app.state.settings
    database: Database = app.state.database

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(config.log_level)
    logger.info("=" * 60)
    logger.info("CampusCare Backend %s starting up...", __version__)

    try:
        config.validate_required_for_production()
    except ValueError as e:
        # Warn only
        logger.warning("%s", str(e))

    await database.wait_until_ready(config.db_connect_attempts)
    if config.is_sqlite:
        await database.create_all()
        logger.info("SQLite database: tables created if missing")

    logger.info("Server ready at http://%s:%d", config.backend_host, config.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("CampusCare Backend shutting down...")
    await database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def error_response(
    status_code: int,
    error: str,
    message: str,
    details: Optional[dict] = None,
    headers: Optional[dict] = None,
) -> JSONResponse:
    content = {"error": error, "message": message, "request_id": request_id_var.get("")}
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def request_validation_fields(exc: RequestValidationError) -> List[dict]:
    """
    Flatten FastAPI's error list into {"field", "message"} pairs.

    `loc` is ("body", "stressLevel") or ("query", "limit"); the leading
    location is dropped and the rest joined with ".". Body fields already
    carry their camelCase alias.
    """
    problems = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ())]
        if loc and loc[0] in ("body", "query", "path", "header"):
            loc = loc[1:]
        problems.append({"field": ".".join(loc) or "body", "message": err.get("msg", "Invalid value")})
    return problems


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and the shared error body.

        RequestValidationError  → 400 validation_error
        ValidationError         → 400 validation_error
        AuthError               → 401 auth_error
        AuthorizationError      → 403 forbidden
        NotFoundError           → 404 not_found
        DuplicateError          → 409 conflict
        RateLimitExceededError  → 429 rate_limit_exceeded
        DatabaseError           → 500 server_error
        CampusCareError (base)  → 500 server_error
        Exception (fallback)    → 500 internal_server_error

    Responses never carry stack traces, SQL or driver messages.
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        problems = request_validation_fields(exc)
        fields = list(dict.fromkeys(p["field"] for p in problems))
        logger.warning("[%s] Request validation failed: %s", request_id_var.get(""), fields)
        message = "; ".join(f"{p['field']}: {p['message']}" for p in problems) or "Invalid request"
        return error_response(
            400,
            "validation_error",
            message,
            details={"fields": fields, "errors": problems},
        )

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        details = dict(exc.context)
        if exc.field:
            details["fields"] = [exc.field]
        return error_response(400, "validation_error", exc.message, details=details)

    @app.exception_handler(AuthError)
    async def handle_auth_error(request: Request, exc: AuthError):
        logger.info("[%s] Authentication failed: %s", request_id_var.get(""), exc.message)
        return error_response(
            401,
            "auth_error",
            exc.message,
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(AuthorizationError)
    async def handle_forbidden(request: Request, exc: AuthorizationError):
        logger.info("[%s] Forbidden: %s", request_id_var.get(""), exc.message)
        return error_response(403, "forbidden", exc.message, details=exc.context)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return error_response(404, "not_found", exc.message, details={"resource": exc.context.get("resource")})

    @app.exception_handler(DuplicateError)
    async def handle_duplicate(request: Request, exc: DuplicateError):
        details = {"fields": [exc.field]} if exc.field else None
        return error_response(409, "conflict", exc.message, details=details)

    @app.exception_handler(RateLimitExceededError)
    async def handle_rate_limit(request: Request, exc: RateLimitExceededError):
        return error_response(
            429,
            "rate_limit_exceeded",
            exc.message,
            details={"retry_after": exc.retry_after},
            headers={"Retry-After": str(exc.retry_after)},
        )

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        # Context stays in the server log only
        logger.error("[%s] Database error: %s | Context: %s", request_id_var.get(""), exc.message, exc.context)
        return error_response(500, "server_error", "An internal error occurred. Please try again later.")

    @app.exception_handler(CampusCareError)
    async def handle_campuscare_error(request: Request, exc: CampusCareError):
        logger.error("[%s] Unhandled application error: %s", request_id_var.get(""), exc.message)
        return error_response(500, "server_error", "An internal error occurred. Please try again later.")

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        error = "not_found" if exc.status_code == 404 else "http_error"
        return error_response(exc.status_code, error, str(exc.detail), headers=getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error("[%s] Unexpected error: %s", request_id_var.get(""), str(exc), exc_info=True)
        return error_response(
            500,
            "internal_server_error",
            "An unexpected error occurred. Please try again or contact support.",
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(config: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    """
    Assemble a configured FastAPI app.

    Tests pass their own Settings (and optionally a Database) so each test
    module gets an isolated app and connection pool.
    """
    config = config or default_settings

    app = FastAPI(
        title="CampusCare API",
        description=(
            "Campus facility damage reports, student wellness check-ins and "
            "cafeteria menus with ratings, behind role-based access control."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = config
    app.state.database = database or Database(config.database_url, config)

    # ── Middleware ────────────────────────────────────────────────────────
    # Last added runs first: RequestID → RateLimit → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Retry-After"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        RateLimitMiddleware,
        max_requests=config.rate_limit_requests,
        window_seconds=config.rate_limit_window,
    )
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    # ── Routes ────────────────────────────────────────────────────────────
    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(facilities.router)
    app.include_router(reports.router)
    app.include_router(wellness.router)
    app.include_router(menus.router)
    app.include_router(notifications.router)
    app.include_router(health.router)

    return app


# uvicorn campuscare.main:app
app = create_app()
