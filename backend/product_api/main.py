"""
Product API — FastAPI Application Factory
==========================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance
       bound to one explicit Database handle.
Who:   uvicorn (`uvicorn product_api.main:app`, or `python -m product_api`)
       and the test suite (`create_app(database=...)`).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:  Request ID → Access logging           │
    │                                                     │
    │  Routes:  GET /  GET /health  /products[/{id}]      │
    │                                                     │
    │  Error translator:                                  │
    │  ┌──────────────────────────────────────────────┐  │
    │  │ Validation→400 │ InvalidId→400 │ NotFound→404 │  │
    │  │ unmatched route→404 │ everything else→500     │  │
    │  └──────────────────────────────────────────────┘  │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup (sequential, before the listener is bound):
    1. Initialize logging
    2. Validate configuration
    3. Connect to the database (fatal on failure)

    Shutdown:
    1. Dispose database engine (close all connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from product_api import __version__
from product_api.config import settings
from product_api.database import Database
from product_api.exceptions import (
    DatabaseError,
    InvalidIdError,
    NotFoundError,
    ProductAPIError,
    ValidationError,
    describe_errors,
)
from product_api.middleware.logging import RequestLoggingMiddleware
from product_api.middleware.request_id import (
    REQUEST_ID_HEADER,
    RequestIDMiddleware,
    current_request_id,
)
from product_api.responses import fail
from product_api.routes import health, products

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during startup, before any other initialization.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),  # Docker captures stdout
        ],
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: logging → configuration check → database connection.

    A configuration or connection failure is logged and re-raised; uvicorn
    then aborts startup and exits before it starts listening.
    """
    setup_logging()
    logger.info("Product API %s starting up...", __version__)

    try:
        settings.validate_for_startup()
    except ValueError as e:
        logger.critical("Configuration error: %s", str(e))
        raise

    database: Database = app.state.database
    try:
        await database.connect()
    except Exception as e:
        logger.critical("Database connection failed (%s): %s", database.safe_url, str(e))
        raise

    logger.info("Server ready at http://%s:%d", settings.host, settings.port)

    yield

    logger.info("Product API shutting down...")
    await database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers (error translator)
# ══════════════════════════════════════════════════════════════════════════

def _original_url(request: Request) -> str:
    path = request.url.path
    if request.url.query:
        path = f"{path}?{request.url.query}"
    return path


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map every failure kind to a failure envelope.

    Handler table:
        ValidationError          → 400, validation detail
        RequestValidationError   → 400, validation detail (bad JSON / query)
        InvalidIdError           → 400, "Invalid id format"
        NotFoundError            → 404, "Product not found"
        HTTPException 404 / 405  → 404, "Route not found: METHOD /path"
        HTTPException (other)    → its own status and detail
        DatabaseError            → 500, "Internal server error"
        ProductAPIError (base)   → 500, "Internal server error"
        Exception (fallback)     → 500, "Internal server error"

    The 500 responses never carry the underlying error text; it goes to the
    server log together with the request id.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", current_request_id(request), exc.message)
        return fail(exc.message, 400)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        message = describe_errors(exc.errors(), prefix="Request validation failed")
        logger.warning("[%s] %s", current_request_id(request), message)
        return fail(message, 400)

    @app.exception_handler(InvalidIdError)
    async def handle_invalid_id(request: Request, exc: InvalidIdError):
        logger.warning("[%s] Invalid id: %r", current_request_id(request), exc.value)
        return fail(exc.message, 400)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return fail(exc.message, 404)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        # An unknown path (404) or a known path with another verb (405) are
        # both "no route for this request".
        if exc.status_code in (404, 405):
            return fail(f"Route not found: {request.method} {_original_url(request)}", 404)
        return fail(str(exc.detail), exc.status_code, headers=getattr(exc, "headers", None))

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error(
            "[%s] Database error: %s | Context: %s",
            current_request_id(request),
            exc.message,
            exc.context,
        )
        return fail(INTERNAL_ERROR_MESSAGE, 500)

    @app.exception_handler(ProductAPIError)
    async def handle_app_error(request: Request, exc: ProductAPIError):
        logger.error(
            "[%s] Unhandled application error: %s | Context: %s",
            current_request_id(request),
            exc.message,
            exc.context,
        )
        return fail(INTERNAL_ERROR_MESSAGE, 500)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        # Runs in the outermost server-error layer, after the request id
        # middleware has unwound, so the header is set here.
        rid = current_request_id(request)
        logger.error(
            "[%s] Unhandled error: %s",
            rid,
            str(exc),
            exc_info=exc,
        )
        return fail(INTERNAL_ERROR_MESSAGE, 500, headers={REQUEST_ID_HEADER: rid})


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(database: Optional[Database] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        database: the Database handle to serve from. Built from settings when
                  omitted. It is stored on app.state and opened by the
                  lifespan.
    """
    app = FastAPI(
        title="Product API",
        description="CRUD service for products with a uniform {status, message, data} envelope.",
        version=__version__,
        lifespan=lifespan,
        # "/products/" is routed explicitly; no bare 307 redirects.
        redirect_slashes=False,
    )
    app.state.database = database or Database.from_settings(settings)

    # Middleware executes in reverse order of addition:
    # RequestID runs first, then logging.
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(products.router)

    return app


# uvicorn expects `product_api.main:app` to be importable
app = create_app()
