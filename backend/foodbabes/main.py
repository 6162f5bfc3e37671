"""
Foodbabes Backend: FastAPI Application Factory
================================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() assembles middleware, exception handlers and routers;
       the lifespan builds the Database and ImageStorage, stores them on
       app.state, and tears them down on shutdown.
Who:   uvicorn (`foodbabes.main:app`, or the `foodbabes` console script)
       and the test suite (create_app(settings=...)).

Application Architecture:
    ┌──────────────────────────────────────────────────────┐
    │                    FastAPI App                       │
    │                                                      │
    │  Middleware: Request ID → Access Log → GZip → CORS   │
    │                                                      │
    │  Routes (in mount order):                            │
    │    /health  /files  /foods  /users /sessions  /{id}  │
    │                                                      │
    │  app.state: settings, database, image_storage        │
    └──────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging → config check → Database.connect() (+ create_all)
              → create_image_storage()
    Shutdown: Database.dispose()
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from foodbabes import __version__
from foodbabes.config import Settings, settings as default_settings
from foodbabes.database import Database
from foodbabes.exceptions import (
    AuthenticationError,
    FoodbabesError,
    ImageStorageError,
    NotFoundError,
    StoreError,
    TokenLookupError,
    ValidationError,
)
from foodbabes.middleware.logging import RequestLoggingMiddleware
from foodbabes.middleware.request_id import RequestIDLogFilter, RequestIDMiddleware
from foodbabes.routes import comments, files, foods, health, users
from foodbabes.schemas.common import field_errors
from foodbabes.services.image_storage import create_image_storage

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure the root logger once for the whole process.

    Format: 2026-01-15T12:00:00 [INFO] foodbabes.services.food_service [3f2a9c1e]: ...
    The request id comes from RequestIDLogFilter ("-" outside requests).
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIDLogFilter())

    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s [%(request_id)s]: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[handler],
        force=True,
    )

    # Access lines come from foodbabes.access
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("PIL").setLevel(logging.INFO)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings: Settings = app.state.settings

    setup_logging(settings.log_level)
    logger.info("=" * 60)
    logger.info("Foodbabes Backend %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving: /health reports what is unavailable
        logger.error("Configuration error: %s", str(e))

    database = Database.from_settings(settings)
    database.connect()
    if settings.db_auto_create:
        await database.create_all()
    app.state.database = database

    app.state.image_storage = create_image_storage(settings)
    logger.info("Image storage backend: %s", settings.image_storage_backend)

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.port)
    logger.info("=" * 60)

    try:
        yield
    finally:
        logger.info("Foodbabes Backend shutting down...")
        await database.dispose()
        logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "")


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map application exceptions to the response shape each endpoint promises.

        ValidationError, StoreError → 400 {message, errors}
        AuthenticationError         → 401 {loggedOut: true, message}
        TokenLookupError            → 403 {message, error}
        NotFoundError               → 404 {message}
        ImageStorageError           → 500 {message}
        RequestValidationError      → 400 {message: "Invalid request", errors}
        anything else               → 500 {message}

    Internal details (SQL, paths, SDK errors) are logged, never returned.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", _request_id(request), exc.message)
        return JSONResponse(
            status_code=400,
            content=jsonable_encoder({"message": exc.message, "errors": exc.errors}),
        )

    @app.exception_handler(StoreError)
    async def handle_store_error(request: Request, exc: StoreError):
        logger.error(
            "[%s] Store error: %s | Context: %s", _request_id(request), exc.message, exc.context
        )
        return JSONResponse(
            status_code=400,
            content={"message": exc.message, "errors": exc.errors},
        )

    @app.exception_handler(AuthenticationError)
    async def handle_authentication_error(request: Request, exc: AuthenticationError):
        return JSONResponse(
            status_code=401,
            content={"loggedOut": True, "message": exc.message},
        )

    @app.exception_handler(TokenLookupError)
    async def handle_token_lookup_error(request: Request, exc: TokenLookupError):
        logger.error(
            "[%s] Token lookup failed: %s | Context: %s",
            _request_id(request),
            exc.error,
            exc.context,
        )
        return JSONResponse(
            status_code=403,
            content={"message": exc.message, "error": exc.error},
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"message": exc.message})

    @app.exception_handler(ImageStorageError)
    async def handle_image_storage_error(request: Request, exc: ImageStorageError):
        logger.error(
            "[%s] Image storage error: %s | Context: %s",
            _request_id(request),
            exc.message,
            exc.context,
        )
        return JSONResponse(status_code=500, content={"message": exc.message})

    @app.exception_handler(FoodbabesError)
    async def handle_foodbabes_error(request: Request, exc: FoodbabesError):
        logger.error("[%s] Unhandled application error: %s", _request_id(request), exc.message)
        return JSONResponse(status_code=500, content={"message": exc.message})

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        logger.warning("[%s] Malformed request to %s", _request_id(request), request.url.path)
        return JSONResponse(
            status_code=400,
            content={"message": "Invalid request", "errors": field_errors(exc)},
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            _request_id(request),
            str(exc),
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content={"message": "An unexpected error occurred. Please try again later."},
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build a configured FastAPI application.

    Tests pass their own Settings and place a Database / ImageStorage on
    app.state themselves; the lifespan does it for a served app.
    """
    settings = settings or default_settings

    app = FastAPI(
        title="Foodbabes API",
        description="Food posts with images, a comment board with likes, and token-based users.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Last added runs first: RequestID → Logging → GZip → CORS
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

    register_exception_handlers(app)

    # comments owns "/{comment_id}" and must come last
    app.include_router(health.router)
    app.include_router(files.router)
    app.include_router(foods.router)
    app.include_router(users.router)
    app.include_router(comments.router)

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve `app` with uvicorn."""
    uvicorn.run(
        "foodbabes.main:app",
        host=default_settings.backend_host,
        port=default_settings.port,
        log_level=default_settings.log_level.lower(),
    )
