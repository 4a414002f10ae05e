"""
DocStore API — FastAPI Application Factory
===========================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn app.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────────┐ ┌──────────────┐  │
    │  │  Req ID  │→│  Logging        │→│  CORS        │  │
    │  └──────────┘ └─────────────────┘ └──────────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────┐ ┌──────────────────────┐ ┌─────────┐  │
    │  │  GET /   │ │ /users CRUD + query  │ │ /health │  │
    │  └──────────┘ └──────────────────────┘ └─────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ERROR_RESPONSES table + request validation → 422  │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, initialize Firebase and bind the Firestore client
    Shutdown: unbind the client, delete the Firebase app
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from google.auth.exceptions import GoogleAuthError

from app import __version__
from app.config import settings
from app.exceptions import (
    CredentialsError,
    DatabaseError,
    DocStoreError,
    NotFoundError,
    ValidationError,
)
from app.firebase import close_firebase_app
from app.middleware.logging import RequestLoggingMiddleware
from app.middleware.request_id import RequestIDMiddleware, request_id_var
from app.routes import health, root, users
from app.services.firestore_service import firestore_service

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party loggers that emit per-call INFO/DEBUG lines
    for name in ("uvicorn.access", "google.auth", "urllib3", "grpc", "httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: logging, then Firebase. A failed Firebase init is logged and
    the server keeps serving so /health can report it; data routes answer
    500 until a restart with working credentials.
    """
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("DocStore API %s starting up...", __version__)

    try:
        strategy = firestore_service.initialize()
        logger.info("Firestore client ready (credentials: %s)", strategy)
    except (DocStoreError, GoogleAuthError, ValueError) as e:
        logger.error("Firestore initialization failed: %s", str(e))
        logger.error("Fix the Firebase credentials and restart the server.")

    logger.info(
        "Serving collection '%s' at http://%s:%d",
        settings.users_collection,
        settings.backend_host,
        settings.backend_port,
    )

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("DocStore API shutting down...")
    firestore_service.close()
    close_firebase_app()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

# Exception class → (HTTP status, error code). Subclasses resolve through the MRO.
ERROR_RESPONSES = {
    ValidationError: (400, "validation_error"),
    NotFoundError: (404, "not_found"),
    CredentialsError: (500, "server_error"),
    DatabaseError: (500, "server_error"),
    DocStoreError: (500, "server_error"),
}

SERVER_ERROR_MESSAGES = {
    CredentialsError: "The server is misconfigured. Please contact the administrator.",
    DatabaseError: "An internal error occurred. Please try again later.",
}


def error_response(status_code: int, error: str, message: str, details=None) -> JSONResponse:
    """Build the {"error", "message", "details"?, "request_id"} body."""
    content = {"error": error, "message": message}
    if details:
        content["details"] = details
    content["request_id"] = request_id_var.get("")
    return JSONResponse(status_code=status_code, content=content)


def _resolve(exc: DocStoreError):
    for cls in type(exc).__mro__:
        if cls in ERROR_RESPONSES:
            status_code, error = ERROR_RESPONSES[cls]
            return cls, status_code, error
    return DocStoreError, 500, "server_error"


def register_exception_handlers(app: FastAPI) -> None:
    """
    DocStoreError subclasses go through ERROR_RESPONSES; FastAPI's own
    request validation and anything unexpected get the same body shape.

    5xx responses carry a fixed message; SDK details stay in the log.
    """

    @app.exception_handler(DocStoreError)
    async def handle_docstore_error(request: Request, exc: DocStoreError):
        cls, status_code, error = _resolve(exc)
        target = request.path_params.get("user_id", "-")
        rid = request_id_var.get("")

        if status_code >= 500:
            logger.error(
                "[%s] %s on %s %s (document=%s): %s | Context: %s",
                rid, type(exc).__name__, request.method, request.url.path,
                target, exc.message, exc.context,
            )
            message = SERVER_ERROR_MESSAGES.get(cls, SERVER_ERROR_MESSAGES[DatabaseError])
            return error_response(status_code, error, message)

        logger.info(
            "[%s] %s on %s (document=%s): %s",
            rid, error, request.url.path, target, exc.message,
        )
        return error_response(status_code, error, exc.message, exc.context)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        # Malformed JSON, a non-object body, or a missing query field
        return error_response(
            422,
            "validation_error",
            "The request could not be parsed. Send a JSON object body.",
            {"errors": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error on %s %s: %s",
            request_id_var.get(""), request.method, request.url.path, str(exc),
            exc_info=True,
        )
        return error_response(
            500,
            "internal_server_error",
            "An unexpected error occurred. Please try again or contact support.",
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """Assemble middleware, exception handlers and routers into a FastAPI app."""
    app = FastAPI(
        title="DocStore API",
        description="CRUD over a Firestore collection through the Firebase Admin SDK.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: RequestID → Logging → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(root.router)
    app.include_router(users.router)
    app.include_router(health.router)

    return app


app = create_app()
