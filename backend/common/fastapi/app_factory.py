"""
Common FastAPI application factory with standard middleware and configuration.

This module provides a factory function for creating FastAPI applications with
consistent configuration, middleware, and error handling.

Features:
    - Automatic logging setup
    - CORS configuration
    - Request timing middleware
    - Error envelope rendering ({"error": message}) for every failure path
    - Health check endpoint
    - Static frontend assets served at "/" (or a JSON root endpoint)

Middleware:
    - CORS: explicit origins with credentials when CORS_ORIGINS is set,
      otherwise any origin without credentials
    - Request Timing: Adds X-Process-Time header to all responses and logs
      each request with its duration

Endpoints:
    - GET /health: Health check endpoint
    - GET /: Static index.html when the static directory exists, otherwise a
      JSON description of the service
    - GET /docs: Swagger UI documentation

Usage:
    ```python
    from common.fastapi import create_fastapi_app
    from fastapi import APIRouter

    api_router = APIRouter()

    @api_router.get("/users")
    async def get_users():
        return {"users": []}

    app = create_fastapi_app(
        service_name="auth-gateway",
        description="Auth gateway API",
        api_router=api_router,
    )
    ```
"""

from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path
import time
from typing import Any

from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from fastapi.staticfiles import StaticFiles
from loguru import logger

from common.config import BaseServiceSettings, get_settings
from common.exceptions import (
    HTTP_400_BAD_REQUEST,
    HTTP_500_INTERNAL_SERVER_ERROR,
    APIError,
    log_api_error,
)
from common.logging import setup_logging


def create_fastapi_app(
    service_name: str,
    description: str,
    api_router: APIRouter | None = None,
    additional_setup: Callable[[FastAPI, BaseServiceSettings], None] | None = None,
    static_dir: str | Path | None = None,
    lifespan: Callable[[FastAPI], Any] | None = None,
) -> FastAPI:
    """
    Create a FastAPI application with standardized configuration and middleware.

    Args:
        service_name: Name of the service (e.g., "auth-gateway"). Used to load
            service-specific settings and configure logging.
        description: Human-readable description of the service for OpenAPI docs.
        api_router: Optional APIRouter with the service's routes. Included with
            the API_V1_STR prefix (empty prefix mounts the routes at the root).
        additional_setup: Optional callback run after the standard configuration.
            Signature: `(app: FastAPI, settings: BaseServiceSettings) -> None`
        static_dir: Optional directory of static assets mounted at "/" after all
            routes. When it does not exist a JSON root endpoint is served instead.
        lifespan: Optional lifespan context manager passed to FastAPI.

    Returns:
        Fully configured FastAPI application instance ready to run.

    Note:
        - Errors derived from common.exceptions.APIError are rendered with their
          own status code as {"error": message}
        - Request body validation failures are rendered as 400 {"error": ...}
        - Any other unhandled exception is rendered as 500 with the raw error text
    """

    # Setup logging first
    setup_logging(service_name)

    # Get service settings
    settings = get_settings(service_name)

    app = FastAPI(
        title=settings.SERVICE_NAME,
        version=settings.SERVICE_VERSION,
        description=description,
        openapi_url="/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Configure CORS
    # Note: allow_credentials=True is incompatible with allow_origins=["*"]
    if settings.CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.CORS_ORIGINS,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    else:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=False,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # Add request timing middleware
    @app.middleware("http")
    async def add_process_time_header(
        request: Request, call_next: Callable[[Request], Any]
    ) -> Response:
        """Add process time header to responses."""
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = str(process_time)
        logger.info(
            f"{request.method} {request.url.path} - {response.status_code} - {process_time:.3f}s"
        )
        return response

    # Standard health check endpoint
    @app.get("/health", tags=["health"])
    async def health_check() -> dict[str, Any]:
        """Health check endpoint."""
        return {
            "status": "ok",
            "time": datetime.now(timezone.utc).isoformat(),
        }

    # Include API router if provided
    if api_router:
        app.include_router(api_router, prefix=settings.API_V1_STR)

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
        log_api_error(request.method, request.url.path, exc)
        return JSONResponse(status_code=exc.status_code, content=exc.to_content())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors = exc.errors()
        first = errors[0] if errors else {}
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = first.get("msg", "Invalid request")
        if location:
            message = f"{location}: {message}"
        logger.warning(f"{request.method} {request.url.path} rejected: {message}")
        return JSONResponse(status_code=HTTP_400_BAD_REQUEST, content={"error": message})

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        logger.opt(exception=exc).error(
            f"Unhandled exception in {request.method} {request.url.path}: {exc}"
        )
        return JSONResponse(
            status_code=HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": str(exc) or exc.__class__.__name__},
        )

    # Run additional setup if provided
    if additional_setup:
        additional_setup(app, settings)

    # Static assets are mounted last so API routes take precedence
    static_path = Path(static_dir) if static_dir else None
    if static_path and static_path.is_dir():
        app.mount("/", StaticFiles(directory=static_path, html=True), name="static")
        logger.info(f"Serving static files from {static_path.resolve()}")
    else:

        @app.get("/", tags=["health"])
        async def root() -> dict[str, Any]:
            """Root endpoint."""
            return {
                "service": settings.SERVICE_NAME,
                "version": settings.SERVICE_VERSION,
                "message": f"{settings.SERVICE_NAME} is running",
                "docs": "/docs",
                "health": "/health",
            }

    return app
