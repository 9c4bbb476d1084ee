"""
Auth Gateway - FastAPI Application Entrypoint

This module serves as the main entry point for the Auth Gateway, a thin HTTP
facade over the Supabase authentication backend. Each endpoint forwards one
authentication operation (signup, OTP verification, sign-in, OAuth redirect,
password recovery, user lookup, existence check) and reshapes the result into a
uniform JSON envelope.

Architecture:
    - API Layer: FastAPI endpoints handling HTTP requests/responses
    - Service Layer: credential resolution, existence probe, backend forwarding
    - Backend: Supabase Auth, reached through supabase-py and httpx

The gateway holds no state of its own. Process-wide defaults for the backend URL
and keys come from the environment; every request may override them with the
x-supabase-url, x-supabase-anon-key and x-supabase-service-key headers.

Example:
    To run the service locally:
        ```bash
        uvicorn services.auth_gateway:app --port 3024 --reload
        ```

    Or:
        ```bash
        auth-gateway
        ```

    The service will be available at:
        - API Base: http://localhost:3024
        - Swagger UI: http://localhost:3024/docs
        - Health Check: http://localhost:3024/health

Attributes:
    app (FastAPI): ASGI application, also mountable as-is in serverless hosts.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger

from common.fastapi import create_fastapi_app
from services.auth_gateway.api.dependencies import SERVICE_NAME, get_gateway_settings
from services.auth_gateway.api.v1.api import api_router


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_gateway_settings()
    logger.info(f"{settings.SERVICE_NAME} {settings.SERVICE_VERSION} starting")
    if not settings.SUPABASE_URL or not settings.SUPABASE_ANON_KEY:
        logger.warning(
            "SUPABASE_URL or SUPABASE_ANON_KEY missing; requests must supply override headers"
        )
    if not settings.SUPABASE_SERVICE_ROLE_KEY:
        logger.warning("SUPABASE_SERVICE_ROLE_KEY missing; admin user lookup disabled")
    yield
    logger.info(f"{settings.SERVICE_NAME} shutting down")


app = create_fastapi_app(
    service_name=SERVICE_NAME,
    description="Auth gateway over the Supabase authentication backend",
    api_router=api_router,
    static_dir=get_gateway_settings().STATIC_DIR,
    lifespan=lifespan,
)


def run() -> None:
    """Start the gateway with uvicorn using HOST/PORT from settings."""
    import uvicorn

    settings = get_gateway_settings()
    uvicorn.run(
        "services.auth_gateway.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info",
    )


if __name__ == "__main__":
    run()
