"""
Common FastAPI utilities and middleware.

This module provides shared FastAPI functionality used by backend services,
including the application factory with standard middleware, error envelope
rendering, and static file serving.

Main Components:
    - app_factory: FastAPI application factory with standard configuration

Usage:
    ```python
    from common.fastapi import create_fastapi_app

    app = create_fastapi_app(
        service_name="auth-gateway",
        description="Auth gateway over the Supabase authentication backend",
        api_router=api_router,
    )
    ```
"""
from .app_factory import create_fastapi_app

__all__ = ["create_fastapi_app"]
