"""
Auth Gateway Service Package

This package provides the Auth Gateway, a thin HTTP facade over the Supabase
authentication backend. It exports the FastAPI application instance for use with
ASGI servers like Uvicorn or serverless ASGI hosts.

The package structure:
    - main.py: FastAPI application entrypoint and local runner
    - api/: API layer with endpoints, models and dependencies
    - services/: credential resolution, existence probe, backend client

Usage:
    ```python
    from services.auth_gateway import app

    # uvicorn services.auth_gateway:app --port 3024
    ```

Exports:
    app: FastAPI application instance configured for the auth gateway
"""

from services.auth_gateway.main import app

__all__ = ["app"]
