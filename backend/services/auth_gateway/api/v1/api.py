"""
API Router Aggregation for the Auth Gateway v1

This module aggregates all endpoint routers for version 1 of the gateway API
into a single router included by the main FastAPI application.

Router Structure:
    - auth: forwarding endpoints (/signUp, /signIn, /getUsr, ...)
    - status: /config and /supabase-status

Example:
    ```python
    from services.auth_gateway.api.v1.api import api_router

    app.include_router(api_router)
    ```
"""

from fastapi import APIRouter

from services.auth_gateway.api.v1.endpoints import auth, status

api_router = APIRouter()

# Tags are used for organizing endpoints in Swagger/OpenAPI documentation
api_router.include_router(auth.router, tags=["authentication"])
api_router.include_router(status.router, tags=["status"])
