"""
Service status endpoints.

Endpoints:
    GET /config
        Frontend-facing configuration (externally visible base URL).

    GET /supabase-status
        Connectivity check against the resolved backend. Honours the override
        headers, so a frontend can verify a project URL and key before using them.
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from common.config import AuthGatewaySettings
from common.exceptions import HTTP_400_BAD_REQUEST, HTTP_502_BAD_GATEWAY
from services.auth_gateway.api.dependencies import (
    get_effective_credentials,
    get_gateway_service,
    get_gateway_settings,
)
from services.auth_gateway.api.v1.models import (
    BackendStatusDetails,
    BackendStatusResponse,
    PublicConfigResponse,
)
from services.auth_gateway.services.credentials import EffectiveCredentials, has_overrides
from services.auth_gateway.services.gateway_service import AuthGatewayService

router = APIRouter()


@router.get("/config", response_model=PublicConfigResponse)
async def public_config(
    settings: AuthGatewaySettings = Depends(get_gateway_settings),
) -> PublicConfigResponse:
    return PublicConfigResponse(
        baseUrl=settings.BASE_URL,
        hasBaseUrl=bool(settings.BASE_URL),
    )


@router.get("/supabase-status", response_model=BackendStatusResponse)
async def backend_status(
    request: Request,
    credentials: EffectiveCredentials = Depends(get_effective_credentials),
    service: AuthGatewayService = Depends(get_gateway_service),
) -> BackendStatusResponse | JSONResponse:
    """
    Report whether the resolved backend is reachable.

    Returns:
        200 with status "ok" when the backend's auth health endpoint answers 2xx.
        400 with status "error" when the URL or public key is unresolved.
        502 with status "error" when the backend is unreachable or unhealthy.
    """
    details = BackendStatusDetails(
        url=credentials.base_url,
        hasAnonKey=bool(credentials.public_key),
        hasServiceKey=credentials.has_privileged_key,
        source="headers" if has_overrides(request.headers) else "env",
    )

    if not credentials.is_complete:
        report = BackendStatusResponse(
            status="error",
            connected=False,
            message="Supabase URL or anon key not configured",
            details=details,
        )
        return JSONResponse(status_code=HTTP_400_BAD_REQUEST, content=report.model_dump())

    result = await service.backend_status(credentials)
    details.statusCode = result.get("status_code")

    if not result.get("connected"):
        report = BackendStatusResponse(
            status="error",
            connected=False,
            message="Unable to reach Supabase",
            error=result.get("error"),
            details=details,
            health=result.get("body"),
        )
        return JSONResponse(status_code=HTTP_502_BAD_GATEWAY, content=report.model_dump())

    return BackendStatusResponse(
        status="ok",
        connected=True,
        message="Connected to Supabase",
        details=details,
        health=result.get("body"),
    )
