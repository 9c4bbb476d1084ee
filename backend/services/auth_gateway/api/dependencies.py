"""
Shared API dependencies for the auth gateway.

Settings and the backend client factory are built once per process and cached;
credentials are resolved fresh for every request from its override headers.
Tests replace get_backend_factory through app.dependency_overrides.
"""

from functools import lru_cache

from fastapi import Depends, Request

from common.config import AuthGatewaySettings, get_settings
from services.auth_gateway.services.credentials import (
    EffectiveCredentials,
    credentials_from_settings,
    resolve_credentials,
)
from services.auth_gateway.services.gateway_service import AuthGatewayService, BackendFactory
from services.auth_gateway.services.supabase_backend import SupabaseBackendFactory

SERVICE_NAME = "auth-gateway"


@lru_cache(maxsize=1)
def get_gateway_settings() -> AuthGatewaySettings:
    """
    Get cached gateway settings.
    Using lru_cache to ensure settings are only loaded once.
    """
    return get_settings(SERVICE_NAME)


@lru_cache(maxsize=1)
def get_backend_factory() -> BackendFactory:
    """Get the process-wide backend client factory."""
    settings = get_gateway_settings()
    return SupabaseBackendFactory(timeout=settings.HTTP_TIMEOUT_SECONDS)


def get_default_credentials(
    settings: AuthGatewaySettings = Depends(get_gateway_settings),
) -> EffectiveCredentials:
    return credentials_from_settings(settings)


def get_effective_credentials(
    request: Request,
    defaults: EffectiveCredentials = Depends(get_default_credentials),
) -> EffectiveCredentials:
    """Resolve the backend URL and keys for this request."""
    return resolve_credentials(request.headers, defaults)


def get_gateway_service(
    factory: BackendFactory = Depends(get_backend_factory),
) -> AuthGatewayService:
    return AuthGatewayService(factory)
