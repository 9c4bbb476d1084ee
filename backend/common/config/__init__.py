"""
Centralized configuration management for backend services.

This module provides a unified interface for accessing service-specific configuration
settings. It selects the appropriate settings class based on the service name.

The configuration system uses Pydantic Settings, which loads values from:
    1. Environment variables (highest priority)
    2. .env file in the project root
    3. Default values defined in the settings classes

Service-Specific Settings:
    - AuthGatewaySettings: Configuration for auth-gateway
    - BaseServiceSettings: Base configuration shared by all services

Example:
    ```python
    from common.config import get_settings

    settings = get_settings("auth-gateway")
    print(settings.SERVICE_NAME)  # "auth-gateway"
    print(settings.PORT)  # 3024
    ```
"""

from common.config.settings import AuthGatewaySettings, BaseServiceSettings


def get_settings(service_name: str | None = None) -> BaseServiceSettings:
    """
    Get settings instance for the specified service.

    Args:
        service_name: Name of the service to get settings for. Any name containing
            "auth" (case-insensitive) selects AuthGatewaySettings; None or any other
            value returns BaseServiceSettings.

    Returns:
        Instance of the appropriate settings class.

    Note:
        - Settings are loaded from environment variables and .env file
        - Each call returns a new instance (settings are not cached here;
          callers that need a process-wide instance cache it themselves)
    """
    if service_name:
        service_lower = service_name.lower()
        if service_lower == "auth-gateway" or "auth" in service_lower:
            return AuthGatewaySettings()
    # Default to base settings
    return BaseServiceSettings()


__all__ = [
    "AuthGatewaySettings",
    "BaseServiceSettings",
    "get_settings",
]
