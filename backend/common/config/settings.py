"""
Centralized configuration management for backend services.

This module defines Pydantic Settings classes for managing configuration across
services. It provides a hierarchical settings system with base settings shared
by all services and service-specific overrides.

Configuration Loading:
    Settings are loaded in the following priority order (highest to lowest):
    1. Environment variables
    2. .env file in the project root
    3. Default values defined in the classes

Service Settings Hierarchy:
    BaseServiceSettings (base class)
    └── AuthGatewaySettings

Example:
    ```python
    from common.config.settings import AuthGatewaySettings

    settings = AuthGatewaySettings()
    print(settings.SERVICE_NAME)  # "auth-gateway"
    print(settings.PORT)  # 3024
    ```

Environment Variables:
    All settings can be overridden via environment variables. For example:
    - PORT=3024
    - LOG_LEVEL=DEBUG
    - SUPABASE_URL=https://project.supabase.co
    - CORS_ORIGINS=http://localhost:3000,https://example.com
"""

from typing import Any

from pydantic import ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

VALID_LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}


class BaseServiceSettings(BaseSettings):
    """
    Base settings class providing common configuration for all services.

    Attributes:
        SERVICE_NAME (str): Name identifier for the service. Default: "base-service"
        SERVICE_VERSION (str): Version string for the service. Default: "0.0.1"
        HOST (str): Interface the service binds to. Default: "0.0.0.0"
        PORT (int): Port number the service listens on. Default: 8000

        ENVIRONMENT (str): Deployment environment. Values: "DEV" or "PROD". Default: "DEV"
        DEBUG (bool): Enable debug mode (uvicorn reload). Default: False
        LOG_LEVEL (str): Loguru level name. Default: "INFO"
        LOG_TO_FILE (bool): Also write rotating log files under ./logs. Default: False,
            since serverless hosts usually mount a read-only filesystem

        API_V1_STR (str): Prefix for the service's API router. Default: "/api/v1"
        CORS_ORIGINS (list[str]): Allowed CORS origins. Can be set via comma-separated
            string or list. Empty means any origin without credentials.

    Note:
        - CORS_ORIGINS can be set as a comma-separated string or a list
        - LOG_LEVEL is upper-cased and must be a loguru level name
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    # Service Information (defaults)
    SERVICE_NAME: str = "base-service"
    SERVICE_VERSION: str = "0.0.1"
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Global Configuration
    ENVIRONMENT: str = "DEV"  # Can be "DEV" or "PROD"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    LOG_TO_FILE: bool = False

    # API Configuration
    API_V1_STR: str = "/api/v1"

    # CORS Configuration
    CORS_ORIGINS: Any = ""

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: Any) -> list[str]:
        """
        Assemble CORS origins from string or list format.

        Accepts either a comma-separated string ("http://a,http://b") or a list of
        strings. Whitespace around origins is stripped and empty entries dropped.
        Any other type yields an empty list.
        """
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        if isinstance(v, list):
            return [str(origin).strip() for origin in v if str(origin).strip()]
        return []

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any, info: ValidationInfo) -> str:
        """Upper-case the level name and reject names loguru does not know."""
        level = str(v or "INFO").strip().upper()
        if level not in VALID_LOG_LEVELS:
            msg = f"{info.field_name} must be one of {sorted(VALID_LOG_LEVELS)}, got: {v}"
            raise ValueError(msg)
        return level

    @field_validator("PORT", mode="before")
    @classmethod
    def validate_port(cls, v: Any, info: ValidationInfo) -> int:
        """Validate that the listening port is an integer in the TCP range."""
        try:
            port = int(v)
        except (ValueError, TypeError) as e:
            msg = f"{info.field_name} must be a valid port number, got: {v}"
            raise ValueError(msg) from e
        if not 0 < port < 65536:
            msg = f"{info.field_name} must be between 1 and 65535"
            raise ValueError(msg)
        return port


class AuthGatewaySettings(BaseServiceSettings):
    """
    Settings configuration for the auth gateway service.

    This class extends BaseServiceSettings with the process-wide defaults used to
    reach the Supabase authentication backend. Every request may override the
    backend URL and keys through headers (see
    services.auth_gateway.services.credentials), so none of these values is
    required for the process to start.

    Inherited Attributes:
        All attributes from BaseServiceSettings are available with these overrides:
        - SERVICE_NAME: "auth-gateway"
        - PORT: 3024
        - API_V1_STR: "" (routes are served at the root path)

    Additional Attributes:
        SUPABASE_URL (str): Default backend project URL, e.g.
            "https://abcd.supabase.co".
        SUPABASE_ANON_KEY (str): Default public (anon) key used for ordinary
            client operations.
        SUPABASE_SERVICE_ROLE_KEY (str): Default privileged key. When empty,
            administrative lookups answer 403.
        BASE_URL (str): Externally visible base URL of this gateway, reported
            by GET /config for frontends.
        STATIC_DIR (str): Directory of static frontend assets served at "/".
        HTTP_TIMEOUT_SECONDS (float): Per-call timeout for direct HTTP calls
            to the backend (admin lookup, status probe).

    Example:
        ```python
        settings = AuthGatewaySettings()
        if not settings.SUPABASE_SERVICE_ROLE_KEY:
            print("admin lookups disabled")
        ```
    """

    SERVICE_NAME: str = "auth-gateway"
    SERVICE_VERSION: str = "0.1.0"
    PORT: int = 3024

    API_V1_STR: str = ""

    # Supabase defaults (per-request headers take precedence)
    SUPABASE_URL: str = ""
    SUPABASE_ANON_KEY: str = ""
    SUPABASE_SERVICE_ROLE_KEY: str = ""

    # Public-facing configuration
    BASE_URL: str = ""
    STATIC_DIR: str = "public"

    HTTP_TIMEOUT_SECONDS: float = 30.0

    @field_validator("SUPABASE_URL", "BASE_URL", mode="before")
    @classmethod
    def strip_url(cls, v: Any) -> str:
        """Trim whitespace; trailing slashes are handled by the credential resolver."""
        return str(v or "").strip()

    @field_validator("HTTP_TIMEOUT_SECONDS")
    @classmethod
    def validate_timeout(cls, v: float, info: ValidationInfo) -> float:
        if v <= 0:
            msg = f"{info.field_name} must be greater than zero"
            raise ValueError(msg)
        return v
