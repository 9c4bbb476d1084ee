"""
Service status response models for the auth gateway.

Models:
    - PublicConfigResponse: GET /config
    - BackendStatusDetails / BackendStatusResponse: GET /supabase-status
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class PublicConfigResponse(BaseModel):
    """
    Frontend-facing configuration.

    Attributes:
        baseUrl (str): Externally visible base URL of the gateway ("" if unset).
        hasBaseUrl (bool): Whether a base URL is configured.
    """

    baseUrl: str = Field(..., description="Externally visible base URL")
    hasBaseUrl: bool = Field(..., description="Whether BASE_URL is configured")


class BackendStatusDetails(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    url: str = Field(..., description="Resolved backend URL")
    hasAnonKey: bool
    hasServiceKey: bool
    source: Literal["headers", "env"] = Field(
        ..., description="Whether override headers were used"
    )
    statusCode: int | None = None


class BackendStatusResponse(BaseModel):
    """
    Backend connectivity report.

    ``status`` is "ok" with ``connected`` true on success; on failure ``status``
    is "error", ``connected`` false and ``error`` may carry the failure text.
    """

    status: Literal["ok", "error"]
    connected: bool
    message: str
    error: str | None = None
    details: BackendStatusDetails
    health: Any = None
