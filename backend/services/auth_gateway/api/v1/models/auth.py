"""
Auth Gateway API Request/Response Models

This module defines Pydantic models for the gateway's request bodies and
response envelopes.

Request models keep every field optional: presence of required fields is
checked by the gateway service so that a missing field yields the gateway's
own 400 envelope (e.g. {"error": "email and password required"}) rather than a
schema error. Field names follow the wire format used by existing clients
(camelCase where the clients send camelCase).

Response envelopes:
    - Success: {"status": "ok", ...operation-specific fields}
    - Failure: {"error": "<message>"} (see ErrorResponse)

Example:
    ```python
    request = SignUpRequest(email="a@b.co", password="S3cret!pass")
    response = SignUpResponse(message="...", data={"user": {...}})
    ```
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class GatewayRequest(BaseModel):
    """Base for request bodies; unknown fields are ignored."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class SignUpRequest(GatewayRequest):
    """
    Request body for POST /signUp.

    Attributes:
        email (str | None): Account email. Required.
        password (str | None): Account password. Required.
        data (dict | None): Optional user metadata stored with the account.
    """

    email: str | None = Field(None, description="Account email")
    password: str | None = Field(None, description="Account password")
    data: dict[str, Any] | None = Field(None, description="User metadata")


class SignUpVerifyRequest(GatewayRequest):
    """Request body for POST /signUpVerify. ``type`` defaults to "signup"."""

    email: str | None = Field(None, description="Account email")
    token: str | None = Field(None, description="One-time code from the email")
    type: str | None = Field(None, description="OTP type, e.g. signup, magiclink, email")


class ResendOtpRequest(GatewayRequest):
    email: str | None = Field(None, description="Account email")
    type: str | None = Field(None, description="Accepted for compatibility")


class SignInRequest(GatewayRequest):
    email: str | None = Field(None, description="Account email")
    password: str | None = Field(None, description="Account password")


class ForgotPasswordRequest(GatewayRequest):
    email: str | None = Field(None, description="Account email")
    redirect_to: str | None = Field(
        None, alias="redirectTo", description="URL the recovery link returns to"
    )


class ResetPasswordVerifyRequest(GatewayRequest):
    """Request body for POST /resetPssVerify; all three fields are required."""

    email: str | None = Field(None, description="Account email")
    token: str | None = Field(None, description="One-time code from the reset email")
    new_password: str | None = Field(
        None, alias="newPassword", description="Password to set"
    )


class UserExistsRequest(GatewayRequest):
    email: str | None = Field(None, description="Account email")


class OkEnvelope(BaseModel):
    status: Literal["ok"] = "ok"


class SignUpResponse(OkEnvelope):
    """Response for POST /signUp; ``data`` is the backend's user/session payload."""

    message: str
    data: dict[str, Any] | None = None


class SessionResponse(OkEnvelope):
    """Response for the OTP verification endpoints."""

    message: str
    session: dict[str, Any] | None = None
    user: dict[str, Any] | None = None


class ResendOtpResponse(OkEnvelope):
    message: str
    data: dict[str, Any] | None = None


class ForgotPasswordResponse(OkEnvelope):
    data: dict[str, Any] | None = None


class UserExistsResponse(BaseModel):
    """
    Response for POST /usrExst.

    Attributes:
        exists (bool): Best-effort answer from the existence probe.
        data (None): Always null; kept for client compatibility.
    """

    exists: bool
    data: None = None


class ErrorResponse(BaseModel):
    """Error envelope returned with every 4xx/5xx response."""

    error: str
