"""
Auth Gateway API v1 Models Package

This package exports all Pydantic models used for request/response validation
in the auth gateway API v1.

Models:
    - SignUpRequest / SignUpResponse: account registration
    - SignUpVerifyRequest / SessionResponse: OTP confirmation
    - ResendOtpRequest / ResendOtpResponse: OTP resend
    - SignInRequest: password sign-in (raw backend response)
    - ForgotPasswordRequest / ForgotPasswordResponse: recovery initiation
    - ResetPasswordVerifyRequest: recovery completion (SessionResponse)
    - UserExistsRequest / UserExistsResponse: existence check
    - ErrorResponse: error envelope
    - PublicConfigResponse, BackendStatusResponse: service status endpoints
"""

from .auth import (
    ErrorResponse,
    ForgotPasswordRequest,
    ForgotPasswordResponse,
    ResendOtpRequest,
    ResendOtpResponse,
    ResetPasswordVerifyRequest,
    SessionResponse,
    SignInRequest,
    SignUpRequest,
    SignUpResponse,
    SignUpVerifyRequest,
    UserExistsRequest,
    UserExistsResponse,
)
from .status import BackendStatusDetails, BackendStatusResponse, PublicConfigResponse

__all__ = [
    "BackendStatusDetails",
    "BackendStatusResponse",
    "ErrorResponse",
    "ForgotPasswordRequest",
    "ForgotPasswordResponse",
    "PublicConfigResponse",
    "ResendOtpRequest",
    "ResendOtpResponse",
    "ResetPasswordVerifyRequest",
    "SessionResponse",
    "SignInRequest",
    "SignUpRequest",
    "SignUpResponse",
    "SignUpVerifyRequest",
    "UserExistsRequest",
    "UserExistsResponse",
]
