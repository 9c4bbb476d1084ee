"""
Auth Gateway API Endpoints

This module defines the REST endpoints that forward authentication operations to
the Supabase backend. Paths keep the names existing clients already call.

Endpoints:
    POST /signUp
        Register an account; the backend emails a confirmation code.

    POST /signUpVerify
        Confirm a one-time code (type defaults to "signup").

    POST /resendOtp
        Send a fresh one-time code without creating an account.

    POST /signIn
        Password sign-in. Returns the backend's user/session payload as-is.

    GET /gglSignIn
        Google OAuth redirect data. Returns the backend's payload as-is.

    POST /forgtPss
        Start password recovery for an existing account.

    POST /resetPssVerify
        Verify the recovery code and set the new password.

    GET /getUsr
        User lookup by bearer token, or by ?email= with the privileged key.

    POST /usrExst
        Best-effort account existence check.

Every endpoint honours the x-supabase-url, x-supabase-anon-key and
x-supabase-service-key override headers (see
services.auth_gateway.services.credentials).

Error Handling:
    Errors are raised as common.exceptions.APIError subclasses and rendered as
    {"error": message}:
    - 400 Bad Request: missing required field, or error reported by the backend
    - 403 Forbidden: privileged key required but not configured
    - 500 Internal Server Error: unexpected failure (raw error text)
"""

from typing import Any

from fastapi import APIRouter, Depends, Header, Query

from services.auth_gateway.api.dependencies import (
    get_effective_credentials,
    get_gateway_service,
)
from services.auth_gateway.api.v1.models import (
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
from services.auth_gateway.services.credentials import EffectiveCredentials
from services.auth_gateway.services.gateway_service import AuthGatewayService

BEARER_PREFIX = "Bearer "

router = APIRouter(
    responses={
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    }
)


@router.post("/signUp", response_model=SignUpResponse)
async def sign_up(
    payload: SignUpRequest | None = None,
    credentials: EffectiveCredentials = Depends(get_effective_credentials),
    service: AuthGatewayService = Depends(get_gateway_service),
) -> SignUpResponse:
    """
    Register a new account.

    Args:
        payload: {email, password, data?}; ``data`` becomes the user's metadata.

    Returns:
        SignUpResponse with the backend's user/session payload in ``data``.
    """
    payload = payload or SignUpRequest()
    data = await service.sign_up(credentials, payload.email, payload.password, payload.data)
    return SignUpResponse(
        message="Signup successful. Please verify OTP sent to email.",
        data=data,
    )


@router.post("/signUpVerify", response_model=SessionResponse)
async def sign_up_verify(
    payload: SignUpVerifyRequest | None = None,
    credentials: EffectiveCredentials = Depends(get_effective_credentials),
    service: AuthGatewayService = Depends(get_gateway_service),
) -> SessionResponse:
    """Confirm a signup (or other) one-time code and return the new session."""
    payload = payload or SignUpVerifyRequest()
    result = await service.verify_signup(
        credentials, payload.email, payload.token, payload.type
    )
    return SessionResponse(
        message="Email verified successfully",
        session=result.get("session"),
        user=result.get("user"),
    )


@router.post("/resendOtp", response_model=ResendOtpResponse)
async def resend_otp(
    payload: ResendOtpRequest | None = None,
    credentials: EffectiveCredentials = Depends(get_effective_credentials),
    service: AuthGatewayService = Depends(get_gateway_service),
) -> ResendOtpResponse:
    payload = payload or ResendOtpRequest()
    data = await service.resend_otp(credentials, payload.email)
    return ResendOtpResponse(message="OTP resent successfully", data=data)


@router.post("/signIn")
async def sign_in(
    payload: SignInRequest | None = None,
    credentials: EffectiveCredentials = Depends(get_effective_credentials),
    service: AuthGatewayService = Depends(get_gateway_service),
) -> dict[str, Any]:
    """Password sign-in; the backend's {user, session} payload is returned as-is."""
    payload = payload or SignInRequest()
    return await service.sign_in(credentials, payload.email, payload.password)


@router.get("/gglSignIn")
async def google_sign_in(
    redirect_to: str | None = Query(None, alias="redirectTo"),
    credentials: EffectiveCredentials = Depends(get_effective_credentials),
    service: AuthGatewayService = Depends(get_gateway_service),
) -> dict[str, Any]:
    """Return the Google authorization URL; the frontend redirects the user to it."""
    return await service.oauth_sign_in(credentials, redirect_to)


@router.post("/forgtPss", response_model=ForgotPasswordResponse)
async def forgot_password(
    payload: ForgotPasswordRequest | None = None,
    credentials: EffectiveCredentials = Depends(get_effective_credentials),
    service: AuthGatewayService = Depends(get_gateway_service),
) -> ForgotPasswordResponse:
    """
    Send a password recovery email.

    Unknown addresses are rejected with 400 {"error": "User does not exist"}
    and no email is sent.
    """
    payload = payload or ForgotPasswordRequest()
    data = await service.forgot_password(credentials, payload.email, payload.redirect_to)
    return ForgotPasswordResponse(data=data)


@router.post("/resetPssVerify", response_model=SessionResponse)
async def reset_password_verify(
    payload: ResetPasswordVerifyRequest | None = None,
    credentials: EffectiveCredentials = Depends(get_effective_credentials),
    service: AuthGatewayService = Depends(get_gateway_service),
) -> SessionResponse:
    """Verify the recovery code from the reset email and set the new password."""
    payload = payload or ResetPasswordVerifyRequest()
    result = await service.reset_password_verify(
        credentials, payload.email, payload.token, payload.new_password
    )
    return SessionResponse(
        message="Password reset successfully",
        session=result.get("session"),
        user=result.get("user"),
    )


@router.get("/getUsr", responses={403: {"model": ErrorResponse}})
async def get_user(
    authorization: str | None = Header(None),
    email: str | None = Query(None),
    credentials: EffectiveCredentials = Depends(get_effective_credentials),
    service: AuthGatewayService = Depends(get_gateway_service),
) -> Any:
    """
    Look up a user.

    Two modes, checked in this order:
        1. ``Authorization: Bearer <token>``: the token's own user.
        2. ``?email=``: admin lookup, requires the privileged key (403 otherwise,
           even when no email is given).
    """
    if authorization and authorization.startswith(BEARER_PREFIX):
        token = authorization[len(BEARER_PREFIX):].strip()
        return await service.get_user_by_token(credentials, token)

    return await service.get_user_by_email(credentials, email)


@router.post("/usrExst", response_model=UserExistsResponse)
async def user_exists(
    payload: UserExistsRequest | None = None,
    credentials: EffectiveCredentials = Depends(get_effective_credentials),
    service: AuthGatewayService = Depends(get_gateway_service),
) -> UserExistsResponse:
    """Best-effort existence check; performs a real signup attempt on the backend."""
    payload = payload or UserExistsRequest()
    exists = await service.user_exists(credentials, payload.email)
    return UserExistsResponse(exists=exists, data=None)
