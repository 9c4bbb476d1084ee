"""
Auth Gateway Service - Core Business Logic

This module implements one method per gateway operation. Each method:

    1. Validates that the required fields are present (MissingFieldError, 400),
       before any backend client is built or any network call is made.
    2. Opens a backend client for the request's EffectiveCredentials through
       the injected factory, inside ``async with`` so it is closed on return
       and on error.
    3. Invokes exactly one backend operation (two for reset_password_verify:
       verify the recovery code, then update the password under the new session).
    4. Returns the payload the API layer wraps into its response envelope.

Backend-reported failures surface as BackendError (400) with the backend's
message unchanged; nothing is retried.

Example:
    ```python
    service = AuthGatewayService(SupabaseBackendFactory())
    result = await service.sign_up(credentials, "a@b.co", "S3cret!pass")
    ```

See Also:
    - services.auth_gateway.api.v1.endpoints.auth: API endpoints using this service
    - services.auth_gateway.services.existence: account existence heuristic
"""

from typing import Any, Protocol

from loguru import logger

from common.exceptions import BackendError, MissingFieldError, PermissionDeniedError
from services.auth_gateway.services.credentials import EffectiveCredentials
from services.auth_gateway.services.existence import probe_exists
from services.auth_gateway.services.supabase_backend import SupabaseAuthBackend

DEFAULT_VERIFY_TYPE = "signup"
RECOVERY_VERIFY_TYPE = "recovery"
OAUTH_PROVIDER = "google"


class BackendFactory(Protocol):
    async def create(self, credentials: EffectiveCredentials) -> SupabaseAuthBackend: ...

    async def lookup_user_by_email(
        self, credentials: EffectiveCredentials, email: str
    ) -> Any: ...

    async def check_health(self, credentials: EffectiveCredentials) -> dict[str, Any]: ...


def require(message: str, *values: Any) -> None:
    """Raise MissingFieldError unless every value is truthy."""
    if not all(values):
        raise MissingFieldError(message)


class AuthGatewayService:
    """
    Forwards gateway operations to the authentication backend.

    Attributes:
        factory: Builds a backend client per request. Shared, stateless.
    """

    def __init__(self, factory: BackendFactory) -> None:
        self.factory = factory

    async def sign_up(
        self,
        credentials: EffectiveCredentials,
        email: str | None,
        password: str | None,
        data: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Register a new account; the backend emails a confirmation code."""
        require("email and password required", email, password)
        async with await self.factory.create(credentials) as backend:
            logger.info("Forwarding signup")
            return await backend.sign_up(email, password, data)

    async def verify_signup(
        self,
        credentials: EffectiveCredentials,
        email: str | None,
        token: str | None,
        otp_type: str | None = None,
    ) -> dict[str, Any]:
        """Confirm a one-time code. ``otp_type`` defaults to "signup"."""
        require("email and token (OTP) required", email, token)
        async with await self.factory.create(credentials) as backend:
            logger.info("Forwarding OTP verification")
            return await backend.verify_otp(email, token, otp_type or DEFAULT_VERIFY_TYPE)

    async def resend_otp(
        self, credentials: EffectiveCredentials, email: str | None
    ) -> dict[str, Any] | None:
        """
        Send a fresh one-time code to an existing account.

        The resend is an OTP sign-in with user creation disabled, so an unknown
        address never gets an account from this call.
        """
        require("email required", email)
        async with await self.factory.create(credentials) as backend:
            logger.info("Forwarding OTP resend")
            return await backend.sign_in_with_otp(email, should_create_user=False)

    async def sign_in(
        self,
        credentials: EffectiveCredentials,
        email: str | None,
        password: str | None,
    ) -> dict[str, Any]:
        require("email and password required", email, password)
        async with await self.factory.create(credentials) as backend:
            logger.info("Forwarding password sign-in")
            return await backend.sign_in_with_password(email, password)

    async def oauth_sign_in(
        self, credentials: EffectiveCredentials, redirect_to: str | None
    ) -> dict[str, Any]:
        """Return the provider authorization URL for Google sign-in."""
        async with await self.factory.create(credentials) as backend:
            logger.info("Forwarding OAuth sign-in")
            return await backend.sign_in_with_oauth(OAUTH_PROVIDER, redirect_to or "")

    async def forgot_password(
        self,
        credentials: EffectiveCredentials,
        email: str | None,
        redirect_to: str | None = None,
    ) -> dict[str, Any] | None:
        """
        Start password recovery for an existing account.

        The account is checked with the existence probe first; unknown addresses
        are rejected with "User does not exist" and no recovery email is sent.
        """
        require("email required", email)
        async with await self.factory.create(credentials) as backend:
            if not await probe_exists(backend, email):
                raise BackendError("User does not exist")
            logger.info("Forwarding password recovery request")
            return await backend.reset_password_for_email(email, redirect_to)

    async def reset_password_verify(
        self,
        credentials: EffectiveCredentials,
        email: str | None,
        token: str | None,
        new_password: str | None,
    ) -> dict[str, Any]:
        """
        Complete password recovery.

        Verifies the recovery code, then sets the new password on a fresh client
        holding the session the verification returned. Both clients are closed
        before returning.

        Returns:
            The verification result (session and user).

        Raises:
            BackendError: Verification failed, returned no session, or the
                password update was rejected.
        """
        require(
            "email, token (OTP from reset email), and newPassword required",
            email,
            token,
            new_password,
        )
        async with await self.factory.create(credentials) as backend:
            logger.info("Forwarding recovery OTP verification")
            verified = await backend.verify_otp(email, token, RECOVERY_VERIFY_TYPE)

        session = (verified or {}).get("session")
        if not session:
            raise BackendError("No session from OTP verification")

        async with await self.factory.create(credentials) as session_backend:
            await session_backend.set_session(
                session["access_token"], session["refresh_token"]
            )
            await session_backend.update_user({"password": new_password})
        logger.info("Password updated after recovery verification")
        return verified

    async def get_user_by_token(
        self, credentials: EffectiveCredentials, access_token: str
    ) -> dict[str, Any]:
        async with await self.factory.create(credentials) as backend:
            return await backend.get_user(access_token)

    async def get_user_by_email(
        self, credentials: EffectiveCredentials, email: str | None
    ) -> Any:
        """
        Admin lookup by email.

        The privileged key is checked before the email so a caller without it
        gets 403 whether or not an email was supplied. Only the backend URL and
        the privileged key are needed; no public-key client is built.
        """
        if not credentials.has_privileged_key:
            raise PermissionDeniedError("Admin key missing")
        require("Bearer token or ?email required", email)
        logger.info("Forwarding admin user lookup")
        return await self.factory.lookup_user_by_email(credentials, email)

    async def user_exists(self, credentials: EffectiveCredentials, email: str | None) -> bool:
        require("email required", email)
        async with await self.factory.create(credentials) as backend:
            return await probe_exists(backend, email)

    async def backend_status(self, credentials: EffectiveCredentials) -> dict[str, Any]:
        """Probe backend connectivity; see SupabaseBackendFactory.check_health."""
        return await self.factory.check_health(credentials)
