"""
Supabase authentication backend client.

This module wraps the Supabase async client behind the small set of calls the
gateway forwards, and adds the two operations supabase-py does not expose in the
shape the gateway needs (admin user lookup by email, backend health probe),
which are made directly with httpx from SupabaseBackendFactory.

Every call returns plain JSON-serializable data (dicts, lists, None). Errors
reported by the backend are raised as common.exceptions.BackendError carrying
the backend's message unchanged; transport errors are left to propagate.

Clients are built per request by SupabaseBackendFactory from the request's
EffectiveCredentials, so a request that overrides the backend URL or keys never
shares a client with another request. A SupabaseAuthBackend is an async context
manager; leaving the block closes the client's HTTP pool.

Example:
    ```python
    factory = SupabaseBackendFactory(timeout=30.0)
    async with await factory.create(credentials) as backend:
        result = await backend.sign_in_with_password("a@b.co", "secret")
    ```
"""

from typing import Any

import httpx
from loguru import logger
from supabase import AsyncClient, AuthError, acreate_client
from supabase.lib.client_options import AsyncClientOptions

from common.exceptions import (
    BackendError,
    ConfigurationError,
    PermissionDeniedError,
)
from services.auth_gateway.services.credentials import EffectiveCredentials

AUTH_HEALTH_PATH = "/auth/v1/health"
ADMIN_USERS_PATH = "/auth/v1/admin/users"


def to_plain(value: Any) -> Any:
    """Convert supabase-py response models into JSON-serializable data."""
    if value is None:
        return None
    if hasattr(value, "model_dump"):
        return value.model_dump(mode="json")
    if isinstance(value, dict):
        return {key: to_plain(item) for key, item in value.items()}
    if isinstance(value, list | tuple):
        return [to_plain(item) for item in value]
    return value


def backend_error_message(payload: Any, status_code: int) -> str:
    """Extract GoTrue's error text from a JSON error body."""
    if isinstance(payload, dict):
        for key in ("msg", "message", "error_description", "error"):
            if payload.get(key):
                return str(payload[key])
    return f"Backend request failed with status {status_code}"


class SupabaseAuthBackend:
    """
    One request's view of the Supabase authentication backend.

    Use as ``async with``; the underlying auth client is closed on exit, whether
    the block succeeded or raised.

    Attributes:
        client: Supabase AsyncClient built with the request's public key.
        credentials: The EffectiveCredentials the client was built from.
        timeout: Timeout in seconds for the direct httpx calls.
    """

    def __init__(
        self,
        client: AsyncClient,
        credentials: EffectiveCredentials,
        timeout: float = 30.0,
    ) -> None:
        self.client = client
        self.credentials = credentials
        self.timeout = timeout

    async def __aenter__(self) -> "SupabaseAuthBackend":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        await self.close()
        return False

    async def close(self) -> None:
        """Release the auth client's HTTP connection pool."""
        await self.client.auth.close()

    async def _call(self, operation: str, coro: Any) -> Any:
        try:
            return await coro
        except AuthError as e:
            logger.warning(f"Backend rejected {operation}: {e.message}")
            raise BackendError(e.message, internal_error=e) from e

    async def sign_up(
        self, email: str, password: str, data: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        """Register an account; ``data`` is stored as the user's metadata."""
        credentials: dict[str, Any] = {"email": email, "password": password}
        if data is not None:
            credentials["options"] = {"data": data}
        response = await self._call("sign_up", self.client.auth.sign_up(credentials))
        return to_plain(response)

    async def verify_otp(self, email: str, token: str, otp_type: str) -> dict[str, Any]:
        response = await self._call(
            "verify_otp",
            self.client.auth.verify_otp({"email": email, "token": token, "type": otp_type}),
        )
        return to_plain(response)

    async def sign_in_with_otp(
        self, email: str, should_create_user: bool = False
    ) -> dict[str, Any] | None:
        response = await self._call(
            "sign_in_with_otp",
            self.client.auth.sign_in_with_otp(
                {"email": email, "options": {"should_create_user": should_create_user}}
            ),
        )
        return to_plain(response)

    async def sign_in_with_password(self, email: str, password: str) -> dict[str, Any]:
        response = await self._call(
            "sign_in_with_password",
            self.client.auth.sign_in_with_password({"email": email, "password": password}),
        )
        return to_plain(response)

    async def sign_in_with_oauth(self, provider: str, redirect_to: str) -> dict[str, Any]:
        options = {"redirect_to": redirect_to} if redirect_to else {}
        response = await self._call(
            "sign_in_with_oauth",
            self.client.auth.sign_in_with_oauth({"provider": provider, "options": options}),
        )
        return to_plain(response)

    async def reset_password_for_email(
        self, email: str, redirect_to: str | None = None
    ) -> dict[str, Any] | None:
        options = {"redirect_to": redirect_to} if redirect_to else {}
        response = await self._call(
            "reset_password_for_email",
            self.client.auth.reset_password_for_email(email, options),
        )
        return to_plain(response)

    async def set_session(self, access_token: str, refresh_token: str) -> dict[str, Any]:
        response = await self._call(
            "set_session", self.client.auth.set_session(access_token, refresh_token)
        )
        return to_plain(response)

    async def update_user(self, attributes: dict[str, Any]) -> dict[str, Any]:
        response = await self._call("update_user", self.client.auth.update_user(attributes))
        return to_plain(response)

    async def get_user(self, jwt: str) -> dict[str, Any]:
        response = await self._call("get_user", self.client.auth.get_user(jwt))
        return to_plain(response) or {"user": None}


class SupabaseBackendFactory:
    """
    Builds per-request backend clients from effective credentials.

    Constructed once at process start (see services.auth_gateway.api.dependencies)
    and injected into the gateway service. The calls that do not need a
    supabase-py client (admin lookup, health probe) live here and use httpx
    directly.
    """

    def __init__(self, timeout: float = 30.0) -> None:
        self.timeout = timeout

    def _options(self) -> AsyncClientOptions:
        # No session persistence or background refresh: clients live for one request
        return AsyncClientOptions(
            auto_refresh_token=False,
            persist_session=False,
            flow_type="implicit",
        )

    async def create(self, credentials: EffectiveCredentials) -> SupabaseAuthBackend:
        """
        Create a backend client for one request.

        The caller owns the returned backend and must close it, normally with
        ``async with``.

        Raises:
            ConfigurationError: The backend URL or public key is unresolved.
        """
        if not credentials.is_complete:
            raise ConfigurationError("Supabase URL or anon key not configured")
        client = await acreate_client(
            credentials.base_url, credentials.public_key, options=self._options()
        )
        return SupabaseAuthBackend(client, credentials, timeout=self.timeout)

    async def lookup_user_by_email(self, credentials: EffectiveCredentials, email: str) -> Any:
        """
        Look up users by email through the admin API.

        Needs the backend URL and the privileged key only; the public key is not
        used. The raw JSON returned by the backend is passed through as-is.

        Raises:
            PermissionDeniedError: No privileged key was resolved.
            ConfigurationError: The backend URL is unresolved.
            BackendError: The backend answered with a non-2xx status.
            httpx.RequestError: Network failure.
        """
        key = credentials.privileged_key
        if not key:
            raise PermissionDeniedError("Admin key missing")
        if not credentials.base_url:
            raise ConfigurationError("Supabase URL not configured")

        url = credentials.endpoint(ADMIN_USERS_PATH)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.get(
                url,
                params={"email": email},
                headers={"Authorization": f"Bearer {key}", "apikey": key},
            )

        try:
            payload = response.json()
        except ValueError:
            payload = None
        if response.status_code >= 400:
            message = backend_error_message(payload, response.status_code)
            logger.warning(f"Admin user lookup failed with status {response.status_code}")
            raise BackendError(message)
        return payload

    async def check_health(self, credentials: EffectiveCredentials) -> dict[str, Any]:
        """
        Probe the backend's auth health endpoint with the public key.

        Returns:
            dict with keys:
                - connected (bool): whether the backend answered 2xx
                - status_code (int | None): HTTP status, None on transport failure
                - body (Any): parsed JSON body when available
                - error (str | None): failure description
        """
        url = credentials.endpoint(AUTH_HEALTH_PATH)
        headers = {
            "apikey": credentials.public_key,
            "Authorization": f"Bearer {credentials.public_key}",
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(url, headers=headers)
        except httpx.RequestError as e:
            logger.error(f"Backend health probe failed: {e}")
            return {"connected": False, "status_code": None, "body": None, "error": str(e)}

        try:
            body = response.json()
        except ValueError:
            body = None

        if response.is_success:
            return {
                "connected": True,
                "status_code": response.status_code,
                "body": body,
                "error": None,
            }
        return {
            "connected": False,
            "status_code": response.status_code,
            "body": body,
            "error": backend_error_message(body, response.status_code),
        }
