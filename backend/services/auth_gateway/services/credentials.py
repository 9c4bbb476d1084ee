"""
Request-scoped credential resolution.

Every request may target a different Supabase project by sending override
headers. This module turns those headers and the process-wide defaults into the
effective backend URL and keys for a single request.

Override headers:
    - x-supabase-url: backend project URL
    - x-supabase-anon-key: public (anon) key
    - x-supabase-service-key: privileged (service role) key

Each value is resolved independently: a non-empty header wins over the default,
an empty or missing header falls back to the default, and a missing default
leaves the value absent. Resolution never fails; handlers decide whether an
absent value is an error for their operation.

Example:
    ```python
    defaults = EffectiveCredentials(base_url="https://d.test", public_key="D")
    creds = resolve_credentials({"x-supabase-url": "https://x.test/"}, defaults)
    creds.base_url  # "https://x.test"
    creds.endpoint("/auth/v1/health")  # "https://x.test/auth/v1/health"
    ```
"""

from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, field_validator

from common.config import AuthGatewaySettings

URL_HEADER = "x-supabase-url"
ANON_KEY_HEADER = "x-supabase-anon-key"
SERVICE_KEY_HEADER = "x-supabase-service-key"

OVERRIDE_HEADERS = (URL_HEADER, ANON_KEY_HEADER, SERVICE_KEY_HEADER)


class EffectiveCredentials(BaseModel):
    """
    Backend URL and keys used for one request.

    Attributes:
        base_url (str): Backend project URL without trailing "/". Empty when
            neither a header nor a default supplied one.
        public_key (str): Public key for ordinary client operations. Empty when
            unresolved.
        privileged_key (str | None): Privileged key for administrative calls.
            None disables those calls.
    """

    model_config = ConfigDict(frozen=True)

    base_url: str = ""
    public_key: str = ""
    privileged_key: str | None = None

    @field_validator("base_url", mode="before")
    @classmethod
    def strip_trailing_separator(cls, v: str | None) -> str:
        return (v or "").strip().rstrip("/")

    @field_validator("privileged_key", mode="before")
    @classmethod
    def empty_key_is_absent(cls, v: str | None) -> str | None:
        return v or None

    @property
    def has_privileged_key(self) -> bool:
        return self.privileged_key is not None

    @property
    def is_complete(self) -> bool:
        """True when both the backend URL and the public key are known."""
        return bool(self.base_url and self.public_key)

    def endpoint(self, path: str) -> str:
        """Join a sub-path onto the base URL without doubling separators."""
        return f"{self.base_url}/{path.lstrip('/')}"


def _override(overrides: Mapping[str, str], name: str) -> str | None:
    value = overrides.get(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def resolve_credentials(
    overrides: Mapping[str, str], defaults: EffectiveCredentials
) -> EffectiveCredentials:
    """
    Resolve the effective credentials for one request.

    Args:
        overrides: Request headers (or any mapping keyed by the lower-case
            override header names). Starlette's Headers are case-insensitive.
        defaults: Process-wide defaults, usually from credentials_from_settings().

    Returns:
        EffectiveCredentials with the trailing "/" stripped from the URL.
    """
    return EffectiveCredentials(
        base_url=_override(overrides, URL_HEADER) or defaults.base_url,
        public_key=_override(overrides, ANON_KEY_HEADER) or defaults.public_key,
        privileged_key=_override(overrides, SERVICE_KEY_HEADER) or defaults.privileged_key,
    )


def has_overrides(overrides: Mapping[str, str]) -> bool:
    """True when the request carries at least one non-empty override header."""
    return any(_override(overrides, name) for name in OVERRIDE_HEADERS)


def credentials_from_settings(settings: AuthGatewaySettings) -> EffectiveCredentials:
    """Build the process-wide default credentials from settings."""
    return EffectiveCredentials(
        base_url=settings.SUPABASE_URL,
        public_key=settings.SUPABASE_ANON_KEY,
        privileged_key=settings.SUPABASE_SERVICE_ROLE_KEY,
    )
