"""
Tests for per-request credential resolution.
"""

from starlette.datastructures import Headers

from common.config import AuthGatewaySettings
from services.auth_gateway.services.credentials import (
    EffectiveCredentials,
    credentials_from_settings,
    has_overrides,
    resolve_credentials,
)


DEFAULTS = EffectiveCredentials(base_url="https://d.test", public_key="D", privileged_key="S")


class TestResolveCredentials:
    """Header overrides versus process defaults."""

    def test_override_wins_and_trailing_slash_is_stripped(self):
        creds = resolve_credentials(
            {"x-supabase-url": "https://x.test/", "x-supabase-anon-key": "K"},
            EffectiveCredentials(base_url="https://d.test", public_key="D"),
        )

        assert creds.base_url == "https://x.test"
        assert creds.public_key == "K"

    def test_no_overrides_returns_defaults(self):
        creds = resolve_credentials({}, DEFAULTS)

        assert creds == DEFAULTS

    def test_each_value_resolves_independently(self):
        creds = resolve_credentials({"x-supabase-service-key": "override-service"}, DEFAULTS)

        assert creds.base_url == "https://d.test"
        assert creds.public_key == "D"
        assert creds.privileged_key == "override-service"

    def test_empty_header_falls_back_to_default(self):
        creds = resolve_credentials(
            {"x-supabase-url": "", "x-supabase-anon-key": "   "}, DEFAULTS
        )

        assert creds.base_url == "https://d.test"
        assert creds.public_key == "D"

    def test_absent_everywhere_stays_absent(self):
        creds = resolve_credentials({}, EffectiveCredentials())

        assert creds.base_url == ""
        assert creds.public_key == ""
        assert creds.privileged_key is None
        assert not creds.has_privileged_key
        assert not creds.is_complete

    def test_header_lookup_is_case_insensitive(self):
        headers = Headers({"X-Supabase-Url": "https://upper.test//", "X-Supabase-Anon-Key": "U"})

        creds = resolve_credentials(headers, DEFAULTS)

        assert creds.base_url == "https://upper.test"
        assert creds.public_key == "U"

    def test_default_url_is_normalized(self):
        creds = resolve_credentials(
            {}, EffectiveCredentials(base_url="https://d.test/", public_key="D")
        )

        assert creds.base_url == "https://d.test"


class TestEffectiveCredentials:
    def test_endpoint_never_doubles_separator(self):
        creds = EffectiveCredentials(base_url="https://x.test/", public_key="K")

        assert creds.endpoint("/auth/v1/health") == "https://x.test/auth/v1/health"
        assert creds.endpoint("auth/v1/health") == "https://x.test/auth/v1/health"

    def test_empty_privileged_key_is_absent(self):
        creds = EffectiveCredentials(base_url="https://x.test", public_key="K", privileged_key="")

        assert creds.privileged_key is None


class TestHelpers:
    def test_has_overrides(self):
        assert has_overrides({"x-supabase-anon-key": "K"})
        assert not has_overrides({"x-supabase-anon-key": ""})
        assert not has_overrides({"authorization": "Bearer t"})

    def test_credentials_from_settings(self):
        settings = AuthGatewaySettings(
            SUPABASE_URL="https://s.test/",
            SUPABASE_ANON_KEY="anon",
            SUPABASE_SERVICE_ROLE_KEY="",
        )

        creds = credentials_from_settings(settings)

        assert creds.base_url == "https://s.test"
        assert creds.public_key == "anon"
        assert creds.privileged_key is None
