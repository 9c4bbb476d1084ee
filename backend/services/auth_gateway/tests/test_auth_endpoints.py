"""
Tests for the forwarding endpoints.
"""

import io
from unittest.mock import patch

import pytest

from common.exceptions import BackendError
from services.auth_gateway.api.dependencies import get_default_credentials
from services.auth_gateway.services.credentials import EffectiveCredentials


class TestMissingFields:
    """Missing required fields are rejected before any backend call."""

    @pytest.mark.parametrize(
        "path, body, message",
        [
            ("/signUp", {"email": "ada@example.com"}, "email and password required"),
            ("/signUp", {"password": "pw"}, "email and password required"),
            ("/signUpVerify", {"email": "ada@example.com"}, "email and token (OTP) required"),
            ("/resendOtp", {}, "email required"),
            ("/signIn", {"email": "", "password": "pw"}, "email and password required"),
            ("/forgtPss", {"redirectTo": "https://app.test"}, "email required"),
            (
                "/resetPssVerify",
                {"email": "ada@example.com", "token": "123456"},
                "email, token (OTP from reset email), and newPassword required",
            ),
            ("/usrExst", {}, "email required"),
        ],
    )
    def test_returns_400_without_backend_call(
        self, client, mock_factory, mock_backend, path, body, message
    ):
        response = client.post(path, json=body)

        assert response.status_code == 400
        assert response.json() == {"error": message}
        mock_factory.create.assert_not_called()
        mock_backend.sign_up.assert_not_called()

    def test_missing_body_is_treated_as_empty(self, client, mock_factory):
        response = client.post("/signIn")

        assert response.status_code == 400
        assert response.json() == {"error": "email and password required"}
        mock_factory.create.assert_not_called()

    def test_malformed_json_returns_400_envelope(self, client, mock_factory):
        response = client.post(
            "/signUp", content=b"{not json", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert "error" in response.json()
        mock_factory.create.assert_not_called()


class TestSignUp:
    def test_forwards_fields_verbatim(self, client, mock_backend, sample_user):
        response = client.post(
            "/signUp",
            json={"email": "ada@example.com", "password": "S3cret!pass", "data": {"name": "Ada"}},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["message"] == "Signup successful. Please verify OTP sent to email."
        assert body["data"]["user"] == sample_user
        mock_backend.sign_up.assert_awaited_once_with(
            "ada@example.com", "S3cret!pass", {"name": "Ada"}
        )

    def test_backend_error_is_passed_through(self, client, mock_backend):
        mock_backend.sign_up.side_effect = BackendError(
            "Password should be at least 6 characters."
        )

        response = client.post("/signUp", json={"email": "ada@example.com", "password": "x"})

        assert response.status_code == 400
        assert response.json() == {"error": "Password should be at least 6 characters."}

    def test_unexpected_error_returns_500_with_raw_text(self, client, mock_backend):
        mock_backend.sign_up.side_effect = RuntimeError("socket closed")

        response = client.post("/signUp", json={"email": "ada@example.com", "password": "pw"})

        assert response.status_code == 500
        assert response.json() == {"error": "socket closed"}

    def test_signup_then_verify_round_trip(self, client, mock_backend, sample_session):
        client.post("/signUp", json={"email": "ada@example.com", "password": "S3cret!pass"})
        response = client.post(
            "/signUpVerify",
            json={"email": "ada@example.com", "token": "123456", "type": "signup"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["message"] == "Email verified successfully"
        assert body["session"] == sample_session
        mock_backend.sign_up.assert_awaited_once_with("ada@example.com", "S3cret!pass", None)
        mock_backend.verify_otp.assert_awaited_once_with("ada@example.com", "123456", "signup")


class TestSignUpVerify:
    def test_type_defaults_to_signup(self, client, mock_backend):
        client.post("/signUpVerify", json={"email": "ada@example.com", "token": "654321"})

        mock_backend.verify_otp.assert_awaited_once_with("ada@example.com", "654321", "signup")

    def test_explicit_type_is_forwarded(self, client, mock_backend):
        client.post(
            "/signUpVerify",
            json={"email": "ada@example.com", "token": "654321", "type": "magiclink"},
        )

        mock_backend.verify_otp.assert_awaited_once_with("ada@example.com", "654321", "magiclink")


class TestResendOtp:
    def test_never_creates_a_user(self, client, mock_backend):
        response = client.post("/resendOtp", json={"email": "ada@example.com", "type": "signup"})

        assert response.status_code == 200
        assert response.json()["message"] == "OTP resent successfully"
        mock_backend.sign_in_with_otp.assert_awaited_once_with(
            "ada@example.com", should_create_user=False
        )


class TestSignIn:
    def test_returns_raw_backend_payload(self, client, mock_backend, sample_user, sample_session):
        response = client.post(
            "/signIn", json={"email": "ada@example.com", "password": "S3cret!pass"}
        )

        assert response.status_code == 200
        assert response.json() == {"user": sample_user, "session": sample_session}

    def test_invalid_credentials(self, client, mock_backend):
        mock_backend.sign_in_with_password.side_effect = BackendError("Invalid login credentials")

        response = client.post("/signIn", json={"email": "ada@example.com", "password": "bad"})

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid login credentials"}


class TestGoogleSignIn:
    def test_forwards_redirect(self, client, mock_backend):
        response = client.get("/gglSignIn", params={"redirectTo": "https://app.test/cb"})

        assert response.status_code == 200
        assert response.json()["provider"] == "google"
        mock_backend.sign_in_with_oauth.assert_awaited_once_with("google", "https://app.test/cb")

    def test_redirect_defaults_to_empty(self, client, mock_backend):
        client.get("/gglSignIn")

        mock_backend.sign_in_with_oauth.assert_awaited_once_with("google", "")


class TestForgotPassword:
    def test_unknown_user_is_rejected_without_recovery_email(self, client, mock_backend):
        # New-account signup response: the existence check answers "does not exist"
        response = client.post("/forgtPss", json={"email": "nobody@example.com"})

        assert response.status_code == 400
        assert response.json() == {"error": "User does not exist"}
        mock_backend.sign_up.assert_awaited_once()
        mock_backend.reset_password_for_email.assert_not_called()

    def test_existing_user_gets_recovery_email(self, client, mock_backend):
        mock_backend.sign_up.side_effect = BackendError("User already registered")

        response = client.post(
            "/forgtPss",
            json={"email": "ada@example.com", "redirectTo": "https://app.test/reset"},
        )

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "data": None}
        mock_backend.reset_password_for_email.assert_awaited_once_with(
            "ada@example.com", "https://app.test/reset"
        )


class TestResetPasswordVerify:
    BODY = {"email": "ada@example.com", "token": "123456", "newPassword": "N3w!password"}

    def test_missing_session_stops_before_update(self, client, mock_backend, sample_user):
        mock_backend.verify_otp.return_value = {"user": sample_user, "session": None}

        response = client.post("/resetPssVerify", json=self.BODY)

        assert response.status_code == 400
        assert response.json() == {"error": "No session from OTP verification"}
        mock_backend.set_session.assert_not_called()
        mock_backend.update_user.assert_not_called()

    def test_updates_password_under_verified_session(
        self, client, mock_factory, mock_backend, sample_session
    ):
        response = client.post("/resetPssVerify", json=self.BODY)

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Password reset successfully"
        assert body["session"] == sample_session
        mock_backend.verify_otp.assert_awaited_once_with("ada@example.com", "123456", "recovery")
        assert mock_factory.create.await_count == 2
        mock_backend.set_session.assert_awaited_once_with("access-abc", "refresh-xyz")
        mock_backend.update_user.assert_awaited_once_with({"password": "N3w!password"})

    def test_rejected_update_is_passed_through(self, client, mock_backend):
        mock_backend.update_user.side_effect = BackendError(
            "New password should be different from the old password."
        )

        response = client.post("/resetPssVerify", json=self.BODY)

        assert response.status_code == 400
        assert response.json() == {
            "error": "New password should be different from the old password."
        }


class TestGetUser:
    def test_bearer_token_mode(self, client, mock_factory, mock_backend, sample_user):
        response = client.get("/getUsr", headers={"Authorization": "Bearer user-jwt"})

        assert response.status_code == 200
        assert response.json() == {"user": sample_user}
        mock_backend.get_user.assert_awaited_once_with("user-jwt")
        mock_factory.lookup_user_by_email.assert_not_called()

    def test_bearer_takes_precedence_over_email(self, client, mock_factory, mock_backend):
        client.get(
            "/getUsr",
            params={"email": "ada@example.com"},
            headers={"Authorization": "Bearer user-jwt"},
        )

        mock_backend.get_user.assert_awaited_once_with("user-jwt")
        mock_factory.lookup_user_by_email.assert_not_called()

    def test_no_token_no_email_no_admin_key_is_forbidden(self, client, mock_factory):
        response = client.get("/getUsr")

        assert response.status_code == 403
        assert response.json() == {"error": "Admin key missing"}
        mock_factory.create.assert_not_called()

    def test_email_without_admin_key_is_forbidden(self, client, mock_factory):
        response = client.get("/getUsr", params={"email": "ada@example.com"})

        assert response.status_code == 403
        assert response.json() == {"error": "Admin key missing"}
        mock_factory.create.assert_not_called()

    def test_admin_key_without_email(self, client, mock_factory):
        response = client.get("/getUsr", headers={"x-supabase-service-key": "service"})

        assert response.status_code == 400
        assert response.json() == {"error": "Bearer token or ?email required"}
        mock_factory.create.assert_not_called()

    def test_admin_lookup_by_email(self, client, mock_factory, sample_user):
        response = client.get(
            "/getUsr",
            params={"email": "ada@example.com"},
            headers={"x-supabase-service-key": "service"},
        )

        assert response.status_code == 200
        assert response.json() == {"users": [sample_user]}
        credentials, email = mock_factory.lookup_user_by_email.await_args.args
        assert email == "ada@example.com"
        assert credentials.privileged_key == "service"
        mock_factory.create.assert_not_called()

    def test_admin_lookup_without_anon_key(self, app, client, mock_factory):
        app.dependency_overrides[get_default_credentials] = lambda: EffectiveCredentials(
            base_url="https://default.supabase.test", privileged_key="service-default"
        )

        response = client.get("/getUsr", params={"email": "ada@example.com"})

        assert response.status_code == 200
        credentials, _ = mock_factory.lookup_user_by_email.await_args.args
        assert credentials.public_key == ""
        assert credentials.privileged_key == "service-default"


class TestUserExists:
    def test_existing_user(self, client, mock_backend):
        mock_backend.sign_up.side_effect = BackendError("User already registered")

        response = client.post("/usrExst", json={"email": "ada@example.com"})

        assert response.status_code == 200
        assert response.json() == {"exists": True, "data": None}

    def test_new_user(self, client, mock_backend):
        response = client.post("/usrExst", json={"email": "new@example.com"})

        assert response.status_code == 200
        assert response.json() == {"exists": False, "data": None}
        mock_backend.sign_up.assert_awaited_once()


class TestCredentialOverrides:
    def test_headers_reach_the_backend_factory(self, client, mock_factory):
        client.post(
            "/signIn",
            json={"email": "ada@example.com", "password": "pw"},
            headers={"x-supabase-url": "https://tenant.test/", "x-supabase-anon-key": "tenant-anon"},
        )

        credentials = mock_factory.create.await_args.args[0]
        assert credentials.base_url == "https://tenant.test"
        assert credentials.public_key == "tenant-anon"

    def test_defaults_come_from_settings(self, client, mock_factory):
        client.post("/signIn", json={"email": "ada@example.com", "password": "pw"})

        credentials = mock_factory.create.await_args.args[0]
        assert credentials.base_url == "https://default.supabase.test"
        assert credentials.public_key == "anon-default"
        assert credentials.privileged_key is None


class TestBackendClientLifecycle:
    """Every backend client opened for a request is closed before responding."""

    def test_client_closed_after_success(self, client, mock_backend):
        response = client.post("/signIn", json={"email": "ada@example.com", "password": "pw"})

        assert response.status_code == 200
        mock_backend.__aexit__.assert_awaited_once()

    def test_client_closed_after_backend_error(self, client, mock_backend):
        mock_backend.sign_in_with_password.side_effect = BackendError("Invalid login credentials")

        response = client.post("/signIn", json={"email": "ada@example.com", "password": "bad"})

        assert response.status_code == 400
        mock_backend.__aexit__.assert_awaited_once()

    def test_client_closed_after_unexpected_error(self, client, mock_backend):
        mock_backend.sign_up.side_effect = ConnectionError("connection refused")

        response = client.post("/usrExst", json={"email": "ada@example.com"})

        assert response.status_code == 500
        mock_backend.__aexit__.assert_awaited_once()

    def test_both_reset_clients_are_closed(self, client, mock_factory, mock_backend):
        response = client.post(
            "/resetPssVerify",
            json={"email": "ada@example.com", "token": "123456", "newPassword": "N3w!password"},
        )

        assert response.status_code == 200
        assert mock_factory.create.await_count == 2
        assert mock_backend.__aexit__.await_count == 2


class TestSecretsStayOutOfLogs:
    """Transport failures log a traceback without request bodies or secrets."""

    @pytest.fixture
    def log_output(self, client):
        from common.logging import setup_logging

        stream = io.StringIO()
        setup_logging("auth-gateway", console=stream)
        yield stream
        setup_logging("auth-gateway")

    def test_existence_secret_not_logged(self, client, mock_backend, log_output):
        mock_backend.sign_up.side_effect = ConnectionError("connection refused")

        with patch(
            "services.auth_gateway.services.existence.generate_probe_secret",
            return_value="GeneratedSecretXYZ9!",
        ):
            response = client.post("/usrExst", json={"email": "ada@example.com"})

        output = log_output.getvalue()
        assert response.status_code == 500
        assert "Unhandled exception" in output
        assert "GeneratedSecretXYZ9!" not in output

    def test_sign_in_password_not_logged(self, client, mock_backend, log_output):
        mock_backend.sign_in_with_password.side_effect = ConnectionError("connection refused")

        response = client.post(
            "/signIn", json={"email": "ada@example.com", "password": "Sup3rSecretPW!"}
        )

        output = log_output.getvalue()
        assert response.status_code == 500
        assert "Unhandled exception" in output
        assert "Sup3rSecretPW!" not in output
