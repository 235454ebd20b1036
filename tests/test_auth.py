# =============================================================================
# tests/test_auth.py - Authentication Tests
# =============================================================================
# Access token verification and the provider error messages shown on the
# sign-in and sign-up forms. Tokens are signed with the test HS256 secret.
# =============================================================================

import time
from types import SimpleNamespace
from uuid import UUID

import pytest
from fastapi import HTTPException
from jose import jwt
from pydantic import ValidationError

from app.auth.dependencies import decode_access_token
from app.auth.errors import GENERIC_AUTH_ERROR, auth_error_message, provider_error_code
from tests.conftest import USER_ID

SECRET = "test-jwt-secret"


def _token(sub=USER_ID, expires_in=3600, secret=SECRET, **claims):
    payload = {
        "sub": sub,
        "aud": "authenticated",
        "exp": int(time.time()) + expires_in,
        "email": "ada@example.com",
        **claims,
    }
    if sub is None:
        payload.pop("sub")
    return jwt.encode(payload, secret, algorithm="HS256")


# =============================================================================
# Token Verification
# =============================================================================

class TestDecodeAccessToken:

    def test_valid_token(self):
        user = decode_access_token(_token())

        assert user.id == UUID(USER_ID)
        assert user.email == "ada@example.com"
        assert user.full_name is None

    def test_provider_name(self):
        user = decode_access_token(_token(user_metadata={"full_name": "Ada Lovelace"}))
        assert user.full_name == "Ada Lovelace"

    def test_google_name_claim(self):
        user = decode_access_token(_token(user_metadata={"name": "Ada L."}))
        assert user.full_name == "Ada L."

    def test_expired(self):
        with pytest.raises(HTTPException) as exc_info:
            decode_access_token(_token(expires_in=-60))

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Token has expired"

    def test_wrong_secret(self):
        with pytest.raises(HTTPException) as exc_info:
            decode_access_token(_token(secret="someone-else"))

        assert exc_info.value.detail.startswith("Invalid token")

    def test_wrong_audience(self):
        with pytest.raises(HTTPException):
            decode_access_token(_token(aud="anon"))

    def test_missing_sub(self):
        with pytest.raises(HTTPException) as exc_info:
            decode_access_token(_token(sub=None))

        assert exc_info.value.detail == "Invalid token: missing user ID"

    def test_malformed_sub(self):
        with pytest.raises(HTTPException) as exc_info:
            decode_access_token(_token(sub="not-a-uuid"))

        assert exc_info.value.detail == "Invalid token: malformed user ID"

    def test_garbage(self):
        with pytest.raises(HTTPException) as exc_info:
            decode_access_token("not.a.jwt")

        assert exc_info.value.status_code == 401


# =============================================================================
# Provider Error Messages
# =============================================================================

class TestAuthErrorMessages:

    @pytest.mark.parametrize("code,message", [
        ("user_not_found", "No account found with this email address."),
        ("invalid_credentials", "Incorrect email or password."),
        ("user_already_exists", "An account with this email already exists."),
        ("email_exists", "An account with this email already exists."),
        ("weak_password", "Password should be at least 6 characters."),
        ("email_address_invalid", "Please enter a valid email address."),
    ])
    def test_known_codes(self, code, message):
        assert auth_error_message(code) == message

    def test_unknown_code_is_generic(self):
        assert auth_error_message("over_request_rate_limit") == GENERIC_AUTH_ERROR

    def test_no_code_is_generic(self):
        assert auth_error_message(None) == GENERIC_AUTH_ERROR

    def test_code_from_exception(self):
        error = SimpleNamespace(code="invalid_credentials")
        assert provider_error_code(error) == "invalid_credentials"

    def test_exception_without_code(self):
        assert provider_error_code(RuntimeError("network")) is None


# =============================================================================
# Auth User Model
# =============================================================================

class TestAuthUser:

    def test_is_immutable(self):
        user = decode_access_token(_token())

        with pytest.raises(ValidationError):
            user.email = "someone@example.com"
