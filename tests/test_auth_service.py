"""Unit tests for AuthService.

This module tests identity token verification, token minting and the
Authorization header parsing.
"""

from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from rewear_api.config import Settings
from rewear_api.exceptions import AuthenticationException
from rewear_api.schemas.auth_schemas import IdentityClaims
from rewear_api.services.auth_service import AuthService


class TestAuthService:
    """Test cases for AuthService."""

    def test_create_and_verify_token(self, auth_service: AuthService):
        """Test a minted token verifies to the same claims."""
        token = auth_service.create_identity_token(
            "user-42", email="ada@example.com", first_name="Ada", last_name="Lovelace"
        )

        claims = auth_service.verify_identity_token(token)

        assert isinstance(claims, IdentityClaims)
        assert claims.sub == "user-42"
        assert claims.email == "ada@example.com"
        assert claims.first_name == "Ada"
        assert claims.last_name == "Lovelace"
        assert claims.exp > claims.iat

    def test_verify_expired_token(self, auth_service: AuthService):
        """Test expired tokens are rejected."""
        token = auth_service.create_identity_token(
            "user-42", expires_delta=timedelta(minutes=-5)
        )

        with pytest.raises(AuthenticationException) as exc_info:
            auth_service.verify_identity_token(token)

        assert exc_info.value.status_code == 401
        assert "expired" in exc_info.value.message

    def test_verify_token_with_wrong_secret(self, auth_service: AuthService):
        """Test tokens signed with another secret are rejected."""
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {"sub": "user-42", "exp": int((now + timedelta(minutes=5)).timestamp())},
            "some-other-secret",
            algorithm="HS256",
        )

        with pytest.raises(AuthenticationException):
            auth_service.verify_identity_token(token)

    def test_verify_token_without_subject(self, auth_service: AuthService):
        """Test tokens lacking the subject claim are rejected."""
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {"exp": int((now + timedelta(minutes=5)).timestamp())},
            auth_service.jwt_secret,
            algorithm=auth_service.jwt_algorithm,
        )

        with pytest.raises(AuthenticationException) as exc_info:
            auth_service.verify_identity_token(token)

        assert exc_info.value.message == "Invalid token claims"

    def test_verify_garbage_token(self, auth_service: AuthService):
        with pytest.raises(AuthenticationException):
            auth_service.verify_identity_token("not-a-jwt")

    def test_audience_and_issuer_verified_when_configured(self, test_settings: Settings):
        """Test iss/aud are enforced only when configured."""
        strict = AuthService(
            test_settings.model_copy(
                update={"identity_issuer": "https://id.example.com", "identity_audience": "rewear"}
            )
        )
        lenient = AuthService(test_settings)

        strict_token = strict.create_identity_token("user-1")
        assert strict.verify_identity_token(strict_token).sub == "user-1"
        assert lenient.verify_identity_token(strict_token).sub == "user-1"

        lenient_token = lenient.create_identity_token("user-1")
        with pytest.raises(AuthenticationException):
            strict.verify_identity_token(lenient_token)

    def test_extract_token_from_header(self, auth_service: AuthService):
        assert auth_service.extract_token_from_header("Bearer abc.def.ghi") == "abc.def.ghi"
        assert auth_service.extract_token_from_header("bearer abc") == "abc"

    @pytest.mark.parametrize(
        "header",
        [None, "", "Bearer", "Basic dXNlcjpwYXNz", "Bearer a b"],
    )
    def test_extract_token_from_invalid_header(self, auth_service: AuthService, header):
        with pytest.raises(AuthenticationException):
            auth_service.extract_token_from_header(header)

    def test_authenticate(self, auth_service: AuthService):
        token = auth_service.create_identity_token("user-7")

        claims = auth_service.authenticate(f"Bearer {token}")

        assert claims.sub == "user-7"
