"""Authentication service for identity provider tokens.

This module verifies the JWTs issued by the external identity provider and
can mint equivalent tokens for local development and tests. Failures are
reported as ``AuthenticationException`` and recorded on the security logger.
"""

from datetime import datetime, timedelta, timezone
from typing import Any

from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import ValidationError

from ..config import Settings
from ..exceptions import AuthenticationException
from ..logging_config import SecurityLoggingMixin, get_logger
from ..schemas.auth_schemas import IdentityClaims

logger = get_logger("auth_service")


class AuthService(SecurityLoggingMixin):
    """Identity token verification.

    Tokens are HMAC-signed with the secret shared with the identity
    provider. ``iss`` and ``aud`` are only checked when the corresponding
    settings are configured.
    """

    def __init__(self, settings: Settings) -> None:
        """Initialize authentication service with configuration.

        Args:
            settings: Application settings containing identity token configuration
        """
        super().__init__()  # Initialize SecurityLoggingMixin
        self.jwt_secret = settings.identity_jwt_secret
        self.jwt_algorithm = settings.identity_jwt_algorithm
        self.issuer = settings.identity_issuer
        self.audience = settings.identity_audience
        self.expire_minutes = settings.identity_token_expire_minutes

    def create_identity_token(
        self,
        user_id: str,
        email: str | None = None,
        first_name: str | None = None,
        last_name: str | None = None,
        profile_image_url: str | None = None,
        expires_delta: timedelta | None = None,
    ) -> str:
        """Mint a token shaped like the identity provider's.

        Args:
            user_id: Subject claim
            email: Email claim
            first_name: Given name claim
            last_name: Family name claim
            profile_image_url: Picture claim
            expires_delta: Lifetime, defaults to the configured minutes

        Returns:
            str: Encoded JWT
        """
        now = datetime.now(timezone.utc)
        expire = now + (expires_delta or timedelta(minutes=self.expire_minutes))

        payload: dict[str, Any] = {
            "sub": user_id,
            "email": email,
            "first_name": first_name,
            "last_name": last_name,
            "profile_image_url": profile_image_url,
            "exp": int(expire.timestamp()),
            "iat": int(now.timestamp()),
        }
        if self.issuer:
            payload["iss"] = self.issuer
        if self.audience:
            payload["aud"] = self.audience

        logger.debug(
            f"Creating identity token for user {user_id}",
            extra={"user_id": user_id, "expires_at": expire.isoformat()},
        )
        return jwt.encode(payload, self.jwt_secret, algorithm=self.jwt_algorithm)

    def verify_identity_token(self, token: str) -> IdentityClaims:
        """Verify and decode an identity token.

        Args:
            token: JWT to verify

        Returns:
            IdentityClaims: Decoded claims

        Raises:
            AuthenticationException: If the token is expired, tampered with
                or lacks required claims
        """
        try:
            payload = jwt.decode(
                token,
                self.jwt_secret,
                algorithms=[self.jwt_algorithm],
                audience=self.audience,
                issuer=self.issuer,
                options={"verify_aud": self.audience is not None},
            )
            claims = IdentityClaims(**payload)
        except ExpiredSignatureError as e:
            self.log_authentication_attempt(success=False, reason="token expired")
            raise AuthenticationException("Token has expired") from e
        except JWTError as e:
            self.log_authentication_attempt(success=False, reason=f"invalid token: {e}")
            raise AuthenticationException("Invalid token") from e
        except ValidationError as e:
            self.log_authentication_attempt(success=False, reason="malformed claims")
            raise AuthenticationException("Invalid token claims") from e

        self.log_authentication_attempt(user_id=claims.sub, success=True)
        return claims

    def extract_token_from_header(self, authorization: str | None) -> str:
        """Extract JWT token from Authorization header.

        Args:
            authorization: Authorization header value

        Returns:
            str: Extracted JWT token

        Raises:
            AuthenticationException: If the header is missing or malformed
        """
        if not authorization:
            self.log_authentication_attempt(success=False, reason="missing authorization header")
            raise AuthenticationException("Authorization header is missing")

        try:
            scheme, token = authorization.split()
        except ValueError:
            self.log_authentication_attempt(success=False, reason="malformed authorization header")
            raise AuthenticationException("Invalid authorization header format")

        if scheme.lower() != "bearer":
            self.log_authentication_attempt(success=False, reason=f"unsupported scheme {scheme}")
            raise AuthenticationException("Invalid authorization scheme. Expected 'Bearer'")
        return token

    def authenticate(self, authorization: str | None) -> IdentityClaims:
        """Extract and verify the bearer token of a request."""
        token = self.extract_token_from_header(authorization)
        return self.verify_identity_token(token)
