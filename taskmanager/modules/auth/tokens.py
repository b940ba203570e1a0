"""
Signed access and refresh tokens.

Tokens are HS256 JWTs carrying the user id in a `userId` claim. Access and
refresh tokens use separate secrets and separate lifetimes, so one can never
be accepted in place of the other. Verification is stateless.
"""

import logging
import secrets
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import jwt

from ..errors import InvalidTokenError

logger = logging.getLogger(__name__)


@dataclass
class TokenClaims:
    """Verified token contents."""
    user_id: str
    expires_at: datetime


class TokenIssuer:
    """Issues and verifies JWTs for authenticated users."""

    def __init__(
        self,
        secret: str,
        refresh_secret: str,
        access_ttl: int,
        refresh_ttl: int,
        algorithm: str = "HS256",
    ):
        """
        Args:
            secret: Signing key for access tokens
            refresh_secret: Signing key for refresh tokens
            access_ttl: Access token lifetime in seconds
            refresh_ttl: Refresh token lifetime in seconds
            algorithm: JWT signing algorithm
        """
        self._secret = secret
        self._refresh_secret = refresh_secret
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl
        self.algorithm = algorithm

    def _sign(self, user_id: str, key: str, ttl: int) -> str:
        now = datetime.now(UTC)
        claims = {
            "userId": user_id,
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(seconds=ttl)).timestamp()),
            # Keeps tokens issued within the same second distinct
            "jti": secrets.token_urlsafe(16),
        }
        return jwt.encode(claims, key, algorithm=self.algorithm)

    def _decode(self, token: str, key: str) -> TokenClaims:
        try:
            claims = jwt.decode(
                token,
                key,
                algorithms=[self.algorithm],
                options={"require": ["exp", "userId"]},
            )
        except jwt.ExpiredSignatureError:
            logger.debug("Token expired")
            raise InvalidTokenError("Token has expired")
        except jwt.InvalidTokenError as e:
            logger.debug(f"Invalid token: {e}")
            raise InvalidTokenError("Token is invalid")

        user_id = claims["userId"]
        if not isinstance(user_id, str) or not user_id:
            raise InvalidTokenError("Token is invalid")

        return TokenClaims(
            user_id=user_id,
            expires_at=datetime.fromtimestamp(claims["exp"], UTC),
        )

    def issue_access_token(self, user_id: str) -> str:
        """Sign a short-lived access token for the user."""
        return self._sign(user_id, self._secret, self.access_ttl)

    def issue_refresh_token(self, user_id: str) -> str:
        """Sign a refresh token for the user."""
        return self._sign(user_id, self._refresh_secret, self.refresh_ttl)

    def verify(self, token: str) -> TokenClaims:
        """
        Verify an access token.

        Raises:
            InvalidTokenError: Bad signature, malformed token or expired
        """
        return self._decode(token, self._secret)

    def verify_refresh(self, token: str) -> TokenClaims:
        """Verify a refresh token (same failure modes as verify())."""
        return self._decode(token, self._refresh_secret)
