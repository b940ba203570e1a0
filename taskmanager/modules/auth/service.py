"""
Auth Gate: the single authorization checkpoint for protected routes.

This module provides:
- Bearer token extraction from the Authorization header
- Verification against the token verifier and the logout blacklist
- The authenticated principal handed to downstream handlers
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..errors import ForbiddenError, InternalError, InvalidTokenError, UnauthenticatedError
from .interfaces import Blacklist, TokenVerifier

logger = logging.getLogger(__name__)

BEARER_SCHEME = "bearer"


@dataclass
class Principal:
    """Authenticated caller."""
    user_id: str
    token: str
    expires_at: Optional[datetime] = None


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """
    Pull the token out of an `Authorization: Bearer <token>` header value.

    The scheme is matched case-insensitively.

    Returns:
        Token string, or None when the header is absent or not a bearer header
    """
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != BEARER_SCHEME:
        return None
    token = token.strip()
    return token or None


class AuthGate:
    """
    Verifies bearer credentials for protected routes.

    Failure modes:
    - no bearer token: UnauthenticatedError (401)
    - signature, shape or expiry check fails: ForbiddenError (403)
    - token was logged out: ForbiddenError (403)
    """

    def __init__(self, token_verifier: TokenVerifier, blacklist: Blacklist):
        """
        Initialize with injected dependencies.

        Args:
            token_verifier: Stateless access token verifier
            blacklist: Store of logged-out tokens
        """
        self.token_verifier = token_verifier
        self.blacklist = blacklist

    async def authenticate(self, authorization: Optional[str]) -> Principal:
        """
        Authenticate a request from its Authorization header value.

        Returns:
            Principal for the token's user

        Raises:
            UnauthenticatedError, ForbiddenError, InternalError
        """
        token = extract_bearer_token(authorization)
        if not token:
            raise UnauthenticatedError("Your token is not valid")

        try:
            claims = self.token_verifier.verify(token)
        except InvalidTokenError as e:
            logger.warning(f"Rejected bearer token: {e.message}")
            raise ForbiddenError("You are not authorized")

        try:
            revoked = await self.blacklist.contains(token)
        except Exception as e:
            logger.error(f"Blacklist lookup failed: {e}")
            raise InternalError("Error while checking token")

        if revoked:
            logger.warning(f"Rejected logged-out token for user {claims.user_id}")
            raise ForbiddenError("You are not authorized")

        return Principal(user_id=claims.user_id, token=token, expires_at=claims.expires_at)
