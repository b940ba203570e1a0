"""Authentication interfaces so stores and signers can be swapped for doubles."""
from datetime import datetime
from typing import Optional, Protocol

from ..users.store import User
from .tokens import TokenClaims


class CredentialStore(Protocol):
    """Protocol for user persistence."""

    async def find_by_email(self, email: str) -> Optional[User]:
        ...

    async def create(self, username: str, email: str, password_hash: str) -> User:
        ...


class TokenVerifier(Protocol):
    """Protocol for stateless token verification."""

    def verify(self, token: str) -> TokenClaims:
        """
        Verify an access token.

        Raises:
            InvalidTokenError: Token is not acceptable
        """
        ...


class Blacklist(Protocol):
    """Protocol for logged-out token storage."""

    async def add(self, token: str, expires_at: Optional[datetime] = None) -> None:
        ...

    async def contains(self, token: str) -> bool:
        ...
