"""
Credential flows for the Task Manager API.

Registration, login and logout. Password hashing is CPU bound and runs in a
worker thread; each flow awaits it before issuing tokens or returning.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..errors import ConflictError
from ..users.store import User
from .blacklist import SessionBlacklist
from .interfaces import CredentialStore
from .password import PasswordHasher
from .service import Principal
from .tokens import TokenIssuer

logger = logging.getLogger(__name__)


class LoginOutcome(str, Enum):
    """Result of a login attempt."""

    SUCCESS = "success"
    WRONG_PASSWORD = "wrong_password"
    NOT_REGISTERED = "not_registered"


@dataclass
class RegisterResult:
    """Registration result. `created` is False when the email was taken."""
    created: bool
    user: Optional[User] = None


@dataclass
class LoginResult:
    """Login result. Tokens are only set on success."""
    outcome: LoginOutcome
    token: Optional[str] = None
    refresh_token: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome == LoginOutcome.SUCCESS


class AuthModule:
    """
    Registration, login and logout.

    Every collaborator is injected so tests can replace any of them.
    """

    def __init__(
        self,
        user_store: CredentialStore,
        hasher: PasswordHasher,
        token_issuer: TokenIssuer,
        blacklist: SessionBlacklist,
    ):
        """
        Args:
            user_store: Credential store
            hasher: Password hasher
            token_issuer: Access/refresh token signer
            blacklist: Logged-out token store
        """
        self.users = user_store
        self.hasher = hasher
        self.tokens = token_issuer
        self.blacklist = blacklist

    async def register(self, username: str, email: str, password: str) -> RegisterResult:
        """
        Register a new user.

        Returns:
            RegisterResult(created=True, user) for a new account,
            RegisterResult(created=False) when the email is already registered
        """
        if await self.users.find_by_email(email):
            logger.info("Registration skipped: email already registered")
            return RegisterResult(created=False)

        password_hash = await asyncio.to_thread(self.hasher.hash, password)

        try:
            user = await self.users.create(username, email, password_hash)
        except ConflictError:
            # Lost a race with a concurrent registration for the same email
            logger.info("Registration skipped: email registered concurrently")
            return RegisterResult(created=False)

        logger.info(f"Registered user {user.id}")
        return RegisterResult(created=True, user=user)

    async def login(self, email: str, password: str) -> LoginResult:
        """
        Check credentials and issue tokens.

        Returns:
            LoginResult with outcome success, wrong_password or not_registered
        """
        user = await self.users.find_by_email(email)
        if not user:
            logger.info("Login failed: email not registered")
            return LoginResult(outcome=LoginOutcome.NOT_REGISTERED)

        matches = await asyncio.to_thread(self.hasher.verify, password, user.password)
        if not matches:
            logger.warning(f"Login failed: wrong password for user {user.id}")
            return LoginResult(outcome=LoginOutcome.WRONG_PASSWORD)

        logger.info(f"User {user.id} logged in")
        return LoginResult(
            outcome=LoginOutcome.SUCCESS,
            token=self.tokens.issue_access_token(user.id),
            refresh_token=self.tokens.issue_refresh_token(user.id),
        )

    async def logout(self, principal: Principal) -> None:
        """Blacklist the principal's access token until it expires on its own."""
        await self.blacklist.add(principal.token, principal.expires_at)
        logger.info(f"User {principal.user_id} logged out")
