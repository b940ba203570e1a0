"""
Authentication Factory.

This factory:
- Constructs the authentication stack based on configuration
- Wires dependencies together
- Returns the credential flows and the auth gate
"""

import logging
from dataclasses import dataclass
from typing import Any

from ...config.provider import ConfigProvider
from ..users.store import UserStore
from .auth import AuthModule
from .blacklist import SessionBlacklist
from .password import PasswordHasher
from .service import AuthGate
from .tokens import TokenIssuer

logger = logging.getLogger(__name__)


@dataclass
class AuthStack:
    """Wired authentication components."""
    module: AuthModule
    gate: AuthGate


class AuthFactory:
    """
    Factory for building the authentication stack.

    This is the composition root that:
    - Creates all auth components
    - Wires them together via dependency injection
    - Shares one token issuer and one blacklist between login and the gate
    """

    @staticmethod
    def build(config_provider: ConfigProvider, redis_client: Any) -> AuthStack:
        """
        Build the complete authentication stack.

        Args:
            config_provider: Configuration provider
            redis_client: Async Redis client shared by the stores

        Returns:
            AuthStack with the credential flows and the gate

        Raises:
            ValueError: Token secrets missing or bcrypt rounds out of range
        """
        token_config = config_provider.get_token_config()
        auth_config = config_provider.get_auth_config()

        token_issuer = TokenIssuer(
            secret=token_config.secret,
            refresh_secret=token_config.refresh_secret,
            access_ttl=token_config.access_ttl,
            refresh_ttl=token_config.refresh_ttl,
            algorithm=token_config.algorithm,
        )
        blacklist = SessionBlacklist(redis_client)

        module = AuthModule(
            user_store=UserStore(redis_client),
            hasher=PasswordHasher(rounds=auth_config.bcrypt_rounds),
            token_issuer=token_issuer,
            blacklist=blacklist,
        )
        gate = AuthGate(token_verifier=token_issuer, blacklist=blacklist)

        logger.info(
            f"Authentication stack built (access ttl {token_config.access_ttl}s, "
            f"refresh ttl {token_config.refresh_ttl}s, bcrypt rounds {auth_config.bcrypt_rounds})"
        )
        return AuthStack(module=module, gate=gate)
