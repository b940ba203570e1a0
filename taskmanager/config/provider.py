"""Configuration provider for the authentication stack."""
import os
from dataclasses import dataclass
from typing import Protocol

# bcrypt accepts log2 work factors in this range
MIN_BCRYPT_ROUNDS = 4
MAX_BCRYPT_ROUNDS = 31


@dataclass
class TokenConfig:
    """JWT signing configuration."""
    secret: str
    refresh_secret: str
    access_ttl: int
    refresh_ttl: int
    algorithm: str = "HS256"


@dataclass
class AuthConfig:
    """Password hashing configuration."""
    bcrypt_rounds: int


class ConfigProvider(Protocol):
    """Protocol for configuration providers."""

    def get_token_config(self) -> TokenConfig:
        """Get token configuration."""
        ...

    def get_auth_config(self) -> AuthConfig:
        """Get password hashing configuration."""
        ...


class EnvConfigProvider:
    """Environment-based configuration provider."""

    def get_token_config(self) -> TokenConfig:
        """Get token configuration from environment variables."""
        secret = os.getenv("JWT_SECRET")
        refresh_secret = os.getenv("REFRESH_JWT_SECRET")

        # Secrets are required - no default for security
        if not secret or not refresh_secret:
            raise ValueError(
                "JWT_SECRET and REFRESH_JWT_SECRET environment variables are required. "
                "Use two different random values so refresh tokens never pass as access tokens."
            )

        return TokenConfig(
            secret=secret,
            refresh_secret=refresh_secret,
            access_ttl=int(os.getenv("ACCESS_TOKEN_TTL", str(3 * 24 * 3600))),
            refresh_ttl=int(os.getenv("REFRESH_TOKEN_TTL", str(24 * 3600))),
            algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
        )

    def get_auth_config(self) -> AuthConfig:
        """Get password hashing configuration from environment variables."""
        rounds = int(os.getenv("BCRYPT_ROUNDS", "10"))
        if not MIN_BCRYPT_ROUNDS <= rounds <= MAX_BCRYPT_ROUNDS:
            raise ValueError(
                f"BCRYPT_ROUNDS must be between {MIN_BCRYPT_ROUNDS} and {MAX_BCRYPT_ROUNDS}, got {rounds}"
            )
        return AuthConfig(bcrypt_rounds=rounds)
