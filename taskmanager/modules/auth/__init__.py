"""
Authentication Module - Black Box Interface

Purpose: Register users, issue tokens, log users out, guard protected routes
Interface: AuthFactory.build(), AuthModule.register()/login()/logout(),
           AuthGate.authenticate()
Hidden: Hash algorithm, token format, blacklist storage

Every component takes its collaborators through its constructor, so any of
them can be replaced (another signer, another store) without touching callers.
"""

from .auth import AuthModule, LoginOutcome, LoginResult, RegisterResult
from .blacklist import SessionBlacklist
from .factory import AuthFactory, AuthStack
from .password import PasswordHasher
from .service import AuthGate, Principal, extract_bearer_token
from .tokens import TokenClaims, TokenIssuer

__all__ = [
    "AuthFactory",
    "AuthGate",
    "AuthModule",
    "AuthStack",
    "LoginOutcome",
    "LoginResult",
    "PasswordHasher",
    "Principal",
    "RegisterResult",
    "SessionBlacklist",
    "TokenClaims",
    "TokenIssuer",
    "extract_bearer_token",
]
