"""
Password hashing with bcrypt.

Passwords are pre-hashed with SHA-256 and base64 encoded before they reach
bcrypt. bcrypt only reads the first 72 bytes of its input and rejects NUL
bytes; the 44-byte digest avoids both limits so every character of the
password counts.
"""

import base64
import hashlib
from typing import Optional

import bcrypt


class PasswordHasher:
    """One-way salted password hashing with a configurable work factor."""

    def __init__(self, rounds: int = 10):
        """
        Args:
            rounds: bcrypt log2 work factor used when hash() gets no cost
        """
        self.rounds = rounds

    @staticmethod
    def _prepare(plaintext: str) -> bytes:
        digest = hashlib.sha256(plaintext.encode("utf-8")).digest()
        return base64.b64encode(digest)

    def hash(self, plaintext: str, cost: Optional[int] = None) -> str:
        """
        Hash a password with a fresh salt.

        Args:
            plaintext: Password as entered by the user
            cost: Work factor override for this call

        Returns:
            bcrypt hash string (salt and cost are embedded)
        """
        salt = bcrypt.gensalt(rounds=cost or self.rounds)
        return bcrypt.hashpw(self._prepare(plaintext), salt).decode("utf-8")

    def verify(self, plaintext: str, hashed: str) -> bool:
        """
        Check a password against a stored hash.

        Comparison is constant time. A mismatch returns False; a stored value
        that is not a bcrypt hash raises ValueError.
        """
        return bcrypt.checkpw(self._prepare(plaintext), hashed.encode("utf-8"))
