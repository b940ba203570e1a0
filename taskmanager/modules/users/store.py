"""
Credential store backed by Redis.

Key layout:
    user:{id}            JSON user document
    user:email:{email}   id of the user owning that email (unique index)
"""

import json
import logging
import uuid
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from ..errors import ConflictError

logger = logging.getLogger(__name__)


@dataclass
class User:
    """Registered user. `password` holds the bcrypt hash, never plaintext."""

    id: str
    username: str
    email: str
    password: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)

    def to_public_dict(self) -> Dict[str, Any]:
        """Dictionary safe to return to API clients (no password hash)."""
        return {"id": self.id, "username": self.username, "email": self.email}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        """Create from dictionary (e.g., from JSON)."""
        return cls(
            id=data["id"],
            username=data["username"],
            email=data["email"],
            password=data["password"],
        )


class UserStore:
    """Users keyed by id, with a unique email index."""

    def __init__(self, redis_client):
        """
        Initialize user store.

        Args:
            redis_client: Async Redis client
        """
        self.redis = redis_client

    @staticmethod
    def _user_key(user_id: str) -> str:
        return f"user:{user_id}"

    @staticmethod
    def _email_key(email: str) -> str:
        return f"user:email:{email}"

    async def get(self, user_id: str) -> Optional[User]:
        """
        Get a user by id.

        Returns:
            User or None if not found
        """
        data = await self.redis.get(self._user_key(user_id))
        if data:
            return User.from_dict(json.loads(data))
        return None

    async def find_by_email(self, email: str) -> Optional[User]:
        """
        Look up a user by email.

        Returns:
            User or None if no user registered that email
        """
        user_id = await self.redis.get(self._email_key(email))
        if not user_id:
            return None
        return await self.get(user_id)

    async def create(self, username: str, email: str, password_hash: str) -> User:
        """
        Persist a new user.

        Args:
            username: Display name
            email: Unique login email
            password_hash: Output of PasswordHasher.hash()

        Returns:
            Stored user including its generated id

        Raises:
            ConflictError: Email already registered

        Logic:
        1. Reserve the email index with SET NX (atomic uniqueness check)
        2. Write the user document
        3. Release the reservation if the document write fails
        """
        user = User(
            id=str(uuid.uuid4()),
            username=username,
            email=email,
            password=password_hash,
        )

        email_key = self._email_key(email)
        reserved = await self.redis.set(email_key, user.id, nx=True)
        if not reserved:
            raise ConflictError(f"Email {email} is already registered")

        try:
            await self.redis.set(self._user_key(user.id), json.dumps(user.to_dict()))
        except Exception:
            await self.redis.delete(email_key)
            raise

        logger.info(f"Created user {user.id}")
        return user
