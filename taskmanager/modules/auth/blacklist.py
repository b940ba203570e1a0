"""
Logout blacklist backed by Redis.

Key layout:
    blacklist:{sha256(token)}   "1", expiring with the token itself

Tokens are stateless, so logging out records the token here and the auth gate
checks every request against it.
"""

import hashlib
import logging
import math
from datetime import UTC, datetime
from typing import Optional

logger = logging.getLogger(__name__)


class SessionBlacklist:
    """Set of logged-out access tokens."""

    def __init__(self, redis_client, key_prefix: str = "blacklist"):
        """
        Initialize blacklist.

        Args:
            redis_client: Async Redis client
            key_prefix: Namespace for blacklist keys
        """
        self.redis = redis_client
        self.key_prefix = key_prefix

    def _key(self, token: str) -> str:
        # Keys hold a digest so raw tokens never sit in the store
        digest = hashlib.sha256(token.encode("utf-8")).hexdigest()
        return f"{self.key_prefix}:{digest}"

    async def add(self, token: str, expires_at: Optional[datetime] = None) -> None:
        """
        Record a token as logged out.

        Args:
            token: Raw token string
            expires_at: Token's own expiry; the entry is dropped by Redis then

        Adding the same token twice overwrites the entry.
        """
        key = self._key(token)

        if expires_at is None:
            await self.redis.set(key, "1")
            logger.debug("Blacklisted token without expiry")
            return

        remaining = (expires_at - datetime.now(UTC)).total_seconds()
        ttl = max(1, math.ceil(remaining))
        await self.redis.set(key, "1", ex=ttl)
        logger.debug(f"Blacklisted token for {ttl}s")

    async def contains(self, token: str) -> bool:
        """
        Check whether a token was logged out.

        This is called on every protected request after signature
        verification: single Redis EXISTS.
        """
        return await self.redis.exists(self._key(token)) > 0
