"""
Shared pytest fixtures for Task Manager tests.

This module provides common fixtures including:
- InMemoryRedis: async Redis double that stores data for read-back tests
- Redis mocks for call-level assertions
- Token and hashing configuration for fast tests
"""

import fnmatch
from typing import Any, Dict, Optional, Set
from unittest.mock import AsyncMock

import pytest

from taskmanager.config.provider import AuthConfig, TokenConfig
from taskmanager.modules.auth import PasswordHasher, TokenIssuer

TEST_SECRET = "test-access-secret"
TEST_REFRESH_SECRET = "test-refresh-secret"

# Lowest bcrypt work factor keeps hashing fast in tests
TEST_BCRYPT_ROUNDS = 4


# =============================================================================
# Redis Mocking Infrastructure
# =============================================================================

class InMemoryRedis:
    """
    Async Redis double with in-memory storage.

    Supports the string, set and key commands the modules use. Expiry times
    are recorded in `ttls` for assertions but never enforced.

    Usage:
        async def test_something(redis_store):
            await redis_store.set("key", "value")
            assert redis_store.data["key"] == "value"
    """

    def __init__(self):
        self.data: Dict[str, Any] = {}
        self.ttls: Dict[str, int] = {}
        self.closed = False
        self.fail_on: Set[str] = set()

    def _check(self, command: str):
        if command in self.fail_on:
            raise ConnectionError(f"Simulated failure for {command}")

    async def set(
        self, key: str, value: Any, ex: Optional[int] = None, nx: bool = False, xx: bool = False, **kwargs
    ):
        self._check("set")
        if nx and key in self.data:
            return None
        if xx and key not in self.data:
            return None
        self.data[key] = value
        if ex is not None:
            self.ttls[key] = ex
        else:
            self.ttls.pop(key, None)
        return True

    async def setex(self, key: str, ttl: int, value: Any):
        return await self.set(key, value, ex=ttl)

    async def get(self, key: str):
        self._check("get")
        value = self.data.get(key)
        return value if isinstance(value, str) else None

    async def delete(self, *keys: str) -> int:
        self._check("delete")
        count = 0
        for key in keys:
            if key in self.data:
                del self.data[key]
                self.ttls.pop(key, None)
                count += 1
        return count

    async def exists(self, *keys: str) -> int:
        self._check("exists")
        return sum(1 for key in keys if key in self.data)

    async def keys(self, pattern: str = "*"):
        return [key for key in self.data if fnmatch.fnmatch(key, pattern)]

    async def sadd(self, key: str, *members: str) -> int:
        self._check("sadd")
        current = self.data.setdefault(key, set())
        before = len(current)
        current.update(members)
        return len(current) - before

    async def srem(self, key: str, *members: str) -> int:
        self._check("srem")
        current = self.data.get(key, set())
        removed = len(current & set(members))
        current.difference_update(members)
        if not current:
            self.data.pop(key, None)
        return removed

    async def smembers(self, key: str) -> Set[str]:
        self._check("smembers")
        return set(self.data.get(key, set()))

    async def ping(self) -> bool:
        self._check("ping")
        return True

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def redis_store():
    """Redis double that reads back what it writes."""
    return InMemoryRedis()


@pytest.fixture
def mock_redis():
    """Create a mock Redis client for call-level assertions."""
    redis = AsyncMock()
    redis.set = AsyncMock(return_value=True)
    redis.get = AsyncMock(return_value=None)
    redis.delete = AsyncMock(return_value=1)
    redis.exists = AsyncMock(return_value=0)
    redis.sadd = AsyncMock(return_value=1)
    redis.srem = AsyncMock(return_value=1)
    redis.smembers = AsyncMock(return_value=set())
    return redis


# =============================================================================
# Auth Configuration
# =============================================================================

@pytest.fixture
def token_config():
    return TokenConfig(
        secret=TEST_SECRET,
        refresh_secret=TEST_REFRESH_SECRET,
        access_ttl=3600,
        refresh_ttl=600,
    )


@pytest.fixture
def token_issuer(token_config):
    return TokenIssuer(
        secret=token_config.secret,
        refresh_secret=token_config.refresh_secret,
        access_ttl=token_config.access_ttl,
        refresh_ttl=token_config.refresh_ttl,
    )


@pytest.fixture
def hasher():
    return PasswordHasher(rounds=TEST_BCRYPT_ROUNDS)


class StaticConfigProvider:
    """ConfigProvider returning fixed test values."""

    def __init__(self, token_config: TokenConfig, rounds: int = TEST_BCRYPT_ROUNDS):
        self._token_config = token_config
        self._auth_config = AuthConfig(bcrypt_rounds=rounds)

    def get_token_config(self) -> TokenConfig:
        return self._token_config

    def get_auth_config(self) -> AuthConfig:
        return self._auth_config


@pytest.fixture
def config_provider(token_config):
    return StaticConfigProvider(token_config)


@pytest.fixture
def api_env(monkeypatch):
    """Environment for building the full app through EnvConfigProvider."""
    monkeypatch.setenv("JWT_SECRET", TEST_SECRET)
    monkeypatch.setenv("REFRESH_JWT_SECRET", TEST_REFRESH_SECRET)
    monkeypatch.setenv("BCRYPT_ROUNDS", str(TEST_BCRYPT_ROUNDS))
    monkeypatch.delenv("ACCESS_TOKEN_TTL", raising=False)
    monkeypatch.delenv("REFRESH_TOKEN_TTL", raising=False)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: Tests that exercise the full HTTP stack"
    )
