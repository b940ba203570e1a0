"""
Tests for registration, login and logout flows.
"""

from unittest.mock import AsyncMock

import pytest

from taskmanager.modules.auth import (
    AuthModule,
    LoginOutcome,
    Principal,
    SessionBlacklist,
)
from taskmanager.modules.errors import ConflictError
from taskmanager.modules.users import UserStore


@pytest.fixture
def blacklist(redis_store):
    return SessionBlacklist(redis_store)


@pytest.fixture
def auth_module(redis_store, hasher, token_issuer, blacklist):
    return AuthModule(
        user_store=UserStore(redis_store),
        hasher=hasher,
        token_issuer=token_issuer,
        blacklist=blacklist,
    )


class TestRegister:
    """Tests for AuthModule.register."""

    @pytest.mark.asyncio
    async def test_register_creates_user_with_hashed_password(self, auth_module, hasher):
        """Test that a new email creates a user holding only a hash."""
        result = await auth_module.register("alice", "a@x.com", "pw1")

        assert result.created is True
        assert result.user.username == "alice"
        assert result.user.email == "a@x.com"
        assert result.user.password != "pw1"
        assert hasher.verify("pw1", result.user.password)

    @pytest.mark.asyncio
    async def test_register_duplicate_email(self, auth_module, redis_store):
        """Test that a taken email is reported and nothing new is stored."""
        first = await auth_module.register("alice", "a@x.com", "pw1")
        keys_before = set(redis_store.data)

        result = await auth_module.register("alice2", "a@x.com", "pw2")

        assert result.created is False
        assert result.user is None
        assert set(redis_store.data) == keys_before
        assert redis_store.data["user:email:a@x.com"] == first.user.id

    @pytest.mark.asyncio
    async def test_register_lost_race(self, hasher, token_issuer, blacklist):
        """Test that a concurrent registration of the same email is not an error."""
        users = AsyncMock()
        users.find_by_email.return_value = None
        users.create.side_effect = ConflictError("Email already registered")
        module = AuthModule(users, hasher, token_issuer, blacklist)

        result = await module.register("alice", "a@x.com", "pw1")

        assert result.created is False


class TestLogin:
    """Tests for AuthModule.login."""

    @pytest.mark.asyncio
    async def test_login_success(self, auth_module, token_issuer):
        """Test that correct credentials issue an access and refresh token."""
        registered = await auth_module.register("alice", "a@x.com", "pw1")

        result = await auth_module.login("a@x.com", "pw1")

        assert result.ok
        assert result.outcome == LoginOutcome.SUCCESS
        assert token_issuer.verify(result.token).user_id == registered.user.id
        assert token_issuer.verify_refresh(result.refresh_token).user_id == registered.user.id

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, auth_module):
        """Test that a wrong password issues nothing."""
        await auth_module.register("alice", "a@x.com", "pw1")

        result = await auth_module.login("a@x.com", "nope")

        assert not result.ok
        assert result.outcome == LoginOutcome.WRONG_PASSWORD
        assert result.token is None
        assert result.refresh_token is None

    @pytest.mark.asyncio
    async def test_login_not_registered(self, auth_module):
        """Test that an unknown email is reported as not registered."""
        result = await auth_module.login("ghost@x.com", "pw1")

        assert result.outcome == LoginOutcome.NOT_REGISTERED
        assert result.token is None

    @pytest.mark.asyncio
    async def test_each_login_gets_a_new_token(self, auth_module):
        """Test that repeated logins yield distinct tokens."""
        await auth_module.register("alice", "a@x.com", "pw1")

        first = await auth_module.login("a@x.com", "pw1")
        second = await auth_module.login("a@x.com", "pw1")

        assert first.token != second.token


class TestLogout:
    """Tests for AuthModule.logout."""

    @pytest.mark.asyncio
    async def test_logout_blacklists_token(self, auth_module, blacklist, token_issuer, redis_store):
        """Test that logout blacklists the token until its own expiry."""
        await auth_module.register("alice", "a@x.com", "pw1")
        login = await auth_module.login("a@x.com", "pw1")
        claims = token_issuer.verify(login.token)
        principal = Principal(user_id=claims.user_id, token=login.token, expires_at=claims.expires_at)

        await auth_module.logout(principal)

        assert await blacklist.contains(login.token) is True
        ttls = [ttl for key, ttl in redis_store.ttls.items() if key.startswith("blacklist:")]
        assert len(ttls) == 1
        assert 0 < ttls[0] <= 3600

    @pytest.mark.asyncio
    async def test_logout_twice_is_harmless(self, auth_module, blacklist):
        """Test that logging out an already blacklisted token is not an error."""
        principal = Principal(user_id="u", token="tok")

        await auth_module.logout(principal)
        await auth_module.logout(principal)

        assert await blacklist.contains("tok") is True
