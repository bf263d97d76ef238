"""
Pytest configuration and fixtures for session client tests.

Provides fixtures for:
- Identity client doubles (mocked and in-memory)
- Session caches
- SessionManager wired to both
"""

from unittest.mock import AsyncMock

import pytest

from sentinel_session.config.settings import get_settings
from sentinel_session.core.identity.factory import reset_identity_client
from sentinel_session.core.identity.memory import InMemoryIdentityClient
from sentinel_session.core.identity.provider import ProviderUser, RemoteIdentityClient
from sentinel_session.core.session.manager import SessionManager
from sentinel_session.infrastructure.cache.store import MemorySessionCache

CACHE_KEY = "sentinelUser"


@pytest.fixture(autouse=True)
def reset_globals():
    """Drop cached settings and the global identity client between tests."""
    get_settings.cache_clear()
    reset_identity_client()
    yield
    get_settings.cache_clear()
    reset_identity_client()


@pytest.fixture
def provider_user() -> ProviderUser:
    """Provider account returned by a successful signup/login."""
    return ProviderUser(
        object_id="abc123",
        username="alice",
        email="a@x.com",
        session_token="r:token",
    )


@pytest.fixture
def mock_identity(provider_user) -> AsyncMock:
    """Identity client double with successful defaults."""
    identity = AsyncMock(spec=RemoteIdentityClient)
    identity.create_account.return_value = provider_user
    identity.authenticate.return_value = provider_user
    identity.end_session.return_value = None
    identity.current_session.return_value = None
    return identity


@pytest.fixture
def cache() -> MemorySessionCache:
    """Empty in-memory session cache."""
    return MemorySessionCache()


@pytest.fixture
def manager(mock_identity, cache) -> SessionManager:
    """Session manager over the mocked identity client."""
    return SessionManager(mock_identity, cache, cache_key=CACHE_KEY)


@pytest.fixture
def memory_identity() -> InMemoryIdentityClient:
    """In-process identity provider."""
    return InMemoryIdentityClient()
