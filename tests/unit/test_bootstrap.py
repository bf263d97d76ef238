"""Unit tests for configuration, client factory and bootstrap wiring"""

import json
import logging

import pytest
from unittest.mock import AsyncMock, MagicMock, patch
from pythonjsonlogger import jsonlogger

from sentinel_session.config.settings import Settings
from sentinel_session.core.identity.factory import get_identity_client
from sentinel_session.core.identity.memory import InMemoryIdentityClient
from sentinel_session.core.identity.parse import ParseIdentityClient
from sentinel_session.domain.models.user import User
from sentinel_session.infrastructure.cache.store import MemorySessionCache, RedisSessionCache
from sentinel_session.main import (
    bootstrap,
    configure_logging,
    create_session_cache,
    create_session_manager,
)


@pytest.fixture(autouse=True)
def restore_root_logger():
    """configure_logging replaces root handlers; put pytest's back."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.mark.unit
class TestSettings:
    """Test environment-driven settings"""

    def test_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.session_cache_key == "sentinelUser"
        assert settings.min_password_length == 6
        assert settings.identity_provider == "parse"
        assert settings.provider_timeout_seconds is None
        assert settings.redis_url == "redis://localhost:6379/0"

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("SESSION_CACHE_KEY", "otherKey")
        monkeypatch.setenv("PARSE_APP_ID", "app-id")
        monkeypatch.setenv("REDIS_PASSWORD", "pw")

        settings = Settings(_env_file=None)

        assert settings.session_cache_key == "otherKey"
        assert settings.parse_app_id == "app-id"
        assert settings.redis_url == "redis://:pw@localhost:6379/0"


@pytest.mark.unit
class TestIdentityFactory:
    """Test identity client selection"""

    def test_parse_client(self):
        settings = Settings(
            _env_file=None,
            identity_provider="parse",
            parse_server_url="https://parse.example.com",
            parse_app_id="app-id",
        )

        client = get_identity_client(settings)

        assert isinstance(client, ParseIdentityClient)
        assert client.is_initialized is True

    def test_memory_client(self):
        client = get_identity_client(Settings(_env_file=None, identity_provider="memory"))

        assert isinstance(client, InMemoryIdentityClient)

    def test_instance_is_cached(self):
        settings = Settings(_env_file=None, identity_provider="memory")

        assert get_identity_client(settings) is get_identity_client(settings)

    def test_unknown_provider(self):
        with pytest.raises(ValueError, match="Unknown IDENTITY_PROVIDER"):
            get_identity_client(Settings(_env_file=None, identity_provider="firebase"))


@pytest.mark.unit
class TestSessionCacheFactory:
    """Test cache backend selection"""

    @pytest.mark.asyncio
    async def test_memory_backend(self):
        cache = await create_session_cache(Settings(_env_file=None, session_cache_backend="memory"))

        assert isinstance(cache, MemorySessionCache)

    @pytest.mark.asyncio
    @patch("sentinel_session.main.get_redis_client")
    async def test_redis_backend(self, mock_get_redis):
        mock_redis_client = MagicMock()
        mock_get_redis.return_value = mock_redis_client

        cache = await create_session_cache(Settings(_env_file=None, session_cache_backend="redis"))

        assert isinstance(cache, RedisSessionCache)
        assert cache.redis is mock_redis_client.get_client.return_value

    @pytest.mark.asyncio
    async def test_unknown_backend(self):
        with pytest.raises(ValueError, match="Unknown SESSION_CACHE_BACKEND"):
            await create_session_cache(Settings(_env_file=None, session_cache_backend="sqlite"))


@pytest.mark.unit
class TestBootstrap:
    """Test composition root"""

    @pytest.mark.asyncio
    async def test_create_session_manager_uses_settings(self):
        settings = Settings(
            _env_file=None,
            identity_provider="memory",
            session_cache_backend="memory",
            session_cache_key="k",
            min_password_length=8,
        )

        manager = await create_session_manager(settings)

        assert manager.cache_key == "k"
        assert manager.min_password_length == 8
        assert isinstance(manager.identity, InMemoryIdentityClient)

    @pytest.mark.asyncio
    async def test_bootstrap_without_saved_session(self):
        settings = Settings(
            _env_file=None, identity_provider="memory", session_cache_backend="memory"
        )

        manager, user = await bootstrap(settings)

        assert user is None
        assert manager is not None

    @pytest.mark.asyncio
    @patch("sentinel_session.main.create_session_manager")
    async def test_bootstrap_restores_user(self, mock_create):
        restored = User(username="alice", email="a@x.com", avatar_url="https://img/alice.png")
        mock_manager = MagicMock()
        mock_manager.get_current_user = AsyncMock(return_value=restored)
        mock_create.return_value = mock_manager

        manager, user = await bootstrap(
            Settings(_env_file=None, identity_provider="memory", session_cache_backend="memory")
        )

        assert manager is mock_manager
        assert user == restored


@pytest.mark.unit
class TestLogging:
    """Test logging configuration"""

    def test_configure_text_logging(self):
        configure_logging(Settings(_env_file=None, log_level="DEBUG", log_format="text"))

        assert logging.getLogger().level == logging.DEBUG

    def test_configure_json_logging(self):
        configure_logging(Settings(_env_file=None, log_level="WARNING", log_format="json"))

        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert isinstance(root.handlers[0].formatter, jsonlogger.JsonFormatter)

    def test_json_log_line_fields(self):
        configure_logging(Settings(_env_file=None, log_level="INFO", log_format="json"))
        formatter = logging.getLogger().handlers[0].formatter
        record = logging.LogRecord("sentinel", logging.INFO, __file__, 1, "hello %s", ("alice",), None)

        payload = json.loads(formatter.format(record))

        assert payload["message"] == "hello alice"
        assert payload["level"] == "INFO"
        assert payload["name"] == "sentinel"
        assert "timestamp" in payload
