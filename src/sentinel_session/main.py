"""Sentinel Session Client

Composition root for embedding applications: configures logging, wires the
identity client and session cache into a SessionManager, and resolves the
signed-in user at startup.
"""

import logging
from typing import Optional, Tuple

from pythonjsonlogger import jsonlogger

from sentinel_session.config.settings import Settings, get_settings
from sentinel_session.core.identity.factory import close_identity_client, get_identity_client
from sentinel_session.core.session.manager import SessionManager
from sentinel_session.domain.models.user import User
from sentinel_session.infrastructure.cache.store import (
    MemorySessionCache,
    RedisSessionCache,
    SessionCache,
)
from sentinel_session.infrastructure.redis.client import close_redis_client, get_redis_client

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
JSON_LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s %(message)s'

logger = logging.getLogger(__name__)


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Configure root logging from settings (LOG_LEVEL, LOG_FORMAT)"""
    settings = settings or get_settings()
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    if settings.log_format == "json":
        handler = logging.StreamHandler()
        handler.setFormatter(jsonlogger.JsonFormatter(
            JSON_LOG_FORMAT,
            rename_fields={"levelname": "level", "asctime": "timestamp"},
        ))
        logging.basicConfig(level=level, handlers=[handler], force=True)
    else:
        logging.basicConfig(level=level, format=LOG_FORMAT, force=True)


async def create_session_cache(settings: Optional[Settings] = None) -> SessionCache:
    """Build the configured session cache backend

    Raises:
        ValueError: If SESSION_CACHE_BACKEND is invalid
    """
    settings = settings or get_settings()
    backend = settings.session_cache_backend.lower()

    if backend == "redis":
        redis_client = await get_redis_client()
        return RedisSessionCache(redis_client.get_client())
    if backend == "memory":
        return MemorySessionCache()

    raise ValueError(
        f"Unknown SESSION_CACHE_BACKEND: {backend}. "
        f"Valid options: redis, memory"
    )


async def create_session_manager(settings: Optional[Settings] = None) -> SessionManager:
    """Wire the configured identity client and cache into a SessionManager"""
    settings = settings or get_settings()

    return SessionManager(
        identity_client=get_identity_client(settings),
        cache=await create_session_cache(settings),
        cache_key=settings.session_cache_key,
        min_password_length=settings.min_password_length,
        avatar_base_url=settings.avatar_base_url,
    )


async def bootstrap(settings: Optional[Settings] = None) -> Tuple[SessionManager, Optional[User]]:
    """Start the session client and resolve the signed-in user

    Returns:
        (session manager, current user or None)
    """
    settings = settings or get_settings()
    configure_logging(settings)

    logger.info(f"Starting {settings.service_name} v{settings.service_version}")
    logger.info(f"Environment: {settings.environment}")

    manager = await create_session_manager(settings)
    user = await manager.get_current_user()
    if user:
        logger.info(f"Restored session for {user.username}")
    else:
        logger.info("No saved session")
    return manager, user


async def shutdown() -> None:
    """Release the shared Redis connection and provider HTTP client"""
    logger.info(f"Shutting down {get_settings().service_name}")
    await close_identity_client()
    await close_redis_client()
