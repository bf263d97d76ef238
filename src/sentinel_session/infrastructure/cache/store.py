"""Session Cache Storage

Purpose: Durable key-value slot holding the serialized signed-in user

Values are whole strings replaced atomically, so concurrent writers never
interleave: the last write wins.

Backends:
- RedisSessionCache: durable store shared across restarts
- MemorySessionCache: process-local dict for development and tests
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional

from redis.asyncio import Redis

logger = logging.getLogger(__name__)


class SessionCache(ABC):
    """Key-value store for cached sessions"""

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None on a miss"""

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Replace the stored value"""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove the stored value if present"""


class RedisSessionCache(SessionCache):
    """Redis-backed session cache

    Read failures are reported as a miss, write failures propagate and
    delete failures are logged only.
    """

    def __init__(self, redis_client: Redis):
        """Initialize cache

        Args:
            redis_client: Redis connection for session storage
        """
        self.redis = redis_client

    async def get(self, key: str) -> Optional[str]:
        """Get Redis key value"""
        try:
            result = await self.redis.get(key)
            if isinstance(result, bytes):
                result = result.decode("utf-8")
            return result if result else None
        except Exception as e:
            logger.error(f"Redis GET failed for key {key}: {e}")
            return None

    async def set(self, key: str, value: str) -> None:
        """Set Redis key"""
        try:
            await self.redis.set(key, value)
        except Exception as e:
            logger.error(f"Redis SET failed for key {key}: {e}")
            raise

    async def delete(self, key: str) -> None:
        """Delete Redis key"""
        try:
            await self.redis.delete(key)
        except Exception as e:
            logger.error(f"Redis DELETE failed for key {key}: {e}")


class MemorySessionCache(SessionCache):
    """Dict-backed session cache"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)
