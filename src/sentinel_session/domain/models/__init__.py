"""Domain models for the Sentinel session client"""

from sentinel_session.domain.models.user import (
    DEFAULT_AVATAR_BASE_URL,
    User,
    build_avatar_url,
)

__all__ = [
    "User",
    "build_avatar_url",
    "DEFAULT_AVATAR_BASE_URL",
]
