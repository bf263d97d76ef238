"""Session Data Models

Purpose: Define the application-facing user record and its cached form

The User model is what the UI renders and what the session cache persists.
Its JSON form is the cache wire format:

    {"username": "alice", "email": "a@x.com", "avatarUrl": "https://..."}

Key Components:
- User: Immutable application identity record
- build_avatar_url: Placeholder avatar keyed on username
"""

from typing import Optional
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field, ValidationError

DEFAULT_AVATAR_BASE_URL = "https://ui-avatars.com/api/"

# Characters encodeURIComponent leaves untouched besides alphanumerics
_URI_COMPONENT_SAFE = "-_.!~*'()"


def build_avatar_url(username: str, base_url: str = DEFAULT_AVATAR_BASE_URL) -> str:
    """Generate a placeholder avatar URL for a username

    Args:
        username: Account username (falls back to "User" when empty)
        base_url: Avatar service endpoint

    Returns:
        Avatar URL with a randomised background
    """
    name = quote(username or "User", safe=_URI_COMPONENT_SAFE)
    return f"{base_url}?name={name}&background=random"


class User(BaseModel):
    """Application user

    Attributes:
        username: Account username
        email: Account email address
        avatar_url: Avatar image URL (serialized as ``avatarUrl``)
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, strict=True)

    username: str
    email: str
    avatar_url: str = Field(alias="avatarUrl")

    def to_json(self) -> str:
        """Serialize to the cached JSON form"""
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_json(cls, payload: str) -> Optional["User"]:
        """Parse a cached JSON payload

        Returns:
            User if the payload is valid JSON with the User shape, None otherwise
        """
        try:
            return cls.model_validate_json(payload)
        except ValidationError:
            return None
