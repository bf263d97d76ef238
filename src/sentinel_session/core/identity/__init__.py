"""Remote identity client abstraction layer.

Supports multiple identity backends via pluggable clients:
- parse: Parse Server REST API (production)
- memory: In-process accounts (development, tests)
"""

from .provider import (
    ProviderErrorCode,
    ProviderException,
    ProviderNotInitializedError,
    ProviderUser,
    RemoteIdentityClient,
)
from .factory import get_identity_client

__all__ = [
    "RemoteIdentityClient",
    "ProviderUser",
    "ProviderErrorCode",
    "ProviderException",
    "ProviderNotInitializedError",
    "get_identity_client",
]
