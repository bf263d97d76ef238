"""Identity client factory.

Selects and instantiates the identity backend based on configuration.
"""

import logging
from typing import Optional

from sentinel_session.config.settings import Settings, get_settings

from .provider import RemoteIdentityClient

logger = logging.getLogger(__name__)

# Global client instance (initialized on first call)
_client_instance: Optional[RemoteIdentityClient] = None


def get_identity_client(settings: Optional[Settings] = None) -> RemoteIdentityClient:
    """Get the configured identity client instance.

    Backend is selected via the IDENTITY_PROVIDER setting:
    - parse: Parse Server REST API (default)
    - memory: In-process accounts for development

    Returns:
        Configured RemoteIdentityClient instance

    Raises:
        ValueError: If IDENTITY_PROVIDER is invalid
    """
    global _client_instance

    # Return cached instance
    if _client_instance is not None:
        return _client_instance

    settings = settings or get_settings()
    mode = settings.identity_provider.lower()
    logger.info(f"Initializing identity client: {mode}")

    if mode == "parse":
        from .parse import ParseIdentityClient
        _client_instance = ParseIdentityClient(
            server_url=settings.parse_server_url,
            app_id=settings.parse_app_id,
            rest_api_key=settings.parse_rest_api_key,
            timeout_seconds=settings.provider_timeout_seconds,
        )

    elif mode == "memory":
        from .memory import InMemoryIdentityClient
        _client_instance = InMemoryIdentityClient()

    else:
        raise ValueError(
            f"Unknown IDENTITY_PROVIDER: {mode}. "
            f"Valid options: parse, memory"
        )

    logger.info(f"Identity client initialized: {_client_instance.__class__.__name__}")
    return _client_instance


async def close_identity_client() -> None:
    """Close and forget the global identity client."""
    global _client_instance
    if _client_instance is not None:
        await _client_instance.close()
        _client_instance = None


def reset_identity_client() -> None:
    """Reset the global client instance (for testing)."""
    global _client_instance
    _client_instance = None
