"""Abstract remote identity client interface.

This module defines the contract every identity backend must implement.
The SessionManager depends only on this interface, so the backend-as-a-service
SDK can be swapped for an in-memory double in development and tests.
"""

from abc import ABC, abstractmethod
from enum import IntEnum
from typing import Optional
from pydantic import BaseModel


class ProviderErrorCode(IntEnum):
    """Provider-native error codes (Parse Server numbering)."""
    OTHER_CAUSE = -1
    CONNECTION_FAILED = 100
    OBJECT_NOT_FOUND = 101  # invalid username/password on login
    INVALID_EMAIL_ADDRESS = 125
    USERNAME_TAKEN = 202
    EMAIL_TAKEN = 203
    INVALID_SESSION_TOKEN = 209


class ProviderUser(BaseModel):
    """Account record as returned by the identity provider.

    Attributes:
        object_id: Provider-assigned account identifier
        username: Account username
        email: Account email address
        avatar_url: Avatar URL if the account has one
        session_token: Token of the session opened by signup/login
    """
    object_id: Optional[str] = None
    username: Optional[str] = None
    email: Optional[str] = None
    avatar_url: Optional[str] = None
    session_token: Optional[str] = None


class ProviderException(Exception):
    """Provider-native failure carrying a numeric code and message."""

    def __init__(self, code: int, message: Optional[str] = None):
        super().__init__(message or f"Provider error {code}")
        self.code = code
        self.message = message


class ProviderNotInitializedError(Exception):
    """Identity SDK is missing or not configured."""
    pass


class RemoteIdentityClient(ABC):
    """Abstract interface for identity providers.

    Implementation is chosen at startup via the IDENTITY_PROVIDER setting.

    Example:
        # Parse Server backend
        IDENTITY_PROVIDER=parse
        PARSE_SERVER_URL=https://parseapi.back4app.com
        PARSE_APP_ID=xxx
        PARSE_REST_API_KEY=xxx

        # Local development, no network
        IDENTITY_PROVIDER=memory
    """

    @abstractmethod
    async def create_account(self, username: str, email: str, password: str) -> ProviderUser:
        """Register a new account and open a session for it.

        Args:
            username: Requested username
            email: Account email address
            password: Plain text password

        Returns:
            ProviderUser for the created account

        Raises:
            ProviderException: USERNAME_TAKEN, EMAIL_TAKEN, INVALID_EMAIL_ADDRESS
                or any other provider failure
            ProviderNotInitializedError: If the provider is not configured
        """
        pass

    @abstractmethod
    async def authenticate(self, email: str, password: str) -> ProviderUser:
        """Verify credentials and open a session.

        Args:
            email: Account email address
            password: Plain text password

        Returns:
            ProviderUser for the authenticated account

        Raises:
            ProviderException: OBJECT_NOT_FOUND for bad credentials, or any
                other provider failure
            ProviderNotInitializedError: If the provider is not configured
        """
        pass

    @abstractmethod
    async def end_session(self) -> None:
        """Close the current provider session (best effort)."""
        pass

    @abstractmethod
    async def current_session(self) -> Optional[ProviderUser]:
        """Return the account of the ambient provider session, if any.

        Raises:
            ProviderNotInitializedError: If the provider is not configured
        """
        pass

    async def close(self) -> None:
        """Release transport resources held by the client."""
        return None
