"""Session manager.

Mediates between the remote identity provider and the local session cache:
- signup/login call the provider, translate its account into a User and
  persist it under the session cache key
- provider error codes are mapped to user-facing SessionError subclasses
- logout always clears the cached session, whatever the provider does
- get_current_user bootstraps from the cache, falling back to the provider's
  own session and re-populating the cache from it

No locking is done here. Every cache operation replaces the whole value, so
concurrent callers simply leave the last writer's user in the cache.
"""

import logging
from typing import Dict, Optional, Tuple, Type

from sentinel_session.core.identity.provider import (
    ProviderErrorCode,
    ProviderException,
    ProviderNotInitializedError,
    ProviderUser,
    RemoteIdentityClient,
)
from sentinel_session.domain.errors import (
    AccountConflictError,
    AuthFailedError,
    InvalidInputError,
    ProviderError,
    ServiceUnavailableError,
    SessionError,
)
from sentinel_session.domain.models.user import DEFAULT_AVATAR_BASE_URL, User, build_avatar_url
from sentinel_session.infrastructure.cache.store import SessionCache

logger = logging.getLogger(__name__)

DEFAULT_SESSION_CACHE_KEY = "sentinelUser"
DEFAULT_MIN_PASSWORD_LENGTH = 6

ErrorMapping = Dict[int, Tuple[Type[SessionError], str]]

SIGNUP_ERRORS: ErrorMapping = {
    ProviderErrorCode.USERNAME_TAKEN: (
        AccountConflictError, "Username already taken. Please choose another."
    ),
    ProviderErrorCode.EMAIL_TAKEN: (
        AccountConflictError, "Email already registered. Please sign in instead."
    ),
    ProviderErrorCode.INVALID_EMAIL_ADDRESS: (
        InvalidInputError, "Invalid email address format."
    ),
}
SIGNUP_FALLBACK_MESSAGE = "Signup failed. Please try again."

LOGIN_ERRORS: ErrorMapping = {
    ProviderErrorCode.OBJECT_NOT_FOUND: (
        AuthFailedError, "Invalid email or password. Please try again."
    ),
}
LOGIN_FALLBACK_MESSAGE = "Login failed. Please check your credentials and try again."

SESSION_SAVE_FAILED_MESSAGE = "Could not save your session. Please try again."


def translate_provider_error(
    error: Exception, mapping: ErrorMapping, fallback_message: str
) -> SessionError:
    """Map a provider failure onto the session error taxonomy.

    Args:
        error: Exception raised by the identity client
        mapping: Provider code -> (error class, message)
        fallback_message: Message when the provider gave none

    Returns:
        SessionError to raise in place of the provider error
    """
    if isinstance(error, ProviderNotInitializedError):
        return ServiceUnavailableError()

    code = getattr(error, "code", None)
    if code in mapping:
        error_class, message = mapping[code]
        return error_class(message)

    if isinstance(error, ProviderException):
        message = error.message
    else:
        message = str(error)
    return ProviderError(message or fallback_message)


class SessionManager:
    """Client-side session manager.

    Example:
        manager = SessionManager(ParseIdentityClient(url, app_id), cache)
        user = await manager.login("a@x.com", "secret1")
        ...
        await manager.logout()
    """

    def __init__(
        self,
        identity_client: RemoteIdentityClient,
        cache: SessionCache,
        cache_key: str = DEFAULT_SESSION_CACHE_KEY,
        min_password_length: int = DEFAULT_MIN_PASSWORD_LENGTH,
        avatar_base_url: str = DEFAULT_AVATAR_BASE_URL,
    ):
        """Initialize session manager.

        Args:
            identity_client: Remote identity provider
            cache: Durable store for the cached session
            cache_key: Key the session is stored under
            min_password_length: Shortest password accepted at signup
            avatar_base_url: Placeholder avatar service endpoint
        """
        self.identity = identity_client
        self.cache = cache
        self.cache_key = cache_key
        self.min_password_length = min_password_length
        self.avatar_base_url = avatar_base_url

    async def signup(self, email: str, username: str, password: str) -> User:
        """Create an account and cache its session.

        Raises:
            InvalidInputError: Missing fields, short password, or malformed email
            AccountConflictError: Username or email already registered
            ServiceUnavailableError: Provider not initialized
            ProviderError: Any other provider failure, or the session could
                not be saved
        """
        if not all(_is_filled(value) for value in (email, username, password)):
            raise InvalidInputError("Email, username and password are required.")
        if len(password) < self.min_password_length:
            raise InvalidInputError(
                f"Password must be at least {self.min_password_length} characters."
            )

        try:
            provider_user = await self.identity.create_account(username, email, password)
        except Exception as e:
            error = translate_provider_error(e, SIGNUP_ERRORS, SIGNUP_FALLBACK_MESSAGE)
            logger.warning(f"Signup failed for {username} ({error.kind.value}): {e}")
            raise error from e

        user = await self._persist(provider_user)
        logger.info(f"Signed up {user.username}")
        return user

    async def login(self, email: str, password: str) -> User:
        """Authenticate and cache the session.

        Raises:
            InvalidInputError: Missing email or password
            AuthFailedError: Credentials rejected
            ServiceUnavailableError: Provider not initialized
            ProviderError: Any other provider failure, or the session could
                not be saved
        """
        if not (_is_filled(email) and _is_filled(password)):
            raise InvalidInputError("Email and password are required.")

        try:
            provider_user = await self.identity.authenticate(email, password)
        except Exception as e:
            error = translate_provider_error(e, LOGIN_ERRORS, LOGIN_FALLBACK_MESSAGE)
            logger.warning(f"Login failed ({error.kind.value}): {e}")
            raise error from e

        user = await self._persist(provider_user)
        logger.info(f"Logged in {user.username}")
        return user

    async def logout(self) -> None:
        """End the provider session and drop the cached one.

        Provider failures are logged and never surfaced; the cache entry is
        removed in every case.
        """
        try:
            await self.identity.end_session()
        except Exception as e:
            logger.warning(f"Provider logout failed, clearing local session anyway: {e}")
        finally:
            await self.cache.delete(self.cache_key)
        logger.info("Logged out")

    async def get_current_user(self) -> Optional[User]:
        """Resolve the signed-in user for application bootstrap.

        Order: valid cached entry, then the provider's session (written back
        to the cache), then None. A cached entry that is not valid User JSON
        is logged and treated as absent, so the provider session is still
        consulted before giving up. Never raises.
        """
        try:
            saved = await self.cache.get(self.cache_key)
        except Exception as e:
            logger.error(f"Failed to read saved user: {e}")
            saved = None

        if saved:
            user = User.from_json(saved)
            if user is not None:
                return user
            logger.error(f"Failed to parse saved user under '{self.cache_key}', ignoring it")

        try:
            provider_user = await self.identity.current_session()
        except ProviderNotInitializedError as e:
            logger.warning(f"Identity provider not initialized, no current user: {e}")
            return None
        except Exception as e:
            logger.warning(f"Error getting current user from provider: {e}")
            return None

        if provider_user is None:
            return None

        user = self.to_app_user(provider_user)
        try:
            await self.cache.set(self.cache_key, user.to_json())
        except Exception as e:
            logger.error(f"Failed to cache provider session for {user.username}: {e}")
        return user

    async def update_user(self, user: User) -> None:
        """Overwrite the cached session with a locally edited user."""
        await self.cache.set(self.cache_key, user.to_json())

    def to_app_user(self, provider_user: ProviderUser) -> User:
        """Translate a provider account into the application User."""
        username = provider_user.username or ""
        return User(
            username=username,
            email=provider_user.email or "",
            avatar_url=provider_user.avatar_url
            or build_avatar_url(username, self.avatar_base_url),
        )

    async def _persist(self, provider_user: ProviderUser) -> User:
        user = self.to_app_user(provider_user)
        try:
            await self.cache.set(self.cache_key, user.to_json())
        except Exception as e:
            logger.error(f"Failed to save session for {user.username}: {e}")
            raise ProviderError(SESSION_SAVE_FAILED_MESSAGE) from e
        return user


def _is_filled(value: Optional[str]) -> bool:
    return isinstance(value, str) and value != ""
