"""Parse Server identity client.

Talks to the Parse Server REST API (hosted Back4App or self-hosted):
- POST /users    account signup
- POST /login    credential login
- POST /logout   session teardown
- GET  /users/me current session lookup

The current session token is held by the client instance and stands in for
the SDK's process-wide "current user".
"""

import logging
from typing import Any, Optional

import httpx

from .provider import (
    ProviderErrorCode,
    ProviderException,
    ProviderNotInitializedError,
    ProviderUser,
    RemoteIdentityClient,
)

logger = logging.getLogger(__name__)


class ParseIdentityClient(RemoteIdentityClient):
    """Parse Server REST identity client.

    Configuration:
        IDENTITY_PROVIDER=parse (default)
        PARSE_SERVER_URL=<server url, e.g. https://parseapi.back4app.com>
        PARSE_APP_ID=<application id>
        PARSE_REST_API_KEY=<REST API key> (optional for self-hosted servers)
        PROVIDER_TIMEOUT_SECONDS=<seconds> (unset: wait indefinitely)
    """

    def __init__(
        self,
        server_url: Optional[str],
        app_id: Optional[str],
        rest_api_key: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize Parse client.

        Args:
            server_url: Parse Server base URL
            app_id: Parse application id
            rest_api_key: Parse REST API key (optional)
            timeout_seconds: Request timeout; None disables it
            transport: Custom httpx transport (used by tests)
        """
        self.server_url = server_url.rstrip("/") if server_url else None
        self.app_id = app_id
        self.rest_api_key = rest_api_key
        self.timeout = httpx.Timeout(timeout_seconds)
        self._transport = transport
        self._http: Optional[httpx.AsyncClient] = None

        self._session_token: Optional[str] = None
        self._current_user: Optional[ProviderUser] = None

        if not self.is_initialized:
            logger.warning(
                "Parse identity client is not configured. "
                "Set PARSE_SERVER_URL and PARSE_APP_ID."
            )

    @property
    def is_initialized(self) -> bool:
        return bool(self.server_url and self.app_id)

    async def create_account(self, username: str, email: str, password: str) -> ProviderUser:
        """Sign up a new Parse user and adopt its session."""
        data = await self._request(
            "POST",
            "/users",
            json={"username": username, "email": email, "password": password},
        )
        # Signup only answers with objectId/sessionToken; the rest is what we sent
        user = ProviderUser(
            object_id=data.get("objectId"),
            username=data.get("username", username),
            email=data.get("email", email),
            avatar_url=data.get("avatarUrl"),
            session_token=data.get("sessionToken"),
        )
        self._adopt_session(user)
        logger.info(f"Parse account created: {user.username} ({user.object_id})")
        return user

    async def authenticate(self, email: str, password: str) -> ProviderUser:
        """Log in with email as the Parse username."""
        data = await self._request(
            "POST",
            "/login",
            json={"username": email, "password": password},
        )
        user = self._to_provider_user(data)
        self._adopt_session(user)
        logger.info(f"Parse login succeeded: {user.username} ({user.object_id})")
        return user

    async def end_session(self) -> None:
        """Log out the held session token.

        The local session is forgotten even if the server call fails.
        """
        token = self._session_token
        if not token:
            self._current_user = None
            return

        try:
            await self._request(
                "POST",
                "/logout",
                headers={"X-Parse-Session-Token": token},
            )
        finally:
            self._session_token = None
            self._current_user = None

    async def current_session(self) -> Optional[ProviderUser]:
        """Resolve the held session token to its user."""
        self._ensure_initialized()
        if not self._session_token:
            return None
        if self._current_user is not None:
            return self._current_user

        try:
            data = await self._request(
                "GET",
                "/users/me",
                headers={"X-Parse-Session-Token": self._session_token},
            )
        except ProviderException as e:
            if e.code == ProviderErrorCode.INVALID_SESSION_TOKEN:
                logger.info("Held Parse session token is no longer valid")
                self._session_token = None
                return None
            raise

        user = self._to_provider_user(data, session_token=self._session_token)
        self._current_user = user
        return user

    def restore_session(self, session_token: str) -> None:
        """Adopt a session token obtained elsewhere (e.g. a previous run)."""
        self._session_token = session_token
        self._current_user = None

    async def close(self) -> None:
        if self._http is not None:
            await self._http.aclose()
            self._http = None

    def _ensure_initialized(self) -> None:
        if not self.is_initialized:
            raise ProviderNotInitializedError("Parse SDK is not initialized")

    def _client(self) -> httpx.AsyncClient:
        if self._http is None:
            headers = {"X-Parse-Application-Id": self.app_id}
            if self.rest_api_key:
                headers["X-Parse-REST-API-Key"] = self.rest_api_key
            self._http = httpx.AsyncClient(
                base_url=self.server_url,
                headers=headers,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._http

    async def _request(
        self,
        method: str,
        path: str,
        json: Optional[dict] = None,
        headers: Optional[dict] = None,
    ) -> dict[str, Any]:
        """Issue a REST call and translate failures into ProviderException.

        Raises:
            ProviderNotInitializedError: If server URL or app id are missing
            ProviderException: On Parse error payloads or transport failures
        """
        self._ensure_initialized()

        try:
            response = await self._client().request(method, path, json=json, headers=headers)
        except httpx.HTTPError as e:
            logger.warning(f"Parse request {method} {path} failed: {e}")
            raise ProviderException(ProviderErrorCode.CONNECTION_FAILED, str(e)) from e

        try:
            data = response.json()
        except ValueError:
            data = None
        if not isinstance(data, dict):
            data = {}

        if response.is_error:
            code = data.get("code", ProviderErrorCode.OTHER_CAUSE)
            logger.debug(f"Parse {method} {path} -> {response.status_code} code={code}")
            raise ProviderException(code, data.get("error"))

        return data

    def _adopt_session(self, user: ProviderUser) -> None:
        self._session_token = user.session_token
        self._current_user = user

    @staticmethod
    def _to_provider_user(data: dict, session_token: Optional[str] = None) -> ProviderUser:
        return ProviderUser(
            object_id=data.get("objectId"),
            username=data.get("username"),
            email=data.get("email"),
            avatar_url=data.get("avatarUrl"),
            session_token=data.get("sessionToken", session_token),
        )
