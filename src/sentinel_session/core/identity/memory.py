"""In-memory identity client.

Development provider that needs no network: accounts live in process memory
with bcrypt password hashes. Reproduces the provider error codes the
SessionManager maps (username/email taken, bad email, bad credentials).
"""

import logging
import re
import uuid
from dataclasses import dataclass
from typing import Dict, Optional

import bcrypt

from .provider import (
    ProviderErrorCode,
    ProviderException,
    ProviderUser,
    RemoteIdentityClient,
)

logger = logging.getLogger(__name__)


@dataclass
class _Account:
    object_id: str
    username: str
    email: str
    password_hash: str
    avatar_url: Optional[str] = None

    def to_provider_user(self, session_token: Optional[str] = None) -> ProviderUser:
        return ProviderUser(
            object_id=self.object_id,
            username=self.username,
            email=self.email,
            avatar_url=self.avatar_url,
            session_token=session_token,
        )


class InMemoryIdentityClient(RemoteIdentityClient):
    """Process-local identity provider.

    Configuration:
        IDENTITY_PROVIDER=memory
    """

    def __init__(self):
        self._accounts: Dict[str, _Account] = {}
        self._email_index: Dict[str, str] = {}
        self._username_index: Dict[str, str] = {}
        self._current: Optional[ProviderUser] = None

        self.email_pattern = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

    async def create_account(self, username: str, email: str, password: str) -> ProviderUser:
        if username in self._username_index:
            raise ProviderException(
                ProviderErrorCode.USERNAME_TAKEN, "Account already exists for this username."
            )
        if not self.email_pattern.match(email or ""):
            raise ProviderException(
                ProviderErrorCode.INVALID_EMAIL_ADDRESS, "Email address format is invalid."
            )
        if email.lower() in self._email_index:
            raise ProviderException(
                ProviderErrorCode.EMAIL_TAKEN, "Account already exists for this email address."
            )

        account = _Account(
            object_id=uuid.uuid4().hex[:10],
            username=username,
            email=email,
            password_hash=bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode(),
        )
        self._accounts[account.object_id] = account
        self._username_index[username] = account.object_id
        self._email_index[email.lower()] = account.object_id

        logger.info(f"Created in-memory account {account.object_id} ({username})")
        return self._open_session(account)

    async def authenticate(self, email: str, password: str) -> ProviderUser:
        object_id = self._email_index.get((email or "").lower())
        account = self._accounts.get(object_id) if object_id else None

        if not account or not bcrypt.checkpw(password.encode(), account.password_hash.encode()):
            logger.debug("Login failed: unknown email or wrong password")
            raise ProviderException(
                ProviderErrorCode.OBJECT_NOT_FOUND, "Invalid username/password."
            )

        return self._open_session(account)

    async def end_session(self) -> None:
        self._current = None

    async def current_session(self) -> Optional[ProviderUser]:
        return self._current

    def set_avatar(self, username: str, avatar_url: str) -> None:
        """Attach an avatar URL to an existing account."""
        object_id = self._username_index.get(username)
        if object_id is None:
            raise KeyError(username)
        self._accounts[object_id].avatar_url = avatar_url

    def _open_session(self, account: _Account) -> ProviderUser:
        self._current = account.to_provider_user(session_token=f"r:{uuid.uuid4().hex}")
        return self._current
