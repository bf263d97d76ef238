"""Session management: provider calls, error mapping and the session cache."""

from .manager import DEFAULT_SESSION_CACHE_KEY, SessionManager

__all__ = [
    "SessionManager",
    "DEFAULT_SESSION_CACHE_KEY",
]
