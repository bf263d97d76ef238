"""Session error taxonomy

Every failure surfaced by the SessionManager is one of these exceptions,
each carrying a human-readable message suitable for display.
"""

from enum import Enum


class ErrorKind(Enum):
    """Category of a session failure"""
    VALIDATION_ERROR = "ValidationError"
    ACCOUNT_CONFLICT = "AccountConflict"
    AUTH_FAILED = "AuthFailed"
    PROVIDER_ERROR = "ProviderError"
    SERVICE_UNAVAILABLE = "ServiceUnavailable"


SERVICE_UNAVAILABLE_MESSAGE = (
    "Authentication service is not available. Please check your configuration."
)


class SessionError(Exception):
    """Base class for user-facing session failures"""

    kind: ErrorKind = ErrorKind.PROVIDER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInputError(SessionError):
    """Input rejected locally or by the provider as malformed."""
    kind = ErrorKind.VALIDATION_ERROR


class AccountConflictError(SessionError):
    """Username or email already registered."""
    kind = ErrorKind.ACCOUNT_CONFLICT


class AuthFailedError(SessionError):
    """Credentials rejected."""
    kind = ErrorKind.AUTH_FAILED


class ProviderError(SessionError):
    """Any other provider failure."""
    kind = ErrorKind.PROVIDER_ERROR


class ServiceUnavailableError(SessionError):
    """Identity provider not initialized."""
    kind = ErrorKind.SERVICE_UNAVAILABLE

    def __init__(self, message: str = SERVICE_UNAVAILABLE_MESSAGE):
        super().__init__(message)
