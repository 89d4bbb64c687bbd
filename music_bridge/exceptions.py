"""Custom exceptions for music-bridge with proper HTTP status codes.

The first five classes below form the provider-facing taxonomy shared by every
catalog backend. The remaining ones are raised inside the YouTube Music
integration and either surface verbatim (terminal auth failures) or get
translated to ``ProviderError`` at the provider boundary.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error codes for structured error responses."""

    # Generic errors
    MUSIC_BRIDGE_ERROR = "MUSIC_BRIDGE_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"

    # Provider taxonomy
    NOT_AUTHENTICATED = "NOT_AUTHENTICATED"
    NOT_FOUND = "NOT_FOUND"
    NOT_SUPPORTED = "NOT_SUPPORTED"
    NETWORK_ERROR = "NETWORK_ERROR"
    PROVIDER_ERROR = "PROVIDER_ERROR"

    # Device flow / token errors
    AUTH_DENIED = "AUTH_DENIED"
    AUTH_CODE_EXPIRED = "AUTH_CODE_EXPIRED"
    AUTH_TOKEN_REFRESH_FAILED = "AUTH_TOKEN_REFRESH_FAILED"

    # Transport envelope errors
    INVALID_RESPONSE = "INVALID_RESPONSE"
    HTTP_ERROR = "HTTP_ERROR"


class MusicBridgeException(Exception):
    """Base exception for music-bridge errors with HTTP status code support.

    ``message`` is the diagnostic text; ``user_message`` is the short,
    categorized text safe to show an end user.
    """

    user_message = "Something went wrong with the music provider"

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.MUSIC_BRIDGE_ERROR,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        """Initialize music-bridge exception.

        Args:
            message: Human-readable error message
            code: Error code from ErrorCode enum
            status_code: HTTP status code (default 500)
            details: Additional error context/details
        """
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class NotAuthenticatedException(MusicBridgeException):
    """User not signed in to the provider, or the session could not be renewed."""

    user_message = "Not signed in to music provider"

    def __init__(self, message: str = "Not signed in to music provider", details: dict[str, Any] | None = None):
        super().__init__(message, code=ErrorCode.NOT_AUTHENTICATED, status_code=401, details=details)


class NotFoundException(MusicBridgeException):
    """Requested item does not exist or could not be recognized."""

    user_message = "Item not found"

    def __init__(self, message: str = "Item not found", details: dict[str, Any] | None = None):
        super().__init__(message, code=ErrorCode.NOT_FOUND, status_code=404, details=details)


class NotSupportedException(MusicBridgeException):
    """Operation not offered by this provider."""

    user_message = "Operation not supported"

    def __init__(self, message: str = "Operation not supported", details: dict[str, Any] | None = None):
        super().__init__(message, code=ErrorCode.NOT_SUPPORTED, status_code=501, details=details)


class NetworkException(MusicBridgeException):
    """Transport-level failure. The underlying error is kept as ``cause``."""

    user_message = "Could not reach the music provider"

    def __init__(self, cause: BaseException, message: str | None = None, details: dict[str, Any] | None = None):
        self.cause = cause
        super().__init__(
            message or f"Network error: {cause}",
            code=ErrorCode.NETWORK_ERROR,
            status_code=502,
            details={"error_type": type(cause).__name__, **(details or {})},
        )


class ProviderException(MusicBridgeException):
    """Provider-specific failure with a message."""

    user_message = "The music provider returned an error"

    def __init__(self, message: str, status_code: int = 502, details: dict[str, Any] | None = None):
        super().__init__(message, code=ErrorCode.PROVIDER_ERROR, status_code=status_code, details=details)


class AuthDeniedException(MusicBridgeException):
    """User declined the device authorization request."""

    user_message = "Sign-in was denied. Start again to retry"

    def __init__(self, message: str = "Authorization denied by user", details: dict[str, Any] | None = None):
        super().__init__(message, code=ErrorCode.AUTH_DENIED, status_code=403, details=details)


class AuthCodeExpiredException(MusicBridgeException):
    """Device code expired before the user authorized it."""

    user_message = "Sign-in code expired. Start again to get a new code"

    def __init__(self, message: str = "Device code expired", details: dict[str, Any] | None = None):
        super().__init__(message, code=ErrorCode.AUTH_CODE_EXPIRED, status_code=410, details=details)


class AuthTokenRefreshFailedException(MusicBridgeException):
    """Refresh grant was rejected or returned an unusable body."""

    user_message = "Session expired. Please sign in again"

    def __init__(self, message: str = "Token refresh failed", details: dict[str, Any] | None = None):
        super().__init__(message, code=ErrorCode.AUTH_TOKEN_REFRESH_FAILED, status_code=401, details=details)


class InvalidResponseException(MusicBridgeException):
    """Transport envelope could not be decoded."""

    user_message = "The music provider sent an unreadable response"

    def __init__(self, message: str = "Invalid response", details: dict[str, Any] | None = None):
        super().__init__(message, code=ErrorCode.INVALID_RESPONSE, status_code=502, details=details)


class HTTPStatusException(MusicBridgeException):
    """Upstream answered with an unexpected HTTP status."""

    user_message = "The music provider returned an error"

    def __init__(self, upstream_status: int, message: str | None = None, details: dict[str, Any] | None = None):
        self.upstream_status = upstream_status
        super().__init__(
            message or f"HTTP error {upstream_status}",
            code=ErrorCode.HTTP_ERROR,
            status_code=502,
            details={"upstream_status": upstream_status, **(details or {})},
        )
