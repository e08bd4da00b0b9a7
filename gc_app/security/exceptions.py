"""Security-layer exceptions. Typed, no HTTP."""

from typing import Optional


class SecurityError(Exception):
    """Base for all security-layer errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class AuthenticationRequired(SecurityError):
    """Raised when a protected page is requested without a session."""

    def __init__(self, message: str, callback_url: Optional[str] = None) -> None:
        self.callback_url = callback_url
        super().__init__(message)


class AuthorizationError(SecurityError):
    """Raised when the session's roles do not grant access to the resource."""


class InvalidSessionTokenError(SecurityError):
    """Raised when a session cookie cannot be decoded or has expired."""
