from abc import ABC


class UserError(ABC, Exception):
    """Base class for user-related errors.

    All errors that inherit from UserError will have their messages
    displayed to the user. These errors should not contain any
    sensitive information.
    """


class NotFoundError(UserError):
    """Raised when a requested resource is not found."""

    def __init__(self, message: str = "Document not found") -> None:
        super().__init__(message)


class AuthenticationError(UserError):
    """Raised when authentication fails."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message)


class ValidationError(UserError):
    """Raised when user input fails validation."""


class PageRedirectError(Exception):
    """Raised by the page-route gate to send the browser back to the entry page."""

    def __init__(self, location: str = "/") -> None:
        super().__init__(location)
        self.location = location


class SigningError(Exception):
    """Raised when a session token cannot be signed. Fatal configuration failure."""


class HashingError(Exception):
    """Raised when a password cannot be hashed."""


class CookieReadError(Exception):
    """Raised when the request cookies cannot be read."""


class BackendUnavailableError(Exception):
    """Raised when the storage backend is unreachable at startup."""


class OperationTimeoutError(Exception):
    """Raised when a storage operation exceeds its deadline."""

    def __init__(self, message: str = "operation timed out") -> None:
        super().__init__(message)
