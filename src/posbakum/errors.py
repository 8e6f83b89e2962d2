from abc import ABC


class UserError(ABC, Exception):
    """Base class for errors reported back to the caller.

    Messages of UserError subclasses are shown to visitors and staff,
    so they must not contain sensitive information.
    """


class NotFoundError(UserError):
    """Raised when a requested resource is not found."""

    def __init__(self, message: str = "Document not found") -> None:
        super().__init__(message)


class AuthenticationError(UserError):
    """Raised when authentication fails."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message)


class AccessDeniedError(UserError):
    """Raised when a caller acts on a ticket outside their session or scope."""


class ValidationError(UserError):
    """Raised when user input fails validation."""


class ConflictError(UserError):
    """Raised when a ticket is no longer in the state an operation expects."""


class StoreUnavailableError(UserError):
    """Raised when a write could not be persisted."""

    def __init__(self, message: str = "Queue storage is temporarily unavailable, please try again") -> None:
        super().__init__(message)
