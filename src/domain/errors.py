"""Error taxonomy shared by the domain services.

Each service operation raises at most one of these; the API layer maps the
``status_code`` of the raised error onto the HTTP response.
"""

from __future__ import annotations


class ServiceDeskError(Exception):
    """Base class for errors that are safe to show to the caller."""

    status_code: int = 500
    default_message: str = "Unexpected error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ServiceDeskError):
    """Raised when input is missing or malformed."""

    status_code = 400
    default_message = "Invalid input"


class ConflictError(ServiceDeskError):
    """Raised when a unique value (account email) is already taken."""

    status_code = 400
    default_message = "This email address is already in use"


class NotFoundError(ServiceDeskError):
    """Raised when no record is visible to the caller."""

    status_code = 404
    default_message = "Not found"


class InvalidCredentialsError(ServiceDeskError):
    """Raised when a password does not match the stored hash."""

    status_code = 401
    default_message = "Incorrect password"


class UnauthenticatedError(ServiceDeskError):
    """Raised when a request carries no usable session."""

    status_code = 401
    default_message = "You need to sign in"


class InternalError(ServiceDeskError):
    """Raised for storage failures; the cause is logged, never returned."""

    status_code = 500
    default_message = "Something went wrong, please try again"
