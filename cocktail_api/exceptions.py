"""
Application Exceptions

Domain errors raised by the services layer. Routers never build error
responses by hand: main.py registers one handler for AppError that turns
each subclass into its HTTP status and JSON body.

Taxonomy:
=========
- ValidationError (422): malformed or out-of-range input, with field details
- ConflictError (409): uniqueness violation
- NotFoundError (404): referenced entity absent
- AuthError (401): missing/invalid/expired credential, generic message
- ForbiddenError (403): authenticated but not allowed to act on the target
- ServerError (500): unexpected failure, details only in the logs
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class FieldError:
    """A single field-level validation problem."""

    field: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


class AppError(Exception):
    """Base class for errors that map to an HTTP response."""

    status_code: int = 500
    default_message: str = "An internal error occurred."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def headers(self) -> dict[str, str] | None:
        return None

    def to_payload(self) -> dict[str, Any]:
        return {"detail": self.message}


class ValidationError(AppError):
    """Raised when input fails validation, before any store mutation."""

    status_code = 422
    default_message = "Invalid data"

    def __init__(
        self,
        errors: list[FieldError] | None = None,
        message: str | None = None,
    ) -> None:
        self.errors = list(errors or [])
        super().__init__(message)

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls([FieldError(field, message)])

    def to_payload(self) -> dict[str, Any]:
        return {
            "detail": self.message,
            "errors": [error.to_dict() for error in self.errors],
        }


class ConflictError(AppError):
    """Raised when a unique value (email, username, cocktail name) is taken."""

    status_code = 409
    default_message = "Resource already exists."


class NotFoundError(AppError):
    """Raised when a referenced user or cocktail does not exist."""

    status_code = 404
    default_message = "Resource not found."


class AuthError(AppError):
    """
    Raised for missing, malformed, invalid or expired credentials.

    The message is deliberately generic so that callers cannot tell
    "unknown user" apart from "wrong password".
    """

    status_code = 401
    default_message = "Invalid credentials."

    @property
    def headers(self) -> dict[str, str]:
        return {"WWW-Authenticate": "Bearer"}


class ForbiddenError(AppError):
    """Raised when the authenticated caller is not the target user."""

    status_code = 403
    default_message = "You are not allowed to access this resource."


class ServerError(AppError):
    """Unexpected failure. Never carries internal details to the caller."""

    status_code = 500
