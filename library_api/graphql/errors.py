"""
GraphQL Error Classes

Errors raised by resolvers. Each carries an ``extensions`` dict that
graphql-core copies into the error it returns to the client, so callers
can branch on ``errors[0].extensions.code``:

- UNAUTHENTICATED: a mutation needs a logged-in user
- BAD_USER_INPUT:  missing or invalid arguments, or a write the database
                   rejected; ``extensions.invalidArgs`` holds the arguments
- NOT_FOUND:       the record to change does not exist
"""

from typing import Any

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError


class AuthenticationError(Exception):
    """Raised when authentication is required but not provided."""

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)
        self.extensions = {"code": "UNAUTHENTICATED"}


class ValidationError(Exception):
    """Raised when input validation fails or a write is rejected."""

    def __init__(self, message: str, invalid_args: dict[str, Any] | None = None):
        super().__init__(message)
        self.invalid_args = invalid_args or {}
        self.extensions = {"code": "BAD_USER_INPUT", "invalidArgs": self.invalid_args}


class NotFoundError(Exception):
    """Raised when a requested resource is not found."""

    def __init__(self, message: str, invalid_args: dict[str, Any] | None = None):
        super().__init__(message)
        self.invalid_args = invalid_args or {}
        self.extensions = {"code": "NOT_FOUND", "invalidArgs": self.invalid_args}


def describe_validation_error(exc: PydanticValidationError) -> str:
    """
    Flatten a pydantic ValidationError into one readable message.

    Example:
        "title: String should have at least 2 characters"
    """
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        messages.append(f"{location}: {error['msg']}" if location else error["msg"])
    return "; ".join(messages)


def database_error_message(exc: SQLAlchemyError) -> str:
    """Message of the driver error behind a SQLAlchemy exception, if any."""
    original = getattr(exc, "orig", None)
    return str(original if original is not None else exc)
