"""Exception hierarchy for the API.

Errors raised below the dispatcher propagate up to it; the dispatcher is the
single place where an exception becomes a response envelope.

    StockroomError
    ├── ApiError            (carries an HTTP status)
    │   ├── BadRequestError     400
    │   ├── UnauthorizedError   401
    │   └── NotFoundError       404
    ├── ResolutionError     (container, fatal at startup)
    └── UsageError          (envelope / registry misuse, surfaces as 500)
"""

from typing import Any

from fastapi import status


class StockroomError(Exception):
    """Base class for every error raised by this package."""


class ApiError(StockroomError):
    """An error that maps directly to an HTTP status code.

    Args:
        message: Human-readable message, sent to the client as the body.
        status_code: HTTP status code. Defaults to 500.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class BadRequestError(ApiError):
    """Malformed request parameter or body."""

    status_code = status.HTTP_400_BAD_REQUEST


class UnauthorizedError(ApiError):
    """Authentication failed or is missing."""

    status_code = status.HTTP_401_UNAUTHORIZED


class NotFoundError(ApiError):
    """The requested resource does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class ResolutionError(StockroomError):
    """A dependency token could not be resolved by the container."""

    def __init__(self, token: Any, reason: str) -> None:
        self.token = token
        super().__init__(f"Cannot resolve {token_name(token)}: {reason}")


class UsageError(StockroomError):
    """The core layer was used in a way it does not support."""


def token_name(token: Any) -> str:
    """Return a readable name for a container token."""
    return getattr(token, "__qualname__", None) or getattr(token, "__name__", None) or repr(token)
