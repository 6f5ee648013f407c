"""Typed failures raised by the request executor.

Every failure derives from :class:`ClientError` so generic call sites can catch
everything at once, while specific sites branch on the subclass (or on
``kind``) to tell "re-authenticate" (401) from "not permitted" (403) from
"request failed".
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from sus_client.models import ErrorResponse

HTTP_OK = 200
HTTP_BAD_REQUEST = 400
HTTP_UNAUTHORIZED = 401
HTTP_FORBIDDEN = 403


class ErrorKind(str, Enum):
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    SERVER = "server"
    TRANSPORT = "transport"
    CLIENT = "client"


class ClientError(Exception):
    """Raised when a client-level error occurs."""

    kind = ErrorKind.CLIENT


class TransportError(ClientError):
    """The exchange never completed: connection, timeout or body read failure."""

    kind = ErrorKind.TRANSPORT


class ServerError(ClientError):
    """The remote service rejected the request."""

    kind = ErrorKind.SERVER

    def __init__(self, status_code: int, status_message: str, error: Optional[ErrorResponse] = None) -> None:
        super().__init__(_build_message(status_code, status_message, error))
        self.status_code = status_code
        self.status_message = status_message
        self.error = error


class UnauthorizedError(ServerError):
    kind = ErrorKind.UNAUTHORIZED


class ForbiddenError(ServerError):
    kind = ErrorKind.FORBIDDEN


_ERRORS_BY_KIND: dict[ErrorKind, type[ServerError]] = {
    ErrorKind.UNAUTHORIZED: UnauthorizedError,
    ErrorKind.FORBIDDEN: ForbiddenError,
    ErrorKind.SERVER: ServerError,
}


def classify_status(status_code: int) -> ErrorKind:
    """Map a failing HTTP status to its error kind."""

    if status_code < HTTP_BAD_REQUEST:
        raise ValueError(f"Status {status_code} is not a failure")
    if status_code == HTTP_UNAUTHORIZED:
        return ErrorKind.UNAUTHORIZED
    if status_code == HTTP_FORBIDDEN:
        return ErrorKind.FORBIDDEN
    return ErrorKind.SERVER


def server_error(status_code: int, status_message: str, error: Optional[ErrorResponse] = None) -> ServerError:
    """Build the error variant matching ``status_code``."""

    error_cls = _ERRORS_BY_KIND[classify_status(status_code)]
    return error_cls(status_code, status_message, error)


def _build_message(status_code: int, status_message: str, error: Optional[ErrorResponse]) -> str:
    message = f"{status_code}: {status_message}"
    if error is not None:
        message += f" - {error.error}"
    return message
