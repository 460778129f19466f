"""Exception hierarchy for enode_client.

Every failure the library reports is an :class:`EnodeError`. Each subclass
pins an :class:`ErrorKind` so callers can branch on the category
programmatically (for example to decide whether a retry makes sense)
instead of matching on message text, and an ``exit_code`` used by the
``enode`` command line tool.

The ``detail`` of an error is the human-readable category message followed
by the raw HTTP status line, separated by a newline::

    users: no users with this id found
    404 Not Found

Subclass hierarchy::

    EnodeError                        (exit 1)
    +-- TransportError                (exit 6)
    |   +-- TransferError             (exit 6)
    +-- AuthExchangeError             (exit 3)
    +-- UnauthorizedError             (exit 3)
    +-- ResourceNotFoundError         (exit 4)
    +-- ValidationError               (exit 2)
    +-- ConnectionLimitReachedError   (exit 8)
    +-- GeneralServerError            (exit 5)
    +-- ReadError                     (exit 7)
    +-- ParseError                    (exit 7)
    +-- ConfigError                   (exit 1)
"""

from __future__ import annotations

import enum
from typing import Optional

from enode_client.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_LIMIT_REACHED,
    EXIT_NOT_FOUND,
    EXIT_RESPONSE_ERROR,
    EXIT_SERVER_ERROR,
)


class ErrorKind(str, enum.Enum):
    """Category of a failed call, independent of its message wording."""

    TRANSPORT = "transport"
    TRANSFER = "transfer"
    AUTH_EXCHANGE = "auth_exchange"
    PARSE = "parse"
    READ = "read"
    UNAUTHORIZED = "unauthorized"
    RESOURCE_NOT_FOUND = "resource_not_found"
    VALIDATION = "validation"
    CONNECTION_LIMIT_REACHED = "connection_limit_reached"
    GENERAL_SERVER = "general_server"
    CONFIG = "config"


class EnodeError(Exception):
    """Base exception for all enode_client errors.

    Args:
        detail: Human-readable description. For HTTP-derived errors this is
            the category message and the raw status line joined by a newline.
        status_code: HTTP status code of the response that caused the error,
            or ``None`` when no response was received.
        exit_code: Optional override for the class-level exit code.
    """

    kind: ErrorKind = ErrorKind.GENERAL_SERVER
    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(
        self,
        detail: str,
        status_code: Optional[int] = None,
        exit_code: Optional[int] = None,
    ):
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code
        if exit_code is not None:
            self.exit_code = exit_code


class TransportError(EnodeError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused)."""

    kind = ErrorKind.TRANSPORT
    exit_code = EXIT_CONNECTION_ERROR


class TransferError(TransportError):
    """Raised when an upstream gateway fails to deliver the response (HTTP 502)."""

    kind = ErrorKind.TRANSFER


class AuthExchangeError(EnodeError):
    """Raised when the token endpoint answers with anything but 200.

    The raw response body is kept in :attr:`body` for diagnostics.
    """

    kind = ErrorKind.AUTH_EXCHANGE
    exit_code = EXIT_AUTH_FAILURE

    def __init__(
        self,
        detail: str,
        status_code: Optional[int] = None,
        body: str = "",
    ):
        super().__init__(detail, status_code=status_code)
        self.body = body


class UnauthorizedError(EnodeError):
    """Raised when the API rejects the access token (HTTP 401)."""

    kind = ErrorKind.UNAUTHORIZED
    exit_code = EXIT_AUTH_FAILURE


class ResourceNotFoundError(EnodeError):
    """Raised when the addressed user, vehicle or vendor does not exist (HTTP 404)."""

    kind = ErrorKind.RESOURCE_NOT_FOUND
    exit_code = EXIT_NOT_FOUND


class ValidationError(EnodeError):
    """Raised when the API rejects the request payload or an unknown vendor (HTTP 400)."""

    kind = ErrorKind.VALIDATION
    exit_code = EXIT_INVALID_USAGE


class ConnectionLimitReachedError(EnodeError):
    """Raised when the account cannot link more vendors (HTTP 403)."""

    kind = ErrorKind.CONNECTION_LIMIT_REACHED
    exit_code = EXIT_LIMIT_REACHED


class GeneralServerError(EnodeError):
    """Raised for HTTP 500 and for any status without a dedicated mapping."""

    kind = ErrorKind.GENERAL_SERVER
    exit_code = EXIT_SERVER_ERROR


class ReadError(EnodeError):
    """Raised when a successful response carries no body or the body cannot be read."""

    kind = ErrorKind.READ
    exit_code = EXIT_RESPONSE_ERROR


class ParseError(EnodeError):
    """Raised when a response body is not valid JSON or does not match the expected shape."""

    kind = ErrorKind.PARSE
    exit_code = EXIT_RESPONSE_ERROR


class ConfigError(EnodeError):
    """Raised for configuration problems (missing credentials, invalid settings)."""

    kind = ErrorKind.CONFIG
    exit_code = EXIT_GENERIC_FAILURE


ERRORS_BY_KIND: dict[ErrorKind, type[EnodeError]] = {
    cls.kind: cls
    for cls in (
        TransportError,
        TransferError,
        AuthExchangeError,
        UnauthorizedError,
        ResourceNotFoundError,
        ValidationError,
        ConnectionLimitReachedError,
        GeneralServerError,
        ReadError,
        ParseError,
        ConfigError,
    )
}
"""Lookup from :class:`ErrorKind` to the exception class raised for it."""
