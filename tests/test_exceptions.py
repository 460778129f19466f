"""Tests for the exception hierarchy and its exit codes."""

from __future__ import annotations

import pytest

from enode_client import exit_codes
from enode_client.exceptions import (
    ERRORS_BY_KIND,
    AuthExchangeError,
    ConfigError,
    ConnectionLimitReachedError,
    EnodeError,
    ErrorKind,
    GeneralServerError,
    ParseError,
    ReadError,
    ResourceNotFoundError,
    TransferError,
    TransportError,
    UnauthorizedError,
    ValidationError,
)


class TestHierarchy:
    def test_every_kind_has_a_class(self) -> None:
        assert set(ERRORS_BY_KIND) == set(ErrorKind)

    @pytest.mark.parametrize("kind,error_cls", list(ERRORS_BY_KIND.items()))
    def test_class_kind_matches_key(self, kind, error_cls) -> None:
        assert error_cls.kind == kind
        assert issubclass(error_cls, EnodeError)

    def test_transfer_is_transport(self) -> None:
        assert issubclass(TransferError, TransportError)


class TestExitCodes:
    @pytest.mark.parametrize(
        "error_cls,code",
        [
            (TransportError, exit_codes.EXIT_CONNECTION_ERROR),
            (TransferError, exit_codes.EXIT_CONNECTION_ERROR),
            (AuthExchangeError, exit_codes.EXIT_AUTH_FAILURE),
            (UnauthorizedError, exit_codes.EXIT_AUTH_FAILURE),
            (ResourceNotFoundError, exit_codes.EXIT_NOT_FOUND),
            (ValidationError, exit_codes.EXIT_INVALID_USAGE),
            (ConnectionLimitReachedError, exit_codes.EXIT_LIMIT_REACHED),
            (GeneralServerError, exit_codes.EXIT_SERVER_ERROR),
            (ReadError, exit_codes.EXIT_RESPONSE_ERROR),
            (ParseError, exit_codes.EXIT_RESPONSE_ERROR),
            (ConfigError, exit_codes.EXIT_GENERIC_FAILURE),
        ],
    )
    def test_class_exit_code(self, error_cls, code: int) -> None:
        assert error_cls("x").exit_code == code

    def test_exit_code_override(self) -> None:
        assert GeneralServerError("x", exit_code=42).exit_code == 42
        assert GeneralServerError("x").exit_code == exit_codes.EXIT_SERVER_ERROR


class TestDetail:
    def test_str_is_detail(self) -> None:
        exc = ResourceNotFoundError("users: no users with this id found\n404 Not Found", 404)
        assert str(exc) == exc.detail
        assert exc.status_code == 404

    def test_auth_exchange_keeps_body(self) -> None:
        exc = AuthExchangeError("authentication: token exchange failed\n500", 500, body="{}")
        assert exc.body == "{}"
        assert exc.status_code == 500
