"""OAuth2 client-credentials token exchange.

This module provides :class:`TokenExchanger`, which performs the
non-interactive Client Credentials grant (:rfc:`6749` section 4.4) against
the token endpoint of an environment. The client id and secret are sent
with HTTP Basic authentication and the form body carries only
``grant_type=client_credentials``.

The exchanger does one request per call and never retries. Only ``200``
counts as success; ``401`` is reported as an explicit unauthorized failure
and every other status as a generic exchange failure. In both cases the raw
response body travels with the :class:`~enode_client.exceptions.AuthExchangeError`
for diagnostics.

See Also:
    :mod:`enode_client.auth.refresh` for the background refresh that calls
    the exchanger again shortly before the token expires.
"""

from __future__ import annotations

import json
import logging
from typing import Optional

import httpx
import pydantic

from enode_client.client.classifier import status_line
from enode_client.environments import EnvironmentLike, EnvironmentResolver
from enode_client.exceptions import AuthExchangeError, ParseError, TransportError
from enode_client.models import Credentials, TokenResponse

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0

TRANSPORT_MESSAGE = "authentication: could not execute authentication request"
UNAUTHORIZED_MESSAGE = "authentication: unauthorized client credentials"
EXCHANGE_FAILED_MESSAGE = "authentication: token exchange failed"
PARSE_MESSAGE = "authentication: unable to parse response from auth service"


class TokenExchanger:
    """Exchange client credentials for an access token.

    Args:
        credentials: Client id, secret and environment.
        http_client: Optional :class:`httpx.Client` to send the request
            with. When omitted, each call uses a short-lived client.
        timeout: Request timeout in seconds for the short-lived client.

    Example::

        exchanger = TokenExchanger(Credentials(client_id="id", client_secret="secret"))
        token_response = exchanger.exchange()
    """

    def __init__(
        self,
        credentials: Credentials,
        http_client: Optional[httpx.Client] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._credentials = credentials
        self._http_client = http_client
        self._timeout = timeout

    @property
    def credentials(self) -> Credentials:
        return self._credentials

    @property
    def environment(self) -> EnvironmentResolver:
        return self._credentials.environment

    def exchange(self) -> TokenResponse:
        """POST to the token endpoint and parse the token response.

        Returns:
            The parsed :class:`~enode_client.models.TokenResponse` with a
            non-empty ``access_token``.

        Raises:
            TransportError: The request failed or its response could not be decoded.
            AuthExchangeError: The endpoint answered with a non-200 status.
            ParseError: A 200 body was not JSON or lacked ``access_token``.
        """
        token_url = self.environment.token_url
        auth = httpx.BasicAuth(
            self._credentials.client_id,
            self._credentials.client_secret.get_secret_value(),
        )
        headers = {
            "Content-Type": "application/x-www-form-urlencoded",
            "Accept": "application/json",
        }
        data = {"grant_type": "client_credentials"}

        logger.debug("Requesting access token from %s", token_url)
        try:
            if self._http_client is not None:
                response = self._http_client.post(token_url, data=data, headers=headers, auth=auth)
            else:
                with httpx.Client(timeout=self._timeout) as client:
                    response = client.post(token_url, data=data, headers=headers, auth=auth)
        except httpx.RequestError as exc:
            raise TransportError(f"{TRANSPORT_MESSAGE}\n{exc}") from exc

        body = response.text
        logger.debug("Token endpoint answered %s: %s", status_line(response), body)

        if response.status_code == 401:
            raise AuthExchangeError(
                f"{UNAUTHORIZED_MESSAGE}\n{status_line(response)}",
                status_code=response.status_code,
                body=body,
            )
        if response.status_code != 200:
            raise AuthExchangeError(
                f"{EXCHANGE_FAILED_MESSAGE}\n{status_line(response)}",
                status_code=response.status_code,
                body=body,
            )

        return parse_token_response(response.content, status_code=response.status_code)


def parse_token_response(content: bytes | str, status_code: Optional[int] = None) -> TokenResponse:
    """Parse a token endpoint body into a :class:`~enode_client.models.TokenResponse`.

    Raises:
        ParseError: If *content* is not a JSON object with a non-empty
            ``access_token``.
    """
    try:
        payload = json.loads(content)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ParseError(f"{PARSE_MESSAGE}\n{exc}", status_code=status_code) from exc
    try:
        return TokenResponse.model_validate(payload)
    except pydantic.ValidationError as exc:
        raise ParseError(f"{PARSE_MESSAGE}\n{exc}", status_code=status_code) from exc


def exchange_token(
    client_id: str,
    client_secret: str,
    environment: EnvironmentLike = "sandbox",
    *,
    http_client: Optional[httpx.Client] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> TokenResponse:
    """One-shot convenience wrapper around :meth:`TokenExchanger.exchange`."""
    credentials = Credentials(
        client_id=client_id,
        client_secret=client_secret,
        environment=environment,
    )
    return TokenExchanger(credentials, http_client=http_client, timeout=timeout).exchange()
