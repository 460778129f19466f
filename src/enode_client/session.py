"""Authenticated session -- the token, the API base URL and the request primitive.

A :class:`Session` is what every resource operation receives. It holds the
current :class:`~enode_client.models.Token` and the environment's API base
URL, and exposes :meth:`Session.send`, which issues one Bearer-authenticated
request and returns the raw :class:`httpx.Response` for classification.

Sessions are normally created with :func:`new_session`, which performs the
initial token exchange and, when asked to, starts a
:class:`~enode_client.auth.refresh.TokenRefresher` bound to the session.
Every write of the token, from the refresher, :meth:`Session.refresh` or a
direct :meth:`Session.install_token` call, goes through ``install_token``
under the session's write lock. It swaps the whole frozen ``Token`` object
in one assignment, so concurrent readers see either the old token or the
new one, never a mix of both.

Example::

    with new_session("client-id", "client-secret", "sandbox", auto_refresh=True) as sess:
        users = list_users(sess)
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Optional, Union

import httpx

from enode_client.auth.exchange import DEFAULT_TIMEOUT, TokenExchanger
from enode_client.auth.refresh import TimerFactory, TokenRefresher
from enode_client.client.classifier import status_line
from enode_client.environments import (
    Environment,
    EnvironmentLike,
    EnvironmentResolver,
    resolve_environment,
)
from enode_client.exceptions import ConfigError, EnodeError, TransportError
from enode_client.models import Credentials, Token, TokenResponse

logger = logging.getLogger(__name__)

DEFAULT_TRANSFER_MESSAGE = "client: could not execute request"


class Session:
    """Holds the access token and API base URL shared by all resource calls.

    Args:
        token: The initial access token.
        environment: Where the API lives; anything
            :func:`~enode_client.environments.resolve_environment` accepts.
        http_client: Client used for every request. When omitted the
            session creates one with *timeout* and closes it in
            :meth:`close`.
        timeout: Request timeout in seconds for a session-created client.
        exchanger: Token exchanger used by :meth:`refresh`. Sessions built
            by :func:`new_session` always have one.
        owns_client: Whether :meth:`close` closes *http_client*. Defaults to
            ``True`` only for a session-created client.
    """

    def __init__(
        self,
        token: Token,
        environment: EnvironmentLike = Environment.SANDBOX,
        *,
        http_client: Optional[httpx.Client] = None,
        timeout: float = DEFAULT_TIMEOUT,
        exchanger: Optional[TokenExchanger] = None,
        owns_client: Optional[bool] = None,
    ) -> None:
        self._environment = resolve_environment(environment)
        self._token = token
        self._write_lock = threading.Lock()
        self._owns_client = http_client is None if owns_client is None else owns_client
        self._http_client = http_client or httpx.Client(timeout=timeout)
        self._exchanger = exchanger
        self._refresher: Optional[TokenRefresher] = None
        self._closed = False

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> Session:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"Session(api_url={self.api_url!r}, auto_refresh={self.auto_refresh})"

    # ------------------------------------------------------------------ #
    # State
    # ------------------------------------------------------------------ #

    @property
    def token(self) -> Token:
        """The current token. Read it once per request to get a consistent snapshot."""
        return self._token

    @property
    def access_token(self) -> str:
        return self._token.access_token

    @property
    def environment(self) -> EnvironmentResolver:
        return self._environment

    @property
    def api_url(self) -> str:
        return self._environment.api_url

    @property
    def refresher(self) -> Optional[TokenRefresher]:
        return self._refresher

    @property
    def auto_refresh(self) -> bool:
        return self._refresher is not None and not self._refresher.stopped

    @property
    def closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------ #
    # Token lifecycle
    # ------------------------------------------------------------------ #

    def install_token(self, token: Union[Token, TokenResponse]) -> None:
        """Replace the current token in a single reference swap."""
        if isinstance(token, TokenResponse):
            token = token.to_token()
        with self._write_lock:
            self._token = token

    def start_auto_refresh(
        self,
        expires_in: int,
        timer_factory: Optional[TimerFactory] = None,
    ) -> Optional[float]:
        """Start the background refresh for a token valid *expires_in* seconds.

        Returns:
            The delay until the first refresh, or ``None`` if *expires_in*
            gives no usable expiry and nothing was scheduled.

        Raises:
            ConfigError: If the session has no exchanger or is closed.
        """
        if self._exchanger is None:
            raise ConfigError("Automatic refresh needs a session created with credentials")
        if self._closed:
            raise ConfigError("Cannot start automatic refresh on a closed session")
        if self._refresher is not None:
            self._refresher.stop()
        self._refresher = TokenRefresher(self._exchanger, self.install_token, timer_factory)
        return self._refresher.schedule_for(expires_in)

    def refresh(self) -> TokenResponse:
        """Exchange the credentials for a new token now and install it.

        A running background refresh keeps its own schedule.

        Raises:
            ConfigError: If the session has no exchanger.
            TransportError, AuthExchangeError, ParseError: From the exchange.
        """
        if self._exchanger is None:
            raise ConfigError("Refreshing needs a session created with credentials")
        token_response = self._exchanger.exchange()
        self.install_token(token_response)
        logger.info("Access token refreshed on demand")
        return token_response

    def close(self) -> None:
        """Stop the background refresh and release the HTTP client."""
        if self._closed:
            return
        self._closed = True
        if self._refresher is not None:
            self._refresher.stop()
        if self._owns_client:
            self._http_client.close()

    # ------------------------------------------------------------------ #
    # Request primitive
    # ------------------------------------------------------------------ #

    def send(
        self,
        method: str,
        path: str,
        *,
        json_body: Optional[Any] = None,
        params: Optional[dict[str, Any]] = None,
        transfer_message: str = DEFAULT_TRANSFER_MESSAGE,
    ) -> httpx.Response:
        """Send one Bearer-authenticated request to ``<api_url><path>``.

        The response is returned whatever its status; classification is the
        caller's job.

        Args:
            method: HTTP method (GET, POST, DELETE, ...).
            path: Path below the API base URL, starting with ``/``.
            json_body: Optional JSON-serialisable request body.
            params: Optional query parameters.
            transfer_message: Message prefix for a :class:`TransportError`.

        Raises:
            TransportError: The request failed or its response could not be decoded.
            RuntimeError: The session is closed.
        """
        if self._closed:
            raise RuntimeError("Session is closed")

        token = self._token
        url = f"{self.api_url}{path}"
        headers = {
            "Authorization": token.authorization,
            "Accept": "application/json",
        }
        logger.debug("%s %s", method, url)
        try:
            response = self._http_client.request(
                method,
                url,
                headers=headers,
                json=json_body,
                params=params,
            )
        except httpx.RequestError as exc:
            raise TransportError(f"{transfer_message}\n{exc}") from exc
        logger.debug("%s %s -> %s", method, url, status_line(response))
        return response


def new_session(
    client_id: str,
    client_secret: str,
    environment: EnvironmentLike = Environment.SANDBOX,
    auto_refresh: bool = False,
    *,
    http_client: Optional[httpx.Client] = None,
    timeout: float = DEFAULT_TIMEOUT,
    timer_factory: Optional[TimerFactory] = None,
) -> Session:
    """Authenticate with client credentials and return a ready :class:`Session`.

    The token exchange runs once, synchronously. With *auto_refresh* the
    session renews its token 30 seconds before each expiry until
    :meth:`Session.close` is called.

    Args:
        client_id: OAuth2 client id.
        client_secret: OAuth2 client secret.
        environment: Named environment, base URL or resolver.
        auto_refresh: Start the background token refresh.
        http_client: Optional client shared by the exchange and resource
            calls. The session does not close a client passed in here.
        timeout: Request timeout in seconds when no client is passed.
        timer_factory: Timer factory for the refresher (tests inject a fake).

    Raises:
        TransportError: The token endpoint could not be reached.
        AuthExchangeError: The token endpoint rejected the credentials.
        ParseError: The token response could not be parsed.
    """
    credentials = Credentials(
        client_id=client_id,
        client_secret=client_secret,
        environment=environment,
    )
    owns_client = http_client is None
    client = http_client or httpx.Client(timeout=timeout)
    exchanger = TokenExchanger(credentials, http_client=client, timeout=timeout)

    try:
        token_response = exchanger.exchange()
    except EnodeError:
        if owns_client:
            client.close()
        raise

    session = Session(
        token_response.to_token(),
        credentials.environment,
        http_client=client,
        exchanger=exchanger,
        owns_client=owns_client,
    )
    if auto_refresh:
        session.start_auto_refresh(token_response.expires_in, timer_factory)
    logger.debug("Session created for %s", session.api_url)
    return session
