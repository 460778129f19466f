"""Authentication subsystem for enode_client.

Exports the building blocks used to obtain and keep an access token:

- :class:`TokenExchanger` / :func:`exchange_token` -- the OAuth2
  client-credentials exchange against the environment's token endpoint.
- :class:`TokenRefresher` -- the self-rescheduling background refresh
  that renews the token 30 seconds before it expires.

See Also:
    :mod:`enode_client.session` for the session that ties both together.
"""

from enode_client.auth.exchange import TokenExchanger, exchange_token, parse_token_response
from enode_client.auth.refresh import (
    REFRESH_MARGIN,
    TokenRefresher,
    failure_backoff,
    refresh_delay,
)

__all__ = [
    "REFRESH_MARGIN",
    "TokenExchanger",
    "TokenRefresher",
    "exchange_token",
    "failure_backoff",
    "parse_token_response",
    "refresh_delay",
]
