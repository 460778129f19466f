"""Environment resolution -- where the API and the token endpoint live.

An *environment* is either one of the named Enode deployments
(:class:`Environment`) or an explicit base URL (:class:`CustomEnvironment`,
used for self-hosted mocks and test servers). Both implement the
:class:`EnvironmentResolver` interface, which is the only thing the token
exchanger and the session look at. Callers with yet another URL scheme can
pass their own resolver object.

Example::

    resolver = resolve_environment("sandbox")
    resolver.api_url      # https://enode-api.sandbox.enode.io
    resolver.token_url    # https://oauth.sandbox.enode.io/oauth2/token
"""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from typing import Optional, Union

from enode_client.exceptions import ConfigError

_API_URL_TEMPLATE = "https://enode-api.{name}.enode.io"
_TOKEN_URL_TEMPLATE = "https://oauth.{name}.enode.io/oauth2/token"
_TOKEN_PATH = "/oauth2/token"


class Environment(str, enum.Enum):
    """Named Enode deployments."""

    SANDBOX = "sandbox"
    PRODUCTION = "production"


class EnvironmentResolver(ABC):
    """Maps an environment to its API base URL and token endpoint URL."""

    @property
    @abstractmethod
    def api_url(self) -> str:
        """Base URL that resource paths such as ``/users`` are appended to."""
        ...

    @property
    @abstractmethod
    def token_url(self) -> str:
        """Full URL of the OAuth2 token endpoint."""
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}(api_url={self.api_url!r}, token_url={self.token_url!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EnvironmentResolver):
            return NotImplemented
        return (self.api_url, self.token_url) == (other.api_url, other.token_url)

    def __hash__(self) -> int:
        return hash((self.api_url, self.token_url))


class NamedEnvironment(EnvironmentResolver):
    """Resolver for the hosted Enode environments.

    The API lives on ``enode-api.<name>.enode.io`` and the token endpoint on
    the separate ``oauth.<name>.enode.io`` host.
    """

    def __init__(self, environment: Environment) -> None:
        self.environment = environment

    @property
    def api_url(self) -> str:
        return _API_URL_TEMPLATE.format(name=self.environment.value)

    @property
    def token_url(self) -> str:
        return _TOKEN_URL_TEMPLATE.format(name=self.environment.value)


class CustomEnvironment(EnvironmentResolver):
    """Resolver for an explicit base URL.

    Args:
        base_url: API base URL. A trailing slash is dropped.
        token_url: Token endpoint. Defaults to ``<base_url>/oauth2/token``.
    """

    def __init__(self, base_url: str, token_url: Optional[str] = None) -> None:
        self._base_url = base_url.rstrip("/")
        self._token_url = token_url or f"{self._base_url}{_TOKEN_PATH}"

    @property
    def api_url(self) -> str:
        return self._base_url

    @property
    def token_url(self) -> str:
        return self._token_url


EnvironmentLike = Union[Environment, EnvironmentResolver, str]


def resolve_environment(environment: EnvironmentLike) -> EnvironmentResolver:
    """Turn any accepted environment spelling into a resolver.

    Accepts an :class:`Environment` member, its string value
    (``"sandbox"``, ``"production"``, case-insensitive), an ``http://`` or
    ``https://`` base URL, or a ready-made :class:`EnvironmentResolver`.

    Raises:
        ConfigError: If *environment* is none of the above.
    """
    if isinstance(environment, EnvironmentResolver):
        return environment
    if isinstance(environment, Environment):
        return NamedEnvironment(environment)
    if isinstance(environment, str):
        value = environment.strip()
        if value.startswith(("http://", "https://")):
            return CustomEnvironment(value)
        try:
            return NamedEnvironment(Environment(value.lower()))
        except ValueError:
            pass
        valid = ", ".join(e.value for e in Environment)
        raise ConfigError(
            f"Unknown environment '{environment}'. Use one of: {valid}, or a base URL"
        )
    raise ConfigError(f"Unsupported environment type: {type(environment).__name__}")
