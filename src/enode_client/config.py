"""Client configuration from environment variables and credential sources.

The library itself takes plain constructor arguments. This module is the
layer the ``enode`` CLI (and applications that want the same behaviour) use
to collect them:

* :func:`load_settings` builds a :class:`ClientSettings` from ``ENODE_*``
  environment variables, with explicit overrides taking precedence.
* :func:`resolve_credential` reads a secret from an ``env:VAR`` or
  ``file:/path`` source descriptor, so secrets need not be passed on the
  command line.

Environment variables:

=======================  =========================================  ===========
Variable                 Meaning                                    Default
=======================  =========================================  ===========
``ENODE_CLIENT_ID``      OAuth2 client id (or a source descriptor)  required
``ENODE_CLIENT_SECRET``  OAuth2 client secret (or a source)         required
``ENODE_ENVIRONMENT``    ``sandbox``, ``production`` or a base URL  ``sandbox``
``ENODE_AUTO_REFRESH``   Renew the token in the background          ``false``
``ENODE_TIMEOUT``        Request timeout in seconds                 ``30``
=======================  =========================================  ===========
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Mapping, Optional

import pydantic
from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

from enode_client.environments import resolve_environment
from enode_client.exceptions import ConfigError

ENV_PREFIX = "ENODE_"
_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


class ClientSettings(BaseModel):
    """Everything needed to open a :class:`~enode_client.session.Session`."""

    model_config = ConfigDict(frozen=True)

    client_id: str = Field(min_length=1)
    client_secret: SecretStr
    environment: str = "sandbox"
    auto_refresh: bool = False
    timeout: float = Field(default=30.0, gt=0)

    @field_validator("environment")
    @classmethod
    def _check_environment(cls, value: str) -> str:
        # Raises ConfigError for unknown names; the resolver is rebuilt on use.
        resolve_environment(value)
        return value

    @field_validator("auto_refresh", mode="before")
    @classmethod
    def _parse_flag(cls, value: Any) -> Any:
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in _TRUE_VALUES:
                return True
            if lowered in _FALSE_VALUES:
                return False
        return value


def resolve_credential(source: str) -> str:
    """Resolve a credential from its source descriptor.

    Supported formats:
        - ``"env:VAR_NAME"`` -- reads ``os.environ["VAR_NAME"]``
        - ``"file:/path/to/file"`` -- reads file content, stripped of whitespace
        - anything else is returned unchanged as the literal credential

    Raises:
        ConfigError: If the variable is unset or the file cannot be read.
    """
    if source.startswith("env:"):
        var_name = source[4:]
        value = os.environ.get(var_name)
        if value is None:
            raise ConfigError(
                f"Environment variable '{var_name}' is not set (source: {source})"
            )
        return value

    if source.startswith("file:"):
        path = Path(source[5:]).expanduser()
        if not path.is_file():
            raise ConfigError(f"Credential file not found: {path} (source: {source})")
        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise ConfigError(f"Cannot read credential file {path}: {exc}") from exc

    return source


def load_settings(
    overrides: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ClientSettings:
    """Build :class:`ClientSettings` from ``ENODE_*`` variables and *overrides*.

    Args:
        overrides: Values that win over the environment. ``None`` values are
            ignored, so unset CLI options can be passed straight through.
        environ: Variables to read instead of :data:`os.environ`.

    Raises:
        ConfigError: If a required value is missing or a value is invalid.
    """
    env = os.environ if environ is None else environ
    raw: dict[str, Any] = {}
    for field_name in ClientSettings.model_fields:
        value = env.get(f"{ENV_PREFIX}{field_name.upper()}")
        if value is not None:
            raw[field_name] = value
    for key, value in (overrides or {}).items():
        if value is not None:
            raw[key] = value

    for key in ("client_id", "client_secret"):
        if key not in raw:
            raise ConfigError(
                f"Missing {key}: set {ENV_PREFIX}{key.upper()} or pass it explicitly"
            )
        raw[key] = resolve_credential(str(raw[key]))

    try:
        return ClientSettings.model_validate(raw)
    except pydantic.ValidationError as exc:
        raise ConfigError(f"Invalid client settings: {exc}") from exc
