"""enode_client -- Python client for the Enode smart-energy API.

The package authenticates with OAuth2 client credentials, keeps the access
token fresh in the background if asked to, and wraps the user and vehicle
endpoints in plain functions that return pydantic models or raise a typed
:class:`~enode_client.exceptions.EnodeError`.

Typical use::

    from enode_client import list_users, new_session

    with new_session("client-id", "client-secret", "sandbox", auto_refresh=True) as session:
        for user_id, user in list_users(session).items():
            print(user_id, [v.vendor for v in user.linked_vendors])

Modules:
    session: :class:`Session` and :func:`new_session`.
    auth: Token exchange and background refresh.
    client: Response classification into results and errors.
    resources: User and vehicle operations.
    environments: Named environments and custom base URLs.
    models: Pydantic models for tokens and API payloads.
    exceptions: Exception hierarchy with error kinds and exit codes.
    config: ``ENODE_*`` settings and credential sources.
    app: The ``enode`` command line tool.
"""

__version__ = "0.1.0"

from enode_client.environments import (  # noqa: E402
    CustomEnvironment,
    Environment,
    EnvironmentResolver,
    resolve_environment,
)
from enode_client.exceptions import (  # noqa: E402
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
from enode_client.models import (  # noqa: E402
    ChargeAction,
    Credentials,
    LinkAccess,
    LinkData,
    Token,
    TokenResponse,
    User,
    Vehicle,
    VehicleAction,
    VendorType,
)
from enode_client.resources import (  # noqa: E402
    control_charging,
    deauthorize_user,
    disconnect_vendor,
    disconnect_vendor_type,
    get_user,
    get_vehicle,
    link_user,
    list_user_vehicles,
    list_users,
    list_vehicles,
    start_charging,
    stop_charging,
    unlink_user,
)
from enode_client.session import Session, new_session  # noqa: E402

__all__ = [
    "AuthExchangeError",
    "ChargeAction",
    "ConfigError",
    "ConnectionLimitReachedError",
    "Credentials",
    "CustomEnvironment",
    "EnodeError",
    "Environment",
    "EnvironmentResolver",
    "ErrorKind",
    "GeneralServerError",
    "LinkAccess",
    "LinkData",
    "ParseError",
    "ReadError",
    "ResourceNotFoundError",
    "Session",
    "Token",
    "TokenResponse",
    "TransferError",
    "TransportError",
    "UnauthorizedError",
    "User",
    "ValidationError",
    "Vehicle",
    "VehicleAction",
    "VendorType",
    "__version__",
    "control_charging",
    "deauthorize_user",
    "disconnect_vendor",
    "disconnect_vendor_type",
    "get_user",
    "get_vehicle",
    "link_user",
    "list_user_vehicles",
    "list_users",
    "list_vehicles",
    "new_session",
    "resolve_environment",
    "start_charging",
    "stop_charging",
    "unlink_user",
]
