"""Resource operations for the Enode API.

Every operation takes a :class:`~enode_client.session.Session`, sends one
request through :meth:`~enode_client.session.Session.send` and maps the
response with :func:`~enode_client.client.classifier.classify`.
"""

from enode_client.resources.users import (
    deauthorize_user,
    disconnect_vendor,
    disconnect_vendor_type,
    get_user,
    link_user,
    list_users,
    unlink_user,
)
from enode_client.resources.vehicles import (
    control_charging,
    get_vehicle,
    list_user_vehicles,
    list_vehicles,
    start_charging,
    stop_charging,
)

__all__ = [
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
    "start_charging",
    "stop_charging",
    "unlink_user",
]
