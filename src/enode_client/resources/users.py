"""User operations: listing, lookup, Link UI sessions and vendor disconnection.

Each function takes the :class:`~enode_client.session.Session` to call
through, issues one request and raises the
:class:`~enode_client.exceptions.EnodeError` subclass the response maps to.
Only the status codes that differ from the shared base table are listed in
the override tables below.
"""

from __future__ import annotations

from enode_client.client.classifier import ErrorMessages, StatusRule
from enode_client.exceptions import ErrorKind
from enode_client.models import LinkAccess, LinkData, Page, User, VendorType
from enode_client.resources.base import call, segment
from enode_client.session import Session

USER_MESSAGES = ErrorMessages(
    transfer="users: could not read users",
    read="users: could not read response body",
    parse="users: unable to parse user data",
    unauthorized="users: unauthorized access",
    general="users: some kind of error occurred",
)

USER_NOT_FOUND = "users: no users with this id found"
USER_VALIDATION = "users: invalid request payload input"
USER_CONNECTION_LIMIT = "users: connection limit reached"
UNKNOWN_VENDOR = "vendors: unknown vendor"

_NOT_FOUND = StatusRule(ErrorKind.RESOURCE_NOT_FOUND, USER_NOT_FOUND)
_BAD_GATEWAY = StatusRule(ErrorKind.TRANSFER, USER_MESSAGES.transfer)

LIST_OVERRIDES = {502: _BAD_GATEWAY}
GET_OVERRIDES = {502: _BAD_GATEWAY, 404: _NOT_FOUND}
WRITE_OVERRIDES = {
    404: _NOT_FOUND,
    400: StatusRule(ErrorKind.VALIDATION, USER_VALIDATION),
    403: StatusRule(ErrorKind.CONNECTION_LIMIT_REACHED, USER_CONNECTION_LIMIT),
}
DISCONNECT_OVERRIDES = {
    **WRITE_OVERRIDES,
    400: StatusRule(ErrorKind.VALIDATION, UNKNOWN_VENDOR),
}
DEAUTHORIZE_OVERRIDES = {404: _NOT_FOUND}


def list_users(session: Session) -> dict[str, User]:
    """Return all users keyed by user id."""
    page = call(
        session, "GET", "/users", USER_MESSAGES, LIST_OVERRIDES,
        expect_body=True, shape=Page[User],
    )
    return {user.id: user for user in page.data}


def get_user(session: Session, user_id: str) -> User:
    """Return a user with the vendors they have linked.

    Raises:
        ResourceNotFoundError: No user with *user_id*.
    """
    return call(
        session, "GET", f"/users/{segment(user_id)}", USER_MESSAGES, GET_OVERRIDES,
        expect_body=True, shape=User,
    )


def link_user(session: Session, user_id: str, link_data: LinkData) -> LinkAccess:
    """Create a short-lived (24 hours), single-use Link UI session.

    Present the returned ``link_url`` to the user in a browser, or hand the
    ``link_token`` to one of the Link SDKs.

    Raises:
        ValidationError: The link request was rejected.
        ConnectionLimitReachedError: The account cannot link more vendors.
    """
    return call(
        session, "POST", f"/users/{segment(user_id)}/link", USER_MESSAGES, WRITE_OVERRIDES,
        expect_body=True, shape=LinkAccess, json_body=link_data.to_payload(),
    )


def unlink_user(session: Session, user_id: str) -> None:
    """Delete a user and all of their data permanently.

    Associated sessions, authorization codes and tokens are invalidated.
    """
    call(session, "DELETE", f"/users/{segment(user_id)}", USER_MESSAGES, WRITE_OVERRIDES)


def deauthorize_user(session: Session, user_id: str) -> None:
    """Delete the user's stored vendor authorizations and credentials.

    All other user data is kept; linking again later restores the account
    as it was. No webhook events are generated.
    """
    call(
        session, "DELETE", f"/users/{segment(user_id)}/authorization",
        USER_MESSAGES, DEAUTHORIZE_OVERRIDES,
    )


def disconnect_vendor(session: Session, user_id: str, vendor: str) -> None:
    """Disconnect one vendor from the user's account and delete its data.

    Raises:
        ValidationError: *vendor* is not a known vendor.
    """
    call(
        session, "DELETE", f"/users/{segment(user_id)}/vendors/{segment(vendor)}",
        USER_MESSAGES, DISCONNECT_OVERRIDES,
    )


def disconnect_vendor_type(
    session: Session,
    user_id: str,
    vendor: str,
    vendor_type: VendorType,
) -> None:
    """Disconnect one asset type of a vendor from the user's account.

    If no other types from that vendor remain, all its stored data is
    deleted as well.
    """
    vendor_type = VendorType(vendor_type)
    path = f"/users/{segment(user_id)}/vendors/{segment(vendor)}/{segment(vendor_type.value)}"
    call(session, "DELETE", path, USER_MESSAGES, DISCONNECT_OVERRIDES)
