"""Vehicle operations: listing, lookup and charge control.

Vehicles provide charge, location and odometer data and can be told to
start or stop charging. A charging command is asynchronous: the API answers
with a :class:`~enode_client.models.VehicleAction` in ``PENDING`` state that
later becomes ``CONFIRMED``, ``FAILED`` or ``CANCELLED``.
"""

from __future__ import annotations

from dataclasses import replace

from enode_client.client.classifier import ErrorMessages, StatusRule
from enode_client.exceptions import ErrorKind
from enode_client.models import ChargeAction, Page, Vehicle, VehicleAction
from enode_client.resources.base import call, segment
from enode_client.resources.users import USER_NOT_FOUND
from enode_client.session import Session

VEHICLE_MESSAGES = ErrorMessages(
    transfer="vehicles: could not read vehicles",
    read="vehicles: could not read response body",
    parse="vehicles: unable to parse vehicle data",
    unauthorized="vehicles: unauthorized access",
    general="vehicles: some kind of error occurred",
)
ACTION_MESSAGES = replace(VEHICLE_MESSAGES, parse="actions: unable to parse actions data")

VEHICLE_NOT_FOUND = "vehicles: no vehicles with this id found"
VEHICLE_VALIDATION = "vehicles: invalid request payload input"

_BAD_GATEWAY = StatusRule(ErrorKind.TRANSFER, VEHICLE_MESSAGES.transfer)
_VEHICLE_NOT_FOUND = StatusRule(ErrorKind.RESOURCE_NOT_FOUND, VEHICLE_NOT_FOUND)
_INVALID = StatusRule(ErrorKind.VALIDATION, VEHICLE_VALIDATION)

LIST_OVERRIDES = {502: _BAD_GATEWAY}
USER_VEHICLES_OVERRIDES = {
    502: _BAD_GATEWAY,
    404: StatusRule(ErrorKind.RESOURCE_NOT_FOUND, USER_NOT_FOUND),
}
GET_OVERRIDES = {502: _BAD_GATEWAY, 404: _VEHICLE_NOT_FOUND}
CHARGING_OVERRIDES = {
    502: _BAD_GATEWAY,
    404: _VEHICLE_NOT_FOUND,
    400: _INVALID,
    422: _INVALID,
}


def list_vehicles(session: Session) -> dict[str, Vehicle]:
    """Return every vehicle of every user, keyed by vehicle id."""
    page = call(
        session, "GET", "/vehicles", VEHICLE_MESSAGES, LIST_OVERRIDES,
        expect_body=True, shape=Page[Vehicle],
    )
    return {vehicle.id: vehicle for vehicle in page.data}


def list_user_vehicles(session: Session, user_id: str) -> dict[str, Vehicle]:
    """Return the vehicles of one user, keyed by vehicle id.

    Raises:
        ResourceNotFoundError: No user with *user_id*.
    """
    page = call(
        session, "GET", f"/users/{segment(user_id)}/vehicles",
        VEHICLE_MESSAGES, USER_VEHICLES_OVERRIDES,
        expect_body=True, shape=Page[Vehicle],
    )
    return {vehicle.id: vehicle for vehicle in page.data}


def get_vehicle(session: Session, vehicle_id: str) -> Vehicle:
    """Return one vehicle.

    Raises:
        ResourceNotFoundError: No vehicle with *vehicle_id*.
    """
    return call(
        session, "GET", f"/vehicles/{segment(vehicle_id)}", VEHICLE_MESSAGES, GET_OVERRIDES,
        expect_body=True, shape=Vehicle,
    )


def control_charging(session: Session, vehicle_id: str, action: ChargeAction) -> VehicleAction:
    """Send a ``START`` or ``STOP`` charging command to a vehicle."""
    action = ChargeAction(action)
    return call(
        session, "POST", f"/vehicles/{segment(vehicle_id)}/charging",
        ACTION_MESSAGES, CHARGING_OVERRIDES,
        expect_body=True, shape=VehicleAction, json_body={"action": action.value},
    )


def start_charging(session: Session, vehicle_id: str) -> VehicleAction:
    return control_charging(session, vehicle_id, ChargeAction.START)


def stop_charging(session: Session, vehicle_id: str) -> VehicleAction:
    return control_charging(session, vehicle_id, ChargeAction.STOP)
