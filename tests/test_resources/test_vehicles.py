"""Tests for vehicle operations and charge control."""

from __future__ import annotations

import httpx
import pytest

from enode_client.exceptions import (
    GeneralServerError,
    ParseError,
    ResourceNotFoundError,
    TransferError,
    UnauthorizedError,
    ValidationError,
)
from enode_client.models import ActionState, ChargeAction
from enode_client.resources.vehicles import (
    control_charging,
    get_vehicle,
    list_user_vehicles,
    list_vehicles,
    start_charging,
    stop_charging,
)


VEHICLE_JSON = {
    "id": "v1",
    "userId": "u1",
    "vendor": "TESLA",
    "isReachable": True,
    "information": {"brand": "Tesla", "model": "Model 3", "vin": "5YJ3E1EA7KF000000"},
    "chargeState": {"batteryLevel": 64, "isPluggedIn": True, "isCharging": False},
    "odometer": {"distance": 24312.5},
    "location": {"latitude": 59.9, "longitude": 10.7},
}

ACTION_JSON = {
    "id": "a1",
    "userId": "u1",
    "createdAt": "2024-05-01T10:00:00Z",
    "state": "PENDING",
    "targetId": "v1",
    "targetKind": "vehicle",
    "kind": "START",
}


class TestListVehicles:
    def test_all_vehicles(self, router, session) -> None:
        router.add(
            "GET", "/vehicles",
            httpx.Response(200, json={"data": [VEHICLE_JSON, {"id": "v2"}]}),
        )
        vehicles = list_vehicles(session)
        assert list(vehicles) == ["v1", "v2"]
        assert vehicles["v1"].charge_state.battery_level == 64
        assert vehicles["v1"].odometer.distance == 24312.5

    def test_bad_gateway(self, router, session) -> None:
        router.add("GET", "/vehicles", httpx.Response(502))
        with pytest.raises(TransferError) as exc_info:
            list_vehicles(session)
        assert str(exc_info.value) == "vehicles: could not read vehicles\n502 Bad Gateway"

    def test_unauthorized(self, router, session) -> None:
        router.add("GET", "/vehicles", httpx.Response(401))
        with pytest.raises(UnauthorizedError) as exc_info:
            list_vehicles(session)
        assert str(exc_info.value) == "vehicles: unauthorized access\n401 Unauthorized"

    def test_parse_failure(self, router, session) -> None:
        router.add("GET", "/vehicles", httpx.Response(200, json={"data": [{"vendor": "x"}]}))
        with pytest.raises(ParseError) as exc_info:
            list_vehicles(session)
        assert str(exc_info.value).startswith("vehicles: unable to parse vehicle data\n")

    def test_user_vehicles(self, router, session) -> None:
        router.add("GET", "/users/u1/vehicles", httpx.Response(200, json={"data": [VEHICLE_JSON]}))
        assert list(list_user_vehicles(session, "u1")) == ["v1"]

    def test_user_vehicles_unknown_user(self, router, session) -> None:
        router.add("GET", "/users/u9/vehicles", httpx.Response(404))
        with pytest.raises(ResourceNotFoundError) as exc_info:
            list_user_vehicles(session, "u9")
        assert str(exc_info.value) == "users: no users with this id found\n404 Not Found"


class TestGetVehicle:
    def test_found(self, router, session) -> None:
        router.add("GET", "/vehicles/v1", httpx.Response(200, json=VEHICLE_JSON))
        vehicle = get_vehicle(session, "v1")
        assert vehicle.information.model == "Model 3"
        assert vehicle.location.latitude == 59.9

    def test_not_found(self, router, session) -> None:
        router.add("GET", "/vehicles/v9", httpx.Response(404))
        with pytest.raises(ResourceNotFoundError) as exc_info:
            get_vehicle(session, "v9")
        assert str(exc_info.value) == "vehicles: no vehicles with this id found\n404 Not Found"

    def test_server_error(self, router, session) -> None:
        router.add("GET", "/vehicles/v1", httpx.Response(500))
        with pytest.raises(GeneralServerError) as exc_info:
            get_vehicle(session, "v1")
        assert str(exc_info.value) == (
            "vehicles: some kind of error occurred\n500 Internal Server Error"
        )


class TestCharging:
    def test_start(self, router, session) -> None:
        router.add("POST", "/vehicles/v1/charging", httpx.Response(200, json=ACTION_JSON))
        action = start_charging(session, "v1")
        assert action.state == ActionState.PENDING
        assert action.target_id == "v1"
        assert router.bodies("POST", "/vehicles/v1/charging") == [{"action": "START"}]

    def test_stop(self, router, session) -> None:
        router.add(
            "POST", "/vehicles/v1/charging",
            httpx.Response(200, json={**ACTION_JSON, "kind": "STOP"}),
        )
        stop_charging(session, "v1")
        assert router.bodies("POST", "/vehicles/v1/charging") == [{"action": "STOP"}]

    def test_action_accepts_string(self, router, session) -> None:
        router.add("POST", "/vehicles/v1/charging", httpx.Response(200, json=ACTION_JSON))
        control_charging(session, "v1", "START")
        assert router.bodies("POST", "/vehicles/v1/charging") == [{"action": "START"}]

    def test_unknown_action_rejected_before_request(self, router, session) -> None:
        with pytest.raises(ValueError):
            control_charging(session, "v1", "TURBO")
        assert router.requests == []

    def test_vehicle_not_found(self, router, session) -> None:
        router.add("POST", "/vehicles/v9/charging", httpx.Response(404))
        with pytest.raises(ResourceNotFoundError) as exc_info:
            control_charging(session, "v9", ChargeAction.START)
        assert str(exc_info.value) == "vehicles: no vehicles with this id found\n404 Not Found"

    @pytest.mark.parametrize("status", [400, 422])
    def test_invalid_request(self, router, session, status: int) -> None:
        router.add("POST", "/vehicles/v1/charging", httpx.Response(status))
        with pytest.raises(ValidationError) as exc_info:
            start_charging(session, "v1")
        assert str(exc_info.value).startswith(f"vehicles: invalid request payload input\n{status} ")

    def test_bad_action_body(self, router, session) -> None:
        router.add("POST", "/vehicles/v1/charging", httpx.Response(200, json={"id": "a1"}))
        with pytest.raises(ParseError) as exc_info:
            start_charging(session, "v1")
        assert str(exc_info.value).startswith("actions: unable to parse actions data\n")
