"""Pydantic models shared across enode_client.

The models fall into two groups:

**Authentication models** -- :class:`Credentials`, :class:`TokenResponse`
and :class:`Token`. Credentials are frozen once built; the token endpoint
response is parsed into a :class:`TokenResponse` and reduced to the
immutable :class:`Token` that a :class:`~enode_client.session.Session`
keeps.

**Domain models** -- :class:`User`, :class:`Vendor`, :class:`LinkData`,
:class:`LinkAccess`, :class:`Vehicle`, :class:`VehicleAction` and their
building blocks. The API speaks camelCase JSON; the models use snake_case
attributes with camelCase aliases, accept both spellings on input and keep
unknown keys in ``model_extra`` so that new API fields do not break parsing.
"""

from __future__ import annotations

import enum
import math
from datetime import datetime
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator
from pydantic.alias_generators import to_camel

from enode_client.environments import (
    Environment,
    EnvironmentLike,
    EnvironmentResolver,
    resolve_environment,
)


# --- Authentication ---


class Credentials(BaseModel):
    """Client-credentials pair plus the environment it belongs to.

    The secret is held as :class:`~pydantic.SecretStr` so it never shows up
    in ``repr()`` or log lines. No other validation happens here; empty
    values are sent to the token endpoint as-is and rejected there.

    Example::

        creds = Credentials(client_id="abc", client_secret="s3cret", environment="sandbox")
        creds.environment.token_url  # https://oauth.sandbox.enode.io/oauth2/token
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    client_id: str
    client_secret: SecretStr
    environment: EnvironmentResolver = Field(
        default_factory=lambda: resolve_environment(Environment.SANDBOX)
    )

    @field_validator("environment", mode="before")
    @classmethod
    def _resolve_environment(cls, value: EnvironmentLike) -> EnvironmentResolver:
        return resolve_environment(value)


def coerce_seconds(value: Any) -> int:
    """Coerce an ``expires_in`` hint to whole seconds.

    Integers, finite floats and numeric strings (``"3600"``, ``"3600.0"``)
    are accepted. Anything else, including booleans and ``None``, yields
    ``0``.
    """
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    if isinstance(value, str):
        text = value.strip()
        if text.lstrip("+-").isdigit():
            return int(text)
        try:
            number = float(text)
        except ValueError:
            return 0
        return int(number) if math.isfinite(number) else 0
    return 0


class Token(BaseModel):
    """The access token a session authenticates resource calls with.

    Frozen, so a session can swap the whole object in one assignment and a
    reader never sees fields of two different tokens.
    """

    model_config = ConfigDict(frozen=True)

    access_token: str
    token_type: str = ""
    scope: str = ""

    @property
    def authorization(self) -> str:
        """Value for the ``Authorization`` header."""
        return f"Bearer {self.access_token}"


class TokenResponse(BaseModel):
    """Parsed JSON body of a successful token endpoint call.

    ``expires_in`` is only used to schedule the next refresh and is not
    carried over into :class:`Token`. Unparseable values become ``0``,
    which disables auto-refresh scheduling rather than failing the exchange.
    """

    access_token: str = Field(min_length=1)
    token_type: str = ""
    scope: str = ""
    expires_in: int = 0

    @field_validator("expires_in", mode="before")
    @classmethod
    def _coerce_expires_in(cls, value: Any) -> int:
        return coerce_seconds(value)

    def to_token(self) -> Token:
        """Drop the transient expiry hint and return the retained :class:`Token`."""
        return Token(
            access_token=self.access_token,
            token_type=self.token_type,
            scope=self.scope,
        )


# --- Domain ---


class EnodeModel(BaseModel):
    """Base for API payloads: camelCase aliases, extra keys preserved."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    def to_payload(self) -> dict[str, Any]:
        """Serialise to the camelCase JSON dict the API expects."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


T = TypeVar("T")


class Page(EnodeModel, Generic[T]):
    """The ``{"data": [...]}`` envelope around list responses."""

    data: list[T] = Field(default_factory=list)


class VendorType(str, enum.Enum):
    """Kinds of assets a vendor account can provide."""

    VEHICLE = "vehicle"
    CHARGER = "charger"
    HVAC = "hvac"
    INVERTER = "inverter"
    BATTERY = "battery"
    METER = "meter"


class Language(str, enum.Enum):
    """Locales supported by the Link UI."""

    DANISH = "da-DK"
    GERMAN = "de-DE"
    ENGLISH_US = "en-US"
    ENGLISH_UK = "en-GB"
    SPANISH = "es-ES"
    FINNISH = "fi-FI"
    FRENCH = "fr-FR"
    ITALIAN = "it-IT"
    NORWEGIAN = "nb-NO"
    DUTCH_NETHERLANDS = "nl-NL"
    DUTCH_BELGIUM = "nl-BE"
    PORTUGUESE = "pt-PT"
    ROMANIAN = "ro-RO"
    SWEDISH = "sv-SE"


class Vendor(EnodeModel):
    """A vendor account linked to a user."""

    vendor: Optional[str] = None
    vendor_type: Optional[VendorType] = None
    is_valid: Optional[bool] = None


class User(EnodeModel):
    """An end user of the integrating application."""

    id: str
    created_at: Optional[datetime] = None
    linked_vendors: list[Vendor] = Field(default_factory=list)


class LinkData(EnodeModel):
    """Request body for creating a Link UI session."""

    vendor: Optional[str] = None
    vendor_type: VendorType
    language: Language = Language.ENGLISH_UK
    scopes: list[str] = Field(default_factory=list)
    redirect_uri: str
    color_scheme: Optional[str] = None


class LinkAccess(EnodeModel):
    """A short-lived, single-use Link UI session."""

    link_url: str
    link_token: str


class Capability(EnodeModel):
    """Whether a device supports a feature and which interventions would unlock it."""

    intervention_ids: list[str] = Field(default_factory=list)
    is_capable: bool = False


class Location(EnodeModel):
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    last_updated: Optional[datetime] = None


class BasicInformation(EnodeModel):
    brand: Optional[str] = None
    model: Optional[str] = None


class VehicleInformation(BasicInformation):
    vin: Optional[str] = None
    year: Optional[int] = None
    display_name: Optional[str] = None


class ChargeState(EnodeModel):
    """Latest charging telemetry reported by the vehicle."""

    battery_level: Optional[float] = None
    range: Optional[float] = None
    is_plugged_in: Optional[bool] = None
    is_charging: Optional[bool] = None
    is_fully_charged: Optional[bool] = None
    battery_capacity: Optional[float] = None
    charge_limit: Optional[float] = None
    charge_rate: Optional[float] = None
    charge_time_remaining: Optional[float] = None
    last_updated: Optional[datetime] = None
    max_current: Optional[float] = None
    power_delivery_state: Optional[str] = None


class Odometer(EnodeModel):
    distance: Optional[float] = None
    last_updated: Optional[datetime] = None


class Vehicle(EnodeModel):
    """An electric vehicle with charge, location and odometer data."""

    id: str
    user_id: Optional[str] = None
    vendor: Optional[str] = None
    is_reachable: Optional[bool] = None
    last_seen: Optional[datetime] = None
    information: VehicleInformation = Field(default_factory=VehicleInformation)
    charge_state: ChargeState = Field(default_factory=ChargeState)
    odometer: Odometer = Field(default_factory=Odometer)
    location: Location = Field(default_factory=Location)


class ActionState(str, enum.Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"


class FailureReason(EnodeModel):
    type: str
    detail: Optional[str] = None


class DeviceAction(EnodeModel):
    """An asynchronous control action targeting a device."""

    id: str
    user_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    state: ActionState
    target_id: Optional[str] = None
    target_kind: Optional[str] = None
    failure_reason: Optional[FailureReason] = None


class ChargeAction(str, enum.Enum):
    START = "START"
    STOP = "STOP"


class VehicleAction(DeviceAction):
    """A charging action on a vehicle."""

    kind: Optional[str] = None
