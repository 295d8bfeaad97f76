"""Vehicle and vehicle update models."""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import Field, field_validator

from fleettrack.models._base import FleetBaseModel, VehicleStatus

# Canonical field name -> key used by the fleet REST API.
_API_KEY_NAMES: dict[str, str] = {
    "id": "id",
    "kind": "type",
    "status": "status",
    "position": "location",
    "speed": "speed",
    "fuel_level": "fuel",
    "last_update_label": "lastUpdate",
    "driver": "driver",
}

_VEHICLE_KEY_ALIASES: dict[str, str] = {
    "vehicleId": "id",
    "type": "kind",
    "location": "position",
    "fuel": "fuelLevel",
    "lastUpdate": "lastUpdateLabel",
}


class Position(FleetBaseModel):
    """A latitude/longitude pair in degrees."""

    _KEY_ALIASES: ClassVar[dict[str, str]] = {
        "latitude": "lat",
        "longitude": "lng",
        "lon": "lng",
    }

    lat: float = Field(ge=-90.0, le=90.0)
    lng: float = Field(ge=-180.0, le=180.0)


class Vehicle(FleetBaseModel):
    """One tracked vehicle as held by the fleet store.

    Parameters
    ----------
    id : str
        Stable, unique identifier (e.g. ``"VH-001"``).
    kind : str
        Free-form category label (truck, van, car). API key ``type``.
    status : VehicleStatus
        ``active``, ``idle`` or ``alert``.
    position : Position
        Last known position. API key ``location``.
    speed : float
        Speed in km/h, never negative.
    fuel_level : float
        Fuel level percentage in ``[0, 100]``. API key ``fuel``.
    last_update_label : str
        Human-readable recency (``"2 min ago"``). API key ``lastUpdate``.
    driver : str or None
        Identifier of the assigned operator.
    """

    _KEY_ALIASES: ClassVar[dict[str, str]] = _VEHICLE_KEY_ALIASES

    id: str = Field(min_length=1)
    kind: str = ""
    status: VehicleStatus
    position: Position
    speed: float = Field(default=0.0, ge=0.0)
    fuel_level: float = Field(ge=0.0, le=100.0)
    last_update_label: str = ""
    driver: str | None = None

    @field_validator("status", mode="before")
    @classmethod
    def _coerce_status(cls, value: Any) -> Any:
        return value.strip().lower() if isinstance(value, str) else value

    def to_api(self) -> dict[str, Any]:
        """Serialize using the fleet REST API key names."""
        return _to_api_keys(self.model_dump(mode="json", exclude_none=True))


class VehicleUpdate(FleetBaseModel):
    """A partial vehicle record: ``id`` plus any subset of vehicle fields.

    Only keys present in the source payload count as set. Absent keys never
    reach the store, so a position-only ping cannot erase a known fuel level.
    """

    _KEY_ALIASES: ClassVar[dict[str, str]] = _VEHICLE_KEY_ALIASES

    id: str = Field(min_length=1)
    kind: str | None = None
    status: VehicleStatus | None = None
    position: Position | None = None
    speed: float | None = Field(default=None, ge=0.0)
    fuel_level: float | None = Field(default=None, ge=0.0, le=100.0)
    last_update_label: str | None = None
    driver: str | None = None

    @field_validator("status", mode="before")
    @classmethod
    def _coerce_status(cls, value: Any) -> Any:
        return value.strip().lower() if isinstance(value, str) else value

    def patch(self) -> dict[str, Any]:
        """Fields explicitly carried by this update, keyed by field name (``id`` excluded)."""
        return self.model_dump(exclude_unset=True, exclude={"id"})

    def to_api(self) -> dict[str, Any]:
        """Serialize the set fields using the fleet REST API key names."""
        return _to_api_keys(self.model_dump(mode="json", exclude_unset=True, exclude={"id"}))


def _to_api_keys(data: dict[str, Any]) -> dict[str, Any]:
    return {_API_KEY_NAMES.get(key, key): value for key, value in data.items()}
