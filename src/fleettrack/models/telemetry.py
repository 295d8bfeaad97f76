"""Tracking device and location history models."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar

from pydantic import Field

from fleettrack.models._base import FleetBaseModel


class Device(FleetBaseModel):
    """A tracking device (GPS tracker, fuel sensor) installed in a vehicle."""

    _KEY_ALIASES: ClassVar[dict[str, str]] = {"type": "kind"}

    id: str = Field(min_length=1)
    vehicle_id: str = ""
    kind: str = ""
    status: str = ""
    last_ping: datetime | None = None


class LocationSample(FleetBaseModel):
    """One historical position fix for a vehicle."""

    _KEY_ALIASES: ClassVar[dict[str, str]] = {
        "latitude": "lat",
        "longitude": "lng",
        "direction": "heading",
    }

    id: str = ""
    vehicle_id: str = ""
    lat: float = Field(ge=-90.0, le=90.0)
    lng: float = Field(ge=-180.0, le=180.0)
    timestamp: datetime | None = None
    speed: float = Field(default=0.0, ge=0.0)
    heading: float | None = None
