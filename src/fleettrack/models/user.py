"""Fleet user and vehicle access models."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from fleettrack.models._base import FleetBaseModel


class User(FleetBaseModel):
    """A dashboard user (dispatcher, driver, administrator)."""

    id: str = Field(min_length=1)
    name: str = ""
    email: str = ""
    role: str = ""
    last_login: datetime | None = None


class UserVehicle(FleetBaseModel):
    """Grant of one vehicle to one user.

    ``access_level`` is free-form as sent by the API (``"full"``,
    ``"driver"``, ...); fleettrack lists grants but does not enforce them.
    """

    user_id: str = Field(min_length=1)
    vehicle_id: str = Field(min_length=1)
    access_level: str = ""
