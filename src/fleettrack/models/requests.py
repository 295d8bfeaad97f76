"""Pydantic request models for client entrypoints.

These models provide a consistent "validate → normalize → execute" flow.
They are used internally by :class:`fleettrack.client.FleetClient`.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class VehicleIdRequest(BaseModel):
    """Request containing a vehicle id."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_default=True,
        str_strip_whitespace=True,
    )

    vehicle_id: str

    @field_validator("vehicle_id")
    @classmethod
    def _vehicle_id_non_empty(cls, value: str) -> str:
        vehicle_id = value.strip()
        if not vehicle_id:
            raise ValueError("vehicle_id must be non-empty")
        return vehicle_id


class PredictionRequest(VehicleIdRequest):
    """Vehicle id request with an optional per-call timeout override."""

    timeout: float | None = Field(default=None, gt=0)


class UserIdRequest(BaseModel):
    """Request containing a user id."""

    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)

    user_id: str = Field(min_length=1)
