"""Normalized update events.

All ingestion paths (bulk HTTP, MQTT, manual edits) convert their inputs
into these events. Only the state/store layer is allowed to merge them.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class UpdateSource(StrEnum):
    HTTP = "http"
    MQTT = "mqtt"
    PUSH = "push"
    MANUAL = "manual"


class UpdateEvent(BaseModel):
    """A normalized partial update to apply to the fleet store."""

    model_config = ConfigDict(frozen=True)

    vehicle_id: str = Field(..., description="Target vehicle id")
    source: UpdateSource = UpdateSource.PUSH
    observed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    payload_timestamp: float | None = Field(
        default=None,
        description="Producer timestamp (epoch seconds), if any. Recorded, never used for ordering.",
    )
    data: dict[str, Any] = Field(default_factory=dict, description="Sparse patch keyed by Vehicle field name")
    raw: dict[str, Any] = Field(default_factory=dict, description="Original payload (as received)")

    @field_validator("vehicle_id")
    @classmethod
    def _normalize_vehicle_id(cls, value: str) -> str:
        vehicle_id = value.strip()
        if not vehicle_id:
            raise ValueError("vehicle_id must be non-empty")
        return vehicle_id

    @field_validator("observed_at")
    @classmethod
    def _ensure_tz_aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value
