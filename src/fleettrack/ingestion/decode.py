"""Update payload decoding.

Turns raw inbound payloads (JSON text/bytes from the push stream, or
already-parsed mappings from the REST layer) into normalized
:class:`~fleettrack.state.events.UpdateEvent` objects.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from fleettrack.exceptions import UpdateDecodeError
from fleettrack.ingestion.normalize import extract_payload_timestamp
from fleettrack.models.vehicle import VehicleUpdate
from fleettrack.state.events import UpdateEvent, UpdateSource

# Envelope used by the broadcast side of the telemetry server.
_ENVELOPE_TYPE = "vehicle_update"


def parse_payload(raw_payload: Any) -> dict[str, Any]:
    """Parse *raw_payload* into a JSON object.

    ``{"type": "vehicle_update", "data": {...}}`` envelopes are unwrapped.
    The telemetry server also broadcasts a flat form with the update fields
    beside ``"type": "vehicle_update"``; there the marker is dropped so it
    is never read as the vehicle kind.
    """
    if isinstance(raw_payload, (bytes, bytearray)):
        try:
            raw_payload = raw_payload.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise UpdateDecodeError("Update payload is not valid UTF-8") from exc

    if isinstance(raw_payload, str):
        try:
            raw_payload = json.loads(raw_payload)
        except json.JSONDecodeError as exc:
            raise UpdateDecodeError(f"Update payload is not JSON: {raw_payload[:64]!r}") from exc

    if not isinstance(raw_payload, Mapping):
        raise UpdateDecodeError(f"Update payload must be an object, got {type(raw_payload).__name__}")

    payload = dict(raw_payload)
    nested = payload.get("data")
    if payload.get("type") != _ENVELOPE_TYPE:
        return payload
    if isinstance(nested, Mapping):
        return dict(nested)
    del payload["type"]
    return payload


def decode_update(payload: dict[str, Any]) -> VehicleUpdate:
    """Validate a parsed payload into a :class:`VehicleUpdate`."""
    try:
        return VehicleUpdate.model_validate(payload)
    except ValidationError as exc:
        if any(error.get("loc") == ("id",) and error.get("type") == "missing" for error in exc.errors()):
            raise UpdateDecodeError("Update payload has no vehicle id") from exc
        raise UpdateDecodeError(f"Invalid update payload: {exc.error_count()} validation error(s)") from exc


def build_update_event(
    raw_payload: Any,
    *,
    source: UpdateSource = UpdateSource.PUSH,
) -> UpdateEvent:
    """Decode a raw payload into an update event ready for the store.

    Raises :class:`UpdateDecodeError` for anything that is not a well-formed
    vehicle update record.
    """
    payload = parse_payload(raw_payload)
    update = decode_update(payload)
    return UpdateEvent(
        vehicle_id=update.id,
        source=source,
        payload_timestamp=extract_payload_timestamp(payload),
        data=update.patch(),
        raw=payload,
    )
