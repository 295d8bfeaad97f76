"""Vehicle, device and location history endpoints.

Endpoints:
  - GET /api/vehicles (bulk load source)
  - GET|PUT|DELETE /api/vehicles/{id}
  - GET /api/vehicles/{id}/locations
  - GET /api/devices
"""

from __future__ import annotations

import logging
from typing import Any

from fleettrack._api._common import parse_items, unwrap_list, unwrap_object, vehicle_path
from fleettrack._transport import Transport
from fleettrack.exceptions import FleetTransportError, VehicleNotFoundError
from fleettrack.models.telemetry import Device, LocationSample
from fleettrack.models.vehicle import VehicleUpdate

_logger = logging.getLogger(__name__)


async def fetch_vehicle_records(transport: Transport) -> list[Any]:
    """Fetch the full vehicle list as raw records.

    Entries are returned unchecked. Validation is left to
    :meth:`UpdateIngest.load` so that a bad entry (including a non-object)
    rejects the whole bulk load instead of being silently skipped.
    """
    decoded = await transport.request_json("GET", "/api/vehicles")
    items = unwrap_list(decoded)
    _logger.debug("Vehicle list returned %d entries", len(items))
    return items


async def fetch_vehicle_record(transport: Transport, vehicle_id: str) -> dict[str, Any] | None:
    """Fetch one vehicle as a raw record, or ``None`` if the API answers 404."""
    try:
        decoded = await transport.request_json("GET", vehicle_path(vehicle_id))
    except FleetTransportError as exc:
        if exc.status_code == 404:
            return None
        raise
    record = unwrap_object(decoded)
    return record or None


async def put_vehicle_update(transport: Transport, update: VehicleUpdate) -> dict[str, Any]:
    """Send a partial update; the API answers with the merged vehicle."""
    endpoint = vehicle_path(update.id)
    try:
        decoded = await transport.request_json("PUT", endpoint, payload=update.to_api())
    except FleetTransportError as exc:
        if exc.status_code == 404:
            raise VehicleNotFoundError(f"Unknown vehicle {update.id}", vehicle_id=update.id) from exc
        raise
    return unwrap_object(decoded)


async def delete_vehicle(transport: Transport, vehicle_id: str) -> None:
    try:
        await transport.request_json("DELETE", vehicle_path(vehicle_id))
    except FleetTransportError as exc:
        if exc.status_code == 404:
            raise VehicleNotFoundError(f"Unknown vehicle {vehicle_id}", vehicle_id=vehicle_id) from exc
        raise


async def fetch_location_history(transport: Transport, vehicle_id: str) -> list[LocationSample]:
    endpoint = vehicle_path(vehicle_id, "/locations")
    decoded = await transport.request_json("GET", endpoint)
    return parse_items(LocationSample, unwrap_list(decoded), endpoint=endpoint)


async def fetch_devices(transport: Transport) -> list[Device]:
    endpoint = "/api/devices"
    decoded = await transport.request_json("GET", endpoint)
    return parse_items(Device, unwrap_list(decoded), endpoint=endpoint)
