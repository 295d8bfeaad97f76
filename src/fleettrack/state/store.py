"""In-memory fleet store.

This is the only component allowed to merge incoming update events.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from pydantic import ValidationError

from fleettrack._constants import JUST_UPDATED_LABEL
from fleettrack.exceptions import FleetValidationError, VehicleNotFoundError
from fleettrack.models.vehicle import Vehicle
from fleettrack.state.events import UpdateEvent

_logger = logging.getLogger(__name__)


def _merge_patch(current: Vehicle, patch: dict[str, Any], label: str) -> Vehicle:
    """Shallow field-wise merge of a sparse patch into *current*.

    The ingestion/Pydantic boundary is responsible for dropping absent and
    placeholder fields, so keys in the patch simply overwrite. The recency
    label is always refreshed, whatever the patch carried.
    """

    merged = current.model_dump()
    merged.update(patch)
    merged["last_update_label"] = label
    return Vehicle.model_validate(merged)


class FleetStore:
    """Authoritative, de-duplicated set of vehicles for one session.

    Insertion order is kept: :meth:`list_vehicles` returns vehicles in the
    order they were first loaded. Stored vehicles are frozen models, so
    every list handed out is a consistent snapshot.
    """

    def __init__(self, *, just_updated_label: str = JUST_UPDATED_LABEL) -> None:
        self._just_updated_label = just_updated_label
        self._vehicles: dict[str, Vehicle] = {}

    def __len__(self) -> int:
        return len(self._vehicles)

    def __contains__(self, vehicle_id: object) -> bool:
        return vehicle_id in self._vehicles

    def load_all(self, vehicles: Iterable[Vehicle]) -> None:
        """Replace the store contents with *vehicles*, in the given order.

        Raises :class:`FleetValidationError` if an id repeats; the previous
        contents are kept in that case.
        """
        loaded: dict[str, Vehicle] = {}
        for vehicle in vehicles:
            if vehicle.id in loaded:
                raise FleetValidationError(f"Duplicate vehicle id in bulk load: {vehicle.id}")
            loaded[vehicle.id] = vehicle
        self._vehicles = loaded
        _logger.debug("Fleet store loaded with %d vehicles", len(loaded))

    def apply_update(self, event: UpdateEvent) -> Vehicle:
        """Merge a partial update into the stored vehicle and return the result.

        Unknown ids raise :class:`VehicleNotFoundError`; no vehicle is ever
        created from a partial event. A merge that would produce an invalid
        vehicle raises :class:`FleetValidationError`. The store is unchanged
        on either error.
        """
        current = self._vehicles.get(event.vehicle_id)
        if current is None:
            raise VehicleNotFoundError(
                f"Update for unknown vehicle {event.vehicle_id}",
                vehicle_id=event.vehicle_id,
            )

        try:
            merged = _merge_patch(current, event.data, self._just_updated_label)
        except ValidationError as exc:
            raise FleetValidationError(f"Update for {event.vehicle_id} produces an invalid vehicle: {exc}") from exc

        # Dict assignment to an existing key keeps the vehicle's slot.
        self._vehicles[event.vehicle_id] = merged
        return merged

    def remove(self, vehicle_id: str) -> Vehicle:
        """Drop a vehicle from the store and return its last state."""
        vehicle = self._vehicles.pop(vehicle_id, None)
        if vehicle is None:
            raise VehicleNotFoundError(f"Unknown vehicle {vehicle_id}", vehicle_id=vehicle_id)
        return vehicle

    def get(self, vehicle_id: str) -> Vehicle | None:
        """Get the current state of a vehicle, or ``None`` if unknown."""
        return self._vehicles.get(vehicle_id)

    def list_vehicles(self) -> list[Vehicle]:
        """All vehicles in store order."""
        return list(self._vehicles.values())
