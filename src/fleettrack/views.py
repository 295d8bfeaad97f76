"""Derived views over a fleet snapshot.

Every function here is pure: it takes a vehicle sequence (usually
``store.list_vehicles()``) and returns a fresh result without touching the
store, so views are safe to recompute after every update.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime

from fleettrack._constants import FUEL_BUCKETS, HEARTBEAT_TIMEOUT, SPEED_BUCKETS, SPEED_STOPPED_LABEL
from fleettrack.models import Vehicle, VehicleStatus


@dataclass(frozen=True, slots=True)
class FleetSummary:
    """Headline numbers for the dashboard summary cards."""

    total: int
    active: int
    idle: int
    alert: int
    average_fuel_level: float | None


def count_by_status(vehicles: Sequence[Vehicle]) -> dict[VehicleStatus, int]:
    """Vehicle count per status; every status is present, zero when unobserved."""
    counts = dict.fromkeys(VehicleStatus, 0)
    for vehicle in vehicles:
        counts[vehicle.status] += 1
    return counts


def fuel_histogram(vehicles: Sequence[Vehicle]) -> list[tuple[str, int]]:
    """Fuel levels bucketed into [0,25], (25,50], (50,75], (75,100]."""
    counts = dict.fromkeys((label for label, _ in FUEL_BUCKETS), 0)
    for vehicle in vehicles:
        for label, upper in FUEL_BUCKETS:
            if vehicle.fuel_level <= upper:
                counts[label] += 1
                break
    return list(counts.items())


def speed_histogram(vehicles: Sequence[Vehicle]) -> list[tuple[str, int]]:
    """Speeds bucketed into {0}, (0,30], (30,60], (60,90], (90,inf)."""
    counts = {SPEED_STOPPED_LABEL: 0} | dict.fromkeys((label for label, _ in SPEED_BUCKETS), 0)
    for vehicle in vehicles:
        if vehicle.speed == 0:
            counts[SPEED_STOPPED_LABEL] += 1
            continue
        for label, upper in SPEED_BUCKETS:
            if vehicle.speed <= upper:
                counts[label] += 1
                break
    return list(counts.items())


def filter_by_search(vehicles: Sequence[Vehicle], query: str) -> list[Vehicle]:
    """Vehicles whose id, kind or status contains *query*, case-insensitively.

    An empty query returns every vehicle in its original order. Whitespace
    in the query is matched literally.
    """
    if not query:
        return list(vehicles)
    needle = query.lower()
    return [
        vehicle
        for vehicle in vehicles
        if needle in vehicle.id.lower() or needle in vehicle.kind.lower() or needle in vehicle.status.value
    ]


def select_default(vehicles: Sequence[Vehicle]) -> Vehicle | None:
    """First vehicle in store order, used to seed the initial selection."""
    return vehicles[0] if vehicles else None


def resolve_selection(vehicles: Sequence[Vehicle], selected_id: str | None) -> Vehicle | None:
    """Current record of the selected vehicle.

    Falls back to :func:`select_default` when nothing is selected or the
    selected vehicle has left the fleet.
    """
    if selected_id is not None:
        for vehicle in vehicles:
            if vehicle.id == selected_id:
                return vehicle
    return select_default(vehicles)


def fleet_summary(vehicles: Sequence[Vehicle]) -> FleetSummary:
    counts = count_by_status(vehicles)
    average = sum(vehicle.fuel_level for vehicle in vehicles) / len(vehicles) if vehicles else None
    return FleetSummary(
        total=len(vehicles),
        active=counts[VehicleStatus.ACTIVE],
        idle=counts[VehicleStatus.IDLE],
        alert=counts[VehicleStatus.ALERT],
        average_fuel_level=average,
    )


def stale_vehicles(
    last_seen: Mapping[str, datetime],
    *,
    now: datetime,
    timeout: float = HEARTBEAT_TIMEOUT,
) -> list[str]:
    """Ids of vehicles not heard from for more than *timeout* seconds.

    *last_seen* maps vehicle id to the time its last update was applied
    (see :attr:`UpdateIngest.last_seen`). Vehicles that never sent an update
    are not in the map and are never reported.
    """
    return [vehicle_id for vehicle_id, seen in last_seen.items() if (now - seen).total_seconds() > timeout]
