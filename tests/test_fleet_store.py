from __future__ import annotations

import pytest

from fleettrack.exceptions import FleetValidationError, VehicleNotFoundError
from fleettrack.models._base import VehicleStatus
from fleettrack.models.vehicle import Position, Vehicle
from fleettrack.state.events import UpdateEvent, UpdateSource
from fleettrack.state.store import FleetStore


def _vehicle(vehicle_id: str, status: str = "active", *, speed: float = 0.0, fuel: float = 50.0) -> Vehicle:
    return Vehicle(
        id=vehicle_id,
        kind="Truck",
        status=status,
        position=Position(lat=37.7749, lng=-122.4194),
        speed=speed,
        fuel_level=fuel,
        last_update_label="5 min ago",
    )


def _event(vehicle_id: str, **data: object) -> UpdateEvent:
    return UpdateEvent(vehicle_id=vehicle_id, source=UpdateSource.PUSH, data=data)


def _loaded_store() -> FleetStore:
    store = FleetStore()
    store.load_all(
        [
            _vehicle("VH-001", "active", speed=65, fuel=78),
            _vehicle("VH-002", "idle", fuel=45),
            _vehicle("VH-003", "alert", fuel=12),
        ]
    )
    return store


def test_load_all_preserves_order() -> None:
    vehicles = [_vehicle("VH-003"), _vehicle("VH-001"), _vehicle("VH-002")]
    store = FleetStore()

    store.load_all(vehicles)

    assert store.list_vehicles() == vehicles
    assert len(store) == 3


def test_load_all_replaces_previous_contents() -> None:
    store = _loaded_store()

    store.load_all([_vehicle("VH-009")])

    assert [v.id for v in store.list_vehicles()] == ["VH-009"]
    assert store.get("VH-001") is None


def test_load_all_duplicate_id_keeps_prior_state() -> None:
    store = _loaded_store()
    before = store.list_vehicles()

    with pytest.raises(FleetValidationError):
        store.load_all([_vehicle("VH-010"), _vehicle("VH-011"), _vehicle("VH-010")])

    assert store.list_vehicles() == before


def test_apply_update_merges_present_fields_only() -> None:
    store = _loaded_store()
    before = store.get("VH-002")
    assert before is not None

    merged = store.apply_update(_event("VH-002", speed=40.0))

    assert merged.speed == 40.0
    assert merged.status == VehicleStatus.IDLE
    assert merged.fuel_level == before.fuel_level
    assert merged.position == before.position
    assert merged.kind == before.kind
    assert merged.last_update_label == "just now"
    assert store.get("VH-002") == merged


def test_apply_update_position_only_ping_keeps_fuel() -> None:
    store = _loaded_store()

    merged = store.apply_update(_event("VH-001", position={"lat": 37.8, "lng": -122.3}))

    assert merged.position == Position(lat=37.8, lng=-122.3)
    assert merged.fuel_level == 78.0
    assert merged.speed == 65.0


def test_apply_update_always_refreshes_label() -> None:
    store = FleetStore(just_updated_label="updated")
    store.load_all([_vehicle("VH-001")])

    merged = store.apply_update(_event("VH-001", last_update_label="3 hours ago"))

    assert merged.last_update_label == "updated"


def test_apply_update_is_idempotent_for_values() -> None:
    store = _loaded_store()
    event = _event("VH-003", speed=12.5, status=VehicleStatus.ACTIVE)

    first = store.apply_update(event)
    second = store.apply_update(event)

    assert first == second


def test_apply_update_keeps_store_order() -> None:
    store = _loaded_store()

    store.apply_update(_event("VH-001", fuel_level=10.0))

    assert [v.id for v in store.list_vehicles()] == ["VH-001", "VH-002", "VH-003"]


def test_apply_update_unknown_vehicle_leaves_store_unchanged() -> None:
    store = _loaded_store()
    before = store.list_vehicles()

    with pytest.raises(VehicleNotFoundError) as exc_info:
        store.apply_update(_event("VH-404", speed=10.0))

    assert exc_info.value.vehicle_id == "VH-404"
    assert store.list_vehicles() == before
    assert "VH-404" not in store


def test_apply_update_invalid_merge_leaves_store_unchanged() -> None:
    store = _loaded_store()
    before = store.list_vehicles()

    with pytest.raises(FleetValidationError):
        store.apply_update(_event("VH-001", fuel_level=150.0))

    assert store.list_vehicles() == before


def test_remove_vehicle() -> None:
    store = _loaded_store()

    removed = store.remove("VH-002")

    assert removed.id == "VH-002"
    assert [v.id for v in store.list_vehicles()] == ["VH-001", "VH-003"]
    with pytest.raises(VehicleNotFoundError):
        store.remove("VH-002")


def test_list_vehicles_returns_snapshot() -> None:
    store = _loaded_store()
    snapshot = store.list_vehicles()

    store.apply_update(_event("VH-001", speed=0.0))

    assert snapshot[0].speed == 65.0
    assert store.list_vehicles()[0].speed == 0.0


def test_store_instances_are_independent() -> None:
    first = _loaded_store()
    second = FleetStore()

    assert len(first) == 3
    assert len(second) == 0
