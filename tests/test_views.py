from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from fleettrack.demo import demo_vehicle_records
from fleettrack.ingestion.ingest import UpdateIngest
from fleettrack.models._base import VehicleStatus
from fleettrack.models.vehicle import Position, Vehicle
from fleettrack.state.store import FleetStore
from fleettrack.views import (
    count_by_status,
    filter_by_search,
    fleet_summary,
    fuel_histogram,
    resolve_selection,
    select_default,
    speed_histogram,
    stale_vehicles,
)


def _vehicle(
    vehicle_id: str,
    *,
    kind: str = "Truck",
    status: str = "active",
    speed: float = 0.0,
    fuel: float = 50.0,
) -> Vehicle:
    return Vehicle(
        id=vehicle_id,
        kind=kind,
        status=status,
        position=Position(lat=0.0, lng=0.0),
        speed=speed,
        fuel_level=fuel,
    )


def _demo_fleet() -> list[Vehicle]:
    return [Vehicle.model_validate(record) for record in demo_vehicle_records()]


class TestCountByStatus:
    def test_includes_zero_counts(self) -> None:
        vehicles = [_vehicle("A", status="active"), _vehicle("B", status="active"), _vehicle("C", status="idle")]

        counts = count_by_status(vehicles)

        assert counts == {VehicleStatus.ACTIVE: 2, VehicleStatus.IDLE: 1, VehicleStatus.ALERT: 0}
        assert list(counts) == [VehicleStatus.ACTIVE, VehicleStatus.IDLE, VehicleStatus.ALERT]

    def test_empty_fleet(self) -> None:
        assert count_by_status([]) == {VehicleStatus.ACTIVE: 0, VehicleStatus.IDLE: 0, VehicleStatus.ALERT: 0}

    def test_status_keys_compare_as_strings(self) -> None:
        counts = count_by_status(_demo_fleet())

        assert counts["active"] == 3
        assert counts["idle"] == 2
        assert counts["alert"] == 2


class TestHistograms:
    def test_fuel_bucket_boundaries(self) -> None:
        vehicles = [_vehicle(str(i), fuel=fuel) for i, fuel in enumerate([10, 25, 26, 50, 51, 100])]

        assert fuel_histogram(vehicles) == [
            ("0-25%", 2),
            ("26-50%", 2),
            ("51-75%", 1),
            ("76-100%", 1),
        ]

    def test_fuel_fractional_values_use_half_open_buckets(self) -> None:
        vehicles = [_vehicle("A", fuel=0), _vehicle("B", fuel=25.5), _vehicle("C", fuel=75.0), _vehicle("D", fuel=75.1)]

        assert fuel_histogram(vehicles) == [
            ("0-25%", 1),
            ("26-50%", 1),
            ("51-75%", 1),
            ("76-100%", 1),
        ]

    def test_speed_bucket_boundaries(self) -> None:
        speeds = [0, 0.5, 30, 30.1, 60, 61, 90, 90.5, 180]
        vehicles = [_vehicle(str(i), speed=speed) for i, speed in enumerate(speeds)]

        assert speed_histogram(vehicles) == [
            ("0 km/h", 1),
            ("1-30 km/h", 2),
            ("31-60 km/h", 2),
            ("61-90 km/h", 2),
            ("91+ km/h", 2),
        ]

    def test_empty_fleet_keeps_every_bucket(self) -> None:
        assert [label for label, _ in fuel_histogram([])] == ["0-25%", "26-50%", "51-75%", "76-100%"]
        assert all(count == 0 for _, count in speed_histogram([]))
        assert len(speed_histogram([])) == 5


class TestFilterBySearch:
    def test_matches_kind_case_insensitively(self) -> None:
        fleet = _demo_fleet()

        result = filter_by_search(fleet, "VAN")

        assert [v.id for v in result] == ["VH-002", "VH-005"]

    def test_matches_id_and_status(self) -> None:
        fleet = _demo_fleet()

        assert [v.id for v in filter_by_search(fleet, "vh-00")] == [v.id for v in fleet]
        assert [v.id for v in filter_by_search(fleet, "alert")] == ["VH-003", "VH-007"]
        assert [v.id for v in filter_by_search(fleet, "ID")] == ["VH-002", "VH-006"]

    def test_empty_query_returns_everything_in_order(self) -> None:
        fleet = _demo_fleet()

        result = filter_by_search(fleet, "")

        assert result == fleet
        assert result is not fleet

    def test_no_match(self) -> None:
        assert filter_by_search(_demo_fleet(), "bicycle") == []

    def test_whitespace_is_matched_literally(self) -> None:
        fleet = _demo_fleet()

        assert filter_by_search(fleet, "   ") == []
        assert filter_by_search(fleet, " van") == []


class TestSelection:
    def test_select_default(self) -> None:
        fleet = _demo_fleet()

        assert select_default(fleet) == fleet[0]
        assert select_default([]) is None

    def test_resolve_selection_returns_current_record(self) -> None:
        fleet = _demo_fleet()

        selected = resolve_selection(fleet, "VH-004")

        assert selected is not None
        assert selected.id == "VH-004"

    @pytest.mark.parametrize("selected_id", [None, "VH-999"])
    def test_resolve_selection_falls_back_to_default(self, selected_id: str | None) -> None:
        fleet = _demo_fleet()

        assert resolve_selection(fleet, selected_id) == fleet[0]


def test_fleet_summary() -> None:
    summary = fleet_summary(_demo_fleet())

    assert summary.total == 7
    assert summary.active == 3
    assert summary.idle == 2
    assert summary.alert == 2
    assert summary.average_fuel_level == pytest.approx((78 + 45 + 12 + 65 + 89 + 32 + 8) / 7)


def test_fleet_summary_empty() -> None:
    summary = fleet_summary([])

    assert summary.total == 0
    assert summary.average_fuel_level is None


def test_views_do_not_mutate_input() -> None:
    fleet = _demo_fleet()
    before = list(fleet)

    count_by_status(fleet)
    fuel_histogram(fleet)
    speed_histogram(fleet)
    filter_by_search(fleet, "truck")
    fleet_summary(fleet)

    assert fleet == before


def test_selection_follows_vehicle_across_updates() -> None:
    store = FleetStore()
    ingest = UpdateIngest(store)
    ingest.load(demo_vehicle_records())

    ingest.ingest({"id": "VH-005", "speed": 12})
    selected = resolve_selection(store.list_vehicles(), "VH-005")
    assert selected is not None
    assert selected.speed == 12
    assert selected.last_update_label == "just now"

    ingest.remove("VH-005")
    fallback = resolve_selection(store.list_vehicles(), "VH-005")
    assert fallback is not None
    assert fallback.id == "VH-001"


def test_stale_vehicles() -> None:
    now = datetime(2024, 1, 15, 12, 0, tzinfo=UTC)
    last_seen = {
        "VH-001": now - timedelta(seconds=300),
        "VH-002": now - timedelta(seconds=120),
        "VH-003": now - timedelta(seconds=121),
        "VH-004": now,
    }

    assert stale_vehicles(last_seen, now=now) == ["VH-001", "VH-003"]
    assert stale_vehicles(last_seen, now=now, timeout=600) == []
    assert stale_vehicles({}, now=now) == []
