from __future__ import annotations

from datetime import date

import pytest
from pydantic import ValidationError

from fleettrack.models import (
    Device,
    DrivingPatternAnalysis,
    LocationSample,
    MaintenancePrediction,
    Position,
    RoutePrediction,
    User,
    UserVehicle,
    Vehicle,
    VehicleStatus,
    VehicleUpdate,
)
from fleettrack.models.requests import PredictionRequest, UserIdRequest, VehicleIdRequest

_API_RECORD = {
    "id": "VH-001",
    "type": "Truck",
    "status": "active",
    "location": {"lat": 37.7749, "lng": -122.4194},
    "speed": 65,
    "fuel": 78,
    "lastUpdate": "2 min ago",
}


class TestVehicle:
    def test_parses_api_key_names(self) -> None:
        vehicle = Vehicle.model_validate(_API_RECORD)

        assert vehicle.id == "VH-001"
        assert vehicle.kind == "Truck"
        assert vehicle.status is VehicleStatus.ACTIVE
        assert vehicle.position == Position(lat=37.7749, lng=-122.4194)
        assert vehicle.speed == 65
        assert vehicle.fuel_level == 78
        assert vehicle.last_update_label == "2 min ago"
        assert vehicle.driver is None

    def test_canonical_key_wins_over_legacy_key(self) -> None:
        vehicle = Vehicle.model_validate({**_API_RECORD, "fuelLevel": 50})

        assert vehicle.fuel_level == 50

    @pytest.mark.parametrize("status", ["ACTIVE", " Active ", "active"])
    def test_status_is_case_insensitive(self, status: str) -> None:
        vehicle = Vehicle.model_validate({**_API_RECORD, "status": status})

        assert vehicle.status is VehicleStatus.ACTIVE

    @pytest.mark.parametrize(
        ("key", "value"),
        [
            ("status", "parked"),
            ("fuel", 101),
            ("fuel", -1),
            ("speed", -5),
            ("id", ""),
            ("location", {"lat": 91, "lng": 0}),
        ],
    )
    def test_rejects_invalid_values(self, key: str, value: object) -> None:
        with pytest.raises(ValidationError):
            Vehicle.model_validate({**_API_RECORD, key: value})

    def test_sentinels_fall_back_to_defaults(self) -> None:
        vehicle = Vehicle.model_validate({**_API_RECORD, "type": "--", "lastUpdate": None, "driver": ""})

        assert vehicle.kind == ""
        assert vehicle.last_update_label == ""
        assert vehicle.driver is None

    def test_ignores_unknown_keys(self) -> None:
        vehicle = Vehicle.model_validate({**_API_RECORD, "odometer": 120000})

        assert not hasattr(vehicle, "odometer")

    def test_position_accepts_long_names(self) -> None:
        position = Position.model_validate({"latitude": 1.5, "longitude": 2.5})

        assert (position.lat, position.lng) == (1.5, 2.5)
        assert Position.model_validate({"lat": 1.5, "lon": 2.5}).lng == 2.5

    def test_to_api_uses_api_key_names(self) -> None:
        vehicle = Vehicle.model_validate(_API_RECORD)

        assert vehicle.to_api() == {
            "id": "VH-001",
            "type": "Truck",
            "status": "active",
            "location": {"lat": 37.7749, "lng": -122.4194},
            "speed": 65.0,
            "fuel": 78.0,
            "lastUpdate": "2 min ago",
        }
        assert Vehicle.model_validate(vehicle.to_api()) == vehicle

    def test_is_frozen(self) -> None:
        vehicle = Vehicle.model_validate(_API_RECORD)

        with pytest.raises(ValidationError):
            vehicle.speed = 10  # type: ignore[misc]


class TestVehicleUpdate:
    def test_patch_contains_only_sent_fields(self) -> None:
        update = VehicleUpdate.model_validate({"id": "VH-002", "speed": 40})

        assert update.patch() == {"speed": 40.0}

    def test_patch_uses_field_names(self) -> None:
        update = VehicleUpdate.model_validate(
            {"vehicleId": "VH-002", "fuel": 30, "location": {"lat": 1, "lng": 2}, "status": "ALERT"}
        )

        assert update.id == "VH-002"
        assert update.patch() == {
            "fuel_level": 30.0,
            "position": {"lat": 1.0, "lng": 2.0},
            "status": VehicleStatus.ALERT,
        }

    def test_sentinels_are_not_set(self) -> None:
        update = VehicleUpdate.model_validate({"id": "VH-002", "speed": None, "fuel": "--", "driver": ""})

        assert update.patch() == {}

    def test_requires_id(self) -> None:
        with pytest.raises(ValidationError):
            VehicleUpdate.model_validate({"speed": 10})

    def test_to_api(self) -> None:
        update = VehicleUpdate(id="VH-003", fuel_level=55, status=VehicleStatus.IDLE)

        assert update.to_api() == {"fuel": 55.0, "status": "idle"}


class TestTelemetry:
    def test_device(self) -> None:
        device = Device.model_validate(
            {
                "id": "DEV-1",
                "vehicleId": "VH-001",
                "type": "GPS Tracker",
                "status": "online",
                "lastPing": "2024-01-15T10:30:00Z",
            }
        )

        assert device.vehicle_id == "VH-001"
        assert device.kind == "GPS Tracker"
        assert device.last_ping is not None
        assert device.last_ping.year == 2024

    def test_location_sample(self) -> None:
        sample = LocationSample.model_validate(
            {"vehicleId": "VH-001", "latitude": 37.0, "longitude": -122.0, "direction": 90, "speed": 12}
        )

        assert (sample.lat, sample.lng, sample.heading) == (37.0, -122.0, 90.0)
        assert sample.timestamp is None


class TestUsers:
    def test_user(self) -> None:
        user = User.model_validate(
            {"id": "USR-001", "name": "John Doe", "email": "john@example.com", "role": "admin", "lastLogin": "--"}
        )

        assert (user.name, user.role) == ("John Doe", "admin")
        assert user.last_login is None

    def test_user_vehicle_grant(self) -> None:
        grant = UserVehicle.model_validate({"userId": "USR-002", "vehicleId": "VH-002", "accessLevel": "driver"})

        assert (grant.user_id, grant.vehicle_id, grant.access_level) == ("USR-002", "VH-002", "driver")

    def test_user_vehicle_requires_both_ids(self) -> None:
        with pytest.raises(ValidationError):
            UserVehicle.model_validate({"userId": "USR-002", "accessLevel": "full"})


class TestPredictions:
    def test_route_prediction(self) -> None:
        prediction = RoutePrediction.model_validate(
            {
                "predictedDestination": "Warehouse B",
                "estimatedArrival": "14:30",
                "routePoints": [{"lat": 37.77, "lng": -122.41}, {"lat": 37.78, "lng": -122.42}],
                "confidence": 0.87,
            }
        )

        assert prediction.predicted_destination == "Warehouse B"
        assert len(prediction.route_points) == 2
        assert prediction.confidence == pytest.approx(0.87)

    def test_driving_patterns_defaults(self) -> None:
        analysis = DrivingPatternAnalysis.model_validate({"safetyScore": 85})

        assert analysis.safety_score == 85
        assert analysis.maintenance_recommendations == []
        assert analysis.driving_habits.speeding_instances == 0

    def test_maintenance_prediction(self) -> None:
        prediction = MaintenancePrediction.model_validate(
            {
                "nextServiceDate": "2024-02-15",
                "predictedIssues": [
                    {"component": "Brake Pads", "probability": 0.75, "timeframe": "2-3 weeks", "severity": "medium"}
                ],
                "estimatedCosts": {"low": 150, "medium": 300, "high": 500},
            }
        )

        assert prediction.next_service_date == date(2024, 2, 15)
        assert prediction.predicted_issues[0].component == "Brake Pads"
        assert prediction.estimated_costs.high == 500

    def test_rejects_out_of_range_confidence(self) -> None:
        with pytest.raises(ValidationError):
            RoutePrediction.model_validate({"confidence": 1.5})


class TestRequests:
    def test_vehicle_id_is_stripped(self) -> None:
        assert VehicleIdRequest(vehicle_id="  VH-001 ").vehicle_id == "VH-001"

    @pytest.mark.parametrize("vehicle_id", ["", "   "])
    def test_vehicle_id_must_be_non_empty(self, vehicle_id: str) -> None:
        with pytest.raises(ValidationError):
            VehicleIdRequest(vehicle_id=vehicle_id)

    def test_prediction_timeout_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            PredictionRequest(vehicle_id="VH-001", timeout=0)
        assert PredictionRequest(vehicle_id="VH-001").timeout is None

    def test_user_id_is_stripped_and_required(self) -> None:
        assert UserIdRequest(user_id=" USR-001 ").user_id == "USR-001"
        with pytest.raises(ValidationError):
            UserIdRequest(user_id="  ")
