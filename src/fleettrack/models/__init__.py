"""Data models for fleet records."""

from fleettrack.models._base import FleetBaseModel, VehicleStatus
from fleettrack.models.prediction import (
    CostEstimate,
    DrivingHabits,
    DrivingPatternAnalysis,
    MaintenancePrediction,
    PredictedIssue,
    RoutePrediction,
)
from fleettrack.models.telemetry import Device, LocationSample
from fleettrack.models.user import User, UserVehicle
from fleettrack.models.vehicle import Position, Vehicle, VehicleUpdate

__all__ = [
    "CostEstimate",
    "Device",
    "DrivingHabits",
    "DrivingPatternAnalysis",
    "FleetBaseModel",
    "LocationSample",
    "MaintenancePrediction",
    "Position",
    "PredictedIssue",
    "RoutePrediction",
    "User",
    "UserVehicle",
    "Vehicle",
    "VehicleStatus",
    "VehicleUpdate",
]
