"""Prediction service result models.

The prediction service is an opaque remote collaborator; these models only
pin down the shape of what it returns.
"""

from __future__ import annotations

from datetime import date

from pydantic import Field

from fleettrack.models._base import FleetBaseModel
from fleettrack.models.vehicle import Position


class RoutePrediction(FleetBaseModel):
    """Predicted destination and route for a vehicle."""

    predicted_destination: str = ""
    estimated_arrival: str = ""
    """Arrival time as sent by the service (e.g. ``"14:30"``)."""
    route_points: list[Position] = Field(default_factory=list)
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)


class DrivingHabits(FleetBaseModel):
    harsh_acceleration: str = ""
    harsh_braking: str = ""
    speeding_instances: int = Field(default=0, ge=0)


class DrivingPatternAnalysis(FleetBaseModel):
    """Driving behaviour summary for a vehicle."""

    safety_score: float = Field(default=0.0, ge=0.0, le=100.0)
    fuel_efficiency: str = ""
    maintenance_recommendations: list[str] = Field(default_factory=list)
    driving_habits: DrivingHabits = Field(default_factory=DrivingHabits)


class PredictedIssue(FleetBaseModel):
    component: str = ""
    probability: float = Field(default=0.0, ge=0.0, le=1.0)
    timeframe: str = ""
    severity: str = ""


class CostEstimate(FleetBaseModel):
    low: float = Field(default=0.0, ge=0.0)
    medium: float = Field(default=0.0, ge=0.0)
    high: float = Field(default=0.0, ge=0.0)


class MaintenancePrediction(FleetBaseModel):
    """Predicted maintenance needs for a vehicle."""

    next_service_date: date | None = None
    predicted_issues: list[PredictedIssue] = Field(default_factory=list)
    estimated_costs: CostEstimate = Field(default_factory=CostEstimate)
