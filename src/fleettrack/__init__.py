"""fleettrack - Live fleet state aggregation for vehicle tracking dashboards."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("fleettrack")
except PackageNotFoundError:
    __version__ = "0+local"
from fleettrack.client import FleetClient
from fleettrack.config import FleetConfig
from fleettrack.exceptions import (
    FleetConfigError,
    FleetError,
    FleetTransportError,
    FleetValidationError,
    PredictionError,
    PredictionTimeoutError,
    UpdateDecodeError,
    VehicleNotFoundError,
)
from fleettrack.ingestion.ingest import IngestResult, UpdateIngest
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
from fleettrack.state.events import UpdateEvent, UpdateSource
from fleettrack.state.store import FleetStore
from fleettrack.views import (
    FleetSummary,
    count_by_status,
    filter_by_search,
    fleet_summary,
    fuel_histogram,
    resolve_selection,
    select_default,
    speed_histogram,
    stale_vehicles,
)

__all__ = [
    "__version__",
    "Device",
    "DrivingPatternAnalysis",
    "FleetClient",
    "FleetConfig",
    "FleetConfigError",
    "FleetError",
    "FleetStore",
    "FleetSummary",
    "FleetTransportError",
    "FleetValidationError",
    "IngestResult",
    "LocationSample",
    "MaintenancePrediction",
    "Position",
    "PredictionError",
    "PredictionTimeoutError",
    "RoutePrediction",
    "UpdateDecodeError",
    "UpdateEvent",
    "UpdateIngest",
    "UpdateSource",
    "User",
    "UserVehicle",
    "Vehicle",
    "VehicleNotFoundError",
    "VehicleStatus",
    "VehicleUpdate",
    "count_by_status",
    "filter_by_search",
    "fleet_summary",
    "fuel_histogram",
    "resolve_selection",
    "select_default",
    "speed_histogram",
    "stale_vehicles",
]
