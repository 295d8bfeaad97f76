"""Custom exception hierarchy for fleettrack."""

from __future__ import annotations


class FleetError(Exception):
    """Base exception for all fleettrack errors."""


class FleetConfigError(FleetError):
    """Invalid or missing configuration."""


class FleetValidationError(FleetError):
    """Vehicle records failed validation (e.g. duplicate ids on bulk load)."""


class VehicleNotFoundError(FleetError):
    """An operation referenced a vehicle id the fleet store does not know."""

    def __init__(self, message: str, *, vehicle_id: str = "") -> None:
        self.vehicle_id = vehicle_id
        super().__init__(message)


class UpdateDecodeError(FleetError):
    """An update payload is not a well-formed vehicle update record."""


class FleetTransportError(FleetError):
    """HTTP-level failure (network, non-2xx, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class PredictionError(FleetError):
    """The prediction service failed to produce a result.

    No retry policy is applied; callers are expected to surface a failure
    state and let the user retry manually.
    """

    def __init__(self, message: str, *, vehicle_id: str = "", kind: str = "") -> None:
        self.vehicle_id = vehicle_id
        self.kind = kind
        super().__init__(message)


class PredictionTimeoutError(PredictionError):
    """The prediction service did not answer within ``prediction_timeout``."""
