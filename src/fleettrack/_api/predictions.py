"""Prediction service endpoints.

Endpoints:
  - POST /api/predictions/route
  - POST /api/predictions/driving-patterns
  - POST /api/predictions/maintenance

The service may be slow and may fail. Every call is bounded by a timeout;
cancellation of the awaiting task propagates unchanged.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, TypeVar

from fleettrack._api._common import parse_item, unwrap_object
from fleettrack._transport import Transport
from fleettrack.exceptions import (
    FleetTransportError,
    FleetValidationError,
    PredictionError,
    PredictionTimeoutError,
)
from fleettrack.models._base import FleetBaseModel
from fleettrack.models.prediction import DrivingPatternAnalysis, MaintenancePrediction, RoutePrediction

_logger = logging.getLogger(__name__)

TPrediction = TypeVar("TPrediction", bound=FleetBaseModel)

ROUTE = "route"
DRIVING_PATTERNS = "driving-patterns"
MAINTENANCE = "maintenance"


async def _request_prediction(
    transport: Transport,
    model: type[TPrediction],
    *,
    kind: str,
    vehicle_id: str,
    timeout: float,
) -> TPrediction:
    endpoint = f"/api/predictions/{kind}"
    _logger.debug("Requesting %s prediction for %s", kind, vehicle_id)
    try:
        async with asyncio.timeout(timeout):
            decoded: Any = await transport.request_json("POST", endpoint, payload={"vehicleId": vehicle_id})
    except TimeoutError as exc:
        raise PredictionTimeoutError(
            f"{kind} prediction for {vehicle_id} timed out after {timeout:g}s",
            vehicle_id=vehicle_id,
            kind=kind,
        ) from exc
    except FleetTransportError as exc:
        raise PredictionError(
            f"{kind} prediction for {vehicle_id} failed: {exc}",
            vehicle_id=vehicle_id,
            kind=kind,
        ) from exc

    try:
        return parse_item(model, unwrap_object(decoded), endpoint=endpoint)
    except FleetValidationError as exc:
        raise PredictionError(str(exc), vehicle_id=vehicle_id, kind=kind) from exc


async def predict_route(transport: Transport, vehicle_id: str, *, timeout: float) -> RoutePrediction:
    return await _request_prediction(transport, RoutePrediction, kind=ROUTE, vehicle_id=vehicle_id, timeout=timeout)


async def analyze_driving_patterns(
    transport: Transport,
    vehicle_id: str,
    *,
    timeout: float,
) -> DrivingPatternAnalysis:
    return await _request_prediction(
        transport,
        DrivingPatternAnalysis,
        kind=DRIVING_PATTERNS,
        vehicle_id=vehicle_id,
        timeout=timeout,
    )


async def predict_maintenance(transport: Transport, vehicle_id: str, *, timeout: float) -> MaintenancePrediction:
    return await _request_prediction(
        transport,
        MaintenancePrediction,
        kind=MAINTENANCE,
        vehicle_id=vehicle_id,
        timeout=timeout,
    )
