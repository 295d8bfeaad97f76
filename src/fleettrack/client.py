"""High-level async client for the fleet tracking backend."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

import aiohttp

from fleettrack._api import predictions as _predictions_api
from fleettrack._api import users as _users_api
from fleettrack._api import vehicles as _vehicles_api
from fleettrack._mqtt import FleetMqttRuntime, MqttEvent, MqttSettings
from fleettrack._transport import HttpTransport, Transport
from fleettrack.config import FleetConfig
from fleettrack.exceptions import FleetError, FleetValidationError
from fleettrack.ingestion.ingest import IngestResult, UpdateIngest
from fleettrack.models.prediction import DrivingPatternAnalysis, MaintenancePrediction, RoutePrediction
from fleettrack.models.requests import PredictionRequest, UserIdRequest, VehicleIdRequest
from fleettrack.models.telemetry import Device, LocationSample
from fleettrack.models.user import User, UserVehicle
from fleettrack.models.vehicle import Vehicle, VehicleUpdate
from fleettrack.state.events import UpdateSource
from fleettrack.state.store import FleetStore

_logger = logging.getLogger(__name__)


class FleetClient:
    """Async client that keeps a :class:`FleetStore` in sync with the backend.

    The store is owned by the caller's session and passed in; when omitted a
    fresh one is created. All mutations go through :attr:`ingest`.

    Usage::

        store = FleetStore()
        async with FleetClient(config, store=store) as client:
            await client.load_fleet()
            client.start_live_updates()
            counts = count_by_status(store.list_vehicles())
    """

    def __init__(
        self,
        config: FleetConfig,
        *,
        store: FleetStore | None = None,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
        on_vehicle_update: Callable[[Vehicle], None] | None = None,
        on_ingest_result: Callable[[IngestResult], None] | None = None,
        on_connection_lost: Callable[[str], None] | None = None,
    ) -> None:
        self._config = config
        self._store = store if store is not None else FleetStore(just_updated_label=config.just_updated_label)
        self._ingest = UpdateIngest(
            self._store,
            on_update=on_vehicle_update,
            on_connection_lost=on_connection_lost,
        )
        self._external_session = session is not None
        self._http_session = session
        self._transport: Transport | None = transport
        self._external_transport = transport is not None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._mqtt_runtime: FleetMqttRuntime | None = None
        self._heartbeat_task: asyncio.Task[None] | None = None
        self._on_ingest_result = on_ingest_result

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> FleetClient:
        self._loop = asyncio.get_running_loop()
        if self._transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._transport = HttpTransport(self._config, self._http_session)
        if self._config.mqtt_enabled:
            self.start_live_updates()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        self.stop_live_updates()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        if not self._external_transport:
            self._transport = None
        self._loop = None

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def store(self) -> FleetStore:
        return self._store

    @property
    def ingest(self) -> UpdateIngest:
        return self._ingest

    def _require_transport(self) -> Transport:
        if self._loop is None or self._transport is None:
            raise FleetError("Client not initialized. Use 'async with FleetClient(...) as client:'")
        return self._transport

    def _report(self, result: IngestResult) -> IngestResult:
        if self._on_ingest_result is not None:
            try:
                self._on_ingest_result(result)
            except Exception:
                _logger.debug("on_ingest_result callback failed", exc_info=True)
        return result

    # ------------------------------------------------------------------
    # Vehicles
    # ------------------------------------------------------------------

    async def load_fleet(self) -> list[Vehicle]:
        """Fetch the vehicle list and replace the store contents with it."""
        records = await _vehicles_api.fetch_vehicle_records(self._require_transport())
        return self._ingest.load(records)

    async def refresh_vehicle(self, vehicle_id: str) -> IngestResult:
        """Re-fetch one vehicle and merge it into the store as an HTTP update.

        A vehicle the API no longer knows is removed from the store.
        """
        request = VehicleIdRequest(vehicle_id=vehicle_id)
        record = await _vehicles_api.fetch_vehicle_record(self._require_transport(), request.vehicle_id)
        if record is None:
            return self._report(self._ingest.remove(request.vehicle_id))
        record.setdefault("id", request.vehicle_id)
        return self._report(self._ingest.ingest(record, source=UpdateSource.HTTP))

    async def update_vehicle(self, vehicle_id: str, **fields: Any) -> IngestResult:
        """Send a partial update to the API and merge its answer locally.

        Raises :class:`FleetValidationError` when *fields* are not a valid
        partial vehicle.
        """
        request = VehicleIdRequest(vehicle_id=vehicle_id)
        try:
            update = VehicleUpdate.model_validate({**fields, "id": request.vehicle_id})
        except ValueError as exc:
            raise FleetValidationError(f"Invalid update for {request.vehicle_id}: {exc}") from exc
        merged = await _vehicles_api.put_vehicle_update(self._require_transport(), update)
        payload = merged or {"id": update.id, **update.to_api()}
        payload.setdefault("id", update.id)
        return self._report(self._ingest.ingest(payload, source=UpdateSource.MANUAL))

    async def delete_vehicle(self, vehicle_id: str) -> IngestResult:
        request = VehicleIdRequest(vehicle_id=vehicle_id)
        await _vehicles_api.delete_vehicle(self._require_transport(), request.vehicle_id)
        return self._report(self._ingest.remove(request.vehicle_id))

    async def get_location_history(self, vehicle_id: str) -> list[LocationSample]:
        request = VehicleIdRequest(vehicle_id=vehicle_id)
        return await _vehicles_api.fetch_location_history(self._require_transport(), request.vehicle_id)

    async def get_devices(self) -> list[Device]:
        return await _vehicles_api.fetch_devices(self._require_transport())

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    async def get_users(self) -> list[User]:
        return await _users_api.fetch_users(self._require_transport())

    async def get_user_vehicles(self, user_id: str) -> list[UserVehicle]:
        """Vehicle grants of one user, with their access level."""
        request = UserIdRequest(user_id=user_id)
        return await _users_api.fetch_user_vehicles(self._require_transport(), request.user_id)

    # ------------------------------------------------------------------
    # Predictions
    # ------------------------------------------------------------------

    def _prediction_request(self, vehicle_id: str, timeout: float | None) -> tuple[str, float]:
        request = PredictionRequest(vehicle_id=vehicle_id, timeout=timeout)
        return request.vehicle_id, request.timeout or self._config.prediction_timeout

    async def predict_route(self, vehicle_id: str, *, timeout: float | None = None) -> RoutePrediction:
        """Ask the prediction service for the vehicle's likely route.

        Raises :class:`PredictionTimeoutError` after *timeout* (default
        ``config.prediction_timeout``) and :class:`PredictionError` on any
        other failure.
        """
        vid, effective_timeout = self._prediction_request(vehicle_id, timeout)
        return await _predictions_api.predict_route(self._require_transport(), vid, timeout=effective_timeout)

    async def analyze_driving_patterns(
        self,
        vehicle_id: str,
        *,
        timeout: float | None = None,
    ) -> DrivingPatternAnalysis:
        vid, effective_timeout = self._prediction_request(vehicle_id, timeout)
        return await _predictions_api.analyze_driving_patterns(
            self._require_transport(),
            vid,
            timeout=effective_timeout,
        )

    async def predict_maintenance(self, vehicle_id: str, *, timeout: float | None = None) -> MaintenancePrediction:
        vid, effective_timeout = self._prediction_request(vehicle_id, timeout)
        return await _predictions_api.predict_maintenance(self._require_transport(), vid, timeout=effective_timeout)

    # ------------------------------------------------------------------
    # Live updates (MQTT)
    # ------------------------------------------------------------------

    @property
    def live_updates_running(self) -> bool:
        return self._mqtt_runtime is not None and self._mqtt_runtime.is_running

    def start_live_updates(self, settings: MqttSettings | None = None) -> None:
        """Best-effort MQTT startup (failures must not break the REST flow)."""
        if self.live_updates_running:
            return
        loop = self._loop or asyncio.get_running_loop()
        try:
            runtime = FleetMqttRuntime(loop=loop, on_event=self._on_mqtt_event, logger=_logger)
            runtime.start(settings or MqttSettings.from_config(self._config))
            self._mqtt_runtime = runtime
        except Exception:
            _logger.debug("MQTT startup failed", exc_info=True)
            return
        self._heartbeat_task = loop.create_task(self._heartbeat_monitor())

    def stop_live_updates(self) -> None:
        task = self._heartbeat_task
        self._heartbeat_task = None
        if task is not None:
            task.cancel()
        runtime = self._mqtt_runtime
        self._mqtt_runtime = None
        if runtime is not None:
            runtime.stop()

    def _on_mqtt_event(self, event: MqttEvent) -> None:
        """Handle a decoded MQTT message (called on the loop via call_soon_threadsafe)."""
        result = self._ingest.ingest(event.payload, source=UpdateSource.MQTT)
        self._report(result)

    # ------------------------------------------------------------------
    # Heartbeats
    # ------------------------------------------------------------------

    def check_heartbeats(self, *, now: datetime | None = None) -> list[str]:
        """Ids of vehicles silent for longer than ``config.heartbeat_timeout``."""
        return self._ingest.check_heartbeats(now=now, timeout=self._config.heartbeat_timeout)

    async def _heartbeat_monitor(self) -> None:
        """Check heartbeats every ``config.heartbeat_interval`` while live updates run."""
        while True:
            await asyncio.sleep(self._config.heartbeat_interval)
            self.check_heartbeats()
