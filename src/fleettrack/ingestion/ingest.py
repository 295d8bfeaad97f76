"""Update ingestion entry point.

:class:`UpdateIngest` is the single path through which the fleet store is
mutated. Bulk loads replace the store wholesale; live updates are decoded,
normalized, and merged one at a time. A bad update is logged and reported
back to the caller, never raised, so the store always stays in its last
known-good state and the session stays serviceable.

Every applied update also counts as a heartbeat for its vehicle.
:meth:`UpdateIngest.check_heartbeats` reports vehicles that have gone quiet.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from pydantic import TypeAdapter, ValidationError

from fleettrack._constants import HEARTBEAT_TIMEOUT
from fleettrack._redact import redact_for_log
from fleettrack.exceptions import FleetValidationError, UpdateDecodeError, VehicleNotFoundError
from fleettrack.ingestion.decode import build_update_event
from fleettrack.models.vehicle import Vehicle
from fleettrack.state.events import UpdateEvent, UpdateSource
from fleettrack.state.store import FleetStore
from fleettrack.views import stale_vehicles

_logger = logging.getLogger(__name__)

_VEHICLE_LIST = TypeAdapter(list[Vehicle])

IngestError = UpdateDecodeError | VehicleNotFoundError | FleetValidationError


@dataclass(frozen=True, slots=True)
class IngestResult:
    """Outcome of one ingest call: the merged vehicle, or why it was dropped."""

    vehicle: Vehicle | None = None
    error: IngestError | None = None
    event: UpdateEvent | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class UpdateIngest:
    """Decode inbound payloads and route them into a :class:`FleetStore`.

    Usage::

        store = FleetStore()
        ingest = UpdateIngest(store)
        ingest.load(vehicle_records)
        result = ingest.ingest('{"id": "VH-002", "speed": 40}')
        offline = ingest.check_heartbeats()
    """

    def __init__(
        self,
        store: FleetStore,
        *,
        on_update: Callable[[Vehicle], None] | None = None,
        on_connection_lost: Callable[[str], None] | None = None,
    ) -> None:
        self._store = store
        self._on_update = on_update
        self._on_connection_lost = on_connection_lost
        self._last_seen: dict[str, datetime] = {}
        self._reported_offline: set[str] = set()

    @property
    def store(self) -> FleetStore:
        return self._store

    @property
    def last_seen(self) -> dict[str, datetime]:
        """Time each vehicle's latest update was applied (copy)."""
        return dict(self._last_seen)

    def load(self, records: Iterable[Vehicle | Mapping[str, Any]]) -> list[Vehicle]:
        """Validate full vehicle records and replace the store contents.

        Raises :class:`FleetValidationError` for invalid records or duplicate
        ids; the store keeps its previous contents in that case.
        """
        items = [record.model_dump() if isinstance(record, Vehicle) else record for record in records]
        try:
            vehicles = _VEHICLE_LIST.validate_python(items)
        except ValidationError as exc:
            raise FleetValidationError(f"Invalid vehicle records in bulk load: {exc}") from exc

        self._store.load_all(vehicles)
        # Heartbeats of vehicles that left the fleet are forgotten.
        self._last_seen = {vid: seen for vid, seen in self._last_seen.items() if vid in self._store}
        self._reported_offline &= set(self._last_seen)
        _logger.info("Loaded %d vehicles", len(vehicles))
        return self._store.list_vehicles()

    def ingest(self, raw_payload: Any, *, source: UpdateSource = UpdateSource.PUSH) -> IngestResult:
        """Decode *raw_payload* and merge it into the store.

        Either the merge fully succeeds or the store is left unchanged and
        the failure is returned in :attr:`IngestResult.error`.
        """
        try:
            event = build_update_event(raw_payload, source=source)
        except UpdateDecodeError as exc:
            _logger.warning("Dropped %s update: %s", source, exc)
            _logger.debug("Dropped payload: %s", redact_for_log(raw_payload))
            return IngestResult(error=exc)

        return self.apply(event)

    def apply(self, event: UpdateEvent) -> IngestResult:
        """Merge an already-normalized event into the store."""
        try:
            vehicle = self._store.apply_update(event)
        except (VehicleNotFoundError, FleetValidationError) as exc:
            _logger.warning("Dropped %s update for %s: %s", event.source, event.vehicle_id, exc)
            _logger.debug("Dropped patch: %s", redact_for_log(event.data))
            return IngestResult(error=exc, event=event)

        _logger.debug("Applied %s update for %s: %s", event.source, event.vehicle_id, redact_for_log(event.data))
        self._last_seen[event.vehicle_id] = event.observed_at
        if event.vehicle_id in self._reported_offline:
            self._reported_offline.discard(event.vehicle_id)
            _logger.info("Vehicle %s is sending updates again", event.vehicle_id)
        self._notify(vehicle)
        return IngestResult(vehicle=vehicle, event=event)

    def remove(self, vehicle_id: str) -> IngestResult:
        """Drop a vehicle from the store (e.g. after it was deleted upstream)."""
        try:
            vehicle = self._store.remove(vehicle_id)
        except VehicleNotFoundError as exc:
            _logger.warning("Cannot remove %s: %s", vehicle_id, exc)
            return IngestResult(error=exc)
        self._last_seen.pop(vehicle_id, None)
        self._reported_offline.discard(vehicle_id)
        _logger.info("Removed vehicle %s", vehicle_id)
        return IngestResult(vehicle=vehicle)

    def check_heartbeats(
        self,
        *,
        now: datetime | None = None,
        timeout: float = HEARTBEAT_TIMEOUT,
    ) -> list[str]:
        """Report vehicles with no applied update for more than *timeout* seconds.

        Returns every currently stale id. ``on_connection_lost`` fires once
        per silence: a vehicle is reported again only after it has sent an
        update and gone quiet once more.
        """
        now = now or datetime.now(UTC)
        stale = stale_vehicles(self._last_seen, now=now, timeout=timeout)
        for vehicle_id in stale:
            if vehicle_id in self._reported_offline:
                continue
            self._reported_offline.add(vehicle_id)
            silence = (now - self._last_seen[vehicle_id]).total_seconds()
            _logger.warning("Vehicle %s may be offline, last update %.0fs ago", vehicle_id, silence)
            if self._on_connection_lost is not None:
                try:
                    self._on_connection_lost(vehicle_id)
                except Exception:
                    _logger.debug("on_connection_lost callback failed", exc_info=True)
        return stale

    def _notify(self, vehicle: Vehicle) -> None:
        if self._on_update is None:
            return
        try:
            self._on_update(vehicle)
        except Exception:
            _logger.debug("on_update callback failed", exc_info=True)
