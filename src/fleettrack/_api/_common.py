"""Shared helpers for fleet API endpoint modules.

It is internal to fleettrack and may change at any time.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypeVar
from urllib.parse import quote

from pydantic import BaseModel, ValidationError

from fleettrack.exceptions import FleetValidationError

TModel = TypeVar("TModel", bound=BaseModel)

# Keys list endpoints may wrap their array under.
_LIST_WRAPPER_KEYS: tuple[str, ...] = ("data", "vehicles", "devices", "locations", "users", "items")


def vehicle_path(vehicle_id: str, suffix: str = "") -> str:
    """Build ``/api/vehicles/{id}{suffix}`` with the id safely quoted."""
    return f"/api/vehicles/{quote(vehicle_id, safe='')}{suffix}"


def unwrap_list(decoded: Any) -> list[Any]:
    """Return the item list from a bare array or a ``{"data": [...]}``-style wrapper."""
    if isinstance(decoded, list):
        return decoded
    if isinstance(decoded, Mapping):
        for key in _LIST_WRAPPER_KEYS:
            candidate = decoded.get(key)
            if isinstance(candidate, list):
                return candidate
    return []


def unwrap_object(decoded: Any) -> dict[str, Any]:
    """Return the record from a bare object or a ``{"data": {...}}`` wrapper."""
    if not isinstance(decoded, Mapping):
        return {}
    nested = decoded.get("data")
    if isinstance(nested, Mapping):
        return dict(nested)
    return dict(decoded)


def parse_items(model: type[TModel], items: list[Any], *, endpoint: str) -> list[TModel]:
    try:
        return [model.model_validate(item) for item in items]
    except ValidationError as exc:
        raise FleetValidationError(f"{endpoint} returned invalid {model.__name__} records: {exc}") from exc


def parse_item(model: type[TModel], item: Any, *, endpoint: str) -> TModel:
    try:
        return model.model_validate(item)
    except ValidationError as exc:
        raise FleetValidationError(f"{endpoint} returned an invalid {model.__name__}: {exc}") from exc
