"""Bundled demo fleet.

Records use the fleet REST API key names, so they go through the same
validation path as a real bulk load::

    ingest.load(DEMO_VEHICLES)
"""

from __future__ import annotations

from typing import Any

DEMO_VEHICLES: tuple[dict[str, Any], ...] = (
    {
        "id": "VH-001",
        "type": "Truck",
        "status": "active",
        "location": {"lat": 37.7749, "lng": -122.4194},
        "speed": 65,
        "fuel": 78,
        "lastUpdate": "2 min ago",
    },
    {
        "id": "VH-002",
        "type": "Van",
        "status": "idle",
        "location": {"lat": 37.7833, "lng": -122.4167},
        "speed": 0,
        "fuel": 45,
        "lastUpdate": "5 min ago",
    },
    {
        "id": "VH-003",
        "type": "Car",
        "status": "alert",
        "location": {"lat": 37.7694, "lng": -122.4862},
        "speed": 0,
        "fuel": 12,
        "lastUpdate": "1 min ago",
    },
    {
        "id": "VH-004",
        "type": "Truck",
        "status": "active",
        "location": {"lat": 37.8044, "lng": -122.2711},
        "speed": 72,
        "fuel": 65,
        "lastUpdate": "3 min ago",
    },
    {
        "id": "VH-005",
        "type": "Van",
        "status": "active",
        "location": {"lat": 37.7575, "lng": -122.4376},
        "speed": 45,
        "fuel": 89,
        "lastUpdate": "just now",
    },
    {
        "id": "VH-006",
        "type": "Car",
        "status": "idle",
        "location": {"lat": 37.7749, "lng": -122.4194},
        "speed": 0,
        "fuel": 32,
        "lastUpdate": "10 min ago",
    },
    {
        "id": "VH-007",
        "type": "Truck",
        "status": "alert",
        "location": {"lat": 37.7833, "lng": -122.4167},
        "speed": 15,
        "fuel": 8,
        "lastUpdate": "4 min ago",
    },
)


def demo_vehicle_records() -> list[dict[str, Any]]:
    """Fresh copies of the demo records (safe to mutate)."""
    return [{**record, "location": dict(record["location"])} for record in DEMO_VEHICLES]
