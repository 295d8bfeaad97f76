"""Ingestion layer.

This package contains the adapters that decode inbound vehicle data (bulk
REST loads, MQTT push updates) and hand normalized events to the fleet
store.
"""

__all__: list[str] = []
