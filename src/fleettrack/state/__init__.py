"""State/store layer.

This package is the single source of truth for how bulk loads, REST
refreshes, and live MQTT updates are merged into the per-session fleet
state.
"""
