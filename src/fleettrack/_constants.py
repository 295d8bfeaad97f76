"""Internal constants shared across the library."""

BASE_URL = "http://localhost:3000"
USER_AGENT = "fleettrack/1"

#: Label written to ``Vehicle.last_update_label`` whenever an update is merged.
JUST_UPDATED_LABEL = "just now"

DEFAULT_MQTT_TOPIC = "fleettrack/vehicles/+/updates"

# ------------------------------------------------------------------
# Chart buckets (label, inclusive upper bound)
# ------------------------------------------------------------------

FUEL_BUCKETS: tuple[tuple[str, float], ...] = (
    ("0-25%", 25.0),
    ("26-50%", 50.0),
    ("51-75%", 75.0),
    ("76-100%", 100.0),
)

SPEED_STOPPED_LABEL = "0 km/h"
SPEED_BUCKETS: tuple[tuple[str, float], ...] = (
    ("1-30 km/h", 30.0),
    ("31-60 km/h", 60.0),
    ("61-90 km/h", 90.0),
    ("91+ km/h", float("inf")),
)

# ------------------------------------------------------------------
# Heartbeats
# ------------------------------------------------------------------

#: Seconds without an applied update before a vehicle is reported offline.
HEARTBEAT_TIMEOUT = 120.0
#: Seconds between heartbeat checks while live updates run.
HEARTBEAT_INTERVAL = 30.0
