"""Normalization helpers.

Centralizes defensive parsing and placeholder handling.
"""

from __future__ import annotations

import math
from typing import Any

# Placeholder strings producers send for "no reading".
SENTINELS = frozenset({"", "--", "NaN", "nan", "null"})


def is_sentinel(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str) and value.strip() in SENTINELS:
        return True
    return isinstance(value, float) and math.isnan(value)


def normalize_timestamp_seconds(value: Any) -> float | None:
    """Normalize payload timestamps to epoch seconds.

    - Empty/missing -> None
    - <= 0 -> None
    - Milliseconds (> 1e11) -> seconds
    """

    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        ts = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(ts) or ts <= 0:
        return None
    if ts > 1e11:
        ts /= 1000.0
    return ts


def extract_payload_timestamp(data: dict[str, Any]) -> float | None:
    """Best-effort extraction of the producer timestamp from an update payload.

    Device telemetry uses ``timestamp``; other producers send ``time`` or
    ``updatedAt``.
    """

    return normalize_timestamp_seconds(data.get("timestamp") or data.get("time") or data.get("updatedAt"))
